"""CTRV process model and predicted-moment recombination.

State layout ``[px, py, v, yaw, yaw_rate]``; augmented columns append
``[nu_a, nu_yawdd]``.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from ._constants import AUG_DIM, STATE_DIM, YAW_INDEX, YAW_RATE_EPS
from .exceptions import UkfParameterError
from .utils import normalize_angle


def ctrv_transition(aug_sigma: np.ndarray, delta_t: float) -> np.ndarray:
    """Advance augmented sigma points through the CTRV model.

    Parameters
    ----------
    aug_sigma : array_like
        A single augmented state, shape ``(7,)``, or one per column,
        shape ``(7, k)``.
    delta_t : float
        Elapsed time in seconds.

    Returns
    -------
    numpy.ndarray
        Propagated states, shape ``(5,)`` or ``(5, k)`` to match the input.

    Notes
    -----
    Where ``|yaw_rate| <= 1e-3`` the position update falls back to
    straight-line motion to avoid dividing by the yaw rate.  The noise
    terms are added after the deterministic part in both cases.

    Examples
    --------
    >>> ctrv_transition(np.array([0.0, 0.0, 2.0, 0.0, 0.0, 0.0, 0.0]), 0.5)
    array([1., 0., 2., 0., 0.])
    """
    aug = np.asarray(aug_sigma, dtype=np.float64)
    single = aug.ndim == 1
    if single:
        aug = aug.reshape(-1, 1)
    if aug.shape[0] != AUG_DIM:
        raise UkfParameterError(
            f"augmented sigma points must have {AUG_DIM} rows, got {aug.shape[0]}"
        )

    px, py, v, yaw, yawd, nu_a, nu_yawdd = aug
    dt = float(delta_t)
    dt2 = dt * dt

    px_p = np.empty_like(px)
    py_p = np.empty_like(py)

    turning = np.abs(yawd) > YAW_RATE_EPS
    straight = ~turning

    r = v[turning] / yawd[turning]
    yaw_t = yaw[turning]
    yaw_end = yaw_t + yawd[turning] * dt
    px_p[turning] = px[turning] + r * (np.sin(yaw_end) - np.sin(yaw_t))
    py_p[turning] = py[turning] + r * (np.cos(yaw_t) - np.cos(yaw_end))

    px_p[straight] = px[straight] + v[straight] * dt * np.cos(yaw[straight])
    py_p[straight] = py[straight] + v[straight] * dt * np.sin(yaw[straight])

    out = np.empty((STATE_DIM, aug.shape[1]))
    out[0] = px_p + 0.5 * dt2 * np.cos(yaw) * nu_a
    out[1] = py_p + 0.5 * dt2 * np.sin(yaw) * nu_a
    out[2] = v + dt * nu_a
    out[3] = yaw + yawd * dt + 0.5 * dt2 * nu_yawdd
    out[4] = yawd + dt * nu_yawdd
    return out[:, 0] if single else out


def predict_moments(
    sigma_pred: np.ndarray,
    weights: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """Recombine propagated sigma points into a mean and covariance.

    The mean is the weighted sum of the columns.  The covariance is the
    weighted sum of outer products of the column deviations, with the yaw
    deviation wrapped into ``(-pi, pi]`` first.
    """
    x = sigma_pred @ weights
    diff = sigma_pred - x[:, None]
    diff[YAW_INDEX] = normalize_angle(diff[YAW_INDEX])
    P = (diff * weights) @ diff.T
    return x, P
