"""Sigma-point generation for the augmented CTRV state.

The augmented state appends the two zero-mean process-noise terms
(longitudinal and yaw acceleration) to the state so that noise is carried
through the nonlinear motion model with the state itself.
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from ._constants import AUG_DIM, DEFAULT_LAMBDA, SIGMA_COUNT, STATE_DIM
from .exceptions import SigmaPointError, UkfParameterError


def sigma_weights(n_aug: int = AUG_DIM, lambda_: float = DEFAULT_LAMBDA) -> np.ndarray:
    """Return the ``2 * n_aug + 1`` sigma-point weights.

    ``w[0] = lambda / (lambda + n_aug)`` and every other weight is
    ``0.5 / (lambda + n_aug)``, so the weights always sum to one.

    Raises
    ------
    UkfParameterError
        If ``n_aug`` is not positive or ``lambda + n_aug`` is not positive.

    Examples
    --------
    >>> w = sigma_weights()
    >>> w.shape
    (15,)
    >>> bool(np.isclose(w.sum(), 1.0))
    True
    """
    if n_aug <= 0:
        raise UkfParameterError(f"n_aug must be positive, got {n_aug}")
    spread = lambda_ + n_aug
    if spread <= 0:
        raise UkfParameterError(
            f"lambda + n_aug must be positive, got {lambda_} + {n_aug}"
        )
    weights = np.full(2 * n_aug + 1, 0.5 / spread)
    weights[0] = lambda_ / spread
    return weights


def augment(
    x: np.ndarray,
    P: np.ndarray,
    std_a: float,
    std_yawdd: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """Build the augmented mean and block-diagonal covariance."""
    x_aug = np.zeros(AUG_DIM)
    x_aug[:STATE_DIM] = x

    P_aug = np.zeros((AUG_DIM, AUG_DIM))
    P_aug[:STATE_DIM, :STATE_DIM] = P
    P_aug[STATE_DIM, STATE_DIM] = std_a * std_a
    P_aug[STATE_DIM + 1, STATE_DIM + 1] = std_yawdd * std_yawdd
    return x_aug, P_aug


def generate_sigma_points(
    x: np.ndarray,
    P: np.ndarray,
    std_a: float,
    std_yawdd: float,
    lambda_: float = DEFAULT_LAMBDA,
) -> np.ndarray:
    """Generate the augmented sigma-point matrix.

    Parameters
    ----------
    x : numpy.ndarray
        State mean, shape ``(5,)``.
    P : numpy.ndarray
        State covariance, shape ``(5, 5)``.
    std_a, std_yawdd : float
        Process noise standard deviations.
    lambda_ : float
        Spreading parameter.

    Returns
    -------
    numpy.ndarray
        Shape ``(7, 15)``.  Column 0 is the augmented mean, columns 1..7 are
        ``mean + sqrt(lambda + n_aug) * L[:, i]`` and columns 8..14 the
        corresponding minus branch, where ``L`` is the lower Cholesky factor
        of the augmented covariance.

    Raises
    ------
    SigmaPointError
        If the augmented covariance holds NaN/Inf or is not positive
        definite.
    """
    x_aug, P_aug = augment(x, P, std_a, std_yawdd)
    if not (np.all(np.isfinite(x_aug)) and np.all(np.isfinite(P_aug))):
        raise SigmaPointError("augmented state contains NaN or Inf")

    try:
        L = np.linalg.cholesky(P_aug)
    except np.linalg.LinAlgError as exc:
        raise SigmaPointError(
            f"augmented covariance is not positive definite: {exc}"
        ) from exc

    scaled = math.sqrt(lambda_ + AUG_DIM) * L
    sigma = np.empty((AUG_DIM, SIGMA_COUNT))
    sigma[:, 0] = x_aug
    sigma[:, 1:AUG_DIM + 1] = x_aug[:, None] + scaled
    sigma[:, AUG_DIM + 1:] = x_aug[:, None] - scaled
    return sigma
