"""Unscented measurement update shared by the lidar and radar sensors.

A sensor is described by a :class:`MeasurementModel`: its dimension, the
projection from state space into measurement space, its noise covariance
and which measurement component (if any) is an angle.  The update itself
is :func:`unscented_update`, written once for both sensors.
"""

from __future__ import annotations

from typing import Callable, NamedTuple, Optional

import numpy as np

from ._constants import (
    LIDAR_DIM,
    MAX_INNOVATION_CONDITION,
    MIN_RANGE,
    RADAR_DIM,
    RADAR_PHI_INDEX,
    YAW_INDEX,
)
from .exceptions import DegenerateRangeError, InnovationCovarianceError
from .utils import normalize_angle

# ---------------------------------------------------------------------------
# Measurement models
# ---------------------------------------------------------------------------


class MeasurementModel(NamedTuple):
    """Everything the update needs to know about one sensor."""

    name: str
    dim: int
    project: Callable[[np.ndarray], np.ndarray]
    noise_cov: np.ndarray
    angle_index: Optional[int] = None


def project_lidar(sigma_pred: np.ndarray) -> np.ndarray:
    """Lidar sees the position rows ``[px, py]`` directly."""
    return sigma_pred[:LIDAR_DIM].copy()


def project_radar(sigma_pred: np.ndarray) -> np.ndarray:
    """Project states to ``[rho, phi, rho_dot]``.

    Raises
    ------
    DegenerateRangeError
        If any column lies within ``MIN_RANGE`` of the sensor, where the
        bearing is undefined and ``rho_dot`` divides by zero.
    """
    px, py, v, yaw = sigma_pred[:4]
    rho = np.hypot(px, py)
    if np.any(rho < MIN_RANGE):
        raise DegenerateRangeError(
            f"radar projection at range {float(rho.min()):.3g} m "
            f"(minimum {MIN_RANGE} m)"
        )
    vx = np.cos(yaw) * v
    vy = np.sin(yaw) * v

    z = np.empty((RADAR_DIM, sigma_pred.shape[1]))
    z[0] = rho
    z[1] = np.arctan2(py, px)
    z[2] = (px * vx + py * vy) / rho
    return z


def lidar_model(std_laspx: float, std_laspy: float) -> MeasurementModel:
    return MeasurementModel(
        name="lidar",
        dim=LIDAR_DIM,
        project=project_lidar,
        noise_cov=np.diag([std_laspx ** 2, std_laspy ** 2]),
    )


def radar_model(std_radr: float, std_radphi: float, std_radrd: float) -> MeasurementModel:
    return MeasurementModel(
        name="radar",
        dim=RADAR_DIM,
        project=project_radar,
        noise_cov=np.diag([std_radr ** 2, std_radphi ** 2, std_radrd ** 2]),
        angle_index=RADAR_PHI_INDEX,
    )


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


class UpdateResult(NamedTuple):
    """Outcome of one measurement update.

    ``x`` and ``P`` are the corrected state; the rest are the intermediate
    quantities, kept for diagnostics.
    """

    x: np.ndarray
    P: np.ndarray
    nis: float
    z_pred: np.ndarray
    S: np.ndarray
    K: np.ndarray
    innovation: np.ndarray


def _invert_innovation(S: np.ndarray) -> np.ndarray:
    if not np.all(np.isfinite(S)):
        raise InnovationCovarianceError("innovation covariance contains NaN or Inf")
    cond = np.linalg.cond(S)
    if not np.isfinite(cond) or cond > MAX_INNOVATION_CONDITION:
        raise InnovationCovarianceError(
            f"innovation covariance is ill-conditioned (cond={cond:.3g})"
        )
    try:
        return np.linalg.inv(S)
    except np.linalg.LinAlgError as exc:
        raise InnovationCovarianceError(
            f"innovation covariance is singular: {exc}"
        ) from exc


def unscented_update(
    x: np.ndarray,
    P: np.ndarray,
    sigma_pred: np.ndarray,
    weights: np.ndarray,
    z: np.ndarray,
    model: MeasurementModel,
    symmetrize: bool = False,
) -> UpdateResult:
    """Correct a predicted state with one measurement.

    Parameters
    ----------
    x, P : numpy.ndarray
        Predicted state mean ``(5,)`` and covariance ``(5, 5)``.
    sigma_pred : numpy.ndarray
        Propagated sigma points ``(5, 15)`` from the same cycle.
    weights : numpy.ndarray
        Sigma-point weights ``(15,)``.
    z : numpy.ndarray
        Observed measurement, length ``model.dim``.
    model : MeasurementModel
        The sensor's projection and noise.
    symmetrize : bool
        Replace the corrected covariance by ``(P + P.T) / 2``.  Off by
        default; the plain ``P - K S K^T`` form is kept otherwise.

    Returns
    -------
    UpdateResult
        Corrected state and the diagnostic quantities, including the
        normalized innovation squared ``y^T S^-1 y``.

    Raises
    ------
    InnovationCovarianceError
        If ``S`` is non-finite, singular or ill-conditioned.
    DegenerateRangeError
        Propagated from the radar projection.
    """
    z_sig = model.project(sigma_pred)
    z_pred = z_sig @ weights

    z_diff = z_sig - z_pred[:, None]
    if model.angle_index is not None:
        z_diff[model.angle_index] = normalize_angle(z_diff[model.angle_index])

    S = (z_diff * weights) @ z_diff.T + model.noise_cov

    x_diff = sigma_pred - x[:, None]
    x_diff[YAW_INDEX] = normalize_angle(x_diff[YAW_INDEX])

    Tc = (x_diff * weights) @ z_diff.T

    S_inv = _invert_innovation(S)
    K = Tc @ S_inv

    y = np.asarray(z, dtype=np.float64) - z_pred
    if model.angle_index is not None:
        y[model.angle_index] = normalize_angle(y[model.angle_index])

    nis = float(y @ S_inv @ y)

    x_new = x + K @ y
    P_new = P - K @ S @ K.T
    if symmetrize:
        P_new = 0.5 * (P_new + P_new.T)

    return UpdateResult(x_new, P_new, nis, z_pred, S, K, y)
