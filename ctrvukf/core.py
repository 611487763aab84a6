"""Unscented Kalman Filter fusing lidar and radar over the CTRV model.

Example
-------
>>> from ctrvukf import UnscentedKalmanFilter, LidarMeasurement, RadarMeasurement
>>>
>>> ukf = UnscentedKalmanFilter(std_a=0.5, std_yawdd=0.5)
>>> ukf.process_measurement(LidarMeasurement(0, px=5.0, py=3.0))
>>> ukf.process_measurement(RadarMeasurement(50000, rho=5.9, phi=0.54, rho_dot=0.2))
>>> print(ukf.x, ukf.nis)
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ._constants import (
    AUG_DIM,
    DEFAULT_LAMBDA,
    STATE_DIM,
    STD_A,
    STD_LASPX,
    STD_LASPY,
    STD_RADPHI,
    STD_RADR,
    STD_RADRD,
    STD_YAWDD,
    US_PER_SECOND,
)
from .consistency import NisMonitor
from .exceptions import UkfError, UkfParameterError
from .measurement import LidarMeasurement, Measurement, RadarMeasurement, SensorType
from .process import ctrv_transition, predict_moments
from .sigma import generate_sigma_points, sigma_weights
from .update import MeasurementModel, lidar_model, radar_model, unscented_update
from .utils import validate_square, validate_std, validate_vector

logger = logging.getLogger(__name__)


class UnscentedKalmanFilter:
    """Single-object CTRV Unscented Kalman Filter.

    The state is ``[px, py, v, yaw, yaw_rate]``.  The filter starts
    uninitialized; the first measurement seeds the state and every later
    one runs a predict-then-update cycle.

    Parameters
    ----------
    std_a : float, optional
        Process noise std-dev of longitudinal acceleration in m/s^2
        (default ``0.5``).
    std_yawdd : float, optional
        Process noise std-dev of yaw acceleration in rad/s^2
        (default ``0.5``).
    use_lidar, use_radar : bool, optional
        When false, measurements from that sensor only advance the state
        through prediction (they still seed the state if they come first).
    lambda_ : float, optional
        Sigma-point spreading parameter (default ``3 - 7``).
    lidar_noise : sequence of float, optional
        ``(std_laspx, std_laspy)`` in metres.
    radar_noise : sequence of float, optional
        ``(std_radr, std_radphi, std_radrd)``.
    monitor : NisMonitor, optional
        Receives the NIS score of every successful update.
    symmetrize_covariance : bool, optional
        Symmetrize the covariance after each update (default ``False``).

    Raises
    ------
    UkfParameterError
        If a noise std-dev is not positive and finite, or
        ``lambda_ + 7 <= 0``.

    Examples
    --------
    >>> ukf = UnscentedKalmanFilter(std_a=1.0, use_radar=False)
    >>> ukf.is_initialized
    False
    """

    def __init__(
        self,
        std_a: float = STD_A,
        std_yawdd: float = STD_YAWDD,
        use_lidar: bool = True,
        use_radar: bool = True,
        lambda_: Optional[float] = None,
        lidar_noise: Sequence[float] = (STD_LASPX, STD_LASPY),
        radar_noise: Sequence[float] = (STD_RADR, STD_RADPHI, STD_RADRD),
        monitor: Optional[NisMonitor] = None,
        symmetrize_covariance: bool = False,
    ) -> None:
        self._std_a = validate_std(std_a, "std_a")
        self._std_yawdd = validate_std(std_yawdd, "std_yawdd")

        if len(lidar_noise) != LidarMeasurement.dim:
            raise UkfParameterError(
                f"lidar_noise needs {LidarMeasurement.dim} values, got {len(lidar_noise)}"
            )
        if len(radar_noise) != RadarMeasurement.dim:
            raise UkfParameterError(
                f"radar_noise needs {RadarMeasurement.dim} values, got {len(radar_noise)}"
            )
        self._std_laspx, self._std_laspy = (
            validate_std(s, name) for s, name in zip(lidar_noise, ("std_laspx", "std_laspy"))
        )
        self._std_radr, self._std_radphi, self._std_radrd = (
            validate_std(s, name)
            for s, name in zip(radar_noise, ("std_radr", "std_radphi", "std_radrd"))
        )

        self._lambda = DEFAULT_LAMBDA if lambda_ is None else float(lambda_)
        self._weights = sigma_weights(AUG_DIM, self._lambda)

        self._models = {
            SensorType.LIDAR: lidar_model(self._std_laspx, self._std_laspy),
            SensorType.RADAR: radar_model(
                self._std_radr, self._std_radphi, self._std_radrd
            ),
        }
        self.use_lidar = bool(use_lidar)
        self.use_radar = bool(use_radar)
        self.monitor = monitor
        self.symmetrize_covariance = bool(symmetrize_covariance)

        self.reset()

    # -- Properties ---------------------------------------------------------

    @property
    def x(self) -> np.ndarray:
        """Current state mean ``[px, py, v, yaw, yaw_rate]`` (a copy)."""
        return self._x.copy()

    @x.setter
    def x(self, value: np.ndarray) -> None:
        self._x = validate_vector(value, STATE_DIM, "state")
        self._predicted = False

    @property
    def P(self) -> np.ndarray:
        """Current state covariance, 5 x 5 (a copy)."""
        return self._P.copy()

    @P.setter
    def P(self, value: np.ndarray) -> None:
        self._P = validate_square(value, STATE_DIM, "P")
        self._predicted = False

    @property
    def nis(self) -> Optional[float]:
        """Normalized innovation squared of the latest update, if any."""
        return self._nis

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def time_us(self) -> Optional[int]:
        """Timestamp (microseconds) the state currently refers to."""
        return self._time_us

    @property
    def sigma_points(self) -> np.ndarray:
        """Propagated sigma points of the latest prediction, 5 x 15 (a copy)."""
        return self._sigma_pred.copy()

    @property
    def weights(self) -> np.ndarray:
        return self._weights.copy()

    @property
    def std_a(self) -> float:
        return self._std_a

    @property
    def std_yawdd(self) -> float:
        return self._std_yawdd

    # -- Methods ------------------------------------------------------------

    def process_measurement(self, measurement: Measurement) -> "UnscentedKalmanFilter":
        """Consume one measurement.

        The first measurement ever seen initializes the state and returns.
        Every later one predicts forward by the elapsed time and, if its
        sensor is enabled, corrects with it.

        Parameters
        ----------
        measurement : LidarMeasurement or RadarMeasurement

        Returns
        -------
        UnscentedKalmanFilter
            *self*, for method chaining.

        Raises
        ------
        SigmaPointError
            If prediction fails; state and timestamp are left unchanged.
        InnovationCovarianceError, DegenerateRangeError
            If the update fails; the predicted state is kept.
        """
        if not self._initialized:
            self._initialize(measurement)
            return self

        delta_t = (measurement.timestamp - self._time_us) / US_PER_SECOND
        if delta_t < 0:
            logger.warning(
                "Measurement at %d us precedes previous one at %d us; "
                "predicting backwards by %.6f s",
                measurement.timestamp, self._time_us, -delta_t,
            )

        self.predict(delta_t)
        self._time_us = int(measurement.timestamp)

        if self._sensor_enabled(measurement.sensor_type):
            self.update(measurement)
        else:
            logger.debug(
                "%s disabled, skipping update at %d us",
                measurement.sensor_type.name.lower(), measurement.timestamp,
            )
        return self

    def predict(self, delta_t: float) -> "UnscentedKalmanFilter":
        """Run the prediction step over *delta_t* seconds.

        Generates augmented sigma points, propagates them through the CTRV
        model and recombines them into the predicted mean and covariance.
        The propagated points are kept for the update of the same cycle.

        Returns
        -------
        UnscentedKalmanFilter
            *self*, for method chaining.

        Raises
        ------
        SigmaPointError
            If the augmented covariance has no Cholesky factor.

        Examples
        --------
        >>> ukf.predict(0.1)
        """
        aug_sigma = generate_sigma_points(
            self._x, self._P, self._std_a, self._std_yawdd, self._lambda
        )
        sigma_pred = ctrv_transition(aug_sigma, delta_t)
        x, P = predict_moments(sigma_pred, self._weights)

        self._sigma_pred = sigma_pred
        self._x = x
        self._P = P
        self._predicted = True
        return self

    def update(self, measurement: Measurement) -> "UnscentedKalmanFilter":
        """Correct the predicted state with *measurement*, whatever its sensor.

        Each prediction feeds at most one update.

        Raises
        ------
        UkfError
            If no :meth:`predict` ran since the last update, initialization,
            reset or state assignment.
        """
        if measurement.sensor_type is SensorType.LIDAR:
            return self.update_lidar(measurement)
        return self.update_radar(measurement)

    def update_lidar(self, measurement: LidarMeasurement) -> "UnscentedKalmanFilter":
        """Lidar update: 2-D position, no angular component."""
        return self._update(measurement, self._models[SensorType.LIDAR])

    def update_radar(self, measurement: RadarMeasurement) -> "UnscentedKalmanFilter":
        """Radar update: range, bearing (wrapped), range rate."""
        return self._update(measurement, self._models[SensorType.RADAR])

    def reset(self) -> "UnscentedKalmanFilter":
        """Return to the uninitialized state.

        Returns
        -------
        UnscentedKalmanFilter
            *self*, for method chaining.
        """
        self._x = np.zeros(STATE_DIM)
        self._P = np.eye(STATE_DIM)
        self._sigma_pred = np.zeros((STATE_DIM, self._weights.size))
        self._time_us: Optional[int] = None
        self._nis: Optional[float] = None
        self._initialized = False
        self._predicted = False
        return self

    def set_process_noise(self, std_a: float, std_yawdd: float) -> "UnscentedKalmanFilter":
        """Retune the process noise standard deviations.

        Returns
        -------
        UnscentedKalmanFilter
            *self*, for method chaining.
        """
        self._std_a = validate_std(std_a, "std_a")
        self._std_yawdd = validate_std(std_yawdd, "std_yawdd")
        return self

    # -- Internals ----------------------------------------------------------

    def _sensor_enabled(self, sensor_type: SensorType) -> bool:
        if sensor_type is SensorType.LIDAR:
            return self.use_lidar
        return self.use_radar

    def _initialize(self, measurement: Measurement) -> None:
        if measurement.sensor_type is SensorType.LIDAR:
            px, py = measurement.px, measurement.py
            var_x, var_y = self._std_laspx ** 2, self._std_laspy ** 2
        else:
            px, py = measurement.to_cartesian()
            var_x = var_y = self._std_radr ** 2

        self._x = np.array([px, py, 0.0, 0.0, 0.0])
        self._P = np.diag([var_x, var_y, 1.0, 1.0, 1.0])
        self._time_us = int(measurement.timestamp)
        self._initialized = True
        self._predicted = False
        logger.debug(
            "Initialized from %s at %d us: px=%.3f py=%.3f",
            measurement.sensor_type.name.lower(), self._time_us, px, py,
        )

    def _update(
        self, measurement: Measurement, model: MeasurementModel
    ) -> "UnscentedKalmanFilter":
        if measurement.sensor_type.name.lower() != model.name:
            raise UkfParameterError(
                f"{type(measurement).__name__} passed to the {model.name} update"
            )
        if not self._predicted:
            raise UkfError(
                f"{model.name} update needs a fresh prediction; call predict() "
                "after initializing, resetting or setting the state"
            )
        result = unscented_update(
            self._x,
            self._P,
            self._sigma_pred,
            self._weights,
            measurement.values,
            model,
            symmetrize=self.symmetrize_covariance,
        )
        self._x = result.x
        self._P = result.P
        self._nis = result.nis
        self._predicted = False
        logger.debug("NIS %s: %.4f", model.name, result.nis)

        if self.monitor is not None:
            self.monitor.record(measurement.sensor_type, result.nis)
        return self

    # -- Representation -----------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"UnscentedKalmanFilter(std_a={self._std_a}, std_yawdd={self._std_yawdd}, "
            f"use_lidar={self.use_lidar}, use_radar={self.use_radar}, "
            f"initialized={self._initialized})"
        )
