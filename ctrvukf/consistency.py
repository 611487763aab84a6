"""Normalized-innovation-squared (NIS) consistency monitoring.

Under correct noise tuning the NIS of each update follows a chi-square
distribution with as many degrees of freedom as the measurement has
components.  :class:`NisMonitor` collects the scores per sensor and reports
how often they exceed the chosen chi-square quantile.

Example
-------
>>> monitor = NisMonitor(confidence=0.95)
>>> monitor.record(SensorType.LIDAR, 1.2)
>>> monitor.fraction_above(SensorType.LIDAR)
0.0
"""

from __future__ import annotations

from typing import Dict, List

import numpy as np
from scipy.stats import chi2

from .exceptions import UkfParameterError
from .measurement import LidarMeasurement, RadarMeasurement, SensorType

_DOF = {
    SensorType.LIDAR: LidarMeasurement.dim,
    SensorType.RADAR: RadarMeasurement.dim,
}


def nis_threshold(dof: int, confidence: float = 0.95) -> float:
    """Chi-square quantile a consistent NIS stays below with *confidence*.

    Examples
    --------
    >>> round(nis_threshold(2), 3)
    5.991
    >>> round(nis_threshold(3), 3)
    7.815
    """
    if dof <= 0:
        raise UkfParameterError(f"dof must be positive, got {dof}")
    if not 0.0 < confidence < 1.0:
        raise UkfParameterError(f"confidence must lie in (0, 1), got {confidence}")
    return float(chi2.ppf(confidence, dof))


class NisMonitor:
    """Collects NIS scores per sensor and checks them against chi-square.

    Parameters
    ----------
    confidence : float
        Quantile used for the per-sensor thresholds (default 0.95).
    """

    def __init__(self, confidence: float = 0.95) -> None:
        self._confidence = confidence
        self._thresholds = {
            sensor: nis_threshold(dof, confidence) for sensor, dof in _DOF.items()
        }
        self._scores: Dict[SensorType, List[float]] = {sensor: [] for sensor in _DOF}

    @property
    def confidence(self) -> float:
        return self._confidence

    def threshold(self, sensor_type: SensorType) -> float:
        """Chi-square threshold for *sensor_type*."""
        return self._thresholds[SensorType(sensor_type)]

    def record(self, sensor_type: SensorType, nis: float) -> None:
        """Store one NIS score."""
        self._scores[SensorType(sensor_type)].append(float(nis))

    def scores(self, sensor_type: SensorType) -> np.ndarray:
        return np.array(self._scores[SensorType(sensor_type)])

    def count(self, sensor_type: SensorType) -> int:
        return len(self._scores[SensorType(sensor_type)])

    def fraction_above(self, sensor_type: SensorType) -> float:
        """Share of recorded scores above the threshold; 0.0 when empty."""
        scores = self.scores(sensor_type)
        if scores.size == 0:
            return 0.0
        return float(np.mean(scores > self.threshold(sensor_type)))

    def is_consistent(self, sensor_type: SensorType, tolerance: float = 0.1) -> bool:
        """True when exceedances stay within ``1 - confidence + tolerance``.

        A filter whose noise is tuned too low exceeds the threshold far more
        often than ``1 - confidence``; one tuned too high almost never does,
        which this check does not flag.
        """
        return self.fraction_above(sensor_type) <= (1.0 - self._confidence) + tolerance

    def reset(self) -> None:
        for scores in self._scores.values():
            scores.clear()

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{sensor.name.lower()}={len(scores)}"
            for sensor, scores in self._scores.items()
        )
        return f"NisMonitor(confidence={self._confidence}, {counts})"
