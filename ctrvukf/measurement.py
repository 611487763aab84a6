"""Timestamped sensor readings consumed by the filter.

A reading is either a :class:`LidarMeasurement` (Cartesian position) or a
:class:`RadarMeasurement` (range, bearing, range rate).  Each class fixes its
own dimension, so a measurement can never carry the wrong number of values
for its sensor.

Example
-------
>>> m = LidarMeasurement(timestamp=1477010443000000, px=0.31, py=0.58)
>>> m.sensor_type
<SensorType.LIDAR: 'L'>
>>> m.values
array([0.31, 0.58])
"""

from __future__ import annotations

import abc
import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Sequence, Union

import numpy as np

from ._constants import LIDAR_DIM, RADAR_DIM
from .exceptions import UkfParameterError


class SensorType(Enum):
    """Sensor tag; values match the usual ``L`` / ``R`` record prefixes."""

    LIDAR = "L"
    RADAR = "R"


@dataclass(frozen=True)
class _Measurement(abc.ABC):
    timestamp: int

    sensor_type: ClassVar[SensorType]
    dim: ClassVar[int]

    def __post_init__(self) -> None:
        if isinstance(self.timestamp, bool) or not isinstance(
            self.timestamp, (int, np.integer)
        ):
            raise UkfParameterError(
                f"timestamp must be integer microseconds, got {self.timestamp!r}"
            )
        if not all(math.isfinite(v) for v in self._fields()):
            raise UkfParameterError(
                f"{type(self).__name__} values must be finite, got {self._fields()}"
            )

    @abc.abstractmethod
    def _fields(self) -> tuple:
        """Measurement components in order."""

    @property
    def values(self) -> np.ndarray:
        """Ordered measurement vector as a float64 array."""
        return np.array(self._fields(), dtype=np.float64)


@dataclass(frozen=True)
class LidarMeasurement(_Measurement):
    """Cartesian position reading ``[px, py]`` in metres."""

    px: float
    py: float

    sensor_type: ClassVar[SensorType] = SensorType.LIDAR
    dim: ClassVar[int] = LIDAR_DIM

    def _fields(self) -> tuple:
        return (self.px, self.py)


@dataclass(frozen=True)
class RadarMeasurement(_Measurement):
    """Polar reading: range ``rho`` (m), bearing ``phi`` (rad), ``rho_dot`` (m/s)."""

    rho: float
    phi: float
    rho_dot: float

    sensor_type: ClassVar[SensorType] = SensorType.RADAR
    dim: ClassVar[int] = RADAR_DIM

    def _fields(self) -> tuple:
        return (self.rho, self.phi, self.rho_dot)

    def to_cartesian(self) -> np.ndarray:
        """Position implied by the reading, ``[rho cos(phi), rho sin(phi)]``."""
        return np.array(
            [self.rho * math.cos(self.phi), self.rho * math.sin(self.phi)]
        )


Measurement = Union[LidarMeasurement, RadarMeasurement]

_CLASSES = {
    SensorType.LIDAR: LidarMeasurement,
    SensorType.RADAR: RadarMeasurement,
}


def measurement_from_record(
    sensor_type: Union[SensorType, str],
    timestamp: int,
    values: Sequence[float],
) -> Measurement:
    """Build a typed measurement from a tag and a flat numeric buffer.

    Parameters
    ----------
    sensor_type : SensorType or str
        The sensor tag, either the enum member or its value (``"L"``/``"R"``).
    timestamp : int
        Measurement time in microseconds.
    values : sequence of float
        Two values for lidar, three for radar, in measurement order.

    Returns
    -------
    LidarMeasurement or RadarMeasurement

    Raises
    ------
    UkfParameterError
        If the tag is unknown or the number of values does not match it.

    Examples
    --------
    >>> measurement_from_record("R", 1477010443050000, [8.46, 0.0244, -3.04])
    RadarMeasurement(timestamp=1477010443050000, rho=8.46, phi=0.0244, rho_dot=-3.04)
    """
    try:
        sensor_type = SensorType(sensor_type)
    except ValueError:
        raise UkfParameterError(f"Unknown sensor type {sensor_type!r}") from None

    cls = _CLASSES[sensor_type]
    values = [float(v) for v in np.asarray(values, dtype=np.float64).ravel()]
    if len(values) != cls.dim:
        raise UkfParameterError(
            f"{sensor_type.name} measurement needs {cls.dim} values, got {len(values)}"
        )
    return cls(timestamp, *values)
