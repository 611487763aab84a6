"""CTRV Unscented Kalman Filter for lidar/radar sensor fusion.

Quick start::

    from ctrvukf import LidarMeasurement, RadarMeasurement, UnscentedKalmanFilter

    ukf = UnscentedKalmanFilter(std_a=0.5, std_yawdd=0.5)
    ukf.process_measurement(LidarMeasurement(0, px=5.0, py=3.0))
    ukf.process_measurement(RadarMeasurement(50000, rho=5.9, phi=0.54, rho_dot=0.2))
    print(ukf.x, ukf.P, ukf.nis)
"""

from .consistency import NisMonitor, nis_threshold
from .core import UnscentedKalmanFilter
from .exceptions import (
    DegenerateRangeError,
    InnovationCovarianceError,
    SigmaPointError,
    UkfError,
    UkfMathError,
    UkfParameterError,
)
from .measurement import (
    LidarMeasurement,
    Measurement,
    RadarMeasurement,
    SensorType,
    measurement_from_record,
)
from .version import __version__, __version_info__

__all__ = [
    "UnscentedKalmanFilter",
    "LidarMeasurement",
    "RadarMeasurement",
    "Measurement",
    "SensorType",
    "measurement_from_record",
    "NisMonitor",
    "nis_threshold",
    "UkfError",
    "UkfParameterError",
    "UkfMathError",
    "SigmaPointError",
    "InnovationCovarianceError",
    "DegenerateRangeError",
    "__version__",
    "__version_info__",
]
