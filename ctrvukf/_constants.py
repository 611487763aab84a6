"""Dimensions, noise defaults and numerical thresholds for the CTRV UKF.

Everything the filter needs as a fixed number lives here so the algorithm
modules never carry magic values.
"""

# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

#: State vector ``[px, py, v, yaw, yaw_rate]``.
STATE_DIM = 5

#: Augmented state: the state plus longitudinal and yaw acceleration noise.
AUG_DIM = 7

#: Number of sigma points for the augmented state.
SIGMA_COUNT = 2 * AUG_DIM + 1

#: Lidar measures ``[px, py]``.
LIDAR_DIM = 2

#: Radar measures ``[rho, phi, rho_dot]``.
RADAR_DIM = 3

# ---------------------------------------------------------------------------
# Angular components
# ---------------------------------------------------------------------------

#: Heading angle inside the state vector.
YAW_INDEX = 3

#: Bearing angle inside a radar measurement.
RADAR_PHI_INDEX = 1

# ---------------------------------------------------------------------------
# Sigma-point spreading
# ---------------------------------------------------------------------------

DEFAULT_LAMBDA = 3 - AUG_DIM

# ---------------------------------------------------------------------------
# Noise standard deviations
# ---------------------------------------------------------------------------

#: Process noise, longitudinal acceleration (m/s^2).  Tunable.
STD_A = 0.5

#: Process noise, yaw acceleration (rad/s^2).  Tunable.
STD_YAWDD = 0.5

# Sensor noise below is specified by the manufacturer.

#: Lidar position x (m).
STD_LASPX = 0.15

#: Lidar position y (m).
STD_LASPY = 0.15

#: Radar range (m).
STD_RADR = 0.3

#: Radar bearing (rad).
STD_RADPHI = 0.03

#: Radar range rate (m/s).
STD_RADRD = 0.3

# ---------------------------------------------------------------------------
# Numerical thresholds
# ---------------------------------------------------------------------------

#: Below this absolute yaw rate the CTRV model degenerates to straight-line
#: motion.
YAW_RATE_EPS = 1e-3

#: Smallest range (m) the radar projection accepts.
MIN_RANGE = 1e-4

#: Largest condition number accepted for the innovation covariance.
MAX_INNOVATION_CONDITION = 1e12

#: Timestamps are integer microseconds.
US_PER_SECOND = 1e6
