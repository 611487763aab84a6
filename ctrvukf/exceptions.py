"""Exception hierarchy for the CTRV Unscented Kalman Filter.

Every failure is terminal for the step that raised it.  The filter commits
state only after a step succeeds, so the last committed estimate stays
valid and the caller may feed the next measurement normally.
"""


class UkfError(RuntimeError):
    """Base exception for UKF errors."""


class UkfParameterError(UkfError, ValueError):
    """Raised for invalid tuning values, shapes or measurement records."""


class UkfMathError(UkfError):
    """Raised when a filter step fails numerically."""


class SigmaPointError(UkfMathError):
    """Raised when the augmented covariance has no Cholesky factor.

    The augmented covariance must be positive definite; losing that
    property usually means the state covariance drifted after many
    subtractive updates.
    """


class InnovationCovarianceError(UkfMathError):
    """Raised when the innovation covariance is singular or ill-conditioned.

    This points at under-tuned measurement noise or a diverged filter,
    which is why it is kept apart from :class:`SigmaPointError`.
    """


class DegenerateRangeError(UkfMathError):
    """Raised when a radar projection hits (near) zero range."""
