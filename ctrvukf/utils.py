"""Array validation and angle helpers for the CTRV UKF.

Shapes are checked at the public seams of the package so the algorithm
modules can assume well-formed float64 arrays.
"""

from __future__ import annotations

import math

import numpy as np

from .exceptions import UkfParameterError

# ---------------------------------------------------------------------------
# Angles
# ---------------------------------------------------------------------------


def normalize_angle(angle):
    """Wrap an angle (or array of angles) into ``(-pi, pi]``.

    Uses ``atan2(sin(a), cos(a))`` so the result is equivalent to the input
    modulo ``2 * pi``.  The one value ``atan2`` can return outside the
    half-open interval, ``-pi``, is mapped to ``pi``.

    Parameters
    ----------
    angle : float or array_like
        Angle(s) in radians, any range.

    Returns
    -------
    float or numpy.ndarray
        A float for scalar input, otherwise an array of the input's shape.

    Examples
    --------
    >>> normalize_angle(3 * math.pi / 2)
    -1.5707963267948966
    >>> normalize_angle(-math.pi)
    3.141592653589793
    """
    wrapped = np.arctan2(np.sin(angle), np.cos(angle))
    wrapped = np.where(wrapped <= -math.pi, wrapped + 2.0 * math.pi, wrapped)
    return wrapped if wrapped.ndim else float(wrapped)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def validate_square(arr: np.ndarray, size: int, name: str = "matrix") -> np.ndarray:
    """Ensure *arr* is a finite ``size x size`` float64 array.

    Parameters
    ----------
    arr : array_like
        Input to validate.
    size : int
        Expected number of rows and columns.
    name : str
        Human-readable name for error messages.

    Returns
    -------
    numpy.ndarray
        Validated array (a new object if dtype conversion occurred).

    Raises
    ------
    UkfParameterError
        If the array is not 2-D, has the wrong shape or holds NaN/Inf.
    """
    arr = np.asarray(arr, dtype=np.float64)
    if arr.shape != (size, size):
        raise UkfParameterError(
            f"{name} must have shape ({size}, {size}), got {arr.shape}"
        )
    if not np.all(np.isfinite(arr)):
        raise UkfParameterError(f"{name} contains NaN or Inf")
    return arr


def validate_vector(arr: np.ndarray, length: int, name: str = "vector") -> np.ndarray:
    """Ensure *arr* is a finite 1-D float64 array of the given length.

    Parameters
    ----------
    arr : array_like
        Input to validate; 2-D column or row vectors are flattened.
    length : int
        Expected number of elements.
    name : str
        Human-readable name for error messages.

    Returns
    -------
    numpy.ndarray
        Validated 1-D array.

    Raises
    ------
    UkfParameterError
        If the length does not match or the data holds NaN/Inf.
    """
    arr = np.asarray(arr, dtype=np.float64).ravel()
    if arr.shape[0] != length:
        raise UkfParameterError(
            f"{name} must have {length} elements, got {arr.shape[0]}"
        )
    if not np.all(np.isfinite(arr)):
        raise UkfParameterError(f"{name} contains NaN or Inf")
    return arr


def validate_std(value: float, name: str) -> float:
    """Ensure a noise standard deviation is a positive finite number."""
    value = float(value)
    if not math.isfinite(value) or value <= 0.0:
        raise UkfParameterError(f"{name} must be positive and finite, got {value}")
    return value
