"""Tests for angle wrapping and validation helpers."""

import math

import numpy as np
import pytest

from ctrvukf.exceptions import UkfParameterError
from ctrvukf.utils import normalize_angle, validate_square, validate_std, validate_vector


class TestNormalizeAngle:
    def test_range(self):
        angles = np.linspace(-20.0, 20.0, 4001)
        wrapped = normalize_angle(angles)
        assert np.all(wrapped > -math.pi)
        assert np.all(wrapped <= math.pi)

    def test_equivalent_modulo_two_pi(self):
        rng = np.random.default_rng(7)
        angles = rng.uniform(-50.0, 50.0, size=1000)
        wrapped = normalize_angle(angles)
        np.testing.assert_allclose(np.sin(wrapped), np.sin(angles), atol=1e-9)
        np.testing.assert_allclose(np.cos(wrapped), np.cos(angles), atol=1e-9)
        turns = (angles - wrapped) / (2 * math.pi)
        np.testing.assert_allclose(turns, np.round(turns), atol=1e-9)

    def test_identity_inside_range(self):
        assert normalize_angle(0.5) == pytest.approx(0.5)
        assert normalize_angle(-3.0) == pytest.approx(-3.0)

    def test_minus_pi_maps_to_pi(self):
        assert normalize_angle(-math.pi) == pytest.approx(math.pi)
        assert normalize_angle(math.pi) == pytest.approx(math.pi)

    def test_wraps_large_angles(self):
        assert normalize_angle(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
        assert normalize_angle(2 * math.pi + 0.25) == pytest.approx(0.25)

    def test_scalar_returns_float(self):
        assert isinstance(normalize_angle(1.0), float)

    def test_array_keeps_shape(self):
        assert normalize_angle(np.zeros((3, 4))).shape == (3, 4)


class TestValidation:
    def test_validate_square_ok(self):
        result = validate_square(np.eye(5), 5, "test")
        assert result.shape == (5, 5)
        assert result.dtype == np.float64

    def test_validate_square_wrong_size(self):
        with pytest.raises(UkfParameterError, match=r"\(5, 5\)"):
            validate_square(np.eye(3), 5, "test")

    def test_validate_square_non_finite(self):
        P = np.eye(2)
        P[0, 1] = np.nan
        with pytest.raises(UkfParameterError, match="NaN"):
            validate_square(P, 2, "test")

    def test_validate_vector_ok(self):
        result = validate_vector([1, 2, 3], 3, "test")
        assert result.shape == (3,)
        assert result.dtype == np.float64

    def test_validate_vector_wrong_length(self):
        with pytest.raises(UkfParameterError, match="5 elements"):
            validate_vector(np.zeros(4), 5, "test")

    def test_validate_vector_2d_flattened(self):
        result = validate_vector(np.array([[1.0], [2.0]]), 2, "test")
        assert result.shape == (2,)

    def test_validate_vector_inf(self):
        with pytest.raises(UkfParameterError):
            validate_vector([1.0, np.inf], 2, "test")

    def test_validate_std(self):
        assert validate_std(1, "s") == 1.0
        with pytest.raises(UkfParameterError, match="positive"):
            validate_std(0.0, "s")
