"""Tests for NIS thresholds and the consistency monitor."""

import numpy as np
import pytest

from ctrvukf import NisMonitor, SensorType, UkfParameterError, nis_threshold


class TestThreshold:
    def test_known_quantiles(self):
        assert nis_threshold(2) == pytest.approx(5.991, abs=1e-3)
        assert nis_threshold(3) == pytest.approx(7.815, abs=1e-3)

    def test_lower_confidence_lower_threshold(self):
        assert nis_threshold(3, 0.05) == pytest.approx(0.352, abs=1e-3)
        assert nis_threshold(3, 0.05) < nis_threshold(3, 0.95)

    @pytest.mark.parametrize("dof, confidence", [(0, 0.95), (2, 0.0), (2, 1.0)])
    def test_invalid(self, dof, confidence):
        with pytest.raises(UkfParameterError):
            nis_threshold(dof, confidence)


class TestMonitor:
    def test_thresholds_per_sensor(self):
        monitor = NisMonitor()
        assert monitor.threshold(SensorType.LIDAR) == pytest.approx(5.991, abs=1e-3)
        assert monitor.threshold(SensorType.RADAR) == pytest.approx(7.815, abs=1e-3)

    def test_empty(self):
        monitor = NisMonitor()
        assert monitor.count(SensorType.LIDAR) == 0
        assert monitor.fraction_above(SensorType.LIDAR) == 0.0
        assert monitor.is_consistent(SensorType.LIDAR)

    def test_fraction_above(self):
        monitor = NisMonitor()
        for score in (1.0, 2.0, 3.0, 10.0):
            monitor.record(SensorType.RADAR, score)
        assert monitor.fraction_above(SensorType.RADAR) == pytest.approx(0.25)
        assert monitor.fraction_above(SensorType.LIDAR) == 0.0

    def test_accepts_tag_values(self):
        monitor = NisMonitor()
        monitor.record("L", 1.0)
        np.testing.assert_array_equal(monitor.scores(SensorType.LIDAR), [1.0])

    def test_consistency_of_chi_square_samples(self):
        rng = np.random.default_rng(9)
        monitor = NisMonitor()
        for score in rng.chisquare(2, size=2000):
            monitor.record(SensorType.LIDAR, score)
        for score in rng.chisquare(3, size=2000):
            monitor.record(SensorType.RADAR, score)
        assert monitor.fraction_above(SensorType.LIDAR) == pytest.approx(0.05, abs=0.02)
        assert monitor.is_consistent(SensorType.LIDAR)
        assert monitor.is_consistent(SensorType.RADAR)

    def test_inconsistent_when_noise_underestimated(self):
        rng = np.random.default_rng(9)
        monitor = NisMonitor()
        # Innovations four times larger than the filter expects
        for score in 16.0 * rng.chisquare(2, size=500):
            monitor.record(SensorType.LIDAR, score)
        assert not monitor.is_consistent(SensorType.LIDAR)

    def test_reset(self):
        monitor = NisMonitor()
        monitor.record(SensorType.LIDAR, 1.0)
        monitor.reset()
        assert monitor.count(SensorType.LIDAR) == 0

    def test_repr(self):
        monitor = NisMonitor(confidence=0.9)
        monitor.record(SensorType.RADAR, 1.0)
        r = repr(monitor)
        assert "confidence=0.9" in r
        assert "radar=1" in r
