"""
Tests for characteristic-diameter interpolation and gradation coefficients.
"""
import math

import numpy as np
import pytest

from src.domain import CharacteristicDiameters, GradationCurve, GradationPoint, SieveEntry
from src.domain.gradation import (characteristic_diameters, coefficients,
                                  diameter_at_percentile, from_diameters,
                                  from_sieve_entries)


def make_curve(*pairs):
    return GradationCurve.from_points(GradationPoint(size=s, passing=p) for s, p in pairs)


class TestDiameterAtPercentile:

    def test_exact_point_needs_no_interpolation(self):
        curve = make_curve((1, 0), (10, 50), (100, 100))
        assert diameter_at_percentile(curve, 50) == 10

    def test_log_midpoint(self):
        curve = make_curve((1, 0), (100, 100))
        assert diameter_at_percentile(curve, 50) == pytest.approx(10.0)

    def test_interpolates_in_log_space_not_linear(self):
        curve = make_curve((1, 0), (100, 100))
        assert diameter_at_percentile(curve, 25) == pytest.approx(math.sqrt(10))

    def test_clamps_below_curve(self):
        curve = make_curve((1, 20), (10, 80))
        assert diameter_at_percentile(curve, 10) == 1

    def test_clamps_above_curve(self):
        curve = make_curve((1, 20), (10, 80))
        assert diameter_at_percentile(curve, 90) == 10

    def test_empty_curve_returns_sentinel(self):
        assert diameter_at_percentile(GradationCurve(), 50) == 0.0

    def test_zero_size_uses_floor(self):
        curve = make_curve((0, 0), (10, 100))
        value = diameter_at_percentile(curve, 50)
        assert value == pytest.approx(math.sqrt(0.001 * 10))

    def test_flat_segment_does_not_hide_result(self):
        # The 2.0 mm sieve retains nothing, so two points share 50% passing
        curve = from_sieve_entries([
            SieveEntry(4.75, 50), SieveEntry(2.0, 0), SieveEntry(0.85, 50),
        ])
        assert diameter_at_percentile(curve, 50) == pytest.approx(2.0)

    def test_non_decreasing_in_target(self):
        rng = np.random.default_rng(7)
        curve = from_diameters(rng.lognormal(mean=1.0, sigma=0.8, size=150))
        values = [diameter_at_percentile(curve, p) for p in np.linspace(0.5, 99.5, 120)]
        assert all(b >= a - 1e-12 for a, b in zip(values, values[1:]))


class TestCharacteristicDiameters:

    def test_sieve_scenario(self):
        curve = from_sieve_entries([
            SieveEntry(4.75, 50), SieveEntry(2.0, 30), SieveEntry(0.85, 20),
        ])
        result = characteristic_diameters(curve)

        assert result.d10 == pytest.approx(math.sqrt(0.85 * 2.0))
        assert result.d30 == pytest.approx(2.0 * (4.75 / 2.0) ** (1 / 3))
        assert 2.0 <= result.d50 <= 4.75
        assert result.d50 == pytest.approx(4.75)
        assert result.d60 == pytest.approx(4.75 * 1.2 ** 0.2)
        assert result.cu == pytest.approx(result.d60 / result.d10)
        assert result.cc == pytest.approx(result.d30 ** 2 / (result.d10 * result.d60))

    def test_ordering_of_diameters(self):
        curve = from_diameters([0.5, 1.2, 2.0, 3.3, 4.1, 6.0, 8.5, 12.0])
        result = characteristic_diameters(curve)
        assert result.d10 <= result.d30 <= result.d50 <= result.d60

    def test_empty_curve_reports_sentinels(self):
        assert characteristic_diameters(from_diameters([])) == CharacteristicDiameters()

    def test_formatted_uses_fixed_precision(self):
        result = CharacteristicDiameters(d10=1.234, d30=2.0, d50=3.456, d60=4.0, cu=3.2416, cc=0.0)
        assert result.formatted() == {
            "D10": "1.23", "D30": "2.00", "D50": "3.46", "D60": "4.00", "Cu": "3.24", "Cc": "0.00",
        }
        assert result.formatted(precision=3)["Cu"] == "3.242"


class TestCoefficients:

    def test_regular_values(self):
        cu, cc = coefficients(d10=1.0, d30=2.0, d60=4.0)
        assert cu == pytest.approx(4.0)
        assert cc == pytest.approx(1.0)

    def test_zero_d10_gives_sentinels(self):
        result = coefficients(d10=0, d30=5, d60=20)
        assert result.cu == 0
        assert result.cc == 0

    def test_zero_d60_gives_zero_curvature(self):
        cu, cc = coefficients(d10=2.0, d30=3.0, d60=0.0)
        assert cu == 0.0
        assert cc == 0.0
