"""
Tests for the great-circle distance helpers.
"""
import pytest

from services.geo import distance_km, parse_location


class TestDistance:

    def test_same_point_is_zero(self):
        assert distance_km(30.2672, -97.7431, 30.2672, -97.7431) == pytest.approx(0.0, abs=1e-3)

    def test_one_degree_of_latitude(self):
        assert distance_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.05)

    def test_symmetric(self):
        there = distance_km(30.2672, -97.7431, 29.7604, -95.3698)
        back = distance_km(29.7604, -95.3698, 30.2672, -97.7431)
        assert there == pytest.approx(back)

    def test_antipodes(self):
        assert distance_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(6371.0 * 3.141592653589793, rel=1e-6)


class TestParseLocation:

    def test_valid(self):
        assert parse_location("30.26, -97.74") == (30.26, -97.74)

    @pytest.mark.parametrize("raw", ["", "austin", "1,2,3", "a,b", "inf,0", "0,nan", "-91,0", "0,181"])
    def test_invalid_returns_none(self, raw):
        assert parse_location(raw) is None
