"""Tests for great-circle distance."""
import math
import pytest
from cityquiz.core.geodesy import distance_meters, EARTH_RADIUS_M


@pytest.mark.parametrize("point", [(0.0, 0.0), (39.78, -89.65), (-33.9, 151.2), (89.9, 179.9)])
def test_distance_to_self_is_zero(point):
    assert distance_meters(point, point) == 0


def test_distance_is_symmetric():
    a = (40.7128, -74.006)
    b = (34.0522, -118.2437)
    assert distance_meters(a, b) == distance_meters(b, a)


def test_known_distance():
    """New York to Los Angeles is roughly 3,936 km."""
    d = distance_meters((40.7128, -74.006), (34.0522, -118.2437))
    assert d == pytest.approx(3_936_000, rel=0.01)


def test_one_degree_of_latitude():
    d = distance_meters((0.0, 0.0), (1.0, 0.0))
    assert d == pytest.approx(EARTH_RADIUS_M * math.pi / 180)


def test_antipodal_points():
    d = distance_meters((0.0, 0.0), (0.0, 180.0))
    assert d == pytest.approx(math.pi * EARTH_RADIUS_M)
    assert d >= 0
