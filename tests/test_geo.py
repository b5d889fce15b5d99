import math

import pytest

from journey_tracker.geo import angle_difference, bearing, distance, latlon_to_meters, normalize_bearing


def test_distance_same_point_is_zero():
    assert distance(48.8566, 2.3522, 48.8566, 2.3522) == 0


def test_distance_one_degree_longitude_at_equator():
    assert distance(0, 0, 0, 1) == pytest.approx(111195, rel=0.01)


def test_distance_is_symmetric():
    d1 = distance(40.7128, -74.0060, 34.0522, -118.2437)
    d2 = distance(34.0522, -118.2437, 40.7128, -74.0060)
    assert d1 == pytest.approx(d2)
    assert d1 == pytest.approx(3_936_000, rel=0.01)


@pytest.mark.parametrize("lat2, lon2, expected", [
    (1, 0, 0.0),
    (0, 1, 90.0),
    (-1, 0, 180.0),
    (0, -1, 270.0),
])
def test_bearing_cardinal_directions(lat2, lon2, expected):
    assert bearing(0, 0, lat2, lon2) == pytest.approx(expected, abs=1e-9)


def test_bearing_always_in_range():
    points = [(10, 20), (-45, 170), (89, -179), (-89.5, 0.1), (0, 179.9)]
    for lat1, lon1 in points:
        for lat2, lon2 in points:
            if (lat1, lon1) == (lat2, lon2):
                continue
            result = bearing(lat1, lon1, lat2, lon2)
            assert 0.0 <= result < 360.0


def test_bearing_identical_points_is_nan():
    assert math.isnan(bearing(12.5, 45.0, 12.5, 45.0))


def test_normalize_bearing_wraps_negative_and_full_turns():
    assert normalize_bearing(-90) == 270
    assert normalize_bearing(720) == 0
    assert normalize_bearing(359.5) == 359.5


def test_angle_difference_takes_short_way_round():
    assert angle_difference(350, 10) == pytest.approx(20)
    assert angle_difference(0, 180) == pytest.approx(180)
    assert angle_difference(90, 90) == 0


def test_latlon_to_meters_north_and_east():
    east, north = latlon_to_meters(0.001, 0.0, 0.0, 0.0)
    assert east == pytest.approx(0.0)
    assert north == pytest.approx(111.195, rel=1e-3)
