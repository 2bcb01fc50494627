import pytest

from shuttle_directory.models.domain import GeoPoint, round_miles
from shuttle_directory.services.geospatial import (
    distance_between,
    estimate_duration_seconds,
    format_duration,
    haversine_miles,
)


def test_haversine_new_york_to_los_angeles():
    miles = haversine_miles(40.7128, -74.0060, 34.0522, -118.2437)

    assert miles == pytest.approx(2451, rel=0.01)


@pytest.mark.parametrize(
    "a, b",
    [
        ((40.7128, -74.0060), (34.0522, -118.2437)),
        ((40.4268, -78.3897), (25.7617, -80.1918)),
        ((-33.8688, 151.2093), (51.5074, -0.1278)),
    ],
)
def test_haversine_is_symmetric(a, b):
    assert haversine_miles(*a, *b) == pytest.approx(haversine_miles(*b, *a))


def test_haversine_same_point_is_zero():
    assert haversine_miles(40.5187, -78.3947, 40.5187, -78.3947) == 0


def test_distance_between_points():
    altoona = GeoPoint(40.5187, -78.3947)
    hollidaysburg = GeoPoint(40.4268, -78.3897)

    assert 5 < distance_between(hollidaysburg, altoona) < 8


def test_geopoint_rejects_out_of_range_latitude():
    with pytest.raises(ValueError):
        GeoPoint(91.0, 0.0)


def test_estimated_duration_assumes_sixty_mph():
    assert estimate_duration_seconds(120) == 7200


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0m"), (45 * 60, "45m"), (3600, "1h 0m"), (2 * 3600 + 5 * 60, "2h 5m"), (3599.9, "1h 0m")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_round_miles_rounds_halves_up():
    assert round_miles(2.5) == 3
    assert round_miles(2.49) == 2
