import math

import pytest

from apps.common.exceptions import ValidationError
from apps.common.geo import EARTH_RADIUS_METERS, Point, distance, distance_expression, parse_point
from apps.users.models import Profile


def test_distance_is_zero_for_same_point():
    assert distance(Point(48.85, 2.35), Point(48.85, 2.35)) == 0


def test_distance_is_symmetric():
    a = Point(55.75, 37.62)
    b = Point(-33.87, 151.21)
    assert distance(a, b) == pytest.approx(distance(b, a))


def test_distance_along_equator():
    # 0.05 degrees of longitude on the equator
    expected = EARTH_RADIUS_METERS * math.radians(0.05)
    assert distance(Point(0, 0), Point(0, 0.05)) == pytest.approx(expected)
    assert distance(Point(0, 0), Point(0, 0.05)) == pytest.approx(5566, abs=1)


def test_distance_between_antipodes_is_half_circumference():
    assert distance(Point(0, 0), Point(0, 180)) == pytest.approx(math.pi * EARTH_RADIUS_METERS)


def test_parse_point_accepts_strings():
    assert parse_point('10.5', '-20') == Point(10.5, -20.0)


def test_parse_point_without_coordinates_returns_none():
    assert parse_point(None, None) is None
    assert parse_point('', '') is None


@pytest.mark.parametrize('lat, lon', [
    ('91', '0'),
    ('0', '-180.5'),
    ('abc', '0'),
    ('nan', '0'),
    ('10', None),
])
def test_parse_point_rejects_bad_input(lat, lon):
    with pytest.raises(ValidationError):
        parse_point(lat, lon)


@pytest.mark.django_db
def test_database_distance_matches_in_process_value(make_profile):
    origin = Point(40.0, -3.7)
    profile = make_profile(lat=40.3, lon=-3.2)

    annotated = (
        Profile.objects
        .annotate(distance=distance_expression(origin, 'navigator__latitude', 'navigator__longitude'))
        .get(pk=profile.pk)
    )

    assert annotated.distance == pytest.approx(distance(origin, Point(40.3, -3.2)), rel=1e-9)
