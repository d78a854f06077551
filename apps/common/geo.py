"""
Distance Evaluator
===================
Single source of truth for great-circle distance. The same haversine
formula and Earth radius back both call sites:

- ``distance()`` computes in process (profile detail view).
- ``distance_expression()`` builds the equivalent ORM expression so the
  database can filter and order candidates by distance.

Both return meters. Converting a kilometer radius preference to meters
is the caller's job.
"""

import math
from collections import namedtuple

from django.db.models import ExpressionWrapper, F, FloatField, Value
from django.db.models.functions import ASin, Cos, Least, Power, Sin, Sqrt, Radians

from apps.common.exceptions import ValidationError

EARTH_RADIUS_METERS = 6378100

METERS_PER_KILOMETER = 1000

Point = namedtuple('Point', ['latitude', 'longitude'])


def distance(point_a, point_b):
    """
    Great-circle distance between two points in meters.

    Total over valid coordinates: inputs are not validated here.
    """
    lat1 = math.radians(point_a.latitude)
    lat2 = math.radians(point_b.latitude)
    delta_lat = lat2 - lat1
    delta_lon = math.radians(point_b.longitude) - math.radians(point_a.longitude)

    a = math.sin(delta_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
    # Rounding can push sqrt(a) past 1 for antipodal points.
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def km_to_meters(kilometers):
    return kilometers * METERS_PER_KILOMETER


def distance_expression(origin, latitude_field, longitude_field):
    """
    ORM expression for the distance in meters from ``origin`` to the point
    stored in ``latitude_field``/``longitude_field``.

    Rows missing either coordinate evaluate to NULL.
    """
    origin_lat = math.radians(origin.latitude)
    origin_lon = math.radians(origin.longitude)

    lat = Radians(F(latitude_field))
    lon = Radians(F(longitude_field))

    half_dlat = (lat - Value(origin_lat)) / Value(2.0)
    half_dlon = (lon - Value(origin_lon)) / Value(2.0)

    a = (
        Power(Sin(half_dlat), Value(2.0))
        + Value(math.cos(origin_lat)) * Cos(lat) * Power(Sin(half_dlon), Value(2.0))
    )
    return ExpressionWrapper(
        Value(2.0 * EARTH_RADIUS_METERS) * ASin(Least(Sqrt(a), Value(1.0))),
        output_field=FloatField(),
    )


def parse_point(latitude, longitude):
    """
    Validate raw coordinates at the request boundary and build a Point.

    Returns None when neither coordinate was supplied. Supplying only
    one of them is an error.
    """
    if latitude in (None, '') and longitude in (None, ''):
        return None
    if latitude in (None, '') or longitude in (None, ''):
        raise ValidationError('Both latitude and longitude are required.')

    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError('Latitude and longitude must be numbers.')

    if math.isnan(lat) or math.isnan(lon):
        raise ValidationError('Latitude and longitude must be numbers.')
    if not -90 <= lat <= 90:
        raise ValidationError('Latitude must be between -90 and 90.')
    if not -180 <= lon <= 180:
        raise ValidationError('Longitude must be between -180 and 180.')
    return Point(lat, lon)
