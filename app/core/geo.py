"""Geo utilities: spherical Mercator projection, Haversine distance, radius correction."""

import math
from typing import NamedTuple

# Spherical (Web) Mercator radius in meters
MERCATOR_RADIUS_M = 6378137.0
# Mean Earth radius in meters, used for great-circle distance
EARTH_RADIUS_M = 6371008.8


class GeoPoint(NamedTuple):
    """Geographic point in degrees, longitude first."""
    lon: float
    lat: float


def project(lon: float, lat: float) -> tuple[float, float]:
    """
    Project (lon, lat) in degrees to planar (x, y) in meters.

    Latitude is not validated. At or beyond +/-90 the result is meaningless:
    a huge y, or ValueError from math.log once the tangent reaches zero or goes
    negative. Callers keep inputs inside (-90, 90).
    """
    lam = math.radians(lon)
    phi = math.radians(lat)
    x = MERCATOR_RADIUS_M * lam
    y = MERCATOR_RADIUS_M * math.log(math.tan(math.pi / 4 + phi / 2))
    return x, y


def unproject(x: float, y: float) -> tuple[float, float]:
    """Inverse of project: planar (x, y) in meters back to (lon, lat) in degrees."""
    lon = math.degrees(x / MERCATOR_RADIUS_M)
    lat = math.degrees(2 * math.atan(math.exp(y / MERCATOR_RADIUS_M)) - math.pi / 2)
    return lon, lat


def projected_radius(radius_m: float, center_lat: float) -> float:
    """
    Convert a ground radius around a center at center_lat into a planar search radius.

    Mercator stretches distances by 1/cos(lat); valid while the search area is
    small relative to the Earth. No antimeridian or polar handling.
    """
    return radius_m / math.cos(math.radians(center_lat))


def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Compute great-circle distance between two (lat, lon) points in meters.
    Uses the Haversine formula.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def offset_point(center: GeoPoint, north_m: float, east_m: float) -> GeoPoint:
    """Approximate point north_m / east_m meters away from center (111320 m per degree)."""
    d_lat = north_m / 111320
    d_lon = east_m / (111320 * math.cos(math.radians(center.lat)))
    return GeoPoint(center.lon + d_lon, center.lat + d_lat)
