from __future__ import annotations

from math import asin, atan2, cos, degrees, pi, radians, sin, sqrt

from ..core.constants import EARTH_RADIUS_METERS
from .model import GeoPoint, Polygon

# Tolerance for "point lies on an edge", in squared degrees.
_EDGE_EPSILON = 1e-12


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters."""
    lat1, lon1, lat2, lon2 = map(radians, [a.latitude, a.longitude, b.latitude, b.longitude])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # round-off can push h just past 1 for antipodal points
    h = min(1.0, max(0.0, h))
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def destination_point(origin: GeoPoint, bearing_deg: float, distance_m: float) -> GeoPoint:
    """Point reached from origin after distance_m along the initial bearing (spherical earth)."""
    delta = distance_m / EARTH_RADIUS_METERS
    theta = radians(bearing_deg)
    lat1 = radians(origin.latitude)
    lon1 = radians(origin.longitude)

    lat2 = asin(sin(lat1) * cos(delta) + cos(lat1) * sin(delta) * cos(theta))
    lon2 = lon1 + atan2(sin(theta) * sin(delta) * cos(lat1), cos(delta) - sin(lat1) * sin(lat2))
    lon2 = (lon2 + 3 * pi) % (2 * pi) - pi
    return GeoPoint(latitude=degrees(lat2), longitude=degrees(lon2))


def _on_segment(x: float, y: float, x1: float, y1: float, x2: float, y2: float) -> bool:
    cross = (x - x1) * (y2 - y1) - (y - y1) * (x2 - x1)
    if abs(cross) > _EDGE_EPSILON:
        return False
    return min(x1, x2) <= x <= max(x1, x2) and min(y1, y2) <= y <= max(y1, y2)


def point_in_polygon(point: GeoPoint, polygon: Polygon) -> bool:
    """Ray casting on (lon, lat) coordinates. Vertices and edges count as inside."""
    x, y = point.longitude, point.latitude
    ring = polygon.ring
    inside = False
    for (x1, y1), (x2, y2) in zip(ring, ring[1:]):
        if _on_segment(x, y, x1, y1, x2, y2):
            return True
        if (y1 > y) != (y2 > y):
            x_cross = x1 + (y - y1) * (x2 - x1) / (y2 - y1)
            if x < x_cross:
                inside = not inside
    return inside
