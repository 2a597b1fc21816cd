from __future__ import annotations

from ...core.constants import DEFAULT_RADIUS_METERS, DISTANCE_EPSILON_METERS
from ...core.enums import MarkStatus
from ..geometry import haversine_m
from ..model import GeofenceDecision, GeoPoint
from .base import GeofenceStrategy, Reference


class RadiusStrategy(GeofenceStrategy):
    """Present when the great-circle distance to the reference point is within the radius (inclusive)."""

    reference_type = GeoPoint

    def __init__(self, radius_meters: float = DEFAULT_RADIUS_METERS):
        if radius_meters <= 0:
            raise ValueError("radius_meters must be > 0")
        self.radius_meters = float(radius_meters)

    def decide(self, *, sample: GeoPoint, reference: Reference) -> GeofenceDecision:
        distance = haversine_m(sample, reference)
        inside = distance <= self.radius_meters + DISTANCE_EPSILON_METERS
        return GeofenceDecision(
            status=MarkStatus.PRESENT if inside else MarkStatus.ABSENT,
            distance_meters=distance,
        )
