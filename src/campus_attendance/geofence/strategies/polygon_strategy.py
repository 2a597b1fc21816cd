from __future__ import annotations

from ...core.enums import MarkStatus
from ..geometry import point_in_polygon
from ..model import GeofenceDecision, GeoPoint, Polygon
from .base import GeofenceStrategy, Reference


class PolygonStrategy(GeofenceStrategy):
    """Campus boundary check. Points on the boundary are inside."""

    reference_type = Polygon

    def decide(self, *, sample: GeoPoint, reference: Reference) -> GeofenceDecision:
        inside = point_in_polygon(sample, reference)
        return GeofenceDecision(status=MarkStatus.PRESENT if inside else MarkStatus.ABSENT)
