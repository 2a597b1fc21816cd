from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from ..common.validators import require_number, require_object
from ..core.enums import MarkStatus
from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    @classmethod
    def from_json(cls, value: Any, field_name: str = "location") -> "GeoPoint":
        """Build from ``{"latitude": .., "longitude": ..}``; raises ValidationError."""
        body = require_object(value, field_name)
        return cls(
            latitude=require_number(body.get("latitude"), f"{field_name}.latitude", low=-90, high=90),
            longitude=require_number(body.get("longitude"), f"{field_name}.longitude", low=-180, high=180),
        )

    def to_json(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class Polygon:
    """Closed ring of ``(lon, lat)`` vertices; first vertex repeated at the end."""

    ring: tuple[tuple[float, float], ...]

    @classmethod
    def from_config(cls, vertices: Iterable[Sequence[float]]) -> "Polygon":
        try:
            ring = tuple((float(lon), float(lat)) for lon, lat in vertices)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid polygon vertex: {e}") from e
        if len(ring) < 4:
            raise ConfigurationError("Polygon needs at least 3 distinct vertices plus the closing vertex")
        if ring[0] != ring[-1]:
            raise ConfigurationError("Polygon ring must be closed (first vertex == last vertex)")
        return cls(ring=ring)


@dataclass(frozen=True)
class GeofenceDecision:
    status: MarkStatus
    distance_meters: Optional[float] = None

    @property
    def present(self) -> bool:
        return self.status == MarkStatus.PRESENT
