from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_RADIUS_METERS
from ..core.enums import GeofenceMode
from .strategies.base import GeofenceStrategy
from .strategies.polygon_strategy import PolygonStrategy
from .strategies.radius_strategy import RadiusStrategy


@dataclass
class GeofenceStrategyFactory:
    """Factory Pattern: choose the geofence strategy configured for the deployment."""

    radius_meters: float = DEFAULT_RADIUS_METERS

    def for_mode(self, mode: GeofenceMode) -> GeofenceStrategy:
        if mode == GeofenceMode.RADIUS:
            return RadiusStrategy(self.radius_meters)
        if mode == GeofenceMode.POLYGON:
            return PolygonStrategy()
        raise ValueError(f"Unsupported geofence mode: {mode!r}")
