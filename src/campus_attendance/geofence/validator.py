from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.enums import ErrorKind, GeofenceMode
from ..core.exceptions import ValidationError
from ..core.result import Err, Ok, Result
from .factory import GeofenceStrategyFactory
from .model import GeofenceDecision, GeoPoint, Polygon
from .strategies.base import Reference

logger = logging.getLogger(__name__)


class PresenceValidator:
    """Decide present/absent for a ping location against a reference location.

    Malformed coordinates are an input error, never a silent "absent".
    """

    def __init__(
        self,
        *,
        mode: GeofenceMode,
        campus_point: GeoPoint,
        campus_polygon: Optional[Polygon] = None,
        factory: Optional[GeofenceStrategyFactory] = None,
    ):
        if mode == GeofenceMode.POLYGON and campus_polygon is None:
            raise ValueError("Polygon mode needs a campus polygon")
        self._mode = mode
        self._campus_point = campus_point
        self._campus_polygon = campus_polygon
        self._factory = factory or GeofenceStrategyFactory()

    @property
    def mode(self) -> GeofenceMode:
        return self._mode

    def reference_for(self, registered_location: Optional[GeoPoint]) -> Reference:
        """Radius mode compares with the student's registered classroom point (campus point if none);
        polygon mode always uses the campus boundary."""
        if self._mode == GeofenceMode.POLYGON:
            return self._campus_polygon
        return registered_location or self._campus_point

    def validate(self, sample: Any, reference: Reference, mode: Optional[GeofenceMode] = None) -> Result[GeofenceDecision]:
        mode = mode or self._mode
        if not isinstance(sample, GeoPoint):
            try:
                sample = GeoPoint.from_json(sample)
            except ValidationError as e:
                return Err(ErrorKind.INVALID_INPUT, str(e))

        strategy = self._factory.for_mode(mode)
        if not isinstance(reference, strategy.reference_type):
            return Err(ErrorKind.INVALID_INPUT, f"Reference location does not fit {mode.value} mode")

        decision = strategy.decide(sample=sample, reference=reference)
        logger.debug("Geofence %s -> %s (distance=%s)", mode.value, decision.status.value, decision.distance_meters)
        return Ok(decision)
