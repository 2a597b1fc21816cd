from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union

from ..model import GeofenceDecision, GeoPoint, Polygon

Reference = Union[GeoPoint, Polygon]


class GeofenceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide whether a ping is inside the geofence."""

    reference_type: type

    @abstractmethod
    def decide(self, *, sample: GeoPoint, reference: Reference) -> GeofenceDecision:
        raise NotImplementedError
