from __future__ import annotations

from enum import Enum


class Slot(str, Enum):
    """Checkpoint inside a class period. Values are the wire names used by the mobile client."""

    START = "start"
    AFTER_START_15 = "afterStart15"
    BEFORE_END_10 = "beforeEnd10"
    END = "end"


SLOT_ORDER: tuple[Slot, ...] = (Slot.START, Slot.AFTER_START_15, Slot.BEFORE_END_10, Slot.END)


class MarkStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class GeofenceMode(str, Enum):
    """How a ping location is compared with the reference location."""

    RADIUS = "radius"
    POLYGON = "polygon"


class ErrorKind(str, Enum):
    """Failure kinds returned by the ping pipeline; the HTTP layer maps them to status codes."""

    INVALID_INPUT = "invalid_input"
    STUDENT_NOT_FOUND = "student_not_found"
    OUTSIDE_WINDOW = "outside_window"
    STORAGE_ERROR = "storage_error"


class ReportScope(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
