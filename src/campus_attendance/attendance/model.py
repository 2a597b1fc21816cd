from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SLOT_ORDER, MarkStatus, Slot
from ..geofence.model import GeoPoint

SlotFlags = tuple[Optional[bool], Optional[bool], Optional[bool], Optional[bool]]

EMPTY_SLOTS: SlotFlags = (None, None, None, None)


@dataclass(frozen=True)
class MarkKey:
    student_id: int
    work_date: date
    period_number: int


@dataclass(frozen=True)
class AttendanceMark:
    """Domain entity: one student's presence for one period of one day.

    ``slots`` holds one flag per checkpoint in ``SLOT_ORDER``:
    ``None`` = not yet recorded, ``True``/``False`` = validated present/absent.
    """

    student_id: int
    work_date: date
    period_number: int
    slots: SlotFlags
    status: MarkStatus
    mark_id: Optional[int] = None

    @property
    def key(self) -> MarkKey:
        return MarkKey(self.student_id, self.work_date, self.period_number)

    def slot(self, slot: Slot) -> Optional[bool]:
        return self.slots[SLOT_ORDER.index(slot)]

    @property
    def present_count(self) -> int:
        return sum(1 for flag in self.slots if flag is True)

    def slots_json(self) -> dict:
        return {s.value: flag for s, flag in zip(SLOT_ORDER, self.slots)}

    def to_json(self) -> dict:
        return {
            "studentId": self.student_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "periodNumber": self.period_number,
            "slots": self.slots_json(),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class PingRecord:
    """Append-only audit entry for one accepted ping."""

    student_id: int
    student_name: str
    reg_no: str
    period_number: int
    timestamp_type: Slot
    location: GeoPoint
    timestamp: datetime
    is_present: bool
    ping_id: Optional[int] = None

    def to_json(self) -> dict:
        return {
            "pingId": self.ping_id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "regNo": self.reg_no,
            "periodNumber": self.period_number,
            "timestampType": self.timestamp_type.value,
            "location": self.location.to_json(),
            "timestamp": self.timestamp.isoformat(),
            "isPresent": self.is_present,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for admin reports/exports (joined with the student roster)."""

    student_id: int
    name: str
    reg_no: str
    class_name: Optional[str]
    work_date: date
    period_number: int
    slots: SlotFlags
    status: MarkStatus
