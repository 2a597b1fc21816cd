from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.enums import ErrorKind, Slot
from ..core.exceptions import StorageError
from ..core.result import Err, Ok, Result
from ..geofence.model import GeofenceDecision, GeoPoint
from ..geofence.validator import PresenceValidator
from ..students.model import Student
from ..students.repository import StudentRepository
from ..timetable.matcher import SlotMatcher
from .model import AttendanceMark, MarkKey, PingRecord
from .repository import AttendanceRepository
from .rules import MarkUpdateRule
from .schemas import MarkRequest, PingRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PingOutcome:
    slot: Slot
    period_number: int
    work_date: date
    decision: GeofenceDecision
    mark: AttendanceMark

    def to_json(self) -> dict:
        distance = self.decision.distance_meters
        return {
            "slot": self.slot.value,
            "status": self.decision.status.value,
            "periodNumber": self.period_number,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "distanceMeters": round(distance, 2) if distance is not None else None,
            "mark": self.mark.to_json(),
        }


class AttendanceService:
    """Use cases: record a location ping and report today's marks.

    Flow for a ping: resolve student -> match period/slot -> validate geofence
    -> apply the mark update rule atomically and append the ping to the log.
    A ping outside the geofence is a valid "absent" result, not an error.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        matcher: SlotMatcher,
        validator: PresenceValidator,
        rule: Optional[MarkUpdateRule] = None,
        tz: Optional[tzinfo] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._matcher = matcher
        self._validator = validator
        self._rule = rule or MarkUpdateRule()
        self._tz = tz

    def record_ping(self, request: PingRequest, *, now: Optional[datetime] = None) -> Result[PingOutcome]:
        try:
            student = self._resolve_student(student_id=request.student_id, uuid=request.uuid)
        except StorageError:
            logger.exception("Student lookup failed")
            return Err(ErrorKind.STORAGE_ERROR, "Failed to record ping, please retry")
        if student is None:
            return Err(ErrorKind.STUDENT_NOT_FOUND, "Student not found")

        timestamp = request.timestamp or now or now_local(self._tz)
        matched = self._matcher.match(timestamp)
        if not matched.ok:
            logger.info("Ping from student %s rejected: %s", student.student_id, matched.message)
            return matched

        match = matched.value
        local = self._matcher.local_time(timestamp)
        return self._record(
            student=student,
            period_number=match.period_number,
            slot=match.slot,
            work_date=match.local_date,
            sample=request.location,
            pinged_at=local,
        )

    def mark(self, request: MarkRequest, *, now: Optional[datetime] = None) -> Result[PingOutcome]:
        """Legacy endpoint: the client supplies period and slot, the matcher is skipped."""
        if self._matcher.timetable.entry_for(request.period_number) is None:
            return Err(ErrorKind.INVALID_INPUT, f"Unknown periodNumber {request.period_number}")

        try:
            student = self._students.get_by_id(request.student_id)
        except StorageError:
            logger.exception("Student lookup failed")
            return Err(ErrorKind.STORAGE_ERROR, "Failed to mark attendance, please retry")
        if student is None:
            return Err(ErrorKind.STUDENT_NOT_FOUND, "Student not found")

        local = self._matcher.local_time(now or now_local(self._tz))
        return self._record(
            student=student,
            period_number=request.period_number,
            slot=request.slot,
            work_date=local.date(),
            sample=request.location,
            pinged_at=local,
        )

    def _resolve_student(self, *, student_id: Optional[int], uuid: Optional[str]) -> Optional[Student]:
        if student_id is not None:
            return self._students.get_by_id(student_id)
        return self._students.get_by_uuid(uuid)

    def _record(
        self,
        *,
        student: Student,
        period_number: int,
        slot: Slot,
        work_date: date,
        sample: GeoPoint,
        pinged_at: datetime,
    ) -> Result[PingOutcome]:
        reference = self._validator.reference_for(student.location)
        validated = self._validator.validate(sample, reference)
        if not validated.ok:
            return validated
        decision = validated.value

        key = MarkKey(student_id=student.student_id, work_date=work_date, period_number=period_number)
        ping = PingRecord(
            student_id=student.student_id,
            student_name=student.name,
            reg_no=student.reg_no,
            period_number=period_number,
            timestamp_type=slot,
            location=sample,
            timestamp=pinged_at.replace(tzinfo=None),
            is_present=decision.present,
        )

        try:
            mark = self._attendance.record_ping(
                key=key,
                ping=ping,
                update=lambda current: self._rule.apply(current, key, slot, decision.present),
            )
        except StorageError:
            logger.exception("Could not store ping for student %s period %s", student.student_id, period_number)
            return Err(ErrorKind.STORAGE_ERROR, "Failed to record ping, please retry")

        logger.info(
            "Student %s period %s slot %s -> %s (period %s, %s/4)",
            student.student_id,
            period_number,
            slot.value,
            decision.status.value,
            mark.status.value,
            mark.present_count,
        )
        return Ok(PingOutcome(slot=slot, period_number=period_number, work_date=work_date, decision=decision, mark=mark))

    def today_summary(self, student_id: int, *, today: Optional[date] = None) -> Optional[dict]:
        """Marks recorded for the student today; None when the student does not exist."""
        student = self._students.get_by_id(student_id)
        if student is None:
            return None

        today = today or self._matcher.local_time(now_local(self._tz)).date()
        marks = self._attendance.list_marks_for_student_date(student_id, today)
        return {
            "date": today.strftime("%Y-%m-%d"),
            "studentName": student.name,
            "regNo": student.reg_no,
            "periods": [
                {"periodNumber": m.period_number, "status": m.status.value, "slots": m.slots_json()}
                for m in marks
            ],
        }
