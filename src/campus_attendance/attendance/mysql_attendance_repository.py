from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..core.enums import MarkStatus, Slot
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_flag, to_flag
from ..geofence.model import GeoPoint
from .model import AttendanceMark, AttendanceReportRow, MarkKey, PingRecord
from .repository import AttendanceRepository, MarkUpdater

_MARK_COLUMNS = """
    mark_id, student_id, work_date, period_number,
    slot_start, slot_after_start15, slot_before_end10, slot_end, status
"""


def _slots(r: dict):
    return (
        to_flag(r.get("slot_start")),
        to_flag(r.get("slot_after_start15")),
        to_flag(r.get("slot_before_end10")),
        to_flag(r.get("slot_end")),
    )


def _to_mark(r: dict) -> AttendanceMark:
    return AttendanceMark(
        mark_id=int(r["mark_id"]),
        student_id=int(r["student_id"]),
        work_date=r["work_date"],
        period_number=int(r["period_number"]),
        slots=_slots(r),
        status=MarkStatus(r["status"]),
    )


def _to_ping(r: dict) -> PingRecord:
    return PingRecord(
        ping_id=int(r["ping_id"]),
        student_id=int(r["student_id"]),
        student_name=r["student_name"],
        reg_no=r["reg_no"],
        period_number=int(r["period_number"]),
        timestamp_type=Slot(r["timestamp_type"]),
        location=GeoPoint(latitude=float(r["latitude"]), longitude=float(r["longitude"])),
        timestamp=r["pinged_at"],
        is_present=bool(int(r["is_present"])),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_mark(self, key: MarkKey) -> Optional[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_MARK_COLUMNS}
                FROM attendance_marks
                WHERE student_id=%s AND work_date=%s AND period_number=%s
                """,
                (key.student_id, key.work_date, key.period_number),
            )
            r = fetchone(cur)
            return _to_mark(r) if r else None

    def list_marks_for_student_date(self, student_id: int, work_date: date) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_MARK_COLUMNS}
                FROM attendance_marks
                WHERE student_id=%s AND work_date=%s
                ORDER BY period_number
                """,
                (student_id, work_date),
            )
            return [_to_mark(r) for r in fetchall(cur)]

    def record_ping(self, *, key: MarkKey, ping: PingRecord, update: MarkUpdater) -> AttendanceMark:
        with db_cursor(self._conn_factory) as (_, cur):
            # Make sure the row exists, then lock it: concurrent pings for the same
            # (student, day, period) queue on the row lock until this transaction commits.
            cur.execute(
                """
                INSERT INTO attendance_marks(student_id, work_date, period_number, status)
                VALUES(%s,%s,%s,'absent')
                ON DUPLICATE KEY UPDATE mark_id=mark_id
                """,
                (key.student_id, key.work_date, key.period_number),
            )
            cur.execute(
                f"""
                SELECT {_MARK_COLUMNS}
                FROM attendance_marks
                WHERE student_id=%s AND work_date=%s AND period_number=%s
                FOR UPDATE
                """,
                (key.student_id, key.work_date, key.period_number),
            )
            current = _to_mark(fetchone(cur))
            updated = update(current)

            cur.execute(
                """
                UPDATE attendance_marks
                SET slot_start=%s, slot_after_start15=%s, slot_before_end10=%s, slot_end=%s, status=%s
                WHERE mark_id=%s
                """,
                (*(from_flag(f) for f in updated.slots), updated.status.value, current.mark_id),
            )
            cur.execute(
                """
                INSERT INTO attendance_pings(
                    student_id, student_name, reg_no, period_number, timestamp_type,
                    latitude, longitude, is_present, pinged_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    ping.student_id,
                    ping.student_name,
                    ping.reg_no,
                    ping.period_number,
                    ping.timestamp_type.value,
                    ping.location.latitude,
                    ping.location.longitude,
                    1 if ping.is_present else 0,
                    ping.timestamp,
                ),
            )
            return replace(updated, mark_id=current.mark_id)

    def list_pings(
        self,
        *,
        work_date: Optional[date] = None,
        student_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[PingRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if work_date is not None:
            clauses.append("DATE(pinged_at)=%s")
            params.append(work_date)
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(student_id))

        where = " AND ".join(clauses)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ping_id, student_id, student_name, reg_no, period_number, timestamp_type,
                       latitude, longitude, is_present, pinged_at
                FROM attendance_pings
                WHERE {where}
                ORDER BY pinged_at DESC, ping_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_ping(r) for r in fetchall(cur)]

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["m.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if student_id is not None:
            clauses.append("m.student_id=%s")
            params.append(int(student_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    s.student_id, s.name, s.reg_no, s.class_name,
                    m.work_date, m.period_number,
                    m.slot_start, m.slot_after_start15, m.slot_before_end10, m.slot_end, m.status
                FROM attendance_marks m
                JOIN students s ON s.student_id = m.student_id
                WHERE {where}
                ORDER BY m.work_date ASC, s.reg_no ASC, m.period_number ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    student_id=int(r["student_id"]),
                    name=r["name"],
                    reg_no=r["reg_no"],
                    class_name=r.get("class_name"),
                    work_date=r["work_date"],
                    period_number=int(r["period_number"]),
                    slots=_slots(r),
                    status=MarkStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
