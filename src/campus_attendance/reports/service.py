from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, week_bounds
from ..core.enums import SLOT_ORDER, MarkStatus, ReportScope


@dataclass(frozen=True)
class ReportData:
    start: date
    end: date
    rows: list[dict]
    summary: list[dict]


def scope_bounds(scope: ReportScope, day: date) -> tuple[date, date]:
    if scope == ReportScope.DAY:
        return day, day
    if scope == ReportScope.WEEK:
        return week_bounds(day)
    return month_bounds(day)


def _flag(value: Optional[bool]) -> str:
    if value is None:
        return "-"
    return "Y" if value else "N"


class AttendanceReportService:
    """Admin read-model: per-period rows plus a per-student summary over a day, week or month."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def build_attendance_report(
        self,
        *,
        scope: ReportScope,
        day: date,
        student_id: Optional[int] = None,
    ) -> ReportData:
        start, end = scope_bounds(scope, day)
        query_rows = self._attendance.get_report_rows(start_date=start, end_date=end, student_id=student_id)

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            row = {
                "work_date": r.work_date.strftime("%Y-%m-%d"),
                "student_id": r.student_id,
                "name": r.name,
                "reg_no": r.reg_no,
                "class_name": r.class_name or "-",
                "period_number": r.period_number,
                "status": r.status.value,
            }
            for slot, flag in zip(SLOT_ORDER, r.slots):
                row[slot.value] = _flag(flag)
            out_rows.append(row)

            s = summary_map.get(r.student_id)
            if not s:
                s = {
                    "student_id": r.student_id,
                    "name": r.name,
                    "reg_no": r.reg_no,
                    "present_periods": 0,
                    "absent_periods": 0,
                }
                summary_map[r.student_id] = s
            if r.status == MarkStatus.PRESENT:
                s["present_periods"] += 1
            else:
                s["absent_periods"] += 1

        summary = []
        for s in summary_map.values():
            total = s["present_periods"] + s["absent_periods"]
            s["attendance_rate"] = round(100.0 * s["present_periods"] / total, 1) if total else 0.0
            summary.append(s)

        summary.sort(key=lambda x: (-x["attendance_rate"], x["reg_no"]))
        return ReportData(start=start, end=end, rows=out_rows, summary=summary)
