from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Protocol, Sequence

from .model import AttendanceMark, AttendanceReportRow, MarkKey, PingRecord

MarkUpdater = Callable[[Optional[AttendanceMark]], AttendanceMark]


class AttendanceRepository(Protocol):
    def get_mark(self, key: MarkKey) -> Optional[AttendanceMark]:
        raise NotImplementedError

    def list_marks_for_student_date(self, student_id: int, work_date: date) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def record_ping(self, *, key: MarkKey, ping: PingRecord, update: MarkUpdater) -> AttendanceMark:
        """Atomically read the mark for ``key``, store ``update(mark)`` and append ``ping``.

        Implementations must serialize concurrent calls for the same key so that
        pings for different slots of one period never lose each other's update.
        """

        raise NotImplementedError

    def list_pings(
        self,
        *,
        work_date: Optional[date] = None,
        student_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[PingRecord]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
