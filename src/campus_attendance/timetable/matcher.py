from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Optional

from ..common.datetime_utils import to_local
from ..core.constants import AFTER_START_OFFSET_MINUTES, BEFORE_END_OFFSET_MINUTES, DEFAULT_SLOT_TOLERANCE_MINUTES
from ..core.enums import SLOT_ORDER, ErrorKind, Slot
from ..core.result import Err, Ok, Result
from .model import Timetable, TimetableEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotMatch:
    period_number: int
    slot: Slot
    local_date: date
    minute_of_day: int


def slot_anchors(entry: TimetableEntry) -> tuple[tuple[Slot, int], ...]:
    """Minute-of-day of each checkpoint, in slot order."""
    minutes = (
        entry.start_minute,
        entry.start_minute + AFTER_START_OFFSET_MINUTES,
        entry.end_minute - BEFORE_END_OFFSET_MINUTES,
        entry.end_minute,
    )
    return tuple(zip(SLOT_ORDER, minutes))


class SlotMatcher:
    """Find the class period and checkpoint slot a ping timestamp belongs to.

    A timestamp matches a period when its wall-clock minute lies inside
    ``[start, end]`` (both inclusive). Inside that period the nearest checkpoint
    within ``tolerance_minutes`` wins; a tolerance of 0 means the exact minute.
    Ties go to the earlier slot, and to the earlier period when two adjacent
    periods share the boundary minute.
    """

    def __init__(
        self,
        timetable: Timetable,
        *,
        tolerance_minutes: int = DEFAULT_SLOT_TOLERANCE_MINUTES,
        tz: Optional[tzinfo] = None,
    ):
        if tolerance_minutes < 0:
            raise ValueError("tolerance_minutes must be >= 0")
        self._timetable = timetable
        self._tolerance = int(tolerance_minutes)
        self._tz = tz

    @property
    def timetable(self) -> Timetable:
        return self._timetable

    def local_time(self, timestamp: datetime) -> datetime:
        return to_local(timestamp, self._tz)

    def match(self, timestamp: Optional[datetime]) -> Result[SlotMatch]:
        if not isinstance(timestamp, datetime):
            return Err(ErrorKind.INVALID_INPUT, "timestamp is missing or invalid")

        local = self.local_time(timestamp)
        minute = local.hour * 60 + local.minute

        periods = [e for e in self._timetable if e.contains(minute)]
        if not periods:
            logger.debug("No class period at %02d:%02d", local.hour, local.minute)
            return Err(ErrorKind.OUTSIDE_WINDOW, "No active class period at this time")

        best: Optional[tuple[int, int, int, TimetableEntry, Slot]] = None
        for period_idx, entry in enumerate(periods):
            for slot_idx, (slot, anchor) in enumerate(slot_anchors(entry)):
                distance = abs(minute - anchor)
                if distance > self._tolerance:
                    continue
                key = (distance, period_idx, slot_idx, entry, slot)
                if best is None or key[:3] < best[:3]:
                    best = key

        if best is None:
            return Err(
                ErrorKind.OUTSIDE_WINDOW,
                f"Outside attendance window for period {periods[0].period_number}",
            )

        _, _, _, entry, slot = best
        return Ok(
            SlotMatch(
                period_number=entry.period_number,
                slot=slot,
                local_date=local.date(),
                minute_of_day=minute,
            )
        )
