from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import minutes_of_day, parse_hhmm
from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class TimetableEntry:
    """One class period of the daily timetable."""

    period_number: int
    start_time: time
    end_time: time

    @property
    def start_minute(self) -> int:
        return minutes_of_day(self.start_time)

    @property
    def end_minute(self) -> int:
        return minutes_of_day(self.end_time)

    def contains(self, minute: int) -> bool:
        return self.start_minute <= minute <= self.end_minute


@dataclass(frozen=True)
class Timetable:
    """Immutable daily schedule, ordered by period number.

    Built once from settings when the app starts and passed to whatever needs it.
    Adjacent periods may share a boundary minute (09:05 ends period 1 and starts period 2),
    but windows may not overlap beyond that.
    """

    entries: tuple[TimetableEntry, ...]

    @classmethod
    def from_config(cls, rows: Iterable[Sequence]) -> "Timetable":
        entries = []
        for row in rows:
            try:
                period_number, start_s, end_s = row
                entry = TimetableEntry(
                    period_number=int(period_number),
                    start_time=parse_hhmm(str(start_s)),
                    end_time=parse_hhmm(str(end_s)),
                )
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid timetable row {row!r}: {e}") from e
            if entry.end_minute <= entry.start_minute:
                raise ConfigurationError(f"Period {entry.period_number} ends before it starts")
            entries.append(entry)

        if not entries:
            raise ConfigurationError("Timetable is empty")

        entries.sort(key=lambda e: e.period_number)
        for prev, cur in zip(entries, entries[1:]):
            if prev.period_number == cur.period_number:
                raise ConfigurationError(f"Duplicate period {cur.period_number}")
            if cur.start_minute < prev.end_minute:
                raise ConfigurationError(f"Period {cur.period_number} overlaps period {prev.period_number}")

        return cls(entries=tuple(entries))

    def entry_for(self, period_number: int) -> Optional[TimetableEntry]:
        for entry in self.entries:
            if entry.period_number == period_number:
                return entry
        return None

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
