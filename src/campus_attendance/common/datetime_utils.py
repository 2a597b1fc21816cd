from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def minutes_of_day(t: time) -> int:
    return t.hour * 60 + t.minute


def parse_iso_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp as sent by the client (a trailing 'Z' is accepted)."""
    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    return datetime.fromisoformat(v)


def to_local(value: datetime, tz: Optional[tzinfo]) -> datetime:
    """Convert an aware timestamp into the school's timezone; naive values are already local."""
    if tz is None or value.tzinfo is None:
        return value
    return value.astimezone(tz)


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz)


def week_bounds(day: date) -> tuple[date, date]:
    """Monday..Sunday of the ISO week containing day."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def month_bounds(day: date) -> tuple[date, date]:
    start = day.replace(day=1)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)
