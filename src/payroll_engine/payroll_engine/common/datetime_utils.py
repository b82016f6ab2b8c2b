from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse YYYY-MM-DDTHH:MM[:SS][+HH:MM] string into naive local datetime."""
    return to_naive_local(datetime.fromisoformat(value))


def to_naive_local(value: datetime) -> datetime:
    """Attendance times are stored as naive local wall-clock time; offsets are converted away."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS string into time."""
    return time.fromisoformat(value)


def now_local() -> datetime:
    """Current local time, truncated to whole seconds.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().replace(microsecond=0)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def start_of_next_day(day: date) -> datetime:
    """Exclusive upper bound of a calendar day."""
    return datetime.combine(day + timedelta(days=1), time.min)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def previous_month(today: date) -> tuple[int, int]:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, truncated (never negative)."""
    seconds = (end - start).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 60)
