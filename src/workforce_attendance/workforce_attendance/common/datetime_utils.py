from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator
from zoneinfo import ZoneInfo

from ..core.exceptions import InvalidDateRange, ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid time {value!r} (expected HH:MM)")


def now_utc() -> datetime:
    """Current instant, timezone-aware.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    # Naive values coming back from the database are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def local_date(instant: datetime, tz: ZoneInfo) -> date:
    """Calendar date of an instant in the organisation timezone."""
    return ensure_aware(instant).astimezone(tz).date()


def local_instant(day: date, at: time, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, at, tzinfo=tz)


def end_of_local_day(day: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise InvalidDateRange(f"Invalid month {month!r}")
    if not 1 <= int(year) <= 9999:
        raise InvalidDateRange(f"Invalid year {year!r}")
    days_in_month = monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), days_in_month)


def iter_days(start: date, end: date) -> Iterator[date]:
    if start > end:
        raise InvalidDateRange(f"Start date {start} is after end date {end}")
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600.0
