from __future__ import annotations

from datetime import date
from typing import AbstractSet, Iterable, Optional

from ..common.datetime_utils import iter_days
from ..core.constants import DEFAULT_WEEKEND_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import InvalidDateRange
from .holidays import HolidayCalendar, StaticHolidayCalendar


class WorkingDaysCalculator:
    """Counts expected working days: the attendance-rate denominator.

    Knows nothing about individual subjects. Weekend days use
    `date.weekday()` numbering (Monday=0 ... Sunday=6).
    """

    def __init__(
        self,
        *,
        weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
        holidays: Optional[HolidayCalendar] = None,
    ):
        self._weekend_days = frozenset(int(d) for d in weekend_days)
        if any(d < 0 or d > 6 for d in self._weekend_days):
            raise ValueError(f"Weekend days must be within 0..6, got {sorted(self._weekend_days)}")
        self._holidays = holidays or StaticHolidayCalendar()

    @property
    def weekend_days(self) -> frozenset[int]:
        return self._weekend_days

    def holidays_between(self, start: date, end: date) -> AbstractSet[date]:
        if start > end:
            raise InvalidDateRange(f"Start date {start} is after end date {end}")
        return self._holidays.holidays_between(start, end)

    def day_kind(self, day: date, holidays: Optional[AbstractSet[date]] = None) -> Optional[AttendanceStatus]:
        """WEEKEND or HOLIDAY for a non-working day, None for a working day."""
        if day.weekday() in self._weekend_days:
            return AttendanceStatus.WEEKEND
        if holidays is None:
            holidays = self._holidays.holidays_between(day, day)
        if day in holidays:
            return AttendanceStatus.HOLIDAY
        return None

    def count(self, start: date, end: date) -> int:
        holidays = self.holidays_between(start, end)
        return sum(1 for day in iter_days(start, end) if self.day_kind(day, holidays) is None)
