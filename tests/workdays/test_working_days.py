from datetime import date

import pytest

from src.workforce_attendance.workforce_attendance.core.enums import AttendanceStatus
from src.workforce_attendance.workforce_attendance.core.exceptions import InvalidDateRange
from src.workforce_attendance.workforce_attendance.workdays.calculator import WorkingDaysCalculator
from src.workforce_attendance.workforce_attendance.workdays.holidays import StaticHolidayCalendar


class RecordingCalendar:
    def __init__(self, holidays):
        self._holidays = frozenset(holidays)
        self.calls = []

    def holidays_between(self, start, end):
        self.calls.append((start, end))
        return frozenset(d for d in self._holidays if start <= d <= end)


def test_month_without_holidays_counts_weekdays():
    calc = WorkingDaysCalculator()

    # March 2026: 31 days, 9 weekend days
    assert calc.count(date(2026, 3, 1), date(2026, 3, 31)) == 22


def test_holidays_are_excluded_once():
    holidays = [date(2026, 3, 4), date(2026, 3, 7)]  # Wednesday, Saturday
    calc = WorkingDaysCalculator(holidays=StaticHolidayCalendar(holidays))

    assert calc.count(date(2026, 3, 1), date(2026, 3, 31)) == 21


def test_custom_weekend_definition():
    # Friday-only weekend
    calc = WorkingDaysCalculator(weekend_days=[4])

    assert calc.count(date(2026, 3, 2), date(2026, 3, 8)) == 6


def test_single_day_and_day_kind():
    calc = WorkingDaysCalculator(holidays=StaticHolidayCalendar([date(2026, 3, 4)]))

    assert calc.count(date(2026, 3, 3), date(2026, 3, 3)) == 1
    assert calc.day_kind(date(2026, 3, 3)) is None
    assert calc.day_kind(date(2026, 3, 4)) == AttendanceStatus.HOLIDAY
    assert calc.day_kind(date(2026, 3, 7)) == AttendanceStatus.WEEKEND


def test_weekend_wins_over_holiday():
    calc = WorkingDaysCalculator(holidays=StaticHolidayCalendar([date(2026, 3, 8)]))

    assert calc.day_kind(date(2026, 3, 8)) == AttendanceStatus.WEEKEND


def test_calendar_is_queried_once_per_count():
    calendar = RecordingCalendar([date(2026, 3, 4)])
    calc = WorkingDaysCalculator(holidays=calendar)

    assert calc.count(date(2026, 3, 1), date(2026, 3, 31)) == 21
    assert calendar.calls == [(date(2026, 3, 1), date(2026, 3, 31))]


def test_reversed_range_is_rejected():
    calc = WorkingDaysCalculator()

    with pytest.raises(InvalidDateRange):
        calc.count(date(2026, 3, 31), date(2026, 3, 1))


def test_invalid_weekend_day_is_rejected():
    with pytest.raises(ValueError):
        WorkingDaysCalculator(weekend_days=[7])
