from __future__ import annotations

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from src.workforce_attendance.workforce_attendance.attendance.compiler import DailyRecordCompiler
from src.workforce_attendance.workforce_attendance.attendance.model import (
    AttendanceEvent,
    DailyAttendanceRecord,
    ShiftPolicy,
)
from src.workforce_attendance.workforce_attendance.common.datetime_utils import iter_days
from src.workforce_attendance.workforce_attendance.core.enums import AttendanceStatus, EventType
from src.workforce_attendance.workforce_attendance.reports.aggregator import MonthlyAggregator
from src.workforce_attendance.workforce_attendance.workdays.calculator import WorkingDaysCalculator
from src.workforce_attendance.workforce_attendance.workdays.holidays import StaticHolidayCalendar

POLICY = ShiftPolicy(
    shift_start=time(9, 0),
    grace_minutes=15,
    half_day_threshold_hours=4.0,
    standard_shift_hours=8.0,
    timezone=ZoneInfo("UTC"),
)


def make_aggregator(holidays=()):
    workdays = WorkingDaysCalculator(holidays=StaticHolidayCalendar(holidays))
    return MonthlyAggregator(DailyRecordCompiler(POLICY), workdays), workdays


def _record(day: date, status: AttendanceStatus, hours: float = 0.0, overtime: float = 0.0) -> DailyAttendanceRecord:
    return DailyAttendanceRecord(
        employee_id="E1",
        work_date=day,
        status=status,
        total_hours=hours,
        overtime_hours=overtime,
    )


def _events(day: date, start: time, end: time) -> list[AttendanceEvent]:
    return [
        AttendanceEvent(
            employee_id="E1",
            event_type=EventType.CHECK_IN,
            timestamp=datetime.combine(day, start, tzinfo=timezone.utc),
            work_date=day,
        ),
        AttendanceEvent(
            employee_id="E1",
            event_type=EventType.CHECK_OUT,
            timestamp=datetime.combine(day, end, tzinfo=timezone.utc),
            work_date=day,
        ),
    ]


def test_month_reconciles_with_late_folded_into_present():
    aggregator, workdays = make_aggregator()
    working = [d for d in iter_days(date(2026, 3, 1), date(2026, 3, 31)) if workdays.day_kind(d) is None]
    assert len(working) == 22

    statuses = [AttendanceStatus.PRESENT] * 18 + [AttendanceStatus.LATE] * 2 + [AttendanceStatus.HALF_DAY]
    records = [_record(d, s, hours=8.0 if s != AttendanceStatus.HALF_DAY else 3.0) for d, s in zip(working, statuses)]
    leave_day = working[21]
    records.append(_record(leave_day, AttendanceStatus.LEAVE))

    summary = aggregator.aggregate("E1", 2026, 3, records, {leave_day})

    assert summary.working_days == 22
    assert summary.present_days == 20
    assert summary.late_days == 2
    assert summary.half_days == 1
    assert summary.leave_days == 1
    assert summary.absent_days == 0
    assert summary.attendance_rate == round(20.5 / 22 * 100, 2)
    assert summary.average_hours == round((20 * 8.0 + 3.0) / 21, 2)


def test_month_with_no_events_is_all_absent_except_leave():
    aggregator, _ = make_aggregator()
    leave = {date(2026, 3, 10), date(2026, 3, 11), date(2026, 3, 14)}  # the 14th is a Saturday

    days = aggregator.compile_month("E1", 2026, 3, [], leave)
    summary = aggregator.aggregate("E1", 2026, 3, days, leave)

    assert len(days) == 31
    assert summary.present_days == 0
    assert summary.leave_days == 2
    assert summary.absent_days == 20
    assert summary.attendance_rate == 0.0
    assert summary.present_days + summary.half_days + summary.absent_days + summary.leave_days == summary.working_days


def test_presence_on_leave_day_counts_as_present():
    aggregator, _ = make_aggregator()
    day = date(2026, 3, 3)
    leave = {day}

    days = aggregator.compile_month("E1", 2026, 3, _events(day, time(9), time(17)), leave)
    summary = aggregator.aggregate("E1", 2026, 3, days, leave)

    assert summary.present_days == 1
    assert summary.leave_days == 0
    assert summary.absent_days == 21


def test_weekend_work_adds_hours_but_not_days():
    aggregator, _ = make_aggregator(holidays=[date(2026, 3, 4)])
    saturday = date(2026, 3, 7)

    events = _events(saturday, time(9), time(19)) + _events(date(2026, 3, 4), time(9), time(17))
    days = aggregator.compile_month("E1", 2026, 3, events, frozenset())
    summary = aggregator.aggregate("E1", 2026, 3, days, frozenset())

    assert summary.working_days == 21
    assert summary.present_days == 0
    assert summary.absent_days == 21
    assert summary.total_overtime_hours == 2.0
    assert summary.total_hours == 18.0


def test_rate_is_clamped_and_absent_floored():
    aggregator, _ = make_aggregator()
    records = [_record(date(2026, 3, d), AttendanceStatus.PRESENT, 8.0) for d in (2, 3, 4)]

    summary = aggregator.aggregate("E1", 2026, 3, records, frozenset(), working_days=1)

    assert summary.attendance_rate == 100.0
    assert summary.absent_days == 0


def test_zero_working_days_gives_zero_rate():
    aggregator, _ = make_aggregator()

    summary = aggregator.aggregate_range("E1", date(2026, 3, 7), date(2026, 3, 8), [], frozenset())

    assert summary.working_days == 0
    assert summary.attendance_rate == 0.0
    assert summary.absent_days == 0


def test_open_day_is_not_credited():
    aggregator, _ = make_aggregator()
    day = date(2026, 3, 3)
    events = _events(day, time(9), time(17))[:1]

    days = aggregator.compile_month("E1", 2026, 3, events, frozenset())
    summary = aggregator.aggregate("E1", 2026, 3, days, frozenset())

    assert days[2].status == AttendanceStatus.CHECKED_IN
    assert summary.present_days == 0
    assert summary.absent_days == 22


def test_aggregation_is_deterministic():
    aggregator, _ = make_aggregator()
    events = _events(date(2026, 3, 3), time(9, 30), time(18)) + _events(date(2026, 3, 5), time(9), time(12))

    first = aggregator.aggregate("E1", 2026, 3, aggregator.compile_month("E1", 2026, 3, events, frozenset()), frozenset())
    second = aggregator.aggregate(
        "E1", 2026, 3, aggregator.compile_month("E1", 2026, 3, list(reversed(events)), frozenset()), frozenset()
    )

    assert first == second
    assert first.late_days == 1
    assert first.half_days == 1
