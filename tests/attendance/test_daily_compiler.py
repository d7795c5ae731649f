from __future__ import annotations

import random
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from src.workforce_attendance.workforce_attendance.attendance.compiler import DailyRecordCompiler
from src.workforce_attendance.workforce_attendance.attendance.model import AttendanceEvent, DayContext, ShiftPolicy
from src.workforce_attendance.workforce_attendance.core.constants import PRESENT_ON_LEAVE_NOTE
from src.workforce_attendance.workforce_attendance.core.enums import AttendanceStatus, EventSource, EventType

UTC = ZoneInfo("UTC")
DAY = date(2026, 3, 2)  # Monday


def _policy(*, half_day: float = 4.0, tz: ZoneInfo = UTC) -> ShiftPolicy:
    return ShiftPolicy(
        shift_start=time(9, 0),
        grace_minutes=15,
        half_day_threshold_hours=half_day,
        standard_shift_hours=8.0,
        timezone=tz,
    )


def _ev(event_type: EventType, hh: int, mm: int = 0, *, day: date = DAY, tz: ZoneInfo = UTC, **kw) -> AttendanceEvent:
    return AttendanceEvent(
        employee_id="E1",
        event_type=event_type,
        timestamp=datetime(day.year, day.month, day.day, hh, mm, tzinfo=tz),
        work_date=day,
        **kw,
    )


def test_late_check_in_counts_minutes_after_grace():
    compiler = DailyRecordCompiler(_policy())
    rec = compiler.compile("E1", DAY, [_ev(EventType.CHECK_IN, 9, 45), _ev(EventType.CHECK_OUT, 18, 45)])

    assert rec.status == AttendanceStatus.LATE
    assert rec.late_by_minutes == 30


def test_check_in_inside_grace_is_present():
    compiler = DailyRecordCompiler(_policy())
    rec = compiler.compile("E1", DAY, [_ev(EventType.CHECK_IN, 9, 15), _ev(EventType.CHECK_OUT, 18)])

    assert rec.status == AttendanceStatus.PRESENT
    assert rec.late_by_minutes is None


def test_full_day_with_break():
    compiler = DailyRecordCompiler(_policy())
    rec = compiler.compile(
        "E1",
        DAY,
        [
            _ev(EventType.CHECK_IN, 9),
            _ev(EventType.BREAK_IN, 13),
            _ev(EventType.BREAK_OUT, 13, 30),
            _ev(EventType.CHECK_OUT, 18),
        ],
    )

    assert rec.total_hours == 8.5
    assert rec.break_hours == 0.5
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.overtime_hours == 0.5


def test_full_day_with_break_total_hours_excludes_break():
    # 09:00-17:30 with a 30 minute break is exactly the standard shift.
    compiler = DailyRecordCompiler(_policy())
    rec = compiler.compile(
        "E1",
        DAY,
        [
            _ev(EventType.CHECK_IN, 9),
            _ev(EventType.BREAK_IN, 13),
            _ev(EventType.BREAK_OUT, 13, 30),
            _ev(EventType.CHECK_OUT, 17, 30),
        ],
    )

    assert rec.total_hours == 8.0
    assert rec.overtime_hours == 0.0


def test_short_day_is_half_day():
    compiler = DailyRecordCompiler(_policy(half_day=6.0))
    rec = compiler.compile("E1", DAY, [_ev(EventType.CHECK_IN, 9), _ev(EventType.CHECK_OUT, 13)])

    assert rec.status == AttendanceStatus.HALF_DAY
    assert rec.total_hours == 4.0


def test_seconds_long_day_is_still_half_day():
    compiler = DailyRecordCompiler(_policy())
    check_out = AttendanceEvent(
        employee_id="E1",
        event_type=EventType.CHECK_OUT,
        timestamp=datetime(DAY.year, DAY.month, DAY.day, 9, 0, 10, tzinfo=UTC),
        work_date=DAY,
    )
    rec = compiler.compile("E1", DAY, [_ev(EventType.CHECK_IN, 9), check_out])

    assert rec.status == AttendanceStatus.HALF_DAY
    assert rec.total_hours == 0.0


def test_half_day_overrides_late():
    compiler = DailyRecordCompiler(_policy())
    rec = compiler.compile("E1", DAY, [_ev(EventType.CHECK_IN, 11), _ev(EventType.CHECK_OUT, 13)])

    assert rec.status == AttendanceStatus.HALF_DAY
    assert rec.late_by_minutes is None
    assert rec.note == "late check-in"


def test_no_events_on_plain_working_day_is_absent():
    rec = DailyRecordCompiler(_policy()).compile("E1", DAY, [])

    assert rec.status == AttendanceStatus.ABSENT
    assert rec.total_hours == 0.0
    assert rec.check_in_time is None


def test_no_events_uses_calendar_context():
    compiler = DailyRecordCompiler(_policy())

    assert compiler.compile("E1", DAY, [], DayContext(on_leave=True)).status == AttendanceStatus.LEAVE
    assert (
        compiler.compile("E1", DAY, [], DayContext(day_kind=AttendanceStatus.WEEKEND, on_leave=True)).status
        == AttendanceStatus.WEEKEND
    )
    assert (
        compiler.compile("E1", DAY, [], DayContext(day_kind=AttendanceStatus.HOLIDAY)).status
        == AttendanceStatus.HOLIDAY
    )


def test_presence_beats_leave_and_is_noted():
    compiler = DailyRecordCompiler(_policy())
    rec = compiler.compile(
        "E1", DAY, [_ev(EventType.CHECK_IN, 9), _ev(EventType.CHECK_OUT, 17)], DayContext(on_leave=True)
    )

    assert rec.status == AttendanceStatus.PRESENT
    assert rec.note == PRESENT_ON_LEAVE_NOTE


def test_open_day_stays_checked_in_with_zero_hours():
    compiler = DailyRecordCompiler(_policy())
    rec = compiler.compile("E1", DAY, [_ev(EventType.CHECK_IN, 9)])

    assert rec.status == AttendanceStatus.CHECKED_IN
    assert rec.total_hours == 0.0
    assert rec.attended is False


def test_open_break_is_flagged_but_not_counted():
    compiler = DailyRecordCompiler(_policy())
    rec = compiler.compile(
        "E1",
        DAY,
        [
            _ev(EventType.CHECK_IN, 9),
            _ev(EventType.BREAK_IN, 10),
            _ev(EventType.BREAK_OUT, 10, 15),
            _ev(EventType.BREAK_IN, 12),
        ],
    )

    assert rec.status == AttendanceStatus.CHECKED_IN
    assert rec.open_break is True
    assert rec.break_hours == 0.25
    assert rec.break_intervals[-1].end is None


def test_reordered_delivery_gives_identical_record():
    events = [
        _ev(EventType.CHECK_IN, 9, 20),
        _ev(EventType.BREAK_IN, 12),
        _ev(EventType.BREAK_OUT, 12, 45),
        _ev(EventType.BREAK_IN, 15),
        _ev(EventType.BREAK_OUT, 15, 10),
        _ev(EventType.CHECK_OUT, 19, 5),
    ]
    compiler = DailyRecordCompiler(_policy())
    expected = compiler.compile("E1", DAY, events)

    rng = random.Random(7)
    for _ in range(10):
        shuffled = events[:]
        rng.shuffle(shuffled)
        assert compiler.compile("E1", DAY, shuffled) == expected

    # Recompiling is idempotent.
    assert compiler.compile("E1", DAY, events) == expected
    assert expected.total_hours >= 0
    assert expected.break_hours <= (expected.check_out_time - expected.check_in_time).total_seconds() / 3600


def test_lateness_uses_organisation_timezone():
    kolkata = ZoneInfo("Asia/Kolkata")
    compiler = DailyRecordCompiler(_policy(tz=kolkata))
    # 04:00 UTC is 09:30 in Kolkata.
    check_in = AttendanceEvent(
        employee_id="E1",
        event_type=EventType.CHECK_IN,
        timestamp=datetime(2026, 3, 2, 4, 0, tzinfo=UTC),
        work_date=DAY,
    )
    check_out = AttendanceEvent(
        employee_id="E1",
        event_type=EventType.CHECK_OUT,
        timestamp=datetime(2026, 3, 2, 12, 30, tzinfo=UTC),
        work_date=DAY,
    )

    rec = compiler.compile("E1", DAY, [check_out, check_in])

    assert rec.status == AttendanceStatus.LATE
    assert rec.late_by_minutes == 15
    assert rec.total_hours == 8.5


def test_manual_event_note_is_carried():
    compiler = DailyRecordCompiler(_policy())
    rec = compiler.compile(
        "E1",
        DAY,
        [
            _ev(EventType.CHECK_IN, 9, source=EventSource.MANUAL, note="badge reader down"),
            _ev(EventType.CHECK_OUT, 17, source=EventSource.MANUAL, note="badge reader down"),
        ],
    )

    assert rec.note == "badge reader down"
