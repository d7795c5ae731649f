from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

from src.workforce_attendance.workforce_attendance.attendance.factory import AttendanceStrategyFactory
from src.workforce_attendance.workforce_attendance.attendance.model import ShiftPolicy
from src.workforce_attendance.workforce_attendance.attendance.strategies.half_day_strategy import HalfDayStrategy
from src.workforce_attendance.workforce_attendance.attendance.strategies.late_strategy import LateStrategy
from src.workforce_attendance.workforce_attendance.attendance.strategies.normal_strategy import NormalStrategy
from src.workforce_attendance.workforce_attendance.attendance.strategies.open_day_strategy import OpenDayStrategy

POLICY = ShiftPolicy(
    shift_start=time(9, 0),
    grace_minutes=15,
    half_day_threshold_hours=4.0,
    standard_shift_hours=8.0,
    timezone=ZoneInfo("UTC"),
)
LATE_AFTER = datetime(2026, 1, 5, 9, 15, tzinfo=timezone.utc)


def _pick(check_in: datetime, check_out, total_hours: float):
    return AttendanceStrategyFactory().for_day(
        check_in=check_in,
        check_out=check_out,
        total_hours=total_hours,
        late_after=LATE_AFTER,
        policy=POLICY,
    )


def test_factory_checkin_on_time_within_grace():
    check_in = datetime(2026, 1, 5, 9, 14, 59, tzinfo=timezone.utc)
    strategy = _pick(check_in, datetime(2026, 1, 5, 18, 0, tzinfo=timezone.utc), 8.75)

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_late_after_grace():
    check_in = datetime(2026, 1, 5, 9, 16, tzinfo=timezone.utc)
    strategy = _pick(check_in, datetime(2026, 1, 5, 18, 0, tzinfo=timezone.utc), 8.7)

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide(
        check_in=check_in, check_out=None, total_hours=8.7, late_after=LATE_AFTER, policy=POLICY
    )
    assert decision.late_by_minutes == 1


def test_factory_short_day_is_half_day_even_when_late():
    check_in = datetime(2026, 1, 5, 10, 0, tzinfo=timezone.utc)
    strategy = _pick(check_in, datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc), 2.0)

    assert isinstance(strategy, HalfDayStrategy)


def test_factory_open_day_is_never_classified():
    check_in = datetime(2026, 1, 5, 10, 0, tzinfo=timezone.utc)

    assert isinstance(_pick(check_in, None, 0.0), OpenDayStrategy)
