from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.enums import AttendanceStatus, DayState, EventSource, EventType


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one immutable attendance action."""

    employee_id: str
    event_type: EventType
    timestamp: datetime
    work_date: date
    source: EventSource = EventSource.SELF
    note: Optional[str] = None
    event_id: Optional[int] = None


@dataclass(frozen=True)
class BreakInterval:
    start: datetime
    end: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.end is None

    @property
    def hours(self) -> float:
        if self.end is None:
            return 0.0
        return max(0.0, (self.end - self.start).total_seconds() / 3600.0)


@dataclass(frozen=True)
class ShiftPolicy:
    """Organisation rules a daily record is compiled against."""

    shift_start: time
    grace_minutes: int
    half_day_threshold_hours: float
    standard_shift_hours: float
    timezone: ZoneInfo


@dataclass(frozen=True)
class DayContext:
    """Calendar facts about a date that do not come from the event log."""

    day_kind: Optional[AttendanceStatus] = None  # WEEKEND / HOLIDAY, None for a working day
    on_leave: bool = False


@dataclass(frozen=True)
class DailyAttendanceRecord:
    """Derived per-subject-per-date record. Never edited on its own."""

    employee_id: str
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    break_intervals: tuple[BreakInterval, ...] = field(default_factory=tuple)
    total_hours: float = 0.0
    break_hours: float = 0.0
    overtime_hours: float = 0.0
    late_by_minutes: Optional[int] = None
    note: Optional[str] = None

    @property
    def open_break(self) -> bool:
        return bool(self.break_intervals) and self.break_intervals[-1].is_open

    @property
    def attended(self) -> bool:
        return self.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY)


@dataclass(frozen=True)
class TodayStatus:
    """Snapshot returned to the personal dashboard."""

    employee_id: str
    work_date: date
    state: DayState
    allowed_actions: tuple[EventType, ...]
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    break_start_time: Optional[datetime]
    record: DailyAttendanceRecord
