from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import ensure_aware, hours_between, local_instant
from ..core.constants import HOURS_PRECISION, PRESENT_ON_LEAVE_NOTE
from ..core.enums import AttendanceStatus, EventType
from .factory import AttendanceStrategyFactory
from .model import AttendanceEvent, BreakInterval, DailyAttendanceRecord, DayContext, ShiftPolicy

# Tie-break for events sharing one instant (an auto-closed break ends exactly at check-out).
_EVENT_RANK = {
    EventType.CHECK_IN: 0,
    EventType.BREAK_IN: 1,
    EventType.BREAK_OUT: 2,
    EventType.CHECK_OUT: 3,
}


def _sort_key(event: AttendanceEvent):
    return (ensure_aware(event.timestamp), _EVENT_RANK[event.event_type])


class DailyRecordCompiler:
    """Turns one day's events into a DailyAttendanceRecord.

    Deterministic and side-effect free: the same events, policy and context
    always give the same record, whatever order the events arrive in.
    """

    def __init__(self, policy: ShiftPolicy, *, strategy_factory: Optional[AttendanceStrategyFactory] = None):
        self._policy = policy
        self._factory = strategy_factory or AttendanceStrategyFactory()

    @property
    def policy(self) -> ShiftPolicy:
        return self._policy

    def compile(
        self,
        employee_id: str,
        work_date: date,
        events: Iterable[AttendanceEvent],
        context: DayContext = DayContext(),
    ) -> DailyAttendanceRecord:
        ordered = sorted(events, key=_sort_key)
        if not ordered:
            return self._without_events(employee_id, work_date, context)

        check_in, check_out, breaks = self._envelope(ordered)
        if check_in is None:
            # Only stray events (e.g. a break with no check-in): nothing was attended.
            return self._without_events(employee_id, work_date, context)

        break_hours = sum(b.hours for b in breaks)
        total_hours = 0.0
        overtime_hours = 0.0
        if check_out is not None:
            total_hours = max(0.0, hours_between(check_in, check_out) - break_hours)
            overtime_hours = max(0.0, total_hours - self._policy.standard_shift_hours)

        late_after = self._late_after(work_date)
        strategy = self._factory.for_day(
            check_in=check_in,
            check_out=check_out,
            total_hours=total_hours,
            late_after=late_after,
            policy=self._policy,
        )
        decision = strategy.decide(
            check_in=check_in,
            check_out=check_out,
            total_hours=total_hours,
            late_after=late_after,
            policy=self._policy,
        )

        notes = [n for n in (decision.note, self._manual_note(ordered)) if n]
        if context.on_leave and decision.status in (
            AttendanceStatus.PRESENT,
            AttendanceStatus.LATE,
            AttendanceStatus.HALF_DAY,
        ):
            notes.append(PRESENT_ON_LEAVE_NOTE)

        return DailyAttendanceRecord(
            employee_id=employee_id,
            work_date=work_date,
            status=decision.status,
            check_in_time=check_in,
            check_out_time=check_out,
            break_intervals=tuple(breaks),
            total_hours=round(total_hours, HOURS_PRECISION),
            break_hours=round(break_hours, HOURS_PRECISION),
            overtime_hours=round(overtime_hours, HOURS_PRECISION),
            late_by_minutes=decision.late_by_minutes if decision.status == AttendanceStatus.LATE else None,
            note="; ".join(notes) or None,
        )

    def _late_after(self, work_date: date) -> datetime:
        start = local_instant(work_date, self._policy.shift_start, self._policy.timezone)
        return start + timedelta(minutes=int(self._policy.grace_minutes))

    @staticmethod
    def _envelope(
        ordered: Sequence[AttendanceEvent],
    ) -> tuple[Optional[datetime], Optional[datetime], list[BreakInterval]]:
        check_in: Optional[datetime] = None
        check_out: Optional[datetime] = None
        breaks: list[BreakInterval] = []
        open_start: Optional[datetime] = None

        for event in ordered:
            ts = ensure_aware(event.timestamp)
            if event.event_type == EventType.CHECK_IN:
                if check_in is None:
                    check_in = ts
            elif check_in is None:
                continue
            elif event.event_type == EventType.BREAK_IN:
                if open_start is None:
                    open_start = ts
            elif event.event_type == EventType.BREAK_OUT:
                if open_start is not None:
                    breaks.append(BreakInterval(start=open_start, end=ts))
                    open_start = None
            elif event.event_type == EventType.CHECK_OUT:
                check_out = ts
                break

        if open_start is not None:
            # Unclosed break: kept visible, excluded from break_hours.
            breaks.append(BreakInterval(start=open_start, end=None))
        return check_in, check_out, breaks

    @staticmethod
    def _manual_note(ordered: Sequence[AttendanceEvent]) -> Optional[str]:
        notes = [e.note for e in ordered if e.note]
        return "; ".join(dict.fromkeys(notes)) or None

    @staticmethod
    def _without_events(employee_id: str, work_date: date, context: DayContext) -> DailyAttendanceRecord:
        if context.day_kind is not None:
            status = context.day_kind
        elif context.on_leave:
            status = AttendanceStatus.LEAVE
        else:
            status = AttendanceStatus.ABSENT
        return DailyAttendanceRecord(employee_id=employee_id, work_date=work_date, status=status)
