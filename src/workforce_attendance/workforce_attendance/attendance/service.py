from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import iter_days, local_date, local_instant, now_utc
from ..common.locks import KeyedLocks
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import CheckoutBreakPolicy, DayState, EventSource, EventType
from ..core.exceptions import EmployeeNotFound, InvalidDateRange, TransitionError, ValidationError
from ..leave.repository import LeaveRepository
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from ..workdays.calculator import WorkingDaysCalculator
from .compiler import DailyRecordCompiler
from .model import AttendanceEvent, DailyAttendanceRecord, DayContext, TodayStatus
from .repository import EventLogRepository
from .state_machine import AttendanceStateMachine

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases: check-in, breaks, check-out, today's status, history.

    Every mutation runs "read day events -> validate -> append" while holding
    the lock for its (employee, date) key. Different keys never wait on each other.
    """

    def __init__(
        self,
        events: EventLogRepository,
        employees: EmployeeRepository,
        compiler: DailyRecordCompiler,
        workdays: WorkingDaysCalculator,
        leave: LeaveRepository,
        *,
        state_machine: Optional[AttendanceStateMachine] = None,
        locks: Optional[KeyedLocks] = None,
        checkout_break_policy: CheckoutBreakPolicy = CheckoutBreakPolicy.REJECT,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._events = events
        self._employees = employees
        self._compiler = compiler
        self._workdays = workdays
        self._leave = leave
        self._machine = state_machine or AttendanceStateMachine()
        self._locks = locks or KeyedLocks()
        self._checkout_break_policy = CheckoutBreakPolicy(checkout_break_policy)
        self._clock = clock

    @property
    def timezone(self):
        return self._compiler.policy.timezone

    def today(self) -> date:
        return local_date(self._clock(), self.timezone)

    def _require_employee(self, employee_id: str) -> Employee:
        employee_id = require_non_empty(employee_id, "Employee ID")
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise EmployeeNotFound(f"Employee {employee_id} not found")
        return employee

    def _local(self, instant: datetime) -> datetime:
        return instant.astimezone(self.timezone)

    # -------- mutations --------
    def _record(self, employee_id: str, event_type: EventType, now: Optional[datetime]) -> list[AttendanceEvent]:
        employee = self._require_employee(employee_id)
        now = now or self._clock()
        work_date = local_date(now, self.timezone)
        key = (employee.employee_id, work_date)

        with self._locks.hold(key):
            day_events = list(self._events.list_for_day(employee.employee_id, work_date))
            state = self._machine.replay(day_events)
            candidate = AttendanceEvent(
                employee_id=employee.employee_id,
                event_type=event_type,
                timestamp=now,
                work_date=work_date,
            )
            try:
                self._machine.check_order(day_events, candidate, state)
                to_append = []
                if (
                    event_type == EventType.CHECK_OUT
                    and state == DayState.ON_BREAK
                    and self._checkout_break_policy == CheckoutBreakPolicy.AUTO_CLOSE
                ):
                    to_append.append(
                        AttendanceEvent(
                            employee_id=employee.employee_id,
                            event_type=EventType.BREAK_OUT,
                            timestamp=now,
                            work_date=work_date,
                            note="break closed at check-out",
                        )
                    )
                    state = self._machine.apply(state, EventType.BREAK_OUT)
                self._machine.apply(state, event_type)
                to_append.append(candidate)
            except TransitionError as e:
                logger.warning("Refused %s for employee %s on %s: %s", event_type.value, employee.employee_id, work_date, e)
                raise

            for event in to_append:
                stored = self._events.append(event, expected_count=len(day_events))
                day_events.append(stored)

        logger.info("Recorded %s for employee %s on %s", event_type.value, employee.employee_id, work_date)
        return day_events

    def check_in(self, employee_id: str, *, now: Optional[datetime] = None) -> dict:
        events = self._record(employee_id, EventType.CHECK_IN, now)
        return {"checkInTime": self._local(events[-1].timestamp).isoformat()}

    def break_in(self, employee_id: str, *, now: Optional[datetime] = None) -> dict:
        events = self._record(employee_id, EventType.BREAK_IN, now)
        return {"breakStartTime": self._local(events[-1].timestamp).isoformat()}

    def break_out(self, employee_id: str, *, now: Optional[datetime] = None) -> dict:
        events = self._record(employee_id, EventType.BREAK_OUT, now)
        end = events[-1].timestamp
        start = next(e.timestamp for e in reversed(events) if e.event_type == EventType.BREAK_IN)
        return {
            "breakEndTime": self._local(end).isoformat(),
            "breakDurationMinutes": int((end - start).total_seconds() // 60),
        }

    def check_out(self, employee_id: str, *, now: Optional[datetime] = None) -> dict:
        events = self._record(employee_id, EventType.CHECK_OUT, now)
        last = events[-1]
        record = self._compile(last.employee_id, last.work_date, events)
        return {
            "checkOutTime": self._local(last.timestamp).isoformat(),
            "totalHours": record.total_hours,
        }

    def record_manual_day(
        self,
        employee_id: str,
        *,
        work_date: date,
        check_in: time,
        check_out: Optional[time] = None,
        breaks: Sequence[tuple[time, Optional[time]]] = (),
        note: Optional[str] = None,
    ) -> DailyAttendanceRecord:
        """Admin entry for a day with no events at all.

        Existing events are never rewritten; each manual event goes through the
        same state machine as a self-service action.
        """

        employee = self._require_employee(employee_id)
        if work_date > self.today():
            raise ValidationError("Manual attendance cannot be recorded for a future date")

        plan: list[tuple[EventType, time]] = [(EventType.CHECK_IN, check_in)]
        for start, end in breaks:
            plan.append((EventType.BREAK_IN, start))
            if end is not None:
                plan.append((EventType.BREAK_OUT, end))
        if check_out is not None:
            plan.append((EventType.CHECK_OUT, check_out))

        note = (note or "").strip() or "manual entry"
        key = (employee.employee_id, work_date)
        with self._locks.hold(key):
            existing = list(self._events.list_for_day(employee.employee_id, work_date))
            if existing:
                raise ValidationError(
                    f"Attendance already recorded for {work_date.isoformat()}; corrections must be new events"
                )

            drafted: list[AttendanceEvent] = []
            state = DayState.NOT_CHECKED_IN
            for event_type, at in plan:
                event = AttendanceEvent(
                    employee_id=employee.employee_id,
                    event_type=event_type,
                    timestamp=local_instant(work_date, at, self.timezone),
                    work_date=work_date,
                    source=EventSource.MANUAL,
                    note=note,
                )
                self._machine.check_order(drafted, event, state)
                if (
                    event_type == EventType.CHECK_OUT
                    and state == DayState.ON_BREAK
                    and self._checkout_break_policy == CheckoutBreakPolicy.AUTO_CLOSE
                ):
                    drafted.append(
                        AttendanceEvent(
                            employee_id=employee.employee_id,
                            event_type=EventType.BREAK_OUT,
                            timestamp=event.timestamp,
                            work_date=work_date,
                            source=EventSource.MANUAL,
                            note="break closed at check-out",
                        )
                    )
                    state = self._machine.apply(state, EventType.BREAK_OUT)
                state = self._machine.apply(state, event_type)
                drafted.append(event)

            stored: list[AttendanceEvent] = []
            for event in drafted:
                stored.append(self._events.append(event, expected_count=len(stored)))

        logger.info("Manual attendance recorded for employee %s on %s (%d events)", employee.employee_id, work_date, len(stored))
        return self._compile(employee.employee_id, work_date, stored)

    # -------- reads --------
    def _context(self, employee_id: str, work_date: date) -> DayContext:
        on_leave = work_date in self._leave.approved_leave_dates(employee_id, work_date, work_date)
        return DayContext(day_kind=self._workdays.day_kind(work_date), on_leave=on_leave)

    def _compile(self, employee_id: str, work_date: date, events: Sequence[AttendanceEvent]) -> DailyAttendanceRecord:
        return self._compiler.compile(employee_id, work_date, events, self._context(employee_id, work_date))

    def get_day_record(self, employee_id: str, work_date: date) -> DailyAttendanceRecord:
        employee = self._require_employee(employee_id)
        events = self._events.list_for_day(employee.employee_id, work_date)
        return self._compile(employee.employee_id, work_date, events)

    def get_today_status(self, employee_id: str, *, now: Optional[datetime] = None) -> TodayStatus:
        employee = self._require_employee(employee_id)
        now = now or self._clock()
        today = local_date(now, self.timezone)

        events = self._events.list_for_day(employee.employee_id, today)
        state = self._machine.replay(events)
        record = self._compile(employee.employee_id, today, events)
        open_break = record.break_intervals[-1].start if record.open_break else None

        return TodayStatus(
            employee_id=employee.employee_id,
            work_date=today,
            state=state,
            allowed_actions=self._machine.allowed_actions(state),
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            break_start_time=open_break,
            record=record,
        )

    def get_history(
        self,
        employee_id: str,
        *,
        start: date,
        end: date,
        page: int = 1,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> dict:
        """Daily records for every date in [start, end], newest first, paged."""

        employee = self._require_employee(employee_id)
        page = require_positive_int(page, "page")
        limit = require_positive_int(limit, "limit")
        if start > end:
            raise InvalidDateRange(f"Start date {start} is after end date {end}")

        days = sorted(iter_days(start, end), reverse=True)
        window = days[(page - 1) * limit : page * limit]
        items: list[DailyAttendanceRecord] = []
        if window:
            events = self._events.list_for_range(
                start_date=min(window), end_date=max(window), employee_ids=[employee.employee_id]
            )
            by_day: dict[date, list[AttendanceEvent]] = {}
            for event in events:
                by_day.setdefault(event.work_date, []).append(event)
            leave_days = self._leave.approved_leave_dates(employee.employee_id, min(window), max(window))
            holidays = self._workdays.holidays_between(min(window), max(window))
            for day in window:
                context = DayContext(day_kind=self._workdays.day_kind(day, holidays), on_leave=day in leave_days)
                items.append(self._compiler.compile(employee.employee_id, day, by_day.get(day, ()), context))

        total = len(days)
        return {
            "employee": employee,
            "items": items,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": (total + limit - 1) // limit,
            },
        }

    def get_team_day(self, supervisor_id: str, work_date: date) -> list[tuple[Employee, DailyAttendanceRecord]]:
        """Compiled records of a supervisor's team for one date."""

        supervisor_id = require_non_empty(supervisor_id, "Supervisor ID")
        team = self._employees.list_active(supervisor_id=supervisor_id)
        if not team:
            return []

        events = self._events.list_for_range(
            start_date=work_date, end_date=work_date, employee_ids=[e.employee_id for e in team]
        )
        by_employee: dict[str, list[AttendanceEvent]] = {}
        for event in events:
            by_employee.setdefault(event.employee_id, []).append(event)

        day_kind = self._workdays.day_kind(work_date)
        out = []
        for employee in team:
            on_leave = work_date in self._leave.approved_leave_dates(employee.employee_id, work_date, work_date)
            record = self._compiler.compile(
                employee.employee_id,
                work_date,
                by_employee.get(employee.employee_id, ()),
                DayContext(day_kind=day_kind, on_leave=on_leave),
            )
            out.append((employee, record))
        return out
