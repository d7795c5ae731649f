from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Iterable, Optional, Sequence

from ..attendance.compiler import DailyRecordCompiler
from ..attendance.model import AttendanceEvent, DailyAttendanceRecord, DayContext
from ..common.datetime_utils import iter_days, month_bounds
from ..core.constants import HOURS_PRECISION, RATE_PRECISION
from ..core.enums import AttendanceStatus
from ..workdays.calculator import WorkingDaysCalculator
from .model import MonthlySummary, RangeSummary


@dataclass(frozen=True)
class _Tally:
    working_days: int
    present_days: int
    absent_days: int
    late_days: int
    half_days: int
    leave_days: int
    attendance_rate: float
    average_hours: float
    total_hours: float
    total_break_hours: float
    total_overtime_hours: float


class MonthlyAggregator:
    """The single place attendance statistics are derived.

    Every report (personal dashboard, admin, supervisor) reads its numbers
    from here so the same facts never disagree between screens.
    """

    def __init__(self, compiler: DailyRecordCompiler, workdays: WorkingDaysCalculator):
        self._compiler = compiler
        self._workdays = workdays

    def compile_range(
        self,
        employee_id: str,
        start: date,
        end: date,
        events: Iterable[AttendanceEvent],
        leave_dates: AbstractSet[date],
        holidays: Optional[AbstractSet[date]] = None,
    ) -> tuple[DailyAttendanceRecord, ...]:
        """One record per calendar day in [start, end], none omitted."""

        if holidays is None:
            holidays = self._workdays.holidays_between(start, end)
        by_day: dict[date, list[AttendanceEvent]] = {}
        for event in events:
            if event.employee_id == employee_id:
                by_day.setdefault(event.work_date, []).append(event)

        return tuple(
            self._compiler.compile(
                employee_id,
                day,
                by_day.get(day, ()),
                DayContext(day_kind=self._workdays.day_kind(day, holidays), on_leave=day in leave_dates),
            )
            for day in iter_days(start, end)
        )

    def compile_month(
        self,
        employee_id: str,
        year: int,
        month: int,
        events: Iterable[AttendanceEvent],
        leave_dates: AbstractSet[date],
    ) -> tuple[DailyAttendanceRecord, ...]:
        start, end = month_bounds(year, month)
        return self.compile_range(employee_id, start, end, events, leave_dates)

    def aggregate(
        self,
        employee_id: str,
        year: int,
        month: int,
        records: Sequence[DailyAttendanceRecord],
        leave_dates: AbstractSet[date],
        working_days: Optional[int] = None,
    ) -> MonthlySummary:
        start, end = month_bounds(year, month)
        tally = self._tally(start, end, records, leave_dates, working_days)
        return MonthlySummary(employee_id=employee_id, year=int(year), month=int(month), **tally.__dict__)

    def aggregate_range(
        self,
        employee_id: str,
        start: date,
        end: date,
        records: Sequence[DailyAttendanceRecord],
        leave_dates: AbstractSet[date],
        working_days: Optional[int] = None,
    ) -> RangeSummary:
        tally = self._tally(start, end, records, leave_dates, working_days)
        return RangeSummary(employee_id=employee_id, start_date=start, end_date=end, **tally.__dict__)

    def _tally(
        self,
        start: date,
        end: date,
        records: Sequence[DailyAttendanceRecord],
        leave_dates: AbstractSet[date],
        working_days: Optional[int],
    ) -> _Tally:
        holidays = self._workdays.holidays_between(start, end)
        if working_days is None:
            working_days = self._workdays.count(start, end)

        by_day = {r.work_date: r for r in records if start <= r.work_date <= end}

        present = late = half = leave = 0
        attended_hours: list[float] = []
        total_break = 0.0
        total_overtime = 0.0

        for day in iter_days(start, end):
            record = by_day.get(day)
            attended = record is not None and record.attended

            if record is not None:
                total_break += record.break_hours
                total_overtime += record.overtime_hours
                if attended:
                    attended_hours.append(record.total_hours)

            if self._workdays.day_kind(day, holidays) is not None:
                # Weekend/holiday: outside both numerator and denominator.
                continue

            if attended and record.status == AttendanceStatus.HALF_DAY:
                half += 1
            elif attended:
                present += 1
                if record.status == AttendanceStatus.LATE:
                    late += 1
            elif day in leave_dates or (record is not None and record.status == AttendanceStatus.LEAVE):
                leave += 1

        absent = max(0, int(working_days) - present - half - leave)

        if working_days > 0:
            rate = (present + 0.5 * half) / working_days * 100.0
            rate = round(min(100.0, max(0.0, rate)), RATE_PRECISION)
        else:
            rate = 0.0

        total_hours = sum(attended_hours)
        average = total_hours / len(attended_hours) if attended_hours else 0.0

        return _Tally(
            working_days=int(working_days),
            present_days=present,
            absent_days=absent,
            late_days=late,
            half_days=half,
            leave_days=leave,
            attendance_rate=rate,
            average_hours=round(average, HOURS_PRECISION),
            total_hours=round(total_hours, HOURS_PRECISION),
            total_break_hours=round(total_break, HOURS_PRECISION),
            total_overtime_hours=round(total_overtime, HOURS_PRECISION),
        )
