from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..attendance.model import DailyAttendanceRecord


@dataclass(frozen=True)
class MonthlySummary:
    """Aggregate statistics for one subject over one calendar month.

    Counters always reconcile:
    present_days + half_days + absent_days + leave_days == working_days.
    `late_days` is a sub-count of `present_days`.
    """

    employee_id: str
    year: int
    month: int
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


@dataclass(frozen=True)
class RangeSummary:
    """Same counters as MonthlySummary over an arbitrary date window."""

    employee_id: str
    start_date: date
    end_date: date
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


@dataclass(frozen=True)
class MonthlyReport:
    summary: MonthlySummary
    days: tuple[DailyAttendanceRecord, ...]
