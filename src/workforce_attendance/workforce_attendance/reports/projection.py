from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime, tzinfo
from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import DailyAttendanceRecord
from ..core.constants import HOURS_PRECISION, RATE_PRECISION
from ..core.enums import AttendanceStatus
from ..users.model import Department, Employee
from .model import MonthlySummary, RangeSummary

# Shaping only: every number below was already computed by the compiler or
# the aggregator, this module never re-derives a status or a counter.

UNASSIGNED_DEPARTMENT = "Unassigned"


def _clock(instant: Optional[datetime], tz: Optional[tzinfo]) -> Optional[str]:
    if instant is None:
        return None
    if tz is not None:
        instant = instant.astimezone(tz)
    return instant.strftime("%H:%M")


def record_row(
    record: DailyAttendanceRecord,
    employee: Optional[Employee] = None,
    *,
    tz: Optional[tzinfo] = None,
) -> dict:
    """The record shape every caller (dashboard, admin, supervisor) reads."""

    return {
        "employeeId": record.employee_id,
        "employeeName": employee.full_name if employee else None,
        "date": record.work_date.isoformat(),
        "checkIn": _clock(record.check_in_time, tz),
        "checkOut": _clock(record.check_out_time, tz),
        "status": record.status.value,
        "totalHours": record.total_hours,
        "overtime": record.overtime_hours,
        "breakTime": record.break_hours,
        "lateByMinutes": record.late_by_minutes,
        "isOnBreak": record.open_break,
        "note": record.note,
    }


def _counters(summary: MonthlySummary | RangeSummary) -> dict:
    return {
        "workingDays": summary.working_days,
        "presentDays": summary.present_days,
        "absentDays": summary.absent_days,
        "lateDays": summary.late_days,
        "halfDays": summary.half_days,
        "leaveDays": summary.leave_days,
        "attendanceRate": summary.attendance_rate,
        "averageHours": summary.average_hours,
        "totalHours": summary.total_hours,
        "totalBreakHours": summary.total_break_hours,
        "totalOvertimeHours": summary.total_overtime_hours,
    }


def summary_row(summary: MonthlySummary, employee: Optional[Employee] = None) -> dict:
    row = {
        "employeeId": summary.employee_id,
        "employeeName": employee.full_name if employee else None,
        "department": (employee.dept_name if employee else None),
        "year": summary.year,
        "month": summary.month,
    }
    row.update(_counters(summary))
    return row


def range_row(summary: RangeSummary, employee: Optional[Employee] = None) -> dict:
    row = {
        "employeeId": summary.employee_id,
        "employeeName": employee.full_name if employee else None,
        "department": (employee.dept_name if employee else None),
        "startDate": summary.start_date.isoformat(),
        "endDate": summary.end_date.isoformat(),
    }
    row.update(_counters(summary))
    return row


def department_rollup(
    summaries: Iterable[MonthlySummary | RangeSummary],
    employees: Mapping[str, Employee],
    departments: Sequence[Department] = (),
) -> list[dict]:
    """Group per-employee summaries by department.

    Day counters and hours are summed; rate and average hours are the mean of
    the member values. Departments with no summarised members still appear
    (with zero members) when listed in `departments`.
    """

    groups: "OrderedDict[str, list]" = OrderedDict()
    for d in sorted(departments, key=lambda d: d.dept_name):
        groups[d.dept_name] = []

    for s in summaries:
        employee = employees.get(s.employee_id)
        name = (employee.dept_name if employee else None) or UNASSIGNED_DEPARTMENT
        groups.setdefault(name, []).append(s)

    out: list[dict] = []
    for name, members in groups.items():
        n = len(members)
        out.append(
            {
                "department": name,
                "employees": n,
                "workingDays": sum(m.working_days for m in members),
                "presentDays": sum(m.present_days for m in members),
                "absentDays": sum(m.absent_days for m in members),
                "lateDays": sum(m.late_days for m in members),
                "halfDays": sum(m.half_days for m in members),
                "leaveDays": sum(m.leave_days for m in members),
                "totalOvertimeHours": round(sum(m.total_overtime_hours for m in members), HOURS_PRECISION),
                "averageAttendanceRate": round(sum(m.attendance_rate for m in members) / n, RATE_PRECISION) if n else 0.0,
                "averageHours": round(sum(m.average_hours for m in members) / n, HOURS_PRECISION) if n else 0.0,
            }
        )
    return out


_TREND_BUCKETS = {
    AttendanceStatus.PRESENT: "present",
    AttendanceStatus.LATE: "late",
    AttendanceStatus.HALF_DAY: "halfDay",
    AttendanceStatus.ABSENT: "absent",
    AttendanceStatus.LEAVE: "leave",
    AttendanceStatus.CHECKED_IN: "inProgress",
}


def daily_trend(records: Iterable[DailyAttendanceRecord], last_n: Optional[int] = None) -> list[dict]:
    """Per-day status counts across all subjects, oldest first.

    `present` includes late arrivals, `late` is the sub-count. Weekend and
    holiday rows only contribute to `nonWorking`.
    """

    days: dict[date, dict] = {}
    for r in records:
        bucket = days.get(r.work_date)
        if bucket is None:
            bucket = days[r.work_date] = {
                "date": r.work_date.isoformat(),
                "present": 0,
                "late": 0,
                "halfDay": 0,
                "absent": 0,
                "leave": 0,
                "inProgress": 0,
                "nonWorking": 0,
            }
        key = _TREND_BUCKETS.get(r.status)
        if key is None:
            bucket["nonWorking"] += 1
            continue
        bucket[key] += 1
        if r.status == AttendanceStatus.LATE:
            bucket["present"] += 1

    series = [days[d] for d in sorted(days)]
    if last_n is not None and last_n >= 0:
        series = series[-last_n:] if last_n else []
    return series
