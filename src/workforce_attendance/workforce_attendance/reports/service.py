from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceEvent, DailyAttendanceRecord
from ..attendance.repository import EventLogRepository
from ..common.datetime_utils import month_bounds
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_TREND_DAYS
from ..core.exceptions import EmployeeNotFound, InvalidDateRange
from ..leave.repository import LeaveRepository
from ..users.model import Employee
from ..users.repository import DepartmentRepository, EmployeeRepository
from ..workdays.calculator import WorkingDaysCalculator
from . import projection
from .aggregator import MonthlyAggregator
from .model import MonthlyReport

logger = logging.getLogger(__name__)


class ReportService:
    """Read side: monthly summaries, department roll-ups, trends.

    All figures come from MonthlyAggregator so the personal dashboard, the
    admin report and the supervisor report always agree.
    """

    def __init__(
        self,
        events: EventLogRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        leave: LeaveRepository,
        aggregator: MonthlyAggregator,
        workdays: WorkingDaysCalculator,
    ):
        self._events = events
        self._employees = employees
        self._departments = departments
        self._leave = leave
        self._aggregator = aggregator
        self._workdays = workdays

    def _events_by_employee(
        self, employees: list[Employee], start: date, end: date
    ) -> dict[str, list[AttendanceEvent]]:
        out: dict[str, list[AttendanceEvent]] = {e.employee_id: [] for e in employees}
        if not employees:
            return out
        for event in self._events.list_for_range(
            start_date=start, end_date=end, employee_ids=[e.employee_id for e in employees]
        ):
            out.setdefault(event.employee_id, []).append(event)
        return out

    def get_monthly_summary(self, employee_id: str, year: int, month: int) -> MonthlyReport:
        employee_id = require_non_empty(employee_id, "Employee ID")
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise EmployeeNotFound(f"Employee {employee_id} not found")

        start, end = month_bounds(year, month)
        events = self._events.list_for_range(start_date=start, end_date=end, employee_ids=[employee.employee_id])
        leave_dates = self._leave.approved_leave_dates(employee.employee_id, start, end)

        days = self._aggregator.compile_month(employee.employee_id, year, month, events, leave_dates)
        summary = self._aggregator.aggregate(employee.employee_id, year, month, days, leave_dates)
        logger.debug("Monthly summary for %s %04d-%02d: %s", employee.employee_id, year, month, summary)
        return MonthlyReport(summary=summary, days=days)

    def _per_employee(self, start: date, end: date, dept_id: Optional[int]):
        """Yield (employee, leave_dates, records) for every active employee in scope."""

        employees = list(self._employees.list_active(dept_id=dept_id))
        events = self._events_by_employee(employees, start, end)
        holidays = self._workdays.holidays_between(start, end)
        for employee in employees:
            leave_dates = self._leave.approved_leave_dates(employee.employee_id, start, end)
            records = self._aggregator.compile_range(
                employee.employee_id, start, end, events[employee.employee_id], leave_dates, holidays
            )
            yield employee, leave_dates, records

    def get_department_report(self, year: int, month: int, dept_id: Optional[int] = None) -> dict:
        start, end = month_bounds(year, month)
        working_days = self._workdays.count(start, end)

        rows: list[dict] = []
        summaries = []
        employees: dict[str, Employee] = {}
        for employee, leave_dates, records in self._per_employee(start, end, dept_id):
            summary = self._aggregator.aggregate(
                employee.employee_id, year, month, records, leave_dates, working_days=working_days
            )
            employees[employee.employee_id] = employee
            summaries.append(summary)
            rows.append(projection.summary_row(summary, employee))

        departments = self._departments.list_all()
        if dept_id is not None:
            departments = [d for d in departments if d.dept_id == dept_id]

        return {
            "year": int(year),
            "month": int(month),
            "workingDays": working_days,
            "employees": rows,
            "departments": projection.department_rollup(summaries, employees, departments),
        }

    def get_daily_trend(
        self,
        start: date,
        end: date,
        last_n: Optional[int] = DEFAULT_TREND_DAYS,
        dept_id: Optional[int] = None,
    ) -> list[dict]:
        if start > end:
            raise InvalidDateRange(f"Start date {start} is after end date {end}")

        records: list[DailyAttendanceRecord] = []
        for _employee, _leave, employee_records in self._per_employee(start, end, dept_id):
            records.extend(employee_records)
        return projection.daily_trend(records, last_n)

    def get_range_summary(self, start: date, end: date, dept_id: Optional[int] = None) -> list[dict]:
        """Per-employee counters over an arbitrary window, e.g. the current week."""

        if start > end:
            raise InvalidDateRange(f"Start date {start} is after end date {end}")
        working_days = self._workdays.count(start, end)

        rows = []
        for employee, leave_dates, records in self._per_employee(start, end, dept_id):
            summary = self._aggregator.aggregate_range(
                employee.employee_id, start, end, records, leave_dates, working_days=working_days
            )
            rows.append(projection.range_row(summary, employee))
        return rows
