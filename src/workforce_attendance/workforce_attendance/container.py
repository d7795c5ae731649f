from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional
from zoneinfo import ZoneInfo

from .attendance.compiler import DailyRecordCompiler
from .attendance.factory import AttendanceStrategyFactory
from .attendance.memory_repository import InMemoryEventLog
from .attendance.model import ShiftPolicy
from .attendance.mysql_event_log_repository import MySQLEventLogRepository
from .attendance.repository import EventLogRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_utc, parse_hhmm, parse_iso_date
from .core import constants
from .core.enums import CheckoutBreakPolicy
from .database.connection import DBConfig, DatabaseConnection
from .leave.memory_repository import InMemoryLeaveRepository
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .reports.aggregator import MonthlyAggregator
from .reports.service import ReportService
from .users.memory_repository import InMemoryEmployeeDirectory
from .users.model import Department, Employee
from .users.mysql_employee_repository import MySQLDepartmentRepository, MySQLEmployeeRepository
from .users.repository import DepartmentRepository, EmployeeRepository
from .workdays.calculator import WorkingDaysCalculator
from .workdays.holidays import MySQLHolidayRepository, StaticHolidayCalendar

STORE_MYSQL = "mysql"
STORE_MEMORY = "memory"


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    events_repo: EventLogRepository
    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    leave_repo: LeaveRepository

    workdays: WorkingDaysCalculator
    compiler: DailyRecordCompiler
    aggregator: MonthlyAggregator

    attendance_service: AttendanceService
    report_service: ReportService

    timezone: ZoneInfo
    trend_days: int


def policy_from_settings(attendance: Mapping) -> ShiftPolicy:
    return ShiftPolicy(
        shift_start=parse_hhmm(str(attendance.get("SHIFT_START", constants.DEFAULT_SHIFT_START))),
        grace_minutes=int(attendance.get("GRACE_MINUTES", constants.DEFAULT_GRACE_MINUTES)),
        half_day_threshold_hours=float(
            attendance.get("HALF_DAY_THRESHOLD_HOURS", constants.DEFAULT_HALF_DAY_THRESHOLD_HOURS)
        ),
        standard_shift_hours=float(attendance.get("STANDARD_SHIFT_HOURS", constants.DEFAULT_STANDARD_SHIFT_HOURS)),
        timezone=ZoneInfo(str(attendance.get("ORG_TIMEZONE", constants.DEFAULT_ORG_TIMEZONE))),
    )


def build_container(
    *,
    db_config: Optional[dict] = None,
    attendance: Optional[Mapping] = None,
    store: str = STORE_MYSQL,
    clock: Callable[[], datetime] = now_utc,
    employees: Iterable[Employee] = (),
    departments: Iterable[Department] = (),
    leave: Optional[Mapping] = None,
) -> Container:
    """Wire repositories and services.

    `store="memory"` keeps everything in process (tests, demos); `employees`,
    `departments` and `leave` seed that store and are ignored for MySQL.
    """

    attendance = dict(attendance or {})
    policy = policy_from_settings(attendance)
    store = (store or STORE_MYSQL).lower()

    conn: Optional[DatabaseConnection] = None
    if store == STORE_MEMORY:
        events_repo = InMemoryEventLog()
        directory = InMemoryEmployeeDirectory(employees, departments)
        employees_repo, departments_repo = directory, directory
        leave_repo = InMemoryLeaveRepository(leave)
        holidays = StaticHolidayCalendar(parse_iso_date(d) for d in attendance.get("HOLIDAYS", ()))
    elif store == STORE_MYSQL:
        if db_config is None:
            raise ValueError("db_config is required for the mysql store")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        events_repo = MySQLEventLogRepository(conn)
        employees_repo = MySQLEmployeeRepository(conn)
        departments_repo = MySQLDepartmentRepository(conn)
        leave_repo = MySQLLeaveRepository(conn)
        holidays = MySQLHolidayRepository(conn)
    else:
        raise ValueError(f"Unknown attendance store {store!r} (expected 'mysql' or 'memory')")

    workdays = WorkingDaysCalculator(
        weekend_days=attendance.get("WEEKEND_DAYS", constants.DEFAULT_WEEKEND_DAYS),
        holidays=holidays,
    )
    compiler = DailyRecordCompiler(policy, strategy_factory=AttendanceStrategyFactory())
    aggregator = MonthlyAggregator(compiler, workdays)

    attendance_service = AttendanceService(
        events_repo,
        employees_repo,
        compiler,
        workdays,
        leave_repo,
        checkout_break_policy=CheckoutBreakPolicy(
            str(attendance.get("CHECKOUT_BREAK_POLICY", CheckoutBreakPolicy.REJECT.value)).lower()
        ),
        clock=clock,
    )
    report_service = ReportService(events_repo, employees_repo, departments_repo, leave_repo, aggregator, workdays)

    return Container(
        conn=conn,
        events_repo=events_repo,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        leave_repo=leave_repo,
        workdays=workdays,
        compiler=compiler,
        aggregator=aggregator,
        attendance_service=attendance_service,
        report_service=report_service,
        timezone=policy.timezone,
        trend_days=int(attendance.get("TREND_DAYS", constants.DEFAULT_TREND_DAYS)),
    )
