from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from src.workforce_attendance.workforce_attendance.attendance.model import BreakInterval, DailyAttendanceRecord
from src.workforce_attendance.workforce_attendance.core.enums import AttendanceStatus
from src.workforce_attendance.workforce_attendance.reports.model import MonthlySummary
from src.workforce_attendance.workforce_attendance.reports.projection import (
    UNASSIGNED_DEPARTMENT,
    daily_trend,
    department_rollup,
    record_row,
    summary_row,
)
from src.workforce_attendance.workforce_attendance.users.model import Department, Employee

ASHA = Employee(employee_id="E1", full_name="Asha Rao", dept_id=1, dept_name="IT")
BEN = Employee(employee_id="E2", full_name="Ben Ode", dept_id=1, dept_name="IT")
CY = Employee(employee_id="E3", full_name="Cy Lin")


def _summary(employee_id: str, present: int, rate: float, overtime: float = 0.0) -> MonthlySummary:
    return MonthlySummary(
        employee_id=employee_id,
        year=2026,
        month=3,
        working_days=22,
        present_days=present,
        absent_days=22 - present,
        late_days=1,
        half_days=0,
        leave_days=0,
        attendance_rate=rate,
        average_hours=8.0,
        total_hours=8.0 * present,
        total_break_hours=0.5 * present,
        total_overtime_hours=overtime,
    )


def test_record_row_uses_shared_field_names():
    record = DailyAttendanceRecord(
        employee_id="E1",
        work_date=date(2026, 3, 3),
        status=AttendanceStatus.LATE,
        check_in_time=datetime(2026, 3, 3, 4, 15, tzinfo=timezone.utc),
        check_out_time=datetime(2026, 3, 3, 13, 0, tzinfo=timezone.utc),
        break_intervals=(
            BreakInterval(
                start=datetime(2026, 3, 3, 8, 0, tzinfo=timezone.utc),
                end=datetime(2026, 3, 3, 8, 30, tzinfo=timezone.utc),
            ),
        ),
        total_hours=8.25,
        break_hours=0.5,
        overtime_hours=0.25,
        late_by_minutes=15,
    )

    row = record_row(record, ASHA, tz=ZoneInfo("Asia/Kolkata"))

    assert row == {
        "employeeId": "E1",
        "employeeName": "Asha Rao",
        "date": "2026-03-03",
        "checkIn": "09:45",
        "checkOut": "18:30",
        "status": "LATE",
        "totalHours": 8.25,
        "overtime": 0.25,
        "breakTime": 0.5,
        "lateByMinutes": 15,
        "isOnBreak": False,
        "note": None,
    }


def test_record_row_for_absent_day():
    row = record_row(DailyAttendanceRecord(employee_id="E2", work_date=date(2026, 3, 3), status=AttendanceStatus.ABSENT))

    assert row["checkIn"] is None
    assert row["checkOut"] is None
    assert row["employeeName"] is None
    assert row["status"] == "ABSENT"


def test_summary_row_copies_counters():
    row = summary_row(_summary("E1", 20, 90.91, 3.5), ASHA)

    assert row["employeeName"] == "Asha Rao"
    assert row["department"] == "IT"
    assert row["presentDays"] == 20
    assert row["absentDays"] == 2
    assert row["attendanceRate"] == 90.91
    assert row["totalOvertimeHours"] == 3.5


def test_department_rollup_sums_counters_and_averages_rates():
    employees = {e.employee_id: e for e in (ASHA, BEN, CY)}
    summaries = [_summary("E1", 20, 90.0, 2.0), _summary("E2", 10, 50.0, 1.25), _summary("E3", 22, 100.0)]
    departments = [Department(dept_id=1, dept_name="IT"), Department(dept_id=2, dept_name="HR")]

    rows = {r["department"]: r for r in department_rollup(summaries, employees, departments)}

    it = rows["IT"]
    assert it["employees"] == 2
    assert it["presentDays"] == 30
    assert it["absentDays"] == 14
    assert it["lateDays"] == 2
    assert it["totalOvertimeHours"] == 3.25
    assert it["averageAttendanceRate"] == 70.0

    assert rows["HR"]["employees"] == 0
    assert rows["HR"]["averageAttendanceRate"] == 0.0
    assert rows[UNASSIGNED_DEPARTMENT]["presentDays"] == 22


def test_daily_trend_counts_statuses_and_truncates():
    def rec(day: int, employee_id: str, status: AttendanceStatus):
        return DailyAttendanceRecord(employee_id=employee_id, work_date=date(2026, 3, day), status=status)

    records = [
        rec(2, "E1", AttendanceStatus.PRESENT),
        rec(2, "E2", AttendanceStatus.LATE),
        rec(2, "E3", AttendanceStatus.ABSENT),
        rec(3, "E1", AttendanceStatus.HALF_DAY),
        rec(3, "E2", AttendanceStatus.LEAVE),
        rec(3, "E3", AttendanceStatus.CHECKED_IN),
        rec(1, "E1", AttendanceStatus.WEEKEND),
    ]

    series = daily_trend(records)

    assert [p["date"] for p in series] == ["2026-03-01", "2026-03-02", "2026-03-03"]
    assert series[0]["nonWorking"] == 1
    assert series[1]["present"] == 2
    assert series[1]["late"] == 1
    assert series[1]["absent"] == 1
    assert series[2]["halfDay"] == 1
    assert series[2]["leave"] == 1
    assert series[2]["inProgress"] == 1

    assert [p["date"] for p in daily_trend(records, last_n=2)] == ["2026-03-02", "2026-03-03"]
    assert daily_trend(records, last_n=0) == []
