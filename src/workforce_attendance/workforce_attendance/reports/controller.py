from __future__ import annotations

from datetime import timedelta
from typing import Optional

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.responses import api_errors, ok
from ..common.validators import require_positive_int
from ..container import Container
from ..core.exceptions import ValidationError
from .projection import record_row, summary_row


def register(app: Flask, container: Container) -> None:
    reports = container.report_service
    tz = container.timezone
    trend_days = container.trend_days

    def _year_month() -> tuple[int, int]:
        today = container.attendance_service.today()
        year = require_positive_int(request.args.get("year", today.year), "year")
        month = require_positive_int(request.args.get("month", today.month), "month")
        return year, month

    def _dept_id() -> Optional[int]:
        raw = request.args.get("deptId")
        return require_positive_int(raw, "deptId") if raw else None

    @app.route("/api/reports/monthly/<employee_id>", methods=["GET"], endpoint="api_monthly_summary")
    @api_errors
    def monthly_summary(employee_id: str):
        year, month = _year_month()
        report = reports.get_monthly_summary(employee_id, year, month)
        employee = container.employees_repo.get_by_id(report.summary.employee_id)
        return ok(
            {
                "summary": summary_row(report.summary, employee),
                "days": [record_row(r, employee, tz=tz) for r in report.days],
            }
        )

    @app.route("/api/reports/departments", methods=["GET"], endpoint="api_department_report")
    @api_errors
    def department_report():
        year, month = _year_month()
        return ok(reports.get_department_report(year, month, dept_id=_dept_id()))

    @app.route("/api/reports/trend", methods=["GET"], endpoint="api_daily_trend")
    @api_errors
    def daily_trend():
        today = container.attendance_service.today()
        end_s = request.args.get("end")
        start_s = request.args.get("start")
        end = parse_iso_date(end_s) if end_s else today
        start = parse_iso_date(start_s) if start_s else end.replace(day=1)

        days_s = request.args.get("days")
        try:
            last_n = int(days_s) if days_s else trend_days
        except ValueError:
            raise ValidationError("days must be an integer")
        if last_n < 0:
            raise ValidationError("days must not be negative")

        series = reports.get_daily_trend(start, end, last_n, dept_id=_dept_id())
        return ok(series, start=start.isoformat(), end=end.isoformat())

    @app.route("/api/reports/summary", methods=["GET"], endpoint="api_range_summary")
    @api_errors
    def range_summary():
        today = container.attendance_service.today()
        end_s = request.args.get("end")
        start_s = request.args.get("start")
        end = parse_iso_date(end_s) if end_s else today
        # Default window: the current week, Monday through `end`.
        start = parse_iso_date(start_s) if start_s else end - timedelta(days=end.weekday())

        rows = reports.get_range_summary(start, end, dept_id=_dept_id())
        return ok(rows, start=start.isoformat(), end=end.isoformat())
