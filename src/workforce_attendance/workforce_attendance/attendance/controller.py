from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, request

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.responses import api_errors, ok
from ..common.validators import require_non_empty
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError
from ..reports.projection import record_row

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service
    tz = container.timezone

    def _employee_from_body() -> str:
        data = request.get_json(silent=True) or {}
        return require_non_empty(data.get("employeeId"), "employeeId")

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="api_checkin")
    @api_errors
    def checkin():
        result = service.check_in(_employee_from_body())
        return ok(result, message="Checked in successfully")

    @app.route("/api/attendance/breakin", methods=["POST"], endpoint="api_breakin")
    @api_errors
    def breakin():
        result = service.break_in(_employee_from_body())
        return ok(result, message="Break started")

    @app.route("/api/attendance/breakout", methods=["POST"], endpoint="api_breakout")
    @api_errors
    def breakout():
        result = service.break_out(_employee_from_body())
        return ok(result, message="Break ended")

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_checkout")
    @api_errors
    def checkout():
        result = service.check_out(_employee_from_body())
        return ok(result, message="Checked out successfully")

    @app.route("/api/attendance/status/<employee_id>", methods=["GET"], endpoint="api_today_status")
    @api_errors
    def today_status(employee_id: str):
        status = service.get_today_status(employee_id)
        return ok(
            {
                "date": status.work_date.isoformat(),
                "state": status.state.value,
                "allowedActions": [a.value for a in status.allowed_actions],
                "checkInTime": status.check_in_time.astimezone(tz).isoformat() if status.check_in_time else None,
                "checkOutTime": status.check_out_time.astimezone(tz).isoformat() if status.check_out_time else None,
                "breakStartTime": (
                    status.break_start_time.astimezone(tz).isoformat() if status.break_start_time else None
                ),
                "record": record_row(status.record, tz=tz),
            }
        )

    @app.route("/api/attendance/history/<employee_id>", methods=["GET"], endpoint="api_history")
    @api_errors
    def history(employee_id: str):
        today = service.today()
        end_s = request.args.get("end")
        start_s = request.args.get("start")
        end = parse_iso_date(end_s) if end_s else today
        start = parse_iso_date(start_s) if start_s else end - timedelta(days=DEFAULT_HISTORY_LIMIT - 1)

        page = service.get_history(
            employee_id,
            start=start,
            end=end,
            page=request.args.get("page", 1),
            limit=request.args.get("limit", DEFAULT_HISTORY_LIMIT),
        )
        employee = page["employee"]
        return ok(
            [record_row(r, employee, tz=tz) for r in page["items"]],
            pagination=page["pagination"],
        )

    @app.route("/api/attendance/team/<supervisor_id>", methods=["GET"], endpoint="api_team_day")
    @api_errors
    def team_day(supervisor_id: str):
        date_s = request.args.get("date")
        work_date = parse_iso_date(date_s) if date_s else service.today()
        rows = [record_row(r, e, tz=tz) for e, r in service.get_team_day(supervisor_id, work_date)]
        return ok(rows, date=work_date.isoformat())

    @app.route("/api/attendance/manual", methods=["POST"], endpoint="api_manual_attendance")
    @api_errors
    def manual_entry():
        data = request.get_json(silent=True) or {}
        employee_id = require_non_empty(data.get("employeeId"), "employeeId")
        work_date = parse_iso_date(require_non_empty(data.get("date"), "date"))
        check_in = parse_hhmm(require_non_empty(data.get("checkIn"), "checkIn"))
        check_out = parse_hhmm(data["checkOut"]) if data.get("checkOut") else None

        raw_breaks = data.get("breaks") or []
        if not isinstance(raw_breaks, list):
            raise ValidationError("breaks must be a list of {start, end} objects")
        breaks = []
        for b in raw_breaks:
            if not isinstance(b, dict) or not b.get("start"):
                raise ValidationError("each break needs a start time")
            breaks.append((parse_hhmm(b["start"]), parse_hhmm(b["end"]) if b.get("end") else None))

        record = service.record_manual_day(
            employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=check_out,
            breaks=breaks,
            note=data.get("note"),
        )
        logger.info("Manual entry accepted for %s on %s", employee_id, work_date)
        return ok(record_row(record, tz=tz), status=201, message="Manual attendance recorded")
