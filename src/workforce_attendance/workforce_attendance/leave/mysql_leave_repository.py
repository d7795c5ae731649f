from __future__ import annotations

from datetime import date, timedelta
from typing import AbstractSet

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import LeaveRepository

APPROVED = "APPROVED"


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def approved_leave_dates(self, employee_id: str, start: date, end: date) -> AbstractSet[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT start_date, end_date
                FROM leave_requests
                WHERE employee_id=%s AND status=%s
                  AND start_date <= %s AND end_date >= %s
                """,
                (str(employee_id), APPROVED, end, start),
            )
            rows = fetchall(cur)

        days: set[date] = set()
        for r in rows:
            day = max(r["start_date"], start)
            last = min(r["end_date"], end)
            while day <= last:
                days.add(day)
                day += timedelta(days=1)
        return frozenset(days)
