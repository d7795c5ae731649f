from __future__ import annotations

from dataclasses import replace
from datetime import date, timezone
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import ensure_aware
from ..core.enums import EventSource, EventType
from ..core.exceptions import ConcurrentModification, PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, is_duplicate_key
from .model import AttendanceEvent
from .repository import EventLogRepository

_COLUMNS = "event_id, employee_id, event_type, occurred_at, work_date, source, note"


def _to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        employee_id=str(r["employee_id"]),
        event_type=EventType(r["event_type"]),
        timestamp=ensure_aware(r["occurred_at"]),
        work_date=r["work_date"],
        source=EventSource(r.get("source") or EventSource.SELF.value),
        note=r.get("note"),
    )


class MySQLEventLogRepository(EventLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_day(self, employee_id: str, work_date: date) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE employee_id=%s AND work_date=%s
                ORDER BY occurred_at ASC, seq ASC
                """,
                (str(employee_id), work_date),
            )
            return tuple(_to_event(r) for r in fetchall(cur))

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[AttendanceEvent]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if employee_ids is not None:
            if not employee_ids:
                return ()
            placeholders = ",".join(["%s"] * len(employee_ids))
            clauses.append(f"employee_id IN ({placeholders})")
            params.extend(str(e) for e in employee_ids)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE {where}
                ORDER BY employee_id ASC, work_date ASC, occurred_at ASC, seq ASC
                """,
                tuple(params),
            )
            return tuple(_to_event(r) for r in fetchall(cur))

    def append(self, event: AttendanceEvent, *, expected_count: int) -> AttendanceEvent:
        # seq is unique per (employee_id, work_date): a second writer that read
        # the same day state collides here instead of appending a duplicate.
        occurred_at = ensure_aware(event.timestamp).astimezone(timezone.utc).replace(tzinfo=None)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_events(employee_id, work_date, seq, event_type, occurred_at, source, note)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        str(event.employee_id),
                        event.work_date,
                        int(expected_count) + 1,
                        event.event_type.value,
                        occurred_at,
                        event.source.value,
                        event.note,
                    ),
                )
                return replace(event, event_id=int(cur.lastrowid))
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConcurrentModification(
                    "attendance for this day changed while the action was being recorded, retry"
                ) from e
            raise PersistenceError("attendance event rejected by the store") from e
