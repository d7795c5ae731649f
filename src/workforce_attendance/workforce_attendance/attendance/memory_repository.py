from __future__ import annotations

from dataclasses import replace
from datetime import date
from threading import Lock
from typing import Optional, Sequence

from ..core.exceptions import ConcurrentModification
from .model import AttendanceEvent
from .repository import EventLogRepository


class InMemoryEventLog(EventLogRepository):
    """Process-local event log, used by the `memory` store and in tests."""

    def __init__(self, events: Sequence[AttendanceEvent] = ()):
        self._lock = Lock()
        self._by_day: dict[tuple[str, date], list[AttendanceEvent]] = {}
        self._next_id = 0
        for event in events:
            key = (event.employee_id, event.work_date)
            self.append(event, expected_count=len(self._by_day.get(key, ())))

    def list_for_day(self, employee_id: str, work_date: date) -> Sequence[AttendanceEvent]:
        with self._lock:
            return tuple(self._by_day.get((str(employee_id), work_date), ()))

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[AttendanceEvent]:
        wanted = {str(e) for e in employee_ids} if employee_ids is not None else None
        with self._lock:
            items = [
                event
                for (employee_id, work_date), events in self._by_day.items()
                if start_date <= work_date <= end_date and (wanted is None or employee_id in wanted)
                for event in events
            ]
        items.sort(key=lambda e: (e.employee_id, e.work_date, e.timestamp))
        return tuple(items)

    def append(self, event: AttendanceEvent, *, expected_count: int) -> AttendanceEvent:
        key = (str(event.employee_id), event.work_date)
        with self._lock:
            day = self._by_day.setdefault(key, [])
            if len(day) != int(expected_count):
                raise ConcurrentModification(
                    "attendance for this day changed while the action was being recorded, retry"
                )
            self._next_id += 1
            stored = replace(event, event_id=self._next_id)
            day.append(stored)
            return stored
