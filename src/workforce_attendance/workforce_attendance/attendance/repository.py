from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent


class EventLogRepository(Protocol):
    """Append-only store of attendance events.

    Events come back ordered by timestamp. `append` is an optimistic write:
    `expected_count` is how many events the writer saw for that
    (employee, date); a mismatch raises ConcurrentModification.
    """

    def list_for_day(self, employee_id: str, work_date: date) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def append(self, event: AttendanceEvent, *, expected_count: int) -> AttendanceEvent:
        raise NotImplementedError
