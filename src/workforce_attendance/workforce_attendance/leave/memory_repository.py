from __future__ import annotations

from datetime import date
from typing import AbstractSet, Iterable, Mapping

from .repository import LeaveRepository


class InMemoryLeaveRepository(LeaveRepository):
    def __init__(self, leave_by_employee: Mapping[str, Iterable[date]] | None = None):
        self._leave = {str(k): frozenset(v) for k, v in (leave_by_employee or {}).items()}

    def approved_leave_dates(self, employee_id: str, start: date, end: date) -> AbstractSet[date]:
        return frozenset(d for d in self._leave.get(str(employee_id), ()) if start <= d <= end)
