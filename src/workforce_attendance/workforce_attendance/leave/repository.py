from __future__ import annotations

from datetime import date
from typing import AbstractSet, Protocol


class LeaveRepository(Protocol):
    """Read-only view of the leave workflow: approved leave only.

    Requesting and approving leave happens elsewhere.
    """

    def approved_leave_dates(self, employee_id: str, start: date, end: date) -> AbstractSet[date]:
        raise NotImplementedError
