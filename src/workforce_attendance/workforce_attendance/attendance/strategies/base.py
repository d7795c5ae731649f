from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import ShiftPolicy


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    late_by_minutes: Optional[int] = None
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a day's attendance status."""

    @abstractmethod
    def decide(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        total_hours: float,
        late_after: datetime,
        policy: ShiftPolicy,
    ) -> StatusDecision:
        raise NotImplementedError
