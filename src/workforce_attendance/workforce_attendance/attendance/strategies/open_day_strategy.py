from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import ShiftPolicy
from .base import AttendanceStrategy, StatusDecision


class OpenDayStrategy(AttendanceStrategy):
    """Checked in, never checked out. Stays CHECKED_IN even once the date is over."""

    def decide(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        total_hours: float,
        late_after: datetime,
        policy: ShiftPolicy,
    ) -> StatusDecision:
        note = "late check-in" if check_in > late_after else None
        return StatusDecision(status=AttendanceStatus.CHECKED_IN, note=note)
