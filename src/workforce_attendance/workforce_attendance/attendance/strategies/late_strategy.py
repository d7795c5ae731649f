from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import ShiftPolicy
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in after the grace period; minutes counted from the end of grace."""

    def decide(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        total_hours: float,
        late_after: datetime,
        policy: ShiftPolicy,
    ) -> StatusDecision:
        late_minutes = int((check_in - late_after).total_seconds() // 60)
        return StatusDecision(status=AttendanceStatus.LATE, late_by_minutes=max(late_minutes, 0))
