from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import ShiftPolicy
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in, closed day."""

    def decide(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        total_hours: float,
        late_after: datetime,
        policy: ShiftPolicy,
    ) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
