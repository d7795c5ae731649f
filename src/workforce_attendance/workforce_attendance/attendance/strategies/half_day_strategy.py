from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import ShiftPolicy
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Worked some time but less than the half-day threshold. Overrides Late."""

    def decide(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        total_hours: float,
        late_after: datetime,
        policy: ShiftPolicy,
    ) -> StatusDecision:
        note = None
        if check_in > late_after:
            note = "late check-in"
        return StatusDecision(status=AttendanceStatus.HALF_DAY, note=note)
