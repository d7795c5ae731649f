from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .model import ShiftPolicy
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.open_day_strategy import OpenDayStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    Order matters: an open day is never classified, half-day wins over late.
    """

    def for_day(
        self,
        *,
        check_in: datetime,
        check_out: Optional[datetime],
        total_hours: float,
        late_after: datetime,
        policy: ShiftPolicy,
    ) -> AttendanceStrategy:
        if check_out is None:
            return OpenDayStrategy()
        if 0 < total_hours < policy.half_day_threshold_hours:
            return HalfDayStrategy()
        if check_in > late_after:
            return LateStrategy()
        return NormalStrategy()
