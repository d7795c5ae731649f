from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles known to the reporting screens."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    MANAGER = "manager"
    SUPERVISOR = "supervisor"
    EMPLOYEE = "employee"


class EventType(str, Enum):
    """One timestamped attendance action."""

    CHECK_IN = "CHECK_IN"
    BREAK_IN = "BREAK_IN"
    BREAK_OUT = "BREAK_OUT"
    CHECK_OUT = "CHECK_OUT"


class EventSource(str, Enum):
    SELF = "SELF"
    MANUAL = "MANUAL"


class DayState(str, Enum):
    """Where a subject stands for one calendar day."""

    NOT_CHECKED_IN = "NOT_CHECKED_IN"
    CHECKED_IN = "CHECKED_IN"
    ON_BREAK = "ON_BREAK"
    CHECKED_OUT = "CHECKED_OUT"


class AttendanceStatus(str, Enum):
    """Closed set of daily statuses shared by every report."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    HALF_DAY = "HALF_DAY"
    ABSENT = "ABSENT"
    LEAVE = "LEAVE"
    WEEKEND = "WEEKEND"
    HOLIDAY = "HOLIDAY"
    CHECKED_IN = "CHECKED_IN"


class CheckoutBreakPolicy(str, Enum):
    """What a check-out does while a break is still open."""

    REJECT = "reject"
    AUTO_CLOSE = "auto_close"
