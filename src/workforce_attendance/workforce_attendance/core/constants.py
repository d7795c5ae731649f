"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ORG_TIMEZONE = "Asia/Kolkata"
DEFAULT_SHIFT_START = "09:00"
DEFAULT_GRACE_MINUTES = 15
DEFAULT_HALF_DAY_THRESHOLD_HOURS = 4.0
DEFAULT_STANDARD_SHIFT_HOURS = 8.0
DEFAULT_WEEKEND_DAYS = (5, 6)
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_TREND_DAYS = 7

HOURS_PRECISION = 2
RATE_PRECISION = 2

PRESENT_ON_LEAVE_NOTE = "present on approved leave day"
