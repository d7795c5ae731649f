import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module, default 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def _csv(name: str, default: str) -> list[str]:
    return [part.strip() for part in os.getenv(name, default).split(",") if part.strip()]


def attendance_settings() -> dict:
    """Organisation attendance policy, read from the environment."""

    return {
        "ORG_TIMEZONE": os.getenv("ORG_TIMEZONE", "Asia/Kolkata"),
        "SHIFT_START": os.getenv("SHIFT_START", "09:00"),
        "GRACE_MINUTES": int(os.getenv("GRACE_MINUTES", "15")),
        "HALF_DAY_THRESHOLD_HOURS": float(os.getenv("HALF_DAY_THRESHOLD_HOURS", "4")),
        "STANDARD_SHIFT_HOURS": float(os.getenv("STANDARD_SHIFT_HOURS", "8")),
        # date.weekday() numbers: Monday=0 ... Sunday=6
        "WEEKEND_DAYS": [int(d) for d in _csv("WEEKEND_DAYS", "5,6")],
        # YYYY-MM-DD, only used by the in-memory store (MySQL reads the holidays table)
        "HOLIDAYS": _csv("HOLIDAYS", ""),
        "CHECKOUT_BREAK_POLICY": os.getenv("CHECKOUT_BREAK_POLICY", "reject"),
        "TREND_DAYS": int(os.getenv("TREND_DAYS", "7")),
    }
