"""Clock and timezone helpers.

SQLite hands datetimes back without tzinfo, so everything read from the
database goes through ``as_utc`` before being compared with ``utcnow()``.
"""

from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from familyhub.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values, convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_tz() -> Optional[tzinfo]:
    """Household timezone from FAMILYHUB_TIMEZONE.

    None means the server's local zone, applied per instant with ``astimezone()``.
    """
    if settings.timezone:
        return ZoneInfo(settings.timezone)
    return None


def isoformat(value: datetime) -> str:
    """ISO-8601 in UTC with a trailing Z, the format clients parse."""
    return as_utc(value).isoformat().replace("+00:00", "Z")


def format_remaining(seconds: float) -> str:
    """Human readable countdown: '3h 12m', '45m' or 'Now'."""
    if seconds <= 0:
        return "Now"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
