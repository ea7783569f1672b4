"""Time utilities (Europe/Istanbul)."""

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from app.config import settings

LOCAL_TZ = ZoneInfo(settings.TIMEZONE)


def now_local() -> datetime:
    """Current time as a timezone-aware local datetime."""
    return datetime.now(LOCAL_TZ)


def now_local_naive() -> datetime:
    """
    Current local time, returned as naive datetime for DB storage.
    """
    return now_local().replace(tzinfo=None)


def to_local_iso(dt: datetime, naive_assumed_tz: tzinfo = timezone.utc) -> str:
    """Convert datetime to local timezone and return ISO string with offset."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=naive_assumed_tz)
    return dt.astimezone(LOCAL_TZ).isoformat()


def to_local_iso_db(dt: datetime) -> str:
    """
    DB timestamps are stored as naive local time, so naive values are
    interpreted as local (not UTC) here.
    """
    return to_local_iso(dt, naive_assumed_tz=LOCAL_TZ)
