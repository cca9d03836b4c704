"""
Timezone utilities for Campus Events.

The engine computes with naive local wall-clock datetimes. Timestamps that
arrive timezone-aware are converted to the configured local timezone and
stripped of their tzinfo at the boundary, so day/week/month arithmetic never
mixes naive and aware values.
"""

from datetime import datetime
import time as _time
import pytz


# Default timezone - can be overridden by config
_local_timezone_name: str = "America/New_York"


def set_timezone(timezone_name: str):
    """Set the local timezone for the application."""
    global _local_timezone_name
    _local_timezone_name = timezone_name


def get_timezone_name() -> str:
    return _local_timezone_name


def get_local_timezone():
    """
    Get the local timezone as a pytz timezone object.
    
    Returns:
        pytz timezone object for the configured local timezone.
    """
    try:
        return pytz.timezone(_local_timezone_name)
    except pytz.UnknownTimeZoneError:
        # Fall back to a fixed offset matching the host clock
        is_dst = _time.localtime().tm_isdst
        if is_dst:
            offset_seconds = -_time.altzone
        else:
            offset_seconds = -_time.timezone
        return pytz.FixedOffset(offset_seconds // 60)


def is_valid_timezone(timezone_name: str) -> bool:
    """Check whether pytz knows the given timezone name."""
    return timezone_name in pytz.all_timezones_set


def to_local_naive(dt: datetime) -> datetime:
    """
    Convert a datetime to a naive local wall-clock datetime.
    
    Args:
        dt: A naive datetime (already local) or a timezone-aware one.
    
    Returns:
        A naive datetime (tzinfo=None) representing local time.
    """
    if dt.tzinfo is not None:
        local_tz = get_local_timezone()
        return dt.astimezone(local_tz).replace(tzinfo=None)
    return dt


def local_naive_to_utc(dt: datetime) -> datetime:
    """
    Convert a naive local datetime to UTC.
    
    Used when exporting events to other calendars.
    
    Args:
        dt: A naive datetime representing local time.
    
    Returns:
        A timezone-aware datetime in UTC.
    """
    if dt.tzinfo is None:
        local_tz = get_local_timezone()
        local_dt = local_tz.localize(dt)
        return local_dt.astimezone(pytz.UTC)
    return dt.astimezone(pytz.UTC)


def now_local() -> datetime:
    """Current time as a naive local datetime."""
    return datetime.now(pytz.UTC).astimezone(get_local_timezone()).replace(tzinfo=None)
