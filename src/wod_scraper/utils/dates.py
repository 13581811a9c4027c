"""
Date helpers for the site's publishing timezone.

The WOD site publishes on US Pacific time, so "today" and the stored
scheduled dates are computed in that zone rather than UTC.
"""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Los_Angeles"


def current_date(tz_name: str = DEFAULT_TIMEZONE) -> date:
    """Get today's date in the given timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()


def current_date_string(tz_name: str = DEFAULT_TIMEZONE) -> str:
    """Get today's date in the given timezone as YYYY-MM-DD."""
    return current_date(tz_name).isoformat()


def parse_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD string.

    Raises:
        ValueError: If the string is not an ISO calendar date
    """
    return date.fromisoformat(value.strip())


def to_unix_timestamp(moment: datetime) -> int:
    """Convert an aware datetime to whole unix seconds."""
    return int(moment.timestamp())


def start_of_day(day: date, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Midnight of `day` in the given timezone."""
    return datetime.combine(day, time.min, tzinfo=ZoneInfo(tz_name))


def start_of_day_timestamp(day: date, tz_name: str = DEFAULT_TIMEZONE) -> int:
    """Unix timestamp of local midnight for `day`."""
    return to_unix_timestamp(start_of_day(day, tz_name))


def now_timestamp() -> int:
    """Current unix timestamp in seconds."""
    return int(datetime.now().timestamp())
