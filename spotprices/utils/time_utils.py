"""
Time utility functions for local-time price bookkeeping.
Supports the configured market timezone and locale-aware time display.
"""

from datetime import date, datetime, timedelta

import pytz
from babel.dates import format_time

from spotprices.config import settings


def local_now(timezone_name: str = None) -> datetime:
    """Current time as an aware datetime in the market timezone."""
    return datetime.now(pytz.timezone(timezone_name or settings.timezone))


def days_between(earlier: date, later: date) -> int:
    """Number of calendar days from earlier to later (negative if reversed)."""
    return (later - earlier).days


def get_next_boundary(reference_time: datetime, hour: int, minute: int) -> datetime:
    """
    Get the next occurrence of hour:minute strictly after the reference time.

    Args:
        reference_time: Aware or naive local datetime
        hour: Boundary hour (0-23)
        minute: Boundary minute (0-59)

    Returns:
        Boundary datetime in the same timezone as reference_time.

    Examples:
        - 14:14 -> 14:15 same day
        - 14:15 -> 14:15 next day
        - 14:16 -> 14:15 next day
    """
    boundary_day = reference_time.date()
    if (reference_time.hour, reference_time.minute) >= (hour, minute):
        boundary_day += timedelta(days=1)

    naive = datetime(boundary_day.year, boundary_day.month, boundary_day.day, hour, minute)
    tz = reference_time.tzinfo
    if tz is None:
        return naive
    # pytz zones need localize() to pick the right DST offset for the new date
    if hasattr(tz, "localize"):
        return tz.localize(naive)
    if hasattr(tz, "zone"):
        return pytz.timezone(tz.zone).localize(naive)
    return naive.replace(tzinfo=tz)


def format_time_of_day(value: datetime, locale: str = None) -> str:
    """Render a short, locale-specific time of day (e.g. '14.15' or '2:15 PM')."""
    return format_time(value, format="short", locale=locale or settings.display_locale)
