"""
Timezone display utilities for reminder text.

Trigger arithmetic always happens in UTC; these helpers only affect how an
instant is shown to the recipient.
"""

from datetime import datetime

import pytz


def to_local(utc_dt: datetime, tz_name: str | None) -> datetime:
    """
    Convert a UTC datetime to the given timezone.

    Naive datetimes are treated as UTC. Unknown or missing timezone names
    fall back to UTC.
    """
    if utc_dt.tzinfo is None:
        utc_dt = pytz.UTC.localize(utc_dt)

    if not tz_name:
        return utc_dt.astimezone(pytz.UTC)

    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        tz = pytz.UTC
    return utc_dt.astimezone(tz)


def _offset_label(local_dt: datetime) -> str:
    """UTC offset string like "UTC", "UTC+7" or "UTC+5:30"."""
    offset = local_dt.strftime("%z")  # "+0700" or "-0500"
    if not offset:
        return "UTC"
    hours = int(offset[:3])
    minutes = int(offset[0] + offset[3:5])
    if minutes == 0:
        return f"UTC{hours:+d}" if hours != 0 else "UTC"
    return f"UTC{hours:+d}:{abs(minutes):02d}"


def format_reminder_time(utc_dt: datetime, tz_name: str | None = None) -> str:
    """
    Format an instant for reminder text with an explicit offset.

    Args:
        utc_dt: Datetime in UTC (naive datetimes treated as UTC)
        tz_name: Recipient timezone (e.g., "America/New_York"), or None for UTC

    Returns:
        Formatted string like "June 10, 2025 at 3:00 PM (UTC)"
    """
    local_dt = to_local(utc_dt, tz_name)
    date_str = local_dt.strftime("%B %d, %Y").replace(" 0", " ")
    time_str = local_dt.strftime("%I:%M %p").lstrip("0")  # "3:00 PM" not "03:00 PM"
    return f"{date_str} at {time_str} ({_offset_label(local_dt)})"
