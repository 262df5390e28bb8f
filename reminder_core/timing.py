"""
Trigger time arithmetic.

All instants are handled as timezone-aware UTC datetimes. Naive datetimes
are treated as UTC.
"""

from datetime import datetime, timezone

from .enums import NotificationOffsetKind
from .offsets import get_offset_duration


def utc_now() -> datetime:
    """Current instant in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime (naive treated as UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def compute_trigger_time(
    target: datetime, offset: NotificationOffsetKind | str
) -> datetime:
    """
    Compute when the reminder for an offset should fire.

    Args:
        target: The task's target instant (e.g. appointment time)
        offset: Offset kind from the catalog

    Returns:
        target minus the offset's fixed duration, in UTC
    """
    return ensure_utc(target) - get_offset_duration(offset)


def is_past(t: datetime, now: datetime | None = None) -> bool:
    """
    Check whether t is strictly before now.

    now defaults to the current instant at call time, so callers processing
    several offsets get a fresh clock reading for each one.
    """
    if now is None:
        now = utc_now()
    return ensure_utc(t) < ensure_utc(now)
