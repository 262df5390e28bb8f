"""
Notification offset catalog.

SINGLE SOURCE OF TRUTH for how far ahead of a task each reminder fires
and how that lead time is described to the recipient.
"""

from dataclasses import dataclass
from datetime import timedelta

from .enums import NotificationOffsetKind


@dataclass(frozen=True)
class OffsetDefinition:
    """Lead time and display label for one offset kind."""

    kind: NotificationOffsetKind
    duration: timedelta
    label: str


OFFSET_CATALOG: dict[NotificationOffsetKind, OffsetDefinition] = {
    NotificationOffsetKind.one_hour: OffsetDefinition(
        kind=NotificationOffsetKind.one_hour,
        duration=timedelta(hours=1),
        label="1 Hour Before",
    ),
    NotificationOffsetKind.one_day: OffsetDefinition(
        kind=NotificationOffsetKind.one_day,
        duration=timedelta(hours=24),
        label="1 Day Before",
    ),
    NotificationOffsetKind.one_week: OffsetDefinition(
        kind=NotificationOffsetKind.one_week,
        duration=timedelta(days=7),
        label="1 Week Before",
    ),
}

# Catalog order, used wherever a stable offset ordering matters
OFFSET_ORDER: list[NotificationOffsetKind] = list(OFFSET_CATALOG)


def get_offset_definition(offset: NotificationOffsetKind | str) -> OffsetDefinition:
    """
    Look up an offset by enum member or wire value ("1hour", "1day", "1week").

    Raises:
        ValueError: If the offset is not in the catalog
    """
    return OFFSET_CATALOG[NotificationOffsetKind(offset)]


def get_offset_label(offset: NotificationOffsetKind | str) -> str:
    """Human label for an offset, e.g. "1 Day Before"."""
    return get_offset_definition(offset).label


def get_offset_duration(offset: NotificationOffsetKind | str) -> timedelta:
    return get_offset_definition(offset).duration
