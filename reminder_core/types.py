"""
Type definitions for scheduled reminder tasks.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from .enums import NotificationOffsetKind, ScheduledTaskStatus


@dataclass
class ScheduleRequest:
    """Raw create-reminder input, before validation."""

    owner_id: str
    context_id: str
    recipient_name: str
    recipient_contact: str
    task_description: str
    target_datetime: datetime | str  # ISO-8601 string or datetime
    requested_offsets: list[NotificationOffsetKind | str]
    task_label: str | None = None  # Defaults to the recipient name
    recipient_timezone: str | None = None  # Only affects message text


@dataclass(frozen=True)
class ValidatedRequest:
    """A create request that passed validation. target_at is aware UTC."""

    owner_id: str
    context_id: str
    recipient_name: str
    recipient_contact: str
    task_label: str
    task_description: str
    target_at: datetime
    requested_offsets: tuple[NotificationOffsetKind, ...]  # Deduplicated, catalog order
    recipient_timezone: str | None = None


@dataclass
class ScheduledTask:
    """A persisted reminder task and the trigger handles registered for it."""

    task_id: UUID
    owner_id: str
    context_id: str
    recipient_name: str
    recipient_contact: str
    task_label: str
    task_description: str
    target_at: datetime
    requested_offsets: list[NotificationOffsetKind]
    trigger_handles: list[str] = field(default_factory=list)
    status: ScheduledTaskStatus = ScheduledTaskStatus.idle
    recipient_timezone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row) -> "ScheduledTask":
        """Build from a scheduled_tasks row mapping."""
        return cls(
            task_id=row["task_id"],
            owner_id=row["owner_id"],
            context_id=row["context_id"],
            recipient_name=row["recipient_name"],
            recipient_contact=row["recipient_contact"],
            task_label=row["task_label"],
            task_description=row["task_description"],
            target_at=row["target_at"],
            requested_offsets=[
                NotificationOffsetKind(o) for o in row["requested_offsets"] or []
            ],
            trigger_handles=list(row["trigger_handles"] or []),
            status=ScheduledTaskStatus(row["status"]),
            recipient_timezone=row.get("recipient_timezone"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass
class ScheduleResult:
    """
    Outcome of a create operation.

    registered_count < len(task.requested_offsets) signals partial
    registration; it is not an error.
    """

    task: ScheduledTask
    registered_count: int


@dataclass(frozen=True)
class TriggerPayload:
    """Body delivered to the downstream endpoint when a trigger fires."""

    contact: str
    message: str


@dataclass
class CancelResult:
    """Outcome of a cancel operation. The local record is gone either way."""

    task_id: UUID
    removed_count: int
    failed_count: int
    status: ScheduledTaskStatus = ScheduledTaskStatus.cancelled
