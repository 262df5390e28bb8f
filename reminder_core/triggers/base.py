"""Interface to the external time-based scheduler."""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from ..enums import NotificationOffsetKind
from ..types import TriggerPayload

TRIGGER_NAME_PREFIX = "TASK-REMINDER"


def make_trigger_name(task_id: UUID | str, offset: NotificationOffsetKind | str) -> str:
    """
    Deterministic trigger name for a (task, offset) pair.

    At most one external trigger can exist per pair, so a retried create
    surfaces as a ConflictError instead of a duplicate reminder.
    """
    offset_value = NotificationOffsetKind(offset).value
    return f"{TRIGGER_NAME_PREFIX}-{offset_value}-{task_id}"


class TriggerClient(ABC):
    """One-shot triggers that call the fixed delivery endpoint with a payload."""

    @abstractmethod
    async def create(
        self,
        name: str,
        description: str,
        fire_at: datetime,
        payload: TriggerPayload,
    ) -> str:
        """
        Register a trigger that fires once at fire_at.

        Returns:
            Opaque handle used only for delete()

        Raises:
            ConflictError: A trigger with this name already exists
            ExternalServiceError: Transport/auth failure
        """
        pass

    @abstractmethod
    async def delete(self, handle: str) -> None:
        """
        Remove a trigger. Deleting an absent trigger succeeds silently.

        A bare trigger name is accepted in place of a handle.

        Raises:
            ExternalServiceError: Transport/auth failure
        """
        pass

    def name_for_handle(self, handle: str) -> str:
        """Trigger name a handle refers to. Handles are the names themselves by default."""
        return handle
