"""In-memory stand-ins for the store and the external scheduler."""

import uuid
from datetime import datetime, timezone
from uuid import UUID

from reminder_core.enums import ScheduledTaskStatus
from reminder_core.errors import ConflictError, ExternalServiceError
from reminder_core.store import ScheduledTaskStore
from reminder_core.triggers.base import TriggerClient
from reminder_core.types import ScheduledTask, TriggerPayload, ValidatedRequest


class InMemoryTaskStore(ScheduledTaskStore):
    """Dict-backed store that records every write for assertions."""

    def __init__(self, next_ids: list[UUID] | None = None):
        self.tasks: dict[UUID, ScheduledTask] = {}
        self.writes: list[tuple[str, UUID, ScheduledTaskStatus, list[str]]] = []
        self._next_ids = list(next_ids or [])

    def _record(self, op: str, task: ScheduledTask) -> None:
        self.writes.append((op, task.task_id, task.status, list(task.trigger_handles)))

    async def insert(self, request: ValidatedRequest) -> ScheduledTask:
        task_id = self._next_ids.pop(0) if self._next_ids else uuid.uuid4()
        now = datetime.now(timezone.utc)
        task = ScheduledTask(
            task_id=task_id,
            owner_id=request.owner_id,
            context_id=request.context_id,
            recipient_name=request.recipient_name,
            recipient_contact=request.recipient_contact,
            task_label=request.task_label,
            task_description=request.task_description,
            target_at=request.target_at,
            requested_offsets=list(request.requested_offsets),
            trigger_handles=[],
            status=ScheduledTaskStatus.idle,
            recipient_timezone=request.recipient_timezone,
            created_at=now,
            updated_at=now,
        )
        self.tasks[task_id] = task
        self._record("insert", task)
        return task

    async def get(self, task_id: UUID) -> ScheduledTask | None:
        return self.tasks.get(task_id)

    async def update(self, task_id, *, trigger_handles, status, updated_at):
        task = self.tasks.get(task_id)
        if task is None:
            return None
        task.trigger_handles = list(trigger_handles)
        task.status = status
        task.updated_at = updated_at
        self._record("update", task)
        return task

    async def delete(self, task_id: UUID) -> bool:
        return self.tasks.pop(task_id, None) is not None

    async def list_for_context(self, context_id, owner_id=None, status=None):
        tasks = [
            t
            for t in self.tasks.values()
            if t.context_id == context_id
            and (owner_id is None or t.owner_id == owner_id)
            and (status is None or t.status == status)
        ]
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)


class FakeTriggerClient(TriggerClient):
    """
    Scheduler that keeps triggers in a dict keyed by name.

    fail_create / fail_delete hold names or handles that should raise
    ExternalServiceError.
    """

    def __init__(self):
        self.triggers: dict[str, dict] = {}
        self.fail_create: set[str] = set()
        self.fail_delete: set[str] = set()
        self.create_calls: list[str] = []
        self.delete_calls: list[str] = []

    @staticmethod
    def handle_for(name: str) -> str:
        return f"arn:fake:scheduler:schedule/default/{name}"

    async def create(
        self,
        name: str,
        description: str,
        fire_at: datetime,
        payload: TriggerPayload,
    ) -> str:
        self.create_calls.append(name)
        if name in self.fail_create:
            raise ExternalServiceError(f"create failed for {name}")
        if name in self.triggers:
            raise ConflictError(name)
        self.triggers[name] = {
            "description": description,
            "fire_at": fire_at,
            "payload": payload,
        }
        return self.handle_for(name)

    async def delete(self, handle: str) -> None:
        self.delete_calls.append(handle)
        if handle in self.fail_delete:
            raise ExternalServiceError(f"delete failed for {handle}")
        name = handle.split("/")[-1]
        self.triggers.pop(name, None)

    def name_for_handle(self, handle: str) -> str:
        return handle.split("/")[-1]


async def fixed_message(name, task, target, offset, tz_name=None) -> str:
    """Deterministic stand-in for the LLM message generator."""
    return f"Hi {name}, {task} ({offset.value})"
