"""
Persistence for scheduled reminder tasks.

ScheduledTaskStore is the boundary the orchestrator depends on;
SqlScheduledTaskStore is the PostgreSQL implementation.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, delete, insert, select, update

from .database import get_connection, get_transaction
from .enums import ScheduledTaskStatus
from .tables import scheduled_tasks
from .types import ScheduledTask, ValidatedRequest


class ScheduledTaskStore(ABC):
    """Durable record of scheduled tasks, keyed by task id."""

    @abstractmethod
    async def insert(self, request: ValidatedRequest) -> ScheduledTask:
        """Persist a new task with status idle and no trigger handles."""
        pass

    @abstractmethod
    async def get(self, task_id: UUID) -> ScheduledTask | None:
        pass

    @abstractmethod
    async def update(
        self,
        task_id: UUID,
        *,
        trigger_handles: list[str],
        status: ScheduledTaskStatus,
        updated_at: datetime,
    ) -> ScheduledTask | None:
        """Write the full registration field set. Returns None if the task is gone."""
        pass

    @abstractmethod
    async def delete(self, task_id: UUID) -> bool:
        """Remove the task. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def list_for_context(
        self,
        context_id: str,
        owner_id: str | None = None,
        status: ScheduledTaskStatus | None = None,
    ) -> list[ScheduledTask]:
        """Tasks for a context, newest first."""
        pass


class SqlScheduledTaskStore(ScheduledTaskStore):
    """ScheduledTaskStore backed by the scheduled_tasks table."""

    async def insert(self, request: ValidatedRequest) -> ScheduledTask:
        async with get_transaction() as conn:
            result = await conn.execute(
                insert(scheduled_tasks)
                .values(
                    owner_id=request.owner_id,
                    context_id=request.context_id,
                    recipient_name=request.recipient_name,
                    recipient_contact=request.recipient_contact,
                    recipient_timezone=request.recipient_timezone,
                    task_label=request.task_label,
                    task_description=request.task_description,
                    target_at=request.target_at,
                    requested_offsets=[o.value for o in request.requested_offsets],
                    trigger_handles=[],
                    status=ScheduledTaskStatus.idle,
                )
                .returning(scheduled_tasks)
            )
            row = result.mappings().first()
        return ScheduledTask.from_row(row)

    async def get(self, task_id: UUID) -> ScheduledTask | None:
        async with get_connection() as conn:
            result = await conn.execute(
                select(scheduled_tasks).where(scheduled_tasks.c.task_id == task_id)
            )
            row = result.mappings().first()
        return ScheduledTask.from_row(row) if row else None

    async def update(
        self,
        task_id: UUID,
        *,
        trigger_handles: list[str],
        status: ScheduledTaskStatus,
        updated_at: datetime,
    ) -> ScheduledTask | None:
        async with get_transaction() as conn:
            result = await conn.execute(
                update(scheduled_tasks)
                .where(scheduled_tasks.c.task_id == task_id)
                .values(
                    trigger_handles=list(trigger_handles),
                    status=status,
                    updated_at=updated_at,
                )
                .returning(scheduled_tasks)
            )
            row = result.mappings().first()
        return ScheduledTask.from_row(row) if row else None

    async def delete(self, task_id: UUID) -> bool:
        async with get_transaction() as conn:
            result = await conn.execute(
                delete(scheduled_tasks).where(scheduled_tasks.c.task_id == task_id)
            )
        return result.rowcount > 0

    async def list_for_context(
        self,
        context_id: str,
        owner_id: str | None = None,
        status: ScheduledTaskStatus | None = None,
    ) -> list[ScheduledTask]:
        conditions = [scheduled_tasks.c.context_id == context_id]
        if owner_id:
            conditions.append(scheduled_tasks.c.owner_id == owner_id)
        if status:
            conditions.append(scheduled_tasks.c.status == status)

        async with get_connection() as conn:
            result = await conn.execute(
                select(scheduled_tasks)
                .where(and_(*conditions))
                .order_by(scheduled_tasks.c.created_at.desc())
            )
            rows = result.mappings().all()
        return [ScheduledTask.from_row(row) for row in rows]
