"""
Reminder scheduling orchestrator.

Turns one logical task into a set of independent one-shot triggers on the
external scheduler, tracks the handles it gets back, and removes them again
on cancellation.

Create flow:
    validate -> insert (idle, no handles) -> per offset: trigger time,
    skip if past, generate text, create trigger -> update (handles, status)

Per-offset failures are absorbed at the offset boundary. Only validation
errors and unknown task ids reach the caller.
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable
from uuid import UUID

import sentry_sdk

from .config import (
    get_call_timeout_seconds,
    get_max_concurrency,
    get_request_timeout_seconds,
)
from .enums import NotificationOffsetKind, ScheduledTaskStatus
from .errors import ConflictError, NotFoundError, ValidationError
from .messages import generate_message, render_fallback_message
from .offsets import OFFSET_ORDER, get_offset_label
from .store import ScheduledTaskStore
from .timing import compute_trigger_time, is_past, utc_now
from .triggers.base import TriggerClient, make_trigger_name
from .types import (
    CancelResult,
    ScheduledTask,
    ScheduleRequest,
    ScheduleResult,
    TriggerPayload,
)
from .validation import validate_schedule_request

logger = logging.getLogger(__name__)

MessageGenerator = Callable[..., Awaitable[str]]


def status_for_handles(handles: list[str]) -> ScheduledTaskStatus:
    """scheduled iff at least one trigger was registered."""
    return ScheduledTaskStatus.scheduled if handles else ScheduledTaskStatus.idle


def describe_trigger(task_description: str, offset: NotificationOffsetKind) -> str:
    return f"{get_offset_label(offset)} notification for task: {task_description[:50]}"


class ReminderOrchestrator:
    """
    Creates and cancels reminder tasks.

    The store and trigger client are injected once at startup so tests can
    substitute fakes.
    """

    def __init__(
        self,
        store: ScheduledTaskStore,
        triggers: TriggerClient,
        *,
        message_generator: MessageGenerator = generate_message,
        clock: Callable[[], datetime] = utc_now,
        max_concurrency: int | None = None,
        call_timeout: float | None = None,
        request_timeout: float | None = None,
    ):
        self._store = store
        self._triggers = triggers
        self._generate_message = message_generator
        self._clock = clock
        self._max_concurrency = max_concurrency or get_max_concurrency()
        self._call_timeout = call_timeout or get_call_timeout_seconds()
        self._request_timeout = request_timeout or get_request_timeout_seconds()

    # =========================================================================
    # Create
    # =========================================================================

    async def create_reminder(self, request: ScheduleRequest) -> ScheduleResult:
        """
        Validate, persist and register triggers for a reminder request.

        The request timeout is measured from the start of this call: time
        spent on the insert is taken out of the budget left for offsets.
        The final update always runs so partial state is persisted.

        Returns:
            ScheduleResult with the final persisted task and how many of the
            requested offsets produced a trigger

        Raises:
            ValidationError: If the request is invalid (nothing is persisted)
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._request_timeout

        validated = validate_schedule_request(request, now=self._clock())

        task = await self._store.insert(validated)
        logger.info(
            f"Created task {task.task_id} with offsets "
            f"{[o.value for o in task.requested_offsets]}"
        )

        remaining = max(0.0, deadline - loop.time())
        handles = await self._register_offsets(task, timeout=remaining)
        status = status_for_handles(handles)

        updated = await self._store.update(
            task.task_id,
            trigger_handles=handles,
            status=status,
            updated_at=self._clock(),
        )
        if updated is None:
            # Cancelled while registering; report what was reached
            logger.warning(f"Task {task.task_id} disappeared before final update")
            task.trigger_handles = handles
            task.status = status
            updated = task

        logger.info(
            f"Task {task.task_id}: {len(handles)}/{len(task.requested_offsets)} "
            f"triggers registered, status={status.value}"
        )
        return ScheduleResult(task=updated, registered_count=len(handles))

    async def _register_offsets(
        self, task: ScheduledTask, timeout: float
    ) -> list[str]:
        """
        Fan out offset registration with bounded concurrency.

        Handles are collected under a lock as each offset finishes, so when
        timeout expires whatever was registered so far is kept.
        """
        if timeout <= 0:
            logger.warning(
                f"Task {task.task_id}: request deadline passed before any "
                f"offset was processed"
            )
            return []

        registered: dict[NotificationOffsetKind, str] = {}
        lock = asyncio.Lock()
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def process(offset: NotificationOffsetKind) -> None:
            async with semaphore:
                handle = await self._register_offset(task, offset)
            if handle is not None:
                async with lock:
                    registered[offset] = handle

        jobs = [asyncio.create_task(process(o)) for o in task.requested_offsets]
        if jobs:
            done, pending = await asyncio.wait(jobs, timeout=timeout)
            if pending:
                logger.warning(
                    f"Task {task.task_id}: request timed out with "
                    f"{len(pending)} offset(s) still in flight, keeping partial state"
                )
                for job in pending:
                    job.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
            for job in done:
                if not job.cancelled() and job.exception() is not None:
                    logger.error(
                        f"Task {task.task_id}: offset processing crashed: "
                        f"{job.exception()!r}"
                    )
                    sentry_sdk.capture_exception(job.exception())

        async with lock:
            return [registered[o] for o in OFFSET_ORDER if o in registered]

    async def _register_offset(
        self, task: ScheduledTask, offset: NotificationOffsetKind
    ) -> str | None:
        """
        Register the trigger for one offset.

        Returns the handle, or None if the offset was skipped, already
        registered, or failed. Never raises for external failures.
        """
        fire_at = compute_trigger_time(task.target_at, offset)

        # Re-read the clock per offset; earlier offsets may have taken a while
        if is_past(fire_at, self._clock()):
            logger.info(
                f"Task {task.task_id}: skipping {offset.value}, "
                f"trigger time {fire_at.isoformat()} already passed"
            )
            return None

        message = await self._build_message(task, offset)
        name = make_trigger_name(task.task_id, offset)

        try:
            return await asyncio.wait_for(
                self._triggers.create(
                    name=name,
                    description=describe_trigger(task.task_description, offset),
                    fire_at=fire_at,
                    payload=TriggerPayload(
                        contact=task.recipient_contact, message=message
                    ),
                ),
                timeout=self._call_timeout,
            )
        except ConflictError:
            logger.info(f"Trigger {name} already registered, skipping")
            return None
        except Exception as e:
            logger.error(f"Failed to create trigger {name}: {e!r}")
            sentry_sdk.capture_exception(e)
            return None

    async def _build_message(
        self, task: ScheduledTask, offset: NotificationOffsetKind
    ) -> str:
        try:
            message = await asyncio.wait_for(
                self._generate_message(
                    task.recipient_name,
                    task.task_description,
                    task.target_at,
                    offset,
                    task.recipient_timezone,
                ),
                timeout=self._call_timeout,
            )
            if message and message.strip():
                return message
        except Exception as e:
            logger.warning(f"Message generation failed for {offset.value}: {e!r}")

        return render_fallback_message(
            task.recipient_name,
            task.task_description,
            task.target_at,
            offset,
            task.recipient_timezone,
        )

    # =========================================================================
    # Cancel
    # =========================================================================

    async def cancel_reminder(self, task_id: UUID) -> CancelResult:
        """
        Best-effort removal of every trigger, then the task record.

        Besides the stored handles, the trigger name of every requested
        offset without a handle is deleted too. That removes triggers left
        by an earlier attempt that ended in a conflict. The record is
        deleted even if some trigger deletes fail.

        Raises:
            NotFoundError: If the task does not exist
        """
        task = await self._store.get(task_id)
        if task is None:
            raise NotFoundError(f"Scheduled task {task_id} not found")

        handles = list(task.trigger_handles)
        unlisted = self._unlisted_trigger_names(task)
        results = await self._delete_triggers(handles + unlisted)
        removed = sum(1 for ok in results[: len(handles)] if ok)
        failed = len(handles) - removed
        if unlisted and not all(results[len(handles) :]):
            logger.warning(f"Task {task_id}: could not sweep all unlisted triggers")

        await self._store.delete(task_id)

        if failed:
            logger.warning(
                f"Task {task_id} deleted; {failed} trigger delete(s) failed"
            )
        else:
            logger.info(f"Task {task_id} deleted with {removed} trigger(s)")
        return CancelResult(task_id=task_id, removed_count=removed, failed_count=failed)

    def _unlisted_trigger_names(self, task: ScheduledTask) -> list[str]:
        """Names of requested offsets that have no stored handle."""
        listed = {self._triggers.name_for_handle(h) for h in task.trigger_handles}
        names = [make_trigger_name(task.task_id, o) for o in task.requested_offsets]
        return [name for name in names if name not in listed]

    async def _delete_triggers(self, handles: list[str]) -> list[bool]:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def remove(handle: str) -> bool:
            async with semaphore:
                try:
                    await asyncio.wait_for(
                        self._triggers.delete(handle), timeout=self._call_timeout
                    )
                    return True
                except Exception as e:
                    logger.error(f"Failed to delete trigger {handle}: {e!r}")
                    sentry_sdk.capture_exception(e)
                    return False

        return await asyncio.gather(*[remove(h) for h in handles])

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_reminder(self, task_id: UUID) -> ScheduledTask:
        """
        Raises:
            NotFoundError: If the task does not exist
        """
        task = await self._store.get(task_id)
        if task is None:
            raise NotFoundError(f"Scheduled task {task_id} not found")
        return task

    async def list_reminders(
        self,
        context_id: str,
        owner_id: str | None = None,
        status: ScheduledTaskStatus | str | None = None,
    ) -> list[ScheduledTask]:
        """
        List tasks for a context, optionally filtered by owner and status.

        Raises:
            ValidationError: If context_id is missing or status is unknown
        """
        if not context_id or not context_id.strip():
            raise ValidationError("context id is required")

        status_filter = None
        if status:
            try:
                status_filter = ScheduledTaskStatus(status)
            except ValueError as e:
                raise ValidationError(f"unknown status: {status}") from e

        return await self._store.list_for_context(
            context_id.strip(), owner_id=owner_id, status=status_filter
        )
