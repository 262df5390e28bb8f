"""
Reminder scheduling routes.

Endpoints:
- POST /api/reminders - Create a task with one or more timed reminders
- GET /api/reminders - List tasks for a context (optional owner/status filters)
- GET /api/reminders/{task_id} - Get a single task
- DELETE /api/reminders/{task_id} - Cancel a task and its reminders
"""

import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from reminder_core.errors import NotFoundError, ValidationError
from reminder_core.orchestrator import ReminderOrchestrator
from reminder_core.types import ScheduledTask, ScheduleRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


# --- Pydantic models ---


class CreateReminderRequest(BaseModel):
    """Request body for creating a reminder task."""

    # Required fields are enforced by validate_schedule_request (400)
    ownerId: str = ""
    contextId: str = ""
    recipientName: str = ""
    recipientContact: str = ""
    taskDescription: str = ""
    targetDateTime: str = ""  # ISO-8601
    requestedOffsets: list[str] = []  # "1hour" | "1day" | "1week"
    taskLabel: str | None = None
    recipientTimezone: str | None = None


class ScheduledTaskResponse(BaseModel):
    """A persisted reminder task."""

    id: UUID
    ownerId: str
    contextId: str
    recipientName: str
    recipientContact: str
    taskLabel: str
    taskDescription: str
    targetDateTime: datetime
    requestedOffsets: list[str]
    triggerHandles: list[str]
    status: str
    recipientTimezone: str | None = None
    createdAt: datetime | None = None
    updatedAt: datetime | None = None


class CreateReminderResponse(ScheduledTaskResponse):
    """Created task plus how many offsets produced a trigger."""

    registeredCount: int


class CancelReminderResponse(BaseModel):
    success: bool
    message: str


# --- Helpers ---


def get_orchestrator(request: Request) -> ReminderOrchestrator:
    """Orchestrator built once at startup (see main.py lifespan)."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Reminder scheduling unavailable")
    return orchestrator


def _serialize_task(task: ScheduledTask) -> dict:
    return {
        "id": task.task_id,
        "ownerId": task.owner_id,
        "contextId": task.context_id,
        "recipientName": task.recipient_name,
        "recipientContact": task.recipient_contact,
        "taskLabel": task.task_label,
        "taskDescription": task.task_description,
        "targetDateTime": task.target_at,
        "requestedOffsets": [o.value for o in task.requested_offsets],
        "triggerHandles": list(task.trigger_handles),
        "status": task.status.value,
        "recipientTimezone": task.recipient_timezone,
        "createdAt": task.created_at,
        "updatedAt": task.updated_at,
    }


# --- Routes ---


@router.post("", response_model=CreateReminderResponse)
async def create_reminder(
    body: CreateReminderRequest,
    orchestrator: ReminderOrchestrator = Depends(get_orchestrator),
):
    """
    Create a task and register one trigger per requested offset.

    Always succeeds for valid input; check registeredCount/status to see
    whether any reminder was actually armed.
    """
    request = ScheduleRequest(
        owner_id=body.ownerId,
        context_id=body.contextId,
        recipient_name=body.recipientName,
        recipient_contact=body.recipientContact,
        task_description=body.taskDescription,
        target_datetime=body.targetDateTime,
        requested_offsets=body.requestedOffsets,
        task_label=body.taskLabel,
        recipient_timezone=body.recipientTimezone,
    )
    try:
        result = await orchestrator.create_reminder(request)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        **_serialize_task(result.task),
        "registeredCount": result.registered_count,
    }


@router.get("", response_model=list[ScheduledTaskResponse])
async def list_reminders(
    contextId: str = Query(""),
    ownerId: str | None = Query(None),
    status: str | None = Query(None),
    orchestrator: ReminderOrchestrator = Depends(get_orchestrator),
):
    """List reminder tasks for a context, newest first."""
    try:
        tasks = await orchestrator.list_reminders(
            contextId, owner_id=ownerId, status=status
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [_serialize_task(task) for task in tasks]


@router.get("/{task_id}", response_model=ScheduledTaskResponse)
async def get_reminder(
    task_id: UUID,
    orchestrator: ReminderOrchestrator = Depends(get_orchestrator),
):
    try:
        task = await orchestrator.get_reminder(task_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")
    return _serialize_task(task)


@router.delete("/{task_id}", response_model=CancelReminderResponse)
async def cancel_reminder(
    task_id: UUID,
    orchestrator: ReminderOrchestrator = Depends(get_orchestrator),
):
    """
    Cancel a task: best-effort delete of its triggers, then the record.
    """
    try:
        result = await orchestrator.cancel_reminder(task_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")

    if result.failed_count:
        logger.warning(
            f"Cancelled task {task_id} with {result.failed_count} trigger delete failure(s)"
        )
    return {
        "success": True,
        "message": "Task and reminders deleted successfully",
    }
