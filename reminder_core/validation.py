"""Validation of create-reminder requests."""

from datetime import datetime

from dateutil.parser import isoparse

from .enums import NotificationOffsetKind
from .errors import ValidationError
from .offsets import OFFSET_ORDER
from .timing import ensure_utc, utc_now
from .types import ScheduleRequest, ValidatedRequest


def parse_target_datetime(value: datetime | str) -> datetime:
    """
    Parse a target time into an aware UTC datetime.

    Raises:
        ValidationError: If value is not a datetime or ISO-8601 string
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("schedule target is required")
    try:
        return ensure_utc(isoparse(value.strip()))
    except ValueError as e:
        raise ValidationError(f"invalid schedule target: {value}") from e


def parse_offsets(
    offsets: list[NotificationOffsetKind | str] | None,
) -> tuple[NotificationOffsetKind, ...]:
    """Parse offset wire values, dropping duplicates. Order follows the catalog."""
    if not offsets:
        raise ValidationError("at least one notification offset is required")

    kinds = set()
    for offset in offsets:
        try:
            kinds.add(NotificationOffsetKind(offset))
        except ValueError as e:
            raise ValidationError(f"unknown notification offset: {offset}") from e

    return tuple(kind for kind in OFFSET_ORDER if kind in kinds)


def _require(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def validate_schedule_request(
    request: ScheduleRequest, now: datetime | None = None
) -> ValidatedRequest:
    """
    Validate a create request.

    This is the only point at which a whole request can be rejected.

    Args:
        request: Raw request
        now: Current instant (defaults to the clock at call time)

    Returns:
        ValidatedRequest with a UTC target and deduplicated offsets

    Raises:
        ValidationError: If the target is not strictly in the future or a
            required field is missing
    """
    owner_id = _require(request.owner_id, "owner id")
    context_id = _require(request.context_id, "context id")
    recipient_contact = _require(request.recipient_contact, "recipient contact")
    task_description = _require(request.task_description, "task description")
    offsets = parse_offsets(request.requested_offsets)

    target_at = parse_target_datetime(request.target_datetime)
    if now is None:
        now = utc_now()
    if target_at <= ensure_utc(now):
        raise ValidationError("schedule target in the past")

    recipient_name = (request.recipient_name or "").strip()
    task_label = (request.task_label or "").strip() or recipient_name or task_description

    return ValidatedRequest(
        owner_id=owner_id,
        context_id=context_id,
        recipient_name=recipient_name,
        recipient_contact=recipient_contact,
        task_label=task_label,
        task_description=task_description,
        target_at=target_at,
        requested_offsets=offsets,
        recipient_timezone=(request.recipient_timezone or None),
    )
