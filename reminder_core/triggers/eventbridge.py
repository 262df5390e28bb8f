"""
AWS EventBridge Scheduler trigger client.

Each trigger is a one-time schedule (at(...) expression, UTC) targeting the
delivery function. Schedules delete themselves after completion.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import get_aws_region, get_target_arn, get_target_role_arn
from ..errors import ConflictError, ExternalServiceError
from ..types import TriggerPayload
from .base import TriggerClient

logger = logging.getLogger(__name__)

MAX_RETRY_ATTEMPTS = 3


def _get_scheduler_client(region: str | None = None):
    client_kwargs = {}
    region = region or get_aws_region()
    if region:
        client_kwargs["region_name"] = region
    return boto3.client("scheduler", **client_kwargs)


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def format_schedule_expression(fire_at: datetime) -> str:
    """EventBridge one-time expression, e.g. "at(2025-06-09T15:00:00)" in UTC."""
    if fire_at.tzinfo is None:
        fire_at = fire_at.replace(tzinfo=timezone.utc)
    utc = fire_at.astimezone(timezone.utc)
    return f"at({utc.strftime('%Y-%m-%dT%H:%M:%S')})"


def schedule_name_from_arn(arn: str) -> str:
    """arn:aws:scheduler:...:schedule/default/NAME -> NAME"""
    name = (arn or "").split("/")[-1]
    if not name:
        raise ExternalServiceError(f"Invalid schedule ARN: {arn!r}")
    return name


class EventBridgeTriggerClient(TriggerClient):
    """TriggerClient backed by AWS EventBridge Scheduler."""

    def __init__(
        self,
        target_arn: str | None = None,
        role_arn: str | None = None,
        client=None,
    ):
        self._target_arn = target_arn or get_target_arn()
        self._role_arn = role_arn or get_target_role_arn()
        self._client = client or _get_scheduler_client()

    async def create(
        self,
        name: str,
        description: str,
        fire_at: datetime,
        payload: TriggerPayload,
    ) -> str:
        params = {
            "Name": name,
            "Description": description,
            "ScheduleExpression": format_schedule_expression(fire_at),
            "ScheduleExpressionTimezone": "UTC",
            "Target": {
                "Arn": self._target_arn,
                "RoleArn": self._role_arn,
                "Input": json.dumps(
                    {"mobile_no": payload.contact, "message": payload.message}
                ),
                "RetryPolicy": {"MaximumRetryAttempts": MAX_RETRY_ATTEMPTS},
            },
            "FlexibleTimeWindow": {"Mode": "OFF"},
            "ActionAfterCompletion": "DELETE",
        }

        try:
            response = await asyncio.to_thread(self._client.create_schedule, **params)
        except ClientError as e:
            if _error_code(e) == "ConflictException":
                raise ConflictError(name) from e
            raise ExternalServiceError(
                f"Failed to create schedule {name}: {e}"
            ) from e
        except BotoCoreError as e:
            raise ExternalServiceError(
                f"Failed to create schedule {name}: {e}"
            ) from e

        arn = response.get("ScheduleArn")
        if not arn:
            raise ExternalServiceError(f"No ScheduleArn returned for {name}")

        logger.info(f"Created EventBridge schedule {name}")
        return arn

    async def delete(self, handle: str) -> None:
        name = schedule_name_from_arn(handle)
        try:
            await asyncio.to_thread(self._client.delete_schedule, Name=name)
        except ClientError as e:
            if _error_code(e) == "ResourceNotFoundException":
                # Schedule not found, may have already fired and been deleted
                logger.info(f"Schedule {name} already gone")
                return
            raise ExternalServiceError(f"Failed to delete schedule {name}: {e}") from e
        except BotoCoreError as e:
            raise ExternalServiceError(f"Failed to delete schedule {name}: {e}") from e

        logger.info(f"Deleted EventBridge schedule {name}")

    def name_for_handle(self, handle: str) -> str:
        return (handle or "").split("/")[-1]
