"""
Delivery of fired reminders to the downstream endpoint.

deliver_reminder is the job function APScheduler runs when a trigger
fires. It must stay importable by path so persisted jobs can be restored.
"""

import logging

import httpx

from ..config import get_delivery_token, get_delivery_url

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """Raised when the delivery endpoint rejects or cannot be reached."""


def _get_headers() -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    token = get_delivery_token()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def deliver_reminder(contact: str, message: str) -> None:
    """
    POST {contact, message} to the configured delivery endpoint.

    Raises:
        DeliveryError: If no endpoint is configured or the call fails
    """
    url = get_delivery_url()
    if not url:
        raise DeliveryError("REMINDER_DELIVERY_URL not configured")

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            response = await client.post(
                url,
                json={"contact": contact, "message": message},
                headers=_get_headers(),
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"Delivery request failed: {e}") from e

    if response.status_code >= 400:
        raise DeliveryError(
            f"Delivery endpoint returned HTTP {response.status_code}"
        )
    logger.info(f"Delivered reminder to {contact}")
