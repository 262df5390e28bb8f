"""
Reminder message generation.

The primary path asks an LLM for a short SMS-style reminder. Any failure
there (timeout, quota, malformed response) falls back to a fixed template,
which is pure string formatting and cannot fail.
"""

import asyncio
import logging
from datetime import datetime

from .config import get_llm_timeout_seconds
from .enums import NotificationOffsetKind
from .llm import complete_text
from .offsets import get_offset_label
from .timezone import format_reminder_time

logger = logging.getLogger(__name__)


PROMPT_TEMPLATE = """Generate a friendly, professional reminder message for a task notification.

Context:
- Recipient's name: {name}
- Task description: {task}
- Scheduled date/time: {scheduled_for}
- Notification timing: {label}

Requirements:
- Keep it concise and clear (under 160 characters if possible for SMS)
- Use a warm, professional tone
- Include all the key information (task, date/time, timing)
- Make it actionable and helpful
- Do not use markdown or special formatting
- Start with a greeting using the recipient's name

Generate only the message text, nothing else."""

FALLBACK_TEMPLATE = (
    "Hi {name},\n\n"
    "Reminder: {task}\n\n"
    "Scheduled for: {scheduled_for}\n\n"
    "Notification: {label}"
)


def _safe_label(offset: NotificationOffsetKind | str) -> str:
    try:
        return get_offset_label(offset)
    except ValueError:
        return str(getattr(offset, "value", offset))


def _safe_time(target: datetime, tz_name: str | None) -> str:
    try:
        return format_reminder_time(target, tz_name)
    except Exception:
        return str(target)


def render_fallback_message(
    recipient_name: str,
    task_description: str,
    target: datetime,
    offset: NotificationOffsetKind | str,
    tz_name: str | None = None,
) -> str:
    """
    Render the deterministic template reminder.

    Never raises and performs no I/O.
    """
    return FALLBACK_TEMPLATE.format(
        name=(recipient_name or "").strip() or "there",
        task=task_description,
        scheduled_for=_safe_time(target, tz_name),
        label=_safe_label(offset),
    )


async def generate_message(
    recipient_name: str,
    task_description: str,
    target: datetime,
    offset: NotificationOffsetKind | str,
    tz_name: str | None = None,
    timeout: float | None = None,
) -> str:
    """
    Produce the reminder text delivered for one offset.

    Args:
        recipient_name: Name used in the greeting
        task_description: What the reminder is about
        target: Absolute time of the task itself
        offset: Which lead time this message is for
        tz_name: Recipient timezone for displaying target
        timeout: Hard limit on the LLM call (defaults to LLM_TIMEOUT_SECONDS)

    Returns:
        Non-empty message text. Falls back to the template on any LLM failure.
    """
    label = _safe_label(offset)
    prompt = PROMPT_TEMPLATE.format(
        name=recipient_name,
        task=task_description,
        scheduled_for=_safe_time(target, tz_name),
        label=label,
    )

    if timeout is None:
        timeout = get_llm_timeout_seconds()

    try:
        return await asyncio.wait_for(complete_text(prompt), timeout=timeout)
    except Exception as e:
        logger.warning(
            f"LLM reminder generation failed for offset {label}, using template: {e!r}"
        )

    return render_fallback_message(
        recipient_name, task_description, target, offset, tz_name
    )
