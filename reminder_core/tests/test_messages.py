"""Tests for reminder message generation."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from reminder_core.enums import NotificationOffsetKind

TARGET = datetime(2025, 6, 10, 15, 0, tzinfo=timezone.utc)


class TestRenderFallbackMessage:
    def test_contains_name_task_time_and_label(self):
        from reminder_core.messages import render_fallback_message

        message = render_fallback_message(
            "Dana", "Site walkthrough", TARGET, NotificationOffsetKind.one_day
        )

        assert message == (
            "Hi Dana,\n\n"
            "Reminder: Site walkthrough\n\n"
            "Scheduled for: June 10, 2025 at 3:00 PM (UTC)\n\n"
            "Notification: 1 Day Before"
        )

    def test_blank_name_still_renders(self):
        from reminder_core.messages import render_fallback_message

        message = render_fallback_message("", "Inspection", TARGET, "1hour")

        assert message.startswith("Hi there,")
        assert "1 Hour Before" in message

    def test_uses_recipient_timezone(self):
        from reminder_core.messages import render_fallback_message

        message = render_fallback_message(
            "Dana", "Inspection", TARGET, "1week", tz_name="Asia/Bangkok"
        )

        assert "10:00 PM (UTC+7)" in message


class TestGenerateMessage:
    @pytest.mark.asyncio
    async def test_returns_llm_text(self):
        from reminder_core.messages import generate_message

        with patch(
            "reminder_core.messages.complete_text",
            new_callable=AsyncMock,
            return_value="Hi Dana! Site walkthrough tomorrow at 3 PM.",
        ) as mock_complete:
            message = await generate_message(
                "Dana", "Site walkthrough", TARGET, NotificationOffsetKind.one_day
            )

        assert message == "Hi Dana! Site walkthrough tomorrow at 3 PM."
        prompt = mock_complete.call_args[0][0]
        assert "Dana" in prompt
        assert "Site walkthrough" in prompt
        assert "1 Day Before" in prompt
        assert "June 10, 2025 at 3:00 PM (UTC)" in prompt

    @pytest.mark.asyncio
    async def test_falls_back_when_llm_errors(self, caplog):
        from reminder_core.messages import generate_message
        import logging

        with patch(
            "reminder_core.messages.complete_text",
            new_callable=AsyncMock,
            side_effect=RuntimeError("quota exceeded"),
        ):
            with caplog.at_level(logging.WARNING):
                message = await generate_message(
                    "Dana", "Site walkthrough", TARGET, NotificationOffsetKind.one_hour
                )

        assert "Dana" in message
        assert "Site walkthrough" in message
        assert "1 Hour Before" in message
        assert any("using template" in r.message for r in caplog.records)

    @pytest.mark.asyncio
    async def test_falls_back_on_timeout(self):
        from reminder_core.messages import generate_message

        async def slow_completion(prompt):
            await asyncio.sleep(5)
            return "too late"

        with patch("reminder_core.messages.complete_text", side_effect=slow_completion):
            message = await generate_message(
                "Dana", "Site walkthrough", TARGET, "1week", timeout=0.01
            )

        assert message.startswith("Hi Dana,")
        assert "1 Week Before" in message

    @pytest.mark.asyncio
    async def test_falls_back_on_empty_completion(self):
        from reminder_core.messages import generate_message

        with patch(
            "reminder_core.messages.complete_text",
            new_callable=AsyncMock,
            side_effect=ValueError("Empty completion"),
        ):
            message = await generate_message("Dana", "Inspection", TARGET, "1day")

        assert message
        assert "Inspection" in message
