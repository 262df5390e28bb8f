"""Tests for LLM wrapper module."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch


def mock_completion(content):
    mock_message = MagicMock()
    mock_message.content = content

    mock_choice = MagicMock()
    mock_choice.message = mock_message

    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    return mock_response


@pytest.mark.asyncio
async def test_complete_text_returns_stripped_content():
    """Should return the first choice's text, stripped."""
    from reminder_core.llm import complete_text

    with patch(
        "reminder_core.llm.acompletion",
        new_callable=AsyncMock,
        return_value=mock_completion("  Hi Dana!  \n"),
    ):
        result = await complete_text("Write a reminder", provider="openai/gpt-4o-mini")

    assert result == "Hi Dana!"


@pytest.mark.asyncio
async def test_complete_text_uses_configured_provider(monkeypatch):
    """Should use LLM_PROVIDER when no provider specified."""
    from reminder_core.llm import complete_text

    monkeypatch.setenv("LLM_PROVIDER", "anthropic/claude-3-5-haiku-latest")

    with patch(
        "reminder_core.llm.acompletion",
        new_callable=AsyncMock,
        return_value=mock_completion("ok"),
    ) as mock_acompletion:
        await complete_text("Write a reminder", system="Be brief.")

    call_kwargs = mock_acompletion.call_args.kwargs
    assert call_kwargs["model"] == "anthropic/claude-3-5-haiku-latest"
    assert call_kwargs["messages"][0] == {"role": "system", "content": "Be brief."}
    assert call_kwargs["messages"][1]["role"] == "user"


@pytest.mark.asyncio
async def test_complete_text_rejects_empty_response():
    """Should raise when the provider returns no text."""
    from reminder_core.llm import complete_text

    with patch(
        "reminder_core.llm.acompletion",
        new_callable=AsyncMock,
        return_value=mock_completion("   "),
    ):
        with pytest.raises(ValueError):
            await complete_text("Write a reminder")
