"""
LLM provider abstraction using LiteLLM.

Provides a single text-completion call usable with any LiteLLM provider
(OpenRouter, Anthropic, OpenAI, ...). The model is chosen per call or via
the LLM_PROVIDER environment variable.
"""

from litellm import acompletion

from .config import get_llm_provider


async def complete_text(
    prompt: str,
    system: str | None = None,
    provider: str | None = None,
    max_tokens: int = 150,
    temperature: float = 0.7,
) -> str:
    """
    Generate a single completion from any LLM provider.

    Args:
        prompt: User prompt
        system: Optional system prompt
        provider: Model string like "openrouter/openai/gpt-4-turbo"
        max_tokens: Maximum tokens in response
        temperature: Sampling temperature

    Returns:
        The completion text, stripped

    Raises:
        ValueError: If the provider returned no text
        Exception: Any provider/transport error from LiteLLM
    """
    model = provider or get_llm_provider()

    # LiteLLM uses OpenAI-style messages with system as a message
    messages = [{"role": "user", "content": prompt}]
    if system:
        messages.insert(0, {"role": "system", "content": system})

    response = await acompletion(
        model=model,
        messages=messages,
        max_tokens=max_tokens,
        temperature=temperature,
    )

    choices = getattr(response, "choices", None)
    content = choices[0].message.content if choices else None
    if not isinstance(content, str) or not content.strip():
        raise ValueError(f"Empty completion from {model}")

    return content.strip()
