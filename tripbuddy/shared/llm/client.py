"""
OpenAI-compatible client construction and completion calls.

The client is built once by the process entry point from Settings and
passed into the generation pipeline; nothing here caches it at module
level.
"""

from typing import Any, Dict, List, Optional, Tuple

from openai import OpenAI

from tripbuddy.shared.errors import ConfigurationError, EmptyResponseError
from tripbuddy.shared.settings import Settings


def create_client(settings: Settings) -> OpenAI:
    """
    Create an OpenAI SDK client pointed at the model gateway.

    Args:
        settings: Process settings with the API key, base URL, retry
            count and timeout

    Returns:
        Configured OpenAI client

    Raises:
        ConfigurationError: If no API key is configured
    """
    if not settings.openrouter_api_key:
        raise ConfigurationError("Missing OPENROUTER_API_KEY")

    return OpenAI(
        base_url=settings.openrouter_base_url,
        api_key=settings.openrouter_api_key,
        max_retries=settings.llm_max_retries,
        timeout=settings.llm_timeout,
    )


def call_llm_with_usage(
    client: OpenAI,
    messages: List[Dict[str, str]],
    model: str,
    **params: Any,
) -> Tuple[str, Dict[str, int]]:
    """
    Call the Chat Completion API and return content with token usage.

    Args:
        client: OpenAI client instance
        messages: List of message dicts with 'role' and 'content' keys
        model: Model identifier to use
        **params: Extra completion parameters (temperature, max_tokens,
            response_format, ...)

    Returns:
        Tuple of (response content, usage dict with input/output/total tokens).
        Usage counts are zero when the provider does not report them.

    Raises:
        EmptyResponseError: If the model returns blank content
    """
    response = client.chat.completions.create(
        model=model,
        messages=messages,
        **params,
    )

    content: Optional[str] = None
    if response is not None and response.choices:
        content = response.choices[0].message.content

    if not content or not content.strip():
        raise EmptyResponseError()

    usage = {"input_tokens": 0, "output_tokens": 0, "total_tokens": 0}
    if getattr(response, "usage", None) is not None:
        usage = {
            "input_tokens": response.usage.prompt_tokens or 0,
            "output_tokens": response.usage.completion_tokens or 0,
            "total_tokens": response.usage.total_tokens or 0,
        }

    return content, usage
