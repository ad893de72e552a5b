"""
Single model invocation.

Builds the mode-specific request, calls the model once and returns the
raw text. Errors propagate; the fallback graph decides what to do next.
"""

import logging
from typing import Any, Dict, Mapping, Sequence, Tuple

from openai import OpenAI

from tripbuddy.conversation.prompts.builders import build_model_messages
from tripbuddy.generation.graph.config import DEFAULT_CONFIG, GenerationConfig
from tripbuddy.shared.llm.client import call_llm_with_usage


logger = logging.getLogger(__name__)


def invoke_model(
    client: OpenAI,
    model: str,
    messages: Sequence[Mapping[str, Any]],
    final_mode: bool,
    config: GenerationConfig = DEFAULT_CONFIG,
) -> Tuple[str, Dict[str, int]]:
    """
    Ask one model for a question-mode or final-mode response.

    Args:
        client: Explicitly constructed OpenAI-compatible client
        model: Model identifier
        messages: Full turn history; only the recent window is sent
        final_mode: Whether to request the final itinerary
        config: Sampling parameters and window size

    Returns:
        Tuple of (raw response text, token usage)

    Raises:
        EmptyResponseError: If the model returns blank content
        openai.APIError: On transport, timeout or HTTP failures
    """
    model_messages = build_model_messages(
        messages, final_mode, limit=config.recent_messages_limit
    )
    logger.debug(
        f"Invoking {model} | final_mode={final_mode}, turns_sent={len(model_messages) - 1}"
    )
    return call_llm_with_usage(
        client,
        model_messages,
        model=model,
        **config.completion_params(final_mode),
    )
