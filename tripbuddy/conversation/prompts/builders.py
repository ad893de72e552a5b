"""
Prompt builders for the generation pipeline.

These functions construct the message list sent to the model from the
conversation history and the current mode.
"""

from typing import Any, Dict, List, Mapping, Sequence

from tripbuddy.conversation.prompts.templates import FINAL_PROMPT, QUESTION_PROMPT


# Number of most recent turns forwarded to the model
RECENT_MESSAGES_LIMIT = 12


def select_system_prompt(final_mode: bool) -> str:
    """Final-itinerary prompt or one-question-at-a-time prompt."""
    return FINAL_PROMPT if final_mode else QUESTION_PROMPT


def trim_recent_messages(
    messages: Sequence[Mapping[str, Any]],
    limit: int = RECENT_MESSAGES_LIMIT,
) -> List[Dict[str, str]]:
    """
    Keep the last ``limit`` turns, reduced to role and content.

    Client-side ``system`` turns are dropped; the pipeline supplies its
    own system prompt.

    Args:
        messages: Full turn history
        limit: Maximum number of turns to keep

    Returns:
        Model-facing message dicts
    """
    recent = list(messages)[-limit:] if limit > 0 else []
    return [
        {"role": m.get("role", "user"), "content": m.get("content") or ""}
        for m in recent
        if m.get("role") != "system"
    ]


def build_model_messages(
    messages: Sequence[Mapping[str, Any]],
    final_mode: bool,
    limit: int = RECENT_MESSAGES_LIMIT,
) -> List[Dict[str, str]]:
    """
    Build the complete model input: system prompt then recent turns.

    Args:
        messages: Full turn history
        final_mode: Whether to request the final itinerary
        limit: Recent-turn window size

    Returns:
        Message list ready for the chat completion call
    """
    return [
        {"role": "system", "content": select_system_prompt(final_mode)},
        *trim_recent_messages(messages, limit),
    ]
