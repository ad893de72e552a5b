"""Prompt templates and builders for the trip planner persona."""

from tripbuddy.conversation.prompts.templates import (
    AGENT_NAME,
    FINAL_PROMPT,
    QUESTION_PROMPT,
)
from tripbuddy.conversation.prompts.builders import (
    RECENT_MESSAGES_LIMIT,
    build_model_messages,
    select_system_prompt,
    trim_recent_messages,
)

__all__ = [
    "AGENT_NAME",
    "FINAL_PROMPT",
    "QUESTION_PROMPT",
    "RECENT_MESSAGES_LIMIT",
    "build_model_messages",
    "select_system_prompt",
    "trim_recent_messages",
]
