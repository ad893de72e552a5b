"""
Conversation layer: readiness analysis, prompts, generative UI widgets
and day-count reconciliation.

The client session lives in ``tripbuddy.conversation.tracker``.
"""

from tripbuddy.conversation.readiness import (
    DEFAULT_READINESS_CONFIG,
    ReadinessConfig,
    ReadinessResult,
    analyze_conversation_readiness,
)
from tripbuddy.conversation.ui import WidgetOption, WidgetPrompt, widget_for

__all__ = [
    "DEFAULT_READINESS_CONFIG",
    "ReadinessConfig",
    "ReadinessResult",
    "analyze_conversation_readiness",
    "WidgetOption",
    "WidgetPrompt",
    "widget_for",
]
