"""
Terminal nodes for the generation graph.

``accept`` marks the request successful; ``fail`` builds the aggregated
failure payload from the recorded per-candidate errors.
"""

import logging
from typing import Any, Callable, Dict

from tripbuddy.generation.graph.config import GenerationConfig
from tripbuddy.generation.graph.state import GenerationState
from tripbuddy.shared.logging.config import log_pipeline_event


logger = logging.getLogger(__name__)


def accept_node(state: GenerationState) -> Dict[str, Any]:
    session_id = state.get("session_id", "unknown")
    _log = f"[session={session_id}] [graph=generation] [node=accept] "

    result = state.get("result") or {}
    logger.info(
        f"{_log}Generation complete | ui={result.get('ui')}, "
        f"days={len(result.get('itinerary') or [])}, failed_attempts={len(state.get('errors', []))}"
    )
    log_pipeline_event("generation_accepted", state, logger=logger)
    return {"status": "accepted"}


def build_failure_payload(state: GenerationState, config: GenerationConfig) -> Dict[str, Any]:
    """
    Aggregated failure: the first few error records plus diagnostics.

    Args:
        state: Final generation state
        config: Limits for the error list and message preview

    Returns:
        Failure payload in wire form
    """
    messages = state.get("messages") or []
    last_message = None
    if messages:
        content = messages[-1].get("content")
        if isinstance(content, str):
            last_message = content[: config.last_message_preview]

    return {
        "error": "All model fallbacks failed",
        "details": list(state.get("errors", []))[: config.max_error_details],
        "shouldGenerateFinal": state.get("should_generate_final", False),
        "debugInfo": {
            "messageCount": len(messages),
            "infoScore": state.get("info_score", 0),
            "lastMessage": last_message,
        },
    }


def make_fail_node(
    config: GenerationConfig,
) -> Callable[[GenerationState], Dict[str, Any]]:
    """Bind failure-report limits into a graph node."""

    def fail_node(state: GenerationState) -> Dict[str, Any]:
        session_id = state.get("session_id", "unknown")
        _log = f"[session={session_id}] [graph=generation] [node=fail] "

        errors = state.get("errors", [])
        logger.error(f"{_log}All models failed | attempts={len(errors)}, errors={errors}")
        log_pipeline_event("generation_failed", state, logger=logger)

        return {
            "status": "failed",
            "failure": build_failure_payload(state, config),
        }

    return fail_node
