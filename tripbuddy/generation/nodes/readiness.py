"""
Readiness node for the generation graph.

Decides question mode versus final-itinerary mode once per request.
"""

import logging
from typing import Any, Callable, Dict

from tripbuddy.conversation.readiness import ReadinessConfig, analyze_conversation_readiness
from tripbuddy.generation.graph.state import GenerationState
from tripbuddy.shared.logging.config import log_pipeline_event


logger = logging.getLogger(__name__)


def make_readiness_node(
    config: ReadinessConfig,
) -> Callable[[GenerationState], Dict[str, Any]]:
    """Bind readiness thresholds into a graph node."""

    def readiness_node(state: GenerationState) -> Dict[str, Any]:
        session_id = state.get("session_id", "unknown")
        _log = f"[session={session_id}] [graph=generation] [node=readiness] "

        result = analyze_conversation_readiness(state["messages"], config)

        logger.info(
            f"{_log}Readiness decided | final={result.should_generate_final}, "
            f"score={result.info_score}/6, turns={len(state['messages'])}, "
            f"reason={result.reason}"
        )
        logger.debug(f"{_log}Detected={result.detected}, missing={result.missing}")

        update = {
            "should_generate_final": result.should_generate_final,
            "info_score": result.info_score,
            "readiness_reason": result.reason,
        }
        log_pipeline_event("readiness_analyzed", {**state, **update}, logger=logger)
        return update

    return readiness_node
