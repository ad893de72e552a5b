"""
Generation graph construction.

Builds the fallback graph that decides the mode once and then tries
model candidates strictly one after another.
"""

import logging
from typing import Optional

from langgraph.graph import StateGraph, END
from openai import OpenAI

from tripbuddy.generation.graph.config import DEFAULT_CONFIG, GenerationConfig
from tripbuddy.generation.graph.router import route_after_attempt, route_after_readiness
from tripbuddy.generation.graph.state import GenerationState
from tripbuddy.generation.nodes.attempt import make_attempt_node
from tripbuddy.generation.nodes.outcome import accept_node, make_fail_node
from tripbuddy.generation.nodes.readiness import make_readiness_node


logger = logging.getLogger(__name__)


def create_generation_graph(
    client: OpenAI,
    config: Optional[GenerationConfig] = None,
    debug_logs_dir: Optional[str] = None,
):
    """
    Create and compile the fallback generation graph.

    The graph structure is:
        Entry -> readiness -> route_after_readiness()
                                ├-> attempt_model -> route_after_attempt()
                                │                     ├-> accept -> END
                                │                     ├-> attempt_model (next candidate)
                                │                     └-> fail -> END
                                └-> fail -> END

    Args:
        client: Explicitly constructed OpenAI-compatible client
        config: Optional configuration. Uses DEFAULT_CONFIG if not provided.
        debug_logs_dir: Directory for per-session debug logs (disabled if None)

    Returns:
        Compiled LangGraph application ready for execution.
    """
    if config is None:
        config = DEFAULT_CONFIG

    graph = StateGraph(GenerationState)

    graph.add_node("readiness", make_readiness_node(config.readiness))
    graph.add_node("attempt_model", make_attempt_node(client, config, debug_logs_dir))
    graph.add_node("accept", accept_node)
    graph.add_node("fail", make_fail_node(config))

    graph.set_entry_point("readiness")

    graph.add_conditional_edges(
        "readiness",
        route_after_readiness,
        {
            "attempt_model": "attempt_model",
            "fail": "fail",
        },
    )

    graph.add_conditional_edges(
        "attempt_model",
        route_after_attempt,
        {
            "accept": "accept",
            "attempt_model": "attempt_model",  # Next candidate
            "fail": "fail",
        },
    )

    graph.add_edge("accept", END)
    graph.add_edge("fail", END)

    logger.info(f"Generation graph compiled | candidates={config.models}")
    return graph.compile()
