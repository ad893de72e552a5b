"""
Fallback orchestrator.

Owns the model client and the compiled generation graph, and turns a
conversation into exactly one GenerationResult variant. Nothing raised
by a model attempt escapes ``run``; callers branch on the result type.
"""

import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence

from openai import OpenAI

from tripbuddy.generation.graph.build import create_generation_graph
from tripbuddy.generation.graph.config import DEFAULT_CONFIG, GenerationConfig
from tripbuddy.shared.contracts.generation import (
    GenerationFailure,
    GenerationResult,
    QuestionResponse,
)
from tripbuddy.shared.contracts.trip_itinerary import TripItinerary


logger = logging.getLogger(__name__)


class FallbackOrchestrator:
    """
    Sequential model fallback over an explicitly constructed client.

    Usage:
        orchestrator = FallbackOrchestrator(create_client(settings))
        result = orchestrator.run(messages)
        if isinstance(result, GenerationFailure):
            ...
    """

    def __init__(
        self,
        client: OpenAI,
        config: Optional[GenerationConfig] = None,
        debug_logs_dir: Optional[str] = None,
    ):
        self.client = client
        self.config = config or DEFAULT_CONFIG
        self.debug_logs_dir = debug_logs_dir
        self.graph = create_generation_graph(client, self.config, debug_logs_dir)

    @property
    def models(self) -> List[str]:
        return list(self.config.models)

    def initial_state(
        self,
        messages: Sequence[Mapping[str, Any]],
        session_id: str,
    ) -> Dict[str, Any]:
        return {
            "session_id": session_id,
            "messages": [dict(m) for m in messages],
            "models": self.models,
            "should_generate_final": False,
            "info_score": 0,
            "readiness_reason": "",
            "candidate_index": 0,
            "last_exception": None,
            "errors": [],
            "result": None,
            "failure": None,
            "status": "pending",
        }

    def run_state(
        self,
        messages: Sequence[Mapping[str, Any]],
        session_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Run the graph and return the final state."""
        session_id = session_id or str(uuid.uuid4())
        _log = f"[session={session_id}] [graph=generation] [orchestrator=run] "

        logger.info(
            f"{_log}Generation starting | turns={len(messages)}, candidates={len(self.models)}"
        )
        return self.graph.invoke(
            self.initial_state(messages, session_id),
            # readiness + one step per candidate + terminal node
            config={
                "recursion_limit": max(self.config.recursion_limit, len(self.models) + 3)
            },
        )

    def run(
        self,
        messages: Sequence[Mapping[str, Any]],
        session_id: Optional[str] = None,
    ) -> GenerationResult:
        """
        Generate a question, an itinerary, or an aggregated failure.

        Args:
            messages: Turn history (dicts with 'role' and 'content')
            session_id: Optional id used in log prefixes and debug logs

        Returns:
            QuestionResponse, TripItinerary, or GenerationFailure
        """
        final_state = self.run_state(messages, session_id)

        result = final_state.get("result")
        if final_state.get("status") == "accepted" and result is not None:
            if result.get("ui") == "Final":
                return TripItinerary.model_validate(result)
            return QuestionResponse.model_validate(result)

        return GenerationFailure.model_validate(final_state["failure"])
