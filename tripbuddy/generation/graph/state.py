"""
Generation state schema.

Defines the state that flows through the fallback graph for a single
generation request.
"""

from typing import Annotated, Any, Dict, List, Optional, TypedDict
import operator


class GenerationState(TypedDict):
    """
    State schema for the generation graph.

    One request cycle: readiness is decided once, then model candidates
    are attempted strictly in order until one is accepted or the loop
    stops.
    """

    # Request
    session_id: Optional[str]
    messages: List[Dict[str, Any]]
    models: List[str]

    # Readiness (set by the readiness node)
    should_generate_final: bool
    info_score: int
    readiness_reason: str

    # Candidate tracking
    candidate_index: int
    last_exception: Optional[BaseException]

    # Per-attempt failure records ({model, error, ...})
    errors: Annotated[List[Dict[str, Any]], operator.add]

    # Outcome
    result: Optional[Dict[str, Any]]
    failure: Optional[Dict[str, Any]]
    status: str
