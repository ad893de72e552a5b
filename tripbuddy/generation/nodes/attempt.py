"""
Model attempt node for the generation graph.

Each visit tries exactly one candidate model: invoke, extract,
validate, and (for final itineraries) sanitize and type-check. Any
failure is recorded as a structured error entry and handed to the
router, which decides whether the next candidate is worth trying.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from openai import OpenAI
from pydantic import ValidationError

from tripbuddy.generation.graph.config import GenerationConfig
from tripbuddy.generation.graph.state import GenerationState
from tripbuddy.generation.invoker import invoke_model
from tripbuddy.generation.response_parser import parse_model_response
from tripbuddy.generation.sanitizer import sanitize_payload
from tripbuddy.generation.validator import validate_response
from tripbuddy.shared.contracts.generation import QuestionResponse
from tripbuddy.shared.contracts.trip_itinerary import TripItinerary
from tripbuddy.shared.errors import ResponseValidationError
from tripbuddy.shared.logging.debug_logger import DebugLogger, get_or_create_logger
from tripbuddy.shared.logging.config import log_pipeline_event


logger = logging.getLogger(__name__)


def accept_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Final checks on a validated payload.

    Final itineraries are sanitized and validated into the TripItinerary
    contract; anything else must satisfy QuestionResponse.

    Returns:
        The wire form of the accepted payload

    Raises:
        ResponseValidationError: If the payload does not fit its contract
    """
    is_final = payload.get("ui") == "Final"
    try:
        if is_final:
            itinerary = TripItinerary.model_validate(sanitize_payload(payload))
            return itinerary.to_payload()
        return QuestionResponse.model_validate(payload).to_payload()
    except ValidationError as e:
        raise ResponseValidationError(
            {
                "model": "validation",
                "error": "invalid_final_payload" if is_final else "invalid_question_payload",
                "message": str(e)[:500],
            }
        ) from e


def error_record(model: str, error: BaseException) -> Dict[str, Any]:
    """Structured failure entry for one candidate."""
    if isinstance(error, ResponseValidationError):
        return {**error.detail, "model": model}
    return {"model": model, "error": str(error), "type": type(error).__name__}


def make_attempt_node(
    client: OpenAI,
    config: GenerationConfig,
    debug_logs_dir: Optional[str] = None,
) -> Callable[[GenerationState], Dict[str, Any]]:
    """
    Bind the model client and configuration into a graph node.

    Args:
        client: Explicitly constructed OpenAI-compatible client
        config: Generation configuration
        debug_logs_dir: Directory for per-session debug logs (disabled if None)

    Returns:
        Node function for the generation graph
    """

    def attempt_model_node(state: GenerationState) -> Dict[str, Any]:
        session_id = state.get("session_id") or "unknown"
        index = state.get("candidate_index", 0)
        models = state["models"]
        model = models[index]
        final_mode = state.get("should_generate_final", False)
        mode = "final" if final_mode else "question"
        _log = f"[session={session_id}] [graph=generation] [node=attempt_model] "

        debug_logger: Optional[DebugLogger] = None
        if debug_logs_dir and session_id != "unknown":
            debug_logger = get_or_create_logger(session_id, debug_logs_dir)

        logger.info(
            f"{_log}Entering node | model={model} ({index + 1}/{len(models)}), mode={mode}"
        )

        start_time = time.perf_counter()
        raw: Optional[str] = None
        usage = {"input_tokens": 0, "output_tokens": 0}

        try:
            raw, usage = invoke_model(client, model, state["messages"], final_mode, config)
            payload = parse_model_response(raw)

            outcome = validate_response(payload, config.repair)
            if not outcome.is_valid:
                raise ResponseValidationError(outcome.error or {"error": "validation_failed"})
            if outcome.repaired_days:
                logger.warning(f"{_log}Repaired days {outcome.repaired_days} from templates")

            result = accept_payload(outcome.payload)

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            record = error_record(model, e)
            logger.warning(
                f"{_log}Attempt failed | model={model}, duration={duration_ms:.0f}ms, "
                f"type={type(e).__name__}, error={record.get('error')}"
            )
            if debug_logger:
                debug_logger.log_model_attempt(
                    model=model,
                    mode=mode,
                    duration_ms=duration_ms,
                    success=False,
                    input_tokens=usage.get("input_tokens", 0),
                    output_tokens=usage.get("output_tokens", 0),
                    response=raw,
                    error=str(e),
                )
            update = {
                "candidate_index": index + 1,
                "last_exception": e,
                "errors": [record],
            }
            log_pipeline_event(
                "model_failed",
                {**state, **update, "errors": state.get("errors", []) + [record]},
                extra={"model": model, "error": record.get("error")},
                logger=logger,
            )
            return update

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{_log}Model accepted | model={model}, duration={duration_ms:.0f}ms, "
            f"tokens_in={usage.get('input_tokens', 0)}, "
            f"tokens_out={usage.get('output_tokens', 0)}, ui={result.get('ui')}"
        )
        if debug_logger:
            debug_logger.log_model_attempt(
                model=model,
                mode=mode,
                duration_ms=duration_ms,
                success=True,
                input_tokens=usage.get("input_tokens", 0),
                output_tokens=usage.get("output_tokens", 0),
                response=raw,
            )

        return {
            "candidate_index": index + 1,
            "last_exception": None,
            "result": result,
        }

    return attempt_model_node
