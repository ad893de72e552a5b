"""
Routing logic for the generation graph.

Decides, after each model attempt, whether to accept the result, try
the next candidate, or stop with an aggregated failure.
"""

import logging
from typing import Literal

from tripbuddy.generation.graph.state import GenerationState
from tripbuddy.shared.errors import EmptyResponseError, ParseError, ResponseValidationError
from tripbuddy.shared.retry import RetryPolicy, is_auth_error, is_transient_error


logger = logging.getLogger(__name__)


def can_fall_back(error: BaseException) -> bool:
    """
    Malformed output and validation failures move on to the next model.

    Transient infrastructure conditions and authorization failures stop
    the loop: other candidates share the same gateway and credentials.
    """
    if isinstance(error, (ParseError, ResponseValidationError, EmptyResponseError)):
        return True
    return not is_transient_error(error) and not is_auth_error(error)


def candidate_policy(model_count: int) -> RetryPolicy:
    """One attempt per candidate model, no backoff between candidates."""
    return RetryPolicy(max_attempts=model_count, is_retryable=can_fall_back)


def route_after_attempt(
    state: GenerationState,
) -> Literal["accept", "attempt_model", "fail"]:
    """
    Determine the next node after a model attempt.

    Routing logic:
    1. If the attempt produced a result -> accept
    2. If the failure allows another candidate and one remains -> attempt_model
    3. Otherwise -> fail

    Args:
        state: Current generation state

    Returns:
        Name of the next node to execute
    """
    session_id = state.get("session_id", "unknown")
    attempts_made = state.get("candidate_index", 0)
    models = state.get("models", [])
    _log = f"[session={session_id}] [graph=generation] [router=route_after_attempt] "

    if state.get("result") is not None:
        logger.info(f"{_log}Routing to 'accept' | attempts={attempts_made}/{len(models)}")
        return "accept"

    error = state.get("last_exception")
    if error is not None and candidate_policy(len(models)).should_retry(error, attempts_made):
        logger.info(
            f"{_log}Routing to 'attempt_model' | attempts={attempts_made}/{len(models)}, "
            f"next={models[attempts_made]}"
        )
        return "attempt_model"

    reason = "candidates exhausted"
    if error is not None and not can_fall_back(error):
        reason = "authorization failure" if is_auth_error(error) else "transient upstream failure"

    logger.info(
        f"{_log}Routing to 'fail' | attempts={attempts_made}/{len(models)}, reason={reason}"
    )
    return "fail"


def route_after_readiness(
    state: GenerationState,
) -> Literal["attempt_model", "fail"]:
    """Start with the first candidate, or fail straight away if none are configured."""
    session_id = state.get("session_id", "unknown")
    _log = f"[session={session_id}] [graph=generation] [router=route_after_readiness] "

    if state.get("models"):
        logger.info(f"{_log}Routing to 'attempt_model' | candidates={len(state['models'])}")
        return "attempt_model"

    logger.warning(f"{_log}Routing to 'fail' | no model candidates configured")
    return "fail"
