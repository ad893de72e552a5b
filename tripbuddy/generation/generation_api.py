"""
FastAPI endpoint for AI generation.

Accepts the chat history and returns a question-mode reply, a final
itinerary, or the aggregated fallback failure.
"""

import logging
import re
import time
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError
from starlette.concurrency import run_in_threadpool

from tripbuddy.generation.orchestrator import FallbackOrchestrator
from tripbuddy.shared.contracts.generation import ConversationTurn, GenerationFailure
from tripbuddy.shared.logging.debug_logger import (
    DebugLogger,
    get_or_create_logger,
    remove_logger,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])

ENDPOINT = "/api/aimodel"

TIMEOUT_PATTERN = re.compile(r"timeout", re.IGNORECASE)


class GenerateRequest(BaseModel):
    """Request body for the generation endpoint."""

    messages: List[ConversationTurn] = Field(min_length=1, description="Ordered turn history")


def get_orchestrator(request: Request) -> Optional[FallbackOrchestrator]:
    """Orchestrator built at startup; None when no API key is configured."""
    return getattr(request.app.state, "orchestrator", None)


def _error(message: str, status_code: int, **extra: Any) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


def _finish_debug_log(
    debug_logger: Optional[DebugLogger],
    session_id: str,
    start_time: float,
    success: bool,
    error: Optional[str] = None,
) -> None:
    if debug_logger is None:
        return
    debug_logger.log_api_timing(
        endpoint=ENDPOINT,
        duration_ms=(time.perf_counter() - start_time) * 1000,
        success=success,
        error=error,
    )
    debug_logger.log_session_summary()
    remove_logger(session_id)


@router.post("/aimodel")
async def generate(request: Request):
    """
    Run the fallback pipeline over the posted conversation.

    Status codes:
        200: question-mode or final-mode payload
        400: missing or empty ``messages``
        500: missing API key or unexpected server error
        502: every model candidate failed
        504: unexpected error mentioning a timeout
    """
    api_start_time = time.perf_counter()
    session_id = request.headers.get("x-session-id") or str(uuid.uuid4())
    _log = f"[session={session_id}] [graph=generation] [api=aimodel] "

    orchestrator = get_orchestrator(request)
    if orchestrator is None:
        logger.error(f"{_log}Rejected | OPENROUTER_API_KEY is not configured")
        return _error("Missing OPENROUTER_API_KEY", 500)

    try:
        body: Dict[str, Any] = await request.json()
        payload = GenerateRequest.model_validate(body)
    except (ValueError, ValidationError) as e:
        logger.warning(f"{_log}Invalid request body: {e}")
        return _error("Invalid request: messages required", 400)

    debug_logger: Optional[DebugLogger] = None
    logs_dir = getattr(orchestrator, "debug_logs_dir", None)
    if logs_dir:
        debug_logger = get_or_create_logger(session_id, logs_dir)

    messages = [turn.model_dump(exclude_none=True) for turn in payload.messages]
    logger.info(f"{_log}Request received | turns={len(messages)}")

    try:
        result = await run_in_threadpool(orchestrator.run, messages, session_id)
    except Exception as e:
        message = str(e) or "Unknown server error"
        status_code = 504 if TIMEOUT_PATTERN.search(message) else 500
        logger.exception(f"{_log}API route error: {message}")
        _finish_debug_log(debug_logger, session_id, api_start_time, False, message)
        return _error(message, status_code)

    if isinstance(result, GenerationFailure):
        logger.error(f"{_log}All model fallbacks failed | details={len(result.details)}")
        _finish_debug_log(debug_logger, session_id, api_start_time, False, result.error)
        return JSONResponse(result.to_payload(), status_code=502)

    logger.info(f"{_log}Responding | ui={getattr(result, 'ui', None)}")
    _finish_debug_log(debug_logger, session_id, api_start_time, True)
    return JSONResponse(result.to_payload())
