"""
Structured logging configuration.

Every module logs plain text with bracketed context prefixes such as
``[session=abc] [graph=generation] [node=attempt_model]``. In JSON mode
the formatter lifts those tags into top-level fields so log pipelines can
filter by session or node without parsing messages.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


CONTEXT_TAG_PATTERN = re.compile(r"^\[(\w+)=([^\]]*)\]\s*")

NOISY_LOGGERS = ("httpcore", "httpx", "openai")


def split_context(message: str) -> Tuple[Dict[str, str], str]:
    """Leading ``[key=value]`` tags as a dict, plus the remaining text."""
    context: Dict[str, str] = {}
    match = CONTEXT_TAG_PATTERN.match(message)
    while match:
        context[match.group(1)] = match.group(2)
        message = message[match.end():]
        match = CONTEXT_TAG_PATTERN.match(message)
    return context, message


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record.

    Fields: ``timestamp``, ``level``, ``logger``, ``message``, any context
    tags from the message prefix (``session``, ``graph``, ``node``, ``api``),
    ``pipeline`` for events logged via ``log_pipeline_event``, and
    ``exception`` when the record carries one.
    """

    def format(self, record: logging.LogRecord) -> str:
        context, message = split_context(record.getMessage())
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            **context,
            "message": message,
        }

        pipeline = getattr(record, "pipeline", None)
        if pipeline:
            entry["pipeline"] = pipeline
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def quiet_third_party_loggers(level: int = logging.WARNING) -> None:
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Route all records through the JSON formatter.

    Replaces any handlers on the root logger, so uvicorn and library
    records come out in the same shape as the service's own.

    Args:
        level: Root logging level
        log_file: Optional file that receives a copy of every record
    """
    formatter = StructuredFormatter()
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    quiet_third_party_loggers()


def log_pipeline_event(
    event: str,
    state: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a generation graph transition with a summary of its state.

    Args:
        event: Event name ("readiness_analyzed", "model_failed", ...)
        state: Generation state; only the routing fields are summarized
        extra: Event-specific context (model, error code)
        logger: Logger to use; defaults to the package logger
    """
    logger = logger or logging.getLogger("tripbuddy")
    models = state.get("models") or []

    pipeline: Dict[str, Any] = {
        "event": event,
        "mode": "final" if state.get("should_generate_final") else "question",
        "info_score": state.get("info_score"),
        "candidate": f"{state.get('candidate_index', 0)}/{len(models)}",
        "failed_attempts": len(state.get("errors") or []),
        "status": state.get("status"),
    }
    if extra:
        pipeline.update(extra)

    logger.info(
        f"[session={state.get('session_id') or 'unknown'}] [graph=generation] "
        f"Pipeline event: {event}",
        extra={"pipeline": pipeline},
    )
