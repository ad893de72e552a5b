"""
Debug logger for tracking model attempts, API timing, and costs.

Writes per-session JSON Lines log files to a logs directory.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


# Token pricing per 1M tokens (gateway list prices)
MODEL_COSTS = {
    "x-ai/grok-4-fast": {"input": 0.20, "output": 0.50},
    "google/gemini-2.0-flash-exp:free": {"input": 0.0, "output": 0.0},
    "openai/gpt-4.1-mini": {"input": 0.40, "output": 1.60},
}

# Session-based logger registry to ensure same instance is reused
_logger_registry: Dict[str, "DebugLogger"] = {}


def get_or_create_logger(session_id: str, logs_dir: str = "logs") -> "DebugLogger":
    """
    Get an existing logger for the session or create a new one.

    Args:
        session_id: Unique session identifier
        logs_dir: Directory to store log files (default: "logs")

    Returns:
        DebugLogger instance for this session
    """
    if session_id not in _logger_registry:
        _logger_registry[session_id] = DebugLogger(session_id, logs_dir)
    return _logger_registry[session_id]


def remove_logger(session_id: str) -> None:
    """Remove a logger from the registry (e.g., after the request ends)."""
    _logger_registry.pop(session_id, None)


def calculate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    """
    Calculate the cost of a model call based on token usage.

    Args:
        model: Model identifier (e.g., "openai/gpt-4.1-mini")
        input_tokens: Number of input/prompt tokens
        output_tokens: Number of output/completion tokens

    Returns:
        Cost in USD (0.0 for unknown models)
    """
    costs = MODEL_COSTS.get(model, {"input": 0.0, "output": 0.0})
    input_cost = (input_tokens / 1_000_000) * costs["input"]
    output_cost = (output_tokens / 1_000_000) * costs["output"]
    return input_cost + output_cost


class DebugLogger:
    """
    Debug logger that writes per-session JSON log files.

    Tracks model attempts, API timing, token usage, and costs.
    Each session gets its own folder containing ``session_logs.json``.
    """

    def __init__(self, session_id: str, logs_dir: str = "logs"):
        self.session_id = session_id
        self.base_logs_dir = Path(logs_dir)
        self.session_dir = self.base_logs_dir / session_id
        self.log_file = self.session_dir / "session_logs.json"

        self.session_dir.mkdir(parents=True, exist_ok=True)

        self._total_input_tokens = 0
        self._total_output_tokens = 0
        self._total_cost = 0.0
        self._total_llm_duration_ms = 0.0
        self._total_api_duration_ms = 0.0
        self._attempt_count = 0
        self._failed_attempt_count = 0

    def _get_timestamp(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def _append_to_log(self, entry: Dict[str, Any]) -> None:
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")

    def log_model_attempt(
        self,
        model: str,
        mode: str,
        duration_ms: float,
        success: bool,
        input_tokens: int = 0,
        output_tokens: int = 0,
        response: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        """
        Log one fallback attempt against a model.

        Args:
            model: Model identifier
            mode: "question" or "final"
            duration_ms: Time taken for the attempt in milliseconds
            success: Whether the attempt produced an accepted payload
            input_tokens: Number of input tokens (0 if unknown)
            output_tokens: Number of output tokens (0 if unknown)
            response: Raw model text, if any was received
            error: Error message if the attempt failed
        """
        cost = calculate_cost(model, input_tokens, output_tokens)

        self._total_input_tokens += input_tokens
        self._total_output_tokens += output_tokens
        self._total_cost += cost
        self._total_llm_duration_ms += duration_ms
        self._attempt_count += 1
        if not success:
            self._failed_attempt_count += 1

        entry = {
            "type": "model_attempt",
            "timestamp": self._get_timestamp(),
            "session_id": self.session_id,
            "model": model,
            "mode": mode,
            "success": success,
            "duration_ms": round(duration_ms, 2),
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "total_tokens": input_tokens + output_tokens,
            "cost_usd": round(cost, 6),
        }
        if response is not None:
            entry["response"] = response
        if error:
            entry["error"] = error

        self._append_to_log(entry)

    def log_api_timing(
        self,
        endpoint: str,
        duration_ms: float,
        success: bool = True,
        error: Optional[str] = None,
    ) -> None:
        """
        Log API endpoint timing.

        Args:
            endpoint: API endpoint path (e.g., "/api/aimodel")
            duration_ms: Total time for the API call in milliseconds
            success: Whether the API call succeeded
            error: Error message if the call failed
        """
        self._total_api_duration_ms += duration_ms

        entry = {
            "type": "api_timing",
            "timestamp": self._get_timestamp(),
            "session_id": self.session_id,
            "endpoint": endpoint,
            "duration_ms": round(duration_ms, 2),
            "success": success,
        }
        if error:
            entry["error"] = error

        self._append_to_log(entry)

    def get_accumulated_stats(self) -> Dict[str, Any]:
        """Current accumulated statistics, without logging."""
        return {
            "attempt_count": self._attempt_count,
            "failed_attempt_count": self._failed_attempt_count,
            "total_input_tokens": self._total_input_tokens,
            "total_output_tokens": self._total_output_tokens,
            "total_tokens": self._total_input_tokens + self._total_output_tokens,
            "total_cost_usd": round(self._total_cost, 6),
            "total_llm_duration_ms": round(self._total_llm_duration_ms, 2),
            "total_api_duration_ms": round(self._total_api_duration_ms, 2),
        }

    def log_session_summary(self) -> Dict[str, Any]:
        """Log and return a session summary with totals."""
        summary = {
            "type": "session_summary",
            "timestamp": self._get_timestamp(),
            "session_id": self.session_id,
            **self.get_accumulated_stats(),
        }
        self._append_to_log(summary)
        return summary
