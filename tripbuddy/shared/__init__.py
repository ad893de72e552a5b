"""
Shared infrastructure for the TripBuddy services.

Modules:
- llm: OpenAI-compatible client construction and completion calls
- logging: Structured JSON logging and per-session debug logs
- contracts: Payload models for generation results and itineraries
- retry: Bounded retry combinator shared by client and server loops
- errors: Exception hierarchy
- settings: Environment-backed settings
"""

from tripbuddy.shared.llm.client import create_client, call_llm_with_usage
from tripbuddy.shared.logging.config import setup_logging, log_pipeline_event

__all__ = [
    "create_client",
    "call_llm_with_usage",
    "setup_logging",
    "log_pipeline_event",
]
