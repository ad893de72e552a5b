"""Logging configuration and utilities."""

from tripbuddy.shared.logging.config import (
    setup_logging,
    log_pipeline_event,
    StructuredFormatter,
    quiet_third_party_loggers,
)
from tripbuddy.shared.logging.debug_logger import (
    DebugLogger,
    get_or_create_logger,
    remove_logger,
    calculate_cost,
)

__all__ = [
    "setup_logging",
    "log_pipeline_event",
    "StructuredFormatter",
    "quiet_third_party_loggers",
    "DebugLogger",
    "get_or_create_logger",
    "remove_logger",
    "calculate_cost",
]
