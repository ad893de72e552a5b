"""
Configuration for the generation graph.

Centralizes model candidates, sampling parameters and repair bounds so
behavior can be tuned without modifying the graph wiring.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tripbuddy.conversation.readiness import DEFAULT_READINESS_CONFIG, ReadinessConfig
from tripbuddy.generation.validator import DEFAULT_REPAIR_CONFIG, RepairConfig
from tripbuddy.shared.settings import DEFAULT_MODEL_FALLBACKS


@dataclass
class GenerationConfig:
    """
    Configuration for the generation graph.

    Attributes:
        models: Ordered model candidates tried one after another
        recent_messages_limit: Number of recent turns forwarded to the model
        question_*: Sampling parameters for question mode
        final_*: Sampling parameters for final-itinerary mode
        max_error_details: Failure records included in the aggregated error
        last_message_preview: Characters of the last turn kept for diagnostics
    """

    models: List[str] = field(default_factory=lambda: list(DEFAULT_MODEL_FALLBACKS))

    # Context window
    recent_messages_limit: int = 12

    # Question mode
    question_max_tokens: int = 2000
    question_temperature: float = 0.3
    question_frequency_penalty: float = 0.1

    # Final itinerary mode
    final_max_tokens: int = 12000
    final_temperature: float = 0.35
    final_frequency_penalty: float = 0.3

    # Shared sampling
    top_p: float = 0.9
    presence_penalty: float = 0.0

    # Failure reporting
    max_error_details: int = 3
    last_message_preview: int = 100

    # Graph execution limit
    recursion_limit: int = 25

    readiness: ReadinessConfig = field(default_factory=lambda: DEFAULT_READINESS_CONFIG)
    repair: RepairConfig = field(default_factory=lambda: DEFAULT_REPAIR_CONFIG)

    def completion_params(self, final_mode: bool) -> Dict[str, Any]:
        """Chat completion parameters for the given mode."""
        return {
            "response_format": {"type": "json_object"},
            "temperature": self.final_temperature if final_mode else self.question_temperature,
            "top_p": self.top_p,
            "max_tokens": self.final_max_tokens if final_mode else self.question_max_tokens,
            "presence_penalty": self.presence_penalty,
            "frequency_penalty": (
                self.final_frequency_penalty if final_mode else self.question_frequency_penalty
            ),
        }


# Default configuration instance
DEFAULT_CONFIG = GenerationConfig()


def get_config(
    models: Optional[List[str]] = None,
    recent_messages_limit: Optional[int] = None,
    max_error_details: Optional[int] = None,
    readiness: Optional[ReadinessConfig] = None,
    repair: Optional[RepairConfig] = None,
) -> GenerationConfig:
    """
    Create a configuration with optional overrides.

    Args:
        models: Override for the ordered model candidates
        recent_messages_limit: Override for the context window
        max_error_details: Override for failure records in the aggregate
        readiness: Override for readiness thresholds
        repair: Override for repair bounds

    Returns:
        GenerationConfig with specified overrides applied
    """
    return GenerationConfig(
        models=list(models) if models else list(DEFAULT_CONFIG.models),
        recent_messages_limit=recent_messages_limit or DEFAULT_CONFIG.recent_messages_limit,
        max_error_details=max_error_details or DEFAULT_CONFIG.max_error_details,
        readiness=readiness or DEFAULT_CONFIG.readiness,
        repair=repair or DEFAULT_CONFIG.repair,
    )
