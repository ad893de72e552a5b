"""Payload contracts shared by the generation pipeline and its callers."""

from tripbuddy.shared.contracts.trip_itinerary import (
    DayCostBreakdown,
    ItineraryDay,
    TripBudget,
    TripItinerary,
)
from tripbuddy.shared.contracts.generation import (
    ConversationTurn,
    GenerationFailure,
    GenerationResult,
    QuestionResponse,
    UiTag,
)

__all__ = [
    "DayCostBreakdown",
    "ItineraryDay",
    "TripBudget",
    "TripItinerary",
    "ConversationTurn",
    "GenerationFailure",
    "GenerationResult",
    "QuestionResponse",
    "UiTag",
]
