"""
Generation endpoint contracts.

The generation pipeline returns exactly one of three payload shapes:
a question-mode reply, a final itinerary, or an aggregated failure.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from tripbuddy.shared.contracts.trip_itinerary import TripItinerary


class UiTag(str, Enum):
    """Widget the client should render after an assistant turn."""

    BUDGET = "budget"
    GROUP_SIZE = "groupSize"
    DATE_RANGE = "dateRange"
    TRAVEL_INTEREST = "travelInterest"
    FINAL = "Final"


class ConversationTurn(BaseModel):
    """One message in the chat history."""

    model_config = ConfigDict(extra="ignore")

    role: Literal["system", "user", "assistant"]
    content: str = ""
    ui: Optional[str] = Field(default=None, description="uiTag of an assistant turn")

    def to_message(self) -> Dict[str, str]:
        """Model-facing form (role and content only)."""
        return {"role": self.role, "content": self.content}


class QuestionResponse(BaseModel):
    """Question-mode reply: one question plus the widget to render."""

    model_config = ConfigDict(extra="allow")

    resp: str = Field(min_length=1)
    ui: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class DebugInfo(BaseModel):
    """Diagnostic context attached to an aggregated failure."""

    model_config = ConfigDict(populate_by_name=True)

    message_count: int = Field(alias="messageCount")
    info_score: int = Field(alias="infoScore")
    last_message: Optional[str] = Field(default=None, alias="lastMessage")


class GenerationFailure(BaseModel):
    """Returned when every fallback candidate failed."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = "All model fallbacks failed"
    details: List[Dict[str, Any]] = Field(default_factory=list)
    should_generate_final: bool = Field(alias="shouldGenerateFinal")
    debug_info: DebugInfo = Field(alias="debugInfo")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


GenerationResult = Union[QuestionResponse, TripItinerary, GenerationFailure]
