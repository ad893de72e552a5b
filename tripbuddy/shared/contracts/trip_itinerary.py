"""
Trip itinerary contract.

Defines the final-mode payload the generation pipeline hands to the
conversation tracker and the persistence layer. Model output is first
handled as an untyped dict (extraction, repair) and only then validated
into these models; unknown keys are preserved.

Only ``resp`` and the four required day fields are strict. Everything
else models produce loosely (null prices, plain-string hotels, tip lists,
zero-based day numbers), so the optional fields accept those shapes
as-is and a nested object that does not fit its model is kept as a dict.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


Number = Union[int, float, str]


class _Payload(BaseModel):
    """Base for payload models: camelCase on the wire, extras preserved."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class PricedItem(_Payload):
    """A named cost line (hotel night, activity ticket)."""

    name: Optional[str] = Field(default=None, description="Item name")
    price: Optional[Any] = Field(default=None, description="Price in budget currency")


class DayCostBreakdown(_Payload):
    """Per-day cost summary; synthesizable with zero costs."""

    day: Optional[Number] = Field(default=None, description="Itinerary day this entry belongs to")
    total: Optional[Any] = Field(default=0, description="Total cost for the day")
    hotels: Optional[List[Union[PricedItem, str, Dict[str, Any]]]] = Field(default_factory=list)
    activities: Optional[List[Union[PricedItem, str, Dict[str, Any]]]] = Field(
        default_factory=list
    )


class BudgetCategory(_Payload):
    """A trip-level cost category (flights, hotels, meals...)."""

    category: Optional[str] = None
    cost: Optional[Any] = 0
    notes: Optional[Any] = None


class TripBudget(_Payload):
    """Trip budget with category estimates and a per-day breakdown."""

    currency: Optional[str] = Field(default="USD")
    total: Optional[Any] = Field(default=0)
    estimated_breakdown: List[Union[BudgetCategory, Dict[str, Any], Any]] = Field(
        default_factory=list, alias="estimatedBreakdown"
    )
    breakdown: List[Union[DayCostBreakdown, Dict[str, Any]]] = Field(default_factory=list)


class WeatherInfo(_Payload):
    """Expected weather for a day."""

    summary: Optional[str] = None
    tips: Optional[Union[str, List[str]]] = None


class ItineraryDay(_Payload):
    """
    A single day in the itinerary.

    ``title``, ``morning``, ``afternoon`` and ``evening`` must be non-empty
    for the day to be complete; the validator repairs or rejects days
    before they reach this model.
    """

    day: Optional[Number] = Field(default=None, description="Day number as the model gave it")
    date: Optional[Any] = Field(default=None, description="ISO date (YYYY-MM-DD)")
    title: str = Field(min_length=1)
    morning: str = Field(min_length=1)
    afternoon: str = Field(min_length=1)
    evening: str = Field(min_length=1)
    description: Optional[Any] = None
    notes: Optional[Any] = None
    weather: Optional[Union[WeatherInfo, str, Dict[str, Any]]] = None
    hidden_gems: Optional[Any] = Field(default=None, alias="hiddenGems")
    cafes: Optional[Any] = None
    cafe_details: Optional[Any] = Field(default=None, alias="cafeDetails")
    hotels: Optional[Any] = None
    hotel_details: Optional[Any] = Field(default=None, alias="hotelDetails")
    adventures: Optional[Any] = None
    adventure_details: Optional[Any] = Field(default=None, alias="adventureDetails")
    maps_links: Optional[Any] = Field(default=None, alias="mapsLinks")
    photos: Optional[Any] = None


class TripItinerary(_Payload):
    """
    Final-mode payload (``ui == "Final"``).

    The conversation tracker reconciles every final payload so that
    ``len(budget.breakdown) == len(itinerary)`` with days numbered 1..N.
    """

    resp: str = Field(min_length=1, description="Friendly trip summary")
    ui: str = Field(default="Final")
    trip_title: Optional[Any] = Field(default=None, alias="tripTitle")
    duration: Optional[Any] = None
    travel_style: Optional[Any] = Field(default=None, alias="travelStyle")
    traveler_type: Optional[Any] = Field(default=None, alias="travelerType")
    season: Optional[Any] = None
    overview: Optional[Any] = None
    quick_facts: Optional[Any] = Field(default=None, alias="quickFacts")
    flights: Optional[Any] = None
    accommodation: Optional[Any] = None
    recommended_cafes: Optional[Any] = Field(default=None, alias="recommendedCafes")
    dates: Optional[Any] = None
    budget: Optional[Union[TripBudget, Dict[str, Any], Any]] = None
    itinerary: List[ItineraryDay] = Field(min_length=1)
    packing_checklist: Optional[Any] = Field(default=None, alias="packingChecklist")
    local_tips: Optional[Any] = Field(default=None, alias="localTips")

    def to_payload(self) -> Dict[str, Any]:
        """Wire form: camelCase keys, only the fields that were provided."""
        return self.model_dump(by_alias=True, exclude_unset=True)
