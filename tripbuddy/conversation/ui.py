"""
Generative UI widgets.

Maps the ``ui`` tag of an assistant turn to the structured input the
client should offer next, and turns a widget selection into the exact
user text the conversation expects.
"""

from datetime import date
from typing import Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, Field

from tripbuddy.shared.contracts.generation import UiTag


class WidgetOption(BaseModel):
    """One selectable option of a widget."""

    title: str
    value: str = Field(description="Text after the colon in the sent message")
    description: Optional[str] = None

    def as_message(self) -> str:
        return f"{self.title}:{self.value}"


class WidgetPrompt(BaseModel):
    """Structured input to render after an assistant turn."""

    tag: UiTag
    label: str
    options: List[WidgetOption] = Field(default_factory=list)
    multi_select: bool = False
    allows_custom: bool = False


BUDGET_OPTIONS = [
    WidgetOption(title="Cheap", value="Stay conscious of costs"),
    WidgetOption(title="Moderate", value="Keep cost on the average side"),
    WidgetOption(title="Luxury", value="Don't worry about cost"),
]

GROUP_SIZE_OPTIONS = [
    WidgetOption(title="Solo", value="1", description="A sole traveler in exploration"),
    WidgetOption(title="Couple", value="2 People", description="Two travelers in tandem"),
    WidgetOption(
        title="Family", value="3 to 5 People", description="A group of fun loving adventurers"
    ),
    WidgetOption(title="Friends", value="5 to 10 People", description="A bunch of thrill-seekers"),
]

TRAVEL_INTERESTS = [
    "Adventure",
    "Sightseeing",
    "Cultural",
    "Food",
    "Nightlife",
    "Relaxation",
    "Beach",
    "Nature",
    "Music & Festivals",
    "Shopping",
    "Global Experiences",
]

CUSTOM_MIN_LENGTH = 2
CUSTOM_MAX_LENGTH = 50


WIDGETS: Dict[UiTag, WidgetPrompt] = {
    UiTag.BUDGET: WidgetPrompt(
        tag=UiTag.BUDGET,
        label="Select your budget",
        options=BUDGET_OPTIONS,
        allows_custom=True,
    ),
    UiTag.GROUP_SIZE: WidgetPrompt(
        tag=UiTag.GROUP_SIZE,
        label="Who's traveling?",
        options=GROUP_SIZE_OPTIONS,
        allows_custom=True,
    ),
    UiTag.DATE_RANGE: WidgetPrompt(
        tag=UiTag.DATE_RANGE,
        label="Pick your travel dates",
    ),
    UiTag.TRAVEL_INTEREST: WidgetPrompt(
        tag=UiTag.TRAVEL_INTEREST,
        label="What are you interested in?",
        options=[WidgetOption(title=t, value=t) for t in TRAVEL_INTERESTS],
        multi_select=True,
        allows_custom=True,
    ),
}


def widget_for(ui: Optional[str]) -> Optional[WidgetPrompt]:
    """Widget for a ``ui`` tag; None for free text, ``Final`` or unknown tags."""
    if not ui:
        return None
    try:
        return WIDGETS.get(UiTag(ui))
    except ValueError:
        return None


def _validate_custom(value: str) -> str:
    value = value.strip()
    if len(value) < CUSTOM_MIN_LENGTH:
        raise ValueError(f"Please enter at least {CUSTOM_MIN_LENGTH} characters.")
    if len(value) > CUSTOM_MAX_LENGTH:
        raise ValueError(f"Maximum length is {CUSTOM_MAX_LENGTH} characters.")
    return value


def budget_message(option: Optional[str] = None, custom: Optional[str] = None) -> str:
    """``Cheap:Stay conscious of costs`` or ``Budget: <custom>``."""
    if custom is not None:
        return f"Budget: {_validate_custom(custom)}"
    return _option_message(BUDGET_OPTIONS, option)


def group_size_message(option: Optional[str] = None, custom: Optional[str] = None) -> str:
    """``Couple:2 People`` or ``Group size: <custom>``."""
    if custom is not None:
        return f"Group size: {custom.strip()}"
    return _option_message(GROUP_SIZE_OPTIONS, option)


def _option_message(options: Sequence[WidgetOption], title: Optional[str]) -> str:
    for opt in options:
        if title is not None and opt.title.lower() == title.lower():
            return opt.as_message()
    raise ValueError(f"Unknown option: {title!r}")


def date_range_message(start: Union[date, str], end: Union[date, str]) -> str:
    """``Travel dates: from YYYY-MM-DD to YYYY-MM-DD``."""
    start_d = date.fromisoformat(start) if isinstance(start, str) else start
    end_d = date.fromisoformat(end) if isinstance(end, str) else end
    if end_d < start_d:
        raise ValueError("End date must not be before start date")
    return f"Travel dates: from {start_d.isoformat()} to {end_d.isoformat()}"


def interests_message(selected: Sequence[str]) -> str:
    """``Interests: A, B``; custom interests are allowed alongside the presets."""
    chosen: List[str] = []
    for item in selected:
        item = item.strip()
        if item and item not in chosen:
            chosen.append(item)
    if not chosen:
        raise ValueError("Select at least one interest")
    return f"Interests: {', '.join(chosen)}"
