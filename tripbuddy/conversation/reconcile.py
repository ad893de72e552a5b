"""
Day-count reconciliation for final itineraries.

The user's desired trip length is inferred from what they typed (an
explicit date range or an "N day(s)" phrase). When the generated
itinerary disagrees, extra days are cut and missing days are padded
from a small rotating set of generic day plans, then days and the
budget breakdown are renumbered 1..N.
"""

import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional

from tripbuddy.generation.validator import align_budget_breakdown


logger = logging.getLogger(__name__)


DATE_RANGE_PATTERN = re.compile(
    r"Travel dates: from (\d{4}-\d{2}-\d{2}) to (\d{4}-\d{2}-\d{2})", re.IGNORECASE
)
DAY_COUNT_PATTERN = re.compile(r"\b(\d{1,3})\s*-?\s*day(s)?\b", re.IGNORECASE)


PADDING_DAY_TEMPLATES = [
    {
        "title": "Leisure & Local Discovery",
        "morning": "Start with a relaxed breakfast, stroll a nearby market or old town lanes.",
        "afternoon": "Visit a well-rated museum or green park; enjoy a local cafe.",
        "evening": "Dinner at a recommended bistro and a riverside or promenade walk.",
    },
    {
        "title": "Hidden Gems & Culture",
        "morning": "Free walking tour or explore a street-art district with coffee stops.",
        "afternoon": "Cultural center or lesser-known attraction; sample a regional snack.",
        "evening": "Catch sunset from a viewpoint; consider live music or a local event.",
    },
    {
        "title": "Foodie Trail",
        "morning": "Cafe hop; try a signature local pastry or brunch special.",
        "afternoon": "Visit a popular lunch spot; browse a specialty food market.",
        "evening": "Book dinner at a recommended restaurant; explore a night market.",
    },
    {
        "title": "Nature & Relaxation",
        "morning": "Take a scenic walk, short hike, or botanical garden visit.",
        "afternoon": "Relax at a garden/beach/riverfront; optional spa or tea stop.",
        "evening": "Casual dinner and quiet neighborhood stroll for dessert.",
    },
]


def infer_desired_days(text: str) -> Optional[int]:
    """
    Desired trip length from user text.

    A ``Travel dates: from A to B`` range counts both ends; otherwise an
    "N day(s)" / "N-day" phrase is used.

    Returns:
        Day count, or None if the text does not state one
    """
    match = DATE_RANGE_PATTERN.search(text)
    if match:
        try:
            start = date.fromisoformat(match.group(1))
            end = date.fromisoformat(match.group(2))
        except ValueError:
            return None
        return max(0, (end - start).days) + 1

    match = DAY_COUNT_PATTERN.search(text)
    if match:
        days = int(match.group(1))
        return days if days > 0 else None

    return None


def enrich_with_duration(content: str, desired_days: Optional[int]) -> str:
    """Append an explicit trip-length instruction to a date-range message."""
    if desired_days and desired_days > 0 and "travel dates:" in content.lower():
        return (
            f"{content}\n\nIMPORTANT: This is a {desired_days}-day trip. Please generate "
            f"a complete {desired_days}-day itinerary with all details for each day."
        )
    return content


def padding_day(day_number: int) -> Dict[str, Any]:
    """Generic complete day; templates rotate by day number."""
    template = PADDING_DAY_TEMPLATES[(day_number - 1) % len(PADDING_DAY_TEMPLATES)]
    return {"day": day_number, **template}


def align_payload_budget(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Budget breakdown matched to the itinerary length; same object if already aligned."""
    budget = payload.get("budget")
    itinerary = payload.get("itinerary")
    if not isinstance(budget, dict) or not isinstance(itinerary, list):
        return payload

    aligned = align_budget_breakdown(budget, len(itinerary))
    if aligned == budget:
        return payload
    logger.info(f"Aligning budget breakdown to {len(itinerary)} days")
    return {**payload, "budget": aligned}


def reconcile_day_count(payload: Dict[str, Any], desired_days: Optional[int]) -> Dict[str, Any]:
    """
    Force a final itinerary to the desired number of days.

    Args:
        payload: Final-mode payload (not modified)
        desired_days: Target day count; None keeps the days and only
            aligns the budget breakdown to them

    Returns:
        A payload with days numbered 1..N and, when a budget is present,
        a breakdown with exactly N entries. The input is returned as is
        when nothing needs to change.
    """
    itinerary = payload.get("itinerary")
    if not isinstance(itinerary, list):
        return payload
    if not desired_days or desired_days <= 0:
        return align_payload_budget(payload)

    current: List[Any] = list(itinerary)
    if len(current) > desired_days:
        logger.info(f"Truncating itinerary from {len(current)} to {desired_days} days")
        current = current[:desired_days]
    elif len(current) < desired_days:
        logger.info(f"Padding itinerary from {len(current)} to {desired_days} days")
        current.extend(padding_day(d) for d in range(len(current) + 1, desired_days + 1))

    days = [
        {**(day if isinstance(day, dict) else {}), "day": idx + 1}
        for idx, day in enumerate(current)
    ]
    reconciled = {**payload, "itinerary": days}

    if isinstance(payload.get("budget"), dict):
        reconciled["budget"] = align_budget_breakdown(payload["budget"], len(days))

    return reconciled
