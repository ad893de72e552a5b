"""
Itinerary validation and bounded repair.

Final-mode responses are checked day by day for the four required
fields. A few incomplete days in a long enough itinerary are filled
from fixed templates instead of re-invoking the model; anything worse
is rejected so the fallback loop can try the next candidate.
"""

import copy
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


logger = logging.getLogger(__name__)


REQUIRED_DAY_FIELDS = ("title", "morning", "afternoon", "evening")

# Repair templates are per field, not per day; only the title carries the day number
REPAIR_TITLE_TEMPLATE = "Day {day} - Explore & Discover"
REPAIR_FIELD_TEMPLATES = {
    "morning": (
        "Start your day with a leisurely breakfast. Explore local neighborhoods "
        "and discover hidden gems at your own pace."
    ),
    "afternoon": (
        "Visit a popular attraction or museum. Enjoy lunch at a recommended local "
        "spot and continue sightseeing."
    ),
    "evening": (
        "Relax with dinner at a nice restaurant. Take an evening stroll and soak "
        "in the local atmosphere."
    ),
}

RAW_PREVIEW_CHARS = 500


@dataclass
class RepairConfig:
    """Bounds on local repair."""

    max_incomplete_days: int = 3
    min_total_days: int = 3


DEFAULT_REPAIR_CONFIG = RepairConfig()


@dataclass
class ValidationOutcome:
    """
    Result of validating a response object.

    Attributes:
        is_valid: Whether the payload can be returned to the caller
        payload: The (possibly repaired) payload; the input is never mutated
        error: Structured error entry when invalid
        incomplete_days: 1-based indices of days that failed the check
        repaired_days: 1-based indices of days that were filled from templates
    """

    is_valid: bool
    payload: Dict[str, Any]
    error: Optional[Dict[str, Any]] = None
    incomplete_days: List[int] = field(default_factory=list)
    repaired_days: List[int] = field(default_factory=list)


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def is_day_complete(day: Any) -> bool:
    """A day is complete when title, morning, afternoon and evening are non-empty strings."""
    if not isinstance(day, dict):
        return False
    return all(_is_filled(day.get(name)) for name in REQUIRED_DAY_FIELDS)


def fill_incomplete_day(day: Dict[str, Any], day_number: int) -> Dict[str, Any]:
    """
    Fill only the missing required fields of a day.

    Args:
        day: Day object (not modified)
        day_number: 1-based position used in the title template

    Returns:
        A new day dict whose present fields are untouched
    """
    filled = dict(day)
    if not _is_filled(filled.get("title")):
        filled["title"] = REPAIR_TITLE_TEMPLATE.format(day=day_number)
    for name, template in REPAIR_FIELD_TEMPLATES.items():
        if not _is_filled(filled.get(name)):
            filled[name] = template
    return filled


def _day_number(day: Any, index: int) -> int:
    number = day.get("day") if isinstance(day, dict) else None
    if isinstance(number, int) and not isinstance(number, bool):
        return number
    return index + 1


def synthesize_budget(itinerary: List[Any]) -> Dict[str, Any]:
    """Zero-cost budget with one breakdown entry per itinerary day."""
    return {
        "currency": "USD",
        "total": 0,
        "breakdown": [
            {"day": _day_number(day, i), "total": 0, "hotels": [], "activities": []}
            for i, day in enumerate(itinerary)
        ],
    }


def align_budget_breakdown(budget: Dict[str, Any], day_count: int) -> Dict[str, Any]:
    """
    Make ``budget.breakdown`` exactly ``day_count`` entries numbered 1..N.

    Extra entries are dropped; missing ones are added with zero cost.

    Args:
        budget: Budget object (not modified)
        day_count: Number of itinerary days

    Returns:
        A new budget dict
    """
    breakdown = budget.get("breakdown")
    if not isinstance(breakdown, list):
        breakdown = []

    aligned = []
    for i in range(day_count):
        entry = breakdown[i] if i < len(breakdown) and isinstance(breakdown[i], dict) else None
        if entry is None:
            entry = {"total": 0, "hotels": [], "activities": []}
        aligned.append({**entry, "day": i + 1})

    return {**budget, "breakdown": aligned}


def _ensure_budget(payload: Dict[str, Any]) -> None:
    if not isinstance(payload.get("budget"), dict):
        payload["budget"] = synthesize_budget(payload["itinerary"])


def validate_and_fix_itinerary(
    payload: Dict[str, Any],
    config: RepairConfig = DEFAULT_REPAIR_CONFIG,
) -> ValidationOutcome:
    """
    Check every itinerary day and repair within bounds.

    Args:
        payload: Final-mode response object
        config: Repair bounds

    Returns:
        ValidationOutcome; when invalid, ``incomplete_days`` lists every
        offending day
    """
    itinerary = payload.get("itinerary")
    if not isinstance(itinerary, list) or not itinerary:
        return ValidationOutcome(is_valid=False, payload=payload)

    incomplete = [i + 1 for i, day in enumerate(itinerary) if not is_day_complete(day)]
    fixed = copy.deepcopy(payload)

    if not incomplete:
        logger.info(f"Generated complete {len(itinerary)}-day itinerary")
        _ensure_budget(fixed)
        return ValidationOutcome(is_valid=True, payload=fixed)

    if (
        len(incomplete) <= config.max_incomplete_days
        and len(itinerary) >= config.min_total_days
    ):
        logger.warning(f"Filling {len(incomplete)} incomplete days: {incomplete}")
        for day_number in incomplete:
            idx = day_number - 1
            day = fixed["itinerary"][idx]
            fixed["itinerary"][idx] = fill_incomplete_day(
                day if isinstance(day, dict) else {}, day_number
            )
        _ensure_budget(fixed)
        return ValidationOutcome(
            is_valid=True, payload=fixed, repaired_days=incomplete
        )

    return ValidationOutcome(
        is_valid=False, payload=payload, incomplete_days=incomplete
    )


def _raw_preview(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, default=str)[:RAW_PREVIEW_CHARS]


def validate_response(
    payload: Dict[str, Any],
    config: RepairConfig = DEFAULT_REPAIR_CONFIG,
) -> ValidationOutcome:
    """
    Validate a parsed model response in either mode.

    ``ui == "Final"`` responses need a summary and a complete (or
    repairable) itinerary; every other response only needs a non-empty
    ``resp``.

    Args:
        payload: Parsed response object
        config: Repair bounds

    Returns:
        ValidationOutcome with a structured ``error`` entry when invalid
    """
    has_resp = _is_filled(payload.get("resp"))

    if payload.get("ui") == "Final":
        itinerary = payload.get("itinerary")
        has_itinerary = isinstance(itinerary, list) and len(itinerary) > 0

        if not has_resp or not has_itinerary:
            return ValidationOutcome(
                is_valid=False,
                payload=payload,
                error={
                    "model": "validation",
                    "error": "missing_final_fields",
                    "hasResp": has_resp,
                    "hasItinerary": has_itinerary,
                    "raw": _raw_preview(payload),
                },
            )

        outcome = validate_and_fix_itinerary(payload, config)
        if not outcome.is_valid:
            days = ", ".join(str(d) for d in outcome.incomplete_days)
            outcome.error = {
                "model": "validation",
                "error": "incomplete_itinerary_structure",
                "incompleteDays": outcome.incomplete_days,
                "totalDays": len(itinerary),
                "message": f"Days {days} are missing required fields",
            }
        return outcome

    if not has_resp:
        return ValidationOutcome(
            is_valid=False,
            payload=payload,
            error={
                "model": "validation",
                "error": "missing_resp_field",
                "raw": _raw_preview(payload),
            },
        )

    return ValidationOutcome(is_valid=True, payload=payload)
