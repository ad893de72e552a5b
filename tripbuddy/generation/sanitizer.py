"""
First-person rewrites for accepted final itineraries.

The persona sometimes slips into the third person ("Sophia will...").
This is cosmetic only: a failure here is logged and the payload is
returned unchanged.
"""

import logging
import re
from functools import lru_cache
from typing import Any, Dict, List, Tuple

from tripbuddy.conversation.prompts.templates import AGENT_NAME


logger = logging.getLogger(__name__)


SANITIZED_DAY_FIELDS = ("title", "morning", "afternoon", "evening")


@lru_cache(maxsize=8)
def _rewrites(agent_name: str) -> List[Tuple[re.Pattern, str]]:
    name = re.escape(agent_name)
    return [
        (re.compile(rf"\b{name} is\b", re.IGNORECASE), "I am"),
        (re.compile(rf"\b{name} will\b", re.IGNORECASE), "I'll"),
        (re.compile(rf"\b{name} can\b", re.IGNORECASE), "I can"),
    ]


def sanitize_first_person(text: str, agent_name: str = AGENT_NAME) -> str:
    """Rewrite '<name> is/will/can' into first person."""
    for pattern, replacement in _rewrites(agent_name):
        text = pattern.sub(replacement, text)
    return text


def sanitize_payload(payload: Dict[str, Any], agent_name: str = AGENT_NAME) -> Dict[str, Any]:
    """
    Apply first-person rewrites to ``resp`` and each day's text fields.

    Args:
        payload: Accepted final-mode payload (not modified)
        agent_name: Persona name to rewrite

    Returns:
        A sanitized copy, or the original payload if sanitizing failed
    """
    try:
        sanitized = dict(payload)
        if isinstance(sanitized.get("resp"), str):
            sanitized["resp"] = sanitize_first_person(sanitized["resp"], agent_name)

        itinerary = sanitized.get("itinerary")
        if isinstance(itinerary, list):
            days = []
            for day in itinerary:
                day = dict(day)
                for name in SANITIZED_DAY_FIELDS:
                    if isinstance(day.get(name), str):
                        day[name] = sanitize_first_person(day[name], agent_name)
                days.append(day)
            sanitized["itinerary"] = days

        return sanitized

    except (TypeError, ValueError, AttributeError) as e:
        logger.error(f"Error sanitizing payload: {e}")
        return payload
