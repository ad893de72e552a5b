"""
Conversation readiness analysis.

Decides whether enough trip facts have been gathered to switch from
question mode to final-itinerary generation. Each required fact is a
named regex predicate over the lower-cased conversation text so it can
be tested on its own. This is a best-effort heuristic gate: a false
negative just asks another question, a false positive triggers early
generation that the itinerary validator has to tolerate.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple


@dataclass
class ReadinessConfig:
    """
    Thresholds for the readiness decision.

    The values are empirical; they are kept here so they can be tuned
    without touching the predicates.
    """

    # Interests detected and at least this many facts
    INTEREST_MIN_SCORE: int = 5

    # At least this many facts once the conversation is longer than PARTIAL_MIN_TURNS
    PARTIAL_MIN_SCORE: int = 4
    PARTIAL_MIN_TURNS: int = 12

    # Hard ceiling: finalize once the conversation is longer than this
    MAX_TURNS: int = 16

    # Free-text interest keywords only count after this many turns
    FREE_TEXT_INTEREST_MIN_TURNS: int = 10


DEFAULT_READINESS_CONFIG = ReadinessConfig()


@dataclass
class ReadinessResult:
    """
    Result of readiness analysis.

    ``info_score`` counts the detected facts (0..6); ``reason`` names the
    rule that decided the outcome.
    """

    should_generate_final: bool
    info_score: int
    reason: str
    detected: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


_DATES_PATTERN = re.compile(
    r"travel dates:\s*from\s*\d{4}-\d{2}-\d{2}\s*to\s*\d{4}-\d{2}-\d{2}", re.IGNORECASE
)
_GROUP_PATTERN = re.compile(r"(group size|solo|couple|family|friends)", re.IGNORECASE)
_BUDGET_PATTERN = re.compile(
    r"(budget|low budget|medium budget|high budget|low\b|medium\b|high\b"
    r"|\bcheap\b|\bmoderate\b|\bluxury\b)",
    re.IGNORECASE,
)
_DESTINATION_PATTERN = re.compile(
    r"(destination\s*:|trip to\s+\w|to\s+[a-z][a-z]+)", re.IGNORECASE
)
_SOURCE_PATTERN = re.compile(r"(from\s+[a-z][a-z]+|source\s*:)", re.IGNORECASE)
_INTERESTS_LABEL_PATTERN = re.compile(
    r"((travel )?interests:|adventure.*sightseeing|cultural.*food|nightlife.*relaxation)",
    re.IGNORECASE,
)
_INTEREST_KEYWORD_PATTERN = re.compile(
    r"(adventure|sightseeing|cultural|food|nightlife|relaxation|beach|nature|history)",
    re.IGNORECASE,
)


def has_dates(text: str, turn_count: int) -> bool:
    """Explicit ``Travel dates: from YYYY-MM-DD to YYYY-MM-DD`` message."""
    return bool(_DATES_PATTERN.search(text))


def has_group(text: str, turn_count: int) -> bool:
    return bool(_GROUP_PATTERN.search(text))


def has_budget(text: str, turn_count: int) -> bool:
    return bool(_BUDGET_PATTERN.search(text))


def has_destination(text: str, turn_count: int) -> bool:
    return bool(_DESTINATION_PATTERN.search(text))


def has_source(text: str, turn_count: int) -> bool:
    return bool(_SOURCE_PATTERN.search(text))


def has_interests(
    text: str,
    turn_count: int,
    config: ReadinessConfig = DEFAULT_READINESS_CONFIG,
) -> bool:
    """
    Explicit interests label, or a free-text interest keyword late enough
    in the conversation that it is unlikely to be opening chit-chat.
    """
    if _INTERESTS_LABEL_PATTERN.search(text):
        return True
    return bool(
        _INTEREST_KEYWORD_PATTERN.search(text)
        and turn_count > config.FREE_TEXT_INTEREST_MIN_TURNS
    )


FACT_DETECTORS: Dict[str, Callable[[str, int], bool]] = {
    "dates": has_dates,
    "group": has_group,
    "budget": has_budget,
    "destination": has_destination,
    "source": has_source,
    "interests": has_interests,
}


def build_conversation_text(messages: Sequence[Mapping[str, Any]]) -> str:
    """Lower-cased concatenation of every turn's content."""
    return " ".join((m.get("content") or "").lower() for m in messages)


def detect_facts(
    messages: Sequence[Mapping[str, Any]],
    config: ReadinessConfig = DEFAULT_READINESS_CONFIG,
) -> Tuple[List[str], List[str]]:
    """
    Run every fact detector over the conversation.

    Args:
        messages: Full turn history (dicts with at least 'content')
        config: Readiness thresholds

    Returns:
        Tuple of (detected fact names, missing fact names)
    """
    text = build_conversation_text(messages)
    turn_count = len(messages)

    detected = []
    for name, detector in FACT_DETECTORS.items():
        if name == "interests":
            found = has_interests(text, turn_count, config)
        else:
            found = detector(text, turn_count)
        if found:
            detected.append(name)

    missing = [name for name in FACT_DETECTORS if name not in detected]
    return detected, missing


def analyze_conversation_readiness(
    messages: Sequence[Mapping[str, Any]],
    config: ReadinessConfig = DEFAULT_READINESS_CONFIG,
) -> ReadinessResult:
    """
    Decide whether to generate the final itinerary.

    Rules (first match wins):
    1. Interests detected AND score >= INTEREST_MIN_SCORE
    2. Score >= PARTIAL_MIN_SCORE AND turns > PARTIAL_MIN_TURNS
    3. Turns > MAX_TURNS (forces termination)

    Args:
        messages: Full turn history
        config: Readiness thresholds

    Returns:
        ReadinessResult with decision, score, and fact breakdown
    """
    detected, missing = detect_facts(messages, config)
    score = len(detected)
    turn_count = len(messages)

    if "interests" in detected and score >= config.INTEREST_MIN_SCORE:
        reason = f"Interests detected and score {score} >= {config.INTEREST_MIN_SCORE}"
        should_generate = True
    elif score >= config.PARTIAL_MIN_SCORE and turn_count > config.PARTIAL_MIN_TURNS:
        reason = (
            f"Score {score} >= {config.PARTIAL_MIN_SCORE} after "
            f"{turn_count} turns (> {config.PARTIAL_MIN_TURNS})"
        )
        should_generate = True
    elif turn_count > config.MAX_TURNS:
        reason = f"Max turns ({config.MAX_TURNS}) exceeded"
        should_generate = True
    else:
        reason = f"Score {score}/{len(FACT_DETECTORS)} after {turn_count} turns, continuing"
        should_generate = False

    return ReadinessResult(
        should_generate_final=should_generate,
        info_score=score,
        reason=reason,
        detected=detected,
        missing=missing,
    )
