"""
Unit tests for itinerary validation and bounded repair.
"""

import copy

import pytest
from tripbuddy.generation.validator import (
    REPAIR_FIELD_TEMPLATES,
    RepairConfig,
    align_budget_breakdown,
    fill_incomplete_day,
    is_day_complete,
    synthesize_budget,
    validate_and_fix_itinerary,
    validate_response,
)


def _day(n, **overrides):
    day = {
        "day": n,
        "title": f"Day {n} in Lisbon",
        "morning": "Pastries in Belem",
        "afternoon": "Tram 28 through Alfama",
        "evening": "Fado dinner",
    }
    day.update(overrides)
    return day


def _final(days, **extra):
    payload = {"resp": "Here is your trip!", "ui": "Final", "itinerary": days}
    payload.update(extra)
    return payload


class TestIsDayComplete:
    """Tests for the per-day completeness check."""

    def test_complete_day(self):
        assert is_day_complete(_day(1)) is True

    @pytest.mark.parametrize("field", ["title", "morning", "afternoon", "evening"])
    def test_missing_or_empty_field(self, field):
        day = _day(1)
        del day[field]
        assert is_day_complete(day) is False
        assert is_day_complete(_day(1, **{field: ""})) is False

    def test_non_string_field_is_incomplete(self):
        assert is_day_complete(_day(1, morning=["a", "b"])) is False

    def test_non_dict_is_incomplete(self):
        assert is_day_complete("Day 1") is False


class TestValidateAndFixItinerary:
    """Tests for accept / repair / reject decisions."""

    def test_complete_itinerary_accepted_without_mutation(self):
        payload = _final([_day(1), _day(2), _day(3)])
        original = copy.deepcopy(payload)

        outcome = validate_and_fix_itinerary(payload)

        assert outcome.is_valid is True
        assert outcome.repaired_days == []
        assert payload == original
        assert [d["title"] for d in outcome.payload["itinerary"]] == [
            d["title"] for d in original["itinerary"]
        ]

    def test_missing_budget_is_synthesized(self):
        outcome = validate_and_fix_itinerary(_final([_day(1), _day(2), _day(3)]))
        budget = outcome.payload["budget"]
        assert budget["total"] == 0
        assert [b["day"] for b in budget["breakdown"]] == [1, 2, 3]

    def test_existing_budget_kept(self):
        budget = {"currency": "EUR", "total": 900, "breakdown": []}
        outcome = validate_and_fix_itinerary(_final([_day(1), _day(2), _day(3)], budget=budget))
        assert outcome.payload["budget"] == budget

    def test_repairs_up_to_three_days(self):
        """Only the missing fields of incomplete days are filled."""
        days = [_day(i) for i in range(1, 6)]
        del days[1]["evening"]
        days[3]["title"] = ""
        payload = _final(days)
        original = copy.deepcopy(payload)

        outcome = validate_and_fix_itinerary(payload)

        assert outcome.is_valid is True
        assert outcome.repaired_days == [2, 4]
        fixed = outcome.payload["itinerary"]
        assert fixed[1]["evening"] == REPAIR_FIELD_TEMPLATES["evening"]
        assert fixed[1]["morning"] == "Pastries in Belem"
        assert fixed[3]["title"] == "Day 4 - Explore & Discover"
        assert all(is_day_complete(d) for d in fixed)
        assert payload == original

    def test_rejects_more_than_three_incomplete_days(self):
        days = [_day(i) for i in range(1, 7)]
        for day in days[:4]:
            day["afternoon"] = ""
        outcome = validate_and_fix_itinerary(_final(days))
        assert outcome.is_valid is False
        assert outcome.incomplete_days == [1, 2, 3, 4]

    def test_rejects_short_itinerary_with_gaps(self):
        """Itineraries under three days are never repaired."""
        outcome = validate_and_fix_itinerary(_final([_day(1), _day(2, morning="")]))
        assert outcome.is_valid is False
        assert outcome.incomplete_days == [2]

    def test_repair_bounds_are_configurable(self):
        config = RepairConfig(max_incomplete_days=1, min_total_days=2)
        outcome = validate_and_fix_itinerary(_final([_day(1), _day(2, morning="")]), config)
        assert outcome.is_valid is True
        assert outcome.repaired_days == [2]


class TestValidateResponse:
    """Tests for mode-aware validation and error records."""

    def test_question_response_valid(self):
        outcome = validate_response({"resp": "Where are you headed?", "ui": "budget"})
        assert outcome.is_valid is True

    def test_question_without_resp(self):
        outcome = validate_response({"ui": "budget"})
        assert outcome.is_valid is False
        assert outcome.error["error"] == "missing_resp_field"
        assert outcome.error["model"] == "validation"

    def test_final_without_itinerary(self):
        outcome = validate_response({"resp": "Done", "ui": "Final"})
        assert outcome.is_valid is False
        assert outcome.error["error"] == "missing_final_fields"
        assert outcome.error["hasResp"] is True
        assert outcome.error["hasItinerary"] is False
        assert len(outcome.error["raw"]) <= 500

    def test_final_with_empty_itinerary(self):
        outcome = validate_response(_final([]))
        assert outcome.error["hasItinerary"] is False

    def test_incomplete_structure_lists_every_day(self):
        days = [_day(i, evening="") for i in range(1, 5)]
        outcome = validate_response(_final(days))
        assert outcome.is_valid is False
        assert outcome.error["error"] == "incomplete_itinerary_structure"
        assert outcome.error["incompleteDays"] == [1, 2, 3, 4]
        assert outcome.error["totalDays"] == 4
        assert outcome.error["message"] == "Days 1, 2, 3, 4 are missing required fields"


class TestBudgetHelpers:
    """Tests for budget synthesis and alignment."""

    def test_fill_incomplete_day_returns_new_dict(self):
        day = {"day": 3, "morning": "Hike"}
        filled = fill_incomplete_day(day, 3)
        assert day == {"day": 3, "morning": "Hike"}
        assert filled["morning"] == "Hike"
        assert filled["title"] == "Day 3 - Explore & Discover"

    def test_synthesize_uses_day_numbers(self):
        budget = synthesize_budget([{"day": 4}, {"title": "no number"}])
        assert [b["day"] for b in budget["breakdown"]] == [4, 2]

    def test_align_truncates(self):
        budget = {"total": 10, "breakdown": [{"day": d, "total": d} for d in range(1, 6)]}
        aligned = align_budget_breakdown(budget, 3)
        assert [b["day"] for b in aligned["breakdown"]] == [1, 2, 3]
        assert len(budget["breakdown"]) == 5

    def test_align_pads_with_zero_cost(self):
        aligned = align_budget_breakdown({"breakdown": [{"day": 7, "total": 50}]}, 3)
        assert aligned["breakdown"][0] == {"day": 1, "total": 50}
        assert aligned["breakdown"][2] == {"day": 3, "total": 0, "hotels": [], "activities": []}
