"""
Tests for desired-day inference and day-count reconciliation.
"""

import pytest
from tripbuddy.conversation.reconcile import (
    PADDING_DAY_TEMPLATES,
    enrich_with_duration,
    infer_desired_days,
    reconcile_day_count,
)


def _final(day_count, with_budget=True):
    payload = {
        "resp": "Trip ready",
        "ui": "Final",
        "itinerary": [
            {"day": d, "title": f"Day {d}", "morning": "m", "afternoon": "a", "evening": "e"}
            for d in range(1, day_count + 1)
        ],
    }
    if with_budget:
        payload["budget"] = {
            "currency": "USD",
            "total": 100 * day_count,
            "breakdown": [{"day": d, "total": 100} for d in range(1, day_count + 1)],
        }
    return payload


class TestInferDesiredDays:
    """Tests for reading the trip length out of user text."""

    def test_date_range_is_inclusive(self):
        assert infer_desired_days("Travel dates: from 2025-06-01 to 2025-06-05") == 5

    def test_same_day_trip(self):
        assert infer_desired_days("travel dates: from 2025-06-01 to 2025-06-01") == 1

    def test_reversed_range_counts_one_day(self):
        assert infer_desired_days("Travel dates: from 2025-06-05 to 2025-06-01") == 1

    @pytest.mark.parametrize(
        "text, expected",
        [("a 5 day trip", 5), ("for 7-day", 7), ("10 days in Peru", 10), ("3days", 3)],
    )
    def test_free_text_day_counts(self, text, expected):
        assert infer_desired_days(text) == expected

    def test_no_length(self):
        assert infer_desired_days("somewhere warm please") is None
        assert infer_desired_days("0 days") is None

    def test_invalid_calendar_date(self):
        assert infer_desired_days("Travel dates: from 2025-02-30 to 2025-03-02") is None


class TestEnrichWithDuration:
    def test_date_message_gets_instruction(self):
        content = "Travel dates: from 2025-06-01 to 2025-06-05"
        enriched = enrich_with_duration(content, 5)
        assert enriched.startswith(content)
        assert "This is a 5-day trip" in enriched
        assert "complete 5-day itinerary" in enriched

    def test_other_messages_untouched(self):
        assert enrich_with_duration("Couple:2 People", 5) == "Couple:2 People"
        assert enrich_with_duration("Travel dates: from a to b", None) == "Travel dates: from a to b"


class TestReconcileDayCount:
    """Tests for truncating and padding final itineraries."""

    def test_truncates_to_desired(self):
        payload = _final(7)
        result = reconcile_day_count(payload, 5)

        assert [d["day"] for d in result["itinerary"]] == [1, 2, 3, 4, 5]
        assert [b["day"] for b in result["budget"]["breakdown"]] == [1, 2, 3, 4, 5]
        assert len(payload["itinerary"]) == 7

    def test_pads_with_rotating_templates(self):
        result = reconcile_day_count(_final(3), 5)

        days = result["itinerary"]
        assert [d["day"] for d in days] == [1, 2, 3, 4, 5]
        assert days[2]["title"] == "Day 3"
        assert days[3]["title"] == PADDING_DAY_TEMPLATES[3]["title"]
        assert days[4]["title"] == PADDING_DAY_TEMPLATES[0]["title"]
        breakdown = result["budget"]["breakdown"]
        assert len(breakdown) == 5
        assert breakdown[4]["total"] == 0

    def test_padding_days_are_complete(self):
        result = reconcile_day_count(_final(1, with_budget=False), 4)
        for day in result["itinerary"]:
            assert all(day[f] for f in ("title", "morning", "afternoon", "evening"))
        assert "budget" not in result

    def test_renumbers_out_of_order_days(self):
        payload = _final(3)
        payload["itinerary"][0]["day"] = 9
        result = reconcile_day_count(payload, 3)
        assert [d["day"] for d in result["itinerary"]] == [1, 2, 3]

    def test_unknown_length_leaves_payload(self):
        payload = _final(3)
        assert reconcile_day_count(payload, None) is payload

    def test_non_final_payload_unchanged(self):
        payload = {"resp": "Where to?", "ui": "budget"}
        assert reconcile_day_count(payload, 5) is payload

    def test_unknown_length_still_aligns_budget(self):
        payload = _final(3)
        payload["budget"]["breakdown"] = [{"day": 5, "total": 40}]

        result = reconcile_day_count(payload, None)

        assert [d["day"] for d in result["itinerary"]] == [1, 2, 3]
        assert [b["day"] for b in result["budget"]["breakdown"]] == [1, 2, 3]
        assert result["budget"]["breakdown"][0]["total"] == 40
        assert len(payload["budget"]["breakdown"]) == 1
