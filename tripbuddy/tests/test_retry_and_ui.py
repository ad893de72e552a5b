"""
Tests for the shared retry combinator and the generative UI widgets.
"""

import asyncio

import pytest
from tripbuddy.conversation.ui import (
    TRAVEL_INTERESTS,
    budget_message,
    date_range_message,
    group_size_message,
    interests_message,
    widget_for,
)
from tripbuddy.shared.contracts.generation import UiTag
from tripbuddy.shared.retry import RetryPolicy, is_transient_error


class TestRetryPolicy:
    """Tests for RetryPolicy decisions and the tenacity controller."""

    def test_should_retry_respects_bound(self):
        policy = RetryPolicy(max_attempts=3)
        assert policy.should_retry(ValueError("x"), 1) is True
        assert policy.should_retry(ValueError("x"), 3) is False

    def test_should_retry_respects_predicate(self):
        policy = RetryPolicy(max_attempts=5, is_retryable=lambda e: not isinstance(e, KeyError))
        assert policy.should_retry(KeyError("k"), 1) is False

    def test_async_retrying_retries_then_succeeds(self):
        attempts = []

        async def scenario():
            async for attempt in RetryPolicy(max_attempts=3).async_retrying():
                with attempt:
                    attempts.append(attempt.retry_state.attempt_number)
                    if len(attempts) < 2:
                        raise ConnectionError("flaky")
            return "done"

        assert asyncio.run(scenario()) == "done"
        assert attempts == [1, 2]

    def test_async_retrying_reraises_non_retryable(self):
        policy = RetryPolicy(max_attempts=3, is_retryable=lambda e: False)
        calls = []

        async def scenario():
            async for attempt in policy.async_retrying():
                with attempt:
                    calls.append(1)
                    raise PermissionError("denied")

        with pytest.raises(PermissionError):
            asyncio.run(scenario())
        assert calls == [1]

    def test_async_retrying_stops_after_max(self):
        calls = []

        async def scenario():
            async for attempt in RetryPolicy(max_attempts=2).async_retrying():
                with attempt:
                    calls.append(1)
                    raise ConnectionError("down")

        with pytest.raises(ConnectionError):
            asyncio.run(scenario())
        assert len(calls) == 2

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("Request timed out", True),
            ("Rate limit reached for model", True),
            ("The operation was aborted", True),
            ("Invalid JSON", False),
        ],
    )
    def test_transient_classification(self, message, expected):
        assert is_transient_error(RuntimeError(message)) is expected


class TestWidgets:
    """Tests for ui tag lookup and widget messages."""

    def test_widget_lookup(self):
        assert widget_for("budget").tag == UiTag.BUDGET
        assert widget_for("groupSize").tag == UiTag.GROUP_SIZE
        assert widget_for("dateRange").options == []
        assert widget_for("travelInterest").multi_select is True

    @pytest.mark.parametrize("ui", [None, "", "Final", "unknownWidget"])
    def test_no_widget(self, ui):
        assert widget_for(ui) is None

    def test_interest_options(self):
        titles = [o.title for o in widget_for("travelInterest").options]
        assert titles == TRAVEL_INTERESTS
        assert "Music & Festivals" in titles

    def test_budget_messages(self):
        assert budget_message("Cheap") == "Cheap:Stay conscious of costs"
        assert budget_message("luxury") == "Luxury:Don't worry about cost"
        assert budget_message(custom=" 3000 EUR ") == "Budget: 3000 EUR"

    @pytest.mark.parametrize("custom", ["x", "y" * 51])
    def test_custom_budget_length(self, custom):
        with pytest.raises(ValueError):
            budget_message(custom=custom)

    def test_group_size_messages(self):
        assert group_size_message("Couple") == "Couple:2 People"
        assert group_size_message(custom="6 coworkers") == "Group size: 6 coworkers"
        with pytest.raises(ValueError):
            group_size_message("Crowd")

    def test_date_range_message(self):
        assert (
            date_range_message("2025-06-01", "2025-06-05")
            == "Travel dates: from 2025-06-01 to 2025-06-05"
        )
        with pytest.raises(ValueError):
            date_range_message("2025-06-05", "2025-06-01")

    def test_interests_message(self):
        assert interests_message(["Food", " Beach ", "Food", "Street art"]) == (
            "Interests: Food, Beach, Street art"
        )
        with pytest.raises(ValueError):
            interests_message([" "])
