"""
Unit tests for the response extractor.

Covers the three extraction strategies (direct parse, fenced block,
brace scan), string-aware brace matching, and the error taxonomy.
"""

import pytest
from tripbuddy.generation.response_parser import (
    extract_json,
    find_balanced_object,
    normalize_ui,
    parse_model_response,
)
from tripbuddy.shared.errors import (
    InvalidResponseObjectError,
    JsonParseError,
    NoJsonFoundError,
    ParseError,
    UnbalancedJsonError,
)


class TestExtractJson:
    """Tests for recovering JSON from raw model output."""

    def test_plain_json(self):
        assert extract_json('{"resp": "Where to?", "ui": "budget"}') == {
            "resp": "Where to?",
            "ui": "budget",
        }

    def test_surrounding_whitespace(self):
        assert extract_json('\n\n  {"resp": "hi"}  \n') == {"resp": "hi"}

    def test_fenced_block_with_prose(self):
        raw = 'Sure! Here is your plan:\n```json\n{"resp": "ok", "nested": {"a": 1}}\n```\nEnjoy.'
        assert extract_json(raw) == {"resp": "ok", "nested": {"a": 1}}

    def test_fence_without_language(self):
        raw = '```\n{"resp": "ok"}\n```'
        assert extract_json(raw) == {"resp": "ok"}

    def test_prose_around_object(self):
        raw = 'Here you go: {"resp": "Pick one", "ui": "groupSize"} Let me know!'
        assert extract_json(raw) == {"resp": "Pick one", "ui": "groupSize"}

    def test_braces_inside_strings_are_ignored(self):
        """A '}' inside a string literal must not close the object."""
        raw = 'Result: {"resp": "use {curly} braces }", "ui": "budget"} trailing }'
        assert extract_json(raw) == {"resp": "use {curly} braces }", "ui": "budget"}

    def test_escaped_quotes_do_not_toggle_string_mode(self):
        raw = 'Answer {"resp": "she said \\"hi {\\" to me"} done'
        assert extract_json(raw) == {"resp": 'she said "hi {" to me'}

    def test_no_brace_raises(self):
        with pytest.raises(NoJsonFoundError):
            extract_json("I could not produce an itinerary, sorry.")

    def test_unbalanced_raises(self):
        with pytest.raises(UnbalancedJsonError):
            extract_json('Here: {"resp": "truncated output", "itinerary": [')

    def test_invalid_json_span_raises(self):
        with pytest.raises(JsonParseError):
            extract_json("Note {resp: unquoted keys} end")

    def test_errors_share_a_base(self):
        """The fallback router treats every extraction failure alike."""
        for raw in ["no json", '{"a": ', "{bad}"]:
            with pytest.raises(ParseError):
                extract_json(raw)


class TestFindBalancedObject:
    """Tests for the brace scanner."""

    def test_returns_first_object_only(self):
        assert find_balanced_object('x {"a": 1} y {"b": 2}') == '{"a": 1}'

    def test_nested_objects(self):
        assert find_balanced_object('{"a": {"b": {"c": 1}}} tail') == '{"a": {"b": {"c": 1}}}'


class TestParseModelResponse:
    """Tests for the shape-checked entry point."""

    def test_non_object_rejected(self):
        with pytest.raises(InvalidResponseObjectError):
            parse_model_response("[1, 2, 3]")

    def test_blank_ui_treated_as_absent(self):
        assert parse_model_response('{"resp": "Hi", "ui": "  "}') == {"resp": "Hi"}
        assert parse_model_response('{"resp": "Hi", "ui": null}') == {"resp": "Hi"}

    def test_ui_tag_preserved(self):
        assert parse_model_response('{"resp": "Dates?", "ui": "dateRange"}')["ui"] == "dateRange"

    def test_normalize_ui_does_not_mutate(self):
        payload = {"resp": "Hi", "ui": ""}
        normalize_ui(payload)
        assert payload == {"resp": "Hi", "ui": ""}
