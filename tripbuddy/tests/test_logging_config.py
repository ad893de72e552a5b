"""
Tests for the JSON log formatter and pipeline event logging.
"""

import json
import logging

from tripbuddy.shared.logging.config import (
    StructuredFormatter,
    log_pipeline_event,
    split_context,
)


def _record(message, **attrs):
    record = logging.LogRecord("tripbuddy.test", logging.INFO, __file__, 1, message, (), None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestSplitContext:
    def test_leading_tags_extracted(self):
        context, rest = split_context("[session=abc] [graph=generation] [node=accept] Done")
        assert context == {"session": "abc", "graph": "generation", "node": "accept"}
        assert rest == "Done"

    def test_tags_only_at_start(self):
        context, rest = split_context("Model said [node=x]")
        assert context == {}
        assert rest == "Model said [node=x]"


class TestStructuredFormatter:
    """Tests for the JSON shape of formatted records."""

    def test_context_tags_become_fields(self):
        line = StructuredFormatter().format(_record("[session=s1] [api=aimodel] Request received"))
        entry = json.loads(line)
        assert entry["session"] == "s1"
        assert entry["api"] == "aimodel"
        assert entry["message"] == "Request received"
        assert entry["level"] == "INFO"

    def test_pipeline_payload_included(self):
        record = _record("[session=s1] Pipeline event: model_failed", pipeline={"event": "model_failed"})
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["pipeline"] == {"event": "model_failed"}


class TestLogPipelineEvent:
    def test_state_summary(self, caplog):
        state = {
            "session_id": "s9",
            "models": ["a", "b", "c"],
            "candidate_index": 1,
            "should_generate_final": True,
            "info_score": 5,
            "errors": [{"model": "a"}],
        }
        logger = logging.getLogger("tripbuddy.test.pipeline")

        with caplog.at_level(logging.INFO, logger="tripbuddy.test.pipeline"):
            log_pipeline_event("model_failed", state, extra={"model": "a"}, logger=logger)

        record = caplog.records[-1]
        assert record.getMessage().startswith("[session=s9] [graph=generation]")
        assert record.pipeline == {
            "event": "model_failed",
            "mode": "final",
            "info_score": 5,
            "candidate": "1/3",
            "failed_attempts": 1,
            "status": None,
            "model": "a",
        }
