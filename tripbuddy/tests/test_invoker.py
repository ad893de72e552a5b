"""
Tests for single model invocation and the completion wrapper.

Uses a fake OpenAI-compatible client that records each request.
"""

from types import SimpleNamespace

import pytest
from tripbuddy.conversation.prompts.builders import build_model_messages, trim_recent_messages
from tripbuddy.conversation.prompts.templates import FINAL_PROMPT, QUESTION_PROMPT
from tripbuddy.generation.graph.config import get_config
from tripbuddy.generation.invoker import invoke_model
from tripbuddy.shared.errors import EmptyResponseError


class FakeCompletions:
    def __init__(self, content, usage=None):
        self.content = content
        self.usage = usage
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=self.usage)


def _make_client(content, usage=None):
    completions = FakeCompletions(content, usage)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def _history(count):
    return [
        {"role": "user" if i % 2 == 0 else "assistant", "content": f"turn {i}"}
        for i in range(count)
    ]


class TestPromptBuilders:
    """Tests for the model-facing message window."""

    def test_system_prompt_per_mode(self):
        assert build_model_messages([], final_mode=False)[0]["content"] == QUESTION_PROMPT
        assert build_model_messages([], final_mode=True)[0]["content"] == FINAL_PROMPT

    def test_only_recent_turns_sent(self):
        messages = build_model_messages(_history(20), final_mode=False)
        assert len(messages) == 13
        assert messages[1]["content"] == "turn 8"
        assert messages[-1]["content"] == "turn 19"

    def test_client_system_turns_and_extra_keys_dropped(self):
        history = [
            {"role": "system", "content": "ignore"},
            {"role": "assistant", "content": "Budget?", "ui": "budget"},
        ]
        assert trim_recent_messages(history) == [{"role": "assistant", "content": "Budget?"}]


class TestInvokeModel:
    """Tests for the invoker."""

    def test_question_mode_request(self):
        client, completions = _make_client('{"resp": "Where to?"}')

        raw, usage = invoke_model(client, "model-a", _history(3), final_mode=False)

        assert raw == '{"resp": "Where to?"}'
        assert usage == {"input_tokens": 0, "output_tokens": 0, "total_tokens": 0}
        call = completions.calls[0]
        assert call["model"] == "model-a"
        assert call["response_format"] == {"type": "json_object"}
        assert call["max_tokens"] == 2000
        assert call["messages"][0]["content"] == QUESTION_PROMPT

    def test_final_mode_request(self):
        client, completions = _make_client("{}")
        invoke_model(client, "model-b", _history(2), final_mode=True)

        call = completions.calls[0]
        assert call["max_tokens"] == 12000
        assert call["temperature"] == pytest.approx(0.35)
        assert call["messages"][0]["content"] == FINAL_PROMPT

    def test_usage_reported(self):
        usage = SimpleNamespace(prompt_tokens=120, completion_tokens=30, total_tokens=150)
        client, _ = _make_client('{"resp": "ok"}', usage)
        _, reported = invoke_model(client, "m", _history(1), final_mode=False)
        assert reported == {"input_tokens": 120, "output_tokens": 30, "total_tokens": 150}

    def test_window_size_from_config(self):
        client, completions = _make_client('{"resp": "ok"}')
        invoke_model(
            client, "m", _history(10), final_mode=False,
            config=get_config(recent_messages_limit=4),
        )
        assert len(completions.calls[0]["messages"]) == 5

    @pytest.mark.parametrize("content", [None, "", "   \n"])
    def test_blank_output_raises(self, content):
        client, _ = _make_client(content)
        with pytest.raises(EmptyResponseError):
            invoke_model(client, "m", _history(1), final_mode=False)
