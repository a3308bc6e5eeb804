"""Tests for the synthesis call wrapper."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from premarket.ai.ai_agent import AIAgent
from premarket.config import LLMSettings
from premarket.errors import SynthesisError


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def agent(client):
    return AIAgent(LLMSettings(model="test-model", api_key="k", max_tokens=4096, temperature=0.2), client=client)


def test_synthesize_sends_single_user_message(agent, client):
    client.chat.completions.create.return_value = _completion("  1. EXECUTIVE SUMMARY\nUp.  ")

    text = agent.synthesize("PROMPT")

    assert text == "1. EXECUTIVE SUMMARY\nUp."
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["messages"] == [{"role": "user", "content": "PROMPT"}]
    assert kwargs["max_tokens"] == 4096
    assert kwargs["temperature"] == 0.2


def test_api_error_is_fatal(agent, client):
    client.chat.completions.create.side_effect = RuntimeError("rate limited")
    with pytest.raises(SynthesisError, match="rate limited"):
        agent.synthesize("PROMPT")


@pytest.mark.parametrize("completion", [_completion(""), _completion(None), SimpleNamespace(choices=[])])
def test_empty_response_is_fatal(agent, client, completion):
    client.chat.completions.create.return_value = completion
    with pytest.raises(SynthesisError):
        agent.synthesize("PROMPT")


def test_default_client_uses_configured_base_url(mocker):
    openai_cls = mocker.patch("premarket.ai.ai_agent.OpenAI")
    AIAgent(LLMSettings(api_key="k", base_url="https://llm.example/v1"))
    openai_cls.assert_called_once_with(api_key="k", base_url="https://llm.example/v1")
