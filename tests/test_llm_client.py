"""
Tests for the AI client wrapper (no network: the SDK client is mocked).
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from openai import OpenAIError

from smarthire.services.llm_client import AIServiceError, LLMClient


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _chunk(content):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


@pytest.fixture
def real_client():
    client = LLMClient(api_key="test-key", model="test-model")
    client.client = MagicMock()
    return client


class TestConfiguration:
    """Tests for client construction."""

    def test_missing_key(self):
        with pytest.raises(AIServiceError):
            LLMClient(api_key="")

    def test_model_override(self, real_client):
        assert real_client.model == "test-model"


class TestExtractJson:
    """Tests for decoding model replies."""

    def test_plain(self, llm):
        assert llm._extract_json('{"score": 80}') == {"score": 80}

    def test_code_fences(self, llm):
        assert llm._extract_json('```json\n{"score": 80}\n```') == {"score": 80}
        assert llm._extract_json('```\n{"a": [1, 2]}\n```') == {"a": [1, 2]}

    def test_invalid(self, llm):
        with pytest.raises(AIServiceError, match="unexpected format"):
            llm._extract_json("Sure! Here is the JSON you asked for.")

    def test_generate_json_requires_object(self, llm):
        llm.reply("[1, 2, 3]")
        with pytest.raises(AIServiceError):
            llm.generate_json("system", "user")


class TestApiCalls:
    """Tests for the SDK call wrappers."""

    def test_call_api(self, real_client):
        real_client.client.chat.completions.create.return_value = _completion('{"title": "Dev"}')
        assert real_client.parse_job_description("JD text") == {"title": "Dev"}

        kwargs = real_client.client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"][0]["role"] == "system"
        assert kwargs["messages"][1] == {"role": "user", "content": "JD text"}

    def test_sdk_error_is_wrapped(self, real_client):
        real_client.client.chat.completions.create.side_effect = OpenAIError("quota exceeded")
        with pytest.raises(AIServiceError, match="quota exceeded"):
            real_client.score_resume("Dev", "Python", "resume")

    def test_empty_reply(self, real_client):
        real_client.client.chat.completions.create.return_value = _completion("")
        with pytest.raises(AIServiceError):
            real_client.extract_profile("resume")

    def test_connection_check(self, real_client):
        real_client.client.chat.completions.create.return_value = _completion("ok")
        assert real_client.test_connection() is True
        real_client.client.chat.completions.create.side_effect = OpenAIError("down")
        assert real_client.test_connection() is False

    def test_stream_maps_roles(self, real_client):
        real_client.client.chat.completions.create.return_value = iter(
            [_chunk("Dear "), _chunk(None), _chunk("hiring team")]
        )
        history = [
            {"role": "user", "text": "Write a follow-up"},
            {"role": "model", "text": "Sure, which job?"},
            {"role": "user", "text": "Backend Engineer"},
        ]
        assert "".join(real_client.stream_email_agent(history)) == "Dear hiring team"

        messages = real_client.client.chat.completions.create.call_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[2]["content"] == "Sure, which job?"
