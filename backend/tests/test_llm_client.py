"""Tests for the OpenAI chat completions client."""

from unittest.mock import Mock, patch

import httpx
import openai
import pytest

from skytonight.core.errors import CompletionError
from skytonight.models import StellaChatMessage
from skytonight.services.llm_client import FALLBACK_REPLY, OpenAIChatClient


@pytest.fixture
def client():
    return OpenAIChatClient(
        api_key="sk-test",
        base_url="https://llm.test/v1",
        model="gpt-4o-mini",
        temperature=0.8,
        max_tokens=300,
        timeout=5,
    )


@pytest.fixture
def messages():
    return [
        StellaChatMessage(role="assistant", content="Hi, I'm Stella."),
        StellaChatMessage(role="user", content="What should I look at first?"),
    ]


def completion(content):
    """SDK-shaped chat completion with a single choice."""
    return Mock(choices=[Mock(message=Mock(role="assistant", content=content))])


class TestBuildMessages:
    """Test model message construction."""

    def test_persona_context_then_history(self, client, messages):
        result = client.build_messages("  You are Stella.  ", "Location: Denver", messages)

        assert result == [
            {"role": "system", "content": "You are Stella."},
            {"role": "system", "content": "Context:\nLocation: Denver"},
            {"role": "assistant", "content": "Hi, I'm Stella."},
            {"role": "user", "content": "What should I look at first?"},
        ]


class TestComplete:
    """Test completion requests."""

    @patch("skytonight.services.llm_client.OpenAI")
    def test_success(self, mock_openai, client, messages):
        create = mock_openai.return_value.chat.completions.create
        create.return_value = completion("  Start with Jupiter!  ")

        reply = client.complete("You are Stella.", "Location: Denver", messages)

        assert reply == "Start with Jupiter!"
        mock_openai.assert_called_once_with(api_key="sk-test", base_url="https://llm.test/v1", timeout=5)
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.8
        assert kwargs["max_tokens"] == 300
        assert len(kwargs["messages"]) == 4

    @patch("skytonight.services.llm_client.OpenAI")
    def test_client_reused_between_calls(self, mock_openai, client, messages):
        mock_openai.return_value.chat.completions.create.return_value = completion("Look up!")

        client.complete("You are Stella.", "", messages)
        client.complete("You are Stella.", "", messages)

        mock_openai.assert_called_once()

    @patch("skytonight.services.llm_client.OpenAI")
    def test_missing_api_key(self, mock_openai, messages):
        client = OpenAIChatClient(api_key="")

        with pytest.raises(CompletionError, match="Missing OPENAI_API_KEY"):
            client.complete("You are Stella.", "", messages)

        mock_openai.assert_not_called()

    @patch("skytonight.services.llm_client.OpenAI")
    def test_non_2xx(self, mock_openai, client, messages):
        response = httpx.Response(429, request=httpx.Request("POST", "https://llm.test/v1/chat/completions"))
        mock_openai.return_value.chat.completions.create.side_effect = openai.RateLimitError(
            "rate limited", response=response, body=None
        )

        with pytest.raises(CompletionError, match="Model error: 429 rate limited"):
            client.complete("You are Stella.", "", messages)

    @patch("skytonight.services.llm_client.OpenAI")
    def test_network_error(self, mock_openai, client, messages):
        mock_openai.return_value.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", "https://llm.test/v1/chat/completions")
        )

        with pytest.raises(CompletionError, match="Model request failed"):
            client.complete("You are Stella.", "", messages)

    @pytest.mark.parametrize(
        "response",
        [completion(""), completion(None), Mock(choices=[]), Mock(choices=None)],
    )
    @patch("skytonight.services.llm_client.OpenAI")
    def test_empty_reply_falls_back(self, mock_openai, response, client, messages):
        mock_openai.return_value.chat.completions.create.return_value = response

        assert client.complete("You are Stella.", "", messages) == FALLBACK_REPLY
