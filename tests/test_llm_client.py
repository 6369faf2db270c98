"""Tests for the Claude generation client."""

from unittest.mock import MagicMock, patch

import httpx
import pytest
from anthropic import RateLimitError

from src.classification.llm_client import GenerativeClient


def make_response(text: str, input_tokens: int = 100, output_tokens: int = 20):
    response = MagicMock()
    response.content = [MagicMock(text=text)]
    response.usage.input_tokens = input_tokens
    response.usage.output_tokens = output_tokens
    return response


def make_rate_limit_error() -> RateLimitError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    return RateLimitError(
        "rate limited",
        response=httpx.Response(429, request=request),
        body=None,
    )


@pytest.fixture
def mock_anthropic():
    with patch("src.classification.llm_client.Anthropic") as mock:
        yield mock.return_value


class TestGenerativeClientInit:
    def test_missing_api_key_raises(self):
        with patch("src.classification.llm_client.classification_settings") as mock_settings:
            mock_settings.anthropic_api_key = ""
            with pytest.raises(ValueError, match="API key is required"):
                GenerativeClient()

    def test_explicit_settings(self, mock_anthropic):
        client = GenerativeClient(api_key="key", model="claude-test", max_tokens=256)

        assert client.model == "claude-test"
        assert client.max_tokens == 256


class TestGenerate:
    def test_returns_text(self, mock_anthropic):
        mock_anthropic.messages.create.return_value = make_response('{"ok": true}')
        client = GenerativeClient(api_key="key", model="claude-test")

        assert client.generate("Categorize this") == '{"ok": true}'

        kwargs = mock_anthropic.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["messages"] == [{"role": "user", "content": "Categorize this"}]
        assert "system" not in kwargs

    def test_system_prompt_passed(self, mock_anthropic):
        mock_anthropic.messages.create.return_value = make_response("ok")
        client = GenerativeClient(api_key="key")

        client.generate("prompt", system_prompt="You are an ESG analyst.")

        assert mock_anthropic.messages.create.call_args.kwargs["system"] == "You are an ESG analyst."

    def test_tracks_usage(self, mock_anthropic):
        mock_anthropic.messages.create.return_value = make_response("ok", 1000, 200)
        client = GenerativeClient(api_key="key")

        client.generate("a")
        client.generate("b")
        stats = client.get_stats()

        assert stats["total_input_tokens"] == 2000
        assert stats["total_output_tokens"] == 400
        assert stats["total_api_calls"] == 2
        assert stats["estimated_cost_usd"] > 0

    @patch("src.classification.llm_client.time.sleep")
    def test_rate_limit_retried_with_backoff(self, mock_sleep, mock_anthropic):
        mock_anthropic.messages.create.side_effect = [
            make_rate_limit_error(),
            make_rate_limit_error(),
            make_response("finally"),
        ]
        client = GenerativeClient(api_key="key", retry_delay=1.0)

        assert client.generate("prompt") == "finally"
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0]

    @patch("src.classification.llm_client.time.sleep")
    def test_rate_limit_exhausted_raises(self, mock_sleep, mock_anthropic):
        mock_anthropic.messages.create.side_effect = make_rate_limit_error()
        client = GenerativeClient(api_key="key", max_retries=2)

        with pytest.raises(RateLimitError):
            client.generate("prompt")
        assert mock_anthropic.messages.create.call_count == 2

    @patch("src.classification.llm_client.time.sleep")
    def test_other_errors_not_retried(self, mock_sleep, mock_anthropic):
        mock_anthropic.messages.create.side_effect = RuntimeError("boom")
        client = GenerativeClient(api_key="key")

        with pytest.raises(RuntimeError):
            client.generate("prompt")
        mock_sleep.assert_not_called()
        assert mock_anthropic.messages.create.call_count == 1
