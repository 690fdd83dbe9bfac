"""Test provider request timeouts."""

from unittest.mock import MagicMock, patch

from contentforge.providers.anthropic import AnthropicProvider
from contentforge.providers.google import GoogleProvider
from contentforge.providers.openai import OpenAIProvider


def test_default_timeout_is_sixty_seconds():
    """Test that every adapter abandons a request after 60 seconds by default."""
    with patch("contentforge.providers.openai.openai_provider.OpenAI") as openai_client, \
         patch("contentforge.providers.anthropic.anthropic_provider.Anthropic") as anthropic_client:
        assert OpenAIProvider(api_key="sk").timeout == 60
        assert AnthropicProvider(api_key="sk-ant").timeout == 60

        assert openai_client.call_args.kwargs["timeout"] == 60
        assert anthropic_client.call_args.kwargs["timeout"] == 60

    assert GoogleProvider(api_key="AIza").timeout == 60


def test_custom_timeout_reaches_http_call():
    """Test that a custom timeout is passed to the Google request."""
    provider = GoogleProvider(api_key="AIza", timeout=5)
    response = MagicMock(status_code=200)
    response.json.return_value = {"candidates": [{"content": {"parts": [{"text": "Title\n\nBody"}]}}]}

    with patch("contentforge.providers.google.google_provider.requests.post", return_value=response) as mock_post:
        result = provider.generate("prompt")

    assert mock_post.call_args.kwargs["timeout"] == 5
    assert result.title == "Title"
