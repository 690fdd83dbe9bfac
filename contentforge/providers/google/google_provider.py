"""Google Gemini provider implementation."""

from typing import Any, Dict, Optional

import requests

from ...exceptions import ProviderError
from ...types import ConnectionResult
from ...utils import get_logger
from ..parse_response import extract_error_message
from ..provider import AIProvider
from .models import DEFAULT_MODEL, GOOGLE_MODELS


logger = get_logger(__name__)


API_BASE = "https://generativelanguage.googleapis.com/v1"


class GoogleProvider(AIProvider):
    """Google Gemini provider using the v1 REST API.

    The Generative Language API expects the key as the ``key`` query
    parameter rather than a header, so it is passed in the URL on every
    request. The key is never logged.
    """

    slug = "google"
    label = "Google"

    # Model list call used by test_connection
    CONNECTION_TIMEOUT = 30

    JSON_INSTRUCTION = (
        '\n\nAlways respond with valid JSON containing "title" and "content" keys. '
        'The title should be engaging and SEO-friendly (maximum 60 characters). '
        'The content should be comprehensive and well-formatted.'
    )

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout: Optional[float] = None):
        """Initialize Google provider."""
        super().__init__(api_key, model, timeout)
        self.models = GOOGLE_MODELS

    def get_api_endpoint(self) -> str:
        """generateContent endpoint for the configured model (without the key)."""
        return f"{API_BASE}/models/{self.model}:generateContent"

    def build_request_payload(self, prompt: str) -> Dict[str, Any]:
        """Build generateContent payload; Gemini has no system role here."""
        return {
            "contents": [
                {"parts": [{"text": prompt + self.JSON_INSTRUCTION}]},
            ],
        }

    def complete(self, prompt: str) -> str:
        """Send prompt and return the first candidate's text."""
        data = self._request(self.build_request_payload(prompt))

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            logger.warning(f"Google response for model {self.model} contained no candidate text")
            return ""

    def _request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = requests.post(
                self.get_api_endpoint(),
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.error(f"✗ Google request timed out after {self.timeout}s")
            raise ProviderError(f"Request timed out after {self.timeout} seconds", provider=self.slug)
        except requests.exceptions.RequestException as e:
            # The exception text contains the request URL, which carries the key
            logger.error(f"✗ Could not reach Google: {type(e).__name__}")
            raise ProviderError(f"Connection to Google failed: {type(e).__name__}", provider=self.slug)

        if response.status_code < 200 or response.status_code >= 300:
            message = extract_error_message(_json_or_none(response))
            logger.error(f"✗ Google request failed ({response.status_code}): {message}")
            raise ProviderError(message, status_code=response.status_code, provider=self.slug)

        data = _json_or_none(response)
        if not isinstance(data, dict):
            raise ProviderError("Invalid JSON response", status_code=response.status_code, provider=self.slug)

        return data

    def test_connection(self) -> ConnectionResult:
        """List available models to verify the key."""
        try:
            response = requests.get(
                f"{API_BASE}/models",
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                timeout=self.CONNECTION_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            return ConnectionResult(success=False, message=f"Connection to Google failed: {type(e).__name__}")

        data = _json_or_none(response)

        if response.status_code == 200:
            if isinstance(data, dict) and "models" in data:
                return ConnectionResult(
                    success=True,
                    message=f"Connection successful! Found {len(data['models'])} available models.",
                )
            return ConnectionResult(success=False, message="Connected but received unexpected response format.")

        return ConnectionResult(
            success=False,
            message=extract_error_message(data, "Connection failed. Please check your API key and try again."),
        )


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
