"""OpenAI provider implementation."""

from typing import Any, Dict, Optional

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI, OpenAIError

from ...exceptions import ProviderError
from ...types import ConnectionResult
from ...utils import get_logger
from ..parse_response import extract_error_message
from ..provider import AIProvider
from .models import DEFAULT_MODEL, OPENAI_MODELS


logger = get_logger(__name__)


class OpenAIProvider(AIProvider):
    """OpenAI chat completions provider.

    Requests go to ``POST https://api.openai.com/v1/chat/completions`` with a
    bearer token. Retries are disabled: a failed item is recorded and the
    batch moves on.
    """

    slug = "openai"
    label = "OpenAI"

    TEMPERATURE = 0.7
    MAX_TOKENS = 2000

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout: Optional[float] = None):
        """Initialize OpenAI provider."""
        super().__init__(api_key, model, timeout)
        self.client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        self.models = OPENAI_MODELS

    def build_request_payload(self, prompt: str) -> Dict[str, Any]:
        """Build chat completion payload asking for a JSON object."""
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.SYSTEM_INSTRUCTION},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.TEMPERATURE,
            "max_tokens": self.MAX_TOKENS,
            "response_format": {"type": "json_object"},
        }

    def complete(self, prompt: str) -> str:
        """Send prompt and return the first choice's text."""
        response = self._request(self.build_request_payload(prompt))

        choices = getattr(response, "choices", None)
        if not choices:
            return ""

        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None) or ""

    def _request(self, payload: Dict[str, Any]) -> Any:
        try:
            return self.client.chat.completions.create(**payload)
        except APIStatusError as e:
            message = extract_error_message(e.body)
            logger.error(f"✗ OpenAI request failed ({e.status_code}): {message}")
            raise ProviderError(message, status_code=e.status_code, provider=self.slug)
        except APITimeoutError:
            logger.error(f"✗ OpenAI request timed out after {self.timeout}s")
            raise ProviderError(f"Request timed out after {self.timeout} seconds", provider=self.slug)
        except APIConnectionError as e:
            logger.error(f"✗ Could not reach OpenAI: {e}")
            raise ProviderError(f"Connection to OpenAI failed: {e}", provider=self.slug)
        except OpenAIError as e:
            raise ProviderError(str(e), provider=self.slug)

    def test_connection(self) -> ConnectionResult:
        """Send a minimal completion to verify the key and model."""
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": 'Respond with JSON: {"status": "ok"}'}],
            "max_tokens": 10,
        }

        try:
            self._request(payload)
        except ProviderError as e:
            return ConnectionResult(success=False, message=e.message)

        return ConnectionResult(success=True, message="Connection successful")
