"""Anthropic provider implementation."""

from typing import Any, Dict, Optional

from anthropic import Anthropic, AnthropicError, APIConnectionError, APIStatusError, APITimeoutError

from ...exceptions import ProviderError
from ...types import ConnectionResult
from ...utils import get_logger
from ..parse_response import extract_error_message
from ..provider import AIProvider
from .models import ANTHROPIC_MODELS, DEFAULT_MODEL


logger = get_logger(__name__)


class AnthropicProvider(AIProvider):
    """Anthropic Messages API provider."""

    slug = "anthropic"
    label = "Anthropic"

    TEMPERATURE = 0.7
    MAX_TOKENS = 2000

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout: Optional[float] = None):
        """Initialize Anthropic provider."""
        super().__init__(api_key, model, timeout)
        self.client = Anthropic(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        self.models = ANTHROPIC_MODELS

    def build_request_payload(self, prompt: str) -> Dict[str, Any]:
        """Build Messages API payload."""
        return {
            "model": self.model,
            "system": self.SYSTEM_INSTRUCTION,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.TEMPERATURE,
            "max_tokens": self.MAX_TOKENS,
        }

    def complete(self, prompt: str) -> str:
        """Send prompt and join the text blocks of the reply."""
        message = self._request(self.build_request_payload(prompt))

        content = getattr(message, "content", None) or []
        if isinstance(content, str):
            return content

        return "".join(block.text for block in content if getattr(block, "type", None) == "text")

    def _request(self, payload: Dict[str, Any]) -> Any:
        try:
            return self.client.messages.create(**payload)
        except APIStatusError as e:
            message = extract_error_message(e.body)
            logger.error(f"✗ Anthropic request failed ({e.status_code}): {message}")
            raise ProviderError(message, status_code=e.status_code, provider=self.slug)
        except APITimeoutError:
            logger.error(f"✗ Anthropic request timed out after {self.timeout}s")
            raise ProviderError(f"Request timed out after {self.timeout} seconds", provider=self.slug)
        except APIConnectionError as e:
            logger.error(f"✗ Could not reach Anthropic: {e}")
            raise ProviderError(f"Connection to Anthropic failed: {e}", provider=self.slug)
        except AnthropicError as e:
            raise ProviderError(str(e), provider=self.slug)

    def test_connection(self) -> ConnectionResult:
        """Send a minimal message to verify the key and model."""
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
