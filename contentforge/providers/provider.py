"""Base class for AI provider adapters."""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..exceptions import ConfigurationError
from ..types import ConnectionResult, GeneratedContent
from ..utils import get_logger
from .model_config import ModelConfig
from .parse_response import parse_content


logger = get_logger(__name__)


class AIProvider(ABC):
    """Translates the generic generation contract into one vendor's HTTP API.

    Subclasses implement :meth:`complete`, which sends the prompt and returns
    the raw text written by the model, and :meth:`test_connection`. Parsing of
    that text into a title/content pair is shared.

    Every vendor failure (non-2xx status, transport error, undecodable body)
    is raised as :class:`~contentforge.exceptions.ProviderError`.
    """

    # Provider tag used by settings and the registry
    slug = ""
    label = ""

    # Seconds before an in-flight request is abandoned
    TIMEOUT = 60

    SYSTEM_INSTRUCTION = (
        'You are a helpful content writer. Always respond with valid JSON containing "title" '
        'and "content" keys. The title should be engaging and SEO-friendly (maximum 60 characters). '
        'The content should be comprehensive and well-formatted.'
    )

    def __init__(self, api_key: str, model: str, timeout: Optional[float] = None):
        """Initialize provider.

        Args:
            api_key: Vendor API key
            model: Model identifier
            timeout: Request timeout in seconds (defaults to TIMEOUT)

        Raises:
            ConfigurationError: If no API key is given
        """
        api_key = (api_key or "").strip()
        if not api_key:
            raise ConfigurationError(f"{self.label or self.slug} API key is not configured")

        self.api_key = api_key
        self.model = model
        self.timeout = timeout if timeout is not None else self.TIMEOUT
        self.models: Dict[str, ModelConfig] = {}

    def generate(self, prompt: str, content_type: Optional[str] = None) -> GeneratedContent:
        """Generate a title and content in a single API call.

        Args:
            prompt: Full prompt built by the content generator
            content_type: Content type slug, informational only

        Returns:
            GeneratedContent with title and content

        Raises:
            ProviderError: If the vendor request fails
        """
        logger.debug(f"{self.slug}: generating {content_type or 'content'} with model {self.model}")
        text = self.complete(prompt)
        return parse_content(text)

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Send prompt to the vendor and return the text the model wrote."""
        pass

    @abstractmethod
    def test_connection(self) -> ConnectionResult:
        """Lightweight credential check. Never raises."""
        pass

    def supports_model(self, model: str) -> bool:
        """Whether the model is in this provider's catalog."""
        return model in self.models

    def get_model_config(self, model: str) -> Optional[ModelConfig]:
        """Get catalog entry for a model."""
        return self.models.get(model)
