"""Provider registry mapping provider tags to adapter constructors."""

from typing import Callable, Dict, List, Optional

from ..exceptions import ProviderNotFoundError
from .anthropic import AnthropicProvider
from .google import GoogleProvider
from .openai import OpenAIProvider
from .provider import AIProvider


ProviderFactory = Callable[..., AIProvider]


class ProviderRegistry:
    """Registry of provider factories keyed by tag ("openai", "google", ...).

    Built-in providers are registered on first use. Additional providers can
    be registered at runtime, replacing a built-in with the same tag.
    """

    _instance = None
    _factories: Dict[str, ProviderFactory] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def register(cls, tag: str, factory: ProviderFactory) -> None:
        """Register a factory taking (api_key, model) for a provider tag."""
        cls._ensure_defaults()
        cls._factories[tag] = factory

    @classmethod
    def create(cls, tag: str, api_key: str, model: str) -> AIProvider:
        """Instantiate the provider registered under tag.

        Raises:
            ProviderNotFoundError: If no provider is registered for tag
        """
        cls._ensure_defaults()
        factory = cls._factories.get(tag)
        if factory is None:
            raise ProviderNotFoundError(f"No provider found for tag: {tag}")
        return factory(api_key=api_key, model=model)

    @classmethod
    def list_providers(cls) -> List[str]:
        """Registered provider tags in registration order."""
        cls._ensure_defaults()
        return list(cls._factories)

    @classmethod
    def clear(cls) -> None:
        """Remove all registrations; defaults come back on next use."""
        cls._factories = {}

    @classmethod
    def _ensure_defaults(cls) -> None:
        if cls._factories:
            return
        cls._factories = {
            OpenAIProvider.slug: OpenAIProvider,
            AnthropicProvider.slug: AnthropicProvider,
            GoogleProvider.slug: GoogleProvider,
        }


def get_provider(tag: str, api_key: str, model: str, registry: Optional[ProviderRegistry] = None) -> AIProvider:
    """Create a provider adapter for tag."""
    return (registry or ProviderRegistry).create(tag, api_key, model)


def register_provider(tag: str, factory: ProviderFactory) -> None:
    ProviderRegistry.register(tag, factory)


def create_provider(tag: str, api_key: str, model: str) -> AIProvider:
    return ProviderRegistry.create(tag, api_key, model)


def list_providers() -> List[str]:
    return ProviderRegistry.list_providers()
