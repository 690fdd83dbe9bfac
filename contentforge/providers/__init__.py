"""AI provider adapters."""

from .anthropic import AnthropicProvider
from .google import GoogleProvider
from .model_config import ModelConfig
from .openai import OpenAIProvider
from .provider import AIProvider
from .provider_registry import ProviderRegistry, create_provider, get_provider, list_providers, register_provider

__all__ = [
    "AIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "ModelConfig",
    "OpenAIProvider",
    "ProviderRegistry",
    "create_provider",
    "get_provider",
    "list_providers",
    "register_provider",
]
