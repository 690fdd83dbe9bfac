"""Anthropic provider."""

from .anthropic_provider import AnthropicProvider

__all__ = ["AnthropicProvider"]
