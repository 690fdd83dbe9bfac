"""Test doubles."""

from .mock_provider import MockProvider

__all__ = ["MockProvider"]
