"""Google Gemini provider."""

from .google_provider import GoogleProvider

__all__ = ["GoogleProvider"]
