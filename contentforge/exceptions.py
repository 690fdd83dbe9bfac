"""Exception hierarchy for Content Forge.

Every error carries a ``status`` code so a host REST layer can map it to a
response without inspecting the type.
"""

from typing import Optional


class ContentForgeError(Exception):
    """Base exception for all Content Forge errors."""

    status = 500

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class ValidationError(ContentForgeError):
    """Invalid input rejected before any state is created."""

    status = 400


class ConfigurationError(ContentForgeError):
    """AI provider is not configured (missing API key)."""

    status = 400


class ProviderError(ContentForgeError):
    """AI vendor request failed.

    Attributes:
        status_code: HTTP status returned by the vendor (None on transport errors)
        provider: Provider slug the request was sent to
    """

    def __init__(self, message: str, status_code: Optional[int] = None, provider: str = ""):
        super().__init__(message, status=status_code or 502)
        self.status_code = status_code
        self.provider = provider


class ProviderNotFoundError(ContentForgeError):
    """No provider is registered for the requested tag."""

    status = 400


class PostCreationError(ContentForgeError):
    """Post could not be created from generated content."""


class NotFoundError(ContentForgeError):
    """Requested batch does not exist or has expired."""

    status = 404


class SchedulingError(ContentForgeError):
    """Task dispatcher refused to enqueue work."""


class StateError(ContentForgeError):
    """Failure reading or writing persisted state."""
