"""Content Forge: scheduled AI generation of placeholder posts."""

from .core import (
    Batch,
    BatchStatus,
    BatchStatusQuery,
    BatchStore,
    ContentGenerator,
    GenerationJob,
    InMemoryDispatcher,
    InMemoryPostService,
    ScheduledGenerator,
)
from .exceptions import (
    ConfigurationError,
    ContentForgeError,
    NotFoundError,
    PostCreationError,
    ProviderError,
    ProviderNotFoundError,
    SchedulingError,
    StateError,
    ValidationError,
)
from .settings import AISettingsManager
from .types import ConnectionResult, GeneratedContent

__version__ = "0.1.0"

__all__ = [
    "AISettingsManager",
    "Batch",
    "BatchStatus",
    "BatchStatusQuery",
    "BatchStore",
    "ConfigurationError",
    "ConnectionResult",
    "ContentForgeError",
    "ContentGenerator",
    "GeneratedContent",
    "GenerationJob",
    "InMemoryDispatcher",
    "InMemoryPostService",
    "NotFoundError",
    "PostCreationError",
    "ProviderError",
    "ProviderNotFoundError",
    "ScheduledGenerator",
    "SchedulingError",
    "StateError",
    "ValidationError",
]
