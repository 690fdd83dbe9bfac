"""Utility modules for Content Forge."""

from .json_encoder import ContentForgeJSONEncoder
from .logging import get_logger, set_log_level
from .state import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "ContentForgeJSONEncoder",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "get_logger",
    "set_log_level",
]
