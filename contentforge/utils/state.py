"""Key-value state persistence.

The batch engine keeps all of its state in a flat key-value store, the way the
host keeps options. Any backend implementing :class:`KeyValueStore` can be
plugged in.
"""

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..exceptions import StateError
from .json_encoder import ContentForgeJSONEncoder


class KeyValueStore(ABC):
    """Durable mapping from string keys to JSON-serializable values."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """List keys starting with prefix, most recently inserted first."""


class MemoryStore(KeyValueStore):
    """Thread-safe in-process store."""

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            # Re-inserting moves the key to the end so keys() stays in insertion order
            self._data.pop(key, None)
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return [k for k in reversed(list(self._data)) if k.startswith(prefix)]


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON file.

    Every write goes to a temporary file which then atomically replaces the
    target, so a crash never leaves a half-written state file behind.

    Example:
        >>> store = JsonFileStore("./.contentforge/state.json")
        >>> store.set("cforge_ai_provider", "openai")
        >>> store.get("cforge_ai_provider")
        'openai'
    """

    def __init__(self, state_file: str):
        """Initialize the store.

        Args:
            state_file: Path to the JSON state file
        """
        self.state_file = Path(state_file)
        self._lock = threading.RLock()
        self.state_file.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> Dict[str, Any]:
        if not self.state_file.exists():
            return {}

        try:
            with open(self.state_file, 'r') as f:
                return json.load(f)
        except Exception as e:
            raise StateError(f"Failed to load state: {e}")

    def _save(self, data: Dict[str, Any]) -> None:
        try:
            temp_file = self.state_file.with_suffix('.tmp')
            with open(temp_file, 'w') as f:
                json.dump(data, f, indent=2, cls=ContentForgeJSONEncoder)

            # Atomic replace
            temp_file.replace(self.state_file)
        except Exception as e:
            raise StateError(f"Failed to save state: {e}")

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data.pop(key, None)
            data[key] = value
            self._save(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._save(data)

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return [k for k in reversed(list(self._load())) if k.startswith(prefix)]
