"""Persistence of batch records in a key-value store."""

import threading
from typing import Callable, Dict, List, Optional

from ..exceptions import StateError
from ..utils import KeyValueStore, get_logger
from .batch import Batch


logger = get_logger(__name__)


class BatchStore:
    """Reads and writes :class:`Batch` records.

    Records live under ``<prefix>batch_<batch_id>``. All writes to one batch
    go through a per-batch lock so concurrent updates cannot overwrite each
    other.

    Example:
        >>> store = BatchStore(MemoryStore())
        >>> store.save(Batch.create("batch_1", total=3, user_id=1, now=0))
        >>> store.update("batch_1", lambda b: b.record_success(0, 10, "Title", now=1)).completed
        1
    """

    DEFAULT_PREFIX = "cforge_"

    def __init__(self, store: KeyValueStore, prefix: str = DEFAULT_PREFIX):
        self.store = store
        self.prefix = prefix
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def key(self, batch_id: str) -> str:
        """Store key of a batch record."""
        return f"{self.prefix}batch_{batch_id}"

    def _lock_for(self, batch_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(batch_id)
            if lock is None:
                lock = self._locks[batch_id] = threading.RLock()
            return lock

    def load(self, batch_id: str) -> Optional[Batch]:
        """Load a batch, or None if it does not exist."""
        data = self.store.get(self.key(batch_id))
        if not data:
            return None
        if not isinstance(data, dict):
            raise StateError(f"Invalid batch data format for {batch_id}")

        data = dict(data)
        data.setdefault("batch_id", batch_id)
        try:
            return Batch.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise StateError(f"Invalid batch data format for {batch_id}: {e}")

    def save(self, batch: Batch) -> None:
        with self._lock_for(batch.batch_id):
            self.store.set(self.key(batch.batch_id), batch.to_dict())

    def delete(self, batch_id: str) -> None:
        """Remove a batch record. Missing records are ignored."""
        with self._lock_for(batch_id):
            self.store.delete(self.key(batch_id))
        with self._locks_guard:
            self._locks.pop(batch_id, None)

    def update(self, batch_id: str, fn: Callable[[Batch], None]) -> Optional[Batch]:
        """Atomically read, modify and write one batch.

        Args:
            batch_id: Batch to update
            fn: Called with the loaded batch; mutates it in place

        Returns:
            The updated batch, or None if the record does not exist (fn is
            not called)
        """
        with self._lock_for(batch_id):
            batch = self.load(batch_id)
            if batch is None:
                return None
            fn(batch)
            self.store.set(self.key(batch_id), batch.to_dict())
            return batch

    def list_ids(self) -> List[str]:
        """Ids of all stored batches, newest first."""
        record_prefix = f"{self.prefix}batch_"
        return [k[len(record_prefix):] for k in self.store.keys(record_prefix)]
