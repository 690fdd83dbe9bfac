"""Tests for utility modules."""

import json
import logging
import tempfile
import threading
from pathlib import Path

import pytest

from contentforge.core.batch import Batch, BatchStatus
from contentforge.exceptions import StateError
from contentforge.types import ConnectionResult, GeneratedContent
from contentforge.utils import ContentForgeJSONEncoder, JsonFileStore, MemoryStore, get_logger, set_log_level


class TestMemoryStore:
    """Tests for MemoryStore."""

    def test_get_set_delete(self):
        store = MemoryStore()
        assert store.get("missing") is None

        store.set("key", {"a": 1})
        assert store.get("key") == {"a": 1}

        store.delete("key")
        store.delete("key")
        assert store.get("key") is None

    def test_keys_newest_first(self):
        store = MemoryStore()
        store.set("cforge_batch_1", 1)
        store.set("cforge_batch_2", 2)
        store.set("other", 3)
        store.set("cforge_batch_1", 4)

        assert store.keys("cforge_batch_") == ["cforge_batch_1", "cforge_batch_2"]
        assert store.keys() == ["cforge_batch_1", "other", "cforge_batch_2"]

    def test_concurrent_writes(self):
        store = MemoryStore()

        def write(n):
            for i in range(100):
                store.set(f"k{n}-{i}", i)

        threads = [threading.Thread(target=write, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store.keys("k")) == 400


class TestJsonFileStore:
    """Tests for JsonFileStore."""

    def test_persists_across_instances(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            state_file = Path(temp_dir) / "nested" / "state.json"

            store = JsonFileStore(str(state_file))
            store.set("cforge_ai_provider", "google")
            store.set("cforge_batch_x", {"total": 2})

            reopened = JsonFileStore(str(state_file))
            assert reopened.get("cforge_ai_provider") == "google"
            assert reopened.get("cforge_batch_x") == {"total": 2}
            assert reopened.keys("cforge_") == ["cforge_batch_x", "cforge_ai_provider"]

            assert json.loads(state_file.read_text())["cforge_ai_provider"] == "google"
            assert not state_file.with_suffix(".tmp").exists()

    def test_delete(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            store = JsonFileStore(str(Path(temp_dir) / "state.json"))
            store.set("a", 1)
            store.delete("a")
            store.delete("never-existed")
            assert store.get("a") is None

    def test_corrupted_file_raises_state_error(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            state_file = Path(temp_dir) / "state.json"
            state_file.write_text("{not json")

            store = JsonFileStore(str(state_file))
            with pytest.raises(StateError, match="Failed to load state"):
                store.get("a")


class TestJSONEncoder:
    """Tests for ContentForgeJSONEncoder."""

    def test_encodes_records(self):
        batch = Batch.create("batch_1", total=1, user_id=1, now=10)
        data = {
            "batch": batch,
            "status": BatchStatus.COMPLETED,
            "content": GeneratedContent(title="T", content="C"),
            "connection": ConnectionResult(success=True, message="ok"),
        }

        decoded = json.loads(json.dumps(data, cls=ContentForgeJSONEncoder))

        assert decoded["batch"]["batch_id"] == "batch_1"
        assert decoded["batch"]["status"] == "processing"
        assert decoded["status"] == "completed"
        assert decoded["content"] == {"title": "T", "content": "C"}
        assert decoded["connection"] == {"success": True, "message": "ok"}

    def test_unknown_objects_still_fail(self):
        with pytest.raises(TypeError):
            json.dumps({"x": object()}, cls=ContentForgeJSONEncoder)


class TestLogging:
    """Tests for logging helpers."""

    def test_namespaced_logger(self):
        assert get_logger("contentforge.core.batch").name == "contentforge.core.batch"
        assert get_logger("tests.helper").name == "contentforge.tests.helper"
        assert get_logger("contentforge").name == "contentforge"

    def test_set_log_level(self):
        root = logging.getLogger("contentforge")
        previous = root.level
        try:
            set_log_level("DEBUG")
            assert root.level == logging.DEBUG
            handlers = len(root.handlers)

            set_log_level(logging.WARNING)
            assert root.level == logging.WARNING
            assert len(root.handlers) == handlers
        finally:
            root.setLevel(previous)
