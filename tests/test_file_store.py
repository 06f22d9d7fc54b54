"""Tests for FileStore.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import os
from pathlib import Path

import pytest

from cachestore_core.errors import BackendUnavailable
from cachestore_core.store.base import StoreConfig
from cachestore_core.store.file import FileStore


@pytest.fixture
def file_store(tmp_path):
    return FileStore(tmp_path / "cache")


class TestFileStore:
    """Tests for FileStore."""

    def test_basic_operations(self, file_store, clock):
        """Test write/read/exists/delete."""
        file_store.write("greeting", "hello", expires_in=60)

        assert file_store.read("greeting") == "hello"
        assert file_store.exists("greeting")
        assert file_store.delete("greeting")
        assert file_store.read("greeting") is None
        assert not file_store.delete("greeting")

    def test_persists_across_instances(self, tmp_path):
        """Test a second store on the same directory sees the data."""
        FileStore(tmp_path).write("key", "value")

        assert FileStore(tmp_path).read("key") == "value"

    def test_sharded_layout(self, file_store):
        """Test entries land in a shard directory."""
        file_store.write("key", "value")

        files = [p for p in file_store.base_path.rglob("*") if p.is_file()]
        assert len(files) == 1
        assert files[0].parent.parent == file_store.base_path
        assert files[0].name.startswith(files[0].parent.name)

    def test_special_character_keys(self, file_store):
        """Test keys that are not valid file names."""
        key = "../../etc/passwd:ünï/\\*?"
        file_store.write(key, "value")

        assert file_store.read(key) == "value"

    def test_large_value_round_trip(self, file_store):
        """Test compressed entries are read back unchanged."""
        value = "0123456789" * 1000
        file_store.write("big", value)

        assert file_store.read("big") == value

    def test_expired_entry_removed_on_read(self, file_store, clock):
        """Test lazy eviction deletes the file."""
        file_store.write("key", "value", expires_in=1)
        clock.advance(2)

        assert file_store.read("key") is None
        assert file_store.size() == 0

    def test_race_condition_ttl(self, file_store, clock):
        """Test stale values are served from disk within the window."""
        file_store.write("key", "original", expires_in=0)
        clock.advance(1)

        assert file_store.fetch("key", lambda: "new", race_condition_ttl=10) == "original"
        assert file_store.fetch("key", lambda: "new", race_condition_ttl=10) == "original"

    def test_namespace_isolation(self, tmp_path):
        """Test namespaced stores sharing a directory."""
        first = FileStore(tmp_path, StoreConfig(namespace="one"))
        second = FileStore(tmp_path, StoreConfig(namespace="two"))

        first.write("key", "one")
        second.write("key", "two")

        assert first.read("key") == "one"
        assert second.read("key") == "two"

    def test_clear(self, file_store):
        """Test clear removes all files."""
        for i in range(5):
            file_store.write(f"key{i}", "value")

        assert file_store.size() == 5
        file_store.clear()

        assert file_store.size() == 0
        assert file_store.read("key0") is None

    def test_clear_tolerates_concurrent_removal(self, file_store, monkeypatch):
        """Test files removed by another process during clear are skipped."""
        for i in range(3):
            file_store.write(f"key{i}", "value")

        original_is_file = Path.is_file

        def is_file_removed_elsewhere(path):
            found = original_is_file(path)
            if found:
                os.remove(path)
            return found

        monkeypatch.setattr(Path, "is_file", is_file_removed_elsewhere)
        file_store.clear()
        monkeypatch.undo()

        assert file_store.size() == 0
        assert file_store.get_stats().errors == 0

    def test_clear_keeps_in_flight_temp_files(self, file_store):
        """Test clear leaves temp files of running writes in place."""
        file_store.write("key", "value")
        temp_path = file_store._get_path("key").parent / f"pending{FileStore.TEMP_SUFFIX}"
        temp_path.write_bytes(b"\x00partial")

        file_store.clear()

        assert file_store.read("key") is None
        assert temp_path.exists()

    def test_corrupt_file_is_a_miss(self, file_store):
        """Test a damaged file reads as a miss."""
        file_store.write("key", "value")
        path = file_store._get_path("key")
        path.write_bytes(b"\x09junk")

        assert file_store.read("key") is None
        assert file_store.fetch("key", lambda: "fresh") == "fresh"

    def test_cleanup(self, file_store, clock):
        """Test cleanup removes expired and corrupt files only."""
        file_store.write("expired", "value", expires_in=1)
        file_store.write("fresh", "value", expires_in=100)
        file_store.write("forever", "value")
        file_store.write("broken", "value")
        file_store._get_path("broken").write_bytes(b"")
        clock.advance(5)

        assert file_store.cleanup() == 2
        assert file_store.read("fresh") == "value"
        assert file_store.read("forever") == "value"
        assert file_store.size() == 2

    def test_no_temp_files_left(self, file_store):
        """Test writes leave no temporary files behind."""
        file_store.write("key", "value")
        file_store.write("key", "value2")

        temp_files = list(file_store.base_path.rglob(f"*{FileStore.TEMP_SUFFIX}"))
        assert temp_files == []

    def test_unwritable_directory(self, tmp_path):
        """Test a base path that is a file raises BackendUnavailable."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(BackendUnavailable):
            FileStore(blocker / "cache")

    def test_read_error_raises(self, file_store):
        """Test I/O errors other than a missing file surface."""
        path = file_store._get_path("key")
        path.parent.mkdir(parents=True, exist_ok=True)
        os.mkdir(path)

        with pytest.raises(BackendUnavailable):
            file_store.read("key")

        assert file_store.get_stats().errors == 1


def test_repr(tmp_path):
    assert str(Path(tmp_path)) in repr(FileStore(tmp_path))
