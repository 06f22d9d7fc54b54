"""CacheStore File Store - File-Based Storage Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, Optional, Union

from cachestore_core.cache.entry import Entry
from cachestore_core.errors import BackendUnavailable, CorruptEntry
from cachestore_core.store.base import Store, StoreConfig

logger = logging.getLogger(__name__)


class FileStore(Store):
    """File-based storage backend.

    Persists one serialized entry per file, so several processes can share
    a cache directory. Files are spread over 256 shard directories named
    after the first byte of the key hash.

    Features:
    - Persistent storage
    - Sharded directories
    - Atomic writes (temp file + rename)
    - Expired entry cleanup

    Example:
        store = FileStore("/var/cache/myapp", StoreConfig(namespace="app"))
        store.write("key", "data")
        value = store.read("key")
    """

    TEMP_SUFFIX = ".tmp"

    def __init__(
        self,
        base_path: Union[str, Path],
        config: Optional[StoreConfig] = None,
    ):
        """Initialize file store.

        Args:
            base_path: Base directory for cache files
            config: Store configuration

        Raises:
            BackendUnavailable: If the directory cannot be created
        """
        super().__init__(config)
        self.base_path = Path(base_path)

        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise self._unavailable("create cache directory", e) from e

    def _get_path(self, key: str) -> Path:
        """Get file path for key.

        Args:
            key: Normalized key

        Returns:
            File path
        """
        # Hash as filename to handle special characters
        filename = hashlib.sha256(key.encode()).hexdigest()
        return self.base_path / filename[:2] / filename

    def _unavailable(self, action: str, error: OSError) -> BackendUnavailable:
        logger.error(f"Unable to {action} in {self.base_path}: {error}")
        self._stats.record_error(str(error))
        return BackendUnavailable(
            f"File store unable to {action}: {error}",
            details={"path": str(self.base_path)},
        )

    def _entry_files(self) -> Iterator[Path]:
        for shard_dir in self.base_path.iterdir():
            if shard_dir.is_dir():
                for file_path in shard_dir.iterdir():
                    if file_path.is_file() and file_path.suffix != self.TEMP_SUFFIX:
                        yield file_path

    def read_entry(self, key: str) -> Optional[Entry]:
        path = self._get_path(key)

        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise self._unavailable(f"read {key}", e) from e

        return self._deserialize_entry(data)

    def write_entry(
        self,
        key: str,
        entry: Entry,
        expires_in: Optional[float] = None,
        compress: Optional[bool] = None,
        compress_threshold: Optional[int] = None,
    ) -> None:
        data = self._serialize_entry(entry, compress=compress, compress_threshold=compress_threshold)
        path = self._get_path(key)
        temp_path = None

        try:
            path.parent.mkdir(exist_ok=True)

            # Atomic write
            fd, temp_name = tempfile.mkstemp(dir=path.parent, suffix=self.TEMP_SUFFIX)
            temp_path = Path(temp_name)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(temp_path, path)

        except OSError as e:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink()
            raise self._unavailable(f"write {key}", e) from e

    def delete_entry(self, key: str) -> bool:
        try:
            self._get_path(key).unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise self._unavailable(f"delete {key}", e) from e

    def clear(self) -> None:
        """Remove every cache file.

        Temp files of in-flight writes are left alone, and files removed
        by another process meanwhile are skipped.
        """
        try:
            for file_path in list(self._entry_files()):
                file_path.unlink(missing_ok=True)
        except OSError as e:
            raise self._unavailable("clear", e) from e

    def size(self) -> int:
        """Get entry count, expired entries included.

        Returns:
            Number of entry files
        """
        try:
            return sum(1 for _ in self._entry_files())
        except OSError as e:
            raise self._unavailable("count entries", e) from e

    def cleanup(self) -> int:
        """Remove expired and undecodable entries from disk.

        Returns:
            Number of files removed
        """
        removed = 0

        try:
            for file_path in list(self._entry_files()):
                try:
                    data = file_path.read_bytes()
                except FileNotFoundError:
                    continue

                try:
                    expired = self._deserialize_entry(data).expired
                except CorruptEntry as e:
                    logger.warning(f"Removing corrupt cache file {file_path.name}: {e}")
                    expired = True

                if expired:
                    file_path.unlink(missing_ok=True)
                    removed += 1

        except OSError as e:
            raise self._unavailable("clean up entries", e) from e

        logger.debug(f"Removed {removed} entries from {self.base_path}")
        return removed

    def __repr__(self) -> str:
        return f"FileStore(path={self.base_path}, namespace={self.namespace!r})"


__all__ = ["FileStore"]
