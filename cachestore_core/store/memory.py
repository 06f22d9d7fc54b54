"""CacheStore Memory Store - In-Memory Storage Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from cachestore_core.cache.entry import Entry
from cachestore_core.store.base import Store, StoreConfig

logger = logging.getLogger(__name__)

# Named stores share their data across instances in this process
_shared_data: Dict[str, Dict[str, bytes]] = {}
_shared_locks: Dict[str, threading.RLock] = {}
_registry_lock = threading.Lock()


class MemoryStore(Store):
    """In-memory storage backend.

    Keeps serialized entries in a process-local dictionary, so every read
    decodes a fresh Entry and callers never share objects. Native expiry is
    not used; expired entries are removed lazily on read.

    Stores created with the same ``name`` share one dictionary, which is
    how several namespaced stores can sit on the same backend.

    Example:
        store = MemoryStore(StoreConfig(namespace="app"))
        store.write("key", "data", expires_in=60)
        value = store.read("key")
    """

    def __init__(self, config: Optional[StoreConfig] = None, name: Optional[str] = None):
        """Initialize memory store.

        Args:
            config: Store configuration
            name: Share data with other stores of the same name
        """
        super().__init__(config)
        self.name = name

        if name is None:
            self._data: Dict[str, bytes] = {}
            self._lock = threading.RLock()
        else:
            with _registry_lock:
                self._data = _shared_data.setdefault(name, {})
                self._lock = _shared_locks.setdefault(name, threading.RLock())

    def read_entry(self, key: str) -> Optional[Entry]:
        with self._lock:
            data = self._data.get(key)
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
        with self._lock:
            self._data[key] = data

    def delete_entry(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all entries."""
        with self._lock:
            self._data.clear()

    def size(self) -> int:
        """Get raw entry count, expired entries included.

        Returns:
            Number of stored entries
        """
        with self._lock:
            return len(self._data)

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"MemoryStore(namespace={self.namespace!r}, entries={len(self._data)})"


__all__ = ["MemoryStore"]
