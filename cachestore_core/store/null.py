"""CacheStore Null Store - No-Op Storage Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Optional

from cachestore_core.cache.entry import Entry
from cachestore_core.store.base import Store


class NullStore(Store):
    """Store that keeps nothing.

    Every read misses and ``fetch`` always calls its generator. Useful to
    turn caching off without touching calling code.
    """

    def read_entry(self, key: str) -> Optional[Entry]:
        return None

    def write_entry(
        self,
        key: str,
        entry: Entry,
        expires_in: Optional[float] = None,
        compress: Optional[bool] = None,
        compress_threshold: Optional[int] = None,
    ) -> None:
        pass

    def delete_entry(self, key: str) -> bool:
        return False

    def clear(self) -> None:
        pass


__all__ = ["NullStore"]
