"""CacheStore - Pluggable Cache Store.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

A key-value caching layer in front of interchangeable backends with:
- Absolute and relative expiration
- Entry versioning
- Transparent zlib compression above a size threshold
- Key namespacing on shared backends
- Race condition TTL to soften regeneration stampedes

Architecture:
    ┌─────────────────────────────────────────────────────────────────┐
    │                        CacheStore System                        │
    ├─────────────────────────────────────────────────────────────────┤
    │  ┌──────────────────────────────────────────────┐              │
    │  │                    Store                      │   STORE      │
    │  │  read / write / delete / exists / fetch       │   LAYER      │
    │  │  key namespacing, versions, race TTL          │              │
    │  └──────────────────────┬───────────────────────┘              │
    │                         │                                       │
    │  ┌──────────────────────┴───────────────────────┐              │
    │  │   EntryCodec: marker byte + zlib framing      │   PROTOCOL   │
    │  │   Entry: msgpack [value, expires_at, version] │   LAYER      │
    │  └──────────────────────┬───────────────────────┘              │
    │                         │                                       │
    │  ┌──────────────────────┴───────────────────────┐              │
    │  │   ┌────────┐  ┌────────┐  ┌────────┐  ┌──────┐│   STORAGE    │
    │  │   │ Memory │  │  File  │  │ Redis  │  │ Null ││   LAYER      │
    │  │   └────────┘  └────────┘  └────────┘  └──────┘│              │
    │  └──────────────────────────────────────────────┘              │
    └─────────────────────────────────────────────────────────────────┘

Example Usage:
    from cachestore_core import MemoryStore, StoreConfig

    store = MemoryStore(StoreConfig(namespace="app", expires_in=300))
    store.write("greeting", "hello")
    store.read("greeting")

    # Regenerate on miss, serve stale values for 10s after expiry
    html = store.fetch("home", render_home, expires_in=60, race_condition_ttl=10)

    # Backend chosen from settings
    from cachestore_core import create_store

    store = create_store("redis", url="redis://localhost:6379/0", namespace="app")

    # Cache decorator
    @cached(store, expires_in=60)
    def render_profile(user_id: int) -> str:
        return render(fetch_user(user_id))
"""

__version__ = "1.0.0"
__author__ = "BlackRoad OS"

from cachestore_core.errors import (
    CacheStoreError,
    BackendUnavailable,
    CorruptEntry,
    InvalidConfiguration,
)
from cachestore_core.cache.entry import Entry
from cachestore_core.cache.decorator import cached
from cachestore_core.protocol.codec import (
    EntryCodec,
    Marker,
    compress,
    uncompress,
)
from cachestore_core.store.base import (
    Store,
    StoreConfig,
    StoreStats,
)
from cachestore_core.store.memory import MemoryStore
from cachestore_core.store.file import FileStore
from cachestore_core.store.redis import RedisStore, RedisConfig
from cachestore_core.store.null import NullStore
from cachestore_core.store.factory import create_store, register_backend

__all__ = [
    # Errors
    "CacheStoreError",
    "BackendUnavailable",
    "CorruptEntry",
    "InvalidConfiguration",
    # Entries
    "Entry",
    "cached",
    # Protocol
    "EntryCodec",
    "Marker",
    "compress",
    "uncompress",
    # Stores
    "Store",
    "StoreConfig",
    "StoreStats",
    "MemoryStore",
    "FileStore",
    "RedisStore",
    "RedisConfig",
    "NullStore",
    "create_store",
    "register_backend",
]
