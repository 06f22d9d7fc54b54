"""Store module - Store contract and storage backends."""

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
