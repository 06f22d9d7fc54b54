"""CacheStore Redis Store - Redis Storage Backend.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

import redis

from cachestore_core.cache.entry import Entry
from cachestore_core.errors import BackendUnavailable, InvalidConfiguration
from cachestore_core.store.base import Store, StoreConfig

logger = logging.getLogger(__name__)

# SCAN MATCH glob metacharacters
_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


@dataclass
class RedisConfig(StoreConfig):
    """Redis-specific configuration.

    Attributes:
        url: Redis URL, takes precedence over host/port/db/password
        host: Redis host
        port: Redis port
        db: Redis database number
        password: Redis password
        socket_timeout: Socket timeout
        socket_connect_timeout: Connection timeout
        max_connections: Connection pool size
        scan_count: Batch size hint for SCAN when clearing a namespace
    """

    url: Optional[str] = None
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    max_connections: int = 10
    scan_count: int = 100


class RedisStore(Store):
    """Redis storage backend.

    Entries are stored as framed bytes under their normalized key. Positive
    relative expirations are mirrored as native Redis TTLs so Redis drops
    dead keys on its own; the entry expiry is still checked on read.

    Example:
        store = RedisStore(RedisConfig(url="redis://cache.local:6379/0", namespace="app"))
        store.write("key", "data", expires_in=60)
        value = store.read("key")
    """

    def __init__(self, config: Optional[RedisConfig] = None, client: Optional[Any] = None):
        """Initialize Redis store.

        Args:
            config: Redis configuration
            client: Pre-built Redis client, used as is

        Raises:
            InvalidConfiguration: If config is not a RedisConfig
        """
        if config is not None and not isinstance(config, RedisConfig):
            raise InvalidConfiguration(
                "RedisStore expects a RedisConfig",
                details={"config": type(config).__name__},
            )
        super().__init__(config or RedisConfig())
        self.config: RedisConfig
        self._client = client
        self._pool: Optional[redis.ConnectionPool] = None

    def _ensure_connected(self) -> Any:
        """Ensure Redis connection exists.

        Returns:
            Redis client

        Raises:
            BackendUnavailable: If Redis cannot be reached
        """
        if self._client is not None:
            return self._client

        try:
            pool_options = dict(
                socket_timeout=self.config.socket_timeout,
                socket_connect_timeout=self.config.socket_connect_timeout,
                max_connections=self.config.max_connections,
                decode_responses=False,  # Entries are raw bytes
            )
            if self.config.url:
                self._pool = redis.ConnectionPool.from_url(self.config.url, **pool_options)
            else:
                self._pool = redis.ConnectionPool(
                    host=self.config.host,
                    port=self.config.port,
                    db=self.config.db,
                    password=self.config.password,
                    **pool_options,
                )

            client = redis.Redis(connection_pool=self._pool)
            client.ping()

        except redis.exceptions.RedisError as e:
            self.close()
            raise self._unavailable("connect", e) from e

        logger.info(f"Connected to Redis at {self._location()}")
        self._client = client
        return client

    def _location(self) -> str:
        return self.config.url or f"{self.config.host}:{self.config.port}/{self.config.db}"

    def _unavailable(self, action: str, error: Exception) -> BackendUnavailable:
        logger.error(f"Redis {action} error: {error}")
        self._stats.record_error(str(error))
        return BackendUnavailable(
            f"Redis store unable to {action}: {error}",
            details={"location": self._location()},
        )

    def read_entry(self, key: str) -> Optional[Entry]:
        try:
            data = self._ensure_connected().get(key)
        except redis.exceptions.RedisError as e:
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

        try:
            client = self._ensure_connected()

            # Redis rejects non-positive TTLs
            if expires_in is not None and expires_in > 0:
                client.set(key, data, px=max(1, int(expires_in * 1000)))
            else:
                client.set(key, data)

        except redis.exceptions.RedisError as e:
            raise self._unavailable(f"write {key}", e) from e

    def delete_entry(self, key: str) -> bool:
        try:
            return self._ensure_connected().delete(key) > 0
        except redis.exceptions.RedisError as e:
            raise self._unavailable(f"delete {key}", e) from e

    def clear(self) -> None:
        """Clear the namespace, or the whole database when there is none."""
        try:
            client = self._ensure_connected()

            if not self.namespace:
                client.flushdb()
                return

            batch: List[Any] = []
            for key in client.scan_iter(match=self._namespace_pattern(), count=self.config.scan_count):
                batch.append(key)
                if len(batch) >= self.config.scan_count:
                    client.delete(*batch)
                    batch = []
            if batch:
                client.delete(*batch)

        except redis.exceptions.RedisError as e:
            raise self._unavailable("clear", e) from e

    def _namespace_pattern(self) -> str:
        """SCAN pattern matching exactly the keys of this namespace."""
        return _GLOB_SPECIAL.sub(r"\\\1", self.namespace) + ":*"

    def close(self) -> None:
        """Close Redis connection."""
        if self._pool is not None:
            self._pool.disconnect()
            self._pool = None
            self._client = None

    def __repr__(self) -> str:
        return f"RedisStore(location={self._location()}, namespace={self.namespace!r})"


__all__ = ["RedisStore", "RedisConfig"]
