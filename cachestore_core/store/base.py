"""CacheStore Base Store - Abstract Store Contract.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

The Store class implements the public cache operations (read, write,
delete, exists, fetch) once, on top of four primitives that each backend
provides: read_entry, write_entry, delete_entry and clear.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Union

from cachestore_core.cache.entry import VERSION_MAX, VERSION_MIN, Entry
from cachestore_core.errors import CorruptEntry, InvalidConfiguration
from cachestore_core.protocol.codec import DEFAULT_COMPRESS_THRESHOLD, EntryCodec

logger = logging.getLogger(__name__)

Duration = Union[int, float, timedelta]
Timestamp = Union[int, float, datetime]


def to_seconds(duration: Optional[Duration]) -> Optional[float]:
    """Convert a relative duration to float seconds.

    Args:
        duration: Seconds or timedelta

    Returns:
        Seconds, or None when duration is None
    """
    if duration is None:
        return None
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return float(duration)


def to_timestamp(moment: Timestamp) -> float:
    """Convert an absolute time to epoch seconds."""
    if isinstance(moment, datetime):
        return moment.timestamp()
    return float(moment)


@dataclass
class StoreConfig:
    """Store configuration.

    These are per-store defaults; every operation may override them.

    Attributes:
        namespace: Key prefix isolating this store on a shared backend
        expires_in: Default relative expiry (seconds or timedelta)
        version: Default entry version
        compress: Compress entries above the threshold
        compress_threshold: Minimum packed size in bytes for compression
    """

    namespace: Optional[str] = None
    expires_in: Optional[Duration] = None
    version: Optional[int] = None
    compress: bool = True
    compress_threshold: int = DEFAULT_COMPRESS_THRESHOLD

    def __post_init__(self):
        """Validate and normalize options."""
        if self.namespace is not None and not isinstance(self.namespace, str):
            raise InvalidConfiguration(
                "namespace must be a string",
                details={"namespace": repr(self.namespace)},
            )

        if self.expires_in is not None:
            if isinstance(self.expires_in, bool) or not isinstance(self.expires_in, (int, float, timedelta)):
                raise InvalidConfiguration(
                    "expires_in must be a number of seconds or a timedelta",
                    details={"expires_in": repr(self.expires_in)},
                )
            self.expires_in = to_seconds(self.expires_in)
            if self.expires_in < 0:
                raise InvalidConfiguration(
                    "expires_in must not be negative",
                    details={"expires_in": self.expires_in},
                )

        if self.version is not None:
            if isinstance(self.version, bool) or not isinstance(self.version, int):
                raise InvalidConfiguration("version must be an integer", details={"version": repr(self.version)})
            if not VERSION_MIN <= self.version <= VERSION_MAX:
                raise InvalidConfiguration("version must fit in 32 bits", details={"version": self.version})

        if not isinstance(self.compress, bool):
            raise InvalidConfiguration("compress must be a boolean", details={"compress": repr(self.compress)})

        if isinstance(self.compress_threshold, bool) or not isinstance(self.compress_threshold, int):
            raise InvalidConfiguration(
                "compress_threshold must be an integer",
                details={"compress_threshold": repr(self.compress_threshold)},
            )
        if self.compress_threshold < 0:
            raise InvalidConfiguration(
                "compress_threshold must not be negative",
                details={"compress_threshold": self.compress_threshold},
            )


@dataclass
class StoreStats:
    """Store statistics.

    Attributes:
        reads: Number of lookups
        writes: Number of write operations
        deletes: Number of entries deleted
        hits: Lookups that returned a value
        misses: Lookups that returned nothing
        errors: Number of errors
    """

    reads: int = 0
    writes: int = 0
    deletes: int = 0
    hits: int = 0
    misses: int = 0
    errors: int = 0
    last_error: Optional[str] = None
    last_error_at: Optional[datetime] = None

    @property
    def hit_rate(self) -> float:
        """Calculate hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def record_error(self, error: str) -> None:
        """Record an error."""
        self.errors += 1
        self.last_error = error
        self.last_error_at = datetime.now()


class Store(ABC):
    """Abstract cache store.

    Backends implement the four primitives below; everything else is shared:

    - MemoryStore: In-process dictionary
    - FileStore: One file per entry
    - RedisStore: Redis server
    - NullStore: Stores nothing

    ``fetch`` does not lock around regeneration. Two callers that miss at
    the same time both run their generator and both write. Pass
    ``race_condition_ttl`` to let callers reuse a just-expired value for a
    short while instead of all regenerating at once.

    Example:
        store = MemoryStore(StoreConfig(namespace="app", expires_in=300))
        store.write("greeting", "hello")
        store.read("greeting")
        store.fetch("report", build_report, race_condition_ttl=10)
    """

    def __init__(self, config: Optional[StoreConfig] = None):
        """Initialize store.

        Args:
            config: Store configuration
        """
        self.config = config or StoreConfig()
        self.codec = EntryCodec(
            compress=self.config.compress,
            compress_threshold=self.config.compress_threshold,
        )
        self._stats = StoreStats()

    @property
    def namespace(self) -> Optional[str]:
        return self.config.namespace

    @property
    def version(self) -> Optional[int]:
        return self.config.version

    @property
    def expires_in(self) -> Optional[float]:
        return self.config.expires_in

    # Backend primitives

    @abstractmethod
    def read_entry(self, key: str) -> Optional[Entry]:
        """Read the raw entry stored under a normalized key.

        No expiry or version checks are applied here.

        Args:
            key: Normalized key

        Returns:
            Entry or None

        Raises:
            CorruptEntry: If the stored bytes cannot be decoded
            BackendUnavailable: If the backend cannot be reached
        """

    @abstractmethod
    def write_entry(
        self,
        key: str,
        entry: Entry,
        expires_in: Optional[float] = None,
        compress: Optional[bool] = None,
        compress_threshold: Optional[int] = None,
    ) -> None:
        """Store an entry under a normalized key.

        Backends may use ``expires_in`` for native expiry or ignore it;
        expiry is also enforced from ``entry.expires_at`` on read.

        Args:
            key: Normalized key
            entry: Entry to store
            expires_in: Relative expiry in seconds
            compress: Per-call compression override
            compress_threshold: Per-call threshold override
        """

    @abstractmethod
    def delete_entry(self, key: str) -> bool:
        """Delete the entry stored under a normalized key.

        Returns:
            True if an entry was deleted
        """

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry."""

    # Public operations

    def delete(self, key: Any) -> bool:
        """Delete an entry.

        Args:
            key: Cache key

        Returns:
            True if an entry existed
        """
        deleted = self.delete_entry(self.normalize_key(key))
        if deleted:
            self._stats.deletes += 1
        return deleted

    def exists(self, key: Any, version: Optional[int] = None) -> bool:
        """Check whether a usable entry exists.

        Expired entries are reported as missing but left in place.

        Args:
            key: Cache key
            version: Requested version, defaults to the store version

        Returns:
            True if an unexpired, version-matching entry exists
        """
        entry = self._load_entry(self.normalize_key(key))
        return entry is not None and not entry.expired and not entry.mismatched(self._effective_version(version))

    def read(self, key: Any, version: Optional[int] = None) -> Optional[str]:
        """Read a value.

        Expired entries are deleted as they are found. A version mismatch
        returns None but keeps the entry.

        Args:
            key: Cache key
            version: Requested version, defaults to the store version

        Returns:
            Cached value or None
        """
        normalized_key = self.normalize_key(key)
        entry = self._load_entry(normalized_key)
        self._stats.reads += 1

        if entry is None:
            self._stats.misses += 1
            return None

        if entry.expired:
            logger.debug(f"Evicting expired entry {normalized_key}")
            self.delete_entry(normalized_key)
            self._stats.misses += 1
            return None

        if entry.mismatched(self._effective_version(version)):
            self._stats.misses += 1
            return None

        self._stats.hits += 1
        return entry.value

    def write(
        self,
        key: Any,
        value: str,
        expires_at: Optional[Timestamp] = None,
        expires_in: Optional[Duration] = None,
        version: Optional[int] = None,
        compress: Optional[bool] = None,
        compress_threshold: Optional[int] = None,
    ) -> None:
        """Write a value.

        Args:
            key: Cache key
            value: Value to cache
            expires_at: Absolute expiry (epoch seconds or datetime)
            expires_in: Relative expiry (seconds or timedelta)
            version: Entry version, defaults to the store version
            compress: Per-call compression override
            compress_threshold: Per-call threshold override
        """
        if expires_at is not None:
            effective_expires_in = to_timestamp(expires_at) - time.time()
        elif expires_in is not None:
            effective_expires_in = to_seconds(expires_in)
        else:
            effective_expires_in = self.expires_in

        entry = Entry.build(
            value,
            expires_in=effective_expires_in,
            version=self._effective_version(version),
        )

        self.write_entry(
            self.normalize_key(key),
            entry,
            expires_in=effective_expires_in,
            compress=compress,
            compress_threshold=compress_threshold,
        )
        self._stats.writes += 1

    def fetch(
        self,
        key: Any,
        generator: Callable[[], str],
        expires_at: Optional[Timestamp] = None,
        expires_in: Optional[Duration] = None,
        version: Optional[int] = None,
        force: bool = False,
        race_condition_ttl: Optional[Duration] = None,
        compress: Optional[bool] = None,
        compress_threshold: Optional[int] = None,
    ) -> str:
        """Return the cached value, or generate, write and return it.

        Args:
            key: Cache key
            generator: Called without arguments to produce a missing value
            expires_at: Absolute expiry for a generated value
            expires_in: Relative expiry for a generated value
            version: Requested version, also used for the written entry
            force: Skip the lookup and always regenerate
            race_condition_ttl: Window after expiry during which the stale
                value keeps being served while its expiry is pushed back
            compress: Per-call compression override
            compress_threshold: Per-call threshold override

        Returns:
            Cached or generated value
        """
        normalized_key = self.normalize_key(key)
        entry = None

        if not force:
            entry = self._process_entry_expiry(
                self._load_entry(normalized_key),
                normalized_key,
                to_seconds(race_condition_ttl),
            )
            if entry is not None and entry.mismatched(self._effective_version(version)):
                entry = None
            self._stats.reads += 1

        if entry is not None:
            self._stats.hits += 1
            return entry.value

        if not force:
            self._stats.misses += 1

        logger.debug(f"Generating value for {normalized_key}")
        value = generator()

        self.write(
            key,
            value,
            expires_at=expires_at,
            expires_in=expires_in,
            version=version,
            compress=compress,
            compress_threshold=compress_threshold,
        )

        return value

    def normalize_key(self, key: Any) -> str:
        """Apply the namespace prefix to a key.

        Args:
            key: Raw key, converted with str()

        Returns:
            "{namespace}:{key}" or the key itself
        """
        key = str(key)
        return f"{self.namespace}:{key}" if self.namespace else key

    def get_stats(self) -> StoreStats:
        """Get store statistics.

        Returns:
            StoreStats instance
        """
        return self._stats

    def reset_stats(self) -> None:
        """Reset statistics."""
        self._stats = StoreStats()

    # Helpers for backends

    def _serialize_entry(
        self,
        entry: Entry,
        compress: Optional[bool] = None,
        compress_threshold: Optional[int] = None,
    ) -> bytes:
        return self.codec.serialize(entry, compress=compress, compress_threshold=compress_threshold)

    def _deserialize_entry(self, data: Optional[bytes]) -> Optional[Entry]:
        return self.codec.deserialize(data)

    def _effective_version(self, version: Optional[int]) -> Optional[int]:
        return self.version if version is None else version

    def _load_entry(self, key: str) -> Optional[Entry]:
        """Read an entry, treating undecodable data as a miss."""
        try:
            return self.read_entry(key)
        except CorruptEntry as e:
            logger.warning(f"Ignoring corrupt cache entry {key}: {e}")
            self._stats.record_error(str(e))
            return None

    def _process_entry_expiry(
        self,
        entry: Optional[Entry],
        key: str,
        race_condition_ttl: Optional[float],
    ) -> Optional[Entry]:
        """Apply expiry rules for fetch.

        A freshly expired entry within the race condition window is written
        back with its expiry pushed forward and returned. Other expired
        entries are deleted.
        """
        if entry is None or entry.expires_at is None or not entry.expired:
            return entry

        now = time.time()

        if race_condition_ttl is not None and now - entry.expires_at <= race_condition_ttl:
            extended = entry.with_expires_at(now + race_condition_ttl)
            logger.debug(f"Serving stale entry {key} for another {race_condition_ttl}s")
            self.write_entry(key, extended, expires_in=race_condition_ttl * 2)
            return extended

        logger.debug(f"Evicting expired entry {key}")
        self.delete_entry(key)
        return None

    def __contains__(self, key: Any) -> bool:
        """Check if key exists."""
        return self.exists(key)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(namespace={self.namespace!r})"


__all__ = [
    "Duration",
    "Store",
    "StoreConfig",
    "StoreStats",
    "Timestamp",
    "to_seconds",
    "to_timestamp",
]
