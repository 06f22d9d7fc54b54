"""CacheStore Factory - Build Stores from Settings.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Examples:
    from cachestore_core.store.factory import create_store

    store = create_store("memory", namespace="app", expires_in=300)
    store = create_store("file", path="/var/cache/app", compress_threshold=512)
    store = create_store("redis", url="redis://localhost:6379/0", namespace="app")
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Optional, Tuple, Type

from cachestore_core.errors import InvalidConfiguration
from cachestore_core.store.base import Store, StoreConfig
from cachestore_core.store.file import FileStore
from cachestore_core.store.memory import MemoryStore
from cachestore_core.store.null import NullStore
from cachestore_core.store.redis import RedisConfig, RedisStore

logger = logging.getLogger(__name__)

_backends: Dict[str, Tuple[Type[Store], Type[StoreConfig]]] = {
    "memory": (MemoryStore, StoreConfig),
    "file": (FileStore, StoreConfig),
    "redis": (RedisStore, RedisConfig),
    "null": (NullStore, StoreConfig),
}


def register_backend(
    name: str,
    store_class: Type[Store],
    config_class: Type[StoreConfig] = StoreConfig,
) -> None:
    """Register a backend under a name.

    Args:
        name: Backend name used by ``create_store``
        store_class: Store subclass
        config_class: Configuration dataclass accepted by the store
    """
    _backends[name.lower()] = (store_class, config_class)


def available_backends() -> list[str]:
    """List registered backend names."""
    return sorted(_backends)


def create_store(
    backend: str,
    config: Optional[StoreConfig] = None,
    **options: Any,
) -> Store:
    """Create a store by backend name.

    Options named like fields of the backend's config class build the
    config when none is given; the rest are passed to the store
    constructor. ``path`` is accepted as an alias of the file store's
    ``base_path``.

    Args:
        backend: Backend name ("memory", "file", "redis", "null")
        config: Ready-made configuration
        **options: Config fields and backend constructor arguments

    Returns:
        Configured store

    Raises:
        InvalidConfiguration: If the backend is unknown or options are invalid
    """
    try:
        store_class, config_class = _backends[backend.lower()]
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown cache backend: {backend}",
            details={"backend": backend, "available": available_backends()},
        ) from None

    if config is None:
        field_names = {f.name for f in dataclasses.fields(config_class)}
        config_options = {name: options.pop(name) for name in list(options) if name in field_names}
        try:
            config = config_class(**config_options)
        except TypeError as e:
            raise InvalidConfiguration(str(e), details={"backend": backend}) from e
    elif not isinstance(config, config_class):
        raise InvalidConfiguration(
            f"{store_class.__name__} expects a {config_class.__name__}",
            details={"backend": backend, "config": type(config).__name__},
        )

    if "path" in options:
        options["base_path"] = options.pop("path")

    try:
        store = store_class(config=config, **options)
    except TypeError as e:
        raise InvalidConfiguration(
            f"Invalid options for {backend} store: {e}",
            details={"backend": backend, "options": sorted(options)},
        ) from e

    logger.debug(f"Created {store!r}")
    return store


__all__ = ["available_backends", "create_store", "register_backend"]
