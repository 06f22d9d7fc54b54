"""Tests for store construction and the null store.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import pytest

from cachestore_core.errors import InvalidConfiguration
from cachestore_core.store.base import StoreConfig
from cachestore_core.store.factory import available_backends, create_store, register_backend
from cachestore_core.store.file import FileStore
from cachestore_core.store.memory import MemoryStore
from cachestore_core.store.null import NullStore
from cachestore_core.store.redis import RedisConfig, RedisStore


class TestCreateStore:
    """Tests for create_store."""

    def test_memory(self):
        """Test config fields are collected from options."""
        store = create_store("memory", namespace="app", expires_in=30, compress=False)

        assert isinstance(store, MemoryStore)
        assert store.namespace == "app"
        assert store.expires_in == 30.0
        assert store.codec.compress is False

    def test_file_with_path_alias(self, tmp_path):
        """Test the file store accepts path."""
        store = create_store("file", path=tmp_path, compress_threshold=16)

        assert isinstance(store, FileStore)
        assert store.base_path == tmp_path
        assert store.config.compress_threshold == 16

    def test_redis_config(self):
        """Test redis options build a RedisConfig."""
        store = create_store("redis", url="redis://cache.local:6379/3", namespace="app")

        assert isinstance(store, RedisStore)
        assert isinstance(store.config, RedisConfig)
        assert store.config.url == "redis://cache.local:6379/3"

    def test_explicit_config(self):
        """Test a ready-made config is used as is."""
        config = StoreConfig(namespace="given")
        store = create_store("MEMORY", config=config)

        assert store.config is config

    def test_wrong_config_type(self):
        """Test a plain StoreConfig is rejected for redis."""
        with pytest.raises(InvalidConfiguration):
            create_store("redis", config=StoreConfig())

    def test_unknown_backend(self):
        """Test unknown backend names."""
        with pytest.raises(InvalidConfiguration) as exc_info:
            create_store("memcached")

        assert exc_info.value.details["available"] == available_backends()

    def test_invalid_option_value(self):
        """Test config validation errors propagate."""
        with pytest.raises(InvalidConfiguration):
            create_store("memory", compress_threshold=-10)

    def test_unknown_option(self):
        """Test options the backend does not accept."""
        with pytest.raises(InvalidConfiguration):
            create_store("memory", colour="blue")

    def test_register_backend(self):
        """Test custom backends can be registered."""
        class QuietStore(NullStore):
            pass

        register_backend("quiet", QuietStore)

        assert "quiet" in available_backends()
        assert isinstance(create_store("quiet"), QuietStore)


class TestNullStore:
    """Tests for NullStore."""

    def test_never_stores(self):
        """Test writes are dropped and reads miss."""
        store = NullStore()
        store.write("key", "value")

        assert store.read("key") is None
        assert not store.exists("key")
        assert not store.delete("key")
        store.clear()

    def test_fetch_always_generates(self):
        """Test fetch calls the generator every time."""
        store = NullStore()
        calls = [0]

        def generate():
            calls[0] += 1
            return "value"

        assert store.fetch("key", generate) == "value"
        assert store.fetch("key", generate) == "value"
        assert calls[0] == 2
