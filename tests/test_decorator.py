"""Tests for the cached decorator.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import pytest

from cachestore_core.cache.decorator import MAX_KEY_LENGTH, cached


class TestCached:
    """Tests for cached."""

    def test_caches_result(self, store):
        """Test the function runs once per argument set."""
        calls = []

        @cached(store, expires_in=60)
        def render(user_id):
            calls.append(user_id)
            return f"user {user_id}"

        assert render(1) == "user 1"
        assert render(1) == "user 1"
        assert render(2) == "user 2"
        assert calls == [1, 2]

    def test_default_key(self, store):
        """Test the generated key contains module, name and arguments."""
        @cached(store)
        def render(a, b=None):
            return "x"

        key = render.cache_key(1, b="two")
        assert key == f"{__name__}:TestCached.test_default_key.<locals>.render:a=1:b=two"

    def test_key_ignores_call_style(self, store):
        """Test positional, keyword and defaulted calls share a key."""
        calls = []

        @cached(store)
        def render(a, b=None):
            calls.append((a, b))
            return f"{a}/{b}"

        assert render.cache_key(1, "two") == render.cache_key(a=1, b="two")
        assert render.cache_key(1, b="two") == render.cache_key(b="two", a=1)
        assert render.cache_key(1) == render.cache_key(1, None)
        assert render.cache_key(1).endswith(":a=1:b=None")

        render(1, "two")
        render(a=1, b="two")
        assert calls == [(1, "two")]

    def test_key_variadic_arguments(self, store):
        """Test *args and **kwargs are spelled out in the key."""
        @cached(store, key_prefix="views")
        def render(*parts, **options):
            return "x"

        key = render.cache_key("a", "b", size=2, colour="red")
        assert key == "views:TestCached.test_key_variadic_arguments.<locals>.render:a:b:colour=red:size=2"

    def test_key_rejects_bad_arguments(self, store):
        """Test calls that do not fit the signature fail before caching."""
        @cached(store)
        def render(a):
            return "x"

        with pytest.raises(TypeError):
            render(1, 2)

        assert store.get_stats().writes == 0

    def test_key_prefix_and_builder(self, store):
        """Test custom key construction."""
        @cached(store, key_prefix="views")
        def prefixed(a):
            return "x"

        @cached(store, key_builder=lambda user_id: f"user:{user_id}")
        def built(user_id):
            return "profile"

        assert prefixed.cache_key(1).startswith("views:")
        built(7)
        assert store.read("user:7") == "profile"

    def test_long_keys_hashed(self, store):
        """Test keys over the limit are hashed."""
        @cached(store)
        def render(text):
            return "x"

        key = render.cache_key("a" * 500)
        assert len(key) == 64
        assert len(key) <= MAX_KEY_LENGTH

    def test_invalidate(self, store):
        """Test invalidate removes one cached result."""
        calls = [0]

        @cached(store)
        def render(n):
            calls[0] += 1
            return str(n)

        render(1)
        assert render.invalidate(1)
        assert not render.invalidate(1)
        render(1)
        assert calls[0] == 2

    def test_expiry(self, store, clock):
        """Test results expire like any other entry."""
        calls = [0]

        @cached(store, expires_in=10)
        def render():
            calls[0] += 1
            return "x"

        render()
        clock.advance(11)
        render()
        assert calls[0] == 2

    def test_version(self, store):
        """Test versioned results."""
        @cached(store, version=2, key_builder=lambda: "page")
        def render():
            return "v2"

        store.write("page", "v1", version=1)
        assert render() == "v2"
        assert store.read("page", version=2) == "v2"
