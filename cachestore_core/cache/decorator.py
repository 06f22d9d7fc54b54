"""CacheStore Decorators - Cache Function Results in a Store.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import functools
import hashlib
import inspect
from typing import TYPE_CHECKING, Callable, Optional, TypeVar

if TYPE_CHECKING:
    from cachestore_core.store.base import Duration, Store

F = TypeVar("F", bound=Callable[..., str])

MAX_KEY_LENGTH = 250


def _signature_key(
    func: Callable,
    key_prefix: Optional[str] = None,
) -> Callable[..., str]:
    """Create the default key function for a cached function.

    Arguments are bound to the function signature with defaults applied, so
    ``render(1)``, ``render(1, b=None)`` and ``render(a=1)`` share a key.
    Keys longer than ``MAX_KEY_LENGTH`` are replaced by their sha256 digest.

    Args:
        func: Function being cached
        key_prefix: Key prefix, defaults to the function module

    Returns:
        Function mapping call arguments to a cache key
    """
    signature = inspect.signature(func)
    prefix = [key_prefix or func.__module__, func.__qualname__]

    def build(*args, **kwargs) -> str:
        bound = signature.bind(*args, **kwargs)
        bound.apply_defaults()

        parts = list(prefix)
        for name, value in bound.arguments.items():
            kind = signature.parameters[name].kind
            if kind is inspect.Parameter.VAR_POSITIONAL:
                parts.extend(str(arg) for arg in value)
            elif kind is inspect.Parameter.VAR_KEYWORD:
                parts.extend(f"{k}={value[k]}" for k in sorted(value))
            else:
                parts.append(f"{name}={value}")

        key = ":".join(parts)
        if len(key) > MAX_KEY_LENGTH:
            key = hashlib.sha256(key.encode()).hexdigest()
        return key

    return build


def cached(
    store: "Store",
    expires_in: Optional["Duration"] = None,
    version: Optional[int] = None,
    race_condition_ttl: Optional["Duration"] = None,
    key_prefix: Optional[str] = None,
    key_builder: Optional[Callable[..., str]] = None,
) -> Callable[[F], F]:
    """Decorator caching a string-returning function in a store.

    Calls go through ``store.fetch``, so expiry, versioning and the race
    condition TTL behave exactly as for direct fetches.

    Args:
        store: Store holding the results
        expires_in: Relative expiry for cached results
        version: Entry version
        race_condition_ttl: Stale-serving window after expiry
        key_prefix: Key prefix, defaults to the function module
        key_builder: Custom key function called with the call arguments

    Returns:
        Decorated function

    Example:
        @cached(store, expires_in=300)
        def render_profile(user_id: int) -> str:
            return template.render(db.get_user(user_id))

        render_profile.invalidate(42)
    """
    def decorator(func: F) -> F:
        cache_key = key_builder or _signature_key(func, key_prefix)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            return store.fetch(
                cache_key(*args, **kwargs),
                lambda: func(*args, **kwargs),
                expires_in=expires_in,
                version=version,
                race_condition_ttl=race_condition_ttl,
            )

        def invalidate(*args, **kwargs) -> bool:
            """Delete the cached result for arguments."""
            return store.delete(cache_key(*args, **kwargs))

        wrapper.cache_key = cache_key
        wrapper.invalidate = invalidate
        wrapper.store = store

        return wrapper  # type: ignore

    return decorator


__all__ = ["cached"]
