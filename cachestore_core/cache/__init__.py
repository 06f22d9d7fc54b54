"""Cache module - Entries and caching helpers.

This module provides the cache entry value object and the ``cached``
decorator.
"""

from cachestore_core.cache.entry import Entry
from cachestore_core.cache.decorator import cached

__all__ = [
    "Entry",
    "cached",
]
