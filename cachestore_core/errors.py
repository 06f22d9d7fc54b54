"""CacheStore Errors - Exception Hierarchy.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

All errors raised by the store layer derive from CacheStoreError so callers
can catch a single base class.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CacheStoreError(Exception):
    """Base exception for all cache store errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary.

        Returns:
            Dictionary with error name, message and details
        """
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class BackendUnavailable(CacheStoreError):
    """The underlying storage medium could not be reached, read or written."""


class CorruptEntry(CacheStoreError):
    """Stored bytes could not be decoded into an entry."""


class InvalidConfiguration(CacheStoreError):
    """Store options are structurally invalid."""


__all__ = [
    "CacheStoreError",
    "BackendUnavailable",
    "CorruptEntry",
    "InvalidConfiguration",
]
