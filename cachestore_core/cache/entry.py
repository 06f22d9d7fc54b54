"""CacheStore Entry - Cached Value with Expiry and Version.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass
from typing import Optional

import msgpack

from cachestore_core.errors import CorruptEntry

VERSION_MIN = -(2 ** 31)
VERSION_MAX = 2 ** 31 - 1


def _is_version(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Entry:
    """A cached payload with its expiry and version metadata.

    Entries only live for the duration of one store operation: they are
    built when writing and decoded again on every read. They are frozen, so
    changing the expiry produces a new entry (see ``with_expires_at``).

    Attributes:
        value: Raw string payload, opaque to the store
        expires_at: Absolute expiry as epoch seconds, None for never
        version: Optional version tag
    """

    value: str
    expires_at: Optional[float] = None
    version: Optional[int] = None

    def __post_init__(self):
        """Validate field types."""
        if not isinstance(self.value, str):
            raise TypeError(f"Entry value must be a str, got {type(self.value).__name__}")

        if self.expires_at is not None:
            object.__setattr__(self, "expires_at", float(self.expires_at))

        if self.version is not None:
            if not _is_version(self.version):
                raise TypeError(f"Entry version must be an int, got {type(self.version).__name__}")
            if not VERSION_MIN <= self.version <= VERSION_MAX:
                raise ValueError(f"Entry version out of 32-bit range: {self.version}")

    @classmethod
    def build(
        cls,
        value: str,
        expires_in: Optional[float] = None,
        version: Optional[int] = None,
    ) -> "Entry":
        """Create an entry expiring ``expires_in`` seconds from now.

        Args:
            value: Payload
            expires_in: Relative expiry in seconds, None for never
            version: Version tag

        Returns:
            Entry instance
        """
        expires_at = None if expires_in is None else time.time() + expires_in
        return cls(value=value, expires_at=expires_at, version=version)

    @property
    def expired(self) -> bool:
        """Check if the entry is past its expiry time."""
        if self.expires_at is None:
            return False
        return self.expires_at < time.time()

    def mismatched(self, version: Optional[int]) -> bool:
        """Check the entry against a requested version.

        A missing version on either side never counts as a mismatch.

        Args:
            version: Requested version

        Returns:
            True if both versions are set and differ
        """
        return self.version is not None and version is not None and self.version != version

    def with_expires_at(self, expires_at: Optional[float]) -> "Entry":
        """Return a copy of this entry with a different expiry."""
        return dataclasses.replace(self, expires_at=expires_at)

    def pack(self) -> bytes:
        """Serialize to the compact binary layout.

        The layout is a msgpack array of ``[value, expires_at, version]``
        where absent fields are encoded as nil.

        Returns:
            Packed bytes
        """
        return msgpack.packb([self.value, self.expires_at, self.version], use_bin_type=True)

    @classmethod
    def unpack(cls, data: bytes) -> "Entry":
        """Deserialize packed bytes.

        Args:
            data: Bytes produced by ``pack``

        Returns:
            Entry instance

        Raises:
            CorruptEntry: If the layout is malformed
        """
        try:
            fields = msgpack.unpackb(data, raw=False, use_list=True)
        except (msgpack.exceptions.UnpackException, ValueError, TypeError) as e:
            raise CorruptEntry(f"Unable to unpack entry: {e}", details={"size": len(data)}) from e

        if not isinstance(fields, list) or len(fields) != 3:
            raise CorruptEntry("Packed entry must be a 3-field array", details={"size": len(data)})

        value, expires_at, version = fields

        if not isinstance(value, str):
            raise CorruptEntry("Packed entry value is not a string")
        if expires_at is not None and (
            not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool)
        ):
            raise CorruptEntry("Packed entry expiry is not a number")
        if version is not None and not (_is_version(version) and VERSION_MIN <= version <= VERSION_MAX):
            raise CorruptEntry("Packed entry version is not a 32-bit integer")

        return cls(value=value, expires_at=expires_at, version=version)

    def __repr__(self) -> str:
        return f"Entry(expires_at={self.expires_at!r}, version={self.version!r}, size={len(self.value)})"


__all__ = ["Entry"]
