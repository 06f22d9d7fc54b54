"""CacheStore Codec - Entry Framing and Compression.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Every value handed to a backend is framed as::

    marker_byte ++ payload

where the marker is 0x00 for a plain packed entry and 0x01 for a
zlib-compressed one.
"""

from __future__ import annotations

import logging
import zlib
from enum import IntEnum
from typing import Optional

from cachestore_core.cache.entry import Entry
from cachestore_core.errors import CorruptEntry

logger = logging.getLogger(__name__)

DEFAULT_COMPRESS_THRESHOLD = 1024


class Marker(IntEnum):
    """Leading byte of a serialized entry."""

    UNCOMPRESSED = 0x00
    COMPRESSED = 0x01


def compress(data: bytes) -> bytes:
    """Deflate bytes with zlib.

    Args:
        data: Raw bytes

    Returns:
        Compressed bytes
    """
    return zlib.compress(data)


def uncompress(data: bytes) -> bytes:
    """Inflate bytes produced by ``compress``.

    Args:
        data: Compressed bytes

    Returns:
        Original bytes

    Raises:
        CorruptEntry: If the data is not a valid zlib stream
    """
    try:
        return zlib.decompress(data)
    except zlib.error as e:
        raise CorruptEntry(f"Unable to decompress entry: {e}", details={"size": len(data)}) from e


# EntryCodec.serialize takes a "compress" argument that shadows the function
_deflate = compress


class EntryCodec:
    """Turns entries into framed bytes and back.

    Holds the compression defaults of one store; both can be overridden
    per call.

    Example:
        codec = EntryCodec(compress=True, compress_threshold=512)
        data = codec.serialize(Entry("hello"))
        entry = codec.deserialize(data)
    """

    def __init__(self, compress: bool = True, compress_threshold: int = DEFAULT_COMPRESS_THRESHOLD):
        """Initialize codec.

        Args:
            compress: Compress large entries by default
            compress_threshold: Minimum packed size in bytes for compression
        """
        self.compress = compress
        self.compress_threshold = compress_threshold

    def should_compress(
        self,
        packed: bytes,
        compress: Optional[bool] = None,
        compress_threshold: Optional[int] = None,
    ) -> bool:
        """Decide whether packed bytes get compressed."""
        enabled = self.compress if compress is None else compress
        threshold = self.compress_threshold if compress_threshold is None else compress_threshold
        return enabled and len(packed) >= threshold

    def serialize(
        self,
        entry: Entry,
        compress: Optional[bool] = None,
        compress_threshold: Optional[int] = None,
    ) -> bytes:
        """Serialize an entry into framed bytes.

        Args:
            entry: Entry to serialize
            compress: Per-call compression override
            compress_threshold: Per-call threshold override

        Returns:
            Marker byte followed by the (possibly compressed) packed entry
        """
        packed = entry.pack()

        if self.should_compress(packed, compress, compress_threshold):
            return bytes([Marker.COMPRESSED]) + _deflate(packed)

        return bytes([Marker.UNCOMPRESSED]) + packed

    def deserialize(self, data: Optional[bytes]) -> Optional[Entry]:
        """Deserialize framed bytes.

        Args:
            data: Serialized bytes or None

        Returns:
            Entry, or None when data is None

        Raises:
            CorruptEntry: If the marker is missing or unknown, or the payload
                cannot be decoded
        """
        if data is None:
            return None

        if len(data) == 0:
            raise CorruptEntry("Serialized entry is missing its marker byte")

        marker, payload = data[0], data[1:]

        if marker == Marker.COMPRESSED:
            payload = uncompress(payload)
        elif marker != Marker.UNCOMPRESSED:
            raise CorruptEntry(f"Unknown entry marker byte: {marker:#04x}", details={"marker": marker})

        return Entry.unpack(payload)


__all__ = [
    "DEFAULT_COMPRESS_THRESHOLD",
    "EntryCodec",
    "Marker",
    "compress",
    "uncompress",
]
