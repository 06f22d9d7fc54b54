"""Protocol module - Entry framing and compression."""

from cachestore_core.protocol.codec import (
    DEFAULT_COMPRESS_THRESHOLD,
    EntryCodec,
    Marker,
    compress,
    uncompress,
)

__all__ = [
    "DEFAULT_COMPRESS_THRESHOLD",
    "EntryCodec",
    "Marker",
    "compress",
    "uncompress",
]
