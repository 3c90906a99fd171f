"""
zlib wrapping for on-disk objects.

Loose objects are stored as a single zlib (deflate) stream of the encoded
object. The compression level only affects the stored bytes, never the
object id, which is computed before compression.
"""
from __future__ import annotations

import zlib

from .errors import CorruptStorage

__all__ = ["compress", "decompress"]


def compress(data: bytes, level: int = -1) -> bytes:
    """
    Compress bytes into a zlib stream.

    Args:
        data: Encoded object bytes
        level: zlib level, -1 (library default) or 0-9

    Returns:
        Compressed stream
    """
    return zlib.compress(data, level)


def decompress(data: bytes) -> bytes:
    """
    Decompress a zlib stream.

    Args:
        data: Compressed stream as read from disk

    Returns:
        Decompressed bytes

    Raises:
        CorruptStorage: If the stream has a bad header, fails its checksum,
            or ends before the end-of-stream marker
    """
    decompressor = zlib.decompressobj()
    try:
        out = decompressor.decompress(data)
        out += decompressor.flush()
    except zlib.error as e:
        raise CorruptStorage(f"invalid zlib stream: {e}") from e

    if not decompressor.eof:
        raise CorruptStorage("truncated zlib stream")
    return out
