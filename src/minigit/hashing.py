"""
Content hashing for stored objects.

An object id is the SHA-1 digest of the object's full encoded byte stream
(type tag, size header, and payload). Ids cross the public API as 40-char
lowercase hex strings; the raw 20-byte form only appears inside tree payloads.
"""
from __future__ import annotations

import hashlib
import re

from .models import HASH_HEX_LEN, HASH_RAW_LEN

__all__ = ["hash_bytes", "hash_hex", "to_hex", "from_hex", "is_valid_hex", "validate_hex"]

_HEX_RE = re.compile(r"[0-9a-f]{40}")


def hash_bytes(encoded: bytes) -> bytes:
    """Return the raw 20-byte SHA-1 digest of an encoded object."""
    return hashlib.sha1(encoded).digest()


def hash_hex(encoded: bytes) -> str:
    """Return the 40-char hex SHA-1 digest of an encoded object."""
    return hashlib.sha1(encoded).hexdigest()


def is_valid_hex(value: str) -> bool:
    """Check that value is exactly 40 lowercase hex characters."""
    return isinstance(value, str) and _HEX_RE.fullmatch(value) is not None


def validate_hex(value: str) -> str:
    """
    Validate an object id in hex form.

    Args:
        value: Candidate object id

    Returns:
        The unchanged value

    Raises:
        ValueError: If value is not 40 lowercase hex characters
    """
    if not is_valid_hex(value):
        raise ValueError(f"object id must be {HASH_HEX_LEN} lowercase hex chars, got {value!r}")
    return value


def to_hex(raw: bytes) -> str:
    if len(raw) != HASH_RAW_LEN:
        raise ValueError(f"raw object id must be {HASH_RAW_LEN} bytes, got {len(raw)}")
    return raw.hex()


def from_hex(value: str) -> bytes:
    return bytes.fromhex(validate_hex(value))
