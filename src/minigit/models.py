"""
Data models for stored objects and tree entries.

These Pydantic models provide type safety and validation for the values that
cross the object store boundary: the decoded object returned by a read, and
the structured entries of a tree payload.
"""
from __future__ import annotations

import stat
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .path_safety import safe_entry_name

HASH_RAW_LEN = 20
HASH_HEX_LEN = 40

# Tree entry modes, stored as the integer value of the on-disk digit string
MODE_TREE = 40000
MODE_FILE = 100644
MODE_EXECUTABLE = 100755


class ObjectKind(str, Enum):
    """Object kinds understood by the store."""
    BLOB = "blob"
    TREE = "tree"


def mode_from_permissions(st_mode: int) -> int:
    """
    Derive a regular-file tree entry mode from filesystem permission bits.

    The regular-file type bit is combined with the permission bits and the
    result is rendered in octal, e.g. 0o644 -> 100644.

    Args:
        st_mode: st_mode as reported by os.stat()

    Returns:
        Entry mode as the integer value of its octal digit string
    """
    return int(format(stat.S_IFREG | (st_mode & 0o777), "o"))


def permissions_from_mode(mode: int) -> int:
    """Inverse of mode_from_permissions(): 100755 -> 0o755."""
    return int(str(mode), 8) & 0o777


class StoredObject(BaseModel):
    """
    An object as decoded from the store.

    `size` is the value declared in the encoded header; decode() guarantees it
    equals len(payload).
    """
    model_config = ConfigDict(frozen=True)

    kind: ObjectKind = Field(..., description="Object kind")
    size: int = Field(..., ge=0, description="Declared payload size in bytes")
    payload: bytes = Field(..., description="Raw object payload")


class TreeEntry(BaseModel):
    """One named reference inside a tree payload."""
    model_config = ConfigDict(frozen=True)

    mode: int = Field(..., ge=0, description="Entry mode, e.g. 100644 or 40000")
    name: str = Field(..., description="Single path segment")
    hash: bytes = Field(..., description="Raw 20-byte object id")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Entry names must be a single safe path segment."""
        return safe_entry_name(v)

    @field_validator("hash")
    @classmethod
    def validate_hash(cls, v: bytes) -> bytes:
        if len(v) != HASH_RAW_LEN:
            raise ValueError(f"hash must be {HASH_RAW_LEN} raw bytes, got {len(v)}")
        return v

    @property
    def hex(self) -> str:
        return self.hash.hex()

    @property
    def is_tree(self) -> bool:
        return self.mode == MODE_TREE

    @property
    def kind(self) -> ObjectKind:
        return ObjectKind.TREE if self.is_tree else ObjectKind.BLOB

    @property
    def sort_key(self) -> bytes:
        """Byte-wise ordering key used when assembling tree payloads."""
        return self.name.encode("utf-8")

    def format_line(self) -> str:
        """Render as `<mode> <kind> <hex>\\t<name>` with a zero-padded mode."""
        return f"{self.mode:06d} {self.kind.value} {self.hex}\t{self.name}"
