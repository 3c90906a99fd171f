"""
Byte-level encoding of stored objects.

Every object shares the same framing:

    <type> <size>\\0<payload>

where <type> is the ASCII tag ("blob" or "tree") and <size> the decimal
payload length. A tree payload is a concatenation of entries:

    <mode> <name>\\0<20 raw hash bytes>

sorted by name (byte-wise) so that identical directories always encode to
identical bytes. Parsing is cursor-based over the immutable input buffer.
"""
from __future__ import annotations

from typing import Iterable, List, Tuple, Union

from pydantic import ValidationError

from .errors import MalformedObject, MalformedTreeEntry
from .models import HASH_RAW_LEN, ObjectKind, TreeEntry

__all__ = [
    "encode_header",
    "encode_object",
    "decode",
    "encode_tree_entry",
    "encode_tree",
    "decode_tree_entries",
]


def _kind(kind: Union[ObjectKind, str]) -> ObjectKind:
    return kind if isinstance(kind, ObjectKind) else ObjectKind(kind)


def encode_header(kind: Union[ObjectKind, str], payload_length: int) -> bytes:
    """
    Encode the object header.

    Args:
        kind: Object kind or its literal tag
        payload_length: Payload length in bytes

    Returns:
        b"<kind> <payload_length>\\0"

    Raises:
        ValueError: If kind is unknown or payload_length is negative
    """
    if payload_length < 0:
        raise ValueError(f"payload_length must be non-negative, got {payload_length}")
    return f"{_kind(kind).value} {payload_length}\0".encode("ascii")


def encode_object(kind: Union[ObjectKind, str], payload: bytes) -> bytes:
    """Encode a full object: header followed by payload."""
    return encode_header(kind, len(payload)) + payload


def decode(raw: bytes) -> Tuple[ObjectKind, int, bytes]:
    """
    Decode an encoded object into (kind, size, payload).

    Args:
        raw: Decompressed object bytes

    Returns:
        Tuple of object kind, declared size, and payload

    Raises:
        MalformedObject: If a delimiter is missing, the type tag is unknown,
            the size is not a non-negative decimal integer, or the size does
            not match the payload length
    """
    space = raw.find(b" ")
    if space < 0:
        raise MalformedObject("object header has no space after the type tag")

    nul = raw.find(b"\0", space + 1)
    if nul < 0:
        raise MalformedObject("object header has no NUL after the size")

    tag = raw[:space]
    try:
        kind = ObjectKind(tag.decode("ascii"))
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedObject(f"unknown object type {tag!r}") from e

    size_field = raw[space + 1:nul]
    if not size_field.isdigit():
        raise MalformedObject(f"object size {size_field!r} is not a decimal integer")
    size = int(size_field)

    payload = raw[nul + 1:]
    if size != len(payload):
        raise MalformedObject(
            f"object header declares {size} bytes but payload has {len(payload)}"
        )
    return kind, size, payload


def encode_tree_entry(mode: Union[int, str], name: str, hash: bytes) -> bytes:
    """
    Encode a single tree entry.

    Args:
        mode: Entry mode, e.g. 100644 or "40000"
        name: Entry name (single path segment)
        hash: Raw 20-byte object id

    Returns:
        b"<mode> <name>\\0" followed by the raw hash

    Raises:
        ValueError: If hash is not 20 bytes
    """
    if len(hash) != HASH_RAW_LEN:
        raise ValueError(f"tree entry hash must be {HASH_RAW_LEN} raw bytes, got {len(hash)}")
    return f"{mode} {name}\0".encode("utf-8") + hash


def encode_tree(entries: Iterable[TreeEntry]) -> bytes:
    """Encode tree entries as a payload, sorted by name byte-wise."""
    return b"".join(
        encode_tree_entry(e.mode, e.name, e.hash)
        for e in sorted(entries, key=lambda e: e.sort_key)
    )


def _read_entry(payload: bytes, pos: int) -> Tuple[TreeEntry, int]:
    """Parse one entry starting at pos; return it with the next cursor position."""
    nul = payload.find(b"\0", pos)
    if nul < 0:
        raise MalformedTreeEntry(f"tree entry at offset {pos} has no NUL terminator")

    parts = payload[pos:nul].split(b" ")
    if len(parts) != 2:
        raise MalformedTreeEntry(
            f"tree entry at offset {pos} must contain exactly one space, found {len(parts) - 1}"
        )
    mode_field, name_field = parts
    if not mode_field.isdigit():
        raise MalformedTreeEntry(f"tree entry at offset {pos} has non-numeric mode {mode_field!r}")
    # str(mode) must reproduce the on-disk token
    if len(mode_field) > 1 and mode_field.startswith(b"0"):
        raise MalformedTreeEntry(f"tree entry at offset {pos} has zero-padded mode {mode_field!r}")

    end = nul + 1 + HASH_RAW_LEN
    if end > len(payload):
        raise MalformedTreeEntry(
            f"tree entry at offset {pos} is truncated: expected {HASH_RAW_LEN} hash bytes, "
            f"found {len(payload) - nul - 1}"
        )

    try:
        entry = TreeEntry(
            mode=int(mode_field),
            name=name_field.decode("utf-8"),
            hash=payload[nul + 1:end],
        )
    except (UnicodeDecodeError, ValidationError) as e:
        raise MalformedTreeEntry(f"tree entry at offset {pos} is invalid: {e}") from e
    return entry, end


def decode_tree_entries(payload: bytes) -> List[TreeEntry]:
    """
    Decode a tree payload into its entries, in on-disk order.

    The loop is bounded by the payload length; a trailing entry with fewer
    than 20 hash bytes is an error rather than the end of the payload.

    Args:
        payload: Tree payload (header already stripped by decode())

    Returns:
        List of TreeEntry objects

    Raises:
        MalformedTreeEntry: If any entry is malformed or truncated
    """
    entries: List[TreeEntry] = []
    pos = 0
    while pos < len(payload):
        entry, pos = _read_entry(payload, pos)
        entries.append(entry)
    return entries
