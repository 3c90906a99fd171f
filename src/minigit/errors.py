"""
Object store error classes.

Provides the taxonomy of errors that can occur while encoding, decoding,
storing, or snapshotting objects. Every error carries enough context (the
offending path and/or object id) to be reported to a human by the CLI layer.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class MinigitError(Exception):
    """
    Base class for all object store errors.

    Attributes:
        object_id: 40-char hex id of the object involved, if known
        path: Filesystem path involved, if known
    """

    def __init__(
        self,
        message: str,
        *,
        object_id: Optional[str] = None,
        path: Optional[Union[str, Path]] = None,
    ):
        super().__init__(message)
        self.object_id = object_id
        self.path = Path(path) if path is not None else None


class ObjectNotFound(MinigitError):
    """
    Requested object has no backing file.

    Raised when:
    - read() is called with a well-formed id that is not in the store
    """
    pass


class CorruptStorage(MinigitError):
    """
    Stored bytes are not a valid compressed stream.

    Raised when:
    - zlib header is wrong
    - stream checksum does not match
    - stream is truncated
    """
    pass


class MalformedObject(MinigitError):
    """
    Object header framing is invalid.

    Raised when:
    - the space after the type tag or the NUL after the size is missing
    - the type tag is unknown
    - the size is not a non-negative decimal integer
    - the declared size disagrees with the payload length
    """
    pass


class MalformedTreeEntry(MalformedObject):
    """
    Tree payload framing is invalid.

    Raised when:
    - an entry header has no terminating NUL
    - an entry header does not contain exactly one space
    - the mode is not numeric
    - fewer than 20 hash bytes follow the entry header
    """
    pass


class FilesystemError(MinigitError):
    """
    Underlying I/O failure (permission denied, missing path, disk full).

    The original OSError is chained as __cause__.
    """
    pass


__all__ = [
    "MinigitError",
    "ObjectNotFound",
    "CorruptStorage",
    "MalformedObject",
    "MalformedTreeEntry",
    "FilesystemError",
]
