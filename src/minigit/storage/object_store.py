"""
Loose object store.

Objects live under a sharded directory layout keyed by their hex id:

    <objects_dir>/<first 2 hex chars>/<remaining 38 hex chars>

Each file holds the zlib-compressed encoded object. The directory structure
is the only index; no metadata file is maintained and nothing is cached in
memory, so every call touches disk.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Union

from ..codec import decode, decode_tree_entries, encode_object
from ..compression import compress, decompress
from ..errors import (
    CorruptStorage,
    FilesystemError,
    MalformedObject,
    MalformedTreeEntry,
    ObjectNotFound,
)
from ..hashing import hash_hex, validate_hex
from ..models import ObjectKind, StoredObject, TreeEntry
from ..settings import Settings

__all__ = ["ObjectStore"]

logger = logging.getLogger(__name__)


class ObjectStore:
    """
    Content-addressed persistence for blobs and trees.

    The store assumes a single writer/reader process. Shard directory
    creation is idempotent; object files are replaced atomically so a
    rewrite of an existing id never exposes a partially written file.
    """

    def __init__(
        self,
        objects_dir: Union[str, Path],
        *,
        compression_level: int = -1,
        dir_mode: int = 0o755,
        file_mode: int = 0o644,
    ) -> None:
        """
        Initialize store rooted at objects_dir.

        Args:
            objects_dir: Root of the sharded object layout (e.g. .git/objects)
            compression_level: zlib level used for new objects
            dir_mode: Permission bits applied to new shard directories
            file_mode: Permission bits applied to object files
        """
        self.objects_dir = Path(objects_dir)
        self.compression_level = compression_level
        self.dir_mode = dir_mode
        self.file_mode = file_mode

    @classmethod
    def from_settings(cls, settings: Settings) -> ObjectStore:
        """Create a store for the repository described by settings."""
        return cls(
            settings.objects_dir,
            compression_level=settings.compression_level,
            dir_mode=settings.dir_mode,
            file_mode=settings.file_mode,
        )

    def object_path(self, object_id: str) -> Path:
        """
        Derive the storage path for an object id.

        Args:
            object_id: 40-char lowercase hex id

        Returns:
            Path of the object file (which may not exist)

        Raises:
            ValueError: If object_id is not a valid hex id
        """
        validate_hex(object_id)
        return self.objects_dir / object_id[:2] / object_id[2:]

    def exists(self, object_id: str) -> bool:
        return self.object_path(object_id).is_file()

    def hash_object(self, kind: Union[ObjectKind, str], payload: bytes, *, write: bool = False) -> str:
        """
        Compute the id an object would have, optionally persisting it.

        Args:
            kind: Object kind
            payload: Object payload
            write: Persist the object as well

        Returns:
            40-char hex object id
        """
        if write:
            return self.write(kind, payload)
        return hash_hex(encode_object(kind, payload))

    def write(self, kind: Union[ObjectKind, str], payload: bytes) -> str:
        """
        Encode, hash, compress, and persist an object.

        An existing file for the same id is fully overwritten; content
        addressing guarantees the new bytes decode to the same object.

        Args:
            kind: Object kind
            payload: Object payload

        Returns:
            40-char hex object id

        Raises:
            FilesystemError: If the shard directory or object file cannot be written
        """
        encoded = encode_object(kind, payload)
        object_id = hash_hex(encoded)
        path = self.object_path(object_id)

        try:
            self._ensure_shard(path.parent)
            self._write_atomic(path, compress(encoded, self.compression_level))
        except OSError as e:
            raise FilesystemError(
                f"Failed to write object {object_id} to {path}: {e}",
                object_id=object_id,
                path=path,
            ) from e

        logger.debug(f"Wrote {ObjectKind(kind).value} {object_id} ({len(payload)} bytes)")
        return object_id

    def read(self, object_id: str) -> StoredObject:
        """
        Read and decode an object.

        Args:
            object_id: 40-char lowercase hex id

        Returns:
            StoredObject with kind, declared size, and payload

        Raises:
            ValueError: If object_id is not a valid hex id
            ObjectNotFound: If no object file exists for the id, or it cannot be opened
            CorruptStorage: If the file is not a valid zlib stream
            MalformedObject: If the decompressed header is invalid
        """
        path = self.object_path(object_id)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ObjectNotFound(
                f"Object {object_id} not found at {path}: {e.strerror or e}",
                object_id=object_id,
                path=path,
            ) from e

        try:
            kind, size, payload = decode(decompress(data))
        except CorruptStorage as e:
            raise CorruptStorage(f"Object {object_id} at {path}: {e}", object_id=object_id, path=path) from e
        except MalformedObject as e:
            raise MalformedObject(f"Object {object_id} at {path}: {e}", object_id=object_id, path=path) from e

        logger.debug(f"Read {kind.value} {object_id} ({size} bytes)")
        return StoredObject(kind=kind, size=size, payload=payload)

    def read_tree(self, object_id: str) -> List[TreeEntry]:
        """
        Read a tree object and decode its entries.

        Args:
            object_id: 40-char lowercase hex id of a tree

        Returns:
            Entries in on-disk (name-sorted) order

        Raises:
            MalformedObject: If the object is not a tree
            MalformedTreeEntry: If the tree payload is malformed
        """
        return self.tree_entries(object_id, self.read(object_id))

    def tree_entries(self, object_id: str, obj: StoredObject) -> List[TreeEntry]:
        """Decode the entries of an already-read tree object."""
        if obj.kind != ObjectKind.TREE:
            raise MalformedObject(
                f"Object {object_id} is a {obj.kind.value}, not a tree",
                object_id=object_id,
                path=self.object_path(object_id),
            )
        try:
            return decode_tree_entries(obj.payload)
        except MalformedTreeEntry as e:
            raise MalformedTreeEntry(
                f"Tree {object_id}: {e}",
                object_id=object_id,
                path=self.object_path(object_id),
            ) from e

    def _ensure_shard(self, shard: Path) -> None:
        if shard.is_dir():
            return
        shard.mkdir(parents=True, exist_ok=True)
        os.chmod(shard, self.dir_mode)

    def _write_atomic(self, path: Path, data: bytes) -> None:
        """Write data to path via a temp file in the same shard and rename."""
        fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=path.name + ".", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(temp_path, self.file_mode)
            os.replace(temp_path, path)
        except Exception:
            # Cleanup on any failure
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
