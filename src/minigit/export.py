"""
Deterministic archive export of stored trees.

Creates byte-identical tar archives from identical tree ids by sorting
entries and normalizing tar headers and compression settings. Enforces USTAR
format for cross-platform compatibility.
"""
from __future__ import annotations

import io
import logging
import os
import tarfile
import tempfile
from pathlib import Path
from typing import Union

import zstandard as zstd

from .errors import MalformedObject
from .models import ObjectKind, permissions_from_mode
from .path_safety import safe_relpath
from .storage.object_store import ObjectStore
from .tree_builder import walk_tree

__all__ = ["write_tree_archive", "is_zstd_path"]

logger = logging.getLogger(__name__)


def is_zstd_path(out_path: Union[str, Path]) -> bool:
    """Whether the output path selects zstandard compression."""
    name = Path(out_path).name
    return name.endswith(".tar.zst") or name.endswith(".zst")


def write_tree_archive(store: ObjectStore, tree_id: str, out_path: Union[str, Path], *,
                       zstd_level: int = 19) -> int:
    """
    Create a deterministic tar archive of a stored tree.

    Produces byte-identical archives from identical trees by:
    - Sorting entries by archive path
    - Setting deterministic tar headers (uid=0, gid=0, mtime=0)
    - Using USTAR format without PAX headers
    - Applying consistent compression settings

    Args:
        store: Store holding the tree
        tree_id: 40-char hex id of the root tree
        out_path: Output archive path (.tar, or .tar.zst / .zst for zstandard)
        zstd_level: Zstandard compression level

    Returns:
        Number of archive members written

    Raises:
        ObjectNotFound: If the tree or any object it references is missing
        MalformedObject: If an entry's mode disagrees with the stored object kind
        ValueError: If an entry path is unsafe
        OSError: If archive creation fails
    """
    out_path = Path(out_path).resolve()

    # Use atomic writes via temp file
    temp_fd, temp_path = tempfile.mkstemp(suffix=".tmp", dir=out_path.parent, prefix=out_path.name + ".")
    try:
        with os.fdopen(temp_fd, "wb") as f:
            if is_zstd_path(out_path):
                count = _write_zst_archive(f, store, tree_id, zstd_level)
            else:
                count = _write_tar_archive(f, store, tree_id)

        # Atomic rename to final path
        os.replace(temp_path, out_path)
    except Exception:
        # Cleanup on any failure
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise

    logger.debug(f"Exported tree {tree_id} to {out_path} ({count} members)")
    return count


def _write_tar_archive(f, store: ObjectStore, tree_id: str) -> int:
    """Write uncompressed tar archive to an open file."""
    with tarfile.open(fileobj=f, mode="w", format=tarfile.USTAR_FORMAT) as tar:
        return _add_entries_to_tar(tar, store, tree_id)


def _write_zst_archive(f, store: ObjectStore, tree_id: str, zstd_level: int) -> int:
    """Write zstandard-compressed tar archive to an open file."""
    # Configure zstd for deterministic output
    compressor = zstd.ZstdCompressor(
        level=zstd_level,
        write_content_size=True,
        write_checksum=True
    )
    with compressor.stream_writer(f, closefd=False) as zstd_writer:
        with tarfile.open(fileobj=zstd_writer, mode="w", format=tarfile.USTAR_FORMAT) as tar:
            return _add_entries_to_tar(tar, store, tree_id)


def _add_entries_to_tar(tar: tarfile.TarFile, store: ObjectStore, tree_id: str) -> int:
    """Add tree entries to tar archive in deterministic order."""
    entries = sorted(walk_tree(store, tree_id), key=lambda item: item[0])

    for path, entry in entries:
        arcname = safe_relpath(path)

        if entry.is_tree:
            tarinfo = tarfile.TarInfo(arcname + "/")
            tarinfo.type = tarfile.DIRTYPE
            _apply_canonical_headers(tarinfo, 0o755)
            tar.addfile(tarinfo)
            continue

        obj = store.read(entry.hex)
        if obj.kind != ObjectKind.BLOB:
            raise MalformedObject(
                f"Entry {path} has file mode {entry.mode} but references a {obj.kind.value}",
                object_id=entry.hex,
            )
        tarinfo = tarfile.TarInfo(arcname)
        tarinfo.size = obj.size
        _apply_canonical_headers(tarinfo, permissions_from_mode(entry.mode))
        tar.addfile(tarinfo, io.BytesIO(obj.payload))

    return len(entries)


def _apply_canonical_headers(tarinfo: tarfile.TarInfo, permissions: int) -> None:
    """
    Apply canonical tar headers for deterministic output.

    Args:
        tarinfo: Tar info object to canonicalize
        permissions: Permission bits recorded for the entry
    """
    # Deterministic ownership
    tarinfo.uid = 0
    tarinfo.gid = 0
    tarinfo.uname = ""
    tarinfo.gname = ""

    # Deterministic timestamp
    tarinfo.mtime = 0

    # Preserve execute bit for regular files, nothing else
    if tarinfo.isdir() or permissions & 0o100:
        tarinfo.mode = 0o755
    else:
        tarinfo.mode = 0o644
