"""
Directory snapshotting.

Maps a directory hierarchy onto a DAG of stored objects: every regular file
becomes a blob, every subdirectory becomes a tree, and each tree payload lists
its children sorted by name so that unchanged directories always hash the
same. Walking a stored tree back out is provided by walk_tree().
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Union

from .codec import encode_tree
from .errors import FilesystemError
from .models import MODE_TREE, ObjectKind, TreeEntry, mode_from_permissions
from .storage.object_store import ObjectStore

__all__ = ["TreeBuilder", "write_tree", "walk_tree"]

logger = logging.getLogger(__name__)


class TreeBuilder:
    """
    Recursively snapshot a directory into an ObjectStore.

    Symlinks and special files are not snapshotted. A failure anywhere aborts
    the whole build; objects already written stay in the store, where they are
    harmless because they are content-addressed.
    """

    def __init__(self, store: ObjectStore, *, ignore_names: Iterable[str] = (".git",)) -> None:
        """
        Initialize tree builder.

        Args:
            store: Store receiving blobs and trees
            ignore_names: Entry names skipped at every level, normally the
                storage root's reserved directory name
        """
        self.store = store
        self.ignore_names = frozenset(ignore_names)

    def build_tree(self, directory: Union[str, Path]) -> str:
        """
        Snapshot directory and return the id of its tree object.

        Args:
            directory: Directory to snapshot

        Returns:
            40-char hex id of the tree

        Raises:
            FilesystemError: If a directory cannot be listed or a file cannot be read
        """
        directory = Path(directory)
        try:
            with os.scandir(directory) as it:
                dirents = list(it)
        except OSError as e:
            raise FilesystemError(f"Failed to list directory {directory}: {e}", path=directory) from e

        entries: List[TreeEntry] = []
        for dirent in dirents:
            if dirent.name in self.ignore_names:
                continue

            try:
                dirent.name.encode("utf-8")
            except UnicodeEncodeError as e:
                raise FilesystemError(
                    f"File name {dirent.path!r} is not valid UTF-8", path=dirent.path
                ) from e

            try:
                if dirent.is_dir(follow_symlinks=False):
                    object_id = self.build_tree(dirent.path)
                    mode = MODE_TREE
                elif dirent.is_file(follow_symlinks=False):
                    object_id, mode = self._write_blob(dirent)
                else:
                    logger.debug(f"Skipping non-regular entry {dirent.path}")
                    continue
            except OSError as e:
                raise FilesystemError(f"Failed to snapshot {dirent.path}: {e}", path=dirent.path) from e

            entries.append(TreeEntry(mode=mode, name=dirent.name, hash=bytes.fromhex(object_id)))

        tree_id = self.store.write(ObjectKind.TREE, encode_tree(entries))
        logger.debug(f"Built tree {tree_id} for {directory} ({len(entries)} entries)")
        return tree_id

    def _write_blob(self, dirent: os.DirEntry) -> Tuple[str, int]:
        st = dirent.stat(follow_symlinks=False)
        with open(dirent.path, "rb") as f:
            content = f.read()
        return self.store.write(ObjectKind.BLOB, content), mode_from_permissions(st.st_mode)


def write_tree(
    store: ObjectStore,
    directory: Union[str, Path],
    *,
    ignore_names: Iterable[str] = (".git",),
) -> str:
    """Snapshot directory into store; see TreeBuilder.build_tree()."""
    return TreeBuilder(store, ignore_names=ignore_names).build_tree(directory)


def walk_tree(store: ObjectStore, tree_id: str, prefix: str = "") -> Iterator[Tuple[str, TreeEntry]]:
    """
    Walk a stored tree depth-first in entry order.

    Args:
        store: Store holding the tree and its subtrees
        tree_id: 40-char hex id of the root tree
        prefix: Path prefix prepended to every yielded path

    Yields:
        (relative POSIX path, entry) pairs; a subtree is yielded before its contents
    """
    for entry in store.read_tree(tree_id):
        path = f"{prefix}{entry.name}"
        yield path, entry
        if entry.is_tree:
            yield from walk_tree(store, entry.hex, path + "/")
