"""
Operations Facade - Application service layer.

Provides a clean interface between CLI and the object store core,
centralizing command orchestration and configuration while keeping CLI
commands thin and testable.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..errors import FilesystemError
from ..export import write_tree_archive
from ..models import ObjectKind, StoredObject, TreeEntry
from ..repository import init_repository, open_store
from ..settings import Settings
from ..storage.object_store import ObjectStore
from ..tree_builder import TreeBuilder, walk_tree


@dataclass(frozen=True)
class OpsConfig:
    """
    Configuration for Operations facade.

    Centralizes policy decisions like output verbosity and archive
    compression to avoid scattered configuration.
    """
    verbose: bool = False         # Show detailed output
    zstd_level: int = 19          # Fixed compression level for determinism


class Operations:
    """
    Application service facade for CLI operations.

    One method per CLI verb. The facade holds no state beyond its injected
    config, settings, and store; exceptions bubble up for central mapping
    by run_and_exit().
    """

    def __init__(self, config: OpsConfig, settings: Settings, store: Optional[ObjectStore] = None):
        """
        Initialize Operations facade.

        Args:
            config: Configuration settings
            settings: Repository settings
            store: Object store (if None, opened from settings)
        """
        self.cfg = config
        self.settings = settings
        self.store = store if store is not None else open_store(settings)

    def init(self) -> Path:
        """Create the repository layout; returns the git dir."""
        return init_repository(self.settings)

    def cat_file(self, object_id: str) -> Tuple[StoredObject, List[TreeEntry]]:
        """
        Read an object, decoding tree entries when it is a tree.

        Returns:
            (object, entries) where entries is empty for blobs
        """
        obj = self.store.read(object_id)
        entries = self.store.tree_entries(object_id, obj) if obj.kind == ObjectKind.TREE else []
        return obj, entries

    def hash_object(self, path: Union[str, Path], write: bool = False) -> str:
        """
        Hash a file as a blob, optionally writing it to the store.

        Raises:
            FilesystemError: If the file cannot be read
        """
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise FilesystemError(f"Failed to read {path}: {e}", path=path) from e
        return self.store.hash_object(ObjectKind.BLOB, content, write=write)

    def ls_tree(self, tree_id: str, recursive: bool = False) -> List[Tuple[str, TreeEntry]]:
        """
        List a tree's entries as (path, entry) pairs.

        With recursive=True subtrees are expanded and only blobs are listed.
        """
        if not recursive:
            return [(entry.name, entry) for entry in self.store.read_tree(tree_id)]
        return [(path, entry) for path, entry in walk_tree(self.store, tree_id) if not entry.is_tree]

    def write_tree(self) -> str:
        """Snapshot the work tree, skipping the storage directory."""
        builder = TreeBuilder(self.store, ignore_names=(self.settings.git_dir_name,))
        return builder.build_tree(self.settings.work_tree)

    def export(self, tree_id: str, out_path: Union[str, Path]) -> int:
        """Write a deterministic archive of a stored tree; returns member count."""
        return write_tree_archive(self.store, tree_id, out_path, zstd_level=self.cfg.zstd_level)
