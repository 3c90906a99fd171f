"""
minigit - a content-addressed object store with git-compatible plumbing.

Blobs and trees are encoded as `<type> <size>\0<payload>`, identified by the
SHA-1 of that encoding, and stored zlib-compressed under a sharded
`objects/<2 hex>/<38 hex>` layout.
"""
from .errors import (
    CorruptStorage,
    FilesystemError,
    MalformedObject,
    MalformedTreeEntry,
    MinigitError,
    ObjectNotFound,
)
from .models import ObjectKind, StoredObject, TreeEntry
from .storage.object_store import ObjectStore
from .tree_builder import TreeBuilder, walk_tree, write_tree

__version__ = "0.1.0"

__all__ = [
    "CorruptStorage",
    "FilesystemError",
    "MalformedObject",
    "MalformedTreeEntry",
    "MinigitError",
    "ObjectKind",
    "ObjectNotFound",
    "ObjectStore",
    "StoredObject",
    "TreeBuilder",
    "TreeEntry",
    "walk_tree",
    "write_tree",
]
