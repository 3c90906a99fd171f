"""
Repository directory layout.

A repository is a work tree holding a reserved storage directory:

    <work_tree>/<git_dir_name>/
        HEAD            "ref: refs/heads/<default_branch>\\n"
        objects/        loose object store
        refs/
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import FilesystemError
from .settings import Settings
from .storage.object_store import ObjectStore

__all__ = ["init_repository", "open_store"]

logger = logging.getLogger(__name__)


def init_repository(settings: Settings) -> Path:
    """
    Create the storage directory layout. Safe to run on an existing repository.

    An existing HEAD file is left untouched.

    Args:
        settings: Repository settings

    Returns:
        Path of the git dir

    Raises:
        FilesystemError: If a directory or HEAD cannot be created
    """
    git_dir = settings.git_dir
    try:
        for directory in (git_dir, git_dir / "objects", git_dir / "refs"):
            if not directory.is_dir():
                directory.mkdir(parents=True, exist_ok=True)
                os.chmod(directory, settings.dir_mode)

        head = git_dir / "HEAD"
        if not head.exists():
            head.write_text(f"ref: refs/heads/{settings.default_branch}\n")
    except OSError as e:
        raise FilesystemError(f"Failed to initialize repository in {git_dir}: {e}", path=git_dir) from e

    logger.debug(f"Initialized repository layout in {git_dir}")
    return git_dir


def open_store(settings: Settings) -> ObjectStore:
    """Create the object store for the repository described by settings."""
    return ObjectStore.from_settings(settings)
