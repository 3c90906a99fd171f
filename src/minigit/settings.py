"""
Settings and configuration for minigit.

Centralizes configuration values and provides validation with fail-fast behavior.
Everything that would otherwise be ambient process state (current working
directory, umask) is an explicit setting passed to the store and tree builder.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

__all__ = ["Settings", "create_settings_from_env"]


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for a minigit repository.

    Attributes:
        work_tree: Directory snapshotted by write-tree; holds the git dir
        git_dir_name: Name of the reserved storage directory inside work_tree
        compression_level: zlib level for stored objects (-1 = zlib default)
        dir_mode: Permission bits applied to created directories
        file_mode: Permission bits applied to written object files
        default_branch: Branch HEAD points at after init
    """
    work_tree: Path
    git_dir_name: str = ".git"
    compression_level: int = -1
    dir_mode: int = 0o755
    file_mode: int = 0o644
    default_branch: str = "main"

    def __post_init__(self):
        """Validate settings on construction."""
        if not self.work_tree:
            raise ValueError("work_tree is required")
        object.__setattr__(self, "work_tree", Path(self.work_tree))

        name = self.git_dir_name
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError(f"git_dir_name must be a single path segment, got {name!r}")

        if not -1 <= self.compression_level <= 9:
            raise ValueError(f"compression_level must be between -1 and 9, got {self.compression_level}")

        for field_name in ("dir_mode", "file_mode"):
            value = getattr(self, field_name)
            if not 0 <= value <= 0o7777:
                raise ValueError(f"{field_name} must be permission bits (0..0o7777), got {oct(value)}")

        if not self.default_branch or " " in self.default_branch:
            raise ValueError(f"Invalid default_branch: {self.default_branch!r}")

    @property
    def git_dir(self) -> Path:
        return self.work_tree / self.git_dir_name

    @property
    def objects_dir(self) -> Path:
        return self.git_dir / "objects"


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - MINIGIT_WORK_TREE (default: current directory)
        - MINIGIT_DIR (default: .git)
        - MINIGIT_COMPRESSION_LEVEL (default: -1)
        - MINIGIT_DIR_MODE (octal, default: 755)
        - MINIGIT_FILE_MODE (octal, default: 644)
        - MINIGIT_DEFAULT_BRANCH (default: main)

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid

    Note:
        Creates a fresh Settings instance every time (no caching).
        This ensures test isolation and eliminates global state.
    """
    def get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        return int(value) if value else default

    def get_octal(key: str, default: int) -> int:
        value = os.getenv(key)
        return int(value, 8) if value else default

    work_tree: Union[str, Path] = os.getenv("MINIGIT_WORK_TREE") or Path.cwd()

    return Settings(
        work_tree=Path(work_tree).resolve(),
        git_dir_name=os.getenv("MINIGIT_DIR", ".git"),
        compression_level=get_int("MINIGIT_COMPRESSION_LEVEL", -1),
        dir_mode=get_octal("MINIGIT_DIR_MODE", 0o755),
        file_mode=get_octal("MINIGIT_FILE_MODE", 0o644),
        default_branch=os.getenv("MINIGIT_DEFAULT_BRANCH", "main"),
    )
