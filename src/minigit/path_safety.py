"""
Path safety utilities for minigit.

This module provides shared validation for names read from tree objects and
for paths written into archives, so that a stored tree can never address a
location outside the directory it is materialized into.
"""
from __future__ import annotations

from pathlib import PurePosixPath


def safe_entry_name(name: str) -> str:
    """
    Validate a single tree entry name.

    A tree entry names exactly one path segment:
    - No empty strings, "." or ".."
    - No '/' separators
    - No NUL bytes (NUL terminates the entry header on disk)

    Args:
        name: Entry name

    Returns:
        The unchanged name

    Raises:
        ValueError: If the name violates any rule

    Examples:
        >>> safe_entry_name("README.md")
        'README.md'

        >>> safe_entry_name("a/b")
        ValueError: unsafe entry name: a/b
    """
    if not name or name in (".", ".."):
        raise ValueError(f"unsafe entry name: {name}")
    if "/" in name or "\x00" in name:
        raise ValueError(f"unsafe entry name: {name!r}")
    return name


def safe_relpath(path: str) -> str:
    """
    Validate and normalize a relative POSIX path built from tree entry names.

    This function enforces the following safety rules:
    - No empty strings or "." (prevents root directory access)
    - No absolute paths (starting with '/')
    - No parent directory references ('..' components)
    - No backslashes
    - No NUL bytes (can cause path truncation)

    Args:
        path: Relative path string

    Returns:
        Normalized relative path safe for use

    Raises:
        ValueError: If path violates safety rules

    Examples:
        >>> safe_relpath("src/model.py")
        'src/model.py'

        >>> safe_relpath("../secrets.txt")
        ValueError: unsafe path: ../secrets.txt
    """
    rel = PurePosixPath(path)
    s = str(rel)
    if not s or s == ".":
        raise ValueError(f"unsafe path: {path}")
    if "\\" in s or "\x00" in s:
        raise ValueError(f"unsafe path: {path!r}")
    if rel.is_absolute() or ".." in rel.parts:
        raise ValueError(f"unsafe path: {path}")
    return s
