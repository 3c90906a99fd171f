"""
Human-readable output formatting.

Centralizes all CLI output formatting. Object content and ids go to stdout in
plumbing-compatible form; errors and summaries go to a Rich console on stderr
so that stdout stays parseable.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from ..errors import MinigitError
from ..models import ObjectKind, StoredObject, TreeEntry

_err_console = Console(stderr=True, highlight=False)


def print_error(exc: BaseException) -> None:
    """
    Print an error on stderr.

    Object store errors already carry the offending id or path in their
    message; other exceptions are prefixed with their type name.

    Args:
        exc: Exception to report
    """
    if isinstance(exc, MinigitError):
        message = str(exc)
    else:
        message = f"{type(exc).__name__}: {exc}"
    _err_console.print(f"[bold red]error:[/] {escape(message)}")


def print_object_id(object_id: str) -> None:
    typer.echo(object_id)


def print_object_type(obj: StoredObject) -> None:
    typer.echo(obj.kind.value)


def print_object_size(obj: StoredObject) -> None:
    typer.echo(str(obj.size))


def print_object_content(obj: StoredObject, entries: Iterable[TreeEntry] = ()) -> None:
    """
    Pretty-print object content.

    Blobs are written raw to stdout; trees are listed one entry per line.

    Args:
        obj: Object to print
        entries: Decoded entries when obj is a tree
    """
    if obj.kind == ObjectKind.TREE:
        for entry in entries:
            typer.echo(entry.format_line())
        return
    typer.echo(obj.payload, nl=False)


def print_tree_listing(listing: Iterable[Tuple[str, TreeEntry]], name_only: bool = False) -> None:
    """
    Print an ls-tree listing.

    Args:
        listing: (path, entry) pairs in output order
        name_only: Print paths only
    """
    for path, entry in listing:
        if name_only:
            typer.echo(path)
        else:
            typer.echo(f"{entry.mode:06d} {entry.kind.value} {entry.hex}\t{path}")


def print_init_summary(git_dir: Path) -> None:
    _err_console.print(f"Initialized git directory in [bold]{escape(str(git_dir))}[/]")


def print_export_summary(tree_id: str, out_path: str, members: int) -> None:
    """
    Print export operation summary.

    Args:
        tree_id: Tree that was exported
        out_path: Output archive path
        members: Number of archive members written
    """
    _err_console.print(f"Exported tree [dim]{tree_id}[/] to {escape(out_path)} ({members} entries)")
