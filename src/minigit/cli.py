"""
minigit CLI

Implements the plumbing verbs with Operations facade integration:
- init: Create the repository layout
- cat-file: Show an object's type, size, or content
- hash-object: Compute a file's blob id, optionally writing it
- ls-tree: List a tree's entries
- write-tree: Snapshot the work tree into tree objects
- export: Write a deterministic archive of a stored tree
"""
from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from .cli_context import CLIContext
from .operations import OpsConfig, run_and_exit
from .operations.printers import (
    print_export_summary, print_init_summary, print_object_content, print_object_id,
    print_object_size, print_object_type, print_tree_listing
)

app = typer.Typer(name="minigit", help="Content-addressed object store with git-compatible plumbing")


def _configure_logging(verbose: bool) -> None:
    """Route log records to stderr; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")
) -> None:
    """Content-addressed object store with git-compatible plumbing."""
    _configure_logging(verbose)
    ctx.obj = OpsConfig(verbose=verbose)


@app.command()
def init(ctx: typer.Context) -> None:
    """Create an empty repository in the work tree."""

    def _init() -> None:
        ops = CLIContext.from_env().operations(ctx.obj)
        print_init_summary(ops.init())

    run_and_exit(_init)


@app.command("cat-file")
def cat_file(
    ctx: typer.Context,
    object_id: str = typer.Argument(..., help="40-char hex object id"),
    show_type: bool = typer.Option(False, "-t", help="Show object type"),
    show_size: bool = typer.Option(False, "-s", help="Show object size"),
    pretty: bool = typer.Option(False, "-p", help="Pretty-print object content"),
) -> None:
    """Show an object's type, size, or content."""

    def _cat_file() -> None:
        if sum((show_type, show_size, pretty)) != 1:
            raise typer.BadParameter("exactly one of -t, -s, -p is required")

        ops = CLIContext.from_env().operations(ctx.obj)
        obj, entries = ops.cat_file(object_id)
        if show_type:
            print_object_type(obj)
        elif show_size:
            print_object_size(obj)
        else:
            print_object_content(obj, entries)

    run_and_exit(_cat_file)


@app.command("hash-object")
def hash_object(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to hash"),
    write: bool = typer.Option(False, "-w", help="Write the blob into the object store"),
) -> None:
    """Compute a file's blob id, optionally writing the blob."""

    def _hash_object() -> None:
        ops = CLIContext.from_env().operations(ctx.obj)
        print_object_id(ops.hash_object(path, write=write))

    run_and_exit(_hash_object)


@app.command("ls-tree")
def ls_tree(
    ctx: typer.Context,
    tree_id: str = typer.Argument(..., help="40-char hex tree id"),
    name_only: bool = typer.Option(False, "--name-only", help="List names only"),
    recursive: bool = typer.Option(False, "-r", help="Recurse into subtrees"),
) -> None:
    """List a tree's entries."""

    def _ls_tree() -> None:
        ops = CLIContext.from_env().operations(ctx.obj)
        print_tree_listing(ops.ls_tree(tree_id, recursive=recursive), name_only=name_only)

    run_and_exit(_ls_tree)


@app.command("write-tree")
def write_tree(ctx: typer.Context) -> None:
    """Snapshot the work tree and print the root tree id."""

    def _write_tree() -> None:
        ops = CLIContext.from_env().operations(ctx.obj)
        print_object_id(ops.write_tree())

    run_and_exit(_write_tree)


@app.command()
def export(
    ctx: typer.Context,
    tree_id: str = typer.Argument(..., help="40-char hex tree id"),
    out_path: str = typer.Argument(..., help="Output archive path (.tar, .tar.zst)"),
) -> None:
    """Export a stored tree to a deterministic archive."""

    def _export() -> None:
        if not out_path.endswith((".tar", ".tar.zst", ".zst")):
            raise typer.BadParameter("output path must end with .tar, .tar.zst or .zst")

        ops = CLIContext.from_env().operations(ctx.obj)
        members = ops.export(tree_id, out_path)
        print_export_summary(tree_id, out_path, members)

    run_and_exit(_export)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
