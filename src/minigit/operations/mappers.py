"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and CLI command wrappers
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

import typer
from typing import Callable, TypeVar

T = TypeVar('T')

EXIT_CODES = {
    "ObjectNotFound": 1,
    "ValueError": 2,
    "BadParameter": 2,
    "ValidationError": 2,
    "MalformedObject": 3,
    "MalformedTreeEntry": 3,
    "CorruptStorage": 4,
    "FilesystemError": 5,
}

FALLBACK_EXIT_CODE = 1


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    Returns:
    - 0: Success
    - 1: Object not found (ObjectNotFound) or unknown error
    - 2: Invalid argument (ValueError, BadParameter, ValidationError)
    - 3: Malformed object or tree entry
    - 4: Corrupt storage (invalid compressed stream)
    - 5: Filesystem error

    Args:
        exc: Exception to map

    Returns:
        Exit code, with 1 as fallback for unknown exceptions
    """
    return EXIT_CODES.get(type(exc).__name__, FALLBACK_EXIT_CODE)


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function and maps any exceptions to appropriate
    exit codes using typer.Exit after reporting them on stderr. This
    centralizes error handling so CLI commands don't need individual
    try/except blocks.

    Args:
        func: Function to execute

    Returns:
        Function result if successful

    Raises:
        typer.Exit: With appropriate exit code if function raises exception
    """
    try:
        return func()
    except (typer.Exit, typer.Abort):
        raise
    except Exception as e:
        from .printers import print_error
        print_error(e)
        raise typer.Exit(code=exit_code_for(e)) from e
