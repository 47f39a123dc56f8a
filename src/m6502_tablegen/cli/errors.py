"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes across all commands.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from m6502_tablegen.errors import TableGenError


class ExitCode(IntEnum):
    """Standard exit codes for the CLI."""
    SUCCESS = 0
    GENERATION_ERROR = 1  # Malformed table or invalid addressing mode
    INVALID_ARGS = 2      # Invalid arguments or missing/unreadable files
    INTERNAL_ERROR = 3    # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Unified exception handler for all commands.

    Formats the error message, optionally prints a traceback for internal
    errors in verbose mode, and exits with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, TableGenError):
        # Messages already carry the "error:" prefix and record location
        click.echo(str(error), err=True)
        sys.exit(ExitCode.GENERATION_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, OSError):
        # Missing, unreadable, or unwritable files
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
