"""
CLI Error Handling
==================

Maps exceptions raised by the assembler tools to a message on stderr and
a process exit code, so hc11asm and hc11testprog fail the same way.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from hc11_asm.errors import AssemblerError, CatalogError, Hc11Error


class ExitCode(IntEnum):
    """Process exit codes shared by the CLI tools."""
    SUCCESS = 0
    ASSEMBLY_ERROR = 1   # Source failed to assemble
    USAGE_ERROR = 2      # Bad arguments, unreadable or unwritable files
    INTERNAL_ERROR = 3   # Broken catalog or unexpected exception


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report `error` and exit.

    Source errors are the user's to fix and get the assembler's own
    formatted message. A CatalogError means the instruction table itself
    is inconsistent and is treated as an internal error.

    Args:
        error: The exception that was raised
        verbose: Print the traceback for internal errors
        error_type: Message prefix such as "Assembly"

    Raises:
        SystemExit: Always
    """
    prefix = f"{error_type} error" if error_type else "Error"

    if isinstance(error, AssemblerError):
        click.echo(f"{prefix} ({error.phase}): {error}", err=True)
        sys.exit(ExitCode.ASSEMBLY_ERROR)

    if isinstance(error, CatalogError):
        click.echo(f"Internal error: instruction catalog: {error}", err=True)
        sys.exit(ExitCode.INTERNAL_ERROR)

    if isinstance(error, Hc11Error):
        click.echo(f"{prefix}: {error}", err=True)
        sys.exit(ExitCode.ASSEMBLY_ERROR)

    if isinstance(error, (click.BadParameter, OSError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.USAGE_ERROR)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)
