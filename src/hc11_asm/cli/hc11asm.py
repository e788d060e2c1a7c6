"""
hc11asm - 68HC11 Assembler Command-Line Interface
=================================================

This module implements the command-line interface for the 68HC11
assembler.

Usage Examples
--------------
Print the listing:
    $ hc11asm program.asm

Write the raw machine code:
    $ hc11asm program.asm -o program.bin

Generate all output files:
    $ hc11asm program.asm -o program.bin -l program.lst -s program.sym

Verbose mode:
    $ hc11asm -v program.asm
"""

import logging
from pathlib import Path
from typing import Optional

import click

from hc11_asm import __version__
from hc11_asm.assembler import Assembler
from hc11_asm.assembler.listing import format_listing
from hc11_asm.cli.errors import handle_cli_exception
from hc11_asm.errors import AssemblerError


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write raw machine code bytes to this file",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the listing to this file instead of stdout",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="hc11asm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble 68HC11 source code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    Without -o or -l the listing is printed to stdout.

    \b
    Examples:
        hc11asm prog.asm                  # Print listing
        hc11asm prog.asm -o prog.bin      # Write machine code
        hc11asm prog.asm -l prog.lst      # Write listing file
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    asm = Assembler(verbose=verbose)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        try:
            asm.assemble_file(input_file)
        except AssemblerError:
            # Show what was encoded up to the failing line; the error
            # itself is reported once, by handle_cli_exception
            if asm.lines and listing is None:
                click.echo(format_listing(asm.lines), err=True)
            raise

        if output:
            asm.write_binary(output)
            if verbose:
                click.echo(f"Wrote {len(asm.get_code())} bytes to {output}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")
        elif output is None:
            click.echo(asm.get_listing())

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            code = asm.get_code()
            click.echo(f"Assembly complete: {len(code)} bytes at ${asm.get_origin():04X}")
            click.echo(f"Defined {len(asm.get_symbols())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
