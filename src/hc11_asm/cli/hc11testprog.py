"""
hc11testprog - Catalog Test Program Generator
=============================================

Writes an assembly source that uses every instruction in every addressing
mode it supports. Assembling the result is a quick end-to-end check of
the instruction catalog.

Usage Examples
--------------
    $ hc11testprog                      # Writes testProgram.asm
    $ hc11testprog -o all.asm
    $ hc11testprog --stdout | hc11asm /dev/stdin
"""

from pathlib import Path

import click

from hc11_asm import __version__
from hc11_asm.assembler import generate_test_program
from hc11_asm.cli.errors import handle_cli_exception


@click.command()
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("testProgram.asm"),
    show_default=True,
    help="Output source file",
)
@click.option(
    "--stdout",
    "to_stdout",
    is_flag=True,
    help="Print the program instead of writing a file",
)
@click.version_option(version=__version__, prog_name="hc11testprog")
def main(output: Path, to_stdout: bool) -> None:
    """
    Generate a 68HC11 test program covering the whole instruction catalog.
    """
    try:
        program = generate_test_program()
        if to_stdout:
            click.echo(program, nl=False)
            return
        output.write_text(program)
        click.echo(f"Wrote {program.count(chr(10))} lines to {output}")
    except Exception as e:
        handle_cli_exception(e, error_type="Generation")


if __name__ == "__main__":
    main()
