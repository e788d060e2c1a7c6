"""
Listing Rendering
=================

Renders encoded lines the way the assembler view displays them:

    3000: 86 05 LDAA #5
    3002: 20 FC LOOP BRA LOOP

Each line shows its starting address (four hex digits), the bytes it
emitted, then its source tokens separated by single spaces. Comment and
blank lines show only the address at which they sit.
"""

from typing import Iterable, Mapping

from hc11_asm.assembler.encoder import EncodedLine
from hc11_asm.errors import AssemblerError


def format_line(line: EncodedLine) -> str:
    """Render one encoded line."""
    parts = [f"{line.start_address & 0xFFFF:04X}:"]
    parts.extend(f"{b:02X}" for b in line.assembled)
    parts.extend(line.tokens)
    return " ".join(parts)


def format_listing(lines: Iterable[EncodedLine]) -> str:
    """Render every line, one per row."""
    return "\n".join(format_line(line) for line in lines)


def format_symbols(labels: Mapping[str, int]) -> str:
    """
    Render the label table sorted by address, then name.

    Format: name $address (one per line)
    """
    width = max((len(name) for name in labels), default=0)
    rows = sorted(labels.items(), key=lambda item: (item[1], item[0]))
    return "\n".join(f"{name:<{width}} ${address:04X}" for name, address in rows)


def format_failure(error: AssemblerError, lines: Iterable[EncodedLine]) -> str:
    """
    Render a failed run: the error first, then whatever was encoded
    before the failure.
    """
    rows = [f"Failed to assemble: {error.message}"]
    if error.location is not None:
        rows[0] += f" ({error.phase}, line {error.location.line})"
    rows.extend(format_line(line) for line in lines)
    return "\n".join(rows)
