"""
Branch Resolver (Pass 2)
========================

Patches the displacement byte of every relative branch once the whole
source has been encoded.

The displacement is measured from the address following the branch (the
line's recorded address) to the target label:

    displacement = label_address - line.address

so a branch to itself is -2 and a branch to the next instruction is 0.
The difference is taken modulo 64K, matching the wrapped running address.
Displacements outside -127..+127 are rejected. Because all addresses are
fixed after pass 1, a single pass is enough and forward references need
no special handling.
"""

import difflib
import logging
from typing import Iterable

from hc11_asm.assembler.encoder import EncodedLine, ResolvedLabels
from hc11_asm.errors import BranchRangeError, SourceLocation, UndefinedSymbolError

logger = logging.getLogger(__name__)


MIN_DISPLACEMENT = -127
MAX_DISPLACEMENT = 127


def branch_displacement(target_address: int, next_address: int) -> int:
    """
    Signed displacement from `next_address` to `target_address`.

    Addresses wrap at 64K, so the difference is taken as a signed 16-bit
    value: a branch at $FFFE back to $FFFC from next address $0000 is -4.
    """
    return ((target_address - next_address + 0x8000) & 0xFFFF) - 0x8000


def resolve_branches(lines: Iterable[EncodedLine], labels: ResolvedLabels,
                     filename: str = "<input>") -> int:
    """
    Fill in the displacement of every relative-mode line.

    Args:
        lines: Encoded lines in source order
        labels: Complete label table from the encoding pass
        filename: Source name used in error locations

    Returns:
        Number of branches resolved

    Raises:
        UndefinedSymbolError: A branch targets a label that was never defined
        BranchRangeError: A displacement falls outside -127..+127
    """
    if not isinstance(labels, ResolvedLabels):
        raise TypeError("resolve_branches needs the frozen label table (LabelTable.freeze())")

    resolved = 0
    for line in lines:
        if not line.is_branch:
            continue

        location = SourceLocation(filename, line.line_number)
        target_address = labels.get(line.target)
        if target_address is None:
            similar = difflib.get_close_matches(line.target, list(labels), n=3)
            raise UndefinedSymbolError(
                line.target,
                location=location,
                source_line=line.raw,
                similar_symbols=similar,
            )

        displacement = branch_displacement(target_address, line.address)
        if not MIN_DISPLACEMENT <= displacement <= MAX_DISPLACEMENT:
            raise BranchRangeError(
                line.target,
                displacement,
                location=location,
                source_line=line.raw,
            )

        line.assembled[-1] = displacement & 0xFF
        resolved += 1
        logger.debug(
            f"Line {line.line_number}: {line.target} -> ${target_address:04X}, "
            f"displacement {displacement}"
        )

    return resolved
