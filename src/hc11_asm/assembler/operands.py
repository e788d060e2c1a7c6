"""
Operand Classification
======================

Decides which addressing mode an operand token selects and turns numeric
operand text into bytes.

Operand syntax is a single whitespace-free token:

    (none)     inherent            NOP
    label      relative            BNE LOOP   (only for branch instructions)
    #n  #$hh   immediate           LDAA #5, LDX #$1000
    n          direct              LDAA 64
    $hhhh      extended            LDAA $1234
    n,X $h,X   indexed by X        LDAA 5,X
    n,Y $h,Y   indexed by Y        LDAA 5,Y

The X/Y suffix wins over the prefix, so ``$10,X`` is indexed, not
extended. Only the leading digits of an operand are read as its value,
which is how ``5,X`` yields the offset 5.

Classification itself never fails. A wrong guess surfaces later as an
unsupported addressing mode for the resolved instruction.
"""

import re
from dataclasses import dataclass
from typing import AbstractSet, Optional

from hc11_asm.cpu import AddressingMode
from hc11_asm.errors import NumericLiteralError


IMMEDIATE_PREFIX = "#"
HEX_PREFIX = "$"

_DECIMAL_PREFIX = re.compile(r"[0-9]+")
_HEX_PREFIX = re.compile(r"[0-9A-Fa-f]+")


@dataclass(frozen=True)
class Operand:
    """
    A classified operand.

    Attributes:
        mode: The addressing mode the token selects
        text: Operand text with the immediate '#' removed; the label name
              for relative operands; "" for inherent
    """
    mode: AddressingMode
    text: str = ""

    @property
    def is_label(self) -> bool:
        return self.mode is AddressingMode.RELATIVE


def classify_operand(token: Optional[str],
                     modes: AbstractSet[AddressingMode]) -> Operand:
    """
    Classify an operand token against an instruction's supported modes.

    Args:
        token: The operand token, or None/"" when the line has no operand
        modes: Addressing modes supported by the resolved instruction

    Returns:
        The classified Operand
    """
    if not token:
        return Operand(AddressingMode.INHERENT)

    first = token[0]
    if (not token.isdigit()
            and not first.isdigit()
            and first not in (IMMEDIATE_PREFIX, HEX_PREFIX)
            and AddressingMode.RELATIVE in modes):
        return Operand(AddressingMode.RELATIVE, token)

    text = token
    if first == IMMEDIATE_PREFIX:
        mode = AddressingMode.IMMEDIATE
        text = token[1:]
    elif first == HEX_PREFIX:
        mode = AddressingMode.EXTENDED
    else:
        mode = AddressingMode.DIRECT

    # Index register suffix overrides the prefix
    if text.endswith("X"):
        mode = AddressingMode.INDEXED_X
    elif text.endswith("Y"):
        mode = AddressingMode.INDEXED_Y

    return Operand(mode, text)


def parse_numeric(text: str) -> int:
    """
    Parse the numeric value at the start of an operand.

    A leading '$' selects hexadecimal, otherwise the text is decimal.
    Parsing stops at the first character that is not a digit of the
    base, so "10,X" gives 10 and "$1F,Y" gives 31.

    Raises:
        NumericLiteralError: If no digits follow the optional '$'
    """
    if text.startswith(HEX_PREFIX):
        match = _HEX_PREFIX.match(text, 1)
        base = 16
    else:
        match = _DECIMAL_PREFIX.match(text)
        base = 10

    if match is None:
        raise NumericLiteralError(text)
    return int(match.group(), base)


def operand_bytes(value: int, size: int) -> bytes:
    """
    Encode an operand value in `size` bytes.

    One byte keeps the low 8 bits; two bytes keep the low 16 bits,
    high byte first. Size 0 encodes nothing.
    """
    if size == 0:
        return b""
    if size == 1:
        return bytes([value & 0xFF])
    if size == 2:
        return bytes([(value >> 8) & 0xFF, value & 0xFF])
    raise ValueError(f"operand size must be 0, 1 or 2, not {size}")
