"""
Line Encoder (Pass 1)
=====================

Turns one source line into an EncodedLine: opcode bytes, operand bytes and
the running address after the line. Relative branches get a placeholder
displacement byte that the resolver patches once every label is known.

Line format (fields separated by whitespace):

    [label] MNEMONIC [operand] [ignored text...]
    * comment

A first token that is not a mnemonic is a label, and the mnemonic is then
the second token. Lines whose first token starts with '*' are comments.

All pass-1 state lives in an explicit EncoderState that the caller owns:
the running address and the label table. The encoder mutates that state
and returns the encoded line; nothing is kept between runs.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional

from hc11_asm.assembler.catalog import InstructionCatalog
from hc11_asm.assembler.operands import classify_operand, operand_bytes, parse_numeric
from hc11_asm.cpu import AddressingMode, Instruction
from hc11_asm.errors import (
    AddressingModeError,
    InvalidLabelNameError,
    NumericLiteralError,
    SourceLocation,
    UnknownMnemonicError,
)

logger = logging.getLogger(__name__)


COMMENT_MARKER = "*"

# Placeholder displacement emitted for branches until pass 2
BRANCH_PLACEHOLDER = 0xFF

# The running address wraps within the 64K address space
ADDRESS_MASK = 0xFFFF

_INVALID_LABEL_STARTS = ("#", "$")


# =============================================================================
# Encoded Line
# =============================================================================

@dataclass
class EncodedLine:
    """
    Assembly result for one source line.

    Attributes:
        raw: Source text as written
        line_number: 1-based source line number (0 when unknown)
        label: Label defined on this line ("" if none)
        instruction: Resolved instruction (None for comments and blank lines)
        mode: Chosen addressing mode (None when there is no instruction)
        target: Label referenced by a relative branch ("" otherwise)
        assembled: Emitted opcode and operand bytes
        address: Running address immediately after this line
    """
    raw: str
    line_number: int = 0
    label: str = ""
    instruction: Optional[Instruction] = None
    mode: Optional[AddressingMode] = None
    target: str = ""
    assembled: bytearray = field(default_factory=bytearray)
    address: int = 0

    @property
    def size(self) -> int:
        """Number of bytes this line emits."""
        return len(self.assembled)

    @property
    def start_address(self) -> int:
        """Address of the first byte of this line."""
        return (self.address - len(self.assembled)) & ADDRESS_MASK

    @property
    def is_branch(self) -> bool:
        """True for relative-mode lines awaiting resolution."""
        return self.mode is AddressingMode.RELATIVE

    @property
    def tokens(self) -> list[str]:
        return self.raw.split()


# =============================================================================
# Label Table
# =============================================================================

class LabelTable:
    """
    Label name -> address, filled in while lines are encoded.

    Redefining a label replaces its address (last definition wins).
    Call freeze() once encoding is complete to obtain the read-only view
    the resolver accepts.
    """

    def __init__(self) -> None:
        self._labels: dict[str, int] = {}

    def define(self, name: str, address: int) -> None:
        if name in self._labels and self._labels[name] != address:
            logger.debug(
                f"Label '{name}' redefined: ${self._labels[name]:04X} -> ${address:04X}"
            )
        self._labels[name] = address

    def get(self, name: str) -> Optional[int]:
        return self._labels.get(name)

    def clear(self) -> None:
        self._labels.clear()

    def freeze(self) -> "ResolvedLabels":
        """Snapshot the table for the resolution pass."""
        return ResolvedLabels(self._labels)

    def __contains__(self, name: object) -> bool:
        return name in self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)


class ResolvedLabels(Mapping[str, int]):
    """
    Immutable label table produced after the whole source is encoded.

    The resolver only takes this type, so it can only ever run against a
    table that encoding has finished populating.
    """

    def __init__(self, labels: Mapping[str, int]):
        self._labels = dict(labels)

    def __getitem__(self, name: str) -> int:
        return self._labels[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def __repr__(self) -> str:
        return f"ResolvedLabels({self._labels!r})"


# =============================================================================
# Encoder State
# =============================================================================

@dataclass
class EncoderState:
    """
    Pass-1 state threaded through encode_line.

    Attributes:
        address: Running address (program counter cursor)
        labels: Labels defined so far
        filename: Source name used in error locations
    """
    address: int = 0
    labels: LabelTable = field(default_factory=LabelTable)
    filename: str = "<input>"


# =============================================================================
# Encoding
# =============================================================================

def encode_line(catalog: InstructionCatalog, state: EncoderState,
                text: str, line_number: int = 0) -> EncodedLine:
    """
    Encode a single source line and advance the running address.

    Args:
        catalog: Instruction catalog to resolve mnemonics against
        state: Pass-1 state; its address and labels are updated
        text: Raw source line
        line_number: 1-based line number for diagnostics

    Returns:
        The EncodedLine (its address is the running address after it)

    Raises:
        InvalidLabelNameError: Label starts with a digit, '#' or '$'
        UnknownMnemonicError: No instruction matches
        AddressingModeError: Instruction has no encoding for the operand's mode
        NumericLiteralError: Operand is not a valid number
    """
    line = EncodedLine(raw=text, line_number=line_number, address=state.address)
    location = SourceLocation(state.filename, line_number)

    tokens = text.split()
    if not tokens or tokens[0].startswith(COMMENT_MARKER):
        return line

    instruction = catalog.lookup(tokens[0])
    if instruction is None:
        # Not a mnemonic, so the first field is a label
        label = tokens[0]
        if label.startswith(_INVALID_LABEL_STARTS) or label[0].isdigit():
            raise InvalidLabelNameError(label, location=location, source_line=text)
        line.label = label
        mnemonic = tokens[1] if len(tokens) > 1 else ""
        instruction = catalog.lookup(mnemonic)
        if instruction is None:
            raise UnknownMnemonicError(mnemonic, location=location, source_line=text)
        operand_index = 2
    else:
        operand_index = 1

    token = tokens[operand_index] if len(tokens) > operand_index else None
    operand = classify_operand(token, instruction.modes)

    encoding = catalog.encoding(instruction, operand.mode)
    if encoding is None:
        raise AddressingModeError(
            instruction.mnemonic,
            str(operand.mode),
            location=location,
            source_line=text,
            valid_modes=[str(m) for m in instruction.encodings],
        )

    line.instruction = instruction
    line.mode = operand.mode
    line.assembled.extend(encoding.opcodes)

    if operand.mode is AddressingMode.RELATIVE:
        line.target = operand.text
        line.assembled.append(BRANCH_PLACEHOLDER)
    elif operand.mode is not AddressingMode.INHERENT:
        try:
            value = parse_numeric(operand.text)
        except NumericLiteralError as e:
            raise e.with_context(location, text) from None

        if instruction is catalog.origin:
            state.address = value & ADDRESS_MASK
            logger.debug(f"Line {line_number}: origin set to ${state.address:04X}")
        else:
            line.assembled.extend(operand_bytes(value, encoding.operand_size))

    if instruction is not catalog.origin:
        state.address = (state.address + len(line.assembled)) & ADDRESS_MASK
    line.address = state.address

    if line.label:
        state.labels.define(line.label, line.start_address)

    return line
