"""
hc11-asm Error Hierarchy
========================

This module defines the exception hierarchy for the 68HC11 assembler.
All exceptions inherit from Hc11Error, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Hc11Error (base)
├── CatalogError - inconsistent instruction catalog (build time)
└── AssemblerError (assembly run)
    ├── InvalidLabelNameError - label starts with a digit, '#' or '$'
    ├── UnknownMnemonicError - no catalog entry for the mnemonic
    ├── AddressingModeError - instruction has no encoding for the mode
    ├── NumericLiteralError - operand is not a valid number
    ├── UndefinedSymbolError - branch to a label that is never defined
    └── BranchRangeError - branch displacement outside -127..127

Every AssemblerError carries a structured ``kind`` (ErrorKind), the
``phase`` in which it was raised (AssemblyPhase) and, when known, the
offending source line. Callers can dispatch on ``kind`` exhaustively
instead of parsing messages.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Hc11Error(Exception):
    """
    Base exception for all hc11-asm errors.

        try:
            assembler.assemble(source)
        except Hc11Error as e:
            print(f"Error: {e}")
    """
    pass


class CatalogError(Hc11Error):
    """
    Instruction catalog failed validation.

    Raised while constructing an InstructionCatalog, never during an
    assembly run: duplicate mnemonics, operand sizes outside 0..2, or
    inherent/relative encodings with the wrong operand size.
    """
    pass


# =============================================================================
# Structured Error Classification
# =============================================================================

class ErrorKind(Enum):
    """The fatal error taxonomy of an assembly run."""
    INVALID_LABEL_NAME = "invalid label name"
    UNKNOWN_MNEMONIC = "invalid instruction mnemonic"
    UNSUPPORTED_ADDRESSING_MODE = "invalid addressing mode"
    UNDEFINED_LABEL = "invalid label"
    BRANCH_OUT_OF_RANGE = "branch out of range"
    MALFORMED_NUMERIC_LITERAL = "malformed numeric literal"


class AssemblyPhase(Enum):
    """The two sequential phases of an assembly run."""
    ENCODING = "encoding"
    RESOLUTION = "resolution"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' (column omitted when unknown)."""
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Hc11Error):
    """
    Base exception for all errors raised during an assembly run.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
        phase: Phase of the run that raised the error
        kind: Structured classification (class attribute)
    """

    kind: Optional[ErrorKind] = None
    default_phase: AssemblyPhase = AssemblyPhase.ENCODING

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        phase: Optional[AssemblyPhase] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        self.phase = phase or self.default_phase
        super().__init__(self._format_message())

    def with_context(
        self,
        location: SourceLocation,
        source_line: str,
    ) -> "AssemblerError":
        """
        Attach the offending line to an error raised without it.

        Helpers such as the numeric literal parser know nothing about
        lines; the encoder calls this before letting the error propagate.
        """
        self.location = location
        self.source_line = source_line
        self.args = (self._format_message(),)
        return self

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.asm:3: error: undefined label 'LOPP'
                  BNE LOPP
            hint: did you mean 'LOOP'?
        """
        parts = []

        # Location prefix
        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        # Hint for fixing
        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class InvalidLabelNameError(AssemblerError):
    """
    A token in label position starts with a digit, '#' or '$'.

    Example:
        9FOO NOP   ; Error: labels cannot start with a digit
    """

    kind = ErrorKind.INVALID_LABEL_NAME

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        super().__init__(
            f"invalid label name '{label}'",
            location=location,
            hint="labels must not start with a digit, '#' or '$'",
            source_line=source_line,
        )


class UnknownMnemonicError(AssemblerError):
    """
    Neither the first token nor (after a label) the second token names
    a catalog instruction.
    """

    kind = ErrorKind.UNKNOWN_MNEMONIC

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        hint = None
        if mnemonic and mnemonic != mnemonic.upper():
            hint = "mnemonics are case-sensitive; use upper case"
        super().__init__(
            f"invalid instruction mnemonic '{mnemonic}'" if mnemonic
            else "invalid instruction mnemonic (missing after label)",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class AddressingModeError(AssemblerError):
    """
    Invalid addressing mode for instruction.

    Raised when the classified operand selects a mode the instruction has
    no encoding for. For example, STAA with immediate mode (#) is invalid
    because you cannot store to a literal value.

    Example:
        STAA #$41  ; Error: STAA doesn't support immediate mode
    """

    kind = ErrorKind.UNSUPPORTED_ADDRESSING_MODE

    def __init__(
        self,
        mnemonic: str,
        mode: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_modes: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.mode = mode
        self.valid_modes = valid_modes or []

        hint = None
        if self.valid_modes:
            modes_str = ", ".join(self.valid_modes)
            hint = f"{mnemonic} supports: {modes_str}"

        super().__init__(
            f"'{mnemonic}' does not support {mode} addressing mode",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class NumericLiteralError(AssemblerError):
    """
    Operand text is not a valid decimal or hexadecimal number.

    Examples:
        LDAA #$G1    ; no hex digits after '$'
        LDAA ,X      ; no offset digits before ',X'
    """

    kind = ErrorKind.MALFORMED_NUMERIC_LITERAL

    def __init__(
        self,
        text: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            f"malformed numeric literal '{text}'",
            location=location,
            hint="use decimal digits, or '$' followed by hex digits",
            source_line=source_line,
        )


class UndefinedSymbolError(AssemblerError):
    """
    Branch to a label that no line defines.

    Raised during the resolution pass. The resolver suggests
    similarly-named labels, helping to catch typos.
    """

    kind = ErrorKind.UNDEFINED_LABEL
    default_phase = AssemblyPhase.RESOLUTION

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        # Auto-generate hint if similar symbols found
        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined label '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class BranchRangeError(AssemblerError):
    """
    Branch target is out of range.

    Relative branches carry a signed 8-bit displacement measured from the
    instruction following the branch. Displacements outside -127..+127
    are rejected.

    When this error occurs, consider:
    1. Moving code closer together
    2. Using JMP instead of the branch (loses the condition)
    3. Branching to a nearby JMP trampoline
    """

    kind = ErrorKind.BRANCH_OUT_OF_RANGE
    default_phase = AssemblyPhase.RESOLUTION

    def __init__(
        self,
        target: str,
        offset: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.target = target
        self.offset = offset

        direction = "forward" if offset > 0 else "backward"
        hint = (
            f"branch offset is {offset}, but range is -127 to +127; "
            f"consider using JMP for {direction} references"
        )

        super().__init__(
            f"branch target '{target}' is out of range (offset: {offset})",
            location=location,
            hint=hint,
            source_line=source_line,
        )
