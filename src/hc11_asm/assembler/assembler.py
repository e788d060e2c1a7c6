"""
68HC11 Assembler - Main Interface
=================================

This module provides the Assembler class, the primary interface for
assembling 68HC11 source text. It runs the two phases in order and keeps
the encoded lines for listing and output.

Example Usage
-------------
>>> from hc11_asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> lines = asm.assemble('''
...         ORG $3000
... START   LDAA #5
...         BRA START
... ''')
>>> print(asm.get_listing())
>>> code = asm.get_code()

Assembly Process
----------------
1. **Encoding**: every line is encoded in source order. The running
   address advances by each line's size (ORG sets it instead) and label
   definitions are recorded. Branches get a placeholder displacement.
2. **Resolution**: the label table is frozen and every branch's
   displacement is computed and patched.

Errors are fatal: the first one aborts the run. Lines encoded before the
failure remain available through ``lines`` for diagnostics.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from hc11_asm.assembler.catalog import InstructionCatalog
from hc11_asm.assembler.encoder import EncodedLine, EncoderState, encode_line
from hc11_asm.assembler.listing import format_listing, format_symbols
from hc11_asm.assembler.resolver import resolve_branches
from hc11_asm.errors import AssemblerError, AssemblyPhase

logger = logging.getLogger(__name__)


# =============================================================================
# Assembly Result
# =============================================================================

@dataclass
class AssemblyResult:
    """
    Outcome of one assembly run, for callers that prefer values over
    exceptions.

    Attributes:
        lines: Encoded lines (complete on success, partial on failure)
        error: The fatal error, or None on success
    """
    lines: list[EncodedLine] = field(default_factory=list)
    error: Optional[AssemblerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def phase(self) -> Optional[AssemblyPhase]:
        """Phase the run failed in, or None on success."""
        return self.error.phase if self.error else None


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Two-pass 68HC11 assembler.

    Each call to assemble() starts from address 0 with an empty label
    table. Instances are independent: they may share a catalog, but never
    share run state.

    Attributes:
        catalog: Instruction catalog used to resolve mnemonics
        verbose: If True, log progress at INFO level
    """

    def __init__(self, catalog: InstructionCatalog | None = None,
                 verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            catalog: Instruction catalog (default: full 68HC11 set)
            verbose: Log a summary of each run
        """
        self.catalog = catalog if catalog is not None else InstructionCatalog.default()
        self.verbose = verbose
        self._state = EncoderState()
        self._lines: list[EncodedLine] = []
        self._labels: dict[str, int] = {}

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def reset(self) -> None:
        """Discard encoded lines and labels from the previous run."""
        self._state = EncoderState()
        self._lines = []
        self._labels = {}

    def assemble(self, source: str, filename: str = "<input>") -> list[EncodedLine]:
        """
        Assemble source text.

        Args:
            source: Multi-line assembly source
            filename: Virtual filename for error messages

        Returns:
            Encoded lines in source order

        Raises:
            AssemblerError: On the first fatal error (see ``kind``/``phase``)
        """
        self.reset()
        self._state.filename = filename

        # Pass 1: encoding
        for number, text in enumerate(source.splitlines(), start=1):
            self._lines.append(encode_line(self.catalog, self._state, text, number))

        logger.debug(
            f"Encoded {len(self._lines)} lines, {len(self._state.labels)} labels, "
            f"end address ${self._state.address:04X}"
        )

        # Pass 2: branch resolution against the completed table
        labels = self._state.labels.freeze()
        branches = resolve_branches(self._lines, labels, filename)
        self._labels = dict(labels)

        log = logger.info if self.verbose else logger.debug
        log(f"Assembled {filename}: {len(self.get_code())} bytes, {branches} branches resolved")

        return self.lines

    def try_assemble(self, source: str, filename: str = "<input>") -> AssemblyResult:
        """
        Assemble source text, returning the error instead of raising it.

        Returns:
            AssemblyResult with the lines and, on failure, the error
        """
        try:
            lines = self.assemble(source, filename)
        except AssemblerError as e:
            logger.debug(f"Assembly failed in {e.phase} phase: {e.message}")
            return AssemblyResult(lines=self.lines, error=e)
        return AssemblyResult(lines=lines)

    def assemble_file(self, filepath: str | Path) -> list[EncodedLine]:
        """
        Assemble a source file.

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If the source file does not exist
        """
        filepath = Path(filepath)
        logger.debug(f"Assembling {filepath}")
        return self.assemble(filepath.read_text(), str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    @property
    def lines(self) -> list[EncodedLine]:
        """Encoded lines of the current (or failed) run."""
        return list(self._lines)

    def get_code(self) -> bytes:
        """
        Get the emitted bytes of every line, in source order.

        ORG does not pad: bytes placed after an ORG follow the previous
        bytes directly. Use the listing for address information.
        """
        return b"".join(bytes(line.assembled) for line in self._lines)

    def get_origin(self) -> int:
        """Start address of the first line that emits bytes (0 if none)."""
        for line in self._lines:
            if line.assembled:
                return line.start_address
        return 0

    def get_symbols(self) -> dict[str, int]:
        """
        Get the label table of the last successful run.

        Returns:
            Dictionary mapping label names to addresses
        """
        return dict(self._labels)

    def get_listing(self) -> str:
        """Get the assembly listing as a string."""
        return format_listing(self._lines)

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing to a file."""
        Path(filepath).write_text(self.get_listing() + "\n")
        logger.debug(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write the label table.

        Format: name $address (one per line, by address)
        """
        Path(filepath).write_text(format_symbols(self._labels) + "\n")
        logger.debug(f"Wrote symbols to {filepath}")

    def write_binary(self, filepath: str | Path) -> None:
        """Write the raw emitted bytes (no header, no padding)."""
        code = self.get_code()
        Path(filepath).write_bytes(code)
        logger.debug(f"Wrote {len(code)} bytes to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> list[EncodedLine]:
    """
    Convenience function to assemble source text.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble(source, filename)


def assemble_file(filepath: str | Path) -> list[EncodedLine]:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_file(filepath)
