"""
Instruction Catalog
===================

The InstructionCatalog is the immutable registry the assembler consults
for every line: mnemonic lookup, addressing mode support and the opcode
encoding of each (instruction, mode) pair.

A catalog is an explicit value. The engine receives one at construction
time, so several engines can share the default catalog while tests inject
a reduced one:

    >>> from hc11_asm.assembler.catalog import InstructionCatalog
    >>> from hc11_asm.cpu import AddressingMode
    >>> catalog = InstructionCatalog.default()
    >>> nop = catalog.lookup("NOP")
    >>> catalog.encoding(nop, AddressingMode.INHERENT).opcodes
    (1,)

The catalog is validated once when it is built. A duplicate mnemonic or an
inconsistent encoding raises CatalogError then, never during assembly.
"""

import logging
from collections import defaultdict
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Iterator, Optional

from hc11_asm.cpu import AddressingMode, Instruction, INSTRUCTION_SET, ORIGIN
from hc11_asm.errors import CatalogError

logger = logging.getLogger(__name__)


# Operand size every encoding of these modes must declare
_FIXED_OPERAND_SIZES = {
    AddressingMode.INHERENT: 0,
    AddressingMode.RELATIVE: 1,
}


class InstructionCatalog:
    """
    Read-only registry of instructions keyed by mnemonic.

    Args:
        instructions: Instruction records; mnemonics must be unique
        origin: The origin pseudo-instruction. Defaults to ORIGIN when it
                is part of `instructions`.

    Raises:
        CatalogError: If the instructions are inconsistent
    """

    def __init__(self, instructions: Iterable[Instruction],
                 origin: Optional[Instruction] = None):
        by_mnemonic: dict[str, Instruction] = {}
        for instruction in instructions:
            if instruction.mnemonic in by_mnemonic:
                raise CatalogError(f"duplicate mnemonic '{instruction.mnemonic}'")
            by_mnemonic[instruction.mnemonic] = instruction

        if origin is None and by_mnemonic.get(ORIGIN.mnemonic) is ORIGIN:
            origin = ORIGIN
        if origin is not None and by_mnemonic.get(origin.mnemonic) is not origin:
            raise CatalogError(f"origin instruction '{origin.mnemonic}' is not in the catalog")

        self._instructions = MappingProxyType(by_mnemonic)
        self._origin = origin

        for instruction in by_mnemonic.values():
            self._validate(instruction)

        # Reverse index: opcode byte sequence -> [(instruction, mode)]
        decode: defaultdict[tuple[int, ...], list] = defaultdict(list)
        for instruction in by_mnemonic.values():
            for mode, encoding in instruction.encodings.items():
                if encoding.opcodes:
                    decode[encoding.opcodes].append((instruction, mode))
        self._decode = {key: tuple(value) for key, value in decode.items()}

        logger.debug(f"Built catalog with {len(by_mnemonic)} instructions")

    def _validate(self, instruction: Instruction) -> None:
        if not instruction.encodings:
            raise CatalogError(f"'{instruction.mnemonic}' has no addressing modes")

        for mode, encoding in instruction.encodings.items():
            where = f"'{instruction.mnemonic}' ({mode})"
            if encoding.operand_size not in (0, 1, 2):
                raise CatalogError(
                    f"{where}: operand size {encoding.operand_size} not in 0..2"
                )
            expected = _FIXED_OPERAND_SIZES.get(mode)
            if expected is not None and encoding.operand_size != expected:
                raise CatalogError(
                    f"{where}: {mode} encodings take {expected} operand byte(s)"
                )
            if not encoding.opcodes and instruction is not self._origin:
                raise CatalogError(f"{where}: no opcode bytes")
            if len(encoding.opcodes) > 2:
                raise CatalogError(f"{where}: more than two opcode bytes")
            if any(not 0 <= b <= 0xFF for b in encoding.opcodes):
                raise CatalogError(f"{where}: opcode byte out of range")

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def default(cls) -> "InstructionCatalog":
        """Return the full 68HC11 catalog (built once, then shared)."""
        return _default_catalog()

    # =========================================================================
    # Lookup
    # =========================================================================

    @property
    def origin(self) -> Optional[Instruction]:
        """The origin-setting pseudo-instruction, if this catalog has one."""
        return self._origin

    @property
    def mnemonics(self) -> frozenset[str]:
        """All mnemonics in the catalog."""
        return frozenset(self._instructions)

    def lookup(self, mnemonic: str) -> Optional[Instruction]:
        """
        Look up an instruction by exact, case-sensitive mnemonic.

        Returns:
            The Instruction, or None if the mnemonic is not in the catalog
        """
        return self._instructions.get(mnemonic)

    def supports(self, instruction: Instruction, mode: AddressingMode) -> bool:
        """Return True if `instruction` has an encoding for `mode`."""
        return instruction.supports(mode)

    def encoding(self, instruction: Instruction, mode: AddressingMode):
        """
        Get the opcode encoding for an (instruction, mode) pair.

        Returns:
            OpcodeEncoding, or None if the mode is not supported
        """
        return instruction.encodings.get(mode)

    def decode(self, opcodes: Iterable[int]) -> tuple[tuple[Instruction, AddressingMode], ...]:
        """
        Reverse lookup: which (instruction, mode) pairs emit these opcode bytes.

        Aliases (BHS/BCC, LSL/ASL, ...) share opcodes and are all returned.

        Args:
            opcodes: Exact prefix + opcode byte sequence

        Returns:
            Tuple of (instruction, mode) pairs, empty if none match
        """
        return self._decode.get(tuple(opcodes), ())

    def __contains__(self, mnemonic: object) -> bool:
        return mnemonic in self._instructions

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._instructions.values())

    def __len__(self) -> int:
        return len(self._instructions)

    def __repr__(self) -> str:
        return f"InstructionCatalog({len(self)} instructions)"


@lru_cache(maxsize=None)
def _default_catalog() -> InstructionCatalog:
    return InstructionCatalog(INSTRUCTION_SET, origin=ORIGIN)
