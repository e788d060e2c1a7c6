"""
M68HC11 Instruction Set Definition
==================================

This module defines the Motorola 68HC11 instruction set: every supported
mnemonic, the addressing modes it accepts, and for each mode the opcode
byte sequence plus the number of operand bytes that follow it.

The 68HC11 is an 8-bit accumulator machine derived from the 6801. It adds a
second index register (Y), reached through page prefix bytes:

- ``$18`` selects page 2 (most Y-indexed forms, LDY/STY/CPY)
- ``$1A`` selects page 3 (CPD, and the X-indexed forms of LDY/STY/CPY)
- ``$CD`` selects page 4 (Y-indexed forms of LDX/STX/CPX/CPD)

All multi-byte values are big-endian (most significant byte first).

Addressing Modes
----------------
1. **INHERENT**: No operand (e.g., NOP -> $01)
2. **IMMEDIATE**: Literal follows the opcode (LDAA #5 -> $86 $05).
   The 16-bit registers (D, X, Y, S) take a 2-byte literal.
3. **DIRECT**: Page-zero address, 1 byte (LDAA 64 -> $96 $40)
4. **EXTENDED**: Full 16-bit address (LDAA $1234 -> $B6 $12 $34)
5. **INDEXED_X**: X + unsigned 8-bit offset (LDAA 5,X -> $A6 $05)
6. **INDEXED_Y**: Y + unsigned 8-bit offset (LDAA 5,Y -> $18 $A6 $05)
7. **RELATIVE**: Signed 8-bit branch displacement (BRA label -> $20 $rr)

The table is immutable: encodings are frozen dataclasses and each
instruction's mode map is a read-only mapping.

Reference
---------
- Motorola M68HC11 Reference Manual (M68HC11RM/AD), Appendix A
- MC68HC11A8 Programming Reference Guide
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Callable, Mapping, Optional


# =============================================================================
# Addressing Mode Enumeration
# =============================================================================

class AddressingMode(Enum):
    """
    68HC11 addressing modes.

    Each addressing mode determines how the operand is interpreted
    and how many operand bytes follow the opcode.
    """
    INHERENT = auto()   # No operand (NOP, RTS)
    IMMEDIATE = auto()  # #value (literal)
    DIRECT = auto()     # Page-zero address ($00-$FF)
    EXTENDED = auto()   # Full 16-bit address
    INDEXED_X = auto()  # offset,X
    INDEXED_Y = auto()  # offset,Y
    RELATIVE = auto()   # Branch displacement (signed 8-bit)

    def __str__(self) -> str:
        """Return human-readable name for error messages."""
        return {
            AddressingMode.INHERENT: "inherent",
            AddressingMode.IMMEDIATE: "immediate",
            AddressingMode.DIRECT: "direct",
            AddressingMode.EXTENDED: "extended",
            AddressingMode.INDEXED_X: "indexed-X",
            AddressingMode.INDEXED_Y: "indexed-Y",
            AddressingMode.RELATIVE: "relative",
        }[self]


# =============================================================================
# Opcode Encoding
# =============================================================================

@dataclass(frozen=True)
class OpcodeEncoding:
    """
    Encoding of one (mnemonic, addressing mode) pair.

    Attributes:
        opcodes: Prefix and opcode bytes, emitted verbatim
        operand_size: Number of operand bytes that follow (0, 1 or 2)
    """
    opcodes: tuple[int, ...]
    operand_size: int

    @property
    def size(self) -> int:
        """Total instruction size in bytes."""
        return len(self.opcodes) + self.operand_size

    def __repr__(self) -> str:
        ops = " ".join(f"${b:02X}" for b in self.opcodes) or "-"
        return f"OpcodeEncoding({ops}, operand_size={self.operand_size})"


# =============================================================================
# CPU State (execution hook target)
# =============================================================================

@dataclass
class CPUState:
    """
    Register file handed to an instruction's execution hook.

    The assembler never executes code; this exists so that instruction
    semantics can be attached to catalog entries later on.
    """
    a: int = 0
    b: int = 0
    ix: int = 0
    iy: int = 0
    sp: int = 0
    pc: int = 0
    ccr: int = 0

    @property
    def d(self) -> int:
        """The 16-bit D register (A:B)."""
        return (self.a << 8) | self.b

    @d.setter
    def d(self, value: int) -> None:
        self.a = (value >> 8) & 0xFF
        self.b = value & 0xFF


ExecuteFn = Callable[[CPUState], None]


# =============================================================================
# Instruction
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    A mnemonic together with every addressing mode it supports.

    Attributes:
        mnemonic: Instruction name, matched case-sensitively
        description: Human-readable description
        encodings: Addressing mode -> OpcodeEncoding (read-only)
        execute: Optional execution semantics hook
    """
    mnemonic: str
    description: str
    encodings: Mapping[AddressingMode, OpcodeEncoding]
    execute: Optional[ExecuteFn] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        # Freeze the mode map so the catalog cannot be mutated at runtime
        object.__setattr__(
            self, "encodings", MappingProxyType(dict(self.encodings))
        )

    def __hash__(self) -> int:
        return hash(self.mnemonic)

    @property
    def modes(self) -> frozenset[AddressingMode]:
        """Set of supported addressing modes."""
        return frozenset(self.encodings)

    def supports(self, mode: AddressingMode) -> bool:
        """Return True if this instruction has an encoding for `mode`."""
        return mode in self.encodings

    def run(self, state: CPUState) -> None:
        """
        Apply this instruction's semantics to `state`.

        Raises:
            NotImplementedError: If the instruction carries no semantics
        """
        if self.execute is None:
            raise NotImplementedError(f"no execution semantics for {self.mnemonic}")
        self.execute(state)


# =============================================================================
# Table Builders
# =============================================================================
# Most 68HC11 opcode groups are laid out on a fixed grid: for an ALU
# operation whose immediate opcode is $n6, the direct form is $n6+$10, the
# X-indexed form $n6+$20 and the extended form $n6+$30. The Y-indexed form
# reuses the X-indexed opcode behind a page prefix. The helpers below encode
# that grid so the table stays readable.
# =============================================================================

_M = AddressingMode


def _enc(*opcodes: int, operand: int = 0) -> OpcodeEncoding:
    return OpcodeEncoding(tuple(opcodes), operand)


def _prefixed(prefix: Optional[int], opcode: int, operand: int) -> OpcodeEncoding:
    if prefix is None:
        return _enc(opcode, operand=operand)
    return _enc(prefix, opcode, operand=operand)


def _inherent(mnemonic: str, description: str, *opcodes: int,
              execute: Optional[ExecuteFn] = None) -> Instruction:
    """Register-only instruction."""
    return Instruction(mnemonic, description, {_M.INHERENT: _enc(*opcodes)}, execute)


def _branch(mnemonic: str, description: str, opcode: int) -> Instruction:
    """PC-relative branch with a 1-byte signed displacement."""
    return Instruction(mnemonic, description, {_M.RELATIVE: _enc(opcode, operand=1)})


def _memory(mnemonic: str, description: str, base: int, *,
            immediate: bool = True,
            word: bool = False,
            prefix: Optional[int] = None,
            x_prefix: Optional[int] = None,
            y_prefix: int = 0x18) -> Instruction:
    """
    Build an instruction laid out on the standard opcode grid.

    Args:
        base: Opcode of the immediate form (or where it would sit)
        immediate: Whether the immediate form exists (stores and JSR lack it)
        word: True for 16-bit registers (2-byte immediate literal)
        prefix: Page prefix used by the immediate, direct and extended forms
        x_prefix: Page prefix of the X-indexed form (defaults to `prefix`)
        y_prefix: Page prefix of the Y-indexed form
    """
    if x_prefix is None:
        x_prefix = prefix
    encodings = {}
    if immediate:
        encodings[_M.IMMEDIATE] = _prefixed(prefix, base, 2 if word else 1)
    encodings[_M.DIRECT] = _prefixed(prefix, base + 0x10, 1)
    encodings[_M.EXTENDED] = _prefixed(prefix, base + 0x30, 2)
    encodings[_M.INDEXED_X] = _prefixed(x_prefix, base + 0x20, 1)
    encodings[_M.INDEXED_Y] = _prefixed(y_prefix, base + 0x20, 1)
    return Instruction(mnemonic, description, encodings)


def _modify(mnemonic: str, description: str, base: int) -> Instruction:
    """Read-modify-write memory operation (indexed $6n / extended $7n)."""
    return Instruction(mnemonic, description, {
        _M.EXTENDED: _enc(base + 0x10, operand=2),
        _M.INDEXED_X: _enc(base, operand=1),
        _M.INDEXED_Y: _enc(0x18, base, operand=1),
    })


def _bit(mnemonic: str, description: str, direct: int, indexed: int) -> Instruction:
    """BSET/BCLR: address (or offset) byte followed by the mask byte."""
    return Instruction(mnemonic, description, {
        _M.DIRECT: _enc(direct, operand=2),
        _M.INDEXED_X: _enc(indexed, operand=2),
        _M.INDEXED_Y: _enc(0x18, indexed, operand=2),
    })


def _add_accumulators(state: CPUState) -> None:
    state.a = (state.a + state.b) & 0xFF


# =============================================================================
# Origin Pseudo-Instruction
# =============================================================================
# ORG sets the running address instead of emitting bytes. Its single
# extended-mode encoding has no opcode bytes; the engine recognises it by
# identity, never by name.
# =============================================================================

ORIGIN = Instruction("ORG", "Set origin", {_M.EXTENDED: _enc(operand=2)})


# =============================================================================
# Instruction Set
# =============================================================================

INSTRUCTION_SET: tuple[Instruction, ...] = (
    ORIGIN,

    # =========================================================================
    # INHERENT INSTRUCTIONS
    # =========================================================================

    # Control
    _inherent("TEST", "Test mode (factory test only)", 0x00),
    _inherent("NOP", "No operation", 0x01),
    _inherent("IDIV", "Integer divide D/X", 0x02),
    _inherent("FDIV", "Fractional divide D/X", 0x03),
    _inherent("STOP", "Stop internal clocks", 0xCF),
    _inherent("SWI", "Software interrupt", 0x3F),
    _inherent("WAI", "Wait for interrupt", 0x3E),
    _inherent("RTS", "Return from subroutine", 0x39),
    _inherent("RTI", "Return from interrupt", 0x3B),

    # Condition codes
    _inherent("TAP", "Transfer A to CCR", 0x06),
    _inherent("TPA", "Transfer CCR to A", 0x07),
    _inherent("CLV", "Clear overflow flag", 0x0A),
    _inherent("SEV", "Set overflow flag", 0x0B),
    _inherent("CLC", "Clear carry flag", 0x0C),
    _inherent("SEC", "Set carry flag", 0x0D),
    _inherent("CLI", "Clear interrupt mask", 0x0E),
    _inherent("SEI", "Set interrupt mask", 0x0F),

    # Accumulator arithmetic
    _inherent("ABA", "Add accumulators", 0x1B, execute=_add_accumulators),
    _inherent("SBA", "Subtract accumulators", 0x10),
    _inherent("CBA", "Compare accumulators", 0x11),
    _inherent("TAB", "Transfer A to B", 0x16),
    _inherent("TBA", "Transfer B to A", 0x17),
    _inherent("DAA", "Decimal adjust A", 0x19),
    _inherent("MUL", "Multiply A by B into D", 0x3D),

    # Double accumulator
    _inherent("LSRD", "Logical shift right D", 0x04),
    _inherent("ASLD", "Arithmetic shift left D", 0x05),
    _inherent("LSLD", "Logical shift left D", 0x05),     # Alias for ASLD

    # Index registers
    _inherent("INX", "Increment X", 0x08),
    _inherent("DEX", "Decrement X", 0x09),
    _inherent("INY", "Increment Y", 0x18, 0x08),
    _inherent("DEY", "Decrement Y", 0x18, 0x09),
    _inherent("ABX", "Add B to X", 0x3A),
    _inherent("ABY", "Add B to Y", 0x18, 0x3A),
    _inherent("XGDX", "Exchange D with X", 0x8F),
    _inherent("XGDY", "Exchange D with Y", 0x18, 0x8F),

    # Stack
    _inherent("TSX", "Transfer SP to X", 0x30),
    _inherent("TSY", "Transfer SP to Y", 0x18, 0x30),
    _inherent("TXS", "Transfer X to SP", 0x35),
    _inherent("TYS", "Transfer Y to SP", 0x18, 0x35),
    _inherent("INS", "Increment SP", 0x31),
    _inherent("DES", "Decrement SP", 0x34),
    _inherent("PSHA", "Push A", 0x36),
    _inherent("PSHB", "Push B", 0x37),
    _inherent("PSHX", "Push X", 0x3C),
    _inherent("PSHY", "Push Y", 0x18, 0x3C),
    _inherent("PULA", "Pull A", 0x32),
    _inherent("PULB", "Pull B", 0x33),
    _inherent("PULX", "Pull X", 0x38),
    _inherent("PULY", "Pull Y", 0x18, 0x38),

    # Accumulator A
    _inherent("NEGA", "Negate A", 0x40),
    _inherent("COMA", "Complement A", 0x43),
    _inherent("LSRA", "Logical shift right A", 0x44),
    _inherent("RORA", "Rotate right A", 0x46),
    _inherent("ASRA", "Arithmetic shift right A", 0x47),
    _inherent("ASLA", "Arithmetic shift left A", 0x48),
    _inherent("LSLA", "Logical shift left A", 0x48),     # Alias for ASLA
    _inherent("ROLA", "Rotate left A", 0x49),
    _inherent("DECA", "Decrement A", 0x4A),
    _inherent("INCA", "Increment A", 0x4C),
    _inherent("TSTA", "Test A", 0x4D),
    _inherent("CLRA", "Clear A", 0x4F),

    # Accumulator B
    _inherent("NEGB", "Negate B", 0x50),
    _inherent("COMB", "Complement B", 0x53),
    _inherent("LSRB", "Logical shift right B", 0x54),
    _inherent("RORB", "Rotate right B", 0x56),
    _inherent("ASRB", "Arithmetic shift right B", 0x57),
    _inherent("ASLB", "Arithmetic shift left B", 0x58),
    _inherent("LSLB", "Logical shift left B", 0x58),     # Alias for ASLB
    _inherent("ROLB", "Rotate left B", 0x59),
    _inherent("DECB", "Decrement B", 0x5A),
    _inherent("INCB", "Increment B", 0x5C),
    _inherent("TSTB", "Test B", 0x5D),
    _inherent("CLRB", "Clear B", 0x5F),

    # =========================================================================
    # BRANCH INSTRUCTIONS (relative addressing)
    # Displacement is relative to the address following the branch.
    # =========================================================================

    _branch("BRA", "Branch always", 0x20),
    _branch("BRN", "Branch never", 0x21),
    _branch("BHI", "Branch if higher (unsigned)", 0x22),
    _branch("BLS", "Branch if lower or same (unsigned)", 0x23),
    _branch("BCC", "Branch if carry clear", 0x24),
    _branch("BHS", "Branch if higher or same (unsigned)", 0x24),  # Alias for BCC
    _branch("BCS", "Branch if carry set", 0x25),
    _branch("BLO", "Branch if lower (unsigned)", 0x25),           # Alias for BCS
    _branch("BNE", "Branch if not equal", 0x26),
    _branch("BEQ", "Branch if equal", 0x27),
    _branch("BVC", "Branch if overflow clear", 0x28),
    _branch("BVS", "Branch if overflow set", 0x29),
    _branch("BPL", "Branch if plus", 0x2A),
    _branch("BMI", "Branch if minus", 0x2B),
    _branch("BGE", "Branch if greater than or equal (signed)", 0x2C),
    _branch("BLT", "Branch if less than (signed)", 0x2D),
    _branch("BGT", "Branch if greater than (signed)", 0x2E),
    _branch("BLE", "Branch if less than or equal (signed)", 0x2F),
    _branch("BSR", "Branch to subroutine", 0x8D),

    # =========================================================================
    # ACCUMULATOR A OPERATIONS
    # =========================================================================

    _memory("SUBA", "Subtract memory from A", 0x80),
    _memory("CMPA", "Compare A to memory", 0x81),
    _memory("SBCA", "Subtract with carry from A", 0x82),
    _memory("ANDA", "AND A with memory", 0x84),
    _memory("BITA", "Bit(s) test A with memory", 0x85),
    _memory("LDAA", "Load A", 0x86),
    _memory("STAA", "Store A", 0x87, immediate=False),
    _memory("EORA", "Exclusive OR A with memory", 0x88),
    _memory("ADCA", "Add with carry to A", 0x89),
    _memory("ORAA", "OR A with memory", 0x8A),
    _memory("ADDA", "Add memory to A", 0x8B),

    # =========================================================================
    # ACCUMULATOR B OPERATIONS
    # =========================================================================

    _memory("SUBB", "Subtract memory from B", 0xC0),
    _memory("CMPB", "Compare B to memory", 0xC1),
    _memory("SBCB", "Subtract with carry from B", 0xC2),
    _memory("ANDB", "AND B with memory", 0xC4),
    _memory("BITB", "Bit(s) test B with memory", 0xC5),
    _memory("LDAB", "Load B", 0xC6),
    _memory("STAB", "Store B", 0xC7, immediate=False),
    _memory("EORB", "Exclusive OR B with memory", 0xC8),
    _memory("ADCB", "Add with carry to B", 0xC9),
    _memory("ORAB", "OR B with memory", 0xCA),
    _memory("ADDB", "Add memory to B", 0xCB),

    # =========================================================================
    # 16-BIT OPERATIONS (D = A:B, X, Y, SP)
    # =========================================================================

    _memory("SUBD", "Subtract 16-bit from D", 0x83, word=True),
    _memory("ADDD", "Add 16-bit to D", 0xC3, word=True),
    _memory("LDD", "Load D", 0xCC, word=True),
    _memory("STD", "Store D", 0xCD, immediate=False),
    _memory("CPD", "Compare D to memory", 0x83, word=True,
            prefix=0x1A, y_prefix=0xCD),

    _memory("LDX", "Load X", 0xCE, word=True, y_prefix=0xCD),
    _memory("STX", "Store X", 0xCF, immediate=False, y_prefix=0xCD),
    _memory("CPX", "Compare X to memory", 0x8C, word=True, y_prefix=0xCD),

    _memory("LDY", "Load Y", 0xCE, word=True, prefix=0x18, x_prefix=0x1A),
    _memory("STY", "Store Y", 0xCF, immediate=False, prefix=0x18, x_prefix=0x1A),
    _memory("CPY", "Compare Y to memory", 0x8C, word=True, prefix=0x18, x_prefix=0x1A),

    _memory("LDS", "Load stack pointer", 0x8E, word=True),
    _memory("STS", "Store stack pointer", 0x8F, immediate=False),

    # =========================================================================
    # READ-MODIFY-WRITE MEMORY OPERATIONS
    # =========================================================================

    _modify("NEG", "Negate memory", 0x60),
    _modify("COM", "Complement memory", 0x63),
    _modify("LSR", "Logical shift right memory", 0x64),
    _modify("ROR", "Rotate right memory", 0x66),
    _modify("ASR", "Arithmetic shift right memory", 0x67),
    _modify("ASL", "Arithmetic shift left memory", 0x68),
    _modify("LSL", "Logical shift left memory", 0x68),   # Alias for ASL
    _modify("ROL", "Rotate left memory", 0x69),
    _modify("DEC", "Decrement memory", 0x6A),
    _modify("INC", "Increment memory", 0x6C),
    _modify("TST", "Test memory", 0x6D),
    _modify("CLR", "Clear memory", 0x6F),

    # =========================================================================
    # JUMPS AND BIT MANIPULATION
    # =========================================================================

    _modify("JMP", "Jump", 0x6E),
    _memory("JSR", "Jump to subroutine", 0x8D, immediate=False),

    _bit("BSET", "Set bit(s) in memory", 0x14, 0x1C),
    _bit("BCLR", "Clear bit(s) in memory", 0x15, 0x1D),
)
