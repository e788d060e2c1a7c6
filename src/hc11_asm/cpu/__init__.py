"""
hc11-asm CPU Package
====================

CPU architecture definitions for the Motorola 68HC11, shared by the
assembler engine, the catalog and the test program generator.

Modules:
    m68hc11: Addressing modes, opcode encodings, instruction records and
             the complete instruction set table.

Usage:
    from hc11_asm.cpu import (
        AddressingMode,
        Instruction,
        INSTRUCTION_SET,
        ORIGIN,
    )
"""

from hc11_asm.cpu.m68hc11 import (
    # Core types
    AddressingMode,
    OpcodeEncoding,
    Instruction,
    CPUState,
    ExecuteFn,
    # Instruction set data
    INSTRUCTION_SET,
    ORIGIN,
)

__all__ = [
    "AddressingMode",
    "OpcodeEncoding",
    "Instruction",
    "CPUState",
    "ExecuteFn",
    "INSTRUCTION_SET",
    "ORIGIN",
]
