"""
hc11-asm - Two-Pass Assembler for the Motorola 68HC11
=====================================================

This package assembles 68HC11 mnemonic source into machine code bytes and
an address-annotated listing.

Main Components
---------------
- **assembler**: catalog, operand classifier, two-pass engine, listing
- **cpu**: 68HC11 addressing modes and the instruction set table
- **cli**: the ``hc11asm`` and ``hc11testprog`` command-line tools

Quick Start
-----------
    >>> from hc11_asm import Assembler
    >>> asm = Assembler()
    >>> lines = asm.assemble('''
    ...         ORG $3000
    ... START   NOP
    ...         BRA START
    ... ''')
    >>> print(asm.get_listing())

Or from the command line:
    $ hc11asm program.asm -l program.lst -o program.bin

Reference Documentation
-----------------------
- Motorola M68HC11 Reference Manual (M68HC11RM/AD)
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from hc11_asm.assembler import (
    Assembler,
    AssemblyResult,
    EncodedLine,
    InstructionCatalog,
    assemble,
    assemble_file,
    generate_test_program,
)
from hc11_asm.cpu import (
    AddressingMode,
    CPUState,
    Instruction,
    INSTRUCTION_SET,
    OpcodeEncoding,
    ORIGIN,
)
from hc11_asm.errors import (
    Hc11Error,
    CatalogError,
    AssemblerError,
    AssemblyPhase,
    ErrorKind,
    SourceLocation,
    InvalidLabelNameError,
    UnknownMnemonicError,
    AddressingModeError,
    NumericLiteralError,
    UndefinedSymbolError,
    BranchRangeError,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "AssemblyResult",
    "EncodedLine",
    "InstructionCatalog",
    "assemble",
    "assemble_file",
    "generate_test_program",
    # CPU
    "AddressingMode",
    "CPUState",
    "Instruction",
    "INSTRUCTION_SET",
    "OpcodeEncoding",
    "ORIGIN",
    # Exception hierarchy
    "Hc11Error",
    "CatalogError",
    "AssemblerError",
    "AssemblyPhase",
    "ErrorKind",
    "SourceLocation",
    "InvalidLabelNameError",
    "UnknownMnemonicError",
    "AddressingModeError",
    "NumericLiteralError",
    "UndefinedSymbolError",
    "BranchRangeError",
]
