"""
68HC11 Two-Pass Assembler
=========================

This package assembles Motorola 68HC11 mnemonic source into opcode bytes
and an address-annotated listing.

Main Components
---------------
- **Assembler**: Runs both passes and keeps the result for output
- **InstructionCatalog**: Immutable mnemonic/mode/opcode registry
- **classify_operand**: Infers the addressing mode of an operand token
- **encode_line**: Pass 1, one line at a time
- **resolve_branches**: Pass 2, patches branch displacements

Assembly Process
----------------
1. **Encoding**: tokenize each line, resolve label and mnemonic, classify
   the operand, emit opcode and operand bytes, advance the running address
   and record labels. Branches get a placeholder byte.
2. **Resolution**: for each branch, look up the target label and write
   the signed displacement from the following instruction.

Example Usage
-------------
>>> from hc11_asm.assembler import Assembler
>>> asm = Assembler()
>>> lines = asm.assemble("LDAA #5")
>>> asm.get_code()
b'\\x86\\x05'

Source Syntax
-------------
- ``[label] MNEMONIC [operand]``, fields separated by whitespace
- ``*`` in the first field starts a comment line
- Operands: ``#n`` immediate, ``n`` direct, ``$hhhh`` extended,
  ``n,X`` / ``n,Y`` indexed, ``label`` relative (branches only)
- ``ORG $hhhh`` sets the running address
"""

from hc11_asm.assembler.assembler import (
    Assembler,
    AssemblyResult,
    assemble,
    assemble_file,
)
from hc11_asm.assembler.catalog import InstructionCatalog
from hc11_asm.assembler.encoder import (
    BRANCH_PLACEHOLDER,
    COMMENT_MARKER,
    EncodedLine,
    EncoderState,
    LabelTable,
    ResolvedLabels,
    encode_line,
)
from hc11_asm.assembler.listing import (
    format_failure,
    format_line,
    format_listing,
    format_symbols,
)
from hc11_asm.assembler.operands import (
    Operand,
    classify_operand,
    operand_bytes,
    parse_numeric,
)
from hc11_asm.assembler.resolver import (
    MAX_DISPLACEMENT,
    MIN_DISPLACEMENT,
    branch_displacement,
    resolve_branches,
)
from hc11_asm.assembler.testprog import generate_test_program
from hc11_asm.cpu import AddressingMode, Instruction, OpcodeEncoding

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    # Catalog
    "InstructionCatalog",
    "AddressingMode",
    "Instruction",
    "OpcodeEncoding",
    # Operand classifier
    "Operand",
    "classify_operand",
    "operand_bytes",
    "parse_numeric",
    # Pass 1
    "BRANCH_PLACEHOLDER",
    "COMMENT_MARKER",
    "EncodedLine",
    "EncoderState",
    "LabelTable",
    "ResolvedLabels",
    "encode_line",
    # Pass 2
    "MAX_DISPLACEMENT",
    "MIN_DISPLACEMENT",
    "branch_displacement",
    "resolve_branches",
    # Listing
    "format_failure",
    "format_line",
    "format_listing",
    "format_symbols",
    # Test program
    "generate_test_program",
]
