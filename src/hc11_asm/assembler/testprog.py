"""
Catalog Test Program
====================

Generates an assembly source that exercises every (instruction, mode)
pair of a catalog, one line each, grouped under a comment naming the
instruction:

     * Load A *
        LDAA #1
        LDAA 2
        LDAA $3000
        LDAA 1,X
        LDAA 2,Y

Relative forms branch to themselves through a generated label, so the
program always resolves regardless of its length. The origin
pseudo-instruction appears as ``ORG $3000``.
"""

from hc11_asm.assembler.catalog import InstructionCatalog
from hc11_asm.cpu import AddressingMode


SAMPLE_OPERANDS = {
    AddressingMode.INHERENT: "",
    AddressingMode.IMMEDIATE: "#1",
    AddressingMode.DIRECT: "2",
    AddressingMode.EXTENDED: "$3000",
    AddressingMode.INDEXED_X: "1,X",
    AddressingMode.INDEXED_Y: "2,Y",
}


def generate_test_program(catalog: InstructionCatalog | None = None) -> str:
    """
    Build a source text covering every catalog encoding.

    Args:
        catalog: Catalog to cover (default: the full 68HC11 catalog)

    Returns:
        Assembly source, newline terminated
    """
    if catalog is None:
        catalog = InstructionCatalog.default()

    lines = []
    branch_count = 0
    for instruction in catalog:
        lines.append(f" * {instruction.description or instruction.mnemonic} *")
        for mode in instruction.encodings:
            if mode is AddressingMode.RELATIVE:
                branch_count += 1
                label = f"L{branch_count:04d}"
                lines.append(f"{label}\t{instruction.mnemonic} {label}")
                continue
            operand = SAMPLE_OPERANDS[mode]
            lines.append(f"\t{instruction.mnemonic} {operand}".rstrip())

    return "\n".join(lines) + "\n"
