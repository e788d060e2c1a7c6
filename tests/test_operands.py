# =============================================================================
# test_operands.py - Operand Classifier Tests
# =============================================================================
# Tests for addressing-mode classification and numeric operand parsing.
#
# Test coverage includes:
#   - Classification precedence (inherent, relative, prefix, suffix)
#   - Index register suffix overriding the '$' and '#' prefixes
#   - Leading-digit numeric parsing in decimal and hexadecimal
#   - Operand byte encoding and truncation
# =============================================================================

import pytest

from hc11_asm.assembler.operands import (
    Operand,
    classify_operand,
    operand_bytes,
    parse_numeric,
)
from hc11_asm.cpu import AddressingMode
from hc11_asm.errors import ErrorKind, NumericLiteralError


BRANCH_MODES = frozenset({AddressingMode.RELATIVE})
MEMORY_MODES = frozenset({
    AddressingMode.IMMEDIATE,
    AddressingMode.DIRECT,
    AddressingMode.EXTENDED,
    AddressingMode.INDEXED_X,
    AddressingMode.INDEXED_Y,
})


# =============================================================================
# Classification Tests
# =============================================================================

class TestClassifyOperand:
    """Test addressing mode selection from the operand token."""

    def test_missing_operand_is_inherent(self):
        """No operand selects inherent mode."""
        assert classify_operand(None, MEMORY_MODES) == Operand(AddressingMode.INHERENT)
        assert classify_operand("", MEMORY_MODES).mode is AddressingMode.INHERENT

    @pytest.mark.parametrize("token,mode,text", [
        ("#5", AddressingMode.IMMEDIATE, "5"),
        ("#$41", AddressingMode.IMMEDIATE, "$41"),
        ("64", AddressingMode.DIRECT, "64"),
        ("$1234", AddressingMode.EXTENDED, "$1234"),
        ("5,X", AddressingMode.INDEXED_X, "5,X"),
        ("$10,X", AddressingMode.INDEXED_X, "$10,X"),
        ("5,Y", AddressingMode.INDEXED_Y, "5,Y"),
        ("$1F,Y", AddressingMode.INDEXED_Y, "$1F,Y"),
    ])
    def test_memory_operands(self, token, mode, text):
        """Prefix picks the mode, X/Y suffix overrides it."""
        operand = classify_operand(token, MEMORY_MODES)
        assert operand.mode is mode
        assert operand.text == text

    def test_hex_indexed_is_not_extended(self):
        """The ',X' suffix wins over the '$' prefix."""
        assert classify_operand("$10,X", MEMORY_MODES).mode is AddressingMode.INDEXED_X

    def test_label_for_branch(self):
        """A name is a label when the instruction branches."""
        operand = classify_operand("LOOP", BRANCH_MODES)
        assert operand.mode is AddressingMode.RELATIVE
        assert operand.text == "LOOP"
        assert operand.is_label

    def test_label_ending_in_x(self):
        """Relative classification happens before the suffix check."""
        assert classify_operand("NEXTX", BRANCH_MODES).mode is AddressingMode.RELATIVE

    def test_name_without_branch_support(self):
        """A name is not a label unless the instruction supports relative mode."""
        assert classify_operand("LOOP", MEMORY_MODES).mode is AddressingMode.DIRECT
        assert classify_operand("INDEX", MEMORY_MODES).mode is AddressingMode.INDEXED_X

    @pytest.mark.parametrize("token,mode", [
        ("5", AddressingMode.DIRECT),
        ("5,X", AddressingMode.INDEXED_X),
        ("#5", AddressingMode.IMMEDIATE),
        ("$30", AddressingMode.EXTENDED),
    ])
    def test_numbers_are_not_labels(self, token, mode):
        """Digit or prefix starts never classify as relative."""
        assert classify_operand(token, BRANCH_MODES).mode is mode

    def test_classification_never_fails(self):
        """Unsupported modes are still reported, not rejected."""
        operand = classify_operand("#5", frozenset({AddressingMode.INHERENT}))
        assert operand.mode is AddressingMode.IMMEDIATE


# =============================================================================
# Numeric Parsing Tests
# =============================================================================

class TestParseNumeric:
    """Test leading-digit numeric parsing."""

    @pytest.mark.parametrize("text,value", [
        ("0", 0),
        ("10", 10),
        ("65535", 65535),
        ("$FF", 255),
        ("$ff", 255),
        ("$1234", 0x1234),
        ("10,X", 10),
        ("$1F,Y", 31),
        ("007", 7),
    ])
    def test_valid(self, text, value):
        """Digits up to the first non-digit are the value."""
        assert parse_numeric(text) == value

    @pytest.mark.parametrize("text", ["", "$", "ABC", ",X", "$G1", "-5"])
    def test_malformed(self, text):
        """Text without leading digits is rejected."""
        with pytest.raises(NumericLiteralError) as exc_info:
            parse_numeric(text)
        assert exc_info.value.kind is ErrorKind.MALFORMED_NUMERIC_LITERAL
        assert exc_info.value.text == text


# =============================================================================
# Operand Byte Tests
# =============================================================================

class TestOperandBytes:
    """Test operand encoding into 0, 1 or 2 bytes."""

    def test_no_bytes(self):
        assert operand_bytes(0x1234, 0) == b""

    def test_one_byte_keeps_low_bits(self):
        """Single-byte operands are truncated to 8 bits."""
        assert operand_bytes(0x34, 1) == b"\x34"
        assert operand_bytes(300, 1) == bytes([300 & 0xFF])

    def test_two_bytes_big_endian(self):
        """Two-byte operands are high byte first."""
        assert operand_bytes(0x1234, 2) == b"\x12\x34"
        assert operand_bytes(5, 2) == b"\x00\x05"

    def test_two_bytes_truncated(self):
        """Two-byte operands keep the low 16 bits."""
        assert operand_bytes(0x12345, 2) == b"\x23\x45"

    def test_bad_size(self):
        with pytest.raises(ValueError):
            operand_bytes(1, 3)
