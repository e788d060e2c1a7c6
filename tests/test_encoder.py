# =============================================================================
# test_encoder.py - Line Encoder Tests
# =============================================================================
# Tests for pass 1: encoding one source line at a time.
#
# Test coverage includes:
#   - Opcode and operand bytes for each addressing mode
#   - Running address and label bookkeeping
#   - Comment, blank and origin lines
#   - Encoding-phase errors with their line numbers
# =============================================================================

import pytest

from hc11_asm.assembler.encoder import (
    BRANCH_PLACEHOLDER,
    EncodedLine,
    EncoderState,
    LabelTable,
    ResolvedLabels,
    encode_line,
)
from hc11_asm.cpu import AddressingMode
from hc11_asm.errors import (
    AddressingModeError,
    AssemblyPhase,
    ErrorKind,
    InvalidLabelNameError,
    NumericLiteralError,
    UnknownMnemonicError,
)


# =============================================================================
# Byte Encoding Tests
# =============================================================================

class TestEncodeBytes:
    """Test emitted bytes per addressing mode."""

    def setup_method(self):
        self.state = EncoderState()

    def encode(self, catalog, text):
        return encode_line(catalog, self.state, text, 1)

    def test_immediate(self, catalog):
        """LDAA #5 is 86 05 and advances the address by two."""
        line = self.encode(catalog, "LDAA #5")
        assert bytes(line.assembled) == bytes([0x86, 0x05])
        assert line.mode is AddressingMode.IMMEDIATE
        assert line.address == 2
        assert line.start_address == 0
        assert self.state.address == 2

    @pytest.mark.parametrize("text,expected", [
        ("NOP", [0x01]),
        ("ABY", [0x18, 0x3A]),
        ("LDAA 64", [0x96, 0x40]),
        ("LDAA $1234", [0xB6, 0x12, 0x34]),
        ("LDAA $10,X", [0xA6, 0x10]),
        ("LDAA 5,Y", [0x18, 0xA6, 0x05]),
        ("LDAA #$41", [0x86, 0x41]),
        ("LDAA #300", [0x86, 0x2C]),
        ("LDX #$1234", [0xCE, 0x12, 0x34]),
        ("LDY #4096", [0x18, 0xCE, 0x10, 0x00]),
        ("LDD #5", [0xCC, 0x00, 0x05]),
        ("CPD 1,Y", [0xCD, 0xA3, 0x01]),
        ("STX $2000", [0xFF, 0x20, 0x00]),
        ("JSR $E000", [0xBD, 0xE0, 0x00]),
        ("BSET 2", [0x14, 0x00, 0x02]),
        ("CLR 0,X", [0x6F, 0x00]),
    ])
    def test_encodings(self, catalog, text, expected):
        """Opcode followed by the operand bytes."""
        line = self.encode(catalog, text)
        assert list(line.assembled) == expected
        assert self.state.address == len(expected)

    def test_trailing_tokens_ignored(self, catalog):
        """Text after the operand does not affect encoding."""
        line = self.encode(catalog, "LDAA #5 load five")
        assert bytes(line.assembled) == bytes([0x86, 0x05])
        assert line.tokens == ["LDAA", "#5", "load", "five"]

    def test_whitespace_separated(self, catalog):
        """Tabs and runs of spaces separate fields."""
        line = self.encode(catalog, "\tLDAA\t  #5")
        assert bytes(line.assembled) == bytes([0x86, 0x05])

    def test_branch_placeholder(self, catalog):
        """Branches emit a placeholder displacement and record the target."""
        line = self.encode(catalog, "BRA LOOP")
        assert list(line.assembled) == [0x20, BRANCH_PLACEHOLDER]
        assert line.mode is AddressingMode.RELATIVE
        assert line.target == "LOOP"
        assert line.is_branch

    def test_address_accumulates(self, catalog):
        """Each line starts where the previous one ended."""
        first = self.encode(catalog, "LDX #0")
        second = self.encode(catalog, "NOP")
        assert first.address == 3
        assert second.start_address == 3
        assert second.address == 4


# =============================================================================
# Non-Instruction Line Tests
# =============================================================================

class TestPlaceholderLines:
    """Comment and blank lines."""

    @pytest.mark.parametrize("text", ["", "   ", "\t", "* comment", "*", "   *indented"])
    def test_no_bytes(self, catalog, text):
        """Comments and blank lines emit nothing and keep the address."""
        state = EncoderState(address=0x40)
        line = encode_line(catalog, state, text)
        assert line.instruction is None
        assert line.mode is None
        assert line.size == 0
        assert line.address == 0x40
        assert state.address == 0x40

    def test_comment_with_mnemonic(self, catalog):
        """A commented-out instruction is still a comment."""
        line = encode_line(catalog, EncoderState(), "*NOP")
        assert line.instruction is None


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Label definition during encoding."""

    def test_label_at_start_address(self, catalog):
        """A label takes the address of its line's first byte."""
        state = EncoderState(address=0x10)
        line = encode_line(catalog, state, "LOOP LDAA #5")
        assert line.label == "LOOP"
        assert state.labels.get("LOOP") == 0x10

    def test_label_on_origin_line(self, catalog):
        """A label on an ORG line takes the new origin."""
        state = EncoderState()
        encode_line(catalog, state, "HERE ORG $3000")
        assert state.labels.get("HERE") == 0x3000

    def test_redefinition_last_wins(self, catalog):
        """Redefining a label replaces its address."""
        state = EncoderState()
        encode_line(catalog, state, "A NOP")
        encode_line(catalog, state, "A NOP")
        assert state.labels.get("A") == 1
        assert len(state.labels) == 1

    def test_freeze(self):
        """Freezing produces an independent read-only mapping."""
        table = LabelTable()
        table.define("START", 0)
        frozen = table.freeze()
        table.define("LATER", 5)

        assert isinstance(frozen, ResolvedLabels)
        assert dict(frozen) == {"START": 0}
        assert "LATER" not in frozen
        with pytest.raises(TypeError):
            frozen["START"] = 1

    def test_clear(self):
        table = LabelTable()
        table.define("X1", 1)
        table.clear()
        assert "X1" not in table
        assert table.get("X1") is None


# =============================================================================
# Origin Tests
# =============================================================================

class TestOrigin:
    """The ORG pseudo-instruction."""

    def test_sets_address(self, catalog):
        """ORG moves the running address and emits nothing."""
        state = EncoderState(address=7)
        line = encode_line(catalog, state, "ORG $3000")
        assert line.instruction is catalog.origin
        assert line.size == 0
        assert line.address == 0x3000
        assert state.address == 0x3000

    def test_following_line(self, catalog):
        """The next line is placed at the new origin."""
        state = EncoderState()
        encode_line(catalog, state, "ORG $3000")
        line = encode_line(catalog, state, "NOP")
        assert line.start_address == 0x3000
        assert line.address == 0x3001

    def test_address_wraps_past_ffff(self, catalog):
        """Lines after $FFFF continue at $0000."""
        state = EncoderState()
        lines = [
            encode_line(catalog, state, text, number)
            for number, text in enumerate(["ORG $FFFF", "NOP", "L NOP", "BRA L"], start=1)
        ]
        assert [line.start_address for line in lines[1:]] == [0xFFFF, 0x0000, 0x0001]
        assert state.labels.get("L") == 0x0000
        assert state.address == 0x0003

    def test_wrapped_line_start_address(self):
        """A line ending at $0000 started at $FFFF."""
        line = EncodedLine(raw="NOP", assembled=bytearray([0x01]), address=0x0000)
        assert line.start_address == 0xFFFF

    def test_decimal_origin_rejected(self, catalog):
        """A decimal operand selects direct mode, which ORG lacks."""
        with pytest.raises(AddressingModeError):
            encode_line(catalog, EncoderState(), "ORG 100")


# =============================================================================
# Error Tests
# =============================================================================

class TestEncodeErrors:
    """Errors raised while encoding a line."""

    @pytest.mark.parametrize("text", ["9FOO NOP", "#X NOP", "$X NOP"])
    def test_invalid_label_name(self, catalog, text):
        """Labels may not start with a digit, '#' or '$'."""
        with pytest.raises(InvalidLabelNameError) as exc_info:
            encode_line(catalog, EncoderState(), text, 4)
        error = exc_info.value
        assert error.kind is ErrorKind.INVALID_LABEL_NAME
        assert error.phase is AssemblyPhase.ENCODING
        assert error.location.line == 4
        assert error.source_line == text

    def test_unknown_mnemonic_after_label(self, catalog):
        """The second token must be a mnemonic when the first is a label."""
        with pytest.raises(UnknownMnemonicError) as exc_info:
            encode_line(catalog, EncoderState(), "FOO BAR")
        assert exc_info.value.mnemonic == "BAR"
        assert exc_info.value.kind is ErrorKind.UNKNOWN_MNEMONIC

    def test_label_only_line(self, catalog):
        """A lone label has no mnemonic."""
        with pytest.raises(UnknownMnemonicError) as exc_info:
            encode_line(catalog, EncoderState(), "FOO")
        assert exc_info.value.mnemonic == ""
        assert "missing" in exc_info.value.message

    def test_lower_case_mnemonic(self, catalog):
        """Lower-case mnemonics are read as labels, then fail."""
        with pytest.raises(UnknownMnemonicError) as exc_info:
            encode_line(catalog, EncoderState(), "loop nop")
        assert exc_info.value.hint is not None

    @pytest.mark.parametrize("text", ["STAA #5", "NOP 5", "JMP #1", "BRA 5"])
    def test_unsupported_mode(self, catalog, text):
        """The instruction has no encoding for the classified mode."""
        with pytest.raises(AddressingModeError) as exc_info:
            encode_line(catalog, EncoderState(), text)
        assert exc_info.value.kind is ErrorKind.UNSUPPORTED_ADDRESSING_MODE
        assert exc_info.value.valid_modes

    @pytest.mark.parametrize("text", ["LDAA #$G", "LDAA ,X", "LDAA $"])
    def test_malformed_number(self, catalog, text):
        """Operands without digits fail with their line attached."""
        with pytest.raises(NumericLiteralError) as exc_info:
            encode_line(catalog, EncoderState(filename="prog.asm"), text, 9)
        error = exc_info.value
        assert error.kind is ErrorKind.MALFORMED_NUMERIC_LITERAL
        assert error.location.filename == "prog.asm"
        assert error.location.line == 9
        assert error.source_line == text
        assert str(error).startswith("prog.asm:9: error:")

    def test_state_unchanged_on_error(self, catalog):
        """A failing line does not advance the address or define labels."""
        state = EncoderState()
        with pytest.raises(AddressingModeError):
            encode_line(catalog, state, "HERE STAA #5")
        assert state.address == 0
        assert "HERE" not in state.labels


# =============================================================================
# EncodedLine Tests
# =============================================================================

class TestEncodedLine:
    """EncodedLine derived properties."""

    def test_start_address(self):
        line = EncodedLine(raw="NOP", assembled=bytearray([0x01]), address=0x3001)
        assert line.start_address == 0x3000
        assert line.size == 1
        assert not line.is_branch
