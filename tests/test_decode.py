#    Copyright 2026 Two Sigma Open Source, LLC
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.

"""Tests for the instruction decoder and encode/decode round trips."""

import pytest

from riscv_asm.decoders.instruction_decode import (
    DecodedInstruction,
    decode,
    try_decode,
)
from riscv_asm.encoders.formats import Format
from riscv_asm.encoders.instruction_encode import encode
from riscv_asm.encoders.op_tables import INSTRUCTIONS, InstructionDescriptor
from riscv_asm.exceptions import DecodeError, UnknownEncodingError
from riscv_asm.types import Address, Immediate, Register, Word, imm, reg

# Sample operand per slot; immediates chosen per format to exercise sign bits
SAMPLE_REGISTERS = {"rd": reg(5), "rs1": reg(10), "rs2": reg(31)}
SAMPLE_IMMEDIATES = {
    Format.I: -17,
    Format.S: -2048,
    Format.B: -2046,
    Format.U: 0xABCDE,
    Format.J: 1048574,
}
SAMPLE_FIELDS = {"shamt": 13, "pred": 0b1010, "succ": 0b0101}


def sample_operands(descriptor: InstructionDescriptor) -> list:
    """Build in-range operands for every slot of a descriptor."""
    operands = []
    for slot in descriptor.operands:
        if slot in SAMPLE_REGISTERS:
            operands.append(SAMPLE_REGISTERS[slot])
        elif slot in SAMPLE_FIELDS:
            operands.append(imm(SAMPLE_FIELDS[slot]))
        else:
            operands.append(imm(SAMPLE_IMMEDIATES[descriptor.fmt]))
    return operands


class TestDecode:
    """Decoding known words."""

    @pytest.mark.parametrize(
        "word,text",
        [
            (0x00500093, "addi ra, zero, 5"),
            (0x004182B3, "add t0, gp, tp"),
            (0x403100B3, "sub ra, sp, gp"),
            (0x00812503, "lw a0, 8(sp)"),
            (0xFE112E23, "sw ra, -4(sp)"),
            (0xFE051EE3, "bne a0, zero, -4"),
            (0xFF9FF06F, "jal zero, -8"),
            (0x000500E7, "jalr ra, 0(a0)"),
            (0x12345537, "lui a0, 0x12345"),
            (0xFFFFF537, "lui a0, 0xfffff"),
            (0x41F55513, "srai a0, a0, 31"),
            (0x0FF0000F, "fence iorw, iorw"),
            (0x0310000F, "fence rw, w"),
            (0x0000100F, "fence.i"),
            (0x00000073, "ecall"),
            (0x00100073, "ebreak"),
        ],
    )
    def test_render(self, word: int, text: str) -> None:
        """Decoded words render as assembly text."""
        assert decode(word).render() == text

    def test_render_numeric_registers(self) -> None:
        """Registers can be shown as x0-x31."""
        assert decode(0x00500093).render(abi_names=False) == "addi x1, x0, 5"

    def test_operands(self) -> None:
        """Operands come back in assembly order as value objects."""
        decoded = decode(0xFE112E23)
        assert decoded.mnemonic == "sw"
        assert decoded.operands == (Register(1), Immediate(-4), Register(2))
        assert decoded.word == 0xFE112E23

    def test_equality_ignores_word(self) -> None:
        """Decoded instructions compare on mnemonic and operands only."""
        expected = DecodedInstruction("addi", (reg(1), reg(0), imm(5)))
        assert decode(0x00500093) == expected

    def test_addi_ignores_upper_immediate_bits(self) -> None:
        """ADDI with imm[11:5]=0x20 is still ADDI."""
        assert decode(0x40000093).mnemonic == "addi"

    def test_branch_target(self) -> None:
        """PC-relative instructions resolve their target address."""
        decoded = decode(Word(0x00208463))  # beq ra, sp, 8
        assert decoded.branch_target(Address(0x100)) == 0x108
        assert decode(Word(0x00500093)).branch_target(Address(0x100)) is None

    def test_branch_target_wraps(self) -> None:
        """Targets past the top of the address space wrap to 32 bits."""
        decoded = decode(Word(0x00208463))  # beq ra, sp, 8
        assert decoded.branch_target(Address(0xFFFF_FFFC)) == 0x4


class TestDecodeErrors:
    """Words that are not RV32I instructions."""

    @pytest.mark.parametrize(
        "word",
        [
            0xFFFFFFFF,  # all ones
            0x00000000,  # all zeros (illegal, low bits 00)
            0x00000001,  # compressed quadrant
            0x02000033,  # MUL (M extension)
            0x0000707F,  # unused opcode
            0x00002063,  # reserved branch funct3
            0x8330000F,  # FENCE.TSO (fm != 0)
            0x000000F3,  # ECALL with rd != 0
            0x00200073,  # URET-style SYSTEM funct12
            0x02001013,  # SLLI with imm[11:5] != 0
        ],
    )
    def test_unknown_words(self, word: int) -> None:
        """Unsupported encodings raise UnknownEncodingError."""
        with pytest.raises(UnknownEncodingError) as exc_info:
            decode(word)
        assert exc_info.value.word == word

    @pytest.mark.parametrize("word", [-1, 1 << 32])
    def test_out_of_range_word(self, word: int) -> None:
        """Values outside [0, 2^32) are not instruction words."""
        with pytest.raises(UnknownEncodingError):
            decode(word)

    def test_try_decode_returns_error(self) -> None:
        """try_decode hands back the error instead of raising."""
        result = try_decode(0xFFFFFFFF)
        assert isinstance(result, DecodeError)
        assert "0xffffffff" in str(result)

    def test_try_decode_returns_instruction(self) -> None:
        """try_decode returns the instruction for a valid word."""
        assert try_decode(0x00000013).mnemonic == "addi"


@pytest.mark.roundtrip
class TestRoundTrip:
    """decode(encode(x)) == x for every table entry."""

    @pytest.mark.parametrize("name", sorted(INSTRUCTIONS))
    def test_every_instruction(self, name: str) -> None:
        """Each instruction survives an encode/decode round trip."""
        operands = sample_operands(INSTRUCTIONS[name])
        word = encode(name, operands)
        assert decode(word) == DecodedInstruction(name, tuple(operands))

    @pytest.mark.parametrize("name", sorted(INSTRUCTIONS))
    def test_word_round_trip(self, name: str) -> None:
        """encode(decode(w)) == w for a word produced by the encoder."""
        word = encode(name, sample_operands(INSTRUCTIONS[name]))
        decoded = decode(word)
        assert encode(decoded.mnemonic, decoded.operands) == word

    @pytest.mark.parametrize("offset", [-4096, -2, 0, 2, 2046, 4094])
    def test_branch_offsets(self, offset: int) -> None:
        """Branch offsets across the full range round-trip."""
        word = encode("blt", [reg(1), reg(2), imm(offset)])
        assert decode(word).operands[-1] == imm(offset)

    @pytest.mark.parametrize("value", [0, 1, 0x7FFFF, 0x80000, 0xFFFFF])
    def test_upper_immediates(self, value: int) -> None:
        """U-type operands decode to the 20-bit value as written."""
        word = encode("auipc", [reg(3), imm(value)])
        assert decode(word).operands == (reg(3), imm(value))

    @pytest.mark.parametrize("name", ["lui", "auipc"])
    @pytest.mark.parametrize("value", [0, 0xFFFFF])
    def test_upper_immediate_extremes(self, name: str, value: int) -> None:
        """Both ends of the U-type range decode to the operands encoded."""
        operands = (reg(10), imm(value))
        decoded = decode(encode(name, operands))
        assert (decoded.mnemonic, decoded.operands) == (name, operands)

    @pytest.mark.parametrize("index", range(32))
    def test_every_register(self, index: int) -> None:
        """All 32 registers survive in every register field."""
        operands = [reg(index), reg(index), reg(31 - index)]
        assert decode(encode("xor", operands)).operands == tuple(operands)
