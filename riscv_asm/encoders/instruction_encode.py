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

"""RISC-V instruction encoding from mnemonic and operands.

Instruction Encoder
===================

This module turns ``(mnemonic, operands)`` into a 32-bit instruction word.
The per-format encoders pack their fields through the format catalog, so the
bit positions are defined once in ``formats.py`` and shared with the decoder.

Encoding Pipeline:
    1. Pseudo-instructions are expanded to their real form (``nop`` ->
       ``addi zero, zero, 0``)
    2. The mnemonic is looked up in the instruction table
    3. Operands are bound to the descriptor's slots; the count and the kind
       (register vs immediate) of each operand are checked
    4. Every operand is range-checked before any bit is packed
    5. The format encoder packs fixed bits, registers and the immediate

Any failure raises an ``EncodeError`` subclass; a partial word is never
returned.

Usage Example:
    >>> from riscv_asm.types import reg, imm
    >>> hex(encode("addi", [reg(1), reg(0), imm(5)]))
    '0x500093'
    >>> hex(RType.encode(0x00, 4, 3, 0x0, 5, 0x33))  # add x5, x3, x4
    '0x4182b3'
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from riscv_asm.config import UPPER_IMM_MASK, UPPER_IMM_SHIFT
from riscv_asm.encoders.formats import Format, insert_fields
from riscv_asm.encoders.immediates import pack_immediate
from riscv_asm.encoders.op_tables import (
    IMM,
    PRED,
    REGISTER_SLOTS,
    SHAMT,
    SUCC,
    InstructionDescriptor,
    lookup_by_mnemonic,
)
from riscv_asm.exceptions import (
    OperandArityMismatchError,
    OperandKindError,
    UnknownMnemonicError,
)
from riscv_asm.pseudo import expand
from riscv_asm.types import Immediate, Operand, Register
from riscv_asm.utils.validation import OperandAssertions


@dataclass
class InstructionEncoder:
    """Base class for instruction encoding."""

    @staticmethod
    def _pack_fields(fmt: Format, immediate: int | None = None, **fields: int) -> int:
        """Pack named fields and an optional logical immediate into a word.

        Args:
            fmt: Format giving the field positions
            immediate: Logical immediate to split across the immediate fields
            fields: Non-immediate field values (opcode, rd, funct3, ...)

        Returns:
            32-bit packed instruction word
        """
        values = dict(fields)
        if immediate is not None:
            values.update(pack_immediate(fmt, immediate))
        return insert_fields(fmt, values)


class RType(InstructionEncoder):
    """R-type instruction format encoder.

    Used for: register-register operations (ADD, SUB, AND, OR, XOR, shifts)
    """

    @staticmethod
    def encode(
        funct7_code: int,
        source_register_2: int,
        source_register_1: int,
        funct3_code: int,
        destination_register: int,
        opcode: int,
    ) -> int:
        """Encode R-type instruction into 32-bit word."""
        return InstructionEncoder._pack_fields(
            Format.R,
            opcode=opcode,
            rd=destination_register,
            funct3=funct3_code,
            rs1=source_register_1,
            rs2=source_register_2,
            funct7=funct7_code,
        )


class IType(InstructionEncoder):
    """I-type instruction format encoder.

    Used for: immediate operations (ADDI, ANDI, shifts), loads, JALR, FENCE,
    ECALL/EBREAK
    """

    @staticmethod
    def encode(
        immediate_12bit: int,
        source_register_1: int,
        funct3_code: int,
        destination_register: int,
        opcode: int,
    ) -> int:
        """Encode I-type instruction into 32-bit word."""
        return InstructionEncoder._pack_fields(
            Format.I,
            immediate_12bit,
            opcode=opcode,
            rd=destination_register,
            funct3=funct3_code,
            rs1=source_register_1,
        )


class SType(InstructionEncoder):
    """S-type instruction format encoder.

    Used for: store operations (SW, SH, SB)
    Note: Immediate is split between imm[4:0] and imm[11:5]
    """

    @staticmethod
    def encode(
        immediate_12bit: int,
        source_register_2: int,
        source_register_1: int,
        funct3_code: int,
        opcode: int,
    ) -> int:
        """Encode S-type instruction into 32-bit word."""
        return InstructionEncoder._pack_fields(
            Format.S,
            immediate_12bit,
            opcode=opcode,
            funct3=funct3_code,
            rs1=source_register_1,
            rs2=source_register_2,
        )


class BType(InstructionEncoder):
    """B-type instruction format encoder.

    Used for: conditional branch instructions (BEQ, BNE, BLT, BGE, BLTU, BGEU)
    Note: 13-bit immediate is scrambled across fields, bit 0 is implicit
    """

    @staticmethod
    def encode(
        branch_offset: int,
        source_register_2: int,
        source_register_1: int,
        funct3_code: int,
        opcode: int,
    ) -> int:
        """Encode B-type instruction into 32-bit word."""
        OperandAssertions.assert_branch_offset(branch_offset)
        return InstructionEncoder._pack_fields(
            Format.B,
            branch_offset,
            opcode=opcode,
            funct3=funct3_code,
            rs1=source_register_1,
            rs2=source_register_2,
        )


class UType(InstructionEncoder):
    """U-type instruction format encoder.

    Used for: LUI, AUIPC
    Note: The operand is the 20-bit upper immediate; it lands in bits [31:12]
    """

    @staticmethod
    def encode(upper_immediate: int, destination_register: int, opcode: int) -> int:
        """Encode U-type instruction into 32-bit word."""
        value = (upper_immediate & UPPER_IMM_MASK) << UPPER_IMM_SHIFT
        return InstructionEncoder._pack_fields(
            Format.U, value, opcode=opcode, rd=destination_register
        )


class JType(InstructionEncoder):
    """J-type instruction format encoder.

    Used for: unconditional jump (JAL instruction)
    Note: 21-bit immediate is scrambled across fields, bit 0 is implicit
    """

    @staticmethod
    def encode(jump_offset: int, destination_register: int, opcode: int) -> int:
        """Encode J-type instruction into 32-bit word."""
        OperandAssertions.assert_jump_offset(jump_offset)
        return InstructionEncoder._pack_fields(
            Format.J, jump_offset, opcode=opcode, rd=destination_register
        )


# ============================================================================
# Mnemonic-level encoding
# ============================================================================


def _bind_operands(
    descriptor: InstructionDescriptor, operands: Sequence[Operand]
) -> dict[str, int]:
    """Map each operand to its slot and check counts and kinds."""
    if len(operands) != len(descriptor.operands):
        raise OperandArityMismatchError(
            "Wrong number of operands",
            expected=len(descriptor.operands),
            actual=len(operands),
            mnemonic=descriptor.mnemonic,
        )
    values: dict[str, int] = {}
    for position, (slot, operand) in enumerate(zip(descriptor.operands, operands)):
        expected = Register if slot in REGISTER_SLOTS else Immediate
        if not isinstance(operand, expected):
            raise OperandKindError(
                f"Operand {position} must be a {expected.__name__.lower()}",
                mnemonic=descriptor.mnemonic,
                slot=slot,
                operand=operand,
            )
        values[slot] = operand.index if expected is Register else operand.value
    return values


_IMMEDIATE_CHECKS: dict[Format, Callable[..., None]] = {
    Format.I: OperandAssertions.assert_immediate_12bit,
    Format.S: OperandAssertions.assert_immediate_12bit,
    Format.B: OperandAssertions.assert_branch_offset,
    Format.U: OperandAssertions.assert_upper_immediate,
    Format.J: OperandAssertions.assert_jump_offset,
}


def _check_ranges(descriptor: InstructionDescriptor, values: dict[str, int]) -> None:
    """Range-check every bound operand; raises OperandOutOfRangeError."""
    for slot, value in values.items():
        context = {"mnemonic": descriptor.mnemonic, "slot": slot}
        if slot in REGISTER_SLOTS:
            OperandAssertions.assert_register_valid(value, **context)
        elif slot == SHAMT:
            OperandAssertions.assert_shift_amount(value, **context)
        elif slot in (PRED, SUCC):
            OperandAssertions.assert_fence_set(value, **context)
        else:
            _IMMEDIATE_CHECKS[descriptor.fmt](value, **context)


def _i_immediate(descriptor: InstructionDescriptor, values: dict[str, int]) -> int:
    """Build imm[11:0] for the I-format variants."""
    if descriptor.funct12 is not None:
        return descriptor.funct12
    if SHAMT in values:
        return (descriptor.funct7 << 5) | values[SHAMT]
    if PRED in values:
        return (values[PRED] << 4) | values[SUCC]
    return values[IMM]


def _encode_r(d: InstructionDescriptor, v: dict[str, int]) -> int:
    return RType.encode(d.funct7, v["rs2"], v["rs1"], d.funct3, v["rd"], d.opcode)


def _encode_i(d: InstructionDescriptor, v: dict[str, int]) -> int:
    return IType.encode(
        _i_immediate(d, v), v.get("rs1", 0), d.funct3, v.get("rd", 0), d.opcode
    )


def _encode_s(d: InstructionDescriptor, v: dict[str, int]) -> int:
    return SType.encode(v[IMM], v["rs2"], v["rs1"], d.funct3, d.opcode)


def _encode_b(d: InstructionDescriptor, v: dict[str, int]) -> int:
    return BType.encode(v[IMM], v["rs2"], v["rs1"], d.funct3, d.opcode)


def _encode_u(d: InstructionDescriptor, v: dict[str, int]) -> int:
    return UType.encode(v[IMM], v["rd"], d.opcode)


def _encode_j(d: InstructionDescriptor, v: dict[str, int]) -> int:
    return JType.encode(v[IMM], v["rd"], d.opcode)


_FORMAT_ENCODERS: dict[Format, Callable[[InstructionDescriptor, dict], int]] = {
    Format.R: _encode_r,
    Format.I: _encode_i,
    Format.S: _encode_s,
    Format.B: _encode_b,
    Format.U: _encode_u,
    Format.J: _encode_j,
}


def encode(mnemonic: str, operands: Sequence[Operand] = ()) -> int:
    """Encode one instruction or pseudo-instruction.

    Args:
        mnemonic: Instruction mnemonic (case-insensitive)
        operands: Operands in assembly order

    Returns:
        32-bit instruction word

    Raises:
        UnknownMnemonicError: No instruction or pseudo has this mnemonic
        OperandArityMismatchError: Wrong operand count
        OperandKindError: Register/immediate mismatch for a slot
        OperandOutOfRangeError: Operand does not fit its field
    """
    name, real_operands = expand(mnemonic.lower(), tuple(operands))
    descriptor = lookup_by_mnemonic(name)
    if descriptor is None:
        raise UnknownMnemonicError("Unknown mnemonic", mnemonic=mnemonic)
    values = _bind_operands(descriptor, real_operands)
    _check_ranges(descriptor, values)
    return _FORMAT_ENCODERS[descriptor.fmt](descriptor, values)
