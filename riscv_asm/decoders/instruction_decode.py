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

"""RISC-V instruction decoding from 32-bit words.

Instruction Decoder
===================

The decoder is the inverse of the encoder and shares its data: the format
catalog gives the field positions and the op tables give the fixed bits.

Decoding Process:
    1. Reject words outside [0, 2^32) and words whose low two bits are not
       0b11 (compressed or reserved encodings)
    2. For each candidate format in a fixed order, extract the selector bits
       the format defines (funct3, funct7 or imm[11:5], imm[11:0]) and ask
       the table for a descriptor of that format
    3. Extract operands for the descriptor's slots

Unused bits are not ignored where they would make decoding lossy: FENCE
with a non-zero fm field and SYSTEM/FENCE.I words with non-zero rd or rs1
are reported as unknown.

Example:
    >>> decode(0x00500093).render()
    'addi ra, zero, 5'
    >>> decode(0x00500093).render(abi_names=False)
    'addi x1, x0, 5'
"""

from dataclasses import dataclass, field

from riscv_asm.config import (
    FENCE_MASK_LETTERS,
    MASK32,
    OPCODE_MASK,
    SHIFT_AMOUNT_MASK,
    UNCOMPRESSED_QUADRANT,
    UPPER_IMM_MASK,
    UPPER_IMM_SHIFT,
)
from riscv_asm.encoders.formats import Format, extract_fields
from riscv_asm.encoders.immediates import unpack_immediate
from riscv_asm.encoders.op_tables import (
    IMM,
    PRED,
    REGISTER_SLOTS,
    SHAMT,
    SUCC,
    SYNTAX_FENCE,
    SYNTAX_MEM,
    InstructionDescriptor,
    lookup_by_bits,
)
from riscv_asm.exceptions import DecodeError, UnknownEncodingError
from riscv_asm.types import Address, Immediate, Operand, Register, Word

# Order in which formats are tried; only one can match a given opcode.
CANDIDATE_FORMATS: tuple[Format, ...] = (
    Format.R,
    Format.I,
    Format.S,
    Format.B,
    Format.U,
    Format.J,
)


@dataclass(frozen=True)
class DecodedInstruction:
    """A decoded instruction.

    Equality compares only the mnemonic and operands, so an instruction
    decoded from a word equals the one the assembler was given.

    Attributes:
        mnemonic: Instruction (or pseudo-instruction) mnemonic
        operands: Operands in assembly order
        word: The 32-bit word it was decoded from
        descriptor: Table entry of the real instruction
        pseudo: True if rendered as a pseudo-instruction
    """

    mnemonic: str
    operands: tuple[Operand, ...]
    word: Word | None = field(default=None, compare=False)
    descriptor: InstructionDescriptor | None = field(
        default=None, compare=False, repr=False
    )
    pseudo: bool = field(default=False, compare=False)

    @property
    def is_pc_relative(self) -> bool:
        """True for branches and JAL (the immediate is a PC offset)."""
        return self.descriptor is not None and self.descriptor.is_pc_relative

    def branch_target(self, address: Address) -> Address | None:
        """Absolute target of a PC-relative instruction placed at ``address``."""
        if not self.is_pc_relative:
            return None
        offset = self.operands[-1]
        return Address((address + offset.value) & MASK32)

    def render(self, abi_names: bool = True) -> str:
        """Render as assembly text.

        Args:
            abi_names: Use ABI register names (``a0``) instead of ``x10``

        Returns:
            Assembly text such as ``lw a0, 8(sp)``
        """
        if not self.operands:
            return self.mnemonic

        syntax = None
        if self.descriptor is not None and not self.pseudo:
            syntax = self.descriptor.syntax
        if syntax == SYNTAX_FENCE:
            pred, succ = self.operands
            text = f"{_fence_set(pred.value)}, {_fence_set(succ.value)}"
        else:
            parts = [self._render_operand(op, abi_names) for op in self.operands]
            if syntax == SYNTAX_MEM:
                text = f"{parts[0]}, {parts[1]}({parts[2]})"
            else:
                text = ", ".join(parts)
        return f"{self.mnemonic} {text}"

    def _render_operand(self, operand: Operand, abi_names: bool) -> str:
        if isinstance(operand, Register):
            return operand.render(abi_names)
        if self.descriptor is not None and self.descriptor.fmt is Format.U:
            return hex(operand.value)
        return str(operand.value)

    def __str__(self) -> str:
        return self.render()


def _fence_set(value: int) -> str:
    """Render a fence ordering set as letters (``iorw``), or ``0`` if empty."""
    letters = "".join(
        letter
        for bit, letter in enumerate(reversed(FENCE_MASK_LETTERS))
        if value & (1 << bit)
    )
    return letters[::-1] or "0"


def _selector_bits(
    fmt: Format, fields: dict[str, int]
) -> tuple[int | None, int | None, int | None]:
    """Return (funct3, funct7, funct12) as seen by the candidate format."""
    if fmt is Format.R:
        return fields["funct3"], fields["funct7"], None
    if fmt is Format.I:
        imm12 = fields["imm[11:0]"]
        return fields["funct3"], imm12 >> 5, imm12
    if fmt in (Format.S, Format.B):
        return fields["funct3"], None, None
    return None, None, None


def _operand_value(
    descriptor: InstructionDescriptor, slot: str, fields: dict[str, int]
) -> Operand:
    if slot in REGISTER_SLOTS:
        return Register(fields[slot])
    fmt = descriptor.fmt
    if slot == IMM:
        value = unpack_immediate(fmt, fields)
        if fmt is Format.U:
            value = (value >> UPPER_IMM_SHIFT) & UPPER_IMM_MASK
        return Immediate(value)
    imm12 = fields["imm[11:0]"]
    if slot == SHAMT:
        return Immediate(imm12 & SHIFT_AMOUNT_MASK)
    if slot == PRED:
        return Immediate((imm12 >> 4) & 0xF)
    if slot == SUCC:
        return Immediate(imm12 & 0xF)
    raise ValueError(f"Unknown operand slot: {slot}")


def _is_lossless(descriptor: InstructionDescriptor, fields: dict[str, int]) -> bool:
    """False if the word sets bits the descriptor's operands cannot carry."""
    if descriptor.syntax == SYNTAX_FENCE:
        return fields["imm[11:0]"] >> 8 == 0
    if descriptor.funct12 is not None:
        return fields["rd"] == 0 and fields["rs1"] == 0
    return True


def decode(word: Word) -> DecodedInstruction:
    """Decode a 32-bit instruction word.

    Args:
        word: Instruction word (unsigned, as read little-endian from memory)

    Returns:
        The decoded real instruction (pseudo collapse is a separate step)

    Raises:
        UnknownEncodingError: The word is not a supported RV32I instruction
    """
    if not 0 <= word <= MASK32:
        raise UnknownEncodingError("Word does not fit in 32 bits", word=word)
    if word & 0b11 != UNCOMPRESSED_QUADRANT:
        raise UnknownEncodingError("Not a 32-bit instruction", word=word)

    opcode = word & OPCODE_MASK
    for fmt in CANDIDATE_FORMATS:
        fields = extract_fields(fmt, word)
        descriptor = lookup_by_bits(opcode, *_selector_bits(fmt, fields))
        if descriptor is None or descriptor.fmt is not fmt:
            continue
        if not _is_lossless(descriptor, fields):
            break
        operands = tuple(
            _operand_value(descriptor, slot, fields) for slot in descriptor.operands
        )
        return DecodedInstruction(descriptor.mnemonic, operands, word, descriptor)

    raise UnknownEncodingError(
        "Unknown instruction encoding", word=word, opcode=hex(opcode)
    )


def try_decode(word: Word) -> DecodedInstruction | DecodeError:
    """Decode a word, returning the error instance instead of raising."""
    try:
        return decode(word)
    except DecodeError as e:
        return e
