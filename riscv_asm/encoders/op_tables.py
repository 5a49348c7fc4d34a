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

"""Operation tables mapping instruction mnemonics to their encodings.

Op Tables
=========

This module is the central registry that connects instruction mnemonics
(like "add", "lw", "beq") to an ``InstructionDescriptor``:

    1. Format: which field layout the instruction uses
    2. Fixed bits: opcode, funct3, funct7 (and funct12 for SYSTEM)
    3. Operand slots: the assembly operand order (rd, rs1, imm, ...)

Architecture:
    The op tables enable a data-driven approach where adding a new instruction
    only requires updating this file. The encoder and decoder are generic over
    the descriptors.

Table Structure:
    Each table maps: mnemonic -> InstructionDescriptor

    - R_ALU: Register-register operations (add, sub, sll, ...)
    - I_ALU: Immediate ALU operations (addi, andi, slli, ...)
    - LOADS: Load operations (lw, lh, lb, lhu, lbu)
    - STORES: Store operations (sw, sh, sb)
    - BRANCHES: Conditional branches (beq, bne, blt, ...)
    - JUMPS: Jump operations (jal, jalr)
    - UPPER: Upper-immediate operations (lui, auipc)
    - FENCES: Memory ordering (fence, fence.i)
    - SYSTEM: Environment calls (ecall, ebreak)

    INSTRUCTIONS merges all of them; the reverse index keyed by
    (opcode, funct3, funct7, funct12) drives decoding. A ``None`` in the key
    means "don't care": I-type entries ignore funct7 unless they pin it
    (shift-immediates keep funct7 in imm[11:5]), U/J entries match on opcode
    alone.

Example Usage:
    >>> descriptor = lookup_by_mnemonic("addi")
    >>> descriptor.fmt, hex(descriptor.opcode), descriptor.funct3
    (<Format.I: 'I'>, '0x13', 0)
    >>> lookup_by_bits(0x33, 0x0, 0x20).mnemonic
    'sub'
"""

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType

from riscv_asm.encoders.formats import Format
from riscv_asm.exceptions import CatalogInvariantViolation


class Opcode(IntEnum):
    """RV32I opcodes."""

    LOAD = 0x03
    MISC_MEM = 0x0F  # FENCE, FENCE.I (Zifencei)
    ALU_IMM = 0x13
    AUIPC = 0x17  # Add Upper Immediate to PC
    STORE = 0x23
    ALU_REG = 0x33
    LUI = 0x37  # Load Upper Immediate
    BRANCH = 0x63
    JALR = 0x67
    JAL = 0x6F
    SYSTEM = 0x73  # ECALL, EBREAK


class Funct3(IntEnum):
    """3-bit function codes."""

    # ALU operations
    ADD_SUB = 0x0
    SLL = 0x1
    SLT = 0x2
    SLTU = 0x3
    XOR = 0x4
    SRL_SRA = 0x5
    OR = 0x6
    AND = 0x7

    # Load/Store widths
    BYTE = 0x0
    HALFWORD = 0x1
    WORD = 0x2
    BYTE_U = 0x4
    HALFWORD_U = 0x5

    # Branch conditions
    BEQ = 0x0
    BNE = 0x1
    BLT = 0x4
    BGE = 0x5
    BLTU = 0x6
    BGEU = 0x7

    # Memory ordering (Zifencei)
    FENCE = 0x0
    FENCE_I = 0x1

    # Environment calls
    PRIV = 0x0


class Funct7(IntEnum):
    """7-bit function codes."""

    DEFAULT = 0x00
    ALTERNATE = 0x20  # Used for SUB, SRA, SRAI


class Funct12(IntEnum):
    """12-bit function codes for SYSTEM instructions (imm[11:0])."""

    ECALL = 0x000
    EBREAK = 0x001
    FENCE_I = 0x000  # FENCE.I reserves imm[11:0] as zero


# Operand slot names. Register slots take a Register, the others an Immediate.
RD = "rd"
RS1 = "rs1"
RS2 = "rs2"
IMM = "imm"
SHAMT = "shamt"
PRED = "pred"
SUCC = "succ"

REGISTER_SLOTS = frozenset({RD, RS1, RS2})
IMMEDIATE_SLOTS = frozenset({IMM, SHAMT, PRED, SUCC})

# Rendering styles
SYNTAX_REG = "reg"  # op a, b, c
SYNTAX_MEM = "mem"  # op a, imm(base)
SYNTAX_FENCE = "fence"  # fence iorw, iorw


@dataclass(frozen=True)
class InstructionDescriptor:
    """Static description of one RV32I instruction.

    Attributes:
        mnemonic: Lowercase assembly mnemonic
        fmt: Instruction format
        opcode: 7-bit opcode
        funct3: 3-bit function code, or None for U/J formats
        funct7: 7-bit function code (R-type, shift-immediates), or None
        funct12: Fixed imm[11:0] for SYSTEM instructions, or None
        operands: Operand slots in assembly order
        syntax: Rendering style (reg, mem or fence)
    """

    mnemonic: str
    fmt: Format
    opcode: int
    funct3: int | None = None
    funct7: int | None = None
    funct12: int | None = None
    operands: tuple[str, ...] = ()
    syntax: str = SYNTAX_REG

    @property
    def key(self) -> tuple[int, int | None, int | None, int | None]:
        """Reverse-index key (opcode, funct3, funct7, funct12)."""
        return (self.opcode, self.funct3, self.funct7, self.funct12)

    @property
    def is_pc_relative(self) -> bool:
        """True for branches and JAL, whose immediate is a PC offset."""
        return self.fmt in (Format.B, Format.J)


def make_r(f7: int, f3: int) -> dict:
    """Create R-type register-register descriptor fields."""
    return dict(
        fmt=Format.R,
        opcode=Opcode.ALU_REG,
        funct3=f3,
        funct7=f7,
        operands=(RD, RS1, RS2),
    )


def make_i(f3: int) -> dict:
    """Create I-type ALU immediate descriptor fields."""
    return dict(fmt=Format.I, opcode=Opcode.ALU_IMM, funct3=f3, operands=(RD, RS1, IMM))


def make_i_shift(f3: int, f7: int) -> dict:
    """Create I-type shift descriptor fields (funct7 lives in imm[11:5])."""
    return dict(
        fmt=Format.I,
        opcode=Opcode.ALU_IMM,
        funct3=f3,
        funct7=f7,
        operands=(RD, RS1, SHAMT),
    )


def make_load(f3: int) -> dict:
    """Create load descriptor fields: ``lw rd, imm(rs1)``."""
    return dict(
        fmt=Format.I,
        opcode=Opcode.LOAD,
        funct3=f3,
        operands=(RD, IMM, RS1),
        syntax=SYNTAX_MEM,
    )


def make_store(f3: int) -> dict:
    """Create store descriptor fields: ``sw rs2, imm(rs1)``."""
    return dict(
        fmt=Format.S,
        opcode=Opcode.STORE,
        funct3=f3,
        operands=(RS2, IMM, RS1),
        syntax=SYNTAX_MEM,
    )


def make_branch(f3: int) -> dict:
    """Create branch descriptor fields: ``beq rs1, rs2, offset``."""
    return dict(
        fmt=Format.B, opcode=Opcode.BRANCH, funct3=f3, operands=(RS1, RS2, IMM)
    )


def make_upper(opcode: int) -> dict:
    """Create U-type descriptor fields: ``lui rd, imm20``."""
    return dict(fmt=Format.U, opcode=opcode, operands=(RD, IMM))


def make_system(f12: int) -> dict:
    """Create SYSTEM descriptor fields (no operands)."""
    return dict(
        fmt=Format.I, opcode=Opcode.SYSTEM, funct3=Funct3.PRIV, funct12=f12
    )


def _table(entries: dict[str, dict]) -> dict[str, InstructionDescriptor]:
    return {
        name: InstructionDescriptor(name, **fields)
        for name, fields in entries.items()
    }


# operation tables (mnemonic -> descriptor)
R_ALU = _table(
    {
        "add": make_r(Funct7.DEFAULT, Funct3.ADD_SUB),
        "sub": make_r(Funct7.ALTERNATE, Funct3.ADD_SUB),
        "sll": make_r(Funct7.DEFAULT, Funct3.SLL),
        "slt": make_r(Funct7.DEFAULT, Funct3.SLT),
        "sltu": make_r(Funct7.DEFAULT, Funct3.SLTU),
        "xor": make_r(Funct7.DEFAULT, Funct3.XOR),
        "srl": make_r(Funct7.DEFAULT, Funct3.SRL_SRA),
        "sra": make_r(Funct7.ALTERNATE, Funct3.SRL_SRA),
        "or": make_r(Funct7.DEFAULT, Funct3.OR),
        "and": make_r(Funct7.DEFAULT, Funct3.AND),
    }
)

I_ALU = _table(
    {
        "addi": make_i(Funct3.ADD_SUB),
        "slti": make_i(Funct3.SLT),
        "sltiu": make_i(Funct3.SLTU),
        "xori": make_i(Funct3.XOR),
        "ori": make_i(Funct3.OR),
        "andi": make_i(Funct3.AND),
        "slli": make_i_shift(Funct3.SLL, Funct7.DEFAULT),
        "srli": make_i_shift(Funct3.SRL_SRA, Funct7.DEFAULT),
        "srai": make_i_shift(Funct3.SRL_SRA, Funct7.ALTERNATE),
    }
)

LOADS = _table(
    {
        "lb": make_load(Funct3.BYTE),
        "lh": make_load(Funct3.HALFWORD),
        "lw": make_load(Funct3.WORD),
        "lbu": make_load(Funct3.BYTE_U),
        "lhu": make_load(Funct3.HALFWORD_U),
    }
)

STORES = _table(
    {
        "sb": make_store(Funct3.BYTE),
        "sh": make_store(Funct3.HALFWORD),
        "sw": make_store(Funct3.WORD),
    }
)

BRANCHES = _table(
    {
        "beq": make_branch(Funct3.BEQ),
        "bne": make_branch(Funct3.BNE),
        "blt": make_branch(Funct3.BLT),
        "bge": make_branch(Funct3.BGE),
        "bltu": make_branch(Funct3.BLTU),
        "bgeu": make_branch(Funct3.BGEU),
    }
)

JUMPS = _table(
    {
        "jal": dict(fmt=Format.J, opcode=Opcode.JAL, operands=(RD, IMM)),
        "jalr": dict(
            fmt=Format.I,
            opcode=Opcode.JALR,
            funct3=0x0,
            operands=(RD, IMM, RS1),
            syntax=SYNTAX_MEM,
        ),
    }
)

UPPER = _table(
    {
        "lui": make_upper(Opcode.LUI),
        "auipc": make_upper(Opcode.AUIPC),
    }
)

# Zifencei extension - memory ordering instructions
# FENCE keeps fm in imm[11:8] (always 0 here), pred in imm[7:4], succ in imm[3:0]
FENCES = _table(
    {
        "fence": dict(
            fmt=Format.I,
            opcode=Opcode.MISC_MEM,
            funct3=Funct3.FENCE,
            operands=(PRED, SUCC),
            syntax=SYNTAX_FENCE,
        ),
        "fence.i": dict(
            fmt=Format.I,
            opcode=Opcode.MISC_MEM,
            funct3=Funct3.FENCE_I,
            funct12=Funct12.FENCE_I,
        ),
    }
)

SYSTEM = _table(
    {
        "ecall": make_system(Funct12.ECALL),
        "ebreak": make_system(Funct12.EBREAK),
    }
)

ALL_TABLES: tuple[dict[str, InstructionDescriptor], ...] = (
    R_ALU,
    I_ALU,
    LOADS,
    STORES,
    BRANCHES,
    JUMPS,
    UPPER,
    FENCES,
    SYSTEM,
)


def _build_instructions() -> dict[str, InstructionDescriptor]:
    merged: dict[str, InstructionDescriptor] = {}
    for table in ALL_TABLES:
        for name, descriptor in table.items():
            if name in merged:
                raise CatalogInvariantViolation(
                    "Mnemonic defined twice", mnemonic=name
                )
            merged[name] = descriptor
    return merged


def _build_reverse_index(
    instructions: dict[str, InstructionDescriptor],
) -> dict[tuple, InstructionDescriptor]:
    index: dict[tuple, InstructionDescriptor] = {}
    for descriptor in instructions.values():
        existing = index.get(descriptor.key)
        if existing is not None:
            raise CatalogInvariantViolation(
                "Two instructions share the same encoding",
                first=existing.mnemonic,
                second=descriptor.mnemonic,
                key=descriptor.key,
            )
        index[descriptor.key] = descriptor
    return index


def validate_table(instructions: dict[str, InstructionDescriptor]) -> None:
    """Check that no two descriptors can claim the same word.

    Exact key collisions are caught while building the reverse index. This
    also rejects a wildcard funct3 sharing an opcode with other entries, and
    a wildcard funct7 sharing (opcode, funct3) with a pinned one.

    Raises:
        CatalogInvariantViolation: If decoding could be ambiguous.
    """
    by_opcode: dict[int, list[InstructionDescriptor]] = {}
    for descriptor in instructions.values():
        by_opcode.setdefault(descriptor.opcode, []).append(descriptor)

    for opcode, group in by_opcode.items():
        formats = {d.fmt for d in group}
        if len(formats) != 1:
            raise CatalogInvariantViolation(
                "Opcode used by more than one format",
                opcode=hex(opcode),
                formats=sorted(f.value for f in formats),
            )
        if any(d.funct3 is None for d in group) and len(group) > 1:
            raise CatalogInvariantViolation(
                "Wildcard funct3 overlaps another entry", opcode=hex(opcode)
            )
        by_funct3: dict[int | None, list[InstructionDescriptor]] = {}
        for d in group:
            by_funct3.setdefault(d.funct3, []).append(d)
        for funct3, siblings in by_funct3.items():
            pinned = [d for d in siblings if d.funct7 is not None]
            if pinned and len(pinned) != len(siblings):
                raise CatalogInvariantViolation(
                    "Wildcard funct7 overlaps a pinned entry",
                    opcode=hex(opcode),
                    funct3=funct3,
                    mnemonics=[d.mnemonic for d in siblings],
                )


INSTRUCTIONS: MappingProxyType[str, InstructionDescriptor] = MappingProxyType(
    _build_instructions()
)
validate_table(dict(INSTRUCTIONS))
_REVERSE_INDEX: MappingProxyType[tuple, InstructionDescriptor] = MappingProxyType(
    _build_reverse_index(dict(INSTRUCTIONS))
)


def lookup_by_mnemonic(name: str) -> InstructionDescriptor | None:
    """Return the descriptor for a mnemonic, or None if unknown."""
    return INSTRUCTIONS.get(name.lower())


def lookup_by_bits(
    opcode: int,
    funct3: int | None = None,
    funct7: int | None = None,
    funct12: int | None = None,
) -> InstructionDescriptor | None:
    """Return the descriptor matching the given selector bits, or None.

    The most specific entry wins: a descriptor that pins funct12 or funct7
    is tried before one that leaves them as don't-care, and U/J entries that
    ignore funct3 are tried last.

    Args:
        opcode: 7-bit opcode
        funct3: funct3 as seen by the candidate format (None if it has none)
        funct7: funct7 / imm[11:5] as seen by the candidate format
        funct12: imm[11:0] as seen by the candidate format

    Returns:
        Matching descriptor, or None for an unknown combination
    """
    for f3 in _candidates(funct3):
        for f7 in _candidates(funct7):
            for f12 in _candidates(funct12):
                descriptor = _REVERSE_INDEX.get((opcode, f3, f7, f12))
                if descriptor is not None:
                    return descriptor
    return None


def _candidates(value: int | None) -> tuple[int | None, ...]:
    return (value, None) if value is not None else (None,)
