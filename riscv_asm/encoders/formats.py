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

"""RISC-V instruction format catalog.

Instruction Formats
===================

Static description of the six RV32I base formats. Each format is an ordered
tuple of field descriptors read LOW BIT FIRST: the first field occupies bits
starting at 0 (the opcode, always bits [6:0]) and each following field starts
where the previous one ended. The widths of every format sum to exactly 32.

Fields that carry part of the immediate record which logical immediate bits
they hold (``imm_hi``/``imm_lo``). For S, B and J the immediate is split
across non-contiguous fields; B and J additionally scramble the bit order
so that the sign bit always lands in instruction bit 31.

RISC-V Instruction Encodings by type (bit 0 on the left, as listed here)::

    R  | opcode:7 | rd:5        | funct3:3 | rs1:5 | rs2:5     | funct7:7     |
    I  | opcode:7 | rd:5        | funct3:3 | rs1:5 | imm[11:0]:12             |
    S  | opcode:7 | imm[4:0]:5  | funct3:3 | rs1:5 | rs2:5     | imm[11:5]:7  |
    B  | opcode:7 | imm[11]:1 | imm[4:1]:4 | funct3:3 | rs1:5 | rs2:5
       | imm[10:5]:6 | imm[12]:1 |
    U  | opcode:7 | rd:5        | imm[31:12]:20                               |
    J  | opcode:7 | rd:5        | imm[19:12]:8 | imm[11]:1 | imm[10:1]:10
       | imm[20]:1 |

Usage Example:
    >>> fields = extract_fields(Format.R, 0x004181B3)  # add x3, x3, x4
    >>> fields["rd"], fields["rs1"], fields["rs2"]
    (3, 3, 4)
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from riscv_asm.config import (
    FUNCT3_WIDTH,
    FUNCT7_WIDTH,
    INSTRUCTION_WIDTH_BITS,
    OPCODE_WIDTH,
    REGISTER_FIELD_WIDTH,
)
from riscv_asm.exceptions import CatalogInvariantViolation
from riscv_asm.utils.riscv_utils import mask


class Format(Enum):
    """RV32I base instruction formats."""

    R = "R"
    I = "I"  # noqa: E741
    S = "S"
    B = "B"
    U = "U"
    J = "J"


@dataclass(frozen=True)
class FieldDescriptor:
    """One bit field of an instruction format.

    Attributes:
        name: Field name (``opcode``, ``rd``, ``imm[4:0]`` ...)
        width: Width in bits
        sign_significant: True for the field holding the immediate's sign bit
        imm_hi: Highest logical immediate bit carried, or None
        imm_lo: Lowest logical immediate bit carried, or None
    """

    name: str
    width: int
    sign_significant: bool = False
    imm_hi: int | None = None
    imm_lo: int | None = None

    @property
    def is_immediate(self) -> bool:
        """True if this field carries immediate bits."""
        return self.imm_lo is not None

    @property
    def mask(self) -> int:
        """Mask for the field's value after shifting to bit 0."""
        return mask(self.width)


def _field(name: str, width: int) -> FieldDescriptor:
    """Create a non-immediate field."""
    return FieldDescriptor(name, width)


def _imm(hi: int, lo: int, sign: bool = False) -> FieldDescriptor:
    """Create an immediate field carrying logical bits [hi:lo]."""
    name = f"imm[{hi}]" if hi == lo else f"imm[{hi}:{lo}]"
    return FieldDescriptor(name, hi - lo + 1, sign, hi, lo)


OPCODE = _field("opcode", OPCODE_WIDTH)
RD = _field("rd", REGISTER_FIELD_WIDTH)
FUNCT3 = _field("funct3", FUNCT3_WIDTH)
RS1 = _field("rs1", REGISTER_FIELD_WIDTH)
RS2 = _field("rs2", REGISTER_FIELD_WIDTH)
FUNCT7 = _field("funct7", FUNCT7_WIDTH)

# Format catalog: low-bit-first field order
FORMAT_LAYOUTS: MappingProxyType[Format, tuple[FieldDescriptor, ...]] = (
    MappingProxyType(
        {
            Format.R: (OPCODE, RD, FUNCT3, RS1, RS2, FUNCT7),
            Format.I: (OPCODE, RD, FUNCT3, RS1, _imm(11, 0, sign=True)),
            Format.S: (OPCODE, _imm(4, 0), FUNCT3, RS1, RS2, _imm(11, 5, sign=True)),
            Format.B: (
                OPCODE,
                _imm(11, 11),
                _imm(4, 1),
                FUNCT3,
                RS1,
                RS2,
                _imm(10, 5),
                _imm(12, 12, sign=True),
            ),
            Format.U: (OPCODE, RD, _imm(31, 12, sign=True)),
            Format.J: (
                OPCODE,
                RD,
                _imm(19, 12),
                _imm(11, 11),
                _imm(10, 1),
                _imm(20, 20, sign=True),
            ),
        }
    )
)


def layout(fmt: Format) -> tuple[FieldDescriptor, ...]:
    """Return the ordered field descriptors of a format."""
    return FORMAT_LAYOUTS[fmt]


def field_positions(fmt: Format) -> tuple[tuple[FieldDescriptor, int], ...]:
    """Return ``(descriptor, lsb)`` pairs for a format, low bit first."""
    return _FIELD_POSITIONS[fmt]


def field_position(fmt: Format, name: str) -> tuple[FieldDescriptor, int] | None:
    """Return ``(descriptor, lsb)`` of a named field, or None if absent."""
    for descriptor, position in _FIELD_POSITIONS[fmt]:
        if descriptor.name == name:
            return descriptor, position
    return None


def immediate_fields(fmt: Format) -> tuple[FieldDescriptor, ...]:
    """Return the immediate-carrying fields of a format in layout order."""
    return tuple(f for f in FORMAT_LAYOUTS[fmt] if f.is_immediate)


def extract_fields(fmt: Format, word: int) -> dict[str, int]:
    """Split a word into its named field values under the given format.

    Args:
        fmt: Format to interpret the word as
        word: 32-bit instruction word

    Returns:
        Mapping of field name to its unsigned value
    """
    return {
        descriptor.name: (word >> position) & descriptor.mask
        for descriptor, position in _FIELD_POSITIONS[fmt]
    }


def insert_fields(fmt: Format, values: dict[str, int]) -> int:
    """Pack named field values into a 32-bit word.

    Each value is masked to its field width and OR-ed into place; fields
    missing from ``values`` are left zero.

    Args:
        fmt: Format giving the field positions
        values: Mapping of field name to value

    Returns:
        32-bit packed instruction word
    """
    result = 0
    for descriptor, position in _FIELD_POSITIONS[fmt]:
        value = values.get(descriptor.name, 0)
        result |= (value & descriptor.mask) << position
    return result


def validate_catalog(
    layouts: Mapping[Format, tuple[FieldDescriptor, ...]],
) -> None:
    """Check the structural invariants of every format in ``layouts``.

    Raises:
        CatalogInvariantViolation: If widths do not sum to 32, the opcode is
            not first, field names repeat, or the sign bit is not bit 31.
    """
    for fmt, fields in layouts.items():
        total = sum(f.width for f in fields)
        if total != INSTRUCTION_WIDTH_BITS:
            raise CatalogInvariantViolation(
                "Format field widths do not sum to 32",
                format=fmt.value,
                total_width=total,
            )
        if fields[0] != OPCODE:
            raise CatalogInvariantViolation(
                "Opcode must be the first field", format=fmt.value
            )
        names = [f.name for f in fields]
        if len(set(names)) != len(names):
            raise CatalogInvariantViolation(
                "Duplicate field name in format", format=fmt.value, fields=names
            )
        signs = [f for f in fields if f.sign_significant]
        has_immediate = any(f.is_immediate for f in fields)
        if has_immediate and (len(signs) != 1 or fields[-1] is not signs[0]):
            raise CatalogInvariantViolation(
                "Immediate sign bit must be carried by the top field",
                format=fmt.value,
            )


def _compute_positions() -> dict[Format, tuple[tuple[FieldDescriptor, int], ...]]:
    positions = {}
    for fmt, fields in FORMAT_LAYOUTS.items():
        lsb = 0
        placed = []
        for descriptor in fields:
            placed.append((descriptor, lsb))
            lsb += descriptor.width
        positions[fmt] = tuple(placed)
    return positions


validate_catalog(FORMAT_LAYOUTS)
_FIELD_POSITIONS = MappingProxyType(_compute_positions())
