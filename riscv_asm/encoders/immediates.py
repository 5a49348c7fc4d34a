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

"""Immediate packing and unpacking for split immediate fields.

Immediate Codec
===============

Immediates are stored in the fields the format catalog marks with an
``imm[hi:lo]`` range. Packing slices the two's-complement value into those
ranges with shift-and-mask; unpacking shifts each field back to its logical
position, ORs the pieces together and sign-extends from the immediate's
logical width.

Logical widths follow from the catalog (highest immediate bit + 1):

    ======  ======  ====================================================
    Format  Width   Notes
    ======  ======  ====================================================
    I       12      imm[11:0] contiguous
    S       12      imm[4:0] and imm[11:5] in two fields
    B       13      imm[0] implicit zero, imm[12|10:5|4:1|11] scattered
    U       32      imm[11:0] implicit zero, imm[31:12] stored
    J       21      imm[0] implicit zero, imm[20|10:1|11|19:12] scattered
    ======  ======  ====================================================

Packing does NOT range-check: out-of-range values are truncated to the field
widths, exactly as hardware would see a badly encoded program. The encoder
validates operands before calling ``pack_immediate``.

Example:
    >>> pack_immediate(Format.S, -4)
    {'imm[4:0]': 28, 'imm[11:5]': 127}
    >>> unpack_immediate(Format.I, {"imm[11:0]": 0xFFF})
    -1
"""

from collections.abc import Mapping

from riscv_asm.encoders.formats import FORMAT_LAYOUTS, Format, immediate_fields
from riscv_asm.utils.riscv_utils import sign_extend, signed_range

__all__ = [
    "immediate_width",
    "implicit_low_bits",
    "immediate_range",
    "pack_immediate",
    "unpack_immediate",
]


def _logical_width(fmt: Format) -> int:
    fields = immediate_fields(fmt)
    if not fields:
        return 0
    return max(f.imm_hi for f in fields) + 1


def _implicit_low_bits(fmt: Format) -> int:
    fields = immediate_fields(fmt)
    if not fields:
        return 0
    return min(f.imm_lo for f in fields)


_IMMEDIATE_WIDTHS = {fmt: _logical_width(fmt) for fmt in FORMAT_LAYOUTS}
_IMPLICIT_LOW_BITS = {fmt: _implicit_low_bits(fmt) for fmt in FORMAT_LAYOUTS}


def immediate_width(fmt: Format) -> int:
    """Logical width of the format's immediate in bits (0 if none)."""
    return _IMMEDIATE_WIDTHS[fmt]


def implicit_low_bits(fmt: Format) -> int:
    """Number of low immediate bits that are implied zero, not stored."""
    return _IMPLICIT_LOW_BITS[fmt]


def immediate_range(fmt: Format) -> tuple[int, int]:
    """Inclusive signed range of the format's logical immediate."""
    return signed_range(_IMMEDIATE_WIDTHS[fmt])


def pack_immediate(fmt: Format, value: int) -> dict[str, int]:
    """Split a logical immediate into the format's immediate fields.

    Args:
        fmt: Instruction format
        value: Logical immediate (signed Python int)

    Returns:
        Mapping of immediate field name to its unsigned field value
    """
    return {
        f.name: (value >> f.imm_lo) & f.mask for f in immediate_fields(fmt)
    }


def unpack_immediate(fmt: Format, fields: Mapping[str, int]) -> int:
    """Reassemble a logical immediate from the format's immediate fields.

    Fields are combined in catalog order, each shifted to the logical bit
    position it carries; implicit low bits stay zero. The result is
    sign-extended from the logical width, not from 32 bits, so a 12-bit
    ``0xFFF`` yields -1.

    Args:
        fmt: Instruction format
        fields: Field values keyed by field name (extra keys are ignored)

    Returns:
        Signed logical immediate
    """
    value = 0
    for f in immediate_fields(fmt):
        value |= (fields[f.name] & f.mask) << f.imm_lo
    width = _IMMEDIATE_WIDTHS[fmt]
    if width == 0:
        return 0
    return sign_extend(value, width)
