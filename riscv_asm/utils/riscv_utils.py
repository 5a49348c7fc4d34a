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

"""RISC-V bit manipulation utilities for sign extension and field access.

RISC-V UTILS
============

This module provides the small integer helpers the codec is built from:
- Sign extension for arbitrary bit widths
- Low-bit masks
- Signed ranges for immediate fields
"""

__all__ = [
    "sign_extend",
    "mask",
    "signed_range",
]


def sign_extend(val: int, bits: int) -> int:
    """Sign extend a value to a specified length in bits.

    Args:
        val: Value to sign-extend
        bits: Number of bits in the original value

    Returns:
        Sign-extended value as a Python int (unbounded)

    Example:
        >>> sign_extend(0xFFF, 12)  # Extend 12-bit -1 to full width
        -1
        >>> sign_extend(0x7FF, 12)  # Extend 12-bit +2047 to full width
        2047
    """
    sign = 1 << (bits - 1)
    return (val & (sign - 1)) - (val & sign)


def mask(width: int) -> int:
    """Return a mask of ``width`` low-order ones."""
    return (1 << width) - 1


def signed_range(width: int) -> tuple[int, int]:
    """Return the inclusive (min, max) of a two's-complement field."""
    return -(1 << (width - 1)), (1 << (width - 1)) - 1
