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

"""Operand validation for the encoder.

Validation Utilities
====================

Range checks that guard the encoder. The immediate codec truncates silently,
so every operand is checked here first and rejected with an
``OperandOutOfRangeError`` that names the value and its legal bounds.

Provided Utilities:

    Assertion Functions:
        - assert_in_range(): Check value bounds
        - assert_aligned(): Verify offset alignment

    OperandAssertions: RISC-V-specific checks
        - assert_register_valid(): Register index in [0, 31]
        - assert_immediate_12bit(): Immediate in [-2048, 2047]
        - assert_upper_immediate(): U-type operand in [0, 2^20 - 1]
        - assert_branch_offset(): Valid branch offset (even, in range)
        - assert_jump_offset(): Valid JAL offset (even, in range)
        - assert_shift_amount(): Shift amount in [0, 31]
        - assert_fence_set(): FENCE predecessor/successor set in [0, 15]

Example:
    >>> try:
    ...     OperandAssertions.assert_register_valid(32)
    ... except OperandOutOfRangeError as e:
    ...     print(e.maximum)  # 31
"""

from typing import Any

from riscv_asm.config import (
    BRANCH_OFFSET_MAX,
    BRANCH_OFFSET_MIN,
    FENCE_MASK_MAX,
    FIRST_REGISTER,
    IMM_12BIT_MAX,
    IMM_12BIT_MIN,
    JAL_OFFSET_MAX,
    JAL_OFFSET_MIN,
    LAST_REGISTER,
    SHIFT_AMOUNT_MASK,
    UPPER_IMM_MAX,
    UPPER_IMM_MIN,
)
from riscv_asm.exceptions import OperandOutOfRangeError


def assert_in_range(
    value: int, min_val: int, max_val: int, name: str = "value", **context: Any
) -> None:
    """Assert value is within range."""
    if not min_val <= value <= max_val:
        raise OperandOutOfRangeError(
            f"{name} out of range",
            value=value,
            minimum=min_val,
            maximum=max_val,
            **context,
        )


def assert_aligned(
    value: int, alignment: int, name: str = "value", **context: Any
) -> None:
    """Assert value is a multiple of ``alignment``."""
    if value % alignment != 0:
        raise OperandOutOfRangeError(
            f"{name} not aligned to {alignment}-byte boundary",
            value=value,
            alignment=alignment,
            misalignment=value % alignment,
            **context,
        )


class OperandAssertions:
    """RISC-V operand checks used by the encoder."""

    @staticmethod
    def assert_register_valid(reg: int, **context: Any) -> None:
        """Assert register number is valid."""
        assert_in_range(reg, FIRST_REGISTER, LAST_REGISTER, "register", **context)

    @staticmethod
    def assert_immediate_12bit(imm: int, **context: Any) -> None:
        """Assert immediate fits in 12 bits (signed)."""
        assert_in_range(
            imm, IMM_12BIT_MIN, IMM_12BIT_MAX, "12-bit immediate", **context
        )

    @staticmethod
    def assert_upper_immediate(imm: int, **context: Any) -> None:
        """Assert U-type immediate fits in 20 bits (unsigned)."""
        assert_in_range(
            imm, UPPER_IMM_MIN, UPPER_IMM_MAX, "20-bit immediate", **context
        )

    @staticmethod
    def assert_branch_offset(offset: int, **context: Any) -> None:
        """Assert branch offset is valid."""
        assert_aligned(offset, 2, "branch offset", **context)
        assert_in_range(
            offset, BRANCH_OFFSET_MIN, BRANCH_OFFSET_MAX, "branch offset", **context
        )

    @staticmethod
    def assert_jump_offset(offset: int, **context: Any) -> None:
        """Assert jump offset is valid."""
        assert_aligned(offset, 2, "jump offset", **context)
        assert_in_range(
            offset, JAL_OFFSET_MIN, JAL_OFFSET_MAX, "jump offset", **context
        )

    @staticmethod
    def assert_shift_amount(shamt: int, **context: Any) -> None:
        """Assert shift amount fits in 5 bits (unsigned)."""
        assert_in_range(shamt, 0, SHIFT_AMOUNT_MASK, "shift amount", **context)

    @staticmethod
    def assert_fence_set(value: int, **context: Any) -> None:
        """Assert FENCE ordering set fits in 4 bits."""
        assert_in_range(value, 0, FENCE_MASK_MAX, "fence set", **context)
