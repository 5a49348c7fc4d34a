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

"""Central configuration for the assembler and disassembler.

Configuration
=============

This module contains all configuration constants used throughout the
encode/decode engine and the disassembly front end. Centralizing these values
keeps bit widths, immediate ranges and output layout in one place.

Organization:
    Constants are organized into logical sections:
    - Register File Configuration (count, indices, ABI names)
    - RISC-V Data Type Masks
    - Instruction Word Layout (size, field widths)
    - Immediate Field Constraints (ranges per format)
    - ELF Input Defaults
    - Listing Output Layout

Usage:
    Import specific constants as needed:
    >>> from riscv_asm.config import IMM_12BIT_MIN, IMM_12BIT_MAX
    >>> if not (IMM_12BIT_MIN <= imm <= IMM_12BIT_MAX):
    ...     raise ValueError("Immediate out of range")

    Or build per-run options for the disassembler:
    >>> from riscv_asm.config import DisassemblerOptions
    >>> options = DisassemblerOptions(allow_pseudo=False)
"""

from dataclasses import dataclass
from typing import Final

# ============================================================================
# Register File Configuration
# ============================================================================

FIRST_REGISTER: Final[int] = 0
"""First register index (x0 is hardwired to zero)."""

LAST_REGISTER: Final[int] = 31
"""Last register index."""

REGISTER_FIELD_WIDTH: Final[int] = 5
"""Width of rd/rs1/rs2 fields in bits."""

ABI_REGISTER_NAMES: Final[tuple[str, ...]] = (
    "zero",
    "ra",
    "sp",
    "gp",
    "tp",
    "t0",
    "t1",
    "t2",
    "s0",
    "s1",
    "a0",
    "a1",
    "a2",
    "a3",
    "a4",
    "a5",
    "a6",
    "a7",
    "s2",
    "s3",
    "s4",
    "s5",
    "s6",
    "s7",
    "s8",
    "s9",
    "s10",
    "s11",
    "t3",
    "t4",
    "t5",
    "t6",
)
"""Standard calling-convention names, indexed by register number."""

ABI_REGISTER_ALIASES: Final[dict[str, int]] = {"fp": 8}
"""Extra accepted spellings (fp is the frame-pointer alias of s0)."""

ZERO_REGISTER: Final[int] = 0
"""Index of the hardwired zero register."""

RETURN_ADDRESS_REGISTER: Final[int] = 1
"""Index of ra, the standard link register."""

# ============================================================================
# RISC-V Data Type Masks
# ============================================================================

MASK32: Final[int] = (1 << 32) - 1
"""32-bit mask (0xFFFF_FFFF)."""

# ============================================================================
# Instruction Word Layout
# ============================================================================

INSTRUCTION_WIDTH_BITS: Final[int] = 32
"""Every RV32I instruction is exactly one 32-bit word."""

INSTRUCTION_SIZE_BYTES: Final[int] = 4
"""Size of one instruction in bytes."""

INSTRUCTION_BYTE_ORDER: Final = "little"
"""Byte order of instruction words in a binary image."""

OPCODE_MASK: Final[int] = 0x7F
"""Mask for opcode[6:0]; the opcode position is the same in every format."""

UNCOMPRESSED_QUADRANT: Final[int] = 0b11
"""Value of bits [1:0] for a 32-bit (non-compressed) instruction."""

OPCODE_WIDTH: Final[int] = 7
"""Width of opcode[6:0] in bits."""

FUNCT3_WIDTH: Final[int] = 3
"""Width of funct3[14:12] in bits."""

FUNCT7_WIDTH: Final[int] = 7
"""Width of funct7[31:25] in bits."""

# ============================================================================
# Immediate Field Constraints
# ============================================================================

IMM_12BIT_MIN: Final[int] = -2048
"""Minimum value for 12-bit signed immediate (-2^11)."""

IMM_12BIT_MAX: Final[int] = 2047
"""Maximum value for 12-bit signed immediate (2^11 - 1)."""

SHIFT_AMOUNT_MASK: Final[int] = 0x1F
"""Mask for shift amount (5 bits)."""

BRANCH_OFFSET_MIN: Final[int] = -4096
"""Minimum branch offset in bytes (-2^12)."""

BRANCH_OFFSET_MAX: Final[int] = 4094
"""Maximum branch offset in bytes (2^12 - 2, must be even)."""

UPPER_IMM_MIN: Final[int] = 0
"""Smallest accepted U-type operand (the field is written unsigned)."""

UPPER_IMM_MAX: Final[int] = (1 << 20) - 1
"""Largest accepted U-type operand (20-bit unsigned spelling)."""

UPPER_IMM_MASK: Final[int] = 0xFFFFF
"""Mask for the 20-bit upper immediate."""

UPPER_IMM_SHIFT: Final[int] = 12
"""The U-type immediate occupies bits [31:12] of the value it builds."""

JAL_OFFSET_MIN: Final[int] = -1048576
"""Minimum JAL offset in bytes (-2^20)."""

JAL_OFFSET_MAX: Final[int] = 1048574
"""Maximum JAL offset in bytes (2^20 - 2, must be even)."""

FENCE_MASK_MAX: Final[int] = 0xF
"""Largest predecessor/successor set for FENCE (4 bits: i, o, r, w)."""

FENCE_MASK_LETTERS: Final[str] = "iorw"
"""Letters for fence set bits 3..0."""

# ============================================================================
# ELF Input Defaults
# ============================================================================

DEFAULT_TEXT_SECTION: Final[str] = ".text"
"""Section holding executable code."""

DEFAULT_OUTPUT_SUFFIX: Final[str] = ".s"
"""Suffix of the listing file derived from the input path."""

# ============================================================================
# Listing Output Layout
# ============================================================================

WORDS_PER_HEXDUMP_LINE: Final[int] = 4
"""Number of words shown on each hex dump line."""

RAW_BYTES_PADDING: Final[int] = 17
"""Blank columns between the raw bytes and the instruction text."""

UNKNOWN_INSTRUCTION_TEXT: Final[str] = "???"
"""Placeholder printed for words that do not decode."""


@dataclass
class DisassemblerOptions:
    """Per-run switches for the disassembler front end.

    This is a dataclass so that options are passed explicitly to each stage
    rather than read from module-level state.

    Attributes:
        allow_pseudo: Render decoded words as equivalent pseudo-instructions
            when one exists (``addi x0, x0, 0`` -> ``nop``). Only affects text.
        abi_names: Render registers by ABI name (``a0``) instead of ``x10``.
        section: Name of the ELF section to disassemble.
        hexdump: Emit a hex dump of the raw words ahead of the listing.
    """

    allow_pseudo: bool = True
    abi_names: bool = True
    section: str = DEFAULT_TEXT_SECTION
    hexdump: bool = False
