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

"""Type aliases and operand value types.

Types
=====

This module defines the NewTypes used for addresses and instruction words,
and the two operand kinds an instruction takes: registers and immediates.
Operands are small frozen value objects so decoded instructions compare by
value and can be shared freely.
"""

from dataclasses import dataclass
from typing import NewType, Union

from riscv_asm.config import ABI_REGISTER_NAMES, FIRST_REGISTER, LAST_REGISTER

Address = NewType("Address", int)
"""32-bit memory address (0 to 2^32-1)."""

Word = NewType("Word", int)
"""32-bit encoded RISC-V instruction."""


@dataclass(frozen=True)
class Register:
    """General-purpose register operand.

    Construction does not check the index so that a tokenizer can hand an
    out-of-range register to the encoder, which reports it as an
    ``OperandOutOfRangeError``.
    """

    index: int

    @property
    def is_valid(self) -> bool:
        """True if the index names one of x0-x31."""
        return FIRST_REGISTER <= self.index <= LAST_REGISTER

    @property
    def abi_name(self) -> str:
        """Calling-convention name (``a0``), or ``x<n>`` if out of range."""
        if self.is_valid:
            return ABI_REGISTER_NAMES[self.index]
        return f"x{self.index}"

    def render(self, abi_names: bool = True) -> str:
        """Render as assembly text."""
        return self.abi_name if abi_names else f"x{self.index}"

    def __str__(self) -> str:
        return self.abi_name


@dataclass(frozen=True)
class Immediate:
    """Immediate operand.

    The value is the logical, signed integer as written in assembly: a byte
    offset for branches and jumps, the 20-bit upper immediate for LUI/AUIPC,
    a shift amount for shift-immediates.
    """

    value: int

    def __str__(self) -> str:
        return str(self.value)


Operand = Union[Register, Immediate]
"""Any instruction operand."""


def reg(index: int) -> Register:
    """Shorthand for ``Register(index)``."""
    return Register(index)


def imm(value: int) -> Immediate:
    """Shorthand for ``Immediate(value)``."""
    return Immediate(value)
