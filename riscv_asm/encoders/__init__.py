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

"""RISC-V instruction encoding utilities.

This package provides the static RV32I catalog and the binary encoder.

Modules
-------
formats
    Field layouts of the six base formats (R, I, S, B, U, J)

immediates
    Packing and unpacking of split immediate fields

op_tables
    Mapping tables from instruction mnemonics to descriptors.
    This is the primary interface for instruction lookup.

instruction_encode
    Per-format encoders and the mnemonic-level ``encode()``

Usage
-----
To encode an instruction by mnemonic::

    from riscv_asm.encoders import encode
    from riscv_asm.types import reg, imm

    word = encode("lw", [reg(5), imm(16), reg(10)])  # lw x5, 16(x10)
"""

# Re-export the main instruction tables for convenience
from riscv_asm.encoders.op_tables import (
    INSTRUCTIONS,
    R_ALU,
    I_ALU,
    LOADS,
    STORES,
    BRANCHES,
    JUMPS,
    UPPER,
    FENCES,
    SYSTEM,
    InstructionDescriptor,
    lookup_by_bits,
    lookup_by_mnemonic,
)
from riscv_asm.encoders.instruction_encode import encode

__all__ = [
    "INSTRUCTIONS",
    "R_ALU",
    "I_ALU",
    "LOADS",
    "STORES",
    "BRANCHES",
    "JUMPS",
    "UPPER",
    "FENCES",
    "SYSTEM",
    "InstructionDescriptor",
    "lookup_by_bits",
    "lookup_by_mnemonic",
    "encode",
]
