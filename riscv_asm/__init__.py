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

"""riscv_asm - RV32I instruction encoder, decoder and disassembler.

This package contains a table-driven catalog of the RV32I base instruction
formats and instructions, a bit-exact encoder and decoder built on it, a
single-instruction pseudo layer (nop, li, mv, ret, ...), and a disassembler
front end for RV32 ELF files.

Note: Only the 32-bit base encodings are supported; compressed (C) and
other extension words decode as unknown.
"""

from riscv_asm._version import __version__
from riscv_asm.decoders.instruction_decode import (
    DecodedInstruction,
    decode,
    try_decode,
)
from riscv_asm.encoders.formats import Format
from riscv_asm.encoders.instruction_encode import encode
from riscv_asm.pseudo import collapse, expand
from riscv_asm.types import Immediate, Register, imm, reg

__all__ = [
    "__version__",
    "DecodedInstruction",
    "Format",
    "Immediate",
    "Register",
    "collapse",
    "decode",
    "encode",
    "expand",
    "imm",
    "reg",
    "try_decode",
]
