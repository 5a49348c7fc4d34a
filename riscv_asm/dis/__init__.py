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

"""Disassembler front end: ELF input, stream decoding and listing output.

Modules
-------
elf_reader
    Reads a code section and its labels from an RV32 ELF file (pyelftools)

disassembly
    Word stream decoding, LLVM-style listing and hex dump formatting
"""

from riscv_asm.dis.disassembly import (
    DisassemblyEntry,
    disassemble,
    format_hexdump,
    format_listing,
    iter_words,
)
from riscv_asm.dis.elf_reader import CodeSection, read_code_section

__all__ = [
    "CodeSection",
    "DisassemblyEntry",
    "disassemble",
    "format_hexdump",
    "format_listing",
    "iter_words",
    "read_code_section",
]
