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

"""Instruction decoder: 32-bit words back to mnemonics and operands."""

from riscv_asm.decoders.instruction_decode import (
    DecodedInstruction,
    decode,
    try_decode,
)

__all__ = [
    "DecodedInstruction",
    "decode",
    "try_decode",
]
