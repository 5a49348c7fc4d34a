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

"""Utility functions shared by the encoder and decoder.

Modules
-------
riscv_utils
    Integer helpers:
    - Sign extension for arbitrary bit widths
    - Low-bit masks and signed ranges

validation
    Operand range checks:
    - OperandAssertions class for RISC-V-specific validations
    - Register index bounds checking
    - Immediate, offset and shift amount range validation

Usage
-----
Import utilities as needed::

    from riscv_asm.utils.riscv_utils import sign_extend
    from riscv_asm.utils.validation import OperandAssertions

    # Sign extend a 12-bit immediate to full width
    signed_imm = sign_extend(raw_imm, 12)

    # Validate a register index
    OperandAssertions.assert_register_valid(reg_idx)
"""

from riscv_asm.utils.riscv_utils import sign_extend
from riscv_asm.utils.validation import OperandAssertions

__all__ = [
    "sign_extend",
    "OperandAssertions",
]
