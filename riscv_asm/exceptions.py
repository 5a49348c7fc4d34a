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

"""Custom exceptions for encoding and decoding errors.

Exceptions
==========

This module defines a hierarchy of exception types for the failure scenarios
of the encode/decode engine and the ELF front end. Every error carries a
``context`` dict with the values that caused it, rendered into the message
so a failure can be diagnosed without a debugger.

Hierarchy::

    RiscvAsmError
    ├── EncodeError
    │   ├── UnknownMnemonicError
    │   ├── OperandArityMismatchError
    │   ├── OperandKindError
    │   └── OperandOutOfRangeError
    ├── DecodeError
    │   └── UnknownEncodingError
    ├── CatalogInvariantViolation
    └── ElfFormatError
"""

from typing import Any


class RiscvAsmError(Exception):
    """Base exception for all assembler/disassembler failures.

    All package-specific exceptions inherit from this base class,
    allowing callers to catch every error with a single handler.
    """

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize with message and context.

        Args:
            message: Error description
            context: Values that describe the failing input
        """
        self.message = message
        self.context = context
        context_str = "\n".join(f"  {k}: {v}" for k, v in context.items())
        super().__init__(
            f"{message}\nContext:\n{context_str}" if context else message
        )


class EncodeError(RiscvAsmError):
    """Instruction could not be encoded.

    No partial encoding is ever returned alongside this error.
    """

    pass


class UnknownMnemonicError(EncodeError):
    """No instruction or pseudo-instruction has the requested mnemonic."""

    pass


class OperandArityMismatchError(EncodeError):
    """Wrong number of operands for the instruction."""

    def __init__(
        self,
        message: str,
        expected: int | None = None,
        actual: int | None = None,
        **context: Any,
    ) -> None:
        """Initialize with the expected and supplied operand counts.

        Args:
            message: Error description
            expected: Number of operand slots the instruction has
            actual: Number of operands supplied
            context: Additional context (mnemonic, etc.)
        """
        super().__init__(message, expected=expected, actual=actual, **context)
        self.expected = expected
        self.actual = actual


class OperandKindError(EncodeError):
    """A register slot was given an immediate, or an immediate slot a register."""

    pass


class OperandOutOfRangeError(EncodeError):
    """Operand value does not fit its field.

    Raised for register indices outside [0, 31], immediates outside the
    format's signed range, misaligned branch/jump offsets, and shift amounts
    outside [0, 31]. The check happens before any bits are packed.
    """

    def __init__(
        self,
        message: str,
        value: int | None = None,
        minimum: int | None = None,
        maximum: int | None = None,
        **context: Any,
    ) -> None:
        """Initialize with the rejected value and its legal bounds.

        Args:
            message: Error description
            value: The operand value that was rejected
            minimum: Smallest legal value
            maximum: Largest legal value
            context: Additional context (mnemonic, slot, etc.)
        """
        super().__init__(
            message, value=value, minimum=minimum, maximum=maximum, **context
        )
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class DecodeError(RiscvAsmError):
    """Word could not be decoded into an instruction."""

    def __init__(self, message: str, word: int | None = None, **context: Any) -> None:
        """Initialize with the offending word.

        Args:
            message: Error description
            word: The instruction word that failed to decode
            context: Additional context (opcode, funct3, etc.)
        """
        shown = f"0x{word:08x}" if isinstance(word, int) and word >= 0 else word
        super().__init__(message, word=shown, **context)
        self.word = word


class UnknownEncodingError(DecodeError):
    """Word is not a supported RV32I encoding.

    This is an expected outcome when disassembling foreign binaries (data in
    the text section, compressed or extension instructions) and is handled
    per word.
    """

    pass


class CatalogInvariantViolation(RiscvAsmError):
    """Static format catalog or instruction table is malformed.

    Raised at import time when a format's field widths do not sum to 32 or
    two table entries decode from the same bits. This is a programming
    defect and must stop the process.
    """

    pass


class ElfFormatError(RiscvAsmError):
    """Input file is not a usable RV32 little-endian ELF image."""

    def __init__(self, message: str, path: str | None = None, **context: Any) -> None:
        """Initialize with the offending file path.

        Args:
            message: Error description
            path: Path of the input file
            context: Additional context (machine, section, etc.)
        """
        super().__init__(message, path=path, **context)
        self.path = path
