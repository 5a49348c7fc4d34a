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

"""Single-line assembler front end.

Operand Tokenizer
=================

Turns one line of assembly text into ``(mnemonic, operands)`` and encodes it.
There are no labels, directives or expressions: branch and jump targets are
written as byte offsets.

Accepted operand spellings:
    - Registers: ``x0``-``x31``, ABI names (``a0``, ``sp``...), ``fp``
    - Integers: decimal, ``0x`` hex, ``0b`` binary, with optional sign
    - Memory operands: ``offset(base)`` or ``(base)``, which expand to the
      two operands ``offset, base``
    - FENCE ordering sets: any combination of ``i o r w`` (``iorw``, ``rw``)

Register tokens like ``x32`` parse to an out-of-range Register so the
encoder can report them with the legal bounds. Anything else unparseable
raises ``OperandKindError``.

Example:
    >>> hex(assemble_line("lw a0, 8(sp)"))
    '0x812503'
"""

import re
from collections.abc import Iterable

from riscv_asm.config import (
    ABI_REGISTER_ALIASES,
    ABI_REGISTER_NAMES,
    FENCE_MASK_LETTERS,
)
from riscv_asm.encoders.instruction_encode import encode
from riscv_asm.exceptions import OperandKindError
from riscv_asm.types import Immediate, Operand, Register

_REGISTER_NUMBERS: dict[str, int] = {
    **{name: index for index, name in enumerate(ABI_REGISTER_NAMES)},
    **ABI_REGISTER_ALIASES,
}
_X_REGISTER = re.compile(r"^x(\d+)$")
_MEMORY_OPERAND = re.compile(r"^(?P<offset>[^()]*)\((?P<base>[^()]+)\)$")
_FENCE_SET = re.compile(f"^[{FENCE_MASK_LETTERS}]+$")
COMMENT_CHARS = "#;"


def parse_register(token: str) -> Register | None:
    """Parse a register name, or return None if the token is not one."""
    name = token.strip().lower()
    if name in _REGISTER_NUMBERS:
        return Register(_REGISTER_NUMBERS[name])
    match = _X_REGISTER.match(name)
    if match:
        return Register(int(match.group(1)))
    return None


def parse_immediate(token: str) -> Immediate | None:
    """Parse an integer literal, or return None if the token is not one."""
    try:
        return Immediate(int(token.strip().replace("_", ""), 0))
    except ValueError:
        return None


def parse_fence_set(token: str) -> Immediate | None:
    """Parse a FENCE ordering set such as ``iorw`` into its 4-bit mask."""
    text = token.strip().lower()
    if not _FENCE_SET.match(text):
        return None
    value = 0
    for bit, letter in enumerate(reversed(FENCE_MASK_LETTERS)):
        if letter in text:
            value |= 1 << bit
    return Immediate(value)


def parse_operand(token: str, mnemonic: str = "") -> tuple[Operand, ...]:
    """Parse one comma-separated operand token.

    Args:
        token: Operand text
        mnemonic: Mnemonic of the line, used to accept FENCE sets

    Returns:
        One operand, or two for a memory operand ``offset(base)``

    Raises:
        OperandKindError: The token is not a register, integer or memory
            operand
    """
    text = token.strip()
    match = _MEMORY_OPERAND.match(text)
    if match:
        offset_text = match.group("offset").strip()
        offset = parse_immediate(offset_text) if offset_text else Immediate(0)
        base = parse_register(match.group("base"))
        if offset is None or base is None:
            raise OperandKindError("Malformed memory operand", token=text)
        return offset, base

    register = parse_register(text)
    if register is not None:
        return (register,)
    immediate = parse_immediate(text)
    if immediate is not None:
        return (immediate,)
    if mnemonic == "fence":
        fence_set = parse_fence_set(text)
        if fence_set is not None:
            return (fence_set,)
    raise OperandKindError("Unrecognized operand", token=text)


def strip_comment(line: str) -> str:
    """Remove a trailing ``#`` or ``;`` comment and surrounding whitespace."""
    for char in COMMENT_CHARS:
        line = line.split(char, 1)[0]
    return line.strip()


def tokenize_line(line: str) -> tuple[str, tuple[Operand, ...]]:
    """Split an assembly line into mnemonic and parsed operands.

    Returns:
        ``(mnemonic, operands)``; the mnemonic is empty for a blank line
    """
    text = strip_comment(line)
    if not text:
        return "", ()
    mnemonic, *rest = text.split(None, 1)
    mnemonic = mnemonic.lower()
    operands: list[Operand] = []
    if rest:
        for token in rest[0].split(","):
            operands.extend(parse_operand(token, mnemonic))
    return mnemonic, tuple(operands)


def assemble_line(line: str) -> int | None:
    """Assemble one line to a 32-bit word, or None for a blank/comment line.

    Raises:
        EncodeError: The line cannot be encoded
    """
    mnemonic, operands = tokenize_line(line)
    if not mnemonic:
        return None
    return encode(mnemonic, operands)


def assemble(lines: Iterable[str]) -> list[int]:
    """Assemble every non-blank line, in order."""
    words = []
    for line in lines:
        word = assemble_line(line)
        if word is not None:
            words.append(word)
    return words
