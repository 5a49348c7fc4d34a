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

"""Stream disassembly and LLVM-style listing output.

Disassembly
===========

Splits a code buffer into little-endian words and decodes each one on its
own. A word that does not decode does not stop the stream: its entry holds
the ``DecodeError`` instead of an instruction, and the listing prints
``???`` for it. Trailing bytes that do not fill a word get an entry too.

Listing layout (one line per word, labels on their own line, TAB before
the instruction text)::

    00000000 _start:
           0: 13 05 50 00                  TAB addi a0, zero, 5
           4: ff ff ff ff                  TAB ???

Example:
    >>> entries = disassemble(bytes.fromhex("13000000"), 0x1000)
    >>> entries[0].address, entries[0].text()
    (4096, 'nop')
"""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass

from riscv_asm.config import (
    INSTRUCTION_BYTE_ORDER,
    INSTRUCTION_SIZE_BYTES,
    MASK32,
    RAW_BYTES_PADDING,
    UNKNOWN_INSTRUCTION_TEXT,
    WORDS_PER_HEXDUMP_LINE,
    DisassemblerOptions,
)
from riscv_asm.decoders.instruction_decode import DecodedInstruction, try_decode
from riscv_asm.exceptions import DecodeError, UnknownEncodingError
from riscv_asm.pseudo import collapse
from riscv_asm.types import Address, Word


@dataclass(frozen=True)
class DisassemblyEntry:
    """One word of a disassembled stream.

    Attributes:
        address: Address of the first byte
        raw: The bytes as stored (little-endian)
        result: The decoded instruction, or the error that prevented it
        labels: Symbol names defined at this address
    """

    address: Address
    raw: bytes
    result: DecodedInstruction | DecodeError
    labels: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """True if the word decoded."""
        return isinstance(self.result, DecodedInstruction)

    def text(self, abi_names: bool = True) -> str:
        """Instruction text, or ``???`` if the word did not decode."""
        if isinstance(self.result, DecodedInstruction):
            return self.result.render(abi_names)
        return UNKNOWN_INSTRUCTION_TEXT


def iter_words(
    data: bytes, base_address: Address = Address(0)
) -> Iterator[tuple[Address, Word | UnknownEncodingError]]:
    """Yield ``(address, word)`` for each little-endian word in ``data``.

    A trailing fragment shorter than a word is yielded with an
    ``UnknownEncodingError`` in place of the word.
    """
    whole = len(data) - len(data) % INSTRUCTION_SIZE_BYTES
    for offset in range(0, whole, INSTRUCTION_SIZE_BYTES):
        chunk = data[offset : offset + INSTRUCTION_SIZE_BYTES]
        word = Word(int.from_bytes(chunk, INSTRUCTION_BYTE_ORDER))
        yield Address((base_address + offset) & MASK32), word
    if whole < len(data):
        yield Address((base_address + whole) & MASK32), UnknownEncodingError(
            "Truncated instruction word",
            address=hex(base_address + whole),
            length=len(data) - whole,
        )


def disassemble(
    data: bytes,
    base_address: Address = Address(0),
    options: DisassemblerOptions | None = None,
    symbols: Mapping[int, Sequence[str]] | None = None,
) -> list[DisassemblyEntry]:
    """Decode every word of a code buffer.

    Args:
        data: Raw code bytes
        base_address: Address of ``data[0]``
        options: Disassembler switches (pseudo collapse)
        symbols: Labels keyed by address

    Returns:
        One entry per word, in address order
    """
    options = options or DisassemblerOptions()
    symbols = symbols or {}
    entries = []
    for address, word in iter_words(data, base_address):
        offset = address - base_address
        raw = data[offset : offset + INSTRUCTION_SIZE_BYTES]
        if isinstance(word, DecodeError):
            result = word
        else:
            result = try_decode(word)
            if options.allow_pseudo and isinstance(result, DecodedInstruction):
                result = collapse(result)
        labels = tuple(symbols.get(address, ()))
        entries.append(DisassemblyEntry(address, raw, result, labels))
    return entries


def _listing_header(source_name: str, section: str) -> str:
    return (
        f"\n{source_name}:\tfile format ELF32-riscv\n\n\n"
        f"Disassembly of section {section}:"
    )


def format_entry(
    entry: DisassemblyEntry,
    options: DisassemblerOptions | None = None,
    labels_by_address: Mapping[int, Sequence[str]] | None = None,
) -> str:
    """Format one listing line: address, raw bytes, instruction text.

    Branch and jump targets that land on a known label are annotated with
    ``<label>``.
    """
    options = options or DisassemblerOptions()
    raw = "".join(f"{byte:02x} " for byte in entry.raw)
    line = f"{entry.address:8x}: {raw}{'':{RAW_BYTES_PADDING}}\t"
    line += entry.text(options.abi_names)
    if labels_by_address and isinstance(entry.result, DecodedInstruction):
        target = entry.result.branch_target(entry.address)
        if target in labels_by_address:
            line += f" <{labels_by_address[target][0]}>"
    return line


def format_listing(
    entries: Sequence[DisassemblyEntry],
    source_name: str,
    options: DisassemblerOptions | None = None,
) -> str:
    """Render entries as an LLVM objdump style listing.

    Args:
        entries: Disassembled words
        source_name: Input file name shown in the header
        options: Disassembler switches (section name, register names)

    Returns:
        Listing text ending with a newline
    """
    options = options or DisassemblerOptions()
    labels_by_address = {e.address: e.labels for e in entries if e.labels}
    lines = [_listing_header(source_name, options.section)]
    for entry in entries:
        if entry.labels:
            lines.append("")
            lines.extend(f"{entry.address:08x} {label}:" for label in entry.labels)
        lines.append(format_entry(entry, options, labels_by_address))
    return "\n".join(lines) + "\n"


def format_hexdump(words: Sequence[int]) -> str:
    """Render words four per line, prefixed by the index of the first word.

    Example:
        >>> print(format_hexdump([0x13, 0x13]))
          0x000: 0x00000013 0x00000013
    """
    lines = []
    for start in range(0, len(words), WORDS_PER_HEXDUMP_LINE):
        chunk = words[start : start + WORDS_PER_HEXDUMP_LINE]
        text = " ".join(f"0x{word:08x}" for word in chunk)
        lines.append(f"  0x{start:>03x}: {text}")
    return "\n".join(lines)
