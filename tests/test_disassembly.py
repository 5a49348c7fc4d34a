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

"""Tests for stream disassembly and listing output."""

import pytest

from riscv_asm.config import DisassemblerOptions
from riscv_asm.dis.disassembly import (
    disassemble,
    format_entry,
    format_hexdump,
    format_listing,
    iter_words,
)
from riscv_asm.exceptions import UnknownEncodingError
from riscv_asm.types import Address


def words_to_bytes(*words: int) -> bytes:
    """Pack words little-endian, as they sit in memory."""
    return b"".join(word.to_bytes(4, "little") for word in words)


class TestIterWords:
    """Splitting a buffer into words."""

    def test_little_endian(self) -> None:
        """Words are read little-endian with increasing addresses."""
        data = bytes.fromhex("13000000" "67800000")
        assert list(iter_words(data, 0x100)) == [(0x100, 0x13), (0x104, 0x8067)]

    def test_trailing_bytes(self) -> None:
        """A short tail is reported as an error, not dropped."""
        items = list(iter_words(bytes.fromhex("13000000" "1300"), 0))
        assert items[0] == (0, 0x13)
        address, error = items[1]
        assert address == 4
        assert isinstance(error, UnknownEncodingError)

    def test_empty(self) -> None:
        """An empty buffer yields nothing."""
        assert list(iter_words(b"")) == []

    def test_addresses_wrap(self) -> None:
        """Addresses past the top of the address space wrap to 32 bits."""
        data = bytes.fromhex("13000000" "13000000")
        addresses = [address for address, _ in iter_words(data, Address(0xFFFF_FFFC))]
        assert addresses == [0xFFFF_FFFC, 0x0]


class TestDisassemble:
    """Per-word decoding of a stream."""

    def test_bad_word_does_not_stop_stream(self) -> None:
        """An undecodable word is reported in place and decoding continues."""
        data = words_to_bytes(0x00000013, 0xFFFFFFFF, 0x00008067)
        entries = disassemble(data, 0x8000_0000)
        assert [e.address for e in entries] == [0x80000000, 0x80000004, 0x80000008]
        assert [e.ok for e in entries] == [True, False, True]
        assert isinstance(entries[1].result, UnknownEncodingError)
        assert [e.text() for e in entries] == ["nop", "???", "ret"]

    def test_raw_bytes_kept(self) -> None:
        """Each entry keeps the bytes it was decoded from."""
        entries = disassemble(words_to_bytes(0x00500513))
        assert entries[0].raw == bytes.fromhex("13055000")

    def test_pseudo_off(self) -> None:
        """With pseudo output disabled the real instruction is shown."""
        options = DisassemblerOptions(allow_pseudo=False)
        entries = disassemble(words_to_bytes(0x00000013), 0, options)
        assert entries[0].text() == "addi zero, zero, 0"

    def test_labels_attached(self) -> None:
        """Symbols are attached to the entry at their address."""
        data = words_to_bytes(0x00000013, 0x00008067)
        entries = disassemble(data, 0x1000, symbols={0x1004: ("done",)})
        assert entries[0].labels == ()
        assert entries[1].labels == ("done",)

    def test_truncated_tail_entry(self) -> None:
        """Trailing bytes get an entry holding the error."""
        entries = disassemble(words_to_bytes(0x00000013) + b"\x13\x00")
        assert len(entries) == 2
        assert entries[1].raw == b"\x13\x00"
        assert not entries[1].ok


class TestListing:
    """LLVM-style text output."""

    def test_entry_line_layout(self) -> None:
        """Address, raw bytes, padding, tab, text."""
        entry = disassemble(words_to_bytes(0x00500513))[0]
        assert format_entry(entry) == "       0: 13 05 50 00 " + " " * 17 + "\tli a0, 5"

    def test_unknown_entry_line(self) -> None:
        """Undecodable words print as ???."""
        entry = disassemble(words_to_bytes(0xFFFFFFFF), 0x10)[0]
        assert format_entry(entry).endswith("\t???")
        assert format_entry(entry).startswith("      10: ff ff ff ff ")

    def test_numeric_registers(self) -> None:
        """abi_names=False prints x-registers."""
        options = DisassemblerOptions(allow_pseudo=False, abi_names=False)
        entry = disassemble(words_to_bytes(0x00500513), 0, options)[0]
        assert format_entry(entry, options).endswith("\taddi x10, x0, 5")

    def test_listing(self) -> None:
        """Header, label lines and one line per word."""
        data = words_to_bytes(0x00000013, 0xFE000EE3)  # nop; beqz zero, -4
        entries = disassemble(data, 0, symbols={0: ("_start",)})
        listing = format_listing(entries, "prog.elf")
        lines = listing.splitlines()
        assert lines[:5] == [
            "",
            "prog.elf:\tfile format ELF32-riscv",
            "",
            "",
            "Disassembly of section .text:",
        ]
        assert lines[5] == ""
        assert lines[6] == "00000000 _start:"
        assert lines[7].endswith("\tnop")
        assert lines[8].endswith("\tbeqz zero, -4 <_start>")
        assert listing.endswith("\n")

    def test_hexdump(self) -> None:
        """Four words per line, prefixed by the index of the first word."""
        words = [0x13, 0x8067, 0xFFFFFFFF, 0x0, 0x00500513]
        assert format_hexdump(words).splitlines() == [
            "  0x000: 0x00000013 0x00008067 0xffffffff 0x00000000",
            "  0x004: 0x00500513",
        ]

    @pytest.mark.parametrize("count", [0, 4, 8])
    def test_hexdump_line_count(self, count: int) -> None:
        """Full lines only when the word count divides evenly."""
        lines = format_hexdump([0x13] * count).splitlines()
        assert len(lines) == count // 4
