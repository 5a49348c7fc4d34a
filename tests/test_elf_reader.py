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

"""Tests for reading code sections out of ELF files."""

from collections.abc import Callable
from pathlib import Path

import pytest

from riscv_asm.dis.disassembly import disassemble
from riscv_asm.dis.elf_reader import read_code_section
from riscv_asm.exceptions import ElfFormatError

STT_OBJECT = 1
STT_FUNC = 2
STT_NOTYPE = 0
EM_X86_64 = 62

# _start: li a0, 5 / loop: j loop
CODE = bytes.fromhex("13055000" "6f000000")


@pytest.mark.elf
class TestReadCodeSection:
    """Reading .text from synthesized images."""

    def test_reads_text(self, elf_file: Callable[..., Path]) -> None:
        """Section bytes and load address are returned."""
        section = read_code_section(elf_file(CODE, address=0x8000_0000))
        assert section.name == ".text"
        assert section.address == 0x8000_0000
        assert section.data == CODE
        assert section.size == 8

    def test_symbols_become_labels(self, elf_file: Callable[..., Path]) -> None:
        """Function and untyped symbols in the section are labels."""
        path = elf_file(
            CODE,
            address=0x1000,
            symbols=[
                ("_start", 0x1000, STT_FUNC),
                ("loop", 0x1004, STT_NOTYPE),
                ("$x", 0x1000, STT_NOTYPE),
                ("table", 0x1004, STT_OBJECT),
            ],
        )
        section = read_code_section(path)
        assert dict(section.symbols) == {0x1000: ("_start",), 0x1004: ("loop",)}

    def test_symbols_outside_section_ignored(
        self, elf_file: Callable[..., Path]
    ) -> None:
        """Symbols past the end of the section are dropped."""
        path = elf_file(CODE, address=0x1000, symbols=[("end", 0x1008, STT_FUNC)])
        assert dict(read_code_section(path).symbols) == {}

    def test_named_section(self, elf_file: Callable[..., Path]) -> None:
        """Another section can be selected by name."""
        path = elf_file(CODE, text_name=".init")
        assert read_code_section(path, ".init").data == CODE

    def test_feeds_disassembler(self, elf_file: Callable[..., Path]) -> None:
        """The section and its labels drive the stream disassembler."""
        path = elf_file(CODE, address=0x1000, symbols=[("loop", 0x1004, STT_FUNC)])
        section = read_code_section(path)
        entries = disassemble(section.data, section.address, symbols=section.symbols)
        assert [e.text() for e in entries] == ["li a0, 5", "j 0"]
        assert entries[1].labels == ("loop",)


@pytest.mark.elf
class TestElfErrors:
    """Inputs that are not RV32 little-endian ELF files."""

    def test_not_elf(self, tmp_path: Path) -> None:
        """Arbitrary bytes are rejected."""
        path = tmp_path / "junk.bin"
        path.write_bytes(b"not an elf file at all" * 4)
        with pytest.raises(ElfFormatError):
            read_code_section(path)

    def test_wrong_machine(self, elf_file: Callable[..., Path]) -> None:
        """x86-64 images are rejected with the machine in the context."""
        with pytest.raises(ElfFormatError) as exc_info:
            read_code_section(elf_file(CODE, machine=EM_X86_64))
        assert exc_info.value.context["machine"] == "EM_X86_64"

    def test_big_endian(self, elf_file: Callable[..., Path]) -> None:
        """Big-endian images are rejected."""
        with pytest.raises(ElfFormatError, match="little-endian"):
            read_code_section(elf_file(CODE, big_endian=True))

    def test_missing_section(self, elf_file: Callable[..., Path]) -> None:
        """Asking for a section that does not exist is an error."""
        with pytest.raises(ElfFormatError) as exc_info:
            read_code_section(elf_file(CODE), ".data")
        assert exc_info.value.context["section"] == ".data"

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file surfaces as an OSError."""
        with pytest.raises(OSError):
            read_code_section(tmp_path / "absent.elf")
