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

"""Pytest configuration for tests."""

import struct
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

EM_RISCV = 243
EM_X86_64 = 62

SHT_PROGBITS = 1
SHT_SYMTAB = 2
SHT_STRTAB = 3
SHF_ALLOC_EXEC = 0x6

STB_GLOBAL = 1
STT_NOTYPE = 0
STT_FUNC = 2
STT_OBJECT = 1

TEXT_SECTION_INDEX = 1


def pytest_configure(config: Any) -> None:
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "elf: mark test as reading ELF images")
    config.addinivalue_line("markers", "cli: mark test as a command-line test")
    config.addinivalue_line(
        "markers", "roundtrip: mark test as an encode/decode round trip"
    )


def _strtab(names: Sequence[str]) -> tuple[bytes, dict[str, int]]:
    """Build a string table and the offset of each name in it."""
    table = b"\0"
    offsets = {}
    for name in names:
        offsets[name] = len(table)
        table += name.encode() + b"\0"
    return table, offsets


def _align(blob: bytes, alignment: int = 4) -> bytes:
    return blob + b"\0" * (-len(blob) % alignment)


def build_elf32(
    code: bytes,
    address: int = 0x8000_0000,
    symbols: Sequence[tuple[str, int, int]] = (),
    machine: int = EM_RISCV,
    big_endian: bool = False,
    text_name: str = ".text",
) -> bytes:
    """Build a minimal ELF32 executable with a code section and symbols.

    Sections: null, code, .symtab, .strtab, .shstrtab.

    Args:
        code: Bytes of the code section
        address: sh_addr of the code section
        symbols: (name, value, type) tuples defined in the code section
        machine: e_machine value
        big_endian: Pack headers big-endian
        text_name: Name of the code section

    Returns:
        The ELF image
    """
    order = ">" if big_endian else "<"
    header_size = 52

    strtab, name_offsets = _strtab([name for name, _, _ in symbols])
    shstrtab, section_names = _strtab([text_name, ".symtab", ".strtab", ".shstrtab"])

    symtab = struct.pack(f"{order}IIIBBH", 0, 0, 0, 0, 0, 0)
    for name, value, sym_type in symbols:
        symtab += struct.pack(
            f"{order}IIIBBH",
            name_offsets[name],
            value,
            0,
            (STB_GLOBAL << 4) | sym_type,
            0,
            TEXT_SECTION_INDEX,
        )

    text_offset = header_size
    body = _align(code)
    symtab_offset = text_offset + len(body)
    body += symtab
    strtab_offset = text_offset + len(body)
    body += strtab
    shstrtab_offset = text_offset + len(body)
    body += shstrtab
    body = _align(body)
    section_header_offset = text_offset + len(body)

    def section(*fields: int) -> bytes:
        # name, type, flags, addr, offset, size, link, info, align, entsize
        return struct.pack(f"{order}10I", *fields)

    section_headers = b"".join(
        [
            section(0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
            section(
                section_names[text_name], SHT_PROGBITS, SHF_ALLOC_EXEC, address,
                text_offset, len(code), 0, 0, 4, 0,
            ),  # fmt: skip
            section(
                section_names[".symtab"], SHT_SYMTAB, 0, 0, symtab_offset,
                len(symtab), 3, 1, 4, 16,
            ),  # fmt: skip
            section(
                section_names[".strtab"], SHT_STRTAB, 0, 0, strtab_offset,
                len(strtab), 0, 0, 1, 0,
            ),  # fmt: skip
            section(
                section_names[".shstrtab"], SHT_STRTAB, 0, 0, shstrtab_offset,
                len(shstrtab), 0, 0, 1, 0,
            ),  # fmt: skip
        ]
    )

    ident = b"\x7fELF" + bytes([1, 2 if big_endian else 1, 1, 0]) + b"\0" * 8
    header = ident + struct.pack(
        f"{order}HHIIIIIHHHHHH",
        2,  # ET_EXEC
        machine,
        1,  # EV_CURRENT
        address,  # e_entry
        0,  # e_phoff
        section_header_offset,
        0,  # e_flags
        header_size,
        0,  # e_phentsize
        0,  # e_phnum
        40,  # e_shentsize
        5,  # e_shnum
        4,  # e_shstrndx
    )
    return header + body + section_headers


@pytest.fixture
def elf_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a synthesized ELF image to a temporary file."""

    def _write(code: bytes, name: str = "prog.elf", **kwargs: Any) -> Path:
        path = tmp_path / name
        path.write_bytes(build_elf32(code, **kwargs))
        return path

    return _write
