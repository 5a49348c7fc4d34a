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

"""Extract a code section and its symbols from an RV32 ELF file.

ELF Reader
==========

Reads the bytes and load address of one section (``.text`` by default) with
pyelftools, and collects the named symbols that point into it so the listing
can print labels.

The file must be a 32-bit little-endian RISC-V ELF. Anything else raises
``ElfFormatError`` with the offending header values in its context.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile
from elftools.elf.sections import SymbolTableSection

from riscv_asm.config import DEFAULT_TEXT_SECTION
from riscv_asm.exceptions import ElfFormatError
from riscv_asm.types import Address

RISCV_MACHINE = "EM_RISCV"
ELF_CLASS_32 = 32

# Symbol types that name a location in code
LABEL_SYMBOL_TYPES = frozenset({"STT_FUNC", "STT_NOTYPE"})


@dataclass(frozen=True)
class CodeSection:
    """Raw contents of an ELF code section.

    Attributes:
        name: Section name
        address: Load address of the first byte (sh_addr)
        data: Section bytes
        symbols: Labels keyed by address, in symbol table order
    """

    name: str
    address: Address
    data: bytes
    symbols: Mapping[int, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def size(self) -> int:
        """Section size in bytes."""
        return len(self.data)


def _check_header(elf: ELFFile, path: str) -> None:
    machine = elf["e_machine"]
    if machine != RISCV_MACHINE:
        raise ElfFormatError("Not a RISC-V ELF file", path=path, machine=machine)
    if elf.elfclass != ELF_CLASS_32:
        raise ElfFormatError(
            "Only 32-bit ELF files are supported", path=path, elfclass=elf.elfclass
        )
    if not elf.little_endian:
        raise ElfFormatError("Only little-endian ELF files are supported", path=path)


def _collect_symbols(
    elf: ELFFile, section_index: int, start: int, end: int
) -> dict[int, tuple[str, ...]]:
    """Collect code labels defined in the section, keyed by address."""
    labels: dict[int, list[str]] = {}
    for section in elf.iter_sections():
        if not isinstance(section, SymbolTableSection):
            continue
        for symbol in section.iter_symbols():
            name = symbol.name
            # Skip unnamed and mapping symbols ($x, $d)
            if not name or name.startswith("$"):
                continue
            if symbol["st_info"]["type"] not in LABEL_SYMBOL_TYPES:
                continue
            if symbol["st_shndx"] != section_index:
                continue
            address = symbol["st_value"]
            if start <= address < end and name not in labels.get(address, []):
                labels.setdefault(address, []).append(name)
    return {address: tuple(names) for address, names in sorted(labels.items())}


def read_code_section(
    path: str | Path, section: str = DEFAULT_TEXT_SECTION
) -> CodeSection:
    """Read one section of an RV32 little-endian ELF file.

    Args:
        path: ELF file path
        section: Name of the section to read

    Returns:
        The section's name, load address, bytes and labels

    Raises:
        ElfFormatError: The file is not an RV32 little-endian ELF, or has no
            such section
        OSError: The file cannot be read
    """
    path_str = str(path)
    with open(path, "rb") as f:
        try:
            elf = ELFFile(f)
        except ELFError as e:
            raise ElfFormatError(f"Not an ELF file: {e}", path=path_str) from e
        _check_header(elf, path_str)

        for index, candidate in enumerate(elf.iter_sections()):
            if candidate.name == section:
                break
        else:
            raise ElfFormatError("Section not found", path=path_str, section=section)

        address = Address(candidate["sh_addr"])
        data = candidate.data()
        symbols = _collect_symbols(elf, index, address, address + len(data))

    return CodeSection(
        name=section,
        address=address,
        data=bytes(data),
        symbols=MappingProxyType(symbols),
    )
