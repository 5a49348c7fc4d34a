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

"""Command-line entry points.

riscv-dis
    Disassemble the ``.text`` section of an RV32 ELF file into an LLVM-style
    listing written to ``./<input stem>.s`` (or ``--output``).

riscv-asm
    Encode instruction lines given as arguments (or read from stdin) and
    print one hex word per line.

Usage:
    riscv-dis build/main.elf
    riscv-dis build/main.elf --no-allow-pseudo --numeric-registers -o out.s
    riscv-asm "addi a0, zero, 5" "ret"
    echo "lw a0, 8(sp)" | riscv-asm
"""

import argparse
import sys
from pathlib import Path

from riscv_asm._version import __version__
from riscv_asm.asm import assemble_line
from riscv_asm.config import (
    DEFAULT_OUTPUT_SUFFIX,
    DEFAULT_TEXT_SECTION,
    INSTRUCTION_BYTE_ORDER,
    INSTRUCTION_SIZE_BYTES,
    DisassemblerOptions,
)
from riscv_asm.dis.disassembly import disassemble, format_hexdump, format_listing
from riscv_asm.dis.elf_reader import read_code_section
from riscv_asm.exceptions import EncodeError, ElfFormatError


def default_output_path(input_path: str) -> Path:
    """Listing path for an input file: ``./<stem>.s``."""
    return Path(".") / f"{Path(input_path).stem}{DEFAULT_OUTPUT_SUFFIX}"


def dis_main(argv: list[str] | None = None) -> None:
    """Disassemble an RV32 ELF file into a listing file."""
    parser = argparse.ArgumentParser(
        prog="riscv-dis",
        description="Disassemble the code section of an RV32I ELF file",
    )
    parser.add_argument("input", help="Path to the ELF file")
    parser.add_argument(
        "-o",
        "--output",
        help="Listing path (default: ./<input stem>.s)",
    )
    parser.add_argument(
        "--allow-pseudo",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Render pseudo-instructions where possible (default: on)",
    )
    parser.add_argument(
        "--numeric-registers",
        action="store_true",
        help="Print registers as x0-x31 instead of ABI names",
    )
    parser.add_argument(
        "--section",
        default=DEFAULT_TEXT_SECTION,
        help=f"Section to disassemble (default: {DEFAULT_TEXT_SECTION})",
    )
    parser.add_argument(
        "--hexdump",
        action="store_true",
        help="Also print the raw words to stdout",
    )
    parser.add_argument("--version", action="version", version=__version__)
    args = parser.parse_args(argv)

    options = DisassemblerOptions(
        allow_pseudo=args.allow_pseudo,
        abi_names=not args.numeric_registers,
        section=args.section,
        hexdump=args.hexdump,
    )
    output = Path(args.output) if args.output else default_output_path(args.input)

    try:
        code = read_code_section(args.input, options.section)
    except (ElfFormatError, OSError) as e:
        print(f"Error: {args.input}: {e}", file=sys.stderr)
        sys.exit(1)

    print(f'Found {code.size} bytes of code in "{code.name}"')
    entries = disassemble(code.data, code.address, options, code.symbols)

    if options.hexdump:
        words = [
            int.from_bytes(entry.raw, INSTRUCTION_BYTE_ORDER)
            for entry in entries
            if len(entry.raw) == INSTRUCTION_SIZE_BYTES
        ]
        print("HEX:")
        print(format_hexdump(words))
        print()

    output.write_text(format_listing(entries, args.input, options))
    unknown = sum(1 for entry in entries if not entry.ok)
    print(f"Wrote {len(entries)} instructions to {output}")
    if unknown:
        print(f"  {unknown} words did not decode (shown as ???)")


def asm_main(argv: list[str] | None = None) -> None:
    """Encode assembly lines to hex words."""
    parser = argparse.ArgumentParser(
        prog="riscv-asm",
        description="Encode RV32I instructions to 32-bit words",
    )
    parser.add_argument(
        "lines",
        nargs="*",
        help="Instruction lines (default: read from stdin)",
    )
    parser.add_argument("--version", action="version", version=__version__)
    args = parser.parse_args(argv)

    lines = args.lines if args.lines else sys.stdin.read().splitlines()
    failed = False
    for number, line in enumerate(lines, start=1):
        try:
            word = assemble_line(line)
        except EncodeError as e:
            print(f"Error: line {number}: {line.strip()}: {e}", file=sys.stderr)
            failed = True
            continue
        if word is not None:
            print(f"0x{word:08x}")

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    dis_main()
