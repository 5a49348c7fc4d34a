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

"""Pseudo-instruction expansion and collapse.

Pseudo-instructions
===================

A pseudo-instruction is assembler shorthand for one real RV32I instruction
with some operands fixed (``nop`` is ``addi zero, zero, 0``). The rules below
are a single table read in two directions:

    expand():   pseudo mnemonic + operands -> real mnemonic + operands
                (used by the encoder)
    collapse(): decoded real instruction -> equivalent pseudo, if any
                (used by the disassembler when pseudo output is enabled)

Each rule lists the pseudo's own parameters and a template of the real
operands, where a template item is either a parameter name or a fixed
Register/Immediate. Expansion substitutes parameters into the template;
collapse matches the template against decoded operands and reads the
parameters back out.

Rules are tried in table order during collapse, so more specific rules come
first: ``nop`` before ``li``/``mv``, ``ret`` before ``jr``. Rules marked not
collapsible (``bgt`` and friends) only swap operands of a real branch; the
disassembler keeps the real form for those.

``jal`` and ``jalr`` are both real instructions and pseudos: the one-operand
forms link through ``ra``. Expansion is keyed by mnemonic AND operand count.
"""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Union

from riscv_asm.config import RETURN_ADDRESS_REGISTER, ZERO_REGISTER
from riscv_asm.exceptions import OperandArityMismatchError
from riscv_asm.types import Immediate, Operand, Register

if TYPE_CHECKING:
    from riscv_asm.decoders.instruction_decode import DecodedInstruction

ZERO = Register(ZERO_REGISTER)
RA = Register(RETURN_ADDRESS_REGISTER)

TemplateItem = Union[str, Register, Immediate]


@dataclass(frozen=True)
class PseudoInstruction:
    """One pseudo-instruction rule.

    Attributes:
        mnemonic: Pseudo mnemonic
        params: Names of the pseudo's own operands, in assembly order
        real: Mnemonic of the real instruction it stands for
        template: Real operands; parameter names or fixed operands
        collapsible: Whether the disassembler may render the real form as
            this pseudo
    """

    mnemonic: str
    params: tuple[str, ...]
    real: str
    template: tuple[TemplateItem, ...]
    collapsible: bool = True


def _rule(
    mnemonic: str,
    params: str,
    real: str,
    *template: TemplateItem,
    collapsible: bool = True,
) -> PseudoInstruction:
    return PseudoInstruction(
        mnemonic, tuple(params.split()), real, tuple(template), collapsible
    )


PSEUDO_INSTRUCTIONS: tuple[PseudoInstruction, ...] = (
    _rule("nop", "", "addi", ZERO, ZERO, Immediate(0)),
    _rule("li", "rd imm", "addi", "rd", ZERO, "imm"),
    _rule("mv", "rd rs", "addi", "rd", "rs", Immediate(0)),
    _rule("not", "rd rs", "xori", "rd", "rs", Immediate(-1)),
    _rule("neg", "rd rs", "sub", "rd", ZERO, "rs"),
    _rule("seqz", "rd rs", "sltiu", "rd", "rs", Immediate(1)),
    _rule("snez", "rd rs", "sltu", "rd", ZERO, "rs"),
    _rule("sltz", "rd rs", "slt", "rd", "rs", ZERO),
    _rule("sgtz", "rd rs", "slt", "rd", ZERO, "rs"),
    _rule("beqz", "rs offset", "beq", "rs", ZERO, "offset"),
    _rule("bnez", "rs offset", "bne", "rs", ZERO, "offset"),
    _rule("blez", "rs offset", "bge", ZERO, "rs", "offset"),
    _rule("bgez", "rs offset", "bge", "rs", ZERO, "offset"),
    _rule("bltz", "rs offset", "blt", "rs", ZERO, "offset"),
    _rule("bgtz", "rs offset", "blt", ZERO, "rs", "offset"),
    _rule("bgt", "rs rt offset", "blt", "rt", "rs", "offset", collapsible=False),
    _rule("ble", "rs rt offset", "bge", "rt", "rs", "offset", collapsible=False),
    _rule("bgtu", "rs rt offset", "bltu", "rt", "rs", "offset", collapsible=False),
    _rule("bleu", "rs rt offset", "bgeu", "rt", "rs", "offset", collapsible=False),
    _rule("j", "offset", "jal", ZERO, "offset"),
    _rule("jal", "offset", "jal", RA, "offset"),
    _rule("ret", "", "jalr", ZERO, Immediate(0), RA),
    _rule("jr", "rs", "jalr", ZERO, Immediate(0), "rs"),
    _rule("jalr", "rs", "jalr", RA, Immediate(0), "rs"),
)

_BY_NAME_AND_ARITY: dict[tuple[str, int], PseudoInstruction] = {
    (p.mnemonic, len(p.params)): p for p in PSEUDO_INSTRUCTIONS
}
_PSEUDO_NAMES = frozenset(p.mnemonic for p in PSEUDO_INSTRUCTIONS)
_REAL_NAMES = frozenset(p.real for p in PSEUDO_INSTRUCTIONS)


def is_pseudo(mnemonic: str) -> bool:
    """True if some pseudo rule uses this mnemonic."""
    return mnemonic.lower() in _PSEUDO_NAMES


def expand(
    mnemonic: str, operands: tuple[Operand, ...]
) -> tuple[str, tuple[Operand, ...]]:
    """Rewrite a pseudo-instruction to its real instruction.

    Mnemonics without a matching rule are returned unchanged. The real
    operands are not validated here; the encoder checks them.

    Args:
        mnemonic: Mnemonic as written
        operands: Operands as written

    Returns:
        ``(real_mnemonic, real_operands)``

    Raises:
        OperandArityMismatchError: The mnemonic is only a pseudo and no rule
            takes this many operands (``nop x1``)
    """
    name = mnemonic.lower()
    rule = _BY_NAME_AND_ARITY.get((name, len(operands)))
    if rule is None:
        if name in _PSEUDO_NAMES and name not in _REAL_NAMES:
            arities = sorted(
                len(p.params) for p in PSEUDO_INSTRUCTIONS if p.mnemonic == name
            )
            raise OperandArityMismatchError(
                "Wrong number of operands",
                expected=arities[0],
                actual=len(operands),
                mnemonic=name,
            )
        return name, operands

    bound = dict(zip(rule.params, operands))
    real_operands = tuple(
        bound[item] if isinstance(item, str) else item for item in rule.template
    )
    return rule.real, real_operands


def _match(
    rule: PseudoInstruction, operands: tuple[Operand, ...]
) -> tuple[Operand, ...] | None:
    """Match decoded operands against a rule's template."""
    if len(rule.template) != len(operands):
        return None
    bound: dict[str, Operand] = {}
    for item, operand in zip(rule.template, operands):
        if isinstance(item, str):
            if bound.setdefault(item, operand) != operand:
                return None
        elif item != operand:
            return None
    return tuple(bound[p] for p in rule.params)


def collapse(decoded: "DecodedInstruction") -> "DecodedInstruction":
    """Return the pseudo-instruction form of a decoded instruction, if any.

    The returned instruction keeps the word and descriptor of the real
    instruction; only the mnemonic, operands and rendering change. If no
    collapsible rule matches, ``decoded`` is returned as is.
    """
    for rule in PSEUDO_INSTRUCTIONS:
        if not rule.collapsible or rule.real != decoded.mnemonic:
            continue
        params = _match(rule, decoded.operands)
        if params is not None:
            return replace(
                decoded, mnemonic=rule.mnemonic, operands=params, pseudo=True
            )
    return decoded
