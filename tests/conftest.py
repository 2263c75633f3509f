"""Shared test helpers for the ilplc test suite."""

import textwrap

from ilplc.il import compile_tokens, tokenize
from ilplc.model.expressions import OperandExpr, OperandRef
from ilplc.model.hardware import RegisterBank
from ilplc.model.program import Network, Program

_BANKS = {b.value: b for b in RegisterBank}


def compile_stmts(source: str, bank_sizes=None) -> list:
    """Compile one network of IL source into IR statements."""
    return compile_tokens(tokenize(textwrap.dedent(source)), bank_sizes=bank_sizes)


def ref(address: str) -> OperandRef:
    """Shorthand: ``ref("E1")`` -> OperandRef(bank=INPUT, index=0)."""
    return OperandRef(bank=_BANKS[address[0]], index=int(address[1:]) - 1)


def operand(address: str, negated: bool = False) -> OperandExpr:
    """Shorthand for an OperandExpr on a 1-based IL address."""
    return OperandExpr(ref=ref(address), negated=negated)


def make_program(*networks) -> Program:
    """Build a Program with one Network per list of statements."""
    return Program(networks=[Network(statements=list(stmts)) for stmts in networks])
