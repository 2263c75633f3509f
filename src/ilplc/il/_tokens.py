"""Token types produced by the IL lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ilplc.model.expressions import BinaryOp
from ilplc.model.hardware import RegisterBank
from ilplc.model.statements import Action


class TokenKind(str, Enum):
    LOGIC_OP = "logic_op"
    INSTRUCTION = "instruction"
    OPERAND = "operand"
    BRACKET = "bracket"
    END_OF_NETWORK = "end_of_network"


class LogicOp(str, Enum):
    """Logic keyword, valued by its IL spelling."""

    AND = "U"
    OR = "O"
    XOR = "X"
    NOT = "NOT"
    AND_NOT = "UN"
    OR_NOT = "ON"

    @property
    def binary_op(self) -> BinaryOp | None:
        """The binary operator this keyword joins with, if any."""
        return _LOGIC_BINARY[self]

    @property
    def negates(self) -> bool:
        """Whether this keyword negates the following operand or group."""
        return self in (LogicOp.NOT, LogicOp.AND_NOT, LogicOp.OR_NOT)


_LOGIC_BINARY: dict[LogicOp, BinaryOp | None] = {
    LogicOp.AND: BinaryOp.AND,
    LogicOp.OR: BinaryOp.OR,
    LogicOp.XOR: BinaryOp.XOR,
    LogicOp.NOT: None,
    LogicOp.AND_NOT: BinaryOp.AND,
    LogicOp.OR_NOT: BinaryOp.OR,
}


class Bracket(str, Enum):
    OPEN = "("
    CLOSE = ")"


@dataclass(frozen=True)
class OperandAddress:
    """Operand as written in source: bank letter and 1-based number."""

    bank: RegisterBank
    number: int

    def __str__(self) -> str:
        return f"{self.bank.value}{self.number}"


TokenValue = Union[LogicOp, Action, Bracket, OperandAddress, None]


@dataclass(frozen=True)
class Token:
    """A classified lexical unit with its 1-based source position."""

    kind: TokenKind
    text: str
    line: int = 0
    column: int = 0
    value: TokenValue = None
