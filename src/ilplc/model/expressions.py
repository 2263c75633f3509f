"""Boolean expression nodes for compiled IL conditions."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .hardware import RegisterBank


class BinaryOp(str, Enum):
    AND = "AND"
    OR = "OR"
    XOR = "XOR"


class UnaryOp(str, Enum):
    NOT = "NOT"


class OperandRef(BaseModel):
    """A single register: bank plus 0-based index.

    ``str()`` gives the 1-based IL address (``E1`` for input index 0).
    """

    bank: RegisterBank
    index: int = Field(ge=0)

    def __str__(self) -> str:
        return f"{self.bank.value}{self.index + 1}"


class OperandExpr(BaseModel):
    """Read of one register, optionally negated."""

    kind: Literal["operand"] = "operand"
    ref: OperandRef
    negated: bool = False


class BinaryExpr(BaseModel):
    kind: Literal["binary"] = "binary"
    op: BinaryOp
    left: Expression
    right: Expression


class UnaryExpr(BaseModel):
    """Negation of a bracket group."""

    kind: Literal["unary"] = "unary"
    op: UnaryOp = UnaryOp.NOT
    operand: Expression


Expression = Annotated[
    Union[
        OperandExpr,
        BinaryExpr,
        UnaryExpr,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Expression references.
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()
