"""Compiled IL statements."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, model_validator

from .expressions import Expression, OperandRef
from .hardware import RegisterBank


class Action(str, Enum):
    """Terminal instruction of a statement, valued by its IL keyword."""

    ASSIGN = "="
    SET = "S"
    RESET = "R"


class Statement(BaseModel):
    """One compiled assignment unit.

    *condition* is ``None`` for a bare ``S``/``R`` that sets or resets
    its target unconditionally.
    """

    condition: Expression | None = None
    action: Action
    target: OperandRef

    @model_validator(mode="after")
    def _check_statement(self):
        if self.condition is None and self.action == Action.ASSIGN:
            raise ValueError("ASSIGN requires a condition")
        if self.target.bank == RegisterBank.INPUT:
            raise ValueError(f"Input register {self.target} cannot be a target")
        return self
