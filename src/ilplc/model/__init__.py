"""Compiled-program IR: register banks, expressions, statements, networks."""

from .expressions import (
    BinaryExpr,
    BinaryOp,
    Expression,
    OperandExpr,
    OperandRef,
    UnaryExpr,
    UnaryOp,
)
from .hardware import (
    DEFAULT_REGISTERS,
    MAX_CYCLE_TIME_MS,
    MAX_REGISTERS,
    MIN_CYCLE_TIME_MS,
    ControllerConfig,
    RegisterBank,
)
from .program import Network, Program
from .statements import Action, Statement

__all__ = [
    "Action",
    "BinaryExpr",
    "BinaryOp",
    "ControllerConfig",
    "DEFAULT_REGISTERS",
    "Expression",
    "MAX_CYCLE_TIME_MS",
    "MAX_REGISTERS",
    "MIN_CYCLE_TIME_MS",
    "Network",
    "OperandExpr",
    "OperandRef",
    "Program",
    "RegisterBank",
    "Statement",
    "UnaryExpr",
    "UnaryOp",
]
