"""Scan engine: tree-walking interpreter for compiled IL programs.

The ``ScanEngine`` runs every statement of a program once, in load
order, against a single set of register banks.  Writes are visible to
later statements of the same scan (no output double-buffering).
"""

from __future__ import annotations

from collections.abc import Callable

from ilplc.model.expressions import (
    BinaryExpr,
    BinaryOp,
    Expression,
    OperandExpr,
    UnaryExpr,
    UnaryOp,
)
from ilplc.model.program import Program
from ilplc.model.statements import Action, Statement

from ._registers import RegisterFile, SimulationError


class ScanEngine:
    """Executes one scan cycle of a compiled program.

    Parameters
    ----------
    program : Program
        The compiled program.  Statements run in network order.
    registers : RegisterFile
        Register banks, mutated in place.
    """

    def __init__(self, program: Program, registers: RegisterFile) -> None:
        self.program = program
        self.registers = registers

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def execute(self) -> None:
        """Execute all statements of all networks once."""
        for stmt in self.program.statements():
            self._exec_stmt(stmt)

    # -----------------------------------------------------------------------
    # Statements
    # -----------------------------------------------------------------------

    def _exec_stmt(self, stmt: Statement) -> None:
        # Bare S/R carry no condition and always act
        result = True if stmt.condition is None else self._eval(stmt.condition)
        handler = self._ACTION_DISPATCH.get(stmt.action)
        if handler is None:
            raise SimulationError(f"Unsupported action: {stmt.action}")
        handler(self, stmt, result)

    def _exec_assign(self, stmt: Statement, result: bool) -> None:
        self.registers.write(stmt.target, result)

    def _exec_set(self, stmt: Statement, result: bool) -> None:
        if result:
            self.registers.write(stmt.target, True)

    def _exec_reset(self, stmt: Statement, result: bool) -> None:
        if result:
            self.registers.write(stmt.target, False)

    _ACTION_DISPATCH: dict[Action, Callable[[ScanEngine, Statement, bool], None]] = {
        Action.ASSIGN: _exec_assign,
        Action.SET: _exec_set,
        Action.RESET: _exec_reset,
    }

    # -----------------------------------------------------------------------
    # Expressions
    # -----------------------------------------------------------------------

    def _eval(self, expr: Expression) -> bool:
        handler = self._EXPR_DISPATCH.get(expr.kind)
        if handler is None:
            raise SimulationError(f"Unsupported expression kind: {expr.kind}")
        return handler(self, expr)

    def _eval_operand(self, expr: OperandExpr) -> bool:
        value = self.registers.read(expr.ref)
        return not value if expr.negated else value

    def _eval_binary(self, expr: BinaryExpr) -> bool:
        # No short-circuit: both sides are evaluated
        left = self._eval(expr.left)
        right = self._eval(expr.right)
        if expr.op == BinaryOp.AND:
            return left and right
        if expr.op == BinaryOp.OR:
            return left or right
        if expr.op == BinaryOp.XOR:
            return left != right
        raise SimulationError(f"Unsupported binary op: {expr.op}")

    def _eval_unary(self, expr: UnaryExpr) -> bool:
        operand = self._eval(expr.operand)
        if expr.op == UnaryOp.NOT:
            return not operand
        raise SimulationError(f"Unsupported unary op: {expr.op}")

    _EXPR_DISPATCH: dict[str, Callable[[ScanEngine, Expression], bool]] = {
        "operand": _eval_operand,
        "binary": _eval_binary,
        "unary": _eval_unary,
    }
