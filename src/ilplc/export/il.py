"""Instruction List pretty-printer for compiled programs.

Walks the Pydantic IR and emits canonical IL: one instruction per line,
upper-case keywords, and bracket groups only where operator precedence
requires them.  Compiling the output yields equal statements.
"""

from __future__ import annotations

from io import StringIO
from typing import Union

from ilplc.model.expressions import BinaryExpr, BinaryOp, Expression
from ilplc.model.program import Network, Program
from ilplc.model.statements import Statement


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def to_instruction_list(target: Union[Program, Network, Statement]) -> str:
    """Emit IL text for a Program, a single Network or a single Statement."""
    w = ILWriter()
    if isinstance(target, Program):
        w.write_program(target)
    elif isinstance(target, Network):
        w.write_network(target)
    elif isinstance(target, Statement):
        w.write_statement(target)
    else:
        raise TypeError(
            f"to_instruction_list() expects Program, Network or Statement, "
            f"got {type(target).__name__}"
        )
    return w.getvalue()


# ---------------------------------------------------------------------------
# Operator maps
# ---------------------------------------------------------------------------

# (plain, negated) keyword joining an operand or group with its predecessor
_JOIN_KEYWORDS: dict[BinaryOp, tuple[str, str]] = {
    BinaryOp.AND: ("U", "UN"),
    BinaryOp.OR: ("O", "ON"),
    BinaryOp.XOR: ("X", "X NOT"),
}

# Higher binds tighter; matches the compiler's chain folding
_PRECEDENCE: dict[BinaryOp, int] = {
    BinaryOp.OR: 1,
    BinaryOp.AND: 2,
    BinaryOp.XOR: 3,
}


# ---------------------------------------------------------------------------
# ILWriter
# ---------------------------------------------------------------------------

class ILWriter:
    """Walks IR models and emits Instruction List into an internal buffer."""

    def __init__(self) -> None:
        self._buf = StringIO()
        self._indent = 0
        self._indent_str = "  "

    def getvalue(self) -> str:
        return self._buf.getvalue().rstrip("\n") + "\n"

    # -- Low-level output helpers -------------------------------------------

    def _line(self, text: str = "") -> None:
        if text:
            self._buf.write(self._indent_str * self._indent + text + "\n")
        else:
            self._buf.write("\n")

    def _indent_inc(self) -> None:
        self._indent += 1

    def _indent_dec(self) -> None:
        self._indent = max(0, self._indent - 1)

    # ======================================================================
    # Program / networks / statements
    # ======================================================================

    def write_program(self, program: Program) -> None:
        for i, network in enumerate(program.networks):
            if i:
                self._line()
            self._line(f"// {network.label or f'Network {i + 1}'}")
            self.write_network(network)

    def write_network(self, network: Network) -> None:
        for stmt in network.statements:
            self.write_statement(stmt)

    def write_statement(self, stmt: Statement) -> None:
        if stmt.condition is not None:
            self._chain(stmt.condition, BinaryOp.AND)
        self._line(f"{stmt.action.value} {stmt.target}")

    # ======================================================================
    # Expressions
    # ======================================================================

    def _chain(self, expr: Expression, join: BinaryOp) -> None:
        """Emit *expr* as a flat chain whose first element is joined by *join*."""
        if expr.kind == "operand":
            plain, negated = _JOIN_KEYWORDS[join]
            self._line(f"{negated if expr.negated else plain} {expr.ref}")
        elif expr.kind == "unary":
            self._group(expr.operand, join, negated=True)
        else:
            self._chain_binary(expr, join)

    def _chain_binary(self, expr: BinaryExpr, join: BinaryOp) -> None:
        prec = _PRECEDENCE[expr.op]

        left = expr.left
        if left.kind == "binary" and _PRECEDENCE[left.op] < prec:
            self._group(left, join)
        else:
            self._chain(left, join)

        # Right operands of equal precedence need brackets (left-associative)
        right = expr.right
        if right.kind == "binary" and _PRECEDENCE[right.op] <= prec:
            self._group(right, expr.op)
        else:
            self._chain(right, expr.op)

    def _group(self, expr: Expression, join: BinaryOp, negated: bool = False) -> None:
        plain, negated_kw = _JOIN_KEYWORDS[join]
        self._line(f"{negated_kw if negated else plain} (")
        self._indent_inc()
        self._chain(expr, BinaryOp.AND)
        self._indent_dec()
        self._line(")")
