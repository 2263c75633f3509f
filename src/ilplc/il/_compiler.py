"""Statement compiler: transforms an IL token sequence into statements.

The compiler is a small state machine over three parse states:

- **AWAITING_START**: a statement begins with a logic keyword (opening a
  condition) or with a bare ``S``/``R`` (unconditional set/reset).
- **BUILDING_CONDITION**: logic keywords, operands and bracket groups
  accumulate into a boolean expression until an instruction closes it.
- **AWAITING_TARGET**: exactly one operand completes the statement.

Conditions are collected per bracket level as a flat chain of
``(operator, operand)`` items and folded into a ``BinaryExpr`` tree on
close.  Ungrouped chains fold with XOR binding tighter than AND and AND
tighter than OR, left-associative at equal precedence.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum

from ilplc.model.expressions import (
    BinaryExpr,
    BinaryOp,
    Expression,
    OperandExpr,
    OperandRef,
    UnaryExpr,
)
from ilplc.model.hardware import RegisterBank
from ilplc.model.statements import Action, Statement

from ._errors import (
    BracketWithoutOperandError,
    IncompleteStatementError,
    InvalidTargetError,
    MissingConditionError,
    MissingOperandError,
    MissingTargetError,
    OperandOutOfRangeError,
    UnbalancedBracketsError,
    UnexpectedOperandError,
)
from ._tokens import Bracket, LogicOp, OperandAddress, Token, TokenKind


class ParseState(str, Enum):
    AWAITING_START = "awaiting_start"
    BUILDING_CONDITION = "building_condition"
    AWAITING_TARGET = "awaiting_target"


# Higher binds tighter.
_PRECEDENCE: dict[BinaryOp, int] = {
    BinaryOp.OR: 1,
    BinaryOp.AND: 2,
    BinaryOp.XOR: 3,
}


# ---------------------------------------------------------------------------
# CompileContext
# ---------------------------------------------------------------------------

@dataclass
class _Group:
    """One bracket level of a condition under construction."""

    negated: bool = False
    """The whole group is negated once closed (``UN ( ... )``)."""

    accepts_leading: bool = False
    """A bracket group may start with a logic keyword (``U ( O E1 ...``)."""

    items: list[tuple[BinaryOp | None, Expression]] = field(default_factory=list)
    pending_op: BinaryOp | None = None
    negate_next: bool = False
    expecting: bool = True


@dataclass
class CompileContext:
    """Parser state carried through the compilation of one network."""

    bank_sizes: dict[RegisterBank, int] | None = None
    """Bank sizes for operand range checks; ``None`` skips the upper bound."""

    state: ParseState = ParseState.AWAITING_START
    groups: list[_Group] = field(default_factory=list)
    pending_action: Action | None = None
    condition: Expression | None = None
    statements: list[Statement] = field(default_factory=list)


# ---------------------------------------------------------------------------
# StatementCompiler
# ---------------------------------------------------------------------------

class StatementCompiler:
    """Dispatch-table compiler from tokens to :class:`Statement` nodes.

    Compilation stops at the first error; no recovery is attempted
    within a network.
    """

    def __init__(self, ctx: CompileContext | None = None) -> None:
        self.ctx = ctx if ctx is not None else CompileContext()

    def compile(self, tokens: Iterable[Token]) -> list[Statement]:
        for token in tokens:
            _STATE_HANDLERS[self.ctx.state](self, token)
        return self.ctx.statements

    # -----------------------------------------------------------------------
    # AWAITING_START
    # -----------------------------------------------------------------------

    def _on_statement_start(self, token: Token) -> None:
        kind = token.kind
        if kind == TokenKind.LOGIC_OP:
            self.ctx.groups = [_Group(negate_next=token.value.negates)]
            self.ctx.state = ParseState.BUILDING_CONDITION
        elif kind == TokenKind.INSTRUCTION:
            if token.value == Action.ASSIGN:
                raise MissingConditionError(
                    f"Missing logic operation before {token.text}", token,
                )
            self.ctx.condition = None
            self.ctx.pending_action = token.value
            self.ctx.state = ParseState.AWAITING_TARGET
        elif kind == TokenKind.BRACKET:
            raise BracketWithoutOperandError(
                f"Bracket without logic operation: {token.text}", token,
            )
        elif kind == TokenKind.OPERAND:
            raise UnexpectedOperandError(
                f"Operand {token.text} without logic operation or instruction",
                token,
            )

    # -----------------------------------------------------------------------
    # BUILDING_CONDITION
    # -----------------------------------------------------------------------

    def _on_condition(self, token: Token) -> None:
        kind = token.kind
        if kind == TokenKind.LOGIC_OP:
            self._logic_op(token)
        elif kind == TokenKind.OPERAND:
            self._condition_operand(token)
        elif kind == TokenKind.BRACKET:
            if token.value == Bracket.OPEN:
                self._open_group(token)
            else:
                self._close_group(token)
        elif kind == TokenKind.INSTRUCTION:
            self._close_condition(token)
        else:
            raise IncompleteStatementError(
                "Network ends inside an unterminated logic chain", token,
            )

    def _logic_op(self, token: Token) -> None:
        group = self.ctx.groups[-1]
        op: LogicOp = token.value

        if op.binary_op is None:
            # NOT: negate whatever operand or group comes next
            if group.expecting:
                group.negate_next = not group.negate_next
            else:
                group.pending_op = None
                group.negate_next = True
                group.expecting = True
            return

        if group.expecting:
            if group.accepts_leading and not group.items:
                group.accepts_leading = False
                group.negate_next = group.negate_next != op.negates
                return
            raise MissingOperandError(
                f"Missing operand before {token.text}", token,
            )

        group.pending_op = op.binary_op
        group.negate_next = op.negates
        group.expecting = True

    def _condition_operand(self, token: Token) -> None:
        group = self.ctx.groups[-1]
        if not group.expecting or (group.items and group.pending_op is None):
            raise UnexpectedOperandError(
                f"Unexpected operand {token.text}: missing logic operation",
                token,
            )
        expr = OperandExpr(ref=self._resolve(token), negated=group.negate_next)
        self._attach(group, expr)

    def _open_group(self, token: Token) -> None:
        group = self.ctx.groups[-1]
        if not group.expecting or (group.items and group.pending_op is None):
            raise BracketWithoutOperandError(
                f"Bracket without logic operation: {token.text}", token,
            )
        self.ctx.groups.append(
            _Group(negated=group.negate_next, accepts_leading=True)
        )
        group.negate_next = False

    def _close_group(self, token: Token) -> None:
        groups = self.ctx.groups
        if len(groups) == 1:
            raise UnbalancedBracketsError(
                "Closing bracket without matching opening bracket", token,
            )
        group = groups[-1]
        if group.expecting:
            raise MissingOperandError(
                f"Missing operand before {token.text}", token,
            )
        groups.pop()
        expr = _fold(group.items)
        if group.negated:
            expr = UnaryExpr(operand=expr)
        self._attach(groups[-1], expr)

    def _close_condition(self, token: Token) -> None:
        groups = self.ctx.groups
        if len(groups) > 1:
            raise UnbalancedBracketsError(
                f"Instruction {token.text} inside an open bracket group", token,
            )
        if groups[0].expecting:
            raise MissingOperandError(
                f"Missing operand before {token.text}", token,
            )
        self.ctx.condition = _fold(groups[0].items)
        self.ctx.groups = []
        self.ctx.pending_action = token.value
        self.ctx.state = ParseState.AWAITING_TARGET

    @staticmethod
    def _attach(group: _Group, expr: Expression) -> None:
        group.items.append((group.pending_op, expr))
        group.pending_op = None
        group.negate_next = False
        group.expecting = False
        group.accepts_leading = False

    # -----------------------------------------------------------------------
    # AWAITING_TARGET
    # -----------------------------------------------------------------------

    def _on_target(self, token: Token) -> None:
        action = self.ctx.pending_action
        if token.kind == TokenKind.END_OF_NETWORK:
            raise IncompleteStatementError(
                f"Instruction {action.value} without target operand", token,
            )
        if token.kind != TokenKind.OPERAND:
            raise MissingTargetError(
                f"Expected target operand after {action.value}, got {token.text}",
                token,
            )
        target = self._resolve(token)
        if target.bank == RegisterBank.INPUT:
            raise InvalidTargetError(
                f"Input {token.text} cannot be the target of {action.value}",
                token,
            )
        self.ctx.statements.append(
            Statement(condition=self.ctx.condition, action=action, target=target)
        )
        self.ctx.condition = None
        self.ctx.pending_action = None
        self.ctx.state = ParseState.AWAITING_START

    # -----------------------------------------------------------------------
    # Operand resolution
    # -----------------------------------------------------------------------

    def _resolve(self, token: Token) -> OperandRef:
        """Convert a 1-based source address to a 0-based register ref."""
        address: OperandAddress = token.value
        if address.number < 1:
            raise OperandOutOfRangeError(
                f"Operand {token.text} out of range: register numbers start at 1",
                token,
            )
        sizes = self.ctx.bank_sizes
        if sizes is not None and address.number > sizes[address.bank]:
            raise OperandOutOfRangeError(
                f"Operand {token.text} out of range: bank {address.bank.value} "
                f"has {sizes[address.bank]} registers",
                token,
            )
        return OperandRef(bank=address.bank, index=address.number - 1)


def _fold(items: list[tuple[BinaryOp | None, Expression]]) -> Expression:
    """Fold a flat operator chain into a tree by operator precedence."""
    operands: list[Expression] = [items[0][1]]
    ops: list[BinaryOp] = []

    def reduce() -> None:
        right = operands.pop()
        left = operands.pop()
        operands.append(BinaryExpr(op=ops.pop(), left=left, right=right))

    for op, expr in items[1:]:
        while ops and _PRECEDENCE[ops[-1]] >= _PRECEDENCE[op]:
            reduce()
        ops.append(op)
        operands.append(expr)
    while ops:
        reduce()
    return operands[0]


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------

_STATE_HANDLERS: dict[ParseState, Callable[[StatementCompiler, Token], None]] = {
    ParseState.AWAITING_START: StatementCompiler._on_statement_start,
    ParseState.BUILDING_CONDITION: StatementCompiler._on_condition,
    ParseState.AWAITING_TARGET: StatementCompiler._on_target,
}


def compile_tokens(
    tokens: Iterable[Token],
    bank_sizes: dict[RegisterBank, int] | None = None,
) -> list[Statement]:
    """Compile one network's token sequence into statements."""
    return StatementCompiler(CompileContext(bank_sizes=bank_sizes)).compile(tokens)
