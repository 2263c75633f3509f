"""Compile errors raised by the IL front end."""

from __future__ import annotations

from ._tokens import Token


class CompileError(Exception):
    """Error during IL compilation with network and source location.

    *network* is the 0-based index of the failing network; the network
    splitter fills it in when a sequence of networks is compiled.
    """

    def __init__(
        self,
        message: str,
        token: Token | None = None,
        *,
        line: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.token = token
        self.network: int | None = None
        if line is None and token is not None and token.line > 0:
            line = token.line
        self.line = line

    def __str__(self) -> str:
        parts = []
        if self.network is not None:
            parts.append(f"network {self.network + 1}")
        if self.line is not None:
            parts.append(f"line {self.line}")
        if not parts:
            return self.message
        return f"{self.message} ({', '.join(parts)})"


class InvalidTokenError(CompileError):
    """A source fragment is neither keyword, operand nor bracket."""


class UnbalancedBracketsError(CompileError):
    """Opening and closing brackets do not pair up."""


class MissingConditionError(CompileError):
    """``=`` appears without a preceding logic chain."""


class BracketWithoutOperandError(CompileError):
    """A bracket group is not introduced by a logic operator."""


class UnexpectedOperandError(CompileError):
    """An operand appears where no rule accepts one."""


class IncompleteStatementError(CompileError):
    """The network ends inside an unterminated statement."""


class MissingOperandError(CompileError):
    """An operand was expected but an operator, bracket or instruction came."""


class MissingTargetError(CompileError):
    """An instruction is not followed by its target operand."""


class InvalidTargetError(CompileError):
    """An instruction targets a register bank that only the caller writes."""


class OperandOutOfRangeError(CompileError):
    """An operand addresses a register outside its bank."""


class NetworkCompileFailed(CompileError):
    """One or more networks of a load failed to compile.

    *errors* holds the failure of each failing network, in load order.
    """

    def __init__(self, errors: list[CompileError]) -> None:
        noun = "network" if len(errors) == 1 else "networks"
        super().__init__(f"{len(errors)} {noun} failed to compile")
        self.errors = errors

    def __str__(self) -> str:
        details = "; ".join(str(e) for e in self.errors)
        return f"{self.message}: {details}"
