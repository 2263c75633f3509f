"""ilplc IL front end: Instruction List text to compiled programs.

Public API::

    from ilplc.il import compile_program

    program = compile_program(["U E1\n= A1", "UN E2\nR A1"])
"""

from ._compiler import CompileContext, ParseState, StatementCompiler, compile_tokens
from ._errors import (
    BracketWithoutOperandError,
    CompileError,
    IncompleteStatementError,
    InvalidTargetError,
    InvalidTokenError,
    MissingConditionError,
    MissingOperandError,
    MissingTargetError,
    NetworkCompileFailed,
    OperandOutOfRangeError,
    UnbalancedBracketsError,
    UnexpectedOperandError,
)
from ._lexer import tokenize
from ._networks import compile_network, compile_program
from ._tokens import Bracket, LogicOp, OperandAddress, Token, TokenKind

__all__ = [
    "Bracket",
    "BracketWithoutOperandError",
    "CompileContext",
    "CompileError",
    "IncompleteStatementError",
    "InvalidTargetError",
    "InvalidTokenError",
    "LogicOp",
    "MissingConditionError",
    "MissingOperandError",
    "MissingTargetError",
    "NetworkCompileFailed",
    "OperandAddress",
    "OperandOutOfRangeError",
    "ParseState",
    "StatementCompiler",
    "Token",
    "TokenKind",
    "UnbalancedBracketsError",
    "UnexpectedOperandError",
    "compile_network",
    "compile_program",
    "compile_tokens",
    "tokenize",
]
