"""Lexer/classifier: IL source text to a token sequence.

Comments (``//`` to end of line) are stripped and the text upper-cased
before splitting, so keywords and bank letters are case-insensitive.
Fragments are separated by whitespace and bracket characters; bracket
characters are kept as fragments of their own.  Each fragment is
classified in priority order: logic keyword, instruction keyword,
operand, bracket.  Anything else is an :class:`InvalidTokenError`.
"""

from __future__ import annotations

import re

from ilplc.model.hardware import RegisterBank
from ilplc.model.statements import Action

from ._errors import InvalidTokenError, UnbalancedBracketsError
from ._tokens import Bracket, LogicOp, OperandAddress, Token, TokenKind

_COMMENT_RE = re.compile(r"//.*$")

# Any bracket-like character is its own fragment; only ( and ) are valid.
_FRAGMENT_RE = re.compile(r"[(){}\[\]]|[^\s(){}\[\]]+")

_OPERAND_RE = re.compile(
    r"^(" + "|".join(b.value for b in RegisterBank) + r")([0-9]+)$"
)

_LOGIC_OPS = {op.value: op for op in LogicOp}
_INSTRUCTIONS = {a.value: a for a in Action}
_BRACKETS = {b.value: b for b in Bracket}


def tokenize(source: str) -> list[Token]:
    """Split and classify one network's IL text.

    Returns the token list terminated by an ``END_OF_NETWORK`` token.

    Raises
    ------
    InvalidTokenError
        A fragment cannot be classified.
    UnbalancedBracketsError
        A ``)`` has no matching ``(``, or a ``(`` is never closed.
    """
    tokens: list[Token] = []
    depth = 0
    last_line = 0

    for line_no, raw_line in enumerate(source.upper().splitlines(), start=1):
        last_line = line_no
        line = _COMMENT_RE.sub("", raw_line)
        for match in _FRAGMENT_RE.finditer(line):
            token = _classify(match.group(0), line_no, match.start() + 1)
            if token.value == Bracket.OPEN:
                depth += 1
            elif token.value == Bracket.CLOSE:
                depth -= 1
                if depth < 0:
                    raise UnbalancedBracketsError(
                        "Closing bracket without matching opening bracket",
                        token,
                    )
            tokens.append(token)

    end = Token(TokenKind.END_OF_NETWORK, ";", line=last_line)
    if depth != 0:
        raise UnbalancedBracketsError(
            f"Invalid bracket number: {depth} bracket(s) left open", end,
        )
    tokens.append(end)
    return tokens


def _classify(fragment: str, line: int, column: int) -> Token:
    if fragment in _LOGIC_OPS:
        return Token(TokenKind.LOGIC_OP, fragment, line, column, _LOGIC_OPS[fragment])
    if fragment in _INSTRUCTIONS:
        return Token(TokenKind.INSTRUCTION, fragment, line, column, _INSTRUCTIONS[fragment])
    m = _OPERAND_RE.match(fragment)
    if m is not None:
        address = OperandAddress(RegisterBank(m.group(1)), int(m.group(2)))
        return Token(TokenKind.OPERAND, fragment, line, column, address)
    if fragment in _BRACKETS:
        return Token(TokenKind.BRACKET, fragment, line, column, _BRACKETS[fragment])
    raise InvalidTokenError(
        f"Unknown command or operand found: {fragment}",
        line=line,
    )
