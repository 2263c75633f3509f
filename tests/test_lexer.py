"""Tests for the IL lexer/classifier."""

import pytest

from ilplc.il import (
    Bracket,
    InvalidTokenError,
    LogicOp,
    OperandAddress,
    TokenKind,
    UnbalancedBracketsError,
    tokenize,
)
from ilplc.model.hardware import RegisterBank
from ilplc.model.statements import Action


def kinds(tokens):
    return [t.kind for t in tokens]


class TestClassification:
    def test_logic_ops(self):
        tokens = tokenize("U O X NOT UN ON")
        assert [t.value for t in tokens[:-1]] == [
            LogicOp.AND,
            LogicOp.OR,
            LogicOp.XOR,
            LogicOp.NOT,
            LogicOp.AND_NOT,
            LogicOp.OR_NOT,
        ]
        assert all(t.kind == TokenKind.LOGIC_OP for t in tokens[:-1])

    def test_instructions(self):
        tokens = tokenize("= S R")
        assert [t.value for t in tokens[:-1]] == [Action.ASSIGN, Action.SET, Action.RESET]
        assert all(t.kind == TokenKind.INSTRUCTION for t in tokens[:-1])

    def test_operands(self):
        tokens = tokenize("E1 A12 M256")
        assert [t.value for t in tokens[:-1]] == [
            OperandAddress(RegisterBank.INPUT, 1),
            OperandAddress(RegisterBank.OUTPUT, 12),
            OperandAddress(RegisterBank.FLAG, 256),
        ]

    def test_brackets(self):
        tokens = tokenize("U ( E1 )")
        assert kinds(tokens) == [
            TokenKind.LOGIC_OP,
            TokenKind.BRACKET,
            TokenKind.OPERAND,
            TokenKind.BRACKET,
            TokenKind.END_OF_NETWORK,
        ]
        assert tokens[1].value == Bracket.OPEN
        assert tokens[3].value == Bracket.CLOSE

    def test_brackets_split_without_whitespace(self):
        tokens = tokenize("U(E1)")
        assert [t.text for t in tokens[:-1]] == ["U", "(", "E1", ")"]

    def test_case_insensitive(self):
        tokens = tokenize("un e3\ns a2")
        assert tokens[0].value == LogicOp.AND_NOT
        assert tokens[1].value == OperandAddress(RegisterBank.INPUT, 3)
        assert tokens[2].value == Action.SET

    def test_logic_keyword_wins_over_operand_pattern(self):
        # "O" alone is a logic op, never an operand
        assert tokenize("O")[0].kind == TokenKind.LOGIC_OP


class TestStructure:
    def test_ends_with_end_of_network(self):
        tokens = tokenize("U E1\n= A1")
        assert tokens[-1].kind == TokenKind.END_OF_NETWORK

    def test_empty_source(self):
        tokens = tokenize("")
        assert kinds(tokens) == [TokenKind.END_OF_NETWORK]

    def test_comments_stripped(self):
        tokens = tokenize("U E1 // FOO BAR\n// whole line\n= A1")
        assert [t.text for t in tokens[:-1]] == ["U", "E1", "=", "A1"]

    def test_line_and_column(self):
        tokens = tokenize("U E1\n  = A1")
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[1].line, tokens[1].column) == (1, 3)
        assert (tokens[2].line, tokens[2].column) == (2, 3)

    def test_tabs_and_blank_lines(self):
        tokens = tokenize("\tU\tE1\n\n\n=\tA1\n")
        assert [t.text for t in tokens[:-1]] == ["U", "E1", "=", "A1"]


class TestLexerErrors:
    def test_unknown_token(self):
        with pytest.raises(InvalidTokenError, match="FOO"):
            tokenize("U E1 FOO")

    def test_unknown_token_reports_line(self):
        with pytest.raises(InvalidTokenError) as excinfo:
            tokenize("U E1\n= Q1")
        assert excinfo.value.line == 2

    def test_operand_with_separator(self):
        with pytest.raises(InvalidTokenError, match="E.1"):
            tokenize("U E.1")

    def test_operand_without_index(self):
        with pytest.raises(InvalidTokenError):
            tokenize("U E")

    def test_unknown_bank(self):
        with pytest.raises(InvalidTokenError, match="Q1"):
            tokenize("U Q1")

    def test_curly_and_square_brackets(self):
        with pytest.raises(InvalidTokenError, match=r"\["):
            tokenize("U [ E1 ]")

    def test_unclosed_bracket(self):
        with pytest.raises(UnbalancedBracketsError):
            tokenize("U ( E1")

    def test_close_before_open(self):
        with pytest.raises(UnbalancedBracketsError, match="Closing bracket"):
            tokenize("U ) E1 (")

    def test_bracket_in_comment_ignored(self):
        tokens = tokenize("U E1 // (\n= A1")
        assert len(tokens) == 5
