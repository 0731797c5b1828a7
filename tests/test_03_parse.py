"""Parser tests.

Cases in 03_parse/*.tests expect either `ok` or
`error: line <N>: <message>`; structural checks live below.
"""

import dataclasses
from pathlib import Path

import pytest

from specfile import discover_specs
from vie import parse
from vie.ast import (
    ArrayLiteral,
    Assignment,
    Binary,
    Block,
    BooleanLiteral,
    Call,
    ClassDeclaration,
    ExpressionStatement,
    ForEach,
    FunctionDeclaration,
    Identifier,
    If,
    Member,
    New,
    NullLiteral,
    NumericLiteral,
    Program,
    Return,
    StringLiteral,
    This,
    VariableDeclaration,
    While,
)
from vie.parse import ParseError, Parser
from vie.tokens import TK_CHO, tokenize

PARSE_DIR = Path(__file__).parent / "03_parse"


def pytest_generate_tests(metafunc):
    """Parametrize over parser test files."""
    if "parse_input" in metafunc.fixturenames:
        params = [
            pytest.param(input_code, expected, id=test_id)
            for test_id, input_code, expected in discover_specs(PARSE_DIR)
        ]
        metafunc.parametrize("parse_input,parse_expected", params)


def test_parse(parse_input: str, parse_expected: str):
    if parse_expected == "ok":
        assert isinstance(parse(parse_input), Program)
        return
    with pytest.raises(ParseError) as exc_info:
        parse(parse_input)
    err = exc_info.value
    assert f"error: line {err.line}: {err.msg}" == parse_expected


def only_stmt(source: str):
    program = parse(source)
    assert len(program.body) == 1
    return program.body[0]


def only_expr(source: str):
    stmt = only_stmt(source)
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expr


# ── Statements ───────────────────────────────────────────────


def test_variable_declaration():
    assert parse("cho x = 5") == Program(
        (VariableDeclaration("x", NumericLiteral(5.0)),)
    )


def test_function_declaration():
    stmt = only_stmt("hàm cộng(a, b) { trả_về a + b }")
    assert stmt == FunctionDeclaration(
        Identifier("cộng"),
        (Identifier("a"), Identifier("b")),
        Block((Return(Binary(Identifier("a"), "+", Identifier("b"))),)),
    )


def test_class_declaration():
    stmt = only_stmt("lớp A { hàm khởi_tạo() { } hàm b() { } }")
    assert isinstance(stmt, ClassDeclaration)
    assert stmt.name == Identifier("A")
    assert [m.name.name for m in stmt.methods] == ["khởi_tạo", "b"]
    assert stmt.methods[0].body == Block(())


def test_bare_return_before_brace_is_null():
    stmt = only_stmt("hàm f() { trả_về }")
    assert stmt.body.body == (Return(NullLiteral()),)


def test_bare_return_at_end_of_input_is_null():
    assert only_stmt("trả_về") == Return(NullLiteral())


def test_if_else():
    stmt = only_stmt("nếu (đúng) { trả_về 1 } ngược_lại { trả_về 2 }")
    assert stmt == If(
        BooleanLiteral(True),
        Block((Return(NumericLiteral(1.0)),)),
        Block((Return(NumericLiteral(2.0)),)),
    )


def test_else_if_forms_are_equivalent():
    a = parse("nếu (a) { } còn_nếu (b) { } ngược_lại { }")
    b = parse("nếu (a) { } ngược_lại nếu (b) { } ngược_lại { }")
    assert a == b
    assert a.body[0].alternate == If(Identifier("b"), Block(()), Block(()))


def test_if_without_else():
    assert only_stmt("nếu (a) b").alternate is None


def test_while_with_inline_body():
    assert only_stmt("khi (a) b") == While(
        Identifier("a"), ExpressionStatement(Identifier("b"))
    )


def test_for_each():
    stmt = only_stmt("với_mỗi (n trong [1, 2]) { in(n) }")
    assert stmt == ForEach(
        Identifier("n"),
        ArrayLiteral((NumericLiteral(1.0), NumericLiteral(2.0))),
        Block(
            (ExpressionStatement(Call(Identifier("in"), (Identifier("n"),))),)
        ),
    )


def test_standalone_block():
    assert only_stmt("{ cho a = 1 }") == Block(
        (VariableDeclaration("a", NumericLiteral(1.0)),)
    )


# ── Expressions ──────────────────────────────────────────────


def test_precedence_multiplication_over_addition():
    assert only_expr("1 + 2 * 3") == Binary(
        NumericLiteral(1.0),
        "+",
        Binary(NumericLiteral(2.0), "*", NumericLiteral(3.0)),
    )


def test_binary_levels_are_left_associative():
    assert only_expr("a - b - c") == Binary(
        Binary(Identifier("a"), "-", Identifier("b")), "-", Identifier("c")
    )


def test_logical_operators_use_target_spelling():
    assert only_expr("a và b hoặc c") == Binary(
        Binary(Identifier("a"), "&&", Identifier("b")), "||", Identifier("c")
    )


def test_equality_binds_looser_than_comparison():
    assert only_expr("a < b == c") == Binary(
        Binary(Identifier("a"), "<", Identifier("b")), "==", Identifier("c")
    )


def test_unary_minus_is_subtraction_from_zero():
    assert only_expr("-a") == Binary(NumericLiteral(0.0), "-", Identifier("a"))
    assert only_expr("--a") == Binary(
        NumericLiteral(0.0), "-", Binary(NumericLiteral(0.0), "-", Identifier("a"))
    )


def test_parentheses_leave_no_grouping_node():
    assert only_expr("(a)") == Identifier("a")


def test_assignment_is_right_associative():
    assert only_expr("a = b = 1") == Assignment(
        Identifier("a"), Assignment(Identifier("b"), NumericLiteral(1.0))
    )


def test_member_assignment():
    assert only_expr("this.x = 1") == Assignment(
        Member(This(), Identifier("x"), False), NumericLiteral(1.0)
    )


def test_call_and_member_chain():
    assert only_expr("a.b(c)[d]") == Member(
        Call(Member(Identifier("a"), Identifier("b"), False), (Identifier("c"),)),
        Identifier("d"),
        True,
    )


def test_new_expression():
    assert only_expr("mới Hình(1, 'a')") == New(
        Identifier("Hình"), (NumericLiteral(1.0), StringLiteral("a"))
    )


def test_member_on_new_expression():
    assert only_expr("mới A().b") == Member(
        New(Identifier("A"), ()), Identifier("b"), False
    )


def test_literals():
    assert only_expr("[đúng, sai, rỗng, this, 'x']") == ArrayLiteral(
        (
            BooleanLiteral(True),
            BooleanLiteral(False),
            NullLiteral(),
            This(),
            StringLiteral("x"),
        )
    )


def test_bare_bang_parses_as_identifier():
    program = parse("!a")
    assert program.body == (
        ExpressionStatement(Identifier("!")),
        ExpressionStatement(Identifier("a")),
    )


# ── Errors and recovery ──────────────────────────────────────


def test_invalid_assignment_references_token_before_equals():
    with pytest.raises(ParseError) as exc_info:
        parse("1 = 2")
    err = exc_info.value
    assert err.msg == "invalid assignment target"
    assert err.token.lexeme == "1"
    assert err.token.line == 1


def test_invalid_assignment_after_call_references_closing_paren():
    with pytest.raises(ParseError) as exc_info:
        parse("\nf(x) = 2")
    assert exc_info.value.token.lexeme == ")"
    assert exc_info.value.line == 2


def test_recovery_stops_before_next_declaration():
    parser = Parser(tokenize("cho = 1\ncho y = 2"))
    with pytest.raises(ParseError):
        parser.parse()
    tok = parser.current()
    assert tok.kind == TK_CHO
    assert tok.line == 2


def test_recovery_stops_after_closing_brace():
    parser = Parser(tokenize("hàm f( { } a = 1"))
    with pytest.raises(ParseError) as exc_info:
        parser.parse()
    assert exc_info.value.token.lexeme == "{"
    assert parser.previous().lexeme == "}"
    assert parser.current().lexeme == "a"


def test_recovery_stops_at_end_of_input():
    parser = Parser(tokenize("cho = 1 2 3"))
    with pytest.raises(ParseError):
        parser.parse()
    assert parser.at_end()


def test_program_is_immutable():
    program = parse("cho x = 1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        program.body = ()
