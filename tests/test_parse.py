"""Tests for the Monkey parser: node shapes and error collection."""

import dataclasses

import pytest

from monkey.ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    MapLiteral,
    PrefixExpression,
    ReturnStatement,
    StringLiteral,
)
from monkey.parse import Parser, ParseError, Precedence, parse
from monkey.tokens import TK_IDENT, Token, tokenize


def _parse_ok(source: str):
    program, errors = parse(source)
    assert errors == [], f"unexpected parse errors: {errors}"
    return program


def _single_expression(source: str):
    program = _parse_ok(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "source,name,value",
    [
        ("let x = 5;", "x", 5),
        ("let y = 10;", "y", 10),
        ("let foobar = 838383;", "foobar", 838383),
    ],
)
def test_let_statements(source: str, name: str, value: int):
    program = _parse_ok(source)
    stmt = program.statements[0]
    assert isinstance(stmt, LetStatement)
    assert stmt.token_literal() == "let"
    assert stmt.name.value == name
    assert isinstance(stmt.value, IntegerLiteral)
    assert stmt.value.value == value


def test_return_statements():
    program = _parse_ok("return 5; return 10; return 993322;")
    assert len(program.statements) == 3
    for stmt in program.statements:
        assert isinstance(stmt, ReturnStatement)
        assert stmt.token_literal() == "return"


def test_semicolons_are_optional():
    program = _parse_ok("let a = 1\nlet b = 2\na")
    assert [type(s) for s in program.statements] == [
        LetStatement,
        LetStatement,
        ExpressionStatement,
    ]


def test_empty_program():
    program = _parse_ok("")
    assert program.statements == ()
    assert program.token_literal() == ""
    assert str(program) == ""


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def test_identifier():
    expr = _single_expression("foobar;")
    assert isinstance(expr, Identifier)
    assert expr.value == "foobar"
    assert expr.token_literal() == "foobar"


def test_integer_literal():
    expr = _single_expression("5;")
    assert isinstance(expr, IntegerLiteral)
    assert expr.value == 5


def test_integer_literal_bounds():
    expr = _single_expression("9223372036854775807")
    assert expr.value == 2**63 - 1
    _, errors = parse("9223372036854775808")
    assert errors == ["Could not parse 9223372036854775808 as integer"]


def test_boolean_literals():
    program = _parse_ok("true; false;")
    values = [s.expression.value for s in program.statements]
    assert values == [True, False]
    assert all(isinstance(s.expression, BooleanLiteral) for s in program.statements)


def test_string_literal():
    expr = _single_expression('"hello world";')
    assert isinstance(expr, StringLiteral)
    assert expr.value == "hello world"


@pytest.mark.parametrize("source,op,value", [("!5;", "!", 5), ("-15;", "-", 15)])
def test_prefix_expressions(source: str, op: str, value: int):
    expr = _single_expression(source)
    assert isinstance(expr, PrefixExpression)
    assert expr.operator == op
    assert expr.right.value == value


@pytest.mark.parametrize("op", ["+", "-", "*", "/", ">", "<", "==", "!="])
def test_infix_expressions(op: str):
    expr = _single_expression(f"5 {op} 6;")
    assert isinstance(expr, InfixExpression)
    assert expr.operator == op
    assert expr.left.value == 5
    assert expr.right.value == 6


def test_prefix_binds_tighter_than_product():
    expr = _single_expression("-a * b")
    assert isinstance(expr, InfixExpression)
    assert isinstance(expr.left, PrefixExpression)
    assert str(expr) == "((-a) * b)"


def test_if_expression():
    expr = _single_expression("if (x < y) { x }")
    assert isinstance(expr, IfExpression)
    assert str(expr.condition) == "(x < y)"
    assert isinstance(expr.consequence, BlockStatement)
    assert len(expr.consequence.statements) == 1
    assert expr.alternative is None


def test_if_else_expression():
    expr = _single_expression("if (x < y) { x } else { y }")
    assert isinstance(expr, IfExpression)
    assert expr.alternative is not None
    assert str(expr.alternative.statements[0]) == "y"


def test_function_literal():
    expr = _single_expression("fn(x, y) { x + y; }")
    assert isinstance(expr, FunctionLiteral)
    assert [p.value for p in expr.parameters] == ["x", "y"]
    assert str(expr.body.statements[0]) == "(x + y)"


@pytest.mark.parametrize(
    "source,params",
    [("fn() {};", []), ("fn(x) {};", ["x"]), ("fn(x, y, z) {};", ["x", "y", "z"])],
)
def test_function_parameters(source: str, params: list[str]):
    expr = _single_expression(source)
    assert [p.value for p in expr.parameters] == params


def test_call_expression():
    expr = _single_expression("add(1, 2 * 3, 4 + 5);")
    assert isinstance(expr, CallExpression)
    assert str(expr.function) == "add"
    assert [str(a) for a in expr.arguments] == ["1", "(2 * 3)", "(4 + 5)"]


def test_array_literal():
    expr = _single_expression("[1, 2 * 2, 3 + 3]")
    assert isinstance(expr, ArrayLiteral)
    assert len(expr.elements) == 3


def test_index_expression():
    expr = _single_expression("myArray[1 + 1]")
    assert isinstance(expr, IndexExpression)
    assert str(expr.left) == "myArray"
    assert str(expr.index) == "(1 + 1)"


def test_map_literal_keeps_source_order():
    expr = _single_expression('{"one": 1, "two": 2, "three": 3}')
    assert isinstance(expr, MapLiteral)
    assert [k.value for k, _ in expr.pairs] == ["one", "two", "three"]
    assert [v.value for _, v in expr.pairs] == [1, 2, 3]


def test_empty_map_literal():
    expr = _single_expression("{}")
    assert isinstance(expr, MapLiteral)
    assert expr.pairs == ()


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


def test_nodes_are_immutable():
    expr = _single_expression("x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        expr.value = "y"


def test_program_renders_let():
    name = Identifier(Token(TK_IDENT, "myVar"), "myVar")
    value = Identifier(Token(TK_IDENT, "anotherVar"), "anotherVar")
    program = _parse_ok("let myVar = anotherVar;")
    assert program.statements[0].name == name
    assert program.statements[0].value == value
    assert str(program) == "let myVar = anotherVar;"


def test_precedence_order():
    assert Precedence.LOWEST < Precedence.EQUALS < Precedence.LESSGREATER
    assert Precedence.SUM < Precedence.PRODUCT < Precedence.PREFIX
    assert Precedence.PREFIX < Precedence.CALL < Precedence.INDEX


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_errors_are_collected_and_parsing_continues():
    # Each failed statement is skipped up to its semicolon, so it reports once.
    program, errors = parse("let x 5; let = 10; let 838383;")
    assert errors == [
        "Expected next token to be ASSIGN but was INT",
        "Expected next token to be IDENT but was ASSIGN",
        "Expected next token to be IDENT but was INT",
    ]
    assert program.has_errors()
    assert program.errors == tuple(errors)


def test_valid_statements_survive_errors():
    program, errors = parse("let a = 1; let b 2; let c = 3;")
    assert errors == ["Expected next token to be ASSIGN but was INT"]
    lets = [s for s in program.statements if isinstance(s, LetStatement)]
    assert [s.name.value for s in lets] == ["a", "c"]


def test_clean_program_has_no_errors():
    program, errors = parse("let a = 1;")
    assert errors == []
    assert not program.has_errors()


def test_parse_error_does_not_escape():
    # parse() reports errors as strings; it never raises.
    program, errors = parse("( ( ( (")
    assert errors
    assert isinstance(program.errors, tuple)


def test_parser_expect_peek_raises():
    parser = Parser(tokenize("let 5"))
    with pytest.raises(ParseError) as exc:
        parser.expect_peek(TK_IDENT)
    assert exc.value.msg == "Expected next token to be IDENT but was INT"
    assert exc.value.token.literal == "5"


def test_parser_advance_sticks_on_eof():
    parser = Parser(tokenize("x"))
    parser.advance()
    parser.advance()
    assert parser.current().type == "EOF"
    assert parser.peek().type == "EOF"


def test_error_inside_block_reported_once():
    _, errors = parse("let f = fn(x) { let y 5; y };")
    assert errors == ["Expected next token to be ASSIGN but was INT"]


def test_parsing_resumes_after_failed_block():
    program, errors = parse("let f = fn(x) { let y 5; y }; let z = 2; z")
    assert errors == ["Expected next token to be ASSIGN but was INT"]
    assert [str(s) for s in program.statements] == ["let z = 2;", "z"]


def test_unmatched_closing_brace_is_skipped():
    program, errors = parse("}; let a = 1;")
    assert errors == ["No prefix parse function for RBRACE found"]
    assert [str(s) for s in program.statements] == ["let a = 1;"]


def test_program_renders_one_statement_per_line():
    program = _parse_ok("let a = 1; a")
    assert str(program) == "let a = 1;\na"
