"""Monkey runtime: tree-walking evaluation of a parsed Program.

Errors are values: each rule checks its sub-results with `is_error` (and
for `VReturn`) and hands them back unchanged, so the first error wins and
nothing after it is evaluated. Python exceptions are reserved for broken
internal invariants (`MonkeyRuntimeFault`).
"""

from __future__ import annotations

from typing import Sequence

from .ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
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
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from .builtins import BUILTINS
from .env import Environment
from .objects import (
    DIVISION_BY_ZERO,
    FUNCTION,
    INTEGER,
    NULL,
    HashableValue,
    MonkeyRuntimeFault,
    Value,
    VArray,
    VBuiltin,
    VError,
    VFunction,
    VInteger,
    VMap,
    VReturn,
    VString,
    incorrect_number_of_args,
    is_error,
    is_truthy,
    native_bool,
    parse_error,
    type_mismatch,
    unknown_identifier,
    unknown_operator,
    wrap_int64,
)


def _abrupt(v: Value) -> bool:
    """Whether v must be handed straight back to the caller: an error or a return."""
    return is_error(v) or isinstance(v, VReturn)


# ============================================================
# Entry point
# ============================================================


def evaluate(node: Program | Statement | Expression, env: Environment) -> Value:
    """Evaluate node in env. Never raises for Monkey-level errors."""
    if isinstance(node, Program):
        return _eval_program(node, env)

    # ---- Statements --------------------------------------------------------

    if isinstance(node, ExpressionStatement):
        return evaluate(node.expression, env)

    if isinstance(node, BlockStatement):
        return _eval_statements(node.statements, env)

    if isinstance(node, LetStatement):
        val = evaluate(node.value, env)
        if _abrupt(val):
            return val
        return env.set(node.name.value, val)

    if isinstance(node, ReturnStatement):
        val = evaluate(node.value, env)
        if _abrupt(val):
            return val
        return VReturn(val)

    # ---- Literals ----------------------------------------------------------

    if isinstance(node, IntegerLiteral):
        return VInteger(node.value)
    if isinstance(node, BooleanLiteral):
        return native_bool(node.value)
    if isinstance(node, StringLiteral):
        return VString(node.value)

    if isinstance(node, ArrayLiteral):
        elements = _eval_expressions(node.elements, env)
        if isinstance(elements, Value):
            return elements
        return VArray(tuple(elements))

    if isinstance(node, MapLiteral):
        return _eval_map_literal(node, env)

    if isinstance(node, FunctionLiteral):
        # Captures env by reference; the body runs only when called.
        return VFunction(node.parameters, node.body, env)

    # ---- Expressions -------------------------------------------------------

    if isinstance(node, Identifier):
        return _eval_identifier(node, env)

    if isinstance(node, PrefixExpression):
        right = evaluate(node.right, env)
        if _abrupt(right):
            return right
        return _eval_prefix(node.operator, right)

    if isinstance(node, InfixExpression):
        left = evaluate(node.left, env)
        if _abrupt(left):
            return left
        right = evaluate(node.right, env)
        if _abrupt(right):
            return right
        return _eval_infix(node.operator, left, right)

    if isinstance(node, IfExpression):
        cond = evaluate(node.condition, env)
        if _abrupt(cond):
            return cond
        if is_truthy(cond):
            return evaluate(node.consequence, env)
        if node.alternative is not None:
            return evaluate(node.alternative, env)
        return NULL

    if isinstance(node, CallExpression):
        function = evaluate(node.function, env)
        if _abrupt(function):
            return function
        args = _eval_expressions(node.arguments, env)
        if isinstance(args, Value):
            return args
        return apply_function(function, args)

    if isinstance(node, IndexExpression):
        left = evaluate(node.left, env)
        if _abrupt(left):
            return left
        index = evaluate(node.index, env)
        if _abrupt(index):
            return index
        return _eval_index(left, index)

    raise MonkeyRuntimeFault("unsupported node: " + type(node).__name__)


# ============================================================
# Statements
# ============================================================


def _eval_program(program: Program, env: Environment) -> Value:
    if program.has_errors():
        return parse_error(program.errors)
    result = _eval_statements(program.statements, env)
    if isinstance(result, VReturn):
        return result.value
    return result


def _eval_statements(stmts: Sequence[Statement], env: Environment) -> Value:
    """Run stmts in order; stop at the first error or return signal."""
    result: Value = NULL
    for st in stmts:
        result = evaluate(st, env)
        if _abrupt(result):
            return result
    return result


# ============================================================
# Expressions
# ============================================================


def _eval_expressions(
    exprs: Sequence[Expression], env: Environment
) -> list[Value] | Value:
    """Evaluate left to right. Returns the values, or the first abrupt result."""
    out: list[Value] = []
    for e in exprs:
        v = evaluate(e, env)
        if _abrupt(v):
            return v
        out.append(v)
    return out


def _eval_identifier(node: Identifier, env: Environment) -> Value:
    val = env.get(node.value)
    if val is not None:
        return val
    builtin = BUILTINS.get(node.value)
    if builtin is not None:
        return builtin
    return unknown_identifier(node.value)


def _eval_prefix(op: str, right: Value) -> Value:
    if op == "!":
        return native_bool(not is_truthy(right))
    if op == "-":
        if not isinstance(right, VInteger):
            return unknown_operator("unknown operator: -" + right.tag)
        return VInteger(wrap_int64(-right.value))
    return unknown_operator("unknown operator: " + op + right.tag)


def _int_div_trunc(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q


def _eval_integer_infix(op: str, left: VInteger, right: VInteger) -> Value:
    a = left.value
    b = right.value
    if op == "+":
        return VInteger(wrap_int64(a + b))
    if op == "-":
        return VInteger(wrap_int64(a - b))
    if op == "*":
        return VInteger(wrap_int64(a * b))
    if op == "/":
        if b == 0:
            return VError(DIVISION_BY_ZERO, "division by zero: " + str(a) + " / 0")
        return VInteger(wrap_int64(_int_div_trunc(a, b)))
    if op == "<":
        return native_bool(a < b)
    if op == ">":
        return native_bool(a > b)
    if op == "==":
        return native_bool(a == b)
    if op == "!=":
        return native_bool(a != b)
    return unknown_operator("unknown operator: " + INTEGER + " " + op + " " + INTEGER)


def _eval_infix(op: str, left: Value, right: Value) -> Value:
    if isinstance(left, VInteger) and isinstance(right, VInteger):
        return _eval_integer_infix(op, left, right)
    if isinstance(left, VString) and isinstance(right, VString):
        if op == "+":
            return VString(left.value + right.value)
        return unknown_operator(
            "unknown operator: " + left.tag + " " + op + " " + right.tag
        )
    if left.tag != right.tag:
        return type_mismatch("type mismatch: " + left.tag + " " + op + " " + right.tag)
    # Same non-integer, non-string type: only equality is defined.
    if op == "==":
        return native_bool(_value_eq(left, right))
    if op == "!=":
        return native_bool(not _value_eq(left, right))
    return unknown_operator("unknown operator: " + left.tag + " " + op + " " + right.tag)


def _value_eq(a: Value, b: Value) -> bool:
    # Booleans and null are singletons; functions and builtins compare by
    # identity; arrays and maps structurally.
    if isinstance(a, (VFunction, VBuiltin)):
        return a is b
    return a == b


def _eval_map_literal(node: MapLiteral, env: Environment) -> Value:
    pairs: dict[HashableValue, Value] = {}
    for key_node, value_node in node.pairs:
        key = evaluate(key_node, env)
        if _abrupt(key):
            return key
        if not isinstance(key, HashableValue):
            return type_mismatch("unusable as map key: " + key.tag)
        value = evaluate(value_node, env)
        if _abrupt(value):
            return value
        pairs[key] = value
    return VMap(pairs)


def _eval_index(left: Value, index: Value) -> Value:
    if isinstance(left, VArray):
        if not isinstance(index, VInteger):
            return type_mismatch("array index must be " + INTEGER + ", got " + index.tag)
        i = index.value
        if i < 0 or i >= len(left.elements):
            return NULL
        return left.elements[i]
    if isinstance(left, VMap):
        if not isinstance(index, HashableValue):
            return type_mismatch("unusable as map key: " + index.tag)
        return left.pairs.get(index, NULL)
    return type_mismatch("index operator not supported: " + left.tag)


# ============================================================
# Calls
# ============================================================


def apply_function(fn: Value, args: list[Value]) -> Value:
    """Call a builtin or closure with already-evaluated arguments."""
    if isinstance(fn, VBuiltin):
        return fn.fn(args)
    if isinstance(fn, VFunction):
        if len(args) != len(fn.parameters):
            return incorrect_number_of_args(len(fn.parameters), len(args))
        call_env = Environment.enclosed(fn.env)
        for param, arg in zip(fn.parameters, args):
            call_env.set(param.value, arg)
        result = evaluate(fn.body, call_env)
        if isinstance(result, VReturn):
            return result.value
        return result
    return type_mismatch("not a function: expected " + FUNCTION + ", got " + fn.tag)
