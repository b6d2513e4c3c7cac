"""Monkey AST: parse-time node definitions.

Every node keeps the token it was built from. `str(node)` renders a fully
parenthesised canonical form that the parser tests and `monkey --parse`
compare against.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .tokens import Token


# ============================================================
# BASES
# ============================================================


@dataclass(frozen=True)
class Node:
    """Base for all nodes."""

    token: Token

    def token_literal(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class Statement(Node):
    """Base for all statements."""


@dataclass(frozen=True)
class Expression(Node):
    """Base for all expressions."""


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True)
class Identifier(Expression):
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str

    def __str__(self) -> str:
        return '"' + self.value + '"'


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    """[e1, e2, ...]."""

    elements: tuple[Expression, ...]

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class MapLiteral(Expression):
    """{k1: v1, k2: v2, ...}, pairs kept in source order."""

    pairs: tuple[tuple[Expression, Expression], ...]

    def __str__(self) -> str:
        parts = [str(k) + ": " + str(v) for k, v in self.pairs]
        return "{" + ", ".join(parts) + "}"


@dataclass(frozen=True)
class PrefixExpression(Expression):
    """op right, for ! and unary -."""

    operator: str
    right: Expression

    def __str__(self) -> str:
        return "(" + self.operator + str(self.right) + ")"


@dataclass(frozen=True)
class InfixExpression(Expression):
    """left op right."""

    left: Expression
    operator: str
    right: Expression

    def __str__(self) -> str:
        return "(" + str(self.left) + " " + self.operator + " " + str(self.right) + ")"


@dataclass(frozen=True)
class IfExpression(Expression):
    """if (condition) { consequence } else { alternative }."""

    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None = None

    def __str__(self) -> str:
        out = "if " + str(self.condition) + " " + str(self.consequence)
        if self.alternative is not None:
            out += " else " + str(self.alternative)
        return out


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    """fn(params) { body }."""

    parameters: tuple[Identifier, ...]
    body: BlockStatement

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return "fn(" + params + ") " + str(self.body)


@dataclass(frozen=True)
class CallExpression(Expression):
    """function(arguments). token is the '('."""

    function: Expression
    arguments: tuple[Expression, ...]

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return str(self.function) + "(" + args + ")"


@dataclass(frozen=True)
class IndexExpression(Expression):
    """left[index]. token is the '['."""

    left: Expression
    index: Expression

    def __str__(self) -> str:
        return "(" + str(self.left) + "[" + str(self.index) + "])"


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True)
class LetStatement(Statement):
    """let name = value;"""

    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return "let " + str(self.name) + " = " + str(self.value) + ";"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """return value;"""

    value: Expression

    def __str__(self) -> str:
        return "return " + str(self.value) + ";"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    """{ stmt; stmt; ... }. token is the '{'."""

    statements: tuple[Statement, ...]

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + "; ".join(str(s).rstrip(";") for s in self.statements) + " }"


# ============================================================
# PROGRAM
# ============================================================


@dataclass(frozen=True)
class Program:
    """Parse root. A Program with errors must not be evaluated."""

    statements: tuple[Statement, ...]
    errors: tuple[str, ...] = field(default=())

    def token_literal(self) -> str:
        if not self.statements:
            return ""
        return self.statements[0].token_literal()

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def __str__(self) -> str:
        return "\n".join(str(s) for s in self.statements)
