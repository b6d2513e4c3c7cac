"""Monkey parser: recursive descent for statements, Pratt for expressions."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Callable

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
from .tokens import (
    TK_ASSIGN,
    TK_ASTERISK,
    TK_BANG,
    TK_COLON,
    TK_COMMA,
    TK_ELSE,
    TK_EOF,
    TK_EQ,
    TK_FALSE,
    TK_FUNCTION,
    TK_GT,
    TK_IDENT,
    TK_IF,
    TK_INT,
    TK_LBRACE,
    TK_LBRACKET,
    TK_LET,
    TK_LPAREN,
    TK_LT,
    TK_MINUS,
    TK_NOT_EQ,
    TK_PLUS,
    TK_RBRACE,
    TK_RBRACKET,
    TK_RETURN,
    TK_RPAREN,
    TK_SEMICOLON,
    TK_SLASH,
    TK_STRING,
    TK_TRUE,
    Token,
    tokenize,
)

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2  # == !=
    LESSGREATER = 3  # < >
    SUM = 4  # + -
    PRODUCT = 5  # * /
    PREFIX = 6  # -x !x
    CALL = 7  # f(x)
    INDEX = 8  # a[i]


PRECEDENCES: dict[str, Precedence] = {
    TK_EQ: Precedence.EQUALS,
    TK_NOT_EQ: Precedence.EQUALS,
    TK_LT: Precedence.LESSGREATER,
    TK_GT: Precedence.LESSGREATER,
    TK_PLUS: Precedence.SUM,
    TK_MINUS: Precedence.SUM,
    TK_SLASH: Precedence.PRODUCT,
    TK_ASTERISK: Precedence.PRODUCT,
    TK_LPAREN: Precedence.CALL,
    TK_LBRACKET: Precedence.INDEX,
}


class ParseError(Exception):
    """Parse error at a token. Collected on Program.errors, never escapes parse()."""

    def __init__(self, msg: str, token: Token):
        self.msg: str = msg
        self.token: Token = token
        super().__init__(msg)


class Parser:
    """Pratt parser for Monkey.

    Convention: every parse_* method starts with `current()` on the first
    token of its construct and returns with `current()` on the last one.
    """

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0
        self.errors: list[str] = []
        self.prefix_fns: dict[str, Callable[[], Expression]] = {
            TK_IDENT: self.parse_identifier,
            TK_INT: self.parse_integer_literal,
            TK_STRING: self.parse_string_literal,
            TK_BANG: self.parse_prefix_expression,
            TK_MINUS: self.parse_prefix_expression,
            TK_TRUE: self.parse_boolean,
            TK_FALSE: self.parse_boolean,
            TK_LPAREN: self.parse_grouped_expression,
            TK_IF: self.parse_if_expression,
            TK_FUNCTION: self.parse_function_literal,
            TK_LBRACKET: self.parse_array_literal,
            TK_LBRACE: self.parse_map_literal,
        }
        self.infix_fns: dict[str, Callable[[Expression], Expression]] = {
            TK_PLUS: self.parse_infix_expression,
            TK_MINUS: self.parse_infix_expression,
            TK_SLASH: self.parse_infix_expression,
            TK_ASTERISK: self.parse_infix_expression,
            TK_EQ: self.parse_infix_expression,
            TK_NOT_EQ: self.parse_infix_expression,
            TK_LT: self.parse_infix_expression,
            TK_GT: self.parse_infix_expression,
            TK_LPAREN: self.parse_call_expression,
            TK_LBRACKET: self.parse_index_expression,
        }

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self) -> Token:
        idx = self.pos + 1
        if idx >= len(self.tokens):
            return self.tokens[len(self.tokens) - 1]
        return self.tokens[idx]

    def advance(self) -> Token:
        # Sticks on the trailing EOF token.
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return self.current()

    def at(self, type_: str) -> bool:
        return self.current().type == type_

    def peek_is(self, type_: str) -> bool:
        return self.peek().type == type_

    def expect_peek(self, type_: str) -> Token:
        """Advance onto the peek token if it has type_, else raise."""
        if not self.peek_is(type_):
            raise ParseError(
                "Expected next token to be "
                + type_
                + " but was "
                + self.peek().type,
                self.peek(),
            )
        return self.advance()

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek().type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.current().type, Precedence.LOWEST)

    def error(self, msg: str) -> ParseError:
        return ParseError(msg, self.current())

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> Program:
        statements: list[Statement] = []
        while not self.at(TK_EOF):
            start = self.pos
            try:
                statements.append(self.parse_statement())
            except ParseError as e:
                logger.debug(
                    "parse error at offset %d: %s", e.token.offset, e.msg
                )
                self.errors.append(e.msg)
                self.synchronize(start)
            self.advance()
        return Program(tuple(statements), tuple(self.errors))

    def synchronize(self, start: int) -> None:
        """Skip the rest of the failed statement that began at start.

        Stops on the first ';' outside any block, on the '}' (or a ';' right
        after it) that closes the blocks opened since start, or at EOF.
        """
        depth = 0
        for tok in self.tokens[start : self.pos]:
            if tok.type == TK_LBRACE:
                depth += 1
            elif tok.type == TK_RBRACE:
                depth -= 1
        while not self.at(TK_EOF):
            if self.at(TK_SEMICOLON) and depth <= 0:
                return
            if self.at(TK_LBRACE):
                depth += 1
            elif self.at(TK_RBRACE):
                depth -= 1
                if depth <= 0:
                    if self.peek_is(TK_SEMICOLON):
                        self.advance()
                    return
            self.advance()

    # ── Statements ───────────────────────────────────────────

    def parse_statement(self) -> Statement:
        if self.at(TK_LET):
            return self.parse_let_statement()
        if self.at(TK_RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement:
        """Let = 'let' IDENT '=' Expr ';'?"""
        tok = self.current()
        name_tok = self.expect_peek(TK_IDENT)
        name = Identifier(name_tok, name_tok.literal)
        self.expect_peek(TK_ASSIGN)
        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_is(TK_SEMICOLON):
            self.advance()
        return LetStatement(tok, name, value)

    def parse_return_statement(self) -> ReturnStatement:
        """Return = 'return' Expr ';'?"""
        tok = self.current()
        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_is(TK_SEMICOLON):
            self.advance()
        return ReturnStatement(tok, value)

    def parse_expression_statement(self) -> ExpressionStatement:
        tok = self.current()
        expr = self.parse_expression(Precedence.LOWEST)
        if self.peek_is(TK_SEMICOLON):
            self.advance()
        return ExpressionStatement(tok, expr)

    def parse_block_statement(self) -> BlockStatement:
        """Block = '{' Stmt* '}'. An unclosed block ends at EOF."""
        tok = self.current()
        statements: list[Statement] = []
        self.advance()
        while not self.at(TK_RBRACE) and not self.at(TK_EOF):
            statements.append(self.parse_statement())
            self.advance()
        return BlockStatement(tok, tuple(statements))

    # ── Expressions ──────────────────────────────────────────

    def parse_expression(self, precedence: Precedence) -> Expression:
        prefix = self.prefix_fns.get(self.current().type)
        if prefix is None:
            raise self.error(
                "No prefix parse function for " + self.current().type + " found"
            )
        left = prefix()
        while not self.peek_is(TK_SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_fns.get(self.peek().type)
            if infix is None:
                return left
            self.advance()
            left = infix(left)
        return left

    def parse_identifier(self) -> Expression:
        tok = self.current()
        return Identifier(tok, tok.literal)

    def parse_integer_literal(self) -> Expression:
        tok = self.current()
        try:
            value = int(tok.literal)
        except ValueError:
            raise self.error("Could not parse " + tok.literal + " as integer") from None
        if value < INT64_MIN or value > INT64_MAX:
            raise self.error("Could not parse " + tok.literal + " as integer")
        return IntegerLiteral(tok, value)

    def parse_string_literal(self) -> Expression:
        tok = self.current()
        return StringLiteral(tok, tok.literal)

    def parse_boolean(self) -> Expression:
        tok = self.current()
        return BooleanLiteral(tok, tok.type == TK_TRUE)

    def parse_prefix_expression(self) -> Expression:
        """Prefix = ( '!' | '-' ) Expr<PREFIX>"""
        tok = self.current()
        self.advance()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(tok, tok.literal, right)

    def parse_infix_expression(self, left: Expression) -> Expression:
        tok = self.current()
        precedence = self.current_precedence()
        self.advance()
        right = self.parse_expression(precedence)
        return InfixExpression(tok, left, tok.literal, right)

    def parse_grouped_expression(self) -> Expression:
        """Grouped = '(' Expr ')'"""
        self.advance()
        expr = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TK_RPAREN)
        return expr

    def parse_if_expression(self) -> Expression:
        """If = 'if' '(' Expr ')' Block ( 'else' Block )?"""
        tok = self.current()
        self.expect_peek(TK_LPAREN)
        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TK_RPAREN)
        self.expect_peek(TK_LBRACE)
        consequence = self.parse_block_statement()
        alternative: BlockStatement | None = None
        if self.peek_is(TK_ELSE):
            self.advance()
            self.expect_peek(TK_LBRACE)
            alternative = self.parse_block_statement()
        return IfExpression(tok, condition, consequence, alternative)

    def parse_function_literal(self) -> Expression:
        """FnLit = 'fn' '(' ( IDENT ( ',' IDENT )* )? ')' Block"""
        tok = self.current()
        self.expect_peek(TK_LPAREN)
        parameters = self.parse_function_parameters()
        self.expect_peek(TK_LBRACE)
        body = self.parse_block_statement()
        return FunctionLiteral(tok, parameters, body)

    def parse_function_parameters(self) -> tuple[Identifier, ...]:
        params: list[Identifier] = []
        if self.peek_is(TK_RPAREN):
            self.advance()
            return ()
        ident = self.expect_peek(TK_IDENT)
        params.append(Identifier(ident, ident.literal))
        while self.peek_is(TK_COMMA):
            self.advance()
            ident = self.expect_peek(TK_IDENT)
            params.append(Identifier(ident, ident.literal))
        self.expect_peek(TK_RPAREN)
        return tuple(params)

    def parse_call_expression(self, function: Expression) -> Expression:
        tok = self.current()
        arguments = self.parse_expression_list(TK_RPAREN)
        return CallExpression(tok, function, arguments)

    def parse_index_expression(self, left: Expression) -> Expression:
        """Index = Expr '[' Expr ']'"""
        tok = self.current()
        self.advance()
        index = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TK_RBRACKET)
        return IndexExpression(tok, left, index)

    def parse_array_literal(self) -> Expression:
        tok = self.current()
        elements = self.parse_expression_list(TK_RBRACKET)
        return ArrayLiteral(tok, elements)

    def parse_expression_list(self, end: str) -> tuple[Expression, ...]:
        """ExprList = ( Expr ( ',' Expr )* )? end"""
        items: list[Expression] = []
        if self.peek_is(end):
            self.advance()
            return ()
        self.advance()
        items.append(self.parse_expression(Precedence.LOWEST))
        while self.peek_is(TK_COMMA):
            self.advance()
            self.advance()
            items.append(self.parse_expression(Precedence.LOWEST))
        self.expect_peek(end)
        return tuple(items)

    def parse_map_literal(self) -> Expression:
        """MapLit = '{' ( Expr ':' Expr ( ',' Expr ':' Expr )* ','? )? '}'"""
        tok = self.current()
        pairs: list[tuple[Expression, Expression]] = []
        while not self.peek_is(TK_RBRACE):
            self.advance()
            key = self.parse_expression(Precedence.LOWEST)
            self.expect_peek(TK_COLON)
            self.advance()
            value = self.parse_expression(Precedence.LOWEST)
            pairs.append((key, value))
            if not self.peek_is(TK_RBRACE):
                self.expect_peek(TK_COMMA)
        self.expect_peek(TK_RBRACE)
        return MapLiteral(tok, tuple(pairs))


def parse(source: str) -> tuple[Program, list[str]]:
    """Parse Monkey source. Returns (program, errors); errors empty on success."""
    parser = Parser(tokenize(source))
    program = parser.parse_program()
    return program, list(program.errors)
