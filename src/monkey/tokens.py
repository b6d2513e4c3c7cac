"""Monkey tokenizer: steps through source text one token at a time."""

from __future__ import annotations

from dataclasses import dataclass, field


# Token type constants
TK_ILLEGAL = "ILLEGAL"
TK_EOF = "EOF"
TK_IDENT = "IDENT"
TK_INT = "INT"
TK_STRING = "STRING"

TK_ASSIGN = "ASSIGN"
TK_PLUS = "PLUS"
TK_MINUS = "MINUS"
TK_BANG = "BANG"
TK_ASTERISK = "ASTERISK"
TK_SLASH = "SLASH"
TK_LT = "LT"
TK_GT = "GT"
TK_EQ = "EQ"
TK_NOT_EQ = "NOT_EQ"

TK_COMMA = "COMMA"
TK_SEMICOLON = "SEMICOLON"
TK_COLON = "COLON"
TK_LPAREN = "LPAREN"
TK_RPAREN = "RPAREN"
TK_LBRACKET = "LBRACKET"
TK_RBRACKET = "RBRACKET"
TK_LBRACE = "LBRACE"
TK_RBRACE = "RBRACE"

TK_FUNCTION = "FUNCTION"
TK_LET = "LET"
TK_TRUE = "TRUE"
TK_FALSE = "FALSE"
TK_IF = "IF"
TK_ELSE = "ELSE"
TK_RETURN = "RETURN"

KEYWORDS: dict[str, str] = {
    "fn": TK_FUNCTION,
    "let": TK_LET,
    "true": TK_TRUE,
    "false": TK_FALSE,
    "if": TK_IF,
    "else": TK_ELSE,
    "return": TK_RETURN,
}

SINGLE_OPS: dict[str, str] = {
    ";": TK_SEMICOLON,
    ",": TK_COMMA,
    ":": TK_COLON,
    "(": TK_LPAREN,
    ")": TK_RPAREN,
    "[": TK_LBRACKET,
    "]": TK_RBRACKET,
    "{": TK_LBRACE,
    "}": TK_RBRACE,
    "+": TK_PLUS,
    "-": TK_MINUS,
    "/": TK_SLASH,
    "*": TK_ASTERISK,
    "<": TK_LT,
    ">": TK_GT,
}


@dataclass(frozen=True)
class Token:
    """A token with type and literal text.

    `offset` is where the token starts in the source; it is kept for
    diagnostics and ignored by equality.
    """

    type: str
    literal: str
    offset: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        return "Token(" + self.type + ", " + repr(self.literal) + ")"


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_letter(c: str) -> bool:
    return c.isalpha() or c == "_"


def _scan_while(source: str, pos: int, pred) -> int:
    """Return the first position at or after pos where pred fails."""
    length = len(source)
    while pos < length and pred(source[pos]):
        pos += 1
    return pos


def next_token(source: str, pos: int) -> tuple[Token, int]:
    """Scan the token starting at or after pos. Returns (token, resume_pos).

    Pure: the same (source, pos) always yields the same result. At end of
    input the canonical EOF token is returned and resume_pos stays put.
    """
    length = len(source)
    pos = _scan_while(source, pos, str.isspace)
    if pos >= length:
        return Token(TK_EOF, "", pos), pos

    c = source[pos]

    # = and ! need one character of lookahead
    if c == "=" or c == "!":
        if pos + 1 < length and source[pos + 1] == "=":
            kind = TK_EQ if c == "=" else TK_NOT_EQ
            return Token(kind, c + "=", pos), pos + 2
        kind = TK_ASSIGN if c == "=" else TK_BANG
        return Token(kind, c, pos), pos + 1

    if c in SINGLE_OPS:
        return Token(SINGLE_OPS[c], c, pos), pos + 1

    # String literal: no escapes, unterminated runs to end of input
    if c == '"':
        end = _scan_while(source, pos + 1, lambda ch: ch != '"')
        value = source[pos + 1 : end]
        return Token(TK_STRING, value, pos), min(end + 1, length)

    if _is_letter(c):
        end = _scan_while(source, pos, _is_letter)
        word = source[pos:end]
        return Token(KEYWORDS.get(word, TK_IDENT), word, pos), end

    if _is_digit(c):
        end = _scan_while(source, pos, _is_digit)
        return Token(TK_INT, source[pos:end], pos), end

    return Token(TK_ILLEGAL, c, pos), pos + 1


@dataclass(frozen=True)
class Lexer:
    """Immutable lexer cursor.

    `token` is the most recently produced token (None before the first
    advance). Advancing never mutates; it returns a new cursor.
    """

    source: str
    position: int = 0
    token: Token | None = None

    def advance(self) -> Lexer:
        tok, pos = next_token(self.source, self.position)
        return Lexer(self.source, pos, tok)

    def has_more(self) -> bool:
        # False only once EOF has actually been produced, not merely when
        # position reaches the end of the source.
        return self.token is None or self.token.type != TK_EOF


def tokenize(source: str) -> list[Token]:
    """Tokenize Monkey source into a flat list ending with a single TK_EOF."""
    tokens: list[Token] = []
    lexer = Lexer(source)
    while lexer.has_more():
        lexer = lexer.advance()
        assert lexer.token is not None
        tokens.append(lexer.token)
    return tokens
