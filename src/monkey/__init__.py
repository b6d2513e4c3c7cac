"""Monkey lexer, parser and evaluator: public API."""

from __future__ import annotations

import logging

from .ast import Program
from .env import Environment
from .objects import NULL, FALSE, TRUE, Value, VError, is_error
from .parse import ParseError as ParseError, Parser, parse
from .runtime import evaluate
from .session import RunResult, Session
from .tokens import Lexer, Token, tokenize

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Environment",
    "FALSE",
    "Lexer",
    "NULL",
    "ParseError",
    "Parser",
    "Program",
    "RunResult",
    "Session",
    "TRUE",
    "Token",
    "VError",
    "Value",
    "evaluate",
    "is_error",
    "parse",
    "tokenize",
]
