"""Monkey runtime value model.

Values are small dataclasses tagged with a type name. Errors are values too:
the evaluator returns them, and every composite rule checks `is_error` on
its sub-results before going further.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Mapping

if TYPE_CHECKING:
    from .ast import BlockStatement, Identifier
    from .env import Environment


# ============================================================
# Diagnostics
# ============================================================


class MonkeyError(Exception):
    """Base error for host-level faults (never for Monkey-level errors)."""

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


class MonkeyRuntimeFault(MonkeyError):
    """Internal invariant broken during evaluation (e.g. unknown node type)."""


# ============================================================
# Type tags
# ============================================================


INTEGER = "INTEGER"
BOOLEAN = "BOOLEAN"
STRING = "STRING"
ARRAY = "ARRAY"
MAP = "MAP"
FUNCTION = "FUNCTION"
BUILTIN = "BUILTIN"
RETURN_VALUE = "RETURN_VALUE"
NULL_TAG = "NULL"
ERROR = "ERROR"

# Error kinds
TYPE_MISMATCH = "TypeMismatch"
UNKNOWN_OPERATOR = "UnknownOperator"
UNKNOWN_IDENTIFIER = "UnknownIdentifier"
INCORRECT_NUMBER_OF_ARGS = "IncorrectNumberOfArgs"
PARSE_ERROR = "ParseError"
DIVISION_BY_ZERO = "DivisionByZero"

INT64_MASK = (1 << 64) - 1
INT64_SIGN = 1 << 63


def wrap_int64(n: int) -> int:
    """Wrap an arbitrary Python int into the signed 64-bit range."""
    n &= INT64_MASK
    if n & INT64_SIGN:
        return n - (1 << 64)
    return n


# ============================================================
# Values
# ============================================================


class Value:
    """A runtime value. `tag` names its type for dispatch and diagnostics."""

    tag: str = ""

    def to_string(self) -> str:
        raise NotImplementedError


class HashableValue(Value):
    """A value that can be used as a map key: integer, boolean or string."""


@dataclass(frozen=True)
class VInteger(HashableValue):
    value: int
    tag = INTEGER

    def to_string(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VBoolean(HashableValue):
    value: bool
    tag = BOOLEAN

    def to_string(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class VString(HashableValue):
    value: str
    tag = STRING

    def to_string(self) -> str:
        return self.value


class VNull(Value):
    tag = NULL_TAG

    def to_string(self) -> str:
        return "null"

    def __repr__(self) -> str:
        return "NULL"


TRUE = VBoolean(True)
FALSE = VBoolean(False)
NULL = VNull()


def native_bool(b: bool) -> VBoolean:
    """Map a Python bool to one of the two shared boolean values."""
    return TRUE if b else FALSE


@dataclass(frozen=True)
class VArray(Value):
    # A tuple, so "mutating" builtins must build a new array.
    elements: tuple[Value, ...]
    tag = ARRAY

    def to_string(self) -> str:
        return "[" + ", ".join(e.to_string() for e in self.elements) + "]"


@dataclass(frozen=True, eq=False)
class VMap(Value):
    # Insertion-ordered; never mutated after construction.
    pairs: Mapping[HashableValue, Value]
    tag = MAP

    def to_string(self) -> str:
        parts: list[str] = []
        for k, v in self.pairs.items():
            parts.append(k.to_string() + ": " + v.to_string())
        return "{" + ", ".join(parts) + "}"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, VMap) and dict(self.pairs) == dict(other.pairs)

    def __hash__(self) -> int:
        return hash(tuple(self.pairs.items()))


@dataclass(eq=False)
class VFunction(Value):
    """A closure: parameters and body plus the environment it was defined in."""

    parameters: tuple[Identifier, ...]
    body: BlockStatement
    env: Environment
    tag = FUNCTION

    def to_string(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return "fn(" + params + ") " + str(self.body)


@dataclass(eq=False)
class VBuiltin(Value):
    name: str
    fn: Callable[[list[Value]], Value]
    tag = BUILTIN

    def to_string(self) -> str:
        return "<builtin " + self.name + ">"


@dataclass(frozen=True)
class VReturn(Value):
    """Internal marker for `return`; unwrapped at function-call boundaries."""

    value: Value
    tag = RETURN_VALUE

    def to_string(self) -> str:
        return self.value.to_string()


@dataclass(frozen=True)
class VError(Value):
    kind: str
    message: str
    tag = ERROR

    def to_string(self) -> str:
        return "ERROR: " + self.kind + ": " + self.message


def is_error(v: Value | None) -> bool:
    """The single error check used by every evaluation rule."""
    return isinstance(v, VError)


def is_truthy(v: Value) -> bool:
    """false and null are falsy; everything else, 0 and "" included, is truthy."""
    if isinstance(v, VBoolean):
        return v.value
    return not isinstance(v, VNull)


# ============================================================
# Error constructors
# ============================================================


def type_mismatch(message: str) -> VError:
    return VError(TYPE_MISMATCH, message)


def unknown_operator(message: str) -> VError:
    return VError(UNKNOWN_OPERATOR, message)


def unknown_identifier(name: str) -> VError:
    return VError(UNKNOWN_IDENTIFIER, "identifier not found: " + name)


def incorrect_number_of_args(expected: int, actual: int) -> VError:
    return VError(
        INCORRECT_NUMBER_OF_ARGS,
        f"wrong number of arguments: expected={expected}, got={actual}",
    )


def parse_error(errors: list[str] | tuple[str, ...]) -> VError:
    return VError(PARSE_ERROR, "; ".join(errors))
