"""Built-in functions, resolved after every lexical scope."""

from __future__ import annotations

from typing import Callable

from .objects import (
    ARRAY,
    NULL,
    STRING,
    Value,
    VArray,
    VBuiltin,
    VInteger,
    VString,
    incorrect_number_of_args,
    type_mismatch,
)

NativeFn = Callable[[list[Value]], Value]


def _with_arity(n: int) -> Callable[[NativeFn], NativeFn]:
    """Reject calls that do not pass exactly n arguments, before any type check."""

    def wrap(fn: NativeFn) -> NativeFn:
        def checked(args: list[Value]) -> Value:
            if len(args) != n:
                return incorrect_number_of_args(n, len(args))
            return fn(args)

        checked.__name__ = fn.__name__
        checked.__doc__ = fn.__doc__
        return checked

    return wrap


def _expected(name: str, expected: str, got: Value) -> Value:
    return type_mismatch(
        "argument to `" + name + "` must be " + expected + ", got " + got.tag
    )


@_with_arity(1)
def _len(args: list[Value]) -> Value:
    """len(x): character count of a string, element count of an array."""
    target = args[0]
    if isinstance(target, VString):
        return VInteger(len(target.value))
    if isinstance(target, VArray):
        return VInteger(len(target.elements))
    return _expected("len", STRING + " or " + ARRAY, target)


@_with_arity(1)
def _first(args: list[Value]) -> Value:
    target = args[0]
    if not isinstance(target, VArray):
        return _expected("first", ARRAY, target)
    if not target.elements:
        return NULL
    return target.elements[0]


@_with_arity(1)
def _last(args: list[Value]) -> Value:
    target = args[0]
    if not isinstance(target, VArray):
        return _expected("last", ARRAY, target)
    if not target.elements:
        return NULL
    return target.elements[-1]


@_with_arity(1)
def _rest(args: list[Value]) -> Value:
    target = args[0]
    if not isinstance(target, VArray):
        return _expected("rest", ARRAY, target)
    if not target.elements:
        return NULL
    return VArray(target.elements[1:])


@_with_arity(2)
def _push(args: list[Value]) -> Value:
    """push(arr, v): a new array with v appended; arr is left as is."""
    target = args[0]
    if not isinstance(target, VArray):
        return _expected("push", ARRAY, target)
    return VArray(target.elements + (args[1],))


def _puts(args: list[Value]) -> Value:
    for arg in args:
        print(arg.to_string())
    return NULL


BUILTINS: dict[str, VBuiltin] = {
    "len": VBuiltin("len", _len),
    "first": VBuiltin("first", _first),
    "last": VBuiltin("last", _last),
    "rest": VBuiltin("rest", _rest),
    "push": VBuiltin("push", _push),
    "puts": VBuiltin("puts", _puts),
}
