"""Tests for the built-in function table."""

import pytest

from monkey.builtins import BUILTINS
from monkey.objects import (
    INCORRECT_NUMBER_OF_ARGS,
    NULL,
    TRUE,
    TYPE_MISMATCH,
    VArray,
    VBuiltin,
    VError,
    VInteger,
    VString,
)


def _call(name: str, *args):
    return BUILTINS[name].fn(list(args))


def _arr(*items: int) -> VArray:
    return VArray(tuple(VInteger(i) for i in items))


def test_table_names():
    assert sorted(BUILTINS) == ["first", "last", "len", "push", "puts", "rest"]
    for name, builtin in BUILTINS.items():
        assert isinstance(builtin, VBuiltin)
        assert builtin.name == name
        assert builtin.to_string() == "<builtin " + name + ">"


@pytest.mark.parametrize(
    "arg,expected",
    [(VString(""), 0), (VString("four"), 4), (_arr(), 0), (_arr(1, 2, 3), 3)],
)
def test_len(arg, expected: int):
    assert _call("len", arg) == VInteger(expected)


def test_len_counts_characters():
    assert _call("len", VString("héllo")) == VInteger(5)


def test_len_rejects_integer():
    result = _call("len", VInteger(1))
    assert result == VError(
        TYPE_MISMATCH, "argument to `len` must be STRING or ARRAY, got INTEGER"
    )


@pytest.mark.parametrize(
    "name,args",
    [
        ("len", []),
        ("len", [VString("a"), VString("b")]),
        ("first", []),
        ("last", [_arr(), _arr()]),
        ("rest", []),
        ("push", [_arr()]),
        ("push", [_arr(), VInteger(1), VInteger(2)]),
    ],
)
def test_arity(name: str, args: list):
    result = BUILTINS[name].fn(args)
    assert isinstance(result, VError)
    assert result.kind == INCORRECT_NUMBER_OF_ARGS


def test_arity_reported_before_type():
    result = _call("len", VInteger(1), VInteger(2))
    assert result.kind == INCORRECT_NUMBER_OF_ARGS
    assert result.message == "wrong number of arguments: expected=1, got=2"


def test_first_last_rest():
    arr = _arr(1, 2, 3)
    assert _call("first", arr) == VInteger(1)
    assert _call("last", arr) == VInteger(3)
    assert _call("rest", arr) == _arr(2, 3)


@pytest.mark.parametrize("name", ["first", "last", "rest"])
def test_empty_array_gives_null(name: str):
    assert _call(name, _arr()) is NULL


@pytest.mark.parametrize("name", ["first", "last", "rest", "push"])
def test_non_array_rejected(name: str):
    args = [TRUE] if name != "push" else [TRUE, VInteger(1)]
    result = BUILTINS[name].fn(args)
    assert result == VError(
        TYPE_MISMATCH, "argument to `" + name + "` must be ARRAY, got BOOLEAN"
    )


def test_push_returns_new_array():
    arr = _arr(1)
    pushed = _call("push", arr, VInteger(2))
    assert pushed == _arr(1, 2)
    assert arr == _arr(1)
    assert pushed is not arr


def test_rest_returns_new_array():
    arr = _arr(1, 2)
    assert _call("rest", arr) == _arr(2)
    assert arr == _arr(1, 2)


def test_puts_prints_each_argument(capsys):
    result = _call("puts", VString("hello"), VInteger(3), _arr(1, 2))
    assert result is NULL
    assert capsys.readouterr().out == "hello\n3\n[1, 2]\n"


def test_puts_without_arguments(capsys):
    assert _call("puts") is NULL
    assert capsys.readouterr().out == ""
