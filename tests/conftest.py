# tests/conftest.py
"""Shared fixtures and expression builders for the errchain test-suite."""

from pathlib import Path

import pytest

from errchain.expr import BasicLit, Call, Constant, Ident, Position, Selector
from errchain.identity import FunctionIdentity

TESTDATA = Path(__file__).resolve().parent / "testdata"


def lit(value, text=None):
    """Constant literal expression."""
    if text is None:
        text = f'"{value}"' if isinstance(value, str) else str(value)
    return BasicLit(const=Constant(value), text=text)


def ident(name, value=None):
    """Identifier; folded to ``value`` when given."""
    return Ident(name=name, const=None if value is None else Constant(value))


def call(callee, *args, line=1):
    """``pkg.Func(args...)`` for a dotted ``callee``, else ``callee(args...)``."""
    if "." in callee:
        pkg, _, fn = callee.rpartition(".")
        fun = Selector(x=Ident(name=pkg), sel=fn)
    else:
        fun = Ident(name=callee)
    return Call(position=Position("x.go", line, 1), fun=fun, args=tuple(args))


@pytest.fixture
def testdata():
    return TESTDATA


@pytest.fixture
def free_func():
    return FunctionIdentity(package_name="aaa", function_name="PublicFunction")


@pytest.fixture
def pointer_method():
    return FunctionIdentity(
        package_name="aaa",
        function_name="Method",
        receiver_name="Struct",
        is_pointer_receiver=True,
    )


@pytest.fixture
def value_method():
    return FunctionIdentity(
        package_name="aaa",
        function_name="MethodWithoutPointer",
        receiver_name="Struct",
    )
