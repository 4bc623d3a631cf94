"""
errchain/expr.py
════════════════

Language-neutral expression tree consumed by the checking engine.

A front-end (see ``errchain.gosource``) lowers source syntax into these
nodes and folds compile-time constants into ``Expr.const``.  The engine
only ever reads the tree; nothing here knows about Go syntax.

Node kinds
──────────

  BasicLit   literal token, raw source text kept in ``text``
  Ident      bare name
  Selector   ``x.sel``
  Binary     ``x op y``
  Unary      ``op x``
  Call       ``fun(args...)``
  Index      ``x[...]``
  Slice      ``x[a:b]``
  Opaque     anything else; keeps the maximal sub-expressions inside it
             so that calls nested in closures are still reachable
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — POSITIONS AND CONSTANTS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Position:
    """A point in a source file (1-based line and column)."""
    file: str = ""
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.column:
            return f"{self.file}:{self.line}:{self.column}"
        return f"{self.file}:{self.line}"


ConstValue = Union[str, int, float, bool]


@dataclass(frozen=True)
class Constant:
    """A folded compile-time value."""
    value: ConstValue

    @property
    def is_string(self) -> bool:
        return isinstance(self.value, str)


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — EXPRESSION NODES
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Expr:
    """Base class of all expression nodes."""
    position: Position = Position()
    const: Optional[Constant] = None

    def children(self) -> Tuple["Expr", ...]:
        return ()


@dataclass(frozen=True)
class BasicLit(Expr):
    text: str = ""


@dataclass(frozen=True)
class Ident(Expr):
    name: str = ""
    # bound inside the enclosing function (parameter, result or variable)
    local: bool = False


@dataclass(frozen=True)
class Selector(Expr):
    x: Expr = Expr()
    sel: str = ""

    def children(self) -> Tuple[Expr, ...]:
        return (self.x,)


@dataclass(frozen=True)
class Binary(Expr):
    x: Expr = Expr()
    op: str = ""
    y: Expr = Expr()

    def children(self) -> Tuple[Expr, ...]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Unary(Expr):
    op: str = ""
    x: Expr = Expr()

    def children(self) -> Tuple[Expr, ...]:
        return (self.x,)


@dataclass(frozen=True)
class Call(Expr):
    fun: Expr = Expr()
    args: Tuple[Expr, ...] = ()

    def children(self) -> Tuple[Expr, ...]:
        return (self.fun,) + self.args


@dataclass(frozen=True)
class Index(Expr):
    x: Expr = Expr()
    index: Optional[Expr] = None

    def children(self) -> Tuple[Expr, ...]:
        if self.index is None:
            return (self.x,)
        return (self.x, self.index)


@dataclass(frozen=True)
class Slice(Expr):
    x: Expr = Expr()
    bounds: Tuple[Expr, ...] = ()

    def children(self) -> Tuple[Expr, ...]:
        return (self.x,) + self.bounds


@dataclass(frozen=True)
class Opaque(Expr):
    kind: str = ""
    inner: Tuple[Expr, ...] = ()

    def children(self) -> Tuple[Expr, ...]:
        return self.inner


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — TRAVERSAL
# ═════════════════════════════════════════════════════════════════════════

def walk(expr: Expr) -> Iterator[Expr]:
    """Yield ``expr`` and all of its descendants in pre-order."""
    stack = [expr]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children()))


def calls(expr: Expr) -> Iterator[Call]:
    """Yield every ``Call`` below (and including) ``expr`` in pre-order."""
    for node in walk(expr):
        if isinstance(node, Call):
            yield node


def constant_value(expr: Expr) -> Any:
    """Return the folded value of ``expr`` or ``None``."""
    if expr.const is None:
        return None
    return expr.const.value


__all__ = [
    "Position",
    "ConstValue",
    "Constant",
    "Expr",
    "BasicLit",
    "Ident",
    "Selector",
    "Binary",
    "Unary",
    "Call",
    "Index",
    "Slice",
    "Opaque",
    "walk",
    "calls",
    "constant_value",
]
