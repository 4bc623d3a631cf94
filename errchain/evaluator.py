"""
errchain/evaluator.py
═════════════════════

Literal Message Evaluator.

Given an error-constructing call, statically produce the text the call
would emit.  The first argument must fold to a string constant; the
call is skipped otherwise.  For format constructors every remaining
argument is substituted with one generic rule whatever the verb:

  constant argument      → its ``%v`` value
  non-constant argument  → ``{placeholder}`` where the placeholder is a
                           short rendering of the expression's shape

Format strings are scanned with a small PEG grammar (parsimonious)
describing Go ``fmt`` directives:

    %[flags][[n]][width][.precision][[n]]verb

Go's own fallback spellings are kept for malformed directives
(``%!v(MISSING)``, ``%!v(BADINDEX)``, ``%!(NOVERB)``, ``%!(EXTRA ...)``).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Union

from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from errchain.expr import (
    BasicLit,
    Binary,
    Call,
    ConstValue,
    Expr,
    Ident,
    Index,
    Selector,
    Slice,
    Unary,
)

logger = logging.getLogger(__name__)

#: Rendering depth beyond which a sub-expression collapses to ``UNKNOWN``.
MAX_RENDER_DEPTH = 2
UNKNOWN = "?"


class ConstructorShape(Enum):
    """Recognised error-constructor call shapes."""
    MESSAGE = "message"   # errors.New(msg)
    FORMAT = "format"     # fmt.Errorf(format, args...)


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — PLACEHOLDER RENDERING
# ═════════════════════════════════════════════════════════════════════════

def expr_string(expr: Expr, depth: int = 0) -> str:
    """
    Concise text for a non-constant expression.

    ``name``, ``a.b``, ``f(x, y)``, ``x[?]``; ``?`` past depth 2.
    """
    if depth > MAX_RENDER_DEPTH:
        return UNKNOWN

    if isinstance(expr, BasicLit):
        return expr.text

    if isinstance(expr, Ident):
        return expr.name

    if isinstance(expr, Selector):
        a = expr_string(expr.x, depth + 1)
        b = UNKNOWN if depth + 1 > MAX_RENDER_DEPTH else expr.sel
        if a == UNKNOWN or b == UNKNOWN:
            return UNKNOWN
        return a + "." + b

    if isinstance(expr, Binary):
        return expr_string(expr.x, depth + 1) + expr.op + expr_string(expr.y, depth + 1)

    if isinstance(expr, Unary):
        operand = expr_string(expr.x, depth + 1)
        if operand == UNKNOWN:
            return UNKNOWN
        return expr.op + operand

    if isinstance(expr, Call):
        fn = expr_string(expr.fun, depth + 1)
        if fn == UNKNOWN:
            return UNKNOWN
        args = [expr_string(a, depth + 1) for a in expr.args]
        return fn + "(" + ", ".join(args) + ")"

    if isinstance(expr, (Index, Slice)):
        return expr_string(expr.x, depth + 1) + "[?]"

    return UNKNOWN


def format_constant(value: ConstValue) -> str:
    """Render a constant the way Go's ``%v`` does."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


@dataclass(frozen=True)
class PrintableArg:
    """A format argument: constant value if known, else a placeholder."""
    expr: Expr

    def render(self) -> str:
        if self.expr.const is not None:
            return format_constant(self.expr.const.value)
        return "{" + expr_string(self.expr) + "}"


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — FORMAT STRING SCANNER
# ═════════════════════════════════════════════════════════════════════════

FORMAT_GRAMMAR = Grammar(r'''
    format          = piece*
    piece           = escape / directive / dangling / text
    escape          = "%%"
    directive       = "%" flags arg_index? width? precision? arg_index? verb
    flags           = ~r"[+\-# 0]*"
    arg_index       = ~r"\[[0-9]*\]"
    width           = "*" / ~r"[0-9]+"
    precision       = "." precision_value?
    precision_value = "*" / ~r"[0-9]+"
    verb            = ~r"[\s\S]"
    dangling        = "%" ~r"[+\-# 0]*[0-9.*\[\]]*\Z"
    text            = ~r"[^%]+"
''')


@dataclass(frozen=True)
class _Verb:
    verb: str
    index: Optional[int] = None
    width_star: bool = False
    precision_star: bool = False
    late_index: Optional[int] = None


_Literal = Tuple[str, str]
_Piece = Union[_Literal, _Verb]


def _index_of(text: str) -> Optional[int]:
    """``"[3]"`` → 3; ``"[]"`` or junk → 0 (bad index); ``""`` → None."""
    if not text:
        return None
    digits = text[1:-1]
    return int(digits) if digits else 0


class _FormatVisitor(NodeVisitor):
    """Turns the parse tree into literal runs and verb directives."""

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children or node

    def visit_format(self, node: Node, visited_children: List[Any]) -> List[_Piece]:
        return list(visited_children)

    def visit_piece(self, node: Node, visited_children: List[Any]) -> _Piece:
        return visited_children[0]

    def visit_escape(self, node: Node, visited_children: List[Any]) -> _Literal:
        return ("lit", "%")

    def visit_text(self, node: Node, visited_children: List[Any]) -> _Literal:
        return ("lit", node.text)

    def visit_dangling(self, node: Node, visited_children: List[Any]) -> _Literal:
        return ("lit", "%!(NOVERB)")

    def visit_directive(self, node: Node, visited_children: List[Any]) -> _Verb:
        _, _flags, index, width, precision, late_index, verb = node.children
        return _Verb(
            verb=verb.text,
            index=_index_of(index.text),
            width_star=width.text == "*",
            precision_star=precision.text == ".*",
            late_index=_index_of(late_index.text),
        )


def scan_format(fmt: str) -> List[_Piece]:
    """Split a Go format string into literal runs and directives."""
    tree = FORMAT_GRAMMAR.parse(fmt)
    return _FormatVisitor().visit(tree)


def go_sprintf(fmt: str, args: Sequence[PrintableArg]) -> str:
    """
    Substitute ``args`` into ``fmt`` following Go's argument ordering.

    Every verb prints its argument through ``PrintableArg.render``.
    ``*`` width/precision consume an argument without printing it.
    """
    out: List[str] = []
    arg_num = 0
    reordered = False

    def pick(index: Optional[int]) -> bool:
        nonlocal arg_num, reordered
        if index is None:
            return True
        reordered = True
        if 1 <= index <= len(args):
            arg_num = index - 1
            return True
        return False

    for piece in scan_format(fmt):
        if isinstance(piece, tuple):
            out.append(piece[1])
            continue

        good = pick(piece.index)
        if piece.width_star and arg_num < len(args):
            arg_num += 1
        if piece.precision_star and arg_num < len(args):
            arg_num += 1
        good = pick(piece.late_index) and good

        if not good:
            out.append(f"%!{piece.verb}(BADINDEX)")
        elif arg_num >= len(args):
            out.append(f"%!{piece.verb}(MISSING)")
        else:
            out.append(args[arg_num].render())
            arg_num += 1

    if not reordered and arg_num < len(args):
        extra = ", ".join(a.render() for a in args[arg_num:])
        out.append(f"%!(EXTRA {extra})")

    return "".join(out)


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — ENTRY POINT
# ═════════════════════════════════════════════════════════════════════════

def evaluate_message(call: Call, shape: ConstructorShape) -> Optional[str]:
    """
    Return the message ``call`` would produce, or ``None`` when the first
    argument is not a compile-time string constant.
    """
    if not call.args:
        return None
    first = call.args[0].const
    if first is None or not first.is_string:
        return None

    if shape is ConstructorShape.MESSAGE:
        return str(first.value)

    printable = [PrintableArg(a) for a in call.args[1:]]
    return go_sprintf(str(first.value), printable)


__all__ = [
    "MAX_RENDER_DEPTH",
    "UNKNOWN",
    "ConstructorShape",
    "expr_string",
    "format_constant",
    "PrintableArg",
    "FORMAT_GRAMMAR",
    "scan_format",
    "go_sprintf",
    "evaluate_message",
]
