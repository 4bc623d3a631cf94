"""
errchain/prefix.py
══════════════════

Prefix Parser.

A prefix is everything before the first ``": "`` of a message.  It is
split on ``.`` into at most three components:

    pkg                  package only
    pkg.Name             function, method, or receiver type
    pkg.Recv.Name        receiver + method; Recv may be ``(*Type)``

Receiver tokens follow a small PEG grammar (parsimonious):

    receiver   = pointer / star / identifier
    pointer    = "(*" identifier ")"
    star       = "*" identifier

A fourth component, an unbalanced ``(*Type``, an empty component or a
token that is not an identifier makes the prefix syntactically invalid;
the raw tokens are still kept so that callers can attempt a best-effort
match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

SEPARATOR = ": "
MAX_COMPONENTS = 3

GO_KEYWORDS = frozenset({
    "break", "case", "chan", "const", "continue", "default", "defer",
    "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
    "interface", "map", "package", "range", "return", "select", "struct",
    "switch", "type", "var",
})

PREFIX_GRAMMAR = Grammar(r'''
    receiver   = pointer / star / identifier
    pointer    = "(*" identifier ")"
    star       = "*" identifier
    identifier = ~r"[^\W\d]\w*"
''')


@dataclass(frozen=True)
class LocationPrefix:
    """
    Parsed location descriptor.

    Attributes
    ----------
    package_token    : first component (may be empty)
    receiver_token   : middle component of a three-part prefix, with any
                       pointer notation stripped when the syntax is valid
    function_token   : last component of a two- or three-part prefix
    is_pointer_token : receiver written ``(*Type)``
    star_receiver    : receiver written ``*Type`` (no parentheses)
    syntax_valid     : False for malformed prefixes
    raw              : the text before the separator
    """
    package_token: str
    receiver_token: Optional[str] = None
    function_token: Optional[str] = None
    is_pointer_token: bool = False
    syntax_valid: bool = True
    star_receiver: bool = False
    raw: str = ""

    @property
    def is_package_only(self) -> bool:
        return not self.receiver_token and not self.function_token

    def receiver_text(self) -> str:
        """Receiver as written, including pointer notation."""
        if self.receiver_token is None:
            return ""
        if self.is_pointer_token:
            return f"(*{self.receiver_token})"
        if self.star_receiver:
            return f"*{self.receiver_token}"
        return self.receiver_token


@dataclass(frozen=True)
class _Receiver:
    name: str
    pointer: bool = False
    star: bool = False


class _ReceiverVisitor(NodeVisitor):

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children or node

    def visit_receiver(self, node: Node, visited_children: List[Any]) -> _Receiver:
        return visited_children[0]

    def visit_pointer(self, node: Node, visited_children: List[Any]) -> _Receiver:
        _, ident, _ = node.children
        return _Receiver(ident.text, pointer=True)

    def visit_star(self, node: Node, visited_children: List[Any]) -> _Receiver:
        _, ident = node.children
        return _Receiver(ident.text, star=True)

    def visit_identifier(self, node: Node, visited_children: List[Any]) -> _Receiver:
        return _Receiver(node.text)


def is_identifier(token: str) -> bool:
    """Go identifier that is not a keyword."""
    if not token or token in GO_KEYWORDS:
        return False
    try:
        PREFIX_GRAMMAR["identifier"].parse(token)
    except ParseError:
        return False
    return True


def _parse_receiver(token: str) -> Optional[_Receiver]:
    try:
        tree = PREFIX_GRAMMAR.parse(token)
    except ParseError:
        return None
    recv = _ReceiverVisitor().visit(tree)
    if recv.name in GO_KEYWORDS:
        return None
    return recv


def split_message(message: str) -> Optional[Tuple[str, str]]:
    """Return ``(prefix, rest)`` or ``None`` when there is no separator."""
    i = message.find(SEPARATOR)
    if i < 0:
        return None
    return message[:i], message[i + len(SEPARATOR):]


def parse_prefix(message: str) -> Optional[LocationPrefix]:
    """
    Parse the leading location prefix of ``message``.

    Returns ``None`` when the message has no ``": "`` separator at all.
    """
    parts = split_message(message)
    if parts is None:
        return None
    head = parts[0]

    split = head.split(".", MAX_COMPONENTS)
    pkg = split[0]
    if len(split) == 1:
        return LocationPrefix(package_token=pkg, raw=head)
    if len(split) == 2:
        fn = split[1]
        return LocationPrefix(
            package_token=pkg,
            function_token=fn,
            syntax_valid=is_identifier(fn),
            raw=head,
        )

    raw_recv, fn = split[1], split[2]
    invalid = LocationPrefix(
        package_token=pkg,
        receiver_token=raw_recv,
        function_token=fn,
        syntax_valid=False,
        raw=head,
    )
    if len(split) > MAX_COMPONENTS or not is_identifier(fn):
        return invalid

    recv = _parse_receiver(raw_recv)
    if recv is None:
        return invalid

    return LocationPrefix(
        package_token=pkg,
        receiver_token=recv.name,
        function_token=fn,
        is_pointer_token=recv.pointer,
        star_receiver=recv.star,
        raw=head,
    )


__all__ = [
    "SEPARATOR",
    "MAX_COMPONENTS",
    "GO_KEYWORDS",
    "PREFIX_GRAMMAR",
    "LocationPrefix",
    "is_identifier",
    "split_message",
    "parse_prefix",
]
