"""
errchain/matcher.py
═══════════════════

Prefix Matcher and the mismatch taxonomy.

``match_prefix`` compares a parsed ``LocationPrefix`` with a
``FunctionIdentity`` and returns ``None`` on success or exactly one
``PrefixMismatch``.  Rules, in evaluation order:

  ┌──────────────────────────────────────┬───────────────────────────┐
  │ prefix                               │ outcome                   │
  ├──────────────────────────────────────┼───────────────────────────┤
  │ empty package token                  │ NO_PREFIX                 │
  │ package path lacks the token suffix  │ PACKAGE_MISMATCH          │
  │ pkg                                  │ ok                        │
  │ pkg.Name, Name = Func or Recv        │ ok                        │
  │ pkg.Name otherwise                   │ FUNC_NOT_FOUND            │
  │ pkg.Recv.Func, both match            │ ok / NO_POINTER for *Recv │
  │ pkg.Recv.X                           │ METHOD_NOT_FOUND          │
  │ pkg.X.Func                           │ RECEIVER_NOT_FOUND        │
  │ pkg.X.Y                              │ METHOD_NOT_FOUND          │
  └──────────────────────────────────────┴───────────────────────────┘
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from errchain.identity import FunctionIdentity
from errchain.prefix import LocationPrefix


class MismatchKind(Enum):
    """Closed set of ways a prefix can fail to name its function."""

    NO_PREFIX = ("noPrefix", "no prefix found")
    PACKAGE_MISMATCH = ("packageMismatch", "package name mismatch")
    INVALID_SYNTAX = ("invalidSyntax", "syntax is wrong")
    FUNC_NOT_FOUND = ("funcNotFound", "neither func nor struct has been found")
    METHOD_NOT_FOUND = ("methodNotFound", "method not found")
    RECEIVER_NOT_FOUND = ("receiverNotFound", "receiver not found")
    NO_POINTER = ("noPointer", "receiver pointer notation is wrong")

    def __init__(self, error_id: str, description: str) -> None:
        self.error_id = error_id
        self.description = description

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True)
class PrefixMismatch:
    """One failed check: what was found and what the identity expects."""
    kind: MismatchKind
    got: str = ""
    expected: str = ""
    prefix: Optional[LocationPrefix] = None


def package_matches(token: str, identity: FunctionIdentity) -> bool:
    """
    Suffix match on the import path; the bare package name always matches.

    The name may differ from the last path element (``gopkg.in/yaml.v3``
    declares ``yaml``), and every recommended prefix starts with the
    name, so the name must be accepted for suggestions to match.
    """
    return token == identity.package_name or identity.package_path.endswith(token)


def _func_or_recv(identity: FunctionIdentity) -> str:
    if identity.receiver_name:
        return f"{identity.function_name} or {identity.receiver_name}"
    return identity.function_name


def match_prefix(
    loc: LocationPrefix,
    identity: FunctionIdentity,
) -> Optional[PrefixMismatch]:
    """Return ``None`` if ``loc`` names ``identity``, else the mismatch."""
    if not loc.package_token:
        return PrefixMismatch(
            MismatchKind.NO_PREFIX,
            got=loc.package_token,
            expected=identity.package_name,
            prefix=loc,
        )

    if not package_matches(loc.package_token, identity):
        return PrefixMismatch(
            MismatchKind.PACKAGE_MISMATCH,
            got=loc.package_token,
            expected=identity.package_name,
            prefix=loc,
        )

    if loc.is_package_only:
        return None

    fn_name = identity.function_name
    recv_name = identity.receiver_name or ""

    # pkg.Func, pkg.Method, pkg.Struct
    if not loc.receiver_token:
        if loc.function_token == fn_name:
            return None
        if recv_name and loc.function_token == recv_name:
            return None
        return PrefixMismatch(
            MismatchKind.FUNC_NOT_FOUND,
            got=loc.function_token or "",
            expected=_func_or_recv(identity),
            prefix=loc,
        )

    # pkg.Struct.Method, pkg.(*Struct).Method
    recv_ok = loc.receiver_token == recv_name and bool(recv_name)
    fn_ok = loc.function_token == fn_name

    if recv_ok and fn_ok:
        if loc.star_receiver:
            expected = f"(*{recv_name})" if identity.is_pointer_receiver else recv_name
            return PrefixMismatch(
                MismatchKind.NO_POINTER,
                got=loc.receiver_text(),
                expected=expected,
                prefix=loc,
            )
        return None

    if recv_ok:
        return PrefixMismatch(
            MismatchKind.METHOD_NOT_FOUND,
            got=loc.function_token or "",
            expected=fn_name,
            prefix=loc,
        )

    if fn_ok:
        # a free function takes no receiver component at all
        return PrefixMismatch(
            MismatchKind.RECEIVER_NOT_FOUND,
            got=loc.receiver_text(),
            expected=recv_name or f"{identity.package_name}.{fn_name}",
            prefix=loc,
        )

    return PrefixMismatch(
        MismatchKind.METHOD_NOT_FOUND,
        got=f"{loc.receiver_text()}.{loc.function_token}",
        expected=f"{recv_name}.{fn_name}" if recv_name else fn_name,
        prefix=loc,
    )


__all__ = [
    "MismatchKind",
    "PrefixMismatch",
    "package_matches",
    "match_prefix",
]
