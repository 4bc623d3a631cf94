"""
errchain/identity.py
════════════════════

Function Identity Resolver.

Turns a declaration (``FuncDecl``) into the ground truth a message
prefix is compared against: package, receiver type, pointer flag and
function name.  Only exported declarations whose last result is the
built-in ``error`` type get an identity; everything else is skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from errchain.expr import Expr, Position

logger = logging.getLogger(__name__)

ERROR_TYPE_NAME = "error"


class TypeShape(Enum):
    """Syntactic shape of a type expression, as far as the engine cares."""
    NAMED = "named"
    POINTER = "pointer"
    OTHER = "other"


@dataclass(frozen=True)
class TypeRef:
    """
    A type expression reduced to what receiver/result checks need.

    ``NAMED``   — a bare identifier such as ``error`` or ``Struct``
    ``POINTER`` — ``*elem``
    ``OTHER``   — qualified, generic, slice, map, func ... types
    """
    shape: TypeShape
    name: str = ""
    elem: Optional["TypeRef"] = None

    @classmethod
    def named(cls, name: str) -> "TypeRef":
        return cls(TypeShape.NAMED, name=name)

    @classmethod
    def pointer(cls, elem: "TypeRef") -> "TypeRef":
        return cls(TypeShape.POINTER, elem=elem)

    @classmethod
    def other(cls, text: str = "") -> "TypeRef":
        return cls(TypeShape.OTHER, name=text)


@dataclass(frozen=True)
class FuncDecl:
    """A function or method declaration as delivered by a front-end."""
    name: str
    position: Position = Position()
    receiver: Optional[TypeRef] = None
    results: Tuple[TypeRef, ...] = ()
    body: Optional[Tuple[Expr, ...]] = None

    @property
    def is_method(self) -> bool:
        return self.receiver is not None


@dataclass(frozen=True)
class FunctionIdentity:
    """Canonical identity of an exported, error-returning function."""
    package_name: str
    function_name: str
    receiver_name: Optional[str] = None
    is_pointer_receiver: bool = False
    is_exported: bool = True
    returns_error_last: bool = True
    package_path: str = ""

    def __post_init__(self) -> None:
        if not self.package_path:
            object.__setattr__(self, "package_path", self.package_name)

    @property
    def is_method(self) -> bool:
        return self.receiver_name is not None


def is_exported(name: str) -> bool:
    """Exported names start with an upper-case letter."""
    return bool(name) and name[0].isupper()


def returns_error_last(decl: FuncDecl) -> bool:
    if not decl.results:
        return False
    last = decl.results[-1]
    return last.shape is TypeShape.NAMED and last.name == ERROR_TYPE_NAME


def receiver_of(ref: TypeRef) -> Optional[Tuple[str, bool]]:
    """Return ``(type name, is pointer)`` or ``None`` for non-simple receivers."""
    is_pointer = False
    if ref.shape is TypeShape.POINTER:
        is_pointer = True
        ref = ref.elem if ref.elem is not None else TypeRef.other()
    if ref.shape is TypeShape.NAMED and ref.name:
        return ref.name, is_pointer
    return None


def resolve_identity(
    decl: FuncDecl,
    package_name: str,
    package_path: str = "",
) -> Optional[FunctionIdentity]:
    """
    Build the identity of ``decl`` or return ``None`` when it must not be
    checked (unexported, no trailing ``error`` result, no body, or a
    receiver that is not a simple named type).
    """
    if not decl.name or decl.body is None:
        return None
    if not is_exported(decl.name) or not returns_error_last(decl):
        return None

    receiver_name: Optional[str] = None
    is_pointer = False
    if decl.receiver is not None:
        recv = receiver_of(decl.receiver)
        if recv is None:
            logger.debug("skipping %s: receiver is not a simple named type", decl.name)
            return None
        receiver_name, is_pointer = recv

    return FunctionIdentity(
        package_name=package_name,
        package_path=package_path or package_name,
        function_name=decl.name,
        receiver_name=receiver_name,
        is_pointer_receiver=is_pointer,
    )


__all__ = [
    "ERROR_TYPE_NAME",
    "TypeShape",
    "TypeRef",
    "FuncDecl",
    "FunctionIdentity",
    "is_exported",
    "returns_error_last",
    "receiver_of",
    "resolve_identity",
]
