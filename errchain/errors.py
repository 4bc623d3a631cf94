"""
errchain/errors.py
══════════════════

Exception hierarchy for infrastructure failures.

Prefix mismatches are *findings*, not exceptions; they travel as
``Diagnostic`` values.  The classes below cover everything around the
engine: unreadable or unparsable Go sources, bad configuration, and
states the engine believes impossible (raised only in debug mode).

Hierarchy
─────────

  ErrchainError (base)
  ├── SourceError     - file cannot be read or is not valid Go
  ├── ConfigError     - invalid configuration value
  └── InternalError   - engine bug (debug mode only)

Error codes follow the pattern ``ECH-NNNN``:
  - 1000-1999: source errors
  - 2000-2999: configuration errors
  - 9000-9999: internal errors
"""

from __future__ import annotations

from typing import Optional

from errchain.expr import Position


class ErrorCode:
    """A structured ``ECH-NNNN`` error code."""

    __slots__ = ("number", "title")

    def __init__(self, number: int, title: str) -> None:
        self.number = number
        self.title = title

    @property
    def code(self) -> str:
        return f"ECH-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.title!r})"

    def __hash__(self) -> int:
        return hash(self.number)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ErrorCodes:
    """Predefined error codes."""

    UNREADABLE_FILE = ErrorCode(1000, "source file cannot be read")
    SYNTAX_ERROR = ErrorCode(1001, "source file has syntax errors")
    NO_PACKAGE_CLAUSE = ErrorCode(1002, "source file has no package clause")
    MIXED_PACKAGES = ErrorCode(1003, "directory holds more than one package")

    BAD_CONSTRUCTOR = ErrorCode(2000, "invalid constructor specification")
    BAD_PATTERN = ErrorCode(2001, "invalid package pattern")

    INTERNAL_ERROR = ErrorCode(9000, "internal error")


class ErrchainError(Exception):
    """Base exception for errchain."""

    default_code: ErrorCode = ErrorCodes.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        position: Optional[Position] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.position = position

    def to_gcc_format(self) -> str:
        if self.position is not None:
            return f"{self.position}: error: {self.message} [{self.code}]"
        return f"error: {self.message} [{self.code}]"

    def __str__(self) -> str:
        return self.to_gcc_format()


class SourceError(ErrchainError):
    """A Go source file could not be read or parsed."""

    default_code = ErrorCodes.SYNTAX_ERROR


class ConfigError(ErrchainError):
    """A configuration value is invalid."""

    default_code = ErrorCodes.BAD_CONSTRUCTOR


class InternalError(ErrchainError):
    """The engine reached a state it considers impossible."""

    default_code = ErrorCodes.INTERNAL_ERROR


__all__ = [
    "ErrorCode",
    "ErrorCodes",
    "ErrchainError",
    "SourceError",
    "ConfigError",
    "InternalError",
]
