"""
errchain/checkers.py
════════════════════

Walker / Reporter: turns declarations into diagnostics.

Architecture
────────────

  ┌──────────────────────────────────────────────────────────────┐
  │                    ErrorPrefixChecker                        │
  │                                                              │
  │  collect_evidence()                                          │
  │    SourceFile ─► FuncDecl ─► resolve_identity()              │
  │                     │                                        │
  │                     ▼  (pre-order over body expressions)     │
  │                   Call ─► CallResolver ─► ConstructorShape   │
  │                     │                                        │
  │                     ▼                                        │
  │              evaluate_message()  ── None ─► skipped          │
  │                                                              │
  │  diagnose()                                                  │
  │    check_message() = parse_prefix() + match_prefix()         │
  │                     │                                        │
  │                     ▼                                        │
  │    Diagnostic (+ candidate_prefixes() suggestions)           │
  └──────────────────────────────────────────────────────────────┘

``check_message`` is the pure core: (identity, message) → mismatch or
``None``.  Everything else is plumbing around it.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    ClassVar,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

from errchain.config import CheckConfig
from errchain.errors import ErrchainError, InternalError
from errchain.evaluator import evaluate_message
from errchain.expr import Call, Ident, Position, Selector, calls
from errchain.identity import FuncDecl, FunctionIdentity, resolve_identity
from errchain.matcher import MismatchKind, PrefixMismatch, match_prefix
from errchain.prefix import SEPARATOR, parse_prefix
from errchain.recommend import candidate_prefixes, format_candidates, go_quote

logger = logging.getLogger(__name__)

LEAD_IN = "Error message must point to the place where it had happened"
SUGGESTION_INTRO = "Consider starting message with one of the following strings: "


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — DIAGNOSTIC MODEL
# ═════════════════════════════════════════════════════════════════════════

class DiagnosticSeverity(Enum):
    ERROR = "error"
    WARNING = "warning"

    @property
    def color(self) -> str:
        """termcolor colour name."""
        return "red" if self is DiagnosticSeverity.ERROR else "yellow"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single finding attached to an error-constructing call.

    Attributes
    ----------
    location     : position of the call expression
    kind         : MismatchKind
    message      : human-readable text
    got          : offending token(s)
    expected     : what the identity expects
    suggestions  : canonical prefixes for the enclosing function
    severity     : DiagnosticSeverity
    checker_name : name of the checker that produced this
    """
    location: Position
    kind: MismatchKind
    message: str
    got: str = ""
    expected: str = ""
    suggestions: Tuple[str, ...] = ()
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    checker_name: str = ""

    @property
    def error_id(self) -> str:
        return self.kind.error_id

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "file": self.location.file,
            "line": self.location.line,
            "column": self.location.column,
            "severity": self.severity.value,
            "errorId": self.error_id,
            "message": self.message,
            "got": self.got,
            "expected": self.expected,
            "suggestions": list(self.suggestions),
        }

    def to_json_str(self) -> str:
        """Single-line JSON string."""
        return json.dumps(self.to_json_dict(), ensure_ascii=False)

    def to_gcc_format(self) -> str:
        """GCC-style diagnostic string: file:line:col: severity: message."""
        return f"{self.location}: {self.severity.value}: {self.message} [{self.error_id}]"


def render_message(mismatch: PrefixMismatch, suggestions: Sequence[str]) -> str:
    """Fixed lead-in followed by the kind-specific explanation."""
    if mismatch.kind is MismatchKind.NO_PREFIX:
        return f"{LEAD_IN}: {SUGGESTION_INTRO}{format_candidates(suggestions)}"

    detail = mismatch.kind.description
    parts = []
    if mismatch.got:
        parts.append(f"got {go_quote(mismatch.got)}")
    if mismatch.expected:
        parts.append(f"expected {go_quote(mismatch.expected)}")
    if parts:
        detail += ": " + ", ".join(parts)
    return f"{LEAD_IN}: {detail}"


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — PURE CORE
# ═════════════════════════════════════════════════════════════════════════

def check_message(
    message: str,
    identity: FunctionIdentity,
) -> Optional[PrefixMismatch]:
    """
    Classify ``message`` against ``identity``.

    A syntactically invalid prefix whose raw tokens would still match is
    reported as ``NO_PREFIX`` (the author needs the canonical form);
    otherwise it is ``INVALID_SYNTAX``.
    """
    loc = parse_prefix(message)
    if loc is None:
        return PrefixMismatch(MismatchKind.NO_PREFIX, expected=identity.package_name)

    if not loc.syntax_valid:
        if match_prefix(loc, identity) is None:
            return PrefixMismatch(
                MismatchKind.NO_PREFIX,
                got=loc.raw,
                expected=identity.package_name,
                prefix=loc,
            )
        expected = " or ".join(p[: -len(SEPARATOR)] for p in candidate_prefixes(identity))
        return PrefixMismatch(
            MismatchKind.INVALID_SYNTAX,
            got=loc.raw,
            expected=expected,
            prefix=loc,
        )

    return match_prefix(loc, identity)


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — INPUT MODEL
# ═════════════════════════════════════════════════════════════════════════

class CallResolver(Protocol):
    """Maps a call to the package-qualified name of its callee."""

    def qualified_name(self, call: Call) -> Optional[str]:
        ...


class SelectorCallResolver:
    """Resolves ``pkg.Func(...)`` to ``"pkg.Func"`` by syntax alone."""

    def qualified_name(self, call: Call) -> Optional[str]:
        fun = call.fun
        if isinstance(fun, Selector) and isinstance(fun.x, Ident) and not fun.x.local:
            return f"{fun.x.name}.{fun.sel}"
        return None


@dataclass(frozen=True)
class SourceFile:
    """One compilation unit as delivered by a front-end."""
    path: str
    package_name: str
    decls: Tuple[FuncDecl, ...] = ()
    imports: Tuple[str, ...] = ()
    is_generated: bool = False
    is_test: bool = False
    resolver: CallResolver = field(default_factory=SelectorCallResolver)


@dataclass(frozen=True)
class PackageInfo:
    """The package all files of a check run belong to."""
    name: str
    path: str = ""
    is_main_like: bool = False

    def __post_init__(self) -> None:
        if not self.path:
            object.__setattr__(self, "path", self.name)


@dataclass
class CheckerContext:
    """
    Shared context passed to a checker during execution.

    Attributes
    ----------
    package : PackageInfo
    files   : compilation units of the package
    config  : CheckConfig
    stats   : mutable dict for counting statistics
    """
    package: PackageInfo
    files: Sequence[SourceFile]
    config: CheckConfig = field(default_factory=CheckConfig)
    stats: Dict[str, int] = field(default_factory=lambda: defaultdict(int))


@dataclass(frozen=True)
class _CallSite:
    identity: FunctionIdentity
    call: Call
    callee: str
    message: str


# ═════════════════════════════════════════════════════════════════════════
#  PART 4 — CHECKERS
# ═════════════════════════════════════════════════════════════════════════

class Checker(ABC):
    """
    Base class for checkers.

    Lifecycle
    ─────────
      1. ``collect_evidence(ctx)``  — gather suspicious sites
      2. ``diagnose(ctx)``          — turn evidence into diagnostics
      3. ``report(ctx)``            — return the diagnostics
    """

    name: ClassVar[str] = "base-checker"
    description: ClassVar[str] = ""
    error_ids: ClassVar[FrozenSet[str]] = frozenset()
    default_severity: ClassVar[DiagnosticSeverity] = DiagnosticSeverity.WARNING

    def __init__(self) -> None:
        self._diagnostics: List[Diagnostic] = []

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @abstractmethod
    def collect_evidence(self, ctx: CheckerContext) -> None:
        ...

    @abstractmethod
    def diagnose(self, ctx: CheckerContext) -> None:
        ...

    def report(self, ctx: CheckerContext) -> List[Diagnostic]:
        return self.diagnostics

    def run(self, ctx: CheckerContext) -> List[Diagnostic]:
        self.collect_evidence(ctx)
        self.diagnose(ctx)
        return self.report(ctx)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.name}'>"


class ErrorPrefixChecker(Checker):
    """
    Checks that messages of errors created inside exported,
    error-returning functions start with a location prefix naming the
    function (``pkg.Type.Method: ...``).
    """

    name = "errchain"
    description = "Checks that error chains contain information about place where problem occurred."
    error_ids = frozenset(kind.error_id for kind in MismatchKind)

    def __init__(self) -> None:
        super().__init__()
        self._sites: List[_CallSite] = []

    def collect_evidence(self, ctx: CheckerContext) -> None:
        if ctx.package.is_main_like:
            logger.debug("skipping entry-point package %s", ctx.package.path)
            return

        for source in ctx.files:
            if ctx.config.skip_generated and source.is_generated:
                logger.debug("skipping generated file %s", source.path)
                continue
            if ctx.config.skip_tests and source.is_test:
                continue
            ctx.stats["files"] += 1
            for decl in source.decls:
                self._collect_decl(ctx, source, decl)

    def _collect_decl(self, ctx: CheckerContext, source: SourceFile, decl: FuncDecl) -> None:
        identity = resolve_identity(decl, ctx.package.name, ctx.package.path)
        if identity is None:
            return
        ctx.stats["functions"] += 1

        for expr in decl.body or ():
            for call in calls(expr):
                site = self._call_site(ctx, source, identity, call)
                if site is not None:
                    self._sites.append(site)

    def _call_site(
        self,
        ctx: CheckerContext,
        source: SourceFile,
        identity: FunctionIdentity,
        call: Call,
    ) -> Optional[_CallSite]:
        if not call.args:
            return None
        callee = source.resolver.qualified_name(call)
        if callee is None:
            return None
        shape = ctx.config.shape_of(callee)
        if shape is None:
            return None
        ctx.stats["calls"] += 1

        message = evaluate_message(call, shape)
        if message is None:
            ctx.stats["skipped"] += 1
            return None
        return _CallSite(identity=identity, call=call, callee=callee, message=message)

    def diagnose(self, ctx: CheckerContext) -> None:
        for site in self._sites:
            mismatch = check_message(site.message, site.identity)
            if mismatch is None:
                continue

            suggestions = candidate_prefixes(site.identity)
            if ctx.config.debug:
                logger.debug(
                    "%s(%r); err=%s got=%r expected=%r",
                    site.callee, site.message, mismatch.kind.error_id,
                    mismatch.got, mismatch.expected,
                )
                _verify_candidates(site.identity, suggestions)

            self._diagnostics.append(Diagnostic(
                location=site.call.position,
                kind=mismatch.kind,
                message=render_message(mismatch, suggestions),
                got=mismatch.got,
                expected=mismatch.expected,
                suggestions=suggestions,
                severity=self.default_severity,
                checker_name=self.name,
            ))


def _verify_candidates(identity: FunctionIdentity, suggestions: Iterable[str]) -> None:
    """Debug-mode self check: every suggestion must satisfy the matcher."""
    for candidate in suggestions:
        mismatch = check_message(candidate + "x", identity)
        if mismatch is not None:
            raise InternalError(
                f"suggested prefix {candidate!r} does not match "
                f"{identity.function_name}: {mismatch.kind.description}"
            )


# ═════════════════════════════════════════════════════════════════════════
#  PART 5 — RESULTS
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class CheckerRunResults:
    """
    Aggregate results of a check run.

    Attributes
    ----------
    diagnostics : all diagnostics, in package/file/declaration order
    errors      : infrastructure errors (unparsable files ...)
    packages    : import paths of the packages that were checked
    stats       : counters (files, functions, calls, skipped)
    """
    diagnostics: List[Diagnostic] = field(default_factory=list)
    errors: List[ErrchainError] = field(default_factory=list)
    packages: List[str] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    @property
    def total_count(self) -> int:
        return len(self.diagnostics)

    def by_file(self, file: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.location.file == file]

    def by_kind(self, kind: MismatchKind) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]

    def merge(self, diagnostics: Iterable[Diagnostic], stats: Dict[str, int]) -> None:
        self.diagnostics.extend(diagnostics)
        for key, value in stats.items():
            self.stats[key] += value

    def to_json_lines(self) -> str:
        return "\n".join(d.to_json_str() for d in self.diagnostics)

    def to_gcc_format(self) -> str:
        return "\n".join(d.to_gcc_format() for d in self.diagnostics)

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            f"Check complete: {self.total_count} diagnostics in "
            f"{len(self.packages)} packages ({len(self.errors)} errors)",
        ]
        for kind in MismatchKind:
            count = len(self.by_kind(kind))
            if count:
                lines.append(f"  {kind.error_id}: {count}")
        for key in ("files", "functions", "calls", "skipped"):
            lines.append(f"  {key}: {self.stats.get(key, 0)}")
        return "\n".join(lines)


def check_package(
    package: PackageInfo,
    files: Sequence[SourceFile],
    config: Optional[CheckConfig] = None,
) -> List[Diagnostic]:
    """Run ``ErrorPrefixChecker`` over one package."""
    ctx = CheckerContext(package=package, files=files, config=config or CheckConfig())
    return ErrorPrefixChecker().run(ctx)


__all__ = [
    "LEAD_IN",
    "SUGGESTION_INTRO",
    "DiagnosticSeverity",
    "Diagnostic",
    "render_message",
    "check_message",
    "CallResolver",
    "SelectorCallResolver",
    "SourceFile",
    "PackageInfo",
    "CheckerContext",
    "Checker",
    "ErrorPrefixChecker",
    "CheckerRunResults",
    "check_package",
]
