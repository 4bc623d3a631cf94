"""
errchain/reporter.py
════════════════════

Rust-style terminal output for diagnostics (``--format pretty``)::

    warning[noPrefix]: Error message must point to the place where it had happened
      --> pkg/aaa/aaa.go:21:13
       |
    21 |         return 0, fmt.Errorf("input too short")
       |                   ^
      = help: start the message with "aaa: "
      = help: start the message with "aaa.Struct.Method: "

Colours come from termcolor, which already honours ``NO_COLOR`` /
``FORCE_COLOR`` and disables itself when the stream is not a terminal.
"""

from __future__ import annotations

import linecache
import sys
from typing import Iterable, List, Optional, TextIO

from termcolor import colored

from errchain.checkers import Diagnostic, LEAD_IN
from errchain.matcher import MismatchKind
from errchain.recommend import go_quote


class TerminalRenderer:
    """Render diagnostics to a terminal with colours."""

    def __init__(self, stream: TextIO = sys.stdout, color: Optional[bool] = None) -> None:
        self._stream = stream
        self._color = color

    def _c(self, text: str, color: Optional[str] = None, attrs: Optional[List[str]] = None) -> str:
        return colored(
            text,
            color,
            attrs=attrs,
            no_color=True if self._color is False else None,
            force_color=True if self._color is True else None,
        )

    def render(self, diag: Diagnostic) -> None:
        lines: List[str] = []

        # ── header: severity[errorId]: headline ──────────────────────
        sev = self._c(f"{diag.severity.value}[{diag.error_id}]", diag.severity.color, ["bold"])
        lines.append(f"{sev}: {self._c(LEAD_IN, attrs=['bold'])}")

        loc = diag.location
        arrow = self._c("-->", "blue", ["bold"])
        lines.append(f"  {arrow} {loc}")
        lines.extend(self._render_source(diag))

        # ── explanation ──────────────────────────────────────────────
        if diag.kind is not MismatchKind.NO_PREFIX:
            note = self._c("note", "cyan", ["bold"])
            lines.append(f"  = {note}: {diag.kind.description}")
            if diag.got:
                lines.append(f"          got {go_quote(diag.got)}")
            if diag.expected:
                lines.append(f"     expected {go_quote(diag.expected)}")

        for prefix in diag.suggestions:
            hlp = self._c("help", "green", ["bold"])
            lines.append(f"  = {hlp}: start the message with {go_quote(prefix)}")

        lines.append("")
        self._stream.write("\n".join(lines) + "\n")

    def render_all(self, diagnostics: Iterable[Diagnostic]) -> int:
        count = 0
        for diag in diagnostics:
            self.render(diag)
            count += 1
        self._stream.flush()
        return count

    def _render_source(self, diag: Diagnostic) -> List[str]:
        """Source line with a caret under the call, when the file is readable."""
        loc = diag.location
        if not loc.file or loc.line <= 0:
            return []
        text = linecache.getline(loc.file, loc.line).rstrip("\n")
        if not text:
            return []

        gutter = str(loc.line)
        blank = " " * len(gutter)
        pipe = self._c("|", "blue", ["bold"])
        # keep tabs so the caret lines up with the source
        pad = "".join(ch if ch == "\t" else " " for ch in text[: max(loc.column - 1, 0)])
        caret = self._c("^", diag.severity.color, ["bold"])
        return [
            f"{blank} {pipe}",
            f"{self._c(gutter, 'blue', ['bold'])} {pipe} {text}",
            f"{blank} {pipe} {pad}{caret}",
        ]


def render_pretty(
    diagnostics: Iterable[Diagnostic],
    stream: TextIO = sys.stdout,
    color: Optional[bool] = None,
) -> int:
    """Render ``diagnostics``; ``color`` None means auto-detect."""
    return TerminalRenderer(stream, color=color).render_all(diagnostics)


__all__ = [
    "TerminalRenderer",
    "render_pretty",
]
