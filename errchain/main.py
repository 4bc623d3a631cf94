#!/usr/bin/env python3
"""errchain/main.py — CLI entry-point for the errchain checker.

Usage examples
--------------
    # Check one package
    python -m errchain ./pkg/store

    # Check a whole module
    python -m errchain ./...

    # Treat github.com/pkg/errors constructors like the standard ones
    python -m errchain --constructor github.com/pkg/errors.New=message \\
                       --constructor github.com/pkg/errors.Errorf=format ./...

    # Annotated source snippets
    python -m errchain --format pretty ./...

    # JSON lines, one diagnostic per line
    python -m errchain --format json ./...

Exit codes
----------
    0   No findings.
    1   Invalid configuration (bad --constructor value or pattern).
    2   Infrastructure failure (unreadable or unparsable sources).
    3   At least one error message lacks a valid location prefix.
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
import time
from typing import List, Optional, Sequence, TextIO

from errchain import __version__
from errchain.checkers import CheckerRunResults
from errchain.config import CheckConfig
from errchain.driver import check_paths
from errchain.errors import ConfigError, ErrchainError
from errchain.reporter import render_pretty

_log = logging.getLogger("errchain")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2
EXIT_VIOLATION: int = 3

OUTPUT_FORMATS = ("text", "json", "summary", "pretty")
COLOR_MODES = {"auto": None, "always": True, "never": False}


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``errchain`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("errchain")
    root.setLevel(level)
    root.addHandler(handler)


def build_config(args: argparse.Namespace) -> CheckConfig:
    """Build a ``CheckConfig`` from parsed CLI flags."""
    config = CheckConfig(
        debug=args.debug,
        skip_generated=not args.include_generated,
        skip_tests=not args.include_tests,
    )
    if args.constructor:
        config = config.with_constructors(args.constructor)
    if args.entry_point_import:
        config = config.with_entry_point_imports(args.entry_point_import)
    for warning in config.validate():
        _log.warning("%s", warning)
    return config


def _emit_results(
    results: CheckerRunResults,
    fmt: str,
    stream: TextIO,
    color: Optional[bool] = None,
) -> None:
    """Write diagnostics to *stream* in the chosen format."""
    if fmt == "pretty":
        render_pretty(results.diagnostics, stream, color=color)
        return
    if fmt == "json":
        body = results.to_json_lines()
    else:
        body = results.to_gcc_format()
    if body:
        stream.write(body + "\n")

    if fmt == "summary":
        stream.write("\n" + results.summary() + "\n")


# ===========================================================================
# Parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="errchain",
        description=(
            "Checks that error chains contain information about the place\n"
            "where the problem occurred: messages created inside exported,\n"
            "error-returning Go functions must start with a location\n"
            "prefix such as \"pkg.(*Type).Method: \"."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              errchain ./...
              errchain --format json ./internal/store
              errchain --constructor github.com/pkg/errors.Errorf=format ./...
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every reported call and self-check suggested prefixes.",
    )
    parser.add_argument(
        "-f", "--format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text).",
    )
    parser.add_argument(
        "--color",
        choices=sorted(COLOR_MODES),
        default="auto",
        help="Colourise pretty output (default: auto).",
    )

    g = parser.add_argument_group("checker tuning")
    g.add_argument(
        "--constructor",
        action="append",
        default=[],
        metavar="NAME=SHAPE",
        help=(
            "Treat the package-qualified function NAME as an error "
            "constructor of SHAPE 'message' or 'format'.  Repeatable."
        ),
    )
    g.add_argument(
        "--entry-point-import",
        action="append",
        default=[],
        metavar="PATH",
        help="Skip packages importing PATH (like package main).  Repeatable.",
    )
    g.add_argument(
        "--include-tests",
        action="store_true",
        help="Also check *_test.go files.",
    )
    g.add_argument(
        "--include-generated",
        action="store_true",
        help="Also check generated files.",
    )

    parser.add_argument(
        "patterns",
        nargs="+",
        metavar="PATTERN",
        help="Package directory, .go file, or dir/... for a tree.",
    )
    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def run(args: argparse.Namespace, stream: TextIO) -> int:
    try:
        config = build_config(args)
    except ConfigError as exc:
        _log.error("%s", exc)
        return EXIT_ERROR

    t0 = time.monotonic()
    try:
        results = check_paths(args.patterns, config)
    except ConfigError as exc:
        _log.error("%s", exc)
        return EXIT_ERROR
    _log.info("Check completed in %.3fs", time.monotonic() - t0)

    _emit_results(results, args.format, stream, COLOR_MODES[args.color])

    if results.errors:
        return EXIT_INFRA
    if results.diagnostics:
        return EXIT_VIOLATION
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the errchain CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # --debug output is DEBUG-level logging
    _configure_logging(max(args.verbose, 2) if args.debug else args.verbose)

    try:
        return run(args, sys.stdout)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except ErrchainError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA


__all__: List[str] = [
    "EXIT_OK",
    "EXIT_ERROR",
    "EXIT_INFRA",
    "EXIT_VIOLATION",
    "build_config",
    "main",
    "run",
]


if __name__ == "__main__":
    raise SystemExit(main())
