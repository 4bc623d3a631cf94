"""
errchain/driver.py
══════════════════

Package driver: from command-line patterns to ``CheckerRunResults``.

  patterns ──► expand_patterns() ──► {directory: [*.go]}
                                          │
                     load_package() ◄─────┘   (errchain.gosource)
                          │
           import_path_for() + is_main_like()
                          │
                 ErrorPrefixChecker.run()
                          │
                          ▼
                 CheckerRunResults

Patterns follow the go tool: a directory, a single ``.go`` file, or
``dir/...`` for a directory tree.  Recursive expansion skips
``testdata``, ``vendor`` and directories starting with ``.`` or ``_``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from errchain.checkers import (
    CheckerContext,
    CheckerRunResults,
    ErrorPrefixChecker,
    PackageInfo,
)
from errchain.config import CheckConfig
from errchain.errors import ConfigError, ErrorCodes, SourceError
from errchain.gosource import GoPackage, load_package, new_parser

logger = logging.getLogger(__name__)

GO_MOD = "go.mod"
GO_SUFFIX = ".go"
RECURSIVE_SUFFIX = "/..."
SKIPPED_DIRS = frozenset({"testdata", "vendor"})

_MODULE_RE = re.compile(r'^\s*module\s+"?([^"\s]+)"?', re.MULTILINE)


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — PATTERN EXPANSION
# ═════════════════════════════════════════════════════════════════════════

def _is_ignored_name(name: str) -> bool:
    return name.startswith(".") or name.startswith("_")


def go_files(directory: Path) -> List[Path]:
    """Go sources directly inside ``directory``, sorted by name."""
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix == GO_SUFFIX and not _is_ignored_name(p.name)
    )


def _walk_dirs(root: Path) -> Iterable[Path]:
    yield root
    for child in sorted(root.iterdir()):
        if not child.is_dir():
            continue
        if child.name in SKIPPED_DIRS or _is_ignored_name(child.name):
            continue
        yield from _walk_dirs(child)


def expand_patterns(patterns: Sequence[str]) -> Dict[Path, List[Path]]:
    """
    Map each package directory to its Go files.

    Raises ``ConfigError`` for a pattern that names nothing.
    """
    packages: Dict[Path, List[Path]] = {}

    for pattern in patterns:
        recursive = pattern == "..." or pattern.endswith(RECURSIVE_SUFFIX)
        base = pattern[: -len("...")].rstrip("/") if recursive else pattern
        path = Path(base or ".")

        if path.is_file():
            if path.suffix != GO_SUFFIX:
                raise ConfigError(f"not a Go file: {pattern}", code=ErrorCodes.BAD_PATTERN)
            files = packages.setdefault(path.parent, [])
            if path not in files:
                files.append(path)
            continue

        if not path.is_dir():
            raise ConfigError(f"no such file or directory: {pattern}", code=ErrorCodes.BAD_PATTERN)

        dirs = _walk_dirs(path) if recursive else [path]
        for directory in dirs:
            files = go_files(directory)
            if files:
                packages[directory] = files
            elif not recursive:
                logger.warning("no Go files in %s", directory)

    return packages


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — PACKAGE IDENTITY
# ═════════════════════════════════════════════════════════════════════════

def find_module(directory: Path) -> Optional[Tuple[Path, str]]:
    """Locate the enclosing ``go.mod``; return ``(module root, module path)``."""
    current = directory.resolve()
    for candidate in (current, *current.parents):
        mod_file = candidate / GO_MOD
        if not mod_file.is_file():
            continue
        try:
            text = mod_file.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("cannot read %s: %s", mod_file, exc)
            return None
        m = _MODULE_RE.search(text)
        if m is None:
            logger.warning("%s has no module directive", mod_file)
            return None
        return candidate, m.group(1)
    return None


def import_path_for(directory: Path) -> str:
    """Import path of the package in ``directory``; the directory name when there is no module."""
    module = find_module(directory)
    if module is None:
        return directory.resolve().name
    root, module_path = module
    rel = directory.resolve().relative_to(root)
    if rel == Path("."):
        return module_path
    return f"{module_path}/{rel.as_posix()}"


def is_main_like(package: GoPackage, config: CheckConfig) -> bool:
    """Entry points: package ``main`` or packages importing a CLI framework."""
    if package.name == "main":
        return True
    return bool(package.import_paths & frozenset(config.entry_point_imports))


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — RUNNING
# ═════════════════════════════════════════════════════════════════════════

def check_loaded(
    package: GoPackage,
    import_path: str,
    config: CheckConfig,
    results: CheckerRunResults,
) -> None:
    """Run the checker over an already loaded package, merging into ``results``."""
    info = PackageInfo(
        name=package.name,
        path=import_path,
        is_main_like=is_main_like(package, config),
    )
    ctx = CheckerContext(package=info, files=package.source_files(), config=config)
    diagnostics = ErrorPrefixChecker().run(ctx)
    logger.info("%s: %d diagnostics", import_path, len(diagnostics))
    results.packages.append(import_path)
    results.merge(diagnostics, ctx.stats)


def check_paths(
    patterns: Sequence[str],
    config: Optional[CheckConfig] = None,
) -> CheckerRunResults:
    """
    Check every package matched by ``patterns``.

    Unreadable or unparsable packages are recorded in
    ``CheckerRunResults.errors`` and skipped; the run continues.
    """
    config = config or CheckConfig()
    results = CheckerRunResults()
    parser = new_parser()

    for directory, files in expand_patterns(patterns).items():
        logger.debug("loading %s (%d files)", directory, len(files))
        try:
            package = load_package([str(f) for f in files], parser=parser)
        except SourceError as exc:
            logger.error("%s", exc)
            results.errors.append(exc)
            continue
        check_loaded(package, import_path_for(directory), config, results)

    return results


def check_sources(
    sources: Mapping[str, str],
    import_path: str = "",
    config: Optional[CheckConfig] = None,
) -> CheckerRunResults:
    """Check one package given as ``{file name: Go source}``."""
    config = config or CheckConfig()
    results = CheckerRunResults()
    encoded = {name: text.encode("utf-8") for name, text in sources.items()}
    package = load_package(list(encoded), sources=encoded)
    check_loaded(package, import_path or package.name, config, results)
    return results


__all__ = [
    "go_files",
    "expand_patterns",
    "find_module",
    "import_path_for",
    "is_main_like",
    "check_loaded",
    "check_paths",
    "check_sources",
]
