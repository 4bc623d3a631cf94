"""errchain — location prefixes for Go error messages.

Checks that messages of errors created inside exported, error-returning
Go functions start with a prefix naming the function, so that a chain of
wrapped errors reads like a stack trace::

    store.(*DB).Get: store.decode: unexpected EOF

Submodules
----------
expr, identity
    Language-neutral expression tree and function identities.
prefix, matcher, recommend
    Prefix parsing, matching against an identity, canonical candidates.
evaluator
    Renders the message an error constructor would produce
    (``errors.New`` / ``fmt.Errorf``), with placeholders for unknowns.
checkers
    ``ErrorPrefixChecker`` and the ``Diagnostic`` model.
reporter
    Rust-style coloured terminal output.
gosource, driver
    tree-sitter Go front-end and the package driver.
main
    CLI entry-point.

Usage
-----
Command-line::

    python -m errchain ./...

Programmatic::

    from errchain import check_paths, CheckConfig

    results = check_paths(["./..."], CheckConfig())
    print(results.to_gcc_format())
"""

from __future__ import annotations

import logging

__version__: str = "0.1.0"

_log = logging.getLogger("errchain")
_log.addHandler(logging.NullHandler())

from errchain.checkers import (  # noqa: E402
    CheckerRunResults,
    Diagnostic,
    ErrorPrefixChecker,
    check_message,
)
from errchain.config import CheckConfig  # noqa: E402
from errchain.driver import check_paths, check_sources  # noqa: E402
from errchain.identity import FunctionIdentity  # noqa: E402
from errchain.matcher import MismatchKind  # noqa: E402
from errchain.recommend import candidate_prefixes  # noqa: E402

__all__: list[str] = [
    "__version__",
    "CheckConfig",
    "CheckerRunResults",
    "Diagnostic",
    "ErrorPrefixChecker",
    "FunctionIdentity",
    "MismatchKind",
    "candidate_prefixes",
    "check_message",
    "check_paths",
    "check_sources",
]
