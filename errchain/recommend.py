"""
errchain/recommend.py
═════════════════════

Prefix Recommender: the canonical prefixes a function may start its
error messages with.  Every candidate parses and matches its own
identity (see ``errchain.matcher``).
"""

from __future__ import annotations

import json
from typing import List, Sequence, Tuple

from errchain.identity import FunctionIdentity
from errchain.prefix import SEPARATOR


def candidate_prefixes(identity: FunctionIdentity) -> Tuple[str, ...]:
    """
    Ordered, duplicate-free candidate prefixes for ``identity``.

    Free function:  ``pkg: ``, ``pkg.Func: ``
    Value method:   ``pkg: ``, ``pkg.Type.Method: ``, ``pkg.Type: ``
    Pointer method: ``pkg: ``, ``pkg.Type.Method: ``,
                    ``pkg.(*Type).Method: ``, ``pkg.Type: ``
    """
    pkg = identity.package_name
    fn = identity.function_name
    prefixes: List[str] = [pkg + SEPARATOR]

    recv = identity.receiver_name
    if not recv:
        prefixes.append(f"{pkg}.{fn}{SEPARATOR}")
    else:
        prefixes.append(f"{pkg}.{recv}.{fn}{SEPARATOR}")
        if identity.is_pointer_receiver:
            prefixes.append(f"{pkg}.(*{recv}).{fn}{SEPARATOR}")
        prefixes.append(f"{pkg}.{recv}{SEPARATOR}")

    return tuple(dict.fromkeys(prefixes))


def go_quote(text: str) -> str:
    """Double-quoted string with Go-style escapes."""
    return json.dumps(text, ensure_ascii=False)


def format_candidates(prefixes: Sequence[str]) -> str:
    """``"a: ", "a.F: "`` — the list used in diagnostics."""
    return ", ".join(go_quote(p) for p in prefixes)


__all__ = [
    "candidate_prefixes",
    "go_quote",
    "format_candidates",
]
