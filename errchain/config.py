"""
errchain/config.py
══════════════════

Checker configuration.

``CheckConfig`` is an immutable value threaded explicitly into the
checker and the driver; there is no process-wide state.  The command
line builds one from its flags.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from errchain.errors import ConfigError, ErrorCodes
from errchain.evaluator import ConstructorShape

DEFAULT_CONSTRUCTORS: Mapping[str, ConstructorShape] = {
    "errors.New": ConstructorShape.MESSAGE,
    "fmt.Errorf": ConstructorShape.FORMAT,
}

# Importing one of these turns a package into an entry point.
DEFAULT_ENTRY_POINT_IMPORTS: FrozenSet[str] = frozenset({
    "github.com/spf13/cobra",
})


@dataclass(frozen=True)
class CheckConfig:
    """Tuning knobs for a check run."""
    debug: bool = False
    constructors: Mapping[str, ConstructorShape] = field(
        default_factory=lambda: dict(DEFAULT_CONSTRUCTORS)
    )
    entry_point_imports: FrozenSet[str] = DEFAULT_ENTRY_POINT_IMPORTS
    skip_generated: bool = True
    skip_tests: bool = True

    def shape_of(self, qualified_name: str) -> Optional[ConstructorShape]:
        """Constructor shape registered for ``qualified_name``, if any."""
        return self.constructors.get(qualified_name)

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        if not self.constructors:
            warnings.append("no error constructors configured; nothing will be checked")
        for name in self.constructors:
            if "." not in name:
                warnings.append(f"constructor {name!r} is not package-qualified")
        return warnings

    def with_constructors(self, specs: Iterable[str]) -> "CheckConfig":
        """
        Return a copy with extra constructors from ``NAME=SHAPE`` specs,
        e.g. ``github.com/pkg/errors.Errorf=format``.
        """
        constructors: Dict[str, ConstructorShape] = dict(self.constructors)
        for spec in specs:
            name, sep, shape = spec.rpartition("=")
            if not sep or not name:
                raise ConfigError(
                    f"constructor must be NAME=SHAPE, got {spec!r}",
                    code=ErrorCodes.BAD_CONSTRUCTOR,
                )
            try:
                constructors[name.strip()] = ConstructorShape(shape.strip().lower())
            except ValueError:
                choices = ", ".join(s.value for s in ConstructorShape)
                raise ConfigError(
                    f"unknown constructor shape {shape!r} (expected one of: {choices})",
                    code=ErrorCodes.BAD_CONSTRUCTOR,
                ) from None
        return replace(self, constructors=constructors)

    def with_entry_point_imports(self, paths: Iterable[str]) -> "CheckConfig":
        return replace(
            self,
            entry_point_imports=frozenset(self.entry_point_imports) | frozenset(paths),
        )


__all__ = [
    "DEFAULT_CONSTRUCTORS",
    "DEFAULT_ENTRY_POINT_IMPORTS",
    "CheckConfig",
]
