"""Core data model: parameter definitions, the scope index and exit codes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .constants import GLOBAL_SCOPE

__all__ = [
    "ExitCode",
    "MakecompError",
    "ParameterDefinition",
    "Position",
    "ScopeIndex",
]


@dataclass(frozen=True)
class ParameterDefinition:
    """A parameter that may be passed as ``name=value`` on the make command line."""

    name: str
    scope: str = GLOBAL_SCOPE  # GLOBAL_SCOPE or a target name
    values: tuple[str, ...] = ()  # source order, duplicates kept
    type: str | None = None  # "enum", "bool" or free text
    required: bool = False
    default: str | None = None


@dataclass
class ScopeIndex:
    """Parameter definitions grouped by scope, plus the Makefile's rule names.

    Iteration follows first-declaration order, which makes completion output
    deterministic for a given Makefile.
    """

    scopes_map: dict[str, dict[str, ParameterDefinition]] = field(default_factory=dict)
    targets: tuple[str, ...] = ()

    @classmethod
    def from_definitions(cls, definitions: Iterable[ParameterDefinition], targets: Iterable[str] = ()) -> ScopeIndex:
        """Build an index from already merged definitions.

        Args:
            definitions: Definitions, at most one per (scope, name)
            targets: Rule names found in the Makefile

        Returns:
            The new index
        """
        index = cls(targets=tuple(targets))
        for definition in definitions:
            index.scopes_map.setdefault(definition.scope, {})[definition.name] = definition
        return index

    def __iter__(self) -> Iterator[ParameterDefinition]:
        return self.definitions()

    def __len__(self) -> int:
        return sum(len(params) for params in self.scopes_map.values())

    def definitions(self) -> Iterator[ParameterDefinition]:
        """Yield every definition, scope by scope."""
        for params in self.scopes_map.values():
            yield from params.values()

    def scopes(self) -> list[str]:
        """Return the scopes having at least one parameter."""
        return list(self.scopes_map)

    def get(self, scope: str, name: str) -> ParameterDefinition | None:
        """Return the definition of `name` in `scope`, if any."""
        return self.scopes_map.get(scope, {}).get(name)

    def visible_to(self, target: str | None) -> Iterator[ParameterDefinition]:
        """Yield the definitions usable with `target`: global ones and the target's own.

        Args:
            target: The target being built, None or "" for global-only
        """
        for scope, params in self.scopes_map.items():
            if scope == GLOBAL_SCOPE or (target and scope == target):
                yield from params.values()

    def with_targets(self, targets: Iterable[str]) -> ScopeIndex:
        """Return a copy of this index using `targets` as rule names."""
        return ScopeIndex(scopes_map={k: dict(v) for k, v in self.scopes_map.items()}, targets=tuple(targets))


class Position(Enum):
    """Which kind of word is being completed."""

    TARGET = "target"  # first argument
    PARAM = "param"  # any later argument


class MakecompError(BaseException):
    """Used for errors which already triggered logging."""


class ExitCode(IntEnum):
    """Exit codes of the makecomp CLI."""

    SUCCESS = 0
    USAGE_ERROR = 1  # invalid arguments
    ENV_ERROR = 2  # Makefile or config missing / unreadable
    COMMAND_ERROR = 4  # command execution failed
