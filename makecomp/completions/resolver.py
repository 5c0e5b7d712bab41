"""Completion resolution: (index, target, partial word) -> candidates."""

from __future__ import annotations

from collections.abc import Iterator

from ..models import Position, ScopeIndex

__all__ = ["param_candidates", "resolve"]


def param_candidates(index: ScopeIndex, target: str | None) -> Iterator[str]:
    """Yield every ``name=value`` assignment usable with `target`.

    Args:
        index: The parameter index
        target: The target being built, None for global parameters only
    """
    for definition in index.visible_to(target):
        for value in definition.values:
            yield f"{definition.name}={value}"


def resolve(index: ScopeIndex, target: str | None, partial: str, position: Position) -> list[str]:
    """Return the completions of `partial`.

    Plain prefix matching, duplicates collapsed, order following the index.
    Unknown targets only get global parameters; nothing here raises.

    Args:
        index: The parameter index
        target: The target named on the command line (ignored for Position.TARGET)
        partial: The word being completed, possibly empty
        position: Whether a target or a parameter is being completed

    Returns:
        The candidates
    """
    candidates = index.targets if position is Position.TARGET else param_candidates(index, target)
    return list(dict.fromkeys(c for c in candidates if c.startswith(partial)))
