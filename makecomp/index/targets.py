"""Rule name discovery."""

from __future__ import annotations

import re
from collections.abc import Iterable

__all__ = ["collect_targets"]

# "name:" or "name::" at the start of a line, but not "name:=" / "name::=" assignments
_RULE_PATTERN = re.compile(r"^([A-Za-z0-9_.-]+):(?!:?=)")


def collect_targets(lines: Iterable[str]) -> list[str]:
    """Return the distinct rule names of a Makefile, in order of appearance.

    Every rule qualifies, whether or not it has annotated parameters.

    Args:
        lines: The Makefile's lines

    Returns:
        Rule names
    """
    seen: dict[str, None] = {}
    for line in lines:
        match = _RULE_PATTERN.match(line)
        if match:
            seen.setdefault(match.group(1))
    return list(seen)
