"""Annotation parser.

Recognized lines (the marker must start the line)::

    ## TARGET <target>
    ## PARAM <name>: <value>...
    ## PARAM <name> [TYPE=<type>] [REQUIRED] [DEFAULT=<value>]

Anything else, including incomplete annotations, is ignored.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import partial, reduce
from typing import TYPE_CHECKING

from ..constants import DEFAULT_MARKER, FIELD_SEPARATOR, GLOBAL_SCOPE, MODIFIER_DEFAULT, MODIFIER_REQUIRED, MODIFIER_TYPE
from ..logging_setup import get_logger
from ..models import ParameterDefinition, ScopeIndex

if TYPE_CHECKING:
    import logging

__all__ = ["classify_token", "parse", "parse_definitions"]

TARGET_KEYWORD = "TARGET"
PARAM_KEYWORD = "PARAM"


@dataclass
class _Builder:
    """Mutable definition, merged across every line declaring the same (scope, name)."""

    name: str
    scope: str
    values: list[str] = field(default_factory=list)
    type: str | None = None
    required: bool = False
    default: str | None = None

    def freeze(self) -> ParameterDefinition:
        return ParameterDefinition(
            name=self.name,
            scope=self.scope,
            values=tuple(self.values),
            type=self.type,
            required=self.required,
            default=self.default,
        )


@dataclass
class _ParseState:
    """Accumulator threaded through the fold over the lines."""

    log: logging.Logger
    scope: str | None = GLOBAL_SCOPE  # None: inside an invalid TARGET section
    builders: dict[tuple[str, str], _Builder] = field(default_factory=dict)


def classify_token(token: str) -> tuple[str, str]:
    """Classify a word following a parameter name.

    Args:
        token: A single whitespace-free word

    Returns:
        Tuple of (kind, payload) where kind is "type", "required", "default" or "value"
    """
    if token.startswith(MODIFIER_TYPE):
        return ("type", token[len(MODIFIER_TYPE) :])
    if token == MODIFIER_REQUIRED:
        return ("required", "")
    if token.startswith(MODIFIER_DEFAULT):
        return ("default", token[len(MODIFIER_DEFAULT) :])
    return ("value", token)


def _apply_param(state: _ParseState, words: list[str], lineno: int) -> None:
    """Merge one PARAM line into the current scope's definition."""
    log = state.log
    if state.scope is None:
        log.debug("line %d: PARAM under an invalid TARGET, ignored", lineno)
        return
    if not words:
        log.debug("line %d: PARAM without a name, ignored", lineno)
        return
    name = words[0].removesuffix(":")
    if not name or FIELD_SEPARATOR in name:
        log.debug("line %d: invalid parameter name %r, ignored", lineno, words[0])
        return

    key = (state.scope, name)
    builder = state.builders.get(key)
    if builder is None:
        builder = state.builders[key] = _Builder(name=name, scope=state.scope)

    for token in words[1:]:
        kind, payload = classify_token(token)
        if kind == "type":
            builder.type = payload
        elif kind == "required":
            builder.required = True
        elif kind == "default":
            builder.default = payload
        elif FIELD_SEPARATOR in payload:
            log.debug("line %d: value %r contains %r, ignored", lineno, payload, FIELD_SEPARATOR)
        else:
            if "=" in payload and payload.split("=", 1)[0].isupper():
                # probably a misspelled modifier, still a value
                log.debug("line %d: %s: treating %r as a value", lineno, name, payload)
            builder.values.append(payload)


def _step(marker: str, state: _ParseState, numbered_line: tuple[int, str]) -> _ParseState:
    lineno, line = numbered_line
    if not line.startswith(marker):
        return state
    words = line[len(marker) :].split()
    # the marker must be followed by whitespace: "###" or "##PARAM" are plain comments
    if not words or not line[len(marker) : len(marker) + 1].isspace():
        return state

    keyword, rest = words[0], words[1:]
    if keyword == TARGET_KEYWORD:
        if not rest:
            state.log.debug("line %d: TARGET without a name, ignored", lineno)
        elif FIELD_SEPARATOR in rest[0] or rest[0] == GLOBAL_SCOPE:
            state.log.debug("line %d: reserved target name %r, its parameters are ignored", lineno, rest[0])
            state.scope = None
        else:
            state.scope = rest[0]
    elif keyword == PARAM_KEYWORD:
        _apply_param(state, rest, lineno)
    return state


def parse_definitions(lines: Iterable[str], marker: str = DEFAULT_MARKER, log: logging.Logger | None = None) -> list[ParameterDefinition]:
    """Parse annotation lines into merged definitions.

    Args:
        lines: The Makefile's lines (with or without line endings)
        marker: Comment sequence introducing an annotation
        log: Receives the reasons lines were ignored (debug level)

    Returns:
        One definition per (scope, name), in first-declaration order
    """
    initial = _ParseState(log=log or get_logger("parsing"))
    state = reduce(partial(_step, marker), enumerate(lines, start=1), initial)
    return [builder.freeze() for builder in state.builders.values()]


def parse(lines: Iterable[str], marker: str = DEFAULT_MARKER, log: logging.Logger | None = None) -> ScopeIndex:
    """Parse annotation lines into a ScopeIndex.

    Pure function: never raises on malformed input and does not look at rule
    names (see `collect_targets`).

    Args:
        lines: The Makefile's lines
        marker: Comment sequence introducing an annotation
        log: Logger for ignored lines, see `parse_definitions`

    Returns:
        The index of every declared parameter
    """
    return ScopeIndex.from_definitions(parse_definitions(lines, marker, log))
