"""Query interface used by the shell integration scripts.

Turns a command line (token array and cursor index, or the raw line up to the
cursor) into a resolver call against the current directory's Makefile.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..constants import DEFAULT_MAKEFILES
from ..index.cache import IndexCache
from ..models import Position
from .resolver import resolve

if TYPE_CHECKING:
    import logging

    from ..config import Configuration

__all__ = ["CompletionSession", "split_command_line"]


def split_command_line(line: str) -> tuple[list[str], int]:
    """Split the command line up to the cursor into words.

    A trailing blank means a new, still empty, word is being typed.

    Args:
        line: The command line, truncated at the cursor

    Returns:
        Tuple of (words, index of the word under the cursor)
    """
    words = line.split()
    if not words or line[-1:].isspace():
        words.append("")
    return words, len(words) - 1


class CompletionSession:
    """Completes one command line, degrading to no candidates on any I/O problem."""

    def __init__(self, config: Configuration, log: logging.Logger) -> None:
        self.config = config
        self.log = log
        self.cache = IndexCache(
            config.get_path("cache_dir"),
            marker=config.get_str("marker"),
            log=log,
            enabled=config.get_bool("use_cache", True),
        )

    def find_source(self, directory: Path | None = None) -> Path | None:
        """Return the Makefile make would read in `directory`.

        Args:
            directory: Where to look, current directory if omitted

        Returns:
            The Makefile path, or None if there is none
        """
        base = directory or Path.cwd()
        for name in self.config.get_list("makefiles", list(DEFAULT_MAKEFILES)):
            candidate = base / name
            if candidate.is_file():
                return candidate
        return None

    def complete(self, words: list[str], cword: int, source: Path | None = None) -> list[str]:
        """Return the candidates for ``words[cword]``.

        ``words[0]`` is the command itself: position 1 completes targets,
        later positions complete parameters of the target in ``words[1]``.

        Args:
            words: The command line's words
            cword: Index of the word under the cursor, may equal len(words)
            source: The Makefile, looked up in the current directory if omitted

        Returns:
            The candidates, empty when nothing applies
        """
        if cword < 1 or cword > len(words):
            return []
        partial = words[cword] if cword < len(words) else ""
        position = Position.TARGET if cword == 1 else Position.PARAM
        target = words[1] if position is Position.PARAM and len(words) > 1 else None

        try:
            if source is None:
                source = self.find_source()
            if source is None:
                self.log.debug("No Makefile found")
                return []
            index = self.cache.ensure_fresh(source)
        except (OSError, UnicodeDecodeError):
            self.log.exception("Completion failed for %s", source)
            return []

        candidates = resolve(index, target, partial, position)
        self.log.debug("%s %r (target=%s): %d candidates", position.value, partial, target, len(candidates))
        return candidates

    def complete_line(self, line: str, source: Path | None = None) -> list[str]:
        """Same as `complete`, from the raw command line up to the cursor."""
        words, cword = split_command_line(line)
        return self.complete(words, cword, source)
