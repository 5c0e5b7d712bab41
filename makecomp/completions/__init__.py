"""Completion resolution and shell integration.

This package provides:
- resolver: candidates for a target or parameter word
- session: the query interface called by the shell scripts
- generators: bash, zsh and fish integration scripts
- handlers: the ``makecomp compgen`` command
"""

from __future__ import annotations

from .generators import GENERATORS
from .handlers import get_default_path, get_default_paths, handle_compgen
from .resolver import resolve
from .session import CompletionSession, split_command_line

__all__ = [
    "GENERATORS",
    "CompletionSession",
    "get_default_path",
    "get_default_paths",
    "handle_compgen",
    "resolve",
    "split_command_line",
]
