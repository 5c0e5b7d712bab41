"""Makefile annotation index.

This package provides:
- parsing: ``## TARGET`` / ``## PARAM`` annotations -> ScopeIndex
- targets: rule names found in a Makefile
- cache: flat-file persistence and freshness checks
"""

from .cache import IndexCache, deserialize, serialize
from .parsing import parse
from .targets import collect_targets

__all__ = [
    "IndexCache",
    "collect_targets",
    "deserialize",
    "parse",
    "serialize",
]
