"""Flat-file index cache.

One record per parameter definition::

    <name>|<scope>|<value1> <value2> ... <valueN>

Only names, scopes and values are persisted: type, REQUIRED and DEFAULT are
lost on a round trip. The cache never holds unique data and is rebuilt from
the Makefile whenever it is missing, older than the Makefile, or unreadable.
"""

from __future__ import annotations

import hashlib
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from ..constants import CACHE_SUFFIX, DEFAULT_MARKER, FIELD_SEPARATOR
from ..logging_setup import get_logger
from ..models import ParameterDefinition, ScopeIndex
from .parsing import parse
from .targets import collect_targets

if TYPE_CHECKING:
    import logging

__all__ = ["IndexCache", "deserialize", "read_lines", "serialize"]

_RECORD_FIELDS = 3


def serialize(index: ScopeIndex) -> str:
    """Render an index in the cache format.

    Args:
        index: The index to persist

    Returns:
        The cache file content, one line per definition
    """
    return "".join(f"{d.name}{FIELD_SEPARATOR}{d.scope}{FIELD_SEPARATOR}{' '.join(d.values)}\n" for d in index.definitions())


def deserialize(text: str) -> ScopeIndex:
    """Read an index from the cache format.

    Several records for the same name and scope are merged, values appended.
    Records without exactly three fields are skipped.

    Args:
        text: The cache file content

    Returns:
        The index, without targets
    """
    merged: dict[tuple[str, str], list[str]] = {}
    for line in text.splitlines():
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) != _RECORD_FIELDS:
            continue
        name, scope, values = (f.strip() for f in fields)
        if not name or not scope:
            continue
        merged.setdefault((scope, name), []).extend(values.split())
    return ScopeIndex.from_definitions(ParameterDefinition(name=name, scope=scope, values=tuple(values)) for (scope, name), values in merged.items())


def read_lines(path: Path) -> list[str]:
    """Read a text file, replacing undecodable bytes."""
    return path.read_text(encoding="utf-8", errors="replace").splitlines()


def _mtime(path: Path) -> int | None:
    try:
        return path.stat().st_mtime_ns
    except OSError:
        return None


class IndexCache:
    """Keeps one cache file per Makefile under `cache_dir`.

    Attributes:
        cache_dir: Directory holding the cache files.
        marker: Annotation marker used when (re)parsing.
        enabled: When False, never reads nor writes cache files.
    """

    def __init__(self, cache_dir: Path, marker: str = DEFAULT_MARKER, log: logging.Logger | None = None, enabled: bool = True) -> None:
        """Initialize the index cache.

        Args:
            cache_dir: Directory for cache files, created on first write
            marker: Annotation marker
            log: Logger for diagnostics
            enabled: Set to False to always parse in memory
        """
        self.cache_dir = cache_dir
        self.marker = marker
        self.enabled = enabled
        self.log = log or get_logger("cache")

    def cache_path_for(self, source_path: Path) -> Path:
        """Return the cache file used for a Makefile.

        Different Makefiles never share a cache file, and neither do two
        markers: changing the marker never serves an index parsed with the old one.

        Args:
            source_path: Path to the Makefile

        Returns:
            Path to the cache file (may or may not exist)
        """
        key = hashlib.sha256(f"{self.marker}\0{source_path.resolve()}".encode()).hexdigest()[:32]
        return self.cache_dir / f"{key}{CACHE_SUFFIX}"

    def is_fresh(self, source_path: Path, cache_path: Path) -> bool:
        """Check that the cache exists and is not older than the Makefile.

        Args:
            source_path: Path to the Makefile
            cache_path: Path to the cache file

        Returns:
            True if the cache can be used as is
        """
        cache_mtime = _mtime(cache_path)
        if cache_mtime is None:
            return False
        source_mtime = _mtime(source_path)
        return source_mtime is not None and source_mtime <= cache_mtime

    def load(self, cache_path: Path) -> ScopeIndex | None:
        """Read a cache file.

        Returns:
            The index, or None if the file can't be read
        """
        try:
            text = cache_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self.log.info("Ignoring unreadable cache %s: %s", cache_path, e)
            return None
        return deserialize(text)

    def store(self, index: ScopeIndex, cache_path: Path) -> bool:
        """Write a cache file, replacing it atomically.

        Returns:
            True on success, False if the file could not be written
        """
        try:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=cache_path.parent, prefix=".", suffix=CACHE_SUFFIX)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(serialize(index))
                os.replace(tmp_name, cache_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            self.log.warning("Cannot write cache %s: %s", cache_path, e)
            return False
        self.log.debug("Cache written to %s", cache_path)
        return True

    def ensure_fresh(self, source_path: Path, cache_path: Path | None = None) -> ScopeIndex:
        """Return an up-to-date index for a Makefile.

        Parses the Makefile and rewrites the cache if the cache is missing,
        older than the Makefile or unreadable; loads the cache otherwise.
        If the cache can't be written the freshly parsed index is returned anyway.

        Args:
            source_path: Path to the Makefile
            cache_path: Cache file to use, derived from `source_path` if omitted

        Returns:
            The index, empty if the Makefile can't be read
        """
        try:
            lines = read_lines(source_path)
        except OSError as e:
            self.log.debug("Cannot read %s: %s", source_path, e)
            return ScopeIndex()

        if not self.enabled:
            return parse(lines, self.marker, self.log).with_targets(collect_targets(lines))

        if cache_path is None:
            cache_path = self.cache_path_for(source_path)

        if self.is_fresh(source_path, cache_path):
            cached = self.load(cache_path)
            if cached is not None:
                self.log.debug("Using cache %s", cache_path)
                return cached.with_targets(collect_targets(lines))

        self.log.debug("Parsing %s", source_path)
        index = parse(lines, self.marker, self.log)
        self.store(index, cache_path)
        return index.with_targets(collect_targets(lines))

    def clear(self) -> int:
        """Remove every cache file.

        Returns:
            Number of files removed
        """
        removed = 0
        if not self.cache_dir.is_dir():
            return removed
        for file in self.cache_dir.glob(f"*{CACHE_SUFFIX}"):
            if file.is_file():
                file.unlink()
                removed += 1
        return removed
