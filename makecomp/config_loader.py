"""Configuration file loading.

Reads the ``[makecomp]`` section of a TOML file into a `Configuration`.
"""

from __future__ import annotations

import difflib
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .config import CONFIG_SCHEMA, Configuration
from .constants import CONFIG_FILE, CONFIG_SECTION
from .models import MakecompError

if TYPE_CHECKING:
    import logging

__all__ = ["ConfigLoader", "find_similar_key"]


def find_similar_key(unknown_key: str, known_keys: list[str]) -> str | None:
    """Find a similar key using fuzzy matching.

    Args:
        unknown_key: The unknown key to find a match for
        known_keys: List of valid keys to search

    Returns:
        The closest matching key, or None if no close match found
    """
    matches = difflib.get_close_matches(unknown_key, known_keys, n=1)
    if matches:
        return matches[0]
    return None


class ConfigLoader:
    """Loads the configuration file, falling back to defaults when it's absent."""

    def __init__(self, log: logging.Logger) -> None:
        """Initialize the config loader.

        Args:
            log: Logger instance for status and error messages
        """
        self.log = log

    def resolve_path(self, config_filename: str = "") -> Path:
        """Return the configuration file to read.

        Args:
            config_filename: Explicit path, default location if empty
        """
        if config_filename:
            return Path(os.path.expandvars(config_filename)).expanduser()
        return CONFIG_FILE

    def load(self, config_filename: str = "") -> Configuration:
        """Load the configuration.

        Args:
            config_filename: Optional path to the config file

        Returns:
            The configuration, defaults only if the file doesn't exist

        Raises:
            MakecompError: If the file has syntax errors or can't be read
        """
        fname = self.resolve_path(config_filename)
        if not fname.exists():
            if config_filename:
                self.log.warning("Config file not found: %s", fname)
            return Configuration(logger=self.log)

        self.log.debug("Loading %s", fname)
        try:
            with fname.open("rb") as f:
                document = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            self.log.critical("Problem reading %s: %s", fname, e)
            raise MakecompError from e
        except OSError as e:
            self.log.critical("Cannot open %s: %s", fname, e)
            raise MakecompError from e

        section = document.get(CONFIG_SECTION, {})
        if not isinstance(section, dict):
            self.log.critical("[%s] must be a table in %s", CONFIG_SECTION, fname)
            raise MakecompError
        self.warn_unknown_keys(section)
        invalid = self.check_types(section)
        return Configuration({k: v for k, v in section.items() if k not in invalid}, logger=self.log)

    def warn_unknown_keys(self, section: dict[str, Any]) -> list[str]:
        """Log a warning for each key the schema doesn't know.

        Returns:
            The warning messages
        """
        known = CONFIG_SCHEMA.names()
        warnings = []
        for key in section:
            if key in known:
                continue
            msg = f"Unknown option '{key}' in [{CONFIG_SECTION}]"
            suggestion = find_similar_key(key, known)
            if suggestion:
                msg += f", did you mean '{suggestion}'?"
            self.log.warning(msg)
            warnings.append(msg)
        return warnings

    def check_types(self, section: dict[str, Any]) -> list[str]:
        """Log an error for each known key holding a value of the wrong type.

        The default is used instead of such values.

        Returns:
            The offending keys
        """
        invalid = []
        for key, value in section.items():
            field_def = CONFIG_SCHEMA.get(key)
            if field_def is None or field_def.accepts(value):
                continue
            self.log.error(
                "Config error for '%s' (%s): expected %s, got %s, using the default",
                key,
                field_def.description,
                field_def.type_name,
                type(value).__name__,
            )
            invalid.append(key)
        return invalid
