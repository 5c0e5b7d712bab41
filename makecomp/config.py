"""Configuration schema and typed access."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .constants import CACHE_DIR, DEFAULT_COMMANDS, DEFAULT_MAKEFILES, DEFAULT_MARKER

if TYPE_CHECKING:
    import logging

__all__ = [
    "BOOL_FALSE_STRINGS",
    "BOOL_STRINGS",
    "BOOL_TRUE_STRINGS",
    "CONFIG_SCHEMA",
    "ConfigField",
    "ConfigItems",
    "Configuration",
    "coerce_to_bool",
]

ConfigValueType = float | bool | str | list | dict

BOOL_TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "enabled"})
BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})
BOOL_STRINGS = BOOL_TRUE_STRINGS | BOOL_FALSE_STRINGS


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Returns:
        The boolean value

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


@dataclass
class ConfigField:
    """Describes an expected configuration key.

    Attributes:
        name: The configuration key name
        field_type: Expected type (str, bool, list) or tuple of types for union
        default: Default value if not provided
        description: Human-readable description for error messages
    """

    name: str
    field_type: type | tuple[type, ...] = str
    default: Any = None
    description: str = ""

    @property
    def type_name(self) -> str:
        """Return human-readable type name (e.g., 'list or str')."""
        if isinstance(self.field_type, tuple):
            return " or ".join(typ.__name__ for typ in self.field_type)
        return self.field_type.__name__

    def accepts(self, value: ConfigValueType) -> bool:
        """Check that `value` can be read with this field's type."""
        types = self.field_type if isinstance(self.field_type, tuple) else (self.field_type,)
        for typ in types:
            if typ is bool and (isinstance(value, bool) or (isinstance(value, str) and value.lower().strip() in BOOL_STRINGS)):
                return True
            if typ is list and isinstance(value, list) and all(isinstance(item, str) for item in value):
                return True
            if typ is str and isinstance(value, str):
                return True
        return False


class ConfigItems(list):
    """A list of ConfigField items with lookup by name."""

    def __init__(self, *args: ConfigField) -> None:
        super().__init__(args)

    def get(self, name: str) -> ConfigField | None:
        """Get a ConfigField by name."""
        for prop in self:
            if prop.name == name:
                return prop
        return None

    def names(self) -> list[str]:
        """Return every known key."""
        return [prop.name for prop in self]


CONFIG_SCHEMA = ConfigItems(
    ConfigField("marker", str, DEFAULT_MARKER, "Comment sequence introducing an annotation"),
    ConfigField("cache_dir", str, str(CACHE_DIR), "Directory holding the index caches"),
    ConfigField("makefiles", (list, str), list(DEFAULT_MAKEFILES), "Makefile names, in lookup order"),
    ConfigField("commands", (list, str), list(DEFAULT_COMMANDS), "Commands the shell scripts complete"),
    ConfigField("use_cache", bool, True, "Persist parsed annotations between completions"),
)


class Configuration(dict):
    """The ``[makecomp]`` section, with schema defaults and typed getters."""

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        schema: ConfigItems = CONFIG_SCHEMA,
        **kwargs: Any,  # noqa: ANN401
    ):
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            schema: ConfigField definitions providing defaults
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.log = logger
        self.schema = schema
        self._defaults = {f.name: f.default for f in schema if f.default is not None}

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        """Get a value, falling back to the schema default then to `default`."""
        if name in self:
            return dict.get(self, name)  # type: ignore[no-any-return]
        return self._defaults.get(name, default)

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean value, see `coerce_to_bool`."""
        return coerce_to_bool(self.get(name), default)

    def get_str(self, name: str, default: str = "") -> str:
        """Get a string value."""
        value = self.get(name)
        if value is None:
            return default
        return str(value)

    def get_list(self, name: str, default: list[str] | None = None) -> list[str]:
        """Get a list of strings; a single string becomes a one-item list."""
        value = self.get(name)
        if value is None:
            return list(default or [])
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [str(v) for v in value]
        self.log.warning("Invalid list value for %s: %s", name, value)
        return list(default or [])

    def get_path(self, name: str) -> Path:
        """Get a path, expanding ``~`` and environment variables."""
        return Path(os.path.expandvars(self.get_str(name))).expanduser()
