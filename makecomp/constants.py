"""Shared constants for makecomp."""

import os
from pathlib import Path

__all__ = [
    "CACHE_DIR",
    "CACHE_SUFFIX",
    "CONFIG_FILE",
    "CONFIG_SECTION",
    "DEFAULT_COMMANDS",
    "DEFAULT_MAKEFILES",
    "DEFAULT_MARKER",
    "FIELD_SEPARATOR",
    "GLOBAL_SCOPE",
    "MODIFIER_DEFAULT",
    "MODIFIER_REQUIRED",
    "MODIFIER_TYPE",
    "SUPPORTED_SHELLS",
]

# XDG locations with the usual ~/.config and ~/.cache fallbacks
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
_xdg_cache_home = Path(os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache")
CONFIG_FILE = _xdg_config_home / "makecomp" / "config.toml"
CACHE_DIR = _xdg_cache_home / "makecomp"
CACHE_SUFFIX = ".cache"

CONFIG_SECTION = "makecomp"

# Scope name used for parameters declared before any "## TARGET" line
GLOBAL_SCOPE = "__global__"

# Reserved: separates name, scope and values in cache records
FIELD_SEPARATOR = "|"

DEFAULT_MARKER = "##"

# Lookup order used by GNU make when no -f is given
DEFAULT_MAKEFILES = ("GNUmakefile", "makefile", "Makefile")

DEFAULT_COMMANDS = ("make",)

# Annotation modifiers
MODIFIER_TYPE = "TYPE="
MODIFIER_REQUIRED = "REQUIRED"
MODIFIER_DEFAULT = "DEFAULT="

SUPPORTED_SHELLS = ("bash", "zsh", "fish")
