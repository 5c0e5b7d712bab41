"""Logging setup for the makecomp CLI.

Completion runs inside the user's interactive shell, so nothing but
candidates may reach stdout: every diagnostic goes to stderr (which the
generated shell scripts discard) or to a debug file.
"""

import logging
import os
import sys

__all__ = [
    "ROOT_LOGGER",
    "LogObjects",
    "get_logger",
    "init_logger",
    "is_debug",
    "set_debug",
]

ROOT_LOGGER = "makecomp"

_ESC = "\x1b["
_RESET = f"{_ESC}0m"

# level -> SGR codes
_LEVEL_STYLES = {
    logging.WARNING: "33;2",
    logging.ERROR: "31;2",
    logging.CRITICAL: "31;1",
}


class _DebugState:
    """Mutable debug flag, seeded from the MAKECOMP_DEBUG environment variable."""

    value: bool = bool(os.environ.get("MAKECOMP_DEBUG"))


_debug_state = _DebugState()


def is_debug() -> bool:
    """Return the current debug state."""
    return _debug_state.value


def set_debug(value: bool) -> None:
    """Set the debug state."""
    _debug_state.value = value


def _should_colorize() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    return sys.stderr.isatty()


class LogObjects:
    """Handlers shared by every logger returned from `get_logger`."""

    handlers: list[logging.Handler] = []


class ScreenLogFormatter(logging.Formatter):
    """Stderr formatter, coloring warnings and errors when the terminal allows it."""

    def __init__(self) -> None:
        fmt = r"%(name)18s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"makecomp: %(message)s"
        super().__init__(fmt)
        self._colors = _should_colorize()

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        style = _LEVEL_STYLES.get(record.levelno)
        if self._colors and style:
            return f"{_ESC}{style}m{text}{_RESET}"
        return text


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Initialize the logging system.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
    """
    if force_debug:
        set_debug(True)

    LogObjects.handlers.clear()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    else:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(ScreenLogFormatter())
        LogObjects.handlers.append(stream_handler)


def get_logger(name: str = ROOT_LOGGER, level: int | None = None) -> logging.Logger:
    """Return a named logger, under the ``makecomp`` namespace.

    Args:
        name (str): logger's name, "cache" gives "makecomp.cache"
        level (int): logger's level (auto if not set)

    Returns:
        The logger instance
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    logger = logging.getLogger(name)
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    else:
        logger.setLevel(level)
    logger.propagate = False
    for handler in [h for h in logger.handlers if h not in LogObjects.handlers]:
        logger.removeHandler(handler)  # left by a previous init_logger
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.debug('Logger "%s" initialized', name)
    return logger
