"""CLI handler for ``makecomp compgen``: print or install the shell scripts."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..constants import DEFAULT_COMMANDS, SUPPORTED_SHELLS
from .generators import GENERATORS

if TYPE_CHECKING:
    import logging

    from ..config import Configuration

__all__ = ["DEFAULT_PATHS", "get_default_path", "get_default_paths", "handle_compgen"]

# Default user-level completion paths, {command} is the completed command
DEFAULT_PATHS = {
    "bash": "~/.local/share/bash-completion/completions/{command}",
    "zsh": "~/.zsh/completions/_{command}",
    "fish": "~/.config/fish/completions/{command}.fish",
}

_RELOAD_HINTS = {
    "bash": "bash-completion picks it up in new shells, the first time {command} is completed.",
    "zsh": (
        "Ensure ~/.zsh/completions is in your fpath. Add to ~/.zshrc, before compinit:\n"
        "  fpath=(~/.zsh/completions $fpath)\n"
        "Then run: rm -f ~/.zcompdump && exec zsh"
    ),
    "fish": "fish picks it up the next time {command} is completed.",
}


def get_default_path(shell: str, command: str = DEFAULT_COMMANDS[0]) -> str:
    """Get the default user-level completion path for a shell.

    Args:
        shell: Shell type ("bash", "zsh", or "fish")
        command: The completed command, names the file

    Returns:
        Expanded absolute path to the default completion file
    """
    return str(Path(DEFAULT_PATHS[shell].format(command=command)).expanduser())


def get_default_paths(shell: str, commands: list[str]) -> list[str]:
    """Get every file to install for `commands`.

    bash-completion and fish load completions lazily, from a file named after
    the command being completed, so each command gets its own copy. zsh reads
    the command list from the ``#compdef`` line of a single file.
    """
    if shell == "zsh":
        return [get_default_path(shell, commands[0])]
    return [get_default_path(shell, command) for command in commands]


def _parse_compgen_args(args: list[str]) -> tuple[str, str | None]:
    """Validate the arguments of ``makecomp compgen``.

    Args:
        args: Arguments after "compgen" (e.g., ["zsh"] or ["zsh", "default"])

    Returns:
        Tuple of (shell, destination), destination is None to print the script

    Raises:
        ValueError: With a message for the user
    """
    if not args or len(args) > 2:  # noqa: PLR2004
        raise ValueError(f"Usage: makecomp compgen <{'|'.join(SUPPORTED_SHELLS)}> [default|path]")

    shell, destination = args[0], (args[1] if len(args) > 1 else None)
    if shell not in SUPPORTED_SHELLS:
        raise ValueError(f"Unsupported shell: {shell}. Supported: {', '.join(SUPPORTED_SHELLS)}")
    if destination not in (None, "default") and not destination.startswith(("/", "~")):
        raise ValueError(f"Relative path {destination!r}: use an absolute path, ~/path, or 'default'.")
    return shell, destination


def handle_compgen(args: list[str], config: Configuration, log: logging.Logger) -> tuple[bool, str]:
    """Handle the compgen command.

    Args:
        args: Arguments after "compgen"
        config: The loaded configuration (provides the completed commands)
        log: Logger instance

    Returns:
        Tuple of (success, result):
        - No destination: result is the script content
        - Otherwise: result is a message saying where the script went
    """
    try:
        shell, destination = _parse_compgen_args(args)
    except ValueError as e:
        return (False, str(e))

    commands = config.get_list("commands", list(DEFAULT_COMMANDS))
    if not commands:
        return (False, "No command to complete, check the 'commands' option")

    content = GENERATORS[shell](commands)
    if destination is None:
        return (True, content)

    if destination == "default":
        output_paths = get_default_paths(shell, commands)
    else:
        output_paths = [str(Path(destination).expanduser())]

    for output_path in output_paths:
        log.debug("Writing %s completions to: %s", shell, output_path)
        try:
            Path(output_path).parent.mkdir(parents=True, exist_ok=True)
            Path(output_path).write_text(content, encoding="utf-8")
        except OSError as e:
            return (False, f"Failed to write completion file: {e}")

    shown = ", ".join(path.replace(str(Path.home()), "~", 1) for path in output_paths)
    if destination != "default":
        return (True, f"Completions written to {shown}")
    return (True, f"Completions installed to {shown}\n" + _RELOAD_HINTS[shell].format(command=commands[0]))
