"""Fish integration script."""

from __future__ import annotations

__all__ = ["generate_fish"]


def generate_fish(commands: list[str], program: str = "makecomp") -> str:
    """Generate the fish completion script.

    Args:
        commands: Commands to complete
        program: How to invoke makecomp

    Returns:
        The fish completion script content
    """
    lines = [
        f"# Fish completion for {', '.join(commands)}",
        "# Generated by: makecomp compgen fish",
        "#",
        "# Installation:",
        "#   makecomp compgen fish default",
        "",
        "function __makecomp_complete",
        "    set -l tokens (commandline -opc)",
        "    set -l current (commandline -ct)",
        f"    {program} complete --cword (count $tokens) -- $tokens $current 2>/dev/null",
        "end",
        "",
    ]
    for cmd in commands:
        lines.append(f"complete -c {cmd} -a '(__makecomp_complete)'")
    return "\n".join(lines) + "\n"
