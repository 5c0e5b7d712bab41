"""Zsh integration script."""

from __future__ import annotations

__all__ = ["generate_zsh"]


def generate_zsh(commands: list[str], program: str = "makecomp") -> str:
    """Generate the zsh completion script.

    Args:
        commands: Commands to complete
        program: How to invoke makecomp

    Returns:
        The zsh completion script content
    """
    cmd_list = " ".join(commands)

    return f"""#compdef {cmd_list}
# Zsh completion for {", ".join(commands)}
# Generated by: makecomp compgen zsh
#
# Installation:
#   makecomp compgen zsh default
#   then add ~/.zsh/completions to fpath before compinit in ~/.zshrc

_makecomp_complete() {{
    local -a candidates
    candidates=(${{(f)"$({program} complete --cword $((CURRENT - 1)) -- "${{words[@]}}" 2>/dev/null)"}})
    if (( ${{#candidates}} )); then
        compadd -Q -- "${{candidates[@]}}"
    else
        _files
    fi
}}

_makecomp_complete "$@"
"""
