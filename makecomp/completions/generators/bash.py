"""Bash integration script.

Relies on bash-completion's ``_init_completion``, which also provides the
user-level completions directory the script is installed to.
"""

from __future__ import annotations

import shlex

__all__ = ["generate_bash"]


def generate_bash(commands: list[str], program: str = "makecomp") -> str:
    """Generate the bash completion script.

    Args:
        commands: Commands to complete (e.g. ["make", "gmake"])
        program: How to invoke makecomp

    Returns:
        The bash completion script content
    """
    cmd_list = " ".join(shlex.quote(c) for c in commands)

    return f"""# Bash completion for {", ".join(commands)}
# Generated by: makecomp compgen bash
#
# Installation:
#   makecomp compgen bash default
#   or source this file from ~/.bashrc (needs the bash-completion package)

_makecomp_complete() {{
    local cur prev words cword
    _init_completion -n = || return

    local IFS=$'\\n'
    local -a candidates
    candidates=($({shlex.quote(program)} complete --cword "$cword" -- "${{words[@]}}" 2>/dev/null))

    # readline still breaks words on '=': only replace what follows it
    if [[ "$cur" == *=* && "$COMP_WORDBREAKS" == *=* ]]; then
        local prefix="${{cur%=*}}="
        candidates=("${{candidates[@]#"$prefix"}}")
    fi

    COMPREPLY=("${{candidates[@]}}")
    return 0
}}

complete -o default -F _makecomp_complete {cmd_list}
"""
