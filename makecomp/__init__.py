"""makecomp - annotation-driven shell completion for make.

Reads ``## TARGET`` / ``## PARAM`` comments from a Makefile, keeps a
per-Makefile index cache, and resolves the word under the cursor to target
names or ``name=value`` suggestions for bash, zsh and fish.
"""
