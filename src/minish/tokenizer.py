"""Whitespace tokenization of command lines."""

from __future__ import annotations


def split_line(line: str) -> list[str]:
    """Split a command line into its argument vector.

    Tokens are separated by runs of whitespace. There is no quoting or
    escaping: ``echo "a b"`` yields ``['echo', '"a', 'b"']``.
    """
    return line.split()
