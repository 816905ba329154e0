"""Mechanical word counting used for reminder gating."""

from __future__ import annotations


def count_words(text: str | None) -> int:
    """Count whitespace-delimited tokens, like `wc -w`.

    No language-aware tokenization: any run of whitespace (spaces, tabs,
    newlines, carriage returns, Unicode spaces, the byte order mark)
    separates two words.
    """
    if not text:
        return 0
    return len(text.replace("\ufeff", " ").split())
