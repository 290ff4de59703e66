"""Star-pattern matching and expansion of words against a directory."""

from __future__ import annotations

import os
from collections.abc import Iterable

_QUOTES = ("'", '"')


def match_star(pattern: str, text: str) -> bool:
    """True if ``text`` matches ``pattern``, where an unquoted ``*`` matches any run.

    Quote characters in the pattern switch quoting on and off; a ``*`` inside
    quotes is compared literally.
    """
    p = 0
    s = 0
    quotes = ""
    last_wild: int | None = None
    last_match = 0
    while s < len(text):
        char = pattern[p : p + 1]
        if char in _QUOTES and char:
            if not quotes:
                quotes = char
                p += 1
            elif quotes == char:
                quotes = ""
                p += 1
        if pattern[p : p + 1] == "*" and not quotes:
            while pattern[p : p + 1] == "*":
                p += 1
            if p == len(pattern):
                return True
            last_wild = p
            last_match = s
        if pattern[p : p + 1] == text[s]:
            p += 1
            s += 1
        elif last_wild is not None:
            last_match += 1
            s = last_match
            p = last_wild
        else:
            return False
    while pattern[p : p + 1] == "*":
        p += 1
    return p == len(pattern)


def clean_empty_strs(text: str) -> str:
    """Drop empty quote pairs such as ``''`` and ``""`` unless they are the whole text."""
    if text in ("''", '""'):
        return text
    out: list[str] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char in _QUOTES and text[pos + 1 : pos + 2] == char:
            pos += 2
        else:
            out.append(char)
            pos += 1
    return "".join(out)


def contains_asterisk(text: str) -> bool:
    """True if ``text`` has a ``*`` anywhere."""
    return "*" in text


def _directory_entries(directory: str | os.PathLike[str]) -> list[str]:
    return [".", ".."] + sorted(os.listdir(directory))


def _same_visibility(pattern: str, name: str) -> bool:
    return pattern.startswith(".") == name.startswith(".")


def glob_word(word: str, directory: str | os.PathLike[str] = ".") -> list[str]:
    """Expand ``word`` against the entries of ``directory``.

    A word without ``*``, or one that matches nothing, is returned unchanged.
    Hidden entries only match patterns that start with a dot.
    """
    if not contains_asterisk(word):
        return [word]
    entries = _directory_entries(directory)
    if not any(match_star(word, entry) for entry in entries):
        return [word]
    return [
        entry
        for entry in entries
        if match_star(word, entry) and _same_visibility(word, entry)
    ]


def glob_words(
    words: Iterable[str], directory: str | os.PathLike[str] = "."
) -> list[str]:
    """Expand every word and join the results in order."""
    return [match for word in words for match in glob_word(word, directory)]