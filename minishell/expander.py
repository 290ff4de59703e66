"""Variable expansion, word splitting and quote removal for command words."""

from __future__ import annotations

import os

from .environment import Environment
from .tokens import UnclosedQuoteError
from .wildcard import clean_empty_strs, glob_words

_QUOTES = ("'", '"')


def is_valid_var_char(char: str) -> bool:
    """True for a character allowed in a variable name."""
    return len(char) == 1 and ((char.isascii() and char.isalnum()) or char == "_")


def _expand_dollar(
    text: str, pos: int, env: Environment, exit_status: int
) -> tuple[str, int]:
    """Expand the ``$`` at ``pos``; return the text and the position after it."""
    pos += 1
    char = text[pos : pos + 1]
    if (char.isascii() and char.isdigit()) or char == "@":
        return "", pos + 1
    if char == "?":
        return str(exit_status), pos + 1
    if not is_valid_var_char(char):
        return "$", pos
    end = pos
    while end < len(text) and is_valid_var_char(text[end]):
        end += 1
    return env.get(text[pos:end]) or "", end


def _single_quoted(text: str, pos: int) -> tuple[str, int]:
    close = text.find("'", pos + 1)
    if close < 0:
        raise UnclosedQuoteError("'")
    return text[pos : close + 1], close + 1


def _double_quoted(
    text: str, pos: int, env: Environment, exit_status: int
) -> tuple[str, int]:
    parts = ['"']
    pos += 1
    while True:
        if pos >= len(text):
            raise UnclosedQuoteError('"')
        char = text[pos]
        if char == '"':
            break
        if char == "$":
            piece, pos = _expand_dollar(text, pos, env, exit_status)
        else:
            end = pos
            while end < len(text) and text[end] not in '"$':
                end += 1
            piece, pos = text[pos:end], end
        parts.append(piece)
    parts.append('"')
    return "".join(parts), pos + 1


def pre_expand(text: str, env: Environment, exit_status: int = 0) -> str:
    """Replace variables outside single quotes, keeping the quotes in place."""
    parts: list[str] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char == "'":
            piece, pos = _single_quoted(text, pos)
        elif char == '"':
            piece, pos = _double_quoted(text, pos, env, exit_status)
        elif char == "$":
            piece, pos = _expand_dollar(text, pos, env, exit_status)
        else:
            end = pos
            while end < len(text) and text[end] not in "'\"$":
                end += 1
            piece, pos = text[pos:end], end
        parts.append(piece)
    return "".join(parts)


def split_words(text: str) -> list[str]:
    """Split on spaces that are outside quotes; quotes stay in the words."""
    words: list[str] = []
    pos = 0
    size = len(text)
    while pos < size:
        if text[pos] == " ":
            pos += 1
            continue
        start = pos
        while pos < size and text[pos] != " ":
            if text[pos] in _QUOTES:
                close = text.find(text[pos], pos + 1)
                pos = size if close < 0 else close + 1
            else:
                pos += 1
        words.append(text[start:pos])
    return words


def strip_quotes(text: str) -> str:
    """Remove quote pairs, keeping what they enclose."""
    out: list[str] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char in _QUOTES:
            close = text.find(char, pos + 1)
            if close < 0:
                out.append(text[pos + 1 :])
                break
            out.append(text[pos + 1 : close])
            pos = close + 1
        else:
            out.append(char)
            pos += 1
    return "".join(out)


def expand(
    text: str,
    env: Environment,
    exit_status: int = 0,
    directory: str | os.PathLike[str] = ".",
) -> list[str]:
    """Turn one command word into its final argument list."""
    words = split_words(clean_empty_strs(pre_expand(text, env, exit_status)))
    return [strip_quotes(word) for word in glob_words(words, directory)]


def expand_heredoc_line(line: str, env: Environment, exit_status: int = 0) -> str:
    """Expand ``$?`` and ``$NAME`` in a here-document line and add a newline.

    A name runs up to the next ``$``, space or the end of the line.
    """
    out: list[str] = []
    pos = 0
    size = len(line)
    while pos < size:
        if line[pos] != "$":
            out.append(line[pos])
            pos += 1
            continue
        pos += 1
        if line[pos : pos + 1] == "?":
            out.append(str(exit_status))
            pos += 1
            continue
        end = pos
        while end < size and line[end] not in "$ ":
            end += 1
        if end > pos:
            value = env.get(line[pos:end])
            if value:
                out.append(value)
        pos = end
    out.append("\n")
    return "".join(out)