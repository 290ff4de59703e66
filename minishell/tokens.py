"""Splitting a command line into shell tokens."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.IntEnum):
    """Kinds of token produced by the tokenizer."""

    IDENTIFIER = 0
    LESS = 1
    GREAT = 2
    DLESS = 3
    DGREAT = 4
    PIPE = 5
    O_PARENT = 6
    C_PARENT = 7
    AND = 8
    OR = 9
    NL = 10

    @property
    def symbol(self) -> str:
        """Text used for this token type in syntax error messages."""
        return _SYMBOLS[self]


_SYMBOLS = {
    TokenType.IDENTIFIER: "T_IDENTIFIER",
    TokenType.LESS: "<",
    TokenType.GREAT: ">",
    TokenType.DLESS: "<<",
    TokenType.DGREAT: ">>",
    TokenType.PIPE: "|",
    TokenType.O_PARENT: "(",
    TokenType.C_PARENT: ")",
    TokenType.AND: "&&",
    TokenType.OR: "||",
    TokenType.NL: "newline",
}

# Checked in this order, so that two-character operators win.
_OPERATORS = (
    ("<<", TokenType.DLESS),
    (">>", TokenType.DGREAT),
    ("<", TokenType.LESS),
    (">", TokenType.GREAT),
    ("(", TokenType.O_PARENT),
    (")", TokenType.C_PARENT),
    ("&&", TokenType.AND),
    ("||", TokenType.OR),
    ("|", TokenType.PIPE),
)

_OPERATOR_STARTS = ("<", ">", "|", "&&", "(", ")")
_WORD_BREAKS = (" ", "\t", "<", ">", "|", "(", ")")
_SPACES = "\t\n\v\f\r "

# A line ending in one of these is incomplete.
_TRAILING_INVALID = frozenset(
    {
        TokenType.NL,
        TokenType.DGREAT,
        TokenType.PIPE,
        TokenType.LESS,
        TokenType.C_PARENT,
        TokenType.GREAT,
    }
)


@dataclass(frozen=True)
class Token:
    """One token: an operator (value None) or a word as typed."""

    type: TokenType
    value: str | None = None


class UnclosedQuoteError(ValueError):
    """A quote was opened and never closed."""

    exit_status = 258

    def __init__(self, quote: str) -> None:
        self.quote = quote
        super().__init__(f"unexpected EOF while looking for matching `{quote}'")


class ShellSyntaxError(ValueError):
    """The token sequence cannot form a command."""

    exit_status = 2

    def __init__(self, token_type: TokenType = TokenType.NL) -> None:
        self.token_type = token_type
        super().__init__(f"syntax error near unexpected token `{token_type.symbol}'")


def is_quote(char: str) -> bool:
    """True for a single or double quote."""
    return char in ("'", '"') and len(char) == 1


def is_space(char: str) -> bool:
    """True for a single whitespace character."""
    return len(char) == 1 and char in _SPACES


def _is_separator_at(line: str, pos: int) -> bool:
    return line.startswith("&&", pos) or line[pos : pos + 1] in _WORD_BREAKS


def is_separator(text: str) -> bool:
    """True if a word ends where ``text`` begins."""
    return _is_separator_at(text, 0)


def _scan_identifier(line: str, pos: int) -> int:
    end = pos
    while end < len(line) and not _is_separator_at(line, end):
        char = line[end]
        if is_quote(char):
            close = line.find(char, end + 1)
            if close < 0:
                raise UnclosedQuoteError(char)
            end = close + 1
        else:
            end += 1
    return end


def tokenize(line: str) -> list[Token]:
    """Split ``line`` into tokens; raise UnclosedQuoteError on a lone quote."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(line):
        if is_space(line[pos]):
            while pos < len(line) and is_space(line[pos]):
                pos += 1
        elif line.startswith(_OPERATOR_STARTS, pos):
            for text, kind in _OPERATORS:
                if line.startswith(text, pos):
                    tokens.append(Token(kind))
                    pos += len(text)
                    break
        else:
            end = _scan_identifier(line, pos)
            tokens.append(Token(TokenType.IDENTIFIER, line[pos:end]))
            pos = end
    return tokens


def check_syntax(tokens: list[Token]) -> list[Token]:
    """Return ``tokens`` unchanged, or raise ShellSyntaxError if the line is incomplete."""
    if tokens and tokens[-1].type in _TRAILING_INVALID:
        raise ShellSyntaxError(TokenType.NL)
    return tokens