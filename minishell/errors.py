"""Error kinds, exit codes and file access checks."""

from __future__ import annotations

import enum
import os

_QUOTES = ("'", '"')


class ErrorKind(enum.Enum):
    """What went wrong, which decides the message printed."""

    CMD_NOT_FOUND = enum.auto()
    NO_SUCH_FILE = enum.auto()
    PERM_DENIED = enum.auto()
    AMBIGUOUS = enum.auto()
    TOO_MANY_ARGS = enum.auto()
    NUMERIC_REQUIRED = enum.auto()


class ExitCode(enum.IntEnum):
    """Exit statuses the shell reports."""

    SUCCESS = 0
    GENERAL = 1
    CANT_EXEC = 126
    NOT_FOUND = 127
    EXEC_255 = 255


_TEMPLATES = {
    ErrorKind.CMD_NOT_FOUND: "minishell: {cause}: command not found",
    ErrorKind.NO_SUCH_FILE: "minishell: {cause}: No such file or directory",
    ErrorKind.PERM_DENIED: "minishell: {cause}: Permission denied",
    ErrorKind.AMBIGUOUS: "minishell: {cause}: ambiguous redirect",
    ErrorKind.TOO_MANY_ARGS: "minishell: exit: too many arguments",
    ErrorKind.NUMERIC_REQUIRED: "minishell: exit: {cause}: numeric argument required",
}


class ShellError(Exception):
    """A failure with the exit status it leads to and the text that caused it."""

    def __init__(
        self, exit_code: int, kind: ErrorKind, cause: str | None = None
    ) -> None:
        self.exit_code = int(exit_code)
        self.kind = kind
        self.cause = cause
        super().__init__(self.message())

    def message(self) -> str:
        """The line printed on standard error, without a trailing newline."""
        return _TEMPLATES[self.kind].format(cause=self.cause or "")


def _check(path: str | os.PathLike[str], mode: int, denied_code: int) -> str:
    text = os.fspath(path)
    if not text:
        raise ShellError(ExitCode.GENERAL, ErrorKind.NO_SUCH_FILE, text)
    if os.access(text, os.F_OK):
        if not os.access(text, mode):
            raise ShellError(denied_code, ErrorKind.PERM_DENIED, text)
        return text
    raise ShellError(ExitCode.NOT_FOUND, ErrorKind.NO_SUCH_FILE, text)


def check_exec(path: str | os.PathLike[str], is_command: bool = False) -> str:
    """Return ``path`` if it exists and is executable, else raise ShellError."""
    try:
        return _check(path, os.X_OK, ExitCode.CANT_EXEC)
    except ShellError as error:
        if is_command and error.exit_code == ExitCode.NOT_FOUND:
            raise ShellError(
                ExitCode.NOT_FOUND, ErrorKind.CMD_NOT_FOUND, error.cause
            ) from None
        raise


def check_read(path: str | os.PathLike[str]) -> str:
    """Return ``path`` if it exists and is readable, else raise ShellError."""
    return _check(path, os.R_OK, ExitCode.GENERAL)


def check_write(path: str | os.PathLike[str]) -> str:
    """Return ``path`` if it exists and is writable, else raise ShellError."""
    return _check(path, os.W_OK, ExitCode.GENERAL)


def is_delimiter(delimiter: str, line: str) -> bool:
    """True if ``line`` equals ``delimiter`` once quote characters are ignored."""
    pos = 0
    for char in line:
        while delimiter[pos : pos + 1] in _QUOTES:
            pos += 1
        if delimiter[pos : pos + 1] != char:
            return False
        pos += 1
    while delimiter[pos : pos + 1] in _QUOTES:
        pos += 1
    return pos == len(delimiter)