"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import sys
from typing import TextIO

from .environment import Environment, extract_key, extract_value
from .errors import ErrorKind, ExitCode, ShellError

_BUILTINS = frozenset({"echo", "cd", "exit", "pwd", "export", "unset", "env"})
_LONG_MAX = 2**63 - 1


class ShellExit(Exception):
    """Raised by ``exit``: the shell should stop with ``status``."""

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"exit {status}")


def remove_double_quotes(text: str) -> str:
    """Drop every double quote character."""
    return text.replace('"', "")


def is_builtin(name: str | None) -> bool:
    """True if ``name`` is one of the shell's own commands."""
    return name is not None and name in _BUILTINS


def _is_ascii_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def is_valid_key(text: str) -> bool:
    """True if the part before any ``=`` is a valid variable name."""
    if not text or not (_is_ascii_alpha(text[0]) or text[0] == "_"):
        return False
    name = text.partition("=")[0]
    return all((c.isascii() and c.isalnum()) or c == "_" for c in name[1:])


def _is_n_option(arg: str) -> bool:
    return arg.startswith("-") and all(c == "n" for c in arg[1:])


def echo(args: list[str], out: TextIO | None = None) -> int:
    """Print the arguments separated by spaces; leading ``-n`` options drop the newline."""
    out = out or sys.stdout
    pos = 0
    while pos < len(args) and _is_n_option(args[pos]):
        pos += 1
    out.write(" ".join(args[pos:]))
    if pos == 0:
        out.write("\n")
    return 0


def _cd_home(env: Environment, err: TextIO) -> int:
    env.update("OLDPWD", env.get("PWD"))
    home = env.get("HOME")
    if not home:
        err.write("minishell: cd: HOME not set\n")
        return 1
    try:
        os.chdir(home)
    except OSError:
        return 1
    env.update("PWD", home)
    return 0


def cd(env: Environment, args: list[str], err: TextIO | None = None) -> int:
    """Change directory and keep PWD and OLDPWD in step."""
    err = err or sys.stderr
    if not args:
        return _cd_home(env, err)
    try:
        os.chdir(remove_double_quotes(args[0]))
    except OSError:
        err.write(f"minishell: cd: `{args[0]}': No such file or directory\n")
        return 1
    env.update("OLDPWD", env.get("PWD"))
    try:
        cwd = os.getcwd()
    except OSError:
        return 1
    env.update("PWD", cwd)
    return 0


def pwd(out: TextIO | None = None) -> int:
    """Print the current directory."""
    out = out or sys.stdout
    try:
        cwd = os.getcwd()
    except OSError:
        return 1
    out.write(cwd + "\n")
    return 0


def print_env(env: Environment, out: TextIO | None = None) -> int:
    """Print every variable that has a value as ``NAME=value``."""
    out = out or sys.stdout
    for key, value in env.items():
        if value is not None:
            out.write(f"{key}={value}\n")
    return ExitCode.SUCCESS


def _export_list(env: Environment, out: TextIO) -> None:
    for key, value in env.items():
        if key == "_":
            continue
        if value is None:
            out.write(f"declare -x {key}\n")
        else:
            escaped = "".join("\\" + c if c in '$"' else c for c in value)
            out.write(f'declare -x {key}="{escaped}"\n')


def export(
    env: Environment,
    args: list[str],
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Define variables, or list them all when there are no arguments."""
    out = out or sys.stdout
    err = err or sys.stderr
    if not args:
        _export_list(env, out)
        return 0
    status = 0
    for arg in args:
        if not is_valid_key(arg):
            err.write(f"minishell: export: `{arg}': not a valid identifier\n")
            status = 1
        else:
            env.update(extract_key(arg), extract_value(arg), True)
    return status


def unset(env: Environment, args: list[str], err: TextIO | None = None) -> int:
    """Remove variables; invalid names are reported and give status 1."""
    err = err or sys.stderr
    failed = False
    for arg in args:
        if not is_valid_key(arg):
            err.write(f"minishell: unset: `{arg}': not a valid identifier\n")
            failed = True
        else:
            env.unset(extract_key(arg))
    return int(failed)


def _is_number(text: str) -> bool:
    return all(c.isascii() and c.isdigit() for c in text)


def _exit_status_of(text: str) -> int:
    rest = text.lstrip(" ")
    sign = 1
    if rest[:1] in ("+", "-"):
        if rest[0] == "-":
            sign = -1
        rest = rest[1:]
    if not _is_number(rest):
        raise ShellError(ExitCode.EXEC_255, ErrorKind.NUMERIC_REQUIRED, text)
    result = 0
    for char in rest:
        result = result * 10 + int(char)
        if result > _LONG_MAX:
            raise ShellError(ExitCode.EXEC_255, ErrorKind.NUMERIC_REQUIRED, text)
    return (result * sign) % 256


def exit_builtin(
    args: list[str], last_status: int = 0, err: TextIO | None = None
) -> None:
    """Raise ShellExit with the status the arguments ask for."""
    err = err or sys.stderr
    status = last_status
    if args:
        if len(args) > 1 and _is_number(args[0]):
            error = ShellError(ExitCode.GENERAL, ErrorKind.TOO_MANY_ARGS)
            err.write(error.message() + "\n")
            raise ShellExit(error.exit_code)
        try:
            status = _exit_status_of(args[0])
        except ShellError as error:
            err.write(error.message() + "\n")
            raise ShellExit(error.exit_code) from None
    raise ShellExit(status)


def run_builtin(
    args: list[str],
    env: Environment,
    last_status: int = 0,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Run the builtin named by ``args[0]`` and return its status."""
    if not args or not is_builtin(args[0]):
        raise ValueError(f"not a builtin: {args[0] if args else ''!r}")
    name, rest = args[0], args[1:]
    if name == "echo":
        return echo(rest, out)
    if name == "cd":
        return cd(env, rest, err)
    if name == "env":
        return print_env(env, out)
    if name == "pwd":
        return pwd(out)
    if name == "export":
        return export(env, rest, out, err)
    if name == "unset":
        return unset(env, rest, err)
    exit_builtin(rest, last_status, err)
    return ExitCode.GENERAL