"""The interactive read-run loop and its prompt."""

from __future__ import annotations

import contextlib
import os
import signal
import socket
import sys
from collections.abc import Iterator, Mapping
from typing import TextIO

from .builtins import ShellExit
from .environment import Environment
from .executor import Executor, ReadLine
from .tokens import (
    ShellSyntaxError,
    TokenType,
    UnclosedQuoteError,
    check_syntax,
    tokenize,
)


def build_prompt(env: Environment, cwd: str | None) -> str:
    """A ``user@host:dir$ `` prompt, with ``dir`` relative to $NAME when inside it."""
    user = env.get("USER") or ""
    home = env.get("NAME")
    if cwd is None or home is None:
        cwd = home = "unknown"
    if cwd.startswith(home):
        rel_path = cwd[len(home):]
        if rel_path.startswith("/"):
            rel_path = rel_path[1:]
    else:
        rel_path = cwd
    return f"{user}@{socket.gethostname()}:{rel_path}$ "


def _read_input(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


class Shell:
    """State kept between command lines: environment and last exit status."""

    prompt = "minishell$ "

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        *,
        read_line: ReadLine | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        source = os.environ if environ is None else environ
        self.env = Environment.from_entries(f"{k}={v}" for k, v in source.items())
        self.read_line = read_line if read_line is not None else _read_input
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.exit_status = 0
        self.executor = Executor(
            self.env, read_line=self.read_line, out=self.out, err=self.err
        )

    def run_line(self, line: str) -> int:
        """Tokenize, check and run one line; return the new exit status.

        ShellExit from the ``exit`` builtin is left to the caller.
        """
        try:
            tokens = check_syntax(tokenize(line))
            if not tokens:
                return self.exit_status
            if len(tokens) == 1 and tokens[0].type is TokenType.DLESS:
                raise ShellSyntaxError(TokenType.NL)
            self.exit_status = self.executor.execute(tokens, self.exit_status)
        except (UnclosedQuoteError, ShellSyntaxError) as error:
            self.err.write(f"minishell: {error}\n")
            self.exit_status = error.exit_status
        return self.exit_status

    def loop(self, read_line: ReadLine | None = None) -> int:
        """Read and run lines until end of input or ``exit``; return the status."""
        read = read_line if read_line is not None else self.read_line
        while True:
            try:
                line = read(self.prompt)
            except EOFError:
                line = None
            except KeyboardInterrupt:
                self.out.write("\n")
                continue
            if line is None:
                self.out.write("exit\n")
                return self.exit_status
            try:
                self.run_line(line)
            except ShellExit as request:
                return request.status


@contextlib.contextmanager
def _ignore_sigquit() -> Iterator[None]:
    if not hasattr(signal, "SIGQUIT"):
        yield
        return
    previous = signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGQUIT, previous)


@contextlib.contextmanager
def _quiet_control_chars() -> Iterator[None]:
    """Stop the terminal echoing ^C and the like while the shell runs."""
    try:
        import termios
    except ImportError:
        yield
        return
    if not sys.stdin.isatty():
        yield
        return
    fd = sys.stdin.fileno()
    original = termios.tcgetattr(fd)
    quiet = termios.tcgetattr(fd)
    quiet[3] &= ~getattr(termios, "ECHOCTL", 0)
    termios.tcsetattr(fd, termios.TCSANOW, quiet)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, original)


def main(argv: list[str] | None = None) -> int:
    """Start an interactive shell; arguments are ignored."""
    with contextlib.suppress(ImportError):
        import readline  # noqa: F401  (line editing and history for input())
    shell = Shell()
    with _ignore_sigquit(), _quiet_control_chars():
        return shell.loop()


if __name__ == "__main__":
    raise SystemExit(main())