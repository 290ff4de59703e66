"""Running tokenized command lines: pipelines, redirections and here-documents."""

from __future__ import annotations

import contextlib
import copy
import io
import os
import subprocess
import sys
import tempfile
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import IO, Optional, TextIO, Union

from .builtins import ShellExit, is_builtin, run_builtin
from .environment import Environment
from .errors import (
    ErrorKind,
    ExitCode,
    ShellError,
    check_read,
    check_write,
    is_delimiter,
)
from .expander import expand, expand_heredoc_line
from .pathsearch import resolve_command
from .tokens import ShellSyntaxError, Token, TokenType

ReadLine = Callable[[str], Optional[str]]

_INTERRUPTED = 130
_REDIRECTIONS = frozenset(
    {TokenType.LESS, TokenType.GREAT, TokenType.DGREAT, TokenType.DLESS}
)


def exit_status_from(returncode: int) -> int:
    """Shell status for a child's return code; a signal N gives 128 + N."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def split_pipeline(tokens: list[Token]) -> list[list[Token]]:
    """Split tokens into the commands separated by ``|``."""
    segments: list[list[Token]] = [[]]
    for token in tokens:
        if token.type is TokenType.PIPE:
            segments.append([])
        else:
            segments[-1].append(token)
    return segments


def expand_args(
    tokens: list[Token],
    env: Environment,
    exit_status: int = 0,
    directory: str | os.PathLike[str] = ".",
) -> list[str]:
    """Arguments from the leading words; each word gives its first expansion."""
    args: list[str] = []
    for token in tokens:
        if token.type is not TokenType.IDENTIFIER or token.value is None:
            break
        words = expand(token.value, env, exit_status, directory)
        if words:
            args.append(words[0])
    return args


def collect_heredoc(
    delimiter: str, read_line: ReadLine, env: Environment, exit_status: int = 0
) -> str:
    """Read lines up to ``delimiter`` or end of input.

    Variables are expanded unless the delimiter contains a quote.
    """
    quoted = any(char in "'\"" for char in delimiter)
    lines: list[str] = []
    while True:
        try:
            line = read_line("> ")
        except EOFError:
            break
        if line is None or is_delimiter(delimiter, line):
            break
        if quoted:
            lines.append(line + "\n")
        else:
            lines.append(expand_heredoc_line(line, env, exit_status))
    return "".join(lines)


def _read_input(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _reader_for(data: bytes) -> IO[bytes]:
    """A readable pipe end that yields ``data`` and then end of file."""
    read_fd, write_fd = os.pipe()

    def feed() -> None:
        with contextlib.suppress(OSError):
            with open(write_fd, "wb") as writer:
                writer.write(data)

    threading.Thread(target=feed, daemon=True).start()
    return open(read_fd, "rb")


def _empty_input(last: bool) -> IO[bytes] | None:
    return None if last else _reader_for(b"")


def _sink(stream: TextIO) -> tuple[Union[int, IO[bytes]], IO[bytes] | None]:
    """A descriptor for ``stream``, or a temporary file to copy into it later."""
    try:
        stream.flush()
        return stream.fileno(), None
    except (AttributeError, OSError, ValueError):
        temp = tempfile.TemporaryFile()
        return temp, temp


def _os_error(path: str, error: OSError) -> ShellError:
    kind = (
        ErrorKind.PERM_DENIED
        if isinstance(error, PermissionError)
        else ErrorKind.NO_SUCH_FILE
    )
    return ShellError(ExitCode.GENERAL, kind, path)


def _open_output(path: str, append: bool) -> IO[bytes]:
    if os.path.exists(path):
        check_write(path)
    try:
        return open(path, "ab" if append else "wb")
    except OSError as error:
        raise _os_error(path, error) from None


def _open_input(path: str) -> IO[bytes]:
    check_read(path)
    try:
        return open(path, "rb")
    except OSError as error:
        raise _os_error(path, error) from None


@contextlib.contextmanager
def _preserved_cwd() -> Iterator[None]:
    cwd = os.getcwd()
    try:
        yield
    finally:
        with contextlib.suppress(OSError):
            os.chdir(cwd)


class _Redirections:
    """Files a command reads from and writes to instead of the shell's own."""

    def __init__(self) -> None:
        self.stdin: IO[bytes] | None = None
        self.stdout: IO[bytes] | None = None

    def set_stdin(self, file: IO[bytes]) -> None:
        if self.stdin is not None:
            self.stdin.close()
        self.stdin = file

    def set_stdout(self, file: IO[bytes]) -> None:
        if self.stdout is not None:
            self.stdout.close()
        self.stdout = file

    def close(self) -> None:
        for file in (self.stdin, self.stdout):
            if file is not None:
                file.close()
        self.stdin = self.stdout = None

    def __enter__(self) -> _Redirections:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass
class _Running:
    """A started child and the captured output still to be copied out."""

    process: subprocess.Popen
    captures: list[tuple[IO[bytes], TextIO]] = field(default_factory=list)

    def finish(self) -> int:
        while True:
            try:
                code = self.process.wait()
                break
            except KeyboardInterrupt:
                continue
        for temp, stream in self.captures:
            temp.seek(0)
            stream.write(temp.read().decode(errors="replace"))
            temp.close()
        return exit_status_from(code)


class Executor:
    """Runs token lists against an environment."""

    def __init__(
        self,
        env: Environment,
        *,
        read_line: ReadLine | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
        directory: str | os.PathLike[str] = ".",
    ) -> None:
        self.env = env
        self.read_line = read_line if read_line is not None else _read_input
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.directory = directory

    def execute(self, tokens: list[Token], last_status: int = 0) -> int:
        """Read here-documents, then run a simple command or a pipeline."""
        if not tokens:
            return _INTERRUPTED
        try:
            heredocs = self._read_heredocs(tokens, last_status)
        except KeyboardInterrupt:
            self.out.write("\n")
            return _INTERRUPTED
        if any(token.type is TokenType.PIPE for token in tokens):
            return self._run_pipeline(tokens, last_status, heredocs)
        return self._run_simple(tokens, last_status, heredocs)

    def run_simple(self, tokens: list[Token], last_status: int = 0) -> int:
        """Run one command in the shell's own environment."""
        heredocs = self._read_heredocs(tokens, last_status)
        return self._run_simple(tokens, last_status, heredocs)

    def run_pipeline(self, tokens: list[Token], last_status: int = 0) -> int:
        """Run commands joined by ``|``; the status is the last command's."""
        heredocs = self._read_heredocs(tokens, last_status)
        return self._run_pipeline(tokens, last_status, heredocs)

    def _report(self, error: ShellError) -> None:
        self.err.write(error.message() + "\n")

    def _read_heredocs(
        self, tokens: list[Token], last_status: int
    ) -> dict[int, str]:
        docs: dict[int, str] = {}
        for index, token in enumerate(tokens):
            if token.type is not TokenType.DLESS:
                continue
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            if following is None or following.value is None:
                raise ShellSyntaxError(
                    following.type if following else TokenType.NL
                )
            docs[id(token)] = collect_heredoc(
                following.value, self.read_line, self.env, last_status
            )
        return docs

    def _redirect_target(
        self, tokens: list[Token], index: int, last_status: int
    ) -> str:
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        if following is None or following.value is None:
            raise ShellSyntaxError(following.type if following else TokenType.NL)
        words = expand(following.value, self.env, last_status, self.directory)
        if len(words) != 1:
            raise ShellError(ExitCode.GENERAL, ErrorKind.AMBIGUOUS, following.value)
        return words[0]

    def _open_redirections(
        self, tokens: list[Token], last_status: int, heredocs: dict[int, str]
    ) -> _Redirections:
        redirs = _Redirections()
        try:
            for index, token in enumerate(tokens):
                if token.type not in _REDIRECTIONS:
                    continue
                if token.type is TokenType.DLESS:
                    text = heredocs.get(id(token), "")
                    redirs.set_stdin(_reader_for(text.encode()))
                    continue
                target = self._redirect_target(tokens, index, last_status)
                if token.type is TokenType.LESS:
                    redirs.set_stdin(_open_input(target))
                else:
                    redirs.set_stdout(
                        _open_output(target, token.type is TokenType.DGREAT)
                    )
        except BaseException:
            redirs.close()
            raise
        return redirs

    def _launch(
        self,
        args: list[str],
        path: str,
        stdin: IO[bytes] | None,
        stdout: Union[int, IO[bytes], None],
    ) -> _Running | None:
        captures: list[tuple[IO[bytes], TextIO]] = []
        if stdout is None:
            stdout, temp = _sink(self.out)
            if temp is not None:
                captures.append((temp, self.out))
        stderr, temp = _sink(self.err)
        if temp is not None:
            captures.append((temp, self.err))
        try:
            process = subprocess.Popen(
                args,
                executable=path,
                stdin=stdin,
                stdout=stdout,
                stderr=stderr,
                env=self.env.to_dict(),
            )
        except OSError:
            for temp, _ in captures:
                temp.close()
            return None
        return _Running(process, captures)

    def _run_simple(
        self, tokens: list[Token], last_status: int, heredocs: dict[int, str]
    ) -> int:
        if not tokens:
            return _INTERRUPTED
        args = expand_args(tokens, self.env, last_status, self.directory)
        try:
            redirs = self._open_redirections(tokens, last_status, heredocs)
        except ShellError as error:
            self._report(error)
            return ExitCode.GENERAL
        with redirs:
            if not args:
                return ExitCode.SUCCESS
            if is_builtin(args[0]):
                buffer = io.StringIO()
                try:
                    return run_builtin(args, self.env, last_status, buffer, self.err)
                finally:
                    text = buffer.getvalue()
                    if redirs.stdout is not None:
                        redirs.stdout.write(text.encode())
                    else:
                        self.out.write(text)
            try:
                path = resolve_command(self.env, args[0])
            except ShellError as error:
                self._report(error)
                return error.exit_code
            running = self._launch(args, path, redirs.stdin, redirs.stdout)
        if running is None:
            return ExitCode.GENERAL
        return running.finish()

    def _start_stage(
        self,
        segment: list[Token],
        last_status: int,
        heredocs: dict[int, str],
        stdin: IO[bytes] | None,
        last: bool,
    ) -> tuple[_Running | int, IO[bytes] | None]:
        """Start one pipeline command; return it and the next command's input."""
        if not segment:
            return _INTERRUPTED, _empty_input(last)
        args = expand_args(segment, self.env, last_status, self.directory)
        try:
            redirs = self._open_redirections(segment, last_status, heredocs)
        except ShellError as error:
            self._report(error)
            return ExitCode.GENERAL, _empty_input(last)
        with redirs:
            if not args:
                return ExitCode.SUCCESS, _empty_input(last)
            if is_builtin(args[0]):
                buffer = io.StringIO()
                with _preserved_cwd():
                    try:
                        status = run_builtin(
                            args, copy.deepcopy(self.env), last_status, buffer, self.err
                        )
                    except ShellExit as request:
                        status = request.status
                data = buffer.getvalue()
                if redirs.stdout is not None:
                    redirs.stdout.write(data.encode())
                    return status, _empty_input(last)
                if last:
                    self.out.write(data)
                    return status, None
                return status, _reader_for(data.encode())
            try:
                path = resolve_command(self.env, args[0])
            except ShellError as error:
                self._report(error)
                return error.exit_code, _empty_input(last)
            source = redirs.stdin if redirs.stdin is not None else stdin
            target: Union[int, IO[bytes], None]
            if redirs.stdout is not None:
                target = redirs.stdout
            elif last:
                target = None
            else:
                target = subprocess.PIPE
            running = self._launch(args, path, source, target)
            if running is None:
                return ExitCode.GENERAL, _empty_input(last)
            if target is subprocess.PIPE:
                return running, running.process.stdout
            return running, _empty_input(last)

    def _run_pipeline(
        self, tokens: list[Token], last_status: int, heredocs: dict[int, str]
    ) -> int:
        segments = split_pipeline(tokens)
        stages: list[_Running | int] = []
        pending: IO[bytes] | None = None
        for index, segment in enumerate(segments):
            last = index == len(segments) - 1
            stage, following = self._start_stage(
                segment, last_status, heredocs, pending, last
            )
            if pending is not None:
                pending.close()
            pending = following
            stages.append(stage)
        if pending is not None:
            pending.close()
        statuses = [
            stage if isinstance(stage, int) else stage.finish() for stage in stages
        ]
        return int(statuses[-1])