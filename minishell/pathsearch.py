"""Finding the program a command name refers to."""

from __future__ import annotations

from .environment import Environment
from .errors import ErrorKind, ExitCode, ShellError, check_exec


def resolve_command(env: Environment, command: str) -> str:
    """Return the path to run for ``command``, or raise ShellError.

    A name containing ``/`` is used as it is.  Otherwise each directory of
    PATH is tried in order, and the first executable candidate wins.
    """
    if not command:
        raise ShellError(ExitCode.NOT_FOUND, ErrorKind.CMD_NOT_FOUND, command)
    if "/" in command:
        return check_exec(command, False)
    search = env.get("PATH")
    if search is None:
        raise ShellError(ExitCode.NOT_FOUND, ErrorKind.NO_SUCH_FILE, command)
    for directory in filter(None, search.split(":")):
        try:
            return check_exec(f"{directory}/{command}", True)
        except ShellError:
            continue
    raise ShellError(ExitCode.NOT_FOUND, ErrorKind.CMD_NOT_FOUND, command)