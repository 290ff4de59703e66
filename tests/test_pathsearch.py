import os

import pytest

from minishell.environment import Environment
from minishell.errors import ErrorKind, ExitCode, ShellError
from minishell.pathsearch import resolve_command


def _make_program(directory, name, executable=True):
    directory.mkdir(parents=True, exist_ok=True)
    program = directory / name
    program.write_text("#!/bin/sh\nexit 0\n")
    program.chmod(0o755 if executable else 0o644)
    return program


def test_empty_command_is_not_found():
    with pytest.raises(ShellError) as info:
        resolve_command(Environment(), "")
    assert info.value.exit_code == ExitCode.NOT_FOUND
    assert info.value.kind is ErrorKind.CMD_NOT_FOUND


def test_name_with_slash_is_used_directly(tmp_path):
    program = _make_program(tmp_path, "tool")
    assert resolve_command(Environment(), str(program)) == str(program)


def test_missing_path_with_slash_reports_no_such_file(tmp_path):
    missing = str(tmp_path / "nope")
    with pytest.raises(ShellError) as info:
        resolve_command(Environment(), missing)
    assert info.value.kind is ErrorKind.NO_SUCH_FILE
    assert info.value.exit_code == ExitCode.NOT_FOUND
    assert info.value.cause == missing


def test_search_through_path(tmp_path):
    bin_dir = tmp_path / "bin"
    _make_program(bin_dir, "tool")
    env = Environment.from_entries([f"PATH={tmp_path / 'empty'}:{bin_dir}"])
    assert resolve_command(env, "tool") == f"{bin_dir}/tool"


def test_non_executable_candidate_is_skipped(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    _make_program(first, "tool", executable=False)
    _make_program(second, "tool")
    env = Environment.from_entries([f"PATH={first}:{second}"])
    if os.access(first / "tool", os.X_OK):
        # Running as a user that may execute anything.
        assert resolve_command(env, "tool") == f"{first}/tool"
    else:
        assert resolve_command(env, "tool") == f"{second}/tool"


def test_empty_path_segments_are_ignored(tmp_path):
    bin_dir = tmp_path / "bin"
    _make_program(bin_dir, "tool")
    env = Environment.from_entries([f"PATH=::{bin_dir}"])
    assert resolve_command(env, "tool") == f"{bin_dir}/tool"


def test_unknown_command_on_path(tmp_path):
    env = Environment.from_entries([f"PATH={tmp_path}"])
    with pytest.raises(ShellError) as info:
        resolve_command(env, "tool")
    assert info.value.kind is ErrorKind.CMD_NOT_FOUND
    assert info.value.message() == "minishell: tool: command not found"


def test_without_path_variable():
    with pytest.raises(ShellError) as info:
        resolve_command(Environment(), "tool")
    assert info.value.kind is ErrorKind.NO_SUCH_FILE
    assert info.value.exit_code == ExitCode.NOT_FOUND