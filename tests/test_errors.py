import os

import pytest

from minishell.errors import (
    ErrorKind,
    ExitCode,
    ShellError,
    check_exec,
    check_read,
    check_write,
    is_delimiter,
)


def test_exit_code_values(tmp_path):
    data = tmp_path / "data"
    data.write_text("x")
    data.chmod(0o644)
    with pytest.raises(ShellError) as denied:
        check_exec(data, True)
    assert denied.value.exit_code == 126

    with pytest.raises(ShellError) as missing:
        check_exec(tmp_path / "nope", True)
    assert missing.value.exit_code == 127

    error = ShellError(ExitCode.EXEC_255, ErrorKind.NUMERIC_REQUIRED, "x")
    assert error.exit_code == 255
    assert error.message() == "minishell: exit: x: numeric argument required"


@pytest.mark.parametrize(
    "kind, cause, expected",
    [
        (ErrorKind.CMD_NOT_FOUND, "foo", "minishell: foo: command not found"),
        (ErrorKind.NO_SUCH_FILE, "bar", "minishell: bar: No such file or directory"),
        (ErrorKind.PERM_DENIED, "baz", "minishell: baz: Permission denied"),
        (ErrorKind.AMBIGUOUS, "*", "minishell: *: ambiguous redirect"),
        (ErrorKind.TOO_MANY_ARGS, None, "minishell: exit: too many arguments"),
        (
            ErrorKind.NUMERIC_REQUIRED,
            "abc",
            "minishell: exit: abc: numeric argument required",
        ),
    ],
)
def test_messages(kind, cause, expected):
    error = ShellError(ExitCode.GENERAL, kind, cause)
    assert error.message() == expected
    assert str(error) == expected
    assert error.exit_code == ExitCode.GENERAL


def test_check_exec_executable(tmp_path):
    script = tmp_path / "run"
    script.write_text("#!/bin/sh\n")
    script.chmod(0o755)
    assert check_exec(script) == str(script)


def test_check_exec_not_executable(tmp_path):
    data = tmp_path / "data"
    data.write_text("x")
    data.chmod(0o644)
    with pytest.raises(ShellError) as info:
        check_exec(data, True)
    assert info.value.exit_code == ExitCode.CANT_EXEC
    assert info.value.kind is ErrorKind.PERM_DENIED


def test_check_exec_missing_command(tmp_path):
    missing = str(tmp_path / "nope")
    with pytest.raises(ShellError) as info:
        check_exec(missing, True)
    assert info.value.exit_code == ExitCode.NOT_FOUND
    assert info.value.kind is ErrorKind.CMD_NOT_FOUND
    assert info.value.cause == missing


def test_check_exec_missing_file(tmp_path):
    with pytest.raises(ShellError) as info:
        check_exec(tmp_path / "nope", False)
    assert info.value.kind is ErrorKind.NO_SUCH_FILE
    assert info.value.exit_code == ExitCode.NOT_FOUND


@pytest.mark.parametrize("check", [check_exec, check_read, check_write])
def test_empty_path(check):
    with pytest.raises(ShellError) as info:
        check("")
    assert info.value.exit_code == ExitCode.GENERAL
    assert info.value.kind is ErrorKind.NO_SUCH_FILE


def test_check_read_and_write_existing(tmp_path):
    path = tmp_path / "f"
    path.write_text("x")
    assert check_read(path) == os.fspath(path)
    assert check_write(path) == os.fspath(path)


@pytest.mark.parametrize("check", [check_read, check_write])
def test_read_write_missing(check, tmp_path):
    with pytest.raises(ShellError) as info:
        check(tmp_path / "missing")
    assert info.value.exit_code == ExitCode.NOT_FOUND


@pytest.mark.parametrize(
    "delimiter, line, expected",
    [
        ("EOF", "EOF", True),
        ('"EOF"', "EOF", True),
        ("'E'OF", "EOF", True),
        ("EOF", "EO", False),
        ("EOF", "EOFX", False),
        ("EOF", "eof", False),
        ("''", "", True),
        ("EOF", "", False),
    ],
)
def test_is_delimiter(delimiter, line, expected):
    assert is_delimiter(delimiter, line) is expected