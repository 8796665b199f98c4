"""Tests for goodgit.git — the subprocess wrapper."""

import sys
from pathlib import Path

import pytest

from goodgit.errors import SubprocessFailure
from goodgit.git import GitRunner


@pytest.fixture
def python_runner(tmp_path):
    # Any executable works; the Python interpreter is always available
    return GitRunner(cwd=tmp_path, executable=sys.executable)


def test_run_returns_stripped_stdout(python_runner):
    assert python_runner.run("-c", "print('  hello  ')") == "hello"


def test_run_uses_cwd(python_runner, tmp_path):
    cwd = python_runner.run("-c", "import os; print(os.getcwd())")
    assert Path(cwd).resolve() == tmp_path.resolve()


def test_nonzero_exit_nothrow(python_runner):
    result = python_runner.run_nothrow("-c", "import sys; sys.stderr.write('bad'); sys.exit(3)")
    assert result.returncode == 3
    assert result.stderr == "bad"
    assert not result.ok


def test_nonzero_exit_raises(python_runner):
    with pytest.raises(SubprocessFailure) as exc:
        python_runner.run("-c", "import sys; sys.stderr.write('bad'); sys.exit(3)")
    assert exc.value.returncode == 3
    assert exc.value.stderr == "bad"
    assert exc.value.exit_code == 7


def test_missing_executable(tmp_path):
    runner = GitRunner(executable=str(tmp_path / "no-such-git"))
    result = runner.run_nothrow("status")
    assert result.returncode == 127
    with pytest.raises(SubprocessFailure):
        runner.run("status")


def test_undecodable_output_replaced(python_runner):
    result = python_runner.run_nothrow("-c", "import sys; sys.stdout.buffer.write(b'\\xff ok')")
    assert result.ok
    assert result.stdout == "\ufffd ok"
