"""Pytest fixtures.

``FakeRunner`` stands in for ``CommandRunner``: responses are keyed by the full
argv tuple, every call is recorded, and unknown commands succeed with empty
output.
"""

from pathlib import Path

import pytest

from gitai_config.settings import Settings
from gitai_tools.base import ToolContext
from gitai_tools.exceptions import CommandError, CommandNotFoundError
from gitai_tools.process import CommandResult, GitClient


class FakeRunner:
    """In-memory CommandRunner."""

    def __init__(self):
        self.responses: dict[tuple[str, ...], object] = {}
        self.missing: set[str] = set()
        self.calls: list[tuple[str, ...]] = []
        self.shell_calls: list[str] = []
        self.cwd = Path.cwd()

    def on(self, *argv: str, stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        self.responses[argv] = (stdout, stderr, exit_code)

    def fail(self, *argv: str, stderr: str = "error", exit_code: int = 1) -> None:
        self.on(*argv, stderr=stderr, exit_code=exit_code)

    def raise_on(self, *argv: str, error: Exception) -> None:
        self.responses[argv] = error

    def called(self, *prefix: str) -> bool:
        return any(call[: len(prefix)] == prefix for call in self.calls)

    def git_calls(self, subcommand: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == "git" and subcommand in call[1:2]]

    async def run(self, binary, args=(), *, cwd=None, timeout=None, check=True) -> CommandResult:
        argv = (binary, *args)
        self.calls.append(argv)
        if binary in self.missing:
            raise CommandNotFoundError(f"Cannot execute '{binary}': No such file or directory", argv=list(argv))

        response = self.responses.get(argv, ("", "", 0))
        if isinstance(response, Exception):
            raise response
        stdout, stderr, exit_code = response
        result = CommandResult(argv=argv, exit_code=exit_code, stdout=stdout, stderr=stderr)
        if check and not result.success:
            raise CommandError(
                stderr.strip() or f"exit code {exit_code}",
                argv=list(argv),
                exit_code=exit_code,
                stdout=stdout,
                stderr=stderr,
            )
        return result

    async def run_shell(self, command, *, cwd=None, timeout=None, check=True) -> CommandResult:
        self.shell_calls.append(command)
        response = self.responses.get((command,), ("", "", 0))
        if isinstance(response, Exception):
            raise response
        stdout, stderr, exit_code = response
        if check and exit_code != 0:
            raise CommandError(stderr or f"exit code {exit_code}", argv=[command], exit_code=exit_code)
        return CommandResult(argv=(command,), exit_code=exit_code, stdout=stdout, stderr=stderr)


STATUS_ARGV = ("git", "status", "--porcelain=v1", "--branch", "-z")


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep settings from reading the developer's environment or config files."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def ctx(tmp_path, settings, runner):
    """Tool context backed by the fake runner."""
    return ToolContext(
        working_directory=tmp_path,
        config=settings,
        runner=runner,
        git=GitClient(runner),
    )


@pytest.fixture
def clean_tree(runner):
    runner.on(*STATUS_ARGV, stdout="## main...origin/main\0")
    return runner


@pytest.fixture
def dirty_tree(runner):
    runner.on(*STATUS_ARGV, stdout="## main...origin/main\0 M src/app.py\0?? notes.txt\0")
    return runner


@pytest.fixture
def call(ctx):
    """Validate ``arguments`` against the tool's model and execute it."""

    async def _call(tool, /, **arguments):
        return await tool.execute(ctx, tool.input_model.model_validate(arguments))

    return _call
