"""Shared fixtures - a scripted executor and an isolated config directory."""

from typing import Sequence

import pytest

from quickgit.executor import CommandResult
from quickgit.ui import set_verbose


class FakeExecutor:
    """Executor double answering from a command-line -> result table.

    Unscripted command lines fail, like a git call outside a repository.
    """

    def __init__(self) -> None:
        self.responses: dict[str, CommandResult] = {}
        self.calls: list[str] = []
        self.interactive_calls: list[list[str]] = []
        self.interactive_result = CommandResult(success=True, message="Command completed")
        self.working_dir = None

    def ok(self, command_line: str, data: str = "") -> "FakeExecutor":
        self.responses[command_line] = CommandResult(success=True, message=data, data=data)
        return self

    def fail(self, command_line: str, error: str = "fatal: error") -> "FakeExecutor":
        self.responses[command_line] = CommandResult(
            success=False,
            message="Command failed with exit code 1",
            error=error,
        )
        return self

    def run_sync(self, command_line: str) -> CommandResult:
        self.calls.append(command_line)
        if command_line in self.responses:
            return self.responses[command_line]
        return CommandResult(
            success=False,
            message="Command failed with exit code 128",
            error="fatal: not a git repository",
        )

    def run_interactive(self, executable: str, args: Sequence[str] = ()) -> CommandResult:
        self.interactive_calls.append([executable, *args])
        return self.interactive_result


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def repo_executor(fake_executor: FakeExecutor) -> FakeExecutor:
    """A fake executor that reports being inside a repository on `main`."""
    fake_executor.ok("git rev-parse --git-dir", ".git")
    fake_executor.ok("git branch --show-current", "main")
    return fake_executor


@pytest.fixture
def qg_home(tmp_path, monkeypatch):
    """Point QUICKER_GIT_HOME at a temporary directory."""
    home = tmp_path / "qg-home"
    monkeypatch.setenv("QUICKER_GIT_HOME", str(home))
    return home


@pytest.fixture(autouse=True)
def _reset_verbose(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    set_verbose(False)
    yield
    set_verbose(False)
