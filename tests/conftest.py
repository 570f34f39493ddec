"""Shared fixtures for workflow tests."""

import shlex
from typing import Dict, List
from unittest.mock import AsyncMock

import pytest

from pivotal_git_workflow.exceptions import CommandFailedError
from pivotal_git_workflow.git import GitWorkflow


class FakeGit:
    """Stands in for the shell, tracking checkouts and answering `git branch`
    and `git config` the way git does.

    A config command with a key but no value is a read; reading an unset key
    fails. Other commands are recorded and return an empty string.
    """

    def __init__(self, branch: str = "master") -> None:
        self.branch = branch
        self.config: Dict[str, str] = {}
        self.commands: List[str] = []

    async def __call__(self, command: str, raise_on_failure: bool = True) -> str:
        self.commands.append(command)
        args = shlex.split(command)
        if args == ["git", "branch"]:
            return f"  other\n* {self.branch}"
        if args[:3] == ["git", "checkout", "--quiet"]:
            self.branch = args[-1]
            return ""
        if args[:2] == ["git", "config"]:
            return self._config([arg for arg in args[2:] if not arg.startswith("--")],
                                command, raise_on_failure)
        return ""

    def _config(self, args: List[str], command: str, raise_on_failure: bool) -> str:
        if len(args) == 2:
            key, value = args
            self.config[key] = value
            return ""
        key = args[0]
        if key in self.config:
            return self.config[key]
        if raise_on_failure:
            raise CommandFailedError(command, 1)
        return ""


@pytest.fixture
def fake_git(monkeypatch) -> FakeGit:
    fake = FakeGit()
    monkeypatch.setattr("pivotal_git_workflow.git.exec_command", fake)
    return fake


@pytest.fixture
def mock_exec(monkeypatch) -> AsyncMock:
    mock = AsyncMock(return_value="")
    monkeypatch.setattr("pivotal_git_workflow.git.exec_command", mock)
    return mock


@pytest.fixture
def git() -> GitWorkflow:
    return GitWorkflow()
