"""Exception classes for the Pivotal Tracker git workflow.

This module defines the exception hierarchy used throughout the
pivotal_git_workflow package, providing specific error types for the
different ways a story-branch operation can fail.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from pivotal_git_workflow.models import MergeCheckResult


class PivotalWorkflowError(Exception):
    """Base exception for all workflow operations.

    All other exceptions in this module inherit from this class, so the
    command line boundary can report any of them the same way.
    """
    pass


class InvalidScopeError(PivotalWorkflowError, ValueError):
    """Raised when a configuration scope is not recognised.

    Signalled before any git command runs.
    """
    pass


class NotARepositoryError(PivotalWorkflowError):
    """Raised when no `.git` entry exists in any parent directory."""

    def __init__(self, start: str) -> None:
        super().__init__(f"{start} is not in a git repository")
        self.start = start


class CommandFailedError(PivotalWorkflowError):
    """Raised when a shell command exits with a non-zero status.

    Attributes:
        command: The command line that was run.
        returncode: Exit status of the process.
        stdout: Captured standard output (stripped).
        stderr: Captured standard error (stripped).
    """

    def __init__(self, command: str, returncode: int, stdout: str = "", stderr: str = "") -> None:
        message = f"Command failed with exit status {returncode}: {command}"
        if stderr:
            message += f"\n{stderr}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class NonTrivialMergeError(PivotalWorkflowError):
    """Raised when the root branch moved since the topic branch was created.

    Merging in that state would produce a merge commit that is not a plain
    continuation of the root branch.
    """

    def __init__(self, result: "MergeCheckResult", message: Optional[str] = None) -> None:
        super().__init__(message or (
            f"{result.root_branch} has diverged from {result.topic_branch}; "
            f"rebase or merge {result.root_branch} before finishing"
        ))
        self.result = result


class StoryNotFoundError(PivotalWorkflowError):
    """Raised when the current branch has no story recorded against it."""
    pass
