"""Pivotal Git Workflow - story branches synchronised with Pivotal Tracker.

Creates a branch per story, checks that finished branches merge trivially
into the branch they were started from, references stories in commit and
merge messages, and tags releases.
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

# Package exports
from pivotal_git_workflow.exceptions import (
    PivotalWorkflowError,
    InvalidScopeError,
    NotARepositoryError,
    CommandFailedError,
    NonTrivialMergeError,
    StoryNotFoundError,
)
from pivotal_git_workflow.models import ConfigScope, MergeCheckResult, Story
from pivotal_git_workflow.git import GitWorkflow

__all__ = [
    "__version__",
    "__license__",
    "PivotalWorkflowError",
    "InvalidScopeError",
    "NotARepositoryError",
    "CommandFailedError",
    "NonTrivialMergeError",
    "StoryNotFoundError",
    "ConfigScope",
    "MergeCheckResult",
    "Story",
    "GitWorkflow",
]
