"""Data models for the story-branch workflow.

Stories come from the Tracker integration and are treated as read-only here.
Configuration scopes are a closed enumeration, each member building its own
`git config` command line.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pivotal_git_workflow.exceptions import InvalidScopeError
from pivotal_git_workflow.shell import quote


@dataclass(frozen=True)
class Story:
    """A Pivotal Tracker story.

    Only `id` is required; the remaining fields are carried when the caller
    has them and are used for display and branch naming.
    """
    id: Union[int, str]
    name: Optional[str] = None
    story_type: Optional[str] = None
    current_state: Optional[str] = None
    url: Optional[str] = None

    @property
    def reference(self) -> str:
        """Tracker reference that mentions the story without changing it."""
        return f"#{self.id}"

    @property
    def completes_reference(self) -> str:
        """Tracker reference that marks the story finished when pushed."""
        return f"Completes #{self.id}"

    def branch_name(self, name: Optional[str] = None) -> str:
        """Build a topic branch name of the form `<id>-<slug>`.

        Args:
            name: Short description for the branch. Falls back to the story
                name, then to the bare id.

        Returns:
            Branch name safe for use on the git command line.
        """
        label = name or self.name
        if not label:
            return str(self.id)
        slug = re.sub(r"[^a-z0-9]+", "-", label.lower()).strip("-")
        return f"{self.id}-{slug}" if slug else str(self.id)


class ConfigScope(Enum):
    """Which git configuration store a read or write targets.

    BRANCH: `branch.<current branch>.<key>` in the repository config
    LOCAL: the repository config
    GLOBAL: the user's global config
    INHERITED: whatever git resolves for the key (read only)
    """
    BRANCH = "branch"
    LOCAL = "local"
    GLOBAL = "global"
    INHERITED = "inherited"

    @classmethod
    def parse(cls, value: Union["ConfigScope", str]) -> "ConfigScope":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidScopeError(f"Unknown configuration scope: {value!r}") from None

    def get_command(self, key: str, branch: Optional[str] = None) -> str:
        if self is ConfigScope.BRANCH:
            return f"git config {quote(f'branch.{branch}.{key}')}"
        if self is ConfigScope.INHERITED:
            return f"git config {quote(key)}"
        # Explicit stores are read through their flag
        return f"git config --{self.value} {quote(key)}"

    def set_command(self, key: str, value: str, branch: Optional[str] = None) -> str:
        if self is ConfigScope.BRANCH:
            return f"git config --local {quote(f'branch.{branch}.{key}')} {quote(value)}"
        if self is ConfigScope.INHERITED:
            raise InvalidScopeError("The inherited scope cannot be written to")
        return f"git config --{self.value} {quote(key)} {quote(value)}"


@dataclass(frozen=True)
class MergeCheckResult:
    """Outcome of checking that a topic branch merges trivially.

    The merge is trivial when the root branch tip is still the merge base of
    the root and topic branches, i.e. the root has not moved since the fork.
    """
    topic_branch: str
    root_branch: str
    root_tip: str
    merge_base: str

    @property
    def is_trivial(self) -> bool:
        return self.root_tip == self.merge_base
