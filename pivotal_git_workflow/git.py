"""Git operations for the Pivotal Tracker story-branch workflow.

This module wraps the git commands behind the workflow: reading the current
branch, scoped configuration, creating and merging topic branches, pushing,
committing with story references and tagging releases. Workflow state (the
root branch and remote of each topic branch) is kept in the repository's own
git config rather than in memory.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import aiofiles
from rich.console import Console

from pivotal_git_workflow.exceptions import (
    NonTrivialMergeError,
    NotARepositoryError,
    PivotalWorkflowError,
)
from pivotal_git_workflow.models import ConfigScope, MergeCheckResult, Story
from pivotal_git_workflow.shell import exec_command, quote, quote_message

logger = logging.getLogger(__name__)

console = Console(highlight=False)
error_console = Console(stderr=True, highlight=False)

RELEASE_BRANCH_NAME = "pivotal-tracker-release"
REMOTE_CONFIG_KEY = "remote"
ROOT_BRANCH_CONFIG_KEY = "root-branch"
ROOT_REMOTE_CONFIG_KEY = "root-remote"

ScopeLike = Union[ConfigScope, str]


class GitWorkflow:
    """Story-branch lifecycle operations on a git repository.

    Commands run in the process working directory; `project_path` is where
    repository discovery starts and defaults to that directory.
    """

    def __init__(self, project_path: Optional[Path] = None) -> None:
        """Initialize with an optional starting directory.

        Args:
            project_path: Directory inside the repository. Defaults to the
                current working directory at the time of each call.
        """
        self.project_path = project_path

    async def branch_name(self) -> str:
        """Get the name of the checked out branch.

        Returns:
            Branch name from the `git branch` line carrying the `*` marker.

        Raises:
            PivotalWorkflowError: If no branch is marked as current.
        """
        output = await exec_command("git branch")
        for line in output.splitlines():
            line = line.strip()
            if line.startswith("*"):
                return line[1:].strip()
        raise PivotalWorkflowError("Unable to determine the current branch")

    async def get_config(self, key: str, scope: ScopeLike = ConfigScope.INHERITED) -> str:
        """Read a git configuration value.

        Args:
            key: Configuration key, without the `branch.<name>.` prefix for
                the branch scope.
            scope: Which configuration store to read.

        Returns:
            The configured value, or an empty string when unset.

        Raises:
            InvalidScopeError: If scope is not a known ConfigScope.
        """
        scope = ConfigScope.parse(scope)
        branch = await self.branch_name() if scope is ConfigScope.BRANCH else None
        return await exec_command(scope.get_command(key, branch), False)

    async def set_config(self, key: str, value: str, scope: ScopeLike = ConfigScope.LOCAL) -> None:
        """Write a git configuration value.

        Raises:
            InvalidScopeError: If scope is unknown or cannot be written.
        """
        scope = ConfigScope.parse(scope)
        branch = await self.branch_name() if scope is ConfigScope.BRANCH else None
        await exec_command(scope.set_command(key, value, branch))

    def repository_root(self) -> Path:
        """Find the root of the enclosing repository.

        Walks up from the starting directory until a directory containing a
        `.git` entry is found.

        Returns:
            Absolute path of the repository root.

        Raises:
            NotARepositoryError: If the filesystem root is reached first.
        """
        start = Path(self.project_path or Path.cwd()).resolve()
        for directory in (start, *start.parents):
            if (directory / ".git").exists():
                return directory
        raise NotARepositoryError(str(start))

    async def add_hook(self, name: str, source: Union[str, Path], overwrite: bool = False) -> bool:
        """Install a git hook from a source file.

        Args:
            name: Hook name, e.g. `prepare-commit-msg`.
            source: File whose contents become the hook.
            overwrite: Replace an existing hook.

        Returns:
            True if the hook was written, False if an existing hook was kept.
        """
        hooks_directory = self.repository_root() / ".git" / "hooks"
        hook = hooks_directory / name
        if hook.exists() and not overwrite:
            logger.debug("Keeping existing hook %s", hook)
            return False

        console.print(f"Creating Git hook {name}... ", end="")
        hooks_directory.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(source, "r", encoding="utf-8") as f:
            content = await f.read()
        async with aiofiles.open(hook, "w", encoding="utf-8") as f:
            await f.write(content)
        hook.chmod(0o755)
        console.print("[green]OK[/green]")
        return True

    async def create_branch(self, name: str, pull: bool = True) -> None:
        """Create and check out a topic branch from the current branch.

        The current branch and its remote are recorded on the new branch as
        `root-branch` and `root-remote` for the later merge.

        Args:
            name: Name of the new branch.
            pull: Fast-forward the current branch before branching.
        """
        root_branch = await self.branch_name()
        root_remote = await self.get_config(REMOTE_CONFIG_KEY, ConfigScope.BRANCH)

        if pull:
            console.print(f"Pulling {root_branch}... ", end="")
            await exec_command("git pull --quiet --ff-only")
            console.print("[green]OK[/green]")

        console.print(f"Creating and checking out {name}... ", end="")
        await exec_command(f"git checkout --quiet -b {quote(name)}")
        await self.set_config(ROOT_BRANCH_CONFIG_KEY, root_branch, ConfigScope.BRANCH)
        await self.set_config(ROOT_REMOTE_CONFIG_KEY, root_remote, ConfigScope.BRANCH)
        console.print("[green]OK[/green]")

    async def trivial_merge(self) -> MergeCheckResult:
        """Check that the topic branch can merge into its root trivially.

        Pulls the root branch, then compares its tip with the merge base of
        the root and topic branches. Prints `OK` on success and `FAIL` to
        standard error when the root branch has moved on.

        Returns:
            The comparison result; callers decide what a failure means.
        """
        topic_branch = await self.branch_name()
        root_branch = await self.get_config(ROOT_BRANCH_CONFIG_KEY, ConfigScope.BRANCH)

        console.print(f"Checking for trivial merge from {topic_branch} to {root_branch}... ", end="")
        await exec_command(f"git checkout --quiet {quote(root_branch)}")
        await exec_command("git pull --quiet --ff-only")
        await exec_command(f"git checkout --quiet {quote(topic_branch)}")

        root_tip = await exec_command(f"git rev-parse {quote(root_branch)}")
        merge_base = await exec_command(f"git merge-base {quote(root_branch)} {quote(topic_branch)}")
        result = MergeCheckResult(topic_branch, root_branch, root_tip, merge_base)

        if result.is_trivial:
            console.print("[green]OK[/green]")
        else:
            console.print()
            error_console.print("[red]FAIL[/red]")
            logger.info("Root tip %s differs from merge base %s", root_tip, merge_base)
        return result

    async def ensure_trivial_merge(self) -> MergeCheckResult:
        """Like `trivial_merge`, but raise when the merge is not trivial.

        Raises:
            NonTrivialMergeError: If the root branch has diverged.
        """
        result = await self.trivial_merge()
        if not result.is_trivial:
            raise NonTrivialMergeError(result)
        return result

    async def merge(self, story: Story, suppress_completes_statement: bool = False,
                    keep_branch: bool = False) -> str:
        """Merge the topic branch into its root branch and delete it.

        A merge commit is always created, referencing the story. By default
        the reference completes the story.

        Args:
            story: Story the topic branch implements.
            suppress_completes_statement: Reference the story without
                completing it.
            keep_branch: Leave the topic branch in place after merging.

        Returns:
            The root branch, which is left checked out.
        """
        topic_branch = await self.branch_name()
        root_branch = await self.get_config(ROOT_BRANCH_CONFIG_KEY, ConfigScope.BRANCH)

        console.print(f"Merging {topic_branch} to {root_branch}... ", end="")
        await exec_command(f"git checkout --quiet {quote(root_branch)}")
        reference = story.reference if suppress_completes_statement else story.completes_reference
        message = quote_message(f"Merge {topic_branch} to {root_branch}\n\n[{reference}]")
        await exec_command(f'git merge --quiet --no-ff -m "{message}" {quote(topic_branch)}')
        console.print("[green]OK[/green]")

        if not keep_branch:
            console.print(f"Deleting {topic_branch}... ", end="")
            await exec_command(f"git branch --quiet -D {quote(topic_branch)}")
            console.print("[green]OK[/green]")
        return root_branch

    async def push(self, *refs: str) -> None:
        """Push refs to the current branch's remote.

        With no refs git pushes according to its own defaults.
        """
        remote = await self.get_config(REMOTE_CONFIG_KEY, ConfigScope.BRANCH)

        console.print(f"Pushing to {remote}... ", end="")
        # An unset remote leaves the choice to git
        target = quote(remote) if remote else remote
        await exec_command(f"git push --quiet {target} {' '.join(quote(ref) for ref in refs)}")
        console.print("[green]OK[/green]")

    async def create_commit(self, message: str, story: Story) -> None:
        """Commit all changes, referencing the story in the message.

        Empty commits are allowed.
        """
        message = quote_message(f"{message}\n\n[{story.reference}]")
        await exec_command(f'git commit --quiet --all --allow-empty --message "{message}"')

    async def create_release_tag(self, name: str, story: Story) -> str:
        """Tag a release as `v<name>` on a throwaway release commit.

        The release commit lives on a temporary branch that is deleted once
        the tag exists, leaving the original branch checked out.

        Returns:
            The created tag name.
        """
        return_branch = await self.branch_name()
        tag = f"v{name}"

        await self.create_branch(RELEASE_BRANCH_NAME, False)
        await self.create_commit(f"{name} Release", story)

        console.print(f"Creating tag {tag}... ", end="")
        await exec_command(f"git tag {quote(tag)}")
        await exec_command(f"git checkout --quiet {quote(return_branch)}")
        await exec_command(f"git branch --quiet -D {RELEASE_BRANCH_NAME}")
        console.print("[green]OK[/green]")
        return tag
