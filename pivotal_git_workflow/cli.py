"""Command line interface for the Pivotal Tracker git workflow.

This module provides the `git-pivotal` entry point using the Click framework.
Each command drives GitWorkflow operations and reports progress on the
console; workflow failures are turned into a non-zero exit status here.
"""

import asyncio
import logging
from typing import Optional

import click
from rich.console import Console

from pivotal_git_workflow import __version__
from pivotal_git_workflow.configuration import Configuration
from pivotal_git_workflow.exceptions import PivotalWorkflowError
from pivotal_git_workflow.git import GitWorkflow
from pivotal_git_workflow.hooks import PREPARE_COMMIT_MSG, hook_source
from pivotal_git_workflow.models import ConfigScope, Story

console = Console()

SCOPE_CHOICES = [scope.value for scope in ConfigScope]


@click.group()
@click.version_option(version=__version__, prog_name="git-pivotal")
@click.option('-v', '--verbose', is_flag=True, help='Log every git command that runs')
def main(verbose: bool) -> None:
    """Git workflow for Pivotal Tracker stories.

    Start a branch per story, finish it with a trivial merge back into the
    branch it came from, and tag releases.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='[%(levelname)s] %(name)s: %(message)s'
    )


def _run(coroutine) -> None:
    """Run a command coroutine, converting workflow errors for Click."""
    try:
        asyncio.run(coroutine)
    except PivotalWorkflowError as error:
        raise click.ClickException(str(error))


@main.command()
@click.argument('story_id')
@click.argument('name', required=False)
@click.option('--no-pull', is_flag=True, help='Do not fast-forward the current branch first')
def start(story_id: str, name: Optional[str], no_pull: bool) -> None:
    """Start work on a story in a new topic branch."""
    _run(_start_async(story_id, name, not no_pull))


async def _start_async(story_id: str, name: Optional[str], pull: bool) -> None:
    """Async implementation of start command."""
    git = GitWorkflow()
    story = Story(id=story_id, name=name)
    branch = story.branch_name()

    await git.create_branch(branch, pull)
    await Configuration(git).set_story_id(story.id)
    await git.add_hook(PREPARE_COMMIT_MSG, hook_source(PREPARE_COMMIT_MSG))

    console.print(f"✅ [green]Started story {story.reference} on {branch}[/green]")


@main.command()
@click.option('--no-complete', is_flag=True, help='Reference the story without completing it')
@click.option('--no-push', is_flag=True, help='Leave the merged root branch unpushed')
@click.option('--keep-branch', is_flag=True, help='Do not delete the topic branch after merging')
def finish(no_complete: bool, no_push: bool, keep_branch: bool) -> None:
    """Merge the current story branch back into its root branch."""
    _run(_finish_async(no_complete, no_push, keep_branch))


async def _finish_async(no_complete: bool, no_push: bool, keep_branch: bool) -> None:
    """Async implementation of finish command."""
    git = GitWorkflow()
    story = await Configuration(git).story()

    await git.ensure_trivial_merge()

    root_branch = await git.merge(story, no_complete, keep_branch)
    if not no_push:
        await git.push(root_branch)

    console.print(f"✅ [green]Finished story {story.reference}[/green]")


@main.command()
@click.argument('version')
@click.argument('story_id')
@click.option('--no-push', is_flag=True, help='Leave the tag unpushed')
def release(version: str, story_id: str, no_push: bool) -> None:
    """Tag VERSION as a release for story STORY_ID."""
    _run(_release_async(version, story_id, no_push))


async def _release_async(version: str, story_id: str, no_push: bool) -> None:
    """Async implementation of release command."""
    git = GitWorkflow()
    tag = await git.create_release_tag(version, Story(id=story_id))
    if not no_push:
        await git.push(tag)

    console.print(f"✅ [green]Released {tag}[/green]")


@main.command()
@click.argument('message')
def commit(message: str) -> None:
    """Commit all changes with a reference to the current story."""
    _run(_commit_async(message))


async def _commit_async(message: str) -> None:
    git = GitWorkflow()
    story = await Configuration(git).story()
    await git.create_commit(message, story)


@main.command('install-hook')
@click.option('-f', '--overwrite', is_flag=True, help='Replace an existing hook')
def install_hook(overwrite: bool) -> None:
    """Install the prepare-commit-msg hook into the repository."""
    _run(_install_hook_async(overwrite))


async def _install_hook_async(overwrite: bool) -> None:
    written = await GitWorkflow().add_hook(PREPARE_COMMIT_MSG, hook_source(PREPARE_COMMIT_MSG), overwrite)
    if not written:
        console.print("[yellow]Hook already exists. Use --overwrite to replace it.[/yellow]")


@main.group()
def config() -> None:
    """Read and write scoped git configuration."""
    pass


@config.command('get')
@click.argument('key')
@click.option('--scope', type=click.Choice(SCOPE_CHOICES), default='inherited', help='Configuration scope')
def config_get(key: str, scope: str) -> None:
    """Print the value of KEY."""
    _run(_config_get_async(key, scope))


async def _config_get_async(key: str, scope: str) -> None:
    value = await GitWorkflow().get_config(key, scope)
    click.echo(value)


@config.command('set')
@click.argument('key')
@click.argument('value')
@click.option('--scope', type=click.Choice(SCOPE_CHOICES[:3]), default='local', help='Configuration scope')
def config_set(key: str, value: str, scope: str) -> None:
    """Set KEY to VALUE."""
    _run(GitWorkflow().set_config(key, value, scope))


if __name__ == "__main__":
    main()
