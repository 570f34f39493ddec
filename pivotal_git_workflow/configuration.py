"""Story bookkeeping stored in git configuration.

The story a topic branch belongs to is recorded as branch-scoped config, so
the repository stays the single source of truth between invocations.
"""

from pivotal_git_workflow.exceptions import StoryNotFoundError
from pivotal_git_workflow.git import GitWorkflow
from pivotal_git_workflow.models import ConfigScope, Story

STORY_ID_CONFIG_KEY = "pivotal-story-id"


class Configuration:
    """Reads and writes workflow settings through a GitWorkflow."""

    def __init__(self, git: GitWorkflow) -> None:
        self.git = git

    async def story_id(self) -> str:
        """Get the story id recorded on the current branch.

        Raises:
            StoryNotFoundError: If the branch has no story recorded.
        """
        story_id = await self.git.get_config(STORY_ID_CONFIG_KEY, ConfigScope.BRANCH)
        if not story_id:
            branch = await self.git.branch_name()
            raise StoryNotFoundError(f"No story is recorded for branch {branch}")
        return story_id

    async def set_story_id(self, story_id) -> None:
        await self.git.set_config(STORY_ID_CONFIG_KEY, str(story_id), ConfigScope.BRANCH)

    async def story(self) -> Story:
        return Story(id=await self.story_id())

