"""Tests for stories, configuration scopes and merge check results."""

import pytest

from pivotal_git_workflow.exceptions import InvalidScopeError
from pivotal_git_workflow.models import ConfigScope, MergeCheckResult, Story


class TestStory:
    def test_references(self):
        story = Story(id=12345678)

        assert story.reference == "#12345678"
        assert story.completes_reference == "Completes #12345678"

    def test_branch_name_from_explicit_name(self):
        assert Story(id=42).branch_name("Fix the  Login/Logout flow!") == "42-fix-the-login-logout-flow"

    def test_branch_name_falls_back_to_story_name(self):
        assert Story(id="42", name="Add search").branch_name() == "42-add-search"

    def test_branch_name_without_name_is_id(self):
        assert Story(id=42).branch_name() == "42"
        assert Story(id=42).branch_name("!!!") == "42"


class TestConfigScope:
    @pytest.mark.parametrize("value", ["branch", "local", "global", "inherited"])
    def test_parse_known_names(self, value):
        assert ConfigScope.parse(value).value == value

    def test_parse_passes_members_through(self):
        assert ConfigScope.parse(ConfigScope.GLOBAL) is ConfigScope.GLOBAL

    def test_parse_unknown_raises(self):
        with pytest.raises(InvalidScopeError):
            ConfigScope.parse("unknown")

    def test_invalid_scope_is_value_error(self):
        with pytest.raises(ValueError):
            ConfigScope.parse("system")

    def test_get_commands(self):
        assert ConfigScope.BRANCH.get_command("remote", "dev") == "git config branch.dev.remote"
        assert ConfigScope.INHERITED.get_command("user.name") == "git config user.name"
        assert ConfigScope.GLOBAL.get_command("user.name") == "git config --global user.name"

    def test_set_commands(self):
        assert ConfigScope.BRANCH.set_command("k", "v", "dev") == "git config --local branch.dev.k v"
        assert ConfigScope.LOCAL.set_command("k", "v") == "git config --local k v"
        assert ConfigScope.GLOBAL.set_command("k", "v") == "git config --global k v"

    def test_inherited_scope_cannot_be_set(self):
        with pytest.raises(InvalidScopeError):
            ConfigScope.INHERITED.set_command("k", "v")


def test_merge_check_result_is_trivial():
    assert MergeCheckResult("dev", "master", "abc", "abc").is_trivial
    assert not MergeCheckResult("dev", "master", "abc", "def").is_trivial


def test_empty_value_stays_an_argument():
    assert ConfigScope.BRANCH.set_command("root-remote", "", "dev") == "git config --local branch.dev.root-remote ''"
