"""Tests for staging, commit message composition and remote sync tools."""

import pytest

from gitai_tools.adapters.git.schemas import CommitInput
from gitai_tools.adapters.git.tools import AddTool, CommitTool, FetchTool, PullTool, PushTool, StashTool
from gitai_tools.adapters.git.tools.commits import (
    build_commit_message,
    detect_commit_type,
    parse_shortstat,
)
from gitai_tools.exceptions import PreconditionError

HEAD_SHA = "0123456789abcdef0123456789abcdef01234567"


def message_for(gitmojis=True, auto_conventions=True, **arguments):
    return build_commit_message(
        CommitInput.model_validate(arguments), gitmojis=gitmojis, auto_conventions=auto_conventions
    )


class TestCommitMessages:
    def test_conventional_with_scope_and_gitmoji(self):
        assert message_for(type="feat", scope="api", description="add endpoint") == "✨ feat(api): add endpoint"

    def test_breaking_change_footer(self):
        message = message_for(type="fix", description="drop v1", body="Removes the old API", breaking=True)
        assert message == "🐛 fix!: drop v1\n\nRemoves the old API\n\nBREAKING CHANGE: drop v1"

    def test_gitmoji_disabled_by_configuration(self):
        assert message_for(gitmojis=False, type="docs", description="update readme") == "docs: update readme"

    def test_gitmoji_disabled_per_call(self):
        assert message_for(gitmoji=False, message="Fix crash") == "Fix crash"

    def test_free_text_gets_detected_gitmoji(self):
        assert message_for(message="Fix crash on startup") == "🐛 Fix crash on startup"

    def test_free_text_with_emoji_left_alone(self):
        assert message_for(message="🚀 Ship it") == "🚀 Ship it"

    def test_free_text_without_conventions_uses_default_gitmoji(self):
        assert message_for(auto_conventions=False, message="Fix crash") == "📝 Fix crash"

    def test_message_or_type_required(self):
        with pytest.raises(PreconditionError):
            message_for(scope="api")

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Add login page", "feat"),
            ("Update docs", "docs"),
            ("Refactor parser", "refactor"),
            ("Improve performance", "perf"),
            ("Bump version", "chore"),
        ],
    )
    def test_detect_commit_type(self, text, expected):
        assert detect_commit_type(text) == expected


def test_parse_shortstat():
    assert parse_shortstat(" 3 files changed, 10 insertions(+), 2 deletions(-)") == {
        "files": 3,
        "insertions": 10,
        "deletions": 2,
    }
    assert parse_shortstat(" 1 file changed, 1 deletion(-)") == {"files": 1, "insertions": 0, "deletions": 1}


class TestCommitTool:
    @pytest.mark.asyncio
    async def test_commit(self, call, runner):
        runner.on(
            "git", "commit", "-m", "✨ feat: add search",
            stdout="[main 0123456] ✨ feat: add search\n 2 files changed, 10 insertions(+), 1 deletion(-)\n",
        )
        runner.on("git", "rev-parse", "HEAD", stdout=f"{HEAD_SHA}\n")

        result = await call(CommitTool(), type="feat", description="add search")

        assert result.success is True
        assert result.message == "Commit created: 01234567"
        assert result.data == {
            "hash": HEAD_SHA,
            "message": "✨ feat: add search",
            "files": 2,
            "insertions": 10,
            "deletions": 1,
        }

    @pytest.mark.asyncio
    async def test_dry_run_does_not_commit(self, call, runner):
        runner.on("git", "status", "--porcelain=v1", "--branch", "-z", stdout="## main\0M  a.py\0 M b.py\0")

        result = await call(CommitTool(), message="Update docs", dryRun=True)

        assert result.success is True
        assert result.data["dryRun"] is True
        assert result.data["preview"] == "📚 Update docs"
        assert result.data["commitMessage"] == "📚 Update docs"
        assert result.data["files"] == ["a.py"]
        assert runner.git_calls("commit") == []

    @pytest.mark.asyncio
    async def test_missing_message_is_a_failure(self, call, runner):
        result = await call(CommitTool())

        assert result.success is False
        assert result.message == "Failed to create commit"
        assert runner.calls == []


class TestAddTool:
    @pytest.mark.asyncio
    async def test_add_files(self, call, runner):
        runner.on("git", "diff", "--cached", "--name-only", stdout="a.py\nb.py\n")

        result = await call(AddTool(), files=["a.py", "b.py"])

        assert ("git", "add", "--", "a.py", "b.py") in runner.calls
        assert result.data["staged"] == ["a.py", "b.py"]
        assert result.message == "Staged 2 files"

    @pytest.mark.asyncio
    async def test_dry_run_reports_without_staging(self, call, runner):
        runner.on("git", "add", "--dry-run", "--", ".", stdout="add 'a.py'\nadd 'docs/b.md'\n")

        result = await call(AddTool(), dryRun=True)

        assert result.data["staged"] == ["a.py", "docs/b.md"]
        assert result.data["preview"] == "git add ."
        assert runner.calls == [("git", "add", "--dry-run", "--", ".")]


class TestStashTool:
    @pytest.mark.asyncio
    async def test_clear_requires_force(self, call, runner):
        runner.on("git", "stash", "list", stdout="stash@{0}: WIP on main\n")

        result = await call(StashTool(), action="clear")

        assert result.success is False
        assert result.data["blocked"] == "stash_clear"
        assert not runner.called("git", "stash", "clear")

    @pytest.mark.asyncio
    async def test_clear_with_force(self, call, runner):
        runner.on("git", "stash", "list", stdout="stash@{0}: WIP on main\n")

        result = await call(StashTool(), action="clear", force=True)

        assert result.success is True
        assert ("git", "stash", "clear") in runner.calls

    @pytest.mark.asyncio
    async def test_pop_uses_index(self, call, runner):
        await call(StashTool(), action="pop", stashIndex=2)
        assert ("git", "stash", "pop", "stash@{2}") in runner.calls


class TestPushTool:
    @pytest.mark.asyncio
    async def test_push_current_branch_to_default_remote(self, call, runner):
        runner.on("git", "branch", "--show-current", stdout="feature\n")

        result = await call(PushTool(), setUpstream=True)

        assert result.success is True
        assert result.message == "Pushed to origin/feature"
        assert ("git", "push", "-u", "origin", "feature") in runner.calls

    @pytest.mark.asyncio
    async def test_push_dry_run(self, call, runner):
        result = await call(PushTool(), remote="upstream", branch="main", dryRun=True, forceWithLease=True)

        assert result.message == "Would push to upstream/main"
        assert runner.calls == [("git", "push", "--dry-run", "--force-with-lease", "upstream", "main")]

    @pytest.mark.asyncio
    async def test_rejected_push_is_a_failure(self, call, runner):
        runner.on("git", "branch", "--show-current", stdout="main\n")
        runner.fail("git", "push", "origin", "main", stderr="! [rejected] main -> main (fetch first)")

        result = await call(PushTool())

        assert result.success is False
        assert result.message == "Failed to push"
        assert "rejected" in result.error


@pytest.mark.asyncio
async def test_pull_rebase(call, runner):
    result = await call(PullTool(), rebase=True)

    assert result.success is True
    assert runner.called("git", "pull", "--rebase")


@pytest.mark.asyncio
async def test_fetch_reports_new_and_updated_branches(call, runner):
    refs = ("git", "for-each-ref", "--format=%(refname:short) %(objectname)", "refs/remotes")
    before = "origin/main aaa\norigin/dev bbb\n"
    after = "origin/main aaa\norigin/dev ccc\norigin/new ddd\n"
    responses = iter([before, after])

    original_run = runner.run

    async def run(binary, args=(), **kwargs):
        if (binary, *args) == refs:
            runner.on(*refs, stdout=next(responses))
        return await original_run(binary, args, **kwargs)

    runner.run = run

    result = await call(FetchTool())

    assert result.success is True
    assert result.data["newBranches"] == ["origin/new"]
    assert result.data["updatedBranches"] == ["origin/dev"]
