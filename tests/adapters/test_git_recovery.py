"""Tests for reset, revert, reflog and clean."""

import pytest

from gitai_tools.adapters.git.tools import CleanTool, ReflogTool, ResetTool, RevertTool

HEAD_SHA = "abcdef1234567890abcdef1234567890abcdef12"
PARENT_SHA = "1234567890abcdef1234567890abcdef12345678"


@pytest.fixture
def shas(runner):
    runner.on("git", "rev-parse", "HEAD", stdout=f"{HEAD_SHA}\n")
    runner.on("git", "rev-parse", "HEAD~1", stdout=f"{PARENT_SHA}\n")
    return runner


class TestResetTool:
    @pytest.mark.asyncio
    async def test_hard_reset_with_changes_blocked_without_force(self, call, dirty_tree, shas):
        result = await call(ResetTool(), mode="hard", target="HEAD~1")

        assert result.success is False
        assert result.error == "Uncommitted changes detected"
        assert result.data["blocked"] == "dirty_working_tree"
        assert [f["path"] for f in result.data["uncommittedFiles"]] == ["src/app.py", "notes.txt"]
        assert dirty_tree.git_calls("reset") == []

    @pytest.mark.asyncio
    async def test_hard_reset_with_force_runs(self, call, dirty_tree, shas):
        result = await call(ResetTool(), mode="hard", target="HEAD~1", force=True)

        assert result.success is True
        assert ("git", "reset", "--hard", "HEAD~1") in dirty_tree.calls
        assert result.data["previousCommit"] == HEAD_SHA[:8]

    @pytest.mark.asyncio
    async def test_hard_reset_on_clean_tree_needs_no_force(self, call, clean_tree, shas):
        result = await call(ResetTool(), mode="hard")

        assert result.success is True
        assert ("git", "reset", "--hard", "HEAD") in clean_tree.calls

    @pytest.mark.asyncio
    async def test_dry_run_only_reads(self, call, dirty_tree, shas):
        result = await call(ResetTool(), mode="mixed", target="HEAD~1", dryRun=True)

        assert result.success is True
        assert result.message == f"Would reset mixed to {PARENT_SHA[:8]}"
        assert result.data["dryRun"] is True
        assert result.data["preview"] == "git reset --mixed HEAD~1"
        assert dirty_tree.git_calls("reset") == []

    @pytest.mark.asyncio
    async def test_hard_dry_run_on_dirty_tree_previews(self, call, dirty_tree, shas):
        result = await call(ResetTool(), mode="hard", target="HEAD~1", dryRun=True)

        assert result.success is True
        assert result.message == f"Would reset hard to {PARENT_SHA[:8]}"
        assert result.data["preview"] == "git reset --hard HEAD~1"
        assert "blocked" not in result.data
        assert dirty_tree.git_calls("reset") == []

    @pytest.mark.asyncio
    async def test_path_reset(self, call, clean_tree, shas):
        await call(ResetTool(), paths=["a.py", "b.py"])
        assert ("git", "reset", "HEAD", "--", "a.py", "b.py") in clean_tree.calls


class TestRevertTool:
    @pytest.mark.asyncio
    async def test_revert_commits(self, call, clean_tree, shas):
        result = await call(RevertTool(), commits=["abc123"])

        assert result.success is True
        assert ("git", "revert", "--no-edit", "abc123") in clean_tree.calls
        assert result.data["revertedCommits"] == ["abc123"]

    @pytest.mark.asyncio
    async def test_revert_conflicts_reported(self, call, runner):
        runner.fail("git", "revert", "--no-edit", "abc123", stderr="CONFLICT (content)")
        runner.on("git", "status", "--porcelain=v1", "--branch", "-z", stdout="## main\0UU f.py\0")

        result = await call(RevertTool(), commits=["abc123"])

        assert result.success is False
        assert result.error == "Revert conflicts"
        assert result.data["conflicts"] == ["f.py"]
        assert result.data["needsResolution"] is True

    @pytest.mark.asyncio
    async def test_revert_requires_commits(self, call):
        result = await call(RevertTool())

        assert result.success is False
        assert result.error == "At least one commit is required"

    @pytest.mark.asyncio
    async def test_continue_accepts_reserved_word_argument(self, call, runner):
        result = await call(RevertTool(), **{"continue": True})

        assert result.success is True
        assert ("git", "-c", "core.editor=true", "revert", "--continue") in runner.calls


class TestReflogTool:
    @pytest.mark.asyncio
    async def test_show_parses_entries(self, call, runner):
        runner.on(
            "git", "reflog", "show", "--format=%H%x1f%gd%x1f%gs", "-n", "20", "HEAD",
            stdout=f"{HEAD_SHA}\x1fHEAD@{{0}}\x1fcommit: add x\n{PARENT_SHA}\x1fHEAD@{{1}}\x1fcheckout: moving\n",
        )

        result = await call(ReflogTool())

        assert result.success is True
        assert result.data["total"] == 2
        assert result.data["entries"][0] == {
            "index": 0,
            "hash": HEAD_SHA[:8],
            "selector": "HEAD@{0}",
            "message": "commit: add x",
        }

    @pytest.mark.asyncio
    async def test_expire_requires_force(self, call, runner):
        result = await call(ReflogTool(), action="expire", expireTime="30.days.ago")

        assert result.success is False
        assert result.data["blocked"] == "reflog_prune"
        assert runner.git_calls("reflog") == []

    @pytest.mark.asyncio
    async def test_expire_dry_run(self, call, runner):
        result = await call(ReflogTool(), action="expire", expireTime="30.days.ago", dryRun=True)

        assert result.success is True
        assert result.data["dryRun"] is True
        assert runner.calls == [("git", "reflog", "expire", "--dry-run", "--expire=30.days.ago", "HEAD")]

    @pytest.mark.asyncio
    async def test_delete_needs_selector(self, call, runner):
        result = await call(ReflogTool(), action="delete", reference="HEAD", force=True)

        assert result.success is False
        assert result.message == "Failed to delete reflog"
        assert runner.calls == []


class TestCleanTool:
    @pytest.mark.asyncio
    async def test_defaults_to_dry_run(self, call, runner):
        runner.on("git", "clean", "--dry-run", stdout="Would remove a.txt\nWould remove build/\n")

        result = await call(CleanTool())

        assert result.success is True
        assert result.data["dryRun"] is True
        assert result.data["files"] == ["a.txt", "build/"]
        assert result.data["preview"] == ["a.txt", "build/"]
        assert not runner.called("git", "clean", "--force")

    @pytest.mark.asyncio
    async def test_removal_requires_force(self, call, runner):
        result = await call(CleanTool(), dryRun=False)

        assert result.success is False
        assert result.data["blocked"] == "clean_requires_force"
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_forced_removal(self, call, runner):
        runner.on("git", "clean", "--force", "-d", stdout="Removing a.txt\nRemoving build/\n")

        result = await call(CleanTool(), dryRun=False, force=True, directories=True)

        assert result.success is True
        assert result.message == "Clean completed: 2 files removed"
        assert result.data["files"] == ["a.txt", "build/"]
