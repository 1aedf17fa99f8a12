"""Git adapter.

Tools that drive the local ``git`` binary, grouped into providers by area:

- Repository: init, clone, remotes, config
- Status: status, log, diff, blame, show
- Commits: add, commit, push, pull, stash, fetch
- Branches: list, create, switch, delete, merge
- Recovery: reset, revert, reflog, clean
- Tags: create, list, delete, push

Usage:
    from gitai_tools.adapters.git import git_providers
    from gitai_tools.registry import ToolRegistry

    registry = await ToolRegistry.build(git_providers())
"""

from gitai_tools.base import Tool

from .tools import (
    AddTool,
    BlameTool,
    BranchCreateTool,
    BranchDeleteTool,
    BranchListTool,
    BranchSwitchTool,
    CleanTool,
    CloneTool,
    CommitTool,
    ConfigTool,
    DiffTool,
    FetchTool,
    InitTool,
    LogTool,
    MergeTool,
    PullTool,
    PushTool,
    ReflogTool,
    RemoteTool,
    ResetTool,
    RevertTool,
    ShowTool,
    StashTool,
    StatusTool,
    TagDeleteTool,
    TagListTool,
    TagPushTool,
    TagTool,
)


class RepositoryProvider:
    def get_tools(self) -> list[Tool]:
        return [InitTool(), CloneTool(), RemoteTool(), ConfigTool()]


class StatusProvider:
    def get_tools(self) -> list[Tool]:
        return [StatusTool(), LogTool(), DiffTool(), BlameTool(), ShowTool()]


class CommitProvider:
    def get_tools(self) -> list[Tool]:
        return [AddTool(), CommitTool(), PushTool(), PullTool(), StashTool(), FetchTool()]


class BranchProvider:
    def get_tools(self) -> list[Tool]:
        return [
            BranchListTool(),
            BranchCreateTool(),
            BranchSwitchTool(),
            BranchDeleteTool(),
            MergeTool(),
        ]


class RecoveryProvider:
    def get_tools(self) -> list[Tool]:
        return [ResetTool(), RevertTool(), ReflogTool(), CleanTool()]


class TagProvider:
    def get_tools(self) -> list[Tool]:
        return [TagTool(), TagListTool(), TagDeleteTool(), TagPushTool()]


def git_providers() -> list:
    """All git providers in registration order."""
    return [
        RepositoryProvider(),
        StatusProvider(),
        CommitProvider(),
        BranchProvider(),
        RecoveryProvider(),
        TagProvider(),
    ]


__all__ = [
    "RepositoryProvider",
    "StatusProvider",
    "CommitProvider",
    "BranchProvider",
    "RecoveryProvider",
    "TagProvider",
    "git_providers",
]
