"""Git tool implementations."""

from .branches import (
    BranchCreateTool,
    BranchDeleteTool,
    BranchListTool,
    BranchSwitchTool,
    MergeTool,
)
from .commits import AddTool, CommitTool, FetchTool, PullTool, PushTool, StashTool
from .recovery import CleanTool, ReflogTool, ResetTool, RevertTool
from .repository import CloneTool, ConfigTool, InitTool, RemoteTool
from .status import BlameTool, DiffTool, LogTool, ShowTool, StatusTool
from .tags import TagDeleteTool, TagListTool, TagPushTool, TagTool

__all__ = [
    # Repository
    "InitTool",
    "CloneTool",
    "RemoteTool",
    "ConfigTool",
    # Status & history
    "StatusTool",
    "LogTool",
    "DiffTool",
    "BlameTool",
    "ShowTool",
    # Commits & sync
    "AddTool",
    "CommitTool",
    "PushTool",
    "PullTool",
    "StashTool",
    "FetchTool",
    # Branches
    "BranchListTool",
    "BranchCreateTool",
    "BranchSwitchTool",
    "BranchDeleteTool",
    "MergeTool",
    # Recovery
    "ResetTool",
    "RevertTool",
    "ReflogTool",
    "CleanTool",
    # Tags
    "TagTool",
    "TagListTool",
    "TagDeleteTool",
    "TagPushTool",
]
