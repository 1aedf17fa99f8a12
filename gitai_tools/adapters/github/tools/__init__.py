"""GitHub tool implementations."""

from .actions import ReleaseListTool, WorkflowRunTool
from .issues import IssueCreateTool, IssueListTool, IssueViewTool
from .pulls import PrCreateTool, PrListTool, PrViewTool
from .repos import RepoInfoTool

__all__ = [
    "RepoInfoTool",
    "IssueListTool",
    "IssueCreateTool",
    "IssueViewTool",
    "PrListTool",
    "PrCreateTool",
    "PrViewTool",
    "WorkflowRunTool",
    "ReleaseListTool",
]
