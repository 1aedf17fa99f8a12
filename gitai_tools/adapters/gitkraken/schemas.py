"""GitKraken CLI adapter Pydantic schemas."""

from typing import Literal

from pydantic import Field

from gitai_tools.base import ToolInput


class GraphInput(ToolInput):
    """Input schema for gk_graph."""

    branch: str | None = Field(None, description="Branch to visualize (defaults to the current one)")
    limit: int = Field(20, ge=1, description="Number of commits to show")
    position: Literal["top", "bottom", "left", "right"] = Field("right", description="Graph panel position")


class WorkCommitAiInput(ToolInput):
    """Input schema for gk_work_commit_ai."""

    message: str | None = Field(None, description="Base message to enhance with AI")
    all: bool = Field(False, description="Stage all modified files before committing")
    scope: str | None = Field(None, description='Commit scope (e.g. "api", "ui")')


class WorkPrCreateAiInput(ToolInput):
    """Input schema for gk_work_pr_create_ai."""

    title: str | None = Field(None, description="Base title to enhance with AI")
    description: str | None = Field(None, description="Base description to enhance with AI")
    base: str = Field("main", description="Target branch")
    draft: bool = Field(False, description="Create as a draft")


class WorkspaceListInput(ToolInput):
    """Input schema for gk_workspace_list."""

    detailed: bool = Field(False, description="Show details for each workspace")


class WorkspaceCreateInput(ToolInput):
    """Input schema for gk_workspace_create."""

    name: str = Field(..., min_length=1, description="Workspace name")
    description: str | None = Field(None, description="Workspace description")
    repos: list[str] = Field(default_factory=list, description="Repository paths to add")


class WorkListInput(ToolInput):
    """Input schema for gk_work_list."""

    status: Literal["active", "completed", "all"] = Field("active", description="Work item status filter")
    limit: int = Field(10, ge=1, description="Maximum work items to return")


class SetupInput(ToolInput):
    """gk_setup takes no arguments."""
