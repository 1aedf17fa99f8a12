"""Git adapter Pydantic schemas.

Input schemas for all git tools. Wire names are camelCase.
"""

from typing import Literal

from pydantic import Field

from gitai_tools.base import ToolInput

# ============================================================================
# REPOSITORY
# ============================================================================


class InitInput(ToolInput):
    """Input schema for git_init."""

    path: str | None = Field(None, description="Directory to initialize (defaults to the working directory)")
    bare: bool = Field(False, description="Create a bare repository")
    default_branch: str = Field("main", description="Initial branch name")
    template: str | None = Field(None, description="Template directory to use")


class CloneInput(ToolInput):
    """Input schema for git_clone."""

    url: str = Field(..., min_length=1, description="Repository URL to clone")
    directory: str | None = Field(None, description="Target directory name")
    branch: str | None = Field(None, description="Branch to check out after cloning")
    depth: int | None = Field(None, ge=1, description="Create a shallow clone with this many commits")
    recursive: bool = Field(False, description="Clone submodules recursively")


class RemoteInput(ToolInput):
    """Input schema for git_remote."""

    action: Literal["add", "remove", "set-url", "list", "show"] = Field(
        ..., description="Remote action to perform"
    )
    name: str | None = Field(None, description="Remote name (e.g. origin, upstream)")
    url: str | None = Field(None, description="Remote URL")
    verbose: bool = Field(False, description="Include fetch/push URLs when listing")


class ConfigInput(ToolInput):
    """Input schema for git_config."""

    action: Literal["get", "set", "unset", "list"] = Field(..., description="Configuration action")
    key: str | None = Field(None, description="Configuration key (e.g. user.name)")
    value: str | None = Field(None, description="Value for the set action")
    global_: bool = Field(False, alias="global", description="Use the global configuration")
    system: bool = Field(False, description="Use the system configuration")


# ============================================================================
# STATUS & HISTORY
# ============================================================================


class StatusInput(ToolInput):
    """Input schema for git_status."""

    porcelain: bool = Field(False, description="Format for scripting")
    short: bool = Field(False, description="One-line summary")
    branch: bool = Field(True, description="Include branch information")
    show_stash: bool = Field(True, description="Include the stash count")


class LogInput(ToolInput):
    """Input schema for git_log."""

    max_count: int = Field(10, ge=1, description="Maximum number of commits")
    oneline: bool = Field(False, description="Include a compact one-line rendering")
    graph: bool = Field(False, description="Include an ASCII graph rendering")
    author: str | None = Field(None, description="Filter by author")
    since: str | None = Field(None, description='Commits since date (e.g. "2024-01-01", "1 week ago")')
    until: str | None = Field(None, description="Commits until date")
    grep: str | None = Field(None, description="Filter by message pattern")
    path: str | None = Field(None, description="Only commits touching this path")


class DiffInput(ToolInput):
    """Input schema for git_diff."""

    target: Literal["working", "staged", "commit", "branch"] = Field(
        "working", description="What to diff against"
    )
    commit1: str | None = Field(None, description="First commit or branch (required for commit/branch targets)")
    commit2: str | None = Field(None, description="Second commit or branch")
    path: str | None = Field(None, description="Limit the diff to this path")
    name_only: bool = Field(False, description="Only list changed file names")
    stat: bool = Field(False, description="Show a diffstat")
    context_lines: int = Field(3, ge=0, description="Context lines around changes")


class BlameInput(ToolInput):
    """Input schema for git_blame."""

    file: str = Field(..., min_length=1, description="File to blame")
    line_start: int | None = Field(None, ge=1, description="First line (1-based)")
    line_end: int | None = Field(None, ge=1, description="Last line (1-based)")
    show_email: bool = Field(False, description="Show author emails instead of names")
    show_line_numbers: bool = Field(True, description="Show original line numbers")


class ShowInput(ToolInput):
    """Input schema for git_show."""

    commit: str = Field("HEAD", description="Commit, branch or tag to show")
    show_diff: bool = Field(True, description="Include the patch")
    name_only: bool = Field(False, description="Only list changed file names")
    stat: bool = Field(False, description="Show a diffstat")


# ============================================================================
# COMMITS & SYNC
# ============================================================================

CommitType = Literal["feat", "fix", "docs", "style", "refactor", "test", "chore", "ci", "perf"]


class AddInput(ToolInput):
    """Input schema for git_add."""

    files: list[str] = Field(default_factory=list, description='Files or patterns (e.g. [".", "src/"])')
    all: bool = Field(False, description="Stage all changes including deletions (-A)")
    update: bool = Field(False, description="Stage tracked files only (-u)")
    dry_run: bool = Field(False, description="Show what would be staged")


class CommitInput(ToolInput):
    """Input schema for git_commit."""

    message: str | None = Field(None, description="Full commit message")
    type: CommitType | None = Field(None, description="Conventional commit type")
    scope: str | None = Field(None, description="Conventional commit scope")
    description: str | None = Field(None, description="Commit description, combined with type and scope")
    body: str | None = Field(None, description="Commit body")
    breaking: bool = Field(False, description="Mark as a breaking change")
    gitmoji: bool = Field(True, description="Prefix the message with a gitmoji")
    all: bool = Field(False, description="Commit all tracked changes (-a)")
    amend: bool = Field(False, description="Amend the previous commit")
    dry_run: bool = Field(False, description="Show the message and files without committing")


class PushInput(ToolInput):
    """Input schema for git_push."""

    remote: str | None = Field(None, description="Remote (defaults to the configured default remote)")
    branch: str | None = Field(None, description="Branch (defaults to the current branch)")
    set_upstream: bool = Field(False, description="Set upstream tracking (-u)")
    force: bool = Field(False, description="Force push")
    force_with_lease: bool = Field(False, description="Force push only if the remote is unchanged")
    tags: bool = Field(False, description="Push tags as well")
    dry_run: bool = Field(False, description="Simulate the push")


class PullInput(ToolInput):
    """Input schema for git_pull."""

    remote: str | None = Field(None, description="Remote (defaults to the configured default remote)")
    branch: str | None = Field(None, description="Branch (defaults to the current branch)")
    rebase: bool = Field(False, description="Rebase instead of merge")
    ff: Literal["only", "no", "default"] = Field("default", description="Fast-forward mode")
    squash: bool = Field(False, description="Squash incoming commits")
    tags: bool = Field(False, description="Fetch tags")


class StashInput(ToolInput):
    """Input schema for git_stash."""

    action: Literal["push", "pop", "apply", "list", "show", "drop", "clear"] = Field(
        ..., description="Stash action"
    )
    message: str | None = Field(None, description="Message for push")
    include_untracked: bool = Field(False, description="Stash untracked files too")
    keep_index: bool = Field(False, description="Keep staged changes in the index")
    stash_index: int = Field(0, ge=0, description="Stash entry for pop/apply/show/drop")
    force: bool = Field(False, description="Required to clear all stashes")


class FetchInput(ToolInput):
    """Input schema for git_fetch."""

    remote: str | None = Field(None, description="Remote (defaults to the configured default remote)")
    branch: str | None = Field(None, description="Only fetch this branch")
    all: bool = Field(False, description="Fetch all remotes")
    tags: bool = Field(True, description="Fetch tags")
    prune: bool = Field(False, description="Remove stale remote-tracking refs")
    depth: int | None = Field(None, ge=1, description="Limit fetch depth")
    force: bool = Field(False, description="Allow non-fast-forward ref updates")
    dry_run: bool = Field(False, description="Show what would be fetched")
    quiet: bool = Field(False, description="Suppress progress output")
    verbose: bool = Field(False, description="Verbose output")


# ============================================================================
# BRANCHES
# ============================================================================


class BranchListInput(ToolInput):
    """Input schema for git_branch_list."""

    include_remote: bool = Field(False, description="List remote-tracking branches")
    all: bool = Field(False, description="List local and remote branches")
    verbose: bool = Field(False, description="Include last commit subject")
    merged: bool = Field(False, description="Only branches merged into HEAD")
    no_merged: bool = Field(False, description="Only branches not merged into HEAD")


class BranchCreateInput(ToolInput):
    """Input schema for git_branch_create."""

    name: str = Field(..., min_length=1, description="New branch name")
    start_point: str | None = Field(None, description="Commit or branch to start from")
    checkout: bool = Field(True, description="Switch to the new branch")
    track: bool = Field(False, description="Set up tracking")
    force: bool = Field(False, description="Reset the branch if it already exists")


class BranchSwitchInput(ToolInput):
    """Input schema for git_branch_switch."""

    name: str = Field(..., min_length=1, description="Branch to switch to")
    create: bool = Field(False, description="Create the branch first")
    force: bool = Field(False, description="Discard local changes")
    stash: bool = Field(False, description="Stash local changes before switching")
    track: bool = Field(False, description="Set up tracking when creating")
    start_point: str | None = Field(None, description="Start point when creating")


class BranchDeleteInput(ToolInput):
    """Input schema for git_branch_delete."""

    names: list[str] = Field(..., min_length=1, description="Branches to delete")
    force: bool = Field(False, description="Delete even if not merged (-D)")
    remote: bool = Field(False, description="Delete remote-tracking branches (-r)")
    dry_run: bool = Field(False, description="Check which branches could be deleted")


class MergeInput(ToolInput):
    """Input schema for git_merge."""

    branch: str = Field(..., min_length=1, description="Branch to merge into the current branch")
    strategy: Literal["resolve", "recursive", "ort", "octopus", "ours", "subtree"] | None = Field(
        None, description="Merge strategy"
    )
    ff: Literal["only", "no", "default"] = Field("default", description="Fast-forward mode")
    squash: bool = Field(False, description="Squash the merge")
    no_commit: bool = Field(False, description="Stop before committing")
    message: str | None = Field(None, description="Merge commit message")
    abort: bool = Field(False, description="Abort the merge in progress")
    continue_: bool = Field(False, alias="continue", description="Continue the merge in progress")


# ============================================================================
# RECOVERY
# ============================================================================


class ResetInput(ToolInput):
    """Input schema for git_reset."""

    mode: Literal["soft", "mixed", "hard"] = Field("mixed", description="Reset mode")
    target: str | None = Field(None, description="Commit to reset to (defaults to HEAD)")
    paths: list[str] = Field(default_factory=list, description="Only reset these paths")
    force: bool = Field(False, description="Allow a hard reset that discards uncommitted changes")
    dry_run: bool = Field(False, description="Show the reset without performing it")


class RevertInput(ToolInput):
    """Input schema for git_revert."""

    commits: list[str] = Field(default_factory=list, description="Commits to revert")
    no_commit: bool = Field(False, description="Stage the reversal without committing")
    mainline: int | None = Field(None, ge=1, description="Parent number when reverting a merge")
    edit: bool = Field(False, description="Open an editor for the message")
    signoff: bool = Field(False, description="Add a Signed-off-by trailer")
    continue_: bool = Field(False, alias="continue", description="Continue after resolving conflicts")
    abort: bool = Field(False, description="Abort the revert in progress")


class ReflogInput(ToolInput):
    """Input schema for git_reflog."""

    action: Literal["show", "expire", "delete"] = Field("show", description="Reflog action")
    reference: str = Field("HEAD", description="Reference, or entry selector (HEAD@{2}) for delete")
    limit: int = Field(20, ge=1, description="Entries to show")
    all: bool = Field(False, description="All references")
    expire_time: str | None = Field(None, description='Expiry cutoff for expire (e.g. "30.days.ago")')
    force: bool = Field(False, description="Required to expire or delete entries")
    dry_run: bool = Field(False, description="Report what would be pruned")


class CleanInput(ToolInput):
    """Input schema for git_clean."""

    dry_run: bool = Field(True, description="Only list files that would be removed")
    force: bool = Field(False, description="Required to actually remove files")
    directories: bool = Field(False, description="Remove untracked directories too")
    ignored: bool = Field(False, description="Remove ignored files too")
    paths: list[str] = Field(default_factory=list, description="Only clean these paths")
    exclude: list[str] = Field(default_factory=list, description="Patterns to keep")


# ============================================================================
# TAGS
# ============================================================================

TAG_NAME_PATTERN = r"^[a-zA-Z0-9._/-]+$"


class TagInput(ToolInput):
    """Input schema for git_tag."""

    name: str = Field(..., min_length=1, description="Tag name")
    message: str | None = Field(None, description="Tag message (creates an annotated tag)")
    commit: str | None = Field(None, description="Commit to tag (defaults to HEAD)")
    force: bool = Field(False, description="Replace an existing tag")
    sign: bool = Field(False, description="GPG-sign the tag")
    annotated: bool = Field(False, description="Create an annotated tag")


class TagListInput(ToolInput):
    """Input schema for git_tag_list."""

    pattern: str | None = Field(None, description='Glob filter (e.g. "v1.*")')
    sort: Literal["name", "version", "creatordate", "committerdate"] = Field("name")
    limit: int = Field(50, ge=1, description="Maximum tags to return")
    detailed: bool = Field(False, description="Include commit, message, tagger and date")
    merged: str | None = Field(None, description="Only tags merged into this commit")
    contains: str | None = Field(None, description="Only tags containing this commit")


class TagDeleteInput(ToolInput):
    """Input schema for git_tag_delete."""

    tags: list[str] = Field(..., min_length=1, description="Tags to delete")
    dry_run: bool = Field(False, description="Check which tags would be deleted")


class TagPushInput(ToolInput):
    """Input schema for git_tag_push."""

    remote: str | None = Field(None, description="Remote (defaults to the configured default remote)")
    tags: list[str] = Field(default_factory=list, description="Tags to push or delete")
    all: bool = Field(False, description="Push all tags")
    force: bool = Field(False, description="Overwrite remote tags")
    delete: bool = Field(False, description="Delete the given tags from the remote")
    dry_run: bool = Field(False, description="Simulate the push")
