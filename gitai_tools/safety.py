"""Safety gating for destructive tools.

Destructive operations share three patterns:

- a dry run reports what would happen without running any mutating command
  (``dry_run_preview``);
- an unsafe operation is refused unless the caller passes ``force``
  (``require_force`` / ``SafetyBlock``);
- a multi-target operation records a per-target outcome and decides overall
  success by an aggregate policy (``BatchOutcome``).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

from gitai_obs.logging import get_logger
from gitai_tools.base import ToolResult
from gitai_tools.exceptions import ToolError

logger = get_logger(__name__)


def dry_run_preview(message: str, preview: Any, **details: Any) -> ToolResult:
    """Successful result describing an action that was not performed."""
    return ToolResult.ok(message, data={"dryRun": True, "preview": preview, **details})


@dataclass(frozen=True)
class SafetyBlock:
    """Refusal of an unsafe action."""

    rule: str
    message: str
    error: str
    state: dict[str, Any] = field(default_factory=dict)

    def to_result(self) -> ToolResult:
        logger.info("safety_block", rule=self.rule, error=self.error)
        return ToolResult.fail(
            self.message,
            error=self.error,
            data={**self.state, "blocked": self.rule, "override": "force"},
        )


def require_force(
    unsafe: bool,
    force: bool,
    *,
    rule: str,
    message: str,
    error: str,
    state: dict[str, Any] | None = None,
) -> ToolResult | None:
    """Return a refusal when ``unsafe`` holds and ``force`` is not set.

    Callers return the refusal unchanged, or carry on when this is None.
    """
    if unsafe and not force:
        return SafetyBlock(rule=rule, message=message, error=error, state=state or {}).to_result()
    return None


async def working_tree_changes(git: Any) -> list[dict[str, str]]:
    """Uncommitted files as ``{path, status}`` entries."""
    status = await git.status()
    return [{"path": f.path, "status": f.code.strip() or f.code} for f in status.files]


class AggregatePolicy(str, Enum):
    """How per-target outcomes combine into overall success."""

    ANY = "any"  # at least one target succeeded
    ALL = "all"  # no target failed


@dataclass
class TargetOutcome:
    """Result of acting on one target of a batch."""

    target: str
    success: bool
    error: str | None = None
    detail: Any = None

    def to_dict(self, key: str = "target") -> dict[str, Any]:
        entry: dict[str, Any] = {key: self.target, "success": self.success}
        if self.error is not None:
            entry["error"] = self.error
        if self.detail is not None:
            entry["detail"] = self.detail
        return entry


@dataclass
class BatchOutcome:
    """Per-target outcomes of a multi-target action."""

    policy: AggregatePolicy = AggregatePolicy.ANY
    outcomes: list[TargetOutcome] = field(default_factory=list)

    def record(self, target: str, success: bool, error: str | None = None, detail: Any = None) -> TargetOutcome:
        outcome = TargetOutcome(target, success, error, detail)
        self.outcomes.append(outcome)
        return outcome

    async def attempt(self, target: str, action: Callable[[], Awaitable[Any]]) -> TargetOutcome:
        """Run ``action`` for one target, recording a ``ToolError`` as that target's failure."""
        try:
            detail = await action()
        except ToolError as e:
            logger.info("batch_target_failed", target=target, error=e.message)
            return self.record(target, False, error=e.message)
        return self.record(target, True, detail=detail)

    @property
    def succeeded(self) -> list[str]:
        return [o.target for o in self.outcomes if o.success]

    @property
    def failed(self) -> list[TargetOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def success(self) -> bool:
        if self.policy is AggregatePolicy.ALL:
            return bool(self.outcomes) and not self.failed
        return bool(self.succeeded)

    def to_result(
        self,
        message: str,
        error: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> ToolResult:
        """Result whose success follows the aggregate policy."""
        if self.success:
            return ToolResult.ok(message, data=data)
        failures = "; ".join(f"{o.target}: {o.error}" for o in self.failed)
        return ToolResult.fail(message, error=error or failures or "No targets succeeded", data=data)
