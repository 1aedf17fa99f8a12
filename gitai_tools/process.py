"""External process execution.

``CommandRunner`` spawns binaries without a shell, bounds how many run at once
and kills any that exceed the timeout. ``GitClient`` binds a runner to the
``git`` binary and parses the handful of outputs the tools need structured.
"""

import asyncio
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from gitai_obs.logging import get_logger
from gitai_obs.metrics import external_commands_total
from gitai_tools.exceptions import (
    CommandError,
    CommandNotFoundError,
    CommandTimeoutError,
)

logger = get_logger(__name__)

TERMINATION_GRACE_PERIOD = 2.0


@dataclass(frozen=True)
class CommandResult:
    """Captured output of a finished process."""

    argv: tuple[str, ...]
    exit_code: int
    stdout: str
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """stdout, falling back to stderr (git reports a lot there)."""
        return self.stdout.strip() or self.stderr.strip()


class CommandRunner:
    """Run external commands with a concurrency bound and a timeout.

    Example:
        runner = CommandRunner(cwd=Path("/project"), max_concurrent=4)
        result = await runner.run("git", ["status", "--porcelain"])
    """

    def __init__(
        self,
        cwd: Path | None = None,
        max_concurrent: int = 6,
        timeout: float | None = 120.0,
    ):
        self.cwd = cwd or Path.cwd()
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self._semaphore = asyncio.Semaphore(max_concurrent)

    async def run(
        self,
        binary: str,
        args: Sequence[str] = (),
        *,
        cwd: Path | str | None = None,
        timeout: float | None = None,
        check: bool = True,
    ) -> CommandResult:
        """Run ``binary`` with ``args`` and capture its output.

        Raises:
            CommandNotFoundError: binary missing or not executable
            CommandTimeoutError: process killed after the timeout
            CommandError: non-zero exit while ``check`` is set
        """
        argv = (binary, *args)
        return await self._execute(argv, cwd=cwd, timeout=timeout, check=check, shell=False)

    async def run_shell(
        self,
        command: str,
        *,
        cwd: Path | str | None = None,
        timeout: float | None = None,
        check: bool = True,
    ) -> CommandResult:
        """Run a shell command line. Only used for package-manager installs."""
        return await self._execute((command,), cwd=cwd, timeout=timeout, check=check, shell=True)

    async def _execute(
        self,
        argv: tuple[str, ...],
        *,
        cwd: Path | str | None,
        timeout: float | None,
        check: bool,
        shell: bool,
    ) -> CommandResult:
        binary = argv[0].split()[0] if shell else argv[0]
        effective_timeout = timeout if timeout is not None else self.timeout
        workdir = str(cwd or self.cwd)

        async with self._semaphore:
            logger.debug("command_started", argv=list(argv), cwd=workdir)
            try:
                if shell:
                    process = await asyncio.create_subprocess_shell(
                        argv[0],
                        stdout=asyncio.subprocess.PIPE,
                        stderr=asyncio.subprocess.PIPE,
                        cwd=workdir,
                    )
                else:
                    process = await asyncio.create_subprocess_exec(
                        *argv,
                        stdout=asyncio.subprocess.PIPE,
                        stderr=asyncio.subprocess.PIPE,
                        stdin=asyncio.subprocess.DEVNULL,
                        cwd=workdir,
                    )
            except OSError as e:
                external_commands_total.labels(binary=binary, status="not_found").inc()
                raise CommandNotFoundError(
                    f"Cannot execute '{binary}': {e.strerror or e}", argv=list(argv)
                ) from e

            try:
                stdout, stderr = await asyncio.wait_for(
                    process.communicate(), timeout=effective_timeout
                )
            except asyncio.TimeoutError:
                await self._terminate(process)
                external_commands_total.labels(binary=binary, status="timeout").inc()
                logger.warning("command_timeout", argv=list(argv), timeout=effective_timeout)
                raise CommandTimeoutError(
                    f"'{' '.join(argv)}' timed out after {effective_timeout}s", argv=list(argv)
                )

        result = CommandResult(
            argv=argv,
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

        if not result.success:
            external_commands_total.labels(binary=binary, status="failed").inc()
            logger.debug(
                "command_failed", argv=list(argv), exit_code=result.exit_code, stderr=result.stderr
            )
            if check:
                raise CommandError(
                    result.stderr.strip() or result.stdout.strip() or f"exit code {result.exit_code}",
                    argv=list(argv),
                    exit_code=result.exit_code,
                    stdout=result.stdout,
                    stderr=result.stderr,
                )
        else:
            external_commands_total.labels(binary=binary, status="ok").inc()

        return result

    @staticmethod
    async def _terminate(process: asyncio.subprocess.Process) -> None:
        process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=TERMINATION_GRACE_PERIOD)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()


# ============================================================================
# GIT
# ============================================================================

CONFLICT_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}

_BRANCH_HEADER = re.compile(
    r"^(?P<branch>.+?)(?:\.\.\.(?P<tracking>\S+))?(?: \[(?P<counts>[^\]]+)\])?$"
)


@dataclass(frozen=True)
class FileStatus:
    """One entry of ``git status --porcelain``."""

    path: str
    index: str
    working_dir: str
    from_path: str | None = None

    @property
    def code(self) -> str:
        return f"{self.index}{self.working_dir}"

    @property
    def conflicted(self) -> bool:
        return self.code in CONFLICT_CODES

    @property
    def untracked(self) -> bool:
        return self.code == "??"

    def to_dict(self) -> dict[str, str]:
        entry = {"path": self.path, "index": self.index, "workingDir": self.working_dir}
        if self.from_path:
            entry["from"] = self.from_path
        return entry


@dataclass(frozen=True)
class GitStatus:
    """Parsed working tree status."""

    branch: str | None = None
    tracking: str | None = None
    ahead: int = 0
    behind: int = 0
    detached: bool = False
    files: tuple[FileStatus, ...] = field(default_factory=tuple)

    @property
    def staged(self) -> list[str]:
        return [
            f.path for f in self.files
            if f.index not in (" ", "?", "!") and not f.conflicted
        ]

    @property
    def unstaged(self) -> list[str]:
        return [
            f.path for f in self.files
            if f.working_dir not in (" ", "?", "!") and not f.conflicted
        ]

    @property
    def untracked(self) -> list[str]:
        return [f.path for f in self.files if f.untracked]

    @property
    def conflicted(self) -> list[str]:
        return [f.path for f in self.files if f.conflicted]

    @property
    def is_clean(self) -> bool:
        return not self.files


def parse_porcelain_status(output: str) -> GitStatus:
    """Parse ``git status --porcelain=v1 --branch -z`` output.

    Entries are NUL separated and never quoted. A rename or copy entry is
    followed by an extra entry holding the source path.
    """
    branch = tracking = None
    ahead = behind = 0
    detached = False
    files = []

    entries = iter(output.split("\0"))
    for entry in entries:
        entry = entry.rstrip("\n")
        if not entry:
            continue
        if entry.startswith("## "):
            header = entry[3:]
            if header.startswith("HEAD (no branch)"):
                detached = True
                continue
            for prefix in ("No commits yet on ", "Initial commit on "):
                if header.startswith(prefix):
                    header = header[len(prefix):]
            match = _BRANCH_HEADER.match(header)
            if match:
                branch = match.group("branch")
                tracking = match.group("tracking")
                for part in (match.group("counts") or "").split(","):
                    part = part.strip()
                    if part.startswith("ahead "):
                        ahead = int(part[6:])
                    elif part.startswith("behind "):
                        behind = int(part[7:])
            continue

        if len(entry) < 4:
            continue
        index, working_dir, path = entry[0], entry[1], entry[3:]
        from_path = next(entries, None) if index in ("R", "C") else None
        files.append(FileStatus(path, index, working_dir, from_path))

    return GitStatus(
        branch=branch,
        tracking=tracking,
        ahead=ahead,
        behind=behind,
        detached=detached,
        files=tuple(files),
    )


class GitClient:
    """``git`` bound to a runner."""

    def __init__(self, runner: CommandRunner, binary: str = "git"):
        self.runner = runner
        self.binary = binary

    async def run(
        self, args: Sequence[str], *, cwd: Path | str | None = None, check: bool = True
    ) -> CommandResult:
        return await self.runner.run(self.binary, list(args), cwd=cwd, check=check)

    async def raw(self, args: Sequence[str], *, cwd: Path | str | None = None) -> str:
        result = await self.run(args, cwd=cwd)
        return result.stdout

    async def status(self) -> GitStatus:
        output = await self.raw(["status", "--porcelain=v1", "--branch", "-z"])
        return parse_porcelain_status(output)

    async def current_branch(self) -> str | None:
        """Checked-out branch name, None when HEAD is detached."""
        name = (await self.raw(["branch", "--show-current"])).strip()
        return name or None

    async def rev_parse(self, ref: str, short: bool = False) -> str:
        args = ["rev-parse", "--short", ref] if short else ["rev-parse", ref]
        return (await self.raw(args)).strip()

    async def ref_exists(self, ref: str) -> bool:
        result = await self.run(["rev-parse", "--verify", "--quiet", ref], check=False)
        return result.success

    async def local_branches(self) -> list[str]:
        output = await self.raw(["branch", "--format=%(refname:short)"])
        return [line.strip() for line in output.splitlines() if line.strip()]

    async def remotes(self) -> list[str]:
        output = await self.raw(["remote"])
        return [line.strip() for line in output.splitlines() if line.strip()]

    async def remote_url(self, remote: str) -> str | None:
        result = await self.run(["remote", "get-url", remote], check=False)
        if not result.success:
            return None
        return result.stdout.strip() or None

    async def stash_count(self) -> int:
        result = await self.run(["stash", "list"], check=False)
        return len([line for line in result.stdout.splitlines() if line.strip()])
