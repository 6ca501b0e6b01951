"""Repository queries answered by running git and parsing its text output."""

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .executor import CommandResult, ProcessExecutor

CHERRY_PICK_MARKER = "You are currently cherry-picking"
CONFLICT_CODES = ("UU", "AA")


class RepositoryError(Exception):
    """Raised when a repository query cannot produce its data."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = ""):
        """Initialize repository error.

        Args:
            message: Error message
            returncode: Git command return code
            stderr: Standard error output of the failing command
        """
        self.message = message
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


@dataclass(frozen=True)
class BranchRecord:
    """One local branch as reported by `git branch -v`."""

    name: str
    is_current: bool
    remote_tracking_info: Optional[str] = None


@dataclass(frozen=True)
class WorktreeRecord:
    """One entry of `git worktree list --porcelain`."""

    path: str
    branch: Optional[str]  # None when detached or bare
    commit_hash: str
    is_bare: bool = False
    is_detached: bool = False


def parse_branches(output: str) -> list[BranchRecord]:
    """Parse `git branch -v` output.

    Lines look like "* main a1b2c3 subject" or "  dev a1b2c4 [origin/dev] subject".
    Everything after the name and hash is kept as the tracking annotation.
    Lines with fewer than two tokens and detached-HEAD pseudo entries are skipped.
    """
    branches = []

    for line in output.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue

        is_current = stripped.startswith("*")
        # "+" marks a branch checked out in another worktree
        parts = stripped.lstrip("*+").split()
        if len(parts) < 2:
            continue
        if parts[0].startswith("("):
            continue

        branches.append(
            BranchRecord(
                name=parts[0],
                is_current=is_current,
                remote_tracking_info=" ".join(parts[2:]) or None,
            )
        )

    return branches


def parse_worktrees(output: str) -> list[WorktreeRecord]:
    """Parse `git worktree list --porcelain` output.

    Blocks are separated by blank lines; the final block is emitted whether
    or not a trailing blank line is present. Unknown lines are ignored.
    """
    worktrees = []
    current: dict = {}

    def flush() -> None:
        if current.get("path"):
            worktrees.append(
                WorktreeRecord(
                    path=current["path"],
                    branch=current.get("branch"),
                    commit_hash=current.get("head", ""),
                    is_bare=current.get("bare", False),
                    is_detached=current.get("detached", False),
                )
            )
        current.clear()

    for line in output.split("\n"):
        line = line.rstrip("\r")
        if not line:
            flush()
            continue

        if line.startswith("worktree "):
            current["path"] = line[9:]
        elif line.startswith("HEAD "):
            current["head"] = line[5:]
        elif line.startswith("branch "):
            current["branch"] = line[7:].replace("refs/heads/", "", 1)
        elif line == "bare":
            current["bare"] = True
        elif line == "detached":
            current["detached"] = True

    flush()
    return worktrees


def parse_remote_branches(output: str) -> list[str]:
    """Parse `git branch -r` output, dropping `origin/` and HEAD pointers."""
    names = []
    for line in output.split("\n"):
        line = line.strip()
        if not line or "->" in line:
            continue
        names.append(line[len("origin/"):] if line.startswith("origin/") else line)
    return names


def parse_oneline_log(output: str) -> list[str]:
    """Split `git log --oneline` output into non-empty lines."""
    return [line.strip() for line in output.strip().split("\n") if line.strip()]


class Git:
    """Read-side view of a git repository built on a ProcessExecutor."""

    def __init__(
        self,
        executor: Optional[ProcessExecutor] = None,
        working_dir: Optional[Path] = None,
    ):
        """Initialize the repository view.

        Args:
            executor: Executor used for every git call (default: a new one)
            working_dir: Repository directory (default: cwd)
        """
        self.executor = executor or ProcessExecutor(working_dir=working_dir)
        self.working_dir = working_dir or self.executor.working_dir or Path.cwd()

    def _run(self, command_line: str) -> CommandResult:
        return self.executor.run_sync(command_line)

    def _require(self, command_line: str, what: str) -> str:
        result = self._run(command_line)
        if not result.success:
            stderr = result.error or ""
            raise RepositoryError(
                f"Failed to {what}: {stderr or result.message}",
                stderr=stderr,
            )
        return result.data or ""

    def is_repo(self) -> bool:
        """Check if the working directory is inside a git repository."""
        return self._run("git rev-parse --git-dir").success

    def current_branch(self) -> str:
        """Get current branch name.

        Returns:
            Branch name, or "" when HEAD is detached

        Raises:
            RepositoryError: If the query fails
        """
        return self._require("git branch --show-current", "get current branch").strip()

    def list_branches(self) -> list[BranchRecord]:
        """List local branches."""
        return parse_branches(self._require("git branch -v", "list branches"))

    def list_worktrees(self) -> list[WorktreeRecord]:
        """List worktrees linked to this repository."""
        return parse_worktrees(
            self._require("git worktree list --porcelain", "list worktrees")
        )

    def has_unstaged_changes(self) -> bool:
        """Check for any uncommitted change in the working tree.

        Query failures count as "no changes".
        """
        result = self._run("git status --porcelain")
        return result.success and bool((result.data or "").strip())

    def has_staged_changes(self) -> bool:
        """Check for changes staged in the index.

        Query failures count as "no changes".
        """
        result = self._run("git diff --cached --name-only")
        return result.success and bool((result.data or "").strip())

    def branch_exists(self, name: str) -> bool:
        """Check if a local branch exists."""
        if not name:
            return False
        ref = shlex.quote(f"refs/heads/{name}")
        return self._run(f"git show-ref --verify --quiet {ref}").success

    def _git_path_exists(self, name: str) -> bool:
        result = self._run(f"git rev-parse --git-path {shlex.quote(name)}")
        if not result.success or not result.data:
            return False
        path = Path(result.data)
        if not path.is_absolute():
            path = Path(self.working_dir) / path
        return path.exists()

    def is_cherry_pick_in_progress(self) -> bool:
        """Check if a cherry-pick is paused mid-sequence.

        True when `git status` reports one, or when the sequencer directory
        or CHERRY_PICK_HEAD exists in the git directory.
        """
        status = self._run("git status")
        if status.success and CHERRY_PICK_MARKER in (status.data or ""):
            return True
        return self._git_path_exists("sequencer") or self._git_path_exists("CHERRY_PICK_HEAD")

    def remote_branch_names(self) -> list[str]:
        """List remote branch names without the `origin/` prefix."""
        return parse_remote_branches(self._require("git branch -r", "list remote branches"))

    def _has_commits(self) -> bool:
        return self._run("git rev-parse --verify --quiet HEAD").success

    def recent_commit_summaries(self, count: int = 10) -> list[str]:
        """Get one-line summaries of the most recent commits, newest first.

        Args:
            count: Maximum number of commits

        Returns:
            Up to `count` lines of "<short hash> <subject>"; empty for a
            repository without commits
        """
        if count <= 0:
            return []
        result = self._run(f"git log --oneline -{int(count)}")
        if result.success:
            return parse_oneline_log(result.data or "")
        if self.is_repo() and not self._has_commits():
            return []
        raise RepositoryError(
            f"Failed to read commit history: {result.error}",
            stderr=result.error or "",
        )

    def range_commit_summaries(self, commit_range: str) -> list[str]:
        """Get one-line summaries for a revision range such as `a..b`."""
        return parse_oneline_log(
            self._require(
                f"git log --oneline {shlex.quote(commit_range)}",
                f"read commits in {commit_range}",
            )
        )

    def last_commit_subject(self) -> Optional[str]:
        """Get the subject of HEAD, or None when there is no commit."""
        result = self._run("git log -1 --pretty=format:%s")
        return result.data if result.success else None

    def branch_description(self, name: str) -> Optional[str]:
        """Read `branch.<name>.description` from git config."""
        result = self._run(f"git config {shlex.quote(f'branch.{name}.description')}")
        if not result.success:
            return None
        return result.data or None

    def set_branch_description(self, name: str, description: str) -> bool:
        """Write `branch.<name>.description` to git config."""
        key = shlex.quote(f"branch.{name}.description")
        return self._run(f"git config {key} {shlex.quote(description)}").success

    def conflicted_paths(self) -> list[str]:
        """List paths with unresolved UU/AA conflicts."""
        result = self._run("git status --porcelain")
        if not result.success:
            return []
        return [
            line[3:]
            for line in (result.data or "").split("\n")
            if line[:2] in CONFLICT_CODES
        ]

    def worktree_has_changes(self, path: str) -> Optional[bool]:
        """Check a worktree for uncommitted changes; None if the query fails."""
        result = self._run(f"git -C {shlex.quote(path)} status --porcelain")
        if not result.success:
            return None
        return bool((result.data or "").strip())

    def status_text(self) -> str:
        """Full human-readable `git status` output ("" on failure)."""
        result = self._run("git status")
        return (result.data or "") if result.success else ""
