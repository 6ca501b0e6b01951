"""Process execution with results normalized into CommandResult."""

import asyncio
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .ui import debug


@dataclass
class CommandResult:
    """Outcome of one external command invocation."""

    success: bool
    message: str
    data: Optional[str] = None  # trimmed stdout
    error: Optional[str] = None  # stderr or failure reason


class ProcessExecutor:
    """Runs external commands and never raises on command failure."""

    def __init__(
        self,
        working_dir: Optional[Path] = None,
        env: Optional[dict[str, str]] = None,
    ):
        """Initialize the executor.

        Args:
            working_dir: Directory commands run in (default: cwd at call time)
            env: Additional environment variables merged over os.environ
        """
        self.working_dir = working_dir
        self.env = env

    def _run_env(self) -> Optional[dict[str, str]]:
        if not self.env:
            return None
        run_env = os.environ.copy()
        run_env.update(self.env)
        return run_env

    def run_sync(self, command_line: str) -> CommandResult:
        """Run a command line through the shell and capture its output.

        Args:
            command_line: Full shell command line

        Returns:
            CommandResult with trimmed stdout as data on success, or the
            captured stderr as error on failure
        """
        debug(f"run: {command_line}")

        try:
            result = subprocess.run(
                command_line,
                shell=True,
                capture_output=True,
                text=True,
                cwd=self.working_dir,
                env=self._run_env(),
            )
        except (OSError, ValueError) as e:
            debug(f"spawn failed: {e}")
            return CommandResult(
                success=False,
                message=f"Failed to run: {command_line}",
                error=str(e) or type(e).__name__,
            )

        stdout = (result.stdout or "").strip()
        if result.returncode == 0:
            return CommandResult(success=True, message=stdout, data=stdout)

        stderr = (result.stderr or "").strip()
        message = f"Command failed with exit code {result.returncode}: {command_line}"
        debug(message)
        return CommandResult(
            success=False,
            message=message,
            data=stdout or None,
            # Hooks write diagnostics to stdout, fall back to it
            error=stderr or stdout or message,
        )

    async def run_async(self, executable: str, args: Sequence[str] = ()) -> CommandResult:
        """Run an executable directly, sharing this process's stdio.

        No shell is involved, so arguments need no quoting. The child
        inherits stdin/stdout/stderr so editors and pagers work.

        Args:
            executable: Program to run (e.g. "git")
            args: Arguments passed verbatim

        Returns:
            CommandResult derived from the exit code
        """
        debug(f"spawn: {executable} {' '.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                cwd=self.working_dir,
                env=self._run_env(),
            )
        except (OSError, ValueError) as e:
            debug(f"spawn failed: {e}")
            return CommandResult(
                success=False,
                message=f"Failed to start {executable}",
                error=str(e) or type(e).__name__,
            )

        code = await process.wait()
        if code == 0:
            return CommandResult(success=True, message="Command completed")

        return CommandResult(
            success=False,
            message=f"Command failed with exit code {code}",
            error=f"Exit code: {code}",
        )

    def run_interactive(self, executable: str, args: Sequence[str] = ()) -> CommandResult:
        """Blocking form of run_async for synchronous callers."""
        return asyncio.run(self.run_async(executable, args))
