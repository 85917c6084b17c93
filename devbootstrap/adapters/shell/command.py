"""
Command runner — the single place where subprocesses are spawned.

Every adapter talks to the host through a ``CommandRunner``. The runner
never raises for a failed command: the outcome is captured in a
``CommandResult``. Calls are synchronous and carry no timeout; a hung
installer blocks the run until it exits.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Output kept on a result (tail), enough for a useful error message
_OUTPUT_TAIL = 2000


class CommandResult(BaseModel):
    """Outcome of a single command invocation."""

    command: list[str]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    error: str | None = None       # set when the command could not be started

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0

    @property
    def summary(self) -> str:
        """One-line description of a failure, for logs and ledger details."""
        if self.ok:
            return ""
        if self.error:
            return self.error
        last = self.stderr.strip().splitlines()[-1:] or self.stdout.strip().splitlines()[-1:]
        tail = f": {last[0]}" if last else ""
        return f"exit {self.returncode}{tail}"

    @classmethod
    def success(cls, command: Sequence[str], stdout: str = "", **kwargs) -> CommandResult:
        return cls(command=list(command), returncode=0, stdout=stdout, **kwargs)

    @classmethod
    def failure(
        cls,
        command: Sequence[str],
        returncode: int = 1,
        stderr: str = "",
        **kwargs,
    ) -> CommandResult:
        return cls(command=list(command), returncode=returncode, stderr=stderr, **kwargs)


class CommandRunner:
    """Run host commands and capture their output.

    Args:
        use_sudo: Prefix privileged commands with ``sudo`` when not root.
    """

    def __init__(self, use_sudo: bool = True):
        self._use_sudo = use_sudo

    @property
    def use_sudo(self) -> bool:
        return self._use_sudo

    def which(self, name: str) -> str | None:
        """Resolve an executable on PATH."""
        return shutil.which(name)

    def is_executable(self, path: str) -> bool:
        """Whether an absolute path points at an executable file."""
        p = Path(path)
        return p.is_file() and os.access(p, os.X_OK)

    def _needs_sudo_prefix(self, sudo: bool) -> bool:
        return sudo and self._use_sudo and os.geteuid() != 0

    def run(
        self,
        cmd: Sequence[str],
        *,
        sudo: bool = False,
        env: dict[str, str] | None = None,
        cwd: str | Path | None = None,
    ) -> CommandResult:
        """Run ``cmd`` to completion.

        Args:
            cmd: Command argv.
            sudo: Whether the command needs root.
            env: Extra environment variables layered over ``os.environ``.
            cwd: Working directory.
        """
        argv = list(cmd)
        if self._needs_sudo_prefix(sudo):
            # sudo resets the environment, so extra vars ride along via env(1)
            assignments = [f"{k}={v}" for k, v in (env or {}).items()]
            argv = ["sudo", "env", *assignments, *argv] if assignments else ["sudo", *argv]

        full_env = None
        if env:
            full_env = os.environ.copy()
            full_env.update(env)

        logger.debug("Running: %s", " ".join(argv))
        start = time.monotonic()
        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=full_env,
                cwd=cwd,
            )
        except FileNotFoundError:
            return CommandResult(command=argv, returncode=127, error=f"Command not found: {argv[0]}")
        except OSError as e:
            return CommandResult(command=argv, returncode=126, error=f"Cannot run {argv[0]}: {e}")

        elapsed_ms = int((time.monotonic() - start) * 1000)
        result = CommandResult(
            command=argv,
            returncode=proc.returncode,
            stdout=proc.stdout[-_OUTPUT_TAIL:] if proc.stdout else "",
            stderr=proc.stderr[-_OUTPUT_TAIL:] if proc.stderr else "",
            duration_ms=elapsed_ms,
        )
        if not result.ok:
            logger.debug("Command failed (%s): %s", result.summary, " ".join(argv))
        return result
