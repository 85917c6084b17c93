"""
Homebrew adapter — the utility package backend.

Homebrew installs system utilities that do not need version pinning.
Unlike the native backends, packages are installed one at a time so a
single bad formula only fails itself.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from devbootstrap.adapters.base import PackageManager
from devbootstrap.adapters.network.fetch import Fetcher
from devbootstrap.adapters.shell.command import CommandResult
from devbootstrap.core.errors import FetchError

logger = logging.getLogger(__name__)

LINUXBREW_PREFIX = "/home/linuxbrew/.linuxbrew"
INSTALL_SCRIPT_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"


class HomebrewAdapter(PackageManager):
    """Drive the ``brew`` CLI."""

    fallback_paths = (f"{LINUXBREW_PREFIX}/bin/brew",)

    @property
    def name(self) -> str:
        return "brew"

    def is_installed(self, package: str) -> bool:
        return self._run("list", package).ok

    def install(self, packages: Sequence[str]) -> CommandResult:
        return self._run("install", *packages)

    def update(self) -> CommandResult:
        return self._run("update")

    def version(self) -> str | None:
        r = self._run("--version")
        if not r.ok:
            return None
        lines = r.stdout.strip().splitlines()
        return lines[0] if lines else None

    def bootstrap(self, fetcher: Fetcher, work_dir: Path) -> CommandResult:
        """Install Homebrew itself with the upstream non-interactive script."""
        script = work_dir / "homebrew-install.sh"
        try:
            fetcher.download(INSTALL_SCRIPT_URL, script)
        except FetchError as e:
            return CommandResult.failure(["bash", str(script)], error=f"Cannot fetch installer: {e}")
        logger.info("Running Homebrew installer (this can take several minutes)")
        return self._runner.run(["/bin/bash", str(script)], env={"NONINTERACTIVE": "1"})
