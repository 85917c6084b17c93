"""
asdf adapter — the version-manager backend.

Wraps the asdf CLI capabilities the reconciler needs:
plugin list / plugin add / list <name> / install <name> <version> /
set-global. Queries that fail are reported as "nothing present" so the
caller falls through to the mutating call, which then reports the real
error.
"""

from __future__ import annotations

import logging

from devbootstrap.adapters.base import VersionManager
from devbootstrap.adapters.packages.homebrew import LINUXBREW_PREFIX
from devbootstrap.adapters.shell.command import CommandResult

logger = logging.getLogger(__name__)


class AsdfAdapter(VersionManager):
    """Drive the ``asdf`` CLI (0.16+, with a fallback for the legacy shell version)."""

    fallback_paths = (f"{LINUXBREW_PREFIX}/bin/asdf",)

    @property
    def name(self) -> str:
        return "asdf"

    def plugins(self) -> set[str]:
        r = self._run("plugin", "list")
        if not r.ok:
            # asdf exits non-zero when no plugins are installed
            logger.debug("asdf plugin list: %s", r.summary)
            return set()
        return {line.strip() for line in r.stdout.splitlines() if line.strip()}

    def add_plugin(self, name: str) -> CommandResult:
        return self._run("plugin", "add", name)

    def installed_versions(self, name: str) -> list[str]:
        r = self._run("list", name)
        if not r.ok:
            logger.debug("asdf list %s: %s", name, r.summary)
            return []
        versions = []
        for line in r.stdout.splitlines():
            token = line.strip().lstrip("*").strip()
            # "No versions installed" and similar notices are not versions
            if token and " " not in token:
                versions.append(token)
        return versions

    def install(self, name: str, version: str) -> CommandResult:
        return self._run("install", name, version)

    def set_global(self, name: str, version: str) -> CommandResult:
        r = self._run("set", "--home", name, version)
        if r.ok:
            return r
        # asdf < 0.16 has no "set"; it spells this "global"
        legacy = self._run("global", name, version)
        return legacy if legacy.ok else r

    def version(self) -> str | None:
        r = self._run("version")
        if not r.ok:
            return None
        return r.stdout.strip() or None
