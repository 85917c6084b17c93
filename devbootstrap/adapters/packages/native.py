"""
Native package-manager backends — apt, yum/dnf, pacman.

One class per ``BackendKind``. Presence is queried with the distro's
package database tool (dpkg-query, rpm, pacman -Q) and installs are
issued as one batched call, so a single bad name fails the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from devbootstrap.adapters.base import NativeBackend
from devbootstrap.adapters.shell.command import CommandResult, CommandRunner
from devbootstrap.core.models.backend import BackendKind

logger = logging.getLogger(__name__)


class AptBackend(NativeBackend):
    """Debian / Ubuntu."""

    essentials = (
        "curl", "wget", "git", "zsh", "build-essential", "file", "procps",
        "ca-certificates", "gnupg", "lsb-release", "software-properties-common",
        "autoconf", "bison", "libssl-dev", "libyaml-dev", "libreadline6-dev",
        "zlib1g-dev", "libncurses5-dev", "libffi-dev", "libgdbm-dev",
        "libsqlite3-dev", "libgmp-dev", "pkg-config",
    )

    _ENV = {"DEBIAN_FRONTEND": "noninteractive"}

    @property
    def name(self) -> str:
        return "apt-get"

    @property
    def kind(self) -> BackendKind:
        return BackendKind.DEBIAN_APT

    def is_installed(self, package: str) -> bool:
        r = self._runner.run(["dpkg-query", "-W", "-f=${Status}", package])
        return r.ok and "install ok installed" in r.stdout

    def install(self, packages: Sequence[str]) -> CommandResult:
        return self._run("install", "-y", *packages, sudo=True, env=self._ENV)

    def update_index(self) -> CommandResult:
        return self._run("update", "-y", sudo=True, env=self._ENV)


class RpmBackend(NativeBackend):
    """RHEL / Fedora / CentOS, driven through yum or dnf."""

    essentials = (
        "curl", "wget", "git", "zsh", "gcc", "gcc-c++", "make", "file",
        "procps-ng", "ca-certificates", "gnupg2", "autoconf", "bison",
        "openssl-devel", "libyaml-devel", "readline-devel", "zlib-devel",
        "ncurses-devel", "libffi-devel", "gdbm-devel", "sqlite-devel",
        "gmp-devel", "pkgconfig",
    )

    def __init__(self, runner: CommandRunner, executable: str = "dnf"):
        super().__init__(runner)
        if executable not in ("yum", "dnf"):
            raise ValueError(f"RpmBackend drives yum or dnf, not {executable!r}")
        self._executable = executable

    @property
    def name(self) -> str:
        return self._executable

    @property
    def kind(self) -> BackendKind:
        return BackendKind.RHEL_YUM_DNF

    def is_installed(self, package: str) -> bool:
        return self._runner.run(["rpm", "-q", package]).ok

    def install(self, packages: Sequence[str]) -> CommandResult:
        return self._run("install", "-y", *packages, sudo=True)

    def update_index(self) -> CommandResult:
        return self._run("update", "-y", sudo=True)


class PacmanBackend(NativeBackend):
    """Arch Linux and derivatives."""

    essentials = (
        "curl", "wget", "git", "zsh", "base-devel", "file", "procps-ng",
        "ca-certificates", "gnupg", "autoconf", "bison", "openssl", "libyaml",
        "readline", "zlib", "ncurses", "libffi", "gdbm", "sqlite", "gmp",
        "pkgconf",
    )

    @property
    def name(self) -> str:
        return "pacman"

    @property
    def kind(self) -> BackendKind:
        return BackendKind.ARCH_PACMAN

    def is_installed(self, package: str) -> bool:
        return self._runner.run(["pacman", "-Q", package]).ok

    def install(self, packages: Sequence[str]) -> CommandResult:
        return self._run("-S", "--needed", "--noconfirm", *packages, sudo=True)

    def update_index(self) -> CommandResult:
        return self._run("-Sy", sudo=True)
