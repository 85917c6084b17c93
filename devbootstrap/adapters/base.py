"""
Adapter base — the contracts between the engine and installer tools.

The core services only talk to installers through these interfaces,
never to subprocesses directly. One concrete adapter exists per tool
(asdf, Homebrew, and one per native package-manager family); they are
selected once at startup and passed explicitly into each stage.

Adapters report command failures as ``CommandResult`` values, they do
not raise for them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from devbootstrap.adapters.shell.command import CommandResult, CommandRunner
from devbootstrap.core.models.backend import BackendKind


class Adapter(ABC):
    """Common plumbing: executable resolution and command dispatch."""

    #: Absolute locations tried when the executable is not on PATH
    fallback_paths: tuple[str, ...] = ()

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'asdf', 'brew', 'apt-get')."""

    @property
    def executable(self) -> str:
        return self.name

    @property
    def runner(self) -> CommandRunner:
        return self._runner

    def resolve(self) -> str | None:
        """Locate the executable, on PATH first, then in ``fallback_paths``."""
        found = self._runner.which(self.executable)
        if found:
            return found
        for path in self.fallback_paths:
            if self._runner.is_executable(path):
                return path
        return None

    def is_available(self) -> bool:
        return self.resolve() is not None

    def _run(self, *args: str, sudo: bool = False, env: dict[str, str] | None = None) -> CommandResult:
        return self._runner.run([self.resolve() or self.executable, *args], sudo=sudo, env=env)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class PackageManager(Adapter):
    """A flat package backend: {query-installed, install}."""

    @abstractmethod
    def is_installed(self, package: str) -> bool:
        """Whether ``package`` is currently installed."""

    @abstractmethod
    def install(self, packages: Sequence[str]) -> CommandResult:
        """Install ``packages`` in one invocation."""


class NativeBackend(PackageManager):
    """The distribution's own package manager, chosen once per run."""

    #: Base build/runtime packages the version manager needs to compile runtimes
    essentials: tuple[str, ...] = ()

    @property
    @abstractmethod
    def kind(self) -> BackendKind:
        """Which enumerated backend this adapter implements."""

    @abstractmethod
    def update_index(self) -> CommandResult:
        """Refresh package metadata."""


class VersionManager(Adapter):
    """A plugin-based runtime version manager (asdf-style)."""

    @abstractmethod
    def plugins(self) -> set[str]:
        """Names of registered plugins."""

    @abstractmethod
    def add_plugin(self, name: str) -> CommandResult:
        """Register a plugin."""

    @abstractmethod
    def installed_versions(self, name: str) -> list[str]:
        """Versions installed for plugin ``name``."""

    @abstractmethod
    def install(self, name: str, version: str) -> CommandResult:
        """Install one exact version."""

    @abstractmethod
    def set_global(self, name: str, version: str) -> CommandResult:
        """Select ``version`` as the user-wide default for ``name``."""
