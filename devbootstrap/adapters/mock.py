"""
Test doubles for every collaborator the core drives.

``FakeCommandRunner`` replaces subprocesses with scripted results so the
concrete adapters can be exercised without touching the host. The
``Mock*`` adapters go one level up: they keep an in-memory installed
state, so reconciliation can be run twice to check idempotence.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from devbootstrap.adapters.base import NativeBackend, PackageManager, VersionManager
from devbootstrap.adapters.network.fetch import Fetcher
from devbootstrap.adapters.shell.command import CommandResult, CommandRunner
from devbootstrap.core.errors import FetchError
from devbootstrap.core.models.backend import BackendKind

Responder = Callable[[list[str]], CommandResult]


class FakeCommandRunner(CommandRunner):
    """Scripted command runner.

    Commands are matched by prefix after dropping a leading ``sudo``.
    Unmatched commands succeed with empty output.
    """

    def __init__(self, executables: Iterable[str] = (), use_sudo: bool = False):
        super().__init__(use_sudo=use_sudo)
        self._executables = set(executables)
        self._responses: list[tuple[tuple[str, ...], Responder]] = []
        self._calls: list[list[str]] = []

    @property
    def calls(self) -> list[list[str]]:
        return self._calls

    def add_executable(self, name: str) -> None:
        self._executables.add(name)

    def which(self, name: str) -> str | None:
        return name if name in self._executables else None

    def is_executable(self, path: str) -> bool:
        return path in self._executables

    def respond(
        self,
        prefix: Sequence[str],
        stdout: str = "",
        returncode: int = 0,
        stderr: str = "",
    ) -> None:
        """Return a fixed result for commands starting with ``prefix``."""
        self.on(
            prefix,
            lambda cmd: CommandResult(
                command=cmd, returncode=returncode, stdout=stdout, stderr=stderr,
            ),
        )

    def fail(self, prefix: Sequence[str], stderr: str = "mock failure") -> None:
        self.respond(prefix, returncode=1, stderr=stderr)

    def on(self, prefix: Sequence[str], responder: Responder) -> None:
        """Compute the result with ``responder``. Later registrations win."""
        self._responses.insert(0, (tuple(prefix), responder))

    def calls_starting_with(self, *prefix: str) -> list[list[str]]:
        return [c for c in self._calls if tuple(c[: len(prefix)]) == prefix]

    def run(self, cmd, *, sudo=False, env=None, cwd=None) -> CommandResult:
        argv = list(cmd)
        self._calls.append(argv)
        for prefix, responder in self._responses:
            if tuple(argv[: len(prefix)]) == prefix:
                return responder(argv)
        return CommandResult.success(argv)


class FakeFetcher(Fetcher):
    """In-memory fetcher: URL → bytes, anything else raises ``FetchError``."""

    def __init__(self, files: dict[str, bytes | str] | None = None):
        self._files = {
            url: body.encode("utf-8") if isinstance(body, str) else body
            for url, body in (files or {}).items()
        }
        self.requested: list[str] = []

    def add(self, url: str, body: bytes | str) -> None:
        self._files[url] = body.encode("utf-8") if isinstance(body, str) else body

    def get(self, url: str) -> bytes:
        self.requested.append(url)
        if url not in self._files:
            raise FetchError(f"HTTP 404 fetching {url}")
        return self._files[url]


def _ok(*cmd: str) -> CommandResult:
    return CommandResult.success(list(cmd))


def _failed(*cmd: str) -> CommandResult:
    return CommandResult.failure(list(cmd), stderr="mock failure")


class MockPackageManager(PackageManager):
    """Stateful flat package manager.

    ``broken`` names always fail to install; installing any batch that
    contains a broken name fails the whole batch.
    """

    def __init__(
        self,
        installed: Iterable[str] = (),
        broken: Iterable[str] = (),
        adapter_name: str = "mock-pm",
    ):
        super().__init__(FakeCommandRunner([adapter_name]))
        self._name = adapter_name
        self.installed = set(installed)
        self.broken = set(broken)
        self.queries: list[str] = []
        self.install_calls: list[list[str]] = []

    @property
    def name(self) -> str:
        return self._name

    def is_installed(self, package: str) -> bool:
        self.queries.append(package)
        return package in self.installed

    def install(self, packages: Sequence[str]) -> CommandResult:
        batch = list(packages)
        self.install_calls.append(batch)
        if self.broken.intersection(batch):
            return _failed(self._name, "install", *batch)
        self.installed.update(batch)
        return _ok(self._name, "install", *batch)


class MockNativeBackend(MockPackageManager, NativeBackend):
    """Stateful native backend with a configurable kind."""

    essentials = ("git", "curl")

    def __init__(
        self,
        kind: BackendKind = BackendKind.DEBIAN_APT,
        installed: Iterable[str] = (),
        broken: Iterable[str] = (),
        index_ok: bool = True,
    ):
        super().__init__(installed=installed, broken=broken, adapter_name="mock-native")
        self._kind = kind
        self._index_ok = index_ok
        self.index_updates = 0

    @property
    def kind(self) -> BackendKind:
        return self._kind

    def update_index(self) -> CommandResult:
        self.index_updates += 1
        return _ok("update") if self._index_ok else _failed("update")


class MockVersionManager(VersionManager):
    """Stateful asdf stand-in.

    Args:
        plugins: Initially registered plugin names.
        versions: Initially installed versions per plugin.
        unknown_plugins: Names for which ``plugin add`` fails.
        broken_versions: ``(name, version)`` pairs whose install fails.
        set_global_fails: Make every set-global call fail.
    """

    def __init__(
        self,
        plugins: Iterable[str] = (),
        versions: dict[str, Iterable[str]] | None = None,
        unknown_plugins: Iterable[str] = (),
        broken_versions: Iterable[tuple[str, str]] = (),
        set_global_fails: bool = False,
    ):
        super().__init__(FakeCommandRunner(["asdf"]))
        self._plugins = set(plugins)
        self._versions = {k: list(v) for k, v in (versions or {}).items()}
        self._unknown = set(unknown_plugins)
        self._broken = set(broken_versions)
        self._set_global_fails = set_global_fails
        self.calls: list[tuple[str, ...]] = []
        self.global_versions: dict[str, str] = {}

    @property
    def name(self) -> str:
        return "asdf"

    @property
    def mutating_calls(self) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[0] in ("plugin-add", "install")]

    def plugins(self) -> set[str]:
        self.calls.append(("plugin-list",))
        return set(self._plugins)

    def add_plugin(self, name: str) -> CommandResult:
        self.calls.append(("plugin-add", name))
        if name in self._unknown:
            return _failed("asdf", "plugin", "add", name)
        self._plugins.add(name)
        return _ok("asdf", "plugin", "add", name)

    def installed_versions(self, name: str) -> list[str]:
        self.calls.append(("list", name))
        return list(self._versions.get(name, []))

    def install(self, name: str, version: str) -> CommandResult:
        self.calls.append(("install", name, version))
        if (name, version) in self._broken:
            return _failed("asdf", "install", name, version)
        self._versions.setdefault(name, []).append(version)
        return _ok("asdf", "install", name, version)

    def set_global(self, name: str, version: str) -> CommandResult:
        self.calls.append(("set-global", name, version))
        if self._set_global_fails:
            return _failed("asdf", "set", name, version)
        self.global_versions[name] = version
        return _ok("asdf", "set", name, version)

