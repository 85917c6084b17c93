"""
Tests for flat package installation — presence checks, per-package
isolation for utilities, and batch semantics for native packages.
"""

from devbootstrap.adapters.mock import MockNativeBackend, MockPackageManager
from devbootstrap.core.config.parser import parse_package_names
from devbootstrap.core.services.package_install import (
    install_native_packages,
    install_utility_packages,
    missing_packages,
)


class TestMissingPackages:
    def test_queries_every_name(self):
        pm = MockPackageManager(installed=["gh"])
        assert missing_packages(pm, parse_package_names("gh\njq\n")) == ["jq"]
        assert pm.queries == ["gh", "jq"]


class TestUtilityPackages:
    def test_only_missing_installed(self):
        pm = MockPackageManager(installed=["gh"])
        record = install_utility_packages(pm, parse_package_names("gh\njq\n"))

        assert pm.install_calls == [["jq"]]
        assert record.ok
        assert record.label == "All system tools installed successfully"

    def test_all_present_zero_installs(self):
        pm = MockPackageManager(installed=["gh", "jq"])
        record = install_utility_packages(pm, parse_package_names("gh\njq\n"))
        assert record.ok
        assert pm.install_calls == []

    def test_one_call_per_package(self):
        pm = MockPackageManager()
        install_utility_packages(pm, parse_package_names("bat\nfd\nfzf\n"))
        assert pm.install_calls == [["bat"], ["fd"], ["fzf"]]

    def test_failure_isolated_per_package(self):
        pm = MockPackageManager(broken=["fd"])
        record = install_utility_packages(pm, parse_package_names("bat\nfd\nfzf\n"))

        assert record.failed
        assert record.failed_items == ("fd",)
        assert record.label == "Failed to install system tools: fd"
        assert pm.installed == {"bat", "fzf"}

    def test_second_run_no_installs(self):
        pm = MockPackageManager()
        declared = parse_package_names("bat\nfd\n")
        install_utility_packages(pm, declared)
        pm.install_calls.clear()

        assert install_utility_packages(pm, declared).ok
        assert pm.install_calls == []


class TestNativePackages:
    def test_single_batched_call(self):
        backend = MockNativeBackend(installed=["git"])
        record = install_native_packages(backend, parse_package_names("git\njq\nunzip\n"))

        assert backend.install_calls == [["jq", "unzip"]]
        assert record.ok
        assert record.label == "Additional system packages installed"

    def test_all_present(self):
        backend = MockNativeBackend(installed=["jq"])
        record = install_native_packages(backend, parse_package_names("jq\n"))
        assert record.ok
        assert record.label == "All additional system packages already installed"
        assert backend.install_calls == []

    def test_bad_name_fails_whole_batch(self):
        backend = MockNativeBackend(broken=["nosuchpkg"])
        record = install_native_packages(backend, parse_package_names("jq\nnosuchpkg\n"))

        assert record.failed
        assert record.failed_items == ("jq", "nosuchpkg")
        assert len(backend.install_calls) == 1

    def test_custom_label(self):
        backend = MockNativeBackend()
        record = install_native_packages(backend, parse_package_names("git\n"), label="system essentials")
        assert record.label == "System essentials installed"


class _CrashingPackageManager(MockPackageManager):
    def __init__(self, crash_on: set[str], **kwargs):
        super().__init__(**kwargs)
        self.crash_on = crash_on

    def is_installed(self, package: str) -> bool:
        if package in self.crash_on:
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        return super().is_installed(package)


class TestUtilityPackageCrash:
    def test_crash_fails_only_that_package(self):
        pm = _CrashingPackageManager(crash_on={"bat"})
        record = install_utility_packages(pm, parse_package_names("bat\nfd\n"))

        assert record.failed
        assert record.failed_items == ("bat",)
        assert "UnicodeDecodeError" in record.detail
        assert pm.install_calls == [["fd"]]
        assert "fd" in pm.installed
