"""
Tests for version-tool reconciliation — the per-tool state machine,
idempotence, and failure isolation across declarations.
"""

import pytest

from devbootstrap.adapters.mock import MockVersionManager
from devbootstrap.core.config.parser import parse_declarations
from devbootstrap.core.models.tool import DeclaredSet, ToolDeclaration
from devbootstrap.core.services.version_tools import (
    ToolState,
    reconcile_tool,
    reconcile_version_tools,
)


def _set(*pairs: tuple[str, str | None]) -> DeclaredSet:
    return DeclaredSet.from_declarations(ToolDeclaration(name=n, version=v) for n, v in pairs)


# ── Single tool ──────────────────────────────────────────────────────


class TestReconcileTool:
    def test_fresh_tool_walks_full_path(self):
        vm = MockVersionManager()
        outcome = reconcile_tool(vm, ToolDeclaration(name="nodejs", version="20.11.0"))

        assert outcome.state == ToolState.SELECTED
        assert outcome.history == [
            ToolState.UNKNOWN,
            ToolState.PLUGIN_CHECKED,
            ToolState.PLUGIN_ADDED,
            ToolState.VERSION_CHECKED,
            ToolState.VERSION_INSTALLED,
            ToolState.SELECTED,
        ]
        assert outcome.changed
        assert vm.calls == [
            ("plugin-list",),
            ("plugin-add", "nodejs"),
            ("list", "nodejs"),
            ("install", "nodejs", "20.11.0"),
            ("set-global", "nodejs", "20.11.0"),
        ]

    def test_present_tool_makes_no_mutating_call(self):
        vm = MockVersionManager(plugins=["nodejs"], versions={"nodejs": ["20.11.0"]})
        outcome = reconcile_tool(vm, ToolDeclaration(name="nodejs", version="20.11.0"))

        assert ToolState.PLUGIN_PRESENT in outcome.history
        assert ToolState.VERSION_PRESENT in outcome.history
        assert not outcome.changed
        assert vm.mutating_calls == []

    def test_plugin_present_version_missing(self):
        vm = MockVersionManager(plugins=["python"], versions={"python": ["3.11.0"]})
        outcome = reconcile_tool(vm, ToolDeclaration(name="python", version="3.12.1"))

        assert vm.mutating_calls == [("install", "python", "3.12.1")]
        assert outcome.state == ToolState.SELECTED

    def test_plugin_add_failure_stops_walk(self):
        vm = MockVersionManager(unknown_plugins=["nosuch"])
        outcome = reconcile_tool(vm, ToolDeclaration(name="nosuch", version="1.0"))

        assert outcome.failed
        assert "plugin add failed" in outcome.error
        assert not any(c[0] in ("list", "install", "set-global") for c in vm.calls)

    def test_install_failure_skips_selection(self):
        vm = MockVersionManager(broken_versions=[("ruby", "9.9.9")])
        outcome = reconcile_tool(vm, ToolDeclaration(name="ruby", version="9.9.9"))

        assert outcome.failed
        assert "install failed" in outcome.error
        assert ("set-global", "ruby", "9.9.9") not in vm.calls

    def test_set_global_failure_keeps_install(self):
        vm = MockVersionManager(set_global_fails=True)
        outcome = reconcile_tool(vm, ToolDeclaration(name="golang", version="1.22.0"))

        assert not outcome.failed
        assert outcome.state == ToolState.VERSION_INSTALLED

    def test_unversioned_rejected(self):
        with pytest.raises(ValueError):
            reconcile_tool(MockVersionManager(), ToolDeclaration(name="jq"))


# ── Whole set ────────────────────────────────────────────────────────


class TestReconcileVersionTools:
    def test_all_succeed(self):
        vm = MockVersionManager()
        record, outcomes = reconcile_version_tools(vm, _set(("nodejs", "20.11.0"), ("python", "3.12.1")))

        assert record.ok
        assert record.label == "All asdf tools installed successfully"
        assert len(outcomes) == 2

    def test_second_run_is_idempotent(self):
        vm = MockVersionManager()
        declared = _set(("nodejs", "20.11.0"), ("python", "3.12.1"))
        reconcile_version_tools(vm, declared)
        vm.calls.clear()

        record, outcomes = reconcile_version_tools(vm, declared)
        assert record.ok
        assert vm.mutating_calls == []
        assert not any(o.changed for o in outcomes)

    def test_failure_isolation(self):
        vm = MockVersionManager(unknown_plugins=["bogus"])
        declared = _set(("nodejs", "20.11.0"), ("bogus", "1.0"), ("python", "3.12.1"))
        record, outcomes = reconcile_version_tools(vm, declared)

        assert record.failed
        assert record.failed_items == ("bogus",)
        assert record.label == "Failed to install asdf tools: bogus"
        assert "bogus@1.0" in record.detail
        assert [o.state for o in outcomes] == [ToolState.SELECTED, ToolState.FAILED, ToolState.SELECTED]
        assert ("install", "python", "3.12.1") in vm.calls

    def test_unversioned_never_reach_manager(self):
        vm = MockVersionManager()
        record, outcomes = reconcile_version_tools(vm, _set(("jq", None), ("nodejs", "20.11.0")))

        assert record.ok
        assert [o.declaration.name for o in outcomes] == ["nodejs"]
        assert all("jq" not in c for c in vm.calls)

    def test_nothing_versioned_records_nothing(self):
        vm = MockVersionManager()
        record, outcomes = reconcile_version_tools(vm, _set(("jq", None)))
        assert record is None
        assert outcomes == []
        assert vm.calls == []

    def test_both_encodings_forward_versions(self):
        colon = parse_declarations("python:3.12.1\n")
        spaced = parse_declarations("python 3.12.1\n")

        vm_a, vm_b = MockVersionManager(), MockVersionManager()
        reconcile_version_tools(vm_a, colon)
        reconcile_version_tools(vm_b, spaced)

        assert vm_a.calls == vm_b.calls
        assert ("install", "python", "3.12.1") in vm_a.calls


class _CrashingVersionManager(MockVersionManager):
    """Raises from ``install`` for the named plugins, like an undecodable installer log."""

    def __init__(self, crash_on: set[str], **kwargs):
        super().__init__(**kwargs)
        self.crash_on = crash_on

    def install(self, name: str, version: str):
        if name in self.crash_on:
            self.calls.append(("install", name, version))
            raise UnicodeDecodeError("utf-8", b"caf\xe9", 3, 4, "invalid continuation byte")
        return super().install(name, version)


class TestAdapterCrash:
    def test_crash_fails_only_that_tool(self):
        vm = _CrashingVersionManager(crash_on={"ruby"})
        declared = parse_declarations("ruby:3.4.4\nnodejs:20.11.0\n")
        record, outcomes = reconcile_version_tools(vm, declared)

        assert record.failed
        assert record.failed_items == ("ruby",)
        assert "UnicodeDecodeError" in outcomes[0].error
        assert outcomes[1].state == ToolState.SELECTED
        assert ("install", "nodejs", "20.11.0") in vm.calls
