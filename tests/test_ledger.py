"""
Tests for the run ledger — append-only records and exit code.
"""

import pytest
from pydantic import ValidationError

from devbootstrap.core.models.ledger import LedgerReport, Outcome, RunLedger, StepRecord


class TestStepRecord:
    def test_success(self):
        r = StepRecord.success("Homebrew updated")
        assert r.ok
        assert not r.failed
        assert r.recorded_at

    def test_failure_with_items(self):
        r = StepRecord.failure("Failed to install system tools", ["gh", "jq"])
        assert r.failed
        assert r.failed_items == ("gh", "jq")

    def test_immutable(self):
        r = StepRecord.success("x")
        with pytest.raises(ValidationError):
            r.label = "y"


class TestRunLedger:
    def test_starts_empty(self):
        ledger = RunLedger()
        assert len(ledger) == 0
        assert ledger.finalize().exit_code == 0

    def test_record_appends_in_order(self):
        ledger = RunLedger()
        ledger.record("one", Outcome.SUCCEEDED)
        ledger.record("two", Outcome.FAILED, failed_items=["x"])
        ledger.succeed("three")
        assert [e.label for e in ledger.entries] == ["one", "two", "three"]

    def test_entries_is_a_snapshot(self):
        ledger = RunLedger()
        ledger.succeed("one")
        snapshot = ledger.entries
        ledger.succeed("two")
        assert len(snapshot) == 1
        assert len(ledger.entries) == 2

    def test_exit_code_zero_without_failures(self):
        ledger = RunLedger()
        ledger.succeed("a")
        ledger.succeed("b")
        report = ledger.finalize()
        assert report.exit_code == 0
        assert report.status == "ok"

    def test_exit_code_one_with_any_failure(self):
        ledger = RunLedger()
        ledger.succeed("a")
        ledger.fail("b")
        ledger.succeed("c")
        report = ledger.finalize()
        assert report.exit_code == 1
        assert report.status == "partial"

    def test_all_failed_status(self):
        ledger = RunLedger()
        ledger.fail("a")
        assert ledger.finalize().status == "failed"

    def test_report_groups_preserve_order(self):
        ledger = RunLedger()
        for label, ok in [("s1", True), ("f1", False), ("s2", True), ("f2", False)]:
            if ok:
                ledger.succeed(label)
            else:
                ledger.fail(label)
        report = ledger.finalize()
        assert [e.label for e in report.succeeded] == ["s1", "s2"]
        assert [e.label for e in report.failed] == ["f1", "f2"]
        assert [e.label for e in report.entries] == ["s1", "f1", "s2", "f2"]

    def test_no_append_after_finalize(self):
        ledger = RunLedger()
        ledger.finalize()
        with pytest.raises(RuntimeError):
            ledger.succeed("late")

    def test_has_failures(self):
        ledger = RunLedger()
        ledger.succeed("a")
        assert not ledger.has_failures
        ledger.fail("b")
        assert ledger.has_failures


class TestLedgerReport:
    def test_to_dict(self):
        report = LedgerReport(entries=[StepRecord.success("a"), StepRecord.failure("b", ["x"])])
        d = report.to_dict()
        assert d["exit_code"] == 1
        assert d["total"] == 2
        assert d["succeeded"][0]["label"] == "a"
        assert d["failed"][0]["failed_items"] == ["x"]
        assert d["failed"][0]["outcome"] == "failed"
