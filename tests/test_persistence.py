"""
Tests for run history — NDJSON append, read-back, and corrupt-line
tolerance.
"""

from pathlib import Path

from devbootstrap.core.models.ledger import RunLedger
from devbootstrap.core.persistence.history import HistoryWriter, RunRecord, generate_run_id


def _report(*failed: str):
    ledger = RunLedger()
    ledger.succeed("Detected Linux distribution: debian")
    for label in failed:
        ledger.fail(label, [label.split()[-1]])
    return ledger.finalize()


class TestRunId:
    def test_format(self):
        run_id = generate_run_id()
        assert run_id.startswith("run-")
        assert len(run_id.split("-")) == 4

    def test_unique(self):
        assert generate_run_id() != generate_run_id()


class TestRunRecord:
    def test_from_report(self):
        record = RunRecord.from_report(
            _report("Failed to install system tools: jq"),
            run_id="run-1",
            started_at="2026-01-01T00:00:00+00:00",
            backend="debian-apt",
        )
        assert record.status == "partial"
        assert record.exit_code == 1
        assert record.steps_total == 2
        assert record.steps_succeeded == 1
        assert record.steps_failed == 1
        assert record.failed_steps == ["Failed to install system tools: jq"]

    def test_clean_run(self):
        record = RunRecord.from_report(_report(), "run-2", "", "arch-pacman")
        assert record.status == "ok"
        assert record.failed_steps == []


class TestHistoryWriter:
    def test_write_and_read(self, tmp_path: Path):
        writer = HistoryWriter(tmp_path / "nested" / "history.ndjson")
        assert writer.write(RunRecord(run_id="run-a"))
        assert writer.write(RunRecord(run_id="run-b"))

        assert [r.run_id for r in writer.read_all()] == ["run-a", "run-b"]
        assert len(writer.path.read_text().splitlines()) == 2

    def test_read_missing_file(self, tmp_path: Path):
        assert HistoryWriter(tmp_path / "none.ndjson").read_all() == []

    def test_corrupt_lines_skipped(self, tmp_path: Path):
        path = tmp_path / "history.ndjson"
        writer = HistoryWriter(path)
        writer.write(RunRecord(run_id="run-a"))
        with path.open("a") as f:
            f.write("{not json\n\n")
            f.write('{"exit_code": "many"}\n')
        writer.write(RunRecord(run_id="run-b"))

        assert [r.run_id for r in writer.read_all()] == ["run-a", "run-b"]

    def test_read_recent(self, tmp_path: Path):
        writer = HistoryWriter(tmp_path / "h.ndjson")
        for i in range(5):
            writer.write(RunRecord(run_id=f"run-{i}"))
        assert [r.run_id for r in writer.read_recent(2)] == ["run-3", "run-4"]

    def test_write_failure_is_not_fatal(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        writer = HistoryWriter(blocker / "history.ndjson")
        assert writer.write(RunRecord(run_id="run-x")) is False
