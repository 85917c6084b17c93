"""
Run history — append-only NDJSON log of finished runs.

Each finished run writes one line to ``<cache_dir>/history.ndjson``.
Entries are never modified or deleted. Write failures are logged and
otherwise ignored: history must never change a run's outcome.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from devbootstrap.core.models.ledger import LedgerReport

logger = logging.getLogger(__name__)


def generate_run_id() -> str:
    """Generate a unique run ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"run-{now}-{short}"


class RunRecord(BaseModel):
    """Summary of one bootstrap run."""

    run_id: str = ""
    started_at: str = ""
    ended_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    backend: str = ""
    status: str = ""               # ok, partial, failed
    exit_code: int = 0
    steps_total: int = 0
    steps_succeeded: int = 0
    steps_failed: int = 0
    failed_steps: list[str] = Field(default_factory=list)

    @classmethod
    def from_report(
        cls,
        report: LedgerReport,
        run_id: str,
        started_at: str,
        backend: str,
    ) -> RunRecord:
        return cls(
            run_id=run_id,
            started_at=started_at,
            backend=backend,
            status=report.status,
            exit_code=report.exit_code,
            steps_total=report.total,
            steps_succeeded=len(report.succeeded),
            steps_failed=len(report.failed),
            failed_steps=[e.label for e in report.failed],
        )


class HistoryWriter:
    """Append-only run history."""

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, record: RunRecord) -> bool:
        """Append a record. Returns False if it could not be written."""
        line = json.dumps(record.model_dump(mode="json"), ensure_ascii=False) + "\n"
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            logger.error("Failed to write run history: %s", e)
            return False
        logger.debug("Run history written: %s", record.run_id)
        return True

    def read_all(self) -> list[RunRecord]:
        """All records, oldest first. Corrupt lines are skipped."""
        if not self._path.is_file():
            return []

        records = []
        try:
            with self._path.open("r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        records.append(RunRecord.model_validate(json.loads(line)))
                    except ValueError as e:
                        logger.warning("Skipping corrupt history entry at line %d: %s", line_num, e)
        except OSError as e:
            logger.error("Failed to read run history: %s", e)

        return records

    def read_recent(self, n: int = 10) -> list[RunRecord]:
        return self.read_all()[-n:]
