"""
Run ledger — the append-only record of step outcomes.

Every stage of a bootstrap run produces at most one ``StepRecord``.
The ledger collects them in order and decides the process exit code:
1 if any step failed, 0 otherwise. Records are frozen once created and
the ledger never removes or rewrites an entry.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Outcome(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class StepRecord(BaseModel):
    """Outcome of one orchestration stage."""

    model_config = ConfigDict(frozen=True)

    label: str
    outcome: Outcome
    detail: str = ""
    failed_items: tuple[str, ...] = ()
    recorded_at: str = Field(default_factory=_now_iso)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.FAILED

    @classmethod
    def success(cls, label: str, detail: str = "") -> StepRecord:
        """Create a succeeded record."""
        return cls(label=label, outcome=Outcome.SUCCEEDED, detail=detail)

    @classmethod
    def failure(
        cls,
        label: str,
        failed_items: Iterable[str] = (),
        detail: str = "",
    ) -> StepRecord:
        """Create a failed record, optionally naming the items that failed."""
        return cls(
            label=label,
            outcome=Outcome.FAILED,
            detail=detail,
            failed_items=tuple(failed_items),
        )


@dataclass
class LedgerReport:
    """Finalized view of a ledger."""

    entries: list[StepRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def succeeded(self) -> list[StepRecord]:
        return [e for e in self.entries if e.ok]

    @property
    def failed(self) -> list[StepRecord]:
        return [e for e in self.entries if e.failed]

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    @property
    def status(self) -> str:
        if not self.failed:
            return "ok"
        if self.succeeded:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "exit_code": self.exit_code,
            "total": self.total,
            "succeeded": [e.model_dump(mode="json") for e in self.succeeded],
            "failed": [e.model_dump(mode="json") for e in self.failed],
        }


class RunLedger:
    """Append-only, ordered collection of ``StepRecord`` entries."""

    def __init__(self) -> None:
        self._entries: list[StepRecord] = []
        self._finalized = False

    @property
    def entries(self) -> tuple[StepRecord, ...]:
        return tuple(self._entries)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, record: StepRecord) -> StepRecord:
        if self._finalized:
            raise RuntimeError("Ledger is finalized; no further records accepted")
        self._entries.append(record)
        return record

    def record(
        self,
        label: str,
        outcome: Outcome,
        *,
        detail: str = "",
        failed_items: Iterable[str] = (),
    ) -> StepRecord:
        """Append a new entry and return it."""
        return self.append(
            StepRecord(
                label=label,
                outcome=outcome,
                detail=detail,
                failed_items=tuple(failed_items),
            )
        )

    def succeed(self, label: str, detail: str = "") -> StepRecord:
        return self.append(StepRecord.success(label, detail=detail))

    def fail(self, label: str, failed_items: Iterable[str] = (), detail: str = "") -> StepRecord:
        return self.append(StepRecord.failure(label, failed_items, detail=detail))

    @property
    def has_failures(self) -> bool:
        return any(e.failed for e in self._entries)

    def finalize(self) -> LedgerReport:
        """Close the ledger and return the report used for output and exit code."""
        self._finalized = True
        return LedgerReport(entries=list(self._entries))
