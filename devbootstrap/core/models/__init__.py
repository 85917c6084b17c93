"""
Domain models — Pydantic types for the bootstrapper.

    from devbootstrap.core.models import ToolDeclaration, DeclaredSet, RunLedger
"""

from devbootstrap.core.models.backend import BackendKind
from devbootstrap.core.models.ledger import LedgerReport, Outcome, RunLedger, StepRecord
from devbootstrap.core.models.tool import DeclaredSet, ToolDeclaration

__all__ = [
    "BackendKind",
    "DeclaredSet",
    "LedgerReport",
    "Outcome",
    "RunLedger",
    "StepRecord",
    "ToolDeclaration",
]
