"""
Stage executor — the failure-isolating loop of a bootstrap run.

A run is a fixed list of ``Stage`` objects. Each stage is a plain
function of the ``RunContext`` returning a ``StepRecord`` (or None when
there was nothing to do). The executor appends each record to the
ledger and converts anything a stage raises into a failed record, so
no stage can end the run early.

Flow:
    for stage: run → record | skip | crash→failed record → next stage
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from devbootstrap.adapters.base import NativeBackend
from devbootstrap.adapters.network.fetch import Fetcher
from devbootstrap.adapters.packages.homebrew import HomebrewAdapter
from devbootstrap.adapters.shell.command import CommandRunner
from devbootstrap.adapters.shell.profile import ProfileWriter
from devbootstrap.adapters.version_manager.asdf import AsdfAdapter
from devbootstrap.core.config.loader import LoadedConfigs
from devbootstrap.core.config.settings import Settings
from devbootstrap.core.models.ledger import RunLedger, StepRecord

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """Everything a stage may use. Built once per run, passed explicitly."""

    settings: Settings
    runner: CommandRunner
    fetcher: Fetcher
    backend: NativeBackend
    homebrew: HomebrewAdapter
    asdf: AsdfAdapter
    profiles: ProfileWriter = field(default_factory=ProfileWriter)
    configs: LoadedConfigs = field(default_factory=LoadedConfigs)


StageFn = Callable[[RunContext], "StepRecord | None"]


@dataclass(frozen=True)
class Stage:
    """A named step of the run."""

    label: str
    run: StageFn


def run_stage(stage: Stage, context: RunContext) -> StepRecord | None:
    """Run one stage, turning any exception into a failed record."""
    logger.info("▶ %s", stage.label)
    try:
        return stage.run(context)
    except Exception as e:
        logger.exception("Stage '%s' raised", stage.label)
        return StepRecord.failure(
            f"{stage.label} failed unexpectedly",
            detail=f"{type(e).__name__}: {e}",
        )


def execute_stages(
    stages: Sequence[Stage],
    context: RunContext,
    ledger: RunLedger,
) -> RunLedger:
    """Run every stage in order and record the outcomes.

    Args:
        stages: Stages in execution order.
        context: Shared run context.
        ledger: Ledger to append to.

    Returns:
        The same ledger, for chaining.
    """
    for stage in stages:
        record = run_stage(stage, context)
        if record is None:
            logger.info("⊘ %s: nothing to do", stage.label)
            continue

        ledger.append(record)
        if record.ok:
            logger.info("✓ %s", record.label)
        else:
            logger.error("✗ %s", record.label)

    return ledger
