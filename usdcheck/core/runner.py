# usdcheck runner: opens one stage and runs the selected checks on it.
#
# Contract:
# - The RunConfig is validated before anything is opened.
# - Exactly one stage is opened per run; every check receives the same handle.
# - A stage that fails to open aborts the whole run (no check can proceed).
# - Checks run sequentially in registration order. A check that raises is turned
#   into a failing Outcome; the remaining checks still run.

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

from .registry import CheckRegistry, build_default_registry
from .reporting import ReportSink, RunSummary, TextReporter
from .types import CheckEntry, Outcome, RunConfig

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    scene_path: str
    opened: bool = False
    outcomes: list[Outcome] = field(default_factory=list)
    summary: RunSummary = field(default_factory=RunSummary)
    exported: Optional[bool] = None


class CheckRunner:
    """Manages and executes validation checks on a single USD file."""

    def __init__(
        self,
        scene_path: str,
        registry: Optional[CheckRegistry] = None,
        reporter: Optional[ReportSink] = None,
        stage_opener: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.scene_path = scene_path
        self.registry = registry if registry is not None else build_default_registry()
        self.reporter = reporter if reporter is not None else TextReporter()
        if stage_opener is None:
            from ..utils.usd_helpers import open_stage
            stage_opener = open_stage
        self._open_stage = stage_opener

    def run(self, config: RunConfig) -> RunReport:
        config.validate()
        report = RunReport(scene_path=self.scene_path)

        stage = self._open_stage(self.scene_path)
        if stage is None:
            logger.error(f"Failed to open stage: {self.scene_path}")
            self.reporter.scene_failed(self.scene_path)
            return report

        report.opened = True
        logger.info(f"Opened stage: {self.scene_path}")
        self.reporter.scene_opened(self.scene_path)

        for entry in self.registry.select(config):
            outcome = self._run_check(entry, stage)
            report.outcomes.append(outcome)
            self.reporter.outcome(outcome)

        report.summary = RunSummary.from_outcomes(report.outcomes)
        self.reporter.summary(report.summary)

        if config.output_path:
            report.exported = self.reporter.export(config.output_path)

        return report

    def _run_check(self, entry: CheckEntry, stage: Any) -> Outcome:
        t0 = time.perf_counter()
        try:
            outcome = entry.analyzer(stage)
        except Exception as ex:
            logger.exception(f"Check '{entry.check_id.value}' raised")
            outcome = Outcome(
                identifier=entry.check_id.value,
                passed=False,
                message=f"Check raised an unexpected error: {ex}",
            )
        duration_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug(
            f"Check '{entry.check_id.value}' finished in {duration_ms:.1f} ms "
            f"({'pass' if outcome.passed else 'fail'})"
        )
        return replace(outcome, duration_ms=round(duration_ms, 3))
