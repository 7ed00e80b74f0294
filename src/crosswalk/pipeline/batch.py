"""Batch driver: runs the pipeline over many units in order.

All units share the orchestrator's resolver and configuration. A failing
unit is recorded and the run moves on (unless fail_fast is set); symbol
conflicts are bugs in run sequencing and always stop the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from crosswalk.pipeline.orchestrator import (
    PipelineOrchestrator,
    UnitAbortedError,
    UnitResult,
)
from crosswalk.render.printer import OutputWriteError

logger = logging.getLogger(__name__)


@dataclass
class UnitFailure:
    """A unit that did not complete."""

    path: str
    reason: str
    kind: str
    """aborted, write_failed or load_failed."""


@dataclass
class BatchReport:
    """Summary of a batch run."""

    results: list[UnitResult] = field(default_factory=list)
    failures: list[UnitFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> list[UnitResult]:
        return [r for r in self.results if r.succeeded]

    @property
    def rendered(self) -> list[UnitResult]:
        return [r for r in self.succeeded if not r.suppressed]

    @property
    def suppressed(self) -> list[UnitResult]:
        return [r for r in self.succeeded if r.suppressed]

    @property
    def aborted(self) -> list[UnitResult]:
        return [r for r in self.results if r.aborted]

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "rendered": len(self.rendered),
            "suppressed": len(self.suppressed),
            "aborted": len(self.aborted),
            "failures": [
                {"path": f.path, "kind": f.kind, "reason": f.reason}
                for f in self.failures
            ],
            "units": [r.to_dict() for r in self.results],
        }


class BatchRunner:
    """Runs a PipelineOrchestrator over a sequence of units."""

    def __init__(self, orchestrator: PipelineOrchestrator, fail_fast: bool = False):
        self.orchestrator = orchestrator
        self.fail_fast = fail_fast

    def run(
        self,
        units: Iterable,
        report: BatchReport | None = None,
    ) -> BatchReport:
        """Process units in order.

        Args:
            units: SourceUnits to translate
            report: Existing report to extend (e.g. one holding load failures)

        Returns:
            BatchReport with one entry per processed unit
        """
        report = report or BatchReport()
        # Failures already in the report (e.g. load failures) do not trip fail_fast
        previous_failures = len(report.failures)

        for unit in units:
            try:
                report.results.append(self.orchestrator.process(unit))
            except UnitAbortedError as e:
                report.results.append(e.result)
                report.failures.append(
                    UnitFailure(path=unit.path, reason=str(e), kind="aborted")
                )
            except OutputWriteError as e:
                logger.error(f"Output for {unit.path} failed: {e}")
                report.failures.append(
                    UnitFailure(path=unit.path, reason=str(e), kind="write_failed")
                )
            except KeyboardInterrupt:
                logger.warning(
                    f"Run interrupted while processing {unit.path}; "
                    f"{len(report.succeeded)} unit(s) completed"
                )
                raise

            if self.fail_fast and len(report.failures) > previous_failures:
                logger.info("Stopping at first failed unit (fail-fast)")
                break

        logger.info(
            f"Batch finished: {len(report.rendered)} rendered, "
            f"{len(report.suppressed)} suppressed, {len(report.failures)} failed"
        )
        return report
