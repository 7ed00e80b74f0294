"""Per-unit pipeline.

Runs one SourceUnit through:
1. Validate parse problems (abort on errors unless ignore_errors)
2. Clear stale markers, install a warning handler for this unit
3. Translate against a staged view of the shared symbol resolver
4. Suppress, or render header + tree and write it to the output sink

States: PARSED → VALIDATED → TRANSLATED → (SUPPRESSED | RENDERED) → DONE,
with ABORTED reachable from PARSED.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum

from crosswalk.config import RunConfiguration
from crosswalk.diagnostics.sink import DiagnosticSink
from crosswalk.model import Problem, SourceUnit, TargetUnit
from crosswalk.pipeline.output import OutputSink, StreamOutputSink
from crosswalk.render.printer import TargetPrinter
from crosswalk.symbols.resolver import SymbolResolver
from crosswalk.translate.translator import DefaultTranslator, UnitTranslator

logger = logging.getLogger(__name__)


class UnitState(str, Enum):
    """Pipeline states for one unit."""

    PARSED = "parsed"
    VALIDATED = "validated"
    TRANSLATED = "translated"
    SUPPRESSED = "suppressed"
    RENDERED = "rendered"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class UnitResult:
    """Outcome of processing one unit."""

    path: str
    state: UnitState = UnitState.PARSED
    history: list[UnitState] = field(default_factory=lambda: [UnitState.PARSED])
    target: TargetUnit | None = None
    output: str | None = None
    """Rendered text; None when aborted or suppressed."""

    problems: list[Problem] = field(default_factory=list)

    def advance(self, state: UnitState) -> None:
        self.state = state
        self.history.append(state)

    @property
    def succeeded(self) -> bool:
        return self.state == UnitState.DONE

    @property
    def suppressed(self) -> bool:
        return UnitState.SUPPRESSED in self.history

    @property
    def aborted(self) -> bool:
        return self.state == UnitState.ABORTED

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "state": self.state.value,
            "history": [s.value for s in self.history],
            "suppressed": self.suppressed,
            "problems": [p.to_dict() for p in self.problems],
        }


class UnitAbortedError(Exception):
    """Raised when a unit has parse errors and errors are not ignored."""

    def __init__(self, result: UnitResult):
        self.result = result
        super().__init__(
            f"'{result.path}' has errors, check stderr for details."
        )


class PipelineOrchestrator:
    """Drives units through validation, translation and rendering.

    One orchestrator serves a whole run: the resolver, sink and configuration
    it holds are shared by every unit it processes.
    """

    def __init__(
        self,
        config: RunConfiguration,
        resolver: SymbolResolver | None = None,
        sink: DiagnosticSink | None = None,
        translator: UnitTranslator | None = None,
        printer: TargetPrinter | None = None,
        output: OutputSink | None = None,
    ):
        self.config = config
        self.resolver = resolver or SymbolResolver()
        self.sink = sink or DiagnosticSink(config)
        self.translator: UnitTranslator = translator or DefaultTranslator()
        self.printer = printer or TargetPrinter()
        self.output: OutputSink = output or StreamOutputSink(sys.stdout)

    def process(self, unit: SourceUnit) -> UnitResult:
        """Run one unit through the pipeline.

        Raises:
            UnitAbortedError: Parse errors present and ignore_errors is off
            SymbolConflictError: A symbol was bound twice in this run
            OutputWriteError: Rendered text could not be written
        """
        result = UnitResult(path=unit.path)
        first_problem = self.sink.problem_count

        try:
            self._validate(unit, result)
            target = self._translate(unit)
            result.target = target
            result.advance(UnitState.TRANSLATED)

            if target.suppressed:
                result.advance(UnitState.SUPPRESSED)
                logger.info(f"{unit.path}: nothing to emit, output suppressed")
            else:
                text = self.printer.render(self.config.header, target)
                self.output.write_unit(unit.path, text)
                result.output = text
                result.advance(UnitState.RENDERED)

            result.advance(UnitState.DONE)
            return result
        finally:
            result.problems = self.sink.problems_since(first_problem)

    def _validate(self, unit: SourceUnit, result: UnitResult) -> None:
        errors = unit.errors
        for problem in errors:
            self.sink.report(problem, persist=False)

        if errors and not self.config.ignore_errors:
            result.advance(UnitState.ABORTED)
            logger.error(f"{unit.path}: {len(errors)} parse error(s), unit aborted")
            raise UnitAbortedError(result)

        if errors:
            logger.warning(
                f"{unit.path}: ignoring {len(errors)} parse error(s) as configured"
            )
        result.advance(UnitState.VALIDATED)

    def _translate(self, unit: SourceUnit) -> TargetUnit:
        self.sink.begin_unit(unit)
        warn = self.sink.warning_handler(unit)
        with self.resolver.unit_scope() as scope:
            return self.translator.translate(unit, scope, warn)
