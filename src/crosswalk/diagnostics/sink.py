"""Diagnostic sink.

Collects problems reported while processing units and makes them visible:
- every problem is written as ``path(line): message`` to an error stream
- when marker emission is enabled, problems are also forwarded to a
  MarkerStore keyed by the unit path

The sink never decides whether a unit failed; the orchestrator does.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Callable, TextIO

from crosswalk.config import RunConfiguration
from crosswalk.diagnostics.markers import (
    Marker,
    MarkerStore,
    MarkerStoreError,
    NullMarkerStore,
)
from crosswalk.model import Problem, Severity, SourceNode, SourceUnit

logger = logging.getLogger(__name__)

WarningHandler = Callable[[SourceNode, str], None]
"""Receives a node that could not be translated cleanly and a message."""


class DiagnosticSink:
    """Records and reports problems for a run."""

    def __init__(
        self,
        config: RunConfiguration,
        marker_store: MarkerStore | None = None,
        stream: TextIO | None = None,
    ):
        """Initialize sink.

        Args:
            config: Run configuration (marker emission, failure policy)
            marker_store: Marker backend; ignored unless emit_markers is set
            stream: Where diagnostic lines go (defaults to sys.stderr at write time)
        """
        self.config = config
        self.marker_store: MarkerStore = marker_store or NullMarkerStore()
        self._stream = stream
        self._problems: list[Problem] = []
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    @property
    def problems(self) -> list[Problem]:
        return list(self._problems)

    @property
    def problem_count(self) -> int:
        return len(self._problems)

    def problems_since(self, index: int) -> list[Problem]:
        """Problems recorded after the first ``index`` ones."""
        with self._lock:
            return self._problems[index:]

    def problems_for(self, unit_path: str) -> list[Problem]:
        return [p for p in self._problems if p.path == unit_path]

    def counts(self) -> dict[str, int]:
        """Totals per severity."""
        result = {severity.value: 0 for severity in Severity}
        for problem in self._problems:
            result[problem.severity.value] += 1
        return result

    def report(self, problem: Problem, persist: bool = True) -> None:
        """Record a problem, write it to the stream and optionally persist it.

        Args:
            problem: The problem to report
            persist: Forward to the marker store (when emission is enabled)
        """
        with self._lock:
            self._problems.append(problem)
            self.stream.write(problem.format_line() + "\n")
            self.stream.flush()

        if persist and self.config.emit_markers:
            self._persist(
                lambda: self.marker_store.add_marker(
                    problem.path, Marker.from_problem(problem)
                ),
                problem.path,
            )

    def begin_unit(self, unit: SourceUnit) -> None:
        """Clear persisted markers for a unit before it is translated again."""
        if self.config.emit_markers:
            self._persist(
                lambda: self.marker_store.clear_markers(unit.path),
                unit.path,
            )

    def warning_handler(self, unit: SourceUnit) -> WarningHandler:
        """Return a handler that reports warnings against this unit only."""

        def warning(node: SourceNode, message: str) -> None:
            self.report(
                Problem(
                    severity=Severity.WARNING,
                    message=message,
                    path=unit.path,
                    line=unit.line_of(node),
                    char_start=node.start,
                    char_end=node.end,
                )
            )

        return warning

    def _persist(self, operation: Callable[[], None], unit_path: str) -> None:
        try:
            operation()
        except MarkerStoreError as e:
            if self.config.marker_failure_policy == "raise":
                raise
            logger.warning(f"Marker persistence failed for {unit_path}: {e}")
