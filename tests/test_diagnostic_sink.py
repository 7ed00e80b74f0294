"""Tests for the diagnostic sink and its marker forwarding."""

import io
import logging

import pytest

from crosswalk.config import RunConfiguration
from crosswalk.diagnostics import (
    DiagnosticSink,
    InMemoryMarkerStore,
    Marker,
    MarkerStoreError,
)
from crosswalk.model import Problem, Severity, SourceNode, SourceUnit


class FailingMarkerStore:
    """Store whose backend is unavailable."""

    def clear_markers(self, unit_path):
        raise MarkerStoreError("backend offline", unit_path)

    def add_marker(self, unit_path, marker):
        raise MarkerStoreError("backend offline", unit_path)


@pytest.fixture
def unit():
    source = "class A {\n  synchronized void m() {}\n}\n"
    return SourceUnit(
        path="src/A.src",
        root=SourceNode("compilation_unit"),
        source=source,
    )


def _sink(store, stream, **options):
    return DiagnosticSink(RunConfiguration(**options), store, stream=stream)


class TestReport:
    """Textual reporting."""

    def test_writes_path_line_message(self, sink, stream):
        sink.report(Problem(Severity.WARNING, "odd cast", "src/A.src", 12))
        assert stream.getvalue() == "src/A.src(12): odd cast\n"

    def test_records_problems(self, sink):
        problem = Problem(Severity.WARNING, "odd cast", "src/A.src", 12)
        sink.report(problem)

        assert sink.problems == [problem]
        assert sink.problems_for("src/A.src") == [problem]
        assert sink.problems_for("src/B.src") == []

    def test_problems_since(self, sink):
        first = Problem(Severity.WARNING, "first", "src/A.src", 1)
        second = Problem(Severity.WARNING, "second", "src/B.src", 2)
        sink.report(first)
        mark = sink.problem_count
        sink.report(second)

        assert mark == 1
        assert sink.problem_count == 2
        assert sink.problems_since(mark) == [second]
        assert sink.problems_since(sink.problem_count) == []

    def test_counts(self, sink):
        sink.report(Problem(Severity.WARNING, "w", "a", 1))
        sink.report(Problem(Severity.ERROR, "e", "a", 2), persist=False)
        assert sink.counts() == {"error": 1, "warning": 1}

    def test_written_even_without_markers(self, marker_store, stream):
        sink = _sink(marker_store, stream, emit_markers=False)
        sink.report(Problem(Severity.WARNING, "odd cast", "src/A.src", 12))

        assert "src/A.src(12): odd cast" in stream.getvalue()
        assert marker_store.markers_for("src/A.src") == []

    def test_defaults_to_stderr(self, capsys):
        sink = DiagnosticSink(RunConfiguration())
        sink.report(Problem(Severity.WARNING, "odd cast", "src/A.src", 12))
        assert capsys.readouterr().err == "src/A.src(12): odd cast\n"


class TestMarkers:
    """Forwarding to the marker store."""

    def test_forwarded_when_enabled(self, marker_store, stream):
        sink = _sink(marker_store, stream, emit_markers=True)
        sink.report(Problem(Severity.WARNING, "odd cast", "src/A.src", 12, 40, 52))

        assert marker_store.markers_for("src/A.src") == [
            Marker("odd cast", Severity.WARNING, 40, 52, 12)
        ]

    def test_persist_false_skips_store(self, marker_store, stream):
        sink = _sink(marker_store, stream, emit_markers=True)
        sink.report(Problem(Severity.ERROR, "parse", "src/A.src", 1), persist=False)

        assert marker_store.markers_for("src/A.src") == []
        assert stream.getvalue() == "src/A.src(1): parse\n"

    def test_begin_unit_clears_previous_markers(self, unit, marker_store, stream):
        sink = _sink(marker_store, stream, emit_markers=True)
        node = SourceNode("method", "m", start=12)

        for _ in range(3):
            sink.begin_unit(unit)
            sink.warning_handler(unit)(node, "Unsupported modifier")

        assert len(marker_store.markers_for(unit.path)) == 1

    def test_begin_unit_leaves_other_units(self, unit, marker_store, stream):
        marker_store.add_marker("src/B.src", Marker("x", Severity.WARNING, 0, 1, 1))
        sink = _sink(marker_store, stream, emit_markers=True)

        sink.begin_unit(unit)

        assert len(marker_store.markers_for("src/B.src")) == 1

    def test_begin_unit_noop_when_disabled(self, unit, marker_store, stream):
        marker_store.add_marker(unit.path, Marker("x", Severity.WARNING, 0, 1, 1))
        sink = _sink(marker_store, stream, emit_markers=False)

        sink.begin_unit(unit)

        assert len(marker_store.markers_for(unit.path)) == 1

    def test_failure_logged_by_default(self, unit, stream, caplog):
        sink = _sink(FailingMarkerStore(), stream, emit_markers=True)

        with caplog.at_level(logging.WARNING):
            sink.begin_unit(unit)
            sink.report(Problem(Severity.WARNING, "odd", unit.path, 2))

        assert "backend offline" in caplog.text
        assert stream.getvalue() == "src/A.src(2): odd\n"

    def test_failure_raised_when_configured(self, unit, stream):
        sink = _sink(
            FailingMarkerStore(),
            stream,
            emit_markers=True,
            marker_failure_policy="raise",
        )
        with pytest.raises(MarkerStoreError):
            sink.begin_unit(unit)


class TestWarningHandler:
    """Per-unit warning callbacks."""

    def test_attributes_to_unit_and_node_position(self, unit, sink, stream):
        offset = unit.source.index("synchronized")
        node = SourceNode("method", "m", start=offset, length=12)

        sink.warning_handler(unit)(node, "Unsupported modifier 'synchronized'")

        problem = sink.problems[0]
        assert problem.severity == Severity.WARNING
        assert problem.path == "src/A.src"
        assert problem.line == 2
        assert (problem.char_start, problem.char_end) == (offset, offset + 12)
        assert stream.getvalue() == "src/A.src(2): Unsupported modifier 'synchronized'\n"

    def test_handlers_are_bound_per_unit(self, sink):
        first = SourceUnit(path="A.src", root=SourceNode("compilation_unit"))
        second = SourceUnit(path="B.src", root=SourceNode("compilation_unit"))
        warn_first = sink.warning_handler(first)
        warn_second = sink.warning_handler(second)

        warn_second(SourceNode("field"), "b")
        warn_first(SourceNode("field"), "a")

        assert [(p.path, p.message) for p in sink.problems] == [
            ("B.src", "b"),
            ("A.src", "a"),
        ]


def test_stream_lines_not_interleaved():
    """Each report is written as one complete line."""
    stream = io.StringIO()
    sink = DiagnosticSink(RunConfiguration(), InMemoryMarkerStore(), stream=stream)
    for i in range(20):
        sink.report(Problem(Severity.WARNING, f"message {i}", "A.src", i))

    lines = stream.getvalue().splitlines()
    assert lines == [f"A.src({i}): message {i}" for i in range(20)]
