"""Shared fixtures: builders for source trees and a wired-up pipeline."""

import io

import pytest

from crosswalk.config import RunConfiguration
from crosswalk.diagnostics import DiagnosticSink, InMemoryMarkerStore
from crosswalk.model import Problem, Severity, SourceNode, SourceUnit
from crosswalk.pipeline import MemoryOutputSink, PipelineOrchestrator
from crosswalk.render import TargetPrinter
from crosswalk.symbols import SymbolResolver


def _node(kind, name="", *children, start=-1, length=0, **attributes):
    return SourceNode(
        kind=kind,
        name=name,
        start=start,
        length=length,
        attributes=attributes,
        children=tuple(children),
    )


def _unit(path, *members, package="", imports=(), problems=(), source=None):
    children = []
    if package:
        children.append(_node("package", package))
    children.extend(_node("import", name) for name in imports)
    children.extend(members)
    return SourceUnit(
        path=path,
        root=_node("compilation_unit", "", *children),
        problems=tuple(problems),
        source=source,
    )


def _error(path, line, message):
    return Problem(severity=Severity.ERROR, message=message, path=path, line=line)


class CountingPrinter(TargetPrinter):
    """Printer that records how often it was asked to render."""

    def __init__(self):
        super().__init__()
        self.calls = 0

    def render(self, header, unit):
        self.calls += 1
        return super().render(header, unit)


@pytest.fixture
def node():
    """Builder: node(kind, name, *children, **attributes)."""
    return _node


@pytest.fixture
def make_unit():
    """Builder: make_unit(path, *members, package=..., imports=..., problems=...)."""
    return _unit


@pytest.fixture
def error_problem():
    return _error


@pytest.fixture
def config():
    return RunConfiguration(header="// generated\n")


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def marker_store():
    return InMemoryMarkerStore()


@pytest.fixture
def sink(config, marker_store, stream):
    return DiagnosticSink(config, marker_store, stream=stream)


@pytest.fixture
def output():
    return MemoryOutputSink()


@pytest.fixture
def printer():
    return CountingPrinter()


@pytest.fixture
def resolver():
    return SymbolResolver()


@pytest.fixture
def orchestrator(config, resolver, sink, printer, output):
    return PipelineOrchestrator(
        config,
        resolver=resolver,
        sink=sink,
        printer=printer,
        output=output,
    )
