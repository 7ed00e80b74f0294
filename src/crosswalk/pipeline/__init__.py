"""Unit pipeline orchestration."""

from crosswalk.pipeline.batch import BatchReport, BatchRunner, UnitFailure
from crosswalk.pipeline.orchestrator import (
    PipelineOrchestrator,
    UnitAbortedError,
    UnitResult,
    UnitState,
)
from crosswalk.pipeline.output import (
    DirectoryOutputSink,
    MemoryOutputSink,
    OutputSink,
    StreamOutputSink,
)

__all__ = [
    "BatchReport",
    "BatchRunner",
    "UnitFailure",
    "PipelineOrchestrator",
    "UnitAbortedError",
    "UnitResult",
    "UnitState",
    "DirectoryOutputSink",
    "MemoryOutputSink",
    "OutputSink",
    "StreamOutputSink",
]
