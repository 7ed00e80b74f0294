"""Source and target tree models."""

from crosswalk.model.source import Problem, Severity, SourceNode, SourceUnit
from crosswalk.model.target import (
    MemberReference,
    Parameter,
    TargetNode,
    TargetUnit,
    TypeReference,
)

__all__ = [
    "Problem",
    "Severity",
    "SourceNode",
    "SourceUnit",
    "MemberReference",
    "Parameter",
    "TargetNode",
    "TargetUnit",
    "TypeReference",
]
