"""Source-side data model.

A SourceUnit is the parsed tree for one input file plus the problems the
front-end recorded while parsing it. Everything here is immutable: the
pipeline reads source units but never changes them.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any, Iterator


class Severity(str, Enum):
    """Problem severity."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Problem:
    """A diagnostic tied to a position in a unit's source."""

    severity: Severity
    message: str
    path: str
    """Originating file."""

    line: int = 0
    """1-based line number (0 when unknown)."""

    char_start: int = -1
    char_end: int = -1

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def format_line(self) -> str:
        """Render as ``path(line): message``."""
        return f"{self.path}({self.line}): {self.message}"

    def to_dict(self) -> dict:
        """Serialize for storage/API."""
        return {
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "line": self.line,
            "char_start": self.char_start,
            "char_end": self.char_end,
        }


@dataclass(frozen=True)
class SourceNode:
    """A node of the parsed source tree."""

    kind: str
    """Construct kind (class, method, field, ...)."""

    name: str = ""
    start: int = -1
    """Character offset of the node in the unit text (-1 when unknown)."""

    length: int = 0
    attributes: dict[str, Any] = field(default_factory=dict)
    children: tuple["SourceNode", ...] = ()

    @property
    def end(self) -> int:
        if self.start < 0:
            return -1
        return self.start + self.length

    def attr(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def children_of(self, *kinds: str) -> Iterator["SourceNode"]:
        """Yield direct children of the given kinds."""
        for child in self.children:
            if child.kind in kinds:
                yield child

    def walk(self) -> Iterator["SourceNode"]:
        """Depth-first traversal including this node."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class SourceUnit:
    """One parsed compilation unit."""

    path: str
    """Unit identity (path of the source file)."""

    root: SourceNode
    problems: tuple[Problem, ...] = ()
    source: str | None = None
    """Original text, used to map offsets to line numbers."""

    @property
    def errors(self) -> list[Problem]:
        return [p for p in self.problems if p.is_error]

    @property
    def has_errors(self) -> bool:
        return any(p.is_error for p in self.problems)

    @cached_property
    def _line_starts(self) -> list[int]:
        starts = [0]
        if self.source:
            for index, char in enumerate(self.source):
                if char == "\n":
                    starts.append(index + 1)
        return starts

    def line_number(self, offset: int) -> int:
        """Map a character offset to a 1-based line number.

        Returns 0 when the offset is unknown or no source text was provided.
        """
        if offset < 0 or self.source is None:
            return 0
        return bisect_right(self._line_starts, offset)

    def line_of(self, node: SourceNode) -> int:
        """Line number for a node, preferring an explicit ``line`` attribute."""
        explicit = node.attributes.get("line")
        if isinstance(explicit, int) and explicit > 0:
            return explicit
        return self.line_number(node.start)
