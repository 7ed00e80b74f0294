"""Loading of parsed units produced by an external front-end.

The front-end writes one JSON document per compilation unit:

    {
      "path": "src/com/acme/Foo.java",
      "source": "package com.acme; ...",
      "root": {"kind": "compilation_unit", "children": [...]},
      "problems": [{"severity": "error", "message": "...", "line": 4}]
    }

"path" defaults to the document's own path; "source" is optional and only
used for line numbers.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from crosswalk.model import Problem, Severity, SourceNode, SourceUnit

logger = logging.getLogger(__name__)


class UnitDocumentError(Exception):
    """Raised when a unit document cannot be read or is malformed."""

    def __init__(self, message: str, path: Path | str | None = None):
        self.path = path
        full_message = f"{path}: {message}" if path else message
        super().__init__(full_message)


class ProblemModel(BaseModel):
    """Problem as recorded by the front-end."""

    severity: Literal["error", "warning"]
    message: str
    line: int = 0
    char_start: int = -1
    char_end: int = -1
    file: Optional[str] = Field(
        default=None, description="Originating file; defaults to the unit path"
    )


class ParameterModel(BaseModel):
    """Method or constructor parameter."""

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    type: Optional[str] = None


class NodeAttributes(BaseModel):
    """Node attributes; the ones the translator reads are typed."""

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = Field(None, description="Field type")
    return_type: Optional[str] = None
    extends: Optional[Union[str, List[str]]] = None
    implements: Optional[List[str]] = None
    modifiers: Optional[List[str]] = None
    annotations: Optional[List[str]] = None
    parameters: Optional[List[ParameterModel]] = None
    line: Optional[int] = Field(None, description="1-based source line")


class NodeModel(BaseModel):
    """One node of the parsed tree."""

    kind: str
    name: str = ""
    start: int = -1
    length: int = 0
    attributes: NodeAttributes = Field(default_factory=NodeAttributes)
    children: List["NodeModel"] = Field(default_factory=list)

    def to_node(self) -> SourceNode:
        return SourceNode(
            kind=self.kind,
            name=self.name,
            start=self.start,
            length=self.length,
            attributes=self.attributes.model_dump(exclude_none=True),
            children=tuple(child.to_node() for child in self.children),
        )


NodeModel.model_rebuild()


class UnitDocument(BaseModel):
    """A parsed compilation unit."""

    path: Optional[str] = None
    source: Optional[str] = None
    root: NodeModel
    problems: List[ProblemModel] = Field(default_factory=list)

    def to_unit(self, default_path: str) -> SourceUnit:
        path = self.path or default_path
        return SourceUnit(
            path=path,
            root=self.root.to_node(),
            problems=tuple(
                Problem(
                    severity=Severity(p.severity),
                    message=p.message,
                    path=p.file or path,
                    line=p.line,
                    char_start=p.char_start,
                    char_end=p.char_end,
                )
                for p in self.problems
            ),
            source=self.source,
        )


def parse_unit(data: dict, default_path: str = "<memory>") -> SourceUnit:
    """Build a SourceUnit from an already-decoded document.

    Raises:
        UnitDocumentError: If the document does not match the schema
    """
    try:
        document = UnitDocument.model_validate(data)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise UnitDocumentError(f"Invalid unit document: {details}", default_path) from e
    return document.to_unit(default_path)


def load_unit(path: Path | str) -> SourceUnit:
    """Read a unit document from disk.

    Raises:
        UnitDocumentError: If the file is unreadable, not JSON or malformed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise UnitDocumentError(f"Cannot read unit document: {e}", path) from e
    except json.JSONDecodeError as e:
        raise UnitDocumentError(f"Not valid JSON: {e}", path) from e

    if not isinstance(data, dict):
        raise UnitDocumentError("Unit document must be a JSON object", path)

    unit = parse_unit(data, default_path=str(path))
    logger.debug(f"Loaded {unit.path} ({len(unit.problems)} problem(s))")
    return unit


def load_units(paths: Iterable[Path | str]) -> list[SourceUnit]:
    """Load several unit documents, in the given order."""
    return [load_unit(path) for path in paths]
