"""Destinations for rendered units.

Each sink receives one rendered text per emitted unit, in processing order.
Write failures surface as OutputWriteError.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, TextIO

from crosswalk.render.printer import OutputWriteError

logger = logging.getLogger(__name__)


class OutputSink(Protocol):
    """Receives rendered text for a unit."""

    def write_unit(self, unit_path: str, text: str) -> None:
        ...


class StreamOutputSink:
    """Writes every unit to one text stream."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    def write_unit(self, unit_path: str, text: str) -> None:
        try:
            self.stream.write(text)
            self.stream.flush()
        except OSError as e:
            raise OutputWriteError(f"Cannot write output: {e}", unit_path) from e


class MemoryOutputSink:
    """Keeps rendered units in memory."""

    def __init__(self) -> None:
        self.outputs: list[tuple[str, str]] = []

    def write_unit(self, unit_path: str, text: str) -> None:
        self.outputs.append((unit_path, text))

    @property
    def texts(self) -> dict[str, str]:
        return dict(self.outputs)


class DirectoryOutputSink:
    """Writes each unit to its own file under an output directory.

    The file is written to a temporary sibling and renamed into place, so an
    interrupted run never leaves a half-written file behind.
    """

    def __init__(
        self,
        root: Path | str,
        extension: str = ".cs",
        source_root: Path | str | None = None,
    ):
        self.root = Path(root)
        self.extension = extension
        self.source_root = Path(source_root) if source_root else None

    def target_path(self, unit_path: str) -> Path:
        """Output file for a unit path."""
        path = Path(unit_path)
        if self.source_root is not None:
            try:
                path = path.relative_to(self.source_root)
            except ValueError:
                path = Path(path.name)
        elif path.is_absolute() or ".." in path.parts:
            path = Path(path.name)
        return self.root / path.with_suffix(self.extension)

    def write_unit(self, unit_path: str, text: str) -> None:
        target = self.target_path(unit_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(text)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise OutputWriteError(f"Cannot write {target}: {e}", unit_path) from e
        logger.info(f"Wrote {target}")
