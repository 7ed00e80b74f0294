"""Marker persistence.

Markers are diagnostics attached to a unit so an editor or build host can
show them next to the source. The pipeline only needs two operations,
clear_markers and add_marker, which any backend can provide.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol, runtime_checkable

from crosswalk.model import Problem, Severity


class MarkerStoreError(Exception):
    """Raised when a marker store cannot clear or add markers."""

    def __init__(self, message: str, unit_path: str | None = None):
        self.unit_path = unit_path
        full_message = f"[{unit_path}] {message}" if unit_path else message
        super().__init__(full_message)


@dataclass(frozen=True)
class Marker:
    """A persisted diagnostic."""

    message: str
    severity: Severity
    char_start: int
    char_end: int
    line: int

    @classmethod
    def from_problem(cls, problem: Problem) -> "Marker":
        return cls(
            message=problem.message,
            severity=problem.severity,
            char_start=problem.char_start,
            char_end=problem.char_end,
            line=problem.line,
        )

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "severity": self.severity.value,
            "char_start": self.char_start,
            "char_end": self.char_end,
            "line": self.line,
        }


@runtime_checkable
class MarkerStore(Protocol):
    """Persistence interface for markers, keyed by unit path."""

    def clear_markers(self, unit_path: str) -> None:
        """Remove all markers for a unit."""
        ...

    def add_marker(self, unit_path: str, marker: Marker) -> None:
        """Attach a marker to a unit."""
        ...


class NullMarkerStore:
    """Store that keeps nothing."""

    def clear_markers(self, unit_path: str) -> None:
        pass

    def add_marker(self, unit_path: str, marker: Marker) -> None:
        pass


class InMemoryMarkerStore:
    """Dict-backed store, mainly for tests and embedding."""

    def __init__(self) -> None:
        self._markers: dict[str, list[Marker]] = {}

    def clear_markers(self, unit_path: str) -> None:
        self._markers.pop(unit_path, None)

    def add_marker(self, unit_path: str, marker: Marker) -> None:
        self._markers.setdefault(unit_path, []).append(marker)

    def markers_for(self, unit_path: str) -> list[Marker]:
        return list(self._markers.get(unit_path, []))

    def unit_paths(self) -> list[str]:
        return sorted(self._markers)


MARKER_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS markers (
    id INTEGER PRIMARY KEY,
    unit_path TEXT NOT NULL,
    severity TEXT NOT NULL,
    message TEXT NOT NULL,
    line INTEGER NOT NULL,
    char_start INTEGER NOT NULL,
    char_end INTEGER NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_markers_unit ON markers(unit_path);
"""


class SqliteMarkerStore:
    """Persistent marker storage."""

    def __init__(self, conn: sqlite3.Connection):
        """Initialize store with database connection."""
        self._conn = conn

    def init_schema(self) -> None:
        """Initialize markers table."""
        self._conn.executescript(MARKER_SCHEMA_SQL)
        self._conn.commit()

    def clear_markers(self, unit_path: str) -> None:
        try:
            self._conn.execute(
                "DELETE FROM markers WHERE unit_path = ?",
                (unit_path,),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise MarkerStoreError(f"Cannot clear markers: {e}", unit_path) from e

    def add_marker(self, unit_path: str, marker: Marker) -> None:
        try:
            self._conn.execute(
                """
                INSERT INTO markers (unit_path, severity, message, line,
                                     char_start, char_end, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    unit_path,
                    marker.severity.value,
                    marker.message,
                    marker.line,
                    marker.char_start,
                    marker.char_end,
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise MarkerStoreError(f"Cannot add marker: {e}", unit_path) from e

    def markers_for(self, unit_path: str) -> list[Marker]:
        """Markers for a unit in insertion order."""
        cursor = self._conn.execute(
            """
            SELECT message, severity, char_start, char_end, line
            FROM markers
            WHERE unit_path = ?
            ORDER BY id
            """,
            (unit_path,),
        )
        return [
            Marker(
                message=row[0],
                severity=Severity(row[1]),
                char_start=row[2],
                char_end=row[3],
                line=row[4],
            )
            for row in cursor
        ]

    def unit_paths(self) -> list[str]:
        cursor = self._conn.execute(
            "SELECT DISTINCT unit_path FROM markers ORDER BY unit_path"
        )
        return [row[0] for row in cursor]

    def close(self) -> None:
        self._conn.close()


def open_marker_store(db_path: Path | str) -> SqliteMarkerStore:
    """Open (and create if needed) a SQLite marker database."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    store = SqliteMarkerStore(sqlite3.connect(db_path))
    store.init_schema()
    return store
