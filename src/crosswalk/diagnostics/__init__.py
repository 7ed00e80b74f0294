"""Diagnostics: problem reporting and marker persistence."""

from crosswalk.diagnostics.markers import (
    InMemoryMarkerStore,
    Marker,
    MarkerStore,
    MarkerStoreError,
    NullMarkerStore,
    SqliteMarkerStore,
    open_marker_store,
)
from crosswalk.diagnostics.sink import DiagnosticSink, WarningHandler

__all__ = [
    "DiagnosticSink",
    "WarningHandler",
    "InMemoryMarkerStore",
    "Marker",
    "MarkerStore",
    "MarkerStoreError",
    "NullMarkerStore",
    "SqliteMarkerStore",
    "open_marker_store",
]
