"""Front-end boundary: loading parsed units."""

from crosswalk.frontend.loader import (
    UnitDocument,
    UnitDocumentError,
    load_unit,
    load_units,
    parse_unit,
)

__all__ = [
    "UnitDocument",
    "UnitDocumentError",
    "load_unit",
    "load_units",
    "parse_unit",
]
