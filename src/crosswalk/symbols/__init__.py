"""Cross-unit symbol resolution."""

from crosswalk.symbols.resolver import (
    Reference,
    SymbolConflictError,
    SymbolResolver,
    SymbolTable,
    UnitScope,
)

__all__ = [
    "Reference",
    "SymbolConflictError",
    "SymbolResolver",
    "SymbolTable",
    "UnitScope",
]
