"""Rendering of translated units to text."""

from crosswalk.render.printer import (
    OutputWriteError,
    TargetPrinter,
    print_to,
    render,
)

__all__ = ["OutputWriteError", "TargetPrinter", "print_to", "render"]
