"""Text rendering of target units.

Output layout: header verbatim, using directives, then the namespace block
with tab-indented members and braces on their own lines.
"""

from __future__ import annotations

from typing import TextIO

from crosswalk.model import TargetNode, TargetUnit, TypeReference

INDENT = "\t"


class OutputWriteError(Exception):
    """Raised when rendered output cannot be written."""

    def __init__(self, message: str, unit_path: str | None = None):
        self.unit_path = unit_path
        full_message = f"[{unit_path}] {message}" if unit_path else message
        super().__init__(full_message)


class TargetPrinter:
    """Formats a TargetUnit as source text. Holds no per-unit state."""

    def __init__(self, indent: str = INDENT):
        self.indent = indent

    def render(self, header: str, unit: TargetUnit) -> str:
        lines: list[str] = []
        for namespace in unit.usings:
            lines.append(f"using {namespace};")
        if unit.usings:
            lines.append("")

        if unit.namespace:
            lines.append(f"namespace {unit.namespace}")
            lines.append("{")
            self._members(unit.members, 1, lines)
            lines.append("}")
        else:
            self._members(unit.members, 0, lines)

        return header + "\n".join(lines) + "\n"

    def _members(self, members: list[TargetNode], depth: int, lines: list[str]) -> None:
        previous: TargetNode | None = None
        for member in members:
            if previous is not None and not (
                previous.kind == member.kind and member.kind in ("field", "constant")
            ):
                lines.append("")
            self._member(member, depth, lines)
            previous = member

    def _member(self, node: TargetNode, depth: int, lines: list[str]) -> None:
        pad = self.indent * depth
        if node.kind in ("class", "interface", "enum"):
            self._type_declaration(node, depth, lines)
        elif node.kind == "field":
            line = f"{pad}{_prefix(node.modifiers)}{_type(node.type)} {node.name}"
            if node.text:
                line += f" = {node.text}"
            lines.append(line + ";")
        elif node.kind in ("method", "constructor"):
            self._method(node, depth, lines)
        elif node.kind == "constant":
            lines.append(f"{pad}{node.name}")
        elif node.kind == "statement":
            lines.append(f"{pad}{node.text}")
        else:
            lines.append(f"{pad}/* {node.text or node.kind} */")

    def _type_declaration(self, node: TargetNode, depth: int, lines: list[str]) -> None:
        pad = self.indent * depth
        header = f"{pad}{_prefix(node.modifiers)}{node.kind} {node.name}"
        if node.bases:
            header += " : " + ", ".join(_type(b) for b in node.bases)
        lines.append(header)
        lines.append(f"{pad}{{")

        if node.kind == "enum":
            constants = [m for m in node.members if m.kind == "constant"]
            others = [m for m in node.members if m.kind != "constant"]
            inner = self.indent * (depth + 1)
            for index, constant in enumerate(constants):
                separator = "," if index < len(constants) - 1 else ""
                lines.append(f"{inner}{constant.name}{separator}")
            if constants and others:
                lines.append("")
            self._members(others, depth + 1, lines)
        else:
            self._members(node.members, depth + 1, lines)

        lines.append(f"{pad}}}")

    def _method(self, node: TargetNode, depth: int, lines: list[str]) -> None:
        pad = self.indent * depth
        parameters = ", ".join(f"{_type(p.type)} {p.name}" for p in node.parameters)
        signature = f"{pad}{_prefix(node.modifiers)}"
        if node.kind == "method":
            signature += f"{_type(node.type)} "
        signature += f"{node.name}({parameters})"

        if node.body is None:
            lines.append(signature + ";")
            return
        lines.append(signature)
        lines.append(f"{pad}{{")
        for statement in node.body:
            self._member(statement, depth + 1, lines)
        lines.append(f"{pad}}}")


def _prefix(modifiers: list[str]) -> str:
    return "".join(f"{m} " for m in modifiers)


def _type(reference: TypeReference | None) -> str:
    if reference is None:
        return "void"
    return reference.display_name()


_default_printer = TargetPrinter()


def render(header: str, unit: TargetUnit) -> str:
    """Render a unit with the default printer."""
    return _default_printer.render(header, unit)


def print_to(
    writer: TextIO,
    header: str,
    unit: TargetUnit,
    printer: TargetPrinter | None = None,
) -> None:
    """Render a unit and write it to a text stream.

    Raises:
        OutputWriteError: If the stream rejects the write
    """
    text = (printer or _default_printer).render(header, unit)
    try:
        writer.write(text)
    except OSError as e:
        raise OutputWriteError(f"Cannot write output: {e}", unit.path) from e
