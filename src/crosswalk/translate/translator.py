"""Unit translator interface and the default rule set.

A translator turns one SourceUnit into a TargetUnit. It reads and writes
cross-unit symbols through a SymbolTable and reports anything it cannot map
through a WarningHandler, leaving a placeholder node in the output so the
printer always has something to print.

Implementations:
- DefaultTranslator: declarations (types, fields, methods, constructors,
  enum constants) and simple statements
"""

from __future__ import annotations

import logging
from typing import Protocol

from crosswalk.diagnostics.sink import WarningHandler
from crosswalk.model import (
    MemberReference,
    Parameter,
    SourceNode,
    SourceUnit,
    TargetNode,
    TargetUnit,
    TypeReference,
)
from crosswalk.symbols.resolver import SymbolTable
from crosswalk.translate.rules import (
    FIELD_MODIFIERS,
    IGNORE_ANNOTATION,
    IMPLICIT_PACKAGE,
    METHOD_MODIFIERS,
    PRIMITIVE_TYPES,
    TYPE_MODIFIERS,
    WELL_KNOWN_TYPES,
    namespace_for,
    pascal_case,
    split_type_name,
)

logger = logging.getLogger(__name__)

TYPE_KINDS = ("class", "interface", "enum", "annotation_type")


class UnitTranslator(Protocol):
    """Protocol for translation backends."""

    def translate(
        self,
        unit: SourceUnit,
        symbols: SymbolTable,
        warn: WarningHandler,
    ) -> TargetUnit:
        """Translate one unit.

        Args:
            unit: Parsed source unit (not modified)
            symbols: Symbol table for cross-unit lookups and bindings
            warn: Called for every construct that cannot be mapped cleanly

        Returns:
            TargetUnit, with suppressed=True when there is nothing to emit
        """
        ...


class DefaultTranslator:
    """Declaration-level translator."""

    def translate(
        self,
        unit: SourceUnit,
        symbols: SymbolTable,
        warn: WarningHandler,
    ) -> TargetUnit:
        return _UnitBuilder(unit, symbols, warn).run()


def type_identity(package: str, name: str) -> str:
    """Stable identity of a declared type."""
    return f"{package}.{name}" if package else name


def member_identity(type_id: str, name: str) -> str:
    return f"{type_id}#{name}"


class _UnitBuilder:
    """Per-unit translation state."""

    def __init__(self, unit: SourceUnit, symbols: SymbolTable, warn: WarningHandler):
        self.unit = unit
        self.symbols = symbols
        self.warn = warn

        root = unit.root
        package_node = next(root.children_of("package"), None)
        self.package = package_node.name if package_node else ""
        self.imports: dict[str, str] = {}
        self.wildcard_imports: list[str] = []
        for node in root.children_of("import"):
            if node.name.endswith(".*"):
                self.wildcard_imports.append(node.name[:-2])
            else:
                self.imports[node.name.rsplit(".", 1)[-1]] = node.name

        self.target = TargetUnit(path=unit.path, namespace=namespace_for(self.package))

    def run(self) -> TargetUnit:
        declared = []
        duplicate_ids = set()
        names: set[str] = set()
        for node in self.unit.root.children_of(*TYPE_KINDS):
            if not self._is_emitted(node):
                continue
            if node.name in names:
                # Only the first declaration of a name is bound
                duplicate_ids.add(id(node))
                continue
            names.add(node.name)
            declared.append(node)
        for node in declared:
            self._declare(node)
        declared_ids = {id(node) for node in declared}

        for node in self.unit.root.children:
            if node.kind in ("package", "import"):
                continue
            if node.kind in TYPE_KINDS:
                if id(node) in declared_ids:
                    self.target.members.append(self._type_declaration(node))
                elif id(node) in duplicate_ids:
                    self.target.members.append(
                        self._placeholder(
                            node, f"Duplicate declaration of {node.kind} {node.name}"
                        )
                    )
                continue
            self.target.members.append(
                self._placeholder(
                    node, f"Unsupported top-level construct '{node.kind}'"
                )
            )

        self.target.suppressed = self.target.is_empty
        if self.target.suppressed:
            logger.debug(f"{self.unit.path}: no target content, unit suppressed")
        return self.target

    # Declarations

    def _is_emitted(self, node: SourceNode) -> bool:
        if node.kind == "annotation_type":
            return False
        return IGNORE_ANNOTATION not in self._names_attr(node, "annotations")

    def _declare(self, node: SourceNode) -> None:
        """Bind the type and its methods before any member is translated."""
        type_id = type_identity(self.package, node.name)
        reference = TypeReference(node.name, self.target.namespace)
        self.symbols.bind(type_id, reference)

        seen: set[str] = set()
        for method in node.children_of("method"):
            if method.name in seen:
                # Overloads share one identity
                continue
            seen.add(method.name)
            self.symbols.bind(
                member_identity(type_id, method.name),
                MemberReference(reference, pascal_case(method.name)),
            )

    def _type_declaration(self, node: SourceNode) -> TargetNode:
        type_id = type_identity(self.package, node.name)
        result = TargetNode(kind=node.kind, name=node.name)
        result.modifiers = self._modifiers(node, TYPE_MODIFIERS)
        if node.kind == "interface" and "abstract" in result.modifiers:
            result.modifiers.remove("abstract")

        extends = node.attr("extends")
        if isinstance(extends, str) and extends.strip():
            bases = [extends]
        else:
            bases = self._names_attr(node, "extends")
        bases.extend(self._names_attr(node, "implements"))
        result.bases.extend(self._type_ref(name) for name in bases)

        for child in node.children:
            if child.kind == "field":
                result.members.append(self._field(child))
            elif child.kind == "method" and node.kind == "interface":
                result.members.extend(self._interface_method(child, type_id))
            elif child.kind == "method":
                result.members.append(self._method(child, node, type_id))
            elif child.kind == "constructor":
                result.members.append(self._constructor(child, node))
            elif child.kind == "constant" and node.kind == "enum":
                result.members.append(TargetNode(kind="constant", name=child.name))
            else:
                result.members.append(
                    self._placeholder(
                        child,
                        f"Unsupported member '{child.kind}' in {node.kind} {node.name}",
                    )
                )
        return result

    def _field(self, node: SourceNode) -> TargetNode:
        return TargetNode(
            kind="field",
            name=node.name,
            modifiers=self._modifiers(node, FIELD_MODIFIERS),
            type=self._type_ref(self._text_attr(node, "type", "Object")),
            text=node.attr("initializer", "") or "",
        )

    def _method(self, node: SourceNode, owner: SourceNode, type_id: str) -> TargetNode:
        modifiers = node.attr("modifiers")
        if not isinstance(modifiers, list):
            modifiers = []
        source_modifiers = {m for m in modifiers if isinstance(m, str)}
        result = self._signature(node, type_id)
        result.modifiers = self._modifiers(node, METHOD_MODIFIERS)
        if (
            owner.kind == "class"
            and not {"static", "private", "final", "abstract"} & source_modifiers
        ):
            result.modifiers.append("virtual")
        if "abstract" in source_modifiers:
            return result
        result.body = self._body(node)
        return result

    def _interface_method(self, node: SourceNode, type_id: str) -> list[TargetNode]:
        """Interface members carry no modifiers and no body."""
        result = [self._signature(node, type_id)]
        for modifier in self._names_attr(node, "modifiers"):
            if modifier not in ("public", "abstract"):
                self.warn(
                    node,
                    f"Unsupported modifier '{modifier}' on interface method {node.name}",
                )
        if node.children:
            result.append(
                self._placeholder(
                    node, f"Body of interface method {node.name} not translated"
                )
            )
        return result

    def _signature(self, node: SourceNode, type_id: str) -> TargetNode:
        bound = self.symbols.resolve(member_identity(type_id, node.name))
        return TargetNode(
            kind="method",
            name=bound.name if bound is not None else pascal_case(node.name),
            type=self._type_ref(self._text_attr(node, "return_type", "void")),
            parameters=self._parameters(node),
        )

    def _constructor(self, node: SourceNode, owner: SourceNode) -> TargetNode:
        return TargetNode(
            kind="constructor",
            name=owner.name,
            modifiers=self._modifiers(node, METHOD_MODIFIERS),
            parameters=self._parameters(node),
            body=self._body(node),
        )

    def _parameters(self, node: SourceNode) -> list[Parameter]:
        parameters = node.attr("parameters") or []
        if not isinstance(parameters, list):
            self._invalid(node, "parameters", parameters)
            return []

        result = []
        for i, p in enumerate(parameters):
            if not isinstance(p, dict):
                self._invalid(node, f"parameters[{i}]", p)
                p = {}
            name = p.get("name")
            type_name = p.get("type")
            if type_name is not None and not (
                isinstance(type_name, str) and type_name.strip()
            ):
                self._invalid(node, f"parameters[{i}].type", type_name)
                type_name = None
            result.append(
                Parameter(
                    name=name if isinstance(name, str) and name else f"arg{i}",
                    type=self._type_ref(type_name or "Object"),
                )
            )
        return result

    def _body(self, node: SourceNode) -> list[TargetNode]:
        statements = []
        for child in node.children:
            if child.kind == "return":
                expression = child.attr("expression")
                text = f"return {expression};" if expression else "return;"
                statements.append(TargetNode(kind="statement", text=text))
            elif child.kind == "expression":
                text = child.attr("expression", child.name)
                statements.append(TargetNode(kind="statement", text=f"{text};"))
            else:
                statements.append(
                    self._placeholder(child, f"Untranslated statement '{child.kind}'")
                )
        return statements

    def _modifiers(self, node: SourceNode, table: dict) -> list[str]:
        result = []
        for modifier in self._names_attr(node, "modifiers"):
            if modifier not in table:
                self.warn(
                    node,
                    f"Unsupported modifier '{modifier}' on {node.kind} {node.name}",
                )
                continue
            mapped = table[modifier]
            if mapped and mapped not in result:
                result.append(mapped)
        return result

    # Attributes

    def _text_attr(self, node: SourceNode, key: str, default: str) -> str:
        if key not in node.attributes:
            return default
        value = node.attr(key)
        if isinstance(value, str) and value.strip():
            return value
        self._invalid(node, key, value)
        return default

    def _names_attr(self, node: SourceNode, key: str) -> list[str]:
        value = node.attr(key, [])
        if value == []:
            return []
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return list(value)
        self._invalid(node, key, value)
        return []

    def _invalid(self, node: SourceNode, key: str, value) -> None:
        self.warn(node, f"Invalid '{key}' on {node.kind} {node.name}: {value!r}")

    def _placeholder(self, node: SourceNode, message: str) -> TargetNode:
        self.warn(node, message)
        description = f"{node.kind} {node.name}".strip()
        return TargetNode(kind="placeholder", text=f"untranslated: {description}")

    # Types

    def _type_ref(self, type_name: str) -> TypeReference:
        base, arguments, rank = split_type_name(type_name)
        reference = self._resolve_type(base)
        if reference.namespace:
            self.target.add_using(reference.namespace)
        if arguments or rank:
            reference = reference.specialize(
                tuple(self._type_ref(a) for a in arguments), rank
            )
        return reference

    def _resolve_type(self, base: str) -> TypeReference:
        if base in PRIMITIVE_TYPES:
            return TypeReference(PRIMITIVE_TYPES[base])

        for candidate in self._candidates(base):
            if candidate in WELL_KNOWN_TYPES:
                return WELL_KNOWN_TYPES[candidate]
            resolved = self.symbols.resolve(candidate)
            if isinstance(resolved, TypeReference):
                return resolved

        logger.debug(f"{self.unit.path}: unresolved type {base}, using opaque name")
        return TypeReference(base.rsplit(".", 1)[-1], external=True)

    def _candidates(self, base: str) -> list[str]:
        if "." in base:
            return [base]
        candidates = []
        if base in self.imports:
            candidates.append(self.imports[base])
        candidates.append(type_identity(self.package, base))
        candidates.append(f"{IMPLICIT_PACKAGE}.{base}")
        candidates.extend(f"{package}.{base}" for package in self.wildcard_imports)
        return candidates
