"""Target-side data model.

The translator builds these nodes; the printer turns them into text.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class TypeReference:
    """Reference to a target-language type."""

    name: str
    namespace: str = ""
    external: bool = False
    """True when the type could not be resolved and is used as an opaque name."""

    arguments: tuple["TypeReference", ...] = ()
    """Generic type arguments."""

    array_rank: int = 0

    @property
    def qualified_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    def specialize(
        self, arguments: tuple["TypeReference", ...] = (), array_rank: int = 0
    ) -> "TypeReference":
        """Same type with generic arguments and array rank applied."""
        return replace(self, arguments=arguments, array_rank=array_rank)

    def display_name(self) -> str:
        """Name as written in target source (no namespace)."""
        text = self.name
        if self.arguments:
            text += "<" + ", ".join(a.display_name() for a in self.arguments) + ">"
        return text + "[]" * self.array_rank


@dataclass(frozen=True)
class MemberReference:
    """Reference to a target-language member (method, field)."""

    owner: TypeReference
    name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.owner.qualified_name}.{self.name}"


@dataclass(frozen=True)
class Parameter:
    name: str
    type: TypeReference


@dataclass
class TargetNode:
    """A node of the translated tree.

    Kinds used by the printer: class, interface, enum, field, method,
    constructor, constant, statement, placeholder.
    """

    kind: str
    name: str = ""
    modifiers: list[str] = field(default_factory=list)
    type: TypeReference | None = None
    """Field type or method return type."""

    bases: list[TypeReference] = field(default_factory=list)
    parameters: list[Parameter] = field(default_factory=list)
    members: list["TargetNode"] = field(default_factory=list)
    body: list["TargetNode"] | None = None
    """Statements; None for members without a body."""

    text: str = ""
    """Statement text, field initializer or placeholder description."""


@dataclass
class TargetUnit:
    """Translated compilation unit."""

    path: str
    namespace: str = ""
    usings: list[str] = field(default_factory=list)
    members: list[TargetNode] = field(default_factory=list)
    suppressed: bool = False
    """Valid translation that must not be emitted."""

    def add_using(self, namespace: str) -> None:
        """Add a using directive once, skipping the unit's own namespace."""
        if not namespace or namespace == self.namespace:
            return
        if namespace not in self.usings:
            self.usings.append(namespace)

    @property
    def is_empty(self) -> bool:
        return not self.members
