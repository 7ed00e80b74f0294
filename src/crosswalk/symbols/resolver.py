"""Run-scoped symbol table.

Maps stable source identities (``com.acme.Foo``, ``com.acme.Foo#bar``) to
target references so that a type declared in one unit resolves to the same
reference in every unit translated later in the run.

Rules:
- first bind wins; binding an identity twice is a sequencing bug and raises
  SymbolConflictError
- resolve never blocks; unknown identities return None and callers fall back
  to an opaque reference
- bindings made while translating a unit are staged in a UnitScope and only
  become visible to other units on commit
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol, Union

from crosswalk.model import MemberReference, TypeReference

logger = logging.getLogger(__name__)

Reference = Union[TypeReference, MemberReference]


class SymbolConflictError(Exception):
    """Raised when an identity is bound a second time."""

    def __init__(self, identity: str, existing: Reference, attempted: Reference):
        self.identity = identity
        self.existing = existing
        self.attempted = attempted
        super().__init__(
            f"Symbol '{identity}' already bound to {existing.qualified_name}; "
            f"refusing to rebind to {attempted.qualified_name}"
        )


class SymbolTable(Protocol):
    """What the translator needs from a resolver."""

    def resolve(self, identity: str) -> Reference | None:
        ...

    def bind(self, identity: str, reference: Reference) -> None:
        ...


class SymbolResolver:
    """Shared identity → reference table for one run."""

    def __init__(self) -> None:
        self._bindings: dict[str, Reference] = {}
        self._lock = threading.Lock()

    def resolve(self, identity: str) -> Reference | None:
        """Return the reference bound to an identity, or None."""
        with self._lock:
            return self._bindings.get(identity)

    def bind(self, identity: str, reference: Reference) -> None:
        """Bind an identity.

        Raises:
            SymbolConflictError: If the identity is already bound
        """
        with self._lock:
            self._check_unbound(identity, reference)
            self._bindings[identity] = reference
        logger.debug(f"Bound {identity} -> {reference.qualified_name}")

    def unit_scope(self) -> "UnitScope":
        """Staging view for one unit's translation."""
        return UnitScope(self)

    def identities(self) -> list[str]:
        with self._lock:
            return sorted(self._bindings)

    def __contains__(self, identity: str) -> bool:
        with self._lock:
            return identity in self._bindings

    def __len__(self) -> int:
        with self._lock:
            return len(self._bindings)

    def _check_unbound(self, identity: str, reference: Reference) -> None:
        existing = self._bindings.get(identity)
        if existing is not None:
            raise SymbolConflictError(identity, existing, reference)

    def _commit(self, staged: dict[str, Reference]) -> None:
        with self._lock:
            for identity, reference in staged.items():
                self._check_unbound(identity, reference)
            self._bindings.update(staged)


class UnitScope:
    """Bindings staged during one unit's translation.

    Reads see committed bindings plus this unit's own staged ones. On commit
    the staged bindings are published to the shared resolver; on discard
    they are dropped and the shared table is left untouched.
    """

    def __init__(self, resolver: SymbolResolver):
        self._resolver = resolver
        self._staged: dict[str, Reference] = {}
        self._closed = False

    def resolve(self, identity: str) -> Reference | None:
        staged = self._staged.get(identity)
        if staged is not None:
            return staged
        return self._resolver.resolve(identity)

    def bind(self, identity: str, reference: Reference) -> None:
        if self._closed:
            raise RuntimeError("Unit scope already closed")
        existing = self.resolve(identity)
        if existing is not None:
            raise SymbolConflictError(identity, existing, reference)
        self._staged[identity] = reference

    @property
    def staged(self) -> dict[str, Reference]:
        return dict(self._staged)

    def commit(self) -> None:
        """Publish staged bindings to the shared resolver."""
        if self._closed:
            return
        self._closed = True
        self._resolver._commit(self._staged)
        logger.debug(f"Committed {len(self._staged)} binding(s)")

    def discard(self) -> None:
        """Drop staged bindings."""
        if self._closed:
            return
        self._closed = True
        if self._staged:
            logger.debug(f"Discarded {len(self._staged)} staged binding(s)")
        self._staged.clear()

    def __enter__(self) -> "UnitScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.discard()
