"""Capability protocols implemented by node kinds.

Node kinds implement only the subsets they need instead of inheriting
from one deep chain:

- Addressable: has an id and a stable path
- Dependable: can be the target of an ordering constraint
- EmitsEntity: contributes a record to its stack's document
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from arbor.contracts.enums import Section
from arbor.contracts.types import NodePath

if TYPE_CHECKING:
    from arbor.core.tree.node import Node


@runtime_checkable
class Addressable(Protocol):
    """Protocol for anything with an id and a root-to-self path."""

    @property
    def node_id(self) -> str: ...

    @property
    def path(self) -> NodePath: ...


@runtime_checkable
class Dependable(Protocol):
    """Protocol for things other nodes can depend on.

    A node's elements are itself (standing for every entity in its
    subtree); a DependencyGroup's elements are whatever it was built from.
    """

    @property
    def dependency_elements(self) -> Sequence[Dependable]: ...


@runtime_checkable
class EmitsEntity(Protocol):
    """Protocol for nodes that contribute a record to their stack's document.

    entity_body() returns the record with tokens still unresolved; the
    assembler resolves it and adds the logical id and ordering annotations.
    """

    section: Section

    def entity_body(self) -> dict[str, Any]: ...


class DependencyGroup:
    """Treat a collection of dependables as one.

    Lets a construct hand out "everything that must exist first" without
    exposing the individual nodes.
    """

    def __init__(self, elements: Iterable[Dependable] = ()) -> None:
        self._elements: list[Dependable] = list(elements)

    def add(self, *elements: Dependable) -> None:
        self._elements.extend(elements)

    @property
    def dependency_elements(self) -> tuple[Dependable, ...]:
        return tuple(self._elements)

    def __len__(self) -> int:
        return len(self._elements)


def is_entity(obj: object) -> bool:
    return isinstance(obj, EmitsEntity)


def dependency_roots(target: Dependable) -> list[Node]:
    """Flatten a dependable into the entity-emitting nodes it stands for.

    Order follows declaration order; duplicates are dropped.
    """
    from arbor.core.tree.node import Node

    roots: list[Node] = []
    seen_roots: set[int] = set()
    visited: set[int] = set()
    pending: list[Dependable] = [target]

    while pending:
        current = pending.pop(0)
        if id(current) in visited:
            continue
        visited.add(id(current))

        if isinstance(current, Node):
            for node in current.walk():
                if is_entity(node) and id(node) not in seen_roots:
                    seen_roots.add(id(node))
                    roots.append(node)
        else:
            pending[0:0] = list(current.dependency_elements)

    return roots
