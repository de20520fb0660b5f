"""Tree node: the minimal addressable unit of a construct tree.

Every node has exactly one scope (its parent) except the root, an id that
is unique among its siblings, and a path of ids from the root. Children are
kept in insertion order; that order is only used for diagnostics and for
breaking ties between otherwise independent nodes.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, ClassVar

from arbor.contracts.errors import ConstructionLockedError, DuplicateIdError, NotFoundError
from arbor.contracts.types import NodePath

if TYPE_CHECKING:
    from arbor.core.tree.capabilities import Dependable

PATH_SEPARATOR = "/"


class Node:
    """An addressable unit in the construction tree.

    Subclasses opt into capabilities (aggregation boundary, entity emission)
    rather than inheriting them; see arbor.core.tree.capabilities.
    """

    is_aggregation_boundary: ClassVar[bool] = False
    is_deployable_root: ClassVar[bool] = False

    def __init__(self, scope: Node | None, node_id: str) -> None:
        if not isinstance(node_id, str) or not node_id:
            raise ValueError(f"Node id must be a non-empty string, got {node_id!r}")
        if PATH_SEPARATOR in node_id:
            raise ValueError(f"Node id {node_id!r} must not contain '{PATH_SEPARATOR}'")

        self._node_id = node_id
        self._scope = scope
        self._children: dict[str, Node] = {}
        self._path: NodePath | None = None
        self._dependencies: list[Dependable] = []
        self._locked = False

        if scope is not None:
            scope._add_child(node_id, self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path_str!r})"

    @property
    def node_id(self) -> str:
        return self._node_id

    @property
    def scope(self) -> Node | None:
        return self._scope

    @property
    def children(self) -> tuple[Node, ...]:
        """Direct children in insertion order."""
        return tuple(self._children.values())

    @property
    def path(self) -> NodePath:
        """Ids from the root to this node. Computed once."""
        if self._path is None:
            parent_path = self._scope.path if self._scope is not None else ()
            self._path = (*parent_path, self._node_id)
        return self._path

    @property
    def path_str(self) -> str:
        return PATH_SEPARATOR.join(self.path)

    @property
    def root(self) -> Node:
        node = self
        while node._scope is not None:
            node = node._scope
        return node

    @property
    def locked(self) -> bool:
        """Whether the tree this node belongs to is frozen for synthesis."""
        return self.root._locked

    def lock(self) -> None:
        """Freeze the whole tree. Further children or property changes raise."""
        self.root._locked = True

    def _add_child(self, node_id: str, child: Node) -> None:
        if self.locked:
            raise ConstructionLockedError(f"Cannot add '{node_id}' to '{self.path_str}': tree is frozen for synthesis")
        if node_id in self._children:
            raise DuplicateIdError(node_id, self.path_str)
        self._children[node_id] = child

    def find_child(self, node_id: str) -> Node:
        try:
            return self._children[node_id]
        except KeyError:
            raise NotFoundError(f"child '{node_id}'", self.path_str) from None

    def ancestors(self, *, include_self: bool = True) -> Iterator[Node]:
        """Yield nodes from this one (or its scope) up to the root, nearest first."""
        node = self if include_self else self._scope
        while node is not None:
            yield node
            node = node._scope

    def find_ancestor(
        self,
        predicate: Callable[[Node], bool],
        *,
        what: str = "matching ancestor",
        include_self: bool = True,
    ) -> Node:
        """Return the nearest ancestor satisfying predicate.

        Raises:
            NotFoundError: If no ancestor matches
        """
        for node in self.ancestors(include_self=include_self):
            if predicate(node):
                return node
        raise NotFoundError(what, self.path_str)

    def walk(self) -> Iterator[Node]:
        """Yield this node and all descendants, depth-first in declaration order."""
        yield self
        for child in self._children.values():
            yield from child.walk()

    # ===== Dependable capability =====

    @property
    def dependency_elements(self) -> tuple[Node, ...]:
        return (self,)

    def add_dependency(self, *targets: Dependable) -> None:
        """Order every entity in this subtree after every entity in targets."""
        if self.locked:
            raise ConstructionLockedError(f"Cannot add dependencies to '{self.path_str}': tree is frozen for synthesis")
        for target in targets:
            if target not in self._dependencies:
                self._dependencies.append(target)

    @property
    def dependencies(self) -> tuple[Dependable, ...]:
        """Explicit dependencies declared on this node."""
        return tuple(self._dependencies)


def enclosing_boundary(node: Node) -> Node:
    """Return the nearest aggregation boundary at or above node.

    Raises:
        NotFoundError: If node is not inside a stack
    """
    return node.find_ancestor(lambda n: n.is_aggregation_boundary, what="stack")
