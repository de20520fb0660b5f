"""Selecting subsets of nodes by category or by name.

A consumer pattern built on the tree, not an engine primitive: a construct
that owns groups of nodes (e.g. public/private/isolated subnets) lets
callers pick a group by category or pick nodes by name across groups.
Error wording and the default category are policy, supplied through
SelectionSettings.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from arbor.contracts.enums import SelectionQuery
from arbor.contracts.errors import AmbiguousSelectionError, EmptySelectionError
from arbor.core.config import SelectionSettings
from arbor.core.tree.node import Node


@dataclass(frozen=True, slots=True)
class Placement:
    """Where to select from. At most one of category and name may be set."""

    category: str | None = None
    name: str | None = None


def _node_id(node: Node) -> str:
    return node.node_id


class NodeSelector:
    """Select nodes from named groups.

    Args:
        groups: Category -> nodes, in the order categories should be searched
        name_of: Name used for by-name selection (defaults to the node id)
        settings: Default category and error wording
    """

    def __init__(
        self,
        groups: Mapping[str, Sequence[Node]],
        *,
        name_of: Callable[[Node], str] = _node_id,
        settings: SelectionSettings | None = None,
    ) -> None:
        self._groups = {category: list(nodes) for category, nodes in groups.items()}
        self._name_of = name_of
        self._settings = settings or SelectionSettings()

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self._groups)

    def select(self, placement: Placement | None = None, query: SelectionQuery = SelectionQuery.REQUIRED) -> list[Node]:
        """Return the nodes matching placement.

        By name: every node with that name, across all groups; matching
        nothing is an error whatever the query mode. By category: that
        group's nodes; empty is an error only for REQUIRED queries.

        Raises:
            AmbiguousSelectionError: If both category and name are given
            EmptySelectionError: If a required selection matches nothing
        """
        placement = placement or Placement()
        settings = self._settings

        if placement.category is not None and placement.name is not None:
            raise AmbiguousSelectionError(settings.ambiguous_message.format(category=placement.category, name=placement.name))

        if placement.name is not None:
            selected = [node for nodes in self._groups.values() for node in nodes if self._name_of(node) == placement.name]
            if not selected:
                raise EmptySelectionError(settings.empty_name_message.format(name=placement.name))
            return selected

        category = placement.category if placement.category is not None else settings.default_category
        if category not in self._groups:
            raise EmptySelectionError(settings.unknown_category_message.format(category=category, known=", ".join(self._groups)))

        selected = list(self._groups[category])
        if query == SelectionQuery.REQUIRED and not selected:
            raise EmptySelectionError(settings.empty_category_message.format(category=category))
        return selected

    def contains(self, category: str, node: Node) -> bool:
        """Whether node is literally one of category's nodes (identity, not equality)."""
        return any(member is node for member in self._groups.get(category, ()))
