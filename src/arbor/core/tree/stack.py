"""Aggregation boundaries: the unit of document output."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from arbor.contracts.errors import DuplicateIdError
from arbor.contracts.types import StackName
from arbor.core.tokens.token import Reference
from arbor.core.tree.node import Node, enclosing_boundary

if TYPE_CHECKING:
    from arbor.core.tokens.resolver import ResolveContext

# Pseudo parameters the deployment system fills in per stack
PSEUDO_REGION = "AWS::Region"
PSEUDO_ACCOUNT = "AWS::AccountId"


class Stack(Node):
    """A node whose subtree synthesizes into one document.

    Every node belongs to exactly one stack: the nearest one at or above it.
    Stack names (ids) must be unique across the whole tree because they name
    documents and prefix export names.
    """

    is_aggregation_boundary = True

    def __init__(
        self,
        scope: Node | None,
        node_id: str,
        *,
        region: str | None = None,
        account: str | None = None,
        description: str | None = None,
    ) -> None:
        if scope is not None:
            for existing in scope.root.walk():
                if existing.is_aggregation_boundary and existing.node_id == node_id:
                    raise DuplicateIdError(node_id, f"stacks of '{scope.root.path_str}'")
        super().__init__(scope, node_id)
        self._region = region
        self._account = account
        self.description = description
        self._pseudo: dict[str, Reference] = {}

    @staticmethod
    def of(node: Node) -> Stack:
        """Return the stack node belongs to.

        Raises:
            NotFoundError: If node is not inside a stack
        """
        return cast(Stack, enclosing_boundary(node))

    @property
    def name(self) -> StackName:
        return StackName(self.node_id)

    @property
    def region(self) -> str | Reference:
        """Configured region, or a token for the region deployed into."""
        return self._region if self._region is not None else self._pseudo_reference(PSEUDO_REGION)

    @property
    def account(self) -> str | Reference:
        """Configured account, or a token for the account deployed into."""
        return self._account if self._account is not None else self._pseudo_reference(PSEUDO_ACCOUNT)

    @property
    def environment(self) -> tuple[str | None, str | None]:
        """(account, region) as configured; None where left to deploy time."""
        return self._account, self._region

    def _pseudo_reference(self, name: str) -> Reference:
        if name not in self._pseudo:

            def expression(context: ResolveContext) -> object:
                return context.intrinsics.ref(name)

            self._pseudo[name] = Reference(self, expression, kind="Ref", attribute=name)
        return self._pseudo[name]
