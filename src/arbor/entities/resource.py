"""Resources: the typed records that make up a stack's Resources section."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from arbor.contracts.enums import Section, TokenShape
from arbor.contracts.errors import ConstructionLockedError
from arbor.core.tokens.token import Reference
from arbor.core.tree.node import Node

if TYPE_CHECKING:
    from arbor.core.tokens.resolver import ResolveContext


class Resource(Node):
    """A node emitting one resource record.

    Properties may contain tokens anywhere (nested in lists and mappings);
    they are resolved at synthesis. Attribute tokens are memoized so every
    caller asking for the same attribute shares one token.

    Example:
        bucket = Resource(stack, "Bucket", resource_type="AWS::S3::Bucket")
        Resource(stack, "Policy", resource_type="AWS::IAM::Policy",
                 properties={"Resource": bucket.get_att("Arn") + "/*"})
    """

    section = Section.RESOURCES

    def __init__(
        self,
        scope: Node,
        node_id: str,
        *,
        resource_type: str,
        properties: Mapping[str, Any] | None = None,
    ) -> None:
        if not resource_type:
            raise ValueError(f"Resource '{node_id}' needs a resource_type")
        super().__init__(scope, node_id)
        self.resource_type = resource_type
        self._properties: dict[str, Any] = dict(properties or {})
        self._ref: Reference | None = None
        self._attributes: dict[str, Reference] = {}

    @property
    def properties(self) -> dict[str, Any]:
        return dict(self._properties)

    def set_property(self, name: str, value: Any) -> None:
        if self.locked:
            raise ConstructionLockedError(f"Cannot set '{name}' on '{self.path_str}': tree is frozen for synthesis")
        self._properties[name] = value

    @property
    def ref(self) -> Reference:
        """Token for the resource's primary identifier."""
        if self._ref is None:

            def expression(context: ResolveContext) -> Any:
                return context.intrinsics.ref(context.logical_id(self))

            self._ref = Reference(self, expression, kind="Ref")
        return self._ref

    def get_att(self, attribute: str, *, shape: TokenShape = TokenShape.STRING) -> Reference:
        """Token for one of the resource's runtime attributes."""
        if attribute not in self._attributes:

            def expression(context: ResolveContext) -> Any:
                return context.intrinsics.get_att(context.logical_id(self), attribute)

            self._attributes[attribute] = Reference(self, expression, kind="FnGetAtt", attribute=attribute, shape=shape)
        return self._attributes[attribute]

    def entity_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"Type": self.resource_type}
        if self._properties:
            body["Properties"] = dict(self._properties)
        return body
