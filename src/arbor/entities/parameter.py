"""Template parameters supplied at deploy time."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from arbor.contracts.enums import Section, TokenShape
from arbor.core.tokens.token import Reference
from arbor.core.tree.node import Node

if TYPE_CHECKING:
    from arbor.core.tokens.resolver import ResolveContext


class Parameter(Node):
    """A value the deployer supplies; referenced through ``value``."""

    section = Section.PARAMETERS

    def __init__(
        self,
        scope: Node,
        node_id: str,
        *,
        type: str = "String",
        default: Any = None,
        description: str | None = None,
        allowed_values: Sequence[str] | None = None,
        no_echo: bool = False,
    ) -> None:
        super().__init__(scope, node_id)
        self.parameter_type = type
        self.default = default
        self.description = description
        self.allowed_values = list(allowed_values) if allowed_values is not None else None
        self.no_echo = no_echo
        self._value: Reference | None = None

    @property
    def value(self) -> Reference:
        if self._value is None:

            def expression(context: ResolveContext) -> Any:
                return context.intrinsics.ref(context.logical_id(self))

            is_list = self.parameter_type.startswith("List<") or self.parameter_type == "CommaDelimitedList"
            shape = TokenShape.LIST if is_list else TokenShape.STRING
            self._value = Reference(self, expression, kind="Ref", shape=shape)
        return self._value

    def entity_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"Type": self.parameter_type}
        if self.default is not None:
            body["Default"] = self.default
        if self.description is not None:
            body["Description"] = self.description
        if self.allowed_values is not None:
            body["AllowedValues"] = list(self.allowed_values)
        if self.no_echo:
            body["NoEcho"] = True
        return body
