"""Stack outputs, optionally exported under an explicit name."""

from __future__ import annotations

from typing import Any

from arbor.contracts.enums import Section
from arbor.contracts.types import ExportName
from arbor.core.tokens.token import Token
from arbor.core.tree.node import Node


class Output(Node):
    """A value reported by the stack after deployment."""

    section = Section.OUTPUTS

    def __init__(
        self,
        scope: Node,
        node_id: str,
        *,
        value: Any,
        description: str | None = None,
        export_name: str | None = None,
    ) -> None:
        super().__init__(scope, node_id)
        self.value = value
        self.description = description
        self.export_name = export_name

    def import_value(self) -> Token:
        """Token importing this output's export from another stack.

        The importing stack is ordered after this output's stack.

        Raises:
            ValueError: If the output has no export name
        """
        if self.export_name is None:
            raise ValueError(f"Output '{self.path_str}' is not exported; give it an export_name")
        name = ExportName(self.export_name)
        return Token(lambda context: context.intrinsics.import_value(name), producer=self, label=f"import({name})")

    def entity_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"Value": self.value}
        if self.description is not None:
            body["Description"] = self.description
        if self.export_name is not None:
            body["Export"] = {"Name": self.export_name}
        return body
