"""Intrinsic expressions of the target document format.

Everything format-specific about deferred values goes through this class:
references, joins, selects, splits and imports. The engine itself only
asks for these primitives, so targeting a different document dialect means
supplying a different Intrinsics implementation.
"""

from __future__ import annotations

from typing import Any

from arbor.contracts.types import ExportName, LogicalID


class Intrinsics:
    """CloudFormation-style intrinsic functions."""

    REF = "Ref"
    GET_ATT = "Fn::GetAtt"
    JOIN = "Fn::Join"
    SELECT = "Fn::Select"
    SPLIT = "Fn::Split"
    IMPORT_VALUE = "Fn::ImportValue"

    _NAMES = frozenset({REF, GET_ATT, JOIN, SELECT, SPLIT, IMPORT_VALUE})

    def ref(self, target: LogicalID | str) -> dict[str, Any]:
        return {self.REF: target}

    def get_att(self, logical_id: LogicalID, attribute: str) -> dict[str, Any]:
        return {self.GET_ATT: [logical_id, attribute]}

    def join(self, delimiter: str, parts: list[Any]) -> dict[str, Any]:
        return {self.JOIN: [delimiter, parts]}

    def select(self, index: int, values: Any) -> dict[str, Any]:
        return {self.SELECT: [index, values]}

    def split(self, delimiter: str, source: Any) -> dict[str, Any]:
        return {self.SPLIT: [delimiter, source]}

    def import_value(self, export_name: ExportName) -> dict[str, Any]:
        return {self.IMPORT_VALUE: export_name}

    def is_intrinsic(self, value: Any) -> bool:
        """Whether value is a single-key mapping naming a known intrinsic."""
        return isinstance(value, dict) and len(value) == 1 and next(iter(value)) in self._NAMES

    def unpack_join(self, value: Any) -> tuple[str, list[Any]] | None:
        """Return (delimiter, parts) if value is a join over a literal list.

        A join over a deferred list (e.g. a Ref to a list parameter) has no
        parts to splice, so it is reported as None like any other intrinsic.
        """
        if not self.is_intrinsic(value) or self.JOIN not in value:
            return None
        delimiter, parts = value[self.JOIN]
        if not isinstance(parts, list):
            return None
        return delimiter, list(parts)

    def referenced_ids(self, value: Any) -> set[str]:
        """Logical ids named by Ref or GetAtt anywhere inside value."""
        found: set[str] = set()
        pending = [value]
        while pending:
            current = pending.pop()
            if isinstance(current, dict):
                if self.is_intrinsic(current):
                    if self.REF in current and isinstance(current[self.REF], str):
                        found.add(current[self.REF])
                    elif self.GET_ATT in current and isinstance(current[self.GET_ATT], list):
                        found.add(current[self.GET_ATT][0])
                pending.extend(current.values())
            elif isinstance(current, list):
                pending.extend(current)
        return found
