"""Lazy string and list operations over tokens.

Values that are unknown until deploy time cannot be concatenated, split or
indexed eagerly. These helpers build tokens that lower to the document's
join/split/select intrinsics, and collapse back to plain literals when
every input turns out to be known at synthesis.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from arbor.contracts.enums import TokenShape
from arbor.contracts.types import ExportName
from arbor.core.tokens.token import Token

if TYPE_CHECKING:
    from arbor.core.tokens.resolver import ResolveContext


class JoinToken(Token):
    """String token concatenating parts with a delimiter."""

    def __init__(self, delimiter: str, parts: Sequence[Any]) -> None:
        flattened: list[Any] = []
        for part in parts:
            if isinstance(part, JoinToken) and part.delimiter == delimiter:
                flattened.extend(part.parts)
            else:
                flattened.append(part)
        self.delimiter = delimiter
        self.parts = tuple(flattened)
        super().__init__(self._lower, shape=TokenShape.STRING, label=f"join({delimiter!r}, {len(self.parts)} parts)")

    def _lower(self, context: ResolveContext) -> Any:
        intrinsics = context.intrinsics
        merged: list[Any] = []

        for part in self.parts:
            value = context.resolve(part)
            nested = intrinsics.unpack_join(value)
            pieces = nested[1] if nested is not None and nested[0] == self.delimiter else [value]

            for piece in pieces:
                if isinstance(piece, int | float) and not isinstance(piece, bool):
                    piece = str(piece)
                if isinstance(piece, str):
                    if piece == "" and self.delimiter == "":
                        continue
                    if merged and isinstance(merged[-1], str):
                        merged[-1] = merged[-1] + self.delimiter + piece
                    else:
                        merged.append(piece)
                elif intrinsics.is_intrinsic(piece):
                    merged.append(piece)
                else:
                    raise TypeError(f"Cannot join value of type {type(piece).__name__}: {piece!r}")

        if not merged:
            return ""
        if len(merged) == 1:
            return merged[0]
        return intrinsics.join(self.delimiter, merged)


def join(delimiter: str, parts: Sequence[Any]) -> Token:
    """Concatenate parts (literals or string tokens) with delimiter, lazily."""
    return JoinToken(delimiter, parts)


def split(delimiter: str, source: Any) -> Token:
    """Split a string (or string token) into a list token."""

    def _lower(context: ResolveContext) -> Any:
        value = context.resolve(source)
        if isinstance(value, str):
            return value.split(delimiter)
        return context.intrinsics.split(delimiter, value)

    return Token(_lower, shape=TokenShape.LIST, label=f"split({delimiter!r})")


def select(index: int, values: Any) -> Token:
    """Pick element index from a list (or list token), lazily.

    Raises:
        ValueError: If index is negative (the document format has no negative indexing)
    """
    if index < 0:
        raise ValueError(f"select index must be >= 0, got {index}")

    def _lower(context: ResolveContext) -> Any:
        value = context.resolve(values)
        if isinstance(value, list):
            if index >= len(value):
                raise IndexError(f"select index {index} out of range for list of length {len(value)}")
            return value[index]
        return context.intrinsics.select(index, value)

    return Token(_lower, shape=TokenShape.STRING, label=f"select({index})")


def import_value(export_name: str) -> Token:
    """Import a value exported by a stack outside this application."""
    return Token(
        lambda context: context.intrinsics.import_value(ExportName(export_name)),
        shape=TokenShape.STRING,
        label=f"import({export_name})",
    )
