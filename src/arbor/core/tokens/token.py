"""Deferred values.

A Token stands for a value that is not known while the model is being
built: a resource attribute, a pseudo parameter, or a computation over
other tokens. Tokens are plain data (producer + resolver + shape) so that
resolution can be cached, replayed and cycle-checked by the resolver.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

from arbor.contracts.enums import TokenShape

if TYPE_CHECKING:
    from arbor.core.tokens.resolver import ResolveContext
    from arbor.core.tree.node import Node

TokenResolverFn: TypeAlias = "Callable[[ResolveContext], Any]"

# Only used for human-readable labels; never part of any output
_sequence = itertools.count(1)


class Token:
    """A placeholder for a value resolved once, at synthesis.

    Tokens compare and hash by identity. String-shaped tokens support ``+``
    with strings and other string tokens, producing a lazy join rather than
    an eagerly concatenated string. List-shaped tokens support indexing,
    producing a lazy select.
    """

    def __init__(
        self,
        resolver: TokenResolverFn,
        *,
        shape: TokenShape = TokenShape.STRING,
        producer: Node | None = None,
        label: str | None = None,
    ) -> None:
        self._resolver = resolver
        self.shape = shape
        self.producer = producer
        self.label = label or f"Token{next(_sequence)}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.label}, shape={self.shape.value})"

    def compute(self, context: ResolveContext) -> Any:
        """Run the underlying computation. Callers go through resolve()."""
        return self._resolver(context)

    def resolve(self, context: ResolveContext) -> Any:
        """Resolve through the context's resolver (cached, cycle-checked)."""
        return context.resolve(self)

    # ===== String composition =====

    def __add__(self, other: object) -> Token:
        if not _is_string_like(other) or self.shape != TokenShape.STRING:
            return NotImplemented
        from arbor.core.tokens.fn import join

        return join("", [self, other])

    def __radd__(self, other: object) -> Token:
        if not isinstance(other, str) or self.shape != TokenShape.STRING:
            return NotImplemented
        from arbor.core.tokens.fn import join

        return join("", [other, self])

    def split(self, delimiter: str) -> Token:
        if self.shape != TokenShape.STRING:
            raise TypeError(f"Only string tokens can be split, {self!r} is {self.shape.value}")
        from arbor.core.tokens.fn import split

        return split(delimiter, self)

    # ===== List selection =====

    def __getitem__(self, index: int) -> Token:
        if self.shape != TokenShape.LIST:
            raise TypeError(f"Only list tokens can be indexed, {self!r} is {self.shape.value}")
        from arbor.core.tokens.fn import select

        return select(index, self)

    # Defining __getitem__ would otherwise make every token iterable
    def __iter__(self) -> Any:
        raise TypeError(f"{self!r} cannot be iterated before synthesis; use indexing")


def _is_string_like(value: object) -> bool:
    return isinstance(value, str) or (isinstance(value, Token) and value.shape == TokenShape.STRING)


class Reference(Token):
    """A token standing for an attribute of another node.

    Within the producer's stack it resolves to ``expression``; from any other
    stack the resolver rewrites it into an import of an export registered on
    the producer's stack.

    Attributes:
        kind: "Ref" or "FnGetAtt"; part of the export name
        attribute: Attribute name ("" for a plain Ref)
    """

    def __init__(
        self,
        producer: Node,
        expression: TokenResolverFn,
        *,
        kind: str,
        attribute: str = "",
        shape: TokenShape = TokenShape.STRING,
    ) -> None:
        label = f"{producer.path_str}.{attribute or kind}"
        super().__init__(expression, shape=shape, producer=producer, label=label)
        self.kind = kind
        self.attribute = attribute

    @property
    def reference_key(self) -> tuple[str, ...]:
        """Identifies the referenced value; equal keys share one export."""
        assert self.producer is not None
        return (*self.producer.path, self.kind, self.attribute)


class Lazy:
    """Factories for producer-less deferred computations.

    The function receives the ResolveContext and may return values that
    contain further tokens; those are resolved depth-first.
    """

    @staticmethod
    def string(fn: TokenResolverFn, *, label: str | None = None) -> Token:
        return Token(fn, shape=TokenShape.STRING, label=label)

    @staticmethod
    def list(fn: TokenResolverFn, *, label: str | None = None) -> Token:
        return Token(fn, shape=TokenShape.LIST, label=label)

    @staticmethod
    def mapping(fn: TokenResolverFn, *, label: str | None = None) -> Token:
        return Token(fn, shape=TokenShape.MAPPING, label=label)
