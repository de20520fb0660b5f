"""Token resolution: depth-first, cached, cycle-checked.

Resolution of a token happens at most once per (token, consumer) within
a stack: the same token embedded several times in one record computes
once, while another consumer gets its own computation because deferred
functions may read `ctx.consumer`. Producers reached while resolving a
token are remembered with the cached value, so every cache hit still
records its implicit dependency edges.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, cast

from arbor.contracts.errors import CyclicTokenError, NotFoundError
from arbor.contracts.types import LogicalID, NodePath
from arbor.core.tokens.intrinsics import Intrinsics
from arbor.core.tokens.token import Reference, Token
from arbor.core.tree.node import Node, enclosing_boundary

if TYPE_CHECKING:
    from arbor.core.tree.stack import Stack


class ReferenceHost(Protocol):
    """Synthesis-side services a resolver needs.

    Implemented by the synthesizer; kept as a protocol so tokens never
    import the engine.
    """

    def logical_id(self, node: Node) -> LogicalID:
        """Allocate (or recall) the logical id of node."""
        ...

    def note_reference(self, consumer: Node, producer: Node) -> None:
        """Record that consumer's output refers to producer."""
        ...

    def import_reference(self, reference: Reference, context: ResolveContext) -> Any:
        """Rewrite a reference whose producer lives in another stack."""
        ...


@dataclass(frozen=True)
class ResolveContext:
    """Where a value is being resolved: which node consumes it, in which stack."""

    consumer: Node
    stack: Stack
    resolver: TokenResolver
    intrinsics: Intrinsics

    def resolve(self, value: Any) -> Any:
        """Resolve a value (token, container or literal) in this context."""
        return self.resolver.resolve_value(value, self)

    def logical_id(self, node: Node) -> LogicalID:
        return self.resolver.host.logical_id(node)


# (token, consumer stack path, consumer path)
_CacheKey = tuple[Token, NodePath, NodePath]


@dataclass
class _CacheEntry:
    value: Any
    producers: tuple[Node, ...]


@dataclass
class _Frame:
    token: Token
    key: _CacheKey
    producers: list[Node] = field(default_factory=list)


class TokenResolver:
    """Resolves tokens for one synthesis run.

    The cache is write-once per key, and keys are partitioned by consumer
    stack and then by consumer, so independent stacks never observe each
    other's entries.
    """

    def __init__(self, host: ReferenceHost, *, intrinsics: Intrinsics | None = None) -> None:
        self.host = host
        self.intrinsics = intrinsics or Intrinsics()
        self._cache: dict[_CacheKey, _CacheEntry] = {}
        self._frames: list[_Frame] = []

    def context_for(self, consumer: Node, stack: Stack | None = None) -> ResolveContext:
        if stack is None:
            stack = cast("Stack", enclosing_boundary(consumer))
        return ResolveContext(consumer=consumer, stack=stack, resolver=self, intrinsics=self.intrinsics)

    def resolve(self, value: Any, *, consumer: Node, stack: Stack | None = None) -> Any:
        """Resolve value as seen by consumer, recursing through containers."""
        return self.resolve_value(value, self.context_for(consumer, stack))

    def resolve_value(self, value: Any, context: ResolveContext) -> Any:
        if isinstance(value, Token):
            return self._resolve_token(value, context)
        if isinstance(value, dict):
            return {key: self.resolve_value(item, context) for key, item in value.items()}
        if isinstance(value, list | tuple):
            return [self.resolve_value(item, context) for item in value]
        return value

    def _note(self, context: ResolveContext, producer: Node) -> None:
        self.host.note_reference(context.consumer, producer)
        if self._frames:
            self._frames[-1].producers.append(producer)

    def _resolve_token(self, token: Token, context: ResolveContext) -> Any:
        key: _CacheKey = (token, context.stack.path, context.consumer.path)

        cached = self._cache.get(key)
        if cached is not None:
            for producer in cached.producers:
                self._note(context, producer)
            return cached.value

        for index, frame in enumerate(self._frames):
            if frame.key == key:
                chain = [f.token.label for f in self._frames[index:]] + [token.label]
                raise CyclicTokenError(chain)

        if token.producer is not None:
            self._note(context, token.producer)

        frame = _Frame(token=token, key=key)
        if token.producer is not None:
            frame.producers.append(token.producer)
        self._frames.append(frame)
        try:
            if isinstance(token, Reference) and self._is_foreign(token, context):
                raw = self.host.import_reference(token, context)
            else:
                raw = token.compute(context)
            value = self.resolve_value(raw, context)
        finally:
            self._frames.pop()

        if self._frames:
            self._frames[-1].producers.extend(frame.producers)
        self._cache[key] = _CacheEntry(value=value, producers=tuple(dict.fromkeys(frame.producers)))
        return value

    @staticmethod
    def _is_foreign(reference: Reference, context: ResolveContext) -> bool:
        assert reference.producer is not None
        try:
            producer_stack = enclosing_boundary(reference.producer)
        except NotFoundError:
            # Stack-less producers can only be reached through import_reference,
            # which reports them as unresolvable.
            return True
        return producer_stack is not context.stack
