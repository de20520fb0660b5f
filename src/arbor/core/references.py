"""Cross-stack reference resolution.

A reference whose producer lives in another stack cannot be expressed
inside the consumer's document. The resolver instead:

1. registers the producer's value as an export of the producer's stack
   (once per referenced value; repeats return the same export),
2. records that the consumer stack depends on the producer stack, so the
   producer is deployed first even when nothing else orders them,
3. hands back an import expression naming the export.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from arbor.contracts.errors import NotFoundError, UnresolvableCrossBoundaryReferenceError
from arbor.contracts.types import ExportName, LogicalID, StackName
from arbor.core.canonical import stable_hash
from arbor.core.dag import DependencyGraph
from arbor.core.logging import get_logger
from arbor.core.tokens.intrinsics import Intrinsics
from arbor.core.tokens.token import Reference
from arbor.core.tree.node import Node
from arbor.core.tree.stack import Stack

logger = get_logger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")
_ATTRIBUTE_HASH_LENGTH = 8

# Prefix for the Outputs entries that carry exports
EXPORT_OUTPUT_PREFIX = "ExportsOutput"


@dataclass(frozen=True, slots=True)
class Export:
    """A value published by a stack for other stacks to import.

    Attributes:
        name: Stack-qualified export name, unique across the application
        output_id: Key of the Outputs entry carrying the export
        stack: Producer stack name
        value: The value as expressed inside the producer's document
    """

    name: ExportName
    output_id: str
    stack: StackName
    value: Any


@dataclass(frozen=True, slots=True)
class CrossStackReference:
    """One consumer stack's use of another stack's export."""

    producer_stack: StackName
    consumer_stack: StackName
    export: Export


def export_output_id(reference: Reference, producer_logical_id: LogicalID) -> str:
    """Outputs key for the export of reference, e.g. 'ExportsOutputFnGetAttBucket83908E77Arn'.

    Attributes are reduced to alphanumerics; when that changes the attribute
    a hash of the reference key is appended, so 'Endpoint.Address' and
    'EndpointAddress' still get distinct output ids.
    """
    attribute = _NON_ALPHANUMERIC.sub("", reference.attribute)
    if attribute != reference.attribute:
        attribute += stable_hash(list(reference.reference_key))[:_ATTRIBUTE_HASH_LENGTH].upper()
    return f"{EXPORT_OUTPUT_PREFIX}{reference.kind}{producer_logical_id}{attribute}"


class ReferenceResolver:
    """Rewrites cross-stack references into export/import pairs.

    Args:
        stack_graph: Stack-level dependency graph; receives consumer -> producer edges
        logical_id: Allocates the producer's logical id (used in export names)
        intrinsics: Builds the import expression
    """

    def __init__(
        self,
        stack_graph: DependencyGraph,
        *,
        logical_id: Callable[[Node], LogicalID],
        intrinsics: Intrinsics,
    ) -> None:
        self._stack_graph = stack_graph
        self._logical_id = logical_id
        self._intrinsics = intrinsics
        self._exports: dict[tuple[str, ...], Export] = {}
        self._references: dict[tuple[StackName, ExportName], CrossStackReference] = {}

    def resolve(
        self,
        reference: Reference,
        consumer_stack: Stack,
        *,
        producer_value: Callable[[Stack], Any],
    ) -> Any:
        """Return the import expression for reference as seen from consumer_stack.

        Args:
            reference: The reference token being resolved
            consumer_stack: Stack whose document embeds the reference
            producer_value: Resolves reference inside the producer's stack

        Raises:
            UnresolvableCrossBoundaryReferenceError: If no export/import path exists
        """
        assert reference.producer is not None
        producer = reference.producer
        producer_stack = self._producer_stack(producer, consumer_stack)
        self._check_reachable(producer, producer_stack, consumer_stack)

        export = self._exports.get(reference.reference_key)
        if export is None:
            output_id = export_output_id(reference, self._logical_id(producer))
            export = Export(
                name=ExportName(f"{producer_stack.name}:{output_id}"),
                output_id=output_id,
                stack=producer_stack.name,
                value=producer_value(producer_stack),
            )
            self._exports[reference.reference_key] = export
            logger.debug("Registered export", export=export.name, producer=producer.path_str)

        self._stack_graph.add_dependency(consumer_stack.name, producer_stack.name)
        self._references.setdefault(
            (consumer_stack.name, export.name),
            CrossStackReference(producer_stack=producer_stack.name, consumer_stack=consumer_stack.name, export=export),
        )
        return self._intrinsics.import_value(export.name)

    def exports_of(self, stack: StackName) -> list[Export]:
        """Exports registered on stack, ordered by output id."""
        return sorted((e for e in self._exports.values() if e.stack == stack), key=lambda e: e.output_id)

    @property
    def references(self) -> list[CrossStackReference]:
        """Every cross-stack reference seen, in discovery order."""
        return list(self._references.values())

    @staticmethod
    def _producer_stack(producer: Node, consumer_stack: Stack) -> Stack:
        try:
            return Stack.of(producer)
        except NotFoundError as e:
            raise UnresolvableCrossBoundaryReferenceError(producer.path_str, consumer_stack.path_str, "producer is not inside a stack") from e

    @staticmethod
    def _check_reachable(producer: Node, producer_stack: Stack, consumer_stack: Stack) -> None:
        producer_root = producer_stack.root
        if producer_root is not consumer_stack.root or not producer_root.is_deployable_root:
            raise UnresolvableCrossBoundaryReferenceError(
                producer.path_str,
                consumer_stack.path_str,
                "stacks do not share a deployable root",
            )

        for dimension, produced, consumed in zip(
            ("account", "region"),
            producer_stack.environment,
            consumer_stack.environment,
            strict=True,
        ):
            if produced is not None and consumed is not None and produced != consumed:
                raise UnresolvableCrossBoundaryReferenceError(
                    producer.path_str,
                    consumer_stack.path_str,
                    f"stacks are in different {dimension}s ({produced!r} vs {consumed!r})",
                )
