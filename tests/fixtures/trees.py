# tests/fixtures/trees.py
"""Construct trees and host doubles reused across test modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from arbor.contracts.types import LogicalID
from arbor.core.identity import LogicalIdAllocator
from arbor.core.tokens import ResolveContext
from arbor.core.tokens.token import Reference
from arbor.core.tree import App, Node, Stack
from arbor.entities import Resource


@dataclass
class CrossStackApp:
    app: App
    stack_a: Stack
    stack_b: Stack
    bucket: Resource
    policy: Resource


def build_cross_stack_app() -> CrossStackApp:
    """StackA holds a Bucket; StackB's Policy grants access to everything under its arn."""
    app = App()
    stack_a = Stack(app, "StackA")
    stack_b = Stack(app, "StackB")
    bucket = Resource(stack_a, "Bucket", resource_type="Bucket")
    policy = Resource(
        stack_b,
        "Policy",
        resource_type="Policy",
        properties={"resource": bucket.get_att("arn") + "/*"},
    )
    return CrossStackApp(app=app, stack_a=stack_a, stack_b=stack_b, bucket=bucket, policy=policy)


@dataclass
class RecordingHost:
    """ReferenceHost that allocates real ids and records every noted reference.

    Cross-stack imports are answered with a marker instead of an export.
    """

    allocator: LogicalIdAllocator = field(default_factory=LogicalIdAllocator)
    noted: list[tuple[str, str]] = field(default_factory=list)
    imported: list[str] = field(default_factory=list)

    def logical_id(self, node: Node) -> LogicalID:
        return self.allocator.allocate(node.path)

    def note_reference(self, consumer: Node, producer: Node) -> None:
        self.noted.append((consumer.path_str, producer.path_str))

    def import_reference(self, reference: Reference, context: ResolveContext) -> Any:
        self.imported.append(reference.label)
        return {"Imported": reference.label}
