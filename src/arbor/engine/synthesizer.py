"""Synthesis driver.

Turns a frozen construct tree into a CloudAssembly:

1. Freeze the tree and collect stacks and entity nodes (declaration order)
2. Register explicit dependencies (same-stack -> construct edges,
   cross-stack -> stack edges)
3. Resolve every entity record; token resolution discovers implicit edges
   and rewrites cross-stack references into export/import pairs
4. Reject cycles at both levels
5. Assemble one document per stack, stacks and records in topological order

Synthesis never mutates the tree beyond freezing it; all run state lives in
a _SynthesisRun, so independent trees can be synthesized side by side.
"""

from __future__ import annotations

from typing import Any, cast

from arbor.contracts.enums import Section
from arbor.contracts.errors import (
    CyclicDependencyError,
    CyclicTokenError,
    NotFoundError,
    SynthesisError,
    UnresolvableCrossBoundaryReferenceError,
)
from arbor.contracts.types import LogicalID, StackName
from arbor.core.config import ArborSettings
from arbor.core.dag import DependencyGraph
from arbor.core.identity import LogicalIdAllocator
from arbor.core.logging import get_logger
from arbor.core.references import ReferenceResolver
from arbor.core.tokens.intrinsics import Intrinsics
from arbor.core.tokens.resolver import ResolveContext, TokenResolver
from arbor.core.tokens.token import Reference
from arbor.core.tree.capabilities import EmitsEntity, dependency_roots, is_entity
from arbor.core.tree.node import Node
from arbor.core.tree.stack import Stack
from arbor.engine.assembler import ResolvedEntity, TemplateAssembler
from arbor.engine.assembly import CloudAssembly

logger = get_logger(__name__)


class Synthesizer:
    """Synthesizes construct trees with fixed settings.

    Example:
        app = App()
        stack = Stack(app, "Storage")
        Resource(stack, "Bucket", resource_type="AWS::S3::Bucket")
        assembly = Synthesizer().synthesize(app)
        print(assembly.get_stack("Storage").render())
    """

    def __init__(self, settings: ArborSettings | None = None, *, intrinsics: Intrinsics | None = None) -> None:
        self._settings = settings or ArborSettings()
        self._intrinsics = intrinsics or Intrinsics()

    def synthesize(self, root: Node) -> CloudAssembly:
        """Synthesize every stack under root.

        Raises:
            SynthesisError: Any integrity failure; no partial output is produced
            NotFoundError: If an entity is not inside any stack
        """
        run = _SynthesisRun(root, self._settings, self._intrinsics)
        try:
            return run.execute()
        except SynthesisError as e:
            details: dict[str, Any] = {}
            if isinstance(e, CyclicDependencyError | CyclicTokenError):
                details["cycle"] = list(e.cycle)
            elif isinstance(e, UnresolvableCrossBoundaryReferenceError):
                details["producer"] = e.producer
                details["consumer"] = e.consumer
            logger.error(
                "Synthesis failed",
                root=root.path_str,
                error=str(e),
                error_type=type(e).__name__,
                **details,
            )
            raise


class _SynthesisRun:
    """State of one synthesis run; implements ReferenceHost for the token resolver."""

    def __init__(self, root: Node, settings: ArborSettings, intrinsics: Intrinsics) -> None:
        self.root = root
        self.settings = settings
        self.intrinsics = intrinsics
        synthesis = settings.synthesis
        self.allocator = LogicalIdAllocator(hash_length=synthesis.hash_length, max_length=synthesis.max_logical_id_length)
        self.graph = DependencyGraph(level="construct")
        self.stack_graph = DependencyGraph(level="stack")
        self.references = ReferenceResolver(self.stack_graph, logical_id=self.logical_id, intrinsics=intrinsics)
        self.tokens = TokenResolver(self, intrinsics=intrinsics)
        self.assembler = TemplateAssembler(synthesis)
        self._entities: dict[str, Node] = {}

    # ===== ReferenceHost =====

    def logical_id(self, node: Node) -> LogicalID:
        return self.allocator.allocate(node.path)

    def note_reference(self, consumer: Node, producer: Node) -> None:
        if consumer is producer or not is_entity(consumer):
            return
        consumer_stack = Stack.of(consumer)
        try:
            producer_stack = Stack.of(producer)
        except NotFoundError:
            # Only reachable through a Reference, which import_reference rejects
            return
        if producer_stack is not consumer_stack:
            self.stack_graph.add_dependency(consumer_stack.name, producer_stack.name)
        elif is_entity(producer):
            self.graph.add_dependency(consumer.path_str, producer.path_str)

    def import_reference(self, reference: Reference, context: ResolveContext) -> Any:
        return self.references.resolve(
            reference,
            context.stack,
            producer_value=lambda stack: self.tokens.resolve(reference, consumer=stack, stack=stack),
        )

    # ===== Phases =====

    def execute(self) -> CloudAssembly:
        self.root.lock()
        stacks = [cast(Stack, node) for node in self.root.walk() if node.is_aggregation_boundary]
        logger.info("Synthesis started", root=self.root.path_str, stacks=len(stacks))

        members = self._collect_entities(stacks)
        self._add_explicit_dependencies()

        resolved: dict[str, dict[str, Any]] = {}
        for stack in stacks:
            for entity in members[stack.name]:
                body = cast(EmitsEntity, entity).entity_body()
                resolved[entity.path_str] = self.tokens.resolve(body, consumer=entity, stack=stack)
            logger.debug("Resolved stack", stack=stack.name, entities=len(members[stack.name]))

        emission_order = self.graph.topological_order()
        stack_order = self.stack_graph.topological_order()

        stacks_by_name = {stack.name: stack for stack in stacks}
        documents = []
        for name in stack_order:
            stack = stacks_by_name[StackName(name)]
            keys = {entity.path_str for entity in members[stack.name]}
            records = [self._resolved_entity(key, resolved[key]) for key in emission_order if key in keys]
            dependencies = [StackName(dep) for dep in self.stack_graph.dependencies_of(name)]
            documents.append(self.assembler.assemble(stack, records, self.references.exports_of(stack.name), dependencies))

        logger.info(
            "Synthesis completed",
            root=self.root.path_str,
            stacks=len(documents),
            entities=len(resolved),
            exports=sum(len(self.references.exports_of(stack.name)) for stack in stacks),
        )
        return CloudAssembly(stacks=tuple(documents))

    def _collect_entities(self, stacks: list[Stack]) -> dict[StackName, list[Node]]:
        members: dict[StackName, list[Node]] = {stack.name: [] for stack in stacks}
        for stack in stacks:
            self.stack_graph.add_node(stack.name)

        for node in self.root.walk():
            if not is_entity(node):
                continue
            # Raises NotFoundError for entities outside every stack
            owner = Stack.of(node)
            members[owner.name].append(node)
            self.graph.add_node(node.path_str)
            self._entities[node.path_str] = node
        return members

    def _add_explicit_dependencies(self) -> None:
        for node in self.root.walk():
            if not node.dependencies:
                continue
            dependents = dependency_roots(node)
            for target in node.dependencies:
                if isinstance(node, Stack) and isinstance(target, Stack) and target is not node:
                    # Holds even when either stack has no entities to expand to
                    if target.root is not self.root:
                        raise UnresolvableCrossBoundaryReferenceError(
                            target.path_str, node.path_str, "dependency target belongs to another tree"
                        )
                    self.stack_graph.add_dependency(node.name, target.name, explicit=True)
                for dependency in dependency_roots(target):
                    if dependency.root is not self.root:
                        raise UnresolvableCrossBoundaryReferenceError(
                            dependency.path_str, node.path_str, "dependency target belongs to another tree"
                        )
                    for dependent in dependents:
                        if dependent is dependency:
                            continue
                        dependent_stack, dependency_stack = Stack.of(dependent), Stack.of(dependency)
                        if dependent_stack is dependency_stack:
                            self.graph.add_dependency(dependent.path_str, dependency.path_str, explicit=True)
                        else:
                            self.stack_graph.add_dependency(dependent_stack.name, dependency_stack.name, explicit=True)

    def _resolved_entity(self, key: str, body: dict[str, Any]) -> ResolvedEntity:
        node = self._entities[key]
        section = cast(EmitsEntity, node).section
        emit_all = self.settings.synthesis.emit_implicit_depends_on
        explicit = set(self.graph.dependencies_of(key, explicit_only=True))
        # An implicit edge is already carried by a Ref/GetAtt in the body; a
        # producer whose value resolved to a literal still needs DependsOn
        referenced = self.intrinsics.referenced_ids(body)
        depends_on: list[LogicalID] = []
        for dependency_key in self.graph.dependencies_of(key):
            dependency = self._entities[dependency_key]
            if cast(EmitsEntity, dependency).section != Section.RESOURCES:
                continue
            logical_id = self.logical_id(dependency)
            if emit_all or dependency_key in explicit or logical_id not in referenced:
                depends_on.append(logical_id)
        return ResolvedEntity(
            logical_id=self.logical_id(node),
            section=section,
            body=body,
            depends_on=tuple(sorted(depends_on)),
            path=key,
        )
