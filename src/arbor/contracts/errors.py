"""Exception taxonomy for construction and synthesis.

Two families:

- Usage errors are raised synchronously at the call that caused them
  (duplicate ids, missing ancestors, ambiguous selections). They subclass
  builtin ValueError/LookupError so callers may catch them generically.
- Integrity errors derive from SynthesisError. They abort synthesis of the
  affected stacks; there is no partial output and nothing is retried,
  because every failure is a deterministic function of the input model.
"""

from __future__ import annotations

from collections.abc import Sequence

# =============================================================================
# Usage errors (construction time)
# =============================================================================


class DuplicateIdError(ValueError):
    """Raised when two siblings register the same id."""

    def __init__(self, node_id: str, scope_path: str) -> None:
        self.node_id = node_id
        self.scope_path = scope_path
        super().__init__(f"There is already a construct with id '{node_id}' in '{scope_path or '<root>'}'")


class NotFoundError(LookupError):
    """Raised when a required ancestor capability is absent."""

    def __init__(self, what: str, node_path: str) -> None:
        self.what = what
        self.node_path = node_path
        super().__init__(f"No {what} found above '{node_path}'")


class ConstructionLockedError(RuntimeError):
    """Raised when the tree is mutated after it was frozen for synthesis."""

    pass


class AmbiguousSelectionError(ValueError):
    """Raised when a selection query is over-constrained."""

    pass


class EmptySelectionError(LookupError):
    """Raised when a selection query that requires matches finds none."""

    pass


# =============================================================================
# Integrity errors (synthesis time)
# =============================================================================


class SynthesisError(Exception):
    """Base class for fatal synthesis failures."""

    pass


class CyclicTokenError(SynthesisError):
    """A token depends, directly or transitively, on itself.

    Attributes:
        cycle: Descriptions of the tokens on the cycle, first element repeated last.
    """

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        super().__init__("Token depends on itself: " + " -> ".join(self.cycle))


class CyclicDependencyError(SynthesisError):
    """The dependency graph contains a cycle.

    Attributes:
        cycle: Node (or stack) paths on the cycle, in edge order.
    """

    def __init__(self, cycle: Sequence[str], *, level: str = "construct") -> None:
        self.cycle = tuple(cycle)
        self.level = level
        path = " -> ".join([*self.cycle, self.cycle[0]]) if self.cycle else ""
        super().__init__(f"Dependency cycle between {level}s: {path}")


class AllocationError(SynthesisError):
    """Two distinct paths allocated the same logical id."""

    def __init__(self, logical_id: str, first: str, second: str) -> None:
        self.logical_id = logical_id
        self.paths = (first, second)
        super().__init__(f"Logical id '{logical_id}' allocated to both '{first}' and '{second}'")


class UnresolvableCrossBoundaryReferenceError(SynthesisError):
    """A cross-stack reference has no valid export/import path."""

    def __init__(self, producer: str, consumer: str, reason: str) -> None:
        self.producer = producer
        self.consumer = consumer
        super().__init__(f"Cannot reference '{producer}' from '{consumer}': {reason}")
