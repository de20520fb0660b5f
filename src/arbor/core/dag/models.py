"""Types for dependency graph operations.

Leaf module with no intra-package imports.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DependencyEdge:
    """A directed ordering constraint: dependent is emitted after dependency.

    explicit is True when a model author declared the edge; edges found
    only through token references are implicit.
    """

    dependent: str
    dependency: str
    explicit: bool
