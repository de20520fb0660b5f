"""Dependency graph operations for emission ordering."""

from arbor.core.dag.graph import DependencyGraph
from arbor.core.dag.models import DependencyEdge

__all__ = [
    "DependencyEdge",
    "DependencyGraph",
]
