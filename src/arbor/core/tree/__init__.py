"""Construct tree: nodes, stacks, and capability protocols."""

from arbor.core.tree.app import App
from arbor.core.tree.capabilities import (
    Addressable,
    Dependable,
    DependencyGroup,
    EmitsEntity,
    dependency_roots,
    is_entity,
)
from arbor.core.tree.node import PATH_SEPARATOR, Node, enclosing_boundary
from arbor.core.tree.stack import Stack

__all__ = [
    "PATH_SEPARATOR",
    "Addressable",
    "App",
    "Dependable",
    "DependencyGroup",
    "EmitsEntity",
    "Node",
    "Stack",
    "dependency_roots",
    "enclosing_boundary",
    "is_entity",
]
