"""Shared contracts: errors, enums, and semantic types.

Leaf package: nothing here imports from arbor.core or arbor.engine.
"""

from arbor.contracts.enums import OutputFormat, Section, SelectionQuery, TokenShape
from arbor.contracts.errors import (
    AllocationError,
    AmbiguousSelectionError,
    ConstructionLockedError,
    CyclicDependencyError,
    CyclicTokenError,
    DuplicateIdError,
    EmptySelectionError,
    NotFoundError,
    SynthesisError,
    UnresolvableCrossBoundaryReferenceError,
)
from arbor.contracts.types import ExportName, LogicalID, NodePath, StackName

__all__ = [
    "AllocationError",
    "AmbiguousSelectionError",
    "ConstructionLockedError",
    "CyclicDependencyError",
    "CyclicTokenError",
    "DuplicateIdError",
    "EmptySelectionError",
    "ExportName",
    "LogicalID",
    "NodePath",
    "NotFoundError",
    "OutputFormat",
    "Section",
    "SelectionQuery",
    "StackName",
    "SynthesisError",
    "TokenShape",
    "UnresolvableCrossBoundaryReferenceError",
]
