"""Core infrastructure: Tree, Tokens, Identity, DAG, References, Canonical, Configuration, Logging."""

from arbor.core.canonical import (
    CANONICAL_VERSION,
    canonical_json,
    stable_hash,
)
from arbor.core.config import (
    ArborSettings,
    LoggingSettings,
    OutputSettings,
    SelectionSettings,
    SynthesisSettings,
    load_settings,
)
from arbor.core.dag import DependencyEdge, DependencyGraph
from arbor.core.identity import LogicalIdAllocator
from arbor.core.logging import (
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)
from arbor.core.references import CrossStackReference, Export, ReferenceResolver
from arbor.core.selection import NodeSelector, Placement
from arbor.core.tokens import Lazy, Reference, Token, fn
from arbor.core.tree import App, DependencyGroup, Node, Stack

__all__ = [
    "CANONICAL_VERSION",
    "App",
    "ArborSettings",
    "CrossStackReference",
    "DependencyEdge",
    "DependencyGraph",
    "DependencyGroup",
    "Export",
    "Lazy",
    "LoggingSettings",
    "LogicalIdAllocator",
    "Node",
    "NodeSelector",
    "OutputSettings",
    "Placement",
    "Reference",
    "ReferenceResolver",
    "SelectionSettings",
    "Stack",
    "SynthesisSettings",
    "Token",
    "canonical_json",
    "configure_logging",
    "configure_logging_from_settings",
    "fn",
    "get_logger",
    "load_settings",
    "stable_hash",
]
