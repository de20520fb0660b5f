"""Semantic type aliases for compile-time type safety.

NewType creates distinct types that mypy treats as incompatible,
preventing accidental misuse of semantically different string values.
"""

from typing import NewType, TypeAlias

LogicalID = NewType("LogicalID", str)
"""Deterministic document key assigned to a node (e.g., 'StackABucket1A2B3C4D')"""

ExportName = NewType("ExportName", str)
"""Stack-qualified name under which a value is exported for import elsewhere"""

StackName = NewType("StackName", str)
"""Name of an aggregation boundary; also the document name"""

NodePath: TypeAlias = tuple[str, ...]
"""Ids from the root to a node, root first"""
