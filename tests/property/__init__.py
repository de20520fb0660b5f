# tests/property/__init__.py
"""Property-based tests for Arbor.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of. Synthesis output is deployed
and diffed, so determinism and ordering guarantees are non-negotiable.

Test categories:
- core/: Logical id determinism and uniqueness, dependency ordering, join lowering
- engine/: Whole-tree synthesis determinism
"""
