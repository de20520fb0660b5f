# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Strategy Categories:
- Node ids and paths (valid construct ids, root-first paths)
- Dependency edge sets over a fixed key space

Usage:
    from tests.property.conftest import node_paths

    @given(path=node_paths)
    def test_allocation_is_deterministic(path: tuple[str, ...]) -> None:
        ...
"""

from __future__ import annotations

from hypothesis import strategies as st

# =============================================================================
# Hypothesis Settings
# =============================================================================
#
# For standardized @settings decorators, import from tests.property.settings:
#   from tests.property.settings import STANDARD_SETTINGS, DETERMINISM_SETTINGS
#
# Tiers: DETERMINISM (500), STANDARD (100), SLOW (50), QUICK (20)
# =============================================================================

# Construct ids: any non-empty text without the path separator
node_ids = st.text(min_size=1, max_size=16).filter(lambda s: "/" not in s)

# Mostly-readable ids, closer to what applications actually use
readable_ids = st.text(
    min_size=1,
    max_size=12,
    alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd")),
)

# Root-first paths below an App, at least root + one component
node_paths = st.lists(node_ids, min_size=1, max_size=6).map(lambda rest: ("App", *rest))


@st.composite
def dependency_edges(draw: st.DrawFn, max_keys: int = 8) -> tuple[list[str], list[tuple[str, str]]]:
    """Generate keys plus acyclic dependent -> dependency edges.

    Edges only point from a later key to an earlier one in a hidden
    ranking, so the result is always acyclic; keys are shuffled before
    declaration so ranking and declaration order differ.
    """
    count = draw(st.integers(min_value=1, max_value=max_keys))
    ranked = [f"k{i}" for i in range(count)]
    pairs = [(ranked[j], ranked[i]) for i in range(count) for j in range(i + 1, count)]
    edges = draw(st.lists(st.sampled_from(pairs), unique=True)) if pairs else []
    declared = draw(st.permutations(ranked))
    return list(declared), edges
