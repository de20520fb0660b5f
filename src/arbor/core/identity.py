"""Logical id allocation.

A logical id is the key of a node's record in its stack's document. It is
a readable prefix built from the node's path plus a hash of the FULL path,
so two nodes whose readable prefixes collide still get distinct ids, and
moving a node under a different parent changes its id.

Ids are a pure function of the path: the same path yields the same id in
every run and every process.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from arbor.contracts.errors import AllocationError
from arbor.contracts.types import LogicalID, NodePath
from arbor.core.canonical import stable_hash

# Logical ids are restricted to ASCII alphanumerics
_INVALID_ID_CHARS = re.compile(r"[^A-Za-z0-9]")

# Conventional ids for a construct's primary child; they add no information
# to the readable prefix (the hash still covers them).
HIDDEN_PATH_COMPONENTS = frozenset({"Default", "Resource"})


def readable_prefix(path: Sequence[str]) -> str:
    """Build the human-readable part of a logical id from a path.

    The root component is dropped, hidden components are skipped, and
    consecutive duplicates collapse ("Bucket/Bucket" reads as "Bucket").
    """
    components: list[str] = []
    for component in path[1:]:
        if component in HIDDEN_PATH_COMPONENTS:
            continue
        if components and components[-1] == component:
            continue
        components.append(component)
    return _INVALID_ID_CHARS.sub("", "".join(components))


def path_hash(path: Sequence[str], length: int) -> str:
    """Uppercase hex digest of the canonical JSON form of path."""
    return stable_hash(list(path))[:length].upper()


class LogicalIdAllocator:
    """Maps node paths to logical ids, memoized and collision-checked.

    Entries are write-once, so one allocator may be shared by independent
    per-stack passes.
    """

    def __init__(self, *, hash_length: int = 8, max_length: int = 255) -> None:
        if hash_length >= max_length:
            raise ValueError(f"hash_length ({hash_length}) must be shorter than max_length ({max_length})")
        self._hash_length = hash_length
        self._max_length = max_length
        self._by_path: dict[NodePath, LogicalID] = {}
        self._owners: dict[LogicalID, NodePath] = {}

    def __len__(self) -> int:
        return len(self._by_path)

    def allocate(self, path: Sequence[str]) -> LogicalID:
        """Return the logical id for path, allocating it on first use.

        Raises:
            AllocationError: If a different path already owns the computed id
        """
        key: NodePath = tuple(path)
        existing = self._by_path.get(key)
        if existing is not None:
            return existing

        prefix = readable_prefix(key)[: self._max_length - self._hash_length]
        logical_id = LogicalID(prefix + path_hash(key, self._hash_length))

        owner = self._owners.get(logical_id)
        if owner is not None and owner != key:
            raise AllocationError(logical_id, "/".join(owner), "/".join(key))

        self._owners[logical_id] = key
        self._by_path[key] = logical_id
        return logical_id

    def allocated(self) -> dict[NodePath, LogicalID]:
        """Snapshot of every allocation made so far."""
        return dict(self._by_path)
