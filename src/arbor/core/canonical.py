"""
Canonical serialization for deterministic hashing and stable documents.

Two-phase approach:
1. Normalize: Convert tuples and other container variants to JSON-safe
   primitives, rejecting values that have no stable JSON form (our code)
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)
   or, for human-facing output, insertion-ordered JSON/YAML

IMPORTANT: NaN and Infinity are strictly REJECTED, not silently converted.
Identical input must always produce byte-identical output so deployments
stay diffable.
"""

from __future__ import annotations

import hashlib
import json
import math
from decimal import Decimal
from typing import Any

import rfc8785
import yaml

# Version string identifying the hash scheme used for logical ids
CANONICAL_VERSION = "sha256-rfc8785-v1"


def _normalize_value(obj: Any) -> Any:
    """Convert a single value to a JSON-safe primitive.

    Raises:
        ValueError: If value is a non-finite float or Decimal
        TypeError: If value has no JSON representation
    """
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(f"Cannot canonicalize non-finite float: {obj}")
        return obj

    if obj is None or isinstance(obj, str | int | bool):
        return obj

    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise ValueError(f"Cannot canonicalize non-finite Decimal: {obj}")
        return str(obj)

    raise TypeError(f"Cannot canonicalize value of type {type(obj).__name__}: {obj!r}")


def normalize(data: Any) -> Any:
    """Recursively normalize a data structure for serialization.

    Mapping keys must be strings; tuples become lists.

    Raises:
        ValueError: If data contains NaN or Infinity
        TypeError: If data contains non-string keys or unserializable values
    """
    if isinstance(data, dict):
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                raise TypeError(f"Mapping keys must be strings, got {type(key).__name__}: {key!r}")
            normalized[key] = normalize(value)
        return normalized
    if isinstance(data, list | tuple):
        return [normalize(v) for v in data]
    return _normalize_value(data)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON (no whitespace, sorted keys) per RFC 8785.

    Raises:
        ValueError: If data contains NaN, Infinity, or other non-finite values
        TypeError: If data contains types that cannot be serialized
    """
    result: bytes = rfc8785.dumps(normalize(obj))
    return result.decode("utf-8")


def stable_hash(obj: Any) -> str:
    """Compute SHA-256 hex digest of the canonical JSON form of obj."""
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()


def render_json(document: Any, *, indent: int = 1, canonical: bool = False) -> str:
    """Render a document as JSON.

    Insertion order is preserved unless canonical is set, in which case
    the RFC 8785 form (sorted keys, no whitespace) is returned and indent
    is ignored. Both forms are deterministic for a given input.
    """
    if canonical:
        return canonical_json(document)
    return json.dumps(normalize(document), indent=indent, ensure_ascii=False, allow_nan=False) + "\n"


def render_yaml(document: Any) -> str:
    """Render a document as block-style YAML, preserving insertion order."""
    rendered: str = yaml.safe_dump(normalize(document), sort_keys=False, default_flow_style=False, allow_unicode=True)
    return rendered
