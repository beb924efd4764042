# src/querystash/core/canonical.py
"""
Canonical JSON serialization for deterministic result hashing.

Two-phase approach:
1. Normalize: Convert values to JSON-safe primitives (our code)
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)

The canonical text is both what gets hashed AND what gets written to disk,
so a cached hash always describes the exact bytes of the output file.

IMPORTANT: Engine results are arbitrary data and must always serialize.
Values outside the JSON number domain follow JavaScript JSON semantics:
- NaN and Infinity (float or Decimal) become null
- Integers beyond the safe range (+/- 2^53 - 1) become doubles
- Mapping keys become strings
"""

from __future__ import annotations

import base64
import hashlib
import math
from collections.abc import Mapping
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

import rfc8785

# Largest integer RFC 8785 (I-JSON) serializes exactly
_MAX_SAFE_INT = 2**53 - 1


def _normalize_int(obj: int) -> int | float | None:
    if -_MAX_SAFE_INT <= obj <= _MAX_SAFE_INT:
        return obj
    try:
        return float(obj)
    except OverflowError:
        # Beyond double range: a JavaScript number would be Infinity
        return None


def _normalize_key(key: Any) -> str:
    """String form of a mapping key, as JSON.stringify would produce it."""
    if isinstance(key, str):
        return key
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def _normalize_value(obj: Any) -> Any:
    """Convert a single value to a JSON-safe primitive.

    Args:
        obj: Any Python value

    Returns:
        JSON-serializable primitive
    """
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        return obj

    if obj is None or isinstance(obj, str | bool):
        return obj

    if isinstance(obj, int):
        return _normalize_int(obj)

    if isinstance(obj, datetime):
        # Naive datetimes assumed UTC (explicit policy)
        if obj.tzinfo is None:
            obj = obj.replace(tzinfo=UTC)
        return obj.astimezone(UTC).isoformat()

    if isinstance(obj, date):
        return obj.isoformat()

    if isinstance(obj, bytes):
        return {"__bytes__": base64.b64encode(obj).decode("ascii")}

    if isinstance(obj, Decimal):
        if not obj.is_finite():
            return None
        return str(obj)

    return obj


def _normalize_for_canonical(data: Any) -> Any:
    """Recursively normalize a data structure for canonical JSON.

    Mappings of any kind (including MappingProxyType) become dicts with
    string keys, tuples become lists.
    """
    if isinstance(data, Mapping):
        return {_normalize_key(k): _normalize_for_canonical(v) for k, v in data.items()}
    if isinstance(data, list | tuple):
        return [_normalize_for_canonical(v) for v in data]
    return _normalize_value(data)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON text.

    Args:
        obj: Data structure to serialize

    Returns:
        Canonical JSON string (no whitespace, sorted keys)

    Raises:
        rfc8785.CanonicalizationError: If data contains types that cannot be serialized
    """
    normalized = _normalize_for_canonical(obj)
    result: bytes = rfc8785.dumps(normalized)
    return result.decode("utf-8")


def hash_text(text: str) -> str:
    """SHA-256 hex digest of UTF-8 text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def stable_hash(obj: Any) -> str:
    """Compute stable hash of object.

    Args:
        obj: Data structure to hash

    Returns:
        SHA-256 hex digest of canonical JSON
    """
    return hash_text(canonical_json(obj))
