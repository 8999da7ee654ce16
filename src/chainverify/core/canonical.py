# src/chainverify/core/canonical.py
"""
Canonical JSON serialization and the default record hash.

Two-phase approach:
1. Normalize: Convert raw cell bytes to JSON-safe primitives (our code)
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)

Bytes become {"__bytes__": <base64>} and None stays JSON null, so a missing
value and a zero-length value never canonicalize to the same text.

The verifier treats the record hash as a black box; chain_hash() is simply
the implementation used when the caller does not inject one.
"""

from __future__ import annotations

import base64
import hashlib
from collections.abc import Sequence
from typing import Any

import rfc8785

from chainverify.contracts.chain import CellValue

# Version string identifying the default record hash construction
CANONICAL_VERSION = "sha256-rfc8785-v1"


def _normalize_value(obj: Any) -> Any:
    """Convert a single value to a JSON-safe primitive.

    Raises:
        TypeError: If the value is not a supported cell type
    """
    if obj is None or isinstance(obj, str | int | bool):
        return obj

    if isinstance(obj, bytes | bytearray | memoryview):
        return {"__bytes__": base64.b64encode(bytes(obj)).decode("ascii")}

    raise TypeError(f"Cannot canonicalize value of type {type(obj).__name__}")


def _normalize_for_canonical(data: Any) -> Any:
    """Recursively normalize a data structure for canonical JSON."""
    if isinstance(data, dict):
        return {k: _normalize_for_canonical(v) for k, v in data.items()}
    if isinstance(data, list | tuple):
        return [_normalize_for_canonical(v) for v in data]
    return _normalize_value(data)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON for hashing.

    Args:
        obj: Data structure to serialize

    Returns:
        Canonical JSON string (no whitespace, sorted keys)

    Raises:
        TypeError: If data contains types that cannot be serialized
    """
    normalized = _normalize_for_canonical(obj)
    result: bytes = rfc8785.dumps(normalized)
    return result.decode("utf-8")


def stable_hash(obj: Any) -> str:
    """Compute SHA-256 hex digest of the canonical JSON of obj."""
    canonical = canonical_json(obj)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def chain_hash(
    key: bytes,
    values: Sequence[CellValue],
    timestamp: CellValue,
    previous_hash: str,
) -> str:
    """Default record hash for a hash-chained table.

    Args:
        key: Record primary-key value
        values: Non-special column values in schema order (None kept)
        timestamp: Raw timestamp cell
        previous_hash: Running hash carried from the previous record

    Returns:
        64-character lowercase hex SHA-256 digest

    Example:
        >>> chain_hash(b"k1", [b"a", None], b"2024-01-01", "") != chain_hash(b"k1", [b"a", b""], b"2024-01-01", "")
        True
    """
    return stable_hash(
        {
            "version": CANONICAL_VERSION,
            "key": key,
            "values": list(values),
            "timestamp": timestamp,
            "previous": previous_hash,
        }
    )
