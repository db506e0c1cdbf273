"""Deterministic content hashing for snapshot subtrees and change nodes."""

from __future__ import annotations

import hashlib
import json

from kubedrift.errors import HashingError


def canonical_json(value: object) -> str:
    """Serialize *value* with sorted keys and compact separators.

    Mapping iteration order never affects the output.  Raises
    :class:`HashingError` if the value is not JSON-serializable.
    """
    try:
        return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise HashingError(f"cannot serialize {type(value).__name__} for hashing: {exc}") from exc


def compute_hash(value: object) -> str:
    """Return the SHA-256 hex digest of the canonical form of *value*."""
    payload = canonical_json(value)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def generate_hash(scope: str, change_kind: str, content: str) -> str:
    """Identity of a change node: digest of ``scope:change_kind:content``."""
    data = f"{scope}:{change_kind}:{content}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()
