"""Versioned content fingerprints for cache keys.

A fingerprint is SHA-256 over a canonical JSON serialization: object
keys sorted, no insignificant whitespace, sets sorted, pydantic models
dumped with their wire aliases. Two requests that differ only in key
order share a fingerprint. The scheme version is mixed into the hash
and prefixed onto the digest, so a change of scheme can never collide
with keys produced by the old one.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping, Set
from enum import Enum
from typing import Any

from pydantic import BaseModel

FINGERPRINT_VERSION = "v1"


def _canonical(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return _canonical(obj.model_dump(mode="json", by_alias=True))
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Mapping):
        return {str(k): _canonical(v) for k, v in obj.items()}
    if isinstance(obj, Set):
        return sorted((_canonical(v) for v in obj), key=canonical_json)
    if isinstance(obj, list | tuple):
        return [_canonical(v) for v in obj]
    return obj


def canonical_json(obj: Any) -> str:
    """Serialize *obj* deterministically, independent of key order."""
    return json.dumps(
        _canonical(obj),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def fingerprint(obj: Any) -> str:
    """Return ``"v1-<sha256 hex>"`` for the canonical form of *obj*."""
    payload = f"{FINGERPRINT_VERSION}\n{canonical_json(obj)}"
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"{FINGERPRINT_VERSION}-{digest}"
