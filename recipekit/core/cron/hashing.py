"""Content hashing for change detection between installs."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def _sort_keys(value: Any, seen: set[int]) -> Any:
    if isinstance(value, dict):
        if id(value) in seen:
            return "[Circular]"
        seen.add(id(value))
        return {str(k): _sort_keys(value[k], seen) for k in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        if id(value) in seen:
            return "[Circular]"
        seen.add(id(value))
        return [_sort_keys(v, seen) for v in value]
    return value


def stable_stringify(value: Any) -> str:
    """JSON with keys sorted at every depth, so key order never matters."""
    return json.dumps(_sort_keys(value, set()), separators=(",", ":"), ensure_ascii=False)


def hash_spec(fields: Any) -> str:
    """SHA-256 hex digest of the canonical JSON form of ``fields``."""
    return hashlib.sha256(stable_stringify(fields).encode("utf-8")).hexdigest()
