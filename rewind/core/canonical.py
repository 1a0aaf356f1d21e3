"""
Canonical JSON for lifted-state documents.

Exported history must serialize to identical bytes whatever order the
host built its dicts in, so that two exports of the same history hash the same.
"""

import json
from typing import Any


def canonicalize(obj: Any) -> Any:
    """
    Convert nested dict/list/tuple to canonical form.

    Rules:
    - dict keys stringified and sorted
    - tuples converted to lists
    - recursive normalization
    """
    if isinstance(obj, dict):
        items = {str(k): v for k, v in obj.items()}
        return {k: canonicalize(items[k]) for k in sorted(items)}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic UTF-8 JSON bytes (no whitespace, sorted keys).

    Raises:
        TypeError: If obj contains values JSON cannot represent
    """
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    """Same as canonical_json_bytes but returns str."""
    return canonical_json_bytes(obj).decode("utf-8")
