"""
History engine: fold cache, recompute algorithm, retention and wire format.
"""

from .recompute import compute_next_entry, recompute_states
from .fold_cache import FoldCache, INIT_ACTION_ID, validate_lifted
from .retention import RetentionPolicy, commit_excess
from .snapshot import (
    to_document,
    from_document,
    dumps,
    loads,
    compute_lifted_hash,
)

__all__ = [
    "compute_next_entry",
    "recompute_states",
    "FoldCache",
    "INIT_ACTION_ID",
    "validate_lifted",
    "RetentionPolicy",
    "commit_excess",
    "to_document",
    "from_document",
    "dumps",
    "loads",
    "compute_lifted_hash",
]
