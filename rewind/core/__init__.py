"""
Core primitives for the lifted-state engine.

- Actions: application records and lifted action creators
- LiftedState / ComputedEntry: immutable history aggregate
- Reducer: handler registry producing a (state, action) -> state callable
- Canonical: deterministic JSON for exported history
- Clock: timestamp sources for recorded actions
"""

from .actions import INIT_ACTION, get_action_type, validate_action
from .state import ComputedEntry, LiftedState
from .reducer import Reducer, ReducerFn
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str
from .clock import Clock, DeterministicClock, wall_clock_ms
from .errors import (
    INTERRUPTED_ERROR,
    RewindError,
    InvalidActionError,
    ConfigError,
    SnapshotError,
    ReentrantDispatchError,
    ReducerError,
)

__all__ = [
    "INIT_ACTION",
    "get_action_type",
    "validate_action",
    "ComputedEntry",
    "LiftedState",
    "Reducer",
    "ReducerFn",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "Clock",
    "DeterministicClock",
    "wall_clock_ms",
    "INTERRUPTED_ERROR",
    "RewindError",
    "InvalidActionError",
    "ConfigError",
    "SnapshotError",
    "ReentrantDispatchError",
    "ReducerError",
]
