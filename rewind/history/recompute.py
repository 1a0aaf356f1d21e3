"""
Selective recomputation of the computed-state cache.

Entries before the first invalidated index are reused as-is; only the
tail is folded again. Each reducer call is the single place where host
exceptions are caught and turned into error-carrying entries.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

from ..core.actions import get_action_type
from ..core.errors import INTERRUPTED_ERROR, ReducerError
from ..core.reducer import ReducerFn
from ..core.state import ComputedEntry

Logger = Union[logging.Logger, logging.LoggerAdapter]

_default_logger = logging.getLogger(__name__)


def compute_next_entry(
    reducer: ReducerFn,
    action: Any,
    state: Any,
    logger: Optional[Logger] = None,
) -> ComputedEntry:
    """
    Apply the reducer once, capturing any exception it raises.

    On failure the entry keeps the last good state and records the
    formatted exception as its error.
    """
    try:
        next_state = reducer(state, action)
    except Exception as e:
        err = ReducerError(e, action_type=get_action_type(action))
        (logger or _default_logger).error(
            f"Reducer failed on action type={err.action_type!r}: {err}",
            exc_info=e,
        )
        return ComputedEntry(state=state, error=err.description)
    return ComputedEntry(state=next_state)


def recompute_states(
    computed_states: Tuple[ComputedEntry, ...],
    min_invalidated_index: int,
    reducer: ReducerFn,
    committed_state: Any,
    actions_by_id: Dict[int, Dict[str, Any]],
    staged_action_ids: Sequence[int],
    skipped_action_ids: Iterable[int],
    logger: Optional[Logger] = None,
) -> Tuple[ComputedEntry, ...]:
    """
    Recompute every entry at or after min_invalidated_index.

    Rules per position:
    - skipped id: reuse the previous entry (state and any carried error)
    - previous entry has an error: interrupted marker, reducer not called
    - otherwise: fold the action over the previous state

    Returns:
        The same tuple object when nothing is invalid, otherwise a new tuple
    """
    if min_invalidated_index >= len(computed_states) and len(computed_states) == len(staged_action_ids):
        return computed_states

    skipped = frozenset(skipped_action_ids)
    start = max(min_invalidated_index, 0)
    next_states = list(computed_states[:start])

    for i in range(start, len(staged_action_ids)):
        action_id = staged_action_ids[i]
        action = actions_by_id[action_id]["action"]

        previous_entry = next_states[i - 1] if i > 0 else None
        previous_state = previous_entry.state if previous_entry is not None else committed_state

        if action_id in skipped:
            entry = previous_entry if previous_entry is not None else ComputedEntry(state=previous_state)
        elif previous_entry is not None and previous_entry.error:
            entry = ComputedEntry(state=previous_state, error=INTERRUPTED_ERROR)
        else:
            entry = compute_next_entry(reducer, action, previous_state, logger)

        next_states.append(entry)

    return tuple(next_states)
