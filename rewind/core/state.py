"""
Lifted state model.

LiftedState wraps the host application's state with its full debuggable
history. It is immutable: every engine operation produces a new instance
via dataclasses.replace, reusing untouched fields by reference.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ComputedEntry:
    """
    Fold result at one staged position.

    Fields:
        state: Application state after folding up to this position
        error: Reducer failure description, the interrupted marker, or None
    """
    state: Any
    error: Optional[str] = None


@dataclass(frozen=True)
class LiftedState:
    """
    Immutable history aggregate.

    Fields:
        actions_by_id: ActionId -> PERFORM_ACTION record
        next_action_id: Next id to assign
        staged_action_ids: Uncommitted history in fold order, index 0 is INIT
        skipped_action_ids: Ids excluded from the fold (insertion order)
        committed_state: Fold seed (everything before staged_action_ids[0])
        current_state_index: Publicly observed position
        computed_states: Cached fold results, parallel to staged_action_ids
        monitor_state: Side-channel state kept by the monitor reducer
    """
    actions_by_id: Dict[int, Dict[str, Any]]
    next_action_id: int
    staged_action_ids: Tuple[int, ...]
    skipped_action_ids: Tuple[int, ...]
    committed_state: Any
    current_state_index: int
    computed_states: Tuple[ComputedEntry, ...]
    monitor_state: Any = field(default=None)

    def position_of(self, action_id: int) -> int:
        """
        Staged position of an action id.

        Raises:
            ValueError: If the id is not staged
        """
        return self.staged_action_ids.index(action_id)

    def current_entry(self) -> ComputedEntry:
        return self.computed_states[self.current_state_index]

    def current_state(self) -> Any:
        """Unlifted application state at the current position."""
        return self.current_entry().state
