"""
Fold cache: the action log plus its memoized fold.

FoldCache owns exactly one LiftedState and replaces it on every operation.
Each operation works out the first position whose cached entry is no longer
valid and recomputes from there, so toggling or jumping never pays for
unaffected history.
"""

import logging
from dataclasses import replace
from typing import Any, Optional, Union

from ..core.actions import INIT_ACTION, perform_action
from ..core.clock import Clock, wall_clock_ms
from ..core.errors import InvalidActionError, SnapshotError
from ..core.reducer import ReducerFn
from ..core.state import LiftedState
from .recompute import recompute_states

Logger = Union[logging.Logger, logging.LoggerAdapter]

INIT_ACTION_ID = 0


class FoldCache:
    """
    Action log, computed-state cache and recompute algorithm.

    Usage:
        fold = FoldCache(counter, initial_state=0)
        fold.append({"type": "INCREMENT"})
        fold.toggle_action(1)
        fold.lifted.current_state()
    """

    def __init__(
        self,
        reducer: ReducerFn,
        initial_state: Any = None,
        clock: Optional[Clock] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        """
        Initialize the cache with a single INIT entry.

        Args:
            reducer: Host reducer (state, action) -> state
            initial_state: Seed used at start and by reset()
            clock: Timestamp source for recorded actions
            logger: Logger for reducer failures
        """
        self._reducer = reducer
        self._initial_state = initial_state
        self.clock: Clock = clock or wall_clock_ms
        self.logger = logger or logging.getLogger(__name__)
        self._lifted = self._new_generation(initial_state, monitor_state=None)

    @property
    def lifted(self) -> LiftedState:
        return self._lifted

    @property
    def reducer(self) -> ReducerFn:
        return self._reducer

    def adopt(self, lifted: LiftedState) -> LiftedState:
        """Install a LiftedState derived from the current one (retention, monitor)."""
        self._lifted = lifted
        return lifted

    def _recompute(self, lifted: LiftedState, min_invalidated_index: int) -> LiftedState:
        computed = recompute_states(
            lifted.computed_states,
            min_invalidated_index,
            self._reducer,
            lifted.committed_state,
            lifted.actions_by_id,
            lifted.staged_action_ids,
            lifted.skipped_action_ids,
            self.logger,
        )
        if computed is lifted.computed_states:
            return lifted
        return replace(lifted, computed_states=computed)

    def _new_generation(self, committed_state: Any, monitor_state: Any) -> LiftedState:
        lifted = LiftedState(
            actions_by_id={INIT_ACTION_ID: perform_action(INIT_ACTION, self.clock())},
            next_action_id=INIT_ACTION_ID + 1,
            staged_action_ids=(INIT_ACTION_ID,),
            skipped_action_ids=(),
            committed_state=committed_state,
            current_state_index=0,
            computed_states=(),
            monitor_state=monitor_state,
        )
        return self._recompute(lifted, 0)

    def _position(self, action_id: Any) -> int:
        if isinstance(action_id, bool) or not isinstance(action_id, int):
            raise InvalidActionError(f"Action id must be an int, got {action_id!r}")
        try:
            return self._lifted.position_of(action_id)
        except ValueError:
            raise InvalidActionError(f"Action id {action_id!r} is not in staged history") from None

    def append(self, action: Any, timestamp: Optional[int] = None) -> int:
        """
        Record an application action and fold it onto the last entry.

        The current index follows the newest entry only if it was already
        on the last entry; a jumped-back pointer stays where it is.

        Returns:
            The new ActionId
        """
        lifted = self._lifted
        record = perform_action(action, self.clock() if timestamp is None else timestamp)
        action_id = lifted.next_action_id

        actions_by_id = dict(lifted.actions_by_id)
        actions_by_id[action_id] = record
        staged = lifted.staged_action_ids + (action_id,)

        current = lifted.current_state_index
        if current == len(lifted.staged_action_ids) - 1:
            current = len(staged) - 1

        lifted = replace(
            lifted,
            actions_by_id=actions_by_id,
            next_action_id=action_id + 1,
            staged_action_ids=staged,
            current_state_index=current,
        )
        self._lifted = self._recompute(lifted, len(staged) - 1)
        return action_id

    def recompute_from(self, index: int) -> LiftedState:
        """Recompute every cached entry at or after index."""
        if index < 0 or index > len(self._lifted.staged_action_ids):
            raise InvalidActionError(f"Recompute index {index} out of range")
        lifted = replace(self._lifted, computed_states=self._lifted.computed_states[:index])
        self._lifted = self._recompute(lifted, index)
        return self._lifted

    def toggle_action(self, action_id: int) -> LiftedState:
        """Flip whether an action takes part in the fold."""
        position = self._position(action_id)
        if position == 0:
            raise InvalidActionError("The INIT action cannot be skipped")
        skipped = self._lifted.skipped_action_ids
        if action_id in skipped:
            skipped = tuple(x for x in skipped if x != action_id)
        else:
            skipped = skipped + (action_id,)
        lifted = replace(self._lifted, skipped_action_ids=skipped)
        self._lifted = self._recompute(lifted, position)
        return self._lifted

    def set_actions_active(self, start: int, end: int, active: bool) -> LiftedState:
        """
        Skip or un-skip every staged id in range(start, end).

        Ids outside staged history, and the INIT id, are ignored.
        """
        lifted = self._lifted
        staged = lifted.staged_action_ids
        for bound in (start, end):
            if isinstance(bound, bool) or not isinstance(bound, int):
                raise InvalidActionError(f"Action id range bounds must be ints, got {bound!r}")
        ids = [x for x in staged[1:] if start <= x < end]
        if not ids:
            return lifted

        if active:
            skipped = tuple(x for x in lifted.skipped_action_ids if x not in ids)
        else:
            skipped = lifted.skipped_action_ids + tuple(
                x for x in ids if x not in lifted.skipped_action_ids
            )
        if skipped == lifted.skipped_action_ids:
            return lifted

        lifted = replace(lifted, skipped_action_ids=skipped)
        self._lifted = self._recompute(lifted, staged.index(ids[0]))
        return self._lifted

    def jump_to_state(self, index: int) -> LiftedState:
        """Move the current pointer. Never invokes the reducer."""
        staged_len = len(self._lifted.staged_action_ids)
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < staged_len:
            raise InvalidActionError(
                f"State index {index!r} out of range (0..{staged_len - 1})"
            )
        self._lifted = replace(self._lifted, current_state_index=index)
        return self._lifted

    def jump_to_action(self, action_id: int) -> LiftedState:
        return self.jump_to_state(self._position(action_id))

    def sweep(self) -> LiftedState:
        """Permanently drop skipped actions, compacting the cache without refolding."""
        lifted = self._lifted
        if not lifted.skipped_action_ids:
            return lifted

        skipped = frozenset(lifted.skipped_action_ids) - {lifted.staged_action_ids[0]}
        keep = [i for i, action_id in enumerate(lifted.staged_action_ids) if action_id not in skipped]
        staged = tuple(lifted.staged_action_ids[i] for i in keep)

        self._lifted = replace(
            lifted,
            actions_by_id={k: v for k, v in lifted.actions_by_id.items() if k not in skipped},
            staged_action_ids=staged,
            skipped_action_ids=(),
            computed_states=tuple(lifted.computed_states[i] for i in keep),
            current_state_index=min(lifted.current_state_index, len(staged) - 1),
        )
        return self._lifted

    def commit(self) -> LiftedState:
        """Checkpoint the current state; all staged history is discarded."""
        lifted = self._lifted
        self._lifted = self._new_generation(lifted.current_state(), lifted.monitor_state)
        return self._lifted

    def rollback(self) -> LiftedState:
        """Discard staged history, returning to the last checkpoint."""
        lifted = self._lifted
        self._lifted = self._new_generation(lifted.committed_state, lifted.monitor_state)
        return self._lifted

    def reset(self) -> LiftedState:
        """Discard all history back to the initial state."""
        self._lifted = self._new_generation(self._initial_state, self._lifted.monitor_state)
        return self._lifted

    def replace_reducer(self, reducer: ReducerFn) -> LiftedState:
        """Swap the fold function and recompute every staged entry."""
        if not callable(reducer):
            raise InvalidActionError(f"Reducer must be callable, got {type(reducer).__name__}")
        self._reducer = reducer
        return self.recompute_from(0)

    def import_state(self, lifted: LiftedState) -> LiftedState:
        """
        Replace the whole lifted state. The imported cache is trusted as-is.

        Raises:
            SnapshotError: If the snapshot's parallel sequences disagree
        """
        if not isinstance(lifted, LiftedState):
            raise SnapshotError(f"Expected LiftedState, got {type(lifted).__name__}")
        validate_lifted(lifted)
        self._lifted = lifted
        return lifted

    def export_state(self) -> LiftedState:
        return self._lifted


def validate_lifted(lifted: LiftedState) -> None:
    """
    Structural checks on a lifted state built outside the engine.

    Raises:
        SnapshotError: On the first inconsistency found
    """
    staged = lifted.staged_action_ids
    if not staged:
        raise SnapshotError("stagedActionIds must not be empty")
    if len(lifted.computed_states) != len(staged):
        raise SnapshotError(
            f"computedStates has {len(lifted.computed_states)} entries, "
            f"expected {len(staged)}"
        )
    if not 0 <= lifted.current_state_index < len(staged):
        raise SnapshotError(f"currentStateIndex {lifted.current_state_index} out of range")
    missing = [x for x in staged if x not in lifted.actions_by_id]
    if missing:
        raise SnapshotError(f"Staged ids missing from actionsById: {missing}")
    if any(x >= lifted.next_action_id for x in staged):
        raise SnapshotError("nextActionId must be greater than every staged id")
