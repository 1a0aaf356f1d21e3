"""
Retention policy: bound staged history by auto-committing the oldest actions.

An action is only folded into the committed state when its entry has no
error, so a failing action stays inspectable until the reducer is fixed
or the action is skipped.
"""

import logging
from dataclasses import replace
from typing import Optional, Union

from ..core.state import LiftedState
from ..config import validate_max_age

Logger = Union[logging.Logger, logging.LoggerAdapter]


def commit_excess(lifted: LiftedState, n: int) -> LiftedState:
    """
    Commit up to n of the oldest non-INIT actions.

    Stops at the first entry carrying an error; everything before it is
    committed. The current index shifts down with the history, never below 0.

    Returns:
        The same object when nothing could be committed
    """
    staged = lifted.staged_action_ids
    computed = lifted.computed_states

    excess = 0
    for i in range(1, min(n, len(staged) - 1) + 1):
        if computed[i].error:
            break
        excess = i

    if excess == 0:
        return lifted

    removed = frozenset(staged[1:excess + 1])
    current = lifted.current_state_index

    return replace(
        lifted,
        actions_by_id={k: v for k, v in lifted.actions_by_id.items() if k not in removed},
        staged_action_ids=(staged[0],) + staged[excess + 1:],
        skipped_action_ids=tuple(x for x in lifted.skipped_action_ids if x not in removed),
        committed_state=computed[excess].state,
        computed_states=computed[excess:],
        current_state_index=current - excess if current > excess else 0,
    )


class RetentionPolicy:
    """
    maxAge auto-commit.

    Usage:
        policy = RetentionPolicy(max_age=50)
        lifted = policy.apply(lifted)
    """

    def __init__(self, max_age: Optional[int] = None, logger: Optional[Logger] = None) -> None:
        """
        Args:
            max_age: Upper bound on staged entries (INIT included), None = unbounded

        Raises:
            ConfigError: If max_age is not None and not an int >= 2
        """
        validate_max_age(max_age)
        self.max_age = max_age
        self.logger = logger or logging.getLogger(__name__)

    def excess(self, lifted: LiftedState) -> int:
        if self.max_age is None:
            return 0
        return max(len(lifted.staged_action_ids) - self.max_age, 0)

    def apply(self, lifted: LiftedState) -> LiftedState:
        """Commit as many excess actions as errors allow."""
        excess = self.excess(lifted)
        if excess == 0:
            return lifted

        result = commit_excess(lifted, excess)
        committed = len(lifted.staged_action_ids) - len(result.staged_action_ids)
        if committed:
            self.logger.info(
                f"Auto-committed {committed} action(s), max_age={self.max_age}"
            )
        if committed < excess:
            self.logger.debug(
                f"Auto-commit blocked by error at staged position {committed + 1}"
            )
        return result
