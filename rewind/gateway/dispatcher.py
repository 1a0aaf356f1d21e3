"""
Dispatch gateway: the single entry point for incoming actions.

Lifted actions are routed to the fold cache and retention policy. Anything
else is a monitor action: it only reaches the monitor reducer and never
touches the action log or the computed states.
"""

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..core import actions as lifted_actions
from ..core.actions import get_action_type, is_lifted_action, validate_action
from ..core.errors import InvalidActionError, ReentrantDispatchError
from ..core.state import LiftedState
from ..config import MonitorFn
from ..history.fold_cache import FoldCache
from ..history.retention import RetentionPolicy
from ..history.snapshot import from_document
from .subject import Subject

Logger = Union[logging.Logger, logging.LoggerAdapter]


def _payload(action: Mapping[str, Any], key: str) -> Any:
    try:
        return action[key]
    except KeyError:
        raise InvalidActionError(
            f"Lifted action {action.get('type')!r} requires field {key!r}"
        ) from None


class DispatchGateway:
    """
    Classifies, validates and applies actions, then publishes the result.

    Publishing order after every dispatch: lifted state first, then the
    unlifted state at the current index. Dispatching again before that
    publish finishes raises ReentrantDispatchError.
    """

    def __init__(
        self,
        fold: FoldCache,
        policy: RetentionPolicy,
        monitor: Optional[MonitorFn] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self.fold = fold
        self.policy = policy
        self.monitor = monitor
        self.logger = logger or logging.getLogger(__name__)
        self._dispatching = False

        self.lifted_state: Subject[LiftedState] = Subject(fold.lifted, logger=self.logger)
        self.state: Subject[Any] = Subject(fold.lifted.current_state(), logger=self.logger)

        self._handlers: Dict[str, Callable[[Mapping[str, Any]], None]] = {
            lifted_actions.PERFORM_ACTION: self._perform,
            lifted_actions.RESET: lambda a: self.fold.reset(),
            lifted_actions.ROLLBACK: lambda a: self.fold.rollback(),
            lifted_actions.COMMIT: lambda a: self.fold.commit(),
            lifted_actions.SWEEP: lambda a: self.fold.sweep(),
            lifted_actions.TOGGLE_ACTION: self._toggle,
            lifted_actions.SET_ACTIONS_ACTIVE: self._set_actions_active,
            lifted_actions.JUMP_TO_STATE: lambda a: self.fold.jump_to_state(_payload(a, "index")),
            lifted_actions.JUMP_TO_ACTION: lambda a: self.fold.jump_to_action(_payload(a, "action_id")),
            lifted_actions.IMPORT_STATE: self._import,
            lifted_actions.REPLACE_REDUCER: self._replace_reducer,
        }

    def dispatch(self, action: Any) -> LiftedState:
        """
        Apply one action and publish.

        Raises:
            InvalidActionError: If the action has no type or a lifted payload is malformed
            ReentrantDispatchError: If called while another dispatch is running
        """
        if self._dispatching:
            raise ReentrantDispatchError("Actions may not be dispatched during a dispatch")
        validate_action(action)

        self._dispatching = True
        try:
            if is_lifted_action(action):
                self.logger.debug(f"Lifted action {action['type']}")
                self._handlers[action["type"]](action)
            else:
                self.logger.debug(f"Monitor action {get_action_type(action)!r}")
            self._update_monitor(action)
            self.publish()
        finally:
            self._dispatching = False
        return self.fold.lifted

    def reconfigure(self, policy: RetentionPolicy) -> LiftedState:
        """Swap the retention policy and apply it to current history."""
        if self._dispatching:
            raise ReentrantDispatchError("Cannot reconfigure during dispatch")
        self._dispatching = True
        try:
            self.policy = policy
            self._retain()
            self.publish()
        finally:
            self._dispatching = False
        return self.fold.lifted

    def publish(self) -> None:
        lifted = self.fold.lifted
        self.lifted_state.publish(lifted)
        self.state.publish(lifted.current_state())

    def _retain(self) -> None:
        lifted = self.fold.lifted
        retained = self.policy.apply(lifted)
        if retained is not lifted:
            self.fold.adopt(retained)

    def _perform(self, action: Mapping[str, Any]) -> None:
        inner = _payload(action, "action")
        validate_action(inner)
        self.fold.append(inner, action.get("timestamp"))
        self._retain()

    def _toggle(self, action: Mapping[str, Any]) -> None:
        self.fold.toggle_action(_payload(action, "id"))
        self._retain()

    def _set_actions_active(self, action: Mapping[str, Any]) -> None:
        self.fold.set_actions_active(
            _payload(action, "start"),
            _payload(action, "end"),
            bool(action.get("active", True)),
        )
        self._retain()

    def _import(self, action: Mapping[str, Any]) -> None:
        next_lifted = _payload(action, "next_lifted_state")
        if isinstance(next_lifted, Mapping):
            next_lifted = from_document(dict(next_lifted))
        self.fold.import_state(next_lifted)
        self.logger.info(
            f"Imported lifted state with {len(next_lifted.staged_action_ids)} staged entries"
        )

    def _replace_reducer(self, action: Mapping[str, Any]) -> None:
        self.fold.replace_reducer(_payload(action, "reducer"))
        self._retain()

    def _update_monitor(self, action: Any) -> None:
        if self.monitor is None:
            return
        lifted = self.fold.lifted
        try:
            monitor_state = self.monitor(lifted.monitor_state, action)
        except Exception as e:
            self.logger.error(
                f"Monitor reducer failed on {get_action_type(action)!r}: {e}", exc_info=e
            )
            return
        if monitor_state is not lifted.monitor_state:
            self.fold.adopt(replace(lifted, monitor_state=monitor_state))
