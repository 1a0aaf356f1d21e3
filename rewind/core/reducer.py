"""
Reducer: pure state transition function supplied by the host.

The engine only needs a callable (state, action) -> state. Reducer is a
convenience registry that builds one from per-type handlers.
"""

from typing import Any, Callable, Dict

from .actions import get_action_type

# (state, action) -> new_state. May raise; the fold captures the exception.
ReducerFn = Callable[[Any, Any], Any]


class Reducer:
    """
    Registry of action handlers.

    Actions with no registered handler leave the state unchanged, so
    the engine's INIT action and unrelated actions pass through.

    Usage:
        reducer = Reducer()
        reducer.register("INCREMENT", lambda state, action: state + 1)
        new_state = reducer(state, {"type": "INCREMENT"})
    """

    def __init__(self) -> None:
        self._handlers: Dict[Any, ReducerFn] = {}

    def register(self, action_type: Any, handler: ReducerFn) -> "Reducer":
        """
        Register handler for an action type.

        Args:
            action_type: Action type tag
            handler: Pure function (state, action) -> new_state

        Returns:
            self, so registrations can be chained
        """
        self._handlers[action_type] = handler
        return self

    def handles(self, action_type: Any) -> bool:
        return action_type in self._handlers

    def __call__(self, state: Any, action: Any) -> Any:
        handler = self._handlers.get(get_action_type(action))
        if handler is None:
            return state
        return handler(state, action)
