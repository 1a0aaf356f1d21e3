"""
Action records and lifted action creators.

Application actions are opaque tagged records: a mapping with a "type"
key, or any object with a ``type`` attribute. Lifted actions are plain
dicts addressed to the history engine itself.
"""

from typing import Any, Dict, Mapping, Optional

from .errors import InvalidActionError

INIT_ACTION: Dict[str, Any] = {"type": "@@rewind/INIT"}

PERFORM_ACTION = "PERFORM_ACTION"
RESET = "RESET"
ROLLBACK = "ROLLBACK"
COMMIT = "COMMIT"
SWEEP = "SWEEP"
TOGGLE_ACTION = "TOGGLE_ACTION"
SET_ACTIONS_ACTIVE = "SET_ACTIONS_ACTIVE"
JUMP_TO_STATE = "JUMP_TO_STATE"
JUMP_TO_ACTION = "JUMP_TO_ACTION"
IMPORT_STATE = "IMPORT_STATE"
REPLACE_REDUCER = "REPLACE_REDUCER"

LIFTED_ACTION_TYPES = frozenset({
    PERFORM_ACTION,
    RESET,
    ROLLBACK,
    COMMIT,
    SWEEP,
    TOGGLE_ACTION,
    SET_ACTIONS_ACTIVE,
    JUMP_TO_STATE,
    JUMP_TO_ACTION,
    IMPORT_STATE,
    REPLACE_REDUCER,
})

UNDEFINED_TYPE_MESSAGE = (
    'Actions may not have an undefined "type" property. '
    "Have you misspelled a constant?"
)


def get_action_type(action: Any) -> Optional[Any]:
    """Return the action's type tag, or None if it has none."""
    if isinstance(action, Mapping):
        return action.get("type")
    return getattr(action, "type", None)


def validate_action(action: Any) -> None:
    """
    Reject actions without a type tag.

    Raises:
        InvalidActionError: If the action's type is missing or None
    """
    if get_action_type(action) is None:
        raise InvalidActionError(UNDEFINED_TYPE_MESSAGE)


def is_lifted_action(action: Any) -> bool:
    return isinstance(action, Mapping) and action.get("type") in LIFTED_ACTION_TYPES


def perform_action(action: Any, timestamp: int) -> Dict[str, Any]:
    """Wrap an application action for the log."""
    validate_action(action)
    return {"type": PERFORM_ACTION, "action": action, "timestamp": timestamp}


def reset() -> Dict[str, Any]:
    return {"type": RESET}


def rollback() -> Dict[str, Any]:
    return {"type": ROLLBACK}


def commit() -> Dict[str, Any]:
    return {"type": COMMIT}


def sweep() -> Dict[str, Any]:
    return {"type": SWEEP}


def toggle_action(action_id: int) -> Dict[str, Any]:
    return {"type": TOGGLE_ACTION, "id": action_id}


def set_actions_active(start: int, end: int, active: bool = True) -> Dict[str, Any]:
    """Skip or un-skip every action id in range(start, end)."""
    return {"type": SET_ACTIONS_ACTIVE, "start": start, "end": end, "active": active}


def jump_to_state(index: int) -> Dict[str, Any]:
    return {"type": JUMP_TO_STATE, "index": index}


def jump_to_action(action_id: int) -> Dict[str, Any]:
    return {"type": JUMP_TO_ACTION, "action_id": action_id}


def import_state(next_lifted_state: Any) -> Dict[str, Any]:
    return {"type": IMPORT_STATE, "next_lifted_state": next_lifted_state}


def replace_reducer(reducer: Any) -> Dict[str, Any]:
    return {"type": REPLACE_REDUCER, "reducer": reducer}
