"""
Wire format for exported lifted state.

A lifted state crosses process boundaries as a plain JSON document:

    {
      "actionsById": {"0": {...}, "1": {...}},
      "nextActionId": 2,
      "stagedActionIds": [0, 1],
      "skippedActionIds": [],
      "committedState": ...,
      "currentStateIndex": 1,
      "computedStates": [{"state": ...}, {"state": ..., "error": "..."}],
      "monitorState": null
    }

JSON object keys are strings, so action ids are stringified on the way out
and parsed back to int on the way in.
"""

import hashlib
import json
from typing import Any, Dict

from ..core.canonical import canonical_json_bytes
from ..core.errors import SnapshotError
from ..core.state import ComputedEntry, LiftedState
from .fold_cache import validate_lifted


def to_document(lifted: LiftedState) -> Dict[str, Any]:
    """Convert a LiftedState to its plain wire document."""
    computed = []
    for entry in lifted.computed_states:
        doc: Dict[str, Any] = {"state": entry.state}
        if entry.error is not None:
            doc["error"] = entry.error
        computed.append(doc)

    return {
        "actionsById": {str(k): dict(v) for k, v in lifted.actions_by_id.items()},
        "nextActionId": lifted.next_action_id,
        "stagedActionIds": list(lifted.staged_action_ids),
        "skippedActionIds": list(lifted.skipped_action_ids),
        "committedState": lifted.committed_state,
        "currentStateIndex": lifted.current_state_index,
        "computedStates": computed,
        "monitorState": lifted.monitor_state,
    }


def from_document(data: Dict[str, Any]) -> LiftedState:
    """
    Rebuild a LiftedState from a wire document.

    Raises:
        SnapshotError: If a field is missing, mistyped, or inconsistent
    """
    if not isinstance(data, dict):
        raise SnapshotError(f"Lifted state document must be an object, got {type(data).__name__}")
    try:
        lifted = LiftedState(
            actions_by_id={int(k): dict(v) for k, v in data["actionsById"].items()},
            next_action_id=int(data["nextActionId"]),
            staged_action_ids=tuple(int(x) for x in data["stagedActionIds"]),
            skipped_action_ids=tuple(int(x) for x in data.get("skippedActionIds", [])),
            committed_state=data.get("committedState"),
            current_state_index=int(data["currentStateIndex"]),
            computed_states=tuple(
                ComputedEntry(state=e.get("state"), error=e.get("error"))
                for e in data["computedStates"]
            ),
            monitor_state=data.get("monitorState"),
        )
    except KeyError as e:
        raise SnapshotError(f"Lifted state document missing field {e}") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise SnapshotError(f"Malformed lifted state document: {e}") from e

    validate_lifted(lifted)
    return lifted


def dumps(lifted: LiftedState, indent: Any = None) -> str:
    """
    Serialize to JSON (canonical key order).

    Raises:
        SnapshotError: If states or actions are not JSON-serializable
    """
    try:
        if indent is None:
            return canonical_json_bytes(to_document(lifted)).decode("utf-8")
        return json.dumps(json.loads(canonical_json_bytes(to_document(lifted))), indent=indent)
    except TypeError as e:
        raise SnapshotError(f"Lifted state is not JSON-serializable: {e}") from e


def loads(text: str) -> LiftedState:
    """Deserialize from JSON produced by dumps()."""
    try:
        data = json.loads(text)
    except ValueError as e:
        raise SnapshotError(f"Invalid JSON: {e}") from e
    return from_document(data)


def compute_lifted_hash(lifted: LiftedState) -> str:
    """
    SHA-256 of the canonical wire document.

    Two exports of the same history hash the same regardless of dict order.
    """
    try:
        return hashlib.sha256(canonical_json_bytes(to_document(lifted))).hexdigest()
    except TypeError as e:
        raise SnapshotError(f"Lifted state is not JSON-serializable: {e}") from e
