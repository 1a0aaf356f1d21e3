"""
History commands: verify, summary

Both read a lifted-state document written by rewind.history.snapshot.dumps.
"""

import importlib
import importlib.util
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from rewind.core.errors import INTERRUPTED_ERROR, RewindError
from rewind.core.state import ComputedEntry, LiftedState
from rewind.history import compute_lifted_hash, loads, recompute_states

console = Console()


def load_reducer(ref: str) -> Any:
    """
    Resolve "module:attr" or "path/to/file.py:attr" to a reducer callable.

    Raises:
        ValueError: If the reference is malformed or not callable
    """
    module_ref, sep, attr = ref.rpartition(":")
    if not sep or not module_ref or not attr:
        raise ValueError(f"Reducer must be given as module:function, got {ref!r}")

    if module_ref.endswith(".py"):
        path = Path(module_ref).resolve()
        spec = importlib.util.spec_from_file_location(path.stem, str(path))
        if spec is None or spec.loader is None:
            raise ValueError(f"Cannot load reducer module from {module_ref}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    else:
        module = importlib.import_module(module_ref)

    reducer = getattr(module, attr, None)
    if not callable(reducer):
        raise ValueError(f"{ref!r} is not a callable reducer")
    return reducer


def _error_kind(error: Optional[str]) -> Optional[str]:
    # Tracebacks embed file paths; compare only the final "ExcType: message" line.
    if error is None:
        return None
    if error == INTERRUPTED_ERROR:
        return error
    return error.strip().splitlines()[-1]


def find_mismatches(lifted: LiftedState, reducer: Any) -> List[Dict[str, Any]]:
    """Refold staged history from the committed state and diff against the cache."""
    fresh = recompute_states(
        (),
        0,
        reducer,
        lifted.committed_state,
        lifted.actions_by_id,
        lifted.staged_action_ids,
        lifted.skipped_action_ids,
    )
    mismatches = []
    for index, (cached, expected) in enumerate(zip(lifted.computed_states, fresh)):
        if cached.state != expected.state or _error_kind(cached.error) != _error_kind(expected.error):
            mismatches.append({
                "index": index,
                "action_id": lifted.staged_action_ids[index],
                "cached": _entry_doc(cached),
                "expected": _entry_doc(expected),
            })
    return mismatches


def _entry_doc(entry: ComputedEntry) -> Dict[str, Any]:
    return {"state": entry.state, "error": _error_kind(entry.error)}


def _load_export(path: str) -> LiftedState:
    return loads(Path(path).read_text(encoding="utf-8"))


def _fail(message: str, json_output: bool, **extra: Any) -> None:
    if json_output:
        print(json.dumps({"error": message, **extra}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(2)


def verify_command(
    export_path: str = typer.Argument(..., help="Exported lifted-state JSON file"),
    reducer_ref: str = typer.Option(..., "--reducer", "-r", help="Reducer as module:function"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Refold an exported history and check its cached states.

    Exit codes: 0 consistent, 1 mismatches found, 2 load error.

    Examples:
        rewind verify history.json --reducer app.reducers:counter
        rewind verify history.json -r ./reducers.py:counter --json
    """
    try:
        lifted = _load_export(export_path)
        reducer = load_reducer(reducer_ref)
    except FileNotFoundError:
        _fail("Export file not found", json_output, path=export_path)
    except (RewindError, ValueError, ImportError) as e:
        _fail(str(e), json_output)

    mismatches = find_mismatches(lifted, reducer)

    if json_output:
        print(json.dumps({
            "consistent": not mismatches,
            "entries": len(lifted.computed_states),
            "mismatches": mismatches,
        }, indent=2, default=repr))
    elif not mismatches:
        console.print(
            f"[green]✓ {len(lifted.computed_states)} cached entries match a fresh fold[/green]"
        )
    else:
        table = Table(title="Cache Mismatches")
        table.add_column("Index", style="cyan", justify="right")
        table.add_column("Action ID", style="cyan", justify="right")
        table.add_column("Cached", style="red")
        table.add_column("Expected", style="green")
        for m in mismatches:
            table.add_row(str(m["index"]), str(m["action_id"]), repr(m["cached"]), repr(m["expected"]))
        console.print(table)

    raise typer.Exit(1 if mismatches else 0)


def summary_command(
    export_path: str = typer.Argument(..., help="Exported lifted-state JSON file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show counts for an exported history.

    Examples:
        rewind summary history.json
        rewind summary history.json --json
    """
    try:
        lifted = _load_export(export_path)
    except FileNotFoundError:
        _fail("Export file not found", json_output, path=export_path)
    except RewindError as e:
        _fail(str(e), json_output)

    errors = sum(1 for e in lifted.computed_states if e.error and e.error != INTERRUPTED_ERROR)
    interrupted = sum(1 for e in lifted.computed_states if e.error == INTERRUPTED_ERROR)
    summary = {
        "staged": len(lifted.staged_action_ids),
        "skipped": len(lifted.skipped_action_ids),
        "errors": errors,
        "interrupted": interrupted,
        "current_state_index": lifted.current_state_index,
        "next_action_id": lifted.next_action_id,
        "lifted_hash": compute_lifted_hash(lifted),
    }

    if json_output:
        print(json.dumps(summary, indent=2))
    else:
        table = Table(show_header=False, box=None)
        for key, value in summary.items():
            table.add_row(f"[bold]{key}[/bold]", str(value))
        console.print(table)
