"""
Tests for the rewind CLI (verify, summary, version).
"""

import json
from dataclasses import replace

import pytest
from typer.testing import CliRunner

from cli.main import app
from rewind.core.state import ComputedEntry
from rewind.history.snapshot import dumps
from rewind.tests.reducers import DECREMENT, INCREMENT, counter_with_bug

runner = CliRunner()

REDUCER_SOURCE = '''
def counter(state, action):
    if action["type"] == "INCREMENT":
        return state + 1
    if action["type"] == "DECREMENT":
        return state - 1
    return state
'''


@pytest.fixture
def reducer_ref(tmp_path):
    path = tmp_path / "reducers.py"
    path.write_text(REDUCER_SOURCE)
    return f"{path}:counter"


@pytest.fixture
def export_file(tmp_path, make_devtools):
    devtools = make_devtools()
    devtools.dispatch_perform(INCREMENT)
    devtools.dispatch_perform(INCREMENT)
    devtools.dispatch_perform(DECREMENT)
    path = tmp_path / "history.json"
    path.write_text(dumps(devtools.export_state()))
    return path, devtools.export_state()


def test_verify_consistent_export(export_file, reducer_ref):
    """An untouched export verifies with exit code 0."""
    path, _ = export_file

    result = runner.invoke(app, ["verify", str(path), "--reducer", reducer_ref, "--json"])

    assert result.exit_code == 0
    out = json.loads(result.stdout)
    assert out["consistent"] is True
    assert out["entries"] == 4


def test_verify_reports_tampered_entry(export_file, reducer_ref, tmp_path):
    """A tampered cached state is reported with exit code 1."""
    _, lifted = export_file
    computed = list(lifted.computed_states)
    computed[2] = ComputedEntry(state=99)
    tampered = tmp_path / "tampered.json"
    tampered.write_text(dumps(replace(lifted, computed_states=tuple(computed))))

    result = runner.invoke(app, ["verify", str(tampered), "-r", reducer_ref, "--json"])

    assert result.exit_code == 1
    out = json.loads(result.stdout)
    assert [m["index"] for m in out["mismatches"]] == [2]
    assert out["mismatches"][0]["expected"]["state"] == 2


def test_verify_rich_output(export_file, reducer_ref):
    """Without --json, verify prints a table."""
    path, _ = export_file

    result = runner.invoke(app, ["verify", str(path), "--reducer", reducer_ref])

    assert result.exit_code == 0
    assert "match a fresh fold" in result.stdout


def test_verify_missing_file(reducer_ref, tmp_path):
    """A missing export file exits with code 2."""
    result = runner.invoke(
        app, ["verify", str(tmp_path / "nope.json"), "--reducer", reducer_ref, "--json"]
    )

    assert result.exit_code == 2
    assert json.loads(result.stdout)["error"] == "Export file not found"


def test_verify_bad_reducer_reference(export_file):
    """An unloadable reducer reference exits with code 2."""
    path, _ = export_file

    result = runner.invoke(app, ["verify", str(path), "--reducer", "no_colon", "--json"])

    assert result.exit_code == 2
    assert "module:function" in json.loads(result.stdout)["error"]


def test_summary_counts_errors(tmp_path, make_devtools):
    """Summary counts reducer errors and interrupted entries."""
    devtools = make_devtools(counter_with_bug)
    devtools.dispatch_perform(INCREMENT)
    devtools.dispatch_perform(DECREMENT)
    devtools.dispatch_perform(INCREMENT)
    devtools.toggle_action(1)
    path = tmp_path / "history.json"
    path.write_text(dumps(devtools.export_state()))

    result = runner.invoke(app, ["summary", str(path), "--json"])

    assert result.exit_code == 0
    out = json.loads(result.stdout)
    assert out["staged"] == 4
    assert out["skipped"] == 1
    assert out["errors"] == 1
    assert out["interrupted"] == 1
    assert out["current_state_index"] == 3


def test_version():
    """Version command prints the package version."""
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "Rewind CLI" in result.stdout
