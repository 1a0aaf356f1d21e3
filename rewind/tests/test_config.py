"""
Tests for devtools configuration and logging setup.
"""

import json
import logging

import pytest

from rewind import DevtoolsConfig, create_devtools
from rewind.core.errors import ConfigError
from rewind.logging_config import get_logger, setup_logging


def test_defaults():
    """Default config is unbounded and named rewind."""
    config = DevtoolsConfig()

    assert config.max_age is None
    assert config.monitor is None
    assert config.name == "rewind"


def test_from_env(monkeypatch):
    """REWIND_MAX_AGE and REWIND_NAME are read from the environment."""
    monkeypatch.setenv("REWIND_MAX_AGE", "25")
    monkeypatch.setenv("REWIND_NAME", "counter")

    config = DevtoolsConfig.from_env()

    assert config.max_age == 25
    assert config.name == "counter"


@pytest.mark.parametrize("value", ["", "inf", "None"])
def test_from_env_unbounded(monkeypatch, value):
    """Empty, infinite or none REWIND_MAX_AGE means no bound."""
    monkeypatch.setenv("REWIND_MAX_AGE", value)

    assert DevtoolsConfig.from_env().max_age is None


def test_from_env_overrides_win(monkeypatch):
    """Keyword overrides take precedence over the environment."""
    monkeypatch.setenv("REWIND_MAX_AGE", "25")

    assert DevtoolsConfig.from_env(max_age=4).max_age == 4


@pytest.mark.parametrize("value", ["abc", "1"])
def test_from_env_invalid(monkeypatch, value):
    """An invalid REWIND_MAX_AGE raises ConfigError."""
    monkeypatch.setenv("REWIND_MAX_AGE", value)

    with pytest.raises(ConfigError):
        DevtoolsConfig.from_env()


def test_monitor_must_be_callable():
    """A non-callable monitor is rejected."""
    with pytest.raises(ConfigError):
        DevtoolsConfig(monitor="nope")


def test_create_devtools_validates_options():
    """create_devtools validates its options."""
    with pytest.raises(ConfigError, match="cannot be less than 2, got 1"):
        create_devtools(lambda state, action: state, 0, max_age=1)


def test_json_logging_carries_trace_id(monkeypatch, capsys):
    """JSON log lines carry the devtools name as trace_id."""
    monkeypatch.setenv("REWIND_LOG_FORMAT", "json")
    monkeypatch.setenv("REWIND_LOG_LEVEL", "INFO")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging()
        get_logger("rewind.test", trace_id="counter").info("Auto-committed 1 action(s)")
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "Auto-committed 1 action(s)"
    assert record["trace_id"] == "counter"
    assert record["level"] == "INFO"
