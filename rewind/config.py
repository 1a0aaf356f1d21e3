"""
Devtools configuration.

Environment Variables:
    REWIND_MAX_AGE: Max staged entries before auto-commit ("", "inf" = unbounded)
    REWIND_NAME: Instance name, used as trace_id in logs - default: rewind
"""

import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .core.errors import ConfigError

# (monitor_state, lifted_action) -> monitor_state
MonitorFn = Callable[[Any, Any], Any]


def validate_max_age(max_age: Optional[int]) -> None:
    """
    Raises:
        ConfigError: If max_age is set and is not an int >= 2
    """
    if max_age is None:
        return
    if isinstance(max_age, bool) or not isinstance(max_age, int):
        raise ConfigError(f"Devtools 'max_age' must be an integer, got {max_age!r}")
    if max_age < 2:
        raise ConfigError(f"Devtools 'max_age' cannot be less than 2, got {max_age}")


@dataclass(frozen=True)
class DevtoolsConfig:
    """
    Immutable devtools options.

    Fields:
        max_age: Max staged entries (INIT included) before auto-commit, None = unbounded
        monitor: Reducer for the monitor side-channel, None = no monitor state
        name: Instance name for logs
    """
    max_age: Optional[int] = None
    monitor: Optional[MonitorFn] = None
    name: str = "rewind"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        validate_max_age(self.max_age)
        if self.monitor is not None and not callable(self.monitor):
            raise ConfigError("Devtools 'monitor' must be callable")

    @classmethod
    def from_env(cls, **overrides: Any) -> "DevtoolsConfig":
        """Build config from REWIND_* environment variables; keyword overrides win."""
        values: dict = {
            "max_age": _env_max_age("REWIND_MAX_AGE"),
            "name": os.getenv("REWIND_NAME") or "rewind",
        }
        values.update(overrides)
        return cls(**values)


def _env_max_age(key: str) -> Optional[int]:
    val = (os.getenv(key) or "").strip()
    if not val or val.lower() in ("inf", "infinity", "none"):
        return None
    try:
        return int(val)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {val!r}") from None
