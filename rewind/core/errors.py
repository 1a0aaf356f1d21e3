"""
Exception types for the lifted-state engine.
"""

import traceback


# Stored on entries downstream of a failing reducer call; never raised.
INTERRUPTED_ERROR = "Interrupted by an error up the chain"


class RewindError(Exception):
    """Base class for all engine errors."""
    pass


class InvalidActionError(RewindError):
    """Raised when an action is malformed (undefined type, bad lifted payload)."""
    pass


class ConfigError(RewindError):
    """Raised when devtools configuration is invalid."""
    pass


class SnapshotError(RewindError):
    """Raised when an exported lifted-state document cannot be decoded."""
    pass


class ReentrantDispatchError(RewindError):
    """Raised when dispatch is called while another dispatch is in progress."""
    pass


class ReducerError(RewindError):
    """
    Captured exception thrown by the host reducer during a fold.

    Never raised out of the engine. The description is stored on the
    computed entry and logged.
    """

    def __init__(self, cause: BaseException, action_type=None) -> None:
        super().__init__(str(cause))
        self.cause = cause
        self.action_type = action_type

    @property
    def description(self) -> str:
        """Formatted traceback, ending with "ExcType: message"."""
        lines = traceback.format_exception(type(self.cause), self.cause, self.cause.__traceback__)
        return "".join(lines).rstrip()
