"""
Synchronous publish/subscribe for lifted and unlifted state.

A Subject remembers the last published value; new subscribers receive it
immediately, then every later publish in order.

Usage:
    subject = Subject(initial)
    unsubscribe = subject.subscribe(print)
    subject.publish(next_value)
    unsubscribe()
"""

import logging
from typing import Any, Callable, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")
Handler = Callable[[Any], None]
Logger = Union[logging.Logger, logging.LoggerAdapter]

_EMPTY = object()


class Subject(Generic[T]):
    """Value holder with fan-out to subscribers."""

    def __init__(self, initial: Any = _EMPTY, logger: Optional[Logger] = None) -> None:
        self._value = initial
        self._subscribers: List[Handler] = []
        self._logger = logger or logging.getLogger(__name__)

    @property
    def value(self) -> T:
        """
        Last published value.

        Raises:
            LookupError: If nothing was published yet
        """
        if self._value is _EMPTY:
            raise LookupError("Subject has no value yet")
        return self._value  # type: ignore[return-value]

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        """Subscribe and receive the current value. Returns unsubscribe function."""
        self._subscribers.append(handler)
        if self._value is not _EMPTY:
            self._deliver(handler, self._value)

        def unsubscribe() -> None:
            if handler in self._subscribers:
                self._subscribers.remove(handler)

        return unsubscribe

    def publish(self, value: T) -> None:
        """
        Store value and fan out to all subscribers.

        Subscriber errors are logged but don't stop other subscribers.
        """
        self._value = value
        for handler in list(self._subscribers):
            self._deliver(handler, value)

    def _deliver(self, handler: Handler, value: Any) -> None:
        try:
            handler(value)
        except Exception as e:
            self._logger.error(f"Subscriber {handler!r} failed: {e}", exc_info=e)

    def __len__(self) -> int:
        return len(self._subscribers)
