"""
StoreDevtools: the host-facing facade over one history engine.

Each instance owns its own fold cache, retention policy and subjects, so
several can run side by side in one process.

Usage:
    devtools = create_devtools(counter, initial_state=0, max_age=50)
    devtools.state.subscribe(render)
    devtools.dispatch_perform({"type": "INCREMENT"})
    devtools.jump_to_state(0)
"""

from typing import Any, Callable, Optional

from .config import DevtoolsConfig
from .core import actions as lifted_actions
from .core.clock import Clock
from .core.reducer import ReducerFn
from .core.state import LiftedState
from .gateway.dispatcher import DispatchGateway
from .gateway.subject import Subject
from .history.fold_cache import FoldCache
from .history.retention import RetentionPolicy
from .logging_config import get_logger


class StoreDevtools:
    """
    Record, inspect and rewrite the history of a reducer-driven state.

    Attributes:
        lifted_state: Subject publishing every LiftedState
        state: Subject publishing the unlifted state at the current index
    """

    def __init__(
        self,
        reducer: ReducerFn,
        initial_state: Any = None,
        config: Optional[DevtoolsConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize the engine. The reducer is folded over INIT once.

        Args:
            reducer: Host reducer (state, action) -> state
            initial_state: Committed state at start and after reset()
            config: Devtools options (validated on construction)
            clock: Timestamp source for recorded actions

        Raises:
            ConfigError: If the config is invalid
        """
        self.config = config or DevtoolsConfig()
        self.config.validate()
        self.logger = get_logger(__name__, trace_id=self.config.name)

        self._fold = FoldCache(reducer, initial_state, clock=clock, logger=self.logger)
        self._gateway = DispatchGateway(
            self._fold,
            RetentionPolicy(self.config.max_age, logger=self.logger),
            monitor=self.config.monitor,
            logger=self.logger,
        )

    @property
    def lifted_state(self) -> Subject[LiftedState]:
        return self._gateway.lifted_state

    @property
    def state(self) -> Subject[Any]:
        return self._gateway.state

    @property
    def reducer(self) -> ReducerFn:
        return self._fold.reducer

    def get_lifted_state(self) -> LiftedState:
        return self._fold.lifted

    def get_state(self) -> Any:
        return self._fold.lifted.current_state()

    def subscribe(self, handler: Callable[[Any], None]) -> Callable[[], None]:
        """Subscribe to unlifted state. Returns unsubscribe function."""
        return self.state.subscribe(handler)

    def dispatch(self, action: Any) -> LiftedState:
        """
        Dispatch a lifted action, or a monitor action for anything else.

        Raises:
            InvalidActionError: If the action has no type
        """
        return self._gateway.dispatch(action)

    def dispatch_perform(self, action: Any) -> LiftedState:
        """Record an application action."""
        return self._gateway.dispatch(
            lifted_actions.perform_action(action, self._fold.clock())
        )

    def toggle_action(self, action_id: int) -> LiftedState:
        return self._gateway.dispatch(lifted_actions.toggle_action(action_id))

    def set_actions_active(self, start: int, end: int, active: bool = True) -> LiftedState:
        return self._gateway.dispatch(lifted_actions.set_actions_active(start, end, active))

    def jump_to_state(self, index: int) -> LiftedState:
        return self._gateway.dispatch(lifted_actions.jump_to_state(index))

    def jump_to_action(self, action_id: int) -> LiftedState:
        return self._gateway.dispatch(lifted_actions.jump_to_action(action_id))

    def commit(self) -> LiftedState:
        return self._gateway.dispatch(lifted_actions.commit())

    def rollback(self) -> LiftedState:
        return self._gateway.dispatch(lifted_actions.rollback())

    def reset(self) -> LiftedState:
        return self._gateway.dispatch(lifted_actions.reset())

    def sweep(self) -> LiftedState:
        return self._gateway.dispatch(lifted_actions.sweep())

    def import_state(self, next_lifted_state: Any) -> LiftedState:
        """Replace history with a LiftedState or its wire document."""
        return self._gateway.dispatch(lifted_actions.import_state(next_lifted_state))

    def export_state(self) -> LiftedState:
        return self._fold.export_state()

    def replace_reducer(self, reducer: ReducerFn) -> LiftedState:
        """Hot-swap the reducer; all staged history is refolded."""
        return self._gateway.dispatch(lifted_actions.replace_reducer(reducer))

    def configure(self, max_age: Optional[int] = None) -> LiftedState:
        """
        Change the retention bound and apply it immediately.

        Raises:
            ConfigError: If max_age is invalid (nothing changes)
        """
        policy = RetentionPolicy(max_age, logger=self.logger)
        self.config = DevtoolsConfig(
            max_age=max_age, monitor=self.config.monitor, name=self.config.name
        )
        return self._gateway.reconfigure(policy)


def create_devtools(
    reducer: ReducerFn,
    initial_state: Any = None,
    clock: Optional[Clock] = None,
    **options: Any,
) -> StoreDevtools:
    """
    Build StoreDevtools from keyword options.

    Example:
        create_devtools(counter, 0, max_age=25, name="counter")
    """
    return StoreDevtools(reducer, initial_state, DevtoolsConfig(**options), clock=clock)
