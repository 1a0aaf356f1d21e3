import pytest

from rewind import DevtoolsConfig, StoreDevtools
from rewind.core.clock import DeterministicClock
from rewind.tests.reducers import counter


@pytest.fixture
def make_devtools():
    """Build StoreDevtools with a deterministic clock and initial state 0."""

    def _make(reducer=counter, initial_state=0, **options):
        return StoreDevtools(
            reducer,
            initial_state,
            DevtoolsConfig(**options),
            clock=DeterministicClock(start=1000),
        )

    return _make
