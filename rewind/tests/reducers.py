"""
Reducers shared by the test suite.
"""


def counter(state, action):
    if action["type"] == "INCREMENT":
        return state + 1
    if action["type"] == "DECREMENT":
        return state - 1
    return state


def counter_with_bug(state, action):
    if action["type"] == "INCREMENT":
        return state + 1
    if action["type"] == "DECREMENT":
        return mistake - 1  # noqa: F821
    return state


def counter_with_another_bug(state, action):
    if action["type"] == "INCREMENT":
        return mistake + 1  # noqa: F821
    if action["type"] == "DECREMENT":
        return state - 1
    return state


def double_counter(state, action):
    if action["type"] == "INCREMENT":
        return state + 2
    if action["type"] == "DECREMENT":
        return state - 2
    return state


class CountingReducer:
    """Reducer that only counts how often it is called."""

    def __init__(self):
        self.calls = 0

    def __call__(self, state, action):
        self.calls += 1
        return self.calls


INCREMENT = {"type": "INCREMENT"}
DECREMENT = {"type": "DECREMENT"}
