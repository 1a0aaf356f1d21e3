"""
Rewind: time-travel history for reducer-driven state.

Every action is recorded, every intermediate state can be reconstructed,
and history can be skipped, jumped, committed, rolled back or imported.
"""

from .devtools import StoreDevtools, create_devtools
from .config import DevtoolsConfig

__version__ = "0.1.0"

__all__ = [
    "StoreDevtools",
    "create_devtools",
    "DevtoolsConfig",
]
