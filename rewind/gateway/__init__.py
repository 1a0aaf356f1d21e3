"""
Dispatch gateway and state publishing.
"""

from .dispatcher import DispatchGateway
from .subject import Subject

__all__ = [
    "DispatchGateway",
    "Subject",
]
