"""
In-memory host adapter implementing the router ports.
"""

from stickystate.infrastructure.host.hooks import (
    EventType,
    PathType,
    RegisteredHook,
    TransitionService,
)
from stickystate.infrastructure.host.router import Router
from stickystate.infrastructure.host.transition import Transition

__all__ = [
    "EventType",
    "PathType",
    "RegisteredHook",
    "Router",
    "Transition",
    "TransitionService",
]
