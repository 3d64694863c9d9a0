"""
Infrastructure layer for sticky state trees.

Contains the in-memory host router used by tests and the CLI.
"""

from stickystate.infrastructure.host import (
    Router,
    Transition,
    TransitionService,
)

__all__ = [
    "Router",
    "Transition",
    "TransitionService",
]
