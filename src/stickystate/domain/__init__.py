"""
Domain layer for sticky state trees.

Contains the state arena, the diff algorithms and the inactive registry,
with no dependencies on the host adapter or the application layer.
"""

from stickystate.domain.eviction import EvictionController
from stickystate.domain.exceptions import (
    ActiveStateEvictionError,
    DuplicateStateError,
    StateNotFoundError,
    StateNotInactiveError,
    StickyStateError,
    TransitionRejectedError,
)
from stickystate.domain.interfaces import (
    RouterInterface,
    TransitionInterface,
    TransitionServiceInterface,
)
from stickystate.domain.models import (
    PathNode,
    PendingCommit,
    State,
    StateDeclaration,
    StickyDiff,
    TransitionResult,
    TransitionStatus,
    TreeChanges,
)
from stickystate.domain.paths import build_path, compute_tree_changes
from stickystate.domain.registry import InactiveRegistry
from stickystate.domain.sticky import StickyDiffEngine
from stickystate.domain.tree import StateTree

__all__ = [
    # Models
    "State",
    "StateDeclaration",
    "PathNode",
    "TreeChanges",
    "PendingCommit",
    "StickyDiff",
    "TransitionStatus",
    "TransitionResult",
    # Tree and paths
    "StateTree",
    "build_path",
    "compute_tree_changes",
    # Sticky core
    "InactiveRegistry",
    "EvictionController",
    "StickyDiffEngine",
    # Interfaces
    "TransitionInterface",
    "TransitionServiceInterface",
    "RouterInterface",
    # Exceptions
    "StickyStateError",
    "StateNotFoundError",
    "StateNotInactiveError",
    "ActiveStateEvictionError",
    "DuplicateStateError",
    "TransitionRejectedError",
]
