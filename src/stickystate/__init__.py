"""
stickystate: Sticky state trees for hierarchical routers.

Keeps branches of a navigation tree suspended instead of destroyed when the
user navigates away, and resumes them when navigation returns. Given the
ordinary retained/entering/exiting diff of a transition, the sticky diff
engine adds the inactivating and reactivating path kinds, evicts orphaned
suspended subtrees and defers every registry change until the transition
succeeds.

Example:
    from stickystate import Router, StateDeclaration, StickyStatesPlugin

    router = Router()
    router.register_state(StateDeclaration("app"))
    router.register_state(StateDeclaration("app.inbox", sticky=True))
    router.register_state(StateDeclaration("app.settings"))
    sticky = router.plugin(StickyStatesPlugin)

    router.go("app.inbox")
    router.go("app.settings")      # app.inbox is inactivated
    router.go("app.inbox")         # app.inbox is reactivated
"""

# Application layer
from stickystate.application.config import (
    ConfigurationError,
    StickyStatesConfig,
    load_config,
)
from stickystate.application.plugin import StickyStatesPlugin

# Domain exceptions
from stickystate.domain.exceptions import (
    ActiveStateEvictionError,
    DuplicateStateError,
    StateNotFoundError,
    StateNotInactiveError,
    StickyStateError,
    TransitionRejectedError,
)

# Domain interfaces (for custom hosts)
from stickystate.domain.interfaces import (
    RouterInterface,
    TransitionInterface,
    TransitionServiceInterface,
)

# Domain models and core algorithms
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

# Infrastructure (in-memory host)
from stickystate.infrastructure.host import Router, Transition, TransitionService

__version__ = "1.0.0"

__all__ = [
    # Version
    "__version__",
    # Domain models
    "State",
    "StateDeclaration",
    "PathNode",
    "TreeChanges",
    "PendingCommit",
    "StickyDiff",
    "TransitionStatus",
    "TransitionResult",
    # Tree, paths and core algorithms
    "StateTree",
    "build_path",
    "compute_tree_changes",
    "InactiveRegistry",
    "StickyDiffEngine",
    # Domain interfaces
    "RouterInterface",
    "TransitionInterface",
    "TransitionServiceInterface",
    # Domain exceptions
    "StickyStateError",
    "StateNotFoundError",
    "StateNotInactiveError",
    "ActiveStateEvictionError",
    "DuplicateStateError",
    "TransitionRejectedError",
    # Application layer
    "StickyStatesPlugin",
    "StickyStatesConfig",
    "ConfigurationError",
    "load_config",
    # Infrastructure
    "Router",
    "Transition",
    "TransitionService",
]
