"""
Domain models for sticky state trees.

These are pure data structures describing the state arena, the paths through
it and the classification of a transition. All models are immutable (frozen
dataclasses) so a computed diff can be handed to the host without copying.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from stickystate.domain.exceptions import TransitionRejectedError

if TYPE_CHECKING:
    from stickystate.domain.interfaces import TransitionInterface

# Called as hook(transition, state)
StateHook = Callable[..., Any]


# =============================================================================
# STATE ARENA
# =============================================================================


@dataclass(frozen=True)
class StateDeclaration:
    """Input record for registering a state in a StateTree."""

    name: str
    parent: str | None = None  # Derived from the dotted name when omitted
    sticky: bool = False
    params: tuple[str, ...] = ()
    on_inactivate: StateHook | None = None
    on_reactivate: StateHook | None = None


@dataclass(frozen=True)
class State:
    """
    Node of the static state tree.

    States live in a StateTree arena and refer to their parent by arena
    index. Identity is (index, name); callbacks never take part in equality.
    """

    index: int
    name: str
    parent: int | None
    depth: int  # 1 for root states
    sticky: bool = False
    params: tuple[str, ...] = ()
    on_inactivate: StateHook | None = field(default=None, compare=False)
    on_reactivate: StateHook | None = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.name


# =============================================================================
# PATHS
# =============================================================================


@dataclass(frozen=True)
class PathNode:
    """A (state, parameter values) pair."""

    state: State
    params: tuple[tuple[str, Any], ...] = ()

    @classmethod
    def of(cls, state: State, **values: Any) -> PathNode:
        """Build a node taking the state's declared params from ``values``."""
        return cls(state, tuple((name, values.get(name)) for name in state.params))

    @property
    def param_values(self) -> dict[str, Any]:
        return dict(self.params)

    def same_state(self, other: PathNode) -> bool:
        """True if both nodes refer to the same state, regardless of params."""
        return self.state == other.state

    def __str__(self) -> str:
        if not self.params:
            return self.state.name
        values = ", ".join(f"{k}={v!r}" for k, v in self.params)
        return f"{self.state.name}({values})"


Path = tuple[PathNode, ...]


# =============================================================================
# TREE CHANGES
# =============================================================================

_PATH_KIND_ATTRS = {
    "to": "to_path",
    "from": "from_path",
    "retained": "retained",
    "entering": "entering",
    "exiting": "exiting",
    "inactivating": "inactivating",
    "reactivating": "reactivating",
}


@dataclass(frozen=True)
class TreeChanges:
    """Classification of the nodes touched by one transition."""

    from_path: Path
    to_path: Path
    retained: Path
    entering: Path
    exiting: Path
    inactivating: Path = ()
    reactivating: Path = ()

    def path(self, kind: str) -> Path:
        """
        Return the node sequence for a path kind name.

        Raises:
            KeyError: If the kind is not a known path kind
        """
        if kind not in _PATH_KIND_ATTRS:
            raise KeyError(f"Unknown path kind: {kind}")
        result: Path = getattr(self, _PATH_KIND_ATTRS[kind])
        return result

    def has_changes(self) -> bool:
        """True if anything is created, destroyed, suspended or resumed."""
        return bool(
            self.entering or self.exiting or self.inactivating or self.reactivating
        )

    def names(self) -> dict[str, tuple[str, ...]]:
        """State names per path kind, for logging and rendering."""
        return {
            kind: tuple(node.state.name for node in self.path(kind))
            for kind in _PATH_KIND_ATTRS
        }


@dataclass(frozen=True)
class PendingCommit:
    """
    Registry delta computed by a transition, applied only on its success.

    Entries for ``remove`` states are dropped before ``add`` nodes are
    appended.
    """

    remove: tuple[State, ...] = ()
    add: Path = ()

    @property
    def is_empty(self) -> bool:
        return not self.remove and not self.add


@dataclass(frozen=True)
class StickyDiff:
    """Sticky tree changes plus the deferred registry commit."""

    changes: TreeChanges
    commit: PendingCommit


# =============================================================================
# TRANSITION OUTCOME
# =============================================================================


class TransitionStatus(Enum):
    """Lifecycle outcome of a transition."""

    PENDING = "pending"  # Created, not run yet
    SUCCESS = "success"  # All hooks ran, path committed
    REJECTED = "rejected"  # A hook or the diff computation failed
    IGNORED = "ignored"  # Nothing to change
    ABORTED = "aborted"  # Superseded before running


@dataclass(frozen=True)
class TransitionResult:
    """Result of running a transition."""

    status: TransitionStatus
    transition: TransitionInterface | None = None
    error: Exception | None = None

    @property
    def success(self) -> bool:
        return self.status is TransitionStatus.SUCCESS

    def raise_for_status(self) -> None:
        """
        Raise if the transition was rejected.

        Raises:
            TransitionRejectedError: Wrapping the original error as ``cause``
        """
        if self.status is TransitionStatus.REJECTED:
            raise TransitionRejectedError(
                f"Transition rejected: {self.error}", cause=self.error
            ) from self.error
