"""
Domain interfaces (Ports) for the host router.

The sticky extension does not run transitions itself. These abstract base
classes describe what it needs from the host pipeline: a transition with
mutable tree changes and a success callback, a hook registration facility
that accepts custom path kinds and events, and a router to start new
transitions from.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stickystate.domain.models import (
        Path,
        State,
        StateDeclaration,
        TransitionResult,
        TreeChanges,
    )
    from stickystate.domain.tree import StateTree

HookCriteria = Mapping[str, Any]
Deregister = Callable[[], None]


class TransitionInterface(ABC):
    """
    Port for a single proposed navigation.

    Note (Commit discipline):
        Callbacks registered with on_success() must run at most once, and
        only after the host has committed the transition. A rejected or
        superseded transition never runs them.
    """

    @abstractmethod
    def tree_changes(self) -> "TreeChanges":
        """
        Current classification of the transition's nodes.

        Returns:
            The ordinary diff, or the diff installed by set_tree_changes()
        """
        pass

    @abstractmethod
    def set_tree_changes(self, changes: "TreeChanges") -> None:
        """
        Replace the transition's classification.

        Args:
            changes: Tree changes seen by every later pipeline stage
        """
        pass

    @abstractmethod
    def options(self) -> Mapping[str, Any]:
        """
        Options bag of the transition.

        Contains at least ``reload_state`` (State or None) and any defaults
        registered through TransitionServiceInterface.add_default_option().
        """
        pass

    @abstractmethod
    def on_success(self, callback: Callable[[], None]) -> None:
        """
        Register a callback to run once the transition has succeeded.

        Args:
            callback: Zero-argument callable
        """
        pass


class TransitionServiceInterface(ABC):
    """Port for hook registration and pipeline extension."""

    @abstractmethod
    def define_path_type(self, name: str, scope: str = "state") -> None:
        """
        Make a new path kind available to events and hook criteria.

        Args:
            name: Path kind name, matching a TreeChanges path kind
            scope: "state" (hooks run per node) or "transition" (once)
        """
        pass

    @abstractmethod
    def define_event(
        self,
        name: str,
        priority: int,
        path_type: str,
        reverse_sort: bool = False,
    ) -> None:
        """
        Define a lifecycle event fired once per node of a path kind.

        Args:
            name: Event name used with on()
            priority: Events run in ascending priority order
            path_type: Path kind the event iterates
            reverse_sort: Iterate the path leaf first
        """
        pass

    @abstractmethod
    def on(
        self,
        event: str,
        criteria: HookCriteria,
        callback: Callable[..., Any],
        priority: int = 0,
    ) -> Deregister:
        """
        Register a hook for an event.

        Args:
            event: Event name
            criteria: Path kind name -> state name, predicate or True
            callback: Called with (transition, state)
            priority: Higher priority hooks run first within a node

        Returns:
            Callable that deregisters the hook
        """
        pass

    @abstractmethod
    def on_create(self, callback: Callable[[Any], None]) -> Deregister:
        """
        Register a hook run synchronously when a transition is created.

        An exception raised by the callback rejects the transition.
        """
        pass

    @abstractmethod
    def add_default_option(self, name: str, value: Any) -> None:
        """Register a default value for a transition option."""
        pass


class RouterInterface(ABC):
    """Port for the host router owning the state tree and current path."""

    @property
    @abstractmethod
    def tree(self) -> "StateTree":
        """The state arena."""
        pass

    @property
    @abstractmethod
    def transition_service(self) -> TransitionServiceInterface:
        """Hook registration facility."""
        pass

    @property
    @abstractmethod
    def current_path(self) -> "Path":
        """The committed active path, root to leaf."""
        pass

    @abstractmethod
    def register_state(self, declaration: "StateDeclaration") -> "State":
        """Add a state to the tree."""
        pass

    @abstractmethod
    def go(
        self,
        target: "State | str | None",
        params: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> "TransitionResult":
        """
        Create and run a transition to ``target`` (None: the empty path).

        Returns:
            TransitionResult describing the outcome
        """
        pass
