"""
StickyStatesPlugin: wires the sticky diff engine into a host router.

Keeps states alive (suspended) while a different branch of the tree is
active, and resumes them when navigation returns.

Example:
    from stickystate import StateDeclaration, StickyStatesPlugin
    from stickystate.infrastructure import Router

    router = Router()
    router.register_state(StateDeclaration("app"))
    router.register_state(StateDeclaration("app.inbox", sticky=True))
    router.register_state(StateDeclaration("app.settings"))
    sticky = router.plugin(StickyStatesPlugin)

    router.go("app.inbox")
    router.go("app.settings")
    sticky.inactives()  # (State(name='app.inbox', ...),)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import partial
from typing import Any

from stickystate.application.config import StickyStatesConfig
from stickystate.domain.interfaces import (
    Deregister,
    RouterInterface,
    TransitionInterface,
)
from stickystate.domain.models import (
    PendingCommit,
    State,
    TransitionResult,
)
from stickystate.domain.registry import InactiveRegistry
from stickystate.domain.sticky import StickyDiffEngine
from stickystate.domain.tree import StateRef

logger = logging.getLogger(__name__)


class StickyStatesPlugin:
    """
    Sticky states extension for a router.

    Owns the inactive registry of its router. Two routers never share
    suspended state unless a registry is passed to both explicitly.
    """

    def __init__(
        self,
        router: RouterInterface,
        config: StickyStatesConfig | None = None,
        registry: InactiveRegistry | None = None,
    ):
        """
        Args:
            router: Host router to extend
            config: Plugin settings (defaults if None)
            registry: Registry of suspended nodes (creates an empty one if None)
        """
        self.router = router
        self.config = config or StickyStatesConfig()
        self.name = self.config.name
        self._registry = registry if registry is not None else InactiveRegistry()
        self._engine = StickyDiffEngine(router.tree, self._registry)
        self._deregister: list[Deregister] = []

        self._define_sticky_paths()
        self._define_sticky_events()
        self._add_create_hook()
        self._add_state_callbacks()
        self._add_default_transition_option()

    @property
    def registry(self) -> InactiveRegistry:
        return self._registry

    def inactives(self) -> tuple[State, ...]:
        """Currently suspended states, in suspension order."""
        return self._registry.states()

    def request_eviction(
        self, states: StateRef | Iterable[StateRef] | None = None
    ) -> TransitionResult:
        """
        Exit inactive sticky state(s).

        Starts a transition to the current state, inheriting its params,
        that tears down the requested suspended subtrees.

        Example:
            sticky.request_eviction("inbox")
            sticky.request_eviction(["inbox", "drafts"])
            sticky.request_eviction()  # every inactive state

        Args:
            states: A state name or State, several of them, or None for all

        Returns:
            The outcome of the eviction transition
        """
        if states is None:
            refs: tuple[StateRef, ...] = self.inactives()
        elif isinstance(states, (str, State)):
            refs = (states,)
        else:
            refs = tuple(states)

        logger.info("Evicting inactive states: %s", ", ".join(map(str, refs)) or "-")
        current = self.router.current_path
        target = current[-1].state if current else None
        return self.router.go(target, {}, inherit=True, exit_sticky=refs)

    def dispose(self) -> None:
        """Deregister every hook this plugin added to the router."""
        for deregister in self._deregister:
            deregister()
        self._deregister.clear()

    # -------------------------------------------------------------------------
    # Host wiring
    # -------------------------------------------------------------------------

    def _define_sticky_paths(self) -> None:
        service = self.router.transition_service
        service.define_path_type("inactivating", scope="state")
        service.define_path_type("reactivating", scope="state")

    def _define_sticky_events(self) -> None:
        service = self.router.transition_service
        service.define_event(
            "on_inactivate",
            self.config.inactivate_priority,
            "inactivating",
            reverse_sort=True,
        )
        service.define_event(
            "on_reactivate", self.config.reactivate_priority, "reactivating"
        )

    def _add_create_hook(self) -> None:
        self._deregister.append(
            self.router.transition_service.on_create(self._calculate_sticky_changes)
        )

    def _add_state_callbacks(self) -> None:
        service = self.router.transition_service
        self._deregister.append(
            service.on(
                "on_inactivate",
                {"inactivating": lambda state: state.on_inactivate is not None},
                lambda trans, state: state.on_inactivate(trans, state),
            )
        )
        self._deregister.append(
            service.on(
                "on_reactivate",
                {"reactivating": lambda state: state.on_reactivate is not None},
                lambda trans, state: state.on_reactivate(trans, state),
            )
        )

    def _add_default_transition_option(self) -> None:
        self.router.transition_service.add_default_option("exit_sticky", ())

    def _calculate_sticky_changes(self, transition: TransitionInterface) -> None:
        diff = self._engine.compute(transition)
        transition.set_tree_changes(diff.changes)
        # Registry changes only once the host reports success
        transition.on_success(partial(self._commit, diff.commit))

    def _commit(self, commit: PendingCommit, *_: Any) -> None:
        self._registry.apply(commit)
        logger.debug(
            "Inactive states: %s",
            ", ".join(s.name for s in self._registry.states()) or "-",
        )
