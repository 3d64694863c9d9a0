"""
In-memory host router.

Owns the state tree, the committed active path and the transition service.
Transitions run synchronously; creating a new transition supersedes a
pending one that has not run yet.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from stickystate.domain.interfaces import RouterInterface
from stickystate.domain.models import (
    Path,
    State,
    StateDeclaration,
    TransitionResult,
)
from stickystate.domain.paths import build_path
from stickystate.domain.tree import StateRef, StateTree
from stickystate.infrastructure.host.hooks import TransitionService
from stickystate.infrastructure.host.transition import Transition

logger = logging.getLogger(__name__)


class Router(RouterInterface):
    """
    Minimal router over a StateTree.

    Example:
        router = Router()
        router.register_state(StateDeclaration("app"))
        router.register_state(StateDeclaration("app.item", params=("id",)))
        router.go("app.item", {"id": 1})
    """

    def __init__(self, tree: StateTree | None = None) -> None:
        """
        Args:
            tree: Existing state arena (creates an empty one if None)
        """
        self._tree = tree if tree is not None else StateTree()
        self._transition_service = TransitionService()
        self._current_path: Path = ()
        self._plugins: dict[str, Any] = {}
        self._pending: Transition | None = None

    @property
    def tree(self) -> StateTree:
        return self._tree

    @property
    def transition_service(self) -> TransitionService:
        return self._transition_service

    @property
    def current_path(self) -> Path:
        return self._current_path

    @property
    def current(self) -> State | None:
        """The active leaf state, or None before the first transition."""
        return self._current_path[-1].state if self._current_path else None

    @property
    def params(self) -> dict[str, Any]:
        """Parameter values of the active path, merged root to leaf."""
        merged: dict[str, Any] = {}
        for node in self._current_path:
            merged.update(node.param_values)
        return merged

    def register_state(self, declaration: StateDeclaration) -> State:
        return self._tree.register(declaration)

    def plugin(self, factory: Callable[..., Any], **kwargs: Any) -> Any:
        """
        Instantiate a plugin with this router and keep it by name.

        Args:
            factory: Plugin class or callable taking the router first
            **kwargs: Extra constructor arguments

        Returns:
            The plugin instance
        """
        instance = factory(self, **kwargs)
        name = getattr(instance, "name", type(instance).__name__)
        self._plugins[name] = instance
        return instance

    def get_plugin(self, name: str) -> Any:
        """
        Raises:
            KeyError: If no plugin with that name is registered
        """
        if name not in self._plugins:
            raise KeyError(f"Plugin not found: {name}")
        return self._plugins[name]

    def create_transition(
        self,
        target: StateRef | None,
        params: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> Transition:
        """
        Build a transition from the current path without running it.

        Args:
            target: Leaf state of the destination, None for the empty path
            params: Parameter values for the destination
            **options: reload (True or a state), inherit, and plugin options

        Returns:
            The pending (or already rejected) Transition

        Raises:
            StateNotFoundError: If ``target`` or ``reload`` does not resolve
        """
        if self._pending is not None:
            self._pending.abort()

        inherit = bool(options.get("inherit", False))
        to_path: Path = ()
        if target is not None:
            to_path = build_path(
                self._tree,
                target,
                params,
                inherit_from=self._current_path if inherit else (),
            )

        reload = options.pop("reload", None)
        if reload is True:
            options["reload_state"] = to_path[0].state if to_path else None
        elif reload:
            options["reload_state"] = self._tree.get(reload)

        transition = Transition(self, self._current_path, to_path, options)
        self._pending = transition
        return transition

    def go(
        self,
        target: StateRef | None,
        params: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> TransitionResult:
        transition = self.create_transition(target, params, **options)
        result = transition.run()
        if self._pending is transition:
            self._pending = None
        return result

    def _commit_path(self, path: Path) -> None:
        self._current_path = tuple(path)
