"""
Transition service: path kinds, lifecycle events and hook registration.

Core events and their priorities:

    on_start   0   to         (transition scope)
    on_exit    10  exiting    (leaf first)
    on_retain  20  retained
    on_enter   30  entering
    on_finish  40  to         (transition scope)

Extensions add path kinds and events between or around these.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from stickystate.domain.interfaces import (
    Deregister,
    HookCriteria,
    TransitionServiceInterface,
)
from stickystate.domain.models import State

if TYPE_CHECKING:
    from stickystate.domain.models import TreeChanges


@dataclass(frozen=True)
class PathType:
    """A named path kind of TreeChanges."""

    name: str
    scope: str = "state"  # "state": per node, "transition": once, leaf only


@dataclass(frozen=True)
class EventType:
    """A lifecycle event iterating one path kind."""

    name: str
    priority: int
    path_type: str
    reverse_sort: bool = False


@dataclass(frozen=True)
class RegisteredHook:
    """A hook callback bound to an event."""

    event: str
    criteria: HookCriteria
    callback: Callable[..., Any]
    priority: int
    order: int  # Registration order, tie-break within a priority


class TransitionService(TransitionServiceInterface):
    """In-memory hook registry for the host router."""

    def __init__(self) -> None:
        self._path_types: dict[str, PathType] = {}
        self._events: dict[str, EventType] = {}
        self._hooks: dict[str, list[RegisteredHook]] = {}
        self._create_hooks: list[Callable[[Any], None]] = []
        self._defaults: dict[str, Any] = {
            "reload_state": None,
            "inherit": False,
        }
        self._counter = itertools.count()

        self._define_core_paths()
        self._define_core_events()

    def _define_core_paths(self) -> None:
        self.define_path_type("to", scope="transition")
        self.define_path_type("from", scope="transition")
        self.define_path_type("exiting")
        self.define_path_type("retained")
        self.define_path_type("entering")

    def _define_core_events(self) -> None:
        self.define_event("on_start", 0, "to")
        self.define_event("on_exit", 10, "exiting", reverse_sort=True)
        self.define_event("on_retain", 20, "retained")
        self.define_event("on_enter", 30, "entering")
        self.define_event("on_finish", 40, "to")

    # -------------------------------------------------------------------------
    # Extension API
    # -------------------------------------------------------------------------

    def define_path_type(self, name: str, scope: str = "state") -> None:
        if scope not in ("state", "transition"):
            raise ValueError(f"Unknown path scope: {scope}")
        self._path_types[name] = PathType(name, scope)

    def define_event(
        self,
        name: str,
        priority: int,
        path_type: str,
        reverse_sort: bool = False,
    ) -> None:
        if path_type not in self._path_types:
            raise KeyError(f"Unknown path type: {path_type}")
        self._events[name] = EventType(name, priority, path_type, reverse_sort)
        self._hooks.setdefault(name, [])

    def path_types(self) -> dict[str, PathType]:
        return dict(self._path_types)

    def events(self) -> list[EventType]:
        """Defined events in run order."""
        return sorted(self._events.values(), key=lambda e: e.priority)

    def add_default_option(self, name: str, value: Any) -> None:
        self._defaults[name] = value

    def default_options(self) -> dict[str, Any]:
        return dict(self._defaults)

    # -------------------------------------------------------------------------
    # Hook registration
    # -------------------------------------------------------------------------

    def on(
        self,
        event: str,
        criteria: HookCriteria,
        callback: Callable[..., Any],
        priority: int = 0,
    ) -> Deregister:
        if event not in self._events:
            raise KeyError(f"Unknown event: {event}")
        unknown = set(criteria) - set(self._path_types)
        if unknown:
            raise KeyError(f"Unknown path types in criteria: {sorted(unknown)}")

        hook = RegisteredHook(
            event, dict(criteria), callback, priority, next(self._counter)
        )
        self._hooks[event].append(hook)

        def deregister() -> None:
            if hook in self._hooks[event]:
                self._hooks[event].remove(hook)

        return deregister

    def on_create(self, callback: Callable[[Any], None]) -> Deregister:
        self._create_hooks.append(callback)

        def deregister() -> None:
            if callback in self._create_hooks:
                self._create_hooks.remove(callback)

        return deregister

    def create_hooks(self) -> tuple[Callable[[Any], None], ...]:
        return tuple(self._create_hooks)

    def hooks_for(
        self, changes: TreeChanges
    ) -> list[tuple[EventType, State | None, RegisteredHook]]:
        """
        Hook invocations for a transition's tree changes, in run order.

        Events run by ascending priority. State-scoped events run once per
        node of their path kind (leaf first when reverse-sorted); within a
        node, hooks run by descending hook priority, then registration order.

        Returns:
            (event, state, hook) triples
        """
        plan = []
        for event in self.events():
            hooks = sorted(
                self._hooks[event.name], key=lambda h: (-h.priority, h.order)
            )
            if not hooks:
                continue
            for state in self._targets(event, changes):
                for hook in hooks:
                    if self._matches(hook, event, state, changes):
                        plan.append((event, state, hook))
        return plan

    def _targets(self, event: EventType, changes: TreeChanges) -> list[State | None]:
        nodes = changes.path(event.path_type)
        if self._path_types[event.path_type].scope == "transition":
            return [nodes[-1].state if nodes else None]
        states = [node.state for node in nodes]
        return states[::-1] if event.reverse_sort else states

    def _matches(
        self,
        hook: RegisteredHook,
        event: EventType,
        state: State | None,
        changes: TreeChanges,
    ) -> bool:
        for kind, criterion in hook.criteria.items():
            if criterion is None:
                continue
            if kind == event.path_type:
                if not _match_state(criterion, state):
                    return False
                continue
            nodes = changes.path(kind)
            if self._path_types[kind].scope == "transition":
                candidates = [nodes[-1].state] if nodes else []
            else:
                candidates = [node.state for node in nodes]
            if not any(_match_state(criterion, s) for s in candidates):
                return False
        return True


def _match_state(criterion: Any, state: State | None) -> bool:
    if criterion is None or criterion is True:
        return True
    if state is None or criterion is False:
        return False
    if isinstance(criterion, str):
        return state.name == criterion
    if isinstance(criterion, Mapping):
        raise TypeError("Nested hook criteria are not supported")
    return bool(criterion(state))
