"""
Eviction of suspended subtrees.

Two kinds of eviction feed the ``exiting`` path of a transition:

- cascade: suspended nodes left without a valid active ancestor (orphans)
- forced: suspended subtrees named explicitly by the ``exit_sticky`` option
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from stickystate.domain.exceptions import (
    ActiveStateEvictionError,
    StateNotInactiveError,
)
from stickystate.domain.models import Path, PathNode
from stickystate.domain.registry import InactiveRegistry
from stickystate.domain.tree import (
    StateRef,
    StateTree,
    contains_state,
    is_child_of,
    is_child_of_any,
    is_descendant_of_any,
    unique_by_state,
)


class EvictionController:
    """Computes which suspended nodes must exit alongside a transition."""

    def __init__(self, tree: StateTree, registry: InactiveRegistry) -> None:
        self._tree = tree
        self._registry = registry

    def cascade(
        self, to_path: Sequence[PathNode], exiting: Sequence[PathNode]
    ) -> Path:
        """
        Suspended nodes orphaned by activating ``to_path``.

        Args:
            to_path: The effective destination path
            exiting: Nodes already exiting in this transition

        Returns:
            Orphans ordered shallowest first, most recently suspended first
            within a depth. Nodes already in ``exiting`` are not repeated.
        """
        inactives = self._registry.list()

        # Suspended children of exactly the activated leaf
        children_of_leaf = [
            n for n in inactives if to_path and is_child_of(n, to_path[-1])
        ]
        # Suspended non-sticky children hanging off any activated node
        children_of_path = [
            n
            for n in inactives
            if is_child_of_any(n, to_path)
            and not contains_state(to_path, n)
            and not n.state.sticky
        ]
        exiting_children = [
            n
            for n in children_of_leaf + children_of_path
            if not contains_state(exiting, n)
        ]

        roots = list(exiting) + exiting_children
        descendants = [
            n
            for n in inactives
            if is_descendant_of_any(n, roots, self._tree)
            and not contains_state(roots, n)
        ]
        return self._ordered(unique_by_state(descendants + exiting_children))

    def forced(
        self,
        refs: Iterable[StateRef],
        to_path: Sequence[PathNode],
        exiting: Sequence[PathNode],
    ) -> Path:
        """
        Suspended subtrees explicitly requested for eviction.

        Args:
            refs: State names or States to evict
            to_path: The effective destination path
            exiting: Nodes already exiting in this transition

        Returns:
            Suspended descendants of the requested states (themselves
            included) not already in ``exiting``, in registry order

        Raises:
            StateNotFoundError: If a reference does not resolve
            StateNotInactiveError: If a requested state is not suspended
            ActiveStateEvictionError: If an evicted node is in ``to_path``
        """
        targets = []
        for ref in refs:
            state = self._tree.get(ref)
            node = self._registry.lookup(state)
            if node is None:
                raise StateNotInactiveError(state.name)
            targets.append(node)

        if not targets:
            return ()

        evicted = [
            n
            for n in self._registry.list()
            if is_descendant_of_any(n, targets, self._tree)
        ]
        for node in evicted:
            if contains_state(to_path, node):
                raise ActiveStateEvictionError(node.state.name)

        return tuple(n for n in evicted if not contains_state(exiting, n))

    def _ordered(self, nodes: Iterable[PathNode]) -> Path:
        return tuple(
            sorted(nodes, key=lambda n: (n.state.depth, -self._registry.position(n)))
        )
