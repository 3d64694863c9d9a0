"""
Sticky diff engine.

Extends the ordinary tree diff of a transition with two extra path kinds:

- inactivating: nodes that would exit, but are suspended instead because the
  branch being left starts at a sticky state
- reactivating: suspended nodes resumed unchanged because the destination
  path runs through them with the same params

It also adds suspended nodes that must be torn down to ``exiting`` and
computes the registry delta the host commits once the transition succeeds.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from stickystate.domain.eviction import EvictionController
from stickystate.domain.interfaces import TransitionInterface
from stickystate.domain.models import (
    Path,
    PendingCommit,
    StickyDiff,
    TreeChanges,
)
from stickystate.domain.paths import compute_tree_changes
from stickystate.domain.registry import InactiveRegistry
from stickystate.domain.tree import StateRef, StateTree

logger = logging.getLogger(__name__)


class StickyDiffEngine:
    """
    Computes sticky tree changes for transitions.

    The engine reads the registry but never writes it. The registry delta is
    returned as a PendingCommit alongside the changes.
    """

    def __init__(self, tree: StateTree, registry: InactiveRegistry) -> None:
        """
        Args:
            tree: The state arena shared with the host
            registry: Suspended nodes owned by the sticky extension
        """
        self._tree = tree
        self._registry = registry
        self._eviction = EvictionController(tree, registry)

    def compute(self, transition: TransitionInterface) -> StickyDiff:
        """
        Compute the sticky diff of a transition.

        Args:
            transition: Transition exposing its ordinary tree changes

        Returns:
            StickyDiff with the augmented changes and the pending commit

        Raises:
            StateNotFoundError: If ``exit_sticky`` names an unknown state
            StateNotInactiveError: If ``exit_sticky`` names a state that is
                not suspended
            ActiveStateEvictionError: If ``exit_sticky`` targets a state in
                the destination path
        """
        options = transition.options()
        changes = self.classify(
            transition.tree_changes(), options.get("reload_state")
        )

        evicted = self._eviction.forced(
            _as_refs(options.get("exit_sticky")), changes.to_path, changes.exiting
        )
        if evicted:
            changes = replace(changes, exiting=changes.exiting + evicted)

        commit = PendingCommit(
            remove=tuple(
                node.state
                for node in changes.exiting + changes.entering + changes.reactivating
            ),
            add=changes.inactivating,
        )

        if logger.isEnabledFor(logging.DEBUG):
            for kind, names in changes.names().items():
                logger.debug("%s: %s", kind, ", ".join(names) or "-")
        return StickyDiff(changes=changes, commit=commit)

    def classify(self, tc: TreeChanges, reload_state: Any = None) -> TreeChanges:
        """
        Apply the inactivation, reactivation and cascade rules to a diff.

        Args:
            tc: Ordinary tree changes
            reload_state: State whose subtree the transition rebuilds

        Returns:
            TreeChanges with all five path kinds populated
        """
        retained = tc.retained
        entering = tc.entering
        exiting = tc.exiting
        to_path = tc.to_path
        inactivating: Path = ()
        reactivating: Path = ()

        # Only suspend when the transition goes somewhere below the branch
        if entering and exiting and exiting[0].state.sticky:
            inactivating, exiting = exiting, ()

        # Re-diff as if the suspended nodes were still active
        suspended = (self._registry.lookup(node.state) for node in entering)
        inactive_from = retained + tuple(n for n in suspended if n is not None)
        simulated = compute_tree_changes(inactive_from, to_path, reload_state)

        if simulated.retained or simulated.entering or simulated.exiting:
            reactivating = simulated.retained[len(retained) :]
            entering = simulated.entering
            exiting = exiting + simulated.exiting
            to_path = retained + reactivating + entering

        orphans = self._eviction.cascade(to_path, exiting)

        return replace(
            tc,
            to_path=to_path,
            retained=retained,
            entering=entering,
            exiting=orphans + exiting,
            inactivating=inactivating,
            reactivating=reactivating,
        )


def _as_refs(value: Any) -> tuple[StateRef, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, Iterable):
        return (value,)
    return tuple(value)
