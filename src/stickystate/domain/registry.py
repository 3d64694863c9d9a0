"""
Inactive registry: the suspended path nodes of one router.
"""

from __future__ import annotations

from collections.abc import Iterator

from stickystate.domain.models import Path, PathNode, PendingCommit, State


class InactiveRegistry:
    """
    Ordered collection of suspended path nodes.

    Insertion order is the suspension order and doubles as the recency
    tie-break when orphans are evicted. A state appears at most once.

    Only apply() mutates the registry; it is called with the PendingCommit
    of a transition once that transition has succeeded.
    """

    def __init__(self) -> None:
        self._nodes: list[PathNode] = []

    def list(self) -> Path:
        """Snapshot of the suspended nodes, oldest first."""
        return tuple(self._nodes)

    def lookup(self, state: State) -> PathNode | None:
        """Suspended node for ``state``, or None."""
        for node in self._nodes:
            if node.state == state:
                return node
        return None

    def position(self, node: PathNode) -> int:
        """
        Insertion position of the entry for ``node``'s state.

        Raises:
            KeyError: If the state is not suspended
        """
        for i, existing in enumerate(self._nodes):
            if existing.same_state(node):
                return i
        raise KeyError(f"State not inactive: {node.state.name}")

    def apply(self, commit: PendingCommit) -> None:
        """Remove the ``commit.remove`` states, then append ``commit.add``."""
        dropped = {state.index for state in commit.remove}
        dropped.update(node.state.index for node in commit.add)
        self._nodes = [n for n in self._nodes if n.state.index not in dropped]
        self._nodes.extend(commit.add)

    def states(self) -> tuple[State, ...]:
        return tuple(node.state for node in self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[PathNode]:
        return iter(self._nodes)

    def __contains__(self, state: object) -> bool:
        if isinstance(state, PathNode):
            state = state.state
        return isinstance(state, State) and self.lookup(state) is not None
