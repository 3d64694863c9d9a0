"""
Path construction and the ordinary (non-sticky) tree diff.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from stickystate.domain.models import Path, PathNode, State, TreeChanges
from stickystate.domain.tree import StateRef, StateTree


def build_path(
    tree: StateTree,
    target: StateRef,
    params: Mapping[str, Any] | None = None,
    inherit_from: Sequence[PathNode] = (),
) -> Path:
    """
    Build the root-to-leaf path ending at ``target``.

    Each node takes its declared params from ``params``; params missing there
    fall back to the value held by the same state in ``inherit_from``, then
    to None.

    Args:
        tree: The state arena
        target: Leaf state name or State
        params: Parameter values keyed by name
        inherit_from: Path to inherit missing values from (usually current)

    Returns:
        Tuple of PathNodes from root to ``target``

    Raises:
        StateNotFoundError: If ``target`` is not registered
    """
    params = params or {}
    inherited = {node.state.index: node.param_values for node in inherit_from}

    nodes = []
    for state in tree.ancestors(tree.get(target)):
        fallback = inherited.get(state.index, {})
        values = {
            name: params[name] if name in params else fallback.get(name)
            for name in state.params
        }
        nodes.append(PathNode.of(state, **values))
    return tuple(nodes)


def compute_tree_changes(
    from_path: Sequence[PathNode],
    to_path: Sequence[PathNode],
    reload_state: State | None = None,
) -> TreeChanges:
    """
    Ordinary tree diff between two paths.

    ``retained`` is the longest common root-aligned prefix of equal nodes
    (same state, same params), cut at the first node whose state is
    ``reload_state``. Everything after it in ``from_path`` exits and
    everything after it in ``to_path`` enters.

    Args:
        from_path: Currently active path
        to_path: Proposed path
        reload_state: State whose subtree is always rebuilt

    Returns:
        TreeChanges with retained/entering/exiting populated
    """
    from_path = tuple(from_path)
    to_path = tuple(to_path)

    keep = 0
    limit = min(len(from_path), len(to_path))
    while (
        keep < limit
        and from_path[keep].state != reload_state
        and from_path[keep] == to_path[keep]
    ):
        keep += 1

    retained = from_path[:keep]
    entering = to_path[keep:]
    return TreeChanges(
        from_path=from_path,
        to_path=retained + entering,
        retained=retained,
        entering=entering,
        exiting=from_path[keep:],
    )
