"""
State tree arena and relational helpers.

States are stored in a flat list and refer to their parent by index. The
ancestor walk is an explicit loop over that index, so arbitrarily deep trees
never hit the recursion limit.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from stickystate.domain.exceptions import DuplicateStateError, StateNotFoundError
from stickystate.domain.models import PathNode, State, StateDeclaration

StateRef = State | str


class StateTree:
    """
    Arena of registered states addressed by stable index.

    A state can only be registered after its parent, so the parent chain is
    always finite and acyclic.
    """

    def __init__(self) -> None:
        self._states: list[State] = []
        self._by_name: dict[str, int] = {}

    def register(self, declaration: StateDeclaration) -> State:
        """
        Add a state to the arena.

        Args:
            declaration: The state declaration

        Returns:
            The registered State

        Raises:
            DuplicateStateError: If the name is already registered
            StateNotFoundError: If the parent is not registered
        """
        if declaration.name in self._by_name:
            raise DuplicateStateError(declaration.name)

        parent_name = declaration.parent
        if parent_name is None and "." in declaration.name:
            parent_name = declaration.name.rsplit(".", 1)[0]

        parent: State | None = None
        if parent_name is not None:
            parent = self.get(parent_name)

        state = State(
            index=len(self._states),
            name=declaration.name,
            parent=parent.index if parent is not None else None,
            depth=parent.depth + 1 if parent is not None else 1,
            sticky=declaration.sticky,
            params=tuple(declaration.params),
            on_inactivate=declaration.on_inactivate,
            on_reactivate=declaration.on_reactivate,
        )
        self._states.append(state)
        self._by_name[state.name] = state.index
        return state

    def find(self, ref: StateRef) -> State | None:
        """Resolve a name or State to the registered State, or None."""
        if isinstance(ref, State):
            if ref.index < len(self._states) and self._states[ref.index] == ref:
                return ref
            return None
        index = self._by_name.get(ref)
        return self._states[index] if index is not None else None

    def get(self, ref: StateRef) -> State:
        """
        Resolve a name or State, raising if it is not registered.

        Raises:
            StateNotFoundError: If the reference does not resolve
        """
        state = self.find(ref)
        if state is None:
            raise StateNotFoundError(ref.name if isinstance(ref, State) else ref)
        return state

    def parent_of(self, state: State) -> State | None:
        return self._states[state.parent] if state.parent is not None else None

    def ancestors(self, state: State) -> tuple[State, ...]:
        """Root-first chain of states ending with ``state`` itself."""
        chain = [state]
        current = state.parent
        while current is not None:
            parent = self._states[current]
            chain.append(parent)
            current = parent.parent
        return tuple(reversed(chain))

    def states(self) -> tuple[State, ...]:
        return tuple(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[State]:
        return iter(self._states)

    def __contains__(self, ref: object) -> bool:
        if not isinstance(ref, (State, str)):
            return False
        return self.find(ref) is not None


# =============================================================================
# RELATIONAL HELPERS
# =============================================================================


def _ancestor_indexes(state: State, tree: StateTree) -> set[int]:
    return {s.index for s in tree.ancestors(state)}


def is_child_of(node: PathNode, parent: PathNode) -> bool:
    """True if ``node``'s state is an immediate child of ``parent``'s state."""
    return node.state.parent == parent.state.index


def is_child_of_any(node: PathNode, parents: Iterable[PathNode]) -> bool:
    return any(is_child_of(node, parent) for parent in parents)


def is_descendant_of(node: PathNode, ancestor: PathNode, tree: StateTree) -> bool:
    """
    True if ``ancestor``'s state is on ``node``'s ancestor chain.

    A node is a descendant of itself.
    """
    return ancestor.state.index in _ancestor_indexes(node.state, tree)


def is_descendant_of_any(
    node: PathNode, ancestors: Iterable[PathNode], tree: StateTree
) -> bool:
    chain = _ancestor_indexes(node.state, tree)
    return any(ancestor.state.index in chain for ancestor in ancestors)


def contains_state(path: Sequence[PathNode], node: PathNode) -> bool:
    """True if any node of ``path`` refers to the same state as ``node``."""
    return any(other.same_state(node) for other in path)


def unique_by_state(nodes: Iterable[PathNode]) -> tuple[PathNode, ...]:
    """Drop later nodes whose state was already seen, keeping order."""
    seen: set[int] = set()
    result = []
    for node in nodes:
        if node.state.index in seen:
            continue
        seen.add(node.state.index)
        result.append(node)
    return tuple(result)
