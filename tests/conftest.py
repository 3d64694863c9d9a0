"""Shared pytest fixtures for stickystate tests."""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

import pytest

from stickystate.application.plugin import StickyStatesPlugin
from stickystate.domain.interfaces import TransitionInterface
from stickystate.domain.models import PathNode, StateDeclaration, TreeChanges
from stickystate.domain.paths import build_path, compute_tree_changes
from stickystate.domain.registry import InactiveRegistry
from stickystate.domain.sticky import StickyDiffEngine
from stickystate.domain.tree import StateTree
from stickystate.infrastructure.host.router import Router

# app
# ├── app.inbox            (sticky)
# │   └── app.inbox.message  params: id
# ├── app.settings
# └── app.reports          (sticky) params: year
#     └── app.reports.chart
# other
MAIL_STATES = (
    StateDeclaration("app"),
    StateDeclaration("app.inbox", sticky=True),
    StateDeclaration("app.inbox.message", params=("id",)),
    StateDeclaration("app.settings"),
    StateDeclaration("app.reports", sticky=True, params=("year",)),
    StateDeclaration("app.reports.chart"),
    StateDeclaration("other"),
)


class StubTransition(TransitionInterface):
    """Transition double exposing the ordinary diff of two paths."""

    def __init__(
        self,
        from_path: Sequence[PathNode],
        to_path: Sequence[PathNode],
        **options: Any,
    ) -> None:
        self._options = {"reload_state": None, "exit_sticky": (), **options}
        self._changes = compute_tree_changes(
            from_path, to_path, self._options["reload_state"]
        )
        self.success_callbacks: list[Callable[[], None]] = []

    def tree_changes(self) -> TreeChanges:
        return self._changes

    def set_tree_changes(self, changes: TreeChanges) -> None:
        self._changes = changes

    def options(self) -> Mapping[str, Any]:
        return self._options

    def on_success(self, callback: Callable[[], None]) -> None:
        self.success_callbacks.append(callback)


def names(nodes: Sequence[PathNode]) -> tuple[str, ...]:
    """State names of a node sequence."""
    return tuple(node.state.name for node in nodes)


def make_tree(*declarations: StateDeclaration) -> StateTree:
    tree = StateTree()
    for declaration in declarations:
        tree.register(declaration)
    return tree


@pytest.fixture
def tree() -> StateTree:
    """State arena with the mail application states."""
    return make_tree(*MAIL_STATES)


@pytest.fixture
def registry() -> InactiveRegistry:
    """Create an empty inactive registry."""
    return InactiveRegistry()


@pytest.fixture
def engine(tree: StateTree, registry: InactiveRegistry) -> StickyDiffEngine:
    """Sticky diff engine over the mail tree."""
    return StickyDiffEngine(tree, registry)


@pytest.fixture
def path(tree: StateTree) -> Callable[..., tuple[PathNode, ...]]:
    """Path builder bound to the mail tree: path("app.reports", year=2024)."""

    def _path(target: str, **params: Any) -> tuple[PathNode, ...]:
        return build_path(tree, target, params)

    return _path


@pytest.fixture
def router() -> Router:
    """Router with the mail states registered and no plugin."""
    router = Router()
    for declaration in MAIL_STATES:
        router.register_state(declaration)
    return router


@pytest.fixture
def sticky(router: Router) -> StickyStatesPlugin:
    """Sticky states plugin installed on the mail router."""
    return router.plugin(StickyStatesPlugin)
