"""
Transition: one proposed navigation of the in-memory host router.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from stickystate.domain.exceptions import TransitionRejectedError
from stickystate.domain.interfaces import TransitionInterface
from stickystate.domain.models import (
    PathNode,
    TransitionResult,
    TransitionStatus,
    TreeChanges,
)
from stickystate.domain.paths import compute_tree_changes

if TYPE_CHECKING:
    from stickystate.infrastructure.host.router import Router

logger = logging.getLogger(__name__)


class Transition(TransitionInterface):
    """
    A navigation from the router's current path to a destination path.

    On-create hooks run in the constructor; a failing on-create hook leaves
    the transition REJECTED and it never runs. run() executes the lifecycle
    hooks and, if none of them fails, commits the destination path and runs
    the success callbacks exactly once.
    """

    def __init__(
        self,
        router: Router,
        from_path: Sequence[PathNode],
        to_path: Sequence[PathNode],
        options: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Args:
            router: Owning router
            from_path: Path active when the transition was created
            to_path: Destination path
            options: Transition options, merged over the service defaults
        """
        self._router = router
        self._service = router.transition_service
        self._options = {**self._service.default_options(), **(options or {})}
        self._tree_changes = compute_tree_changes(
            from_path, to_path, self._options["reload_state"]
        )
        self._success_callbacks: list[Callable[[], None]] = []
        self.status = TransitionStatus.PENDING
        self.error: Exception | None = None

        for hook in self._service.create_hooks():
            try:
                hook(self)
            except Exception as e:
                self._reject(e)
                break

    # -------------------------------------------------------------------------
    # TransitionInterface
    # -------------------------------------------------------------------------

    def tree_changes(self) -> TreeChanges:
        return self._tree_changes

    def set_tree_changes(self, changes: TreeChanges) -> None:
        self._tree_changes = changes

    def options(self) -> Mapping[str, Any]:
        return self._options

    def on_success(self, callback: Callable[[], None]) -> None:
        self._success_callbacks.append(callback)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def abort(self) -> None:
        """Supersede a pending transition; its success callbacks are dropped."""
        if self.status is TransitionStatus.PENDING:
            self.status = TransitionStatus.ABORTED
            self._success_callbacks.clear()

    def run(self) -> TransitionResult:
        """
        Run the lifecycle hooks and commit the destination path.

        Returns:
            TransitionResult with the final status and any error
        """
        if self.status is not TransitionStatus.PENDING:
            return self.result()

        changes = self._tree_changes
        if (
            not changes.has_changes()
            and self._options["reload_state"] is None
            and changes.to_path == changes.from_path
        ):
            self.status = TransitionStatus.IGNORED
            self._success_callbacks.clear()
            return self.result()

        for event, state, hook in self._service.hooks_for(changes):
            try:
                outcome = hook.callback(self, state)
            except Exception as e:
                self._reject(e)
                return self.result()
            if outcome is False:
                where = f"{event.name}({state.name if state else '-'})"
                self._reject(
                    TransitionRejectedError(f"Hook rejected transition at {where}")
                )
                return self.result()
            if self.status is not TransitionStatus.PENDING:
                return self.result()

        self.status = TransitionStatus.SUCCESS
        self._router._commit_path(changes.to_path)
        callbacks, self._success_callbacks = self._success_callbacks, []
        for callback in callbacks:
            callback()
        logger.debug("Transition to %s succeeded", _leaf_name(changes.to_path))
        return self.result()

    def result(self) -> TransitionResult:
        return TransitionResult(status=self.status, transition=self, error=self.error)

    def _reject(self, error: Exception) -> None:
        self.status = TransitionStatus.REJECTED
        self.error = error
        self._success_callbacks.clear()
        logger.warning(
            "Transition to %s rejected: %s",
            _leaf_name(self._tree_changes.to_path),
            error,
        )

    def __repr__(self) -> str:
        return (
            f"Transition({_leaf_name(self._tree_changes.from_path)} -> "
            f"{_leaf_name(self._tree_changes.to_path)}, {self.status.value})"
        )


def _leaf_name(path: Sequence[PathNode]) -> str:
    return path[-1].state.name if path else "(root)"
