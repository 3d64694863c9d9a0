"""Tests for the in-memory Router and its Transitions."""

import pytest
from conftest import names

from stickystate.domain.exceptions import (
    DuplicateStateError,
    StateNotFoundError,
    TransitionRejectedError,
)
from stickystate.domain.models import StateDeclaration, TransitionStatus
from stickystate.infrastructure.host.router import Router
from stickystate.infrastructure.host.transition import Transition


class TestRouterBasics:
    """Tests for navigation without extensions."""

    def test_starts_at_empty_path(self, router: Router) -> None:
        """A new router has no active state."""
        assert router.current_path == ()
        assert router.current is None
        assert router.params == {}

    def test_go_commits_path(self, router: Router) -> None:
        """A successful go() moves the current path."""
        result = router.go("app.inbox.message", {"id": 3})

        assert result.success
        assert names(router.current_path) == ("app", "app.inbox", "app.inbox.message")
        assert router.current.name == "app.inbox.message"
        assert router.params == {"id": 3}

    def test_go_accepts_state(self, router: Router) -> None:
        """Targets may be State objects."""
        router.go(router.tree.get("app.settings"))

        assert router.current.name == "app.settings"

    def test_go_none_exits_everything(self, router: Router) -> None:
        """go(None) navigates to the empty path."""
        router.go("app.settings")

        result = router.go(None)

        assert names(result.transition.tree_changes().exiting) == (
            "app",
            "app.settings",
        )
        assert router.current_path == ()

    def test_unknown_target_raises(self, router: Router) -> None:
        """Unknown targets raise before a transition exists."""
        with pytest.raises(StateNotFoundError):
            router.go("app.nowhere")

    def test_unknown_reload_raises(self, router: Router) -> None:
        """Unknown reload states raise StateNotFoundError."""
        with pytest.raises(StateNotFoundError):
            router.go("app", reload="ghost")

    def test_same_destination_ignored(self, router: Router) -> None:
        """Going to the current path is ignored."""
        router.go("app.settings")

        result = router.go("app.settings")

        assert result.status is TransitionStatus.IGNORED

    def test_reload_true_rebuilds_from_root(self, router: Router) -> None:
        """reload=True re-enters the whole destination path."""
        router.go("app.settings")

        result = router.go("app.settings", reload=True)

        changes = result.transition.tree_changes()
        assert result.success
        assert changes.retained == ()
        assert names(changes.entering) == ("app", "app.settings")

    def test_inherit_params(self, router: Router) -> None:
        """inherit=True keeps current params not given explicitly."""
        router.go("app.reports", {"year": 2022})

        router.go("app.reports.chart", inherit=True)

        assert router.params == {"year": 2022}

    def test_no_inherit_by_default(self, router: Router) -> None:
        """Without inherit, missing params are None."""
        router.go("app.reports", {"year": 2022})

        router.go("app.reports.chart")

        assert router.params == {"year": None}

    def test_register_duplicate(self, router: Router) -> None:
        """The router rejects duplicate state names."""
        with pytest.raises(DuplicateStateError):
            router.register_state(StateDeclaration("app"))


class TestPlugins:
    """Tests for plugin registration."""

    def test_plugin_by_class_name(self, router: Router) -> None:
        """Plugins without a name attribute are keyed by class name."""

        class Recorder:
            def __init__(self, router, label="x"):
                self.router = router
                self.label = label

        instance = router.plugin(Recorder, label="y")

        assert router.get_plugin("Recorder") is instance
        assert instance.router is router
        assert instance.label == "y"

    def test_missing_plugin(self, router: Router) -> None:
        """Unknown plugin names raise KeyError."""
        with pytest.raises(KeyError, match="Plugin not found"):
            router.get_plugin("nope")


class TestTransitionLifecycle:
    """Tests for Transition status handling."""

    def test_create_does_not_run(self, router: Router) -> None:
        """create_transition() leaves the path untouched until run()."""
        transition = router.create_transition("app")

        assert transition.status is TransitionStatus.PENDING
        assert router.current_path == ()

        transition.run()

        assert names(router.current_path) == ("app",)

    def test_new_transition_supersedes_pending(self, router: Router) -> None:
        """A second transition aborts the first one."""
        first = router.create_transition("app.inbox")
        second = router.create_transition("app.settings")

        assert first.status is TransitionStatus.ABORTED
        assert first.run().status is TransitionStatus.ABORTED
        assert second.run().success
        assert router.current.name == "app.settings"

    def test_success_callbacks_once(self, router: Router) -> None:
        """on_success callbacks run exactly once, after commit."""
        seen = []
        transition = router.create_transition("app")
        transition.on_success(lambda: seen.append(names(router.current_path)))

        transition.run()
        transition.run()

        assert seen == [("app",)]

    def test_run_twice_returns_same_result(self, router: Router) -> None:
        """A finished transition reports its status again."""
        transition = router.create_transition("app")

        assert transition.run().success
        assert transition.run().status is TransitionStatus.SUCCESS

    def test_aborted_callbacks_dropped(self, router: Router) -> None:
        """An aborted transition never runs its success callbacks."""
        seen = []
        transition = router.create_transition("app")
        transition.on_success(lambda: seen.append("committed"))

        transition.abort()
        transition.run()

        assert seen == []
        assert router.current_path == ()

    def test_create_hook_error_rejects(self, router: Router) -> None:
        """A failing on-create hook leaves the transition rejected."""

        def explode(_transition):
            raise ValueError("no way")

        router.transition_service.on_create(explode)

        result = router.go("app")

        assert result.status is TransitionStatus.REJECTED
        assert str(result.error) == "no way"
        assert router.current_path == ()

    def test_hook_returning_false_rejects(self, router: Router) -> None:
        """A lifecycle hook returning False rejects the transition."""
        router.transition_service.on("on_start", {}, lambda t, s: False)

        result = router.go("app")

        assert result.status is TransitionStatus.REJECTED
        assert isinstance(result.error, TransitionRejectedError)
        assert "on_start(app)" in str(result.error)

    def test_hook_error_skips_callbacks(self, router: Router) -> None:
        """A raising hook stops the pipeline and drops success callbacks."""
        seen = []

        def fail(_transition, _state):
            raise RuntimeError("fail")

        router.transition_service.on("on_enter", {"entering": "app"}, fail)
        transition = router.create_transition("app")
        transition.on_success(lambda: seen.append("committed"))

        assert transition.run().status is TransitionStatus.REJECTED
        assert seen == []

    def test_hooks_receive_transition_and_state(self, router: Router) -> None:
        """Hooks are called with the transition and the visited state."""
        seen = []
        router.transition_service.on(
            "on_enter", {}, lambda t, s: seen.append((type(t), s.name))
        )

        router.go("app.settings")

        assert seen == [(Transition, "app"), (Transition, "app.settings")]

    def test_options_merged_over_defaults(self, router: Router) -> None:
        """Transition options include the service defaults."""
        router.transition_service.add_default_option("mode", "default")

        transition = router.create_transition("app", mode="custom")

        assert transition.options()["mode"] == "custom"
        assert transition.options()["reload_state"] is None

    def test_repr(self, router: Router) -> None:
        """repr shows both ends and the status."""
        transition = router.create_transition("app.settings")

        assert repr(transition) == "Transition((root) -> app.settings, pending)"
