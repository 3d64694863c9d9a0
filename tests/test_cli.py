"""Tests for the stickystate command line interface."""

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from stickystate.application.config import ConfigurationError
from stickystate.cli import build_router, describe_step, load_scenario, main, run_step
from stickystate.domain.models import TransitionStatus

MAIL_SCENARIO = {
    "states": [
        {"name": "app"},
        {"name": "app.inbox", "sticky": True},
        {"name": "app.settings"},
        {"name": "app.reports", "sticky": True, "params": ["year"]},
    ],
    "steps": [
        {"go": "app.inbox"},
        {"go": "app.settings"},
        {"go": "app.inbox"},
    ],
}


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """Drop handlers that simulate attaches to the package logger."""
    yield
    logger = logging.getLogger("stickystate")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _write(tmp_path: Path, data, name: str = "scenario.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return path


class TestLoadScenario:
    """Tests for load_scenario()."""

    def test_valid(self, tmp_path: Path) -> None:
        """A valid scenario loads unchanged."""
        assert load_scenario(_write(tmp_path, MAIL_SCENARIO)) == MAIL_SCENARIO

    def test_missing(self, tmp_path: Path) -> None:
        """Missing files raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Scenario file not found"):
            load_scenario(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Malformed JSON raises ConfigurationError."""
        path = tmp_path / "bad.json"
        path.write_text("{")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_scenario(path)

    def test_schema_violation(self, tmp_path: Path) -> None:
        """Schema errors are reported as ConfigurationError."""
        path = _write(tmp_path, {"states": [], "steps": []})

        with pytest.raises(ConfigurationError, match="Invalid scenario"):
            load_scenario(path)


class TestRunStep:
    """Tests for build_router() and run_step()."""

    def test_go_and_evict_steps(self) -> None:
        """Steps drive the router and the plugin."""
        router, plugin = build_router(MAIL_SCENARIO)

        run_step(router, plugin, {"go": "app.inbox"})
        run_step(router, plugin, {"go": "app.reports", "params": {"year": 1}})
        result = run_step(router, plugin, {"evict": None})

        assert result.success
        assert plugin.inactives() == ()
        assert router.current.name == "app.reports"

    def test_unknown_go_target_rejected(self) -> None:
        """Unknown targets become rejected results instead of exceptions."""
        router, plugin = build_router(MAIL_SCENARIO)

        result = run_step(router, plugin, {"go": "app.ghost"})

        assert result.status is TransitionStatus.REJECTED
        assert "State not found: app.ghost" in str(result.error)

    def test_reload_option(self) -> None:
        """reload is passed through to the router."""
        router, plugin = build_router(MAIL_SCENARIO)
        run_step(router, plugin, {"go": "app.settings"})

        result = run_step(router, plugin, {"go": "app.settings", "reload": True})

        assert result.success

    def test_describe_step(self) -> None:
        """Steps render as short labels."""
        assert describe_step({"go": "app"}) == "go app"
        assert describe_step({"evict": None}) == "evict all"
        assert describe_step({"evict": ["a", "b"]}) == "evict a, b"
        assert describe_step({"evict": "a"}) == "evict a"


class TestValidateCommand:
    """Tests for 'stickystate validate'."""

    def test_ok(self, runner: CliRunner, tmp_path: Path) -> None:
        """Valid scenarios report their size."""
        result = runner.invoke(main, ["validate", str(_write(tmp_path, MAIL_SCENARIO))])

        assert result.exit_code == 0
        assert "4 states, 3 steps" in result.output

    def test_invalid(self, runner: CliRunner, tmp_path: Path) -> None:
        """Invalid scenarios exit with status 1."""
        bad = {"states": [{"name": "app"}], "steps": [{"jump": "app"}]}

        result = runner.invoke(main, ["validate", str(_write(tmp_path, bad))])

        assert result.exit_code == 1
        assert "Invalid scenario" in result.output


class TestSimulateCommand:
    """Tests for 'stickystate simulate'."""

    def test_simulate_scenario(self, runner: CliRunner, tmp_path: Path) -> None:
        """Each step is rendered with its path kinds."""
        result = runner.invoke(main, ["simulate", str(_write(tmp_path, MAIL_SCENARIO))])

        assert result.exit_code == 0
        assert "Step 2: go app.settings (success)" in result.output
        assert "Step 3: go app.inbox (success)" in result.output
        assert "inactivating" in result.output
        assert "reactivating" in result.output

    def test_rejected_step_exits_nonzero(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        """A rejected step is shown and makes the command fail."""
        data = dict(MAIL_SCENARIO, steps=[{"go": "app.settings"}, {"evict": "app.settings"}])

        result = runner.invoke(main, ["simulate", str(_write(tmp_path, data))])

        assert result.exit_code == 1
        assert "State not inactive: app.settings" in result.output

    def test_duplicate_states(self, runner: CliRunner, tmp_path: Path) -> None:
        """A scenario with duplicate states fails before running steps."""
        data = {"states": [{"name": "app"}, {"name": "app"}], "steps": []}

        result = runner.invoke(main, ["simulate", str(_write(tmp_path, data))])

        assert result.exit_code == 1
        assert "State already registered: app" in result.output

    def test_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """--config loads plugin settings."""
        config = _write(tmp_path, {"inactivate_priority": 1}, "sticky.json")
        scenario = _write(tmp_path, MAIL_SCENARIO)

        result = runner.invoke(main, ["simulate", str(scenario), "--config", str(config)])

        assert result.exit_code == 0

    def test_bad_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Invalid config exits with status 1."""
        config = _write(tmp_path, {"colour": "red"}, "sticky.json")
        scenario = _write(tmp_path, MAIL_SCENARIO)

        result = runner.invoke(main, ["simulate", str(scenario), "--config", str(config)])

        assert result.exit_code == 1
        assert "Unknown config keys" in result.output

    def test_log_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """--log-file captures debug output, creating the directory."""
        log_file = tmp_path / "logs" / "run.log"
        scenario = _write(tmp_path, MAIL_SCENARIO)

        result = runner.invoke(
            main, ["simulate", str(scenario), "--log-file", str(log_file)]
        )

        assert result.exit_code == 0
        content = log_file.read_text()
        assert "Simulated 3 steps, 0 rejected" in content
        assert "inactivating: app.inbox" in content
