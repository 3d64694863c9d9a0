"""Command line interface: simulate sticky state scenarios.

Usage:
    stickystate validate scenario.json
    stickystate simulate scenario.json [--config sticky.json] [-v]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click
import jsonschema
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from stickystate.application.config import (
    ConfigurationError,
    StickyStatesConfig,
    load_config,
)
from stickystate.application.plugin import StickyStatesPlugin
from stickystate.domain.exceptions import StickyStateError
from stickystate.domain.models import (
    StateDeclaration,
    TransitionResult,
    TransitionStatus,
)
from stickystate.infrastructure.host.router import Router
from stickystate.logging_setup import setup_logging
from stickystate.schemas import validate_scenario

logger = logging.getLogger("stickystate.cli")

PATH_KINDS = ("retained", "entering", "exiting", "inactivating", "reactivating")


def load_scenario(path: Path) -> dict[str, Any]:
    """
    Load and validate a scenario file.

    Raises:
        ConfigurationError: If the file is missing, not JSON or not a scenario
    """
    if not path.exists():
        raise ConfigurationError(f"Scenario file not found: {path}")
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    try:
        validate_scenario(data)
    except jsonschema.ValidationError as e:
        raise ConfigurationError(f"Invalid scenario {path}: {e.message}") from e

    result: dict[str, Any] = data
    return result


def build_router(
    scenario: dict[str, Any], config: StickyStatesConfig | None = None
) -> tuple[Router, StickyStatesPlugin]:
    """Register the scenario states on a fresh router with the plugin."""
    router = Router()
    for entry in scenario["states"]:
        router.register_state(
            StateDeclaration(
                name=entry["name"],
                parent=entry.get("parent"),
                sticky=entry.get("sticky", False),
                params=tuple(entry.get("params", ())),
            )
        )
    plugin = router.plugin(StickyStatesPlugin, config=config)
    return router, plugin


def run_step(
    router: Router, plugin: StickyStatesPlugin, step: dict[str, Any]
) -> TransitionResult:
    """Run one scenario step (a ``go`` or an ``evict``)."""
    if "evict" in step:
        return plugin.request_eviction(step["evict"])

    options: dict[str, Any] = {}
    if "reload" in step:
        options["reload"] = step["reload"]
    if "inherit" in step:
        options["inherit"] = step["inherit"]
    try:
        return router.go(step["go"], step.get("params"), **options)
    except StickyStateError as e:
        logger.warning("Step %s failed: %s", describe_step(step), e)
        return TransitionResult(status=TransitionStatus.REJECTED, error=e)


def describe_step(step: dict[str, Any]) -> str:
    if "evict" in step:
        target = step["evict"]
        if target is None:
            return "evict all"
        if isinstance(target, list):
            return "evict " + ", ".join(target)
        return f"evict {target}"
    return f"go {step['go']}"


def render_result(
    console: Console,
    number: int,
    step: dict[str, Any],
    result: TransitionResult,
    plugin: StickyStatesPlugin,
) -> None:
    """Print one step as a table of path kinds."""
    title = f"Step {number}: {escape(describe_step(step))} ({result.status.value})"

    if result.error is not None:
        content = Text(f"ERROR: {result.error}", style="bold red")
        console.print(Panel(content, title=title, border_style="red"))
        return

    table = Table(title=title, show_header=True, title_justify="left", expand=True)
    table.add_column("Path kind", style="cyan")
    table.add_column("States")

    if result.transition is not None:
        changes = result.transition.tree_changes()
        for kind in PATH_KINDS:
            nodes = changes.path(kind)
            states = ", ".join(escape(str(n)) for n in nodes)
            table.add_row(kind, states or "[dim]-[/dim]")

    inactive = ", ".join(s.name for s in plugin.inactives())
    table.add_row("inactive", inactive or "[dim]-[/dim]", style="yellow")
    console.print(table)


@click.group()
@click.version_option(package_name="stickystate")
def main() -> None:
    """Sticky state tree diff tools."""


@main.command()
@click.argument("scenario", type=click.Path(path_type=Path))
def validate(scenario: Path) -> None:
    """Validate a scenario file against the schema."""
    console = Console()
    try:
        data = load_scenario(scenario)
    except ConfigurationError as e:
        console.print(f"[bold red]ERROR:[/bold red] {escape(str(e))}")
        raise SystemExit(1) from e
    console.print(
        f"[green]OK[/green] {len(data['states'])} states, {len(data['steps'])} steps"
    )


@main.command()
@click.argument("scenario", type=click.Path(path_type=Path))
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(path_type=Path),
    help="Path to plugin config JSON",
)
@click.option("--log-file", default=None, type=click.Path(), help="Path to log file")
@click.option(
    "-v", "--verbose", is_flag=True, help="Enable verbose (DEBUG) logging to console"
)
def simulate(
    scenario: Path, config_path: Path | None, log_file: str | None, verbose: bool
) -> None:
    """Run the steps of SCENARIO and show the sticky tree changes of each."""
    setup_logging("stickystate", log_file=log_file, verbose=verbose)
    console = Console()

    try:
        data = load_scenario(scenario)
        config = load_config(config_path) if config_path else None
    except ConfigurationError as e:
        console.print(f"[bold red]ERROR:[/bold red] {escape(str(e))}")
        raise SystemExit(1) from e

    try:
        router, plugin = build_router(data, config)
    except StickyStateError as e:
        console.print(f"[bold red]ERROR:[/bold red] {escape(str(e))}")
        raise SystemExit(1) from e

    rejected = 0
    for number, step in enumerate(data["steps"], start=1):
        result = run_step(router, plugin, step)
        if result.error is not None:
            rejected += 1
        render_result(console, number, step, result, plugin)

    logger.info("Simulated %d steps, %d rejected", len(data["steps"]), rejected)
    if rejected:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
