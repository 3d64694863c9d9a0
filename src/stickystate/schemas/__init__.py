"""JSON Schema definitions and validation utilities.

Schemas:
    - scenario.schema.json: state tree plus navigation steps for the CLI

Usage:
    from stickystate.schemas import validate_scenario

    with open("scenario.json") as f:
        data = json.load(f)
    validate_scenario(data)  # Raises jsonschema.ValidationError if invalid
"""

from __future__ import annotations

import json
from importlib.resources import files
from typing import Any

import jsonschema


def _load_schema(name: str) -> dict[str, Any]:
    """Load a JSON schema from the schemas package.

    Args:
        name: Schema filename (e.g., 'scenario.schema.json')

    Returns:
        Parsed JSON schema as a dictionary
    """
    schema_text = files("stickystate.schemas").joinpath(name).read_text()
    result: dict[str, Any] = json.loads(schema_text)
    return result


def get_scenario_schema() -> dict[str, Any]:
    """Get the scenario.json schema."""
    return _load_schema("scenario.schema.json")


def validate_scenario(data: dict[str, Any]) -> None:
    """Validate a scenario against the schema.

    Args:
        data: Scenario dictionary

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_scenario_schema())


__all__ = [
    "get_scenario_schema",
    "validate_scenario",
]
