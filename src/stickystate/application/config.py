"""Configuration for the sticky states plugin."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any


class ConfigurationError(Exception):
    """Raised when configuration files are invalid or missing."""

    pass


@dataclass(frozen=True)
class StickyStatesConfig:
    """
    Plugin settings.

    The priorities place on_inactivate before the host's exit hooks and
    on_reactivate after its enter hooks.
    """

    inactivate_priority: int = 5
    reactivate_priority: int = 35
    name: str = "stickystates"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StickyStatesConfig:
        """
        Build a config from a plain mapping.

        Raises:
            ConfigurationError: On unknown keys or wrongly typed values
        """
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")

        for key, value in data.items():
            expected = int if key.endswith("_priority") else str
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, expected):
                raise ConfigurationError(
                    f"Config key '{key}' must be {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
        return cls(**data)


def load_config(path: Path) -> StickyStatesConfig:
    """
    Load plugin settings from a JSON file.

    Args:
        path: Path to the JSON config

    Returns:
        StickyStatesConfig with defaults for missing keys

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected dict in {path}, got {type(data).__name__}")

    return StickyStatesConfig.from_mapping(data)
