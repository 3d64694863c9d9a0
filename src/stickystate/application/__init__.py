"""
Application layer for sticky state trees.

Wires the domain engine into a host router through the domain ports.
"""

from stickystate.application.config import (
    ConfigurationError,
    StickyStatesConfig,
    load_config,
)
from stickystate.application.plugin import StickyStatesPlugin

__all__ = [
    "ConfigurationError",
    "StickyStatesConfig",
    "StickyStatesPlugin",
    "load_config",
]
