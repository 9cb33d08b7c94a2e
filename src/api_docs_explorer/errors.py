"""Exceptions raised by the explorer.

Per-block anomalies in the registry are absorbed with fallbacks and never
show up here; only failures that stop a whole extraction do.
"""

from pathlib import Path


class ExplorerError(Exception):
    """Base class for errors surfaced to the caller as one message."""


class RegistryNotFound(ExplorerError):
    """The generated type registry file does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"{path.name} not found ({path})")


class ConfigError(ExplorerError):
    """The configuration file is unreadable or invalid."""


class RegistryUnreadable(ExplorerError):
    """The generated type registry exists but cannot be read or decoded."""

    def __init__(self, path: Path, reason: Exception):
        self.path = path
        super().__init__(f"Cannot read {path.name} ({path}): {reason}")
