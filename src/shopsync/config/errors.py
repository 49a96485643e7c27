"""Errors that stop a run before it talks to either store."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


class ConfigurationError(RuntimeError):
    """Base class; the CLI turns these into a usage exit code."""


class MissingConfigurationError(ConfigurationError):
    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class InvalidSettingError(ConfigurationError):
    """An environment setting is present but its value cannot be used."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"{name} {reason} (got {value!r})")
        self.name = name
        self.value = value


class HandlesFileNotFoundError(ConfigurationError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"Handles file not found: {path}")
        self.path = path
