"""Domain ports (interfaces) for external collaborators."""

from __future__ import annotations

from .reporting import ErrorReporter, LoggingErrorReporter
from .store import Store

__all__ = ["ErrorReporter", "LoggingErrorReporter", "Store"]
