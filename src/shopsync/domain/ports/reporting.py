"""Port for reporting per-item failures to an external collaborator."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

log = getLogger(__name__)


@runtime_checkable
class ErrorReporter(Protocol):
    def capture(self, error: BaseException, *, context: Mapping[str, object]) -> None: ...


class LoggingErrorReporter:
    """Default reporter: writes the failure and its traceback to the log."""

    def capture(self, error: BaseException, *, context: Mapping[str, object]) -> None:
        details = ", ".join(f"{name}={value}" for name, value in context.items())
        log.error("Captured %s (%s)", type(error).__name__, details, exc_info=error)


if TYPE_CHECKING:
    _reporter_check: ErrorReporter = LoggingErrorReporter()
