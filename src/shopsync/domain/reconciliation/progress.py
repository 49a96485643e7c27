"""Running average of per-item time, used to log an estimated time remaining."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from time import monotonic

log = getLogger(__name__)


@dataclass(slots=True)
class Progress:
    label: str
    total: int | None = None
    completed: int = 0
    started: float = field(default_factory=monotonic)

    def step(self) -> None:
        """Count one finished item and log the estimate."""

        self.completed += 1
        if self.total is None:
            log.debug("%s: completed %d", self.label, self.completed)
            return
        remaining = self.remaining_seconds()
        log.debug(
            "%s: completed %d/%d. Estimated time remaining: %.2f seconds.",
            self.label,
            self.completed,
            self.total,
            remaining or 0.0,
        )

    def remaining_seconds(self) -> float | None:
        if self.total is None or not self.completed:
            return None
        average = (monotonic() - self.started) / self.completed
        return average * max(self.total - self.completed, 0)
