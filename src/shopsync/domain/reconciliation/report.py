"""Outcomes of a sync run, per item and per entity kind."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum


class ItemOutcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    DELETED = "deleted"
    SKIPPED = "skipped"
    DRIFTED = "drifted"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class Synced[T]:
    """What a synchronizer did with one entity and the target entity it ended with."""

    outcome: ItemOutcome
    entity: T | None = None


@dataclass(slots=True, frozen=True)
class ItemResult:
    key: str
    outcome: ItemOutcome
    elapsed_seconds: float = 0.0
    error: BaseException | None = None


@dataclass(slots=True)
class SyncReport:
    kind: str
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None
    results: list[ItemResult] = field(default_factory=list)

    def add(self, result: ItemResult) -> None:
        self.results.append(result)

    def override(self, result: ItemResult) -> None:
        """Replace the result recorded under the same key, or add it when there is none."""

        for index, current in enumerate(self.results):
            if current.key == result.key:
                self.results[index] = result
                return
        self.results.append(result)

    def finish(self) -> SyncReport:
        self.finished_at = datetime.now(UTC)
        return self

    @property
    def counts(self) -> Counter[ItemOutcome]:
        return Counter(result.outcome for result in self.results)

    @property
    def failed(self) -> list[ItemResult]:
        return [result for result in self.results if result.outcome is ItemOutcome.FAILED]

    def outcome_of(self, key: str) -> ItemOutcome | None:
        return next((result.outcome for result in self.results if result.key == key), None)

    def summary(self) -> str:
        counts = self.counts
        parts = [f"{outcome}={counts[outcome]}" for outcome in ItemOutcome if counts[outcome]]
        return f"{self.kind}: {len(self.results)} items ({', '.join(parts) or 'nothing to do'})"
