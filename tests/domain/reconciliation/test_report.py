from __future__ import annotations

import pytest

from shopsync.domain.reconciliation import ItemOutcome, ItemResult, SyncReport
from shopsync.domain.reconciliation.progress import Progress


def test_summary_lists_nonzero_outcomes_in_order() -> None:
    report = SyncReport("Collection")
    report.add(ItemResult(key="a", outcome=ItemOutcome.UNCHANGED))
    report.add(ItemResult(key="b", outcome=ItemOutcome.CREATED))
    report.add(ItemResult(key="c", outcome=ItemOutcome.FAILED, error=RuntimeError("boom")))

    assert report.summary() == "Collection: 3 items (created=1, unchanged=1, failed=1)"
    assert [result.key for result in report.failed] == ["c"]
    assert report.outcome_of("b") is ItemOutcome.CREATED
    assert report.outcome_of("z") is None


def test_empty_report_summary() -> None:
    report = SyncReport("Menu").finish()

    assert report.summary() == "Menu: 0 items (nothing to do)"
    assert report.finished_at is not None
    assert report.finished_at >= report.started_at


def test_progress_estimates_remaining_time(monkeypatch: pytest.MonkeyPatch) -> None:
    clock = iter([104.0, 108.0])
    monkeypatch.setattr("shopsync.domain.reconciliation.progress.monotonic", lambda: next(clock))
    progress = Progress("Product", total=5, started=100.0)

    assert progress.remaining_seconds() is None
    progress.step()
    assert progress.completed == 1
    # 8 seconds for 2 items, 3 to go.
    progress.completed = 2
    assert progress.remaining_seconds() == pytest.approx(12.0)


def test_progress_without_total_has_no_estimate() -> None:
    progress = Progress("Page")
    progress.step()

    assert progress.completed == 1
    assert progress.remaining_seconds() is None
