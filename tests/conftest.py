from __future__ import annotations

import pytest

from shopsync.domain.reconciliation import SyncContext, SyncPolicy
from tests.helpers.fake_store import FakeStore
from tests.helpers.reporting import RecordingReporter


@pytest.fixture
def source() -> FakeStore:
    return FakeStore(name="source")


@pytest.fixture
def target() -> FakeStore:
    return FakeStore(name="target")


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def context(source: FakeStore, target: FakeStore, reporter: RecordingReporter) -> SyncContext:
    return SyncContext.for_stores(
        source, target, policy=SyncPolicy(owner_types=("PRODUCT",)), reporter=reporter
    )
