"""Reconciliation of a source store into a target store."""

from __future__ import annotations

from .context import StoreView, SyncContext, SyncPolicy
from .definitions import DefinitionSynchronizer
from .equality import FieldEqualityResolver
from .instances import InstanceSynchronizer
from .mapper import KeyIndex
from .orchestrator import SyncOrchestrator
from .references import ReferenceSynchronizer
from .report import ItemOutcome, ItemResult, SyncReport, Synced

__all__ = [
    "DefinitionSynchronizer",
    "FieldEqualityResolver",
    "InstanceSynchronizer",
    "ItemOutcome",
    "ItemResult",
    "KeyIndex",
    "ReferenceSynchronizer",
    "StoreView",
    "SyncContext",
    "SyncOrchestrator",
    "SyncPolicy",
    "SyncReport",
    "Synced",
]
