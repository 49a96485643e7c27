"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.adapters.handles import read_handles
from shopsync.adapters.shopify import ShopifyStore
from shopsync.config import get_shopify_config, get_sync_config
from shopsync.domain.ports.reporting import LoggingErrorReporter
from shopsync.domain.reconciliation import SyncContext, SyncOrchestrator, SyncPolicy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from pathlib import Path

    from shopsync.config import ShopifyConfig, SyncConfig
    from shopsync.domain.ports.reporting import ErrorReporter
    from shopsync.domain.ports.store import Store
    from shopsync.domain.reconciliation import SyncReport

type StorePair = tuple[Store, Store]
type Job = Callable[[SyncOrchestrator], Awaitable[list[SyncReport]]]

log = getLogger(__name__)


class GarbageKind(StrEnum):
    DEFINITIONS = "definitions"
    ATTRIBUTE_DEFINITIONS = "attribute-definitions"
    COLLECTIONS = "collections"
    FIELD_DEFINITIONS = "field-definitions"
    INSTANCES = "instances"


async def run_job(
    job: Job,
    *,
    stores: StorePair | None = None,
    shopify_config: ShopifyConfig | None = None,
    sync_config: SyncConfig | None = None,
    reporter: ErrorReporter | None = None,
) -> list[SyncReport]:
    """Build a run context around the two stores and hand its orchestrator to ``job``.

    Stores built here from configuration are closed when the job returns;
    stores passed in belong to the caller.
    """

    settings = sync_config or get_sync_config()
    async with AsyncExitStack() as stack:
        if stores is None:
            config = shopify_config or get_shopify_config()
            source = await stack.enter_async_context(ShopifyStore(config.source))
            target = await stack.enter_async_context(ShopifyStore(config.target))
        else:
            source, target = stores
        log.info("Reconciling %s into %s", source.name, target.name)
        context = SyncContext.for_stores(
            source,
            target,
            policy=SyncPolicy(owner_types=settings.owner_types),
            reporter=reporter or LoggingErrorReporter(),
        )
        return await job(SyncOrchestrator(context))


def _handles(handles_file: Path | None) -> list[str]:
    return read_handles(handles_file or get_sync_config().handles_file)


def _single(step: Callable[[SyncOrchestrator], Awaitable[SyncReport]]) -> Job:
    async def job(orchestrator: SyncOrchestrator) -> list[SyncReport]:
        return [await step(orchestrator)]

    return job


async def _definitions(
    orchestrator: SyncOrchestrator, *, include_instances: bool
) -> list[SyncReport]:
    reports = [await orchestrator.sync_definitions()]
    if include_instances:
        reports.append(await orchestrator.sync_instances())
    return reports


def run_files(*, stores: StorePair | None = None) -> list[SyncReport]:
    return asyncio.run(run_job(_single(SyncOrchestrator.sync_files), stores=stores))


def run_collections(*, stores: StorePair | None = None) -> list[SyncReport]:
    return asyncio.run(run_job(_single(SyncOrchestrator.sync_collections), stores=stores))


def run_pages(*, stores: StorePair | None = None) -> list[SyncReport]:
    return asyncio.run(run_job(_single(SyncOrchestrator.sync_pages), stores=stores))


def run_menus(*, stores: StorePair | None = None) -> list[SyncReport]:
    return asyncio.run(run_job(_single(SyncOrchestrator.sync_menus), stores=stores))


def run_products(
    *, handles_file: Path | None = None, stores: StorePair | None = None
) -> list[SyncReport]:
    handles = _handles(handles_file)
    return asyncio.run(
        run_job(_single(lambda orchestrator: orchestrator.sync_products(handles)), stores=stores)
    )


def run_product_attributes(
    *, handles_file: Path | None = None, stores: StorePair | None = None
) -> list[SyncReport]:
    handles = _handles(handles_file)
    return asyncio.run(
        run_job(
            _single(lambda orchestrator: orchestrator.sync_product_attributes(handles)),
            stores=stores,
        )
    )


def run_definitions(
    *, include_instances: bool = True, stores: StorePair | None = None
) -> list[SyncReport]:
    async def job(orchestrator: SyncOrchestrator) -> list[SyncReport]:
        return await _definitions(orchestrator, include_instances=include_instances)

    return asyncio.run(run_job(job, stores=stores))


def run_instances(definition_type: str, *, stores: StorePair | None = None) -> list[SyncReport]:
    return asyncio.run(
        run_job(
            _single(lambda orchestrator: orchestrator.sync_instances_of(definition_type)),
            stores=stores,
        )
    )


def run_check(definition_type: str, *, stores: StorePair | None = None) -> list[SyncReport]:
    """Compare the instances of one definition without writing anything."""

    return asyncio.run(
        run_job(
            _single(lambda orchestrator: orchestrator.check_instances_of(definition_type)),
            stores=stores,
        )
    )


def run_attribute_definitions(*, stores: StorePair | None = None) -> list[SyncReport]:
    return asyncio.run(
        run_job(_single(SyncOrchestrator.sync_attribute_definitions), stores=stores)
    )


def run_gc(
    kind: GarbageKind | str,
    *,
    definition_type: str | None = None,
    stores: StorePair | None = None,
) -> list[SyncReport]:
    """Delete target entities that have no source counterpart."""

    garbage = GarbageKind(kind)
    if garbage is GarbageKind.INSTANCES and not definition_type:
        raise ValueError("Collecting instances requires a definition type")
    steps: dict[GarbageKind, Callable[[SyncOrchestrator], Awaitable[SyncReport]]] = {
        GarbageKind.DEFINITIONS: SyncOrchestrator.gc_definitions,
        GarbageKind.ATTRIBUTE_DEFINITIONS: SyncOrchestrator.gc_attribute_definitions,
        GarbageKind.COLLECTIONS: SyncOrchestrator.gc_collections,
        GarbageKind.FIELD_DEFINITIONS: SyncOrchestrator.gc_field_definitions,
        GarbageKind.INSTANCES: lambda orchestrator: orchestrator.gc_instances_of(
            definition_type or ""
        ),
    }
    return asyncio.run(run_job(_single(steps[garbage]), stores=stores))


def run_all(
    *, handles_file: Path | None = None, stores: StorePair | None = None
) -> list[SyncReport]:
    """Sync every entity kind in dependency order."""

    handles = _handles(handles_file)

    async def job(orchestrator: SyncOrchestrator) -> list[SyncReport]:
        reports = [
            await orchestrator.sync_files(),
            await orchestrator.sync_collections(),
        ]
        reports.extend(await _definitions(orchestrator, include_instances=True))
        reports.append(await orchestrator.sync_attribute_definitions())
        reports.append(await orchestrator.sync_products(handles))
        reports.append(await orchestrator.sync_product_attributes(handles))
        reports.append(await orchestrator.sync_pages())
        reports.append(await orchestrator.sync_menus())
        return reports

    return asyncio.run(run_job(job, stores=stores))
