"""Run one reconciliation pass per entity kind with per-item failure isolation.

Every operation loads the source collection, pairs it with the target
collection and reconciles item by item in source order. A failing item is
logged, handed to the error reporter and recorded in the report; the loop
then moves on. Nothing is rolled back.
"""

from __future__ import annotations

import asyncio
from logging import getLogger
from time import monotonic
from typing import TYPE_CHECKING

from .attributes import AttributeDefinitionSynchronizer, AttributeSynchronizer
from .catalog import CollectionSynchronizer, FileSynchronizer, PageSynchronizer
from .definitions import DefinitionSynchronizer
from .gc import GarbageCollector
from .instances import InstanceSynchronizer
from .mapper import KeyIndex
from .menus import MenuSynchronizer
from .products import ProductSynchronizer
from .progress import Progress
from .report import ItemOutcome, ItemResult, SyncReport

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from shopsync.domain.model import (
        AttributeDefinition,
        Collection,
        Definition,
        Instance,
        Menu,
        Page,
    )

    from .context import SyncContext

log = getLogger(__name__)

type Action[T] = Callable[[T], Awaitable[ItemOutcome]]


class SyncOrchestrator:
    """Entry points for every sync and collection pass of one run."""

    def __init__(self, context: SyncContext) -> None:
        self.context = context
        self.definitions = DefinitionSynchronizer(context)
        self.instances = InstanceSynchronizer(context)
        self.attribute_definitions = AttributeDefinitionSynchronizer(context, self.definitions)
        self.attributes = AttributeSynchronizer(context, self.instances)
        self.collections = CollectionSynchronizer(context)
        self.pages = PageSynchronizer(context, self.attributes)
        self.files = FileSynchronizer(context)
        self.menus = MenuSynchronizer(context)
        self.products = ProductSynchronizer(context, self.attributes)
        self.collector = GarbageCollector(context)

    # Definitions and instances

    async def sync_definitions(self) -> SyncReport:
        """Sync every definition.

        A definition that still waits for a field at the end of the pass is
        reported as failed, whatever its own sync returned.
        """

        sources = await self._source_definitions()

        async def sync(item: Definition) -> ItemOutcome:
            return (await self.definitions.sync(item)).outcome

        report = SyncReport("Definition")
        await self._each(
            "Definition", sources, key=lambda item: item.type, action=sync, report=report
        )
        for error in self.definitions.unreleased():
            log.error("%s", error)
            self.context.reporter.capture(
                error, context={"section": "Definition", "key": error.owner_type}
            )
            report.override(
                ItemResult(key=error.owner_type, outcome=ItemOutcome.FAILED, error=error)
            )
        return _finish(report)

    async def sync_instances(self) -> SyncReport:
        """Sync the instances of every definition into one report."""

        report = SyncReport("Instance")
        for definition in await self._source_definitions():
            sources = list(await self.context.source.instances_of(definition.type))
            await self._each(
                "Instance",
                sources,
                key=_instance_key,
                action=self._sync_instance,
                report=report,
            )
        return _finish(report)

    async def sync_instances_of(self, definition_type: str) -> SyncReport:
        sources = list(await self.context.source.instances_of(definition_type))
        return await self._each(
            f"Instance[{definition_type}]", sources, key=_instance_key, action=self._sync_instance
        )

    async def check_instances_of(self, definition_type: str) -> SyncReport:
        """Compare instances field by field without writing anything."""

        sources = list(await self.context.source.instances_of(definition_type))
        targets = await self.context.target.instances_of(definition_type)

        async def check(item: Instance) -> ItemOutcome:
            target = targets.get(item.identity)
            if target is None:
                log.info("Instance %s/%s is missing at target", *item.identity)
                return ItemOutcome.DRIFTED
            if await self.instances.is_in_sync(item, target):
                return ItemOutcome.UNCHANGED
            log.info("Instance %s/%s has drifted", *item.identity)
            return ItemOutcome.DRIFTED

        return await self._each(
            f"Check[{definition_type}]", sources, key=_instance_key, action=check
        )

    async def _sync_instance(self, item: Instance) -> ItemOutcome:
        return (await self.instances.sync(item)).outcome

    # Attribute definitions and product attributes

    async def sync_attribute_definitions(self) -> SyncReport:
        sources = await self._source_attribute_definitions()

        async def sync(item: AttributeDefinition) -> ItemOutcome:
            return (await self.attribute_definitions.sync(item)).outcome

        return await self._each(
            "AttributeDefinition", sources, key=_attribute_definition_key, action=sync
        )

    async def sync_product_attributes(self, handles: Sequence[str]) -> SyncReport:
        return await self._each(
            "ProductAttributes", handles, key=str, action=self.products.sync_attributes
        )

    # Catalog

    async def sync_products(self, handles: Sequence[str]) -> SyncReport:
        async def sync(handle: str) -> ItemOutcome:
            return (await self.products.sync(handle)).outcome

        return await self._each("Product", handles, key=str, action=sync)

    async def sync_collections(self) -> SyncReport:
        sources = list(await self.context.source.collections())

        async def sync(item: Collection) -> ItemOutcome:
            return (await self.collections.sync(item)).outcome

        return await self._each("Collection", sources, key=lambda item: item.handle, action=sync)

    async def sync_pages(self) -> SyncReport:
        sources = list(await self.context.source.pages())

        async def sync(item: Page) -> ItemOutcome:
            return (await self.pages.sync(item)).outcome

        return await self._each("Page", sources, key=lambda item: item.handle, action=sync)

    async def sync_menus(self) -> SyncReport:
        sources, target_menus = await asyncio.gather(
            self.context.source.store.list_menus(), self.context.target.store.list_menus()
        )
        targets = KeyIndex(
            target_menus, key=lambda item: item.handle, kind="Menu", side="target"
        )

        async def sync(item: Menu) -> ItemOutcome:
            return (await self.menus.sync(item, targets.get(item.handle))).outcome

        return await self._each("Menu", sources, key=lambda item: item.handle, action=sync)

    async def sync_files(self) -> SyncReport:
        """Upload every file missing at target in one bulk request."""

        report = SyncReport("File")
        sources = list(await self.context.source.files())
        payloads = await self.files.missing(sources)
        pending = {item.filename for item in payloads}
        for source in sources:
            if source.name not in pending:
                report.add(ItemResult(key=source.name or source.id, outcome=ItemOutcome.UNCHANGED))

        started = monotonic()
        try:
            await self.files.create(payloads)
        except Exception as error:
            log.error("Failed to create %d file(s) at target: %s", len(payloads), error)
            self.context.reporter.capture(error, context={"section": "File", "key": "bulk"})
            outcome, failure = ItemOutcome.FAILED, error
        else:
            outcome, failure = ItemOutcome.CREATED, None
        elapsed = monotonic() - started
        for payload in payloads:
            report.add(
                ItemResult(
                    key=payload.filename, outcome=outcome, elapsed_seconds=elapsed, error=failure
                )
            )
        return _finish(report)

    # Garbage collection

    async def gc_definitions(self) -> SyncReport:
        orphans = await self.collector.orphan_definitions()
        return await self._each(
            "GC Definition", orphans, key=lambda item: item.type, action=self._delete_definition
        )

    async def gc_instances_of(self, definition_type: str) -> SyncReport:
        orphans = await self.collector.orphan_instances(definition_type)

        async def delete(item: Instance) -> ItemOutcome:
            return (await self.collector.delete_instance(item)).outcome

        return await self._each(
            f"GC Instance[{definition_type}]", orphans, key=_instance_key, action=delete
        )

    async def gc_attribute_definitions(self) -> SyncReport:
        await self._load_attribute_definitions()
        orphans: list[AttributeDefinition] = []
        for owner_type in self.context.policy.owner_types:
            orphans.extend(await self.collector.orphan_attribute_definitions(owner_type))

        async def delete(item: AttributeDefinition) -> ItemOutcome:
            return (await self.collector.delete_attribute_definition(item)).outcome

        return await self._each(
            "GC AttributeDefinition", orphans, key=_attribute_definition_key, action=delete
        )

    async def gc_collections(self) -> SyncReport:
        orphans = await self.collector.orphan_collections()

        async def delete(item: Collection) -> ItemOutcome:
            return (await self.collector.delete_collection(item)).outcome

        return await self._each(
            "GC Collection", orphans, key=lambda item: item.handle, action=delete
        )

    async def gc_field_definitions(self) -> SyncReport:
        sources = await self._source_definitions()

        async def delete(item: Definition) -> ItemOutcome:
            planned = await self.collector.field_deletions(item)
            if planned is None:
                return ItemOutcome.UNCHANGED
            return (await self.collector.delete_fields(*planned)).outcome

        return await self._each(
            "GC FieldDefinition", sources, key=lambda item: item.type, action=delete
        )

    async def _delete_definition(self, item: Definition) -> ItemOutcome:
        return (await self.collector.delete_definition(item)).outcome

    # Helpers

    async def _source_definitions(self) -> list[Definition]:
        policy = self.context.policy
        return [
            item
            for item in await self.context.source.definitions()
            if not policy.is_reserved_definition(item.type)
        ]

    async def _load_attribute_definitions(self) -> None:
        owner_types = self.context.policy.owner_types
        await asyncio.gather(
            self.context.source.load_attribute_definitions(owner_types),
            self.context.target.load_attribute_definitions(owner_types),
        )

    async def _source_attribute_definitions(self) -> list[AttributeDefinition]:
        await self._load_attribute_definitions()
        policy = self.context.policy
        sources: list[AttributeDefinition] = []
        for owner_type in policy.owner_types:
            sources.extend(
                item
                for item in await self.context.source.attribute_definitions(owner_type)
                if not policy.is_reserved_namespace(item.namespace)
            )
        return sources

    async def _each[T](
        self,
        kind: str,
        items: Sequence[T],
        *,
        key: Callable[[T], str],
        action: Action[T],
        report: SyncReport | None = None,
    ) -> SyncReport:
        """Apply ``action`` to every item, isolating failures.

        When ``report`` is given the results are appended to it and it is left
        open for the caller to finish.
        """

        own_report = report is None
        active = SyncReport(kind) if report is None else report
        progress = Progress(kind, total=len(items))
        log.info("Sync %d %s item(s)", len(items), kind)

        for item in items:
            item_key = key(item)
            log.debug("Processing %s %s", kind, item_key)
            started = monotonic()
            try:
                outcome = await action(item)
            except Exception as error:
                elapsed = monotonic() - started
                log.error("Failed to process %s %s: %s", kind, item_key, error)
                self.context.reporter.capture(error, context={"section": kind, "key": item_key})
                active.add(
                    ItemResult(
                        key=item_key,
                        outcome=ItemOutcome.FAILED,
                        elapsed_seconds=elapsed,
                        error=error,
                    )
                )
            else:
                elapsed = monotonic() - started
                active.add(ItemResult(key=item_key, outcome=outcome, elapsed_seconds=elapsed))
            log.debug("Sync completed for %s in %.2f seconds.", item_key, elapsed)
            progress.step()

        return _finish(active) if own_report else active


def _finish(report: SyncReport) -> SyncReport:
    report.finish()
    log.info("%s", report.summary())
    return report


def _instance_key(item: Instance) -> str:
    return f"{item.type}/{item.handle}"


def _attribute_definition_key(item: AttributeDefinition) -> str:
    return f"{item.owner_type}:{item.identity}"
