"""Sync collections, pages and files, which are paired by handle or derived name."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.model.inputs import CollectionCreate, FileCreate, PageCreate

from .report import ItemOutcome, Synced

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import Collection, File, Page

    from .attributes import AttributeSynchronizer
    from .context import SyncContext

log = getLogger(__name__)


class CollectionSynchronizer:
    """Create collections missing at target; existing ones are not updated."""

    def __init__(self, context: SyncContext) -> None:
        self.context = context

    async def sync(self, source: Collection) -> Synced[Collection]:
        targets = await self.context.target.collections()
        target = targets.get(source.handle)
        if target is not None:
            return Synced(ItemOutcome.UNCHANGED, target)

        created = await self.context.target.store.create_collection(
            CollectionCreate(
                handle=source.handle,
                title=source.title,
                description_html=source.description_html,
                template_suffix=source.template_suffix,
            )
        )
        targets.add(created)
        log.info("Created collection %s at target: %s", source.handle, created.id)
        return Synced(ItemOutcome.CREATED, created)


class PageSynchronizer:
    def __init__(self, context: SyncContext, attributes: AttributeSynchronizer) -> None:
        self.context = context
        self.attributes = attributes

    async def sync(self, source: Page) -> Synced[Page]:
        targets = await self.context.target.pages()
        target = targets.get(source.handle)
        outcome = ItemOutcome.UNCHANGED

        if target is None:
            log.debug("Page %s not found at target", source.handle)
            target = await self.context.target.store.create_page(
                PageCreate(
                    handle=source.handle,
                    title=source.title,
                    body=source.body,
                    is_published=source.is_published,
                    template_suffix=source.template_suffix,
                )
            )
            targets.add(target)
            log.info("Created page %s at target: %s", source.handle, target.id)
            outcome = ItemOutcome.CREATED

        attribute_outcome = await self.attributes.sync_owner(
            target.id, source.attributes, target.attributes
        )
        if outcome is ItemOutcome.UNCHANGED:
            outcome = attribute_outcome
        return Synced(outcome, target)


class FileSynchronizer:
    """Pair files by derived name and upload the ones missing at target."""

    def __init__(self, context: SyncContext) -> None:
        self.context = context

    async def missing(self, sources: Sequence[File]) -> list[FileCreate]:
        targets = await self.context.target.files()
        payloads: dict[str, FileCreate] = {}
        for source in sources:
            if not source.name or not source.url:
                log.warning("File %s has no preview url; skipping", source.id)
                continue
            if source.name in targets or source.name in payloads:
                continue
            payloads[source.name] = FileCreate(
                filename=source.name, original_source=source.url, alt=source.alt
            )
        return list(payloads.values())

    async def create(self, payloads: Sequence[FileCreate]) -> list[Synced[File]]:
        """Create ``payloads`` in bulk; results follow the payload order."""

        if not payloads:
            return []
        created = await self.context.target.store.create_files(payloads)
        results: list[Synced[File]] = []
        for item in created:
            self.context.target.remember_file(item)
            results.append(Synced(ItemOutcome.CREATED, item))
        log.info("Created %d file(s) at target", len(created))
        return results
