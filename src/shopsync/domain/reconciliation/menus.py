"""Sync navigation menus.

Menu items link to pages, collections and products by id, so a menu is
compared item by item with the linked resources resolved to their handles.
A target menu that does not match is replaced as a whole.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.errors import NotFoundError, SyncError
from shopsync.domain.model import ResourceKind
from shopsync.domain.model.inputs import MenuCreate, MenuItemInput

from .report import ItemOutcome, Synced

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import Menu, MenuItem

    from .context import StoreView, SyncContext
    from .mapper import Identified

log = getLogger(__name__)


class MenuSynchronizer:
    def __init__(self, context: SyncContext) -> None:
        self.context = context

    async def sync(self, source: Menu, target: Menu | None) -> Synced[Menu]:
        outcome = ItemOutcome.CREATED
        if target is not None:
            if await self.matches(source, target):
                log.debug("Menu %s in sync", source.handle)
                return Synced(ItemOutcome.UNCHANGED, target)
            deleted = await self.context.target.store.delete_menu(target.id)
            log.info("Deleted mismatching menu %s at target: %s", source.handle, deleted)
            outcome = ItemOutcome.UPDATED

        payload = MenuCreate(
            handle=source.handle,
            title=source.title,
            items=tuple([await self._item_input(item) for item in source.items]),
        )
        created = await self.context.target.store.create_menu(payload)
        log.info("Created menu %s at target: %s", source.handle, created.id)
        return Synced(outcome, created)

    async def matches(self, source: Menu, target: Menu) -> bool:
        if source.title != target.title:
            return False
        return await self._items_match(source.items, target.items)

    async def _items_match(self, sources: Sequence[MenuItem], targets: Sequence[MenuItem]) -> bool:
        if len(sources) != len(targets):
            return False
        for source in sources:
            target = next(
                (
                    item
                    for item in targets
                    if item.title == source.title and item.type == source.type
                ),
                None,
            )
            if target is None or target.url != source.url:
                return False
            if source.resource_id:
                if not target.resource_id:
                    return False
                source_handle = await self._source_handle(source.resource_id)
                target_handle = await self._handle(self.context.target, target.resource_id)
                if source_handle != target_handle:
                    return False
            if not await self._items_match(source.items, target.items):
                return False
        return True

    async def _handle(self, view: StoreView, resource_id: str) -> str | None:
        """Return the handle of the linked resource, or ``None`` when it is gone."""

        match ResourceKind.from_gid(resource_id):
            case ResourceKind.PAGE:
                page = (await view.pages()).get_by_id(resource_id)
                return page.handle if page else None
            case ResourceKind.CUSTOMER_ACCOUNT_PAGE:
                account_page = (await view.customer_account_pages()).get_by_id(resource_id)
                return account_page.handle if account_page else None
            case ResourceKind.COLLECTION:
                collection = await view.collection(resource_id)
                return collection.handle if collection else None
            case ResourceKind.PRODUCT:
                product = await view.product(resource_id)
                return product.handle if product else None
            case _:
                raise SyncError(f"Menu item resource not supported: {resource_id}")

    async def _source_handle(self, resource_id: str) -> str:
        handle = await self._handle(self.context.source, resource_id)
        if handle is None:
            raise NotFoundError(str(ResourceKind.from_gid(resource_id)), resource_id, side="source")
        return handle

    async def _item_input(self, item: MenuItem) -> MenuItemInput:
        return MenuItemInput(
            title=item.title,
            type=item.type,
            url=item.url,
            resource_id=await self._target_resource_id(item.resource_id),
            tags=item.tags,
            items=tuple([await self._item_input(child) for child in item.items]),
        )

    async def _target_resource_id(self, resource_id: str | None) -> str | None:
        if not resource_id:
            return None
        kind = ResourceKind.from_gid(resource_id)
        handle = await self._source_handle(resource_id)

        target = self.context.target
        found: Identified | None
        match kind:
            case ResourceKind.PAGE:
                found = (await target.pages()).get(handle)
            case ResourceKind.CUSTOMER_ACCOUNT_PAGE:
                found = (await target.customer_account_pages()).get(handle)
            case ResourceKind.COLLECTION:
                found = (await target.collections()).get(handle)
                if found is None:
                    raise NotFoundError("Collection", handle, side="target")
            case _:
                found = await target.product_by_handle(handle)

        if found is None:
            log.warning("%s %s not found at target; menu item left unlinked", kind, handle)
            return None
        return found.id
