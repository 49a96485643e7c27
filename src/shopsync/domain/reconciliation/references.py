"""Turn source reference values into the target-side values to write."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.errors import NotFoundError
from shopsync.domain.model import FieldKind, decode_id_list, encode_id_list

if TYPE_CHECKING:
    from shopsync.domain.model import Instance, TypedValue

    from .context import SyncContext

log = getLogger(__name__)

type InstanceSyncer = Callable[[Instance], Awaitable[Instance | None]]


class ReferenceSynchronizer:
    """Materialize the target encoding of a source value.

    Instance references are synced recursively (creating the target instance
    when needed) before their target id is substituted. Files are looked up by
    derived name and never created here; products and collections are looked up
    by handle. A referenced entity missing at target is logged and dropped; one
    missing at source raises ``NotFoundError``.
    """

    def __init__(self, context: SyncContext, *, sync_instance: InstanceSyncer) -> None:
        self.context = context
        self._sync_instance = sync_instance

    async def materialize(self, item: TypedValue) -> str | None:
        raw = item.value
        if not raw:
            return None

        match FieldKind.of(item.type):
            case FieldKind.METAOBJECT_REFERENCE:
                return await self._instance_id(raw)
            case FieldKind.LIST_METAOBJECT_REFERENCE:
                return _encode([await self._instance_id(value) for value in decode_id_list(raw)])
            case FieldKind.FILE_REFERENCE:
                return await self._file_id(raw)
            case FieldKind.LIST_FILE_REFERENCE:
                return _encode([await self._file_id(value) for value in decode_id_list(raw)])
            case FieldKind.PRODUCT_REFERENCE:
                return await self._product_id(raw)
            case FieldKind.LIST_PRODUCT_REFERENCE:
                return _encode([await self._product_id(value) for value in decode_id_list(raw)])
            case FieldKind.COLLECTION_REFERENCE:
                return await self._collection_id(raw)
            case FieldKind.LIST_COLLECTION_REFERENCE:
                return _encode([await self._collection_id(value) for value in decode_id_list(raw)])
            case _:
                return raw

    async def _instance_id(self, source_id: str) -> str | None:
        referenced = await self.context.source.instance(source_id)
        if referenced is None:
            raise NotFoundError("Instance", source_id, side="source")
        synced = await self._sync_instance(referenced)
        if synced is None:
            log.warning(
                "Reference to %s/%s has no target yet; leaving it empty", *referenced.identity
            )
            return None
        return synced.id

    async def _file_id(self, source_id: str) -> str | None:
        source_file = await self.context.source.file(source_id)
        if source_file is None:
            raise NotFoundError("File", source_id, side="source")
        target_file = None
        if source_file.name:
            target_file = await self.context.target.file_by_name(source_file.name)
        if target_file is None:
            log.warning("File %s (%s) not found at target", source_file.name, source_id)
            return None
        return target_file.id

    async def _product_id(self, source_id: str) -> str | None:
        source_product = await self.context.source.product(source_id)
        if source_product is None:
            raise NotFoundError("Product", source_id, side="source")
        target_product = await self.context.target.product_by_handle(source_product.handle)
        if target_product is None:
            log.warning("Product %s not found at target", source_product.handle)
            return None
        return target_product.id

    async def _collection_id(self, source_id: str) -> str | None:
        source_collection = await self.context.source.collection(source_id)
        if source_collection is None:
            raise NotFoundError("Collection", source_id, side="source")
        target_collection = (await self.context.target.collections()).get(source_collection.handle)
        if target_collection is None:
            log.warning("Collection %s not found at target", source_collection.handle)
            return None
        return target_collection.id


def _encode(ids: list[str | None]) -> str | None:
    present = [item for item in ids if item is not None]
    return encode_id_list(present) if present else None
