"""Type-polymorphic comparison of a source value with a target value."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.errors import NotFoundError
from shopsync.domain.model import FieldKind, InstanceField, decode_id_list

if TYPE_CHECKING:
    from shopsync.domain.model import Instance, TypedValue

    from .context import StoreView, SyncContext

log = getLogger(__name__)

type _Visiting = set[tuple[str, str]]


class FieldEqualityResolver:
    """Decide whether a source value and a target value denote the same thing.

    References compare structurally: a single reference matches when the target
    points at the counterpart of the source's referenced instance *and* that
    counterpart matches field by field. Files compare by derived name, products
    and collections by handle, everything else by exact string value.

    Only reads are issued. A reference whose source entity does not exist raises
    ``NotFoundError``; a missing target counterpart simply does not match.
    """

    def __init__(self, context: SyncContext) -> None:
        self.context = context

    async def is_equal(self, source: TypedValue, target: TypedValue) -> bool:
        return await self._is_equal(source, target, set())

    async def instances_match(self, source: Instance, target: Instance) -> bool:
        return await self._instances_match(source, target, set())

    async def _is_equal(self, source: TypedValue, target: TypedValue, visiting: _Visiting) -> bool:
        if source.value is None or target.value is None:
            return source.value == target.value

        match FieldKind.of(source.type):
            case FieldKind.METAOBJECT_REFERENCE:
                return await self._reference_matches(source.value, target.value, visiting)
            case FieldKind.LIST_METAOBJECT_REFERENCE:
                return await self._reference_lists_match(source.value, target.value, visiting)
            case FieldKind.FILE_REFERENCE | FieldKind.LIST_FILE_REFERENCE:
                return _same_keys(
                    await self._file_names(self.context.source, source.value),
                    await self._file_names(self.context.target, target.value),
                )
            case FieldKind.PRODUCT_REFERENCE | FieldKind.LIST_PRODUCT_REFERENCE:
                return _same_keys(
                    await self._product_handles(self.context.source, source.value),
                    await self._product_handles(self.context.target, target.value),
                )
            case FieldKind.COLLECTION_REFERENCE | FieldKind.LIST_COLLECTION_REFERENCE:
                return _same_keys(
                    await self._collection_handles(self.context.source, source.value),
                    await self._collection_handles(self.context.target, target.value),
                )
            case _:
                return source.value == target.value

    async def _instances_match(
        self, source: Instance, target: Instance, visiting: _Visiting
    ) -> bool:
        pair = (source.id, target.id)
        if pair in visiting:
            # Already being compared further up; a reference cycle adds no new evidence.
            return True
        visiting.add(pair)
        for source_field in source.fields:
            target_field = target.field(source_field.key) or InstanceField(
                key=source_field.key, type=source_field.type
            )
            if not await self._is_equal(source_field, target_field, visiting):
                log.debug(
                    "Field %s of %s/%s differs from target", source_field.key, *source.identity
                )
                return False
        return True

    async def _source_instance(self, instance_id: str) -> Instance:
        found = await self.context.source.instance(instance_id)
        if found is None:
            raise NotFoundError("Instance", instance_id, side="source")
        return found

    async def _reference_matches(self, source_id: str, target_id: str, visiting: _Visiting) -> bool:
        referenced = await self._source_instance(source_id)
        counterpart = await self.context.target.instance_by_handle(*referenced.identity)
        if counterpart is None or counterpart.id != target_id:
            return False
        return await self._instances_match(referenced, counterpart, visiting)

    async def _reference_lists_match(
        self, source_value: str, target_value: str, visiting: _Visiting
    ) -> bool:
        source_ids = decode_id_list(source_value)
        target_ids = decode_id_list(target_value)
        if len(source_ids) != len(target_ids):
            return False
        sources = [await self._source_instance(item) for item in source_ids]
        targets: list[Instance] = []
        for item in target_ids:
            found = await self.context.target.instance(item)
            if found is None:
                return False
            targets.append(found)

        for referenced in sources:
            candidate = next(
                (
                    item
                    for item in targets
                    if item.type == referenced.type and referenced.handle in item.handle
                ),
                None,
            )
            if candidate is None:
                return False
            if not await self._instances_match(referenced, candidate, visiting):
                return False
        return True

    async def _file_names(self, view: StoreView, value: str) -> list[str | None]:
        names: list[str | None] = []
        for file_id in _ids(value):
            file = await view.file(file_id)
            names.append(file.name if file else None)
        return names

    async def _product_handles(self, view: StoreView, value: str) -> list[str | None]:
        handles: list[str | None] = []
        for product_id in _ids(value):
            product = await view.product(product_id)
            handles.append(product.handle if product else None)
        return handles

    async def _collection_handles(self, view: StoreView, value: str) -> list[str | None]:
        handles: list[str | None] = []
        for collection_id in _ids(value):
            collection = await view.collection(collection_id)
            handles.append(collection.handle if collection else None)
        return handles


def _ids(value: str) -> list[str]:
    """Single references hold a bare id, list references a JSON array of ids."""

    if value.lstrip().startswith("["):
        return decode_id_list(value)
    return [value]


def _same_keys(source: list[str | None], target: list[str | None]) -> bool:
    """Order-insensitive comparison; an unresolvable member on either side never matches."""

    if None in source or None in target:
        return False
    return sorted(source, key=str) == sorted(target, key=str)
