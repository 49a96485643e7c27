"""Run-scoped state shared by the reconciliation components.

A ``SyncContext`` is created once per run and handed down explicitly. It owns
one ``StoreView`` per store (lazily loaded indexes and read-through caches)
plus the bookkeeping that keeps recursive reference sync finite.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.ports.reporting import ErrorReporter, LoggingErrorReporter

from .mapper import KeyIndex

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shopsync.domain.errors import Side
    from shopsync.domain.model import (
        AttributeDefinition,
        Collection,
        CustomerAccountPage,
        Definition,
        FieldDefinition,
        File,
        Instance,
        Page,
        Product,
    )
    from shopsync.domain.ports.store import Store

log = getLogger(__name__)

RESERVED_DEFINITION_MARKER = "shopify--"
RESERVED_NAMESPACE_MARKER = "shopify"
SKIPPED_ATTRIBUTES: frozenset[tuple[str, str]] = frozenset({("global", "harmonized_system_code")})


@dataclass(slots=True, frozen=True)
class SyncPolicy:
    """Which parts of a store take part in a run."""

    owner_types: tuple[str, ...] = ("PAGE", "PRODUCT", "PRODUCTVARIANT")

    def is_reserved_definition(self, definition_type: str) -> bool:
        return RESERVED_DEFINITION_MARKER in definition_type

    def is_reserved_namespace(self, namespace: str) -> bool:
        return RESERVED_NAMESPACE_MARKER in namespace

    def is_skipped_attribute(self, namespace: str, key: str) -> bool:
        return (namespace, key) in SKIPPED_ATTRIBUTES


class StoreView:
    """Read-through view of one store for the duration of a run."""

    def __init__(self, store: Store, *, side: Side) -> None:
        self.store = store
        self.side: Side = side
        self._definitions: KeyIndex[str, Definition] | None = None
        self._instances_by_key: dict[tuple[str, str], Instance | None] = {}
        self._instances_by_id: dict[str, Instance | None] = {}
        self._instance_indexes: dict[str, KeyIndex[tuple[str, str], Instance]] = {}
        self._attribute_definitions: dict[str, KeyIndex[str, AttributeDefinition]] = {}
        self._files: KeyIndex[str, File] | None = None
        self._files_by_id: dict[str, File | None] = {}
        self._files_by_name: dict[str, File | None] = {}
        self._products_by_id: dict[str, Product | None] = {}
        self._products_by_handle: dict[str, Product | None] = {}
        self._collections: KeyIndex[str, Collection] | None = None
        self._pages: KeyIndex[str, Page] | None = None
        self._customer_account_pages: KeyIndex[str, CustomerAccountPage] | None = None

    def __repr__(self) -> str:
        return f"StoreView({self.store.name!r}, side={self.side!r})"

    # Definitions

    async def definitions(self) -> KeyIndex[str, Definition]:
        if self._definitions is None:
            self._definitions = KeyIndex(
                await self.store.list_definitions(),
                key=lambda item: item.type,
                kind="Definition",
                side=self.side,
            )
        return self._definitions

    # Instances

    async def instances_of(self, definition_type: str) -> KeyIndex[tuple[str, str], Instance]:
        index = self._instance_indexes.get(definition_type)
        if index is None:
            items = [item async for item in self.store.iter_instances(definition_type)]
            index = KeyIndex(items, key=lambda item: item.identity, kind="Instance", side=self.side)
            self._instance_indexes[definition_type] = index
            for item in index:
                self._cache_instance(item)
        return index

    async def instance(self, instance_id: str) -> Instance | None:
        if instance_id not in self._instances_by_id:
            found = await self.store.get_instance(instance_id)
            self._instances_by_id[instance_id] = found
            if found is not None:
                self._instances_by_key[found.identity] = found
        return self._instances_by_id[instance_id]

    async def instance_by_handle(self, definition_type: str, handle: str) -> Instance | None:
        key = (definition_type, handle)
        index = self._instance_indexes.get(definition_type)
        if index is not None:
            return index.get(key)
        if key not in self._instances_by_key:
            found = await self.store.get_instance_by_handle(definition_type, handle)
            self._instances_by_key[key] = found
            if found is not None:
                self._instances_by_id[found.id] = found
        return self._instances_by_key[key]

    def remember_instance(self, instance: Instance) -> None:
        self._cache_instance(instance)
        index = self._instance_indexes.get(instance.type)
        if index is not None:
            index.add(instance)

    def forget_instance(self, instance: Instance) -> None:
        self._instances_by_id[instance.id] = None
        self._instances_by_key[instance.identity] = None
        index = self._instance_indexes.get(instance.type)
        if index is not None:
            index.discard(instance.identity)

    def _cache_instance(self, instance: Instance) -> None:
        self._instances_by_id[instance.id] = instance
        self._instances_by_key[instance.identity] = instance

    # Attribute definitions

    async def load_attribute_definitions(self, owner_types: Iterable[str]) -> None:
        """Read every missing owner type concurrently; returns once all reads finish."""

        missing = [owner for owner in owner_types if owner not in self._attribute_definitions]
        results = await asyncio.gather(
            *(self.store.list_attribute_definitions(owner) for owner in missing)
        )
        for owner, items in zip(missing, results, strict=True):
            self._attribute_definitions[owner] = KeyIndex(
                items,
                key=lambda item: item.identity,
                kind=f"AttributeDefinition[{owner}]",
                side=self.side,
            )

    async def attribute_definitions(self, owner_type: str) -> KeyIndex[str, AttributeDefinition]:
        if owner_type not in self._attribute_definitions:
            await self.load_attribute_definitions((owner_type,))
        return self._attribute_definitions[owner_type]

    # Files

    async def files(self) -> KeyIndex[str, File]:
        if self._files is None:
            items = [item async for item in self.store.iter_files() if item.name]
            self._files = KeyIndex(
                items,
                key=lambda item: item.name or "",
                kind="File",
                side=self.side,
            )
        return self._files

    async def file(self, file_id: str) -> File | None:
        if self._files is not None:
            return self._files.get_by_id(file_id)
        if file_id not in self._files_by_id:
            self._files_by_id[file_id] = await self.store.get_file(file_id)
        return self._files_by_id[file_id]

    async def file_by_name(self, name: str) -> File | None:
        if self._files is not None:
            return self._files.get(name)
        if name not in self._files_by_name:
            self._files_by_name[name] = await self.store.get_file_by_name(name)
        return self._files_by_name[name]

    def remember_file(self, file: File) -> None:
        self._files_by_id[file.id] = file
        if file.name:
            self._files_by_name[file.name] = file
            if self._files is not None:
                self._files.add(file)

    # Products

    async def product(self, product_id: str) -> Product | None:
        if product_id not in self._products_by_id:
            found = await self.store.get_product(product_id)
            self._products_by_id[product_id] = found
            if found is not None:
                self._products_by_handle[found.handle] = found
        return self._products_by_id[product_id]

    async def product_by_handle(self, handle: str) -> Product | None:
        if handle not in self._products_by_handle:
            found = await self.store.get_product_by_handle(handle)
            self._products_by_handle[handle] = found
            if found is not None:
                self._products_by_id[found.id] = found
        return self._products_by_handle[handle]

    def remember_product(self, product: Product) -> None:
        self._products_by_id[product.id] = product
        self._products_by_handle[product.handle] = product

    def forget_product(self, product: Product) -> None:
        """Drop a cached product so the next read sees writes made to its variants."""

        self._products_by_id.pop(product.id, None)
        self._products_by_handle.pop(product.handle, None)

    # Collections, pages

    async def collections(self) -> KeyIndex[str, Collection]:
        if self._collections is None:
            self._collections = KeyIndex(
                await self.store.list_collections(),
                key=lambda item: item.handle,
                kind="Collection",
                side=self.side,
            )
        return self._collections

    async def collection(self, collection_id: str) -> Collection | None:
        index = await self.collections()
        found = index.get_by_id(collection_id)
        if found is None:
            found = await self.store.get_collection(collection_id)
            if found is not None:
                index.add(found)
        return found

    async def pages(self) -> KeyIndex[str, Page]:
        if self._pages is None:
            self._pages = KeyIndex(
                await self.store.list_pages(),
                key=lambda item: item.handle,
                kind="Page",
                side=self.side,
            )
        return self._pages

    async def customer_account_pages(self) -> KeyIndex[str, CustomerAccountPage]:
        if self._customer_account_pages is None:
            self._customer_account_pages = KeyIndex(
                await self.store.list_customer_account_pages(),
                key=lambda item: item.handle,
                kind="CustomerAccountPage",
                side=self.side,
            )
        return self._customer_account_pages


@dataclass(slots=True, frozen=True)
class DeferredField:
    """A field definition held back until the definition it references exists at target."""

    owner_type: str
    field_definition: FieldDefinition


@dataclass(slots=True)
class SyncContext:
    source: StoreView
    target: StoreView
    policy: SyncPolicy = field(default_factory=SyncPolicy)
    reporter: ErrorReporter = field(default_factory=LoggingErrorReporter)
    # Cross-system keys whose sync has started. A key is dropped again only when its sync fails.
    definitions_in_progress: set[str] = field(default_factory=set)
    synced_definitions: dict[str, Definition] = field(default_factory=dict)
    instances_in_progress: set[tuple[str, str]] = field(default_factory=set)
    synced_instances: dict[tuple[str, str], Instance] = field(default_factory=dict)
    # Referenced definition type -> fields waiting for it.
    deferred_fields: dict[str, list[DeferredField]] = field(default_factory=dict)

    @classmethod
    def for_stores(
        cls,
        source: Store,
        target: Store,
        *,
        policy: SyncPolicy | None = None,
        reporter: ErrorReporter | None = None,
    ) -> SyncContext:
        return cls(
            source=StoreView(source, side="source"),
            target=StoreView(target, side="target"),
            policy=policy or SyncPolicy(),
            reporter=reporter or LoggingErrorReporter(),
        )

    def defer(self, referenced_type: str, pending: DeferredField) -> None:
        self.deferred_fields.setdefault(referenced_type, []).append(pending)

    def take_deferred(self, referenced_type: str) -> list[DeferredField]:
        return self.deferred_fields.pop(referenced_type, [])

    def withdraw_deferred(self, owner_type: str) -> None:
        """Forget the fields ``owner_type`` held back; its next sync holds them back again."""

        for referenced_type, pending in list(self.deferred_fields.items()):
            kept = [item for item in pending if item.owner_type != owner_type]
            if kept:
                self.deferred_fields[referenced_type] = kept
            else:
                del self.deferred_fields[referenced_type]
