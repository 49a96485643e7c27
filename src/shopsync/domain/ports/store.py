"""Port for reading and mutating one store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from shopsync.domain.model import (
        Attribute,
        AttributeDefinition,
        Collection,
        CustomerAccountPage,
        Definition,
        File,
        Instance,
        Menu,
        Page,
        Product,
        Variant,
    )
    from shopsync.domain.model.inputs import (
        AttributeDefinitionCreate,
        AttributeDefinitionUpdate,
        AttributeIdentifier,
        AttributeInput,
        CollectionCreate,
        DefinitionCreate,
        DefinitionUpdate,
        FileCreate,
        InstanceCreate,
        InstancePatch,
        MediaInput,
        MenuCreate,
        PageCreate,
        ProductCreate,
        ProductUpdate,
        VariantInput,
    )


@runtime_checkable
class Store(Protocol):
    """Asynchronous read/write access to one store.

    Paginated reads are exposed as async iterators that fetch lazily; each call
    starts a fresh traversal. Bulk mutations accept any number of items and
    split them into as many calls as the store's per-call limit requires.
    """

    name: str

    # Definitions and instances

    async def list_definitions(self) -> list[Definition]: ...

    async def create_definition(self, payload: DefinitionCreate) -> Definition: ...

    async def update_definition(
        self, definition_id: str, payload: DefinitionUpdate
    ) -> Definition: ...

    async def delete_definition(self, definition_id: str) -> str: ...

    def iter_instances(self, definition_type: str) -> AsyncIterator[Instance]: ...

    async def get_instance(self, instance_id: str) -> Instance | None: ...

    async def get_instance_by_handle(
        self, definition_type: str, handle: str
    ) -> Instance | None: ...

    async def create_instance(self, payload: InstanceCreate) -> Instance: ...

    async def update_instance(self, instance_id: str, payload: InstancePatch) -> Instance: ...

    async def delete_instance(self, instance_id: str) -> str: ...

    async def bulk_delete_instances(self, definition_type: str) -> str | None: ...

    # Attribute definitions and attributes

    async def list_attribute_definitions(self, owner_type: str) -> list[AttributeDefinition]: ...

    async def create_attribute_definition(
        self, payload: AttributeDefinitionCreate
    ) -> AttributeDefinition: ...

    async def update_attribute_definition(
        self, payload: AttributeDefinitionUpdate
    ) -> AttributeDefinition: ...

    async def delete_attribute_definition(self, definition_id: str) -> str: ...

    async def set_attributes(self, payload: Sequence[AttributeInput]) -> list[Attribute]: ...

    async def delete_attributes(self, payload: Sequence[AttributeIdentifier]) -> int: ...

    # Files

    def iter_files(self) -> AsyncIterator[File]: ...

    async def get_file(self, file_id: str) -> File | None: ...

    async def get_file_by_name(self, name: str) -> File | None: ...

    async def create_files(self, payload: Sequence[FileCreate]) -> list[File]: ...

    # Products

    def iter_products(self) -> AsyncIterator[Product]: ...

    async def get_product(self, product_id: str) -> Product | None: ...

    async def get_product_by_handle(self, handle: str) -> Product | None: ...

    async def create_product(
        self, payload: ProductCreate, media: Sequence[MediaInput]
    ) -> Product: ...

    async def update_product(self, payload: ProductUpdate) -> Product: ...

    async def bulk_create_variants(
        self, product_id: str, payload: Sequence[VariantInput]
    ) -> list[Variant]: ...

    async def bulk_update_variants(
        self, product_id: str, payload: Sequence[VariantInput]
    ) -> list[Variant]: ...

    # Collections, pages and menus

    async def list_collections(self) -> list[Collection]: ...

    async def get_collection(self, collection_id: str) -> Collection | None: ...

    async def create_collection(self, payload: CollectionCreate) -> Collection: ...

    async def delete_collection(self, collection_id: str) -> str: ...

    async def list_pages(self) -> list[Page]: ...

    async def create_page(self, payload: PageCreate) -> Page: ...

    async def list_customer_account_pages(self) -> list[CustomerAccountPage]: ...

    async def list_menus(self) -> list[Menu]: ...

    async def create_menu(self, payload: MenuCreate) -> Menu: ...

    async def delete_menu(self, menu_id: str) -> str: ...
