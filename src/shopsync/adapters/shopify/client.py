"""Shopify Admin GraphQL implementation of the store port."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import batched
from logging import getLogger
from typing import TYPE_CHECKING, Any

from shopsync.adapters.http_resilience import ResilientClient
from shopsync.domain.errors import Rejection, ValidationConflictError
from shopsync.domain.ports.store import Store

from . import queries
from .schema import (
    AttributeDefinitionPayload,
    AttributePayload,
    CollectionPayload,
    CustomerAccountPagePayload,
    DefinitionPayload,
    FilePayload,
    GraphQLErrorPayload,
    GraphQLResponse,
    InstancePayload,
    JobPayload,
    MenuPayload,
    PageInfo,
    PagePayload,
    ProductPayload,
    UserErrorPayload,
    VariantPayload,
)
from .translator import (
    attribute_definition_create_input,
    attribute_definition_update_input,
    attribute_identifier_input,
    attribute_set_input,
    collection_create_input,
    definition_create_input,
    definition_update_input,
    file_create_input,
    instance_create_input,
    instance_update_input,
    media_input,
    menu_item_input,
    page_create_input,
    product_create_input,
    product_update_input,
    to_attribute,
    to_attribute_definition,
    to_collection,
    to_customer_account_page,
    to_definition,
    to_file,
    to_instance,
    to_menu,
    to_page,
    to_product,
    to_variant,
    variant_input,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Sequence
    from types import TracebackType

    from shopsync.config.http_resilience import ResilienceConfig
    from shopsync.config.shopify import StoreConfig
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

    from .translator import Variables

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 250
ATTRIBUTE_CHUNK_SIZE = 250
FILE_CHUNK_SIZE = 250
VARIANT_CHUNK_SIZE = 100
VARIANT_CREATE_STRATEGY = "REMOVE_STANDALONE_VARIANT"
# Bulk jobs answer with a user error even though they were accepted.
JOB_ENQUEUED_MESSAGE = "Your job has been enqueued and will run shortly."


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class ShopifyAPIError(RuntimeError):
    """Raised when the Admin API answers with top-level GraphQL errors or no data."""

    def __init__(
        self,
        message: str,
        *,
        store: str,
        operation: str,
        errors: Sequence[GraphQLErrorPayload] = (),
    ) -> None:
        super().__init__(f"{store}: {operation} failed: {message}")
        self.store = store
        self.operation = operation
        self.errors = tuple(errors)


@dataclass(slots=True)
class ShopifyStore:
    """One Shopify store reached through its Admin GraphQL endpoint.

    The HTTP client is created on first use and must be released with
    ``aclose`` (or by using the store as an async context manager).
    """

    config: StoreConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    page_size: int = DEFAULT_PAGE_SIZE
    name: str = field(init=False)
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.name = self.config.store_name

    @property
    def client(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        return self._client

    async def __aenter__(self) -> ShopifyStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # Transport

    async def _execute(self, query: str, variables: Variables, *, operation: str) -> dict[str, Any]:
        response = await self.client.post_json(
            self.config.endpoint, {"query": query, "variables": variables}
        )
        response.raise_for_status()
        payload = GraphQLResponse.model_validate(response.json())
        if payload.errors:
            message = "; ".join(error.message for error in payload.errors)
            log.error("%s: GraphQL errors during %s: %s", self.name, operation, message)
            raise ShopifyAPIError(
                message, store=self.name, operation=operation, errors=payload.errors
            )
        if payload.data is None:
            raise ShopifyAPIError("response carried no data", store=self.name, operation=operation)
        return payload.data

    async def _mutate(
        self,
        query: str,
        variables: Variables,
        *,
        root: str,
        operation: str,
        payload: object,
    ) -> dict[str, Any]:
        data = await self._execute(query, variables, operation=operation)
        result: dict[str, Any] = data.get(root) or {}
        rejections = [
            Rejection(message=error.message, field=tuple(error.field or ()), code=error.code)
            for error in (
                UserErrorPayload.model_validate(item) for item in result.get("userErrors") or ()
            )
            if error.message != JOB_ENQUEUED_MESSAGE
        ]
        if rejections:
            log.warning("%s: %s rejected with %d error(s)", self.name, operation, len(rejections))
            raise ValidationConflictError(operation, payload=payload, reasons=rejections)
        return result

    def _entity(self, result: dict[str, Any], name: str, *, operation: str) -> dict[str, Any]:
        entity = result.get(name)
        if entity is None:
            raise ShopifyAPIError(
                f"response carried no {name}", store=self.name, operation=operation
            )
        return entity

    async def _paginate(
        self, query: str, variables: Variables, *, root: str
    ) -> AsyncIterator[dict[str, Any]]:
        after: str | None = None
        while True:
            data = await self._execute(
                query,
                {**variables, "first": self.page_size, "after": after},
                operation=root,
            )
            connection = data[root]
            for node in connection["nodes"]:
                yield node
            page_info = PageInfo.model_validate(connection["pageInfo"])
            if not page_info.has_next_page or page_info.end_cursor is None:
                return
            after = page_info.end_cursor

    # Definitions and instances

    async def list_definitions(self) -> list[Definition]:
        return [
            to_definition(DefinitionPayload.model_validate(node))
            async for node in self._paginate(queries.DEFINITIONS, {}, root="metaobjectDefinitions")
        ]

    async def create_definition(self, payload: DefinitionCreate) -> Definition:
        operation = "metaobjectDefinitionCreate"
        result = await self._mutate(
            queries.DEFINITION_CREATE,
            {"definition": definition_create_input(payload)},
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "metaobjectDefinition", operation=operation)
        return to_definition(DefinitionPayload.model_validate(entity))

    async def update_definition(self, definition_id: str, payload: DefinitionUpdate) -> Definition:
        operation = "metaobjectDefinitionUpdate"
        result = await self._mutate(
            queries.DEFINITION_UPDATE,
            {"id": definition_id, "definition": definition_update_input(payload)},
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "metaobjectDefinition", operation=operation)
        return to_definition(DefinitionPayload.model_validate(entity))

    async def delete_definition(self, definition_id: str) -> str:
        operation = "metaobjectDefinitionDelete"
        result = await self._mutate(
            queries.DEFINITION_DELETE,
            {"id": definition_id},
            root=operation,
            operation=operation,
            payload=definition_id,
        )
        return result.get("deletedId") or definition_id

    async def iter_instances(self, definition_type: str) -> AsyncIterator[Instance]:
        async for node in self._paginate(
            queries.INSTANCES, {"type": definition_type}, root="metaobjects"
        ):
            yield to_instance(InstancePayload.model_validate(node))

    async def get_instance(self, instance_id: str) -> Instance | None:
        data = await self._execute(queries.INSTANCE, {"id": instance_id}, operation="metaobject")
        node = data.get("metaobject")
        return to_instance(InstancePayload.model_validate(node)) if node else None

    async def get_instance_by_handle(self, definition_type: str, handle: str) -> Instance | None:
        data = await self._execute(
            queries.INSTANCE_BY_HANDLE,
            {"handle": {"type": definition_type, "handle": handle}},
            operation="metaobjectByHandle",
        )
        node = data.get("metaobjectByHandle")
        return to_instance(InstancePayload.model_validate(node)) if node else None

    async def create_instance(self, payload: InstanceCreate) -> Instance:
        operation = "metaobjectCreate"
        result = await self._mutate(
            queries.INSTANCE_CREATE,
            {"metaobject": instance_create_input(payload)},
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "metaobject", operation=operation)
        return to_instance(InstancePayload.model_validate(entity))

    async def update_instance(self, instance_id: str, payload: InstancePatch) -> Instance:
        operation = "metaobjectUpdate"
        result = await self._mutate(
            queries.INSTANCE_UPDATE,
            {"id": instance_id, "metaobject": instance_update_input(payload)},
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "metaobject", operation=operation)
        return to_instance(InstancePayload.model_validate(entity))

    async def delete_instance(self, instance_id: str) -> str:
        operation = "metaobjectDelete"
        result = await self._mutate(
            queries.INSTANCE_DELETE,
            {"id": instance_id},
            root=operation,
            operation=operation,
            payload=instance_id,
        )
        return result.get("deletedId") or instance_id

    async def bulk_delete_instances(self, definition_type: str) -> str | None:
        operation = "metaobjectBulkDelete"
        result = await self._mutate(
            queries.INSTANCES_BULK_DELETE,
            {"where": {"type": definition_type}},
            root=operation,
            operation=operation,
            payload=definition_type,
        )
        job = result.get("job")
        return JobPayload.model_validate(job).id if job else None

    # Attribute definitions and attributes

    async def list_attribute_definitions(self, owner_type: str) -> list[AttributeDefinition]:
        return [
            to_attribute_definition(AttributeDefinitionPayload.model_validate(node))
            async for node in self._paginate(
                queries.ATTRIBUTE_DEFINITIONS,
                {"ownerType": owner_type},
                root="metafieldDefinitions",
            )
        ]

    async def create_attribute_definition(
        self, payload: AttributeDefinitionCreate
    ) -> AttributeDefinition:
        operation = "metafieldDefinitionCreate"
        result = await self._mutate(
            queries.ATTRIBUTE_DEFINITION_CREATE,
            {"definition": attribute_definition_create_input(payload)},
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "createdDefinition", operation=operation)
        return to_attribute_definition(AttributeDefinitionPayload.model_validate(entity))

    async def update_attribute_definition(
        self, payload: AttributeDefinitionUpdate
    ) -> AttributeDefinition:
        operation = "metafieldDefinitionUpdate"
        result = await self._mutate(
            queries.ATTRIBUTE_DEFINITION_UPDATE,
            {"definition": attribute_definition_update_input(payload)},
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "updatedDefinition", operation=operation)
        return to_attribute_definition(AttributeDefinitionPayload.model_validate(entity))

    async def delete_attribute_definition(self, definition_id: str) -> str:
        operation = "metafieldDefinitionDelete"
        result = await self._mutate(
            queries.ATTRIBUTE_DEFINITION_DELETE,
            {"id": definition_id},
            root=operation,
            operation=operation,
            payload=definition_id,
        )
        return result.get("deletedDefinitionId") or definition_id

    async def set_attributes(self, payload: Sequence[AttributeInput]) -> list[Attribute]:
        operation = "metafieldsSet"
        written: list[Attribute] = []
        for chunk in batched(payload, ATTRIBUTE_CHUNK_SIZE):
            result = await self._mutate(
                queries.ATTRIBUTES_SET,
                {"metafields": [attribute_set_input(item) for item in chunk]},
                root=operation,
                operation=operation,
                payload=chunk,
            )
            written.extend(
                to_attribute(AttributePayload.model_validate(item))
                for item in result.get("metafields") or ()
            )
        return written

    async def delete_attributes(self, payload: Sequence[AttributeIdentifier]) -> int:
        operation = "metafieldsDelete"
        deleted = 0
        for chunk in batched(payload, ATTRIBUTE_CHUNK_SIZE):
            result = await self._mutate(
                queries.ATTRIBUTES_DELETE,
                {"metafields": [attribute_identifier_input(item) for item in chunk]},
                root=operation,
                operation=operation,
                payload=chunk,
            )
            deleted += sum(1 for item in result.get("deletedMetafields") or () if item)
        return deleted

    # Files

    async def iter_files(self) -> AsyncIterator[File]:
        async for node in self._paginate(queries.FILES, {}, root="files"):
            # Nodes of other file kinds come back empty.
            if node:
                yield to_file(FilePayload.model_validate(node))

    async def get_file(self, file_id: str) -> File | None:
        data = await self._execute(queries.FILE, {"id": file_id}, operation="node")
        node = data.get("node")
        return to_file(FilePayload.model_validate(node)) if node else None

    async def get_file_by_name(self, name: str) -> File | None:
        async for node in self._paginate(
            queries.FILES, {"query": f"filename:{name}"}, root="files"
        ):
            if not node:
                continue
            found = to_file(FilePayload.model_validate(node))
            if found.name == name:
                return found
        return None

    async def create_files(self, payload: Sequence[FileCreate]) -> list[File]:
        operation = "fileCreate"
        created: list[File] = []
        for chunk in batched(payload, FILE_CHUNK_SIZE):
            result = await self._mutate(
                queries.FILES_CREATE,
                {"files": [file_create_input(item) for item in chunk]},
                root=operation,
                operation=operation,
                payload=chunk,
            )
            created.extend(
                to_file(FilePayload.model_validate(item)) for item in result.get("files") or ()
            )
        return created

    # Products

    async def iter_products(self) -> AsyncIterator[Product]:
        async for node in self._paginate(queries.PRODUCTS, {}, root="products"):
            yield to_product(ProductPayload.model_validate(node))

    async def get_product(self, product_id: str) -> Product | None:
        data = await self._execute(queries.PRODUCT, {"id": product_id}, operation="product")
        node = data.get("product")
        return to_product(ProductPayload.model_validate(node)) if node else None

    async def get_product_by_handle(self, handle: str) -> Product | None:
        data = await self._execute(
            queries.PRODUCT_BY_HANDLE, {"handle": handle}, operation="productByHandle"
        )
        node = data.get("productByHandle")
        return to_product(ProductPayload.model_validate(node)) if node else None

    async def create_product(self, payload: ProductCreate, media: Sequence[MediaInput]) -> Product:
        operation = "productCreate"
        result = await self._mutate(
            queries.PRODUCT_CREATE,
            {
                "product": product_create_input(payload),
                "media": [media_input(item) for item in media],
            },
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "product", operation=operation)
        return to_product(ProductPayload.model_validate(entity))

    async def update_product(self, payload: ProductUpdate) -> Product:
        operation = "productUpdate"
        result = await self._mutate(
            queries.PRODUCT_UPDATE,
            {"product": product_update_input(payload)},
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "product", operation=operation)
        return to_product(ProductPayload.model_validate(entity))

    async def bulk_create_variants(
        self, product_id: str, payload: Sequence[VariantInput]
    ) -> list[Variant]:
        operation = "productVariantsBulkCreate"
        created: list[Variant] = []
        for chunk in batched(payload, VARIANT_CHUNK_SIZE):
            result = await self._mutate(
                queries.VARIANTS_BULK_CREATE,
                {
                    "productId": product_id,
                    "variants": [variant_input(item) for item in chunk],
                    "strategy": VARIANT_CREATE_STRATEGY,
                },
                root=operation,
                operation=operation,
                payload=chunk,
            )
            created.extend(
                to_variant(VariantPayload.model_validate(item))
                for item in result.get("productVariants") or ()
            )
        return created

    async def bulk_update_variants(
        self, product_id: str, payload: Sequence[VariantInput]
    ) -> list[Variant]:
        operation = "productVariantsBulkUpdate"
        updated: list[Variant] = []
        for chunk in batched(payload, VARIANT_CHUNK_SIZE):
            result = await self._mutate(
                queries.VARIANTS_BULK_UPDATE,
                {"productId": product_id, "variants": [variant_input(item) for item in chunk]},
                root=operation,
                operation=operation,
                payload=chunk,
            )
            updated.extend(
                to_variant(VariantPayload.model_validate(item))
                for item in result.get("productVariants") or ()
            )
        return updated

    # Collections, pages and menus

    async def list_collections(self) -> list[Collection]:
        return [
            to_collection(CollectionPayload.model_validate(node))
            async for node in self._paginate(queries.COLLECTIONS, {}, root="collections")
        ]

    async def get_collection(self, collection_id: str) -> Collection | None:
        data = await self._execute(
            queries.COLLECTION, {"id": collection_id}, operation="collection"
        )
        node = data.get("collection")
        return to_collection(CollectionPayload.model_validate(node)) if node else None

    async def create_collection(self, payload: CollectionCreate) -> Collection:
        operation = "collectionCreate"
        result = await self._mutate(
            queries.COLLECTION_CREATE,
            {"input": collection_create_input(payload)},
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "collection", operation=operation)
        return to_collection(CollectionPayload.model_validate(entity))

    async def delete_collection(self, collection_id: str) -> str:
        operation = "collectionDelete"
        result = await self._mutate(
            queries.COLLECTION_DELETE,
            {"input": {"id": collection_id}},
            root=operation,
            operation=operation,
            payload=collection_id,
        )
        return result.get("deletedCollectionId") or collection_id

    async def list_pages(self) -> list[Page]:
        return [
            to_page(PagePayload.model_validate(node))
            async for node in self._paginate(queries.PAGES, {}, root="pages")
        ]

    async def create_page(self, payload: PageCreate) -> Page:
        operation = "pageCreate"
        result = await self._mutate(
            queries.PAGE_CREATE,
            {"page": page_create_input(payload)},
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "page", operation=operation)
        return to_page(PagePayload.model_validate(entity))

    async def list_customer_account_pages(self) -> list[CustomerAccountPage]:
        return [
            to_customer_account_page(CustomerAccountPagePayload.model_validate(node))
            async for node in self._paginate(
                queries.CUSTOMER_ACCOUNT_PAGES, {}, root="customerAccountPages"
            )
        ]

    async def list_menus(self) -> list[Menu]:
        return [
            to_menu(MenuPayload.model_validate(node))
            async for node in self._paginate(queries.MENUS, {}, root="menus")
        ]

    async def create_menu(self, payload: MenuCreate) -> Menu:
        operation = "menuCreate"
        result = await self._mutate(
            queries.MENU_CREATE,
            {
                "title": payload.title,
                "handle": payload.handle,
                "items": [menu_item_input(item) for item in payload.items],
            },
            root=operation,
            operation=operation,
            payload=payload,
        )
        entity = self._entity(result, "menu", operation=operation)
        return to_menu(MenuPayload.model_validate(entity))

    async def delete_menu(self, menu_id: str) -> str:
        operation = "menuDelete"
        result = await self._mutate(
            queries.MENU_DELETE,
            {"id": menu_id},
            root=operation,
            operation=operation,
            payload=menu_id,
        )
        return result.get("deletedMenuId") or menu_id


if TYPE_CHECKING:
    _store_check: Store = ShopifyStore(config=...)  # type: ignore[arg-type]
