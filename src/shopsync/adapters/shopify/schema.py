"""Pydantic models describing the Shopify Admin GraphQL payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _none_to_empty(value: object) -> object:
    return [] if value is None else value


class ShopifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


# Envelope


class GraphQLErrorPayload(ShopifyBaseModel):
    message: str
    path: list[str | int] | None = None
    extensions: dict[str, Any] | None = None


class GraphQLResponse(ShopifyBaseModel):
    data: dict[str, Any] | None = None
    errors: list[GraphQLErrorPayload] = Field(default_factory=list)

    _normalize_errors = field_validator("errors", mode="before")(_none_to_empty)


class PageInfo(ShopifyBaseModel):
    has_next_page: bool
    end_cursor: str | None = None


class UserErrorPayload(ShopifyBaseModel):
    message: str
    field: list[str] | None = None
    code: str | None = None


class JobPayload(ShopifyBaseModel):
    id: str
    done: bool = False


# Definitions and instances


class FieldTypePayload(ShopifyBaseModel):
    name: str
    category: str | None = None


class ValidationPayload(ShopifyBaseModel):
    name: str
    value: str | None = None
    type: str | None = None


class AccessPayload(ShopifyBaseModel):
    admin: str | None = None
    storefront: str | None = None
    customer_account: str | None = None


class FieldDefinitionPayload(ShopifyBaseModel):
    key: str
    name: str
    type: FieldTypePayload
    description: str | None = None
    required: bool = False
    validations: list[ValidationPayload] = Field(default_factory=list)


class DefinitionPayload(ShopifyBaseModel):
    id: str
    type: str
    name: str
    display_name_key: str | None = None
    access: AccessPayload | None = None
    field_definitions: list[FieldDefinitionPayload] = Field(default_factory=list)


class InstanceFieldPayload(ShopifyBaseModel):
    key: str
    type: str
    value: str | None = None


class InstancePayload(ShopifyBaseModel):
    id: str
    type: str
    handle: str
    fields: list[InstanceFieldPayload] = Field(default_factory=list)


# Attribute definitions and attributes


class AttributePayload(ShopifyBaseModel):
    namespace: str
    key: str
    type: str
    value: str | None = None
    id: str | None = None


class AttributeNodes(ShopifyBaseModel):
    nodes: list[AttributePayload] = Field(default_factory=list)


class AttributeDefinitionPayload(ShopifyBaseModel):
    id: str
    namespace: str
    key: str
    name: str
    owner_type: str
    type: FieldTypePayload
    description: str | None = None
    pinned_position: int | None = None
    access: AccessPayload | None = None
    validations: list[ValidationPayload] = Field(default_factory=list)


# Files and media


class ImagePayload(ShopifyBaseModel):
    url: str | None = None


class PreviewPayload(ShopifyBaseModel):
    image: ImagePayload | None = None


class FilePayload(ShopifyBaseModel):
    id: str
    alt: str | None = None
    preview: PreviewPayload | None = None

    @property
    def url(self) -> str | None:
        if self.preview is None or self.preview.image is None:
            return None
        return self.preview.image.url


class MediaPayload(FilePayload):
    media_content_type: str


# Catalog


class CollectionPayload(ShopifyBaseModel):
    id: str
    handle: str
    title: str
    description_html: str = ""
    template_suffix: str | None = None


class SelectedOptionPayload(ShopifyBaseModel):
    name: str
    value: str


class VariantPayload(ShopifyBaseModel):
    id: str
    title: str
    price: str
    compare_at_price: str | None = None
    barcode: str | None = None
    sku: str | None = None
    taxable: bool = True
    inventory_policy: str = "DENY"
    selected_options: list[SelectedOptionPayload] = Field(default_factory=list)
    image: ImagePayload | None = None
    metafields: AttributeNodes = Field(default_factory=AttributeNodes)


class ProductOptionPayload(ShopifyBaseModel):
    name: str
    position: int
    values: list[str] = Field(default_factory=list)


class SeoPayload(ShopifyBaseModel):
    title: str | None = None
    description: str | None = None


class CategoryPayload(ShopifyBaseModel):
    id: str


class CollectionNodes(ShopifyBaseModel):
    nodes: list[CollectionPayload] = Field(default_factory=list)


class MediaNodes(ShopifyBaseModel):
    nodes: list[MediaPayload] = Field(default_factory=list)


class VariantNodes(ShopifyBaseModel):
    nodes: list[VariantPayload] = Field(default_factory=list)


class ProductPayload(ShopifyBaseModel):
    id: str
    handle: str
    title: str
    description_html: str = ""
    product_type: str = ""
    vendor: str = ""
    status: str = "ACTIVE"
    tags: list[str] = Field(default_factory=list)
    template_suffix: str | None = None
    gift_card_template_suffix: str | None = None
    requires_selling_plan: bool = False
    is_gift_card: bool = False
    category: CategoryPayload | None = None
    seo: SeoPayload = Field(default_factory=SeoPayload)
    options: list[ProductOptionPayload] = Field(default_factory=list)
    collections: CollectionNodes = Field(default_factory=CollectionNodes)
    media: MediaNodes = Field(default_factory=MediaNodes)
    variants: VariantNodes = Field(default_factory=VariantNodes)
    metafields: AttributeNodes = Field(default_factory=AttributeNodes)


class PagePayload(ShopifyBaseModel):
    id: str
    handle: str
    title: str
    body: str = ""
    is_published: bool = False
    template_suffix: str | None = None
    metafields: AttributeNodes = Field(default_factory=AttributeNodes)


class CustomerAccountPagePayload(ShopifyBaseModel):
    id: str
    handle: str
    title: str


class MenuItemPayload(ShopifyBaseModel):
    title: str
    type: str
    id: str | None = None
    url: str | None = None
    resource_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    items: list[MenuItemPayload] = Field(default_factory=list)

    _normalize_items = field_validator("items", "tags", mode="before")(_none_to_empty)


class MenuPayload(ShopifyBaseModel):
    id: str
    handle: str
    title: str
    is_default: bool = False
    items: list[MenuItemPayload] = Field(default_factory=list)
