"""Mutation payloads handed to the store port.

Partial updates distinguish "leave as is" (``UNSET``) from "set to null"
(``None``); only the attributes that differ are assigned.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Final, Literal

from .catalog import ProductOption, SelectedOption, Seo


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset.UNSET

type Maybe[T] = T | Literal[_Unset.UNSET]


def assigned(payload: object, *, exclude: tuple[str, ...] = ()) -> dict[str, object]:
    """Return the dataclass attributes of ``payload`` that are not ``UNSET``."""

    return {
        item.name: getattr(payload, item.name)
        for item in fields(payload)  # type: ignore[arg-type]
        if item.name not in exclude and getattr(payload, item.name) is not UNSET
    }


# Instances


@dataclass(slots=True, kw_only=True, frozen=True)
class InstanceFieldInput:
    key: str
    value: str | None


@dataclass(slots=True, kw_only=True, frozen=True)
class InstanceCreate:
    type: str
    handle: str
    fields: tuple[InstanceFieldInput, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class InstancePatch:
    fields: tuple[InstanceFieldInput, ...]


# Definitions


@dataclass(slots=True, kw_only=True, frozen=True)
class ValidationInput:
    name: str
    value: str | None


@dataclass(slots=True, kw_only=True, frozen=True)
class FieldDefinitionCreate:
    key: str
    name: str
    type: str
    description: str | None = None
    required: bool = False
    validations: tuple[ValidationInput, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class FieldDefinitionUpdate:
    key: str
    name: Maybe[str] = UNSET
    description: Maybe[str | None] = UNSET
    required: Maybe[bool] = UNSET
    validations: Maybe[tuple[ValidationInput, ...]] = UNSET

    @property
    def is_empty(self) -> bool:
        return not assigned(self, exclude=("key",))


@dataclass(slots=True, kw_only=True, frozen=True)
class FieldDefinitionDelete:
    key: str


type FieldDefinitionOperation = (
    FieldDefinitionCreate | FieldDefinitionUpdate | FieldDefinitionDelete
)


@dataclass(slots=True, kw_only=True, frozen=True)
class DefinitionCreate:
    type: str
    name: str
    display_name_key: str | None = None
    storefront_access: str | None = None
    field_definitions: tuple[FieldDefinitionCreate, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class DefinitionUpdate:
    name: Maybe[str] = UNSET
    display_name_key: Maybe[str | None] = UNSET
    storefront_access: Maybe[str | None] = UNSET
    customer_account_access: Maybe[str | None] = UNSET
    field_definitions: tuple[FieldDefinitionOperation, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.field_definitions and not assigned(self, exclude=("field_definitions",))


# Attribute definitions and attributes


@dataclass(slots=True, kw_only=True, frozen=True)
class AttributeDefinitionCreate:
    namespace: str
    key: str
    name: str
    owner_type: str
    type: str
    description: str | None = None
    pin: bool = False
    storefront_access: str | None = None
    validations: tuple[ValidationInput, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class AttributeDefinitionUpdate:
    namespace: str
    key: str
    owner_type: str
    name: Maybe[str] = UNSET
    storefront_access: Maybe[str | None] = UNSET
    customer_account_access: Maybe[str | None] = UNSET
    validations: Maybe[tuple[ValidationInput, ...]] = UNSET

    @property
    def is_empty(self) -> bool:
        return not assigned(self, exclude=("namespace", "key", "owner_type"))


@dataclass(slots=True, kw_only=True, frozen=True)
class AttributeInput:
    owner_id: str
    namespace: str
    key: str
    type: str
    value: str | None


@dataclass(slots=True, kw_only=True, frozen=True)
class AttributeIdentifier:
    owner_id: str
    namespace: str
    key: str


# Catalog


@dataclass(slots=True, kw_only=True, frozen=True)
class FileCreate:
    filename: str
    original_source: str
    alt: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class CollectionCreate:
    handle: str
    title: str
    description_html: str = ""
    template_suffix: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class PageCreate:
    handle: str
    title: str
    body: str = ""
    is_published: bool = False
    template_suffix: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class MenuItemInput:
    title: str
    type: str
    url: str | None = None
    resource_id: str | None = None
    tags: tuple[str, ...] = ()
    items: tuple[MenuItemInput, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class MenuCreate:
    handle: str
    title: str
    items: tuple[MenuItemInput, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class MediaInput:
    original_source: str
    media_content_type: str
    alt: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class ProductCreate:
    handle: str
    title: str
    description_html: str = ""
    product_type: str = ""
    vendor: str = ""
    status: str = "ACTIVE"
    tags: tuple[str, ...] = ()
    template_suffix: str | None = None
    gift_card_template_suffix: str | None = None
    requires_selling_plan: bool = False
    gift_card: bool = False
    category_id: str | None = None
    seo: Seo = Seo()
    options: tuple[ProductOption, ...] = ()
    collections_to_join: tuple[str, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class ProductUpdate:
    id: str
    title: Maybe[str] = UNSET
    description_html: Maybe[str] = UNSET
    category_id: Maybe[str | None] = UNSET
    product_type: Maybe[str] = UNSET
    vendor: Maybe[str] = UNSET
    status: Maybe[str] = UNSET
    tags: Maybe[tuple[str, ...]] = UNSET
    template_suffix: Maybe[str | None] = UNSET
    gift_card_template_suffix: Maybe[str | None] = UNSET
    requires_selling_plan: Maybe[bool] = UNSET
    seo: Maybe[Seo] = UNSET
    collections_to_join: Maybe[tuple[str, ...]] = UNSET
    collections_to_leave: Maybe[tuple[str, ...]] = UNSET

    @property
    def is_empty(self) -> bool:
        return not assigned(self, exclude=("id",))


@dataclass(slots=True, kw_only=True, frozen=True)
class VariantInput:
    """Bulk variant payload; without ``id`` it creates, with ``id`` it updates."""

    id: str | None = None
    price: Maybe[str] = UNSET
    compare_at_price: Maybe[str | None] = UNSET
    barcode: Maybe[str | None] = UNSET
    sku: Maybe[str | None] = UNSET
    taxable: Maybe[bool] = UNSET
    inventory_policy: Maybe[str] = UNSET
    option_values: Maybe[tuple[SelectedOption, ...]] = UNSET
    media_id: Maybe[str | None] = UNSET

    @property
    def is_empty(self) -> bool:
        return not assigned(self, exclude=("id",))
