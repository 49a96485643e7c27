"""Catalog objects: files, products, collections, pages and menus."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import urlsplit

from .metafields import Attribute

_DEDUPLICATION_SUFFIX = re.compile(
    r"_[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}"
)


def derive_file_name(url: str) -> str:
    """Return the cross-store name of a file from its preview URL.

    The store appends ``_<uuid>`` to uploads whose name already exists, so that
    suffix is dropped along with the query string.
    """

    segment = urlsplit(url).path.rsplit("/", 1)[-1]
    return _DEDUPLICATION_SUFFIX.sub("", segment)


@dataclass(slots=True, kw_only=True, frozen=True)
class File:
    id: str
    url: str | None = None
    alt: str | None = None

    @property
    def name(self) -> str | None:
        return derive_file_name(self.url) if self.url else None


@dataclass(slots=True, kw_only=True, frozen=True)
class Media:
    id: str
    media_content_type: str
    url: str | None = None
    alt: str | None = None

    @property
    def name(self) -> str | None:
        return derive_file_name(self.url) if self.url else None


@dataclass(slots=True, kw_only=True, frozen=True)
class Seo:
    title: str | None = None
    description: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class ProductOption:
    name: str
    position: int
    values: tuple[str, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class SelectedOption:
    name: str
    value: str


@dataclass(slots=True, kw_only=True, frozen=True)
class Variant:
    id: str
    title: str
    price: str
    compare_at_price: str | None = None
    barcode: str | None = None
    sku: str | None = None
    taxable: bool = True
    inventory_policy: str = "DENY"
    selected_options: tuple[SelectedOption, ...] = ()
    image_url: str | None = None
    attributes: tuple[Attribute, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class Collection:
    id: str
    handle: str
    title: str
    description_html: str = ""
    template_suffix: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class Product:
    id: str
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
    is_gift_card: bool = False
    category_id: str | None = None
    seo: Seo = Seo()
    options: tuple[ProductOption, ...] = ()
    collections: tuple[Collection, ...] = ()
    media: tuple[Media, ...] = ()
    variants: tuple[Variant, ...] = ()
    attributes: tuple[Attribute, ...] = ()

    def variant(self, title: str) -> Variant | None:
        return next((item for item in self.variants if item.title == title), None)


@dataclass(slots=True, kw_only=True, frozen=True)
class Page:
    id: str
    handle: str
    title: str
    body: str = ""
    is_published: bool = False
    template_suffix: str | None = None
    attributes: tuple[Attribute, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class CustomerAccountPage:
    id: str
    handle: str
    title: str


class ResourceKind(StrEnum):
    """Resources a menu item can link to, named as in their global ids."""

    PAGE = "Page"
    CUSTOMER_ACCOUNT_PAGE = "CustomerAccountPage"
    COLLECTION = "Collection"
    PRODUCT = "Product"

    @classmethod
    def from_gid(cls, gid: str) -> ResourceKind | None:
        # gid://shopify/<Kind>/<number>
        parts = gid.split("/")
        if len(parts) < 4:
            return None
        try:
            return cls(parts[3])
        except ValueError:
            return None


@dataclass(slots=True, kw_only=True, frozen=True)
class MenuItem:
    title: str
    type: str
    url: str | None = None
    resource_id: str | None = None
    tags: tuple[str, ...] = ()
    items: tuple[MenuItem, ...] = ()
    id: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class Menu:
    id: str
    handle: str
    title: str
    items: tuple[MenuItem, ...] = ()
    is_default: bool = False
