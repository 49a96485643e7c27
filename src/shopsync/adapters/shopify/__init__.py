"""Public interface for the Shopify adapter."""

from __future__ import annotations

from .client import ShopifyAPIError, ShopifyStore
from .schema import GraphQLResponse, ProductPayload
from .translator import to_definition, to_instance, to_product

__all__ = [
    "GraphQLResponse",
    "ProductPayload",
    "ShopifyAPIError",
    "ShopifyStore",
    "to_definition",
    "to_instance",
    "to_product",
]
