"""Shared fixtures for Shopify adapter tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from shopsync.config.shopify import StoreConfig, build_store_config

ShopifyPayload = dict[str, object]
FIXTURES = Path("tests/data/shopify")


def _load_fixture(name: str) -> ShopifyPayload:
    return json.loads((FIXTURES / name).read_text())


@pytest.fixture
def product_payload() -> ShopifyPayload:
    return _load_fixture("product.json")


@pytest.fixture
def definition_payload() -> ShopifyPayload:
    return _load_fixture("definition.json")


@pytest.fixture
def store_config() -> StoreConfig:
    return build_store_config(
        role="target",
        store_name="target-shop",
        access_token="shpat_test",  # noqa: S106
    )
