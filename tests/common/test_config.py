from __future__ import annotations

from pathlib import Path

import pytest

from shopsync.config import (
    DEFAULT_OWNER_TYPES,
    ConfigurationError,
    InvalidSettingError,
    MissingConfigurationError,
    get_shopify_config,
    get_sync_config,
    optional_env_var,
    require_env_vars,
)
from shopsync.config.shopify import ACCESS_TOKEN_HEADER, DEFAULT_API_VERSION

STORE_VARS = {
    "SOURCE_SHOPIFY_STORE_NAME": "origin-shop",
    "SOURCE_SHOPIFY_ACCESS_TOKEN": "shpat_source",
    "TARGET_SHOPIFY_STORE_NAME": "mirror-shop",
    "TARGET_SHOPIFY_ACCESS_TOKEN": "shpat_target",
}


@pytest.fixture
def store_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name, value in STORE_VARS.items():
        monkeypatch.setenv(name, value)
    monkeypatch.delenv("SHOPIFY_API_VERSION", raising=False)


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.setenv("MISSING_A", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert exc.value.names == ("MISSING_A", "MISSING_B")
    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_optional_env_var_falls_back_on_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "")

    assert optional_env_var("EXAMPLE_VAR", "fallback") == "fallback"


@pytest.mark.usefixtures("store_env")
def test_shopify_config_builds_both_stores() -> None:
    config = get_shopify_config()

    assert config.source.store_name == "origin-shop"
    assert config.target.api_version == DEFAULT_API_VERSION
    assert config.target.endpoint == (
        f"https://mirror-shop.myshopify.com/admin/api/{DEFAULT_API_VERSION}/graphql.json"
    )
    assert config.target.resilience.default_headers == {ACCESS_TOKEN_HEADER: "shpat_target"}
    assert config.source.resilience.name == "shopify-source"
    ratelimit = config.source.resilience.ratelimit
    assert ratelimit is not None
    assert (ratelimit.max_calls, ratelimit.per_seconds) == (2, 1.0)


@pytest.mark.usefixtures("store_env")
def test_shopify_config_honours_api_version(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOPIFY_API_VERSION", "2025-04")

    config = get_shopify_config()

    assert config.source.endpoint.endswith("/admin/api/2025-04/graphql.json")


def test_shopify_config_requires_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    for name, value in STORE_VARS.items():
        monkeypatch.setenv(name, value)
    monkeypatch.delenv("TARGET_SHOPIFY_ACCESS_TOKEN")

    with pytest.raises(MissingConfigurationError, match="TARGET_SHOPIFY_ACCESS_TOKEN"):
        get_shopify_config()


def test_sync_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHOPSYNC_OWNER_TYPES", raising=False)
    monkeypatch.delenv("SHOPSYNC_HANDLES_FILE", raising=False)

    config = get_sync_config()

    assert config.owner_types == DEFAULT_OWNER_TYPES
    assert config.handles_file == Path("products_handle.txt")


def test_sync_config_parses_owner_types(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOPSYNC_OWNER_TYPES", "product, collection,,page ")
    monkeypatch.setenv("SHOPSYNC_HANDLES_FILE", "handles/spring.txt")

    config = get_sync_config()

    assert config.owner_types == ("PRODUCT", "COLLECTION", "PAGE")
    assert config.handles_file == Path("handles/spring.txt")


def test_sync_config_rejects_empty_owner_types(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOPSYNC_OWNER_TYPES", " , ,")

    with pytest.raises(ConfigurationError, match="at least one owner type") as exc:
        get_sync_config()

    assert isinstance(exc.value, InvalidSettingError)
    assert exc.value.name == "SHOPSYNC_OWNER_TYPES"
    assert exc.value.value == " , ,"
