"""Shopify store connection settings."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

DEFAULT_API_VERSION = "2025-01"
SHOPIFY_TIMEOUT_SECONDS = 60.0
ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


def graphql_endpoint(store_name: str, api_version: str) -> str:
    return f"https://{store_name}.myshopify.com/admin/api/{api_version}/graphql.json"


@dataclass(frozen=True)
class StoreConfig:
    """Connection values for one Shopify store."""

    store_name: str
    access_token: str
    api_version: str
    resilience: ResilienceConfig

    @property
    def endpoint(self) -> str:
        return graphql_endpoint(self.store_name, self.api_version)


@dataclass(frozen=True)
class ShopifyConfig:
    """The source (authoritative) and target stores of a sync run."""

    source: StoreConfig
    target: StoreConfig


def build_store_config(
    *,
    role: str,
    store_name: str,
    access_token: str,
    api_version: str = DEFAULT_API_VERSION,
    resilience: ResilienceConfig | None = None,
) -> StoreConfig:
    endpoint = graphql_endpoint(store_name, api_version)
    return StoreConfig(
        store_name=store_name,
        access_token=access_token,
        api_version=api_version,
        resilience=resilience
        or ResilienceConfig(
            name=f"shopify-{role}",
            base_url=endpoint,
            timeout_seconds=SHOPIFY_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
            default_headers={ACCESS_TOKEN_HEADER: access_token},
        ),
    )


def get_shopify_config() -> ShopifyConfig:
    values = require_env_vars(
        (
            "SOURCE_SHOPIFY_STORE_NAME",
            "SOURCE_SHOPIFY_ACCESS_TOKEN",
            "TARGET_SHOPIFY_STORE_NAME",
            "TARGET_SHOPIFY_ACCESS_TOKEN",
        )
    )
    api_version = optional_env_var("SHOPIFY_API_VERSION", DEFAULT_API_VERSION)
    return ShopifyConfig(
        source=build_store_config(
            role="source",
            store_name=values["SOURCE_SHOPIFY_STORE_NAME"],
            access_token=values["SOURCE_SHOPIFY_ACCESS_TOKEN"],
            api_version=api_version,
        ),
        target=build_store_config(
            role="target",
            store_name=values["TARGET_SHOPIFY_STORE_NAME"],
            access_token=values["TARGET_SHOPIFY_ACCESS_TOKEN"],
            api_version=api_version,
        ),
    )
