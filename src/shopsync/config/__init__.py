"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import (
    ConfigurationError,
    HandlesFileNotFoundError,
    InvalidSettingError,
    MissingConfigurationError,
)
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .shopify import (
    DEFAULT_API_VERSION,
    ShopifyConfig,
    StoreConfig,
    build_store_config,
    get_shopify_config,
)
from .sync import DEFAULT_OWNER_TYPES, SyncConfig, get_sync_config

__all__ = [
    "DEFAULT_API_VERSION",
    "DEFAULT_OWNER_TYPES",
    "ConfigurationError",
    "HandlesFileNotFoundError",
    "InvalidSettingError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "ShopifyConfig",
    "StoreConfig",
    "SyncConfig",
    "build_store_config",
    "get_shopify_config",
    "get_sync_config",
    "optional_env_var",
    "require_env_vars",
]
