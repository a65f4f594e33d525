"""Application configuration helpers."""

from __future__ import annotations

from .env import env_bool, env_float, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import NO_RETRIES, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import (
    StorageConfig,
    get_database_uri,
    get_http_cache_path,
    get_storage_config,
)
from .sync import SyncConfig, get_sync_config
from .upstream import (
    DatasetConfig,
    OsmApiConfig,
    WebhookConfig,
    get_dataset_config,
    get_osm_api_config,
    get_webhook_config,
)

__all__ = [
    "NO_RETRIES",
    "CacheConfig",
    "ConfigurationError",
    "DatasetConfig",
    "MissingConfigurationError",
    "OsmApiConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "WebhookConfig",
    "configure_logging",
    "env_bool",
    "env_float",
    "env_int",
    "get_database_uri",
    "get_dataset_config",
    "get_http_cache_path",
    "get_osm_api_config",
    "get_storage_config",
    "get_sync_config",
    "get_webhook_config",
    "optional_env_var",
    "require_env_vars",
]
