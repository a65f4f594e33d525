"""Endpoints and client settings for the upstream collaborators."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, optional_env_var
from .http_resilience import NO_RETRIES, CacheConfig, RateLimit, ResilienceConfig

DEFAULT_DATASET_URL = "https://data.btcmap.org/elements.json"
DEFAULT_OSM_API_URL = "https://api.openstreetmap.org/api/0.6/"
DEFAULT_USER_AGENT = "poisync/0.1"

DATASET_TIMEOUT_SECONDS = 300.0
OSM_API_TIMEOUT_SECONDS = 15.0
WEBHOOK_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class DatasetConfig:
    url: str
    resilience: ResilienceConfig


@dataclass(frozen=True, slots=True)
class OsmApiConfig:
    resilience: ResilienceConfig


@dataclass(frozen=True, slots=True)
class WebhookConfig:
    url: str | None
    resilience: ResilienceConfig

    @property
    def enabled(self) -> bool:
        return self.url is not None


def get_dataset_config() -> DatasetConfig:
    url = optional_env_var("POISYNC_DATASET_URL") or DEFAULT_DATASET_URL
    return DatasetConfig(
        url=url,
        resilience=ResilienceConfig(
            name="dataset",
            timeout_seconds=env_float("POISYNC_DATASET_TIMEOUT", DATASET_TIMEOUT_SECONDS),
            retry=NO_RETRIES,
            cache=None,
            default_headers={"User-Agent": DEFAULT_USER_AGENT},
        ),
    )


def get_osm_api_config() -> OsmApiConfig:
    base_url = optional_env_var("POISYNC_OSM_API_URL") or DEFAULT_OSM_API_URL
    return OsmApiConfig(
        resilience=ResilienceConfig(
            name="osm",
            base_url=base_url,
            timeout_seconds=env_float("POISYNC_OSM_API_TIMEOUT", OSM_API_TIMEOUT_SECONDS),
            retry=NO_RETRIES,
            ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
            cache=CacheConfig(enabled=True, backend="memory"),
            default_headers={"User-Agent": DEFAULT_USER_AGENT},
        ),
    )


def get_webhook_config() -> WebhookConfig:
    return WebhookConfig(
        url=optional_env_var("POISYNC_WEBHOOK_URL"),
        resilience=ResilienceConfig(
            name="webhook",
            timeout_seconds=WEBHOOK_TIMEOUT_SECONDS,
            retry=NO_RETRIES,
            ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
            cache=None,
        ),
    )
