"""HTTP fetcher for the upstream elements dump."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from poisync.adapters.http_resilience import ResilientClient
from poisync.config.upstream import DatasetConfig, get_dataset_config
from poisync.domain.model import utcnow
from poisync.domain.ports.fetching import Dataset, DatasetFetcher

from .schema import ElementPayload, ElementsResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from poisync.config.http_resilience import ResilienceConfig
    from poisync.domain.model import Payload

log = getLogger(__name__)


class OverpassAPIError(RuntimeError):
    """Raised when the dataset endpoint fails or returns an unexpected payload."""


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class OverpassDatasetFetcher:
    config: DatasetConfig = field(default_factory=get_dataset_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self) -> Dataset:
        return asyncio.run(self._fetch_async())

    async def _fetch_async(self) -> Dataset:
        log.info("Fetching dataset from %s", self.config.url)
        async with self.client_factory(self.config.resilience) as client:
            try:
                response = await client.get(self.config.url)
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                raise OverpassAPIError(f"Failed to fetch dataset: {exc}") from exc

        try:
            parsed = ElementsResponse.model_validate(payload)
        except ValidationError as exc:
            raise OverpassAPIError("Unexpected dataset payload") from exc

        items = tuple(item for item in parsed.elements if _is_valid_element(item))
        skipped = len(parsed.elements) - len(items)
        if skipped:
            log.warning("Dropped %s malformed elements from the dataset", skipped)
        return Dataset(items=items, fetched_at=utcnow(), source=self.config.url)


def _is_valid_element(item: Payload) -> bool:
    try:
        ElementPayload.model_validate(item)
    except ValidationError as exc:
        log.debug("Invalid dataset element %r: %s", item.get("id"), exc)
        return False
    return True


if TYPE_CHECKING:
    _fetcher_check: DatasetFetcher = OverpassDatasetFetcher()
