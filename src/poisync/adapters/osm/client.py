"""HTTP client for the OpenStreetMap editing API.

Used as the secondary source when an element disappears from the dataset and
to look up the profiles of the users who changed elements.
"""

from __future__ import annotations

import asyncio
from http import HTTPStatus
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from poisync.adapters.http_resilience import ResilientClient
from poisync.config.upstream import OsmApiConfig, get_osm_api_config
from poisync.domain.errors import ActorLookupError
from poisync.domain.ports.fetching import (
    ActorProfile,
    BatchActorLookup,
    ElementVerifier,
    VerifiedElement,
)

from .schema import OsmElement, OsmElementResponse, OsmUserResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from poisync.config.http_resilience import ResilienceConfig
    from poisync.domain.model import ActorId, ExternalKey

log = getLogger(__name__)

NOT_FOUND_STATUSES: Final[frozenset[int]] = frozenset({HTTPStatus.NOT_FOUND, HTTPStatus.GONE})


class OsmAPIError(RuntimeError):
    """Raised when the OSM API returns an unexpected response."""


class OsmApiClient:
    """Low-level HTTP client for element and user lookups."""

    def __init__(
        self,
        *,
        config: OsmApiConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_osm_api_config()
        self._resilience = self._config.resilience
        self._client_factory = client_factory or ResilientClient

    def fetch_element(self, key: ExternalKey) -> VerifiedElement | None:
        payload = asyncio.run(self._get_once(f"{key.kind}/{key.source_id}.json"))
        if payload is None:
            return None
        try:
            response = OsmElementResponse.model_validate(payload)
        except ValidationError as exc:
            raise OsmAPIError(f"Unexpected element payload for {key}") from exc
        for raw in response.elements:
            try:
                element = OsmElement.model_validate(raw)
            except ValidationError as exc:
                raise OsmAPIError(f"Unexpected element payload for {key}") from exc
            if element.type == key.kind and element.id == key.source_id:
                return VerifiedElement(payload=raw) if element.visible else None
        return None

    def fetch_actor(self, actor_id: ActorId) -> ActorProfile | None:
        return asyncio.run(self._fetch_actor_once(actor_id))

    def fetch_actors(self, actor_ids: Sequence[ActorId]) -> dict[ActorId, ActorProfile | None]:
        """Look up many profiles over one client, so its rate limit and cache span them all.

        Failed lookups are logged and reported as None.
        """

        return asyncio.run(self._fetch_actors(list(actor_ids)))

    async def _fetch_actor_once(self, actor_id: ActorId) -> ActorProfile | None:
        async with self._client_factory(self._resilience) as client:
            return await self._fetch_actor(client, actor_id)

    async def _fetch_actors(self, actor_ids: list[ActorId]) -> dict[ActorId, ActorProfile | None]:
        async with self._client_factory(self._resilience) as client:
            results = await asyncio.gather(
                *(self._fetch_actor(client, actor_id) for actor_id in actor_ids),
                return_exceptions=True,
            )
        profiles: dict[ActorId, ActorProfile | None] = {}
        for actor_id, result in zip(actor_ids, results, strict=True):
            if isinstance(result, ActorLookupError):
                log.warning("Actor lookup failed for %s: %s", actor_id, result)
                profiles[actor_id] = None
            elif isinstance(result, BaseException):
                raise result
            else:
                profiles[actor_id] = result
        return profiles

    async def _fetch_actor(
        self, client: ResilientClient, actor_id: ActorId
    ) -> ActorProfile | None:
        try:
            payload = await self._get_json(client, f"user/{actor_id}.json")
        except OsmAPIError as exc:
            raise ActorLookupError(str(exc)) from exc
        if payload is None:
            return None
        try:
            response = OsmUserResponse.model_validate(payload)
        except ValidationError as exc:
            raise ActorLookupError(f"Unexpected user payload for {actor_id}") from exc
        return ActorProfile(actor_id=actor_id, profile=response.user.model_dump(mode="json"))

    async def _get_once(self, path: str) -> object | None:
        async with self._client_factory(self._resilience) as client:
            return await self._get_json(client, path)

    async def _get_json(self, client: ResilientClient, path: str) -> object | None:
        try:
            response = await client.get(path)
        except httpx.HTTPError as exc:
            raise OsmAPIError(f"Request for {path} failed: {exc}") from exc
        if response.status_code in NOT_FOUND_STATUSES:
            log.debug("OSM API reports %s for %s", response.status_code, path)
            return None
        try:
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPStatusError, ValueError) as exc:
            raise OsmAPIError(f"Unexpected response for {path}: {exc}") from exc


if TYPE_CHECKING:
    _verifier_check: ElementVerifier = OsmApiClient()
    _lookup_check: BatchActorLookup = OsmApiClient()
