from __future__ import annotations

from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from poisync.adapters.http_resilience import ResilientClient
from poisync.adapters.osm import OsmApiClient
from poisync.config import OsmApiConfig, ResilienceConfig
from poisync.domain.errors import ActorLookupError
from poisync.domain.model import ExternalKey
from tests.helpers.elements import make_payload
from tests.helpers.http import make_client_factory

BASE_URL = "https://osm.example.test/api/0.6/"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> OsmApiClient:
    config = OsmApiConfig(resilience=ResilienceConfig(name="osm", base_url=BASE_URL, cache=None))
    return OsmApiClient(config=config, client_factory=make_client_factory(handler))


def test_fetch_element_returns_current_record() -> None:
    record = make_payload(42, uid=555, user="remover", currency__XBT="yes")
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, json={"version": "0.6", "elements": [record]})

    verified = _client(handler).fetch_element(ExternalKey.parse("node:42"))

    assert paths == ["/api/0.6/node/42.json"]
    assert verified is not None
    assert verified.accepts_bitcoin
    assert verified.actor_id == 555


@pytest.mark.parametrize("status", [404, 410])
def test_fetch_element_missing_returns_none(status: int) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status)

    assert _client(handler).fetch_element(ExternalKey.parse("way:1")) is None


def test_fetch_element_invisible_returns_none() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        record = {"type": "node", "id": 3, "visible": False}
        return httpx.Response(200, json={"elements": [record]})

    assert _client(handler).fetch_element(ExternalKey.parse("node:3")) is None


def test_fetch_actor_returns_profile() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/0.6/user/555.json"
        return httpx.Response(
            200,
            json={"version": "0.6", "user": {"id": 555, "display_name": "remover"}},
        )

    profile = _client(handler).fetch_actor(555)

    assert profile is not None
    assert profile.actor_id == 555
    assert profile.profile["display_name"] == "remover"


def test_fetch_actor_not_found_returns_none() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    assert _client(handler).fetch_actor(1) is None


@pytest.mark.parametrize(
    "response",
    [httpx.Response(500), httpx.Response(200, json={"user": {"id": "x"}})],
)
def test_fetch_actor_failures_raise_lookup_error(response: httpx.Response) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return response

    with pytest.raises(ActorLookupError):
        _client(handler).fetch_actor(1)


def test_fetch_actors_shares_one_client_and_maps_failures_to_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        actor_id = int(request.url.path.rsplit("/", 1)[-1].removesuffix(".json"))
        if actor_id == 2:
            return httpx.Response(500)
        if actor_id == 3:
            return httpx.Response(404)
        user = {"id": actor_id, "display_name": f"user{actor_id}"}
        return httpx.Response(200, json={"user": user})

    mock_factory = make_client_factory(handler)
    opened: list[ResilientClient] = []

    def counting_factory(resilience: ResilienceConfig) -> ResilientClient:
        client = mock_factory(resilience)
        opened.append(client)
        return client

    config = OsmApiConfig(resilience=ResilienceConfig(name="osm", base_url=BASE_URL, cache=None))
    lookup = OsmApiClient(config=config, client_factory=counting_factory)

    profiles = lookup.fetch_actors([1, 2, 3, 4])

    assert len(opened) == 1
    assert set(profiles) == {1, 2, 3, 4}
    assert profiles[2] is None
    assert profiles[3] is None
    first = profiles[1]
    assert first is not None
    assert first.profile["display_name"] == "user1"
    fourth = profiles[4]
    assert fourth is not None
    assert fourth.actor_id == 4
