"""Pydantic models describing the upstream elements dump."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class OverpassBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class LatLon(OverpassBaseModel):
    lat: float
    lon: float


class ElementPayload(OverpassBaseModel):
    """One OSM element as exported by Overpass (``out center meta``)."""

    type: Literal["node", "way", "relation"]
    id: int
    lat: float | None = None
    lon: float | None = None
    center: LatLon | None = None
    tags: dict[str, str] | None = None
    uid: int | None = None
    user: str | None = None
    timestamp: str | None = None
    version: int | None = None


class ElementsResponse(OverpassBaseModel):
    elements: list[dict[str, object]]
