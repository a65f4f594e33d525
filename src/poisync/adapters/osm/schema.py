"""Pydantic models for the OpenStreetMap editing API (JSON flavour)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class OsmBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class OsmElement(OsmBaseModel):
    type: Literal["node", "way", "relation"]
    id: int
    visible: bool = True
    tags: dict[str, str] = Field(default_factory=dict)
    uid: int | None = None
    user: str | None = None


class OsmElementResponse(OsmBaseModel):
    version: str | None = None
    elements: list[dict[str, object]]


class OsmUser(OsmBaseModel):
    id: int
    display_name: str
    account_created: str | None = None
    description: str | None = None


class OsmUserResponse(OsmBaseModel):
    version: str | None = None
    user: OsmUser
