"""Public interface for the OpenStreetMap API adapter."""

from __future__ import annotations

from .client import OsmAPIError, OsmApiClient
from .schema import OsmElement, OsmElementResponse, OsmUser, OsmUserResponse

__all__ = [
    "OsmAPIError",
    "OsmApiClient",
    "OsmElement",
    "OsmElementResponse",
    "OsmUser",
    "OsmUserResponse",
]
