"""Public interface for the upstream dataset adapter."""

from __future__ import annotations

from .client import OverpassAPIError, OverpassDatasetFetcher
from .schema import ElementPayload, ElementsResponse

__all__ = [
    "ElementPayload",
    "ElementsResponse",
    "OverpassAPIError",
    "OverpassDatasetFetcher",
]
