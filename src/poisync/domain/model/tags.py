"""Typed accessors over opaque upstream payloads.

Payloads are kept exactly as the upstream source publishes them. Only the handful
of tags this system interprets (payment capability, survey dates, naming and
category) are read here, so a schema drift upstream never breaks persistence.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime, timedelta
from typing import Final, cast

from poisync.domain.model.primitives import Coordinate

log = logging.getLogger(__name__)

VERIFICATION_TAGS: Final[tuple[str, ...]] = (
    "survey:date",
    "check_date",
    "check_date:currency:XBT",
)

CATEGORY_TAGS: Final[tuple[str, ...]] = (
    "amenity",
    "shop",
    "tourism",
    "craft",
    "office",
    "leisure",
    "healthcare",
    "sport",
)

DEFAULT_FRESHNESS_WINDOW_DAYS: Final[int] = 365


def osm_tags(payload: Mapping[str, object]) -> Mapping[str, object]:
    tags = payload.get("tags")
    if isinstance(tags, Mapping):
        return cast("Mapping[str, object]", tags)
    return {}


def tag(payload: Mapping[str, object], name: str) -> str:
    """Return a tag value as a string, or an empty string when absent."""

    value = osm_tags(payload).get(name)
    return value if isinstance(value, str) else ""


def display_name(payload: Mapping[str, object]) -> str:
    return tag(payload, "name")


def is_atm(payload: Mapping[str, object]) -> bool:
    return tag(payload, "amenity") == "atm"


def accepts_onchain(payload: Mapping[str, object]) -> bool:
    return tag(payload, "payment:onchain") == "yes"


def accepts_lightning(payload: Mapping[str, object]) -> bool:
    return tag(payload, "payment:lightning") == "yes"


def accepts_lightning_contactless(payload: Mapping[str, object]) -> bool:
    return tag(payload, "payment:lightning_contactless") == "yes"


def is_legacy(payload: Mapping[str, object]) -> bool:
    return tag(payload, "payment:bitcoin") == "yes"


def accepts_bitcoin(payload: Mapping[str, object]) -> bool:
    """Whether the record still carries one of the tracked acceptance tags."""

    return tag(payload, "currency:XBT") == "yes" or is_legacy(payload)


PAYMENT_PREDICATES: Final[Mapping[str, Callable[[Mapping[str, object]], bool]]] = {
    "total_elements_onchain": accepts_onchain,
    "total_elements_lightning": accepts_lightning,
    "total_elements_lightning_contactless": accepts_lightning_contactless,
}


def category(payload: Mapping[str, object]) -> str:
    if is_atm(payload):
        return "atm"
    for name in CATEGORY_TAGS:
        value = tag(payload, name)
        if value:
            return value
    return "other"


def parse_tag_date(value: str) -> datetime | None:
    """Parse ``YYYY-MM-DD`` (or a full ISO-8601 timestamp) into an aware datetime."""

    text = value.strip()
    if not text:
        return None
    try:
        if len(text) == 10:  # noqa: PLR2004
            parsed_date = date.fromisoformat(text)
            return datetime(parsed_date.year, parsed_date.month, parsed_date.day, tzinfo=UTC)
        normalized = text[:-1] + "+00:00" if text.endswith("Z") else text
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        log.debug("Ignoring unparseable date tag value %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def verification_date(payload: Mapping[str, object]) -> datetime | None:
    """Latest of the survey / check dates, or None when none parse."""

    dates = [parse_tag_date(tag(payload, name)) for name in VERIFICATION_TAGS]
    present = [value for value in dates if value is not None]
    return max(present) if present else None


def is_up_to_date(
    payload: Mapping[str, object],
    *,
    as_of: date,
    window_days: int = DEFAULT_FRESHNESS_WINDOW_DAYS,
) -> bool:
    verified = verification_date(payload)
    if verified is None:
        return False
    return verified.date() > as_of - timedelta(days=window_days)


def coordinate(payload: Mapping[str, object]) -> Coordinate | None:
    """Point location for nodes, representative location for ways and relations."""

    point = _lat_lon(payload)
    if point is not None:
        return point
    center = payload.get("center")
    if isinstance(center, Mapping):
        point = _lat_lon(cast("Mapping[str, object]", center))
        if point is not None:
            return point
    bounds = payload.get("bounds")
    if isinstance(bounds, Mapping):
        return _bounds_midpoint(cast("Mapping[str, object]", bounds))
    return None


def _lat_lon(source: Mapping[str, object]) -> Coordinate | None:
    lat = source.get("lat")
    lon = source.get("lon")
    if isinstance(lat, int | float) and isinstance(lon, int | float):
        return Coordinate(lat=float(lat), lon=float(lon))
    return None


def _bounds_midpoint(bounds: Mapping[str, object]) -> Coordinate | None:
    values = [bounds.get(name) for name in ("minlat", "minlon", "maxlat", "maxlon")]
    if not all(isinstance(value, int | float) for value in values):
        return None
    min_lat, min_lon, max_lat, max_lon = (float(cast("float", value)) for value in values)
    return Coordinate(lat=(min_lat + max_lat) / 2, lon=(min_lon + max_lon) / 2)
