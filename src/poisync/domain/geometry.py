"""Region membership tests over GeoJSON boundaries.

Containment is strict: a point lying exactly on a polygon edge is outside, and a
line string only contains points in its interior (not its end points). The same
rule applies on every run, so region counts are stable for boundary points.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, cast

from shapely.errors import GEOSException, ShapelyError
from shapely.geometry import Point, shape
from shapely.prepared import PreparedGeometry, prep

from poisync.domain.errors import BoundaryParseError

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry

    from poisync.domain.model import Coordinate, Region

log = logging.getLogger(__name__)

SUPPORTED_GEOMETRY_TYPES: Final[frozenset[str]] = frozenset(
    {"Polygon", "MultiPolygon", "LineString"}
)

type CoordinatePredicate = Callable[[Coordinate | None], bool]


@dataclass(frozen=True, slots=True)
class RegionBoundary:
    """Parsed boundary: the supported geometries of a GeoJSON document, prepared."""

    geometries: tuple[PreparedGeometry, ...]


def parse_boundary(geo_json: Mapping[str, object]) -> RegionBoundary:
    """Parse a GeoJSON Geometry, Feature or FeatureCollection.

    Geometry kinds other than Polygon, MultiPolygon and LineString are dropped;
    a boundary made only of such kinds matches nothing.
    """

    prepared: list[PreparedGeometry] = []
    for raw in _raw_geometries(geo_json):
        geometry_type = raw.get("type")
        if geometry_type not in SUPPORTED_GEOMETRY_TYPES:
            log.debug("Skipping unsupported geometry type %s", geometry_type)
            continue
        prepared.append(prep(_to_shape(raw)))
    return RegionBoundary(geometries=tuple(prepared))


def contains(boundary: RegionBoundary, lat: float, lon: float) -> bool:
    point = Point(lon, lat)
    return any(geometry.contains(point) for geometry in boundary.geometries)


def region_matcher(region: Region) -> CoordinatePredicate:
    """Build a membership predicate for a region.

    Raises ``BoundaryParseError`` when the region's boundary is malformed.
    """

    if region.boundary is None:
        return _match_everything
    boundary = parse_boundary(region.boundary)

    def matches(point: Coordinate | None) -> bool:
        if point is None:
            return False
        return contains(boundary, point.lat, point.lon)

    return matches


def _match_everything(point: Coordinate | None) -> bool:
    _ = point
    return True


def _raw_geometries(geo_json: Mapping[str, object]) -> list[Mapping[str, object]]:
    kind = geo_json.get("type")
    if kind == "FeatureCollection":
        features = geo_json.get("features")
        if not isinstance(features, list):
            raise BoundaryParseError("FeatureCollection without a 'features' list")
        geometries: list[Mapping[str, object]] = []
        for feature in cast("list[object]", features):
            if not isinstance(feature, Mapping):
                raise BoundaryParseError("FeatureCollection contains a non-object feature")
            geometries.extend(_raw_geometries(cast("Mapping[str, object]", feature)))
        return geometries
    if kind == "Feature":
        geometry = geo_json.get("geometry")
        if geometry is None:
            return []
        if not isinstance(geometry, Mapping):
            raise BoundaryParseError("Feature geometry must be an object")
        return [cast("Mapping[str, object]", geometry)]
    if isinstance(kind, str):
        return [geo_json]
    raise BoundaryParseError("GeoJSON object has no 'type'")


def _to_shape(raw: Mapping[str, object]) -> BaseGeometry:
    try:
        geometry = shape(raw)
    except (GEOSException, ShapelyError, ValueError, TypeError, IndexError, KeyError) as exc:
        raise BoundaryParseError(f"Invalid {raw.get('type')} geometry: {exc}") from exc
    if geometry.is_empty:
        raise BoundaryParseError(f"Empty {raw.get('type')} geometry")
    return geometry
