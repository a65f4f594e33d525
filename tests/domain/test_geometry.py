from __future__ import annotations

import pytest

from poisync.domain.errors import BoundaryParseError
from poisync.domain.geometry import contains, parse_boundary, region_matcher
from poisync.domain.model import Coordinate, Region

SQUARE = {
    "type": "Polygon",
    "coordinates": [[[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 10.0], [0.0, 0.0]]],
}

FAR_SQUARE = {
    "type": "Polygon",
    "coordinates": [[[20.0, 20.0], [30.0, 20.0], [30.0, 30.0], [20.0, 30.0], [20.0, 20.0]]],
}


def test_polygon_contains_interior_points_only() -> None:
    boundary = parse_boundary(SQUARE)

    assert contains(boundary, lat=5.0, lon=5.0)
    assert not contains(boundary, lat=15.0, lon=5.0)


def test_points_on_polygon_edge_are_outside() -> None:
    boundary = parse_boundary(SQUARE)

    assert not contains(boundary, lat=0.0, lon=5.0)
    assert not contains(boundary, lat=10.0, lon=10.0)


def test_coordinates_are_longitude_first() -> None:
    boundary = parse_boundary(
        {
            "type": "Polygon",
            "coordinates": [[[0.0, 0.0], [40.0, 0.0], [40.0, 1.0], [0.0, 1.0], [0.0, 0.0]]],
        }
    )

    assert contains(boundary, lat=0.5, lon=20.0)
    assert not contains(boundary, lat=20.0, lon=0.5)


def test_feature_collection_matches_any_feature() -> None:
    boundary = parse_boundary(
        {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "properties": {}, "geometry": SQUARE},
                {"type": "Feature", "properties": {}, "geometry": FAR_SQUARE},
                {"type": "Feature", "properties": {}, "geometry": None},
            ],
        }
    )

    assert contains(boundary, lat=5.0, lon=5.0)
    assert contains(boundary, lat=25.0, lon=25.0)
    assert not contains(boundary, lat=15.0, lon=15.0)


def test_multipolygon_and_feature_wrappers() -> None:
    multi = {
        "type": "Feature",
        "geometry": {
            "type": "MultiPolygon",
            "coordinates": [SQUARE["coordinates"], FAR_SQUARE["coordinates"]],
        },
    }

    boundary = parse_boundary(multi)

    assert contains(boundary, lat=25.0, lon=25.0)


def test_line_string_contains_interior_points() -> None:
    boundary = parse_boundary({"type": "LineString", "coordinates": [[0.0, 0.0], [10.0, 0.0]]})

    assert contains(boundary, lat=0.0, lon=5.0)
    assert not contains(boundary, lat=0.0, lon=0.0)
    assert not contains(boundary, lat=1.0, lon=5.0)


def test_unsupported_geometry_kinds_never_match() -> None:
    boundary = parse_boundary({"type": "Point", "coordinates": [5.0, 5.0]})

    assert boundary.geometries == ()
    assert not contains(boundary, lat=5.0, lon=5.0)


@pytest.mark.parametrize(
    "geo_json",
    [
        {"coordinates": []},
        {"type": "FeatureCollection", "features": "nope"},
        {"type": "Feature", "geometry": "nope"},
        {"type": "Polygon", "coordinates": []},
    ],
)
def test_malformed_boundaries_raise(geo_json: dict[str, object]) -> None:
    with pytest.raises(BoundaryParseError):
        parse_boundary(geo_json)


def test_region_without_boundary_matches_everything() -> None:
    matches = region_matcher(Region(name="earth"))

    assert matches(Coordinate(lat=89.0, lon=179.0))
    assert matches(None)


def test_bounded_region_rejects_elements_without_location() -> None:
    matches = region_matcher(Region(name="square", boundary=SQUARE))

    assert matches(Coordinate(lat=5.0, lon=5.0))
    assert not matches(None)
