"""Tests for the point-in-polygon land mask."""
import tempfile
import shutil
from pathlib import Path

import geopandas as gpd
import pytest
from shapely.geometry import Polygon, MultiPolygon

from cityquiz.core.polygon_mask import PolygonMask, point_in_ring, load_polygon_mask

OUTER = [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]
HOLE = [(4, 4), (6, 4), (6, 6), (4, 6), (4, 4)]
ISLAND = [(20, 20), (22, 20), (22, 22), (20, 22), (20, 20)]


def test_point_in_ring():
    assert point_in_ring((5, 5), OUTER)
    assert not point_in_ring((15, 5), OUTER)
    assert not point_in_ring((-1, -1), OUTER)


def test_holes_are_excluded():
    mask = PolygonMask([[OUTER, HOLE]])

    assert mask.contains((2, 2))
    assert not mask.contains((5, 5))  # inside the hole
    assert not mask.contains((11, 5))


def test_multiple_polygons():
    mask = PolygonMask([[OUTER, HOLE], [ISLAND]])

    assert len(mask) == 2
    assert mask.contains((21, 21))
    assert mask.contains((1, 9))
    assert not mask.contains((15, 15))


def test_bounding_boxes():
    mask = PolygonMask([[OUTER, HOLE], [ISLAND]])
    assert mask.polygons[0]["bbox"] == (0, 0, 10, 10)
    assert mask.polygons[1]["bbox"] == (20, 20, 22, 22)


def test_from_shapely_geometry():
    polygon = Polygon(OUTER, [HOLE])
    mask = PolygonMask.from_geometry(MultiPolygon([polygon, Polygon(ISLAND)]))

    assert mask.contains((2, 2))
    assert not mask.contains((5, 5))
    assert mask.contains((21, 21))


def test_from_geojson_mapping():
    mask = PolygonMask.from_geometry({"type": "Polygon", "coordinates": [OUTER, HOLE]})
    assert mask.contains((8, 8))
    assert not mask.contains((5, 5))


def test_unsupported_geometry_type():
    with pytest.raises(ValueError):
        PolygonMask.from_geometry({"type": "Point", "coordinates": [0, 0]})


def test_missing_boundary_means_no_mask(tmp_path):
    assert load_polygon_mask(tmp_path / "missing.geojson") is None
    assert load_polygon_mask(None) is None


def test_load_boundary_file():
    temp_dir = tempfile.mkdtemp()
    try:
        path = Path(temp_dir) / "land.geojson"
        gdf = gpd.GeoDataFrame(
            [{"name": "Land", "geometry": Polygon(OUTER, [HOLE])}],
            crs="EPSG:4326"
        )
        gdf.to_file(path, driver="GeoJSON")

        mask = load_polygon_mask(path)
        assert mask is not None
        assert mask.contains((1, 1))
        assert not mask.contains((5, 5))
        assert not mask.contains((12, 12))
    finally:
        shutil.rmtree(temp_dir)
