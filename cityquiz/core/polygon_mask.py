"""Indexed point-in-polygon test used to mask the coverage grid to land."""
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Dict, Any

import geopandas as gpd
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry

from cityquiz.utils.logging import log_structured

Ring = Sequence[Tuple[float, float]]  # (lon, lat) vertices


def point_in_ring(point: Tuple[float, float], ring: Ring) -> bool:
    """Ray-casting parity test. Degenerate rings are used as-is."""
    x, y = point
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def point_in_polygon(point: Tuple[float, float], rings: Sequence[Ring]) -> bool:
    """First ring is the outer boundary, the rest are holes."""
    if not rings or not point_in_ring(point, rings[0]):
        return False
    return not any(point_in_ring(point, hole) for hole in rings[1:])


class PolygonMask:
    """(Multi-)polygon boundary with a bounding box per polygon for pruning."""

    def __init__(self, polygons: Sequence[Sequence[Ring]]):
        """
        Args:
            polygons: List of polygons, each a list of rings of (lon, lat)
                vertices. The first ring is the outer boundary.
        """
        self.polygons: List[Dict[str, Any]] = []
        for rings in polygons:
            if not rings:
                continue
            xs = [pt[0] for ring in rings for pt in ring]
            ys = [pt[1] for ring in rings for pt in ring]
            if not xs:
                continue
            self.polygons.append({
                "rings": [[(float(pt[0]), float(pt[1])) for pt in ring] for ring in rings],
                "bbox": (min(xs), min(ys), max(xs), max(ys)),
            })

    def __len__(self) -> int:
        return len(self.polygons)

    def contains(self, point: Tuple[float, float]) -> bool:
        """
        Check whether a (lon, lat) point lies inside any polygon net of holes.
        """
        x, y = point
        for poly in self.polygons:
            min_x, min_y, max_x, max_y = poly["bbox"]
            if x < min_x or x > max_x or y < min_y or y > max_y:
                continue
            if point_in_polygon(point, poly["rings"]):
                return True
        return False

    @classmethod
    def from_geometry(cls, geometry) -> "PolygonMask":
        """
        Build a mask from a shapely geometry or a GeoJSON geometry mapping.

        Args:
            geometry: shapely Polygon/MultiPolygon, or a dict with "type"
                ("Polygon" or "MultiPolygon") and "coordinates"

        Returns:
            PolygonMask
        """
        if isinstance(geometry, BaseGeometry):
            geometry = mapping(geometry)

        geom_type = geometry.get("type")
        coordinates = geometry.get("coordinates") or []
        if geom_type == "Polygon":
            polygons = [coordinates]
        elif geom_type == "MultiPolygon":
            polygons = coordinates
        else:
            raise ValueError(f"Unsupported boundary geometry type: {geom_type}")

        return cls(polygons)


def load_polygon_mask(path: Optional[Path], crs: str = "EPSG:4326") -> Optional[PolygonMask]:
    """
    Load a land boundary file (GeoJSON, shapefile, ...) into a mask.

    All features are unioned into one (multi-)polygon.

    Args:
        path: Boundary file path
        crs: CRS the coordinates must be in (lon/lat degrees)

    Returns:
        PolygonMask, or None when no boundary file is available (no masking)
    """
    if path is None or not Path(path).exists():
        log_structured("warning", "Land boundary not found, coverage grid is unmasked", path=str(path))
        return None

    gdf = gpd.read_file(path)
    if gdf.empty:
        log_structured("warning", "Land boundary is empty, coverage grid is unmasked", path=str(path))
        return None

    if gdf.crs is not None and gdf.crs != crs:
        gdf = gdf.to_crs(crs)

    mask = PolygonMask.from_geometry(gdf.geometry.union_all())
    log_structured("info", "Loaded land boundary", path=str(path), polygons=len(mask))
    return mask
