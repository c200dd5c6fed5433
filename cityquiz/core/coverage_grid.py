"""Area-weighted, land-masked sample grid for estimating covered area."""
import math
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from cityquiz.core.geodesy import EARTH_RADIUS_M, distance_meters
from cityquiz.core.polygon_mask import PolygonMask
from cityquiz.utils.timing import Timer

EDGE_TOLERANCE = 1e-9


class CoverageGrid:
    """
    Fixed set of sample points with area weights.

    Points are (lat, lon) pairs. Each weight is cos(latitude), since a
    degree cell shrinks east-west toward the poles. Sample indices are
    bucketed into cells of ``bucket_deg`` degrees so a circle only scans
    nearby samples; results are the same as a scan over every sample.
    """

    def __init__(
        self,
        points: List[Tuple[float, float]],
        weights: List[float],
        bucket_deg: float = 1.0
    ):
        if len(points) != len(weights):
            raise ValueError("points and weights must have the same length")
        self.points = list(points)
        self.weights = list(weights)
        self.total_weight = sum(self.weights)
        self.bucket_deg = bucket_deg
        self._buckets: Dict[Tuple[int, int], List[int]] = defaultdict(list)
        for idx, (lat, lon) in enumerate(self.points):
            self._buckets[self._cell(lat, lon)].append(idx)

    def __len__(self) -> int:
        return len(self.points)

    def _cell(self, lat: float, lon: float) -> Tuple[int, int]:
        return (math.floor(lat / self.bucket_deg), math.floor(lon / self.bucket_deg))

    def _candidates(self, center: Tuple[float, float], radius_m: float) -> Optional[List[int]]:
        """Indices in buckets overlapping the circle's bounding box, or None for a full scan."""
        lat_c, lon_c = center
        delta = radius_m / EARTH_RADIUS_M
        dlat = math.degrees(delta)
        max_abs_lat = abs(lat_c) + dlat
        if delta >= math.pi or max_abs_lat >= 90.0:
            return None

        ratio = math.sin(delta / 2) / math.cos(math.radians(max_abs_lat))
        if ratio >= 1.0:
            return None
        dlon = math.degrees(2 * math.asin(ratio))

        lat_lo, lat_hi = lat_c - dlat - EDGE_TOLERANCE, lat_c + dlat + EDGE_TOLERANCE
        lon_lo, lon_hi = lon_c - dlon - EDGE_TOLERANCE, lon_c + dlon + EDGE_TOLERANCE
        # Sample longitudes are not wrapped, so a box crossing the antimeridian falls back
        if lon_lo < -180.0 or lon_hi > 180.0:
            return None

        row_lo, col_lo = self._cell(lat_lo, lon_lo)
        row_hi, col_hi = self._cell(lat_hi, lon_hi)
        found = []
        for row in range(row_lo, row_hi + 1):
            for col in range(col_lo, col_hi + 1):
                found.extend(self._buckets.get((row, col), ()))
        found.sort()
        return found

    def indices_within(self, center: Tuple[float, float], radius_m: float) -> List[int]:
        """
        Find sample indices within a geodesic radius of a center.

        Args:
            center: (lat, lon) in degrees
            radius_m: Radius in meters

        Returns:
            Ascending list of sample indices
        """
        candidates = self._candidates(center, radius_m)
        if candidates is None:
            candidates = range(len(self.points))
        return [
            idx for idx in candidates
            if distance_meters(center, self.points[idx]) <= radius_m
        ]


def _steps(low: float, high: float, step: float) -> List[float]:
    if step <= 0:
        raise ValueError("step_deg must be positive")
    count = int(math.floor((high - low) / step + EDGE_TOLERANCE)) + 1
    return [low + i * step for i in range(max(count, 0))]


def build_grid(
    lat_min: float,
    lat_max: float,
    lon_min: float,
    lon_max: float,
    step_deg: float,
    mask: Optional[PolygonMask] = None
) -> CoverageGrid:
    """
    Build the coverage grid over a lat/lon rectangle.

    Both edges are inclusive within floating-point tolerance. Points
    outside the mask are dropped; with no mask every point is kept.

    Args:
        lat_min: Southern edge in degrees
        lat_max: Northern edge in degrees
        lon_min: Western edge in degrees
        lon_max: Eastern edge in degrees
        step_deg: Sample spacing in degrees
        mask: Optional land mask, tested with (lon, lat)

    Returns:
        CoverageGrid
    """
    points: List[Tuple[float, float]] = []
    weights: List[float] = []

    lons = _steps(lon_min, lon_max, step_deg)
    with Timer("build_grid", step_deg=step_deg, masked=mask is not None) as timer:
        for lat in _steps(lat_min, lat_max, step_deg):
            weight = max(0.0, math.cos(math.radians(lat)))
            for lon in lons:
                if mask is None or mask.contains((lon, lat)):
                    points.append((lat, lon))
                    weights.append(weight)
        timer.fields["points"] = len(points)

    return CoverageGrid(points, weights)
