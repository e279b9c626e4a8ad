"""Bounded Voronoi partition of the canvas point set."""

import math
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import QhullError, Voronoi
from shapely.geometry import MultiPoint, Polygon, box
from shapely.geometry.polygon import orient

from .point_store import Point

logger = structlog.get_logger()

# Sentinels sit this many extents away from the data, far enough that no
# bisector with a real seed can cross the clipping box.
SENTINEL_DISTANCE_FACTOR = 10.0


class Bounds(NamedTuple):
    """Clipping rectangle [0, width] x [0, height]."""
    width: float
    height: float

    def as_box(self) -> Polygon:
        return box(0.0, 0.0, self.width, self.height)

    @property
    def area(self) -> float:
        return self.width * self.height


class Cell(NamedTuple):
    """Region owned by one seed.

    ``polygon`` is an (n, 2) array of counter-clockwise vertices without
    the closing vertex, or None when the cell is degenerate.
    """
    point_id: int
    polygon: Optional[np.ndarray]


def get_sentinel_points(bounds: Bounds, coords: np.ndarray) -> np.ndarray:
    """
    Generate far-away points that close every real Voronoi cell.

    Plays the role of the boundary points used for pseudo-clipping: with
    these four points surrounding the data, Qhull reports a finite region
    for every real seed. They are placed far enough away that the part of
    the diagram inside the bounds is unaffected.

    Args:
        bounds: Clipping rectangle
        coords: Real seed coordinates, shape (n, 2)

    Returns:
        Array of 4 sentinel coordinates
    """
    min_x = min(0.0, float(coords[:, 0].min()))
    max_x = max(bounds.width, float(coords[:, 0].max()))
    min_y = min(0.0, float(coords[:, 1].min()))
    max_y = max(bounds.height, float(coords[:, 1].max()))

    span = max(max_x - min_x, max_y - min_y, 1.0)
    cx = (min_x + max_x) / 2
    cy = (min_y + max_y) / 2
    r = span * SENTINEL_DISTANCE_FACTOR

    return np.array([
        [cx - r, cy - r],
        [cx + r, cy - r],
        [cx + r, cy + r],
        [cx - r, cy + r],
    ])


def clip_cell(vertices: np.ndarray, clip_box: Polygon) -> Optional[np.ndarray]:
    """
    Clip a convex Voronoi cell to the bounding box.

    Args:
        vertices: Cell vertex coordinates in any order
        clip_box: Bounding rectangle

    Returns:
        Counter-clockwise vertex array, or None if nothing of the cell
        with positive area lies inside the box
    """
    if len(vertices) < 3:
        return None

    hull = MultiPoint([tuple(v) for v in vertices]).convex_hull
    clipped = hull.intersection(clip_box)

    if not isinstance(clipped, Polygon) or clipped.is_empty or clipped.area <= 0:
        return None

    ring = np.asarray(orient(clipped, sign=1.0).exterior.coords, dtype=float)
    return ring[:-1]


class PartitionEngine:
    """
    Computes the bounded Voronoi partition for an ordered set of seeds.

    Every call starts from scratch; nothing is cached between calls, so the
    same input always produces the same cells.
    """

    def compute(self, seeds: Sequence[Tuple[int, Point]], bounds: Bounds) -> List[Cell]:
        """
        Compute one cell per seed, in input order.

        Coincident seeds share a single cell: the first occurrence owns it
        and later duplicates get a degenerate (None) polygon. Seeds with
        non-finite coordinates are degenerate as well.

        Args:
            seeds: (point_id, point) pairs
            bounds: Clipping rectangle

        Returns:
            List of cells aligned with ``seeds``
        """
        if not seeds:
            return []

        # Map each distinct coordinate to the first seed that uses it
        owners: Dict[Tuple[float, float], int] = {}
        unique_coords: List[Tuple[float, float]] = []
        slot_for_seed: List[Optional[int]] = []

        for _, point in seeds:
            key = (float(point[0]), float(point[1]))
            if not (math.isfinite(key[0]) and math.isfinite(key[1])):
                slot_for_seed.append(None)
            elif key in owners:
                slot_for_seed.append(None)
            else:
                owners[key] = len(unique_coords)
                slot_for_seed.append(len(unique_coords))
                unique_coords.append(key)

        degenerate = len(seeds) - len(unique_coords)
        if degenerate:
            logger.debug("Degenerate seeds skipped", count=degenerate)

        polygons = self._compute_polygons(np.array(unique_coords, dtype=float), bounds)

        return [
            Cell(point_id, polygons[slot] if slot is not None else None)
            for (point_id, _), slot in zip(seeds, slot_for_seed)
        ]

    def _compute_polygons(self, coords: np.ndarray, bounds: Bounds) -> List[Optional[np.ndarray]]:
        """Clipped polygon per unique coordinate."""
        if len(coords) == 0:
            return []

        sentinels = get_sentinel_points(bounds, coords)
        try:
            vor = Voronoi(np.vstack([coords, sentinels]))
        except QhullError as e:
            logger.warning("Voronoi computation failed", seeds=len(coords), error=str(e))
            return [None] * len(coords)

        clip_box = bounds.as_box()
        polygons = []
        claimed = set()
        for i in range(len(coords)):
            region_idx = vor.point_region[i]
            # Qhull merges nearly coincident seeds into one region
            if region_idx in claimed:
                logger.debug("Merged seed skipped", index=i, region=int(region_idx))
                polygons.append(None)
                continue
            region_vertices = vor.regions[region_idx] if region_idx != -1 else []
            if not region_vertices or -1 in region_vertices:
                logger.warning("Unbounded cell for seed", index=i)
                polygons.append(None)
                continue
            claimed.add(region_idx)
            polygons.append(clip_cell(vor.vertices[region_vertices], clip_box))

        logger.debug("Partition computed", seeds=len(coords),
                     vertices=len(vor.vertices))
        return polygons
