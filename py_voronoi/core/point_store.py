"""Ordered point storage with stable per-point identity."""

from typing import Dict, List, NamedTuple, Optional, Tuple

import structlog

logger = structlog.get_logger()


class Point(NamedTuple):
    """A seed point on the canvas."""
    x: float
    y: float


class PointStore:
    """
    Single source of truth for the point set.

    Each added point is issued an id from a monotonic counter. Ids are never
    reused and never shift when other points are removed, so a rendered
    cell or marker can always be traced back to the point that produced it.
    """

    def __init__(self):
        self._points: Dict[int, Point] = {}
        self._next_id = 0

    def add(self, point: Point) -> int:
        """
        Append a point and return its id.

        No validation is done: duplicates and out-of-bounds points are
        accepted and left to the partition step.
        """
        point_id = self._next_id
        self._next_id += 1
        self._points[point_id] = Point(float(point[0]), float(point[1]))
        logger.debug("Point stored", point_id=point_id, x=point[0], y=point[1])
        return point_id

    def remove(self, point_id: int) -> bool:
        """Remove a point by id. Unknown ids are a no-op."""
        if self._points.pop(point_id, None) is None:
            logger.debug("Ignoring removal of unknown point", point_id=point_id)
            return False
        return True

    def clear(self) -> None:
        self._points.clear()

    def get(self, point_id: int) -> Optional[Point]:
        return self._points.get(point_id)

    def all(self) -> List[Tuple[int, Point]]:
        """Return (id, point) pairs in insertion order."""
        return list(self._points.items())

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, point_id) -> bool:
        return point_id in self._points
