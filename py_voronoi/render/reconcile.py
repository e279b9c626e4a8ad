"""
Keyed reconciliation of the rendered diagram.

After every recomputation the renderer compares the new (point, cell,
color) set against what it rendered last time, keyed by point id, and
emits only the create/update/remove commands needed to bring the surface
in line. Elements that persist are updated in place. Pointer handlers live
in a dispatch table keyed by the same ids, so they never need to be
re-attached when an element is updated.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from ..core.area_colors import AreaColoring
from ..core.partition import Cell
from ..core.point_store import Point
from .commands import (Layer, PointerEvent, PointerKind, RenderCommand, RenderOp,
                       format_number)
from .surface import TooltipOverlay

logger = structlog.get_logger()

Handler = Callable[[PointerEvent], None]


class RenderState(str, Enum):
    STALE = "stale"
    RECONCILED = "reconciled"


def cell_path(polygon: Optional[np.ndarray]) -> str:
    """SVG path data for a cell polygon; empty for degenerate cells."""
    if polygon is None or len(polygon) == 0:
        return ""
    coords = [f"{format_number(x)},{format_number(y)}" for x, y in polygon]
    return "M" + "L".join(coords) + "Z"


class InteractionTable:
    """Pointer handlers keyed by (layer, point id)."""

    def __init__(self):
        self._handlers: Dict[Tuple[Layer, int], Dict[PointerKind, Handler]] = {}

    def register(self, layer: Layer, key: int, handlers: Dict[PointerKind, Handler]) -> None:
        self._handlers[(layer, key)] = dict(handlers)

    def drop(self, layer: Layer, key: int) -> None:
        self._handlers.pop((layer, key), None)

    def lookup(self, layer: Layer, key: int, kind: PointerKind) -> Optional[Handler]:
        return self._handlers.get((layer, key), {}).get(kind)

    def __contains__(self, item) -> bool:
        return item in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


class ReconciliationRenderer:
    """
    Diffs successive diagrams and drives the rendering surface.

    Args:
        surface: Object with an ``apply(RenderCommand)`` method, or None to
            only compute commands
        tooltip: Overlay used by the cell hover handlers
        on_remove: Called with a point id when its marker is clicked
        marker_radius: Radius of point markers
        stroke: Outline color of cells
        tooltip_offset: (dx, dy) from the pointer to the tooltip
    """

    def __init__(self, surface=None, tooltip: Optional[TooltipOverlay] = None,
                 on_remove: Optional[Callable[[int], None]] = None,
                 marker_radius: float = 5.0, stroke: str = "#000",
                 tooltip_offset: Tuple[float, float] = (10.0, -10.0)):
        self.surface = surface
        self.tooltip = tooltip if tooltip is not None else TooltipOverlay()
        self.on_remove = on_remove
        self.marker_radius = marker_radius
        self.stroke = stroke
        self.tooltip_offset = tooltip_offset

        self.interactions = InteractionTable()
        self.state = RenderState.RECONCILED
        self._areas: Dict[int, float] = {}
        self._rendered: Dict[int, Point] = {}

    @property
    def rendered_ids(self) -> List[int]:
        return list(self._rendered)

    def area_of(self, point_id: int) -> Optional[float]:
        return self._areas.get(point_id)

    def mark_stale(self) -> None:
        self.state = RenderState.STALE

    def reconcile(self, seeds: Sequence[Tuple[int, Point]], cells: Sequence[Cell],
                  coloring: AreaColoring) -> List[RenderCommand]:
        """
        Bring the surface in line with a freshly computed diagram.

        Every surviving cell gets its fill re-issued, since the color scale
        depends on the whole point set.

        Args:
            seeds: (point_id, point) pairs in store order
            cells: Cells aligned with ``seeds``
            coloring: Coloring aligned with ``cells``

        Returns:
            Commands applied to the surface, in order
        """
        new_ids = [point_id for point_id, _ in seeds]
        new_set = set(new_ids)
        commands: List[RenderCommand] = []

        for point_id in self._rendered:
            if point_id not in new_set:
                commands.append(RenderCommand(RenderOp.REMOVE, Layer.CELL, point_id))
                commands.append(RenderCommand(RenderOp.REMOVE, Layer.MARKER, point_id))
                self.interactions.drop(Layer.CELL, point_id)
                self.interactions.drop(Layer.MARKER, point_id)

        for (point_id, _), cell, area, color in zip(seeds, cells, coloring.areas, coloring.colors):
            cell_attrs = {"d": cell_path(cell.polygon), "fill": color}
            if point_id in self._rendered:
                commands.append(RenderCommand(RenderOp.UPDATE, Layer.CELL, point_id, cell_attrs))
            else:
                cell_attrs["stroke"] = self.stroke
                commands.append(RenderCommand(RenderOp.CREATE, Layer.CELL, point_id, cell_attrs))
                self._bind_cell(point_id)
            self._areas[point_id] = float(area)

        for point_id, point in seeds:
            marker_attrs = {"cx": format_number(point.x), "cy": format_number(point.y)}
            if point_id in self._rendered:
                commands.append(RenderCommand(RenderOp.UPDATE, Layer.MARKER, point_id, marker_attrs))
            else:
                marker_attrs["r"] = format_number(self.marker_radius)
                commands.append(RenderCommand(RenderOp.CREATE, Layer.MARKER, point_id, marker_attrs))
                self._bind_marker(point_id)

        self._rendered = dict(seeds)
        self._areas = {k: v for k, v in self._areas.items() if k in new_set}

        if self.surface is not None:
            for command in commands:
                self.surface.apply(command)

        self.state = RenderState.RECONCILED
        logger.debug("Diagram reconciled", points=len(new_ids), commands=len(commands))
        return commands

    def dispatch(self, event: PointerEvent) -> bool:
        """
        Run the handler bound to the event's target.

        Returns:
            True if a handler consumed the event
        """
        if event.target is None:
            return False
        handler = self.interactions.lookup(event.target.layer, event.target.key, event.kind)
        if handler is None:
            return False
        handler(event)
        return True

    def _bind_cell(self, point_id: int) -> None:
        self.interactions.register(Layer.CELL, point_id, {
            PointerKind.HOVER: lambda event: self._show_area(point_id),
            PointerKind.MOVE: self._track_pointer,
            PointerKind.OUT: lambda event: self.tooltip.hide(),
        })

    def _bind_marker(self, point_id: int) -> None:
        self.interactions.register(Layer.MARKER, point_id, {
            PointerKind.CLICK: lambda event: self._remove(point_id),
        })

    def _show_area(self, point_id: int) -> None:
        # Looked up at event time so the tooltip follows recoloring
        area = self._areas.get(point_id, 0.0)
        self.tooltip.show(f"Area: {area:.2f}")

    def _track_pointer(self, event: PointerEvent) -> None:
        page_x, page_y = event.page
        dx, dy = self.tooltip_offset
        self.tooltip.move(page_x + dx, page_y + dy)

    def _remove(self, point_id: int) -> None:
        logger.info("Marker clicked", point_id=point_id)
        if self.on_remove is not None:
            self.on_remove(point_id)
