"""
Interactive canvas: the command surface of the diagram.

``VoronoiCanvas`` owns the point store and runs the whole pipeline
(partition, area coloring, reconciliation) synchronously after every
mutation, so the rendered diagram always matches the point set once a
command returns.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional

import numpy as np
import structlog

from .config import Settings, settings as default_settings
from .core.area_colors import AreaColorMapper
from .core.partition import Bounds, PartitionEngine
from .core.point_store import Point, PointStore
from .render.commands import Layer, PointerEvent, PointerKind
from .render.export import SvgExport, build_export
from .render.reconcile import ReconciliationRenderer, RenderState, cell_path
from .render.surface import SvgSurface, TooltipOverlay

logger = structlog.get_logger()


@dataclass
class DiagramCell:
    """One point with its cell and color."""
    point_id: int
    point: Point
    polygon: Optional[np.ndarray]
    area: float
    scaled: float
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "point_id": self.point_id,
            "x": self.point.x,
            "y": self.point.y,
            "area": self.area,
            "scaled_area": self.scaled,
            "color": self.color,
            "path": cell_path(self.polygon),
            "polygon": self.polygon.tolist() if self.polygon is not None else None,
        }


@dataclass
class Diagram:
    """Result of one recomputation."""
    width: float
    height: float
    cells: List[DiagramCell] = field(default_factory=list)

    def cell(self, point_id: int) -> Optional[DiagramCell]:
        for c in self.cells:
            if c.point_id == point_id:
                return c
        return None

    def __len__(self) -> int:
        return len(self.cells)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "cells": [c.to_dict() for c in self.cells],
        }


class PointerOutcome(NamedTuple):
    """What a pointer event did."""
    consumed: bool
    action: str
    point_id: Optional[int] = None


class VoronoiCanvas:
    """
    Point set plus its rendered, area-colored Voronoi diagram.

    Args:
        width: Canvas width (defaults to settings)
        height: Canvas height (defaults to settings)
        config: Settings to read rendering defaults from
    """

    def __init__(self, width: Optional[float] = None, height: Optional[float] = None,
                 config: Settings = default_settings):
        self.bounds = Bounds(
            float(width if width is not None else config.canvas_width),
            float(height if height is not None else config.canvas_height),
        )
        self.export_filename = config.export_filename

        self.store = PointStore()
        self.engine = PartitionEngine()
        self.mapper = AreaColorMapper()
        self.surface = SvgSurface(self.bounds.width, self.bounds.height)
        self.tooltip = TooltipOverlay()
        self.renderer = ReconciliationRenderer(
            surface=self.surface,
            tooltip=self.tooltip,
            on_remove=self.remove_point,
            marker_radius=config.marker_radius,
            stroke=config.cell_stroke,
            tooltip_offset=(config.tooltip_offset_x, config.tooltip_offset_y),
        )
        self._diagram = Diagram(self.bounds.width, self.bounds.height)

        logger.info("Canvas created", width=self.bounds.width, height=self.bounds.height)
        self.recompute()

    @property
    def diagram(self) -> Diagram:
        return self._diagram

    @property
    def state(self) -> RenderState:
        return self.renderer.state

    def add_point(self, x: float, y: float) -> int:
        point_id = self.store.add(Point(x, y))
        logger.info("Point added", point_id=point_id, x=x, y=y)
        self.recompute()
        return point_id

    def remove_point(self, point_id: int) -> bool:
        """Remove a point; stale ids are a no-op and trigger no redraw."""
        if not self.store.remove(point_id):
            return False
        logger.info("Point removed", point_id=point_id)
        self.recompute()
        return True

    def reset_all(self) -> None:
        logger.info("Canvas reset", points=len(self.store))
        self.store.clear()
        self.recompute()

    def recompute(self) -> Diagram:
        """Run the full pipeline for the current point set."""
        self.renderer.mark_stale()

        seeds = self.store.all()
        cells = self.engine.compute(seeds, self.bounds)
        coloring = self.mapper.color_cells([c.polygon for c in cells])
        self.renderer.reconcile(seeds, cells, coloring)

        self._diagram = Diagram(
            width=self.bounds.width,
            height=self.bounds.height,
            cells=[
                DiagramCell(point_id, point, cell.polygon, float(area), float(scaled), color)
                for (point_id, point), cell, area, scaled, color in zip(
                    seeds, cells, coloring.areas, coloring.scaled, coloring.colors)
            ],
        )
        return self._diagram

    def handle_pointer(self, event: PointerEvent) -> PointerOutcome:
        """
        Route a pointer event from the host.

        A click on empty canvas or on a cell adds a point. A click on a
        marker only ever removes that point, even if the marker is stale.
        """
        target = event.target

        if event.kind == PointerKind.CLICK:
            if target is None or target.layer == Layer.CELL:
                point_id = self.add_point(event.x, event.y)
                return PointerOutcome(True, "added", point_id)
            handled = self.renderer.dispatch(event)
            return PointerOutcome(True, "removed" if handled else "ignored", target.key)

        handled = self.renderer.dispatch(event)
        return PointerOutcome(
            handled,
            event.kind.value if handled else "ignored",
            target.key if target is not None else None,
        )

    def export_snapshot(self) -> SvgExport:
        """Serialize the rendered surface as a downloadable SVG document."""
        export = build_export(self.surface.to_string(), self.export_filename)
        logger.info("Snapshot exported", points=len(self.store), bytes=len(export.content))
        return export
