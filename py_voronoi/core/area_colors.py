"""
Area-based cell coloring.

Cell areas are normalized against the smallest and largest cell of the
current diagram and mapped onto an HSL ramp from light red (smallest) to
light green (largest). The scale is global: adding or removing any point
can recolor every other cell.
"""

import colorsys
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import structlog

logger = structlog.get_logger()

# HSL ramp endpoints: (hue degrees, saturation, lightness)
LOW_AREA_HSL = (0.0, 0.6, 0.7)
HIGH_AREA_HSL = (120.0, 0.6, 0.7)

# Areas closer than this (relative to the largest area) count as a tie
AREA_TIE_TOLERANCE = 1e-9


def polygon_area(vertices: np.ndarray) -> float:
    """Signed shoelace area; positive for counter-clockwise vertices."""
    if vertices is None or len(vertices) < 3:
        return 0.0
    x = vertices[:, 0]
    y = vertices[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def compute_areas(polygons: Sequence[Optional[np.ndarray]]) -> np.ndarray:
    """Absolute area per polygon, 0 for degenerate cells."""
    return np.array(
        [abs(polygon_area(p)) if p is not None else 0.0 for p in polygons],
        dtype=float,
    )


@dataclass(frozen=True)
class AreaScale:
    """Linear map from the [lo, hi] area domain onto [0, 1]."""
    lo: float
    hi: float
    tied: bool = False

    def map(self, area: float) -> float:
        # All cells equal: everything is drawn as "largest"
        if self.tied:
            return 1.0
        return (area - self.lo) / (self.hi - self.lo)


def build_scale(areas: Sequence[float]) -> AreaScale:
    """
    Fit the area scale to the observed areas.

    When every area is the same the domain is widened to [min, min + 1]
    and the scale reports 1.0 for every cell.

    Args:
        areas: Cell areas

    Returns:
        Fitted AreaScale
    """
    if len(areas) == 0:
        return AreaScale(0.0, 1.0, tied=True)

    lo = float(np.min(areas))
    hi = float(np.max(areas))
    if hi - lo <= AREA_TIE_TOLERANCE * max(abs(hi), 1.0):
        return AreaScale(lo, lo + 1.0, tied=True)
    return AreaScale(lo, hi)


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def hue_for(value: float) -> float:
    """Hue in degrees for a scaled area value."""
    t = _clamp01(value)
    h0 = LOW_AREA_HSL[0]
    h1 = HIGH_AREA_HSL[0]
    delta = h1 - h0
    # Interpolate along the shorter arc of the color wheel
    if delta > 180:
        delta -= 360
    elif delta < -180:
        delta += 360
    return (h0 + delta * t) % 360


def _to_byte(channel: float) -> int:
    return int(math.floor(channel * 255 + 0.5))


def color_for(value: float) -> str:
    """
    CSS color for a scaled area value.

    Args:
        value: Scaled area; clamped to [0, 1]

    Returns:
        Color as an ``rgb(r, g, b)`` string
    """
    t = _clamp01(value)
    saturation = LOW_AREA_HSL[1] + (HIGH_AREA_HSL[1] - LOW_AREA_HSL[1]) * t
    lightness = LOW_AREA_HSL[2] + (HIGH_AREA_HSL[2] - LOW_AREA_HSL[2]) * t

    r, g, b = colorsys.hls_to_rgb(hue_for(t) / 360.0, lightness, saturation)
    return f"rgb({_to_byte(r)}, {_to_byte(g)}, {_to_byte(b)})"


@dataclass
class AreaColoring:
    """Areas, scale and colors for one recomputation."""
    areas: np.ndarray
    scale: AreaScale
    scaled: List[float]
    colors: List[str]


class AreaColorMapper:
    """Turns cell polygons into per-cell colors."""

    def color_cells(self, polygons: Sequence[Optional[np.ndarray]]) -> AreaColoring:
        areas = compute_areas(polygons)
        scale = build_scale(areas)
        scaled = [scale.map(a) for a in areas]
        colors = [color_for(s) for s in scaled]

        logger.debug("Cells colored", cells=len(areas), min_area=scale.lo,
                     max_area=scale.hi, tied=scale.tied)
        return AreaColoring(areas=areas, scale=scale, scaled=scaled, colors=colors)
