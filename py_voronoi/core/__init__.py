"""
Core diagram computation: point storage, partition and area coloring.
"""

from .point_store import Point, PointStore
from .partition import Bounds, Cell, PartitionEngine
from .area_colors import AreaColorMapper, AreaColoring, AreaScale, build_scale, color_for, compute_areas

__all__ = ['Point', 'PointStore', 'Bounds', 'Cell', 'PartitionEngine',
           'AreaColorMapper', 'AreaColoring', 'AreaScale', 'build_scale', 'color_for', 'compute_areas']
