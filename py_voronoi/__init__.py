"""
Interactive Voronoi diagram with area-coded cell colors.
"""

from .canvas import Diagram, DiagramCell, PointerOutcome, VoronoiCanvas

__version__ = "0.1.0"

__all__ = ['VoronoiCanvas', 'Diagram', 'DiagramCell', 'PointerOutcome', '__version__']
