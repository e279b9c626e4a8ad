"""
Rendering: reconciliation, SVG surface, tooltip overlay and export.
"""

from .commands import Layer, PointerEvent, PointerKind, RenderCommand, RenderOp, Target
from .reconcile import InteractionTable, ReconciliationRenderer, RenderState
from .surface import SvgSurface, TooltipOverlay
from .export import SvgExport, serialize_snapshot

__all__ = ['Layer', 'PointerEvent', 'PointerKind', 'RenderCommand', 'RenderOp', 'Target',
           'InteractionTable', 'ReconciliationRenderer', 'RenderState',
           'SvgSurface', 'TooltipOverlay', 'SvgExport', 'serialize_snapshot']
