"""Render commands exchanged between the renderer and a surface."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class Layer(str, Enum):
    """Drawing layer; cells are drawn below markers."""

    CELL = "cell"
    MARKER = "marker"


class RenderOp(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    REMOVE = "remove"


class PointerKind(str, Enum):
    """Pointer events delivered by the host."""

    CLICK = "click"
    HOVER = "hover"
    MOVE = "move"
    OUT = "out"


@dataclass
class RenderCommand:
    """One keyed element operation on a layer."""
    op: RenderOp
    layer: Layer
    key: int
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Target:
    """Rendered element a pointer event originated on."""
    layer: Layer
    key: int


@dataclass(frozen=True)
class PointerEvent:
    """
    Pointer event in surface coordinates.

    ``page_x``/``page_y`` are the document-space coordinates used to place
    the tooltip; they default to the surface coordinates. ``target`` is None
    when the event happened on empty canvas.
    """
    kind: PointerKind
    x: float
    y: float
    target: Optional[Target] = None
    page_x: Optional[float] = None
    page_y: Optional[float] = None

    @property
    def page(self):
        return (
            self.x if self.page_x is None else self.page_x,
            self.y if self.page_y is None else self.page_y,
        )


def format_number(value: float) -> str:
    """Compact decimal form for SVG attributes (at most 3 decimals)."""
    text = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text
