"""
In-memory SVG rendering surface and tooltip overlay.

The surface holds one ``<svg>`` element with a cell layer below a marker
layer. Elements are keyed by (layer, point id); updates mutate the existing
element so anything attached to it survives.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import structlog

from .commands import Layer, RenderCommand, RenderOp, format_number

logger = structlog.get_logger()

ELEMENT_TAGS = {
    Layer.CELL: "path",
    Layer.MARKER: "circle",
}


class SvgSurface:
    """Keyed SVG element tree driven by render commands."""

    def __init__(self, width: float, height: float, element_id: str = "voronoiCanvas"):
        self.width = width
        self.height = height
        self.root = ET.Element("svg", {
            "id": element_id,
            "width": format_number(width),
            "height": format_number(height),
        })
        self._layers = {
            Layer.CELL: ET.SubElement(self.root, "g"),
            Layer.MARKER: ET.SubElement(self.root, "g"),
        }
        self._elements: Dict[Tuple[Layer, int], ET.Element] = {}

    def apply(self, command: RenderCommand) -> None:
        key = (command.layer, command.key)

        if command.op == RenderOp.CREATE:
            if key in self._elements:
                logger.warning("Element already exists, updating instead",
                               layer=command.layer.value, key=command.key)
                self._elements[key].attrib.update(command.attrs)
                return
            self._elements[key] = ET.SubElement(
                self._layers[command.layer], ELEMENT_TAGS[command.layer], dict(command.attrs)
            )

        elif command.op == RenderOp.UPDATE:
            element = self._elements.get(key)
            if element is None:
                logger.warning("Update for unknown element ignored",
                               layer=command.layer.value, key=command.key)
                return
            element.attrib.update(command.attrs)

        elif command.op == RenderOp.REMOVE:
            element = self._elements.pop(key, None)
            if element is not None:
                self._layers[command.layer].remove(element)

    def element(self, layer: Layer, key: int) -> Optional[ET.Element]:
        return self._elements.get((layer, key))

    def count(self, layer: Layer) -> int:
        return len(self._layers[layer])

    def to_string(self) -> str:
        """Serialize the surface markup."""
        return ET.tostring(self.root, encoding="unicode")


@dataclass
class TooltipOverlay:
    """Ephemeral text overlay positioned in page coordinates."""
    visible: bool = False
    text: str = ""
    left: float = 0.0
    top: float = 0.0

    def show(self, text: str) -> None:
        self.visible = True
        self.text = text

    def move(self, left: float, top: float) -> None:
        self.left = left
        self.top = top

    def hide(self) -> None:
        self.visible = False

    def to_dict(self):
        return {"visible": self.visible, "text": self.text,
                "left": self.left, "top": self.top}
