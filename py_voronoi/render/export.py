"""Standalone SVG document export."""

import re
from typing import NamedTuple

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"
XML_PROLOG = '<?xml version="1.0" standalone="no"?>\r\n'
SVG_MEDIA_TYPE = "image/svg+xml;charset=utf-8"
DEFAULT_EXPORT_FILENAME = "voronoi_cells.svg"

_HAS_SVG_NS = re.compile(r'^<svg[^>]+xmlns="' + re.escape(SVG_NAMESPACE) + '"')
_HAS_XLINK_NS = re.compile(r'^<svg[^>]+"' + re.escape(XLINK_NAMESPACE) + '"')
_SVG_OPEN = re.compile(r"^<svg")


class SvgExport(NamedTuple):
    """Downloadable SVG document."""
    filename: str
    media_type: str
    content: str


def serialize_snapshot(source: str) -> str:
    """
    Make serialized surface markup a self-contained SVG file.

    The SVG and XLink namespace declarations are added to the root element
    only when missing, and the XML declaration is prepended.

    Args:
        source: Markup starting with the ``<svg`` root element

    Returns:
        Complete SVG document text
    """
    if not _HAS_SVG_NS.match(source):
        source = _SVG_OPEN.sub(f'<svg xmlns="{SVG_NAMESPACE}"', source, count=1)
    if not _HAS_XLINK_NS.match(source):
        source = _SVG_OPEN.sub(f'<svg xmlns:xlink="{XLINK_NAMESPACE}"', source, count=1)

    return XML_PROLOG + source


def build_export(source: str, filename: str = DEFAULT_EXPORT_FILENAME) -> SvgExport:
    return SvgExport(filename=filename, media_type=SVG_MEDIA_TYPE,
                     content=serialize_snapshot(source))
