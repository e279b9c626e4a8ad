#!/usr/bin/env python3
"""Render a point set as an area-colored Voronoi diagram preview."""

import argparse
import json
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from matplotlib.patches import Polygon as PolygonPatch

from py_voronoi import VoronoiCanvas
from py_voronoi.config import settings


def load_points(path):
    """Load ``[[x, y], ...]`` from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    return [(float(p[0]), float(p[1])) for p in data]


def css_rgb(color):
    """Convert an ``rgb(r, g, b)`` string to a matplotlib color."""
    if color.startswith("rgb("):
        r, g, b = (int(c) / 255 for c in color[4:-1].split(","))
        return (r, g, b)
    return to_rgb(color)


def build_canvas(points, width, height):
    canvas = VoronoiCanvas(width=width, height=height)
    for x, y in points:
        canvas.add_point(x, y)
    return canvas


def render_preview(canvas, output):
    """Draw cells, markers and area labels into an image file."""
    diagram = canvas.diagram
    fig, ax = plt.subplots(figsize=(diagram.width / 100, diagram.height / 100), dpi=100)

    for cell in diagram.cells:
        if cell.polygon is not None:
            ax.add_patch(PolygonPatch(cell.polygon, closed=True,
                                      facecolor=css_rgb(cell.color), edgecolor="black",
                                      linewidth=0.8))
        ax.plot(cell.point.x, cell.point.y, "o", color="black", markersize=4)

    ax.set_xlim(0, diagram.width)
    # SVG y axis points down
    ax.set_ylim(diagram.height, 0)
    ax.set_aspect("equal")
    ax.set_axis_off()

    fig.savefig(output, bbox_inches="tight")
    plt.close(fig)


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("points", help="JSON file with [[x, y], ...]")
    parser.add_argument("--output", "-o", default="voronoi_cells.png", help="Preview image path")
    parser.add_argument("--svg", help="Also write the SVG export to this path")
    parser.add_argument("--width", type=float, default=settings.canvas_width)
    parser.add_argument("--height", type=float, default=settings.canvas_height)
    args = parser.parse_args(argv)

    points = load_points(args.points)
    canvas = build_canvas(points, args.width, args.height)

    render_preview(canvas, args.output)
    print(f"Preview written to {args.output} ({len(points)} points)")

    if args.svg:
        Path(args.svg).write_text(canvas.export_snapshot().content, encoding="utf-8")
        print(f"SVG written to {args.svg}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
