#!/usr/bin/env python3
"""
Demonstration of the area-colored Voronoi canvas.

Shows:
1. Single point covering the whole canvas
2. Recoloring as points are added
3. Stable point ids across removals
4. SVG export
"""

from py_voronoi import VoronoiCanvas


def print_cells(canvas):
    for cell in canvas.diagram.cells:
        print(f"   - point {cell.point_id} at ({cell.point.x:.0f}, {cell.point.y:.0f}): "
              f"area={cell.area:.2f} color={cell.color}")


def main():
    canvas = VoronoiCanvas(width=800, height=600)

    print("=== Area Coloring Demo ===\n")

    print("1. One point owns the whole canvas:")
    first = canvas.add_point(10, 10)
    print_cells(canvas)

    print("\n2. Adding points recolors every cell:")
    canvas.add_point(400, 300)
    canvas.add_point(700, 500)
    middle = canvas.add_point(200, 450)
    print_cells(canvas)

    print("\n3. Removing a point keeps the other ids:")
    canvas.remove_point(middle)
    print_cells(canvas)
    print(f"   Point {first} still present: {first in canvas.store}")

    print("\n4. Exporting:")
    export = canvas.export_snapshot()
    print(f"   {export.filename} ({export.media_type}), {len(export.content)} characters")
    print(f"   {export.content.splitlines()[0]}")


if __name__ == "__main__":
    main()
