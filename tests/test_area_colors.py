"""Tests for area-based cell coloring."""

import numpy as np
import pytest

from py_voronoi.core.area_colors import (
    AreaColorMapper, AreaScale, build_scale, color_for, compute_areas, hue_for, polygon_area
)

LOW_COLOR = "rgb(224, 133, 133)"
HIGH_COLOR = "rgb(133, 224, 133)"


def square(x, y, size):
    return np.array([[x, y], [x + size, y], [x + size, y + size], [x, y + size]], dtype=float)


class TestAreas:
    """Test polygon area computation."""

    def test_signed_area(self):
        """Test orientation sign of the shoelace area."""
        ccw = square(0, 0, 2)
        assert polygon_area(ccw) == pytest.approx(4.0)
        assert polygon_area(ccw[::-1]) == pytest.approx(-4.0)

    def test_degenerate_polygons(self):
        """Test that short or missing polygons have zero area."""
        assert polygon_area(None) == 0.0
        assert polygon_area(np.array([[0.0, 0.0], [1.0, 1.0]])) == 0.0

    def test_compute_areas_absolute(self):
        """Test that areas are absolute and None counts as zero."""
        areas = compute_areas([square(0, 0, 3)[::-1], None, square(5, 5, 1)])
        np.testing.assert_allclose(areas, [9.0, 0.0, 1.0])


class TestAreaScale:
    """Test the normalized area scale."""

    def test_linear_domain(self):
        """Test interpolation between the smallest and largest area."""
        scale = build_scale([100.0, 300.0, 200.0])

        assert not scale.tied
        assert (scale.lo, scale.hi) == (100.0, 300.0)
        assert scale.map(100.0) == 0.0
        assert scale.map(200.0) == pytest.approx(0.5)
        assert scale.map(300.0) == 1.0

    def test_tie_maps_to_maximum(self):
        """Test that equal areas widen the domain and map to 1."""
        scale = build_scale([42.0, 42.0, 42.0])

        assert scale.tied
        assert (scale.lo, scale.hi) == (42.0, 43.0)
        assert scale.map(42.0) == 1.0

    def test_single_area_is_tie(self):
        """Test that a lone cell is drawn as the largest."""
        assert build_scale([480000.0]).map(480000.0) == 1.0

    def test_float_noise_is_tie(self):
        """Test that areas equal up to rounding noise still tie."""
        scale = build_scale([120000.0, 120000.0 + 1e-7, 120000.0 - 1e-7])
        assert scale.tied

    def test_empty_areas(self):
        """Test that no areas give a tie scale."""
        assert build_scale([]).tied

    def test_unclamped_map(self):
        """Test that the scale itself does not clamp."""
        scale = AreaScale(0.0, 10.0)
        assert scale.map(20.0) == pytest.approx(2.0)


class TestColors:
    """Test the HSL color ramp."""

    def test_endpoints(self):
        """Test the light red and light green ends of the ramp."""
        assert color_for(0.0) == LOW_COLOR
        assert color_for(1.0) == HIGH_COLOR

    def test_midpoint(self):
        """Test that the ramp passes through yellow."""
        assert hue_for(0.5) == pytest.approx(60.0)
        assert color_for(0.5) == "rgb(224, 224, 133)"

    def test_clamped(self):
        """Test that out-of-range values are clamped."""
        assert color_for(-0.5) == LOW_COLOR
        assert color_for(1.5) == HIGH_COLOR
        assert hue_for(3.0) == pytest.approx(120.0)

    def test_hue_monotonic(self):
        """Test that larger scaled values never decrease the hue."""
        hues = [hue_for(v) for v in np.linspace(0, 1, 11)]
        assert hues == sorted(hues)
        assert hues[0] == 0.0
        assert hues[-1] == pytest.approx(120.0)


class TestAreaColorMapper:
    """Test the full coloring pipeline."""

    def test_color_cells(self):
        """Test areas, scaled values and colors together."""
        mapper = AreaColorMapper()
        coloring = mapper.color_cells([square(0, 0, 1), square(0, 0, 2), None])

        np.testing.assert_allclose(coloring.areas, [1.0, 4.0, 0.0])
        assert coloring.scaled == pytest.approx([0.25, 1.0, 0.0])
        assert coloring.colors[1] == HIGH_COLOR
        assert coloring.colors[2] == LOW_COLOR

    def test_equal_cells_share_max_color(self):
        """Test that tied cells all get the maximum color."""
        mapper = AreaColorMapper()
        coloring = mapper.color_cells([square(0, 0, 2), square(5, 5, 2)])

        assert coloring.colors == [HIGH_COLOR, HIGH_COLOR]

    def test_empty(self):
        """Test coloring an empty diagram."""
        coloring = AreaColorMapper().color_cells([])
        assert coloring.colors == []
        assert len(coloring.areas) == 0
