"""Tests for visualization module."""

import numpy as np
import pytest

from constellation_viewer.catalog import StarRecord
from constellation_viewer.viewport import ViewportTransform
from constellation_viewer.visualization import (
    BACKGROUND_COLOR,
    color_index_to_rgb,
    create_figure_visualization,
    draw_strokes,
    is_wrap_crossing,
    magnitude_to_radius,
    plan_strokes,
    render_star_markers,
)


class TestMagnitudeToRadius:
    """Tests for magnitude to radius conversion."""

    def test_bright_star_large_radius(self):
        """Test that bright stars (low magnitude) get larger radii."""
        radius_bright = magnitude_to_radius(0.0)
        radius_dim = magnitude_to_radius(5.0)

        assert radius_bright > radius_dim

    def test_radius_bounds(self):
        """Test that radius is bounded between 1 and 8."""
        assert 1 <= magnitude_to_radius(-5.0) <= 8
        assert 1 <= magnitude_to_radius(15.0) <= 8
        assert magnitude_to_radius(-1.0, scale_factor=100.0) == 8

    def test_unknown_magnitude(self):
        """Test that missing magnitudes get the default radius."""
        assert magnitude_to_radius(None) == 2
        assert magnitude_to_radius(float("nan")) == 2

    def test_scale_factor_effect(self):
        """Test that scale factor affects radius."""
        r_small = magnitude_to_radius(1.0, scale_factor=2.0)
        r_large = magnitude_to_radius(1.0, scale_factor=10.0)

        assert r_large > r_small


class TestColorIndexToRgb:
    """Tests for B-V color mapping."""

    def test_hot_star_is_blue(self):
        """Test that negative B-V maps to a blue tint."""
        r, g, b = color_index_to_rgb(-0.2)

        assert b > r

    def test_cool_star_is_orange(self):
        """Test that large B-V maps to an orange tint."""
        r, g, b = color_index_to_rgb(1.6)

        assert r > b

    def test_missing_index_uses_default(self):
        """Test fallback color for unknown B-V."""
        assert color_index_to_rgb(None, default=(1, 2, 3)) == (1, 2, 3)
        assert color_index_to_rgb(float("nan"), default=(1, 2, 3)) == (1, 2, 3)


class TestPlanStrokes:
    """Tests for segment planning and seam breaks."""

    def test_connected_segment(self):
        """Test that consecutive resolvable points form one sub-path."""
        points = {"A": (10.0, 10.0), "B": (20.0, 15.0), "C": (30.0, 10.0)}

        strokes = plan_strokes([["A", "B", "C"]], points, viewport_width=200)

        assert strokes == [[(10.0, 10.0), (20.0, 15.0), (30.0, 10.0)]]

    def test_wrap_crossing_breaks_stroke(self):
        """Test that a jump wider than half the viewport starts a new sub-path."""
        points = {"A": (10.0, 50.0), "B": (20.0, 50.0), "C": (190.0, 50.0)}

        strokes = plan_strokes([["A", "B", "C"]], points, viewport_width=200)

        assert strokes == [[(10.0, 50.0), (20.0, 50.0)], [(190.0, 50.0)]]

    def test_exactly_half_width_is_drawn(self):
        """Test that a jump of exactly half the width is still joined."""
        points = {"A": (0.0, 0.0), "B": (100.0, 0.0)}

        strokes = plan_strokes([["A", "B"]], points, viewport_width=200)

        assert strokes == [[(0.0, 0.0), (100.0, 0.0)]]

    def test_missing_ids_neither_break_nor_extend(self):
        """Test that unresolvable ids are skipped transparently."""
        points = {"A": (10.0, 10.0), "C": (30.0, 10.0)}

        strokes = plan_strokes([["A", "X", "C", "Y"]], points, viewport_width=200)

        assert strokes == [[(10.0, 10.0), (30.0, 10.0)]]

    def test_each_segment_starts_new_path(self):
        """Test that separate segments are never joined."""
        points = {"A": (10.0, 10.0), "B": (20.0, 10.0), "C": (30.0, 10.0)}

        strokes = plan_strokes([["A", "B"], ["C"]], points, viewport_width=200)

        assert strokes == [[(10.0, 10.0), (20.0, 10.0)], [(30.0, 10.0)]]

    def test_empty_and_unresolvable_segments(self):
        """Test that segments with no resolvable points produce nothing."""
        strokes = plan_strokes([[], ["X", "Y"]], {}, viewport_width=200)

        assert strokes == []

    def test_closed_polyline(self):
        """Test that first == last closes the figure."""
        points = {"A": (0.0, 0.0), "B": (10.0, 0.0), "C": (10.0, 10.0)}

        strokes = plan_strokes([["A", "B", "C", "A"]], points, viewport_width=200)

        assert strokes[0][0] == strokes[0][-1]
        assert len(strokes[0]) == 4

    def test_is_wrap_crossing(self):
        """Test the crossing threshold in both directions."""
        assert is_wrap_crossing((0.0, 0.0), (101.0, 0.0), 200.0)
        assert is_wrap_crossing((101.0, 0.0), (0.0, 0.0), 200.0)
        assert not is_wrap_crossing((0.0, 0.0), (99.0, 500.0), 200.0)

    def test_long_edge_at_high_zoom_breaks(self):
        """Test that a real edge wider than half the view breaks at high zoom."""
        transform = ViewportTransform(1200, 800)
        transform.zoom_to(600, 400, 20.0)
        # 10 degrees apart in RA at 800 px height
        base = {"A": (0.0, 0.0), "B": (10 * 800 / 180, 0.0)}

        strokes = plan_strokes([["A", "B"]], transform.project_points(base), 1200)

        assert [len(s) for s in strokes] == [1, 1]

        transform.reset()
        strokes = plan_strokes([["A", "B"]], transform.project_points(base), 1200)

        assert [len(s) for s in strokes] == [2]


class TestDrawStrokes:
    """Tests for line rasterization."""

    def test_line_drawn_between_points(self):
        """Test that a two-point stroke paints pixels along the line."""
        canvas = np.zeros((100, 100, 3), dtype=np.uint8)

        result = draw_strokes(canvas, [[(10.0, 50.0), (90.0, 50.0)]], color=(255, 0, 0))

        assert np.any(result[49:52, 45:55, 0] > 0)

    def test_single_point_stroke_draws_nothing(self):
        """Test that a lone move-to leaves the canvas untouched."""
        canvas = np.zeros((100, 100, 3), dtype=np.uint8)

        result = draw_strokes(canvas, [[(50.0, 50.0)]])

        assert not np.any(result)

    def test_broken_stroke_leaves_gap(self):
        """Test that no line crosses the gap between split sub-paths."""
        canvas = np.zeros((100, 200, 3), dtype=np.uint8)
        points = {"A": (10.0, 50.0), "B": (20.0, 50.0), "C": (190.0, 50.0)}
        strokes = plan_strokes([["A", "B", "C"]], points, viewport_width=200)

        result = draw_strokes(canvas, strokes, color=(255, 255, 255))

        assert np.any(result[48:53, 12:18] > 0), "Short A-B line should be drawn"
        assert not np.any(result[:, 60:150]), "No stroke across the seam"


class TestRenderStarMarkers:
    """Tests for star markers."""

    def test_markers_drawn(self):
        """Test that each star gets a marker."""
        canvas = np.zeros((100, 100, 3), dtype=np.uint8)
        points = {"A": (50.0, 50.0), "B": (75.0, 75.0)}

        result = render_star_markers(canvas, points)

        assert np.any(result[48:53, 48:53] > 0)
        assert np.any(result[73:78, 73:78] > 0)

    def test_out_of_bounds_skipped(self):
        """Test that off-canvas stars don't crash or draw."""
        canvas = np.zeros((100, 100, 3), dtype=np.uint8)

        result = render_star_markers(canvas, {"A": (-10.0, -10.0), "B": (150.0, 50.0)})

        assert result.shape == canvas.shape
        assert not np.any(result)

    def test_color_from_catalog(self):
        """Test that B-V drives marker color."""
        canvas = np.zeros((100, 100, 3), dtype=np.uint8)
        catalog = {"A": StarRecord("A", 0.0, 0.0, magnitude=0.0, color_index=1.5)}

        result = render_star_markers(canvas, {"A": (50.0, 50.0)}, catalog)

        assert tuple(result[50, 50]) == color_index_to_rgb(1.5)


class TestCreateFigureVisualization:
    """Tests for full figure rendering."""

    def test_background_and_shape(self):
        """Test canvas shape and background fill."""
        image = create_figure_visualization((60, 80, 3), [], {})

        assert image.shape == (60, 80, 3)
        assert image.dtype == np.uint8
        assert tuple(image[0, 0]) == BACKGROUND_COLOR

    def test_lines_can_be_disabled(self):
        """Test that draw_lines=False leaves only markers."""
        points = {"A": (10.0, 30.0), "B": (70.0, 30.0)}

        image = create_figure_visualization(
            (60, 80, 3), [["A", "B"]], points, draw_lines=False
        )

        assert tuple(image[30, 40]) == BACKGROUND_COLOR

    def test_lines_drawn_by_default(self):
        """Test that figure lines are drawn between markers."""
        points = {"A": (10.0, 30.0), "B": (70.0, 30.0)}

        image = create_figure_visualization((60, 80, 3), [["A", "B"]], points)

        assert tuple(image[30, 40]) != BACKGROUND_COLOR

    @pytest.mark.parametrize("width", [80, 81])
    def test_seam_pair_not_joined(self, width):
        """Test that a far-apart pair is not joined by a line."""
        points = {"A": (2.0, 30.0), "B": (width - 3.0, 30.0)}

        image = create_figure_visualization((60, width, 3), [["A", "B"]], points)

        assert tuple(image[30, width // 2]) == BACKGROUND_COLOR
