"""Tests for waypoint post-processing."""

import pytest

from bpmn_layout import (
    GraphicInfo,
    Orientation,
    box_midpoints,
    optimize_edge_points,
    snap_gateway_start,
)


class TestOptimizeEdgePoints:
    """Tests for collinear point removal."""

    def test_drops_collinear_point(self):
        """A point in the middle of a straight run disappears."""
        points = [(0, 0), (50, 0), (100, 0), (100, 50)]
        assert optimize_edge_points(points) == [(0, 0), (100, 0), (100, 50)]

    def test_keeps_bends(self):
        """Real bends are kept."""
        points = [(0, 0), (0, 50), (100, 50), (100, 100)]
        assert optimize_edge_points(points) == points

    def test_keeps_endpoints(self):
        """Two-point routes are never shortened."""
        assert optimize_edge_points([(0, 0), (0, 0)]) == [(0, 0), (0, 0)]

    def test_vertical_run(self):
        points = [(10, 0), (10, 20), (10, 40), (10, 80)]
        assert optimize_edge_points(points) == [(10, 0), (10, 80)]

    def test_overshooting_point_kept(self):
        """A point outside the span of its neighbours is a turn-back, not redundant."""
        points = [(0, 0), (100, 0), (50, 0)]
        assert optimize_edge_points(points) == points

    def test_idempotent(self):
        """Optimizing an optimized route changes nothing."""
        points = [(0, 0), (0, 10), (0, 20), (30, 20), (60, 20), (60, 50)]
        once = optimize_edge_points(points)
        assert optimize_edge_points(once) == once

    def test_tolerance(self):
        """Sub-epsilon deviations count as collinear."""
        points = [(0, 0), (50, 1e-9), (100, 0)]
        assert optimize_edge_points(points) == [(0, 0), (100, 0)]


class TestSnapGatewayStart:
    """Tests for gateway exit snapping."""

    def setup_method(self):
        self.box = GraphicInfo(0, 0, 40, 40)

    def test_midpoints(self):
        assert box_midpoints(self.box) == [(20, 0), (20, 40), (40, 20), (0, 20)]

    def test_snaps_to_nearest_midpoint(self):
        """The start moves to the closest side midpoint."""
        points = [(40, 25), (80, 25), (80, 100)]
        result = snap_gateway_start(points, self.box, Orientation.LEFT_RIGHT)
        assert result[0] == (40, 20)

    def test_keeps_first_segment_orthogonal(self):
        """The second point takes the snapped y and the next leg stays vertical."""
        points = [(40, 25), (80, 25), (80, 100)]
        result = snap_gateway_start(points, self.box, Orientation.LEFT_RIGHT)
        assert result == [(40, 20), (80, 20), (80, 100)]

    def test_horizontal_next_leg_keeps_corner(self):
        """The second point moves to the snapped y; the old one stays as a corner."""
        points = [(25, 40), (25, 80), (100, 80)]
        result = snap_gateway_start(points, self.box, Orientation.LEFT_RIGHT)
        assert result == [(20, 40), (25, 40), (25, 80), (100, 80)]

    def test_second_point_on_snapped_axis_untouched(self):
        points = [(41, 20), (80, 20), (80, 100)]
        result = snap_gateway_start(points, self.box, Orientation.LEFT_RIGHT)
        assert result == [(40, 20), (80, 20), (80, 100)]

    def test_two_point_route_gets_bend(self):
        """The end point stays put; a corner at the snapped y is added."""
        points = [(38, 30), (100, 30)]
        result = snap_gateway_start(points, self.box, Orientation.LEFT_RIGHT)
        assert result == [(40, 20), (100, 20), (100, 30)]

    def test_top_down_is_unchanged(self):
        points = [(40, 25), (80, 25), (80, 100)]
        assert snap_gateway_start(points, self.box, Orientation.TOP_DOWN) == points

    def test_does_not_mutate_input(self):
        points = [(40, 25), (80, 25)]
        snap_gateway_start(points, self.box)
        assert points == [(40, 25), (80, 25)]

    @pytest.mark.parametrize("points", [[], [(40, 25)]])
    def test_short_routes(self, points):
        assert snap_gateway_start(points, self.box) == points
