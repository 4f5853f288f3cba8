"""Tests for edge style selection."""

import pytest

from bpmn_layout import Anchor, ElementKind, Orientation, RoutingStyle, select_edge_style
from bpmn_layout.styles import (
    BOUNDARY_LEFT_RIGHT,
    BOUNDARY_TOP_DOWN,
    SAME_LANE_LEFT_RIGHT,
    SAME_LANE_TOP_DOWN,
    TO_EARLIER_LANE,
    TO_LATER_LANE,
)


class TestSelectEdgeStyle:
    def test_same_lane_top_down(self):
        style = select_edge_style(ElementKind.TASK, 0, 0, Orientation.TOP_DOWN)
        assert style == SAME_LANE_TOP_DOWN
        assert style.routing is RoutingStyle.ORTHOGONAL

    def test_same_lane_left_right(self):
        style = select_edge_style(ElementKind.TASK, 1, 1, Orientation.LEFT_RIGHT)
        assert style == SAME_LANE_LEFT_RIGHT
        assert style.routing is RoutingStyle.ELBOW
        assert style.entry == Anchor(0.0, 0.5)

    def test_to_later_lane(self):
        style = select_edge_style(ElementKind.GATEWAY, 1, 3)
        assert style == TO_LATER_LANE
        assert style.exit == Anchor(None, 1.0)
        assert style.entry == Anchor(None, 0.0)

    def test_to_earlier_lane(self):
        style = select_edge_style(ElementKind.TASK, 2, 1, "left-to-right")
        assert style == TO_EARLIER_LANE
        assert style.routing is RoutingStyle.SEGMENT

    @pytest.mark.parametrize("lanes", [(0, 0), (1, 2), (2, 1)])
    def test_boundary_ignores_lanes(self, lanes):
        assert select_edge_style(ElementKind.BOUNDARY_EVENT, *lanes) == BOUNDARY_TOP_DOWN
        assert (
            select_edge_style(ElementKind.BOUNDARY_EVENT, *lanes, Orientation.LEFT_RIGHT)
            == BOUNDARY_LEFT_RIGHT
        )

    def test_boundary_left_right_anchors_bottom_centre(self):
        assert BOUNDARY_LEFT_RIGHT.exit == Anchor(0.5, 1.0)
        assert BOUNDARY_LEFT_RIGHT.entry == Anchor(0.5, 1.0)

    def test_default_orientation_is_top_down(self):
        assert select_edge_style(ElementKind.TASK, 0, 0) == SAME_LANE_TOP_DOWN
