"""
Edge style selection.

Picks how a sequence flow is routed from where it starts and which lanes
it joins. Lane numbers only differ when lanes are drawn as groups; every
vertex is in lane 0 otherwise.
"""

from __future__ import annotations

from .model import ElementKind
from .routing import Anchor, EdgeStyle, RoutingStyle
from .types import Orientation

BOUNDARY_TOP_DOWN = EdgeStyle(RoutingStyle.ORTHOGONAL)
BOUNDARY_LEFT_RIGHT = EdgeStyle(
    RoutingStyle.ORTHOGONAL,
    exit=Anchor(0.5, 1.0),
    entry=Anchor(0.5, 1.0),
)
SAME_LANE_TOP_DOWN = EdgeStyle(RoutingStyle.ORTHOGONAL)
SAME_LANE_LEFT_RIGHT = EdgeStyle(RoutingStyle.ELBOW, entry=Anchor(0.0, 0.5))
TO_LATER_LANE = EdgeStyle(RoutingStyle.SEGMENT, exit=Anchor(None, 1.0), entry=Anchor(None, 0.0))
TO_EARLIER_LANE = EdgeStyle(RoutingStyle.SEGMENT, exit=Anchor(None, 0.0), entry=Anchor(None, 1.0))


def select_edge_style(
    source_kind: ElementKind,
    source_lane: int,
    target_lane: int,
    orientation: Orientation = Orientation.TOP_DOWN,
) -> EdgeStyle:
    """
    Routing style of one edge.

    Args:
        source_kind: Kind of the flow's logical source (the boundary event
            itself for flows leaving a boundary event)
        source_lane: Lane number of the source vertex
        target_lane: Lane number of the target vertex
        orientation: Direction of the flow

    Returns:
        The style; boundary-event flows ignore the lanes.

    Example:
        >>> select_edge_style(ElementKind.TASK, 1, 2).routing
        <RoutingStyle.SEGMENT: 'segment'>
    """
    vertical = Orientation(orientation).is_vertical

    if source_kind is ElementKind.BOUNDARY_EVENT:
        return BOUNDARY_TOP_DOWN if vertical else BOUNDARY_LEFT_RIGHT
    if source_lane == target_lane:
        return SAME_LANE_TOP_DOWN if vertical else SAME_LANE_LEFT_RIGHT
    if source_lane < target_lane:
        return TO_LATER_LANE
    return TO_EARLIER_LANE


__all__ = [
    "select_edge_style",
    "BOUNDARY_TOP_DOWN",
    "BOUNDARY_LEFT_RIGHT",
    "SAME_LANE_TOP_DOWN",
    "SAME_LANE_LEFT_RIGHT",
    "TO_LATER_LANE",
    "TO_EARLIER_LANE",
]
