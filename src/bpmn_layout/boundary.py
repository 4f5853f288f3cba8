"""
Boundary event placement.

A boundary event is drawn as a circle pinned to the border of its
activity. The layout routes a boundary event's outgoing flow from the
activity itself; the first waypoint of that route becomes the centre of
the event, and the route is then cut where it leaves the event's circle
so the flow visibly starts at the event.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from .model import GraphicInfo
from .types import Point
from .validation import BoundaryIntersectionError

SEGMENT_TOLERANCE = 0.01


def circle_line_intersections(
    a: Point,
    b: Point,
    center: Point,
    radius: float,
) -> list[Point]:
    """
    Intersections of the infinite line through ``a`` and ``b`` with a circle.

    Solves ``|a + t·(b - a) - center|² = radius²`` for ``t``.

    Returns:
        Zero, one (tangent) or two points. Empty when ``a == b``.

    Example:
        >>> circle_line_intersections((0, 0), (10, 0), (0, 0), 5)
        [(5.0, 0.0), (-5.0, 0.0)]
    """
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    fx = a[0] - center[0]
    fy = a[1] - center[1]

    qa = dx * dx + dy * dy
    if qa == 0:
        return []
    qb = 2 * (fx * dx + fy * dy)
    qc = fx * fx + fy * fy - radius * radius

    disc = qb * qb - 4 * qa * qc
    if disc < 0:
        return []

    root = math.sqrt(disc)
    t1 = (-qb + root) / (2 * qa)
    p1 = (a[0] + t1 * dx, a[1] + t1 * dy)
    if disc == 0:
        return [p1]
    t2 = (-qb - root) / (2 * qa)
    return [p1, (a[0] + t2 * dx, a[1] + t2 * dy)]


def is_on_segment(
    point: Point,
    a: Point,
    b: Point,
    tolerance: float = SEGMENT_TOLERANCE,
) -> bool:
    """
    Whether ``point`` lies within the bounding box of segment ``a``-``b``.

    Routes are orthogonal, so the bounding box is the segment itself. The
    tolerance absorbs rounding on a fixed axis only; along the segment the
    point must stay between the ends.
    """
    return _on_axis(point[0], a[0], b[0], tolerance) and _on_axis(
        point[1], a[1], b[1], tolerance
    )


def _on_axis(value: float, start: float, stop: float, tolerance: float) -> bool:
    lo, hi = min(start, stop), max(start, stop)
    if hi - lo <= tolerance:
        return lo - tolerance <= value <= hi + tolerance
    return lo <= value <= hi


def _distance_sq(a: Point, b: Point) -> float:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


def event_box(center: Point, event_size: float, event_id: Optional[str] = None) -> GraphicInfo:
    """Square of side ``event_size`` centred on ``center``."""
    half = event_size / 2
    return GraphicInfo(
        x=center[0] - half,
        y=center[1] - half,
        width=event_size,
        height=event_size,
        element_id=event_id,
    )


def clip_boundary_edge(
    points: Sequence[Point],
    event_size: float,
    event_id: Optional[str] = None,
) -> tuple[GraphicInfo, list[Point]]:
    """
    Anchor a boundary event on its flow and cut the flow at the event circle.

    Args:
        points: Route of the flow, starting on the activity border
        event_size: Diameter of the event
        event_id: Id reported in errors and set on the returned shape

    Returns:
        (event shape, new route) where the new route starts on the circle
        and continues with the first point outside it.

    Raises:
        BoundaryIntersectionError: If the route never leaves the circle or
            the crossing point is missing or ambiguous

    Example:
        >>> info, route = clip_boundary_edge([(0, 0), (0, 100)], 30)
        >>> route
        [(0.0, 15.0), (0, 100)]
    """
    if not points:
        raise BoundaryIntersectionError(
            f"Boundary event '{event_id}' has an empty route", element_id=event_id
        )

    center = points[0]
    shape = event_box(center, event_size, event_id)

    limit = event_size * event_size
    index = 0
    while index < len(points) and _distance_sq(points[index], center) < limit:
        index += 1
    if index == 0 or index >= len(points):
        raise BoundaryIntersectionError(
            f"Route of boundary event '{event_id}' never leaves the event",
            element_id=event_id,
        )

    last_inside = points[index - 1]
    first_outside = points[index]

    candidates = circle_line_intersections(last_inside, first_outside, center, event_size / 2)
    if not candidates:
        raise BoundaryIntersectionError(
            f"Route of boundary event '{event_id}' does not cross the event",
            element_id=event_id,
        )

    on_segment = [p for p in candidates if is_on_segment(p, last_inside, first_outside)]
    if len(on_segment) != 1:
        raise BoundaryIntersectionError(
            f"Route of boundary event '{event_id}' crosses the event "
            f"{len(on_segment)} times",
            element_id=event_id,
        )

    return shape, [on_segment[0], *points[index:]]


def place_on_border(
    activity: GraphicInfo,
    position: int,
    count: int,
    event_size: float,
    event_id: Optional[str] = None,
) -> GraphicInfo:
    """
    Shape of a boundary event that has no outgoing flow.

    Such events are spread evenly along the bottom border of the activity.
    """
    x = activity.x + activity.width * (position + 1) / (count + 1)
    y = activity.y + activity.height
    return event_box((x, y), event_size, event_id)


__all__ = [
    "circle_line_intersections",
    "is_on_segment",
    "event_box",
    "clip_boundary_edge",
    "place_on_border",
]
