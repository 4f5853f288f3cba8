"""
Waypoint refinements applied after routing.

- Collinear point removal
- Gateway exit snapping (left-to-right layouts)
"""

from __future__ import annotations

from typing import Sequence

from .model import GraphicInfo
from .types import Orientation, Point

_EPS = 1e-6


def _between(value: float, a: float, b: float) -> bool:
    return min(a, b) - _EPS <= value <= max(a, b) + _EPS


def _is_redundant(prev: Point, point: Point, nxt: Point) -> bool:
    """Whether ``point`` lies on a straight horizontal or vertical run."""
    if abs(prev[1] - point[1]) < _EPS and abs(point[1] - nxt[1]) < _EPS:
        return _between(point[0], prev[0], nxt[0])
    if abs(prev[0] - point[0]) < _EPS and abs(point[0] - nxt[0]) < _EPS:
        return _between(point[1], prev[1], nxt[1])
    return False


def optimize_edge_points(points: Sequence[Point]) -> list[Point]:
    """
    Drop interior points that sit on a straight horizontal or vertical run.

    Endpoints are always kept. The pass repeats until nothing changes, so
    applying the function to its own output is a no-op.

    Example:
        >>> optimize_edge_points([(0, 0), (50, 0), (100, 0), (100, 50)])
        [(0, 0), (100, 0), (100, 50)]
    """
    result = list(points)
    changed = True
    while changed and len(result) > 2:
        changed = False
        kept = [result[0]]
        for i in range(1, len(result) - 1):
            if _is_redundant(kept[-1], result[i], result[i + 1]):
                changed = True
            else:
                kept.append(result[i])
        kept.append(result[-1])
        result = kept
    return result


def box_midpoints(box: GraphicInfo) -> list[Point]:
    """North, south, east and west midpoints of a shape's bounding box."""
    cx = box.x + box.width / 2
    cy = box.y + box.height / 2
    return [
        (cx, box.y),
        (cx, box.y + box.height),
        (box.x + box.width, cy),
        (box.x, cy),
    ]


def snap_gateway_start(
    points: Sequence[Point],
    box: GraphicInfo,
    orientation: Orientation = Orientation.LEFT_RIGHT,
) -> list[Point]:
    """
    Move the first waypoint onto the nearest side midpoint of a gateway.

    Only left-to-right layouts are changed. The second waypoint takes the
    snapped y, the axis across the flow. When the leg after it is not
    vertical, the old second waypoint stays as a corner so the route remains
    orthogonal.

    Args:
        points: Route leaving the gateway
        box: Shape of the gateway
        orientation: Direction of the flow

    Returns:
        The adjusted route (a copy).
    """
    result = list(points)
    if Orientation(orientation).is_vertical or len(result) < 2:
        return result

    start = result[0]
    snapped = min(
        box_midpoints(box),
        key=lambda p: (p[0] - start[0]) ** 2 + (p[1] - start[1]) ** 2,
    )
    result[0] = snapped

    nxt = result[1]
    if abs(nxt[1] - snapped[1]) < _EPS or abs(nxt[0] - snapped[0]) < _EPS:
        return result
    moved = (nxt[0], snapped[1])
    if len(result) > 2 and abs(result[2][0] - nxt[0]) < _EPS:
        result[1] = moved
    else:
        result.insert(1, moved)
    return result


__all__ = [
    "optimize_edge_points",
    "box_midpoints",
    "snap_gateway_start",
]
