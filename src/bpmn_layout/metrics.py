"""
Layout quality metrics.

Provides quantitative measures of a laid-out model:
- Edge crossings: Number of intersecting sequence flow pairs
- Shape overlaps: Number of overlapping sibling shapes
- Bends: Number of interior waypoints
- Non-orthogonal segments: Waypoint segments that are neither horizontal
  nor vertical
- Total edge length

All metrics read the model's diagram interchange store.
"""

from __future__ import annotations

import math
from typing import Any, Iterator, Sequence

from .model import (
    BpmnModel,
    ElementKind,
    FlowElementsContainer,
    GraphicInfo,
    SequenceFlow,
    SubProcess,
)
from .types import Point

_EPS = 1e-6


def _points(model: BpmnModel, flow_id: str) -> list[Point]:
    return [(p.x, p.y) for p in model.get_flow_graphic_info(flow_id)]


def _segments(points: Sequence[Point]) -> Iterator[tuple[Point, Point]]:
    for i in range(len(points) - 1):
        yield points[i], points[i + 1]


def _segments_intersect(p1: Point, p2: Point, p3: Point, p4: Point) -> bool:
    """Check if line segments (p1,p2) and (p3,p4) properly intersect."""

    def ccw(a: Point, b: Point, c: Point) -> bool:
        return (c[1] - a[1]) * (b[0] - a[0]) > (b[1] - a[1]) * (c[0] - a[0])

    return ccw(p1, p3, p4) != ccw(p2, p3, p4) and ccw(p1, p2, p3) != ccw(p1, p2, p4)


def _iter_containers(model: BpmnModel) -> Iterator[FlowElementsContainer]:
    stack: list[FlowElementsContainer] = list(model.processes)
    while stack:
        container = stack.pop(0)
        yield container
        stack.extend(e for e in container.flow_elements if isinstance(e, SubProcess))


def edge_crossings(model: BpmnModel) -> int:
    """
    Count pairs of sequence flows whose polylines cross.

    Flows sharing a source or target element are not compared.

    Time Complexity: O(s^2) where s = number of waypoint segments
    """
    flows: list[SequenceFlow] = [f for f in model.iter_sequence_flows() if f.id]
    routes = [_points(model, f.id or "") for f in flows]

    crossings = 0
    for i in range(len(flows)):
        for j in range(i + 1, len(flows)):
            a, b = flows[i], flows[j]
            if {a.source_ref, a.target_ref} & {b.source_ref, b.target_ref}:
                continue
            if any(
                _segments_intersect(p1, p2, p3, p4)
                for p1, p2 in _segments(routes[i])
                for p3, p4 in _segments(routes[j])
            ):
                crossings += 1
    return crossings


def _overlap(a: GraphicInfo, b: GraphicInfo) -> bool:
    return (
        a.x < b.x + b.width - _EPS
        and b.x < a.x + a.width - _EPS
        and a.y < b.y + b.height - _EPS
        and b.y < a.y + a.height - _EPS
    )


def shape_overlaps(model: BpmnModel) -> int:
    """
    Count pairs of overlapping shapes that share a container.

    Boundary events are skipped since they straddle their activity's border.
    """
    overlaps = 0
    for container in _iter_containers(model):
        shapes: list[GraphicInfo] = []
        for element in container.flow_elements:
            if element.kind is ElementKind.BOUNDARY_EVENT:
                continue
            info = model.get_graphic_info(element.id)
            if info is not None:
                shapes.append(info)
        for i in range(len(shapes)):
            for j in range(i + 1, len(shapes)):
                if _overlap(shapes[i], shapes[j]):
                    overlaps += 1
    return overlaps


def bend_count(model: BpmnModel) -> int:
    """Total number of interior waypoints over all flows."""
    return sum(max(0, len(wps) - 2) for wps in model.flow_location_map.values())


def non_orthogonal_segments(model: BpmnModel) -> int:
    """Number of waypoint segments that are neither horizontal nor vertical."""
    count = 0
    for flow_id in model.flow_location_map:
        for (x1, y1), (x2, y2) in _segments(_points(model, flow_id)):
            if abs(x1 - x2) > _EPS and abs(y1 - y2) > _EPS:
                count += 1
    return count


def total_edge_length(model: BpmnModel) -> float:
    """Sum of all waypoint segment lengths."""
    total = 0.0
    for flow_id in model.flow_location_map:
        for (x1, y1), (x2, y2) in _segments(_points(model, flow_id)):
            total += math.hypot(x2 - x1, y2 - y1)
    return total


def layout_quality_summary(model: BpmnModel) -> dict[str, Any]:
    """
    Compute a summary of layout quality metrics.

    Returns:
        Dictionary with all metrics:
        - edge_crossings: Number of crossing flow pairs
        - shape_overlaps: Number of overlapping sibling shapes
        - bends: Number of interior waypoints
        - non_orthogonal_segments: Number of diagonal segments
        - total_edge_length: Sum of segment lengths
    """
    return {
        "edge_crossings": edge_crossings(model),
        "shape_overlaps": shape_overlaps(model),
        "bends": bend_count(model),
        "non_orthogonal_segments": non_orthogonal_segments(model),
        "total_edge_length": total_edge_length(model),
    }


__all__ = [
    "edge_crossings",
    "shape_overlaps",
    "bend_count",
    "non_orthogonal_segments",
    "total_edge_length",
    "layout_quality_summary",
]
