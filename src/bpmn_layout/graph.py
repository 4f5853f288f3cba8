"""
Layout graph construction.

Translates the elements of one container into sized layout vertices and
raw edges. Elements are handled in container order:

- events, gateways and activities become vertices sized by kind
- sub-processes are laid out first and become vertices sized to fit
- boundary events are collected and resolved against their activity once
  every vertex exists
- sequence flows are collected and turned into edges last, so both ends
  are known
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from typing_extensions import assert_never

from .composition import ContainerLayout, subprocess_vertex_size
from .model import (
    BpmnModel,
    ElementKind,
    FlowElement,
    FlowElementsContainer,
    Lane,
    SequenceFlow,
    SubProcess,
    container_lanes,
)
from .routing import EdgeStyle
from .settings import LayoutSettings
from .types import Point
from .validation import DanglingFlowError, UnresolvedAttachmentError

LINE_HEIGHT = 16.0
LABEL_PADDING = 20.0
MULTILINE_LABEL_PADDING = 10.0


@dataclass
class Vertex:
    """
    A sized node of the layout graph.

    ``x``/``y`` are the top-left corner once the layout has run.
    """

    id: str
    kind: ElementKind
    width: float
    height: float
    shape: str = "rectangle"
    label: list[str] = field(default_factory=list)
    lane_id: Optional[str] = None
    child_layout: Optional[ContainerLayout] = None
    rank: Optional[int] = None
    x: float = 0.0
    y: float = 0.0

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass
class Edge:
    """
    A routed connection between two vertices.

    ``source`` is the attached activity when the sequence flow starts at a
    boundary event; ``boundary_event_id`` then names that event.
    """

    id: str
    source: str
    target: str
    boundary_event_id: Optional[str] = None
    style: Optional[EdgeStyle] = None
    raw_points: list[Point] = field(default_factory=list)
    points: list[Point] = field(default_factory=list)


@dataclass
class LayoutGraph:
    """Vertices and edges of one container plus the lookup tables used to build them."""

    vertices: dict[str, Vertex] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
    sequence_flows: dict[str, SequenceFlow] = field(default_factory=dict)
    boundary_events: dict[str, FlowElement] = field(default_factory=dict)
    handled_elements: dict[str, FlowElement] = field(default_factory=dict)
    lane_of: dict[str, str] = field(default_factory=dict)
    lanes: list[Lane] = field(default_factory=list)

    def out_degree(self, vertex_id: str) -> int:
        """Number of edges leaving ``vertex_id``."""
        return sum(1 for edge in self.edges if edge.source == vertex_id)


# -----------------------------------------------------------------------------
# Sizing
# -----------------------------------------------------------------------------


def wrap_label(name: Optional[str], width: int = 22) -> list[str]:
    """Wrap a label at ``width`` characters, breaking words that do not fit."""
    if not name:
        return []
    return textwrap.wrap(name, width=width, break_long_words=True)


def task_size(lines: list[str], settings: LayoutSettings) -> tuple[float, float]:
    """
    Box size for an activity label.

    The width is always the configured task width; labels are wrapped to
    it and only the height grows. Labels on several lines get a tighter
    vertical padding. The box never shrinks below the configured size.
    """
    pad_y = MULTILINE_LABEL_PADDING if len(lines) > 1 else LABEL_PADDING
    height = max(settings.task_height, len(lines) * LINE_HEIGHT + 2 * pad_y)
    return settings.task_width, height


def create_vertex(
    element: FlowElement,
    settings: LayoutSettings,
    child_layout: Optional[ContainerLayout] = None,
) -> Optional[Vertex]:
    """
    Size a vertex for ``element``.

    Returns None for boundary events, which are drawn on their activity
    rather than as vertices of their own.
    """
    kind = element.kind
    if (
        kind is ElementKind.START_EVENT
        or kind is ElementKind.INTERMEDIATE_EVENT
        or kind is ElementKind.END_EVENT
    ):
        size = settings.event_size
        return Vertex(element.id, kind, size, size, shape="ellipse")
    elif kind is ElementKind.GATEWAY:
        size = settings.gateway_size
        return Vertex(element.id, kind, size, size, shape="rhombus")
    elif kind is ElementKind.TASK or kind is ElementKind.CALL_ACTIVITY:
        lines = wrap_label(element.name, settings.label_wrap_width)
        width, height = task_size(lines, settings)
        return Vertex(element.id, kind, width, height, label=lines)
    elif kind is ElementKind.SUB_PROCESS:
        child = child_layout or ContainerLayout()
        width, height = subprocess_vertex_size(child, settings.subprocess_margin)
        return Vertex(element.id, kind, width, height, child_layout=child)
    elif kind is ElementKind.BOUNDARY_EVENT:
        return None
    else:
        assert_never(kind)


# -----------------------------------------------------------------------------
# Sequence flow ids
# -----------------------------------------------------------------------------


def _next_flow_id(taken: set[str], counter: list[int]) -> str:
    n = counter[0]
    while f"sequenceFlow-{n}" in taken:
        n += 1
    counter[0] = n + 1
    flow_id = f"sequenceFlow-{n}"
    taken.add(flow_id)
    return flow_id


def assign_flow_ids(flows: Iterable[SequenceFlow], taken: Iterable[str] = ()) -> int:
    """
    Give every sequence flow without an id the next free ``sequenceFlow-<n>``.

    Numbering starts at 1 and skips ids already in ``taken`` or on other
    flows, so repeated runs produce the same ids.

    Returns:
        Number of ids assigned.
    """
    flows = list(flows)
    used = set(taken)
    used.update(flow.id for flow in flows if flow.id)
    counter = [1]
    assigned = 0
    for flow in flows:
        if not flow.id:
            flow.id = _next_flow_id(used, counter)
            assigned += 1
    return assigned


def assign_model_flow_ids(model: BpmnModel) -> int:
    """Assign flow ids across the whole model so they are unique model-wide."""
    taken = {element.id for element in model.iter_flow_elements()}
    return assign_flow_ids(model.iter_sequence_flows(), taken)


# -----------------------------------------------------------------------------
# Building
# -----------------------------------------------------------------------------


def build_layout_graph(
    container: FlowElementsContainer,
    settings: LayoutSettings,
    layout_subprocess: Callable[[SubProcess], ContainerLayout],
    lanes: Iterable[Lane] = (),
) -> LayoutGraph:
    """
    Build the layout graph of one container.

    Args:
        container: Process or sub-process to translate
        settings: Sizes used for each element kind
        layout_subprocess: Lays out a nested sub-process and returns its
            result, normalised to its own origin
        lanes: Lanes partitioning the container; defaults to the
            container's own lanes

    Returns:
        A fresh LayoutGraph.

    Raises:
        UnresolvedAttachmentError: If a boundary event's activity is not a
            vertex of this container
        DanglingFlowError: If a sequence flow end does not resolve
    """
    graph = LayoutGraph()
    graph.lanes = list(lanes) or container_lanes(container)

    for lane in graph.lanes:
        for ref in lane.flow_references:
            graph.lane_of.setdefault(ref, lane.id)

    deferred_boundary: list[FlowElement] = []
    for element in container.flow_elements:
        if element.kind is ElementKind.BOUNDARY_EVENT:
            deferred_boundary.append(element)
        else:
            child = None
            if isinstance(element, SubProcess):
                child = layout_subprocess(element)
            vertex = create_vertex(element, settings, child)
            if vertex is not None:
                vertex.lane_id = graph.lane_of.get(element.id)
                graph.vertices[element.id] = vertex
        graph.handled_elements[element.id] = element

    for event in deferred_boundary:
        attached = event.attached_to_ref
        if attached is None or attached not in graph.vertices:
            raise UnresolvedAttachmentError(
                f"Boundary event '{event.id}' has no attached activity"
                + (f" ('{attached}' not found)" if attached else ""),
                element_id=event.id,
            )
        graph.boundary_events[event.id] = event

    taken = set(graph.handled_elements)
    assign_flow_ids(container.sequence_flows, taken)

    for flow in container.sequence_flows:
        flow_id = flow.id or ""
        graph.sequence_flows[flow_id] = flow

        source = graph.handled_elements.get(flow.source_ref)
        if source is None:
            raise DanglingFlowError(flow_id, flow.source_ref)
        if flow.target_ref not in graph.vertices:
            raise DanglingFlowError(flow_id, flow.target_ref)

        if source.kind is ElementKind.BOUNDARY_EVENT:
            graph.edges.append(
                Edge(
                    id=flow_id,
                    source=source.attached_to_ref or "",
                    target=flow.target_ref,
                    boundary_event_id=source.id,
                )
            )
        else:
            if flow.source_ref not in graph.vertices:
                raise DanglingFlowError(flow_id, flow.source_ref)
            graph.edges.append(Edge(id=flow_id, source=flow.source_ref, target=flow.target_ref))

    return graph


__all__ = [
    "Vertex",
    "Edge",
    "LayoutGraph",
    "wrap_label",
    "task_size",
    "create_vertex",
    "assign_flow_ids",
    "assign_model_flow_ids",
    "build_layout_graph",
]
