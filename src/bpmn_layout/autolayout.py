"""
Automatic layout of process models.

``BpmnAutoLayout`` computes diagram interchange (DI) for every process of a
model that has none: a box per element and a waypoint list per sequence
flow. Each container goes through the same pipeline:

1. Build the layout graph (``graph``), laying out sub-processes first
2. Select an edge style per flow (``styles``)
3. Rank, place and route with the hierarchical engine, with the lane
   constraint installed at its ranking hook (``layering``)
4. Optionally move lanes into their own bands and route again
5. Clip boundary-event flows and simplify waypoints (``boundary``,
   ``postprocessing``)
6. Fold sub-process results into parent space (``composition``)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .boundary import clip_boundary_edge, place_on_border
from .composition import ContainerLayout, compose_subprocess
from .graph import LayoutGraph, Vertex, assign_model_flow_ids, build_layout_graph
from .hierarchical import HierarchicalLayout, compute_bounds
from .layering import LaneConstraintLayering
from .model import BpmnModel, ElementKind, FlowElementsContainer, GraphicInfo, Process
from .postprocessing import optimize_edge_points, snap_gateway_start
from .routing import NodeBox, route_styled_edges
from .settings import LayoutSettings, OrientationLike
from .styles import select_edge_style
from .types import Link, Node, Orientation, Point
from .validation import NestingDepthError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Pipeline
# -----------------------------------------------------------------------------


def layout_container(
    container: FlowElementsContainer,
    settings: Optional[LayoutSettings] = None,
    depth: int = 0,
) -> ContainerLayout:
    """
    Lay out one container and everything nested in it.

    Pure: the model is only read (apart from ids assigned to flows that
    have none). Top-level results keep the ``parent_border`` margin;
    nested results are normalised so their drawing starts at (0, 0).

    Args:
        container: Process or sub-process
        settings: Layout configuration
        depth: Nesting depth of ``container`` (0 for a process)

    Returns:
        Shapes and waypoints of the container and all its descendants.

    Raises:
        NestingDepthError: If sub-processes nest deeper than ``max_depth``
        LayoutError: Any other fatal layout failure
    """
    settings = settings or LayoutSettings()
    if depth > settings.max_depth:
        raise NestingDepthError(
            f"Sub-process '{container.id}' is nested deeper than {settings.max_depth} levels",
            element_id=container.id,
        )

    graph = build_layout_graph(
        container,
        settings,
        lambda sub: layout_container(sub, settings, depth + 1),
    )
    _select_styles(graph, settings)

    lane_shapes: dict[str, GraphicInfo] = {}
    if graph.vertices:
        engine = _run_engine(graph, settings)
        for vertex, node in zip(graph.vertices.values(), engine.nodes):
            vertex.rank = node.rank
            vertex.x = node.left
            vertex.y = node.top
        for edge, route in zip(graph.edges, engine.routes):
            edge.raw_points = list(route)

        if settings.lanes_as_groups and graph.lanes:
            lane_shapes = _arrange_lane_groups(graph, settings)
            _reroute(graph, settings)

    result = _emit(graph, settings)
    result.shapes.update(lane_shapes)

    boxes = [(s.x, s.y, s.x + s.width, s.y + s.height) for s in result.shapes.values()]
    lines = [[(p.x, p.y) for p in wps] for wps in result.waypoints.values()]
    min_x, min_y, max_x, max_y = compute_bounds(boxes, lines)

    if depth > 0:
        result = result.translated(-min_x, -min_y)
        result.width = max_x - min_x
        result.height = max_y - min_y
    else:
        result.width = max_x
        result.height = max_y

    logger.debug(
        "container %s: %d vertex(es), %d edge(s), %.1f x %.1f",
        container.id,
        len(graph.vertices),
        len(graph.edges),
        result.width,
        result.height,
    )
    return result


def _lane_numbers(graph: LayoutGraph, settings: LayoutSettings) -> dict[str, int]:
    """1-based lane position per vertex when lanes are drawn; empty otherwise."""
    if not settings.lanes_as_groups:
        return {}
    position = {lane.id: i + 1 for i, lane in enumerate(graph.lanes)}
    return {
        vertex_id: position[lane_id]
        for vertex_id, lane_id in graph.lane_of.items()
        if vertex_id in graph.vertices and lane_id in position
    }


def _select_styles(graph: LayoutGraph, settings: LayoutSettings) -> None:
    lanes = _lane_numbers(graph, settings)
    for edge in graph.edges:
        if edge.boundary_event_id is not None:
            kind = ElementKind.BOUNDARY_EVENT
        else:
            kind = graph.vertices[edge.source].kind
        edge.style = select_edge_style(
            kind,
            lanes.get(edge.source, 0),
            lanes.get(edge.target, 0),
            settings.orientation,
        )


def _edge_stubs(graph: LayoutGraph, settings: LayoutSettings) -> list[float]:
    """
    Boundary-event flows get a first segment of one and a half event sizes.

    Clipping treats every point closer than one event size to the event
    centre as inside, so the first bend must sit clearly beyond that.
    """
    return [
        settings.event_size * 1.5 if edge.boundary_event_id is not None else 0.0
        for edge in graph.edges
    ]


def _run_engine(graph: LayoutGraph, settings: LayoutSettings) -> HierarchicalLayout:
    index = {vertex_id: i for i, vertex_id in enumerate(graph.vertices)}

    nodes = [
        Node(width=v.width, height=v.height, shape=v.shape, id=v.id)
        for v in graph.vertices.values()
    ]
    stubs = _edge_stubs(graph, settings)
    links = [
        Link(index[edge.source], index[edge.target], style=edge.style, stub=stub)
        for edge, stub in zip(graph.edges, stubs)
    ]

    lane_of = {
        index[vertex_id]: lane_id
        for vertex_id, lane_id in graph.lane_of.items()
        if vertex_id in index
    }
    hook = LaneConstraintLayering(lane_of, settings.max_lane_branches) if lane_of else None

    engine = HierarchicalLayout(
        nodes=nodes,
        links=links,
        orientation=settings.orientation,
        intra_cell_spacing=settings.intra_cell_spacing,
        inter_rank_spacing=settings.inter_rank_spacing,
        parent_border=settings.parent_border,
        fine_tuning=settings.fine_tuning,
        edge_separation=settings.edge_separation,
        rank_hook=hook,
    )
    return engine.run()


# -----------------------------------------------------------------------------
# Lane groups
# -----------------------------------------------------------------------------


def _arrange_lane_groups(graph: LayoutGraph, settings: LayoutSettings) -> dict[str, GraphicInfo]:
    """
    Move each lane's vertices into a band of its own across the flow.

    Bands are stacked in lane order, sized to their content plus
    ``parent_border`` and stretched to a common length along the flow.
    Unlaned vertices follow in a trailing band that is not drawn.

    Returns:
        Shape of each lane.
    """
    vertical = settings.orientation.is_vertical
    border = settings.parent_border

    def cross_range(v: Vertex) -> tuple[float, float]:
        return (v.x, v.x + v.width) if vertical else (v.y, v.y + v.height)

    def main_range(v: Vertex) -> tuple[float, float]:
        return (v.y, v.y + v.height) if vertical else (v.x, v.x + v.width)

    groups: list[tuple[Optional[str], list[Vertex]]] = [
        (lane.id, [v for v in graph.vertices.values() if graph.lane_of.get(v.id) == lane.id])
        for lane in graph.lanes
    ]
    unlaned = [v for v in graph.vertices.values() if graph.lane_of.get(v.id) is None]
    if unlaned:
        groups.append((None, unlaned))

    main_lo = min(main_range(v)[0] for v in graph.vertices.values()) - border
    main_hi = max(main_range(v)[1] for v in graph.vertices.values()) + border
    main_shift = settings.parent_border - main_lo

    shapes: dict[str, GraphicInfo] = {}
    offset = settings.parent_border
    for lane_id, members in groups:
        if members:
            lo = min(cross_range(v)[0] for v in members)
            hi = max(cross_range(v)[1] for v in members)
        else:
            lo = hi = 0.0
        extent = hi - lo + 2 * border
        shift = offset + border - lo

        for v in members:
            if vertical:
                v.x += shift
                v.y += main_shift
            else:
                v.x += main_shift
                v.y += shift

        if lane_id is not None:
            length = main_hi - main_lo
            if vertical:
                shapes[lane_id] = GraphicInfo(
                    offset, settings.parent_border, extent, length, element_id=lane_id
                )
            else:
                shapes[lane_id] = GraphicInfo(
                    settings.parent_border, offset, length, extent, element_id=lane_id
                )
        offset += extent

    logger.debug("arranged %d lane group(s)", len(shapes))
    return shapes


def _reroute(graph: LayoutGraph, settings: LayoutSettings) -> None:
    """Route every edge again over the current vertex positions."""
    index = {vertex_id: i for i, vertex_id in enumerate(graph.vertices)}
    boxes = [
        NodeBox(
            index=i,
            x=v.x + v.width / 2,
            y=v.y + v.height / 2,
            width=v.width,
            height=v.height,
            shape=v.shape,
        )
        for i, v in enumerate(graph.vertices.values())
    ]
    routed = route_styled_edges(
        boxes,
        [(index[e.source], index[e.target]) for e in graph.edges],
        styles=[e.style for e in graph.edges],
        orientation=settings.orientation,
        edge_separation=settings.edge_separation,
        stubs=_edge_stubs(graph, settings),
    )
    for edge, route in zip(graph.edges, routed):
        edge.raw_points = route.points


# -----------------------------------------------------------------------------
# DI
# -----------------------------------------------------------------------------


def _emit(graph: LayoutGraph, settings: LayoutSettings) -> ContainerLayout:
    """Turn positioned vertices and routed edges into DI records."""
    result = ContainerLayout()

    for vertex in graph.vertices.values():
        info = GraphicInfo(
            x=vertex.x,
            y=vertex.y,
            width=vertex.width,
            height=vertex.height,
            element_id=vertex.id,
        )
        if vertex.kind is ElementKind.SUB_PROCESS:
            info.expanded = True
            if vertex.child_layout is not None:
                result.merge(
                    compose_subprocess(
                        vertex.child_layout, vertex.x, vertex.y, settings.subprocess_margin
                    )
                )
        result.shapes[vertex.id] = info

    for edge in graph.edges:
        points: list[Point] = list(edge.raw_points)

        if edge.boundary_event_id is not None:
            shape, points = clip_boundary_edge(points, settings.event_size, edge.boundary_event_id)
            result.shapes.setdefault(edge.boundary_event_id, shape)
        else:
            source = graph.vertices[edge.source]
            if source.kind is ElementKind.GATEWAY and graph.out_degree(edge.source) > 1:
                points = snap_gateway_start(points, result.shapes[source.id], settings.orientation)

        edge.points = optimize_edge_points(points)
        result.waypoints[edge.id] = [GraphicInfo(x, y, element_id=edge.id) for x, y in edge.points]

    # Boundary events without outgoing flows sit on the bottom border
    pending: dict[str, list[str]] = {}
    for event_id, event in graph.boundary_events.items():
        if event_id not in result.shapes:
            pending.setdefault(event.attached_to_ref or "", []).append(event_id)
    for activity_id, event_ids in pending.items():
        for i, event_id in enumerate(event_ids):
            result.shapes[event_id] = place_on_border(
                result.shapes[activity_id], i, len(event_ids), settings.event_size, event_id
            )

    return result


# -----------------------------------------------------------------------------
# Facade
# -----------------------------------------------------------------------------


class BpmnAutoLayout:
    """
    Generates diagram interchange for every process of a model.

    Example:
        model = BpmnModel(processes=[process])
        BpmnAutoLayout(model, orientation="left-to-right").execute()
        model.get_graphic_info("task1")
    """

    def __init__(
        self,
        model: BpmnModel,
        settings: Optional[LayoutSettings] = None,
        **options: Any,
    ) -> None:
        """
        Args:
            model: Model to lay out; its DI store is replaced by ``execute``
            settings: Base configuration
            **options: Individual ``LayoutSettings`` fields overriding
                ``settings``
        """
        self._model = model
        base = settings or LayoutSettings()
        self._settings = base.with_options(**options) if options else base

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def model(self) -> BpmnModel:
        """Get the model being laid out."""
        return self._model

    @property
    def settings(self) -> LayoutSettings:
        """Get the layout configuration."""
        return self._settings

    @settings.setter
    def settings(self, value: LayoutSettings) -> None:
        self._settings = value

    @property
    def orientation(self) -> Orientation:
        """Get the flow direction."""
        return self._settings.orientation

    @orientation.setter
    def orientation(self, value: OrientationLike) -> None:
        self._settings = self._settings.with_options(orientation=Orientation(value))

    @property
    def lanes_as_groups(self) -> bool:
        """Whether lanes are drawn as bands."""
        return self._settings.lanes_as_groups

    @lanes_as_groups.setter
    def lanes_as_groups(self, value: bool) -> None:
        self._settings = self._settings.with_options(lanes_as_groups=bool(value))

    @property
    def task_width(self) -> float:
        return self._settings.task_width

    @task_width.setter
    def task_width(self, value: float) -> None:
        self._settings = self._settings.with_options(task_width=float(value))

    @property
    def task_height(self) -> float:
        return self._settings.task_height

    @task_height.setter
    def task_height(self, value: float) -> None:
        self._settings = self._settings.with_options(task_height=float(value))

    @property
    def event_size(self) -> float:
        return self._settings.event_size

    @event_size.setter
    def event_size(self, value: float) -> None:
        self._settings = self._settings.with_options(event_size=float(value))

    @property
    def gateway_size(self) -> float:
        return self._settings.gateway_size

    @gateway_size.setter
    def gateway_size(self, value: float) -> None:
        self._settings = self._settings.with_options(gateway_size=float(value))

    @property
    def subprocess_margin(self) -> float:
        return self._settings.subprocess_margin

    @subprocess_margin.setter
    def subprocess_margin(self, value: float) -> None:
        self._settings = self._settings.with_options(subprocess_margin=float(value))

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def execute(self) -> BpmnModel:
        """
        Replace the model's DI with a fresh layout of every process.

        Processes are laid out one after the other; each one's DI is
        written only once its whole layout succeeded.

        Returns:
            The model (for chaining)
        """
        self._model.clear_di()
        assigned = assign_model_flow_ids(self._model)
        if assigned:
            logger.debug("assigned ids to %d sequence flow(s)", assigned)

        for process in self._model.processes:
            self.layout(process)
        return self._model

    def layout(self, process: Process) -> ContainerLayout:
        """Lay out a single process and write its DI into the model."""
        result = layout_container(process, self._settings)
        for element_id, info in result.shapes.items():
            self._model.add_graphic_info(element_id, info)
        for flow_id, waypoints in result.waypoints.items():
            self._model.add_flow_graphic_info_list(flow_id, waypoints)
        logger.debug("process %s laid out", process.id)
        return result


__all__ = [
    "BpmnAutoLayout",
    "layout_container",
]
