"""
bpmn-layout: Automatic layout of BPMN process models.

This package computes diagram interchange (shape bounds and sequence flow
waypoints) for process models that have none.

Building blocks:
- graph: Turns a process or sub-process into a sized layout graph
- layering: Lane-aware rank assignment
- styles: Per-edge routing style selection
- boundary: Clipping of boundary-event flows against their event circle
- composition: Recursive placement of sub-process content
- postprocessing: Waypoint cleanup and gateway exit snapping
- hierarchical: Layered layout engine for sized nodes
- routing: Orthogonal edge routing
"""

__version__ = "0.1.0"

# Entry points
from .autolayout import BpmnAutoLayout, layout_container

# Base classes for building layouts
from .base import BaseLayout, StaticLayout

# Boundary events
from .boundary import (
    circle_line_intersections,
    clip_boundary_edge,
    event_box,
    is_on_segment,
    place_on_border,
)

# Sub-process composition
from .composition import ContainerLayout, compose_subprocess, subprocess_vertex_size

# Graph building
from .graph import (
    Edge,
    LayoutGraph,
    Vertex,
    assign_flow_ids,
    assign_model_flow_ids,
    build_layout_graph,
    create_vertex,
    task_size,
    wrap_label,
)

# Layout engine
from .hierarchical import HierarchicalLayout

# Lane-aware layering
from .layering import (
    LaneConstraintLayering,
    LaneSearchBudgetWarning,
    lane_changes,
    resolve_lane_ranks,
)

# Metrics for layout quality evaluation
from .metrics import (
    bend_count,
    edge_crossings,
    layout_quality_summary,
    non_orthogonal_segments,
    shape_overlaps,
    total_edge_length,
)

# Process model
from .model import (
    BpmnModel,
    ElementKind,
    FlowElement,
    GraphicInfo,
    Lane,
    Process,
    SequenceFlow,
    SubProcess,
)

# Post-processing
from .postprocessing import box_midpoints, optimize_edge_points, snap_gateway_start

# Routing styles
from .routing import Anchor, EdgeStyle, RoutingStyle, Side
from .settings import LayoutSettings
from .styles import select_edge_style
from .types import Event, EventType, Link, LinkLike, Node, NodeLike, Orientation, Point

# Validation and errors
from .validation import (
    BoundaryIntersectionError,
    DanglingFlowError,
    InvalidLinkError,
    InvalidModelError,
    LaneConflictError,
    LayoutError,
    NestingDepthError,
    UnresolvedAttachmentError,
    ValidationError,
    validate_model,
)

__all__ = [
    # Version
    "__version__",
    # Entry points
    "BpmnAutoLayout",
    "layout_container",
    "LayoutSettings",
    "Orientation",
    # Process model
    "BpmnModel",
    "ElementKind",
    "FlowElement",
    "GraphicInfo",
    "Lane",
    "Process",
    "SequenceFlow",
    "SubProcess",
    # Shared types
    "Point",
    "Node",
    "Link",
    "NodeLike",
    "LinkLike",
    "EventType",
    "Event",
    # Base classes
    "BaseLayout",
    "StaticLayout",
    "HierarchicalLayout",
    # Graph building
    "Vertex",
    "Edge",
    "LayoutGraph",
    "wrap_label",
    "task_size",
    "create_vertex",
    "assign_flow_ids",
    "assign_model_flow_ids",
    "build_layout_graph",
    # Layering
    "LaneConstraintLayering",
    "LaneSearchBudgetWarning",
    "lane_changes",
    "resolve_lane_ranks",
    # Styles
    "Anchor",
    "EdgeStyle",
    "RoutingStyle",
    "Side",
    "select_edge_style",
    # Boundary events
    "circle_line_intersections",
    "is_on_segment",
    "event_box",
    "clip_boundary_edge",
    "place_on_border",
    # Composition
    "ContainerLayout",
    "subprocess_vertex_size",
    "compose_subprocess",
    # Post-processing
    "optimize_edge_points",
    "box_midpoints",
    "snap_gateway_start",
    # Metrics
    "edge_crossings",
    "shape_overlaps",
    "bend_count",
    "non_orthogonal_segments",
    "total_edge_length",
    "layout_quality_summary",
    # Errors
    "LayoutError",
    "UnresolvedAttachmentError",
    "LaneConflictError",
    "BoundaryIntersectionError",
    "DanglingFlowError",
    "NestingDepthError",
    "ValidationError",
    "InvalidLinkError",
    "InvalidModelError",
    "validate_model",
]
