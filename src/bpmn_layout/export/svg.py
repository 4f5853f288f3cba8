"""
SVG export for laid-out process models.

Renders the diagram interchange of a model: lanes as bands, events as
circles, gateways as diamonds, activities as rounded boxes and sequence
flows as polylines with arrow heads.
"""

from __future__ import annotations

from typing import Optional
from xml.sax.saxutils import escape

from ..graph import wrap_label
from ..hierarchical import compute_bounds
from ..model import BpmnModel, ElementKind, FlowElement, GraphicInfo, Lane


def to_svg(
    model: BpmnModel,
    *,
    node_color: str = "#ffffff",
    node_stroke: str = "#333333",
    node_stroke_width: float = 1.5,
    lane_color: str = "#f4f6f8",
    edge_color: str = "#555555",
    edge_width: float = 1.5,
    show_labels: bool = True,
    label_color: str = "#000000",
    font_size: float = 11.0,
    font_family: str = "sans-serif",
    padding: float = 20.0,
    background: Optional[str] = None,
    label_wrap_width: int = 22,
) -> str:
    """
    Export a laid-out model to SVG format.

    Elements without DI are skipped, so a model that has not been laid out
    renders as an empty drawing.

    Args:
        model: Model whose DI store has been filled
        node_color: Fill color for shapes
        node_stroke: Stroke color for shapes
        node_stroke_width: Stroke width for shapes
        lane_color: Fill color for lane bands
        edge_color: Color for sequence flows
        edge_width: Width for sequence flows
        show_labels: Whether to draw activity names
        label_color: Color for labels
        font_size: Font size for labels
        font_family: Font family for labels
        padding: Padding around the drawing
        background: Background color (None for transparent)
        label_wrap_width: Characters per label line

    Returns:
        SVG string representation of the model
    """
    elements = [e for e in model.iter_flow_elements() if model.get_graphic_info(e.id)]
    lanes = [
        lane
        for process in model.processes
        for lane in process.lanes
        if model.get_graphic_info(lane.id)
    ]
    flows = [f for f in model.iter_sequence_flows() if f.id and model.get_flow_graphic_info(f.id)]

    boxes = []
    for key in [e.id for e in elements] + [lane.id for lane in lanes]:
        info = model.location_map[key]
        boxes.append((info.x, info.y, info.x + info.width, info.y + info.height))
    polylines = [[(p.x, p.y) for p in model.get_flow_graphic_info(f.id or "")] for f in flows]

    if not boxes and not polylines:
        return _empty_svg(100, 100, background)

    min_x, min_y, max_x, max_y = compute_bounds(boxes, polylines)
    width = max_x - min_x + 2 * padding
    height = max_y - min_y + 2 * padding
    offset_x = padding - min_x
    offset_y = padding - min_y

    svg_parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{width:.1f}" height="{height:.1f}" '
        f'viewBox="0 0 {width:.1f} {height:.1f}">',
        "  <defs>",
        f'    <marker id="arrow" viewBox="0 0 10 10" refX="10" refY="5" '
        f'markerWidth="8" markerHeight="8" orient="auto-start-reverse">'
        f'<path d="M 0 0 L 10 5 L 0 10 z" fill="{escape(edge_color)}"/></marker>',
        "  </defs>",
    ]

    if background:
        svg_parts.append(f'  <rect width="100%" height="100%" fill="{escape(background)}"/>')

    svg_parts.append('  <g class="lanes">')
    for lane in lanes:
        svg_parts.append(
            _render_lane(
                lane, model.location_map[lane.id], offset_x, offset_y, lane_color, node_stroke
            )
        )
    svg_parts.append("  </g>")

    # Sub-processes first so their content is drawn on top
    ordered = sorted(elements, key=lambda e: e.kind is not ElementKind.SUB_PROCESS)
    svg_parts.append('  <g class="shapes">')
    for element in ordered:
        svg_parts.append(
            _render_shape(
                element,
                model.location_map[element.id],
                offset_x,
                offset_y,
                node_color,
                node_stroke,
                node_stroke_width,
            )
        )
    svg_parts.append("  </g>")

    svg_parts.append('  <g class="flows">')
    for points in polylines:
        path_data = " ".join(f"{x + offset_x:.1f},{y + offset_y:.1f}" for x, y in points)
        svg_parts.append(
            f'    <polyline points="{path_data}" fill="none" '
            f'stroke="{escape(edge_color)}" stroke-width="{edge_width}" '
            f'marker-end="url(#arrow)"/>'
        )
    svg_parts.append("  </g>")

    if show_labels:
        svg_parts.append('  <g class="labels">')
        for element in elements:
            if element.kind in (ElementKind.TASK, ElementKind.CALL_ACTIVITY) and element.name:
                svg_parts.append(
                    _render_label(
                        wrap_label(element.name, label_wrap_width),
                        model.location_map[element.id],
                        offset_x,
                        offset_y,
                        label_color,
                        font_size,
                        font_family,
                    )
                )
        svg_parts.append("  </g>")

    svg_parts.append("</svg>")

    return "\n".join(svg_parts)


def _empty_svg(width: float, height: float, background: Optional[str]) -> str:
    """Create an empty SVG."""
    bg = ""
    if background:
        bg = f'\n  <rect width="100%" height="100%" fill="{escape(background)}"/>'
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{width:.1f}" height="{height:.1f}" '
        f'viewBox="0 0 {width:.1f} {height:.1f}">{bg}\n</svg>'
    )


def _render_lane(
    lane: Lane,
    info: GraphicInfo,
    offset_x: float,
    offset_y: float,
    fill: str,
    stroke: str,
) -> str:
    return (
        f'    <rect id="{escape(lane.id)}" x="{info.x + offset_x:.1f}" y="{info.y + offset_y:.1f}" '
        f'width="{info.width:.1f}" height="{info.height:.1f}" '
        f'fill="{escape(fill)}" stroke="{escape(stroke)}" stroke-width="0.5"/>'
    )


def _render_shape(
    element: FlowElement,
    info: GraphicInfo,
    offset_x: float,
    offset_y: float,
    fill: str,
    stroke: str,
    stroke_width: float,
) -> str:
    """Render one element according to its kind."""
    x = info.x + offset_x
    y = info.y + offset_y
    cx = x + info.width / 2
    cy = y + info.height / 2
    ident = escape(element.id)
    paint = f'fill="{escape(fill)}" stroke="{escape(stroke)}"'

    kind = element.kind
    if kind in (
        ElementKind.START_EVENT,
        ElementKind.INTERMEDIATE_EVENT,
        ElementKind.END_EVENT,
        ElementKind.BOUNDARY_EVENT,
    ):
        r = min(info.width, info.height) / 2
        width = stroke_width * 2 if kind is ElementKind.END_EVENT else stroke_width
        dash = ' stroke-dasharray="3,2"' if kind is ElementKind.BOUNDARY_EVENT else ""
        return (
            f'    <circle id="{ident}" cx="{cx:.1f}" cy="{cy:.1f}" r="{r:.1f}" '
            f'{paint} stroke-width="{width}"{dash}/>'
        )
    if kind is ElementKind.GATEWAY:
        points = (
            f"{cx:.1f},{y:.1f} {x + info.width:.1f},{cy:.1f} "
            f"{cx:.1f},{y + info.height:.1f} {x:.1f},{cy:.1f}"
        )
        return (
            f'    <polygon id="{ident}" points="{points}" '
            f'{paint} stroke-width="{stroke_width}"/>'
        )

    # Activities
    width = stroke_width * 2 if kind is ElementKind.CALL_ACTIVITY else stroke_width
    if kind is ElementKind.SUB_PROCESS:
        paint = f'fill="none" stroke="{escape(stroke)}"'
    return (
        f'    <rect id="{ident}" x="{x:.1f}" y="{y:.1f}" '
        f'width="{info.width:.1f}" height="{info.height:.1f}" '
        f'{paint} stroke-width="{width}" rx="8"/>'
    )


def _render_label(
    lines: list[str],
    info: GraphicInfo,
    offset_x: float,
    offset_y: float,
    color: str,
    font_size: float,
    font_family: str,
) -> str:
    """Render a multi-line label centred in its shape."""
    cx = info.x + offset_x + info.width / 2
    cy = info.y + offset_y + info.height / 2
    line_height = font_size * 1.3
    top = cy - line_height * (len(lines) - 1) / 2

    spans = "".join(
        f'<tspan x="{cx:.1f}" y="{top + i * line_height:.1f}">{escape(line)}</tspan>'
        for i, line in enumerate(lines)
    )
    return (
        f'    <text fill="{escape(color)}" font-size="{font_size}" '
        f'font-family="{escape(font_family)}" '
        f'text-anchor="middle" dominant-baseline="central">{spans}</text>'
    )


__all__ = ["to_svg"]
