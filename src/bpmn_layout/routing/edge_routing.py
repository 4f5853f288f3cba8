"""Style-driven orthogonal edge routing.

Provides edge routing over already placed boxes with:
- Port sides from the edge style anchors, else from the rank direction
- Even port distribution along rectangle sides
- Self-loop routing around a node corner
- Minimum first-segment length (stubs)
- Obstacle-aware detouring for orthogonal edges
- Parallel edge separation

Shared by the hierarchical engine and the lane-group layout.
"""

from __future__ import annotations

from collections import defaultdict, deque
from typing import Optional, Sequence

from ..types import Orientation, Point
from .types import EdgeStyle, NodeBox, Port, RoutedEdge, RoutingStyle, Side

_EPS = 1e-6


# -----------------------------------------------------------------------------
# Port sides
# -----------------------------------------------------------------------------


def determine_port_sides(
    src_box: NodeBox,
    tgt_box: NodeBox,
    orientation: Orientation = Orientation.TOP_DOWN,
) -> tuple[Side, Side]:
    """Determine port sides from where the target sits along the flow.

    Forward edges leave through the downstream side and enter through the
    upstream side. Backward edges leave and enter on the same side so they
    loop around the drawing instead of cutting through it. Edges inside one
    rank band connect the facing sides.
    """
    if orientation.is_vertical:
        if tgt_box.top >= src_box.bottom - _EPS:
            return (Side.SOUTH, Side.NORTH)
        if tgt_box.bottom <= src_box.top + _EPS:
            return (Side.EAST, Side.EAST)
        if tgt_box.x >= src_box.x:
            return (Side.EAST, Side.WEST)
        return (Side.WEST, Side.EAST)

    if tgt_box.left >= src_box.right - _EPS:
        return (Side.EAST, Side.WEST)
    if tgt_box.right <= src_box.left + _EPS:
        return (Side.SOUTH, Side.SOUTH)
    if tgt_box.y >= src_box.y:
        return (Side.SOUTH, Side.NORTH)
    return (Side.NORTH, Side.SOUTH)


def resolve_port_sides(
    src_box: NodeBox,
    tgt_box: NodeBox,
    style: Optional[EdgeStyle],
    orientation: Orientation = Orientation.TOP_DOWN,
) -> tuple[tuple[Side, Optional[float]], tuple[Side, Optional[float]]]:
    """Apply the style anchors on top of the geometric default.

    Returns:
        ((src_side, src_position), (tgt_side, tgt_position)) where a None
        position leaves the port to be distributed along its side.
    """
    default_src, default_tgt = determine_port_sides(src_box, tgt_box, orientation)
    src: tuple[Side, Optional[float]] = (default_src, None)
    tgt: tuple[Side, Optional[float]] = (default_tgt, None)

    if style is not None:
        if style.exit is not None:
            src = style.exit.side() or src
        if style.entry is not None:
            tgt = style.entry.side() or tgt

    return src, tgt


def assign_ports(
    boxes: dict[int, NodeBox],
    edges: Sequence[tuple[int, int]],
    edge_sides: Sequence[tuple[Side, Side]],
    fixed: Optional[dict[tuple[int, bool], float]] = None,
) -> list[tuple[Port, Port]]:
    """Pick a port on each endpoint box for every edge.

    For each rectangle, distributes ports evenly along each side. Other
    shapes keep every port at the side midpoint. Positions in ``fixed``
    (keyed by (edge_index, is_source)) win over both.

    Args:
        boxes: Node boxes by node index.
        edges: Edge list as (source, target) pairs.
        edge_sides: Sides for each edge as (src_side, tgt_side).
        fixed: Pinned positions along the side.

    Returns:
        List of (source_port, target_port) for each edge.
    """
    fixed = fixed or {}

    # node_side_edges[node][side] -> list of (edge_idx, is_source)
    node_side_edges: dict[int, dict[Side, list[tuple[int, bool]]]] = defaultdict(
        lambda: defaultdict(list)
    )

    for ei, ((src, tgt), (src_side, tgt_side)) in enumerate(zip(edges, edge_sides)):
        if (ei, True) not in fixed:
            node_side_edges[src][src_side].append((ei, True))
        if (ei, False) not in fixed:
            node_side_edges[tgt][tgt_side].append((ei, False))

    # k ports on one side sit at (i+1)/(k+1)
    port_offsets: dict[tuple[int, bool], float] = {}
    for node, sides in node_side_edges.items():
        box = boxes[node]
        for entries in sides.values():
            k = len(entries)
            for i, key in enumerate(entries):
                if box.shape == "rectangle":
                    port_offsets[key] = (i + 1) / (k + 1)
                else:
                    port_offsets[key] = 0.5

    result: list[tuple[Port, Port]] = []
    for ei, ((src, tgt), (src_side, tgt_side)) in enumerate(zip(edges, edge_sides)):
        src_offset = fixed.get((ei, True), port_offsets.get((ei, True), 0.5))
        tgt_offset = fixed.get((ei, False), port_offsets.get((ei, False), 0.5))
        result.append(
            (
                Port(node=src, side=src_side, position=src_offset, edge=ei),
                Port(node=tgt, side=tgt_side, position=tgt_offset, edge=ei),
            )
        )

    return result


# -----------------------------------------------------------------------------
# Single edge routes
# -----------------------------------------------------------------------------


def route_self_loop(
    box: NodeBox,
    port_out: Port,
    port_in: Port,
    edge_separation: float,
) -> list[Point]:
    """Route a self-loop edge around the corner between its two sides.

    Args:
        box: The node box.
        port_out: Outgoing port.
        port_in: Incoming port.
        edge_separation: Gap for the loop offset.

    Returns:
        Bend coordinates, all outside the box.
    """
    out_pos = box.get_port_position(port_out.side, port_out.position)
    in_pos = box.get_port_position(port_in.side, port_in.position)

    d_out = port_out.side.outward(edge_separation)
    d_in = port_in.side.outward(edge_separation)

    bend1 = (out_pos[0] + d_out[0], out_pos[1] + d_out[1])
    corner = (out_pos[0] + d_out[0] + d_in[0], out_pos[1] + d_out[1] + d_in[1])
    bend2 = (in_pos[0] + d_in[0], in_pos[1] + d_in[1])

    return _ensure_orthogonal(out_pos, in_pos, [bend1, corner, bend2])


def _ensure_orthogonal(
    src: Point,
    tgt: Point,
    bends: list[Point],
) -> list[Point]:
    """Make a polyline axis-aligned and drop redundant points.

    1. Diagonal segments get an L bend, vertical leg first.
    2. Repeated points are dropped.
    3. Points in the middle of a straight run are dropped. A point where
       the run turns back on itself is a corner and stays.
    """
    # Diagonals become L bends
    points = [src] + bends + [tgt]
    fixed: list[Point] = []

    for i in range(len(points) - 1):
        x1, y1 = points[i]
        x2, y2 = points[i + 1]
        if i > 0:
            fixed.append((x1, y1))
        if abs(x1 - x2) > _EPS and abs(y1 - y2) > _EPS:
            # vertical leg first
            fixed.append((x1, y2))

    # Zero-length segments
    deduped: list[Point] = []
    for pt in fixed:
        if deduped and _same_point(pt, deduped[-1]):
            continue
        deduped.append(pt)

    while deduped and _same_point(deduped[0], src):
        deduped.pop(0)
    while deduped and _same_point(deduped[-1], tgt):
        deduped.pop()

    # Collinear middle points
    full = [src] + deduped + [tgt]
    simplified: list[Point] = []
    for i in range(1, len(full) - 1):
        px, py = full[i - 1]
        cx, cy = full[i]
        nx, ny = full[i + 1]
        if abs(py - cy) < _EPS and abs(cy - ny) < _EPS and _between(px, cx, nx):
            continue
        if abs(px - cx) < _EPS and abs(cx - nx) < _EPS and _between(py, cy, ny):
            continue
        simplified.append((cx, cy))

    return simplified


def route_edge(
    src_pos: Point,
    tgt_pos: Point,
    src_side: Side,
    tgt_side: Side,
    obstacles: Sequence[NodeBox] = (),
    edge_separation: float = 15.0,
    stub: float = 0.0,
) -> list[Point]:
    """Route a single edge between two ports.

    Uses the side-pair bend logic, then checks for segment-node overlaps and
    adds detour bends if needed. With a stub, the route first leaves the
    source port straight through its side for ``stub`` units.

    Args:
        src_pos: Source port position.
        tgt_pos: Target port position.
        src_side: Side the edge leaves through.
        tgt_side: Side the edge enters through.
        obstacles: Boxes to route around (empty for no detouring).
        edge_separation: Gap for detour offsets.
        stub: Minimum length of the first segment.

    Returns:
        List of bend coordinates.
    """
    start = src_pos
    lead: list[Point] = []
    if stub > 0:
        dx, dy = src_side.outward(stub)
        start = (src_pos[0] + dx, src_pos[1] + dy)
        lead = [start]

    sx, sy = start
    tx, ty = tgt_pos

    bends: list[Point] = []

    if src_side.is_horizontal() and tgt_side.is_horizontal() and src_side != tgt_side:
        if abs(sx - tx) >= _EPS:
            mid_y = (sy + ty) / 2
            bends = [(sx, mid_y), (tx, mid_y)]

    elif not src_side.is_horizontal() and not tgt_side.is_horizontal() and src_side != tgt_side:
        if abs(sy - ty) >= _EPS:
            mid_x = (sx + tx) / 2
            bends = [(mid_x, sy), (mid_x, ty)]

    elif src_side.is_horizontal() and not tgt_side.is_horizontal():
        bends = [(sx, ty)]

    elif not src_side.is_horizontal() and tgt_side.is_horizontal():
        bends = [(tx, sy)]

    else:
        # Same direction exits
        offset = edge_separation * 2

        if src_side == Side.SOUTH:
            detour_y = max(sy, ty) + offset
            bends = [(sx, detour_y), (tx, detour_y)]
        elif src_side == Side.NORTH:
            detour_y = min(sy, ty) - offset
            bends = [(sx, detour_y), (tx, detour_y)]
        elif src_side == Side.EAST:
            detour_x = max(sx, tx) + offset
            bends = [(detour_x, sy), (detour_x, ty)]
        else:
            detour_x = min(sx, tx) - offset
            bends = [(detour_x, sy), (detour_x, ty)]

    if obstacles:
        bends = _add_obstacle_detours(start, tgt_pos, bends, obstacles, edge_separation)

    return _ensure_orthogonal(src_pos, tgt_pos, lead + bends)


# -----------------------------------------------------------------------------
# Obstacle avoidance
# -----------------------------------------------------------------------------


def _add_obstacle_detours(
    src_pos: Point,
    tgt_pos: Point,
    bends: list[Point],
    obstacles: Sequence[NodeBox],
    edge_separation: float,
) -> list[Point]:
    """Reroute bends that run through other boxes.

    The visibility graph is tried first, then a per-obstacle detour.
    """
    points = [src_pos] + bends + [tgt_pos]
    blocked = any(
        _segment_intersects_box(points[i], points[i + 1], obs)
        for i in range(len(points) - 1)
        for obs in obstacles
    )
    if not blocked:
        return bends

    vis_path = _visibility_graph_route(src_pos, tgt_pos, obstacles, edge_separation)
    if vis_path is not None:
        return vis_path[1:-1]

    return _simple_detour_route(src_pos, tgt_pos, bends, obstacles, edge_separation)


def _build_visibility_graph(
    src: Point,
    tgt: Point,
    obstacles: Sequence[NodeBox],
    margin: float,
) -> tuple[list[Point], dict[int, list[int]]]:
    """Build the graph of obstacle-free axis-aligned moves.

    Graph nodes are both endpoints plus the obstacle corners pushed out by
    ``margin``. Nodes are adjacent when they line up on x or y and the
    straight move between them stays clear of every obstacle.
    Non-aligned pairs are joined through a free L-shaped via point.
    """
    nodes: list[Point] = [src, tgt]
    for obs in obstacles:
        nodes.extend(
            [
                (obs.left - margin, obs.top - margin),
                (obs.right + margin, obs.top - margin),
                (obs.left - margin, obs.bottom + margin),
                (obs.right + margin, obs.bottom + margin),
            ]
        )

    def clear(a: Point, b: Point) -> bool:
        return not any(_segment_intersects_box(a, b, obs) for obs in obstacles)

    n = len(nodes)
    adj: dict[int, list[int]] = {i: [] for i in range(n)}
    via_nodes: list[Point] = []

    for i in range(n):
        for j in range(i + 1, n):
            xi, yi = nodes[i]
            xj, yj = nodes[j]

            if abs(xi - xj) < _EPS or abs(yi - yj) < _EPS:
                if clear(nodes[i], nodes[j]):
                    adj[i].append(j)
                    adj[j].append(i)
                continue

            for via in ((xi, yj), (xj, yi)):
                if any(
                    obs.left - _EPS < via[0] < obs.right + _EPS
                    and obs.top - _EPS < via[1] < obs.bottom + _EPS
                    for obs in obstacles
                ):
                    continue
                if not clear(nodes[i], via) or not clear(via, nodes[j]):
                    continue

                via_idx = n + len(via_nodes)
                via_nodes.append(via)
                adj[via_idx] = [i, j]
                adj[i].append(via_idx)
                adj[j].append(via_idx)

    nodes.extend(via_nodes)
    return nodes, adj


def _visibility_graph_route(
    src: Point,
    tgt: Point,
    obstacles: Sequence[NodeBox],
    margin: float,
) -> Optional[list[Point]]:
    """Find the path with the fewest segments from src to tgt avoiding obstacles.

    Returns:
        List of waypoints from src to tgt (inclusive), or None if no path.
    """
    nodes, adj = _build_visibility_graph(src, tgt, obstacles, margin)

    if not adj[0] or not adj[1]:
        return None

    visited = {0}
    queue: deque[tuple[int, list[int]]] = deque([(0, [0])])

    while queue:
        current, path = queue.popleft()
        if current == 1:
            return [nodes[i] for i in path]
        for nb in adj[current]:
            if nb not in visited:
                visited.add(nb)
                queue.append((nb, path + [nb]))

    return None


def _simple_detour_route(
    src_pos: Point,
    tgt_pos: Point,
    bends: list[Point],
    obstacles: Sequence[NodeBox],
    edge_separation: float,
) -> list[Point]:
    """Fallback when the visibility graph has no path: step around each blocker."""
    points = [src_pos] + bends + [tgt_pos]
    new_bends: list[Point] = []

    for i in range(len(points) - 1):
        p1 = points[i]
        p2 = points[i + 1]

        if i > 0:
            new_bends.append(p1)
        for obs in obstacles:
            if _segment_intersects_box(p1, p2, obs):
                new_bends.extend(_compute_detour(p1, p2, obs, edge_separation))
                break

    return new_bends or bends


def _segment_intersects_box(p1: Point, p2: Point, box: NodeBox) -> bool:
    """True when a horizontal or vertical segment cuts through the box interior."""
    x1, y1 = p1
    x2, y2 = p2

    if abs(x1 - x2) < _EPS:
        min_y = min(y1, y2)
        max_y = max(y1, y2)
        return (box.left < x1 < box.right) and (min_y < box.bottom) and (max_y > box.top)
    elif abs(y1 - y2) < _EPS:
        min_x = min(x1, x2)
        max_x = max(x1, x2)
        return (box.top < y1 < box.bottom) and (min_x < box.right) and (max_x > box.left)

    return False


def _compute_detour(
    p1: Point,
    p2: Point,
    obs: NodeBox,
    edge_separation: float,
) -> list[Point]:
    """Bends that take a straight segment around one blocking box."""
    x1, y1 = p1
    x2, y2 = p2

    if abs(x1 - x2) < _EPS:
        if x1 > obs.x:
            detour_x = obs.right + edge_separation
        else:
            detour_x = obs.left - edge_separation
        return [(detour_x, y1), (detour_x, y2)]
    else:
        if y1 > obs.y:
            detour_y = obs.bottom + edge_separation
        else:
            detour_y = obs.top - edge_separation
        return [(x1, detour_y), (x2, detour_y)]


def _same_point(a: Point, b: Point) -> bool:
    return abs(a[0] - b[0]) < _EPS and abs(a[1] - b[1]) < _EPS


def _between(lo: float, value: float, hi: float) -> bool:
    return min(lo, hi) - _EPS <= value <= max(lo, hi) + _EPS


# -----------------------------------------------------------------------------
# All edges
# -----------------------------------------------------------------------------


def route_styled_edges(
    boxes: Sequence[NodeBox],
    edges: Sequence[tuple[int, int]],
    styles: Optional[Sequence[Optional[EdgeStyle]]] = None,
    orientation: Orientation = Orientation.TOP_DOWN,
    edge_separation: float = 15.0,
    stubs: Optional[Sequence[float]] = None,
) -> list[RoutedEdge]:
    """Route every edge of a laid-out graph, honouring per-edge styles.

    Pipeline:
    1. Determine port sides (style anchors, else rank direction)
    2. Assign ports (distributing multiple edges per side)
    3. Route each edge (self-loops, orthogonal with obstacle awareness,
       elbow and segment edges straight between their ports)
    4. Separate overlapping parallel segments

    Args:
        boxes: Placed node boxes.
        edges: Edge list as (source, target) node indices.
        styles: Optional style per edge.
        orientation: Rank direction, used for default port sides.
        edge_separation: Minimum gap between parallel edge segments.
        stubs: Optional minimum first-segment length per edge.

    Returns:
        One RoutedEdge per input edge, in input order.
    """
    if not edges:
        return []

    box_map = {box.index: box for box in boxes}
    styles = styles if styles is not None else [None] * len(edges)
    stubs = stubs if stubs is not None else [0.0] * len(edges)

    edge_sides: list[tuple[Side, Side]] = []
    fixed: dict[tuple[int, bool], float] = {}
    for ei, (src, tgt) in enumerate(edges):
        if src == tgt:
            edge_sides.append((Side.EAST, Side.SOUTH))
            continue

        (src_side, src_pos), (tgt_side, tgt_pos) = resolve_port_sides(
            box_map[src], box_map[tgt], styles[ei], orientation
        )
        edge_sides.append((src_side, tgt_side))
        if src_pos is not None:
            fixed[(ei, True)] = src_pos
        if tgt_pos is not None:
            fixed[(ei, False)] = tgt_pos

    ports = assign_ports(box_map, edges, edge_sides, fixed)

    result: list[RoutedEdge] = []
    for ei, ((src, tgt), (src_port, tgt_port)) in enumerate(zip(edges, ports)):
        src_box = box_map[src]
        tgt_box = box_map[tgt]
        start = src_box.get_port_position(src_port.side, src_port.position)
        end = tgt_box.get_port_position(tgt_port.side, tgt_port.position)

        if src == tgt:
            bends = route_self_loop(src_box, src_port, tgt_port, max(edge_separation, stubs[ei]))
        else:
            style = styles[ei]
            routing = style.routing if style is not None else RoutingStyle.ORTHOGONAL
            if routing is RoutingStyle.ORTHOGONAL:
                obstacles = [b for b in boxes if b.index != src and b.index != tgt]
                if stubs[ei] > 0:
                    # Past the stub the route must not fold back over its source
                    obstacles.append(src_box)
            else:
                obstacles = []
            bends = route_edge(
                start,
                end,
                src_port.side,
                tgt_port.side,
                obstacles,
                edge_separation,
                stubs[ei],
            )

        result.append(
            RoutedEdge(
                source=src,
                target=tgt,
                source_port=src_port,
                target_port=tgt_port,
                start=start,
                end=end,
                bends=bends,
            )
        )

    pinned = {ei for ei, stub in enumerate(stubs) if stub > 0}
    return nudge_overlapping_segments(result, edge_separation, pinned)


# -----------------------------------------------------------------------------
# Parallel segment separation
# -----------------------------------------------------------------------------

_Segment = tuple[int, int, float, float, float, float, bool]


def nudge_overlapping_segments(
    edges: list[RoutedEdge],
    edge_separation: float = 15.0,
    pinned: Optional[set[int]] = None,
) -> list[RoutedEdge]:
    """Spread apart parallel segments that lie on top of each other.

    Finds groups of edge segments on the same axis coordinate (within
    tolerance) and spreads them apart by edge_separation increments,
    centered on the original position. Edges in ``pinned`` keep their
    route.

    Args:
        edges: Routed edges.
        edge_separation: Minimum gap between parallel segments.
        pinned: Edge indices that must not move.

    Returns:
        New list of RoutedEdge with adjusted bend points.
    """
    if not edges:
        return edges
    pinned = pinned or set()

    # (edge_idx, seg_idx, lo_x, lo_y, hi_x, hi_y, is_horizontal)
    h_groups: dict[float, list[_Segment]] = {}
    v_groups: dict[float, list[_Segment]] = {}
    threshold = edge_separation * 0.5

    for ei, edge in enumerate(edges):
        if ei in pinned:
            continue
        points = edge.points
        for si in range(len(points) - 1):
            x1, y1 = points[si]
            x2, y2 = points[si + 1]
            if abs(y1 - y2) < _EPS:
                seg = (ei, si, min(x1, x2), y1, max(x1, x2), y2, True)
                _add_to_group(h_groups, y1, seg, threshold)
            elif abs(x1 - x2) < _EPS:
                seg = (ei, si, x1, min(y1, y2), x2, max(y1, y2), False)
                _add_to_group(v_groups, x1, seg, threshold)

    nudge_map: dict[tuple[int, int], float] = {}
    for groups, horizontal in ((h_groups, True), (v_groups, False)):
        for segs in groups.values():
            if len(segs) <= 1:
                continue
            for cluster in _find_overlapping_clusters(segs, is_horizontal=horizontal):
                n_segs = len(cluster)
                if n_segs <= 1:
                    continue
                for i, seg in enumerate(cluster):
                    nudge_map[(seg[0], seg[1])] = (i - (n_segs - 1) / 2.0) * edge_separation

    if not nudge_map:
        return edges

    result: list[RoutedEdge] = []
    for ei, edge in enumerate(edges):
        points = edge.points
        n_pts = len(points)
        new_points = list(points)

        # Only bends move; ports stay where they are
        for si in range(n_pts - 1):
            offset = nudge_map.get((ei, si))
            if offset is None:
                continue
            x1, y1 = points[si]
            x2, y2 = points[si + 1]

            if abs(y1 - y2) < _EPS:
                if si > 0:
                    new_points[si] = (new_points[si][0], new_points[si][1] + offset)
                if si + 1 < n_pts - 1:
                    new_points[si + 1] = (new_points[si + 1][0], new_points[si + 1][1] + offset)
            else:
                if si > 0:
                    new_points[si] = (new_points[si][0] + offset, new_points[si][1])
                if si + 1 < n_pts - 1:
                    new_points[si + 1] = (new_points[si + 1][0] + offset, new_points[si + 1][1])

        result.append(
            RoutedEdge(
                source=edge.source,
                target=edge.target,
                source_port=edge.source_port,
                target_port=edge.target_port,
                start=edge.start,
                end=edge.end,
                bends=_ensure_orthogonal(edge.start, edge.end, new_points[1:-1]),
            )
        )

    return result


def _add_to_group(
    groups: dict[float, list[_Segment]],
    coord: float,
    seg: _Segment,
    threshold: float,
) -> None:
    for key in groups:
        if abs(key - coord) < threshold:
            groups[key].append(seg)
            return
    groups[coord] = [seg]


def _find_overlapping_clusters(
    segs: list[_Segment],
    is_horizontal: bool,
) -> list[list[_Segment]]:
    """Split a group of collinear segments into runs that share some span."""
    clusters: list[list[_Segment]] = []

    for seg in segs:
        _, _, x1, y1, x2, y2, _ = seg
        span_lo, span_hi = (x1, x2) if is_horizontal else (y1, y2)

        placed = False
        for cluster in clusters:
            for cseg in cluster:
                _, _, cx1, cy1, cx2, cy2, _ = cseg
                clo, chi = (cx1, cx2) if is_horizontal else (cy1, cy2)
                if span_lo < chi and clo < span_hi:
                    cluster.append(seg)
                    placed = True
                    break
            if placed:
                break
        if not placed:
            clusters.append([seg])

    return clusters


__all__ = [
    "assign_ports",
    "determine_port_sides",
    "nudge_overlapping_segments",
    "resolve_port_sides",
    "route_edge",
    "route_self_loop",
    "route_styled_edges",
]
