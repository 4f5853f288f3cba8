"""
Size-aware layered layout with orthogonal edge routing.

A Sugiyama-style engine for diagrams whose nodes have real sizes:

1. Cycle removal (back edges reversed for ranking only)
2. Longest-path rank assignment
3. Optional ranking override (``rank_hook``)
4. Barycenter crossing minimization
5. Coordinate assignment from node extents, with optional fine tuning
6. Style-driven orthogonal edge routing
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence, Union

from ..base import StaticLayout
from ..preprocessing import (
    assign_layers_longest_path,
    group_by_rank,
    minimize_crossings_barycenter,
    remove_cycles,
)
from ..routing import NodeBox, route_styled_edges
from ..types import Event, LinkLike, NodeLike, Orientation, Point, RankHook

logger = logging.getLogger(__name__)

Bounds = tuple[float, float, float, float]


class HierarchicalLayout(StaticLayout):
    """
    Layered layout for sized nodes.

    Ranks are stacked along the flow direction (down for top-to-bottom,
    right for left-to-right). Nodes inside a rank are packed across the
    flow with ``intra_cell_spacing`` between their boxes; consecutive ranks
    are ``inter_rank_spacing`` apart, measured between the thickest boxes
    of each rank. After the run, node ``x``/``y`` hold box centres and
    ``routes`` holds one absolute polyline per link.

    Example:
        layout = HierarchicalLayout(
            nodes=[
                {"width": 30, "height": 30, "shape": "ellipse"},
                {"width": 100, "height": 60},
                {"width": 30, "height": 30, "shape": "ellipse"},
            ],
            links=[{"source": 0, "target": 1}, {"source": 1, "target": 2}],
            orientation="left-to-right",
        )
        layout.run()
        print(layout.routes[0])
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        links: Optional[Sequence[LinkLike]] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
        orientation: Union[Orientation, str] = Orientation.TOP_DOWN,
        intra_cell_spacing: float = 100.0,
        inter_rank_spacing: float = 80.0,
        parent_border: float = 20.0,
        fine_tuning: bool = True,
        crossing_iterations: int = 24,
        edge_separation: float = 15.0,
        rank_hook: Optional[RankHook] = None,
    ) -> None:
        """
        Initialize the layout.

        Args:
            nodes: List of nodes (need ``width``/``height``; ``shape`` optional)
            links: List of links (may carry ``style`` and ``stub``)
            on_start: Callback for start event
            on_end: Callback for end event
            orientation: 'top-to-bottom' or 'left-to-right'
            intra_cell_spacing: Gap between boxes of the same rank.
            inter_rank_spacing: Gap between consecutive ranks.
            parent_border: Margin between the drawing origin and the boxes.
            fine_tuning: Pull nodes towards their neighbours after packing.
            crossing_iterations: Number of barycenter sweeps.
            edge_separation: Gap between parallel edge segments.
            rank_hook: Called with (ranks, acyclic edges) after ranking; the
                returned mapping replaces the ranks.
        """
        super().__init__(nodes=nodes, links=links, on_start=on_start, on_end=on_end)

        self._orientation: Orientation = Orientation(orientation)
        self._intra_cell_spacing: float = float(intra_cell_spacing)
        self._inter_rank_spacing: float = float(inter_rank_spacing)
        self._parent_border: float = float(parent_border)
        self._fine_tuning: bool = bool(fine_tuning)
        self._crossing_iterations: int = max(1, int(crossing_iterations))
        self._edge_separation: float = float(edge_separation)
        self._rank_hook: Optional[RankHook] = rank_hook

        # Results
        self._layers: list[list[int]] = []
        self._reversed: set[int] = set()
        self._routes: list[list[Point]] = []

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def orientation(self) -> Orientation:
        """Get layout orientation."""
        return self._orientation

    @orientation.setter
    def orientation(self, value: Union[Orientation, str]) -> None:
        """Set layout orientation."""
        self._orientation = Orientation(value)

    @property
    def intra_cell_spacing(self) -> float:
        """Get gap between boxes of the same rank."""
        return self._intra_cell_spacing

    @intra_cell_spacing.setter
    def intra_cell_spacing(self, value: float) -> None:
        self._intra_cell_spacing = float(value)

    @property
    def inter_rank_spacing(self) -> float:
        """Get gap between consecutive ranks."""
        return self._inter_rank_spacing

    @inter_rank_spacing.setter
    def inter_rank_spacing(self, value: float) -> None:
        self._inter_rank_spacing = float(value)

    @property
    def parent_border(self) -> float:
        """Get margin between the origin and the boxes."""
        return self._parent_border

    @parent_border.setter
    def parent_border(self, value: float) -> None:
        self._parent_border = float(value)

    @property
    def fine_tuning(self) -> bool:
        """Whether nodes are pulled towards their neighbours."""
        return self._fine_tuning

    @fine_tuning.setter
    def fine_tuning(self, value: bool) -> None:
        self._fine_tuning = bool(value)

    @property
    def crossing_iterations(self) -> int:
        """Get number of crossing minimization iterations."""
        return self._crossing_iterations

    @crossing_iterations.setter
    def crossing_iterations(self, value: int) -> None:
        self._crossing_iterations = max(1, int(value))

    @property
    def edge_separation(self) -> float:
        """Get gap between parallel edge segments."""
        return self._edge_separation

    @edge_separation.setter
    def edge_separation(self, value: float) -> None:
        self._edge_separation = float(value)

    @property
    def rank_hook(self) -> Optional[RankHook]:
        """Get the ranking override."""
        return self._rank_hook

    @rank_hook.setter
    def rank_hook(self, value: Optional[RankHook]) -> None:
        self._rank_hook = value

    @property
    def layers(self) -> list[list[int]]:
        """Node indices per rank, in drawing order."""
        return self._layers

    @property
    def reversed_links(self) -> set[int]:
        """Indices of links reversed to break cycles."""
        return self._reversed

    @property
    def routes(self) -> list[list[Point]]:
        """One absolute polyline per link, from source port to target port."""
        return self._routes

    @property
    def bounds(self) -> Bounds:
        """(min_x, min_y, max_x, max_y) of all boxes and routes."""
        return compute_bounds(
            [(n.left, n.top, n.left + n.width, n.top + n.height) for n in self._nodes],
            self._routes,
        )

    # -------------------------------------------------------------------------
    # Phase 1: Ranking
    # -------------------------------------------------------------------------

    def _assign_ranks(self, edges: list[tuple[int, int]]) -> list[tuple[int, int]]:
        """Rank nodes and return the acyclic edges used for ranking."""
        n = len(self._nodes)
        acyclic, self._reversed = remove_cycles(n, edges)
        if self._reversed:
            logger.debug("reversed %d link(s) to break cycles", len(self._reversed))

        ranks = assign_layers_longest_path(n, acyclic)

        if self._rank_hook is not None:
            override = self._rank_hook(dict(enumerate(ranks)), acyclic)
            ranks = [override.get(i, ranks[i]) for i in range(n)]

        low = min(ranks)
        for i, node in enumerate(self._nodes):
            node.rank = ranks[i] - low

        self._layers = group_by_rank([node.rank or 0 for node in self._nodes])
        return acyclic

    # -------------------------------------------------------------------------
    # Phase 2: Crossing Minimization
    # -------------------------------------------------------------------------

    def _minimize_crossings(self, acyclic: list[tuple[int, int]]) -> None:
        ranked: list[tuple[int, int]] = []
        for src, tgt in acyclic:
            rs, rt = self._nodes[src].rank or 0, self._nodes[tgt].rank or 0
            if rs < rt:
                ranked.append((src, tgt))
            elif rt < rs:
                ranked.append((tgt, src))

        self._layers = minimize_crossings_barycenter(
            self._layers, ranked, self._crossing_iterations
        )

    # -------------------------------------------------------------------------
    # Phase 3: Coordinate Assignment
    # -------------------------------------------------------------------------

    def _extents(self, index: int) -> tuple[float, float]:
        """(extent along the flow, extent across the flow) of a node."""
        node = self._nodes[index]
        if self._orientation.is_vertical:
            return node.height, node.width
        return node.width, node.height

    def _assign_coordinates(self, edges: list[tuple[int, int]]) -> None:
        """Assign box centres from node sizes."""
        main: dict[int, float] = {}
        offset = 0.0
        for layer in self._layers:
            thickness = max((self._extents(i)[0] for i in layer), default=0.0)
            for i in layer:
                main[i] = offset + thickness / 2
            offset += thickness + self._inter_rank_spacing

        cross: dict[int, float] = {}
        for layer in self._layers:
            width = sum(self._extents(i)[1] for i in layer)
            width += self._intra_cell_spacing * max(0, len(layer) - 1)
            pos = -width / 2
            for i in layer:
                ext = self._extents(i)[1]
                cross[i] = pos + ext / 2
                pos += ext + self._intra_cell_spacing

        if self._fine_tuning:
            self._fine_tune(cross, edges)

        for i, node in enumerate(self._nodes):
            if self._orientation.is_vertical:
                node.x, node.y = cross[i], main[i]
            else:
                node.x, node.y = main[i], cross[i]

        # Boxes start at parent_border on both axes
        min_left = min(node.left for node in self._nodes)
        min_top = min(node.top for node in self._nodes)
        dx = self._parent_border - min_left
        dy = self._parent_border - min_top
        for node in self._nodes:
            node.x += dx
            node.y += dy

    def _fine_tune(self, cross: dict[int, float], edges: list[tuple[int, int]]) -> None:
        """
        Move nodes towards the mean position of their neighbours.

        Each layer keeps its order and its minimum spacing; the whole layer
        is then shifted by the mean of the remaining offsets.
        """
        neighbors: dict[int, list[int]] = {i: [] for i in range(len(self._nodes))}
        for src, tgt in edges:
            if src != tgt:
                neighbors[src].append(tgt)
                neighbors[tgt].append(src)

        for _ in range(4):
            for layer in self._layers:
                if not layer:
                    continue
                desired = []
                for i in layer:
                    if neighbors[i]:
                        desired.append(sum(cross[nb] for nb in neighbors[i]) / len(neighbors[i]))
                    else:
                        desired.append(cross[i])

                placed: list[float] = []
                for k, i in enumerate(layer):
                    pos = desired[k]
                    if k > 0:
                        prev = layer[k - 1]
                        gap = (
                            self._extents(prev)[1] / 2
                            + self._intra_cell_spacing
                            + self._extents(i)[1] / 2
                        )
                        pos = max(pos, placed[-1] + gap)
                    placed.append(pos)

                shift = sum(d - p for d, p in zip(desired, placed)) / len(layer)
                for k, i in enumerate(layer):
                    cross[i] = placed[k] + shift

    # -------------------------------------------------------------------------
    # Phase 4: Edge Routing
    # -------------------------------------------------------------------------

    def node_boxes(self) -> list[NodeBox]:
        """Current node positions as routing boxes."""
        return [
            NodeBox(
                index=i,
                x=node.x,
                y=node.y,
                width=node.width,
                height=node.height,
                shape=node.shape,
            )
            for i, node in enumerate(self._nodes)
        ]

    def _route_links(self, edges: list[tuple[int, int]]) -> None:
        routed = route_styled_edges(
            self.node_boxes(),
            edges,
            styles=[link.style for link in self._links],
            orientation=self._orientation,
            edge_separation=self._edge_separation,
            stubs=[link.stub for link in self._links],
        )
        self._routes = [edge.points for edge in routed]

    # -------------------------------------------------------------------------
    # Layout Computation
    # -------------------------------------------------------------------------

    def _compute(self, **kwargs: Any) -> None:
        """Compute the layered layout."""
        self._layers = []
        self._reversed = set()
        self._routes = []
        if not self._nodes:
            return

        edges = self._edge_pairs()

        acyclic = self._assign_ranks(edges)
        self._minimize_crossings(acyclic)
        self._assign_coordinates(edges)
        self._route_links(edges)

        logger.debug(
            "laid out %d node(s) in %d rank(s), %d link(s)",
            len(self._nodes),
            len(self._layers),
            len(edges),
        )


def compute_bounds(
    boxes: Sequence[tuple[float, float, float, float]],
    polylines: Sequence[Sequence[Point]] = (),
) -> Bounds:
    """
    Bounding box of boxes (given as min/max corners) and polylines.

    Returns (0, 0, 0, 0) when there is nothing to bound.
    """
    xs: list[float] = []
    ys: list[float] = []
    for x1, y1, x2, y2 in boxes:
        xs.extend((x1, x2))
        ys.extend((y1, y2))
    for line in polylines:
        for x, y in line:
            xs.append(x)
            ys.append(y)
    if not xs:
        return (0.0, 0.0, 0.0, 0.0)
    return (min(xs), min(ys), max(xs), max(ys))


__all__ = ["HierarchicalLayout", "compute_bounds"]
