"""
Tests for the size-aware hierarchical engine.
"""

import pytest

from bpmn_layout import (
    EventType,
    HierarchicalLayout,
    InvalidLinkError,
    LaneConstraintLayering,
    Orientation,
)
from bpmn_layout.hierarchical import compute_bounds

# =============================================================================
# Test Fixtures
# =============================================================================


def create_chain():
    """Event -> task -> event."""
    nodes = [
        {"width": 30, "height": 30, "shape": "ellipse"},
        {"width": 100, "height": 60},
        {"width": 30, "height": 30, "shape": "ellipse"},
    ]
    links = [{"source": 0, "target": 1}, {"source": 1, "target": 2}]
    return nodes, links


def create_fork():
    """One node fanning out to three and joining again."""
    nodes = [{"width": 40, "height": 40} for _ in range(5)]
    links = [
        {"source": 0, "target": 1},
        {"source": 0, "target": 2},
        {"source": 0, "target": 3},
        {"source": 1, "target": 4},
        {"source": 2, "target": 4},
        {"source": 3, "target": 4},
    ]
    return nodes, links


def boxes_overlap(a, b):
    return (
        a.left < b.left + b.width
        and b.left < a.left + a.width
        and a.top < b.top + b.height
        and b.top < a.top + a.height
    )


# =============================================================================
# Ranking
# =============================================================================


class TestRanking:
    """Tests for rank assignment."""

    def test_chain_ranks(self):
        nodes, links = create_chain()
        layout = HierarchicalLayout(nodes=nodes, links=links).run()
        assert [n.rank for n in layout.nodes] == [0, 1, 2]
        assert layout.layers == [[0], [1], [2]]

    def test_fork_ranks(self):
        nodes, links = create_fork()
        layout = HierarchicalLayout(nodes=nodes, links=links).run()
        assert [n.rank for n in layout.nodes] == [0, 1, 1, 1, 2]

    def test_cycle_is_ranked(self):
        """Cycles are broken for ranking; every link is still routed."""
        nodes = [{"width": 40, "height": 40} for _ in range(3)]
        links = [
            {"source": 0, "target": 1},
            {"source": 1, "target": 2},
            {"source": 2, "target": 0},
        ]
        layout = HierarchicalLayout(nodes=nodes, links=links).run()
        assert layout.reversed_links == {2}
        assert [n.rank for n in layout.nodes] == [0, 1, 2]
        assert len(layout.routes) == 3

    def test_rank_hook_overrides(self):
        """The hook's ranks replace the computed ones."""
        nodes, links = create_chain()

        def hook(ranks, edges):
            assert ranks == {0: 0, 1: 1, 2: 2}
            return {0: 0, 1: 2, 2: 4}

        layout = HierarchicalLayout(nodes=nodes, links=links, rank_hook=hook).run()
        assert [n.rank for n in layout.nodes] == [0, 2, 4]
        assert layout.layers[1] == []

    def test_lane_hook_separates_lanes(self):
        """With the lane constraint installed no rank mixes lanes."""
        nodes = [{"width": 40, "height": 40} for _ in range(4)]
        links = [
            {"source": 0, "target": 1},
            {"source": 0, "target": 2},
            {"source": 1, "target": 3},
            {"source": 2, "target": 3},
        ]
        hook = LaneConstraintLayering({0: "A", 1: "A", 2: "B", 3: "B"})
        layout = HierarchicalLayout(nodes=nodes, links=links, rank_hook=hook).run()
        assert [n.rank for n in layout.nodes] == [0, 1, 2, 3]
        assert all(len(layer) == 1 for layer in layout.layers)


# =============================================================================
# Coordinates
# =============================================================================


class TestCoordinates:
    """Tests for coordinate assignment."""

    def test_top_down_spacing(self):
        """Consecutive ranks are inter_rank_spacing apart."""
        nodes, links = create_chain()
        layout = HierarchicalLayout(nodes=nodes, links=links, inter_rank_spacing=80).run()
        a, b, c = layout.nodes
        assert b.top - (a.top + a.height) == pytest.approx(80)
        assert c.top - (b.top + b.height) == pytest.approx(80)

    def test_left_right_flows_along_x(self):
        nodes, links = create_chain()
        layout = HierarchicalLayout(
            nodes=nodes, links=links, orientation=Orientation.LEFT_RIGHT
        ).run()
        xs = [n.x for n in layout.nodes]
        assert xs == sorted(xs)
        assert len(set(xs)) == 3

    def test_orientation_string(self):
        layout = HierarchicalLayout(orientation="left-to-right")
        assert layout.orientation is Orientation.LEFT_RIGHT

    def test_parent_border(self):
        """The drawing starts parent_border away from the origin."""
        nodes, links = create_fork()
        layout = HierarchicalLayout(nodes=nodes, links=links, parent_border=25).run()
        assert min(n.left for n in layout.nodes) == pytest.approx(25)
        assert min(n.top for n in layout.nodes) == pytest.approx(25)

    def test_same_rank_spacing(self):
        """Boxes of one rank keep intra_cell_spacing between them."""
        nodes, links = create_fork()
        layout = HierarchicalLayout(nodes=nodes, links=links, intra_cell_spacing=50).run()
        row = sorted((layout.nodes[i] for i in layout.layers[1]), key=lambda n: n.x)
        for left, right in zip(row, row[1:]):
            assert right.left - (left.left + left.width) >= 50 - 1e-6

    @pytest.mark.parametrize("fine_tuning", [True, False])
    def test_no_overlaps(self, fine_tuning):
        nodes, links = create_fork()
        layout = HierarchicalLayout(nodes=nodes, links=links, fine_tuning=fine_tuning).run()
        for i, a in enumerate(layout.nodes):
            for b in layout.nodes[i + 1 :]:
                assert not boxes_overlap(a, b)

    def test_bounds(self):
        nodes, links = create_chain()
        layout = HierarchicalLayout(nodes=nodes, links=links, parent_border=20).run()
        min_x, min_y, max_x, max_y = layout.bounds
        assert (min_x, min_y) == (pytest.approx(20), pytest.approx(20))
        assert max_y == pytest.approx(20 + 30 + 80 + 60 + 80 + 30)


# =============================================================================
# Routing
# =============================================================================


class TestRouting:
    """Tests for routes produced by the engine."""

    def test_route_per_link(self):
        nodes, links = create_fork()
        layout = HierarchicalLayout(nodes=nodes, links=links).run()
        assert len(layout.routes) == len(links)
        assert all(len(route) >= 2 for route in layout.routes)

    def test_routes_orthogonal(self):
        nodes, links = create_fork()
        layout = HierarchicalLayout(nodes=nodes, links=links).run()
        for route in layout.routes:
            for (x1, y1), (x2, y2) in zip(route, route[1:]):
                assert abs(x1 - x2) < 1e-6 or abs(y1 - y2) < 1e-6

    def test_routes_start_on_source_border(self):
        nodes, links = create_chain()
        layout = HierarchicalLayout(nodes=nodes, links=links).run()
        source = layout.nodes[0]
        start = layout.routes[0][0]
        assert start[1] == pytest.approx(source.top + source.height)

    def test_self_loop(self):
        layout = HierarchicalLayout(
            nodes=[{"width": 40, "height": 40}],
            links=[{"source": 0, "target": 0}],
        ).run()
        route = layout.routes[0]
        assert len(route) >= 4
        node = layout.nodes[0]
        inner = route[1:-1]
        assert all(
            not (node.left < x < node.left + node.width and node.top < y < node.top + node.height)
            for x, y in inner
        )


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    def test_empty_graph(self):
        layout = HierarchicalLayout(nodes=[], links=[]).run()
        assert layout.routes == []
        assert layout.bounds == (0.0, 0.0, 0.0, 0.0)

    def test_invalid_link_raises(self):
        with pytest.raises(InvalidLinkError):
            HierarchicalLayout(nodes=[{}], links=[{"source": 0, "target": 3}]).run()

    def test_events_fire(self):
        fired = []
        nodes, links = create_chain()
        layout = HierarchicalLayout(
            nodes=nodes,
            links=links,
            on_start=lambda e: fired.append(e["type"]),
            on_end=lambda e: fired.append(e["type"]),
        )
        layout.run()
        assert fired == [EventType.start, EventType.end]

    def test_deterministic(self):
        nodes, links = create_fork()
        first = HierarchicalLayout(nodes=nodes, links=links).run()
        second = HierarchicalLayout(nodes=nodes, links=links).run()
        assert [(n.x, n.y) for n in first.nodes] == [(n.x, n.y) for n in second.nodes]
        assert first.routes == second.routes


class TestComputeBounds:
    def test_boxes_and_lines(self):
        assert compute_bounds([(0, 0, 10, 10)], [[(-5, 3), (20, 3)]]) == (-5, 0, 20, 10)

    def test_empty(self):
        assert compute_bounds([]) == (0.0, 0.0, 0.0, 0.0)
