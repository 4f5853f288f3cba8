"""Tests for graph preprocessing utilities."""

from bpmn_layout.preprocessing import (
    assign_layers_longest_path,
    count_crossings,
    group_by_rank,
    minimize_crossings_barycenter,
    remove_cycles,
)


class TestRemoveCycles:
    """Tests for cycle removal."""

    def test_acyclic_unchanged(self):
        edges = [(0, 1), (1, 2)]
        acyclic, flipped = remove_cycles(3, edges)
        assert acyclic == edges
        assert flipped == set()

    def test_two_cycle(self):
        """One edge of a 2-cycle is reversed."""
        acyclic, flipped = remove_cycles(2, [(0, 1), (1, 0)])
        assert flipped == {1}
        assert acyclic == [(0, 1), (0, 1)]

    def test_loop_back(self):
        """A back edge to the start of a chain is reversed."""
        acyclic, flipped = remove_cycles(3, [(0, 1), (1, 2), (2, 0)])
        assert flipped == {2}
        ranks = assign_layers_longest_path(3, acyclic)
        assert ranks == [0, 1, 2]

    def test_self_loops_dropped(self):
        acyclic, flipped = remove_cycles(2, [(0, 0), (0, 1)])
        assert acyclic == [(0, 1)]
        assert flipped == set()


class TestLongestPath:
    """Tests for rank assignment."""

    def test_diamond(self):
        assert assign_layers_longest_path(4, [(0, 1), (0, 2), (1, 3), (2, 3)]) == [0, 1, 1, 2]

    def test_longest_path_wins(self):
        """A node reached by paths of different lengths takes the longest."""
        ranks = assign_layers_longest_path(4, [(0, 1), (1, 2), (0, 3), (2, 3)])
        assert ranks == [0, 1, 2, 3]

    def test_isolated_nodes(self):
        assert assign_layers_longest_path(3, []) == [0, 0, 0]

    def test_edges_point_forward(self):
        edges = [(0, 2), (1, 2), (2, 3), (1, 4), (4, 3)]
        ranks = assign_layers_longest_path(5, edges)
        assert all(ranks[s] < ranks[t] for s, t in edges)


class TestGroupByRank:
    def test_layers(self):
        assert group_by_rank([0, 1, 1, 2]) == [[0], [1, 2], [3]]

    def test_gaps_give_empty_layers(self):
        assert group_by_rank([0, 2]) == [[0], [], [1]]

    def test_empty(self):
        assert group_by_rank([]) == []


class TestCrossings:
    """Tests for crossing counting and minimization."""

    def test_count_crossing(self):
        layers = [[0, 1], [2, 3]]
        assert count_crossings(layers, [(0, 3), (1, 2)]) == 1
        assert count_crossings(layers, [(0, 2), (1, 3)]) == 0

    def test_minimize_removes_crossing(self):
        layers = [[0, 1], [2, 3]]
        edges = [(0, 3), (1, 2)]
        result = minimize_crossings_barycenter(layers, edges)
        assert count_crossings(result, edges) == 0

    def test_never_worse(self):
        """The result has no more crossings than the input."""
        layers = [[0, 1, 2], [3, 4, 5], [6, 7]]
        edges = [(0, 5), (1, 3), (2, 4), (3, 7), (4, 6), (5, 6)]
        result = minimize_crossings_barycenter(layers, edges)
        assert count_crossings(result, edges) <= count_crossings(layers, edges)
        assert sorted(map(sorted, result)) == sorted(map(sorted, layers))

    def test_single_layer(self):
        assert minimize_crossings_barycenter([[0, 1]], []) == [[0, 1]]
