"""
Graph preprocessing for the hierarchical engine.

- Cycle removal (back edges are reversed for ranking)
- Longest-path rank assignment
- Barycenter crossing minimization
- Crossing counting between ranks

Edges are plain (source, target) index pairs; node indices run from 0 to n-1.
"""

from __future__ import annotations

from collections import deque
from typing import Sequence

Edge = tuple[int, int]


# =============================================================================
# Cycle Removal
# =============================================================================


def remove_cycles(n: int, edges: Sequence[Edge]) -> tuple[list[Edge], set[int]]:
    """
    Reverse back edges so the graph becomes acyclic.

    Uses a DFS from every unvisited node in index order, so the result is
    deterministic. Self-loops are dropped from the returned list since they
    carry no ranking information.

    Args:
        n: Number of nodes
        edges: Directed edges

    Returns:
        Tuple of (acyclic_edges, reversed_indices) where reversed_indices are
        positions in ``edges`` that were flipped.

    Example:
        >>> acyclic, flipped = remove_cycles(2, [(0, 1), (1, 0)])
        >>> flipped
        {1}
    """
    adj: list[list[tuple[int, int]]] = [[] for _ in range(n)]
    for idx, (src, tgt) in enumerate(edges):
        if 0 <= src < n and 0 <= tgt < n and src != tgt:
            adj[src].append((tgt, idx))

    # 0=unvisited, 1=on stack, 2=done
    state = [0] * n
    reversed_indices: set[int] = set()

    for start in range(n):
        if state[start]:
            continue
        state[start] = 1
        stack: list[tuple[int, int]] = [(start, 0)]
        while stack:
            node, pos = stack[-1]
            if pos < len(adj[node]):
                stack[-1] = (node, pos + 1)
                neighbor, edge_idx = adj[node][pos]
                if state[neighbor] == 1:
                    reversed_indices.add(edge_idx)
                elif state[neighbor] == 0:
                    state[neighbor] = 1
                    stack.append((neighbor, 0))
            else:
                state[node] = 2
                stack.pop()

    acyclic: list[Edge] = []
    for idx, (src, tgt) in enumerate(edges):
        if src == tgt:
            continue
        acyclic.append((tgt, src) if idx in reversed_indices else (src, tgt))

    return acyclic, reversed_indices


# =============================================================================
# Rank Assignment
# =============================================================================


def assign_layers_longest_path(n: int, edges: Sequence[Edge]) -> list[int]:
    """
    Assign each node the length of the longest path reaching it.

    Sources get rank 0 and every edge points from a lower to a higher rank.
    The edges must be acyclic (see ``remove_cycles``).

    Args:
        n: Number of nodes
        edges: Acyclic directed edges

    Returns:
        Rank per node index.

    Example:
        >>> assign_layers_longest_path(4, [(0, 1), (0, 2), (1, 3), (2, 3)])
        [0, 1, 1, 2]
    """
    outgoing: list[list[int]] = [[] for _ in range(n)]
    indegree = [0] * n
    for src, tgt in edges:
        outgoing[src].append(tgt)
        indegree[tgt] += 1

    ranks = [0] * n
    queue: deque[int] = deque(i for i in range(n) if indegree[i] == 0)
    while queue:
        node = queue.popleft()
        for child in outgoing[node]:
            ranks[child] = max(ranks[child], ranks[node] + 1)
            indegree[child] -= 1
            if indegree[child] == 0:
                queue.append(child)

    return ranks


def group_by_rank(ranks: Sequence[int]) -> list[list[int]]:
    """Turn a rank-per-node list into layers, keeping index order inside a layer."""
    if not ranks:
        return []
    layers: list[list[int]] = [[] for _ in range(max(ranks) + 1)]
    for node, rank in enumerate(ranks):
        layers[rank].append(node)
    return layers


# =============================================================================
# Crossing Minimization
# =============================================================================


def minimize_crossings_barycenter(
    layers: list[list[int]],
    edges: Sequence[Edge],
    iterations: int = 24,
) -> list[list[int]]:
    """
    Minimize edge crossings between layers using the barycenter heuristic.

    Repeatedly sweeps through layers, reordering nodes by the average
    position of their neighbours on the side the sweep comes from. The
    ordering with the fewest crossings seen is returned, so the result is
    never worse than the input.

    Args:
        layers: Node indices per layer
        edges: Directed edges (source rank lower than target rank)
        iterations: Number of sweep iterations

    Returns:
        Reordered layers.
    """
    result = [list(layer) for layer in layers]
    if len(result) < 2:
        return result

    members = {node for layer in result for node in layer}
    incoming: dict[int, list[int]] = {node: [] for node in members}
    outgoing: dict[int, list[int]] = {node: [] for node in members}
    for src, tgt in edges:
        if src in members and tgt in members:
            outgoing[src].append(tgt)
            incoming[tgt].append(src)

    position: dict[int, int] = {}
    for layer in result:
        for pos, node in enumerate(layer):
            position[node] = pos

    def order_layer(layer_idx: int, adj: dict[int, list[int]]) -> None:
        layer = result[layer_idx]
        barycenters: list[tuple[float, int]] = []
        for node in layer:
            neighbors = adj[node]
            if neighbors:
                avg = sum(position[nb] for nb in neighbors) / len(neighbors)
            else:
                avg = float(position[node])
            barycenters.append((avg, node))

        barycenters.sort(key=lambda x: x[0])
        result[layer_idx] = [node for _, node in barycenters]
        for pos, (_, node) in enumerate(barycenters):
            position[node] = pos

    best = [list(layer) for layer in result]
    best_crossings = count_crossings(result, edges)

    for i in range(iterations):
        if best_crossings == 0:
            break
        if i % 2 == 0:
            for layer_idx in range(1, len(result)):
                order_layer(layer_idx, incoming)
        else:
            for layer_idx in range(len(result) - 2, -1, -1):
                order_layer(layer_idx, outgoing)

        crossings = count_crossings(result, edges)
        if crossings < best_crossings:
            best_crossings = crossings
            best = [list(layer) for layer in result]

    return best


def count_crossings(layers: list[list[int]], edges: Sequence[Edge]) -> int:
    """
    Count pairwise crossings of edges that join the same pair of layers.

    Args:
        layers: Node indices per layer
        edges: Directed edges

    Returns:
        Number of edge crossings.
    """
    node_layer: dict[int, int] = {}
    node_pos: dict[int, int] = {}
    for layer_idx, layer in enumerate(layers):
        for pos, node in enumerate(layer):
            node_layer[node] = layer_idx
            node_pos[node] = pos

    layer_edges: dict[tuple[int, int], list[tuple[int, int]]] = {}
    for src, tgt in edges:
        if src not in node_layer or tgt not in node_layer:
            continue
        l1, l2 = node_layer[src], node_layer[tgt]
        if l1 > l2:
            l1, l2 = l2, l1
            src, tgt = tgt, src
        layer_edges.setdefault((l1, l2), []).append((node_pos[src], node_pos[tgt]))

    total = 0
    for pairs in layer_edges.values():
        for i, (s1, t1) in enumerate(pairs):
            for s2, t2 in pairs[i + 1 :]:
                if (s1 < s2 and t1 > t2) or (s1 > s2 and t1 < t2):
                    total += 1

    return total


__all__ = [
    "remove_cycles",
    "assign_layers_longest_path",
    "group_by_rank",
    "minimize_crossings_barycenter",
    "count_crossings",
]
