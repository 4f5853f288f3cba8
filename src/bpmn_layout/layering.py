"""
Lane-aware rank assignment.

Lanes are drawn across the flow, so a rank that holds shapes of two lanes
cannot be drawn without one lane's shape sitting in the other lane's band.
``LaneConstraintLayering`` rewrites an existing ranking so that every rank
holds members of at most one lane:

1. Scan ranks along the flow, starting at the sources.
2. At a rank with several lanes, branch once per lane: that lane keeps
   the rank and every other lane's member moves one rank further along
   the flow. Successors that would no longer sit strictly after a moved
   vertex move with it.
3. Score each fully resolved ranking by the number of lane changes
   between consecutive ranks that hold lane members.
4. Keep the lowest score (first one on ties) and shift ranks to start at 0.

The search is exhaustive up to ``max_branches`` candidate branches; past
that, each remaining conflict is resolved with its first candidate.
"""

from __future__ import annotations

import logging
import warnings
from typing import Hashable, Mapping, Optional, Sequence

from .validation import LaneConflictError

logger = logging.getLogger(__name__)

Ranks = dict[Hashable, int]


class LaneSearchBudgetWarning(UserWarning):
    """Warning issued when the lane search stops exploring alternatives."""

    pass


def lane_changes(
    ranks: Mapping[Hashable, int],
    lane_of: Mapping[Hashable, Hashable],
) -> int:
    """
    Count lane changes between consecutive lane-bearing ranks.

    Ranks without lane members are skipped.

    Raises:
        LaneConflictError: If a rank holds members of more than one lane
    """
    order = _lane_order(lane_of)
    by_rank: dict[int, list[Hashable]] = {}
    for vertex, rank in ranks.items():
        lane = lane_of.get(vertex)
        if lane is None:
            continue
        lanes = by_rank.setdefault(rank, [])
        if lane not in lanes:
            lanes.append(lane)

    changes = 0
    previous: Optional[Hashable] = None
    for rank in sorted(by_rank):
        lanes = by_rank[rank]
        if len(lanes) > 1:
            raise LaneConflictError(rank, sorted(lanes, key=order.__getitem__))
        if previous is not None and lanes[0] != previous:
            changes += 1
        previous = lanes[0]
    return changes


def _lane_order(lane_of: Mapping[Hashable, Hashable]) -> dict[Hashable, int]:
    order: dict[Hashable, int] = {}
    for lane in lane_of.values():
        if lane not in order:
            order[lane] = len(order)
    return order


class LaneConstraintLayering:
    """
    Ranking override enforcing at most one lane per rank.

    Instances are callables taking ``(ranks, edges)`` and returning new
    ranks, which is the shape of the engine's ``rank_hook``. The instance
    holds no state between calls apart from the statistics of the last one.

    Example:
        hook = LaneConstraintLayering({"s": "A", "x": "A", "y": "B", "z": "B"})
        ranks = hook(
            {"s": 0, "x": 1, "y": 1, "z": 2},
            [("s", "x"), ("s", "y"), ("x", "z"), ("y", "z")],
        )
        # {"s": 0, "x": 1, "y": 2, "z": 3}
    """

    def __init__(
        self,
        lane_of: Mapping[Hashable, Hashable],
        max_branches: int = 4096,
    ) -> None:
        """
        Args:
            lane_of: Lane of each lane member; vertices missing from the
                mapping are unconstrained. Lane order is the order in which
                lanes first appear.
            max_branches: Number of candidate branches explored before the
                search falls back to first candidates.
        """
        if max_branches < 1:
            raise ValueError(f"max_branches must be at least 1, got {max_branches}")
        self._lane_of = dict(lane_of)
        self._order = _lane_order(self._lane_of)
        self._max_branches = int(max_branches)

        self._explored = 0
        self._exhausted = False
        self._successors: dict[Hashable, list[Hashable]] = {}

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def lane_of(self) -> dict[Hashable, Hashable]:
        return self._lane_of

    @property
    def max_branches(self) -> int:
        return self._max_branches

    @property
    def explored(self) -> int:
        """Candidate branches explored by the last call."""
        return self._explored

    @property
    def exhausted(self) -> bool:
        """Whether the last call ran out of branch budget."""
        return self._exhausted

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def __call__(
        self,
        ranks: Mapping[Hashable, int],
        edges: Sequence[tuple[Hashable, Hashable]],
    ) -> Ranks:
        self._explored = 0
        self._exhausted = False
        self._successors = {}
        for src, tgt in edges:
            if src != tgt:
                self._successors.setdefault(src, []).append(tgt)

        if not ranks:
            return {}

        _, best = self._search(dict(ranks), min(ranks.values()))

        if self._exhausted:
            warnings.warn(
                f"Lane search stopped after {self._explored} candidate branches; "
                "remaining lane conflicts were resolved with the first lane.",
                LaneSearchBudgetWarning,
                stacklevel=2,
            )

        low = min(best.values())
        result = {vertex: rank - low for vertex, rank in best.items()}
        logger.debug(
            "lane ranking: %d branch(es) explored, %d rank(s)",
            self._explored,
            max(result.values()) + 1,
        )
        return result

    def _search(self, ranks: Ranks, start: int) -> tuple[int, Ranks]:
        conflict = self._next_conflict(ranks, start)
        if conflict is None:
            return lane_changes(ranks, self._lane_of), ranks

        rank, lanes = conflict
        best: Optional[tuple[int, Ranks]] = None
        for lane in lanes:
            if best is not None and self._explored >= self._max_branches:
                self._exhausted = True
                break
            self._explored += 1
            candidate = self._keep_lane(ranks, rank, lane)
            result = self._search(candidate, rank + 1)
            if best is None or result[0] < best[0]:
                best = result

        if best is None:
            raise LaneConflictError(rank, lanes)
        return best

    def _next_conflict(self, ranks: Ranks, start: int) -> Optional[tuple[int, list[Hashable]]]:
        """First rank at or after ``start`` holding several lanes, with its lanes in lane order."""
        by_rank: dict[int, set[Hashable]] = {}
        for vertex, rank in ranks.items():
            lane = self._lane_of.get(vertex)
            if lane is not None and rank >= start:
                by_rank.setdefault(rank, set()).add(lane)

        for rank in sorted(by_rank):
            lanes = by_rank[rank]
            if len(lanes) > 1:
                return rank, sorted(lanes, key=self._order.__getitem__)
        return None

    def _keep_lane(self, ranks: Ranks, rank: int, lane: Hashable) -> Ranks:
        """Move every other lane's member at ``rank`` one rank along the flow."""
        target: Ranks = {}
        for vertex, current in ranks.items():
            if current == rank and self._lane_of.get(vertex, lane) != lane:
                self._push(vertex, rank, ranks, target)

        candidate = dict(ranks)
        candidate.update(target)
        return candidate

    def _push(self, vertex: Hashable, floor: int, ranks: Ranks, target: Ranks) -> None:
        """Place ``vertex`` after ``floor`` and drag its successors along."""
        stack = [(vertex, floor)]
        while stack:
            current, limit = stack.pop()
            if target.get(current, ranks.get(current, 0)) > limit:
                continue
            target[current] = limit + 1
            for successor in self._successors.get(current, ()):
                stack.append((successor, limit + 1))


def resolve_lane_ranks(
    ranks: Mapping[Hashable, int],
    edges: Sequence[tuple[Hashable, Hashable]],
    lane_of: Mapping[Hashable, Hashable],
    max_branches: int = 4096,
) -> Ranks:
    """
    Functional form of ``LaneConstraintLayering``.

    Args:
        ranks: Current rank per vertex (sources lowest)
        edges: Directed edges, all pointing to a higher rank
        lane_of: Lane of each lane member
        max_branches: Search budget

    Returns:
        New ranks with at most one lane per rank, starting at 0.

    Example:
        >>> resolve_lane_ranks({"a": 0, "b": 1, "c": 1}, [("a", "b"), ("a", "c")],
        ...                    {"a": "L1", "b": "L1", "c": "L2"})
        {'a': 0, 'b': 1, 'c': 2}
    """
    return LaneConstraintLayering(lane_of, max_branches)(ranks, edges)


__all__ = [
    "LaneConstraintLayering",
    "LaneSearchBudgetWarning",
    "lane_changes",
    "resolve_lane_ranks",
]
