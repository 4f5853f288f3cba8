"""
Common types for the hierarchical layout engine.

This module provides the fundamental types the engine works on:
- Orientation: Direction in which ranks are stacked
- Node: Sized vertex with position and rank
- Link: Directed edge between two nodes, optionally carrying routing hints
- EventType: Layout lifecycle events
- Event: Event payload for callbacks
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Callable, Optional, Sequence, TypedDict, Union

Point = tuple[float, float]
"""An (x, y) coordinate."""


class Orientation(str, Enum):
    """
    Direction in which ranks are stacked.

    - TOP_DOWN: rank 0 at the top, flow downwards
    - LEFT_RIGHT: rank 0 on the left, flow to the right
    """

    TOP_DOWN = "top-to-bottom"
    LEFT_RIGHT = "left-to-right"

    @property
    def is_vertical(self) -> bool:
        """True when ranks are stacked along the y axis."""
        return self is Orientation.TOP_DOWN


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Layout has begun
    - end: Layout has finished
    """

    start = 0
    end = 1


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType


class Node:
    """
    Sized graph vertex.

    Attributes:
        index: Index in nodes array (set by layout)
        x: X coordinate of the centre
        y: Y coordinate of the centre
        width: Box width
        height: Box height
        rank: Layer assigned by the layout
        shape: "rectangle", "ellipse" or "rhombus"; non-rectangular shapes
            only attach edges at side midpoints
    """

    def __init__(self, **kwargs: Any) -> None:
        """Initialize node with optional properties."""
        self.index: Optional[int] = kwargs.get("index")
        self.x: float = kwargs.get("x", 0.0)
        self.y: float = kwargs.get("y", 0.0)
        self.width: float = float(kwargs.get("width", 0.0))
        self.height: float = float(kwargs.get("height", 0.0))
        self.rank: Optional[int] = kwargs.get("rank")
        self.shape: str = kwargs.get("shape", "rectangle")

        # Copy any additional custom properties (e.g. the BPMN id)
        for key, value in kwargs.items():
            if not hasattr(self, key):
                setattr(self, key, value)

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    def __repr__(self) -> str:
        return f"Node(index={self.index}, rank={self.rank}, x={self.x:.2f}, y={self.y:.2f})"


class Link:
    """
    Directed edge between two nodes.

    Attributes:
        source: Source node index
        target: Target node index
        style: Optional routing hint (an ``EdgeStyle``)
        stub: Minimum length of the first segment leaving the source
    """

    def __init__(
        self,
        source: Union[Node, int],
        target: Union[Node, int],
        style: Optional[Any] = None,
        stub: float = 0.0,
        **kwargs: Any,
    ) -> None:
        """
        Initialize link between two nodes.

        Args:
            source: Source node or node index (required)
            target: Target node or node index (required)
            style: Routing hint
            stub: Minimum first segment length

        Raises:
            ValueError: If source or target is None
        """
        if source is None:
            raise ValueError("Link source cannot be None")
        if target is None:
            raise ValueError("Link target cannot be None")

        self.source = source
        self.target = target
        self.style = style
        self.stub = float(stub)

        for key, value in kwargs.items():
            if not hasattr(self, key):
                setattr(self, key, value)

    def __repr__(self) -> str:
        src = self.source if isinstance(self.source, int) else self.source.index
        tgt = self.target if isinstance(self.target, int) else self.target.index
        return f"Link({src} -> {tgt})"


# Type aliases for Pythonic API
NodeLike = Union[Node, dict[str, Any], Any]
"""Input type for nodes: Node objects, dicts, or objects with node attributes."""

LinkLike = Union[Link, dict[str, Any], Any]
"""Input type for links: Link objects, dicts, or objects with source/target."""

RankHook = Callable[[dict[int, int], Sequence[tuple[int, int]]], dict[int, int]]
"""Ranking override: (ranks by node index, acyclic edges) -> new ranks."""


__all__ = [
    "Point",
    "Orientation",
    "EventType",
    "Event",
    "Node",
    "Link",
    "NodeLike",
    "LinkLike",
    "RankHook",
]
