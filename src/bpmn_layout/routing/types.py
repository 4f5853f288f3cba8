"""
Type definitions for style-driven edge routing.

Provides the boxes edges are routed between, the ports they attach to, and
the routing hints (style and anchors) carried by each edge.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..types import Point


class Side(Enum):
    """Side of a node where edges can connect."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    def opposite(self) -> Side:
        """Get the opposite side."""
        opposites = {
            Side.NORTH: Side.SOUTH,
            Side.SOUTH: Side.NORTH,
            Side.EAST: Side.WEST,
            Side.WEST: Side.EAST,
        }
        return opposites[self]

    def is_horizontal(self) -> bool:
        """Check if this side is on a horizontal edge of the node."""
        return self in (Side.NORTH, Side.SOUTH)

    def outward(self, amount: float = 1.0) -> Point:
        """Offset that moves a point ``amount`` away from the node through this side."""
        if self is Side.NORTH:
            return (0.0, -amount)
        elif self is Side.SOUTH:
            return (0.0, amount)
        elif self is Side.EAST:
            return (amount, 0.0)
        else:  # WEST
            return (-amount, 0.0)


class RoutingStyle(Enum):
    """
    How an edge is drawn between its ports.

    - ORTHOGONAL: axis-aligned segments, detouring around other shapes
    - ELBOW: axis-aligned segments with a single elbow where possible
    - SEGMENT: axis-aligned segments straight between the ports
    """

    ORTHOGONAL = "orthogonal"
    ELBOW = "elbow"
    SEGMENT = "segment"


@dataclass(frozen=True)
class Anchor:
    """
    Relative attachment point on a shape.

    Coordinates run from 0 to 1 across the shape's bounding box; ``None``
    leaves that coordinate to the router. ``Anchor(None, 1)`` means
    "somewhere on the bottom side", ``Anchor(0.5, 1)`` the bottom centre.
    """

    x: Optional[float] = None
    y: Optional[float] = None

    def side(self) -> Optional[tuple[Side, Optional[float]]]:
        """
        Side of the shape this anchor pins, with the position along it.

        Returns None when the anchor does not lie on the border.
        """
        if self.y == 0:
            return (Side.NORTH, self.x)
        if self.y == 1:
            return (Side.SOUTH, self.x)
        if self.x == 0:
            return (Side.WEST, self.y)
        if self.x == 1:
            return (Side.EAST, self.y)
        return None


@dataclass(frozen=True)
class EdgeStyle:
    """Routing style plus optional exit and entry anchors."""

    routing: RoutingStyle = RoutingStyle.ORTHOGONAL
    exit: Optional[Anchor] = None
    entry: Optional[Anchor] = None


@dataclass
class Port:
    """
    A connection point on a node side.

    Multiple edges can share a side but have different ports.
    """

    node: int  # Node index
    side: Side  # Which side of the node
    position: float = 0.5  # Position along side (0.0 to 1.0)
    edge: Optional[int] = None  # Edge index using this port

    def __hash__(self) -> int:
        return hash((self.node, self.side, self.position, self.edge))


@dataclass
class NodeBox:
    """
    A node represented as a box for routing.

    Edges attach to the box sides; ellipses and rhombi only at the side
    midpoints, where their outline touches the box.
    """

    index: int
    x: float  # Center x
    y: float  # Center y
    width: float
    height: float
    shape: str = "rectangle"

    @property
    def left(self) -> float:
        """Left edge x coordinate."""
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        """Right edge x coordinate."""
        return self.x + self.width / 2

    @property
    def top(self) -> float:
        """Top edge y coordinate."""
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        """Bottom edge y coordinate."""
        return self.y + self.height / 2

    def get_port_position(self, side: Side, offset: float = 0.5) -> Point:
        """
        Get the (x, y) position of a port on this node.

        Args:
            side: Which side of the node
            offset: Position along the side (0.0 to 1.0)

        Returns:
            (x, y) coordinates of the port
        """
        if side == Side.NORTH:
            return (self.left + self.width * offset, self.top)
        elif side == Side.SOUTH:
            return (self.left + self.width * offset, self.bottom)
        elif side == Side.WEST:
            return (self.left, self.top + self.height * offset)
        else:  # EAST
            return (self.right, self.top + self.height * offset)


@dataclass
class RoutedEdge:
    """
    A routed edge: ports on both ends and the bends in between.
    """

    source: int  # Source node index
    target: int  # Target node index
    source_port: Port
    target_port: Port
    start: Point
    end: Point
    bends: list[Point] = field(default_factory=list)

    @property
    def points(self) -> list[Point]:
        """Full polyline from the source port to the target port."""
        return [self.start, *self.bends, self.end]


__all__ = [
    "Side",
    "RoutingStyle",
    "Anchor",
    "EdgeStyle",
    "Port",
    "NodeBox",
    "RoutedEdge",
]
