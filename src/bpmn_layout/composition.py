"""
Sub-process composition.

A sub-process is laid out on its own, as if it were a top-level process,
and the result is then embedded in its parent: the sub-process vertex is
sized to the child drawing plus a margin, and every child shape and
waypoint is moved into the parent's coordinate space once the parent has
placed the sub-process.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .model import GraphicInfo


@dataclass
class ContainerLayout:
    """
    Layout result of one container (process or sub-process).

    Coordinates are relative to the container's own origin. Nested results
    are already folded in, so ``shapes`` and ``waypoints`` cover every
    descendant element and flow.

    Attributes:
        shapes: Shape DI by element id (lanes included when drawn)
        waypoints: Waypoint DI by sequence flow id
        width: Extent of the drawing along x
        height: Extent of the drawing along y
    """

    shapes: dict[str, GraphicInfo] = field(default_factory=dict)
    waypoints: dict[str, list[GraphicInfo]] = field(default_factory=dict)
    width: float = 0.0
    height: float = 0.0

    def translated(self, dx: float, dy: float) -> ContainerLayout:
        """Return a copy with every shape and waypoint moved by (dx, dy)."""
        return ContainerLayout(
            shapes={key: info.translate(dx, dy) for key, info in self.shapes.items()},
            waypoints={
                key: [point.translate(dx, dy) for point in points]
                for key, points in self.waypoints.items()
            },
            width=self.width,
            height=self.height,
        )

    def merge(self, other: ContainerLayout) -> None:
        """Add the shapes and waypoints of ``other`` to this result."""
        self.shapes.update(other.shapes)
        self.waypoints.update(other.waypoints)


def subprocess_vertex_size(child: ContainerLayout, margin: float) -> tuple[float, float]:
    """Size of the vertex that embeds ``child`` with ``margin`` on every side."""
    return (child.width + 2 * margin, child.height + 2 * margin)


def compose_subprocess(
    child: ContainerLayout,
    x: float,
    y: float,
    margin: float,
) -> ContainerLayout:
    """
    Move a child layout into parent space.

    Args:
        child: Child result, normalised to its own origin
        x: Left of the sub-process shape in the parent
        y: Top of the sub-process shape in the parent
        margin: Padding between the sub-process border and its content

    Returns:
        The child result translated by (x + margin, y + margin).

    Example:
        >>> child = ContainerLayout(shapes={"a": GraphicInfo(0, 0, 30, 30)})
        >>> compose_subprocess(child, 50, 50, 20).shapes["a"].x
        70
    """
    return child.translated(x + margin, y + margin)


__all__ = [
    "ContainerLayout",
    "subprocess_vertex_size",
    "compose_subprocess",
]
