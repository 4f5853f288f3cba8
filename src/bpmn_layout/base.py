"""
Base classes for layout engines.

A layout engine owns a list of sized boxes (``Node``) and the directed
connections between them (``Link``). ``StaticLayout`` engines compute
everything in one ``run()`` call; the layered engine used for BPMN
containers is one of them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence, Union

if TYPE_CHECKING:
    from typing_extensions import Self

from .types import Event, EventType, Link, LinkLike, Node, NodeLike
from .validation import validate_link_indices

EventCallback = Callable[[Optional[Event]], None]

_NODE_FIELDS = ("index", "x", "y", "width", "height", "shape")


def _coerce_node(data: NodeLike) -> Node:
    if isinstance(data, Node):
        return data
    if isinstance(data, dict):
        return Node(**data)
    # Duck-typed box: copy whatever geometry it exposes
    node = Node()
    for name in _NODE_FIELDS:
        if hasattr(data, name):
            setattr(node, name, getattr(data, name))
    return node


def _coerce_link(data: LinkLike) -> Link:
    if isinstance(data, Link):
        return data
    if isinstance(data, dict):
        return Link(**data)
    return Link(
        getattr(data, "source", 0),
        getattr(data, "target", 0),
        getattr(data, "style", None),
        getattr(data, "stub", 0.0),
    )


def _endpoint_index(end: Union[int, Node]) -> int:
    if isinstance(end, int):
        return end
    return end.index if end.index is not None else 0


class BaseLayout(ABC):
    """
    Abstract base class for layout engines.

    Holds the boxes and connections, the start/end callbacks and the link
    check that every engine runs before computing.

    Example:
        layout = SomeLayout(
            nodes=[{"width": 100, "height": 80}, {"width": 36, "height": 36}],
            links=[{"source": 0, "target": 1}],
        )
        layout.run()
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        links: Optional[Sequence[LinkLike]] = None,
        on_start: Optional[EventCallback] = None,
        on_end: Optional[EventCallback] = None,
    ) -> None:
        self._nodes: list[Node] = [] if nodes is None else [_coerce_node(n) for n in nodes]
        self._links: list[Link] = [] if links is None else [_coerce_link(lk) for lk in links]
        self._events: dict[EventType, EventCallback] = {}
        if on_start:
            self._events[EventType.start] = on_start
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> list[Node]:
        """Boxes being laid out, in input order."""
        return self._nodes

    @nodes.setter
    def nodes(self, value: Sequence[NodeLike]) -> None:
        self._nodes = [_coerce_node(n) for n in value]

    @property
    def links(self) -> list[Link]:
        """Directed connections between boxes."""
        return self._links

    @links.setter
    def links(self, value: Sequence[LinkLike]) -> None:
        self._links = [_coerce_link(lk) for lk in value]

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def on(self, event: Union[EventType, str], callback: EventCallback) -> Self:
        """Register ``callback`` for ``event`` (enum member or its name)."""
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        callback = self._events.get(event.get("type"))  # type: ignore[arg-type]
        if callback is not None:
            callback(event)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def validate(self) -> Self:
        """
        Check that every link points at an existing node.

        Raises:
            InvalidLinkError: If a link index is out of range.
        """
        if self._links:
            validate_link_indices(self._links, len(self._nodes), strict=True)
        return self

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """Run the layout and return self."""

    def _edge_pairs(self) -> list[tuple[int, int]]:
        """(source, target) node indices for every link, in link order."""
        return [(_endpoint_index(lk.source), _endpoint_index(lk.target)) for lk in self._links]


class StaticLayout(BaseLayout):
    """
    Base class for single-pass layouts.

    Subclasses implement ``_compute``; ``run`` numbers the nodes, validates
    the links and fires the start and end events around it.
    """

    def run(self, **kwargs: Any) -> Self:
        for i, node in enumerate(self._nodes):
            if node.index is None:
                node.index = i
        self.validate()
        self.trigger({"type": EventType.start})
        self._compute(**kwargs)
        self.trigger({"type": EventType.end})
        return self

    @abstractmethod
    def _compute(self, **kwargs: Any) -> None:
        """Compute node positions."""


__all__ = [
    "BaseLayout",
    "StaticLayout",
]
