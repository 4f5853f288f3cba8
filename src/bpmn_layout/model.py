"""
Process model consumed and written by the auto layout.

This is a deliberately small read model of a BPMN definition:

- ElementKind: Closed set of element kinds the layout knows how to size
- FlowElement / SubProcess: Elements of a container (SubProcess nests one)
- SequenceFlow: Directed control flow between two elements
- Lane: Ordered partition of a process's elements
- Process: Top-level container
- GraphicInfo: Diagram interchange (DI) record for a shape or a waypoint
- BpmnModel: Processes plus the DI store the layout writes into
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union


class ElementKind(Enum):
    """Kinds of flow elements handled by the layout."""

    START_EVENT = "startEvent"
    INTERMEDIATE_EVENT = "intermediateEvent"
    BOUNDARY_EVENT = "boundaryEvent"
    END_EVENT = "endEvent"
    TASK = "task"
    CALL_ACTIVITY = "callActivity"
    SUB_PROCESS = "subProcess"
    GATEWAY = "gateway"


@dataclass
class FlowElement:
    """
    A node of a process graph.

    Attributes:
        id: Element id, unique within the model
        kind: Element kind
        name: Optional label text
        attached_to_ref: Id of the activity a boundary event is pinned to
    """

    id: str
    kind: ElementKind
    name: Optional[str] = None
    attached_to_ref: Optional[str] = None


@dataclass
class SequenceFlow:
    """
    Directed control flow between two elements of the same container.

    The id is optional on input; the layout assigns one before use.
    """

    source_ref: str
    target_ref: str
    id: Optional[str] = None
    name: Optional[str] = None


@dataclass
class SubProcess(FlowElement):
    """An activity that owns its own flow elements and sequence flows."""

    kind: ElementKind = ElementKind.SUB_PROCESS
    flow_elements: list[FlowElement] = field(default_factory=list)
    sequence_flows: list[SequenceFlow] = field(default_factory=list)


@dataclass
class Lane:
    """Ordered list of element ids sharing an organizational role."""

    id: str
    flow_references: list[str] = field(default_factory=list)
    name: Optional[str] = None


@dataclass
class Process:
    """A top-level process: the unit the layout runs on."""

    id: str
    flow_elements: list[FlowElement] = field(default_factory=list)
    sequence_flows: list[SequenceFlow] = field(default_factory=list)
    lanes: list[Lane] = field(default_factory=list)
    name: Optional[str] = None


FlowElementsContainer = Union[Process, SubProcess]
"""Anything that owns flow elements and sequence flows."""


@dataclass
class GraphicInfo:
    """
    Diagram interchange record.

    For shapes, (x, y) is the top-left corner. For waypoints only x and y
    are meaningful.
    """

    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    expanded: Optional[bool] = None
    element_id: Optional[str] = None

    def translate(self, dx: float, dy: float) -> GraphicInfo:
        """Return a copy moved by (dx, dy)."""
        return GraphicInfo(
            x=self.x + dx,
            y=self.y + dy,
            width=self.width,
            height=self.height,
            expanded=self.expanded,
            element_id=self.element_id,
        )

    def __repr__(self) -> str:
        return (
            f"GraphicInfo({self.element_id!r}, x={self.x:.2f}, y={self.y:.2f}, "
            f"w={self.width:.2f}, h={self.height:.2f})"
        )


@dataclass
class BpmnModel:
    """
    Processes plus the diagram interchange store.

    Attributes:
        processes: Top-level processes, laid out independently
        location_map: Shape DI by element (or lane) id
        flow_location_map: Waypoint DI by sequence flow id
    """

    processes: list[Process] = field(default_factory=list)
    location_map: dict[str, GraphicInfo] = field(default_factory=dict)
    flow_location_map: dict[str, list[GraphicInfo]] = field(default_factory=dict)

    def clear_di(self) -> None:
        """Drop every stored shape and waypoint."""
        self.location_map.clear()
        self.flow_location_map.clear()

    def add_graphic_info(self, element_id: str, graphic_info: GraphicInfo) -> None:
        self.location_map[element_id] = graphic_info

    def add_flow_graphic_info_list(self, flow_id: str, waypoints: list[GraphicInfo]) -> None:
        self.flow_location_map[flow_id] = waypoints

    def get_graphic_info(self, element_id: str) -> Optional[GraphicInfo]:
        return self.location_map.get(element_id)

    def get_flow_graphic_info(self, flow_id: str) -> list[GraphicInfo]:
        return self.flow_location_map.get(flow_id, [])

    def iter_flow_elements(self) -> Iterator[FlowElement]:
        """Yield every flow element of every process, nested ones included."""
        for process in self.processes:
            yield from _iter_container(process)

    def iter_sequence_flows(self) -> Iterator[SequenceFlow]:
        """Yield every sequence flow of every process, nested ones included."""
        for process in self.processes:
            yield from _iter_container_flows(process)


def _iter_container(container: FlowElementsContainer) -> Iterator[FlowElement]:
    for element in container.flow_elements:
        yield element
        if isinstance(element, SubProcess):
            yield from _iter_container(element)


def _iter_container_flows(container: FlowElementsContainer) -> Iterator[SequenceFlow]:
    yield from container.sequence_flows
    for element in container.flow_elements:
        if isinstance(element, SubProcess):
            yield from _iter_container_flows(element)


def container_lanes(container: FlowElementsContainer) -> list[Lane]:
    """Lanes of a container; only processes carry lanes."""
    if isinstance(container, Process):
        return container.lanes
    return []


__all__ = [
    "ElementKind",
    "FlowElement",
    "SequenceFlow",
    "SubProcess",
    "Lane",
    "Process",
    "FlowElementsContainer",
    "GraphicInfo",
    "BpmnModel",
    "container_lanes",
]
