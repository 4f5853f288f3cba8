"""
Orthogonal edge routing.

Routes edges between already placed boxes using only horizontal and
vertical segments. Each edge may carry an ``EdgeStyle`` choosing how it is
drawn and where it leaves and enters its shapes:

- ORTHOGONAL: detours around other shapes
- ELBOW / SEGMENT: drawn straight between the chosen ports
"""

from .edge_routing import (
    assign_ports,
    determine_port_sides,
    nudge_overlapping_segments,
    resolve_port_sides,
    route_edge,
    route_self_loop,
    route_styled_edges,
)
from .types import Anchor, EdgeStyle, NodeBox, Port, RoutedEdge, RoutingStyle, Side

__all__ = [
    # Types
    "Anchor",
    "EdgeStyle",
    "NodeBox",
    "Port",
    "RoutedEdge",
    "RoutingStyle",
    "Side",
    # Routing
    "assign_ports",
    "determine_port_sides",
    "nudge_overlapping_segments",
    "resolve_port_sides",
    "route_edge",
    "route_self_loop",
    "route_styled_edges",
]
