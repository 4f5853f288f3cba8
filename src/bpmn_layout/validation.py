"""
Errors and input validation.

Two families of exceptions:

- LayoutError: fatal failures while laying out a process. Each carries the
  id of the offending element or flow so callers can point at the broken
  diagram element.
- ValidationError: malformed input detected up front, by the engine or by
  ``validate_model``.
"""

from __future__ import annotations

from typing import Any, Hashable, Optional, Sequence

from .model import BpmnModel, ElementKind, FlowElementsContainer, SubProcess, container_lanes


class LayoutError(Exception):
    """Base exception for fatal layout failures."""

    def __init__(self, message: str, element_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.element_id = element_id


class UnresolvedAttachmentError(LayoutError):
    """Raised when a boundary event has no resolvable attached activity."""

    pass


class LaneConflictError(LayoutError):
    """Raised when a rank still holds more than one lane after lane resolution."""

    def __init__(self, rank: int, lanes: Sequence[Hashable]) -> None:
        names = ", ".join(str(lane) for lane in lanes)
        super().__init__(f"Ambiguous lane for rank {rank}: {names}")
        self.rank = rank
        self.lanes = list(lanes)


class BoundaryIntersectionError(LayoutError):
    """Raised when the edge of a boundary event cannot be clipped to its circle."""

    pass


class DanglingFlowError(LayoutError):
    """Raised when a sequence flow references an element that was not laid out."""

    def __init__(self, flow_id: Optional[str], missing_ref: Optional[str]) -> None:
        super().__init__(
            f"Sequence flow '{flow_id}' references unknown element '{missing_ref}'",
            element_id=flow_id,
        )
        self.missing_ref = missing_ref


class NestingDepthError(LayoutError):
    """Raised when sub-processes are nested deeper than the configured limit."""

    pass


class ValidationError(ValueError):
    """Base exception for input validation errors."""

    pass


class InvalidLinkError(ValidationError):
    """Raised when a link references invalid nodes."""

    pass


class InvalidModelError(ValidationError):
    """Raised by ``validate_model`` when the model is not referentially sound."""

    def __init__(self, issues: list[tuple[str, str]]) -> None:
        msg = "Invalid process model:\n" + "\n".join(issue[1] for issue in issues)
        super().__init__(msg)
        self.issues = issues


def validate_link_indices(
    links: Sequence[Any],
    node_count: int,
    strict: bool = True,
) -> list[tuple[int, str]]:
    """
    Validate that all link source/target indices are within bounds.

    Args:
        links: Sequence of Link objects or dicts with source/target
        node_count: Number of nodes in the graph
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (link_index, issue_description) tuples

    Raises:
        InvalidLinkError: If strict=True and invalid links found
    """
    issues: list[tuple[int, str]] = []

    for i, link in enumerate(links):
        for attr in ("source", "target"):
            idx = _get_index(link, attr)
            if idx is None:
                issues.append((i, f"Link {i}: {attr} is None"))
            elif idx < 0 or idx >= node_count:
                issues.append(
                    (i, f"Link {i}: {attr} index {idx} out of bounds [0, {node_count})")
                )

    if strict and issues:
        msg = "Invalid link indices:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidLinkError(msg)

    return issues


def validate_model(model: BpmnModel, strict: bool = True) -> list[tuple[str, str]]:
    """
    Check the referential integrity of a model before layout.

    Reports duplicate ids, sequence flows whose ends do not resolve within
    their container, boundary events without a resolvable activity, and
    elements listed in more than one lane.

    Args:
        model: The model to check
        strict: If True, raises on the first run with issues

    Returns:
        List of (element_id, issue_description) tuples

    Raises:
        InvalidModelError: If strict=True and issues were found
    """
    issues: list[tuple[str, str]] = []
    seen: set[str] = set()

    for element in model.iter_flow_elements():
        if element.id in seen:
            issues.append((element.id, f"Duplicate element id '{element.id}'"))
        seen.add(element.id)

    for process in model.processes:
        _validate_container(process, issues)

        lane_of: dict[str, str] = {}
        for lane in container_lanes(process):
            for ref in lane.flow_references:
                if ref in lane_of and lane_of[ref] != lane.id:
                    issues.append(
                        (ref, f"Element '{ref}' is in lanes '{lane_of[ref]}' and '{lane.id}'")
                    )
                else:
                    lane_of[ref] = lane.id

    if strict and issues:
        raise InvalidModelError(issues)

    return issues


def _validate_container(container: FlowElementsContainer, issues: list[tuple[str, str]]) -> None:
    by_id = {element.id: element for element in container.flow_elements}

    for element in container.flow_elements:
        if element.kind is ElementKind.BOUNDARY_EVENT:
            attached = by_id.get(element.attached_to_ref or "")
            if attached is None or attached.kind is ElementKind.BOUNDARY_EVENT:
                issues.append(
                    (element.id, f"Boundary event '{element.id}' has no attached activity")
                )
        if isinstance(element, SubProcess):
            _validate_container(element, issues)

    for flow in container.sequence_flows:
        flow_name = flow.id or f"{flow.source_ref}->{flow.target_ref}"
        for ref in (flow.source_ref, flow.target_ref):
            if ref not in by_id:
                issues.append(
                    (flow_name, f"Sequence flow '{flow_name}' references unknown element '{ref}'")
                )


def _get_index(obj: Any, attr: str) -> Optional[int]:
    """Extract index from int, Node, or object with index attribute."""
    if isinstance(obj, dict):
        val = obj.get(attr)
    else:
        val = getattr(obj, attr, None)

    if val is None:
        return None
    if isinstance(val, int):
        return val
    if getattr(val, "index", None) is not None:
        return int(val.index)
    return None


__all__ = [
    "LayoutError",
    "UnresolvedAttachmentError",
    "LaneConflictError",
    "BoundaryIntersectionError",
    "DanglingFlowError",
    "NestingDepthError",
    "ValidationError",
    "InvalidLinkError",
    "InvalidModelError",
    "validate_link_indices",
    "validate_model",
]
