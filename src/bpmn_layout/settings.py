"""
Layout configuration.

All knobs of the auto layout live on one immutable ``LayoutSettings``
value. Sizes are in diagram units (pixels in most modelers).
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Union

from .types import Orientation


@dataclass(frozen=True)
class LayoutSettings:
    """
    Immutable layout configuration.

    Attributes:
        event_size: Diameter of start, intermediate, end and boundary events
        gateway_size: Side of the gateway diamond's bounding box
        task_width: Minimum task width
        task_height: Minimum task height
        subprocess_margin: Padding between a sub-process border and its content
        orientation: Direction of the flow
        lanes_as_groups: Draw each lane as its own band
        intra_cell_spacing: Gap between shapes of the same rank
        inter_rank_spacing: Gap between consecutive ranks
        parent_border: Margin around a laid-out container
        fine_tuning: Pull shapes towards their neighbours after packing
        edge_separation: Gap between parallel edge segments
        label_wrap_width: Characters per label line
        max_depth: Deepest allowed sub-process nesting
        max_lane_branches: Candidate budget of the lane search
    """

    event_size: float = 30.0
    gateway_size: float = 40.0
    task_width: float = 100.0
    task_height: float = 60.0
    subprocess_margin: float = 20.0
    orientation: Orientation = Orientation.TOP_DOWN
    lanes_as_groups: bool = False
    intra_cell_spacing: float = 100.0
    inter_rank_spacing: float = 80.0
    parent_border: float = 20.0
    fine_tuning: bool = True
    edge_separation: float = 15.0
    label_wrap_width: int = 22
    max_depth: int = 32
    max_lane_branches: int = 4096

    def __post_init__(self) -> None:
        # Accept the plain string form of the orientation
        object.__setattr__(self, "orientation", Orientation(self.orientation))

        for name in ("event_size", "gateway_size", "task_width", "task_height"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in (
            "subprocess_margin",
            "intra_cell_spacing",
            "inter_rank_spacing",
            "parent_border",
            "edge_separation",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        for name in ("label_wrap_width", "max_depth", "max_lane_branches"):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")

    def with_options(self, **options: Any) -> LayoutSettings:
        """
        Return a copy with some fields replaced.

        Raises:
            TypeError: If an option does not name a setting
            ValueError: If a new value is invalid
        """
        _check_names(options)
        return replace(self, **options)

    @classmethod
    def from_options(cls, **options: Any) -> LayoutSettings:
        """Build settings from keyword options, rejecting unknown names."""
        _check_names(options)
        return cls(**options)


def _check_names(options: dict[str, Any]) -> None:
    known = {f.name for f in fields(LayoutSettings)}
    unknown = sorted(set(options) - known)
    if unknown:
        raise TypeError(f"Unknown layout option(s): {', '.join(unknown)}")


OrientationLike = Union[Orientation, str]


__all__ = [
    "LayoutSettings",
    "Orientation",
    "OrientationLike",
]
