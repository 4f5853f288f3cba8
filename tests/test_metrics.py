"""Tests for layout quality metrics."""

import pytest
from conftest import boundary, flow, start, task

from bpmn_layout import (
    BpmnAutoLayout,
    BpmnModel,
    GraphicInfo,
    Process,
    bend_count,
    edge_crossings,
    layout_quality_summary,
    non_orthogonal_segments,
    shape_overlaps,
    total_edge_length,
)


def model_with_routes(routes):
    """Model with one flow per route between distinct dummy elements."""
    elements = []
    flows = []
    for i in range(len(routes)):
        elements += [task(f"s{i}"), task(f"t{i}")]
        flows.append(flow(f"s{i}", f"t{i}", f"f{i}"))
    model = BpmnModel([Process("p", flow_elements=elements, sequence_flows=flows)])
    for i, route in enumerate(routes):
        model.add_flow_graphic_info_list(f"f{i}", [GraphicInfo(x, y) for x, y in route])
    return model


class TestEdgeCrossings:
    def test_crossing(self):
        model = model_with_routes([[(0, 50), (100, 50)], [(50, 0), (50, 100)]])
        assert edge_crossings(model) == 1

    def test_parallel(self):
        model = model_with_routes([[(0, 0), (100, 0)], [(0, 50), (100, 50)]])
        assert edge_crossings(model) == 0

    def test_shared_endpoint_ignored(self):
        """Flows meeting at an element do not count as crossing."""
        process = Process(
            "p",
            flow_elements=[task("a"), task("b"), task("c")],
            sequence_flows=[flow("a", "b", "f1"), flow("c", "b", "f2")],
        )
        model = BpmnModel([process])
        model.add_flow_graphic_info_list("f1", [GraphicInfo(0, 50), GraphicInfo(100, 50)])
        model.add_flow_graphic_info_list("f2", [GraphicInfo(50, 0), GraphicInfo(50, 100)])
        assert edge_crossings(model) == 0


class TestShapeOverlaps:
    def test_overlap(self):
        model = model_with_routes([])
        model.processes[0].flow_elements += [task("a"), task("b")]
        model.add_graphic_info("a", GraphicInfo(0, 0, 100, 60))
        model.add_graphic_info("b", GraphicInfo(50, 30, 100, 60))
        assert shape_overlaps(model) == 1

    def test_touching_is_not_overlap(self):
        model = model_with_routes([])
        model.processes[0].flow_elements += [task("a"), task("b")]
        model.add_graphic_info("a", GraphicInfo(0, 0, 100, 60))
        model.add_graphic_info("b", GraphicInfo(100, 0, 100, 60))
        assert shape_overlaps(model) == 0

    def test_boundary_events_skipped(self):
        model = model_with_routes([])
        model.processes[0].flow_elements += [task("a"), boundary("b", "a")]
        model.add_graphic_info("a", GraphicInfo(0, 0, 100, 60))
        model.add_graphic_info("b", GraphicInfo(35, 45, 30, 30))
        assert shape_overlaps(model) == 0


class TestRouteMetrics:
    def test_bends(self):
        model = model_with_routes([[(0, 0), (0, 50), (100, 50)], [(0, 0), (10, 0)]])
        assert bend_count(model) == 1

    def test_non_orthogonal(self):
        model = model_with_routes([[(0, 0), (30, 40)], [(0, 0), (0, 10)]])
        assert non_orthogonal_segments(model) == 1

    def test_total_length(self):
        model = model_with_routes([[(0, 0), (30, 40)], [(0, 0), (0, 10), (5, 10)]])
        assert total_edge_length(model) == pytest.approx(65)


class TestSummary:
    def test_summary_of_layout(self, gateway_model):
        BpmnAutoLayout(gateway_model).execute()
        summary = layout_quality_summary(gateway_model)
        assert set(summary) == {
            "edge_crossings",
            "shape_overlaps",
            "bends",
            "non_orthogonal_segments",
            "total_edge_length",
        }
        assert summary["shape_overlaps"] == 0
        assert summary["non_orthogonal_segments"] == 0
        assert summary["total_edge_length"] > 0

    def test_empty_model(self):
        summary = layout_quality_summary(BpmnModel([Process("p", flow_elements=[start("s")])]))
        assert summary["edge_crossings"] == 0
        assert summary["total_edge_length"] == 0
