"""Tests for SVG export."""

import xml.etree.ElementTree as ET

from bpmn_layout import BpmnAutoLayout, BpmnModel, Process
from bpmn_layout.export import to_svg

SVG_NS = "{http://www.w3.org/2000/svg}"


class TestSvgExport:
    """Tests for to_svg."""

    def test_valid_xml(self, gateway_model):
        BpmnAutoLayout(gateway_model).execute()
        root = ET.fromstring(to_svg(gateway_model))
        assert root.tag == f"{SVG_NS}svg"

    def test_shapes_by_kind(self, gateway_model):
        """Events are circles, gateways diamonds, tasks rounded boxes."""
        BpmnAutoLayout(gateway_model).execute()
        root = ET.fromstring(to_svg(gateway_model))
        by_id = {el.get("id"): el.tag for el in root.iter() if el.get("id")}
        assert by_id["start"] == f"{SVG_NS}circle"
        assert by_id["end"] == f"{SVG_NS}circle"
        assert by_id["gw"] == f"{SVG_NS}polygon"
        assert by_id["A"] == f"{SVG_NS}rect"

    def test_one_polyline_per_flow(self, gateway_model):
        BpmnAutoLayout(gateway_model).execute()
        root = ET.fromstring(to_svg(gateway_model))
        assert len(list(root.iter(f"{SVG_NS}polyline"))) == 6

    def test_labels(self, gateway_model):
        BpmnAutoLayout(gateway_model).execute()
        svg = to_svg(gateway_model)
        assert "Receive order" in svg
        assert "Receive order" not in to_svg(gateway_model, show_labels=False)

    def test_labels_escaped(self, gateway_model):
        gateway_model.processes[0].flow_elements[1].name = "Check <stock> & ship"
        BpmnAutoLayout(gateway_model).execute()
        svg = to_svg(gateway_model)
        assert "&lt;stock&gt; &amp;" in svg
        ET.fromstring(svg)

    def test_lanes_drawn(self, laned_process):
        model = BpmnModel([laned_process])
        BpmnAutoLayout(model, lanes_as_groups=True).execute()
        root = ET.fromstring(to_svg(model))
        lanes = root.find(f"{SVG_NS}g[@class='lanes']")
        assert len(list(lanes)) == 2

    def test_background(self, gateway_model):
        BpmnAutoLayout(gateway_model).execute()
        assert 'fill="#fafafa"' in to_svg(gateway_model, background="#fafafa")

    def test_model_without_di(self):
        """A model that was never laid out gives an empty drawing."""
        svg = to_svg(BpmnModel([Process("p")]))
        root = ET.fromstring(svg)
        assert root.get("width") == "100.0"
