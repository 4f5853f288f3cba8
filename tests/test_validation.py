"""Tests for errors and input validation."""

import pytest
from conftest import boundary, end, flow, start, task

from bpmn_layout import (
    BpmnModel,
    DanglingFlowError,
    InvalidLinkError,
    InvalidModelError,
    Lane,
    LaneConflictError,
    LayoutError,
    Link,
    Node,
    Process,
    SubProcess,
    ValidationError,
    validate_model,
)
from bpmn_layout.validation import validate_link_indices


class TestLinkValidation:
    """Tests for link index validation."""

    def test_valid_links(self):
        """Valid indices return an empty list."""
        links = [Link(0, 1), Link(1, 2)]
        assert validate_link_indices(links, 3) == []

    def test_out_of_bounds_raises(self):
        with pytest.raises(InvalidLinkError, match="out of bounds"):
            validate_link_indices([{"source": 0, "target": 5}], 3)

    def test_negative_index(self):
        issues = validate_link_indices([{"source": -1, "target": 0}], 3, strict=False)
        assert len(issues) == 1

    def test_node_references(self):
        """Links may reference Node objects with an index."""
        a, b = Node(index=0), Node(index=1)
        assert validate_link_indices([Link(a, b)], 2) == []

    def test_missing_source_reported(self):
        issues = validate_link_indices([{"target": 0}], 1, strict=False)
        assert issues == [(0, "Link 0: source is None")]

    def test_is_value_error(self):
        """Validation errors can be caught as ValueError."""
        assert issubclass(InvalidLinkError, ValidationError)
        assert issubclass(ValidationError, ValueError)


class TestLayoutErrors:
    """Tests for fatal layout errors."""

    def test_element_id_carried(self):
        error = LayoutError("broken", element_id="task1")
        assert error.element_id == "task1"
        assert str(error) == "broken"

    def test_dangling_flow(self):
        error = DanglingFlowError("f1", "ghost")
        assert error.element_id == "f1"
        assert "ghost" in str(error)

    def test_lane_conflict(self):
        error = LaneConflictError(3, ["A", "B"])
        assert isinstance(error, LayoutError)
        assert error.rank == 3
        assert str(error) == "Ambiguous lane for rank 3: A, B"


class TestValidateModel:
    """Tests for model integrity checks."""

    def test_valid_model(self, gateway_model):
        assert validate_model(gateway_model) == []

    def test_dangling_flow_reported(self):
        process = Process("p", flow_elements=[start("s")], sequence_flows=[flow("s", "x", "f1")])
        issues = validate_model(BpmnModel([process]), strict=False)
        assert issues == [("f1", "Sequence flow 'f1' references unknown element 'x'")]

    def test_strict_raises(self):
        process = Process("p", flow_elements=[start("s")], sequence_flows=[flow("s", "x")])
        with pytest.raises(InvalidModelError) as exc_info:
            validate_model(BpmnModel([process]))
        assert len(exc_info.value.issues) == 1

    def test_duplicate_ids(self):
        process = Process("p", flow_elements=[task("t"), task("t")])
        issues = validate_model(BpmnModel([process]), strict=False)
        assert [i[0] for i in issues] == ["t"]

    def test_boundary_without_activity(self):
        process = Process("p", flow_elements=[boundary("b", "nowhere")])
        issues = validate_model(BpmnModel([process]), strict=False)
        assert issues[0][0] == "b"

    def test_element_in_two_lanes(self):
        process = Process(
            "p",
            flow_elements=[task("t")],
            lanes=[Lane("L1", ["t"]), Lane("L2", ["t"])],
        )
        issues = validate_model(BpmnModel([process]), strict=False)
        assert issues == [("t", "Element 't' is in lanes 'L1' and 'L2'")]

    def test_nested_containers_checked(self):
        inner = SubProcess("sub", flow_elements=[end("e")], sequence_flows=[flow("e", "zz", "sf")])
        process = Process("p", flow_elements=[inner])
        issues = validate_model(BpmnModel([process]), strict=False)
        assert issues[0][0] == "sf"
