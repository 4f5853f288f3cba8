"""Shared process model fixtures."""

import pytest

from bpmn_layout import (
    BpmnModel,
    ElementKind,
    FlowElement,
    Lane,
    Process,
    SequenceFlow,
    SubProcess,
)


def start(id):
    return FlowElement(id, ElementKind.START_EVENT)


def end(id):
    return FlowElement(id, ElementKind.END_EVENT)


def task(id, name=None):
    return FlowElement(id, ElementKind.TASK, name=name or id)


def gateway(id):
    return FlowElement(id, ElementKind.GATEWAY)


def boundary(id, attached_to):
    return FlowElement(id, ElementKind.BOUNDARY_EVENT, attached_to_ref=attached_to)


def flow(source, target, id=None):
    return SequenceFlow(source, target, id=id)


@pytest.fixture
def gateway_process():
    """Start -> A -> Gateway -> {B, C} -> End."""
    return Process(
        id="order",
        flow_elements=[
            start("start"),
            task("A", "Receive order"),
            gateway("gw"),
            task("B", "Ship"),
            task("C", "Cancel"),
            end("end"),
        ],
        sequence_flows=[
            flow("start", "A", "f1"),
            flow("A", "gw", "f2"),
            flow("gw", "B", "f3"),
            flow("gw", "C", "f4"),
            flow("B", "end", "f5"),
            flow("C", "end", "f6"),
        ],
    )


@pytest.fixture
def gateway_model(gateway_process):
    return BpmnModel(processes=[gateway_process])


@pytest.fixture
def laned_process():
    """Two lanes whose members alternate along a chain."""
    return Process(
        id="claims",
        flow_elements=[
            start("s"),
            task("x", "File claim"),
            task("y", "Check claim"),
            end("z"),
        ],
        sequence_flows=[
            flow("s", "x", "f1"),
            flow("x", "y", "f2"),
            flow("y", "z", "f3"),
        ],
        lanes=[
            Lane("customer", ["s", "x"], name="Customer"),
            Lane("clerk", ["y", "z"], name="Clerk"),
        ],
    )


@pytest.fixture
def diamond_laned_process():
    """s -> {x, y} -> z where x shares a lane with s and y with z."""
    return Process(
        id="diamond",
        flow_elements=[start("s"), task("x"), task("y"), end("z")],
        sequence_flows=[
            flow("s", "x", "f1"),
            flow("s", "y", "f2"),
            flow("x", "z", "f3"),
            flow("y", "z", "f4"),
        ],
        lanes=[Lane("A", ["s", "x"]), Lane("B", ["y", "z"])],
    )


@pytest.fixture
def boundary_process():
    """A task with an error boundary event leading to a handler."""
    return Process(
        id="payment",
        flow_elements=[
            start("start"),
            task("pay", "Charge card"),
            boundary("err", "pay"),
            task("handle", "Notify customer"),
            end("done"),
            end("failed"),
        ],
        sequence_flows=[
            flow("start", "pay", "f1"),
            flow("pay", "done", "f2"),
            flow("err", "handle", "f3"),
            flow("handle", "failed", "f4"),
        ],
    )


@pytest.fixture
def subprocess_process():
    """Start -> Sub(start -> work -> end) -> End."""
    inner = SubProcess(
        id="sub",
        flow_elements=[start("sub_start"), task("work", "Do work"), end("sub_end")],
        sequence_flows=[flow("sub_start", "work", "sf1"), flow("work", "sub_end", "sf2")],
    )
    return Process(
        id="outer",
        flow_elements=[start("start"), inner, end("end")],
        sequence_flows=[flow("start", "sub", "f1"), flow("sub", "end", "f2")],
    )
