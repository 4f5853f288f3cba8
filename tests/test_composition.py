"""Tests for sub-process composition."""

from bpmn_layout import ContainerLayout, GraphicInfo, compose_subprocess, subprocess_vertex_size


def make_child():
    return ContainerLayout(
        shapes={"a": GraphicInfo(0, 0, 30, 30, element_id="a")},
        waypoints={"f": [GraphicInfo(0, 0), GraphicInfo(0, 100)]},
        width=30,
        height=100,
    )


class TestComposeSubprocess:
    """Tests for moving child layouts into parent space."""

    def test_translates_shapes_and_waypoints(self):
        """Child coordinates move by the sub-process position plus the margin."""
        composed = compose_subprocess(make_child(), 50, 50, 20)
        assert (composed.shapes["a"].x, composed.shapes["a"].y) == (70, 70)
        assert [(p.x, p.y) for p in composed.waypoints["f"]] == [(70, 70), (70, 170)]

    def test_child_unchanged(self):
        child = make_child()
        compose_subprocess(child, 50, 50, 20)
        assert child.shapes["a"].x == 0
        assert child.waypoints["f"][1].y == 100

    def test_sizes_kept(self):
        composed = compose_subprocess(make_child(), 10, 10, 5)
        assert (composed.width, composed.height) == (30, 100)
        assert composed.shapes["a"].width == 30

    def test_vertex_size(self):
        assert subprocess_vertex_size(make_child(), 20) == (70, 140)

    def test_merge(self):
        parent = ContainerLayout(shapes={"p": GraphicInfo(0, 0, 10, 10)})
        parent.merge(compose_subprocess(make_child(), 0, 0, 0))
        assert set(parent.shapes) == {"p", "a"}
        assert set(parent.waypoints) == {"f"}
