"""Tests for layout configuration."""

import dataclasses

import pytest

from bpmn_layout import LayoutSettings, Orientation


class TestLayoutSettings:
    """Tests for LayoutSettings."""

    def test_defaults(self):
        settings = LayoutSettings()
        assert settings.event_size == 30
        assert settings.gateway_size == 40
        assert (settings.task_width, settings.task_height) == (100, 60)
        assert settings.subprocess_margin == 20
        assert settings.orientation is Orientation.TOP_DOWN
        assert settings.lanes_as_groups is False

    def test_orientation_from_string(self):
        """The string form of an orientation is accepted."""
        settings = LayoutSettings(orientation="left-to-right")
        assert settings.orientation is Orientation.LEFT_RIGHT

    def test_invalid_orientation(self):
        with pytest.raises(ValueError):
            LayoutSettings(orientation="diagonal")

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            LayoutSettings().task_width = 10

    @pytest.mark.parametrize("name", ["event_size", "gateway_size", "task_width", "task_height"])
    def test_sizes_must_be_positive(self, name):
        with pytest.raises(ValueError, match=name):
            LayoutSettings(**{name: 0})

    def test_negative_margin_rejected(self):
        with pytest.raises(ValueError, match="subprocess_margin"):
            LayoutSettings(subprocess_margin=-1)

    def test_zero_depth_rejected(self):
        with pytest.raises(ValueError, match="max_depth"):
            LayoutSettings(max_depth=0)

    def test_with_options(self):
        """with_options returns a modified copy."""
        base = LayoutSettings()
        changed = base.with_options(task_width=150, orientation="left-to-right")
        assert changed.task_width == 150
        assert changed.orientation is Orientation.LEFT_RIGHT
        assert base.task_width == 100

    def test_unknown_option(self):
        with pytest.raises(TypeError, match="Unknown layout option"):
            LayoutSettings().with_options(colour="red")

    def test_from_options(self):
        settings = LayoutSettings.from_options(lanes_as_groups=True)
        assert settings.lanes_as_groups is True
        with pytest.raises(TypeError):
            LayoutSettings.from_options(nope=1)
