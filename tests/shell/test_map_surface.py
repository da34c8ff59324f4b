"""Tests for the in-memory map surface and its folium output."""

import pytest

from quakemap.core.location import ViewState
from quakemap.shell.map_surface import (
    EVENT_LAYER,
    SELF_LAYER,
    CircleLayer,
    MapSurface,
    PointLayer,
)


@pytest.fixture
def surface():
    return MapSurface()


class TestLayers:
    """Tests for adding, listing and removing layers."""

    def test_add_circle(self, surface):
        layer = surface.add_circle(38.4, 27.1, 65_000, "red", "<b>Izmir</b>")

        assert isinstance(layer, CircleLayer)
        assert layer.kind == EVENT_LAYER
        assert surface.layers() == [layer]

    def test_add_point_marker(self, surface):
        layer = surface.add_point_marker(39.9, 32.8, "Your location")

        assert isinstance(layer, PointLayer)
        assert layer.kind == SELF_LAYER

    def test_filter_by_kind(self, surface):
        surface.add_circle(38.4, 27.1, 65_000, "red", "a")
        surface.add_point_marker(39.9, 32.8, "me")

        assert len(surface.layers(EVENT_LAYER)) == 1
        assert len(surface.layers(SELF_LAYER)) == 1

    def test_remove_layers_only_removes_kind(self, surface):
        surface.add_circle(38.4, 27.1, 65_000, "red", "a")
        surface.add_circle(37.0, 36.0, 40_000, "orange", "b")
        surface.add_point_marker(39.9, 32.8, "me")

        removed = surface.remove_layers(EVENT_LAYER)

        assert removed == 2
        assert surface.layers(EVENT_LAYER) == []
        assert len(surface.layers(SELF_LAYER)) == 1

    def test_layers_returns_copy(self, surface):
        surface.add_circle(38.4, 27.1, 65_000, "red", "a")
        surface.layers().clear()

        assert len(surface.layers()) == 1


class TestViewAndClasses:
    """Tests for viewport and CSS class state."""

    def test_set_view(self, surface):
        surface.set_view(41.0, 29.0, 10)
        assert surface.view == ViewState(41.0, 29.0, 10)

    def test_add_and_remove_class(self, surface):
        surface.add_class("shake")
        assert surface.has_class("shake")

        surface.remove_class("shake")
        surface.remove_class("shake")
        assert not surface.has_class("shake")


class TestBuildMap:
    """Tests for the folium output."""

    def test_html_contains_markers(self, surface):
        surface.add_circle(38.4, 27.1, 65_000, "red", "<strong>Izmir</strong>")
        surface.add_point_marker(39.9, 32.8, "Your location")

        html = surface.to_html()

        assert "L.circle" in html
        assert "L.marker" in html
        assert "Izmir" in html
        assert "Your location" in html

    def test_html_applies_active_classes(self, surface):
        surface.add_class("shake")
        html = surface.to_html()

        assert "classList.add" in html
        assert "shake" in html

    def test_html_without_classes_has_no_class_script(self, surface):
        assert "classList.add" not in surface.to_html()
