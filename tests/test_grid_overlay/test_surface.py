"""Tests for the plotly-backed drawing surface."""

import pytest

from src.grid_overlay.cli import paint_frame, replay_events
from src.grid_overlay.events import Event, EventBus
from src.grid_overlay.layers import LabeledNodeLayer, LoadClassifiedNodeLayer
from src.grid_overlay.model import MapBounds, PixelPoint, Viewport
from src.grid_overlay.surface import FigureSurface, export_html


@pytest.fixture
def surface() -> FigureSurface:
    return FigureSurface(Viewport(width=640, height=480, bounds=MapBounds(51, 50, 5, 4)))


class TestFigureSurface:
    """Tests for FigureSurface."""

    def test_pixel_space_axes(self, surface):
        """y axis runs top to bottom like screen pixels."""
        layout = surface.figure.layout
        assert tuple(layout.xaxis.range) == (0, 640)
        assert tuple(layout.yaxis.range) == (480, 0)

    def test_draw_circle_adds_shape(self, surface):
        surface.draw_circle(PixelPoint(10, 20), 6, "rgb(0, 0, 255)", 5)

        shape = surface.figure.layout.shapes[0]
        assert shape.type == "circle"
        assert (shape.x0, shape.y0, shape.x1, shape.y1) == (10, 20, 16, 26)
        assert shape.line.width == 5

    def test_draw_text_adds_annotation(self, surface):
        surface.draw_text("42", PixelPoint(5, 7), "rgb(255, 255, 255)")

        annotation = surface.figure.layout.annotations[0]
        assert annotation.text == "42"
        assert (annotation.x, annotation.y) == (5, 7)
        assert annotation.showarrow is False

    def test_clear(self, surface):
        surface.draw_circle(PixelPoint(1, 1), 6, "red", 1)
        surface.draw_text("x", PixelPoint(1, 1), "red")
        surface.clear()

        assert len(surface.figure.layout.shapes) == 0
        assert len(surface.figure.layout.annotations) == 0

    def test_export_html(self, surface, tmp_path):
        surface.draw_circle(PixelPoint(1, 1), 6, "red", 1)
        output = tmp_path / "grid.html"

        export_html(surface.figure, str(output))

        assert output.exists()
        assert "plotly" in output.read_text(encoding="utf-8").lower()


class TestPaintFrame:
    """End-to-end: replay events then paint layers onto a figure."""

    def test_replay_then_paint(self, grid_graph, projector, surface):
        bus = EventBus()
        load_layer = LoadClassifiedNodeLayer(grid_graph, bus)
        layers = [load_layer, LabeledNodeLayer(grid_graph)]

        replay_events(bus, [
            Event("infrastructure:chargingstation:load", {"station": 1, "clients": 10}),
            Event("infrastructure:chargingstation:load", {"station": 2, "clients": 30}),
        ])
        paint_frame(layers, projector, surface)
        load_layer.close()

        assert len(surface.figure.layout.shapes) == 5
        texts = [a.text for a in surface.figure.layout.annotations]
        assert "Max clients at station: 30" in texts
        assert {"1", "2", "3", "4", "7"} <= set(texts)

    def test_repaint_replaces_previous_frame(self, grid_graph, projector, surface):
        layers = [LabeledNodeLayer(grid_graph)]
        paint_frame(layers, projector, surface)
        paint_frame(layers, projector, surface)

        assert len(surface.figure.layout.annotations) == 5
