"""
Shared pytest fixtures for grid overlay tests.

This module provides reusable fixtures that are automatically discovered
by pytest. Fixtures here are available to all test files.

Notes:
- The projector fixture maps (lat, lng) straight to pixels (x=lng, y=lat)
  so expected marker positions can be read off the node coordinates
- mock_surface records draw calls for assertions on call_args_list
- RecordingSurface is a plain list-backed surface for threaded tests,
  where MagicMock bookkeeping would dominate the run time
"""

import threading

import pytest
from unittest.mock import MagicMock

from src.grid_overlay.events import EventBus
from src.grid_overlay.model import (
    LOCATION_KEY,
    STATION_KEY,
    AnnotatedGraph,
    Coordinates,
    PixelPoint,
)


class RecordingSurface:
    """Surface that keeps every primitive as a tuple."""

    def __init__(self):
        self.circles: list[tuple] = []
        self.texts: list[tuple] = []

    def draw_circle(self, origin, diameter, color, stroke_width):
        self.circles.append((origin, diameter, color, stroke_width))

    def draw_text(self, text, position, color):
        self.texts.append((text, position, color))


@pytest.fixture
def projector() -> MagicMock:
    """
    Projector mapping Coordinates(lat, lng) to PixelPoint(lng, lat).

    Example:
        Coordinates(lat=20, lng=100) -> PixelPoint(100, 20)
    """
    mapper = MagicMock()
    mapper.to_pixel.side_effect = lambda c: PixelPoint(int(c.lng), int(c.lat))
    return mapper


@pytest.fixture
def mock_surface() -> MagicMock:
    """Create a mock drawing surface recording draw_circle/draw_text calls."""
    return MagicMock()


@pytest.fixture
def recording_surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def make_surface():
    """Factory for fresh RecordingSurfaces, one per paint pass."""
    return RecordingSurface


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def grid_graph() -> AnnotatedGraph:
    """
    Provide a small grid: two junctions and three charging stations.

    Layout (x=lng, y=lat):
        node 1  station   at (100, 100)
        node 2  station   at (100, 100)  (co-located with 1)
        node 3  junction  at (200, 50)
        node 4  junction  at (300, 80)   (station flag explicitly False)
        node 7  station   at (400, 120)
    """
    graph = AnnotatedGraph()
    graph.add_node(1, **{LOCATION_KEY: Coordinates(100, 100), STATION_KEY: True})
    graph.add_node(2, **{LOCATION_KEY: Coordinates(100, 100), STATION_KEY: True})
    graph.add_node(3, **{LOCATION_KEY: Coordinates(50, 200)})
    graph.add_node(4, **{LOCATION_KEY: Coordinates(80, 300), STATION_KEY: False})
    graph.add_node(7, **{LOCATION_KEY: Coordinates(120, 400), STATION_KEY: True})
    return graph


@pytest.fixture
def gate() -> threading.Event:
    """A threading.Event for holding a worker thread at a known point."""
    return threading.Event()
