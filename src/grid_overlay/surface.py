"""Drawing surfaces the node layers paint onto."""

from typing import Protocol

import plotly.graph_objects as go

from src.grid_overlay.model import PixelPoint, Viewport


class Surface(Protocol):
    """The two primitives a node layer needs."""

    def draw_circle(self, origin: PixelPoint, diameter: int, color: str, stroke_width: float) -> None:
        """Outline a circle whose bounding box starts at origin (top-left)."""
        ...

    def draw_text(self, text: str, position: PixelPoint, color: str) -> None:
        """Draw text anchored at position."""
        ...


class FigureSurface:
    """
    Surface recording primitives into a plotly figure in pixel space.

    The figure's axes span the viewport with y reversed, so pixel (0, 0) is
    the top-left corner as on a screen.
    """

    def __init__(self, viewport: Viewport, title: str = "Grid Overlay", background: str = "rgb(40, 44, 52)"):
        self.viewport = viewport
        self.figure = go.Figure()
        self.figure.update_layout(
            title=title,
            width=viewport.width,
            height=viewport.height,
            plot_bgcolor=background,
            paper_bgcolor=background,
            font=dict(color="white"),
            showlegend=False,
            margin=dict(l=0, r=0, t=40, b=0),
            xaxis=dict(range=[0, viewport.width], visible=False, fixedrange=True),
            yaxis=dict(
                range=[viewport.height, 0],
                visible=False,
                fixedrange=True,
                scaleanchor="x",
                scaleratio=1,
            ),
        )

    def draw_circle(self, origin: PixelPoint, diameter: int, color: str, stroke_width: float) -> None:
        self.figure.add_shape(
            type="circle",
            xref="x",
            yref="y",
            x0=origin.x,
            y0=origin.y,
            x1=origin.x + diameter,
            y1=origin.y + diameter,
            line=dict(color=color, width=stroke_width),
        )

    def draw_text(self, text: str, position: PixelPoint, color: str) -> None:
        self.figure.add_annotation(
            x=position.x,
            y=position.y,
            xref="x",
            yref="y",
            text=text,
            showarrow=False,
            xanchor="left",
            font=dict(color=color, size=12),
        )

    def clear(self) -> None:
        """Drop everything drawn so far, keeping the layout."""
        self.figure.layout.shapes = []
        self.figure.layout.annotations = []


def show_figure(fig: go.Figure) -> None:
    """Display figure in browser."""
    fig.show()


def export_html(fig: go.Figure, output_path: str) -> None:
    """Export figure as standalone HTML file."""
    fig.write_html(output_path, include_plotlyjs=True, full_html=True)
