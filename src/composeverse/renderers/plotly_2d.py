"""Plotly 2D interactive renderer.

Every draw op becomes a layout shape (circles, lines, SVG paths) or an
annotation (text), so wheel zoom and drag panning work on a single frame.
Gradients collapse to their midpoint colour; image blits are skipped.
"""

import plotly.graph_objects as go

from composeverse.drawing import flatten
from composeverse.models import (
    Circle,
    Color,
    Frame,
    Line,
    Oval,
    Paint,
    Path,
    Text,
    sample_gradient,
)

_BG = "#050510"


def _css(paint: Paint, alpha: float = 1.0) -> str:
    color = paint if isinstance(paint, Color) else sample_gradient(paint.colors, 0.5)
    return color.with_alpha(color.alpha * alpha).to_css()


def _filled(paint: Paint, stroke_width: float | None, alpha: float) -> dict:
    if stroke_width is None:
        return dict(fillcolor=_css(paint, alpha), line=dict(width=0))
    return dict(
        fillcolor="rgba(0,0,0,0)",
        line=dict(color=_css(paint, alpha), width=stroke_width),
    )


def render_plotly_frame(frame: Frame) -> go.Figure:
    """Render a Frame as a Plotly figure.

    Shapes are drawn in op order (layer="above"), so later ops cover earlier
    ones, matching the other backends.

    Args:
        frame: Fully computed frame.

    Returns:
        Plotly Figure object.
    """
    shapes: list[dict] = []
    annotations: list[dict] = []
    for op in flatten(frame.ops):
        if isinstance(op, Circle):
            cx, cy = op.center
            shapes.append(
                dict(
                    type="circle",
                    x0=cx - op.radius,
                    y0=cy - op.radius,
                    x1=cx + op.radius,
                    y1=cy + op.radius,
                    **_filled(op.paint, op.stroke_width, op.alpha),
                )
            )
        elif isinstance(op, Oval):
            x, y = op.top_left
            shapes.append(
                dict(
                    type="circle",
                    x0=x,
                    y0=y,
                    x1=x + op.size[0],
                    y1=y + op.size[1],
                    **_filled(op.paint, op.stroke_width, op.alpha),
                )
            )
        elif isinstance(op, Line):
            shapes.append(
                dict(
                    type="line",
                    x0=op.start[0],
                    y0=op.start[1],
                    x1=op.end[0],
                    y1=op.end[1],
                    line=dict(color=_css(op.paint, op.alpha), width=op.width),
                )
            )
        elif isinstance(op, Path):
            shapes.append(
                dict(
                    type="path",
                    path=op.to_svg_d(),
                    **_filled(op.paint, op.stroke_width, op.alpha),
                )
            )
        elif isinstance(op, Text):
            annotations.append(
                dict(
                    x=op.top_left[0],
                    y=op.top_left[1],
                    text=f"<b>{op.text}</b>" if op.bold else op.text,
                    showarrow=False,
                    xanchor="left",
                    yanchor="top",
                    font=dict(color=_css(op.paint, op.alpha), size=op.font_size),
                )
            )

    for shape in shapes:
        shape.update(xref="x", yref="y", layer="above")

    vp = frame.viewport
    fig = go.Figure()
    fig.update_layout(
        paper_bgcolor=_BG,
        plot_bgcolor=_BG,
        showlegend=False,
        margin=dict(l=0, r=0, t=0, b=0),
        width=int(vp.width),
        height=int(vp.height),
        dragmode="pan",
        xaxis=dict(visible=False, range=[0, vp.width], fixedrange=False),
        # Reversed so y grows downward, like the draw ops.
        yaxis=dict(
            visible=False,
            range=[vp.height, 0],
            scaleanchor="x",
            fixedrange=False,
        ),
        shapes=shapes,
        annotations=annotations,
    )
    fig._config = {"scrollZoom": True, "displayModeBar": False}  # type: ignore[attr-defined]
    return fig
