"""Matplotlib renderer — PNG snapshots and animated GIFs."""

import io
import logging
from pathlib import Path

import matplotlib.image as mpimg
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.animation import FuncAnimation, PillowWriter
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.font_manager import FontProperties
from matplotlib.patches import Circle as CirclePatch
from matplotlib.patches import Ellipse, PathPatch
from matplotlib.path import Path as MplPath
from matplotlib.textpath import TextPath

from composeverse.drawing import flatten
from composeverse.engine import Engine
from composeverse.models import (
    Circle,
    Close,
    Color,
    CubicTo,
    DrawOp,
    Frame,
    ImageBlit,
    ImageProvider,
    Line,
    LineTo,
    MoveTo,
    Oval,
    Paint,
    Path as PathOp,
    QuadTo,
    RadialGradient,
    Text,
    TextExtent,
    Viewport,
    sample_gradient,
)

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).parent.parent.parent.parent
_BG = "#050510"
_DPI = 100
_GRADIENT_STEPS = 12


class TextPathMeasurer:
    """Text extents from matplotlib's own glyph outlines."""

    def measure(
        self,
        text: str,
        font_size: float,
        bold: bool = False,
        letter_spacing: float = 0.0,
    ) -> TextExtent:
        prop = FontProperties(weight="bold" if bold else "normal")
        extents = TextPath((0, 0), text, size=font_size, prop=prop).get_extents()
        width = extents.width + max(len(text) - 1, 0) * letter_spacing
        return TextExtent(width=width, height=max(extents.height, font_size * 1.2))


def _px_to_pt(px: float) -> float:
    return px * 72 / _DPI


def _flat_color(paint: Paint, alpha: float = 1.0) -> tuple[float, float, float, float]:
    """Single RGBA for a paint; gradients collapse to their midpoint colour."""
    color = paint if isinstance(paint, Color) else sample_gradient(paint.colors, 0.5)
    r, g, b, a = color.to_rgba()
    return (r, g, b, a * alpha)


def _draw_radial_disk(ax: Axes, op: Circle, paint: RadialGradient, z: int) -> None:
    """Approximate a radial gradient with concentric disks clipped to the circle."""
    clip = CirclePatch(op.center, op.radius, transform=ax.transData)
    ax.add_patch(
        CirclePatch(
            op.center,
            op.radius,
            color=_flat_color(paint.colors[-1], op.alpha),
            linewidth=0,
            zorder=z,
        )
    )
    for step in range(_GRADIENT_STEPS, 0, -1):
        frac = step / _GRADIENT_STEPS
        disk = CirclePatch(
            paint.center,
            paint.radius * frac,
            color=_flat_color(sample_gradient(paint.colors, frac), op.alpha),
            linewidth=0,
            zorder=z,
        )
        ax.add_patch(disk)
        disk.set_clip_path(clip)


def _mpl_path(op: PathOp) -> MplPath:
    vertices: list[tuple[float, float]] = []
    codes: list[int] = []
    start = (0.0, 0.0)
    for cmd in op.commands:
        if isinstance(cmd, MoveTo):
            start = cmd.point
            vertices.append(cmd.point)
            codes.append(MplPath.MOVETO)
        elif isinstance(cmd, LineTo):
            vertices.append(cmd.point)
            codes.append(MplPath.LINETO)
        elif isinstance(cmd, QuadTo):
            vertices += [cmd.control, cmd.point]
            codes += [MplPath.CURVE3] * 2
        elif isinstance(cmd, CubicTo):
            vertices += [cmd.control1, cmd.control2, cmd.point]
            codes += [MplPath.CURVE4] * 3
        elif isinstance(cmd, Close):
            vertices.append(start)
            codes.append(MplPath.CLOSEPOLY)
    return MplPath(np.array(vertices), codes)


def _fill_kwargs(paint: Paint, stroke_width: float | None, alpha: float) -> dict:
    if stroke_width is None:
        return dict(facecolor=_flat_color(paint, alpha), edgecolor="none", linewidth=0)
    return dict(
        fill=False,
        edgecolor=_flat_color(paint, alpha),
        linewidth=_px_to_pt(stroke_width),
    )


def _draw_op(ax: Axes, op: DrawOp, z: int, images: ImageProvider | None) -> None:
    # Every op gets its own zorder so images and text keep paint order with patches.
    if isinstance(op, Circle):
        if op.stroke_width is None and isinstance(op.paint, RadialGradient):
            _draw_radial_disk(ax, op, op.paint, z)
        else:
            ax.add_patch(
                CirclePatch(
                    op.center,
                    op.radius,
                    zorder=z,
                    **_fill_kwargs(op.paint, op.stroke_width, op.alpha),
                )
            )
    elif isinstance(op, Oval):
        ax.add_patch(
            Ellipse(
                op.center,
                op.size[0],
                op.size[1],
                zorder=z,
                **_fill_kwargs(op.paint, op.stroke_width, op.alpha),
            )
        )
    elif isinstance(op, Line):
        ax.plot(
            [op.start[0], op.end[0]],
            [op.start[1], op.end[1]],
            color=_flat_color(op.paint, op.alpha),
            linewidth=_px_to_pt(op.width),
            solid_capstyle="round",
            zorder=z,
        )
    elif isinstance(op, PathOp):
        ax.add_patch(
            PathPatch(
                _mpl_path(op),
                zorder=z,
                **_fill_kwargs(op.paint, op.stroke_width, op.alpha),
            )
        )
    elif isinstance(op, Text):
        ax.text(
            op.top_left[0],
            op.top_left[1],
            op.text,
            color=_flat_color(op.paint, op.alpha),
            fontsize=_px_to_pt(op.font_size),
            fontweight="bold" if op.bold else "normal",
            ha="left",
            va="top",
            zorder=z,
        )
    elif isinstance(op, ImageBlit):
        data = images(op.resource) if images else None
        if data is None:
            return
        x, y = op.top_left
        im = ax.imshow(
            mpimg.imread(io.BytesIO(data)),
            extent=(x, x + op.size, y + op.size, y),
            zorder=z,
        )
        im.set_clip_path(
            CirclePatch(op.clip_center, op.clip_radius, transform=ax.transData)
        )


def _setup_axes(ax: Axes, viewport: Viewport) -> None:
    ax.set_facecolor(_BG)
    ax.set_xlim(0, viewport.width)
    ax.set_ylim(viewport.height, 0)  # y grows downward, like the draw ops
    ax.set_aspect("equal")
    ax.axis("off")


def draw_frame(ax: Axes, frame: Frame, images: ImageProvider | None = None) -> None:
    """Paint every op of `frame` onto an existing axes, in order."""
    for z, op in enumerate(flatten(frame.ops), start=1):
        _draw_op(ax, op, z, images)
    # imshow resets the limits; set them last.
    _setup_axes(ax, frame.viewport)


def render_static_frame(frame: Frame, images: ImageProvider | None = None) -> Figure:
    """Render a Frame as a static matplotlib image.

    Args:
        frame: Fully computed frame.
        images: Optional provider of PNG bytes for image blits.

    Returns:
        matplotlib Figure sized to the frame's viewport at 100 dpi.
    """
    vp = frame.viewport
    fig = plt.figure(figsize=(vp.width / _DPI, vp.height / _DPI), dpi=_DPI)
    fig.patch.set_facecolor(_BG)
    ax = fig.add_axes((0, 0, 1, 1))
    draw_frame(ax, frame, images)
    return fig


def save_static_frame(
    frame: Frame,
    output_path: Path | None = None,
    images: ImageProvider | None = None,
) -> Path:
    """Save a Frame as a PNG file.

    Args:
        frame: Fully computed frame.
        output_path: Destination path. Auto-generated under results/ if None.
        images: Optional provider of PNG bytes for image blits.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        vp = frame.viewport
        filename = f"composeverse_{vp.width:.0f}x{vp.height:.0f}_{frame.clock.elapsed_ms:.0f}ms.png"
        output_path = _ROOT / "results" / filename

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_frame(frame, images)
    fig.savefig(output_path, facecolor=_BG, dpi=_DPI)
    plt.close(fig)
    logger.info("Saved frame to %s", output_path)
    return output_path


def save_animation(
    engine: Engine,
    viewport: Viewport,
    output_path: Path,
    duration_s: float = 20.0,
    fps: int = 20,
    images: ImageProvider | None = None,
) -> Path:
    """Step `engine` at a fixed rate and write the frames to an animated GIF.

    Args:
        engine: Engine to drive; its state advances as frames are rendered.
        viewport: Surface size for every frame.
        output_path: Destination .gif path.
        duration_s: Length of the clip in seconds.
        fps: Frames per second.
        images: Optional provider of PNG bytes for image blits.

    Returns:
        Path to the saved file.
    """
    frame_count = max(1, round(duration_s * fps))
    fig = plt.figure(figsize=(viewport.width / _DPI, viewport.height / _DPI), dpi=_DPI)
    fig.patch.set_facecolor(_BG)
    ax = fig.add_axes((0, 0, 1, 1))

    def update(index: int) -> list:
        ax.clear()
        frame = engine.step(index * 1000 / fps, viewport)
        draw_frame(ax, frame, images)
        return []

    output_path.parent.mkdir(parents=True, exist_ok=True)
    animation = FuncAnimation(fig, update, frames=frame_count, blit=False, repeat=False)
    animation.save(str(output_path), writer=PillowWriter(fps=fps), dpi=_DPI)
    plt.close(fig)
    logger.info("Saved %d-frame animation to %s", frame_count, output_path)
    return output_path
