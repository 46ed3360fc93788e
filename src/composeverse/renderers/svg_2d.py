"""SVG renderer.

Produces an SVG document (or a self-contained HTML page wrapping it) from a
`Frame`. Gradients become shared `<defs>` entries; rotation groups become
`<g transform="rotate(...)">`; the rider's face is a clipped `<image>`.

Coordinate system matches the draw ops:
  x ∈ [0, width]   (left → right)
  y ∈ [0, height]  (top → bottom)
"""

from __future__ import annotations

import base64
import html

from composeverse.models import (
    Circle,
    Color,
    DrawOp,
    Frame,
    Group,
    ImageBlit,
    ImageProvider,
    Line,
    LinearGradient,
    Oval,
    Paint,
    Path,
    RadialGradient,
    Text,
)

_BG = "#050510"
_FONT = "'Segoe UI', 'Helvetica Neue', Arial, sans-serif"


def _stops(colors: tuple[Color, ...]) -> str:
    n = len(colors)
    parts = []
    for i, c in enumerate(colors):
        pct = 0 if n == 1 else i * 100 / (n - 1)
        parts.append(
            f'<stop offset="{pct:.1f}%" stop-color="{c.to_hex()}" stop-opacity="{c.alpha:.3f}"/>'
        )
    return "".join(parts)


class _SvgWriter:
    """Accumulates body markup plus the `<defs>` it references."""

    def __init__(self, images: ImageProvider | None):
        self.images = images
        self.defs: list[str] = []
        self.body: list[str] = []
        self._ids = 0
        self._image_cache: dict[str, str | None] = {}

    def _next_id(self, prefix: str) -> str:
        self._ids += 1
        return f"{prefix}{self._ids}"

    def paint(self, paint: Paint) -> tuple[str, str]:
        """Return (colour or url(#id), opacity) for a fill/stroke attribute."""
        if isinstance(paint, Color):
            return paint.to_hex(), f"{paint.alpha:.3f}"
        if isinstance(paint, LinearGradient):
            gid = self._next_id("lg")
            (x1, y1), (x2, y2) = paint.start, paint.end
            self.defs.append(
                f'<linearGradient id="{gid}" gradientUnits="userSpaceOnUse"'
                f' x1="{x1:.2f}" y1="{y1:.2f}" x2="{x2:.2f}" y2="{y2:.2f}">'
                f"{_stops(paint.colors)}</linearGradient>"
            )
            return f"url(#{gid})", "1"
        gid = self._next_id("rg")
        cx, cy = paint.center
        self.defs.append(
            f'<radialGradient id="{gid}" gradientUnits="userSpaceOnUse"'
            f' cx="{cx:.2f}" cy="{cy:.2f}" r="{max(paint.radius, 0.01):.2f}">'
            f"{_stops(paint.colors)}</radialGradient>"
        )
        return f"url(#{gid})", "1"

    def _fill_or_stroke(self, paint: Paint, stroke_width: float | None) -> str:
        color, opacity = self.paint(paint)
        if stroke_width is None:
            return f'fill="{color}" fill-opacity="{opacity}"'
        return (
            f'fill="none" stroke="{color}" stroke-opacity="{opacity}"'
            f' stroke-width="{stroke_width:.2f}"'
        )

    def _image_href(self, resource: str) -> str | None:
        if resource not in self._image_cache:
            data = self.images(resource) if self.images else None
            self._image_cache[resource] = (
                None
                if data is None
                else "data:image/png;base64," + base64.b64encode(data).decode("ascii")
            )
        return self._image_cache[resource]

    def write(self, op: DrawOp, out: list[str]) -> None:
        if isinstance(op, Group):
            px, py = op.pivot
            out.append(
                f'<g transform="rotate({op.rotation_degrees:.3f} {px:.2f} {py:.2f})">'
            )
            for child in op.children:
                self.write(child, out)
            out.append("</g>")
        elif isinstance(op, Circle):
            cx, cy = op.center
            out.append(
                f'<circle cx="{cx:.2f}" cy="{cy:.2f}" r="{op.radius:.2f}"'
                f' {self._fill_or_stroke(op.paint, op.stroke_width)} opacity="{op.alpha:.3f}"/>'
            )
        elif isinstance(op, Oval):
            cx, cy = op.center
            out.append(
                f'<ellipse cx="{cx:.2f}" cy="{cy:.2f}" rx="{op.size[0] / 2:.2f}"'
                f' ry="{op.size[1] / 2:.2f}"'
                f' {self._fill_or_stroke(op.paint, op.stroke_width)} opacity="{op.alpha:.3f}"/>'
            )
        elif isinstance(op, Line):
            color, opacity = self.paint(op.paint)
            (x1, y1), (x2, y2) = op.start, op.end
            out.append(
                f'<line x1="{x1:.2f}" y1="{y1:.2f}" x2="{x2:.2f}" y2="{y2:.2f}"'
                f' stroke="{color}" stroke-opacity="{opacity}"'
                f' stroke-width="{op.width:.2f}" opacity="{op.alpha:.3f}"/>'
            )
        elif isinstance(op, Path):
            out.append(
                f'<path d="{op.to_svg_d()}"'
                f' {self._fill_or_stroke(op.paint, op.stroke_width)} opacity="{op.alpha:.3f}"/>'
            )
        elif isinstance(op, Text):
            color, opacity = self.paint(op.paint)
            x, y = op.top_left
            weight = "800" if op.bold else "normal"
            out.append(
                f'<text x="{x:.2f}" y="{y:.2f}" dominant-baseline="text-before-edge"'
                f' font-family="{_FONT}" font-size="{op.font_size:.2f}"'
                f' font-weight="{weight}" letter-spacing="{op.letter_spacing:.2f}"'
                f' fill="{color}" fill-opacity="{opacity}" opacity="{op.alpha:.3f}">'
                f"{html.escape(op.text)}</text>"
            )
        elif isinstance(op, ImageBlit):
            href = self._image_href(op.resource)
            if href is None:
                return  # No bitmap from the host: leave the window glass empty.
            clip_id = self._next_id("clip")
            cx, cy = op.clip_center
            self.defs.append(
                f'<clipPath id="{clip_id}"><circle cx="{cx:.2f}" cy="{cy:.2f}"'
                f' r="{op.clip_radius:.2f}"/></clipPath>'
            )
            x, y = op.top_left
            out.append(
                f'<image href="{href}" x="{x:.2f}" y="{y:.2f}" width="{op.size:.2f}"'
                f' height="{op.size:.2f}" clip-path="url(#{clip_id})"'
                f' preserveAspectRatio="xMidYMid slice"/>'
            )


def render_svg(frame: Frame, images: ImageProvider | None = None) -> str:
    """Return a standalone SVG document for one frame.

    Args:
        frame: Fully computed frame.
        images: Optional provider mapping a resource id to PNG bytes. When it
            is missing or returns None, image blits are skipped.

    Returns:
        SVG markup string.
    """
    writer = _SvgWriter(images)
    for op in frame.ops:
        writer.write(op, writer.body)

    w, h = frame.viewport.width, frame.viewport.height
    defs_svg = "\n    ".join(writer.defs)
    body_svg = "\n  ".join(writer.body)
    return f"""<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {w:.0f} {h:.0f}"
     width="{w:.0f}" height="{h:.0f}" preserveAspectRatio="xMidYMid meet">
  <defs>
    {defs_svg}
  </defs>
  <rect x="0" y="0" width="{w:.0f}" height="{h:.0f}" fill="{_BG}"/>
  {body_svg}
</svg>"""


def render_svg_html(frame: Frame, images: ImageProvider | None = None) -> str:
    """Return a self-contained HTML page with the frame's SVG filling the window.

    Suitable for `st.components.v1.html()` or writing to disk.
    """
    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<style>
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
html, body {{
    width: 100%;
    height: 100%;
    background: {_BG};
    overflow: hidden;
}}
svg {{
    display: block;
    width: 100%;
    height: 100%;
}}
</style>
</head>
<body>
{render_svg(frame, images)}
</body>
</html>"""
