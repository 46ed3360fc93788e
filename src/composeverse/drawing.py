"""Scene renderer — turns one instant of the clock into an ordered list of draw ops.

Nothing here touches a drawing surface. Every function returns primitives from
`composeverse.models`; the backends in `composeverse.renderers` paint them.

Z-order is fixed: nebulae → stars → sun glow → sun → sun label → title →
(per body: orbit, rings, atmosphere, disk, label, rider) → shooting star.
"""

from __future__ import annotations

import math
import random
from collections.abc import Iterator
from typing import Protocol

from composeverse.geometry import direction_unit, lerp_point, offset
from composeverse.models import (
    BLACK,
    TRANSPARENT,
    WHITE,
    BodyPlacement,
    Circle,
    ClockState,
    Close,
    Color,
    CubicTo,
    DrawOp,
    Group,
    ImageBlit,
    Line,
    LinearGradient,
    LineTo,
    MoveTo,
    Nebula,
    Path,
    QuadTo,
    RadialGradient,
    RiderPose,
    StarPoint,
    Text,
    TextExtent,
    Viewport,
)
from composeverse.scene import SUN_GLOW_RADIUS, SUN_LABEL_OFFSET, SUN_RADIUS

STAR_SEED = 42
STAR_COUNT = 200
NEBULA_SEED = 99
NEBULA_COUNT = 3
NEBULA_COLORS = (
    Color.from_argb(0xFF311B92),
    Color.from_argb(0xFF006064),
    Color.from_argb(0xFF1B5E20),
)

# Design-space font sizes are density-independent; multiply to get pixels.
TEXT_DENSITY = 2.5
LABEL_FONT = 10.0
CAPTION_FONT = 9.0
TITLE = "ComposeVerse"

RIDER_IMAGE = "rajesh"


class TextMeasurer(Protocol):
    def measure(
        self,
        text: str,
        font_size: float,
        bold: bool = False,
        letter_spacing: float = 0.0,
    ) -> TextExtent: ...


class HeuristicTextMeasurer:
    """Average-glyph-width estimate; good enough to centre short labels."""

    def __init__(self, char_width: float = 0.6, line_height: float = 1.2):
        self.char_width = char_width
        self.line_height = line_height

    def measure(
        self,
        text: str,
        font_size: float,
        bold: bool = False,
        letter_spacing: float = 0.0,
    ) -> TextExtent:
        glyph = font_size * self.char_width * (1.08 if bold else 1.0)
        width = len(text) * glyph + max(len(text) - 1, 0) * letter_spacing
        return TextExtent(width=width, height=font_size * self.line_height)


def starfield(viewport: Viewport, seed: int = STAR_SEED, count: int = STAR_COUNT) -> tuple[StarPoint, ...]:
    """Seeded star layout; identical for identical viewports, across runs."""
    rng = random.Random(seed)
    stars: list[StarPoint] = []
    for i in range(count):
        x = rng.random() * viewport.width
        y = rng.random() * viewport.height
        base_alpha = rng.random() * 0.5 + 0.2
        radius = rng.random() * 1.5 + 0.5
        stars.append(StarPoint(x, y, base_alpha, radius, twinkles=i % 3 == 0))
    return tuple(stars)


def nebulae(viewport: Viewport, seed: int = NEBULA_SEED) -> tuple[Nebula, ...]:
    rng = random.Random(seed)
    clouds: list[Nebula] = []
    for _ in range(NEBULA_COUNT):
        x = rng.random() * viewport.width
        y = rng.random() * viewport.height
        radius = 300 + rng.random() * 200
        clouds.append(Nebula(x, y, radius, rng.choice(NEBULA_COLORS)))
    return tuple(clouds)


def draw_nebulae(viewport: Viewport, alpha: float) -> Iterator[DrawOp]:
    for n in nebulae(viewport):
        yield Circle(
            center=(n.x, n.y),
            radius=n.radius,
            paint=RadialGradient(
                (n.color.with_alpha(alpha), TRANSPARENT), (n.x, n.y), n.radius
            ),
        )


def draw_stars(viewport: Viewport, twinkle: float) -> Iterator[DrawOp]:
    for s in starfield(viewport):
        alpha = s.base_alpha * twinkle if s.twinkles else s.base_alpha
        yield Circle(center=(s.x, s.y), radius=s.radius, paint=WHITE.with_alpha(alpha))


def draw_text_centered(
    text: str,
    position: tuple[float, float],
    measurer: TextMeasurer,
    color: Color,
    scale: float,
) -> Text:
    font_size = LABEL_FONT * scale * TEXT_DENSITY
    extent = measurer.measure(text, font_size)
    return Text(
        text=text,
        top_left=(position[0] - extent.width / 2, position[1] - extent.height / 2),
        font_size=font_size,
        paint=color,
    )


def draw_sun(viewport: Viewport, measurer: TextMeasurer) -> Iterator[DrawOp]:
    center = viewport.center
    scale = viewport.scale_factor
    glow = SUN_GLOW_RADIUS * scale
    yield Circle(
        center,
        glow,
        RadialGradient(
            (Color.from_argb(0xFFFFEA00), Color.from_argb(0xFFFF9800), TRANSPARENT),
            center,
            glow,
        ),
    )
    disk = SUN_RADIUS * scale
    yield Circle(
        center,
        disk,
        RadialGradient(
            (Color.from_argb(0xFFFFD600), Color.from_argb(0xFFFF8F00)), center, disk
        ),
    )
    yield draw_text_centered(
        "Sun",
        (center[0], center[1] - SUN_LABEL_OFFSET * scale),
        measurer,
        WHITE,
        scale,
    )


def draw_title(viewport: Viewport, y_offset: float, measurer: TextMeasurer) -> Iterator[DrawOp]:
    """Floating "ComposeVerse" banner: left-aligned in landscape, centred in portrait."""
    scale = viewport.scale_factor
    landscape = viewport.is_landscape
    font_size = (28.0 if landscape else 36.0) * scale * TEXT_DENSITY
    spacing = (3.0 if landscape else 6.0) * TEXT_DENSITY
    extent = measurer.measure(TITLE, font_size, bold=True, letter_spacing=spacing)
    x = 40 * scale if landscape else viewport.width / 2 - extent.width / 2
    y = (120.0 if landscape else 180.0) * scale + y_offset
    span = ((x, y), (x + extent.width, y + extent.height))
    glow = LinearGradient(
        (
            Color.from_argb(0xFF00B0FF),
            Color.from_argb(0xFF6200EA),
            Color.from_argb(0xFF00B0FF),
        ),
        *span,
    )
    main = LinearGradient(
        (Color.from_argb(0xFF80D8FF), Color.from_argb(0xFFB388FF)), *span
    )
    yield Text(TITLE, (x, y), font_size, glow, bold=True, letter_spacing=spacing, alpha=0.5)
    yield Text(TITLE, (x, y), font_size, main, bold=True, letter_spacing=spacing)


def draw_body(
    placement: BodyPlacement, viewport: Viewport, measurer: TextMeasurer
) -> Iterator[DrawOp]:
    """Orbit ring, optional rings, atmosphere, sun-lit disk and label for one body."""
    body = placement.body
    center = viewport.center
    scale = viewport.scale_factor
    pos = placement.position
    r = placement.radius

    yield Circle(center, placement.orbital_radius, WHITE.with_alpha(0.15), stroke_width=1.0)

    if body.has_rings:
        yield Circle(pos, r * 1.8, body.color.with_alpha(0.3), stroke_width=8 * scale)

    yield Circle(
        pos,
        r * 1.5,
        RadialGradient((body.color.with_alpha(0.3), TRANSPARENT), pos, r * 1.5),
    )

    light = direction_unit(pos, center)
    yield Circle(
        pos,
        r,
        RadialGradient(
            (body.color, body.color.with_alpha(0.5), BLACK.with_alpha(0.8)),
            offset(pos, light, r * 0.3),
            r,
        ),
    )

    yield draw_text_centered(
        body.name, (pos[0], pos[1] + r + 15 * scale), measurer, WHITE, scale
    )


def _rocket(pose: RiderPose, wave: float, scale: float) -> Group:
    """Rocket hull with the rider in the cockpit, swaying about its base."""
    px, py = pose.position
    w = pose.size * 0.9
    h = pose.size * 1.8
    parts: list[DrawOp] = []

    if pose.altitude > 0.01:
        flicker = math.fmod(wave, 5.0) * scale
        plume_end = py + h * 0.8 + flicker
        parts.append(
            Path(
                (
                    MoveTo((px - w * 0.3, py)),
                    QuadTo((px, plume_end), (px + w * 0.3, py)),
                    Close(),
                ),
                LinearGradient(
                    (
                        Color.from_argb(0xFFFFEA00),
                        Color.from_argb(0xFFFF5722),
                        TRANSPARENT,
                    ),
                    (px, py),
                    (px, plume_end),
                ),
                alpha=0.8,
            )
        )
        parts.append(Circle((px, py + 5 * scale), w * 0.2, WHITE.with_alpha(0.6)))

    parts.append(
        Path(
            (
                MoveTo((px - w * 0.45, py - h * 0.4)),
                LineTo((px - w * 0.9, py)),
                LineTo((px - w * 0.45, py)),
                Close(),
                MoveTo((px + w * 0.45, py - h * 0.4)),
                LineTo((px + w * 0.9, py)),
                LineTo((px + w * 0.45, py)),
                Close(),
            ),
            Color.from_argb(0xFFC62828),
        )
    )

    half = w * 0.5
    parts.append(
        Path(
            (
                MoveTo((px, py - h)),
                CubicTo((px + half, py - h), (px + half, py - h * 0.6), (px + half, py - h * 0.3)),
                LineTo((px + half, py)),
                LineTo((px - half, py)),
                LineTo((px - half, py - h * 0.3)),
                CubicTo((px - half, py - h * 0.6), (px - half, py - h), (px, py - h)),
                Close(),
            ),
            LinearGradient(
                (
                    Color.from_argb(0xFFF5F5F5),
                    Color.from_argb(0xFFBDBDBD),
                    Color.from_argb(0xFF757575),
                ),
                (px - w, py),
                (px + w, py),
            ),
        )
    )

    detail = BLACK.with_alpha(0.2)
    parts.append(Line((px - half, py - h * 0.35), (px + half, py - h * 0.35), detail, width=1 * scale))
    for i in range(-2, 3):
        parts.append(Circle((px + i * w * 0.2, py - 10 * scale), 1.5 * scale, detail))

    window = w * 0.8
    wc = (px, py - h * 0.6)
    parts.append(Circle(wc, window * 0.55, Color.from_argb(0xFF455A64)))
    parts.append(
        Circle(
            wc,
            window * 0.5,
            RadialGradient(
                (Color.from_argb(0xFFB3E5FC), Color.from_argb(0xFF03A9F4)),
                (wc[0] - window * 0.1, wc[1] - window * 0.1),
                window * 0.5,
            ),
        )
    )
    face = window * 0.95
    parts.append(
        ImageBlit(
            resource=RIDER_IMAGE,
            top_left=(wc[0] - face / 2, wc[1] - face / 2),
            size=face,
            clip_center=wc,
            clip_radius=window * 0.5,
        )
    )

    return Group(tuple(parts), rotation_degrees=pose.rotation_degrees, pivot=pose.position)


def _near_miss(pose: RiderPose, scale: float) -> Iterator[DrawOp]:
    """A meteor streaking past mid-ascent."""
    if pose.is_descending or not 0.3 < pose.altitude < 0.7:
        return
    px, py = pose.position
    progress = (pose.altitude - 0.3) / 0.4
    head = lerp_point(
        (px + 1000 * scale, py - 500 * scale),
        (px - 1000 * scale, py + 500 * scale),
        progress,
    )
    tail = (head[0] + 80 * scale, head[1] - 40 * scale)
    yield Line(tail, head, LinearGradient((TRANSPARENT, WHITE), tail, head), width=3 * scale)
    yield Circle(head, 3.5 * scale, WHITE)


def _speech_bubble(pose: RiderPose, scale: float, measurer: TextMeasurer) -> Iterator[DrawOp]:
    px, py = pose.position
    size = pose.size
    font_size = CAPTION_FONT * scale * TEXT_DENSITY
    extent = measurer.measure(pose.caption, font_size)
    bw = extent.width + 12 * scale
    bh = extent.height + 4 * scale
    bx, by = px + size + 5 * scale, py - size - 20 * scale

    commands = (
        MoveTo((bx, by)),
        LineTo((bx + bw, by)),
        LineTo((bx + bw, by - bh)),
        LineTo((bx, by - bh)),
        Close(),
        # Pointer back toward the rider's head
        MoveTo((bx + 2 * scale, by)),
        LineTo((px + size * 0.5, py - size * 1.2)),
        LineTo((bx + 12 * scale, by)),
    )
    yield Path(
        commands,
        LinearGradient((WHITE, Color.from_argb(0xFFF5F5F5)), (bx, by - bh), (bx + bw, by)),
    )
    yield Path(commands, Color.from_argb(0xFFFFD600), stroke_width=1.0)

    text_pos = (bx + 6, by - bh + 2)
    yield Text(
        pose.caption,
        text_pos,
        font_size,
        LinearGradient(
            (
                Color.from_argb(0xFFE91E63),
                Color.from_argb(0xFF9C27B0),
                Color.from_argb(0xFF3F51B5),
                Color.from_argb(0xFF00BCD4),
            ),
            text_pos,
            (text_pos[0] + extent.width, text_pos[1]),
        ),
    )


def draw_rider(
    pose: RiderPose, wave: float, scale: float, measurer: TextMeasurer
) -> Iterator[DrawOp]:
    yield _rocket(pose, wave, scale)
    yield from _near_miss(pose, scale)
    yield from _speech_bubble(pose, scale, measurer)


def draw_shooting_star(viewport: Viewport, progress: float) -> Iterator[DrawOp]:
    if progress <= 0.0 or progress >= 1.0:
        return
    w, h = viewport.width, viewport.height
    head = lerp_point((w * 1.2, h * 0.2), (-w * 0.2, h * 0.8), progress)
    tail = (head[0] + 50, head[1] - 20)
    yield Line(tail, head, LinearGradient((TRANSPARENT, WHITE), tail, head), width=2.0)
    yield Circle(head, 2.0, WHITE)


def render_scene(
    clock: ClockState,
    viewport: Viewport,
    placements: tuple[BodyPlacement, ...],
    rider: RiderPose | None = None,
    measurer: TextMeasurer | None = None,
) -> tuple[DrawOp, ...]:
    """Every draw op for one frame, in paint order.

    Args:
        clock: Channel values for this instant.
        viewport: Surface size.
        placements: Body positions for this instant, in scene order.
        rider: Rider pose, or None when the rider is hidden.
        measurer: Text measuring capability; a heuristic one when omitted.

    Returns:
        Tuple of draw primitives; later ops paint over earlier ones.
    """
    measurer = measurer or HeuristicTextMeasurer()
    scale = viewport.scale_factor
    ops: list[DrawOp] = []
    ops.extend(draw_nebulae(viewport, clock.nebula_alpha))
    ops.extend(draw_stars(viewport, clock.twinkle))
    ops.extend(draw_sun(viewport, measurer))
    ops.extend(draw_title(viewport, clock.title_float, measurer))
    for placement in placements:
        ops.extend(draw_body(placement, viewport, measurer))
        if rider is not None and placement.body.is_rider_host:
            ops.extend(draw_rider(rider, clock.wave, scale, measurer))
    ops.extend(draw_shooting_star(viewport, clock.shooting_star_progress))
    return tuple(ops)


def flatten(ops: tuple[DrawOp, ...]) -> Iterator[DrawOp]:
    """Leaf ops with group rotations baked into their geometry.

    For backends that have no transform stack of their own.
    """
    for op in ops:
        if isinstance(op, Group):
            for child in flatten(op.children):
                yield child.rotated(op.rotation_degrees, op.pivot)  # type: ignore[union-attr]
        else:
            yield op
