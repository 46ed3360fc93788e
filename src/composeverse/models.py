"""Data model definitions — explicit boundaries between clock, compute, and render layers."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum

Point = tuple[float, float]


def rotate_point(point: Point, angle_degrees: float, pivot: Point) -> Point:
    """Rotate `point` clockwise on screen (y-down) by `angle_degrees` around `pivot`."""
    rad = math.radians(angle_degrees)
    cos_a, sin_a = math.cos(rad), math.sin(rad)
    dx = point[0] - pivot[0]
    dy = point[1] - pivot[1]
    return (pivot[0] + dx * cos_a - dy * sin_a, pivot[1] + dx * sin_a + dy * cos_a)


@dataclass(frozen=True)
class Color:
    """sRGB colour with a separate float alpha."""

    red: int  # 0-255
    green: int  # 0-255
    blue: int  # 0-255
    alpha: float = 1.0  # 0.0-1.0

    @classmethod
    def from_argb(cls, argb: int) -> Color:
        """Build from a 32-bit 0xAARRGGBB literal."""
        return cls(
            red=(argb >> 16) & 0xFF,
            green=(argb >> 8) & 0xFF,
            blue=argb & 0xFF,
            alpha=((argb >> 24) & 0xFF) / 255,
        )

    def with_alpha(self, alpha: float) -> Color:
        return replace(self, alpha=max(0.0, min(1.0, alpha)))

    def to_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    def to_css(self) -> str:
        return f"rgba({self.red},{self.green},{self.blue},{self.alpha:.3f})"

    def to_rgba(self) -> tuple[float, float, float, float]:
        """Matplotlib-style RGBA tuple in [0, 1]."""
        return (self.red / 255, self.green / 255, self.blue / 255, self.alpha)


def sample_gradient(colors: tuple[Color, ...], fraction: float) -> Color:
    """Colour at `fraction` ∈ [0, 1] along evenly spaced gradient stops."""
    if len(colors) == 1:
        return colors[0]
    pos = max(0.0, min(1.0, fraction)) * (len(colors) - 1)
    i = min(int(pos), len(colors) - 2)
    f = pos - i
    a, b = colors[i], colors[i + 1]
    return Color(
        round(a.red + (b.red - a.red) * f),
        round(a.green + (b.green - a.green) * f),
        round(a.blue + (b.blue - a.blue) * f),
        a.alpha + (b.alpha - a.alpha) * f,
    )


WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)
TRANSPARENT = Color(0, 0, 0, 0.0)


@dataclass(frozen=True)
class LinearGradient:
    """Colours spread evenly from `start` to `end`."""

    colors: tuple[Color, ...]
    start: Point
    end: Point

    def rotated(self, angle_degrees: float, pivot: Point) -> LinearGradient:
        return replace(
            self,
            start=rotate_point(self.start, angle_degrees, pivot),
            end=rotate_point(self.end, angle_degrees, pivot),
        )


@dataclass(frozen=True)
class RadialGradient:
    """Colours spread evenly from `center` outward to `radius`."""

    colors: tuple[Color, ...]
    center: Point
    radius: float

    def rotated(self, angle_degrees: float, pivot: Point) -> RadialGradient:
        return replace(self, center=rotate_point(self.center, angle_degrees, pivot))


Paint = Color | LinearGradient | RadialGradient


def _rotate_paint(paint: Paint, angle_degrees: float, pivot: Point) -> Paint:
    if isinstance(paint, Color):
        return paint
    return paint.rotated(angle_degrees, pivot)


@dataclass(frozen=True)
class CelestialBody:
    """A body on the orrery. Defined once at startup, never mutated."""

    name: str  # Display label ("Earth")
    color: Color
    radius: float  # Body radius in design units
    orbital_radius: float  # Distance from the sun in design units
    orbital_velocity: float  # Multiplier applied to the master rotation angle
    has_rings: bool = False
    is_rider_host: bool = False


@dataclass(frozen=True)
class Viewport:
    """Drawing surface size in pixels."""

    width: float
    height: float

    @property
    def center(self) -> Point:
        return (self.width / 2, self.height / 2)

    @property
    def scale_factor(self) -> float:
        """Uniform multiplier mapping the 1500-unit design space onto the surface."""
        return min(self.width, self.height) / 1500

    @property
    def is_landscape(self) -> bool:
        return self.width > self.height


@dataclass(frozen=True)
class ClockState:
    """Every animation channel sampled at one instant."""

    elapsed_ms: float
    rotation_degrees: float  # 0 → 360, 40s
    twinkle: float  # 0.4 ↔ 1.0
    wave: float  # -5 ↔ 5
    title_float: float  # -5 ↔ 5
    nebula_alpha: float  # 0.1 ↔ 0.4
    shooting_star_progress: float  # 0 → 1 with holds
    jump_altitude: float  # 0 → 1 → 0 with holds


class RiderPhase(Enum):
    """Named phases of the launch loop, derived from (altitude, direction)."""

    IDLE = "idle"
    IGNITION = "ignition"
    ASCENT = "ascent"
    PEAK = "peak"
    DESCENT = "descent"
    LANDED = "landed"


@dataclass(frozen=True)
class BodyPlacement:
    """Screen-space position of a body for the current frame."""

    body: CelestialBody
    position: Point
    radius: float  # Scaled body radius
    orbital_radius: float  # Scaled orbital radius


@dataclass(frozen=True)
class RiderPose:
    """Where and how the rider is drawn this frame."""

    position: Point
    size: float
    rotation_degrees: float
    altitude: float
    is_descending: bool
    phase: RiderPhase
    caption: str


@dataclass(frozen=True)
class StarPoint:
    """One background star. Layout is seeded, so it never changes between frames."""

    x: float
    y: float
    base_alpha: float  # 0.2-0.7
    radius: float  # 0.5-2.0 px
    twinkles: bool  # Alpha follows the twinkle channel


@dataclass(frozen=True)
class Nebula:
    x: float
    y: float
    radius: float
    color: Color


@dataclass(frozen=True)
class TextExtent:
    """Bounding box of a measured text run, in pixels."""

    width: float
    height: float


# --- Draw primitives ---


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float
    paint: Paint
    stroke_width: float | None = None  # None = filled
    alpha: float = 1.0

    def rotated(self, angle_degrees: float, pivot: Point) -> Circle:
        return replace(
            self,
            center=rotate_point(self.center, angle_degrees, pivot),
            paint=_rotate_paint(self.paint, angle_degrees, pivot),
        )


@dataclass(frozen=True)
class Oval:
    top_left: Point
    size: tuple[float, float]  # (width, height)
    paint: Paint
    stroke_width: float | None = None
    alpha: float = 1.0

    @property
    def center(self) -> Point:
        return (self.top_left[0] + self.size[0] / 2, self.top_left[1] + self.size[1] / 2)

    def rotated(self, angle_degrees: float, pivot: Point) -> Oval:
        # Axis-aligned ovals only move their centre; the tilt is not kept.
        cx, cy = rotate_point(self.center, angle_degrees, pivot)
        return replace(
            self,
            top_left=(cx - self.size[0] / 2, cy - self.size[1] / 2),
            paint=_rotate_paint(self.paint, angle_degrees, pivot),
        )


@dataclass(frozen=True)
class Line:
    start: Point
    end: Point
    paint: Paint
    width: float = 1.0
    alpha: float = 1.0

    def rotated(self, angle_degrees: float, pivot: Point) -> Line:
        return replace(
            self,
            start=rotate_point(self.start, angle_degrees, pivot),
            end=rotate_point(self.end, angle_degrees, pivot),
            paint=_rotate_paint(self.paint, angle_degrees, pivot),
        )


@dataclass(frozen=True)
class MoveTo:
    point: Point


@dataclass(frozen=True)
class LineTo:
    point: Point


@dataclass(frozen=True)
class QuadTo:
    control: Point
    point: Point


@dataclass(frozen=True)
class CubicTo:
    control1: Point
    control2: Point
    point: Point


@dataclass(frozen=True)
class Close:
    pass


PathCommand = MoveTo | LineTo | QuadTo | CubicTo | Close


def _rotate_command(cmd: PathCommand, angle_degrees: float, pivot: Point) -> PathCommand:
    if isinstance(cmd, (MoveTo, LineTo)):
        return type(cmd)(rotate_point(cmd.point, angle_degrees, pivot))
    if isinstance(cmd, QuadTo):
        return QuadTo(
            rotate_point(cmd.control, angle_degrees, pivot),
            rotate_point(cmd.point, angle_degrees, pivot),
        )
    if isinstance(cmd, CubicTo):
        return CubicTo(
            rotate_point(cmd.control1, angle_degrees, pivot),
            rotate_point(cmd.control2, angle_degrees, pivot),
            rotate_point(cmd.point, angle_degrees, pivot),
        )
    return cmd


@dataclass(frozen=True)
class Path:
    commands: tuple[PathCommand, ...]
    paint: Paint
    stroke_width: float | None = None
    alpha: float = 1.0

    def to_svg_d(self) -> str:
        """SVG path data string; also understood by Plotly shapes."""
        parts: list[str] = []
        for cmd in self.commands:
            if isinstance(cmd, MoveTo):
                parts.append(f"M {cmd.point[0]:.2f},{cmd.point[1]:.2f}")
            elif isinstance(cmd, LineTo):
                parts.append(f"L {cmd.point[0]:.2f},{cmd.point[1]:.2f}")
            elif isinstance(cmd, QuadTo):
                parts.append(
                    f"Q {cmd.control[0]:.2f},{cmd.control[1]:.2f}"
                    f" {cmd.point[0]:.2f},{cmd.point[1]:.2f}"
                )
            elif isinstance(cmd, CubicTo):
                parts.append(
                    f"C {cmd.control1[0]:.2f},{cmd.control1[1]:.2f}"
                    f" {cmd.control2[0]:.2f},{cmd.control2[1]:.2f}"
                    f" {cmd.point[0]:.2f},{cmd.point[1]:.2f}"
                )
            else:
                parts.append("Z")
        return " ".join(parts)

    def rotated(self, angle_degrees: float, pivot: Point) -> Path:
        return replace(
            self,
            commands=tuple(
                _rotate_command(c, angle_degrees, pivot) for c in self.commands
            ),
            paint=_rotate_paint(self.paint, angle_degrees, pivot),
        )


@dataclass(frozen=True)
class Text:
    text: str
    top_left: Point
    font_size: float  # Pixels
    paint: Paint
    bold: bool = False
    letter_spacing: float = 0.0
    alpha: float = 1.0

    def rotated(self, angle_degrees: float, pivot: Point) -> Text:
        return replace(
            self,
            top_left=rotate_point(self.top_left, angle_degrees, pivot),
            paint=_rotate_paint(self.paint, angle_degrees, pivot),
        )


@dataclass(frozen=True)
class ImageBlit:
    """Bitmap drawn into a square, clipped to a circle (the cockpit window)."""

    resource: str  # Resource identifier resolved by the host's image provider
    top_left: Point
    size: float
    clip_center: Point
    clip_radius: float

    def rotated(self, angle_degrees: float, pivot: Point) -> ImageBlit:
        cx, cy = rotate_point(
            (self.top_left[0] + self.size / 2, self.top_left[1] + self.size / 2),
            angle_degrees,
            pivot,
        )
        return replace(
            self,
            top_left=(cx - self.size / 2, cy - self.size / 2),
            clip_center=rotate_point(self.clip_center, angle_degrees, pivot),
        )


@dataclass(frozen=True)
class Group:
    """Children drawn under a rotation about `pivot` (screen degrees, clockwise)."""

    children: tuple[DrawOp, ...]
    rotation_degrees: float = 0.0
    pivot: Point = (0.0, 0.0)


DrawOp = Circle | Oval | Line | Path | Text | ImageBlit | Group

# Maps an `ImageBlit.resource` id to PNG bytes; None when the host has no such image.
ImageProvider = Callable[[str], bytes | None]


# --- Frame output ---


@dataclass(frozen=True)
class RiderActivated:
    """The rider's one-shot start-up delay has elapsed."""

    elapsed_ms: float


@dataclass(frozen=True)
class HapticPulse:
    """Fire-and-forget vibration request, emitted once per launch."""

    duration_ms: int = 50


FrameEvent = RiderActivated | HapticPulse


@dataclass(frozen=True)
class Frame:
    """The sole input to renderers. Fully computed state for one tick."""

    viewport: Viewport
    clock: ClockState
    ops: tuple[DrawOp, ...]
    rider: RiderPose | None = None
    events: tuple[FrameEvent, ...] = field(default=())
