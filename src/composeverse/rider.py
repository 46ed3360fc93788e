"""Rajesh's launch loop — pose, captions, and the one-shot edge detectors.

The loop has no explicit state variable. Phase and caption are derived each
frame from the altitude channel and whether it is falling; the only memory is
the previous altitude kept by `DescentTracker`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from composeverse.geometry import direction_unit, offset
from composeverse.models import (
    HapticPulse,
    Point,
    RiderActivated,
    RiderPhase,
    RiderPose,
)

BASE_SIZE = 30.0
SIZE_GROWTH = 2.0  # Size at peak = base × (1 + growth)

GREETING = "Hi from Rajesh"
IGNITION = "Ignition! 🚀"
JUMPING = "Woohooo! We're jumping! 🎢"
NEAR_MISS = "WHOA! That was close! ☄️💨"
APPROACH = "Neptune, here I come! 🌌"
POWER = "COMPOSE POWEEEERRR! ✨"
BRACE = "Brace for impact! ☄️"
LANDING = "Safe landing! 🏡"


@dataclass(frozen=True)
class CaptionRule:
    """One row of the caption table."""

    matches: Callable[[float, bool], bool]  # (altitude, is_descending) -> bool
    message: str


# Evaluated top to bottom; the first match wins. Extreme bands come first so
# overlapping ranges always resolve to a single row.
CAPTION_RULES: tuple[CaptionRule, ...] = (
    CaptionRule(lambda a, down: down and a < 0.02, LANDING),
    CaptionRule(lambda a, down: not down and a < 0.05, GREETING),
    CaptionRule(lambda a, down: not down and a >= 0.70, APPROACH),
    CaptionRule(lambda a, down: down and a >= 0.85, APPROACH),
    CaptionRule(lambda a, down: not down and a >= 0.50, NEAR_MISS),
    CaptionRule(lambda a, down: not down and a >= 0.20, JUMPING),
    CaptionRule(lambda a, down: not down, IGNITION),
    CaptionRule(lambda a, down: down and a >= 0.40, POWER),
    CaptionRule(lambda a, down: True, BRACE),
)


def select_caption(altitude: float, is_descending: bool) -> str:
    """Speech-bubble text for the given altitude and direction."""
    for rule in CAPTION_RULES:
        if rule.matches(altitude, is_descending):
            return rule.message
    raise AssertionError("caption table has no catch-all row")


def classify_phase(altitude: float, is_descending: bool) -> RiderPhase:
    if altitude <= 0.0:
        return RiderPhase.IDLE
    if altitude >= 0.98:
        return RiderPhase.PEAK
    if is_descending:
        return RiderPhase.LANDED if altitude < 0.02 else RiderPhase.DESCENT
    return RiderPhase.IGNITION if altitude < 0.2 else RiderPhase.ASCENT


class DescentTracker:
    """Remembers one frame of altitude to tell whether the rider is falling."""

    def __init__(self, initial: float = 0.0):
        self.previous = initial

    def update(self, altitude: float) -> bool:
        is_descending = altitude < self.previous
        self.previous = altitude
        return is_descending


class IgnitionTrigger:
    """Edge detector emitting one haptic pulse per launch.

    Fires the first time an ascending altitude enters the ignition band, then
    stays quiet until the altitude has settled back at the floor.
    """

    BAND_LOW = 0.01
    BAND_HIGH = 0.1

    def __init__(self, duration_ms: int = 50):
        self.duration_ms = duration_ms
        self.armed = True

    def update(self, altitude: float, is_descending: bool) -> HapticPulse | None:
        if altitude <= self.BAND_LOW:
            self.armed = True
            return None
        if self.armed and not is_descending and altitude < self.BAND_HIGH:
            self.armed = False
            return HapticPulse(self.duration_ms)
        return None


class ActivationGate:
    """One-shot start-up delay before the rider may appear."""

    def __init__(self, delay_ms: float = 500.0):
        self.delay_ms = delay_ms
        self.active = False

    def update(self, elapsed_ms: float) -> RiderActivated | None:
        if self.active or elapsed_ms < self.delay_ms:
            return None
        self.active = True
        return RiderActivated(elapsed_ms)


def compute_rider_pose(
    center: Point,
    host_position: Point,
    peak_distance: float,
    altitude: float,
    is_descending: bool,
    wave: float,
    scale: float,
) -> RiderPose:
    """Place the rider on the sun→host ray, `altitude × peak_distance` past the host.

    Args:
        center: Scene centre (the sun).
        host_position: Host body's screen position this frame.
        peak_distance: Scaled distance between the host orbit and the target orbit.
        altitude: Normalised jump altitude (0 = on the host, 1 = target orbit).
        is_descending: Whether altitude dropped since the previous frame.
        wave: Current wave channel value; the rider sways by half of it.
        scale: Viewport scale factor.

    Returns:
        RiderPose with position, size, rotation, phase and caption.
    """
    direction = direction_unit(center, host_position)
    return RiderPose(
        position=offset(host_position, direction, altitude * peak_distance),
        size=BASE_SIZE * scale * (1 + altitude * SIZE_GROWTH),
        rotation_degrees=wave / 2,
        altitude=altitude,
        is_descending=is_descending,
        phase=classify_phase(altitude, is_descending),
        caption=select_caption(altitude, is_descending),
    )
