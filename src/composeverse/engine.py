"""Frame engine — the one step a host calls per display tick."""

import logging
from collections.abc import Callable

from composeverse.clock import AnimationClock
from composeverse.compute import peak_distance, place_bodies
from composeverse.drawing import TextMeasurer, render_scene
from composeverse.models import (
    CelestialBody,
    Frame,
    FrameEvent,
    HapticPulse,
    RiderPose,
    Viewport,
)
from composeverse.rider import (
    ActivationGate,
    DescentTracker,
    IgnitionTrigger,
    compute_rider_pose,
)
from composeverse.scene import PLANETS, rider_host, rider_target

logger = logging.getLogger(__name__)

HapticCallback = Callable[[int], None]

PRIME_STEP_MS = 16.0


class Engine:
    """Owns the few pieces of state that outlive a frame.

    That is the previous altitude, the activation latch and the ignition
    latch. Everything else is recomputed from the clock on each `step`.
    Steps must be fed non-decreasing elapsed times.
    """

    def __init__(
        self,
        clock: AnimationClock | None = None,
        bodies: tuple[CelestialBody, ...] = PLANETS,
        measurer: TextMeasurer | None = None,
        haptics: HapticCallback | None = None,
        activation_delay_ms: float = 500.0,
        haptic_duration_ms: int = 50,
    ):
        self.clock = clock or AnimationClock()
        self.bodies = bodies
        self.measurer = measurer
        self.haptics = haptics
        self.host = rider_host(bodies)
        self.target = rider_target(bodies)
        self.descent = DescentTracker()
        self.gate = ActivationGate(activation_delay_ms)
        self.ignition = IgnitionTrigger(haptic_duration_ms)

    def step(self, elapsed_ms: float, viewport: Viewport) -> Frame:
        state = self.clock.sample(elapsed_ms)
        altitude = state.jump_altitude
        events: list[FrameEvent] = []

        is_descending = self.descent.update(altitude)
        activated = self.gate.update(state.elapsed_ms)
        if activated is not None:
            logger.info("Rider active after %.0f ms", activated.elapsed_ms)
            events.append(activated)
        pulse = self.ignition.update(altitude, is_descending)
        if pulse is not None:
            logger.info("Ignition at %.0f ms", state.elapsed_ms)
            events.append(pulse)
            self._vibrate(pulse)

        placements = place_bodies(state.rotation_degrees, viewport, self.bodies)
        rider: RiderPose | None = None
        if self.gate.active and altitude > 0.0:
            host = next(p for p in placements if p.body is self.host)
            rider = compute_rider_pose(
                center=viewport.center,
                host_position=host.position,
                peak_distance=peak_distance(self.host, self.target, viewport),
                altitude=altitude,
                is_descending=is_descending,
                wave=state.wave,
                scale=viewport.scale_factor,
            )

        ops = render_scene(state, viewport, placements, rider, self.measurer)
        return Frame(
            viewport=viewport, clock=state, ops=ops, rider=rider, events=tuple(events)
        )

    def _vibrate(self, pulse: HapticPulse) -> None:
        """Forward a pulse to the host. A missing or failing motor never stops a frame."""
        if self.haptics is None:
            return
        try:
            self.haptics(pulse.duration_ms)
        except Exception:
            logger.warning("Haptic feedback failed", exc_info=True)


def run(
    elapsed_ms: float,
    viewport: Viewport,
    measurer: TextMeasurer | None = None,
    activation_delay_ms: float = 500.0,
    haptic_duration_ms: int = 50,
) -> Frame:
    """Top-level entry point: a single frame from a fresh engine.

    Stateless hosts (snapshots, previews) use this; animated hosts keep an
    `Engine` so direction and one-shot events carry across frames. The
    engine is primed with the frame one tick earlier so the rider's direction
    of travel is known.
    """
    engine = Engine(
        measurer=measurer,
        activation_delay_ms=activation_delay_ms,
        haptic_duration_ms=haptic_duration_ms,
    )
    if elapsed_ms >= PRIME_STEP_MS:
        engine.step(elapsed_ms - PRIME_STEP_MS, viewport)
    return engine.step(elapsed_ms, viewport)
