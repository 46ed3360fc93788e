import pytest

from composeverse.clock import JUMP_ALTITUDE
from composeverse.models import HapticPulse, RiderActivated, RiderPhase
from composeverse.rider import (
    APPROACH,
    BRACE,
    GREETING,
    IGNITION,
    JUMPING,
    LANDING,
    NEAR_MISS,
    POWER,
    ActivationGate,
    DescentTracker,
    IgnitionTrigger,
    classify_phase,
    compute_rider_pose,
    select_caption,
)


def test_descent_tracker_follows_altitude_direction() -> None:
    tracker = DescentTracker()
    altitudes = [0.0, 0.2, 0.5, 0.8, 1.0, 0.7, 0.3, 0.0]
    flags = [tracker.update(a) for a in altitudes]
    assert flags == [False, False, False, False, False, True, True, True]


@pytest.mark.parametrize(
    "altitude, descending, caption",
    [
        (0.0, False, GREETING),
        (0.049, False, GREETING),
        (0.05, False, IGNITION),
        (0.19, False, IGNITION),
        (0.2, False, JUMPING),
        (0.5, False, NEAR_MISS),
        (0.69, False, NEAR_MISS),
        (0.7, False, APPROACH),
        (1.0, True, APPROACH),
        (0.85, True, APPROACH),
        (0.84, True, POWER),
        (0.4, True, POWER),
        (0.39, True, BRACE),
        (0.02, True, BRACE),
        (0.019, True, LANDING),
    ],
)
def test_caption_bands(altitude: float, descending: bool, caption: str) -> None:
    assert select_caption(altitude, descending) == caption


@pytest.mark.parametrize(
    "altitude, descending, phase",
    [
        (0.0, False, RiderPhase.IDLE),
        (0.1, False, RiderPhase.IGNITION),
        (0.5, False, RiderPhase.ASCENT),
        (0.99, False, RiderPhase.PEAK),
        (0.99, True, RiderPhase.PEAK),
        (0.5, True, RiderPhase.DESCENT),
        (0.01, True, RiderPhase.LANDED),
    ],
)
def test_phase_classification(altitude: float, descending: bool, phase: RiderPhase) -> None:
    assert classify_phase(altitude, descending) is phase


def test_ignition_trigger_fires_once_per_launch() -> None:
    trigger = IgnitionTrigger(duration_ms=40)
    assert trigger.update(0.0, False) is None
    assert trigger.update(0.05, False) == HapticPulse(40)
    assert trigger.update(0.08, False) is None
    # Descending through the band never fires.
    assert trigger.update(0.05, True) is None
    # Settling at the floor re-arms for the next launch.
    assert trigger.update(0.005, True) is None
    assert trigger.update(0.05, False) == HapticPulse(40)


def test_ignition_trigger_over_three_loops() -> None:
    tracker = DescentTracker()
    trigger = IgnitionTrigger()
    pulses = []
    for t in range(0, 60_000, 16):
        altitude = JUMP_ALTITUDE.value(t)
        pulse = trigger.update(altitude, tracker.update(altitude))
        if pulse is not None:
            pulses.append(t)
    assert len(pulses) == 3
    assert [t % 20_000 for t in pulses] == [pulses[0] % 20_000] * 3


def test_activation_gate_opens_once() -> None:
    gate = ActivationGate(delay_ms=500)
    assert gate.update(100) is None
    assert not gate.active
    assert gate.update(512) == RiderActivated(512)
    assert gate.active
    assert gate.update(600) is None


def test_rider_pose_sits_on_the_sun_to_host_ray() -> None:
    pose = compute_rider_pose(
        center=(0.0, 0.0),
        host_position=(0.0, 10.0),
        peak_distance=100.0,
        altitude=0.5,
        is_descending=False,
        wave=4.0,
        scale=1.0,
    )
    assert pose.position == pytest.approx((0.0, 60.0))
    assert pose.size == pytest.approx(60.0)
    assert pose.rotation_degrees == 2.0
    assert pose.phase is RiderPhase.ASCENT
    assert pose.caption == NEAR_MISS
