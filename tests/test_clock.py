import pytest

from composeverse.clock import (
    FAST_OUT_SLOW_IN,
    JUMP_ALTITUDE,
    LINEAR,
    ROTATION,
    SHOOTING_STAR,
    TWINKLE,
    WAVE,
    AnimationClock,
    BounceChannel,
    Keyframe,
    KeyframeChannel,
    RestartChannel,
)


@pytest.mark.parametrize("name", list(AnimationClock().channels))
@pytest.mark.parametrize("t", [0, 1_234, 7_777, 19_999])
def test_channels_loop_seamlessly(name: str, t: int) -> None:
    clock = AnimationClock()
    period = clock.channels[name].period_ms
    assert clock.value(name, t + period) == pytest.approx(clock.value(name, t))
    assert clock.value(name, t + 3 * period) == pytest.approx(clock.value(name, t))


def test_sample_at_zero_is_every_initial_value() -> None:
    state = AnimationClock().sample(0)
    assert state.elapsed_ms == 0
    assert state.rotation_degrees == 0.0
    assert state.twinkle == pytest.approx(0.4)
    assert state.wave == pytest.approx(-5.0)
    assert state.title_float == pytest.approx(-5.0)
    assert state.nebula_alpha == pytest.approx(0.1)
    assert state.shooting_star_progress == 0.0
    assert state.jump_altitude == 0.0


def test_negative_time_is_clamped() -> None:
    clock = AnimationClock()
    assert clock.sample(-250) == clock.sample(0)


def test_unknown_channel_raises() -> None:
    with pytest.raises(KeyError):
        AnimationClock().value("gravity", 0)


def test_rotation_restarts_instead_of_reversing() -> None:
    assert ROTATION.value(10_000) == pytest.approx(90.0)
    assert ROTATION.value(20_000) == pytest.approx(180.0)
    assert ROTATION.value(39_999) == pytest.approx(359.991)
    assert ROTATION.value(40_000) == 0.0


def test_bounce_reaches_target_at_half_period_and_mirrors() -> None:
    assert TWINKLE.period_ms == 4_000
    assert TWINKLE.value(2_000) == pytest.approx(1.0)
    assert TWINKLE.value(4_000) == pytest.approx(0.4)
    assert WAVE.value(1_500) == pytest.approx(WAVE.value(2_500))


def test_jump_altitude_keyframes() -> None:
    assert JUMP_ALTITUDE.value(1_000) == 0.0
    assert JUMP_ALTITUDE.value(2_500) == pytest.approx(0.01)
    assert JUMP_ALTITUDE.value(6_250) == pytest.approx(0.505)
    assert JUMP_ALTITUDE.value(10_000) == pytest.approx(1.0)
    assert JUMP_ALTITUDE.value(18_000) == pytest.approx(0.009)
    assert JUMP_ALTITUDE.value(19_000) == 0.0


def test_shooting_star_waits_then_streaks_then_holds() -> None:
    assert SHOOTING_STAR.value(3_000) == 0.0
    assert SHOOTING_STAR.value(5_500) == pytest.approx(0.5)
    assert SHOOTING_STAR.value(8_000) == 1.0


def test_keyframe_channel_holds_outside_its_frames() -> None:
    channel = KeyframeChannel.of(1_000, (2.0, 200), (4.0, 600))
    assert channel.initial_value == 2.0
    assert channel.value(100) == 2.0
    assert channel.value(400) == pytest.approx(3.0)
    assert channel.value(900) == 4.0


@pytest.mark.parametrize(
    "period, keyframes",
    [
        (1_000, ()),
        (1_000, (Keyframe(0.0, 500), Keyframe(1.0, 100))),
        (1_000, (Keyframe(0.0, -1), Keyframe(1.0, 100))),
        (1_000, (Keyframe(0.0, 0), Keyframe(1.0, 1_500))),
        (0, (Keyframe(0.0, 0),)),
    ],
)
def test_invalid_keyframe_channels_are_rejected(
    period: float, keyframes: tuple[Keyframe, ...]
) -> None:
    with pytest.raises(ValueError):
        KeyframeChannel(period, keyframes)


def test_non_positive_periods_are_rejected() -> None:
    with pytest.raises(ValueError):
        RestartChannel(0.0, 1.0, 0)
    with pytest.raises(ValueError):
        BounceChannel(0.0, 1.0, -5)


def test_easing_endpoints_and_monotonicity() -> None:
    assert FAST_OUT_SLOW_IN(0.0) == 0.0
    assert FAST_OUT_SLOW_IN(1.0) == 1.0
    assert LINEAR(0.3) == pytest.approx(0.3)
    samples = [FAST_OUT_SLOW_IN(i / 20) for i in range(21)]
    assert samples == sorted(samples)
    # Fast out: more than halfway there at the halfway mark.
    assert FAST_OUT_SLOW_IN(0.5) > 0.5
