"""Animation clock — looping, eased channels evaluated as pure functions of time.

Each channel is a pure function of elapsed milliseconds modulo its own period,
so the same `t` always yields the same value and `value(t) == value(t + period)`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from composeverse.models import ClockState


@dataclass(frozen=True)
class CubicBezierEasing:
    """CSS-style cubic-bezier easing through (0, 0), (x1, y1), (x2, y2), (1, 1)."""

    x1: float
    y1: float
    x2: float
    y2: float

    @staticmethod
    def _bezier(t: float, p1: float, p2: float) -> float:
        mt = 1 - t
        return 3 * mt * mt * t * p1 + 3 * mt * t * t * p2 + t * t * t

    def __call__(self, fraction: float) -> float:
        if fraction <= 0.0:
            return 0.0
        if fraction >= 1.0:
            return 1.0
        if self.x1 == self.y1 and self.x2 == self.y2:
            return fraction
        # x(t) is monotonic for x1, x2 in [0, 1]; bisect for the curve parameter.
        lo, hi = 0.0, 1.0
        t = fraction
        for _ in range(48):
            t = (lo + hi) / 2
            x = self._bezier(t, self.x1, self.x2)
            if abs(x - fraction) < 1e-7:
                break
            if x < fraction:
                lo = t
            else:
                hi = t
        return self._bezier(t, self.y1, self.y2)


LINEAR = CubicBezierEasing(0.0, 0.0, 1.0, 1.0)
FAST_OUT_SLOW_IN = CubicBezierEasing(0.4, 0.0, 0.2, 1.0)
LINEAR_OUT_SLOW_IN = CubicBezierEasing(0.0, 0.0, 0.2, 1.0)
FAST_OUT_LINEAR_IN = CubicBezierEasing(0.4, 0.0, 1.0, 1.0)


class Channel(Protocol):
    period_ms: float

    @property
    def initial_value(self) -> float: ...

    def value(self, t_ms: float) -> float: ...


def _lerp(a: float, b: float, fraction: float) -> float:
    return a + (b - a) * fraction


@dataclass(frozen=True)
class RestartChannel:
    """initial → target over one period, then jumps back to initial."""

    initial: float
    target: float
    period_ms: float
    easing: CubicBezierEasing = LINEAR

    def __post_init__(self) -> None:
        if self.period_ms <= 0:
            raise ValueError(f"period_ms must be positive, got {self.period_ms}")

    @property
    def initial_value(self) -> float:
        return self.initial

    def value(self, t_ms: float) -> float:
        local = max(t_ms, 0.0) % self.period_ms
        return _lerp(self.initial, self.target, self.easing(local / self.period_ms))


@dataclass(frozen=True)
class BounceChannel:
    """initial → target over one half-period, then the same path back in time."""

    initial: float
    target: float
    half_period_ms: float
    easing: CubicBezierEasing = LINEAR

    def __post_init__(self) -> None:
        if self.half_period_ms <= 0:
            raise ValueError(
                f"half_period_ms must be positive, got {self.half_period_ms}"
            )

    @property
    def period_ms(self) -> float:
        return 2 * self.half_period_ms

    @property
    def initial_value(self) -> float:
        return self.initial

    def value(self, t_ms: float) -> float:
        local = max(t_ms, 0.0) % self.period_ms
        if local > self.half_period_ms:
            local = self.period_ms - local
        return _lerp(self.initial, self.target, self.easing(local / self.half_period_ms))


@dataclass(frozen=True)
class Keyframe:
    value: float
    offset_ms: float


@dataclass(frozen=True)
class KeyframeChannel:
    """Piecewise-linear path through `(value, offset)` keyframes over one period.

    Outside the first/last keyframe offsets the boundary value is held.
    """

    period_ms: float
    keyframes: tuple[Keyframe, ...]

    def __post_init__(self) -> None:
        if self.period_ms <= 0:
            raise ValueError(f"period_ms must be positive, got {self.period_ms}")
        if not self.keyframes:
            raise ValueError("a keyframe channel needs at least one keyframe")
        offsets = [k.offset_ms for k in self.keyframes]
        if any(b < a for a, b in zip(offsets, offsets[1:])):
            raise ValueError(f"keyframe offsets must be non-decreasing: {offsets}")
        if offsets[0] < 0 or offsets[-1] > self.period_ms:
            raise ValueError(
                f"keyframe offsets must lie within [0, {self.period_ms}]: {offsets}"
            )

    @classmethod
    def of(cls, period_ms: float, *pairs: tuple[float, float]) -> KeyframeChannel:
        """Build from `(value, offset_ms)` pairs."""
        return cls(period_ms, tuple(Keyframe(v, at) for v, at in pairs))

    @property
    def initial_value(self) -> float:
        return self.value(0.0)

    def value(self, t_ms: float) -> float:
        local = max(t_ms, 0.0) % self.period_ms
        frames = self.keyframes
        if local <= frames[0].offset_ms:
            return frames[0].value
        for prev, nxt in zip(frames, frames[1:]):
            if local <= nxt.offset_ms:
                span = nxt.offset_ms - prev.offset_ms
                if span == 0:
                    return nxt.value
                return _lerp(prev.value, nxt.value, (local - prev.offset_ms) / span)
        return frames[-1].value


ROTATION = RestartChannel(0.0, 360.0, 40_000)
TWINKLE = BounceChannel(0.4, 1.0, 2_000, LINEAR_OUT_SLOW_IN)
WAVE = BounceChannel(-5.0, 5.0, 2_000, FAST_OUT_SLOW_IN)
TITLE_FLOAT = BounceChannel(-5.0, 5.0, 3_000, LINEAR_OUT_SLOW_IN)
NEBULA_ALPHA = BounceChannel(0.1, 0.4, 5_000, LINEAR_OUT_SLOW_IN)
SHOOTING_STAR = KeyframeChannel.of(
    10_000,
    (0.0, 0),
    (0.0, 4_000),  # wait
    (1.0, 7_000),  # streak
    (1.0, 10_000),
)
JUMP_ALTITUDE = KeyframeChannel.of(
    20_000,
    (0.0, 0),
    (0.0, 2_000),  # idle on the host
    (0.01, 2_500),  # ignition
    (1.0, 10_000),  # peak
    (0.01, 15_500),  # descent
    (0.009, 18_000),  # landed hold
    (0.0, 18_001),  # hidden
    (0.0, 20_000),
)


class AnimationClock:
    """Samples every named channel at a given elapsed time."""

    def __init__(
        self,
        rotation: Channel = ROTATION,
        twinkle: Channel = TWINKLE,
        wave: Channel = WAVE,
        title_float: Channel = TITLE_FLOAT,
        nebula_alpha: Channel = NEBULA_ALPHA,
        shooting_star: Channel = SHOOTING_STAR,
        jump_altitude: Channel = JUMP_ALTITUDE,
    ):
        self.channels: dict[str, Channel] = {
            "rotation_degrees": rotation,
            "twinkle": twinkle,
            "wave": wave,
            "title_float": title_float,
            "nebula_alpha": nebula_alpha,
            "shooting_star_progress": shooting_star,
            "jump_altitude": jump_altitude,
        }

    def value(self, channel: str, t_ms: float) -> float:
        """Value of one channel at `t_ms`. Raises KeyError for unknown names."""
        return self.channels[channel].value(t_ms)

    def sample(self, elapsed_ms: float) -> ClockState:
        t = max(elapsed_ms, 0.0)
        return ClockState(
            elapsed_ms=t,
            **{name: ch.value(t) for name, ch in self.channels.items()},
        )
